"""
Configuration data models.

Machines, products and papers are name/code pairs the operator maintains.
The product code generator looks entries up by code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional
from uuid import uuid4

from core.constants import CATEGORIES, CONFIG_VERSION, ID_PREFIX


def generate_entry_id(category: str) -> str:
    """Create a new entry id with the category prefix, e.g. 'machine_3f2a...'."""
    return f"{ID_PREFIX[category]}{uuid4().hex[:12]}"


@dataclass
class ConfigEntry:
    """A machine, product or paper."""

    name: str
    """Display name shown in the dropdowns."""

    code: str
    """Code emitted into the product code; unique within its category."""

    id: str = ""
    """Stable identifier used by update/delete."""

    type: Optional[str] = None
    """Paper class of a paper entry; None for machines and products."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted JSON shape."""
        data = {"id": self.id, "name": self.name, "code": self.code}
        if self.type is not None:
            data["type"] = self.type
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigEntry":
        """Create from the persisted JSON shape."""
        return cls(
            name=str(data.get("name", "")),
            code=str(data.get("code", "")),
            id=str(data.get("id", "") or ""),
            type=data.get("type"),
        )


@dataclass
class RenamerConfig:
    """
    The full user configuration.

    Persisted as { version, machines: [...], products: [...], papers: [...] }.
    """

    machines: List[ConfigEntry] = field(default_factory=list)
    products: List[ConfigEntry] = field(default_factory=list)
    papers: List[ConfigEntry] = field(default_factory=list)
    version: str = CONFIG_VERSION

    def entries(self, category: str) -> List[ConfigEntry]:
        """Entry list of a category ('machines', 'products', 'papers')."""
        if category not in CATEGORIES:
            raise KeyError(f"Unknown config category: {category}")
        return getattr(self, category)

    def find_by_code(self, category: str, code: Any) -> Optional[ConfigEntry]:
        """Entry whose code equals the given value exactly, or None."""
        for entry in self.entries(category):
            if entry.code == code:
                return entry
        return None

    def find_by_id(self, category: str, item_id: str) -> Optional[ConfigEntry]:
        """Entry with the given id, or None."""
        for entry in self.entries(category):
            if entry.id == item_id:
                return entry
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted JSON shape."""
        return {
            "version": self.version,
            "machines": [e.to_dict() for e in self.machines],
            "products": [e.to_dict() for e in self.products],
            "papers": [e.to_dict() for e in self.papers],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RenamerConfig":
        """Create from the persisted JSON shape; missing lists become empty."""
        return cls(
            machines=[ConfigEntry.from_dict(e) for e in data.get("machines") or []],
            products=[ConfigEntry.from_dict(e) for e in data.get("products") or []],
            papers=[ConfigEntry.from_dict(e) for e in data.get("papers") or []],
            version=str(data.get("version", CONFIG_VERSION)),
        )


def _entries(category: str, rows) -> List[ConfigEntry]:
    result = []
    for row in rows:
        name, code = row[0], row[1]
        paper_type = row[2] if len(row) > 2 else None
        result.append(ConfigEntry(name=name, code=code, id=generate_entry_id(category), type=paper_type))
    return result


def default_config() -> RenamerConfig:
    """The configuration a fresh installation starts with."""
    return RenamerConfig(
        machines=_entries("machines", [
            ("Speedmaster CX 75", "CX75"),
            ("Speedmaster XL 106", "XL106"),
            ("Speedmaster SM 52", "SM52"),
            ("Versafire EP", "VFEP"),
        ]),
        products=_entries("products", [
            ("Broschüre", "BRFPP"),
            ("Flyer", "FLY"),
            ("Visitenkarten", "VK"),
            ("Plakat", "PLK"),
            ("Briefpapier", "BRP"),
            ("Faltprospekt", "FLD"),
        ]),
        papers=_entries("papers", [
            ("Nautilus Satin 170", "NoSat170", "ungestrichen"),
            ("Munken Print 115", "MuPr115", "ungestrichen"),
            ("Rebello Recycling 100", "ReRe100", "ungestrichen"),
            ("Magno Gloss 135", "MaGl135", "gestrichen"),
            ("Magno Satin 150", "MaSa150", "gestrichen"),
        ]),
    )
