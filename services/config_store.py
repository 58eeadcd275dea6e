"""
Persistent store for machines, products and papers.

The configuration lives in one JSON file:
    { "version": "1.0.0", "machines": [...], "products": [...], "papers": [...] }

Every mutation validates its input, writes the file and returns the new
config. A missing file is replaced by the defaults; a corrupt file is kept
as a backup and replaced by the defaults.

Thread Safety:
    Flask handles requests on several threads. All reads and writes of the
    in-memory config and the file go through one lock.

Usage:
    store = ConfigStore(Path("instance/renamer_config.json"))
    config = store.load_config()

    store.add_item("machines", {"name": "Speedmaster CD 102", "code": "CD102"})
    json_text = store.export_config()
"""

from __future__ import annotations

import copy
import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any, List, Optional

from core.constants import (
    CATEGORIES,
    CONFIG_VERSION,
    ENTRY_RULES,
    MAX_ENTRIES,
    MIGRATION_NEEDED_VERSIONS,
)
from core.exceptions import (
    ConfigImportError,
    ConfigLimitError,
    ConfigStoreError,
    DuplicateEntryError,
    EntryNotFoundError,
    ValidationError,
)
from models.config_entry import ConfigEntry, RenamerConfig, default_config, generate_entry_id
from modules.validation import Validator
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

BACKUP_PREFIX = "backup-"

# Machine and product codes are stored in upper case
UPPERCASE_CODE_RULES = ("machineCode", "productCode")


class ConfigStore:
    """
    JSON-file backed configuration store.

    Attributes:
        path: Location of the config file
        is_loaded: Whether the config has been read from disk
    """

    def __init__(self, path: str | Path, validator: Optional[Validator] = None):
        """
        Args:
            path: Config file location; parent directories are created on save
            validator: Validator used for entries (default: German messages)
        """
        self._path = Path(path)
        self._validator = validator or Validator()
        self._lock = threading.RLock()
        self._config: Optional[RenamerConfig] = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_loaded(self) -> bool:
        return self._config is not None

    # =========================================================================
    # LOAD / SAVE
    # =========================================================================

    def load_config(self) -> RenamerConfig:
        """
        Read the config file.

        Returns:
            The loaded (or default) configuration
        """
        with self._lock:
            if not self._path.exists():
                logger.info(f"No config at {self._path}, writing defaults")
                self._commit(default_config())
                return self._snapshot()

            try:
                data = json.loads(self._path.read_text(encoding="utf-8"))
                if not isinstance(data, dict):
                    raise ValueError("config root is not an object")
            except (OSError, ValueError) as e:
                logger.error(f"Config file {self._path} unreadable ({e}), restoring defaults")
                self._backup_current()
                self._commit(default_config())
                return self._snapshot()

            config = RenamerConfig.from_dict(data)
            if self._migrate(config):
                self._commit(config)
            else:
                self._config = config
            logger.info(
                f"Config loaded: {len(config.machines)} machines, "
                f"{len(config.products)} products, {len(config.papers)} papers"
            )
            return self._snapshot()

    def get_config(self) -> RenamerConfig:
        """Current configuration (loads from disk on first use)."""
        with self._lock:
            if self._config is None:
                return self.load_config()
            return self._snapshot()

    def save_config(self, config: RenamerConfig) -> RenamerConfig:
        """Replace the whole configuration without validation."""
        with self._lock:
            self._commit(copy.deepcopy(config))
            return self._snapshot()

    def reset_to_defaults(self) -> RenamerConfig:
        with self._lock:
            self._backup_current()
            logger.info("Config reset to defaults")
            return self.save_config(default_config())

    def _snapshot(self) -> RenamerConfig:
        # Callers get a copy so they cannot mutate the store behind the lock
        return copy.deepcopy(self._config)

    def _commit(self, config: RenamerConfig) -> None:
        # Memory only follows a successful write
        self._write(config)
        self._config = config

    def _write(self, config: RenamerConfig) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp_path.write_text(json.dumps(config.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as e:
            logger.error(f"Failed to write config {self._path}: {e}")
            raise ConfigStoreError(f"Konfiguration konnte nicht gespeichert werden: {e}", {"path": str(self._path)})

    def _backup_current(self) -> Optional[Path]:
        if not self._path.exists():
            return None
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S%f")
        backup_path = self._path.with_name(f"{BACKUP_PREFIX}{timestamp}-{self._path.name}")
        try:
            backup_path.write_bytes(self._path.read_bytes())
        except OSError as e:
            logger.warning(f"Config backup failed: {e}")
            return None
        logger.info(f"Config backed up to {backup_path.name}")
        return backup_path

    def _migrate(self, config: RenamerConfig) -> bool:
        """Bring configs from older versions up to date; True if changed."""
        changed = False
        for category in CATEGORIES:
            for entry in config.entries(category):
                if not entry.id:
                    entry.id = generate_entry_id(category)
                    changed = True

        if config.version in MIGRATION_NEEDED_VERSIONS:
            logger.info(f"Migrating config from version {config.version} to {CONFIG_VERSION}")
            config.version = CONFIG_VERSION
            changed = True

        return changed

    # =========================================================================
    # ENTRIES
    # =========================================================================

    def add_item(self, category: str, data: Dict[str, Any]) -> RenamerConfig:
        """
        Add a machine, product or paper.

        Raises:
            ValidationError: If name, code or paper type is invalid
            DuplicateEntryError: If the code already exists in the category
            ConfigLimitError: If the category is full
        """
        self._check_category(category)
        entry = self._validated_entry(category, data)

        with self._lock:
            config = copy.deepcopy(self._current())
            entries = config.entries(category)

            if len(entries) >= MAX_ENTRIES[category]:
                raise ConfigLimitError(category, MAX_ENTRIES[category])
            if config.find_by_code(category, entry.code) is not None:
                raise DuplicateEntryError(category, entry.code)

            entry.id = generate_entry_id(category)
            entries.append(entry)
            self._commit(config)
            logger.info(f"Added {category} entry {entry.name} ({entry.code})")
            return self._snapshot()

    def update_item(self, category: str, item_id: str, updates: Dict[str, Any]) -> RenamerConfig:
        """
        Change name, code and (papers) type of an entry.

        Raises:
            EntryNotFoundError: If no entry has item_id
            ValidationError: If the updated values are invalid
            DuplicateEntryError: If the new code belongs to another entry
        """
        self._check_category(category)

        with self._lock:
            config = copy.deepcopy(self._current())
            existing = config.find_by_id(category, item_id)
            if existing is None:
                raise EntryNotFoundError(category, item_id)

            merged = {**existing.to_dict(), **{k: v for k, v in updates.items() if v is not None}}
            entry = self._validated_entry(category, merged)

            other = config.find_by_code(category, entry.code)
            if other is not None and other.id != item_id:
                raise DuplicateEntryError(category, entry.code)

            existing.name = entry.name
            existing.code = entry.code
            existing.type = entry.type
            self._commit(config)
            logger.info(f"Updated {category} entry {item_id}")
            return self._snapshot()

    def delete_item(self, category: str, item_id: str) -> RenamerConfig:
        """
        Remove an entry.

        Raises:
            EntryNotFoundError: If no entry has item_id
        """
        self._check_category(category)

        with self._lock:
            config = copy.deepcopy(self._current())
            entries = config.entries(category)
            remaining = [e for e in entries if e.id != item_id]
            if len(remaining) == len(entries):
                raise EntryNotFoundError(category, item_id)

            entries[:] = remaining
            self._commit(config)
            logger.info(f"Deleted {category} entry {item_id}")
            return self._snapshot()

    # =========================================================================
    # IMPORT / EXPORT
    # =========================================================================

    def export_config(self) -> str:
        """Pretty-printed JSON of the configuration plus an export timestamp."""
        data = self.get_config().to_dict()
        data["exportedAt"] = datetime.now(timezone.utc).isoformat()
        return json.dumps(data, ensure_ascii=False, indent=2)

    def import_config(self, text: str) -> RenamerConfig:
        """
        Replace the configuration with imported JSON.

        Every entry is validated and codes must be unique per category.
        The previous file is backed up first.

        Raises:
            ConfigImportError: If the JSON or any entry is invalid; the store
                is unchanged in that case
        """
        try:
            data = json.loads(text)
        except (TypeError, ValueError) as e:
            raise ConfigImportError(f"Ungültiges JSON ({e})")

        if not isinstance(data, dict):
            raise ConfigImportError("JSON-Objekt erwartet")

        missing = [c for c in CATEGORIES if not isinstance(data.get(c), list)]
        if missing:
            raise ConfigImportError(f"Fehlende Listen: {', '.join(missing)}", {"missing": missing})

        imported = RenamerConfig(version=CONFIG_VERSION)
        for category in CATEGORIES:
            rows = data[category]
            if len(rows) > MAX_ENTRIES[category]:
                raise ConfigImportError(f"Zu viele Einträge in {category}", {"limit": MAX_ENTRIES[category]})
            imported_entries = self._import_entries(category, rows)
            setattr(imported, category, imported_entries)

        with self._lock:
            self._backup_current()
            self._commit(imported)
            logger.info(
                f"Config imported: {len(imported.machines)} machines, "
                f"{len(imported.products)} products, {len(imported.papers)} papers"
            )
            return self._snapshot()

    def _import_entries(self, category: str, rows: List[Any]) -> List[ConfigEntry]:
        entries: List[ConfigEntry] = []
        seen_codes = set()
        for index, row in enumerate(rows):
            if not isinstance(row, dict):
                raise ConfigImportError(f"{category}[{index}] ist kein Objekt")
            try:
                entry = self._validated_entry(category, row)
            except ValidationError as e:
                raise ConfigImportError(f"{category}[{index}]: {e.message}", {"code": e.code})

            if entry.code in seen_codes:
                raise ConfigImportError(f'{category}: Code "{entry.code}" doppelt', {"code": "DUPLICATE"})
            seen_codes.add(entry.code)

            entry.id = str(row.get("id") or "") or generate_entry_id(category)
            entries.append(entry)
        return entries

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _current(self) -> RenamerConfig:
        if self._config is None:
            self.load_config()
        return self._config

    @staticmethod
    def _check_category(category: str) -> None:
        if category not in CATEGORIES:
            raise ConfigStoreError(f"Unbekannte Kategorie: {category}", {"category": category})

    def _validated_entry(self, category: str, data: Dict[str, Any]) -> ConfigEntry:
        """Validate name/code (and paper type) and return a normalized entry."""
        name_rule, code_rule = ENTRY_RULES[category]

        name_result = self._validator.validate_field(name_rule, data.get("name"))
        if not name_result.valid:
            raise ValidationError(name_rule, name_result.code, name_result.error)

        raw_code = data.get("code")
        if code_rule in UPPERCASE_CODE_RULES and isinstance(raw_code, str):
            raw_code = raw_code.strip().upper()
        code_result = self._validator.validate_field(code_rule, raw_code)
        if not code_result.valid:
            raise ValidationError(code_rule, code_result.code, code_result.error)

        paper_type = None
        if category == "papers":
            type_rule = "papierart"
            raw_type = data.get("type")
            if raw_type not in (None, "") and str(raw_type).strip() not in self._validator.rules["papierart"]["enum"]:
                type_rule = "papierart_custom"
            type_result = self._validator.validate_field(type_rule, raw_type)
            if not type_result.valid:
                raise ValidationError("paperType", type_result.code, type_result.error)
            paper_type = type_result.normalized_value

        return ConfigEntry(
            name=name_result.normalized_value,
            code=code_result.normalized_value,
            type=paper_type,
        )
