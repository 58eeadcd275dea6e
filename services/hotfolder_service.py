"""
Hotfolder access.

The hotfolder is a local (or mounted network) directory watched by the
prepress system. Renamed PDFs are copied into it; Prinect picks them up from
there. The chosen directory is remembered in a small JSON settings file so it
survives restarts.

Usage:
    hotfolder = HotfolderService(Path("instance/hotfolder.json"))
    hotfolder.select_hotfolder("/mnt/prinect/in")

    saved_name = hotfolder.save_to_hotfolder(upload_path, "A1-1#...#flyer.pdf")
    info = hotfolder.get_hotfolder_info()
"""

from __future__ import annotations

import errno
import json
import mimetypes
import os
import shutil
import threading
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, List, Optional

from core.constants import MAX_FILES_DISPLAY
from core.exceptions import (
    HotfolderError,
    HotfolderNotConfiguredError,
    HotfolderPermissionError,
)
from modules.file_handler import FileHandler
from modules.formatting import format_file_size
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


class HotfolderService:
    """
    Select, remember and write to the hotfolder.

    Attributes:
        settings_path: JSON file holding the selected directory
        hotfolder: Currently selected directory, or None
    """

    def __init__(self, settings_path: str | Path, default_hotfolder: Optional[str] = None):
        """
        Args:
            settings_path: Where the selected directory is persisted
            default_hotfolder: Directory used when nothing has been saved yet
        """
        self.settings_path = Path(settings_path)
        self._default_hotfolder = default_hotfolder or None
        self._lock = threading.Lock()
        self.hotfolder: Optional[Path] = None

    # =========================================================================
    # SELECTION
    # =========================================================================

    def select_hotfolder(self, path: str | Path) -> Path:
        """
        Choose and persist the hotfolder.

        Raises:
            HotfolderError: If the path does not exist or is not a directory
            HotfolderPermissionError: If the directory is not writable
        """
        directory = Path(path).expanduser()
        if not directory.exists():
            raise HotfolderError("Verzeichnis existiert nicht", {"path": str(directory)})
        if not directory.is_dir():
            raise HotfolderError("Pfad ist kein Verzeichnis", {"path": str(directory)})
        if not self.verify_permission(directory):
            raise HotfolderPermissionError(str(directory))

        directory = directory.resolve()
        self._write_settings({"hotfolder": str(directory), "selectedAt": datetime.now().isoformat()})
        self.hotfolder = directory
        logger.info(f"Hotfolder selected: {directory}")
        return directory

    def load_saved_hotfolder(self) -> Optional[Path]:
        """
        Restore the saved hotfolder.

        A saved directory that is gone or no longer writable is forgotten.

        Returns:
            The usable directory, or None
        """
        saved = self._read_settings().get("hotfolder") or self._default_hotfolder
        if not saved:
            self.hotfolder = None
            return None

        directory = Path(saved)
        if directory.is_dir() and self.verify_permission(directory):
            self.hotfolder = directory
            logger.info(f"Hotfolder restored: {directory}")
            return directory

        logger.warning(f"Saved hotfolder no longer usable: {directory}")
        self.clear_saved_hotfolder()
        return None

    def clear_saved_hotfolder(self) -> None:
        with self._lock:
            try:
                self.settings_path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                logger.error(f"Could not remove hotfolder settings {self.settings_path}: {e}")
                raise HotfolderError(f"Einstellung konnte nicht entfernt werden: {e}")
        self.hotfolder = None
        logger.info("Hotfolder selection cleared")

    @staticmethod
    def verify_permission(path: str | Path, with_write: bool = True) -> bool:
        """True if the directory can be read (and written, if requested)."""
        mode = os.R_OK | os.X_OK
        if with_write:
            mode |= os.W_OK
        return os.access(path, mode)

    def get_hotfolder(self) -> Path:
        """
        The selected directory.

        Raises:
            HotfolderNotConfiguredError: If no hotfolder is selected
        """
        if self.hotfolder is None and self.load_saved_hotfolder() is None:
            raise HotfolderNotConfiguredError()
        return self.hotfolder

    # =========================================================================
    # FILES
    # =========================================================================

    def save_to_hotfolder(self, source_path: str | Path, filename: str, hotfolder: Optional[Path] = None) -> str:
        """
        Copy a file into the hotfolder under a new name.

        An existing file with the same name is overwritten.

        Args:
            source_path: The uploaded PDF
            filename: Target name (product code + original name)
            hotfolder: Directory to use instead of the selected one

        Returns:
            The sanitized filename that was written

        Raises:
            HotfolderNotConfiguredError: If no hotfolder is selected
            HotfolderPermissionError: If the folder is not writable
            HotfolderError: On a full disk or any other I/O failure
        """
        directory = Path(hotfolder) if hotfolder is not None else self.get_hotfolder()
        target_name = FileHandler.sanitize_filename(filename)
        if not target_name:
            raise HotfolderError("Ungültiger Dateiname", {"filename": filename})
        target = directory / target_name

        try:
            shutil.copyfile(source_path, target)
        except PermissionError:
            logger.error(f"Permission denied writing {target}")
            raise HotfolderPermissionError(str(directory))
        except OSError as e:
            if e.errno == errno.ENOSPC:
                logger.error(f"Hotfolder full: {directory}")
                raise HotfolderError("Nicht genügend Speicherplatz im Hotfolder", {"path": str(directory)})
            logger.error(f"Saving to hotfolder failed: {e}")
            raise HotfolderError(f"Fehler beim Speichern: {e}", {"path": str(target)})

        logger.info(f"Saved {target_name} to hotfolder {directory}")
        return target_name

    def list_contents(self, hotfolder: Optional[Path] = None) -> List[Dict[str, Any]]:
        """Files in the hotfolder, sorted by name."""
        directory = Path(hotfolder) if hotfolder is not None else self.get_hotfolder()

        files = []
        try:
            entries = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.error(f"Listing hotfolder failed: {e}")
            raise HotfolderError(f"Hotfolder konnte nicht gelesen werden: {e}", {"path": str(directory)})

        for entry in entries:
            if not entry.is_file():
                continue
            stat = entry.stat()
            files.append({
                "name": entry.name,
                "size": stat.st_size,
                "lastModified": datetime.fromtimestamp(stat.st_mtime).isoformat(),
                "type": mimetypes.guess_type(entry.name)[0] or "",
            })
        return files

    def delete_from_hotfolder(self, filename: str, hotfolder: Optional[Path] = None) -> None:
        """
        Remove a file from the hotfolder.

        Raises:
            HotfolderError: If the name is not a plain filename or the file
                does not exist
        """
        directory = Path(hotfolder) if hotfolder is not None else self.get_hotfolder()
        if not filename or Path(filename).name != filename or filename in (".", ".."):
            raise HotfolderError("Ungültiger Dateiname", {"filename": filename})

        target = directory / filename
        try:
            target.unlink()
        except FileNotFoundError:
            raise HotfolderError(f'Datei "{filename}" nicht gefunden', {"path": str(target)})
        except PermissionError:
            raise HotfolderPermissionError(str(directory))
        except OSError as e:
            raise HotfolderError(f"Fehler beim Löschen: {e}", {"path": str(target)})

        logger.info(f"Deleted {filename} from hotfolder")

    def get_hotfolder_info(self) -> Dict[str, Any]:
        """
        Summary for the settings page and the API.

        Never raises; failures are reported under 'error'.
        """
        if self.hotfolder is None:
            self.load_saved_hotfolder()
        if self.hotfolder is None:
            return {"configured": False}

        info: Dict[str, Any] = {
            "configured": True,
            "name": self.hotfolder.name or str(self.hotfolder),
            "path": str(self.hotfolder),
        }
        try:
            files = self.list_contents(self.hotfolder)
        except HotfolderError as e:
            info["error"] = e.message
            return info

        total_size = sum(f["size"] for f in files)
        info.update({
            "fileCount": len(files),
            "totalSize": total_size,
            "totalSizeFormatted": format_file_size(total_size),
            "files": files[:MAX_FILES_DISPLAY],
        })
        return info

    # =========================================================================
    # SETTINGS FILE
    # =========================================================================

    def _read_settings(self) -> Dict[str, Any]:
        with self._lock:
            if not self.settings_path.exists():
                return {}
            try:
                data = json.loads(self.settings_path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning(f"Hotfolder settings unreadable ({e}), ignoring")
                return {}
        return data if isinstance(data, dict) else {}

    def _write_settings(self, data: Dict[str, Any]) -> None:
        with self._lock:
            try:
                self.settings_path.parent.mkdir(parents=True, exist_ok=True)
                self.settings_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
            except OSError as e:
                logger.error(f"Could not save hotfolder settings: {e}")
                raise HotfolderError(f"Einstellung konnte nicht gespeichert werden: {e}")
