"""
File operations for renamed PDFs.

Builds the target filename (product code + original name), sanitizes names
for the target filesystem and collects metadata for display.
"""

from __future__ import annotations

import hashlib
import re
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Iterable, Optional

from core.constants import MAX_FILENAME_LENGTH
from models.validation_result import UploadedFile
from modules.formatting import format_file_size
from modules.validation import Validator
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_REPEATED_UNDERSCORES = re.compile(r"_+")
_EDGE_DOTS_AND_SPACES = re.compile(r"^[\s.]+|[\s.]+$")

HASH_CHUNK_SIZE = 64 * 1024


class FileHandler:
    """Filename and metadata helpers; stateless apart from the validator."""

    def __init__(self, validator: Optional[Validator] = None):
        self.validator = validator or Validator()

    @staticmethod
    def sanitize_filename(filename: str) -> str:
        """
        Make a name safe for Windows, macOS and Linux.

        Unsafe characters become '_', runs of '_' collapse, leading/trailing
        dots and whitespace are dropped, and the result is cut at 255 chars.
        """
        name = _UNSAFE_CHARS.sub("_", filename)
        name = _REPEATED_UNDERSCORES.sub("_", name)
        name = _EDGE_DOTS_AND_SPACES.sub("", name)
        return name[:MAX_FILENAME_LENGTH]

    def build_renamed_filename(self, product_code: str, original_name: str) -> str:
        """'A1-1#...#' + 'flyer.pdf' -> 'A1-1#...#flyer.pdf'."""
        return self.sanitize_filename(f"{product_code}{original_name}")

    @staticmethod
    def get_file_extension(filename: str) -> str:
        """Extension including the dot, '' if there is none."""
        index = filename.rfind(".")
        return filename[index:] if index != -1 else ""

    @staticmethod
    def get_filename_without_extension(filename: str) -> str:
        index = filename.rfind(".")
        return filename[:index] if index != -1 else filename

    @staticmethod
    def format_file_size(size_bytes: int) -> str:
        return format_file_size(size_bytes)

    def get_file_info(self, uploaded: UploadedFile) -> Dict[str, Any]:
        """Display metadata of an uploaded file."""
        info: Dict[str, Any] = {
            "name": uploaded.name,
            "nameWithoutExtension": self.get_filename_without_extension(uploaded.name),
            "extension": self.get_file_extension(uploaded.name),
            "size": uploaded.size,
            "sizeFormatted": format_file_size(uploaded.size),
            "type": uploaded.content_type,
            "isValid": self.validator.validate_file(uploaded).valid,
        }
        if uploaded.last_modified:
            info["lastModified"] = uploaded.last_modified.isoformat()
            info["lastModifiedFormatted"] = uploaded.last_modified.strftime("%d.%m.%Y")
        return info

    @staticmethod
    def get_path_info(path: Path, content_type: str = "application/pdf") -> UploadedFile:
        """UploadedFile metadata for a file on disk."""
        stat = path.stat()
        return UploadedFile(
            name=path.name,
            size=stat.st_size,
            content_type=content_type,
            last_modified=datetime.fromtimestamp(stat.st_mtime),
        )

    @staticmethod
    def generate_file_hash(path: str | Path) -> Optional[str]:
        """SHA-256 hex digest of a file, None if it cannot be read."""
        digest = hashlib.sha256()
        try:
            with open(path, "rb") as f:
                for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
                    digest.update(chunk)
        except OSError as e:
            logger.error(f"Hash generation failed for {path}: {e}")
            return None
        return digest.hexdigest()

    def process_multiple_files(self, files: Iterable[UploadedFile]) -> Dict[str, Any]:
        """
        Validate a batch of files.

        Returns:
            {'valid': [{index, info}], 'invalid': [{index, name, error, code}],
             'totalSize': bytes of the valid files}
        """
        results: Dict[str, Any] = {"valid": [], "invalid": [], "totalSize": 0}

        for index, uploaded in enumerate(files):
            validation = self.validator.validate_file(uploaded)
            if validation.valid:
                results["valid"].append({"index": index, "info": validation.file_info})
                results["totalSize"] += uploaded.size
            else:
                results["invalid"].append({
                    "index": index,
                    "name": uploaded.name if uploaded else "",
                    "error": validation.error,
                    "code": validation.code,
                })

        return results
