"""
Services layer for the PDF renamer.

This module contains the stateful services:
- ConfigStore: Machines, products and papers persisted as JSON
- HotfolderService: Selected hotfolder directory and file writes into it

Both are created once in create_app() and shared by all request threads;
each guards its files with its own lock.
"""

from .config_store import ConfigStore
from .hotfolder_service import HotfolderService

__all__ = [
    "ConfigStore",
    "HotfolderService",
]
