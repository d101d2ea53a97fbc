"""Translation catalogue loading, lookup and reload helpers."""

from .catalog import Catalog, ContextTable, Translator, load, load_directory, load_table
from .models import Entry, Location, ResourceError, TranslationDocument, TranslationStatus
from .registry import CatalogRegistry

__all__ = [
    "Catalog",
    "CatalogRegistry",
    "ContextTable",
    "Entry",
    "Location",
    "ResourceError",
    "TranslationDocument",
    "TranslationStatus",
    "Translator",
    "load",
    "load_directory",
    "load_table",
]
