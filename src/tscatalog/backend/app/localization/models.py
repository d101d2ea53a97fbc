"""Pydantic models describing translation catalogue entries."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ResourceError(ValueError):
    """Raised when a translation resource cannot be read or is malformed."""


class TranslationStatus(str, Enum):
    """Lifecycle of a translated message."""

    FINISHED = "finished"
    UNFINISHED = "unfinished"
    VANISHED = "vanished"
    MISSING = "missing"

    @classmethod
    def from_type_attribute(cls, value: str | None) -> TranslationStatus:
        """Map the ``type`` attribute of a ``<translation>`` element."""

        if value is None or value == "":
            return cls.FINISHED
        if value == "obsolete":
            return cls.VANISHED
        if value in (cls.UNFINISHED.value, cls.VANISHED.value):
            return cls(value)
        raise ResourceError(f"Unknown translation type '{value}'")


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class Location(ImmutableModel):
    """Source location annotation; informational only."""

    filename: str
    line: int | None = None

    @model_validator(mode="after")
    def _validate_line(self) -> Location:
        if self.line is not None and self.line < 0:
            raise ResourceError("Location lines must be non-negative")
        return self


class Entry(ImmutableModel):
    """A single message of a context table."""

    context: str
    source_text: str
    disambiguation: str | None = None
    translation: str = ""
    status: TranslationStatus = TranslationStatus.FINISHED
    locations: tuple[Location, ...] = Field(default_factory=tuple)
    numerus: bool = False
    plural_forms: tuple[str, ...] = Field(default_factory=tuple)
    length_variants: tuple[str, ...] = Field(default_factory=tuple)
    extra_comment: str | None = None
    translator_comment: str | None = None
    old_source: str | None = None

    @field_validator("disambiguation", mode="before")
    @classmethod
    def _empty_disambiguation_is_none(cls, value: Any) -> Any:
        if value == "":
            return None
        return value

    @model_validator(mode="after")
    def _validate_status(self) -> Entry:
        if self.status is TranslationStatus.MISSING:
            raise ResourceError("Stored entries cannot carry the 'missing' status")
        if not self.context:
            raise ResourceError("Entries require a context name")
        return self

    @property
    def key(self) -> tuple[str, str | None]:
        """Lookup key of the entry within its context."""

        return (self.source_text, self.disambiguation)

    @property
    def is_active(self) -> bool:
        return self.status is not TranslationStatus.VANISHED


class TranslationDocument(ImmutableModel):
    """Parsed representation of one ``.ts`` resource."""

    locale: str
    source_language: str | None = None
    version: str | None = None
    entries: tuple[Entry, ...] = Field(default_factory=tuple)


__all__ = [
    "Entry",
    "ImmutableModel",
    "Location",
    "ResourceError",
    "TranslationDocument",
    "TranslationStatus",
]
