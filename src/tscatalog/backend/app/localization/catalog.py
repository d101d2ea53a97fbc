"""Translation catalogue helpers backed by Qt Linguist resources."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from .models import Entry, ResourceError, TranslationStatus
from .reader import Resource, read_resource

_LOGGER = logging.getLogger(__name__)

Key = tuple[str, "str | None"]


def _locale_from_filename(path: Path) -> str | None:
    """Return the locale suffix of names such as ``dsnote-zh_CN.ts``."""

    stem = path.stem
    if "-" not in stem:
        return None
    return stem.rsplit("-", 1)[1] or None


@dataclass(frozen=True)
class ContextTable:
    """Entries of one locale grouped by context."""

    locale: str
    source_language: str | None
    contexts: Mapping[str, tuple[Entry, ...]]
    _index: Mapping[str, Mapping[Key, Entry]] = field(repr=False)
    _vanished: Mapping[str, frozenset[Key]] = field(repr=False)

    @classmethod
    def from_entries(
        cls,
        locale: str,
        entries: Iterable[Entry],
        *,
        source_language: str | None = None,
    ) -> ContextTable:
        grouped: dict[str, list[Entry]] = {}
        index: dict[str, dict[Key, Entry]] = {}
        vanished: dict[str, set[Key]] = {}

        for entry in entries:
            grouped.setdefault(entry.context, []).append(entry)
            if not entry.is_active:
                vanished.setdefault(entry.context, set()).add(entry.key)
                continue

            active = index.setdefault(entry.context, {})
            previous = active.get(entry.key)
            if previous is not None:
                _LOGGER.warning(
                    "Duplicate message %r (disambiguation %r) in context %s for locale %s; "
                    "keeping the last occurrence",
                    entry.source_text,
                    entry.disambiguation,
                    entry.context,
                    locale,
                )
            active[entry.key] = entry

        return cls(
            locale=locale,
            source_language=source_language,
            contexts=MappingProxyType(
                {name: tuple(items) for name, items in grouped.items()}
            ),
            _index=MappingProxyType(
                {name: MappingProxyType(items) for name, items in index.items()}
            ),
            _vanished=MappingProxyType(
                {name: frozenset(keys) for name, keys in vanished.items()}
            ),
        )

    def entry(
        self, context: str, source_text: str, disambiguation: str | None = None
    ) -> Entry | None:
        """Return the authoritative active entry for the key, if any."""

        active = self._index.get(context)
        if active is None:
            return None
        return active.get((source_text, disambiguation or None))

    def lookup(
        self, context: str, source_text: str, disambiguation: str | None = None
    ) -> str:
        entry = self.entry(context, source_text, disambiguation)
        if (
            entry is not None
            and entry.status is TranslationStatus.FINISHED
            and entry.translation
        ):
            return entry.translation
        _LOGGER.debug(
            "No finished %s translation for %r in context %s", self.locale, source_text, context
        )
        return source_text

    def status(
        self, context: str, source_text: str, disambiguation: str | None = None
    ) -> TranslationStatus:
        entry = self.entry(context, source_text, disambiguation)
        if entry is not None:
            return entry.status
        if (source_text, disambiguation or None) in self._vanished.get(context, frozenset()):
            return TranslationStatus.VANISHED
        return TranslationStatus.MISSING

    def active_entries(self) -> Iterator[Entry]:
        """Yield the authoritative active entry of every key."""

        for active in self._index.values():
            yield from active.values()

    def __iter__(self) -> Iterator[Entry]:
        for entries in self.contexts.values():
            yield from entries

    def __len__(self) -> int:
        return sum(len(entries) for entries in self.contexts.values())


@dataclass(frozen=True)
class Translator:
    """Callable helper for retrieving localized strings of one locale."""

    locale: str
    _table: ContextTable | None

    def __call__(
        self, context: str, source_text: str, disambiguation: str | None = None
    ) -> str:
        if self._table is None:
            return source_text
        return self._table.lookup(context, source_text, disambiguation)


@dataclass(frozen=True)
class Catalog:
    """Immutable mapping of locale identifiers to context tables."""

    tables: Mapping[str, ContextTable]
    default_locale: str | None = None

    @classmethod
    def from_tables(
        cls, tables: Iterable[ContextTable], default_locale: str | None = None
    ) -> Catalog:
        mapping: dict[str, ContextTable] = {}
        for table in tables:
            if table.locale in mapping:
                raise ResourceError(f"Locale '{table.locale}' is provided more than once")
            mapping[table.locale] = table
        if default_locale is not None and default_locale not in mapping:
            _LOGGER.warning(
                "Default locale %s has no catalogue; lookups will fall back to source text",
                default_locale,
            )
        return cls(tables=MappingProxyType(mapping), default_locale=default_locale)

    @property
    def locales(self) -> tuple[str, ...]:
        return tuple(sorted(self.tables))

    def table(self, locale: str | None = None) -> ContextTable | None:
        resolved = locale or self.default_locale
        if resolved is None:
            return None
        return self.tables.get(resolved)

    def normalise_locale(self, locale: str | None) -> str | None:
        """Normalise a requested locale to an available catalogue key."""

        if not locale:
            return self.default_locale

        candidate = locale.strip().replace("-", "_")
        if candidate in self.tables:
            return candidate

        by_lower = {key.lower(): key for key in self.tables}
        if candidate.lower() in by_lower:
            return by_lower[candidate.lower()]

        language = candidate.split("_")[0].lower()
        if language in by_lower:
            return by_lower[language]
        for key in self.locales:
            if key.split("_")[0].lower() == language:
                return key
        return self.default_locale

    def lookup(
        self,
        context: str,
        source_text: str,
        disambiguation: str | None = None,
        *,
        locale: str | None = None,
    ) -> str:
        """Return the finished translation or ``source_text`` unchanged."""

        table = self.table(locale)
        if table is None:
            return source_text
        return table.lookup(context, source_text, disambiguation)

    def status(
        self,
        context: str,
        source_text: str,
        disambiguation: str | None = None,
        *,
        locale: str | None = None,
    ) -> TranslationStatus:
        table = self.table(locale)
        if table is None:
            return TranslationStatus.MISSING
        return table.status(context, source_text, disambiguation)

    def translator(self, locale: str | None = None) -> Translator:
        """Return a translator bound to the normalised locale."""

        normalised = self.normalise_locale(locale)
        table = self.table(normalised)
        return Translator(
            locale=table.locale if table is not None else (normalised or ""), _table=table
        )

    def contexts(self, locale: str | None = None) -> tuple[str, ...]:
        table = self.table(locale)
        return tuple(table.contexts) if table is not None else ()

    def entries(self, locale: str | None = None) -> tuple[Entry, ...]:
        table = self.table(locale)
        return tuple(table) if table is not None else ()


def load_table(
    resource: Resource,
    locale: str | None = None,
    *,
    fallback_locale: str | None = None,
) -> ContextTable:
    """Read one resource into a context table."""

    document = read_resource(resource, locale, fallback_locale=fallback_locale)
    return ContextTable.from_entries(
        document.locale,
        document.entries,
        source_language=document.source_language,
    )


def load(locale: str, resource: Resource) -> Catalog:
    """Load a single-locale catalogue; ``locale`` becomes its default."""

    table = load_table(resource, locale)
    _LOGGER.info("Loaded %d entries for locale %s", len(table), table.locale)
    return Catalog.from_tables([table], default_locale=table.locale)


def load_directory(
    directory: str | Path,
    default_locale: str | None = None,
    pattern: str = "*.ts",
) -> Catalog:
    """Load every resource matching ``pattern`` in ``directory``."""

    root = Path(directory)
    if not root.is_dir():
        raise ResourceError(f"Translation directory not found: {root}")

    tables: list[ContextTable] = []
    for path in sorted(root.glob(pattern)):
        tables.append(load_table(path, fallback_locale=_locale_from_filename(path)))

    if not tables:
        raise ResourceError(f"No translation resources matching {pattern} in {root}")

    catalog = Catalog.from_tables(tables, default_locale=default_locale)
    _LOGGER.info("Loaded catalogue with locales %s from %s", ", ".join(catalog.locales), root)
    return catalog


__all__ = [
    "Catalog",
    "ContextTable",
    "Translator",
    "load",
    "load_directory",
    "load_table",
]
