"""Coverage and consistency reporting for translation catalogues."""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass
from typing import Any

from tscatalog.backend.app.localization import Catalog, ContextTable, TranslationStatus

# %L1 and %Ln are the locale-aware forms of the same markers
PLACEHOLDER_PATTERN = re.compile(r"%L?(\d+|n)")


@dataclass(frozen=True)
class ContextCoverage:
    """Completion figures for a single context."""

    name: str
    finished: int
    unfinished: int
    vanished: int

    @property
    def active(self) -> int:
        return self.finished + self.unfinished

    @property
    def percent(self) -> float:
        if not self.active:
            return 100.0
        return round(self.finished * 100 / self.active, 1)


@dataclass(frozen=True)
class CoverageReport:
    """Status counts for one locale; vanished entries stay out of the ratio."""

    locale: str
    contexts: tuple[ContextCoverage, ...]

    @property
    def finished(self) -> int:
        return sum(context.finished for context in self.contexts)

    @property
    def unfinished(self) -> int:
        return sum(context.unfinished for context in self.contexts)

    @property
    def vanished(self) -> int:
        return sum(context.vanished for context in self.contexts)

    @property
    def percent(self) -> float:
        active = self.finished + self.unfinished
        if not active:
            return 100.0
        return round(self.finished * 100 / active, 1)

    def as_dict(self) -> dict[str, Any]:
        return {
            "locale": self.locale,
            "finished": self.finished,
            "unfinished": self.unfinished,
            "vanished": self.vanished,
            "percent": self.percent,
            "contexts": {
                context.name: {
                    "finished": context.finished,
                    "unfinished": context.unfinished,
                    "vanished": context.vanished,
                    "percent": context.percent,
                }
                for context in self.contexts
            },
        }


def build_coverage(table: ContextTable) -> CoverageReport:
    """Count authoritative entries per status for every context of ``table``."""

    contexts: list[ContextCoverage] = []
    for name, entries in table.contexts.items():
        counts: Counter[TranslationStatus] = Counter()
        counted: set[tuple[str, str | None]] = set()
        for entry in entries:
            if not entry.is_active:
                counts[TranslationStatus.VANISHED] += 1
                continue
            if entry.key in counted:
                continue
            counted.add(entry.key)
            counts[table.status(name, *entry.key)] += 1

        contexts.append(
            ContextCoverage(
                name=name,
                finished=counts[TranslationStatus.FINISHED],
                unfinished=counts[TranslationStatus.UNFINISHED],
                vanished=counts[TranslationStatus.VANISHED],
            )
        )
    return CoverageReport(locale=table.locale, contexts=tuple(contexts))


def placeholders(text: str) -> frozenset[str]:
    return frozenset(PLACEHOLDER_PATTERN.findall(text))


def placeholder_issues(table: ContextTable) -> list[str]:
    """List finished entries whose markers differ from their source text."""

    issues: list[str] = []
    for entry in table.active_entries():
        if entry.status is not TranslationStatus.FINISHED or not entry.translation:
            continue
        expected = placeholders(entry.source_text)
        forms = entry.plural_forms or (entry.translation,)
        for form in forms:
            found = placeholders(form)
            # %n may be dropped in singular forms
            if found - {"n"} != expected - {"n"} or found - expected:
                issues.append(
                    f"{entry.context}: {entry.source_text!r} placeholders differ: "
                    f"expected {{{', '.join(sorted(expected))}}}, "
                    f"found {{{', '.join(sorted(found))}}}"
                )
                break
    return issues


def duplicate_keys(table: ContextTable) -> list[str]:
    """List active keys declared more than once within a context."""

    issues: list[str] = []
    for name, entries in table.contexts.items():
        counts = Counter(entry.key for entry in entries if entry.is_active)
        for (source, disambiguation), count in counts.items():
            if count < 2:
                continue
            label = f"{source!r}" if disambiguation is None else f"{source!r} ({disambiguation})"
            issues.append(f"{name}: {label} declared {count} times")
    return issues


def missing_keys(catalog: Catalog, base_locale: str) -> dict[str, list[str]]:
    """Return, per locale, the active keys of ``base_locale`` it does not define."""

    base = catalog.table(base_locale)
    if base is None:
        return {}

    expected = {(entry.context, *entry.key) for entry in base.active_entries()}
    results: dict[str, list[str]] = {}
    for locale in catalog.locales:
        if locale == base_locale:
            continue
        table = catalog.tables[locale]
        present = {(entry.context, *entry.key) for entry in table.active_entries()}
        gaps = sorted(expected - present, key=lambda key: (key[0], key[1], key[2] or ""))
        if gaps:
            results[locale] = [f"{context}: {source!r}" for context, source, _ in gaps]
    return results


__all__ = [
    "ContextCoverage",
    "CoverageReport",
    "PLACEHOLDER_PATTERN",
    "build_coverage",
    "duplicate_keys",
    "missing_keys",
    "placeholder_issues",
    "placeholders",
]
