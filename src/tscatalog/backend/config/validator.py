"""Utilities for validating translation catalogues and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Sequence

from tscatalog.backend.app.localization import Catalog, ContextTable, ResourceError
from tscatalog.backend.app.services.coverage_service import (
    build_coverage,
    duplicate_keys,
    missing_keys,
    placeholder_issues,
)

from .settings import CatalogSettings, load_configured_catalog, load_settings


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def validate_table(
    table: ContextTable,
    *,
    fail_on_unfinished: bool = False,
    source_locale: str | None = None,
) -> list[str]:
    """Return blocking issues for one locale.

    When ``source_locale`` is given, a resource declaring a different
    ``sourcelanguage`` is reported, since its source texts would not match
    the strings the application looks up.
    """

    errors = [_format_scope("placeholders", issue) for issue in placeholder_issues(table)]

    if (
        source_locale is not None
        and table.source_language is not None
        and table.source_language != source_locale
    ):
        errors.append(
            _format_scope(
                "source",
                f"declares source language {table.source_language}, expected {source_locale}",
            )
        )

    if fail_on_unfinished:
        coverage = build_coverage(table)
        for context in coverage.contexts:
            if context.unfinished:
                errors.append(
                    _format_scope(
                        context.name,
                        f"{context.unfinished} unfinished translation(s)",
                    )
                )

    return errors


def _resolve_locale(catalog: Catalog, requested: str) -> str | None:
    """Map ``zh-CN`` style arguments to a loaded locale of the same language."""

    resolved = catalog.normalise_locale(requested)
    if resolved is None:
        return None
    # normalise_locale falls back to the default locale for unknown languages
    language = requested.strip().replace("-", "_").split("_")[0].lower()
    if resolved.split("_")[0].lower() != language:
        return None
    return resolved


def validate_catalog(
    catalog: Catalog,
    locales: Sequence[str] | None = None,
    *,
    fail_on_unfinished: bool = False,
    source_locale: str | None = None,
) -> dict[str, list[str]]:
    """Validate the selected locales and return issues keyed by locale."""

    results: dict[str, list[str]] = {}

    for requested in locales or catalog.locales:
        locale = _resolve_locale(catalog, requested)
        if locale is None:
            results[requested] = [_format_scope("catalog", "locale is not configured")]
            continue
        results[locale] = validate_table(
            catalog.tables[locale],
            fail_on_unfinished=fail_on_unfinished,
            source_locale=source_locale,
        )

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate translation catalogues and report issues helpful to translators."
    )
    parser.add_argument(
        "locales",
        nargs="*",
        help="Specific locales to validate (defaults to all configured locales)",
    )
    parser.add_argument(
        "--base-locale",
        help="Report keys of this locale that other locales do not define",
    )
    parser.add_argument(
        "--fail-on-unfinished",
        action="store_true",
        help="Exit with an error if unfinished translations are found",
    )
    return parser


def main(argv: Sequence[str] | None = None, settings: CatalogSettings | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    settings = settings or load_settings()

    try:
        catalog = load_configured_catalog(settings)
    except ResourceError as error:
        print(f"[catalog] failed to load translations: {error}")
        return 1

    exit_code = 0
    results = validate_catalog(
        catalog,
        args.locales or None,
        fail_on_unfinished=args.fail_on_unfinished,
        source_locale=settings.source_locale,
    )

    for locale, issues in results.items():
        table = catalog.table(locale)
        if table is not None:
            for duplicate in duplicate_keys(table):
                print(f"[{locale}] duplicate (last one wins): {duplicate}")
            coverage = build_coverage(table)
            summary = f"{coverage.percent}% finished, {coverage.unfinished} unfinished"
        else:
            summary = "not loaded"

        if issues:
            exit_code = 1
            print(f"[{locale}] {len(issues)} issue(s) detected ({summary}):")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{locale}] OK ({summary})")

    if args.base_locale:
        base_locale = _resolve_locale(catalog, args.base_locale) or args.base_locale
        for locale, gaps in missing_keys(catalog, base_locale).items():
            print(f"[{locale}] {len(gaps)} key(s) missing relative to {base_locale}:")
            for gap in gaps:
                print(f"  - {gap}")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
