"""Tests for the localisation catalogue helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from tscatalog.backend.app.localization import (
    Catalog,
    ResourceError,
    TranslationStatus,
    load,
    load_directory,
)

TRANSLATIONS_ROOT = Path(__file__).resolve().parents[2] / "src" / "tscatalog" / "translations"
FIXTURE = Path(__file__).resolve().parents[1] / "fixtures" / "sample-de.ts"

LRM = "\u200e"


@pytest.fixture(scope="module")
def catalog() -> Catalog:
    return load_directory(TRANSLATIONS_ROOT)


@pytest.fixture(scope="module")
def sample() -> Catalog:
    return load("de", FIXTURE)


def test_load_directory_discovers_every_locale(catalog: Catalog) -> None:
    assert catalog.locales == ("fr", "nl", "zh_CN")
    assert catalog.default_locale is None


def test_lookup_returns_finished_translations(catalog: Catalog) -> None:
    # The French catalogue stores a left-to-right mark in front of the text.
    assert catalog.lookup("NotesPage", "Clear", locale="fr") == f"{LRM}Effacer"
    assert catalog.lookup("NotesPage", "Clear", locale="nl") == "Wissen"
    assert catalog.lookup("NotesPage", "Clear", locale="zh_CN") == "清除"


def test_unfinished_entries_fall_back_to_source(catalog: Catalog) -> None:
    source = "Translate to English"

    assert catalog.status("SettingsPage", source, locale="fr") is TranslationStatus.UNFINISHED
    assert catalog.lookup("SettingsPage", source, locale="fr") == source


def test_unfinished_draft_text_is_never_returned(sample: Catalog) -> None:
    assert sample.status("NotesPage", "Paste") is TranslationStatus.UNFINISHED
    assert sample.lookup("NotesPage", "Paste") == "Paste"


def test_missing_keys_fall_back_to_source(sample: Catalog) -> None:
    assert sample.lookup("NotesPage", "Nonexistent") == "Nonexistent"
    assert sample.lookup("UnknownPage", "Clear") == "Clear"
    assert sample.status("UnknownPage", "Clear") is TranslationStatus.MISSING


def test_lookup_is_exact_and_case_sensitive(sample: Catalog) -> None:
    assert sample.lookup("NotesPage", "clear") == "clear"
    assert sample.lookup("NotesPage", "Clear ") == "Clear "
    assert sample.lookup("notespage", "Clear") == "Clear"
    assert sample.status("NotesPage", "clear") is TranslationStatus.MISSING


def test_translating_source_text_is_idempotent(sample: Catalog) -> None:
    once = sample.lookup("NotesPage", "Paste")
    assert sample.lookup("NotesPage", once) == once


def test_vanished_entries_are_excluded_from_lookup(sample: Catalog) -> None:
    source = "Cancel file transcription"

    assert sample.lookup("NotesPage", source) == source
    assert sample.status("NotesPage", source) is TranslationStatus.VANISHED
    assert sample.status("NotesPage", "Stop") is TranslationStatus.VANISHED


def test_active_entry_wins_over_vanished_entry(sample: Catalog) -> None:
    assert sample.lookup("SettingsPage", "Restart") == "Neustart"
    assert sample.status("SettingsPage", "Restart") is TranslationStatus.FINISHED


def test_disambiguation_selects_entry(sample: Catalog) -> None:
    assert sample.lookup("NotesPage", "Open", "verb") == "Öffnen"
    assert sample.lookup("NotesPage", "Open", "adjective") == "Offen"
    assert sample.lookup("NotesPage", "Open") == "Open"
    assert sample.status("NotesPage", "Open") is TranslationStatus.MISSING


def test_finished_entry_without_text_falls_back_to_source(sample: Catalog) -> None:
    assert sample.status("NotesPage", "Empty") is TranslationStatus.FINISHED
    assert sample.lookup("NotesPage", "Empty") == "Empty"


def test_placeholders_pass_through_verbatim(sample: Catalog) -> None:
    assert sample.lookup("NotesPage", "Delete %1 and %2") == "%1 löschen"
    assert sample.lookup("NotesPage", "%n note(s)") == "%n Notiz"


def test_duplicate_keys_keep_last_occurrence(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING"):
        catalog = load("de", FIXTURE)

    assert catalog.lookup("SettingsPage", "Language") == "Sprache (Desktop)"
    assert "Duplicate message 'Language'" in caplog.text


def test_load_uses_requested_locale_as_default(sample: Catalog) -> None:
    assert sample.locales == ("de",)
    assert sample.default_locale == "de"
    assert sample.lookup("NotesPage", "Clear") == sample.lookup("NotesPage", "Clear", locale="de")


def test_unknown_locale_falls_back_to_source(catalog: Catalog) -> None:
    assert catalog.lookup("NotesPage", "Clear", locale="pt_BR") == "Clear"
    assert catalog.status("NotesPage", "Clear", locale="pt_BR") is TranslationStatus.MISSING
    assert catalog.lookup("NotesPage", "Clear") == "Clear"


def test_loading_twice_gives_identical_lookups() -> None:
    first = load_directory(TRANSLATIONS_ROOT)
    second = load_directory(TRANSLATIONS_ROOT)

    for locale in first.locales:
        for entry in first.entries(locale):
            args = (entry.context, entry.source_text, entry.disambiguation)
            assert first.lookup(*args, locale=locale) == second.lookup(*args, locale=locale)
            assert first.status(*args, locale=locale) == second.status(*args, locale=locale)


def test_finished_entries_round_trip_to_stored_text(catalog: Catalog) -> None:
    for locale in catalog.locales:
        table = catalog.table(locale)
        assert table is not None
        for entry in table.active_entries():
            if entry.status is TranslationStatus.FINISHED and entry.translation:
                assert catalog.lookup(
                    entry.context, entry.source_text, entry.disambiguation, locale=locale
                ) == entry.translation


@pytest.mark.parametrize(
    ("hint", "expected"),
    [
        ("fr", "fr"),
        ("fr-FR", "fr"),
        ("NL", "nl"),
        ("zh-CN", "zh_CN"),
        ("zh_TW", "zh_CN"),
        ("pt", None),
        (None, None),
        ("", None),
    ],
)
def test_normalise_locale(catalog: Catalog, hint: str | None, expected: str | None) -> None:
    assert catalog.normalise_locale(hint) == expected


def test_translator_binds_locale(catalog: Catalog) -> None:
    translator = catalog.translator("nl-NL")

    assert translator.locale == "nl"
    assert translator("NotesPage", "Clear") == "Wissen"
    assert translator("NotesPage", "Not translated") == "Not translated"


def test_translator_for_unknown_locale_returns_source(catalog: Catalog) -> None:
    translator = catalog.translator("pt")

    assert translator("NotesPage", "Clear") == "Clear"


def test_iteration_keeps_document_order(sample: Catalog) -> None:
    assert sample.contexts() == ("NotesPage", "SettingsPage")
    sources = [entry.source_text for entry in sample.entries() if entry.context == "SettingsPage"]
    assert sources == ["Language", "Language", "Restart", "Restart"]


def test_catalog_mappings_are_read_only(sample: Catalog) -> None:
    table = sample.table()
    assert table is not None

    with pytest.raises(TypeError):
        sample.tables["fr"] = table  # type: ignore[index]
    with pytest.raises(TypeError):
        table.contexts["Other"] = ()  # type: ignore[index]


def test_load_directory_rejects_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(ResourceError, match="not found"):
        load_directory(tmp_path / "absent")


def test_load_directory_rejects_empty_directory(tmp_path: Path) -> None:
    with pytest.raises(ResourceError, match="No translation resources"):
        load_directory(tmp_path)


def test_one_malformed_file_aborts_directory_load(translations_dir: Path) -> None:
    translations_dir.joinpath("dsnote-de.ts").write_text("<TS", encoding="utf-8")

    with pytest.raises(ResourceError, match="dsnote-de.ts"):
        load_directory(translations_dir)


def test_locale_taken_from_file_name_when_undeclared(tmp_path: Path) -> None:
    tmp_path.joinpath("app-pl.ts").write_text(
        "<TS><context><name>X</name><message><source>Yes</source>"
        "<translation>Tak</translation></message></context></TS>",
        encoding="utf-8",
    )

    catalog = load_directory(tmp_path, default_locale="pl")

    assert catalog.locales == ("pl",)
    assert catalog.lookup("X", "Yes") == "Tak"


def test_duplicate_locales_are_rejected(tmp_path: Path) -> None:
    for name in ("a-fr.ts", "b-fr.ts"):
        tmp_path.joinpath(name).write_text(
            '<TS language="fr"><context><name>X</name></context></TS>', encoding="utf-8"
        )

    with pytest.raises(ResourceError, match="more than once"):
        load_directory(tmp_path)
