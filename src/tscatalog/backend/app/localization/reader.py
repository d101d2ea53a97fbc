"""Parse Qt Linguist ``.ts`` resources into validated entries."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from lxml import etree
from pydantic import ValidationError

from .models import Entry, Location, ResourceError, TranslationDocument, TranslationStatus

if TYPE_CHECKING:  # pragma: no cover - only for static type checkers
    from importlib.resources.abc import Traversable

_LOGGER = logging.getLogger(__name__)

Resource = Union[str, "os.PathLike[str]", bytes, "Traversable"]


def _parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        huge_tree=False,
    )


def _describe(resource: Resource) -> str:
    if isinstance(resource, bytes):
        return "<bytes>"
    name = getattr(resource, "name", None)
    return str(name) if name else str(resource)


def _read_bytes(resource: Resource) -> bytes:
    """Return the raw payload for paths, bytes or ``importlib`` traversables."""

    if isinstance(resource, bytes):
        return resource
    try:
        if isinstance(resource, (str, os.PathLike)):
            return Path(resource).read_bytes()
        if hasattr(resource, "read_bytes"):
            return resource.read_bytes()
    except OSError as exc:
        raise ResourceError(f"Unable to read translation resource {_describe(resource)}: {exc}") from exc
    raise ResourceError(f"Unsupported translation resource type: {type(resource).__name__}")


def _text(element: etree._Element | None) -> str | None:
    if element is None:
        return None
    return "".join(element.itertext())


def _variants(element: etree._Element) -> tuple[str, ...]:
    """Return the ``<lengthvariant>`` texts of ``element``, longest form first."""

    return tuple(_text(variant) or "" for variant in element.findall("lengthvariant"))


def _translated_text(element: etree._Element) -> tuple[str, tuple[str, ...]]:
    """Return the default text of a translation or numerus form and its variants.

    Qt displays the first length variant unless the UI asks for a shorter one.
    """

    variants = _variants(element)
    if variants:
        return variants[0], variants
    return _text(element) or "", ()


def _resolve_line(raw: str | None, filename: str, previous: dict[str, int]) -> int | None:
    """Resolve absolute and lupdate-style relative (``+3``/``-2``) line numbers."""

    if raw is None or raw == "":
        return None
    try:
        if raw[0] in "+-":
            line = previous.get(filename, 0) + int(raw)
        else:
            line = int(raw)
    except ValueError as exc:
        raise ResourceError(f"Invalid line number '{raw}' for {filename}") from exc
    previous[filename] = line
    return line


def _parse_locations(
    message: etree._Element,
    previous_lines: dict[str, int],
    last_filename: list[str],
) -> tuple[Location, ...]:
    locations: list[Location] = []
    for element in message.findall("location"):
        # lupdate omits the file name when it repeats the previous one
        filename = element.get("filename") or (last_filename[0] if last_filename else "")
        if not filename:
            raise ResourceError("Location annotations require a filename")
        last_filename[:] = [filename]
        line = _resolve_line(element.get("line"), filename, previous_lines)
        locations.append(Location(filename=filename, line=line))
    return tuple(locations)


def _parse_translation(message: etree._Element, context: str, source: str) -> dict[str, Any]:
    translation = message.find("translation")
    if translation is None:
        raise ResourceError(f"Message '{source}' in context '{context}' has no <translation>")

    status = TranslationStatus.from_type_attribute(translation.get("type"))
    numerus = message.get("numerus") == "yes"
    plural_forms: tuple[str, ...] = ()
    length_variants: tuple[str, ...] = ()
    if numerus:
        plural_forms = tuple(
            _translated_text(form)[0] for form in translation.findall("numerusform")
        )
        text = next((form for form in plural_forms if form), "")
    else:
        text, length_variants = _translated_text(translation)

    return {
        "translation": text,
        "status": status,
        "numerus": numerus,
        "plural_forms": plural_forms,
        "length_variants": length_variants,
    }


def _parse_context(
    element: etree._Element,
    previous_lines: dict[str, int],
    last_filename: list[str],
) -> list[Entry]:
    name = _text(element.find("name"))
    if not name:
        raise ResourceError("Context blocks require a non-empty <name>")

    entries: list[Entry] = []
    for message in element.findall("message"):
        source = _text(message.find("source"))
        if source is None:
            raise ResourceError(f"Message in context '{name}' has no <source>")

        fields = _parse_translation(message, name, source)
        try:
            entry = Entry(
                context=name,
                source_text=source,
                disambiguation=_text(message.find("comment")),
                locations=_parse_locations(message, previous_lines, last_filename),
                extra_comment=_text(message.find("extracomment")),
                translator_comment=_text(message.find("translatorcomment")),
                old_source=_text(message.find("oldsource")),
                **fields,
            )
        except ValidationError as error:
            raise ResourceError(
                f"Invalid message '{source}' in context '{name}': {error}"
            ) from error
        entries.append(entry)
    return entries


def parse_ts(
    payload: bytes,
    locale: str | None = None,
    *,
    fallback_locale: str | None = None,
) -> TranslationDocument:
    """Parse a ``.ts`` payload.

    ``locale`` overrides the declared ``language`` attribute when both are set;
    a mismatch is logged. ``fallback_locale`` is used only when neither is set.
    """

    try:
        root = etree.fromstring(payload, parser=_parser())
    except etree.XMLSyntaxError as exc:
        raise ResourceError(f"Translation resource is not well-formed XML: {exc}") from exc

    if root.tag != "TS":
        raise ResourceError(f"Expected <TS> root element, found <{root.tag}>")

    declared = root.get("language") or None
    if locale and declared and declared != locale:
        _LOGGER.warning(
            "Resource declares language %s but was loaded as %s", declared, locale
        )
    resolved_locale = locale or declared or fallback_locale
    if not resolved_locale:
        raise ResourceError("Translation resource declares no language")

    previous_lines: dict[str, int] = {}
    last_filename: list[str] = []
    entries: list[Entry] = []
    for context in root.findall("context"):
        entries.extend(_parse_context(context, previous_lines, last_filename))

    return TranslationDocument(
        locale=resolved_locale,
        source_language=root.get("sourcelanguage") or None,
        version=root.get("version") or None,
        entries=tuple(entries),
    )


def read_resource(
    resource: Resource,
    locale: str | None = None,
    *,
    fallback_locale: str | None = None,
) -> TranslationDocument:
    """Read and parse a resource given as a path, raw bytes or traversable."""

    payload = _read_bytes(resource)
    try:
        return parse_ts(payload, locale, fallback_locale=fallback_locale)
    except ResourceError as exc:
        raise ResourceError(f"{_describe(resource)}: {exc}") from exc


__all__ = ["Resource", "parse_ts", "read_resource"]
