"""Expose translation catalogues, lookups and coverage over HTTP."""

from __future__ import annotations

import logging
from typing import Any

from flask import Blueprint, jsonify, request

from tscatalog.backend.app.http import current_registry, missing_argument, problem_response
from tscatalog.backend.app.localization import Catalog, ResourceError
from tscatalog.backend.app.services.coverage_service import build_coverage

blueprint = Blueprint("translations", __name__, url_prefix="/api/v1/translations")

logger = logging.getLogger(__name__)


def _catalogue_payload(catalog: Catalog, locale_hint: str | None) -> dict[str, Any]:
    locale = catalog.normalise_locale(locale_hint)
    table = catalog.table(locale)

    messages: dict[str, dict[str, str]] = {}
    # context -> source -> disambiguation -> translation
    disambiguated: dict[str, dict[str, dict[str, str]]] = {}
    if table is not None:
        for entry in table.active_entries():
            text = table.lookup(entry.context, entry.source_text, entry.disambiguation)
            if entry.disambiguation is None:
                messages.setdefault(entry.context, {})[entry.source_text] = text
            else:
                disambiguated.setdefault(entry.context, {}).setdefault(
                    entry.source_text, {}
                )[entry.disambiguation] = text

    return {
        "locale": table.locale if table is not None else locale,
        "source_language": table.source_language if table is not None else None,
        "available_locales": list(catalog.locales),
        "messages": messages,
        "disambiguated": disambiguated,
    }


@blueprint.get("/")
def get_default_translations():
    """Return translations for the requested or default locale."""

    catalog = current_registry().current
    return jsonify(_catalogue_payload(catalog, request.args.get("locale"))), 200


@blueprint.get("/<locale>")
def get_locale_translations(locale: str):
    catalog = current_registry().current
    return jsonify(_catalogue_payload(catalog, locale)), 200


@blueprint.get("/<locale>/lookup")
def lookup_message(locale: str):
    """Resolve one message; unknown keys echo the source text."""

    context = request.args.get("context")
    if context is None:
        return missing_argument("context").to_response()
    source = request.args.get("source")
    if source is None:
        return missing_argument("source").to_response()
    disambiguation = request.args.get("disambiguation") or None

    catalog = current_registry().current
    resolved = catalog.normalise_locale(locale)
    translation = catalog.lookup(context, source, disambiguation, locale=resolved)
    status = catalog.status(context, source, disambiguation, locale=resolved)
    return (
        jsonify(
            {
                "locale": resolved,
                "context": context,
                "source": source,
                "translation": translation,
                "status": status.value,
            }
        ),
        200,
    )


@blueprint.get("/<locale>/coverage")
def get_coverage(locale: str):
    catalog = current_registry().current
    table = catalog.table(catalog.normalise_locale(locale))
    if table is None:
        return problem_response(
            "not_found", status=404, message=f"No catalogue for locale '{locale}'"
        ).to_response()
    return jsonify(build_coverage(table).as_dict()), 200


@blueprint.post("/reload")
def reload_catalogue():
    """Rebuild the catalogue from disk; failures keep the previous one active."""

    registry = current_registry()
    try:
        catalog = registry.reload()
    except ResourceError as error:
        logger.warning("Catalogue reload failed: %s", error)
        return problem_response(
            "invalid_resource",
            status=422,
            message=str(error),
            generation=registry.generation,
        ).to_response()

    return jsonify({"generation": registry.generation, "locales": list(catalog.locales)}), 200
