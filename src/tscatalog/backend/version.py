"""Expose the project version for health payloads."""

from __future__ import annotations

import tomllib
from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

PACKAGE_NAME: Final = "tscatalog"
PYPROJECT_PATH: Final = Path(__file__).resolve().parents[3] / "pyproject.toml"


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Return the installed distribution version.

    Source checkouts that were never installed read ``[project].version``
    from ``pyproject.toml`` instead.
    """

    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return _declared_version(PYPROJECT_PATH)


def _declared_version(path: Path) -> str:
    try:
        document = tomllib.loads(path.read_text(encoding="utf-8"))
        return str(document["project"]["version"])
    except (OSError, tomllib.TOMLDecodeError, KeyError) as error:
        raise RuntimeError(f"Unable to determine project version from {path}") from error


__all__ = ["get_project_version"]
