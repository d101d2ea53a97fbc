"""Hold the active catalogue and replace it atomically on reload."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from .catalog import Catalog

_LOGGER = logging.getLogger(__name__)

CatalogLoader = Callable[[], Catalog]


class CatalogRegistry:
    """Reference holder for the active :class:`Catalog`.

    Readers call :attr:`current` once per query and work on that snapshot.
    :meth:`reload` builds the replacement completely before swapping the
    reference, so no reader ever sees a partially loaded catalogue. When the
    loader fails the previous catalogue stays active and the error propagates.
    """

    def __init__(self, loader: CatalogLoader, *, eager: bool = True) -> None:
        self._loader = loader
        self._lock = threading.Lock()
        self._catalog: Catalog | None = None
        self._generation = 0
        if eager:
            self.reload()

    @property
    def current(self) -> Catalog:
        catalog = self._catalog
        if catalog is None:
            return self.reload()
        return catalog

    @property
    def generation(self) -> int:
        return self._generation

    def reload(self) -> Catalog:
        """Build a new catalogue with the loader and swap it in."""

        with self._lock:
            catalog = self._loader()
            self._catalog = catalog
            self._generation += 1
            generation = self._generation
        _LOGGER.info(
            "Catalogue generation %d active with locales %s",
            generation,
            ", ".join(catalog.locales),
        )
        return catalog


__all__ = ["CatalogLoader", "CatalogRegistry"]
