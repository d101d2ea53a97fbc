"""Reporting services built on top of the translation catalogue."""

from .coverage_service import CoverageReport, build_coverage

__all__ = ["CoverageReport", "build_coverage"]
