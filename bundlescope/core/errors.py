from __future__ import annotations


class BundleScopeError(Exception):
    """Base class for errors raised outside the analysis engines."""


class IngestLimitError(BundleScopeError):
    """Input files were rejected before ingestion (extension or size cap)."""


class SettingsError(BundleScopeError):
    """A settings file could not be read or parsed."""
