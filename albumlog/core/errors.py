"""Errors raised while resolving metadata."""


class MetadataError(Exception):
    """Base class for resolver failures (not-found is not an error)."""


class ConfigurationError(MetadataError):
    """Cannot even ask: missing credentials or unknown provider."""


class ProviderError(MetadataError):
    """Transport failure, or the detail fetch failed after a candidate was chosen."""
