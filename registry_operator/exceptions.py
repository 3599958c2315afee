"""Errors raised while building registry descriptors."""


class ConfigurationError(Exception):
    """Required operator configuration is missing; the process must not continue."""
