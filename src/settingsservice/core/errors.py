from __future__ import annotations


class SettingsError(Exception):
    """Base class for errors raised by the settings core."""


class ConfigurationError(SettingsError, ValueError):
    """A host-side programming mistake: bad definition, bad store or bad panel setup."""
