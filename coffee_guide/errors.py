from enum import Enum


class ConfigurationError(LookupError):
    """
    Raised when a preset points at something the static catalog doesn't have.
    Should never happen with the shipped tables.
    """


class UnknownSizeError(ConfigurationError):
    def __init__(self, brew_method: str, size_label: str):
        super().__init__(f"{brew_method} has no vessel size {size_label!r}")
        self.brew_method = brew_method
        self.size_label = size_label


class UnsupportedCombinationError(ConfigurationError):
    def __init__(self, grinder: str, brew_method: str):
        super().__init__(f"{grinder} has no calibration for {brew_method}")
        self.grinder = grinder
        self.brew_method = brew_method


class WeatherError(RuntimeError):
    """Current conditions could not be fetched or parsed."""


class ValidationError(str, Enum):
    EMPTY_NAME = "empty_name"
    MISSING_PRESET = "missing_preset"
