"""Exception types raised across the carprices package."""


class CarPricesError(Exception):
    """Base class for all project errors."""


class DataParseError(CarPricesError, ValueError):
    """A training data value could not be coerced to its declared type."""

    def __init__(self, message, column=None, line=None, value=None):
        super().__init__(message)
        self.column = column
        self.line = line
        self.value = value


class ArtifactFormatError(CarPricesError):
    """A persisted model artifact is unreadable or does not match the expected schema."""


class ModelNotFoundError(CarPricesError, KeyError):
    """No model is registered under the requested name."""

    def __str__(self):
        return str(self.args[0]) if self.args else ""


class ReferenceDataError(CarPricesError):
    """The make/model reference list is malformed."""


class ConfigError(CarPricesError, ValueError):
    """A configuration value is invalid."""
