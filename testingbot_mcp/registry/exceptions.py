"""Exceptions raised by the operation registry, schemas and dispatcher."""

from typing import Iterable, List


class OperationRegistryError(Exception):
    """Base exception for registry errors."""
    pass


class ConfigurationError(OperationRegistryError):
    """Startup-time misconfiguration; the server cannot start."""
    pass


class OperationAlreadyRegistered(ConfigurationError):
    """Operation already registered."""
    pass


class InvalidOperationDescriptor(ConfigurationError):
    """Invalid operation descriptor."""
    pass


class SchemaDefinitionError(ConfigurationError):
    """Argument schema declared with contradictory rules."""
    pass


class OperationNotFound(OperationRegistryError):
    """Operation not found in registry."""
    pass


class SchemaValidationError(OperationRegistryError):
    """Arguments failed schema validation.

    Carries one human-readable reason per failed parameter.
    """

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors) or ["invalid arguments"]
        super().__init__("; ".join(self.errors))
