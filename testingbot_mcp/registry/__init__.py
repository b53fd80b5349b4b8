"""
Operation Registry for testingbot-mcp-server.

Provides the typed catalog of TestingBot operations and the dispatcher that
routes invocations to them.
"""

from .dispatcher import OperationDispatcher
from .exceptions import (
    ConfigurationError,
    InvalidOperationDescriptor,
    OperationAlreadyRegistered,
    OperationNotFound,
    OperationRegistryError,
    SchemaDefinitionError,
    SchemaValidationError,
)
from .operation_registry import (
    OperationCategory,
    OperationDescriptor,
    OperationRegistry,
    OperationResult,
)
from .schema import ArgumentSchema, ParamKind, ParamSpec, VariantSchema

__all__ = [
    'OperationRegistry',
    'OperationDescriptor',
    'OperationCategory',
    'OperationResult',
    'OperationDispatcher',
    # Schemas
    'ArgumentSchema',
    'VariantSchema',
    'ParamSpec',
    'ParamKind',
    # Exceptions
    'OperationRegistryError',
    'ConfigurationError',
    'OperationAlreadyRegistered',
    'InvalidOperationDescriptor',
    'SchemaDefinitionError',
    'OperationNotFound',
    'SchemaValidationError',
]
