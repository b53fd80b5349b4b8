"""
Operation Registry - Typed catalog of TestingBot operations.

Provides:
- Operation descriptors pairing a name and description with an argument
  schema and an async handler
- A registry composed once from operation groups, read-only afterwards
- The tool catalog projection served to MCP clients
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Sequence

from .exceptions import (
    InvalidOperationDescriptor,
    OperationAlreadyRegistered,
    OperationNotFound,
)
from .schema import BaseSchema, JSONSchema

logger = logging.getLogger(__name__)


# ============================================================================
# Enums
# ============================================================================

class OperationCategory(Enum):
    """Operation groups, one per TestingBot resource."""
    BROWSERS = "browsers"
    TESTS = "tests"
    BUILDS = "builds"
    STORAGE = "storage"
    SCREENSHOTS = "screenshots"
    USER = "user"
    LIVE = "live"
    TEAM = "team"
    CDP = "cdp"
    TUNNELS = "tunnels"


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class OperationResult:
    """Result of an operation execution."""
    message: str
    data: Any = None


# Handlers receive the TestingBot client and the validated arguments
Handler = Callable[[Any, Dict[str, Any]], Awaitable[OperationResult]]


@dataclass
class OperationDescriptor:
    """Describes one callable operation for the registry."""
    name: str                          # Operation identifier (e.g., "getBrowsers")
    category: OperationCategory        # Resource group
    description: str                   # Human-readable description
    input_schema: BaseSchema           # Argument schema
    handler: Handler                   # Async operation handler
    tags: List[str] = field(default_factory=list)

    def catalog_entry(self) -> Dict[str, Any]:
        """Protocol-neutral listing entry."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.input_schema.properties(),
            "required": self.input_schema.required(),
        }


# ============================================================================
# Operation Registry
# ============================================================================

class OperationRegistry:
    """
    Central registry for TestingBot operations.

    Built once from a sequence of operation groups. Registration order is
    preserved and drives catalog ordering. No operation can be added or
    removed after construction.
    """

    def __init__(self, groups: Iterable[Sequence[OperationDescriptor]]):
        """
        Compose the registry from operation groups.

        Args:
            groups: Operation descriptor lists, one per resource group

        Raises:
            OperationAlreadyRegistered: If two descriptors share a name
            InvalidOperationDescriptor: If a descriptor is incomplete
        """
        operations: Dict[str, OperationDescriptor] = {}

        for group in groups:
            for operation in group:
                self._validate_descriptor(operation)

                if operation.name in operations:
                    raise OperationAlreadyRegistered(
                        f"Operation '{operation.name}' already registered"
                    )

                operations[operation.name] = operation
                logger.debug(
                    f"Registered operation: {operation.name} "
                    f"(category: {operation.category.value})"
                )

        self._operations = MappingProxyType(operations)
        logger.info(f"OperationRegistry initialized with {len(operations)} operations")

    # ========================================================================
    # Retrieval
    # ========================================================================

    def get(self, name: str) -> OperationDescriptor:
        """
        Retrieve an operation by name.

        Raises:
            OperationNotFound: If operation doesn't exist
        """
        try:
            return self._operations[name]
        except (KeyError, TypeError):
            raise OperationNotFound(f"Operation '{name}' not found") from None

    def exists(self, name: str) -> bool:
        """Check if operation exists."""
        return isinstance(name, str) and name in self._operations

    def names(self) -> List[str]:
        """Operation names in registration order."""
        return list(self._operations)

    def list(self, category: Optional[OperationCategory] = None) -> List[OperationDescriptor]:
        """
        List operations with optional category filter.

        Args:
            category: Filter by category

        Returns:
            List of operation descriptors in registration order
        """
        operations = list(self._operations.values())

        if category:
            operations = [op for op in operations if op.category == category]

        return operations

    def __len__(self) -> int:
        return len(self._operations)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._operations

    # ========================================================================
    # Catalog
    # ========================================================================

    def list_operations(self) -> List[Dict[str, Any]]:
        """
        Project the registry into the tool catalog.

        Returns:
            One ``{name, description, parameters, required}`` entry per
            operation, in registration order
        """
        return [operation.catalog_entry() for operation in self._operations.values()]

    def get_input_schema(self, name: str) -> JSONSchema:
        """
        JSON Schema object describing an operation's arguments.

        Raises:
            OperationNotFound: If operation doesn't exist
        """
        return self.get(name).input_schema.to_json_schema()

    # ========================================================================
    # Internal Helpers
    # ========================================================================

    def _validate_descriptor(self, operation: OperationDescriptor) -> None:
        """
        Validate operation descriptor.

        Raises:
            InvalidOperationDescriptor: If validation fails
        """
        if not isinstance(operation, OperationDescriptor):
            raise InvalidOperationDescriptor(
                f"Expected OperationDescriptor, got {type(operation).__name__}"
            )

        if not operation.name or not operation.name.strip():
            raise InvalidOperationDescriptor("Operation name is required")

        if not operation.description:
            raise InvalidOperationDescriptor(
                f"Operation description is required ({operation.name})"
            )

        if operation.handler is None or not callable(operation.handler):
            raise InvalidOperationDescriptor(
                f"Operation handler is required ({operation.name})"
            )

        if not isinstance(operation.input_schema, BaseSchema):
            raise InvalidOperationDescriptor(
                f"Operation input schema is required ({operation.name})"
            )
