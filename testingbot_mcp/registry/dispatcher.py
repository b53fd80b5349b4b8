"""Operation dispatcher: lookup, validation, invocation, envelope."""

import logging
from typing import Any, Mapping, Optional

from ..utils.response import (
    FailureKind,
    ResponseEnvelope,
    failure_envelope,
    success_envelope,
)
from ..utils.sanitize import redact_arguments
from .exceptions import OperationNotFound, SchemaValidationError
from .operation_registry import OperationRegistry, OperationResult

logger = logging.getLogger(__name__)


def _error_message(error: BaseException) -> str:
    message = str(error).strip()
    return message or type(error).__name__


class OperationDispatcher:
    """
    Routes invocations to operation handlers.

    ``dispatch`` never raises: unknown operations, invalid arguments and
    handler failures all come back as failure envelopes. The dispatcher keeps
    no per-call state, so concurrent dispatches are independent.
    """

    def __init__(self, registry: OperationRegistry, client: Any):
        """
        Args:
            registry: Registry built at startup
            client: TestingBot API client handed to every handler
        """
        self.registry = registry
        self.client = client

    async def dispatch(
        self,
        name: str,
        arguments: Optional[Mapping[str, Any]] = None
    ) -> ResponseEnvelope:
        """
        Execute one invocation.

        Args:
            name: Operation name
            arguments: Raw, unvalidated arguments from the transport

        Returns:
            ResponseEnvelope, ``is_error`` set on any failure
        """
        logger.info(f"Tool called: {name} args={redact_arguments(arguments or {})}")

        # Lookup
        try:
            operation = self.registry.get(name)
        except OperationNotFound as e:
            logger.error(f"Tool execution failed: {name}: {e}")
            return failure_envelope(str(name or ""), str(e), FailureKind.NOT_FOUND)

        # Validation
        try:
            params = operation.input_schema.validate(arguments)
        except SchemaValidationError as e:
            reason = "; ".join(e.errors)
            logger.error(f"Tool execution failed: {name}: invalid arguments: {reason}")
            return failure_envelope(name, reason, FailureKind.INVALID_ARGUMENTS)
        except Exception as e:
            logger.exception(f"Argument validation crashed for {name}")
            return failure_envelope(name, _error_message(e), FailureKind.INVALID_ARGUMENTS)

        # Invocation
        try:
            result = await operation.handler(self.client, params)
        except Exception as e:
            message = _error_message(e)
            logger.error(f"Tool execution failed: {name}: {message}")
            return failure_envelope(name, message, FailureKind.HANDLER_ERROR)

        if isinstance(result, OperationResult):
            return success_envelope(result.message)
        return success_envelope(str(result))
