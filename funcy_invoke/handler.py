"""
InvokeHandler - the boundary between a transport and the engine.

A transport (HTTP, CLI, queue consumer) decodes a request, hands it to
InvokeHandler.handle, and encodes the InvokeResponse it gets back. The
response carries exactly one of:
- results: the function's values on success
- error_message: any FuncyError, including a BusinessError returned by the
  function itself

Exceptions raised inside a registered function are not FuncyErrors and
propagate to the transport unchanged.
"""

import logging
from typing import Any

from funcy_invoke.engine import Invoker
from funcy_invoke.errors import FuncyError
from funcy_invoke.schemas import InvokeRequest, InvokeResponse

logger = logging.getLogger(__name__)


class InvokeHandler:
    """
    Turns InvokeRequests into InvokeResponses.

    Usage:
        handler = InvokeHandler(Invoker(registry))
        response = handler.handle({"func": "mypackage.Function1", "params": ["abc"]})
        body = response.to_json()
    """

    def __init__(self, invoker: Invoker) -> None:
        self.invoker = invoker

    def handle(self, request: InvokeRequest | dict[str, Any]) -> InvokeResponse:
        """
        Execute one request.

        Args:
            request: An InvokeRequest, or its decoded JSON dict

        Returns:
            InvokeResponse with results or error_message populated
        """
        try:
            if not isinstance(request, InvokeRequest):
                request = InvokeRequest.from_dict(request)
            result = self.invoker.invoke(request.function_name, request.arguments)
        except FuncyError as e:
            logger.warning(f"Invoke failed: {type(e).__name__}: {e}")
            return InvokeResponse.failure(str(e))

        if result.error is not None:
            return InvokeResponse.failure(str(result.error))
        return InvokeResponse.success(result.values)

    def handle_json(self, body: str | bytes) -> str:
        """Decode a JSON request body and return the encoded JSON response."""
        try:
            request = InvokeRequest.from_json(body)
        except FuncyError as e:
            logger.warning(f"Rejected request: {e}")
            return InvokeResponse.failure(str(e)).to_json()
        return self.handle(request).to_json()
