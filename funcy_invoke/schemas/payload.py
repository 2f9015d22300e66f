"""
InvokeRequest / InvokeResponse - the boundary shapes seen by a transport.

Wire format (JSON):

    request:  {"type": "function", "func": "pkg.Name", "params": [...]}
    response: {"result": [...]}  or  {"error": "message"}

``function_name`` / ``arguments`` are accepted as request keys too. Exactly
one of ``result`` and ``error`` is present in a response.
"""

import base64
import dataclasses
import json
from dataclasses import dataclass
from typing import Any, Optional

from funcy_invoke.errors import InvalidArgumentError


@dataclass(frozen=True)
class InvokeRequest:
    """
    A decoded invocation request.

    Attributes:
        function_name: Registry name of the function to call
        arguments: Ordered generic argument values
    """
    function_name: str
    arguments: tuple = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InvokeRequest":
        """
        Build a request from decoded JSON.

        Raises:
            InvalidArgumentError: If the payload is not a function request,
                has no function name, or its arguments are not a list
        """
        if not isinstance(data, dict):
            raise InvalidArgumentError(
                f"request must be an object, got {type(data).__name__}"
            )

        kind = data.get("type", "function")
        if kind != "function":
            raise InvalidArgumentError(f"unsupported request type: {kind}")

        name = data.get("func", data.get("function_name"))
        if not isinstance(name, str) or not name:
            raise InvalidArgumentError("request is missing a function name")

        arguments = data.get("params", data.get("arguments"))
        if arguments is None:
            arguments = []
        if not isinstance(arguments, list):
            raise InvalidArgumentError(
                f"request arguments must be a list, got {type(arguments).__name__}"
            )
        return cls(function_name=name, arguments=tuple(arguments))

    @classmethod
    def from_json(cls, text: str | bytes) -> "InvokeRequest":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidArgumentError(f"invalid request JSON: {e}") from e
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "function",
            "func": self.function_name,
            "params": list(self.arguments),
        }


@dataclass(frozen=True)
class InvokeResponse:
    """
    The outcome of one request.

    Attributes:
        results: Result values (None when an error occurred)
        error_message: Error text (None on success)
    """
    results: Optional[list] = None
    error_message: Optional[str] = None

    def __post_init__(self):
        if (self.results is None) == (self.error_message is None):
            raise ValueError(
                "InvokeResponse must have exactly one of results or error_message"
            )

    @property
    def ok(self) -> bool:
        return self.error_message is None

    @classmethod
    def success(cls, results: list) -> "InvokeResponse":
        return cls(results=list(results))

    @classmethod
    def failure(cls, message: str) -> "InvokeResponse":
        return cls(error_message=message)

    def to_dict(self) -> dict[str, Any]:
        """Wire dict with the empty member omitted."""
        if self.error_message is not None:
            return {"error": self.error_message}
        return {"result": self.results}

    def to_json(self, **kwargs) -> str:
        """
        Serialize to JSON.

        bytes become base64 text and records become objects keyed by field
        name.
        """
        return json.dumps(self.to_dict(), default=encode_value, **kwargs)


def encode_value(value: Any) -> Any:
    """``json.dumps`` default hook for result values."""
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    if isinstance(value, BaseException):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
