"""
InvocationResult - the outcome of one successful dispatch.

Engine-level failures are raised. A function that reports its own failure
through a trailing error return still produces an InvocationResult: the
error is carried as a BusinessError next to whatever values preceded it.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from funcy_invoke.errors import BusinessError


@dataclass(frozen=True)
class InvocationResult:
    """
    Values returned by a registered function, with the trailing error split off.

    Attributes:
        values: Ordered result values (trailing error slot removed)
        error: The function's own error, if it returned one
    """
    values: list[Any] = field(default_factory=list)
    error: Optional[BusinessError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> list[Any]:
        """Return the values, or raise the BusinessError if there is one."""
        if self.error is not None:
            raise self.error
        return self.values
