"""
Outcome of a service call.

Allocation and round services never raise for bad user input; they hand back
a Result carrying either the value or a message plus one of the codes in
``services.error_codes``.

    result = service.generate(roster)
    if not result:
        show_error(result.error, result.error_code)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Success flag plus either a value or an error message and code."""

    success: bool
    value: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str, code: str | None = None) -> "Result[T]":
        return cls(success=False, error=error, error_code=code)

    def __bool__(self) -> bool:
        return self.success

    def unwrap(self) -> T:
        """
        Value of a successful result.

        Raises:
            ValueError: If the call failed
        """
        if not self.success:
            raise ValueError(f"Cannot unwrap failed result ({self.error_code}): {self.error}")
        return self.value  # type: ignore
