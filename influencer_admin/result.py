from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from influencer_admin.errors import AppError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a best-effort step.

    Callers inspect ``ok`` and either use ``value`` or decide what to do with
    ``error``; nothing is swallowed implicitly.
    """

    value: T | None = None
    error: AppError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: AppError) -> "Result[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
