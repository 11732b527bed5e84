"""Depletable piece counter used for stock caps."""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, model_serializer, model_validator

from .errors import CountDepleted

INFINITE = "infinite"


class Count(BaseModel):
    """Either ``Infinite`` or ``Finite(n)`` with ``n >= 0``.

    In documents a count is written as a bare non-negative integer or as the
    string ``"infinite"``.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)
    remaining: Optional[StrictInt] = Field(default=None, ge=0)

    @classmethod
    def infinite(cls) -> "Count":
        return cls(remaining=None)

    @classmethod
    def finite(cls, n: int) -> "Count":
        return cls(remaining=n)

    @model_validator(mode="before")
    @classmethod
    def _from_document(cls, data: Any) -> Any:
        if isinstance(data, str):
            if data.strip().lower() == INFINITE:
                return {"remaining": None}
            raise ValueError(f"count must be a non-negative integer or '{INFINITE}', got {data!r}")
        if isinstance(data, bool):
            raise ValueError("count must not be a boolean")
        if isinstance(data, int):
            return {"remaining": data}
        return data

    @model_serializer(mode="plain")
    def _to_document(self) -> Union[int, str]:
        return INFINITE if self.remaining is None else self.remaining

    @property
    def is_infinite(self) -> bool:
        return self.remaining is None

    def is_depleted(self) -> bool:
        return self.remaining is not None and self.remaining == 0

    def decrease(self) -> None:
        """Consume one unit; ``Finite(0)`` raises :class:`CountDepleted`."""

        if self.remaining is None:
            return
        if self.remaining == 0:
            raise CountDepleted()
        self.remaining -= 1

    def __str__(self) -> str:
        return "Unlimited" if self.remaining is None else str(self.remaining)


__all__ = ["Count", "INFINITE"]
