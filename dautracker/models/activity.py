from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dautracker.core.errors import StoreUnavailable

T = TypeVar("T")


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """
    Outcome of a single bitmap store primitive: a value, or the failure that
    prevented one. Callers decide what a failure collapses to.
    """

    value: Optional[T] = None
    error: Optional[StoreUnavailable] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: T) -> T:
        if self.error is not None or self.value is None:
            return default
        return self.value

    @classmethod
    def success(cls, value: T) -> "StoreResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: StoreUnavailable) -> "StoreResult[T]":
        return cls(error=error)


class DAUStatistics(BaseModel):
    """Response body shared by the DAU endpoints; unset fields are omitted."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: Optional[str] = None
    dau_count: Optional[int] = None
    is_active: Optional[bool] = None
    date_range_stats: Optional[Dict[str, int]] = None
    message: str


class MemoryUsage(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: str
    memory_bytes: int
    memory_kb: str = Field(alias="memoryKB")
    message: str
