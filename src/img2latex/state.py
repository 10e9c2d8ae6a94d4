"""Conversion state machine.

A conversion attempt is always in exactly one of three states::

    Idle --convert--> Converting --finish--> Settled(result | error)

``Settled`` holds either a result or an error, never both. States are
immutable; the controller replaces its state on every transition.
"""

from typing import Optional, Union

from pydantic import ConfigDict
from pydantic.dataclasses import dataclass

from .models import ConversionResult


@dataclass(frozen=True)
class Idle:
    """No attempt is running and nothing is displayed."""


@dataclass(frozen=True)
class Converting:
    """An attempt is in flight."""

    generation: int


@dataclass(frozen=True, config=ConfigDict(arbitrary_types_allowed=True))
class Settled:
    """Terminal state of one attempt."""

    generation: int
    result: Optional[ConversionResult] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.result is None) == (self.error is None):
            raise ValueError("Settled state requires exactly one of result or error")

    @classmethod
    def success(cls, generation: int, result: ConversionResult) -> "Settled":
        return cls(generation=generation, result=result)

    @classmethod
    def failure(cls, generation: int, error: str) -> "Settled":
        return cls(generation=generation, error=error)


ConversionState = Union[Idle, Converting, Settled]
