"""Domain layer: scratch value objects and the Result pattern."""

from .result import (
    Result,
    Success,
    Failure,
    success,
    failure,
    try_catch,
    DomainError,
    MoveError,
)
from .value_objects import Answer, AppendType, DefaultScratchMeaning, Scratch

__all__ = [
    "Result",
    "Success",
    "Failure",
    "success",
    "failure",
    "try_catch",
    "DomainError",
    "MoveError",
    "Answer",
    "AppendType",
    "DefaultScratchMeaning",
    "Scratch",
]
