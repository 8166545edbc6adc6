"""Minimal result type for steps that report failures as data.

Used where failures are collected rather than raised, so callers can keep
going and decide at the end.
"""

from __future__ import annotations

import dataclasses
import typing

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure")


@dataclasses.dataclass(frozen=True, slots=True)
class Success(typing.Generic[TSuccess]):
    """A successful step."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure(typing.Generic[TFailure]):
    """A failed step, carrying its reported problem."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]
