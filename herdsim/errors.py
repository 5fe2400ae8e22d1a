"""Exceptions raised by herdsim.

Rejected requests are an expected outcome of the model and never raise; the
only user-facing failure is configuration, such as asking for a retry
strategy that does not exist.
"""

from __future__ import annotations

from collections.abc import Sequence


class HerdSimError(Exception):
    """Base class for herdsim errors."""


class UnknownStrategyError(HerdSimError, ValueError):
    """Raised when a retry strategy is requested by an unrecognized name.

    Attributes:
        name: The name that was requested.
        valid_names: Names that would have been accepted.
    """

    def __init__(self, name: str, valid_names: Sequence[str]):
        self.name = name
        self.valid_names = tuple(valid_names)
        super().__init__(
            f"Unknown strategy {name!r}. Use: {', '.join(self.valid_names)}"
        )
