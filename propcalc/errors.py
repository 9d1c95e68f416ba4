"""
Engine error types.
"""

from typing import List


class CalculationError(Exception):
    """Base class for calculation engine errors."""


class InputValidationError(CalculationError, ValueError):
    """
    Raised before any computation when an input is invalid.

    All detected violations are collected in ``errors`` and joined into a
    single message.
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(f"Invalid input: {', '.join(self.errors)}")
