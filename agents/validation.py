"""Outcome of an agent's response-validation hook."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationResult:
    """Either a pass or a failure with a human-readable reason.

    The reason of a failure is sent back to the model, so phrase it as an
    instruction the model can act on.
    """

    valid: bool
    reason: str = ""

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def fail(cls, reason: str) -> ValidationResult:
        return cls(valid=False, reason=reason)

    def __bool__(self) -> bool:
        return self.valid


class ResponseValidationError(Exception):
    """Raised when an agent's responses kept failing validation.

    Attributes:
        result:   The last failing ``ValidationResult``.
        response: The last rejected response text.
        attempts: How many responses were generated and rejected.
    """

    def __init__(self, result: ValidationResult, response: str, attempts: int):
        super().__init__(
            f"Response failed validation after {attempts} attempt(s): {result.reason}"
        )
        self.result = result
        self.response = response
        self.attempts = attempts
