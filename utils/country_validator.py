"""Business-rule checks for country input and fully built Country records.

Neither function raises: both return a ``ValidationResult`` that collects
every failed rule in the order it was checked. Callers decide whether to
report the messages or turn them into a ``ValidationError``.
"""

from __future__ import annotations

import math
import re
import sys
from typing import Dict, List, Optional, TextIO

from domain.models.country import Country
from middleware.errors import ValidationError

CODE_LENGTH = 3
NAME_MAX_LENGTH = 32
PERCENT_MIN = 0.0
PERCENT_MAX = 100.0

CODE_RE = re.compile(r"[A-Za-z]{3}")
NUMBER_RE = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


class ValidationResult:
    """Ordered error messages, keyed by a single untagged slot."""

    _KEY = None

    def __init__(self) -> None:
        self._errors: Dict[None, List[str]] = {self._KEY: []}

    def add_error(self, error: str) -> None:
        self._errors[self._KEY].append(error)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        for error in other.errors:
            self.add_error(error)
        return self

    @property
    def is_valid(self) -> bool:
        return not self._errors[self._KEY]

    @property
    def errors(self) -> List[str]:
        return list(self._errors[self._KEY])

    def report(self, stream: Optional[TextIO] = None) -> None:
        """Write the errors for a human reader; silent when valid."""
        if self.is_valid:
            return
        out = stream or sys.stdout
        out.write("\nValidation errors:\n")
        for error in self._errors[self._KEY]:
            out.write(f"- {error}\n")

    def raise_if_invalid(self) -> None:
        if not self.is_valid:
            raise ValidationError(self.errors)

    def __repr__(self) -> str:
        return f"ValidationResult(errors={self.errors!r})"


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _parse_number(raw: str) -> Optional[float]:
    # Plain ASCII decimal literals only.
    text = str(raw).strip()
    if not NUMBER_RE.fullmatch(text):
        return None
    value = float(text)
    return value if math.isfinite(value) else None


def validate_input(raw: Optional[str], field_name: str, required: bool) -> ValidationResult:
    """Check a free-text percentage before it is put on a Country."""
    result = ValidationResult()

    if required and _is_blank(raw):
        result.add_error(f"{field_name} is required")
        return result

    if not _is_blank(raw):
        value = _parse_number(raw)
        if value is None:
            result.add_error(f"{field_name} must be a valid number")
        elif value < PERCENT_MIN or value > PERCENT_MAX:
            result.add_error(f"{field_name} must be between 0 and 100")

    return result


def _check_percentage(result: ValidationResult, value: Optional[float], label: str) -> None:
    if value is None:
        return
    if value < PERCENT_MIN:
        result.add_error(f"{label} cannot be negative")
    if value > PERCENT_MAX:
        result.add_error(f"{label} cannot exceed 100")


def validate(country: Country) -> ValidationResult:
    """Run every rule against ``country``; errors accumulate across fields."""
    result = ValidationResult()

    code = country.code
    if _is_blank(code):
        result.add_error("Country code cannot be empty")
    elif len(code) != CODE_LENGTH:
        result.add_error("Country code must be exactly 3 characters")
    elif not CODE_RE.fullmatch(code):
        result.add_error("Country code must contain only letters")

    name = country.name
    if _is_blank(name):
        result.add_error("Country name cannot be empty")
    elif len(name) > NAME_MAX_LENGTH:
        result.add_error("Country name cannot exceed 32 characters")

    _check_percentage(result, country.internet_users, "Internet users percentage")
    _check_percentage(result, country.adult_literacy_rate, "Adult literacy rate")

    return result
