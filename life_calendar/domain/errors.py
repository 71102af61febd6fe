"""
Typed domain errors for the Life Calendar.

Callers distinguish user input problems (a bad birthdate) from data
configuration faults (a sex category with no mortality table rows) and
map each to the right reaction: zero state, error message, or crash.
"""


class DomainError(Exception):
    """Base class for all domain-specific errors."""


# ---------------------------------------------------------------------------
# User input
# ---------------------------------------------------------------------------


class InvalidBirthDate(DomainError):
    """Birthdate string is not a parseable YYYY-MM-DD calendar date."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid birth date {value!r}; expected YYYY-MM-DD")


class InvalidSexCategory(DomainError):
    """Sex token is not one of the accepted literals."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(
            f"Invalid sex category {value!r}; expected 'male', 'female' or empty"
        )


# ---------------------------------------------------------------------------
# Mortality table
# ---------------------------------------------------------------------------


class MissingTableEntry(DomainError):
    """A known sex category has no rows in the mortality table."""

    def __init__(self, sex: str) -> None:
        self.sex = sex
        super().__init__(f"Mortality table has no entries for sex category '{sex}'")


class MortalityTableError(DomainError):
    """Mortality table file is missing or malformed."""
