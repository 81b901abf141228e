"""
Declarative field validation for incoming request payloads.

Each request DTO declares a table of ``FieldRule`` objects keyed by the
wire (camelCase) field name.  ``check_fields`` evaluates every rule
against a raw payload and returns a ``{field: message}`` mapping, so the
caller always sees the full set of violations rather than only the first
failing field.  Within a single field, checks run in a fixed order
(required → type → length → email syntax → pattern) and the first failure
supplies the message.
"""
import re
from dataclasses import dataclass
from typing import Any, Mapping

from email_validator import EmailNotValidError, validate_email

EMAIL_COM_RE = re.compile(r".*@.*\.com$")
ALPHANUMERIC_PASSWORD_RE = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)[A-Za-z\d]+$", re.ASCII)


class FieldValidationError(ValueError):
    """Raised with the complete violation mapping for a payload."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


@dataclass(frozen=True)
class FieldRule:
    label: str
    min_length: int | None = None
    max_length: int | None = None
    length_message: str | None = None
    email: bool = False
    pattern: re.Pattern | None = None
    pattern_message: str | None = None

    def check(self, value: Any) -> str | None:
        """Return the violation message for *value*, or None when it passes."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return f"{self.label} is required"
        if not isinstance(value, str):
            return f"{self.label} must be a string"

        too_short = self.min_length is not None and len(value) < self.min_length
        too_long = self.max_length is not None and len(value) > self.max_length
        if too_short or too_long:
            return self.length_message

        if self.email:
            try:
                validate_email(value, check_deliverability=False)
            except EmailNotValidError:
                return f"{self.label} must be valid"

        if self.pattern is not None and not self.pattern.fullmatch(value):
            return self.pattern_message
        return None


def check_fields(rules: Mapping[str, FieldRule], payload: Any) -> dict[str, str]:
    """
    Evaluate *rules* against *payload* and return every violation.

    A payload that is not a mapping is treated as empty, so every field is
    reported as required.
    """
    if not isinstance(payload, Mapping):
        payload = {}
    errors: dict[str, str] = {}
    for field, rule in rules.items():
        message = rule.check(payload.get(field))
        if message is not None:
            errors[field] = message
    return errors


# ---------------------------------------------------------------------------
# Rule tables
# ---------------------------------------------------------------------------

USER_REGISTRATION_RULES: dict[str, FieldRule] = {
    "userName": FieldRule(
        label="User name",
        min_length=3,
        max_length=50,
        length_message="User name must be between 3 and 50 characters",
    ),
    "userEmail": FieldRule(
        label="Email",
        email=True,
        pattern=EMAIL_COM_RE,
        pattern_message="Email must contain @ and end with .com",
    ),
    "password": FieldRule(
        label="Password",
        min_length=8,
        length_message="Password must be at least 8 characters",
        pattern=ALPHANUMERIC_PASSWORD_RE,
        pattern_message="Password must be alphanumeric (letters and numbers)",
    ),
}

BLOG_RULES: dict[str, FieldRule] = {
    "blogName": FieldRule(
        label="Blog name",
        min_length=20,
        max_length=200,
        length_message="Blog name must be at least 20 characters",
    ),
    "category": FieldRule(
        label="Category",
        min_length=20,
        max_length=100,
        length_message="Category must be at least 20 characters",
    ),
    "article": FieldRule(
        label="Article",
        min_length=1000,
        length_message="Article must be at least 1000 characters",
    ),
    "authorName": FieldRule(
        label="Author name",
        min_length=3,
        max_length=50,
        length_message="Author name must be between 3 and 50 characters",
    ),
}
