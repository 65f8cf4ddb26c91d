"""
Contacts API — Contact Validation Rules
========================================

What:  The named field rules every contact write must satisfy.
Why:   Rules are explicit objects evaluated before every insert and update,
       so the HTTP handlers, the seeder, and any other caller of the
       accessor get exactly the same checks.
How:   Each field has an ordered pipeline of rules. A rule either returns
       the (possibly normalized) value or raises RuleViolation. The first
       violation per field is kept; all fields are checked before
       ValidationError is raised, so the client sees every problem at once.

Rule Inventory:
    required      value present and not null          (all fields)
    trim          strip surrounding whitespace         (names, email)
    non_blank     non-empty after trimming             (names, email, color)
    lowercase     lowercase the address                (email)
    email_format  matches local@domain.tld             (email)
    is_text       value is a string                    (color)
    is_date       date object or ISO YYYY-MM-DD string (birthday)

Uniqueness of email is not a rule here: the database unique constraint
enforces it atomically, and ContactService maps the violation.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from pydantic.alias_generators import to_camel

from app.exceptions import ValidationError

# Same deliberately loose shape the API has always accepted
EMAIL_PATTERN = re.compile(r".+@.+\..+")

# Human labels used in messages ("First name is required")
FIELD_LABELS: Dict[str, str] = {
    "first_name": "First name",
    "last_name": "Last name",
    "email": "Email",
    "favorite_color": "Favorite color",
    "birthday": "Birthday",
}

# Sentinel for "field not supplied"
MISSING = object()


class RuleViolation(Exception):
    """Raised by a rule; carries the client-facing message."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class Rule:
    """A named check/normalizer applied to one field value."""

    name: str
    apply: Callable[[str, Any], Any]

    def __call__(self, field: str, value: Any) -> Any:
        return self.apply(field, value)


def _required(field: str, value: Any) -> Any:
    if value is MISSING or value is None:
        raise RuleViolation(f"{FIELD_LABELS[field]} is required")
    return value


def _trim(field: str, value: Any) -> Any:
    if not isinstance(value, str):
        raise RuleViolation(f"{FIELD_LABELS[field]} must be a string")
    return value.strip()


def _non_blank(field: str, value: Any) -> Any:
    if isinstance(value, str) and not value:
        raise RuleViolation(f"{FIELD_LABELS[field]} is required")
    return value


def _lowercase(field: str, value: Any) -> Any:
    return value.lower()


def _email_format(field: str, value: Any) -> Any:
    if not EMAIL_PATTERN.fullmatch(value):
        raise RuleViolation("Please enter a valid email")
    return value


def _is_text(field: str, value: Any) -> Any:
    if not isinstance(value, str):
        raise RuleViolation(f"{FIELD_LABELS[field]} must be a string")
    return value


def _is_date(field: str, value: Any) -> Any:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise RuleViolation(f"{FIELD_LABELS[field]} must be a valid date (YYYY-MM-DD)")


REQUIRED = Rule("required", _required)
TRIM = Rule("trim", _trim)
NON_BLANK = Rule("non_blank", _non_blank)
LOWERCASE = Rule("lowercase", _lowercase)
EMAIL_FORMAT = Rule("email_format", _email_format)
IS_TEXT = Rule("is_text", _is_text)
IS_DATE = Rule("is_date", _is_date)

CONTACT_RULES: Dict[str, Tuple[Rule, ...]] = {
    "first_name": (REQUIRED, TRIM, NON_BLANK),
    "last_name": (REQUIRED, TRIM, NON_BLANK),
    "email": (REQUIRED, TRIM, NON_BLANK, LOWERCASE, EMAIL_FORMAT),
    "favorite_color": (REQUIRED, IS_TEXT, NON_BLANK),
    "birthday": (REQUIRED, IS_DATE),
}

# Wire name → attribute name ("firstName" → "first_name")
FIELD_ALIASES: Dict[str, str] = {to_camel(name): name for name in CONTACT_RULES}


def check_field(field: str, value: Any) -> Any:
    """Run one field's rule pipeline; return the normalized value or raise RuleViolation."""
    for rule in CONTACT_RULES[field]:
        value = rule(field, value)
    return value


def explain_field(alias: str, value: Any = MISSING) -> Optional[str]:
    """
    Message the rules give for a raw wire value, or None.

    Used when request parsing rejects a body before validate_contact runs
    (missing key, wrong JSON type), so the client still sees the rule
    wording ("First name is required") instead of the parser's.
    Returns None for names that are not contact fields, or when every rule
    accepts the value.
    """
    field = FIELD_ALIASES.get(alias, alias if alias in CONTACT_RULES else None)
    if field is None:
        return None
    try:
        check_field(field, value)
    except RuleViolation as violation:
        return violation.message
    return None


def validate_contact(fields: Mapping[str, Any], partial: bool = False) -> Dict[str, Any]:
    """
    Run the contact rules and return the normalized field values.

    Args:
        fields:  Field values keyed by attribute name (first_name, ...)
        partial: Update mode. Only supplied fields are checked, but a supplied
                 field must still pass every rule (null is not "unset").

    Returns:
        Dict of normalized values for the checked fields.

    Raises:
        ValidationError: Unknown field, any rule violation, or an update
            with no fields. `context["errors"]` maps camelCase field
            names to messages; the exception message is the first one.
    """
    unknown = sorted(set(fields) - set(CONTACT_RULES))
    if unknown:
        names = ", ".join(to_camel(name) for name in unknown)
        raise ValidationError(
            message=f"Unknown field(s): {names}",
            context={"unknown_fields": [to_camel(name) for name in unknown]},
        )

    if partial and not fields:
        raise ValidationError(message="No fields provided to update")

    cleaned: Dict[str, Any] = {}
    errors: List[Tuple[str, str]] = []

    for field in CONTACT_RULES:
        if partial and field not in fields:
            continue
        try:
            cleaned[field] = check_field(field, fields.get(field, MISSING))
        except RuleViolation as violation:
            errors.append((field, violation.message))

    if errors:
        first_field, first_message = errors[0]
        raise ValidationError(
            message=first_message,
            field=to_camel(first_field),
            context={"errors": {to_camel(name): message for name, message in errors}},
        )
    return cleaned
