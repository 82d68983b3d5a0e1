"""
Validation of form values against merged field constraints.

Inline field flags (``required``, ``min``, ``max``, ``pattern``, ``email``)
are merged into the named rule for the field; the named rule wins wherever
both set a constraint.

Checks run in a fixed order and stop at the first failure:
1. Required
2. String length (minLen / maxLen)
3. Numeric range (min / max)
4. Pattern (regex)
5. Email shape
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from dynaform.config.settings import EngineSettings, get_settings
from dynaform.schemas.form_spec import FieldSpec, FormSpec, ValidationRule
from dynaform.utils.coercion import is_sequence, to_number
from dynaform.utils.number_parsing import format_number

logger = logging.getLogger(__name__)


@dataclass
class ValidationReport:
    """Per-field validation outcome.

    ``errors`` has one entry per field of the form; the value is the
    message of the first failing check, or None when the field is valid.
    """

    errors: Dict[str, Optional[str]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not any(self.errors.values())

    @property
    def failed_fields(self) -> List[str]:
        return [key for key, message in self.errors.items() if message]

    def error_for(self, key: str) -> Optional[str]:
        return self.errors.get(key)


def is_missing(value: Any) -> bool:
    """None, a blank string, or an empty sequence."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if is_sequence(value):
        return len(value) == 0
    return False


def validate_field(
    field_spec: FieldSpec,
    rules: Optional[Mapping[str, ValidationRule]],
    value: Any,
    settings: Optional[EngineSettings] = None,
) -> Optional[str]:
    """
    Validate a single field value.

    Args:
        field_spec: The field being validated
        rules: Named validation rules keyed by field key (may be None)
        value: The field's current value
        settings: Message templates and email pattern (defaults if None)

    Returns:
        Error message for the first failing check, or None if valid
    """
    settings = settings or get_settings()
    messages = settings.messages

    named = (rules or {}).get(field_spec.key) or ValidationRule()
    rule = named.merged_with_field(field_spec)

    # Required
    if rule.required and is_missing(value):
        return messages.required

    # Length
    if isinstance(value, str):
        if rule.min_len is not None and len(value) < rule.min_len:
            return messages.min_len.format(n=rule.min_len)
        if rule.max_len is not None and len(value) > rule.max_len:
            return messages.max_len.format(n=rule.max_len)

    # Numeric
    number = to_number(value)
    if number is not None:
        if rule.min is not None and number < rule.min:
            return messages.min_value.format(n=format_number(rule.min))
        if rule.max is not None and number > rule.max:
            return messages.max_value.format(n=format_number(rule.max))

    # Regex
    if rule.regex and rule.regex.strip() and isinstance(value, str):
        if not re.search(rule.regex, value):
            return messages.invalid_format

    # Email
    if rule.email and isinstance(value, str) and value:
        if not re.match(settings.email_pattern, value):
            return messages.invalid_email

    return None


def validate_all(
    spec: FormSpec,
    model: Mapping[str, Any],
    settings: Optional[EngineSettings] = None,
) -> ValidationReport:
    """
    Validate every field of a form against the current values.

    Args:
        spec: Parsed form with fields and named validation rules
        model: Current values keyed by field key

    Returns:
        ValidationReport with one entry per field
    """
    settings = settings or get_settings()
    report = ValidationReport()

    for f in spec.fields:
        report.errors[f.key] = validate_field(f, spec.validation, model.get(f.key), settings)

    if not report.ok:
        logger.debug(f"Validation failed for fields: {', '.join(report.failed_fields)}")
    return report
