"""
Patient record validation.

Runs in three passes over a raw form payload and never raises:
- coercion (trim names, default ``isMain``, numeric street numbers)
- JSON-schema constraints, collecting every error rather than the first one
- the main-phone rule, which needs the whole ``phoneNumbers`` collection

Errors are keyed by field path, e.g. ``phoneNumbers[2].number``, so the form
can annotate every invalid field at once.
"""

from __future__ import annotations

import copy
import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

import jsonschema

from app.schemas.patient import PATIENT_SCHEMA, PatientRecord
from app.services.validators import is_valid_domestic_phone, is_valid_identifier

logger = logging.getLogger(__name__)

ValidationErrors = dict[str, list[str]]

MAIN_PHONE_MISSING = "One phone number must be marked as main."
MAIN_PHONE_DUPLICATE = "Only one phone can be main."

format_checker = jsonschema.FormatChecker()


# Type errors are reported by the schema itself, so formats only judge strings.
@format_checker.checks("israeli-id")
def _check_identifier(instance: Any) -> bool:
    return not isinstance(instance, str) or is_valid_identifier(instance)


@format_checker.checks("domestic-phone")
def _check_phone(instance: Any) -> bool:
    return not isinstance(instance, str) or is_valid_domestic_phone(instance)


@dataclass(frozen=True)
class ValidationResult:
    """Either a normalized record or the complete set of field errors."""

    record: PatientRecord | None
    errors: ValidationErrors = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def errors_for(self, prefix: str) -> ValidationErrors:
        """Errors for one field or row, e.g. ``addresses[0]`` on blur."""
        return {
            path: messages
            for path, messages in self.errors.items()
            if path == prefix or path.startswith((f"{prefix}.", f"{prefix}["))
        }


def format_path(parts: Iterable[str | int]) -> str:
    path = ""
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else part
    return path


def add_error(errors: ValidationErrors, path: str, message: str) -> None:
    messages = errors.setdefault(path, [])
    if message not in messages:
        messages.append(message)


def merge_errors(target: ValidationErrors, other: ValidationErrors) -> None:
    for path, messages in other.items():
        for message in messages:
            add_error(target, path, message)


def validate_against_schema(data: Any, schema: dict[str, Any]) -> ValidationErrors:
    """
    Validate ``data`` against a draft-7 JSON schema.
    Returns errors keyed by field path (empty dict = valid).

    Messages come from the failing property's ``messages`` mapping when it has
    one for the failing keyword, otherwise from jsonschema.
    """
    validator = jsonschema.Draft7Validator(schema, format_checker=format_checker)
    errors: ValidationErrors = {}

    for error in validator.iter_errors(data):
        parts = list(error.absolute_path)

        if error.validator == "required":
            # Attach to the missing property itself, not to its parent object.
            properties = error.schema.get("properties", {})
            for name in error.validator_value:
                if name in error.instance:
                    continue
                messages = properties.get(name, {}).get("messages", {})
                add_error(
                    errors,
                    format_path([*parts, name]),
                    messages.get("required", f"{name} is required"),
                )
            continue

        messages = error.schema.get("messages", {})
        add_error(errors, format_path(parts), messages.get(error.validator, error.message))

    return errors


def _coerce_street_number(value: Any) -> Any:
    if value is None:
        return 0
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            value = float(text)
        except ValueError:
            return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return str(value)
        if value.is_integer():
            return int(value)
    return value


def _coerce_phone(entry: Any) -> Any:
    if isinstance(entry, dict):
        entry.setdefault("isMain", False)
    return entry


def _coerce_address(entry: Any) -> Any:
    if isinstance(entry, dict):
        if "streetNumber" in entry:
            entry["streetNumber"] = _coerce_street_number(entry["streetNumber"])
        if entry.get("comments", "") is None:
            del entry["comments"]
    return entry


def coerce_record(raw: Any) -> Any:
    """Apply input coercions to a copy of ``raw``; shapes it cannot coerce are left for the schema to reject."""
    if not isinstance(raw, dict):
        return raw
    data = copy.deepcopy(raw)

    for name in ("firstName", "lastName"):
        if isinstance(data.get(name), str):
            data[name] = data[name].strip()

    if isinstance(data.get("phoneNumbers"), list):
        data["phoneNumbers"] = [_coerce_phone(p) for p in data["phoneNumbers"]]
    if isinstance(data.get("addresses"), list):
        data["addresses"] = [_coerce_address(a) for a in data["addresses"]]
    return data


def check_main_phone(phones: Any, path: str = "phoneNumbers") -> ValidationErrors:
    """
    Exactly one phone must be main.

    None marked -> one error on the collection itself.
    Several marked -> one error on each marked entry; no winner is picked.
    """
    if not isinstance(phones, list):
        return {}

    main_indexes = [
        index
        for index, phone in enumerate(phones)
        if isinstance(phone, dict) and phone.get("isMain") is True
    ]
    errors: ValidationErrors = {}
    if not main_indexes:
        add_error(errors, path, MAIN_PHONE_MISSING)
    elif len(main_indexes) > 1:
        for index in main_indexes:
            add_error(errors, f"{path}[{index}].isMain", MAIN_PHONE_DUPLICATE)
    return errors


def validate_patient(raw: Any) -> ValidationResult:
    """Validate a raw registration payload; the record is only set when there are no errors."""
    data = coerce_record(raw)

    errors = validate_against_schema(data, PATIENT_SCHEMA)
    if isinstance(data, dict):
        merge_errors(errors, check_main_phone(data.get("phoneNumbers")))

    if errors:
        logger.debug("Patient record rejected: %d invalid field(s)", len(errors))
        return ValidationResult(record=None, errors=errors)

    return ValidationResult(record=PatientRecord.model_validate(data))
