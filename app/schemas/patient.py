"""
Patient registration record: enumerations, constraint schema, normalized model.

The constraint set is a JSON schema (draft 7). Each property may carry a
non-standard ``messages`` mapping from a JSON-schema keyword to the
human-readable text shown next to the form field; validators ignore unknown
keywords, so the schema stays valid for any draft-7 implementation.

Two custom formats are used and registered by the validation service:
``israeli-id`` (identifier checksum) and ``domestic-phone``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class HMO(str, Enum):
    CLALIT = "Clalit"
    MACCABI = "Maccabi"
    MEHUEDET = "Mehuedet"
    LEUMIT = "Leumit"


class PhoneType(str, Enum):
    HOME = "Home"
    MOBILE = "Mobile"
    WORK = "Work"
    OTHER = "Other"


class AddressType(str, Enum):
    HOME = "Home"
    WORK = "Work"
    OTHER = "Other"


COMMENTS_MAX_LENGTH = 500


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


def _required_text(label: str) -> dict[str, Any]:
    """Non-empty string property whose every failure reads '<label> is required'."""
    text = f"{label} is required"
    return {
        "type": "string",
        "minLength": 1,
        "messages": {"required": text, "type": text, "minLength": text},
    }


def _choice(enum_cls: type[Enum], label: str) -> dict[str, Any]:
    values = _enum_values(enum_cls)
    return {
        "type": "string",
        "enum": values,
        "messages": {
            "required": f"{label} is required",
            "type": f"{label} is required",
            "enum": f"{label} must be one of: {', '.join(values)}",
        },
    }


PHONE_ENTRY_SCHEMA: dict = {
    "type": "object",
    "required": ["type", "number", "isMain"],
    "properties": {
        "type": _choice(PhoneType, "Phone type"),
        "number": {
            "type": "string",
            "minLength": 1,
            "format": "domestic-phone",
            "messages": {
                "required": "Phone number is required",
                "type": "Phone number is required",
                "minLength": "Phone number is required",
                "format": "Invalid Israeli phone number format",
            },
        },
        "isMain": {
            "type": "boolean",
            "messages": {"type": "Main phone flag must be true or false"},
        },
    },
    "messages": {"type": "Phone entry must be an object"},
}


ADDRESS_ENTRY_SCHEMA: dict = {
    "type": "object",
    "required": [
        "cityCode",
        "cityName",
        "streetCode",
        "streetName",
        "streetNumber",
        "addressType",
    ],
    "properties": {
        "cityCode": {
            "type": "string",
            "minLength": 1,
            "messages": dict.fromkeys(
                ("required", "type", "minLength"), "City selection is required"
            ),
        },
        "cityName": _required_text("City name"),
        "streetCode": {
            "type": "string",
            "minLength": 1,
            "messages": dict.fromkeys(
                ("required", "type", "minLength"), "Street selection is required"
            ),
        },
        "streetName": _required_text("Street name"),
        "streetNumber": {
            "type": "number",
            "multipleOf": 1,
            "exclusiveMinimum": 0,
            "messages": {
                "required": "Street number must be a number",
                "type": "Street number must be a number",
                "multipleOf": "Street number must be a whole number",
                "exclusiveMinimum": "Street number must be positive",
            },
        },
        "addressType": _choice(AddressType, "Address type"),
        "comments": {
            "type": "string",
            "maxLength": COMMENTS_MAX_LENGTH,
            "messages": {
                "type": "Comments must be text",
                "maxLength": "Comments too long",
            },
        },
    },
    "messages": {"type": "Address entry must be an object"},
}


PATIENT_SCHEMA: dict = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Patient registration",
    "description": "Identity, contact and address data collected by the registration form.",
    "type": "object",
    "required": ["id", "firstName", "lastName", "hmo", "phoneNumbers", "addresses"],
    "properties": {
        "id": {
            "type": "string",
            "minLength": 9,
            "maxLength": 9,
            "format": "israeli-id",
            "messages": {
                "required": "ID must be exactly 9 digits",
                "type": "ID must be exactly 9 digits",
                "minLength": "ID must be exactly 9 digits",
                "maxLength": "ID must be exactly 9 digits",
                "format": "Invalid Israeli ID number",
            },
        },
        "firstName": _required_text("First name"),
        "lastName": _required_text("Last name"),
        "hmo": _choice(HMO, "HMO"),
        "phoneNumbers": {
            "type": "array",
            "minItems": 1,
            "items": PHONE_ENTRY_SCHEMA,
            "messages": dict.fromkeys(
                ("required", "type", "minItems"), "At least one phone number is required"
            ),
        },
        "addresses": {
            "type": "array",
            "minItems": 1,
            "items": ADDRESS_ENTRY_SCHEMA,
            "messages": dict.fromkeys(
                ("required", "type", "minItems"), "At least one address is required"
            ),
        },
    },
    "messages": {"type": "Patient record must be an object"},
}


# ---------------------------------------------------------------------------
# Normalized record – only built from input that passed validation
# ---------------------------------------------------------------------------

class PhoneEntry(BaseModel):
    type: PhoneType
    number: str
    isMain: bool = False


class AddressEntry(BaseModel):
    cityCode: str
    cityName: str
    streetCode: str
    streetName: str
    streetNumber: int
    addressType: AddressType
    comments: str | None = None


class PatientRecord(BaseModel):
    """A registration that satisfied every field and cross-field rule."""
    id: str
    firstName: str
    lastName: str
    hmo: HMO
    phoneNumbers: list[PhoneEntry] = Field(..., min_length=1)
    addresses: list[AddressEntry] = Field(..., min_length=1)

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict in the same shape the form submitted."""
        return self.model_dump(mode="json", exclude_none=True)
