"""Blank values the form starts from and appends when a row is added."""

from __future__ import annotations

from typing import Any

from app.schemas.patient import HMO, AddressType, PhoneType

DEFAULT_STREET_NUMBER = 1

DEFAULT_PHONE_ENTRY: dict[str, Any] = {
    "type": PhoneType.MOBILE.value,
    "number": "",
    "isMain": False,
}

DEFAULT_ADDRESS_ENTRY: dict[str, Any] = {
    "cityCode": "",
    "cityName": "",
    "streetCode": "",
    "streetName": "",
    "streetNumber": DEFAULT_STREET_NUMBER,
    "addressType": AddressType.HOME.value,
    "comments": "",
}


def blank_phone_entry(*, is_main: bool = False) -> dict[str, Any]:
    return {**DEFAULT_PHONE_ENTRY, "isMain": is_main}


def blank_address_entry() -> dict[str, Any]:
    return dict(DEFAULT_ADDRESS_ENTRY)


def blank_patient() -> dict[str, Any]:
    """A fresh form: one main mobile phone, one home address, first HMO."""
    return {
        "id": "",
        "firstName": "",
        "lastName": "",
        "hmo": HMO.CLALIT.value,
        "phoneNumbers": [blank_phone_entry(is_main=True)],
        "addresses": [blank_address_entry()],
    }
