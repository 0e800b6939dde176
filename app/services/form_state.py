"""
Row edits the registration form applies to a raw record.

Each helper returns an edited copy and leaves its input untouched; the caller
re-validates the copy and decides whether to keep it.
"""

from __future__ import annotations

import copy
from typing import Any

from app.schemas.defaults import (
    DEFAULT_STREET_NUMBER,
    blank_address_entry,
    blank_phone_entry,
)

Record = dict[str, Any]


def _edit(record: Record) -> Record:
    edited = copy.deepcopy(record)
    edited.setdefault("phoneNumbers", [])
    edited.setdefault("addresses", [])
    return edited


def add_phone_row(record: Record) -> Record:
    """Append a blank phone; the first phone of an empty list becomes main."""
    edited = _edit(record)
    phones = edited["phoneNumbers"]
    phones.append(blank_phone_entry(is_main=not phones))
    return edited


def remove_phone_row(record: Record, index: int) -> Record:
    """
    Drop one phone row.

    Removing the main phone promotes the new first row, unless another row is
    already marked main.
    """
    edited = _edit(record)
    phones = edited["phoneNumbers"]
    removed = phones.pop(index)

    if removed.get("isMain") and phones and not any(p.get("isMain") for p in phones):
        phones[0]["isMain"] = True
    return edited


def select_main_phone(record: Record, index: int) -> Record:
    """Mark one phone as main and clear the flag everywhere else."""
    edited = _edit(record)
    phones = edited["phoneNumbers"]
    if not -len(phones) <= index < len(phones):
        raise IndexError(f"No phone row at index {index}")

    selected = phones[index]
    for phone in phones:
        phone["isMain"] = phone is selected
    return edited


def add_address_row(record: Record) -> Record:
    edited = _edit(record)
    edited["addresses"].append(blank_address_entry())
    return edited


def remove_address_row(record: Record, index: int) -> Record:
    edited = _edit(record)
    edited["addresses"].pop(index)
    return edited


def select_city(record: Record, index: int, city_code: str, city_name: str) -> Record:
    """Pick a city for an address; the street chosen for the old city no longer applies."""
    edited = _edit(record)
    address = edited["addresses"][index]
    address.update(
        cityCode=city_code,
        cityName=city_name,
        streetCode="",
        streetName="",
        streetNumber=DEFAULT_STREET_NUMBER,
    )
    return edited


def select_street(record: Record, index: int, street_code: str, street_name: str) -> Record:
    edited = _edit(record)
    edited["addresses"][index].update(streetCode=street_code, streetName=street_name)
    return edited
