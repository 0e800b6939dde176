"""Tests for patient record validation – field errors, coercion and the main-phone rule."""

import copy

import pytest

from app.schemas.patient import HMO, PatientRecord
from app.services.validation import (
    MAIN_PHONE_DUPLICATE,
    MAIN_PHONE_MISSING,
    check_main_phone,
    validate_patient,
)


def _make_patient(**overrides):
    record = {
        "id": "123456782",
        "firstName": "  Dana ",
        "lastName": "Levi",
        "hmo": "Maccabi",
        "phoneNumbers": [
            {"type": "Mobile", "number": "050-123-4567", "isMain": True},
            {"type": "Home", "number": "02-1234567"},
        ],
        "addresses": [
            {
                "cityCode": "5000",
                "cityName": "תל אביב - יפו",
                "streetCode": "101",
                "streetName": "דיזנגוף",
                "streetNumber": "12",
                "addressType": "Home",
                "comments": "",
            }
        ],
    }
    record.update(overrides)
    return record


def _address(**overrides):
    return {**_make_patient()["addresses"][0], **overrides}


def test_valid_patient_is_normalized():
    raw = _make_patient()
    result = validate_patient(raw)

    assert result.is_valid
    assert result.errors == {}
    assert isinstance(result.record, PatientRecord)
    assert result.record.firstName == "Dana"
    assert result.record.hmo is HMO.MACCABI
    assert result.record.addresses[0].streetNumber == 12
    assert result.record.phoneNumbers[1].isMain is False


def test_validation_does_not_mutate_input():
    raw = _make_patient()
    snapshot = copy.deepcopy(raw)
    validate_patient(raw)
    assert raw == snapshot


def test_normalized_record_validates_again_unchanged():
    first = validate_patient(_make_patient())
    second = validate_patient(first.record.model_dump(mode="json"))

    assert second.is_valid
    assert second.record == first.record


def test_missing_fields_are_all_reported():
    result = validate_patient({})

    assert not result.is_valid
    assert result.record is None
    assert result.errors["id"] == ["ID must be exactly 9 digits"]
    assert result.errors["firstName"] == ["First name is required"]
    assert result.errors["lastName"] == ["Last name is required"]
    assert result.errors["hmo"] == ["HMO is required"]
    assert result.errors["phoneNumbers"] == ["At least one phone number is required"]
    assert result.errors["addresses"] == ["At least one address is required"]


def test_non_object_payload():
    result = validate_patient(["not", "a", "record"])
    assert result.errors == {"": ["Patient record must be an object"]}


def test_identifier_checksum_failure():
    result = validate_patient(_make_patient(id="123456789"))
    assert result.errors == {"id": ["Invalid Israeli ID number"]}


def test_identifier_wrong_length_reports_both_messages():
    result = validate_patient(_make_patient(id="12345"))
    assert "ID must be exactly 9 digits" in result.errors["id"]
    assert "Invalid Israeli ID number" in result.errors["id"]


def test_blank_names_fail_after_trimming():
    result = validate_patient(_make_patient(firstName="   ", lastName=""))
    assert result.errors == {
        "firstName": ["First name is required"],
        "lastName": ["Last name is required"],
    }


def test_unknown_hmo():
    result = validate_patient(_make_patient(hmo="Kupat"))
    assert result.errors["hmo"] == ["HMO must be one of: Clalit, Maccabi, Mehuedet, Leumit"]


def test_phone_entry_errors_are_scoped_to_the_row():
    phones = [
        {"type": "Mobile", "number": "050-123-4567", "isMain": True},
        {"type": "Pager", "number": "1234567", "isMain": False},
    ]
    result = validate_patient(_make_patient(phoneNumbers=phones))

    assert result.errors == {
        "phoneNumbers[1].type": ["Phone type must be one of: Home, Mobile, Work, Other"],
        "phoneNumbers[1].number": ["Invalid Israeli phone number format"],
    }


def test_empty_phone_number():
    phones = [{"type": "Mobile", "number": "", "isMain": True}]
    result = validate_patient(_make_patient(phoneNumbers=phones))
    assert "Phone number is required" in result.errors["phoneNumbers[0].number"]


@pytest.mark.parametrize(
    "street_number, message",
    [
        ("abc", "Street number must be a number"),
        (None, "Street number must be positive"),
        ("3.5", "Street number must be a whole number"),
        ("0", "Street number must be positive"),
        ("", "Street number must be positive"),
        (-4, "Street number must be positive"),
    ],
)
def test_street_number_coercion_and_range(street_number, message):
    addresses = [_address(streetNumber=street_number)]
    result = validate_patient(_make_patient(addresses=addresses))
    assert message in result.errors["addresses[0].streetNumber"]


def test_absent_street_number_is_not_a_number():
    address = _address()
    del address["streetNumber"]
    result = validate_patient(_make_patient(addresses=[address]))
    assert result.errors == {"addresses[0].streetNumber": ["Street number must be a number"]}


def test_integral_float_street_number_is_accepted():
    result = validate_patient(_make_patient(addresses=[_address(streetNumber=7.0)]))
    assert result.is_valid
    assert result.record.addresses[0].streetNumber == 7


def test_comments_limit():
    addresses = [_address(comments="x" * 501), _address(comments="x" * 500)]
    result = validate_patient(_make_patient(addresses=addresses))
    assert result.errors == {"addresses[0].comments": ["Comments too long"]}


def test_null_comments_are_treated_as_absent():
    result = validate_patient(_make_patient(addresses=[_address(comments=None)]))
    assert result.is_valid
    assert result.record.addresses[0].comments is None
    assert "comments" not in result.record.to_payload()["addresses"][0]


def test_address_selection_required():
    addresses = [_address(cityCode="", streetCode="", streetName="")]
    result = validate_patient(_make_patient(addresses=addresses))
    assert result.errors == {
        "addresses[0].cityCode": ["City selection is required"],
        "addresses[0].streetCode": ["Street selection is required"],
        "addresses[0].streetName": ["Street name is required"],
    }


def test_empty_collections_always_error():
    result = validate_patient(_make_patient(phoneNumbers=[], addresses=[]))

    assert result.errors["phoneNumbers"] == [
        "At least one phone number is required",
        MAIN_PHONE_MISSING,
    ]
    assert result.errors["addresses"] == ["At least one address is required"]


def test_no_main_phone_is_a_collection_error():
    phones = [
        {"type": "Mobile", "number": "050-123-4567", "isMain": False},
        {"type": "Home", "number": "02-1234567", "isMain": False},
    ]
    result = validate_patient(_make_patient(phoneNumbers=phones))
    assert result.errors == {"phoneNumbers": [MAIN_PHONE_MISSING]}


def test_every_extra_main_phone_is_flagged():
    phones = [
        {"type": "Mobile", "number": "050-123-4567", "isMain": True},
        {"type": "Home", "number": "02-1234567", "isMain": False},
        {"type": "Work", "number": "03-1234567", "isMain": True},
    ]
    result = validate_patient(_make_patient(phoneNumbers=phones))
    assert result.errors == {
        "phoneNumbers[0].isMain": [MAIN_PHONE_DUPLICATE],
        "phoneNumbers[2].isMain": [MAIN_PHONE_DUPLICATE],
    }


@pytest.mark.parametrize(
    "flags, expected",
    [
        ([False, False], {"phoneNumbers": [MAIN_PHONE_MISSING]}),
        (
            [True, True],
            {
                "phoneNumbers[0].isMain": [MAIN_PHONE_DUPLICATE],
                "phoneNumbers[1].isMain": [MAIN_PHONE_DUPLICATE],
            },
        ),
        ([True, False], {}),
    ],
)
def test_main_phone_rule(flags, expected):
    assert check_main_phone([{"isMain": flag} for flag in flags]) == expected


def test_main_phone_rule_runs_alongside_entry_errors():
    phones = [
        {"type": "Mobile", "number": "bad", "isMain": False},
        {"type": "Home", "number": "02-1234567", "isMain": False},
    ]
    result = validate_patient(_make_patient(phoneNumbers=phones))
    assert result.errors["phoneNumbers"] == [MAIN_PHONE_MISSING]
    assert result.errors["phoneNumbers[0].number"] == ["Invalid Israeli phone number format"]


def test_errors_for_one_row():
    addresses = [_address(), _address(streetNumber="0", cityName="")]
    result = validate_patient(_make_patient(id="123", addresses=addresses))

    row = result.errors_for("addresses[1]")
    assert set(row) == {"addresses[1].streetNumber", "addresses[1].cityName"}
    assert result.errors_for("addresses[0]") == {}
    assert set(result.errors_for("id")) == {"id"}
