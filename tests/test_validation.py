"""Unit tests for request validators."""

import base64

import pytest
from sqlalchemy.orm import Session

from app.validation import (
    decode_image,
    validate_email_address,
    validate_image,
    validate_password,
    validate_registration,
    validate_user_update,
    validate_username,
)
from conftest import add_user

TWO_MB = 2 * 1024 * 1024


class TestUsername:
    @pytest.mark.parametrize("value", [None, "", "    "])
    def test_missing(self, value):
        assert validate_username(value) == "username_null"

    @pytest.mark.parametrize("value", ["   ab   ", " usr "])
    def test_length_ignores_surrounding_whitespace(self, value):
        assert validate_username(value) == "username_size"

    @pytest.mark.parametrize("value", ["usr", "a" * 33])
    def test_out_of_range(self, value):
        assert validate_username(value) == "username_size"

    @pytest.mark.parametrize("value", ["user", "a" * 32])
    def test_boundaries_pass(self, value):
        assert validate_username(value) is None


class TestEmail:
    def test_missing(self):
        assert validate_email_address(None) == "email_null"

    @pytest.mark.parametrize("value", ["mail.com", "user.mail.com", "user@", "@mail.com"])
    def test_bad_shape(self, value):
        assert validate_email_address(value) == "email_invalid"

    def test_valid(self):
        assert validate_email_address("user1@mail.com") is None


class TestPassword:
    @pytest.mark.parametrize(
        "value,key",
        [
            (None, "password_null"),
            ("", "password_null"),
            ("P4ssw0r", "password_size"),
            ("password1", "password_pattern"),
            ("PASSWORD1", "password_pattern"),
            ("Passwords", "password_pattern"),
        ],
    )
    def test_rejected(self, value, key):
        assert validate_password(value) == key

    def test_minimum_compliant_password(self):
        assert validate_password("P4ssword") is None

    def test_longest_accepted_password(self):
        assert validate_password("P4ss" + "w" * 68) is None

    @pytest.mark.parametrize("value", ["P4ss" + "w" * 69, "P4ss" + "w" * 80, "P4ssword" + "\u00e9" * 33])
    def test_over_72_bytes_is_rejected(self, value):
        assert validate_password(value) == "password_too_long"


class TestImage:
    def test_absent_image_is_fine(self):
        assert validate_image(None) is None

    def test_exactly_two_mb(self):
        assert validate_image(base64.b64encode(b"a" * TWO_MB).decode()) is None

    def test_one_byte_over_two_mb(self):
        assert validate_image(base64.b64encode(b"a" * (TWO_MB + 1)).decode()) == "profile_image_size"

    def test_not_base64(self):
        assert validate_image("%%%") == "profile_image_invalid"

    def test_decode_strips_data_uri(self):
        assert decode_image("data:image/png;base64," + base64.b64encode(b"png").decode()) == b"png"

    def test_decode_rejects_garbage(self):
        with pytest.raises(ValueError):
            decode_image("not base64!")


class TestComposite:
    def test_registration_reports_every_field(self, db_session: Session):
        errors = validate_registration(db_session, "usr", "bad", "weak")
        assert errors == {"username": "username_size", "email": "email_invalid", "password": "password_size"}

    def test_registration_email_in_use(self, db_session: Session):
        add_user(db_session)
        errors = validate_registration(db_session, "user2", "user1@mail.com", "P4ssword")
        assert errors == {"email": "email_inuse"}

    def test_registration_valid(self, db_session: Session):
        assert validate_registration(db_session, "user1", "user1@mail.com", "P4ssword") == {}

    def test_update_reports_username_and_image(self):
        errors = validate_user_update(None, base64.b64encode(b"a" * (TWO_MB + 1)).decode())
        assert errors == {"username": "username_null", "image": "profile_image_size"}
