"""Tests for email and phone format checks."""

import pytest
from identity.shared.email import is_valid_email
from identity.shared.phone import is_valid_phone


class TestEmail:
    @pytest.mark.parametrize("email", ["alice@example.com", "a.b+tag@mail.example.org"])
    def test_valid(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize(
        "email",
        ["", "alice", "alice@", "@example.com", "alice@example", "a@@example.com", "al ice@example.com", "a..b@x.com"],
    )
    def test_invalid(self, email):
        assert not is_valid_email(email)


class TestPhone:
    @pytest.mark.parametrize("number", ["+5511999999999", "(11) 99999-9999", "555 0123"])
    def test_valid(self, number):
        assert is_valid_phone(number)

    @pytest.mark.parametrize("number", ["", "phone", "+", "12a34"])
    def test_invalid(self, number):
        assert not is_valid_phone(number)
