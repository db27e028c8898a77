"""
Naming helpers tests.

Run with:
    pytest tests/test_naming.py -v
"""

import pytest

from sql2drizzle.utils.naming import (
    NamingCase,
    convert_case,
    is_valid_identifier,
    property_access,
    property_key,
    quote_string,
)


@pytest.mark.parametrize("name, case, expected", [
    ("user_profiles", NamingCase.CAMEL, "userProfiles"),
    ("user_profiles", NamingCase.PASCAL, "UserProfiles"),
    ("user_profiles", NamingCase.SNAKE, "user_profiles"),
    ("user_profiles", NamingCase.KEBAB, "user-profiles"),
    ("first_name", NamingCase.PASCAL, "FirstName"),
    ("users", NamingCase.CAMEL, "users"),
    ("createdAt", NamingCase.CAMEL, "createdAt"),
    ("a__b", NamingCase.CAMEL, "aB"),
    ("_private", NamingCase.PASCAL, "Private"),
])
def test_convert_case(name, case, expected):
    assert convert_case(name, case) == expected


@pytest.mark.parametrize("name, valid", [
    ("users", True),
    ("_tmp", True),
    ("$ref", True),
    ("user2", True),
    ("user-profiles", False),
    ("2fa", False),
    ("package", False),
    ("default", False),
    ("packages", True),
    ("first name", False),
    ("", False),
])
def test_is_valid_identifier(name, valid):
    assert is_valid_identifier(name) is valid


def test_property_key():
    assert property_key("firstName") == "firstName"
    assert property_key("first-name") == "'first-name'"
    assert property_key("class") == "'class'"


def test_property_access():
    assert property_access("users", "id") == "users.id"
    assert property_access("users", "default") == "users['default']"
    assert property_access("users", "user-id") == "users['user-id']"


def test_quote_string_escapes():
    assert quote_string("plain") == "'plain'"
    assert quote_string("it's") == "'it\\'s'"
    assert quote_string("a\\b") == "'a\\\\b'"
    assert quote_string("two\nlines") == "'two\\nlines'"
