"""Unit tests for the content type registry and field validation."""

import pytest

from quill.content_types import (
    CONTENT_TYPES,
    FieldDefinition,
    FieldValidation,
    get_content_type,
    get_nav_content_types,
    is_empty,
    validate_field,
    validate_fields,
)


def test_builtin_types():
    assert set(CONTENT_TYPES) == {
        "homepage", "portfolio", "services", "team",
        "projects", "clients", "testimonials", "blogs",
    }


def test_get_content_type():
    team = get_content_type("team")

    assert team.label == "Team"
    assert team.singular == "Team Member"
    assert team.get_field("location").type == "text"
    assert team.get_field("nope") is None
    assert get_content_type("unknown") is None


def test_nav_types_are_flagged():
    nav = get_nav_content_types()
    assert nav
    assert all(ct.show_in_nav for ct in nav)


def test_nested_item_fields():
    testimonials = get_content_type("homepage").get_field("testimonials")
    assert [f.name for f in testimonials.item_fields] == ["name", "company", "quote", "avatar"]


@pytest.mark.parametrize("value", [None, "", "   ", [], {}])
def test_is_empty(value):
    assert is_empty(value)


@pytest.mark.parametrize("value", [0, False, "x", [1]])
def test_is_not_empty(value):
    assert not is_empty(value)


class TestValidateField:

    def test_required(self):
        field = FieldDefinition(name="name", label="Full Name", type="text", required=True)

        assert validate_field("", field) == "Full Name is required"
        assert validate_field(None, field) == "Full Name is required"
        assert validate_field("", field, check_required=False) is None
        assert validate_field("Ann", field) is None

    def test_number_range(self):
        rating = get_content_type("testimonials").get_field("rating")

        assert validate_field(0, rating) == "Rating must be at least 1"
        assert validate_field(6, rating) == "Rating must be at most 5"
        assert validate_field(4, rating) is None
        assert validate_field(4.5, rating) is None

    def test_number_type(self):
        year = get_content_type("portfolio").get_field("year")

        assert validate_field("2020", year) == "Project Year must be a number"
        assert validate_field(True, year) == "Project Year must be a number"
        assert validate_field(2020, year) is None

    def test_select_options(self):
        status = get_content_type("projects").get_field("status")

        assert validate_field("ongoing", status) is None
        assert "must be one of" in validate_field("cancelled", status)

    def test_pattern(self):
        field = FieldDefinition(
            name="code",
            label="Code",
            type="text",
            validation=FieldValidation(pattern=r"[A-Z]{3}-\d+"),
        )

        assert validate_field("ABC-12", field) is None
        assert validate_field("abc-12", field) == "Code has an invalid format"

    def test_boolean(self):
        featured = get_content_type("services").get_field("featured_homepage")

        assert validate_field(True, featured) is None
        assert validate_field("yes", featured) == "Featured on Homepage must be true or false"


class TestValidateFields:

    def test_unknown_type_is_not_validated(self):
        assert validate_fields("widgets", [{"key": "anything", "value": -1}]) == []

    def test_missing_required_fields(self):
        errors = validate_fields("team", [{"key": "name", "value": "Ann"}])
        assert errors == ["Position/Role is required"]

    def test_required_skipped_for_drafts(self):
        assert validate_fields("team", [], check_required=False) == []

    def test_present_values_checked_for_drafts(self):
        errors = validate_fields(
            "testimonials", [{"key": "rating", "value": 9}], check_required=False
        )
        assert errors == ["Rating must be at most 5"]

    def test_unknown_keys_ignored(self):
        fields = [
            {"key": "company_name", "value": "Acme"},
            {"key": "extra", "value": 123},
        ]
        assert validate_fields("clients", fields) == []
