from __future__ import annotations

import pytest

from create_sandbox_app.naming import MAX_NAME_LENGTH, validate_project_name


@pytest.mark.parametrize(
    "name",
    ["my-app", "app", "my.app", "my_app", "app2", "@scope/my-app", "a" * MAX_NAME_LENGTH],
)
def test_accepts_registry_legal_names(name: str) -> None:
    result = validate_project_name(name)
    assert result.valid is True
    assert result.problems == ()


def test_reports_every_violated_rule_not_just_the_first() -> None:
    result = validate_project_name("My App")
    assert result.valid is False
    assert result.problems == (
        "name can only contain URL-friendly characters",
        "name can no longer contain capital letters",
    )


def test_empty_name() -> None:
    result = validate_project_name("")
    assert result.valid is False
    assert result.problems == ("name length must be greater than zero",)


def test_leading_period_and_underscore() -> None:
    assert validate_project_name(".app").problems == ("name cannot start with a period",)
    assert validate_project_name("_app").problems == ("name cannot start with an underscore",)


def test_surrounding_whitespace_is_rejected() -> None:
    problems = validate_project_name(" app").problems
    assert "name cannot contain leading or trailing spaces" in problems
    assert "name can only contain URL-friendly characters" in problems


def test_blacklisted_and_core_module_names() -> None:
    assert validate_project_name("node_modules").problems == ("node_modules is a blacklisted name",)
    assert validate_project_name("fs").problems == ("fs is a core module name",)


def test_too_long_name() -> None:
    result = validate_project_name("a" * (MAX_NAME_LENGTH + 1))
    assert result.problems == ("name can no longer contain more than 214 characters",)


def test_special_characters_in_final_segment() -> None:
    result = validate_project_name("app!")
    assert result.valid is False
    assert result.problems == ('name can no longer contain special characters ("~\'!()*")',)


def test_scoped_name_with_unsafe_part_is_rejected() -> None:
    result = validate_project_name("@my scope/app")
    assert "name can only contain URL-friendly characters" in result.problems
