from __future__ import annotations

import pytest

from scaffoldr.naming import clean_project_name, distribution_name, module_name


@pytest.mark.parametrize(
    "value, expected",
    [
        ("My Project", "My Project"),
        ("   My    Project  ", "My Project"),
        ("tabs\tand\nnewlines", "tabs and newlines"),
    ],
)
def test_clean_project_name(value, expected):
    assert clean_project_name(value) == expected


@pytest.mark.parametrize("value", ["", "   ", ".", "..", "a/b", "a\\b"])
def test_clean_project_name_rejects(value):
    with pytest.raises(ValueError):
        clean_project_name(value)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("My Project", "my-project"),
        ("Project! @ 2025", "project-2025"),
        ("Café ☕", "cafe"),
        ("***", "project"),
    ],
)
def test_distribution_name(value, expected):
    assert distribution_name(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("My Project", "my_project"),
        ("123 invalid", "_123_invalid"),
        ("Symbols*&^%", "symbols"),
        ("", "project"),
    ],
)
def test_module_name(value, expected):
    assert module_name(value) == expected
