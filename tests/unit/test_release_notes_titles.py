"""Unit tests for package title formatting."""

import pytest

from changeset_release.release_notes.titles import format_package_title


@pytest.mark.parametrize(
    "package_name,expected",
    [
        ("@backstage/plugin-catalog", "Catalog"),
        ("@backstage/plugin-tech-docs", "Tech Docs"),
        ("@backstage/plugin-SEARCH-backend", "Search Backend"),
        ("pkg-a", "A"),
        ("standalone", "standalone"),
        ("@scope/name-", "@scope/name-"),
    ],
)
def test_format_package_title(package_name: str, expected: str) -> None:
    """Test title formatting for scoped, plain and dash-less names."""
    assert format_package_title(package_name) == expected
