#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_dependency_checks.py
"""Unit tests for the dependency-checking decorator."""

import asyncio

import pytest

from mdcompose.exceptions import DependencyError
from mdcompose.utils.decorators import requires_dependencies
from mdcompose.utils.packages import check_version_requirement, get_package_version


@pytest.mark.unit
class TestRequiresDependencies:
    """Tests for ``requires_dependencies``."""

    def test_installed_dependency_passes(self):
        """Test that a satisfied requirement runs the function."""

        @requires_dependencies("markdown", [("mistune", "mistune", ">=3.0.0")])
        def parse():
            return "parsed"

        assert parse() == "parsed"

    def test_missing_package(self):
        """Test that a missing package raises DependencyError with install hints."""

        @requires_dependencies("fancy", [("no-such-dist", "no_such_module_xyz", ">=1.0")])
        def run():
            return None

        with pytest.raises(DependencyError) as exc_info:
            run()
        error = exc_info.value
        assert error.component_name == "fancy"
        assert error.missing_packages == [("no-such-dist", ">=1.0")]
        assert "pip install --upgrade" in str(error)

    def test_version_mismatch(self):
        """Test that an unmet version requirement raises DependencyError."""

        @requires_dependencies("pdf_render", [("reportlab", "reportlab", ">=999.0")])
        def write():
            return None

        with pytest.raises(DependencyError) as exc_info:
            write()
        assert exc_info.value.version_mismatches[0][:2] == ("reportlab", ">=999.0")

    def test_coroutine_checked_when_awaited(self):
        """Test that coroutine functions are checked when awaited, not when called."""

        @requires_dependencies("network", [("no-such-dist", "no_such_module_xyz", "")])
        async def fetch():
            return b""

        coroutine = fetch()
        with pytest.raises(DependencyError):
            asyncio.run(coroutine)


@pytest.mark.unit
class TestPackageVersions:
    """Tests for version lookups."""

    def test_installed_version(self):
        """Test that an installed distribution reports a version."""
        assert get_package_version("httpx") is not None

    def test_missing_distribution(self):
        """Test that an unknown distribution has no version."""
        assert get_package_version("no-such-dist-xyz") is None
        assert check_version_requirement("no-such-dist-xyz", ">=1") == (False, None)

    def test_invalid_specifier(self):
        """Test that an invalid specifier never passes."""
        meets, installed = check_version_requirement("httpx", "not a spec")
        assert meets is False
        assert installed is not None
