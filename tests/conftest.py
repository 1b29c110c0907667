"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable, Iterator

import pytest
from aioresponses import aioresponses
from bumpctl.core.config import BotConfig
from bumpctl.models.package import PackageDescriptor, RegistryRecord


@pytest.fixture
def make_package() -> Callable[..., PackageDescriptor]:
    """Factory for descriptors enriched with registry data."""

    def _make(
        name: str = "lodash",
        current: str = "4.17.20",
        latest: str | None = "4.17.21",
        versions: list[str] | None = None,
        repository: str | None = "git+https://github.com/lodash/lodash.git",
    ) -> PackageDescriptor:
        package = PackageDescriptor.parse(f"{name}@npm:{current}")
        if latest is not None:
            package.apply_lookup(
                RegistryRecord.model_validate(
                    {
                        "name": name,
                        "version": latest,
                        "versions": versions if versions is not None else [current, latest],
                        "repository": {"type": "git", "url": repository} if repository else None,
                    }
                )
            )
        return package

    return _make


@pytest.fixture
def bot_config() -> BotConfig:
    """Configuration for a run against acme/webapp."""
    return BotConfig(repository="acme/webapp", token="ghp_test")  # type: ignore[arg-type]


@pytest.fixture
def yarn_info_output() -> str:
    """Sample `yarn info --name-only --json` output."""
    return (
        '"lodash@npm:4.17.20"\n'
        '"@babel/core@npm:7.20.0"\n'
        '"webapp@workspace:."\n'
        '"left-pad@patch:left-pad@npm%3A1.3.0#./fix.patch::locator=webapp%40workspace%3A."\n'
    )


@pytest.fixture
def github_mock() -> Iterator[aioresponses]:
    """Intercept aiohttp requests."""
    with aioresponses() as m:
        yield m
