"""Unit tests for package models.

Tests for descriptor parsing, eligibility, registry enrichment and the
derived pull request title and branch name.
"""

from collections.abc import Callable

import pytest
from bumpctl.core.errors import MalformedDescriptorError, VersionNotFoundError
from bumpctl.models.package import (
    PackageDescriptor,
    RegistryRecord,
    UpstreamCoordinates,
    UpstreamRepository,
)
from pydantic import ValidationError

MakePackage = Callable[..., PackageDescriptor]


class TestParse:
    """Tests for PackageDescriptor.parse."""

    def test_plain_name(self) -> None:
        """Plain names split on the only @."""
        pkg = PackageDescriptor.parse("lodash@npm:4.17.21")
        assert pkg.name == "lodash"
        assert pkg.adapter == "npm"
        assert pkg.current_version == "4.17.21"

    def test_scoped_name(self) -> None:
        """Scoped names keep their leading @."""
        pkg = PackageDescriptor.parse("@babel/core@npm:7.20.0")
        assert pkg.name == "@babel/core"
        assert pkg.adapter == "npm"
        assert pkg.current_version == "7.20.0"

    def test_version_may_contain_colon(self) -> None:
        """Only the first colon after the name separates adapter and version."""
        pkg = PackageDescriptor.parse("app@workspace:packages/app:x")
        assert pkg.adapter == "workspace"
        assert pkg.current_version == "packages/app:x"

    def test_surrounding_whitespace_is_ignored(self) -> None:
        """Tokens are stripped before parsing."""
        pkg = PackageDescriptor.parse("  react@npm:18.2.0\n")
        assert pkg.name == "react"

    def test_fresh_descriptor_has_no_registry_data(self) -> None:
        """Parsing does not set any registry fields."""
        pkg = PackageDescriptor.parse("react@npm:18.2.0")
        assert pkg.latest_version is None
        assert pkg.available_versions == []
        assert pkg.repository is None

    @pytest.mark.parametrize(
        "token",
        ["lodash", "lodash@npm", "@npm:1.0.0", "lodash@:1.0.0", "lodash@npm:", ""],
    )
    def test_malformed_tokens(self, token: str) -> None:
        """Tokens with a missing part are rejected."""
        with pytest.raises(MalformedDescriptorError) as exc_info:
            PackageDescriptor.parse(token)
        assert exc_info.value.token == token

    def test_identity_fields_are_frozen(self) -> None:
        """Name, adapter and current version cannot be reassigned."""
        pkg = PackageDescriptor.parse("lodash@npm:4.17.21")
        with pytest.raises(ValidationError):
            pkg.name = "underscore"  # type: ignore[misc]
        with pytest.raises(ValidationError):
            pkg.current_version = "5.0.0"  # type: ignore[misc]


class TestIsUpdatable:
    """Tests for PackageDescriptor.is_updatable."""

    def test_npm_package_is_updatable(self) -> None:
        """npm packages not matching any pattern are updatable."""
        assert PackageDescriptor.parse("lodash@npm:4.17.21").is_updatable([]) is True

    def test_other_adapters_are_not_updatable(self) -> None:
        """Workspace, patch and git dependencies are skipped."""
        assert PackageDescriptor.parse("app@workspace:.").is_updatable([]) is False
        assert PackageDescriptor.parse("lib@git:github.com/a/b").is_updatable([]) is False

    def test_substring_pattern(self) -> None:
        """A plain pattern matches anywhere in the name."""
        pkg = PackageDescriptor.parse("eslint-plugin-react@npm:7.0.0")
        assert pkg.is_updatable(["eslint"]) is False

    def test_regex_pattern(self) -> None:
        """Patterns are regular expressions."""
        pkg = PackageDescriptor.parse("@acme/ui@npm:1.0.0")
        assert pkg.is_updatable(["^@acme/"]) is False
        assert pkg.is_updatable(["^acme"]) is True


class TestApplyLookup:
    """Tests for registry enrichment."""

    def test_sets_registry_fields(self) -> None:
        """Latest version, version list and repository are stored."""
        pkg = PackageDescriptor.parse("lodash@npm:4.17.20")
        record = RegistryRecord(
            name="lodash",
            version="4.17.21",
            versions=["4.17.20", "4.17.21"],
            repository=UpstreamRepository(url="https://github.com/lodash/lodash"),
        )

        pkg.apply_lookup(record)

        assert pkg.latest_version == "4.17.21"
        assert pkg.available_versions == ["4.17.20", "4.17.21"]
        assert pkg.repository == record.repository

    def test_rejects_record_for_other_package(self) -> None:
        """A record for a different name is a programming error."""
        pkg = PackageDescriptor.parse("lodash@npm:4.17.20")
        with pytest.raises(ValueError, match="underscore"):
            pkg.apply_lookup(RegistryRecord(name="underscore", version="1.13.6"))

    def test_repository_string_shorthand(self) -> None:
        """A bare string repository becomes a git reference."""
        record = RegistryRecord.model_validate({"name": "x", "version": "1.0.0", "repository": "github:owner/x"})
        assert record.repository == UpstreamRepository(type="git", url="github:owner/x")


class TestIsUpdateNeeded:
    """Tests for PackageDescriptor.is_update_needed."""

    def test_different_versions(self, make_package: MakePackage) -> None:
        """A different latest version requires an update."""
        assert make_package(current="1.0.0", latest="1.1.0").is_update_needed() is True

    def test_same_version(self, make_package: MakePackage) -> None:
        """Equal versions need no update."""
        assert make_package(current="1.0.0", latest="1.0.0", versions=["1.0.0"]).is_update_needed() is False

    def test_string_inequality_not_semver(self, make_package: MakePackage) -> None:
        """An older latest tag still counts as an update."""
        assert make_package(current="2.0.0-beta.1", latest="1.9.0").is_update_needed() is True


class TestUpstreamCoordinates:
    """Tests for repository URL resolution."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("git+https://github.com/lodash/lodash.git", UpstreamCoordinates("lodash", "lodash")),
            ("https://github.com/facebook/react/tree/main/packages/react", UpstreamCoordinates("facebook", "react")),
            ("git@github.com:babel/babel.git", UpstreamCoordinates("babel", "babel")),
            ("git://github.com/sindresorhus/got.git#main", UpstreamCoordinates("sindresorhus", "got")),
        ],
    )
    def test_github_urls(self, make_package: MakePackage, url: str, expected: UpstreamCoordinates) -> None:
        """Owner and repo are extracted from common URL forms."""
        pkg = make_package(repository=url)
        assert pkg.has_upstream_repository() is True
        assert pkg.resolve_upstream_coordinates() == expected

    def test_non_github_url(self, make_package: MakePackage) -> None:
        """Repositories hosted elsewhere have no coordinates."""
        pkg = make_package(repository="https://gitlab.com/owner/repo.git")
        assert pkg.resolve_upstream_coordinates() is None

    def test_no_repository(self, make_package: MakePackage) -> None:
        """Packages without a repository have no upstream."""
        pkg = make_package(repository=None)
        assert pkg.has_upstream_repository() is False
        assert pkg.resolve_upstream_coordinates() is None

    def test_coordinates_str(self) -> None:
        """Coordinates render as owner/repo."""
        assert str(UpstreamCoordinates("lodash", "lodash")) == "lodash/lodash"


class TestLaterVersions:
    """Tests for PackageDescriptor.later_versions."""

    def test_versions_after_current(self, make_package: MakePackage) -> None:
        """Every version after the current one, in registry order."""
        pkg = make_package(current="1.0.0", latest="1.2.0", versions=["0.9.0", "1.0.0", "1.1.0", "1.2.0"])
        assert pkg.later_versions() == ["1.1.0", "1.2.0"]

    def test_stops_at_latest(self, make_package: MakePackage) -> None:
        """Versions published after the latest tag are excluded."""
        pkg = make_package(current="1.0.0", latest="1.1.0", versions=["1.0.0", "1.1.0", "2.0.0-rc.1"])
        assert pkg.later_versions() == ["1.1.0"]

    def test_current_is_last(self, make_package: MakePackage) -> None:
        """No later versions yields an empty list."""
        pkg = make_package(current="1.0.0", latest="1.0.0", versions=["0.1.0", "1.0.0"])
        assert pkg.later_versions() == []

    def test_current_missing(self, make_package: MakePackage) -> None:
        """A current version absent from the list raises."""
        pkg = make_package(current="1.0.0-local", latest="1.1.0", versions=["1.0.0", "1.1.0"])
        with pytest.raises(VersionNotFoundError) as exc_info:
            pkg.later_versions()
        assert exc_info.value.version == "1.0.0-local"


class TestDerivedNames:
    """Tests for pull request title and branch name."""

    def test_title(self, make_package: MakePackage) -> None:
        """The title names the package and both versions."""
        pkg = make_package(name="lodash", current="4.17.20", latest="4.17.21")
        assert pkg.pull_request_title == "Bump lodash from 4.17.20 to 4.17.21"

    def test_branch_name(self, make_package: MakePackage) -> None:
        """Plain names produce a readable branch."""
        pkg = make_package(name="lodash", current="4.17.20", latest="4.17.21")
        assert pkg.branch_name == "dependabot/bump_lodash_from_4.17.20_to_4.17.21"

    def test_scoped_branch_name_is_valid_ref(self, make_package: MakePackage) -> None:
        """Scope markers and slashes are replaced."""
        pkg = make_package(name="@babel/core", current="7.20.0", latest="7.21.0")
        assert pkg.branch_name == "dependabot/bump_babel-core_from_7.20.0_to_7.21.0"

    def test_branch_name_collapses_dot_runs(self, make_package: MakePackage) -> None:
        """Consecutive dots are not allowed in refs."""
        pkg = make_package(name="odd..name", current="1.0.0", latest="1.0.1")
        assert ".." not in pkg.branch_name

    def test_branch_name_is_deterministic(self, make_package: MakePackage) -> None:
        """The same update always maps to the same branch."""
        assert make_package().branch_name == make_package().branch_name


class TestDocumentedProperties:
    """Worked examples for the descriptor contract."""

    def test_round_trip_scoped(self) -> None:
        """Names containing @ survive parsing."""
        pkg = PackageDescriptor.parse("@types/node@npm:20.1.0")
        assert (pkg.name, pkg.adapter, pkg.current_version) == ("@types/node", "npm", "20.1.0")

    def test_prerelease_counts_as_different(self, make_package: MakePackage) -> None:
        """1.2.0 and 1.2.0-beta differ as strings."""
        assert make_package(current="1.2.0", latest="1.2.0-beta").is_update_needed() is True

    def test_later_versions_example(self, make_package: MakePackage) -> None:
        """The walk from 1.1 over [1.0, 1.1, 1.2, 2.0] is [1.2, 2.0]."""
        pkg = make_package(current="1.1", latest="2.0", versions=["1.0", "1.1", "1.2", "2.0"])
        assert pkg.later_versions() == ["1.2", "2.0"]

    def test_ignored_regardless_of_adapter(self) -> None:
        """Ignore patterns apply before the adapter check."""
        assert PackageDescriptor.parse("lodash@workspace:.").is_updatable(["lodash"]) is False
        assert PackageDescriptor.parse("lodash@npm:1.0.0").is_updatable(["lodash"]) is False
