"""Tests for resolving packages against package-lock.json / npm-shrinkwrap.json."""

import json

import pytest

from identity.parser import parse_cli_specifier, parse_patch_filename
from lockfiles.loader import LockFile
from resolution.errors import (
    EntryNotFoundError,
    IncompleteEntryError,
    LockFileParseError,
)
from resolution.models import ResolutionOutcome
from resolution.npm import find_workspace, legacy_scopes, resolve_npm
from resolution.service import get_package_resolution, resolve


def _lock(data):
    return LockFile(dialect="npm", path="package-lock.json", format="npm", data=data)


def _write_lock(app, data, name="package-lock.json"):
    (app / name).write_text(json.dumps(data, indent=2))


class TestLegacyTree:
    """lockfileVersion 1 nested dependencies."""

    def test_top_level_resolved(self, tmp_path):
        _write_lock(tmp_path, {
            "lockfileVersion": 1,
            "dependencies": {
                "lodash": {
                    "version": "4.17.21",
                    "resolved": "https://registry.npmjs.org/lodash/-/lodash-4.17.21.tgz",
                },
            },
        })

        result = resolve(parse_cli_specifier("lodash"), "npm", str(tmp_path))

        assert result.value == "https://registry.npmjs.org/lodash/-/lodash-4.17.21.tgz"
        assert result.outcome is ResolutionOutcome.LOCKED
        assert result.workspace is None

    def test_nearest_ancestor_shadows_root(self):
        data = {
            "dependencies": {
                "outer": {
                    "version": "1.0.0",
                    "dependencies": {
                        "inner": {"version": "2.0.0", "resolved": "https://example.com/inner-2.0.0.tgz"},
                    },
                },
                "inner": {"version": "1.0.0", "resolved": "https://example.com/inner-1.0.0.tgz"},
            },
            "packages": {
                "node_modules/inner": {"version": "1.0.0", "resolved": "https://example.com/inner-1.0.0.tgz"},
            },
        }
        identity = parse_patch_filename("outer+1.0.0++inner+2.0.0.patch")

        result = resolve_npm(identity, _lock(data))

        assert result.value == "https://example.com/inner-2.0.0.tgz"

    def test_hoisted_dependency_found_at_root(self):
        data = {
            "dependencies": {
                "outer": {"version": "1.0.0"},
                "inner": {"version": "1.0.0", "resolved": "https://example.com/inner-1.0.0.tgz"},
            },
        }

        result = resolve_npm(parse_cli_specifier("outer/inner"), _lock(data))

        assert result.value == "https://example.com/inner-1.0.0.tgz"

    def test_walk_descends_through_each_level(self):
        data = {
            "dependencies": {
                "a": {"dependencies": {"b": {"dependencies": {"c": {"version": "3.0.0"}}}}},
            },
        }

        scopes = legacy_scopes(data, parse_cli_specifier("a/b/c"))

        assert len(scopes) == 3
        assert scopes[-1] == {"dependencies": {"c": {"version": "3.0.0"}}}
        assert resolve_npm(parse_cli_specifier("a/b/c"), _lock(data)).value == "3.0.0"

    def test_walk_stops_at_missing_level(self):
        data = {"dependencies": {"a": {"version": "1.0.0"}}}

        scopes = legacy_scopes(data, parse_cli_specifier("x/a/b"))

        assert scopes == [data]

    def test_version_used_without_resolved(self):
        data = {"dependencies": {"pkg": {"version": "1.0.0"}}}

        result = resolve_npm(parse_cli_specifier("pkg"), _lock(data))

        assert result.value == "1.0.0"
        assert result.outcome is ResolutionOutcome.VERSION

    def test_from_used_as_last_resort(self):
        data = {"dependencies": {"pkg": {"from": "github:acme/pkg#v1"}}}

        result = resolve_npm(parse_cli_specifier("pkg"), _lock(data))

        assert result.value == "github:acme/pkg#v1"
        assert result.outcome is ResolutionOutcome.SPECIFIER


class TestFlatPackages:
    """lockfileVersion 2/3 flat packages map."""

    def test_nested_path(self, tmp_path):
        _write_lock(tmp_path, {
            "lockfileVersion": 3,
            "packages": {
                "": {"name": "app"},
                "node_modules/outer": {"version": "1.0.0"},
                "node_modules/outer/node_modules/@scope/inner": {
                    "version": "2.0.0",
                    "resolved": "https://registry.npmjs.org/@scope/inner/-/inner-2.0.0.tgz",
                },
            },
        })

        identity = parse_patch_filename("outer+1.0.0++@scope+inner+2.0.0.patch")

        assert get_package_resolution(identity, "npm", str(tmp_path)) == (
            "https://registry.npmjs.org/@scope/inner/-/inner-2.0.0.tgz"
        )

    def test_flat_exact_path_preferred_over_hoisted_legacy_entry(self):
        data = {
            "lockfileVersion": 2,
            "dependencies": {
                "outer": {"version": "1.0.0"},
                "inner": {"version": "1.0.0"},
            },
            "packages": {
                "node_modules/inner": {"version": "1.0.0"},
                "node_modules/outer/node_modules/inner": {"version": "2.0.0"},
            },
        }

        assert resolve_npm(parse_cli_specifier("outer/inner"), _lock(data)).value == "2.0.0"

    def test_workspace_link_redirects_nested_lookup(self):
        data = {
            "lockfileVersion": 3,
            "packages": {
                "": {"name": "monorepo", "workspaces": ["packages/*"]},
                "node_modules/@scope/a": {"resolved": "packages/foo", "link": True},
                "packages/foo": {"name": "@scope/a", "version": "0.0.1"},
                "packages/foo/node_modules/b": {
                    "version": "3.1.0",
                    "resolved": "https://registry.npmjs.org/b/-/b-3.1.0.tgz",
                },
            },
        }
        identity = parse_cli_specifier("@scope/a/b")
        assert identity.path == "node_modules/@scope/a/node_modules/b"

        workspace = find_workspace(data, identity)
        assert workspace.workspace_path == "packages/foo/node_modules/b"
        assert workspace.workspace_location == "packages/foo"

        result = resolve_npm(identity, _lock(data))
        assert result.value == "https://registry.npmjs.org/b/-/b-3.1.0.tgz"
        assert result.workspace == workspace

    def test_workspace_resolution_does_not_mutate_identity(self):
        data = {
            "packages": {
                "node_modules/a": {"resolved": "packages/a", "link": True},
                "packages/a/node_modules/b": {"version": "1.0.0"},
            },
        }
        identity = parse_cli_specifier("a/b")

        resolve_npm(identity, _lock(data))

        assert identity == parse_cli_specifier("a/b")
        assert not hasattr(identity, "workspace_path")

    def test_unlinked_root_is_not_a_workspace(self):
        data = {"packages": {"node_modules/a": {"version": "1.0.0", "resolved": "https://x/a.tgz"}}}

        assert find_workspace(data, parse_cli_specifier("a/b")) is None

    def test_shrinkwrap(self, tmp_path):
        _write_lock(tmp_path, {
            "lockfileVersion": 3,
            "packages": {"node_modules/pkg": {"version": "1.0.0", "resolved": "https://x/pkg-1.0.0.tgz"}},
        }, name="npm-shrinkwrap.json")

        result = resolve(parse_cli_specifier("pkg"), "npm-shrinkwrap", str(tmp_path))

        assert result.value == "https://x/pkg-1.0.0.tgz"
        assert result.lockfile_path.endswith("npm-shrinkwrap.json")


class TestNpmErrors:
    """Fatal npm resolution failures."""

    def test_absent_from_both_views(self):
        data = {
            "dependencies": {"other": {"version": "1.0.0"}},
            "packages": {"node_modules/other": {"version": "1.0.0"}},
        }

        with pytest.raises(EntryNotFoundError):
            resolve_npm(parse_cli_specifier("missing"), _lock(data))

    def test_empty_lockfile(self):
        with pytest.raises(EntryNotFoundError):
            resolve_npm(parse_cli_specifier("pkg"), _lock({"lockfileVersion": 3}))

    def test_incomplete_entry(self):
        data = {"packages": {"node_modules/pkg": {"dev": True}}}

        with pytest.raises(IncompleteEntryError):
            resolve_npm(parse_cli_specifier("pkg"), _lock(data))

    def test_invalid_json(self, tmp_path):
        (tmp_path / "package-lock.json").write_text("{not json")

        with pytest.raises(LockFileParseError):
            resolve(parse_cli_specifier("pkg"), "npm", str(tmp_path))

    def test_lockfile_not_utf8(self, tmp_path):
        (tmp_path / "package-lock.json").write_bytes(b'{"packages": {"\xff": 1}}')

        with pytest.raises(LockFileParseError, match="not valid UTF-8"):
            resolve(parse_cli_specifier("pkg"), "npm", str(tmp_path))
