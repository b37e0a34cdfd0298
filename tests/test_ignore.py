"""Tests for ignore-pattern matching."""

import pytest
from pathlib import Path

from sitescan.core.discovery.ignore import DEFAULT_IGNORE_PATTERNS, build_ignore_set
from sitescan.exceptions import DiscoveryError


class TestDefaultIgnoreSet:
    """The built-in patterns applied to every scan."""

    @pytest.mark.parametrize("rel_path", [
        "yarn.lock",
        "docs/yarn.lock",
        ".DS_Store",
        "posts/.DS_Store",
        "notes.md.un~",
        ".gitignore",
        ".npmignore",
        ".babelrc",
        "package-lock.json",
        "node_modules/react/index.js",
        "packages/theme/node_modules/lodash/lodash.js",
        "bower_components/jquery/jquery.js",
        ".git/HEAD",
    ])
    def test_default_patterns_match(self, tmp_path, rel_path):
        ignore_set = build_ignore_set(tmp_path, [])
        assert ignore_set.matches(tmp_path / rel_path)

    @pytest.mark.parametrize("rel_path", ["index.md", "blog/post.md", "src/pages/about.js", "dist/app.js"])
    def test_regular_sources_do_not_match(self, tmp_path, rel_path):
        ignore_set = build_ignore_set(tmp_path, [])
        assert not ignore_set.matches(tmp_path / rel_path)

    def test_directories_are_matched_with_trailing_slash(self, tmp_path):
        ignore_set = build_ignore_set(tmp_path, [])
        assert ignore_set.matches(tmp_path / "node_modules", is_dir=True)
        assert ignore_set.matches(tmp_path / ".git", is_dir=True)

    def test_defaults_can_be_disabled(self, tmp_path):
        ignore_set = build_ignore_set(tmp_path, [], use_default_ignores=False)
        assert not ignore_set.matches(tmp_path / "node_modules/react/index.js")
        assert ignore_set.patterns == ()

    def test_caller_patterns_follow_defaults(self, tmp_path):
        ignore_set = build_ignore_set(tmp_path, ["*.log"])
        assert ignore_set.patterns == DEFAULT_IGNORE_PATTERNS + ("*.log",)


class TestCallerPatterns:
    """Glob semantics for caller-supplied patterns."""

    def test_single_star_stays_within_a_segment(self, tmp_path):
        ignore_set = build_ignore_set(tmp_path, ["drafts/*.md"], use_default_ignores=False)
        assert ignore_set.matches(tmp_path / "drafts/wip.md")
        assert not ignore_set.matches(tmp_path / "drafts/2019/old.md")

    def test_double_star_crosses_segments(self, tmp_path):
        ignore_set = build_ignore_set(tmp_path, ["drafts/**/*.md"], use_default_ignores=False)
        assert ignore_set.matches(tmp_path / "drafts/2019/old.md")
        assert not ignore_set.matches(tmp_path / "posts/2019/new.md")

    def test_relative_paths_are_accepted(self, tmp_path):
        ignore_set = build_ignore_set(tmp_path, ["*.log"], use_default_ignores=False)
        assert ignore_set.matches(Path("logs/build.log"))

    def test_paths_outside_root_never_match(self, tmp_path):
        ignore_set = build_ignore_set(tmp_path / "site", ["*.log"])
        assert not ignore_set.matches(tmp_path / "other" / "build.log")

    def test_negation_reincludes_a_default(self, tmp_path):
        ignore_set = build_ignore_set(tmp_path, ["!yarn.lock"])
        assert not ignore_set.matches(tmp_path / "yarn.lock")

    def test_excludes_checks_ancestor_directories(self, tmp_path):
        ignore_set = build_ignore_set(tmp_path, ["build/"], use_default_ignores=False)
        assert ignore_set.excludes(tmp_path / "build/assets/app.js")
        assert not ignore_set.excludes(tmp_path / "src/build.js")

    def test_non_string_pattern_raises(self, tmp_path):
        with pytest.raises(DiscoveryError):
            build_ignore_set(tmp_path, ["*.md", 42])


class TestSiblingBuildOutput:
    """The ../**/dist/** default only applies to locations outside the root."""

    def test_dist_inside_root_is_kept(self, tmp_path):
        root = tmp_path / "site"
        ignore_set = build_ignore_set(root, [])
        assert not ignore_set.matches(root / "dist" / "app.js", real_path=root / "dist" / "app.js")

    def test_sibling_dist_reached_through_symlink_is_ignored(self, tmp_path):
        root = tmp_path / "site"
        real = tmp_path / "theme" / "dist"
        ignore_set = build_ignore_set(root, [])
        assert ignore_set.matches(root / "vendor" / "dist", is_dir=True, real_path=real)
        assert not ignore_set.matches(root / "vendor" / "src", is_dir=True, real_path=tmp_path / "theme" / "src")
