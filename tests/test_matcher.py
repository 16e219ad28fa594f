# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the file-to-binding matcher.
"""

from pathlib import Path

import pytest

from spec_judge.core.matcher import FileMatcher, matches_any


class TestGlobMatching:
    """Test the extended glob dialect."""

    @pytest.mark.parametrize(
        "path,pattern",
        [
            ("src/api/users.ts", "src/api/**/*.ts"),
            ("src/api/v1/deep/users.ts", "src/api/**/*.ts"),
            ("src/index.ts", "**/*.ts"),
            ("src/a.ts", "src/?.ts"),
            ("src/b.ts", "src/[abc].ts"),
            ("src/app.tsx", "src/*.{ts,tsx}"),
            ("src/app.js", "src/*.@(js|jsx)"),
            ("./src/app.ts", "src/*.ts"),
        ],
    )
    def test_matches(self, path, pattern):
        """Test that supported glob features match."""
        assert matches_any(path, [pattern])

    @pytest.mark.parametrize(
        "path,pattern",
        [
            ("src/api/users.js", "src/api/**/*.ts"),
            ("lib/api/users.ts", "src/api/**/*.ts"),
            ("src/deep/a.ts", "src/*.ts"),
            ("src/d.ts", "src/[abc].ts"),
        ],
    )
    def test_does_not_match(self, path, pattern):
        """Test that non-matching paths are rejected."""
        assert not matches_any(path, [pattern])

    def test_empty_pattern_list_matches_nothing(self):
        """Test that no patterns means no match."""
        assert not matches_any("src/app.ts", [])


class TestMatchPartition:
    """Test partitioning files across bindings."""

    def test_api_and_components_bindings(self, make_binding):
        """Test the canonical two-binding partition."""
        api = make_binding("api", ["src/api/**/*.ts"], exclude=["**/*.test.ts"])
        components = make_binding("components", ["src/components/**/*.tsx"])
        files = [
            "src/api/users.ts",
            "src/api/users.test.ts",
            "src/components/Button.tsx",
            "src/utils/helpers.ts",
        ]

        result = FileMatcher(Path("/nonexistent")).match(files, [api, components])

        assert result.binding_files == {
            "api": ["src/api/users.ts"],
            "components": ["src/components/Button.tsx"],
        }
        assert result.unmatched_files == ["src/api/users.test.ts", "src/utils/helpers.ts"]
        assert result.ignored_files == []

    def test_file_recorded_under_every_qualifying_binding(self, make_binding):
        """Test that matching is not first-match-wins."""
        broad = make_binding("all-ts", ["**/*.ts"])
        narrow = make_binding("api", ["src/api/**/*.ts"])

        result = FileMatcher(Path("/nonexistent")).match(["src/api/users.ts"], [broad, narrow])

        assert result.binding_files == {"all-ts": ["src/api/users.ts"], "api": ["src/api/users.ts"]}
        assert [b.name for b in result.file_bindings["src/api/users.ts"]] == ["all-ts", "api"]

    def test_exclude_wins_over_include(self, make_binding):
        """Test that an excluded file is unmatched even though it is included."""
        binding = make_binding("src", ["src/**"], exclude=["src/generated/**"])

        result = FileMatcher(Path("/nonexistent")).match(["src/generated/schema.ts"], [binding])

        assert result.binding_files == {}
        assert result.unmatched_files == ["src/generated/schema.ts"]

    def test_input_order_is_preserved(self, make_binding):
        """Test that matched files keep input order."""
        binding = make_binding("all", ["**/*"])
        files = ["z.ts", "a.ts", "m/b.ts"]

        result = FileMatcher(Path("/nonexistent")).match(files, [binding])

        assert result.binding_files["all"] == files

    def test_every_file_lands_somewhere(self, make_binding):
        """Test that each file is ignored, unmatched or matched."""
        matcher = FileMatcher(Path("/nonexistent"))
        matcher.load_ignore_patterns(["dist/"])
        binding = make_binding("ts", ["**/*.ts"])
        files = ["dist/out.ts", "README.md", "src/app.ts"]

        result = matcher.match(files, [binding])

        matched = set(result.file_bindings)
        assert matched | set(result.unmatched_files) | set(result.ignored_files) == set(files)
        assert not matched & set(result.ignored_files)
        assert not set(result.unmatched_files) & set(result.ignored_files)

    def test_no_bindings(self):
        """Test that with no bindings every non-ignored file is unmatched."""
        result = FileMatcher(Path("/nonexistent")).match(["a.ts", "b.ts"], [])

        assert result.unmatched_files == ["a.ts", "b.ts"]
        assert result.binding_files == {}


class TestIgnoreHandling:
    """Test .gitignore handling."""

    def test_ignored_files_are_not_unmatched(self, make_binding):
        """Test that ignored files are kept apart from files failing an exclude."""
        matcher = FileMatcher(Path("/nonexistent"))
        matcher.load_ignore_patterns(["node_modules/"])
        binding = make_binding("all-ts", ["**/*.ts"], exclude=["**/*.test.ts"])

        result = matcher.match(["src/index.ts", "src/index.test.ts", "node_modules/lib/index.ts"], [binding])

        assert result.binding_files == {"all-ts": ["src/index.ts"]}
        assert result.unmatched_files == ["src/index.test.ts"]
        assert result.ignored_files == ["node_modules/lib/index.ts"]

    def test_initialize_reads_gitignore(self, tmp_path, make_binding):
        """Test that initialize() loads the working directory's .gitignore."""
        (tmp_path / ".gitignore").write_text("# build output\n\ndist\n*.log\n!keep.log\n")
        matcher = FileMatcher(tmp_path)
        matcher.initialize()

        assert matcher.is_ignored("dist/bundle.js")
        assert matcher.is_ignored("packages/web/dist/bundle.js")
        assert matcher.is_ignored("debug.log")
        assert not matcher.is_ignored("keep.log")
        assert not matcher.is_ignored("src/app.ts")

    def test_missing_gitignore_ignores_nothing(self, tmp_path):
        """Test that a missing .gitignore is not an error."""
        matcher = FileMatcher(tmp_path)
        matcher.initialize()

        assert not matcher.is_ignored("node_modules/lib/index.ts")

    def test_unreadable_gitignore_ignores_nothing(self, tmp_path):
        """Test that a .gitignore that cannot be read is treated as empty."""
        (tmp_path / ".gitignore").mkdir()
        matcher = FileMatcher(tmp_path)
        matcher.initialize()

        assert not matcher.is_ignored("anything.ts")

    def test_comment_only_gitignore(self, tmp_path):
        """Test that comments and blank lines produce no patterns."""
        (tmp_path / ".gitignore").write_text("# nothing here\n\n")
        matcher = FileMatcher(tmp_path)
        matcher.initialize()

        assert not matcher.is_ignored("src/app.ts")
