# Copyright 2026 Cisco Systems, Inc.
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
File-to-rule-binding matcher.

Partitions a list of file paths across rule bindings using extended shell
globs (``*``, ``**``, ``?``, ``[...]``, ``{a,b}``, extglob), after dropping
anything the project's ``.gitignore`` excludes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

import pathspec
from wcmatch import glob

from ..config.constants import SpecJudgeConstants
from .models import MatchResult, RuleBinding

logger = logging.getLogger(__name__)

GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.EXTGLOB


def _normalize(path: str) -> str:
    """Forward slashes, no leading ``./``."""
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


def matches_any(path: str, patterns: Sequence[str]) -> bool:
    """True if *path* matches at least one glob in *patterns*."""
    if not patterns:
        return False
    return glob.globmatch(_normalize(path), list(patterns), flags=GLOB_FLAGS)


class FileMatcher:
    """Resolves which files belong to which rule bindings.

    Example:
        >>> matcher = FileMatcher(Path.cwd())
        >>> matcher.initialize()
        >>> result = matcher.match(["src/api/users.ts"], bindings)
        >>> result.binding_files["api"]
        ['src/api/users.ts']
    """

    def __init__(self, working_directory: str | Path | None = None):
        """
        Initialize matcher.

        Args:
            working_directory: Directory whose ``.gitignore`` supplies the
                ignore list. Defaults to the current directory.
        """
        self.working_directory = Path(working_directory) if working_directory is not None else Path.cwd()
        self._ignore_spec: pathspec.PathSpec | None = None

    def initialize(self) -> None:
        """Read the ignore file once. A missing or unreadable file means nothing is ignored."""
        ignore_path = self.working_directory / SpecJudgeConstants.IGNORE_FILE
        try:
            content = ignore_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self._ignore_spec = None
            return
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s, ignoring nothing: %s", ignore_path, e)
            self._ignore_spec = None
            return

        self.load_ignore_patterns(content.splitlines())

    def load_ignore_patterns(self, lines: Iterable[str]) -> None:
        """Set the ignore list from gitignore-format *lines*."""
        patterns = [line.rstrip() for line in lines]
        patterns = [p for p in patterns if p.strip() and not p.lstrip().startswith("#")]
        if not patterns:
            self._ignore_spec = None
            return
        self._ignore_spec = pathspec.GitIgnoreSpec.from_lines(patterns)
        logger.debug("Loaded %d ignore patterns", len(patterns))

    def is_ignored(self, file: str) -> bool:
        if self._ignore_spec is None:
            return False
        return self._ignore_spec.match_file(_normalize(file))

    def bindings_for_file(self, file: str, bindings: Sequence[RuleBinding]) -> list[RuleBinding]:
        """Every binding *file* qualifies for, in binding order (no first-match-wins)."""
        matching: list[RuleBinding] = []
        for binding in bindings:
            if not matches_any(file, binding.files.include):
                continue
            if binding.files.exclude and matches_any(file, binding.files.exclude):
                continue
            matching.append(binding)
        return matching

    def match(self, files: Sequence[str], bindings: Sequence[RuleBinding]) -> MatchResult:
        """
        Partition *files* across *bindings*.

        Args:
            files: File paths, relative to the working directory
            bindings: Resolved rule bindings

        Returns:
            MatchResult; every input file ends up ignored, unmatched, or
            under one or more bindings
        """
        result = MatchResult()

        for file in files:
            if self.is_ignored(file):
                result.ignored_files.append(file)
                continue

            matching = self.bindings_for_file(file, bindings)
            if not matching:
                result.unmatched_files.append(file)
                continue

            result.file_bindings[file] = matching
            for binding in matching:
                result.binding_files.setdefault(binding.name, []).append(file)

        logger.debug(
            "Matched %d files: %d bindings active, %d unmatched, %d ignored",
            len(files),
            len(result.binding_files),
            len(result.unmatched_files),
            len(result.ignored_files),
        )
        return result
