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
Git helpers for collecting the files to check.
"""

import logging
import subprocess

from .exceptions import GitError

logger = logging.getLogger(__name__)

STAGED_FILES_COMMAND = ["git", "diff", "--cached", "--name-only", "--diff-filter=ACMR"]


def get_staged_files(cwd: str | None = None) -> list[str]:
    """
    Get list of staged files from git.

    Deleted files are left out since there is nothing to check.

    Args:
        cwd: Repository directory (defaults to the current directory)

    Returns:
        List of staged file paths relative to repo root

    Raises:
        GitError: If git is missing or the command fails
    """
    command = " ".join(STAGED_FILES_COMMAND)
    try:
        result = subprocess.run(
            STAGED_FILES_COMMAND,
            capture_output=True,
            text=True,
            check=True,
            cwd=cwd,
        )
    except FileNotFoundError:
        raise GitError(command, "git executable not found") from None
    except subprocess.CalledProcessError as e:
        raise GitError(command, (e.stderr or "").strip() or f"exit status {e.returncode}") from e

    files = [f.strip() for f in result.stdout.split("\n") if f.strip()]
    logger.debug("Found %d staged files", len(files))
    return files


def find_git_dir(start: str | None = None) -> str:
    """
    Return the ``.git`` directory of the repository containing *start*.

    Raises:
        GitError: If *start* is not inside a git repository
    """
    command = "git rev-parse --git-dir"
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--git-dir"],
            capture_output=True,
            text=True,
            check=True,
            cwd=start,
        )
    except FileNotFoundError:
        raise GitError(command, "git executable not found") from None
    except subprocess.CalledProcessError as e:
        raise GitError(command, (e.stderr or "").strip() or "not a git repository") from e
    return result.stdout.strip()
