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
Pre-commit hook that checks staged files against their rule bindings.

Usage:
    1. Install as a pre-commit hook:
       spec-judge-pre-commit install

    2. Or add to .pre-commit-config.yaml:
       - repo: local
         hooks:
           - id: spec-judge
             name: Spec Judge
             entry: spec-judge-pre-commit
             language: python
             pass_filenames: false

The hook reads ``judge.yaml`` from the repository root (or ``--config``) and
blocks the commit when the check fails and ``fail_on_issues`` is true.
"""

import argparse
import sys
from pathlib import Path

from ..cli.cli import main as cli_main
from ..config.constants import SpecJudgeConstants
from ..core.exceptions import GitError
from ..core.git import find_git_dir

HOOK_SCRIPT = """#!/bin/sh
# spec-judge pre-commit hook
# Checks staged files against their specification documents

spec-judge-pre-commit "$@"
exit_code=$?

if [ $exit_code -ne 0 ]; then
    echo ""
    echo "To bypass this check (not recommended), use: git commit --no-verify"
fi

exit $exit_code
"""


def install_hook(force: bool = False) -> int:
    """
    Install the pre-commit hook in the current repository.

    Args:
        force: Overwrite an existing hook without asking

    Returns:
        Exit code
    """
    try:
        git_dir = Path(find_git_dir())
    except GitError as e:
        print(f"Error: Not a git repository ({e})", file=sys.stderr)
        return 1

    hooks_dir = git_dir / "hooks"
    hooks_dir.mkdir(parents=True, exist_ok=True)
    hook_path = hooks_dir / "pre-commit"

    if hook_path.exists() and not force:
        print(f"Warning: Pre-commit hook already exists at {hook_path}")
        response = input("Overwrite? [y/N] ").strip().lower()
        if response != "y":
            print("Aborted")
            return 1

    hook_path.write_text(HOOK_SCRIPT)
    hook_path.chmod(0o755)

    print(f"[OK] Pre-commit hook installed at {hook_path}")
    print(f"\nThe hook checks staged files using {SpecJudgeConstants.DEFAULT_CONFIG_FILE} in the repository root.")
    return 0


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for pre-commit hook.

    Args:
        args: Command line arguments (for testing)

    Returns:
        Exit code (0 = success, 1 = blocked)
    """
    parser = argparse.ArgumentParser(description="Pre-commit hook for spec-judge")
    parser.add_argument(
        "--config",
        "-c",
        default=SpecJudgeConstants.DEFAULT_CONFIG_FILE,
        help="Path to configuration file",
    )
    parser.add_argument("--reporter", choices=["stdout", "json"], default="stdout", help="Output format")
    parser.add_argument("--force", action="store_true", help="Overwrite an existing hook (install only)")
    parser.add_argument(
        "install",
        nargs="?",
        help="Install pre-commit hook",
    )

    parsed_args = parser.parse_args(args)

    if parsed_args.install == "install":
        return install_hook(force=parsed_args.force)
    if parsed_args.install is not None:
        parser.error(f"unknown command {parsed_args.install!r}")

    return cli_main(["check", "--pre-commit", "--config", parsed_args.config, "--reporter", parsed_args.reporter])


if __name__ == "__main__":
    sys.exit(main())
