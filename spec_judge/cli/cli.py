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

"""Command-line interface for spec-judge."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import shutil
import sys
from collections.abc import Callable
from pathlib import Path

from ..config.config import Config
from ..config.constants import SpecJudgeConstants
from ..core.cache import RemoteCache
from ..core.config_loader import ResolvedConfig, load_resolved_config
from ..core.evaluator import CheckEvaluator
from ..core.exceptions import ErrorKind, JudgeError
from ..core.git import get_staged_files
from ..core.matcher import FileMatcher
from ..core.models import CheckRequest
from ..core.providers.factory import create_provider
from ..core.reporters.factory import REPORTERS, create_reporter

logger = logging.getLogger("spec_judge.cli")


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _make_status_printer(args: argparse.Namespace) -> Callable[[str], None]:
    """Return a printer that sends to stderr when JSON output is active."""
    is_json = getattr(args, "reporter", "stdout") == "json"

    def _print(msg: str) -> None:
        print(msg, file=sys.stderr if is_json else sys.stdout)

    return _print


def _write_output(args: argparse.Namespace, output: str) -> None:
    """Write *output* to a file or stdout."""
    if getattr(args, "output", None):
        with open(args.output, "w", encoding="utf-8") as fh:
            fh.write(output)
        print(f"Report saved to: {args.output}", file=sys.stderr)
    else:
        print(output)


def describe_error(error: JudgeError) -> str:
    """User-facing message for *error*, chosen by its kind."""
    kind = error.kind
    if kind is ErrorKind.CONFIG_NOT_FOUND:
        return f"{error}\nRun 'spec-judge init' to create a configuration file"
    if kind is ErrorKind.CONFIG_INVALID:
        return str(error)
    if kind is ErrorKind.PROVIDER_NOT_AVAILABLE:
        return f"{error}\nCheck the provider name and credentials (SPEC_JUDGE_LLM_API_KEY)"
    if kind is ErrorKind.PROVIDER_ERROR:
        return f"Provider error: {error}"
    if kind is ErrorKind.FILE_NOT_FOUND:
        return f"File error: {error}"
    if kind is ErrorKind.NETWORK_ERROR:
        return f"Network error: {error}"
    if kind is ErrorKind.CACHE_ERROR:
        return f"Cache error: {error}"
    if kind is ErrorKind.GIT_ERROR:
        return f"Git error: {error}"
    if kind is ErrorKind.TIMEOUT:
        return f"Timed out: {error}"
    return f"Unexpected error: {error}"


def _load_config(args: argparse.Namespace) -> ResolvedConfig:
    config_path = Path(args.config).resolve()
    return load_resolved_config(config_path)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def check_command(args: argparse.Namespace) -> int:
    """Handle the ``check`` command."""
    status = _make_status_printer(args)

    try:
        config = _load_config(args)
        settings = Config.from_env()

        if args.pre_commit:
            files = get_staged_files()
            if not files:
                status("[OK] No staged files to check")
                return 0
        elif args.files:
            files = list(args.files)
        else:
            print("Error: Please specify files to check or use --pre-commit", file=sys.stderr)
            return 1

        matcher = FileMatcher(Path.cwd())
        matcher.initialize()
        match_result = matcher.match(files, config.rule_bindings)
        active_bindings = [b for b in config.rule_bindings if match_result.files_for(b)]
        if not active_bindings:
            status("[OK] No applicable rule bindings for the given files")
            return 0

        provider = create_provider(config.provider, settings, timeout=config.timeout)
        asyncio.run(provider.validate())

        cache_dir = settings.cache_dir or config.cache_dir
        max_concurrent = settings.max_concurrent or config.max_concurrent_checks
        status(f"Checking {len(files)} files against {len(active_bindings)} rule bindings with {provider.name}...")

        evaluator = CheckEvaluator(
            matcher=matcher,
            schedule=config.schedule,
            timeout_seconds=config.timeout,
            revalidate_remote_rules=config.revalidate_remote_rules,
        )
        result = evaluator.evaluate_sync(
            CheckRequest(
                files=files,
                bindings=active_bindings,
                provider=provider,
                max_concurrent=max_concurrent,
                cache_dir=str(Path(cache_dir).resolve()),
            )
        )
    except JudgeError as e:
        print(f"Error: {describe_error(e)}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    reporter = create_reporter(args.reporter)
    _write_output(args, reporter.generate_report(result, config))

    if config.fail_on_issues and not result.summary.passed:
        return 1
    return 0


def init_command(args: argparse.Namespace) -> int:
    """Handle the ``init`` command: write the configuration template."""
    config_path = Path(args.config).resolve()
    if config_path.exists() and not args.force:
        print(f"Error: {config_path} already exists (use --force to overwrite)", file=sys.stderr)
        return 1

    try:
        shutil.copyfile(SpecJudgeConstants.get_config_template_path(), config_path)
    except OSError as e:
        print(f"Error: Failed to create config file: {e}", file=sys.stderr)
        return 1

    print(f"[OK] Created configuration file at: {config_path}\n")
    print("Next steps:")
    print("1. Edit the configuration file to define your rule bindings")
    print("2. Add your specification files")
    print("3. Run 'spec-judge check <files>' to check your code")
    return 0


def show_config_command(args: argparse.Namespace) -> int:
    """Handle the ``show-config`` command: print the resolved configuration."""
    try:
        config = _load_config(args)
    except JudgeError as e:
        print(f"Error: {describe_error(e)}", file=sys.stderr)
        return 1
    print(json.dumps(config.to_dict(), indent=2))
    return 0


def clear_cache_command(args: argparse.Namespace) -> int:
    """Handle the ``clear-cache`` command."""
    try:
        config = _load_config(args)
        cache_dir = Config.from_env().cache_dir or config.cache_dir
        removed = RemoteCache(Path(cache_dir).resolve()).clear()
    except JudgeError as e:
        print(f"Error: {describe_error(e)}", file=sys.stderr)
        return 1
    print(f"Removed {removed} cached rule documents from {cache_dir}")
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _add_config_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        "-c",
        default=SpecJudgeConstants.DEFAULT_CONFIG_FILE,
        help=f"Path to configuration file (default: {SpecJudgeConstants.DEFAULT_CONFIG_FILE})",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spec-judge",
        description="spec-judge - Check that implementations match their specification documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  spec-judge init
  spec-judge check src/api/users.ts src/api/orders.ts
  spec-judge check --pre-commit
  spec-judge check src/**/*.ts --reporter json --output report.json
  spec-judge show-config
  spec-judge clear-cache
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {SpecJudgeConstants.VERSION}")
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # -- check -------------------------------------------------------------
    check_p = subparsers.add_parser("check", help="Check files against their rule bindings")
    check_p.add_argument("files", nargs="*", help="Files to check")
    _add_config_flag(check_p)
    check_p.add_argument("--reporter", "-r", choices=list(REPORTERS), default="stdout", help="Output format")
    check_p.add_argument("--pre-commit", action="store_true", help="Check only staged files")
    check_p.add_argument("--output", "-o", help="Output file path")
    check_p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    # -- init --------------------------------------------------------------
    init_p = subparsers.add_parser("init", help="Create a configuration file")
    _add_config_flag(init_p)
    init_p.add_argument("--force", action="store_true", help="Overwrite an existing file")

    # -- show-config -------------------------------------------------------
    show_p = subparsers.add_parser("show-config", help="Display the resolved configuration")
    _add_config_flag(show_p)

    # -- clear-cache -------------------------------------------------------
    clear_p = subparsers.add_parser("clear-cache", help="Delete cached remote rule documents")
    _add_config_flag(clear_p)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    _configure_logging(getattr(args, "verbose", False))

    dispatch = {
        "check": check_command,
        "init": init_command,
        "show-config": show_config_command,
        "clear-cache": clear_cache_command,
    }
    handler = dispatch.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
