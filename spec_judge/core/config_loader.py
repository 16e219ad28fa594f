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
Project configuration (``judge.yaml``) loading and resolution.

Example ``judge.yaml``::

    version: "1.0"
    provider: claude
    rule_bindings:
      - name: api
        files:
          include: ["src/api/**/*.ts"]
          exclude: ["**/*.test.ts"]
        rules:
          - path: specs/api.md
          - path: https://example.com/rules/errors.md
            cache: false
        fail_on: warning
        confidence_threshold: 0.7

:func:`load_config` validates the raw document; :func:`resolve_config` fills
in defaults and resolves relative rule paths against the directory holding
the configuration file.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, NoReturn

import yaml

from ..config.constants import SpecJudgeConstants
from .exceptions import ConfigInvalidError, ConfigNotFoundError
from .models import FilePatterns, RuleBinding, RuleReference, Severity, is_url

logger = logging.getLogger(__name__)

_WINDOWS_DRIVE_RE = re.compile(r"^[A-Za-z]:")


@dataclass
class JudgeConfig:
    """Validated ``judge.yaml`` contents; unset optional fields are None."""

    version: str
    provider: str
    rule_bindings: list[dict[str, Any]] = field(default_factory=list)
    timeout: float | None = None
    cache_dir: str | None = None
    fail_on_issues: bool | None = None
    max_concurrent_checks: int | None = None
    revalidate_remote_rules: bool | None = None
    schedule: str | None = None


@dataclass
class ResolvedConfig:
    """Configuration with every default applied and rule paths resolved."""

    version: str
    provider: str
    timeout: float
    cache_dir: str
    fail_on_issues: bool
    max_concurrent_checks: int
    revalidate_remote_rules: bool
    schedule: str
    rule_bindings: list[RuleBinding]
    config_path: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary (as printed by ``show-config``)."""
        return {
            "version": self.version,
            "provider": self.provider,
            "timeout": self.timeout,
            "cache_dir": self.cache_dir,
            "fail_on_issues": self.fail_on_issues,
            "max_concurrent_checks": self.max_concurrent_checks,
            "revalidate_remote_rules": self.revalidate_remote_rules,
            "schedule": self.schedule,
            "rule_bindings": [b.to_dict() for b in self.rule_bindings],
        }


class _Validator:
    """Field checks that raise ConfigInvalidError naming the offending key."""

    def __init__(self, path: str):
        self.path = path

    def fail(self, reason: str) -> NoReturn:
        raise ConfigInvalidError(self.path, reason)

    def string(self, value: Any, where: str) -> str:
        if not isinstance(value, str) or not value.strip():
            self.fail(f"{where}: expected a non-empty string")
        return value

    def string_list(self, value: Any, where: str) -> list[str]:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            self.fail(f"{where}: expected a list of strings")
        return list(value)

    def boolean(self, value: Any, where: str) -> bool:
        if not isinstance(value, bool):
            self.fail(f"{where}: expected true or false")
        return value

    def positive_number(self, value: Any, where: str) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            self.fail(f"{where}: expected a positive number")
        return value

    def positive_int(self, value: Any, where: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            self.fail(f"{where}: expected a positive integer")
        return value

    def choice(self, value: Any, choices: tuple[str, ...] | list[str], where: str) -> str:
        if value not in choices:
            self.fail(f"{where}: expected one of {', '.join(choices)}, got {value!r}")
        return value


def _validate_binding(v: _Validator, raw: Any, index: int) -> dict[str, Any]:
    where = f"rule_bindings[{index}]"
    if not isinstance(raw, dict):
        v.fail(f"{where}: expected a mapping")

    name = v.string(raw.get("name"), f"{where}.name")

    files = raw.get("files")
    if not isinstance(files, dict):
        v.fail(f"{where}.files: expected a mapping with 'include'")
    include = v.string_list(files.get("include"), f"{where}.files.include")
    exclude = v.string_list(files["exclude"], f"{where}.files.exclude") if files.get("exclude") is not None else None

    rules = raw.get("rules")
    if not isinstance(rules, list) or not rules:
        v.fail(f"{where}.rules: expected a non-empty list")
    validated_rules = []
    for rule_index, rule in enumerate(rules):
        rule_where = f"{where}.rules[{rule_index}]"
        if not isinstance(rule, dict):
            v.fail(f"{rule_where}: expected a mapping with 'path'")
        validated_rule: dict[str, Any] = {"path": v.string(rule.get("path"), f"{rule_where}.path")}
        if rule.get("cache") is not None:
            validated_rule["cache"] = v.boolean(rule["cache"], f"{rule_where}.cache")
        validated_rules.append(validated_rule)

    binding: dict[str, Any] = {"name": name, "files": {"include": include}, "rules": validated_rules}
    if exclude is not None:
        binding["files"]["exclude"] = exclude

    if raw.get("fail_on") is not None:
        binding["fail_on"] = v.choice(raw["fail_on"], [s.value for s in Severity], f"{where}.fail_on")

    if raw.get("confidence_threshold") is not None:
        threshold = raw["confidence_threshold"]
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or not 0 <= threshold <= 1:
            v.fail(f"{where}.confidence_threshold: expected a number between 0 and 1")
        binding["confidence_threshold"] = float(threshold)

    return binding


def parse_config(data: Any, path: str = SpecJudgeConstants.DEFAULT_CONFIG_FILE) -> JudgeConfig:
    """
    Validate a parsed ``judge.yaml`` document.

    Raises:
        ConfigInvalidError: If any field is missing, mistyped or out of range
    """
    v = _Validator(path)
    if not isinstance(data, dict):
        v.fail("expected a mapping at the top level")

    version = data.get("version")
    if str(version) != SpecJudgeConstants.CONFIG_VERSION:
        v.fail(f"version: expected \"{SpecJudgeConstants.CONFIG_VERSION}\", got {version!r}")

    provider = v.choice(data.get("provider"), SpecJudgeConstants.PROVIDERS, "provider")

    raw_bindings = data.get("rule_bindings")
    if not isinstance(raw_bindings, list):
        v.fail("rule_bindings: expected a list")
    bindings = [_validate_binding(v, raw, i) for i, raw in enumerate(raw_bindings)]

    seen: set[str] = set()
    for binding in bindings:
        if binding["name"] in seen:
            v.fail(f"rule_bindings: duplicate binding name {binding['name']!r}")
        seen.add(binding["name"])

    config = JudgeConfig(version=SpecJudgeConstants.CONFIG_VERSION, provider=provider, rule_bindings=bindings)
    if data.get("timeout") is not None:
        config.timeout = v.positive_number(data["timeout"], "timeout")
    if data.get("cache_dir") is not None:
        config.cache_dir = v.string(data["cache_dir"], "cache_dir")
    if data.get("fail_on_issues") is not None:
        config.fail_on_issues = v.boolean(data["fail_on_issues"], "fail_on_issues")
    if data.get("max_concurrent_checks") is not None:
        config.max_concurrent_checks = v.positive_int(data["max_concurrent_checks"], "max_concurrent_checks")
    if data.get("revalidate_remote_rules") is not None:
        config.revalidate_remote_rules = v.boolean(data["revalidate_remote_rules"], "revalidate_remote_rules")
    if data.get("schedule") is not None:
        config.schedule = v.choice(data["schedule"], SpecJudgeConstants.SCHEDULES, "schedule")
    return config


def load_config(path: str | Path) -> JudgeConfig:
    """
    Load and validate a configuration file.

    Args:
        path: Path to ``judge.yaml``

    Returns:
        Validated (unresolved) configuration

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigInvalidError: If it cannot be read, parsed or validated
    """
    path_str = str(path)
    try:
        with open(path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except FileNotFoundError:
        raise ConfigNotFoundError(path_str) from None
    except yaml.YAMLError as e:
        raise ConfigInvalidError(path_str, f"malformed YAML: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigInvalidError(path_str, str(e)) from e

    config = parse_config(data, path_str)
    logger.debug("Loaded %d rule bindings from %s", len(config.rule_bindings), path_str)
    return config


def _is_absolute(path: str) -> bool:
    return path.startswith("/") or bool(_WINDOWS_DRIVE_RE.match(path))


def resolve_rule_path(rule_path: str, config_dir: str | Path) -> str:
    """URLs and absolute paths are kept; anything else is made absolute against *config_dir*."""
    if is_url(rule_path) or _is_absolute(rule_path):
        return rule_path
    return os.path.normpath(os.path.join(os.path.abspath(config_dir), rule_path))


def resolve_config(config: JudgeConfig, config_path: str | Path) -> ResolvedConfig:
    """
    Apply defaults and resolve rule paths.

    Args:
        config: Validated configuration
        config_path: Path the configuration was loaded from

    Returns:
        ResolvedConfig ready for evaluation
    """
    config_dir = Path(config_path).parent

    bindings = []
    for raw in config.rule_bindings:
        bindings.append(
            RuleBinding(
                name=raw["name"],
                files=FilePatterns(include=raw["files"]["include"], exclude=raw["files"].get("exclude", [])),
                rules=[
                    RuleReference(
                        path=resolve_rule_path(rule["path"], config_dir),
                        cache=rule.get("cache", SpecJudgeConstants.DEFAULT_RULE_CACHE),
                    )
                    for rule in raw["rules"]
                ],
                fail_on=Severity.parse(raw.get("fail_on", SpecJudgeConstants.DEFAULT_FAIL_ON)),
                confidence_threshold=raw.get(
                    "confidence_threshold", SpecJudgeConstants.DEFAULT_CONFIDENCE_THRESHOLD
                ),
            )
        )

    def default(value, fallback):
        return fallback if value is None else value

    return ResolvedConfig(
        version=config.version,
        provider=config.provider,
        timeout=default(config.timeout, SpecJudgeConstants.DEFAULT_TIMEOUT_SECONDS),
        cache_dir=default(config.cache_dir, SpecJudgeConstants.DEFAULT_CACHE_DIR),
        fail_on_issues=default(config.fail_on_issues, SpecJudgeConstants.DEFAULT_FAIL_ON_ISSUES),
        max_concurrent_checks=default(config.max_concurrent_checks, SpecJudgeConstants.DEFAULT_MAX_CONCURRENT),
        revalidate_remote_rules=default(config.revalidate_remote_rules, False),
        schedule=default(config.schedule, SpecJudgeConstants.DEFAULT_SCHEDULE),
        rule_bindings=bindings,
        config_path=Path(config_path),
    )


def load_resolved_config(path: str | Path) -> ResolvedConfig:
    """:func:`load_config` followed by :func:`resolve_config`."""
    return resolve_config(load_config(path), path)
