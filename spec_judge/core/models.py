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
Data models for rule bindings, rule content and check results.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..config.constants import SpecJudgeConstants
from .exceptions import ErrorKind

if TYPE_CHECKING:
    from .providers.base import Provider


class Severity(str, Enum):
    """Severity levels for issues."""

    ERROR = "error"
    WARNING = "warning"
    NOTICE = "notice"

    @property
    def rank(self) -> int:
        """Numeric rank used for ``fail_on`` gating (error=3, warning=2, notice=1)."""
        return SpecJudgeConstants.SEVERITY_RANKS[self.value]

    def meets(self, threshold: Severity) -> bool:
        """True if this severity is at or above *threshold*."""
        return self.rank >= threshold.rank

    @classmethod
    def parse(cls, value: str | Severity | None, default: Severity | None = None) -> Severity:
        """Parse a severity string; unknown or missing values fall back to *default* (or raise)."""
        if isinstance(value, Severity):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        if default is not None:
            return default
        raise ValueError(f"Invalid severity {value!r}. Valid values: {', '.join(s.value for s in cls)}")


class BindingState(str, Enum):
    """Lifecycle of a single binding inside one evaluation run."""

    PENDING = "pending"
    FILES_LOADED = "files_loaded"
    RULES_EVALUATING = "rules_evaluating"
    COMPLETED = "completed"
    ERRORED = "errored"


@dataclass(frozen=True)
class FilePatterns:
    """Glob patterns selecting the implementation files of a binding."""

    include: tuple[str, ...]
    exclude: tuple[str, ...] = ()

    def __post_init__(self):
        # Accept lists from callers but store tuples so bindings stay hashable
        object.__setattr__(self, "include", tuple(self.include))
        object.__setattr__(self, "exclude", tuple(self.exclude))


@dataclass(frozen=True)
class RuleReference:
    """A rule document: local path or absolute http(s) URL."""

    path: str
    cache: bool = True

    @property
    def is_remote(self) -> bool:
        return is_url(self.path)


@dataclass(frozen=True)
class RuleBinding:
    """Named association between file patterns and one or more rule documents."""

    name: str
    files: FilePatterns
    rules: tuple[RuleReference, ...]
    fail_on: Severity = Severity.ERROR
    confidence_threshold: float = 0.8

    def __post_init__(self):
        object.__setattr__(self, "rules", tuple(self.rules))

    def to_dict(self) -> dict[str, Any]:
        """Convert binding to dictionary (resolved form, as shown by ``show-config``)."""
        return {
            "name": self.name,
            "files": {"include": list(self.files.include), "exclude": list(self.files.exclude)},
            "rules": [{"path": r.path, "cache": r.cache} for r in self.rules],
            "fail_on": self.fail_on.value,
            "confidence_threshold": self.confidence_threshold,
        }


@dataclass
class FileContent:
    """Text content of a file plus its best-effort language tag."""

    path: str
    content: str
    language: str | None = None


@dataclass
class RuleContent(FileContent):
    """Rule document content; ``source_url`` is set when fetched remotely."""

    source_url: str | None = None


@dataclass
class CachedEntry:
    """A remote rule document persisted in the on-disk cache."""

    content: str
    timestamp: datetime
    headers: dict[str, str] = field(default_factory=dict)
    hash: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "headers": dict(self.headers),
            "hash": self.hash,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CachedEntry:
        """Rebuild an entry from its JSON form. Raises KeyError/ValueError/TypeError on bad data."""
        headers = data.get("headers") or {}
        if not isinstance(headers, dict):
            raise TypeError("headers must be an object")
        return cls(
            content=str(data["content"]),
            timestamp=datetime.fromisoformat(data["timestamp"]),
            headers={str(k).lower(): str(v) for k, v in headers.items()},
            hash=str(data.get("hash", "")),
        )


@dataclass
class Issue:
    """A single deviation reported by a provider."""

    severity: Severity
    message: str
    file: str | None = None
    line: int | None = None
    column: int | None = None
    confidence: float = 1.0
    rule_name: str | None = None  # Binding that produced it (stamped by the evaluator)

    def __post_init__(self):
        # Providers may hand back plain strings; unknown values raise ValueError
        self.severity = Severity.parse(self.severity)

    def with_rule_name(self, rule_name: str) -> Issue:
        return replace(self, rule_name=rule_name)

    def to_dict(self) -> dict[str, Any]:
        """Convert issue to dictionary."""
        return {
            "severity": self.severity.value,
            "message": self.message,
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "confidence": self.confidence,
            "rule_name": self.rule_name,
        }


@dataclass
class MatchResult:
    """Partition of an input file list across rule bindings."""

    binding_files: dict[str, list[str]] = field(default_factory=dict)
    file_bindings: dict[str, list[RuleBinding]] = field(default_factory=dict)
    unmatched_files: list[str] = field(default_factory=list)
    ignored_files: list[str] = field(default_factory=list)

    def files_for(self, binding: RuleBinding) -> list[str]:
        """Matched files for *binding* (empty list if none)."""
        return self.binding_files.get(binding.name, [])


@dataclass
class RuleResult:
    """Outcome of checking one rule binding."""

    binding: RuleBinding
    issues: list[Issue] = field(default_factory=list)
    duration_ms: float = 0.0
    files_checked: int = 0
    checked_files: list[str] = field(default_factory=list)
    error: str | None = None
    error_kind: ErrorKind | None = None
    state: BindingState = BindingState.COMPLETED

    @property
    def errored(self) -> bool:
        return self.error is not None

    @property
    def status(self) -> str:
        """``errored``, ``issues`` or ``passed`` (lets reporters tell the three apart)."""
        if self.errored:
            return "errored"
        if self.issues:
            return "issues"
        return "passed"

    @property
    def failed(self) -> bool:
        """True if this binding alone would fail the run."""
        if self.errored:
            return True
        return any(issue.severity.meets(self.binding.fail_on) for issue in self.issues)

    def to_dict(self) -> dict[str, Any]:
        """Convert rule result to dictionary."""
        return {
            "name": self.binding.name,
            "status": self.status,
            "issues": [i.to_dict() for i in self.issues],
            "duration_ms": self.duration_ms,
            "files_checked": self.files_checked,
            "checked_files": list(self.checked_files),
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind else None,
        }


@dataclass
class CheckSummary:
    """Aggregate view over all rule results of one run."""

    total_rules: int = 0
    total_issues: int = 0
    issues_by_severity: dict[str, int] = field(
        default_factory=lambda: {s.value: 0 for s in Severity}
    )
    duration_ms: float = 0.0
    passed: bool = True
    rules_with_errors: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_rules": self.total_rules,
            "total_issues": self.total_issues,
            "issues_by_severity": dict(self.issues_by_severity),
            "duration_ms": self.duration_ms,
            "passed": self.passed,
            "rules_with_errors": self.rules_with_errors,
        }


@dataclass
class CheckRequest:
    """Input of :meth:`CheckEvaluator.evaluate`."""

    files: list[str]
    bindings: list[RuleBinding]
    provider: Provider
    max_concurrent: int = 5
    cache_dir: str = ".judge-cache"


@dataclass
class CheckResult:
    """Output of :meth:`CheckEvaluator.evaluate`."""

    rule_results: list[RuleResult] = field(default_factory=list)
    summary: CheckSummary = field(default_factory=CheckSummary)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule_results": [r.to_dict() for r in self.rule_results],
            "summary": self.summary.to_dict(),
            "timestamp": self.timestamp.isoformat(),
        }


def is_url(path: str) -> bool:
    """True for absolute http(s) URLs."""
    return path.startswith("http://") or path.startswith("https://")
