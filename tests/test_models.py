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
Unit tests for core data models.
"""

from datetime import datetime, timezone

import pytest

from spec_judge.config.constants import SpecJudgeConstants
from spec_judge.core.exceptions import ErrorKind
from spec_judge.core.models import (
    BindingState,
    CachedEntry,
    FilePatterns,
    Issue,
    RuleReference,
    RuleResult,
    Severity,
    is_url,
)


class TestSeverity:
    """Test severity ordering and parsing."""

    def test_ranks(self):
        assert Severity.ERROR.rank > Severity.WARNING.rank > Severity.NOTICE.rank

    def test_ranks_come_from_constants(self):
        """Test that severity ranks have a single source."""
        for severity in Severity:
            assert severity.rank == SpecJudgeConstants.SEVERITY_RANKS[severity.value]

    @pytest.mark.parametrize(
        "severity,threshold,expected",
        [
            (Severity.ERROR, Severity.ERROR, True),
            (Severity.WARNING, Severity.ERROR, False),
            (Severity.ERROR, Severity.NOTICE, True),
            (Severity.NOTICE, Severity.WARNING, False),
            (Severity.WARNING, Severity.WARNING, True),
        ],
    )
    def test_meets(self, severity, threshold, expected):
        assert severity.meets(threshold) is expected

    def test_parse(self):
        assert Severity.parse(" Warning ") is Severity.WARNING
        assert Severity.parse(Severity.NOTICE) is Severity.NOTICE
        assert Severity.parse("fatal", default=Severity.WARNING) is Severity.WARNING
        assert Severity.parse(None, default=Severity.ERROR) is Severity.ERROR

    def test_parse_invalid_without_default(self):
        with pytest.raises(ValueError, match="Invalid severity"):
            Severity.parse("fatal")


class TestBindingModels:
    """Test binding value objects."""

    def test_patterns_stored_as_tuples(self, make_binding):
        patterns = FilePatterns(include=["a/**"], exclude=["b/**"])
        assert patterns.include == ("a/**",)
        assert patterns.exclude == ("b/**",)

        binding = make_binding("api", ["src/**"])
        assert isinstance(binding.rules, tuple)
        assert hash(binding) == hash(make_binding("api", ["src/**"]))

    def test_binding_to_dict(self, make_binding):
        data = make_binding("api", ["src/**"], exclude=["**/*.test.ts"], fail_on=Severity.WARNING).to_dict()

        assert data == {
            "name": "api",
            "files": {"include": ["src/**"], "exclude": ["**/*.test.ts"]},
            "rules": [{"path": "rules/api.md", "cache": True}],
            "fail_on": "warning",
            "confidence_threshold": 0.8,
        }

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("https://example.com/r.md", True),
            ("http://example.com/r.md", True),
            ("ftp://example.com/r.md", False),
            ("specs/https.md", False),
        ],
    )
    def test_is_url(self, path, expected):
        assert is_url(path) is expected
        assert RuleReference(path).is_remote is expected


class TestRuleResult:
    """Test per-binding result properties."""

    def test_status(self, make_binding, make_issue):
        binding = make_binding("api", ["**/*"])

        assert RuleResult(binding=binding).status == "passed"
        assert RuleResult(binding=binding, issues=[make_issue()]).status == "issues"
        assert RuleResult(binding=binding, error="x", error_kind=ErrorKind.UNKNOWN).status == "errored"

    def test_failed_respects_fail_on(self, make_binding, make_issue):
        binding = make_binding("api", ["**/*"], fail_on=Severity.WARNING)

        assert not RuleResult(binding=binding, issues=[make_issue(Severity.NOTICE)]).failed
        assert RuleResult(binding=binding, issues=[make_issue(Severity.WARNING)]).failed

    def test_to_dict(self, make_binding):
        result = RuleResult(
            binding=make_binding("api", ["**/*"]),
            error="boom",
            error_kind=ErrorKind.PROVIDER_ERROR,
            state=BindingState.ERRORED,
        )
        data = result.to_dict()

        assert data["status"] == "errored"
        assert data["error_kind"] == "PROVIDER_ERROR"

    def test_issue_with_rule_name(self, make_issue):
        issue = make_issue()
        stamped = issue.with_rule_name("api")

        assert stamped.rule_name == "api"
        assert issue.rule_name is None
        assert stamped.to_dict()["rule_name"] == "api"


class TestCachedEntry:
    """Test cache entry serialisation."""

    def test_from_dict_lowercases_headers(self):
        entry = CachedEntry.from_dict(
            {
                "content": "# rule",
                "timestamp": "2026-01-02T03:04:05+00:00",
                "headers": {"ETag": '"v1"'},
                "hash": "abc",
            }
        )

        assert entry.headers == {"etag": '"v1"'}
        assert entry.timestamp == datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert entry.to_dict()["timestamp"] == "2026-01-02T03:04:05+00:00"

    @pytest.mark.parametrize(
        "data",
        [
            {"timestamp": "2026-01-02T03:04:05"},
            {"content": "x", "timestamp": "yesterday"},
            {"content": "x", "timestamp": "2026-01-02T03:04:05", "headers": ["etag"]},
        ],
    )
    def test_from_dict_rejects_bad_data(self, data):
        with pytest.raises((KeyError, ValueError, TypeError)):
            CachedEntry.from_dict(data)


def test_issue_defaults():
    issue = Issue(severity=Severity.NOTICE, message="m")
    assert issue.confidence == 1.0
    assert issue.file is None


class TestIssueSeverity:
    """Test severity coercion on issues."""

    def test_string_severity_coerced(self):
        issue = Issue(severity="Warning", message="m")
        assert issue.severity is Severity.WARNING
        assert issue.with_rule_name("api").severity is Severity.WARNING

    def test_unknown_severity_rejected(self):
        with pytest.raises(ValueError, match="Invalid severity"):
            Issue(severity="fatal", message="m")
