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
Tests for report formatters.
"""

import json

import pytest

from spec_judge.core.evaluator import build_summary
from spec_judge.core.exceptions import ErrorKind
from spec_judge.core.models import CheckResult, RuleResult, Severity
from spec_judge.core.reporters import JSONReporter, StdoutReporter, create_reporter


@pytest.fixture
def sample_result(make_binding, make_issue):
    """Result with one clean, one failing and one errored binding."""
    clean = RuleResult(binding=make_binding("clean", ["**/*.ts"]), files_checked=2, checked_files=["a.ts", "b.ts"])
    failing = RuleResult(
        binding=make_binding("failing", ["**/*.ts"]),
        issues=[
            make_issue(Severity.ERROR, message="uses any", file="a.ts", line=3),
            make_issue(Severity.NOTICE, confidence=0.85, message="style", file=None, line=None),
        ],
        files_checked=1,
        checked_files=["a.ts"],
        duration_ms=12.5,
    )
    errored = RuleResult(
        binding=make_binding("errored", ["**/*.ts"]),
        error="Failed to fetch https://x/r.md: HTTP 404 Not Found",
        error_kind=ErrorKind.NETWORK_ERROR,
    )
    results = [clean, failing, errored]
    return CheckResult(rule_results=results, summary=build_summary(results, 1500.0))


class TestStdoutReporter:
    """Test the text reporter."""

    def test_sections(self, sample_result):
        report = StdoutReporter().generate_report(sample_result)

        assert report.startswith("Spec Judge Check Results")
        assert "[OK] No issues found (2 files checked)" in report
        assert "2 issues found:" in report
        assert "[ERROR] a.ts:3: uses any" in report
        assert "[NOTE] unknown: style" in report
        assert "Confidence: 85%" in report
        assert "[FAIL] Error (NETWORK_ERROR): Failed to fetch" in report

    def test_summary(self, sample_result):
        report = StdoutReporter().generate_report(sample_result)

        assert "Total rule bindings: 3" in report
        assert "Total issues: 2" in report
        assert "Errors: 1" in report
        assert "Notices: 1" in report
        assert "Duration: 1.50s" in report
        assert "Rules with errors: 1" in report
        assert "[FAIL] FAILED" in report

    def test_passing_run(self, make_binding):
        results = [RuleResult(binding=make_binding("clean", ["**/*"]))]
        report = StdoutReporter().generate_report(CheckResult(rule_results=results, summary=build_summary(results, 0)))

        assert "[OK] PASSED" in report
        assert "By severity" not in report
        assert "Rules with errors" not in report


class TestJSONReporter:
    """Test the JSON reporter."""

    def test_structure(self, sample_result):
        data = json.loads(JSONReporter().generate_report(sample_result))

        assert data["version"] == "1.0"
        assert data["config"] == {"provider": None, "rulesCount": 3}
        assert [r["status"] for r in data["results"]["rules"]] == ["passed", "issues", "errored"]

        summary = data["results"]["summary"]
        assert summary == {
            "totalRules": 3,
            "totalIssues": 2,
            "issuesBySeverity": {"error": 1, "warning": 0, "notice": 1},
            "duration": 1500.0,
            "passed": False,
            "rulesWithErrors": 1,
        }

    def test_issue_location(self, sample_result):
        rules = JSONReporter().to_dict(sample_result)["results"]["rules"]
        located, unlocated = rules[1]["issues"]

        assert located["location"] == {"file": "a.ts", "line": 3, "column": None}
        assert "location" not in unlocated
        assert rules[1]["stats"] == {"filesChecked": 1, "duration": 12.5}

    def test_error_fields_only_on_errored(self, sample_result):
        rules = JSONReporter().to_dict(sample_result)["results"]["rules"]

        assert "error" not in rules[0]
        assert rules[2]["errorKind"] == "NETWORK_ERROR"
        assert rules[2]["issues"] == []

    def test_compact(self, sample_result):
        assert "\n" not in JSONReporter(pretty=False).generate_report(sample_result)


class TestReporterFactory:
    def test_known(self):
        assert isinstance(create_reporter("stdout"), StdoutReporter)
        assert isinstance(create_reporter("json"), JSONReporter)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown reporter"):
            create_reporter("sarif")
