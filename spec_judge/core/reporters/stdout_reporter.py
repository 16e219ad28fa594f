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
Plain-text reporter for check results.
"""

from __future__ import annotations

from ..models import CheckResult, Issue, RuleResult, Severity

SEVERITY_MARKERS = {
    Severity.ERROR: "[ERROR]",
    Severity.WARNING: "[WARN]",
    Severity.NOTICE: "[NOTE]",
}


class StdoutReporter:
    """Generates human-readable terminal reports."""

    def generate_report(self, result: CheckResult, config=None) -> str:
        """
        Generate text report.

        Args:
            result: Evaluation result
            config: Resolved configuration (unused; accepted for a uniform reporter interface)

        Returns:
            Report text
        """
        lines = ["Spec Judge Check Results", ""]

        for rule_result in result.rule_results:
            lines.extend(self._format_rule_result(rule_result))
            lines.append("")

        summary = result.summary
        lines.append("Summary:")
        lines.append(f"   Total rule bindings: {summary.total_rules}")
        lines.append(f"   Total issues: {summary.total_issues}")
        if summary.total_issues > 0:
            lines.append("   By severity:")
            lines.append(f"     Errors: {summary.issues_by_severity[Severity.ERROR.value]}")
            lines.append(f"     Warnings: {summary.issues_by_severity[Severity.WARNING.value]}")
            lines.append(f"     Notices: {summary.issues_by_severity[Severity.NOTICE.value]}")
        lines.append(f"   Duration: {summary.duration_ms / 1000:.2f}s")
        if summary.rules_with_errors > 0:
            lines.append(f"   Rules with errors: {summary.rules_with_errors}")
        lines.append(f"   Status: {'[OK] PASSED' if summary.passed else '[FAIL] FAILED'}")

        return "\n".join(lines)

    def _format_rule_result(self, rule_result: RuleResult) -> list[str]:
        lines = [f"{rule_result.binding.name}"]

        if rule_result.errored:
            kind = f" ({rule_result.error_kind.value})" if rule_result.error_kind else ""
            lines.append(f"   [FAIL] Error{kind}: {rule_result.error}")
            return lines

        if not rule_result.issues:
            lines.append(f"   [OK] No issues found ({rule_result.files_checked} files checked)")
            return lines

        lines.append(f"   {len(rule_result.issues)} issues found:")
        for issue in rule_result.issues:
            lines.extend(self._format_issue(issue))
        return lines

    @staticmethod
    def _format_issue(issue: Issue) -> list[str]:
        if issue.file is not None:
            location = f"{issue.file}:{issue.line if issue.line is not None else '?'}"
        else:
            location = "unknown"
        lines = [f"      {SEVERITY_MARKERS[issue.severity]} {location}: {issue.message}"]
        if issue.confidence < 1:
            lines.append(f"         Confidence: {issue.confidence * 100:.0f}%")
        return lines
