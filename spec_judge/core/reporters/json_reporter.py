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
JSON reporter for check results.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from ..models import CheckResult, Issue, RuleResult

if TYPE_CHECKING:
    from ..config_loader import ResolvedConfig

REPORT_VERSION = "1.0"


class JSONReporter:
    """Generates JSON format reports."""

    def __init__(self, pretty: bool = True):
        """
        Initialize JSON reporter.

        Args:
            pretty: If True, format JSON with indentation
        """
        self.pretty = pretty

    def generate_report(self, result: CheckResult, config: ResolvedConfig | None = None) -> str:
        """
        Generate JSON report.

        Args:
            result: Evaluation result
            config: Resolved configuration, for the provider name and binding count

        Returns:
            JSON string
        """
        report = self.to_dict(result, config)
        if self.pretty:
            return json.dumps(report, indent=2)
        return json.dumps(report)

    def to_dict(self, result: CheckResult, config: ResolvedConfig | None = None) -> dict[str, Any]:
        summary = result.summary
        return {
            "version": REPORT_VERSION,
            "timestamp": result.timestamp.isoformat(),
            "config": {
                "provider": config.provider if config else None,
                "rulesCount": len(config.rule_bindings) if config else len(result.rule_results),
            },
            "results": {
                "rules": [self._format_rule_result(r) for r in result.rule_results],
                "summary": {
                    "totalRules": summary.total_rules,
                    "totalIssues": summary.total_issues,
                    "issuesBySeverity": dict(summary.issues_by_severity),
                    "duration": summary.duration_ms,
                    "passed": summary.passed,
                    "rulesWithErrors": summary.rules_with_errors,
                },
            },
        }

    def _format_rule_result(self, rule_result: RuleResult) -> dict[str, Any]:
        formatted: dict[str, Any] = {
            "name": rule_result.binding.name,
            "description": rule_result.binding.name,
            "status": rule_result.status,
            "issues": [self._format_issue(i) for i in rule_result.issues],
            "stats": {
                "filesChecked": rule_result.files_checked,
                "duration": rule_result.duration_ms,
            },
        }
        if rule_result.errored:
            formatted["error"] = rule_result.error
            formatted["errorKind"] = rule_result.error_kind.value if rule_result.error_kind else None
        return formatted

    @staticmethod
    def _format_issue(issue: Issue) -> dict[str, Any]:
        formatted: dict[str, Any] = {
            "severity": issue.severity.value,
            "message": issue.message,
            "confidence": issue.confidence,
        }
        if issue.file is not None:
            formatted["location"] = {"file": issue.file, "line": issue.line, "column": issue.column}
        return formatted
