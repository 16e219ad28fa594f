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
Deterministic provider for demos and tests.

Recognises three rule topics by heading text and applies simple line-based
heuristics for each; any other rule yields no issues.
"""

from __future__ import annotations

import re
import time

from ..models import Issue, Severity
from .base import CheckMetadata, CheckResponse, Provider, ProviderRequest

ANY_TYPE_PATTERNS = [
    re.compile(r":\s*any\b"),
    re.compile(r"<any>"),
    re.compile(r"as\s+any\b"),
    re.compile(r"\bany\[\]"),
    re.compile(r"Array<any>"),
    re.compile(r":\s*Record<[^,]+,\s*any>"),
]
TYPE_ASSERTION_PATTERN = re.compile(r"\s+as\s+[A-Z]\w*")


class MockProvider(Provider):
    """Regex heuristics standing in for a real model."""

    name = "mock"

    async def validate(self) -> None:
        return None

    async def check(self, request: ProviderRequest) -> CheckResponse:
        start_time = time.perf_counter()
        rule_text = request.rule.content
        issues: list[Issue] = []

        for impl in request.implementations:
            if "Type Safety" in rule_text:
                issues.extend(self._check_type_safety(impl.path, impl.content))
            if "Error Handling" in rule_text:
                issues.extend(self._check_error_handling(impl.path, impl.content))
            if "Provider Interface" in rule_text:
                issues.extend(self._check_provider_interface(impl.path, impl.content))

        return CheckResponse(
            issues=issues,
            metadata=CheckMetadata(model="mock", duration_ms=(time.perf_counter() - start_time) * 1000),
        )

    @staticmethod
    def _check_type_safety(path: str, content: str) -> list[Issue]:
        issues = []
        for line_num, line in enumerate(content.split("\n"), start=1):
            if any(p.search(line) for p in ANY_TYPE_PATTERNS):
                issues.append(
                    Issue(
                        severity=Severity.ERROR,
                        message=f'Found usage of "any" type which violates type safety rules: {line.strip()}',
                        file=path,
                        line=line_num,
                        confidence=0.95,
                    )
                )
            if TYPE_ASSERTION_PATTERN.search(line) and "as const" not in line:
                issues.append(
                    Issue(
                        severity=Severity.ERROR,
                        message=f"Found type assertion which should be avoided: {line.strip()}",
                        file=path,
                        line=line_num,
                        confidence=0.85,
                    )
                )
        return issues

    @staticmethod
    def _check_error_handling(path: str, content: str) -> list[Issue]:
        if "throw new Error" not in content:
            return []
        lines = content.split("\n")
        line_num = next(i for i, line in enumerate(lines, start=1) if "throw" in line)
        return [
            Issue(
                severity=Severity.ERROR,
                message='Found "throw" statement - use a Result type instead',
                file=path,
                line=line_num,
                confidence=0.85,
            )
        ]

    @staticmethod
    def _check_provider_interface(path: str, content: str) -> list[Issue]:
        if "async validate()" in content:
            return []
        return [
            Issue(
                severity=Severity.ERROR,
                message="Provider missing required validate() method",
                file=path,
                line=1,
                confidence=0.9,
            )
        ]
