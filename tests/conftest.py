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
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest before running tests.
All fixtures defined here are available to every test module without
explicit imports.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from dotenv import load_dotenv

from spec_judge.core.models import FilePatterns, Issue, RuleBinding, RuleReference, Severity
from spec_judge.core.providers.base import CheckMetadata, CheckResponse, Provider, ProviderRequest

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

project_root = Path(__file__).parent.parent
env_file = project_root / ".env"

if env_file.exists():
    load_dotenv(env_file)


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class ScriptedProvider(Provider):
    """Provider whose answers are keyed by rule text.

    ``responses`` maps rule content to a list of issues or an exception to
    raise; ``delays`` maps rule content to seconds to sleep before answering.
    Tracks how many checks are in flight at once.
    """

    name = "scripted"

    def __init__(self, responses=None, delays=None):
        self.responses = responses or {}
        self.delays = delays or {}
        self.requests: list[ProviderRequest] = []
        self.started: list[str] = []
        self.events: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def validate(self) -> None:
        return None

    async def check(self, request: ProviderRequest) -> CheckResponse:
        key = request.rule.content.strip()
        self.requests.append(request)
        self.started.append(key)
        self.events.append(("start", key))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(key, 0))
            answer = self.responses.get(key, [])
            if isinstance(answer, BaseException):
                raise answer
            return CheckResponse(issues=list(answer), metadata=CheckMetadata(model="scripted"))
        finally:
            self.in_flight -= 1
            self.events.append(("end", key))


# ---------------------------------------------------------------------------
# Factory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_binding():
    """Factory fixture for creating :class:`RuleBinding` objects.

    Usage::

        def test_something(make_binding):
            binding = make_binding("api", ["src/api/**/*.ts"], rules=["specs/api.md"])
    """

    def _make(
        name: str,
        include: list[str],
        exclude: list[str] | None = None,
        rules: list[str] | None = None,
        fail_on: Severity = Severity.ERROR,
        confidence_threshold: float = 0.8,
    ) -> RuleBinding:
        return RuleBinding(
            name=name,
            files=FilePatterns(include=include, exclude=exclude or []),
            rules=[RuleReference(path=p) for p in (rules or [f"rules/{name}.md"])],
            fail_on=fail_on,
            confidence_threshold=confidence_threshold,
        )

    return _make


@pytest.fixture
def make_issue():
    """Factory fixture for creating :class:`Issue` objects."""

    def _make(
        severity: Severity = Severity.ERROR,
        confidence: float = 1.0,
        message: str = "deviation",
        file: str | None = "src/app.ts",
        line: int | None = 1,
    ) -> Issue:
        return Issue(severity=severity, message=message, file=file, line=line, confidence=confidence)

    return _make


@pytest.fixture
def write_files(tmp_path: Path):
    """Factory fixture that writes ``{relative_path: content}`` under *tmp_path*."""

    def _write(files: dict[str, str]) -> Path:
        for rel_path, content in files.items():
            path = tmp_path / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def scripted_provider():
    """Factory fixture for creating a :class:`ScriptedProvider`."""

    def _make(responses=None, delays=None) -> ScriptedProvider:
        return ScriptedProvider(responses=responses, delays=delays)

    return _make


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch) -> Path:
    """A temporary project root that is also the current directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path
