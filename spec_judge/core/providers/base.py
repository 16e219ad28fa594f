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
Provider interface for semantic compliance checks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from ..models import FileContent, Issue, RuleContent


@dataclass
class ProviderRequest:
    """One rule checked against a set of implementation files."""

    rule: RuleContent
    implementations: list[FileContent]
    timeout: float | None = None  # seconds


@dataclass
class CheckMetadata:
    model: str
    duration_ms: float = 0.0
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class CheckResponse:
    issues: list[Issue] = field(default_factory=list)
    metadata: CheckMetadata = field(default_factory=lambda: CheckMetadata(model="unknown"))


class Provider(ABC):
    """Abstract base class for semantic-analysis oracles."""

    name: str = "provider"

    @abstractmethod
    async def validate(self) -> None:
        """
        Check that the provider can be reached.

        Raises:
            ProviderNotAvailableError: If it cannot
        """
        pass

    @abstractmethod
    async def check(self, request: ProviderRequest) -> CheckResponse:
        """
        Check *request.implementations* against *request.rule*.

        Args:
            request: Rule text, implementation files and timeout

        Returns:
            Issues found plus call metadata

        Raises:
            ProviderError: If the check could not be performed
        """
        pass

    def get_name(self) -> str:
        """Get the provider name."""
        return self.name
