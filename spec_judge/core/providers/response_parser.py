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
Provider response parsing.

Extracts the JSON payload from model output and normalises it into
:class:`Issue` objects.
"""

import json
import logging
from typing import Any

from ..models import Issue, Severity

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.5


class ResponseParser:
    """Parses model responses into issues."""

    @staticmethod
    def parse(response_content: str) -> dict[str, Any]:
        """
        Parse model response JSON.

        Handles multiple formats:
        - Direct JSON
        - JSON in markdown code blocks
        - JSON with surrounding text

        Args:
            response_content: Raw response content

        Returns:
            Parsed JSON dictionary

        Raises:
            ValueError: If JSON cannot be parsed
        """
        if not response_content or not response_content.strip():
            raise ValueError("Empty response from model")

        try:
            result = json.loads(response_content.strip())
            if isinstance(result, dict):
                return result
        except json.JSONDecodeError:
            pass

        text = response_content
        if "```json" in text:
            start = text.find("```json") + 7
            end = text.find("```", start)
            text = text[start : end if end != -1 else None].strip()
        elif "```" in text:
            start = text.find("```") + 3
            end = text.find("```", start)
            text = text[start : end if end != -1 else None].strip()

        start_idx = text.find("{")
        if start_idx != -1:
            depth = 0
            for i in range(start_idx, len(text)):
                if text[i] == "{":
                    depth += 1
                elif text[i] == "}":
                    depth -= 1
                    if depth == 0:
                        try:
                            parsed = json.loads(text[start_idx : i + 1])
                        except json.JSONDecodeError as e:
                            raise ValueError(f"Malformed JSON in response: {e}") from e
                        if isinstance(parsed, dict):
                            return parsed
                        break

        raise ValueError(f"Could not parse JSON from response: {response_content[:200]}")

    @classmethod
    def parse_issues(cls, response_content: str) -> list[Issue]:
        """
        Parse *response_content* into issues.

        Entries without a message are dropped. Unknown or missing severities
        become ``warning``; missing confidence becomes 0.5; confidence is
        clamped to [0, 1].

        Raises:
            ValueError: If the response holds no ``issues`` list
        """
        data = cls.parse(response_content)
        raw_issues = data.get("issues")
        if not isinstance(raw_issues, list):
            raise ValueError("Response has no 'issues' list")

        issues = []
        for item in raw_issues:
            if not isinstance(item, dict) or not item.get("message"):
                logger.debug("Skipping malformed issue entry: %r", item)
                continue
            issues.append(
                Issue(
                    severity=Severity.parse(item.get("severity"), default=Severity.WARNING),
                    message=str(item["message"]),
                    file=_optional_str(item.get("file")),
                    line=_optional_int(item.get("line")),
                    column=_optional_int(item.get("column")),
                    confidence=_confidence(item.get("confidence")),
                )
            )
        return issues


def _optional_str(value: Any) -> str | None:
    return str(value) if value not in (None, "") else None


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _confidence(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return DEFAULT_CONFIDENCE
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return DEFAULT_CONFIDENCE
    return min(1.0, max(0.0, confidence))
