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
Compliance prompt construction with injection protection using random delimiters.
"""

import logging
import secrets

from ...config.constants import SpecJudgeConstants
from .base import ProviderRequest

logger = logging.getLogger(__name__)

START_PLACEHOLDER = "<!---UNTRUSTED_INPUT_START--->"
END_PLACEHOLDER = "<!---UNTRUSTED_INPUT_END--->"

FALLBACK_SYSTEM_PROMPT = (
    "You are a code reviewer that checks if implementation files comply with a rule. "
    'Respond only with JSON of the form {"issues": [{"severity", "message", "file", "line", "confidence"}]}.'
)


class PromptBuilder:
    """Builds compliance-check prompts."""

    def __init__(self):
        self.system_prompt = self._load_system_prompt()

    @staticmethod
    def _load_system_prompt() -> str:
        prompt_file = SpecJudgeConstants.get_prompts_path() / "compliance_system_prompt.md"
        try:
            return prompt_file.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning("System prompt not found at %s: %s", prompt_file, e)
            return FALLBACK_SYSTEM_PROMPT

    def build_messages(self, request: ProviderRequest) -> tuple[list[dict[str, str]], bool]:
        """
        Create chat messages for *request*.

        Implementation files are wrapped in random delimiter tags so that file
        content cannot close the untrusted block early.

        Returns:
            Tuple of (messages, injection_detected)
        """
        random_id = secrets.token_hex(16)
        start_tag = f"<!---UNTRUSTED_INPUT_START_{random_id}--->"
        end_tag = f"<!---UNTRUSTED_INPUT_END_{random_id}--->"

        files = "\n".join(self.format_file(f.path, f.content, f.language) for f in request.implementations)
        injection_detected = start_tag in files or end_tag in files
        if injection_detected:
            logger.warning("Delimiter collision in implementation files for rule %s", request.rule.path)

        system_prompt = self.system_prompt.replace(START_PLACEHOLDER, start_tag).replace(END_PLACEHOLDER, end_tag)

        user_prompt = f"""Check if the following implementation files comply with the given specification/rule.

## Specification/Rule:
{request.rule.content}

{start_tag}
{files}
{end_tag}

Analyze the code and report any violations or issues."""

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        return messages, injection_detected

    @staticmethod
    def format_file(path: str, content: str, language: str | None) -> str:
        return f"""## File: {path}
Language: {language or "text"}

```{language or ""}
{content}
```
"""
