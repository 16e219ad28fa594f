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
LLM-backed provider.

Sends each compliance check to a chat model through LiteLLM, retrying
rate-limit errors with exponential backoff and parsing the JSON answer into
issues. Works with any LiteLLM model string (``anthropic/...``,
``gemini/...``, ``openai/...``, ...).
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
import warnings
from typing import Any

from litellm import acompletion

from ...config.constants import SpecJudgeConstants
from ..exceptions import ProviderError, ProviderNotAvailableError, ProviderTimeoutError
from .base import CheckMetadata, CheckResponse, Provider, ProviderRequest
from .prompt_builder import PromptBuilder
from .response_parser import ResponseParser

logger = logging.getLogger(__name__)

# Suppress LiteLLM cosmetic warnings (doesn't affect functionality)
warnings.filterwarnings("ignore", message=".*Pydantic serializer warnings.*")
warnings.filterwarnings("ignore", message=".*close_litellm_async_clients.*")

RATE_LIMIT_KEYWORDS = ("rate limit", "quota", "too many requests", "429", "throttling")


class LLMProvider(Provider):
    """Provider that asks a chat model to review files against a rule."""

    def __init__(
        self,
        name: str,
        model: str,
        api_key: str | None = None,
        base_url: str | None = None,
        max_tokens: int = 4000,
        temperature: float = 0.0,
        max_retries: int = 3,
        rate_limit_delay: float = 2.0,
        timeout: float = SpecJudgeConstants.DEFAULT_TIMEOUT_SECONDS,
    ):
        """
        Initialize provider.

        Args:
            name: Provider name shown in reports (``claude``, ``gemini``)
            model: LiteLLM model identifier
            api_key: API key (LiteLLM falls back to the vendor's env var)
            base_url: Custom API base URL
            max_tokens: Maximum tokens for response
            temperature: Sampling temperature
            max_retries: Max retry attempts on rate limits
            rate_limit_delay: Base delay for exponential backoff
            timeout: Default per-check timeout in seconds
        """
        self.name = name
        self.model = model
        self.api_key = api_key
        self.base_url = base_url
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.max_retries = max_retries
        self.rate_limit_delay = rate_limit_delay
        self.timeout = timeout

        self.prompt_builder = PromptBuilder()
        self.response_schema = self._load_response_schema()

    def _load_response_schema(self) -> dict[str, Any] | None:
        schema_path = SpecJudgeConstants.get_prompts_path() / "compliance_response_schema.json"
        try:
            loaded: dict[str, Any] = json.loads(schema_path.read_text(encoding="utf-8"))
            return loaded
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not load response schema: %s", e)
            return None

    def _request_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if self.api_key:
            params["api_key"] = self.api_key
        if self.base_url:
            params["api_base"] = self.base_url
        return params

    async def validate(self) -> None:
        """Send a one-line ping; any failure means the provider is unavailable."""
        try:
            response = await asyncio.wait_for(
                acompletion(
                    model=self.model,
                    messages=[{"role": "user", "content": "Say 'ok' if you're working"}],
                    max_tokens=5,
                    **self._request_params(),
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            raise ProviderNotAvailableError(self.name, f"no response within {self.timeout:g}s") from None
        except Exception as e:
            raise ProviderNotAvailableError(self.name, str(e)) from e

        if not response.choices:
            raise ProviderNotAvailableError(self.name, "empty response")

    async def check(self, request: ProviderRequest) -> CheckResponse:
        """
        Review *request* with the model.

        Raises:
            ProviderTimeoutError: The call exceeded ``request.timeout``
            ProviderError: The call failed or the answer could not be parsed
        """
        start_time = time.perf_counter()
        timeout = request.timeout if request.timeout is not None else self.timeout
        messages, _ = self.prompt_builder.build_messages(request)

        try:
            content = await asyncio.wait_for(self._make_request(messages, request.rule.path), timeout=timeout)
        except asyncio.TimeoutError:
            raise ProviderTimeoutError(self.name, timeout) from None
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(self.name, str(e)) from e

        try:
            issues = ResponseParser.parse_issues(content)
        except ValueError as e:
            raise ProviderError(self.name, f"unparseable response: {e}") from e

        return CheckResponse(
            issues=issues,
            metadata=CheckMetadata(
                model=self.model,
                duration_ms=(time.perf_counter() - start_time) * 1000,
            ),
        )

    async def _make_request(self, messages: list[dict[str, str]], context: str) -> str:
        """Call the model, retrying rate-limit errors with exponential backoff."""
        last_exception: Exception | None = None

        for attempt in range(self.max_retries + 1):
            try:
                request_params: dict[str, Any] = {
                    "model": self.model,
                    "messages": messages,
                    "max_tokens": self.max_tokens,
                    "temperature": self.temperature,
                    **self._request_params(),
                }
                if self.response_schema:
                    request_params["response_format"] = {
                        "type": "json_schema",
                        "json_schema": {
                            "name": "compliance_check_response",
                            "schema": self.response_schema,
                            "strict": True,
                        },
                    }

                response = await acompletion(**request_params)
                content: str = response.choices[0].message.content or ""
                return content

            except Exception as e:
                last_exception = e
                error_msg = str(e).lower()

                if any(keyword in error_msg for keyword in RATE_LIMIT_KEYWORDS) and attempt < self.max_retries:
                    delay = (2**attempt) * self.rate_limit_delay
                    logger.warning(
                        "Rate limit hit for %s, retrying in %ss (attempt %d/%d)",
                        context,
                        delay,
                        attempt + 1,
                        self.max_retries + 1,
                    )
                    await asyncio.sleep(delay)
                    continue

                logger.error("LLM API error for %s: %s", context, e)
                break

        if last_exception is not None:
            raise ProviderError(self.name, str(last_exception)) from last_exception
        raise ProviderError(self.name, "all retries exhausted")
