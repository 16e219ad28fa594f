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
Provider construction.

The CLI and the pre-commit hook build providers through
:func:`create_provider` so that model selection and credentials are resolved
the same way everywhere.
"""

from __future__ import annotations

import logging

from ...config.config import Config
from ...config.constants import SpecJudgeConstants
from ..exceptions import ProviderNotAvailableError
from .base import Provider
from .mock import MockProvider

logger = logging.getLogger(__name__)


def create_provider(
    name: str,
    config: Config | None = None,
    *,
    timeout: float = SpecJudgeConstants.DEFAULT_TIMEOUT_SECONDS,
) -> Provider:
    """Build the provider called *name*.

    Args:
        name: ``claude``, ``gemini`` or ``mock``
        config: Runtime settings (model override, credentials). Read from
            the environment when omitted.
        timeout: Default per-check timeout in seconds

    Returns:
        A provider instance; call ``validate()`` before use.

    Raises:
        ProviderNotAvailableError: If *name* is not a known provider
    """
    if name == "mock":
        return MockProvider()

    if name not in SpecJudgeConstants.DEFAULT_PROVIDER_MODELS:
        raise ProviderNotAvailableError(
            name, f"unknown provider; choose one of {', '.join(SpecJudgeConstants.PROVIDERS)}"
        )

    # Imported lazily so the mock provider works without loading litellm
    from .llm import LLMProvider

    config = config or Config.from_env()
    model = config.llm_model or SpecJudgeConstants.DEFAULT_PROVIDER_MODELS[name]
    logger.debug("Using model %s for provider %s", model, name)

    return LLMProvider(
        name=name,
        model=model,
        api_key=config.llm_api_key,
        base_url=config.llm_base_url,
        max_tokens=config.llm_max_tokens,
        temperature=config.llm_temperature,
        max_retries=config.llm_max_retries,
        rate_limit_delay=config.llm_rate_limit_delay,
        timeout=timeout,
    )
