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
Runtime settings for spec-judge.

The project file (``judge.yaml``) says *what* to check; this class carries the
machine-local knobs (LLM credentials, cache location overrides) that should
not be committed alongside it.
"""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class Config:
    """
    Runtime configuration for spec-judge.

    Values left at their defaults are filled from ``SPEC_JUDGE_*``
    environment variables.
    """

    # LLM Configuration
    llm_api_key: str | None = None
    llm_model: str | None = None
    llm_base_url: str | None = None
    llm_max_tokens: int = 4000
    llm_temperature: float = 0.0
    llm_rate_limit_delay: float = 2.0
    llm_max_retries: int = 3

    # Evaluation overrides (None = use judge.yaml)
    cache_dir: str | None = None
    max_concurrent: int | None = None

    def __post_init__(self):
        """Load configuration from environment variables if not provided."""

        if self.llm_api_key is None:
            self.llm_api_key = os.getenv("SPEC_JUDGE_LLM_API_KEY")

        if self.llm_model is None:
            self.llm_model = os.getenv("SPEC_JUDGE_LLM_MODEL")

        if self.llm_base_url is None:
            self.llm_base_url = os.getenv("SPEC_JUDGE_LLM_BASE_URL")

        if self.cache_dir is None:
            self.cache_dir = os.getenv("SPEC_JUDGE_CACHE_DIR")

        if self.max_concurrent is None:
            if env_concurrent := os.getenv("SPEC_JUDGE_MAX_CONCURRENT"):
                try:
                    self.max_concurrent = int(env_concurrent)
                except ValueError:
                    raise ValueError(f"SPEC_JUDGE_MAX_CONCURRENT must be an integer, got {env_concurrent!r}") from None
                if self.max_concurrent < 1:
                    raise ValueError("SPEC_JUDGE_MAX_CONCURRENT must be at least 1")

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        Returns:
            Config instance with values from environment
        """
        return cls()

    @classmethod
    def from_file(cls, config_file: Path) -> "Config":
        """
        Load configuration from .env file.

        Args:
            config_file: Path to .env file

        Returns:
            Config instance
        """
        if config_file.exists():
            with open(config_file) as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#") and "=" in line:
                        key, value = line.split("=", 1)
                        os.environ[key.strip()] = value.strip()

        return cls.from_env()
