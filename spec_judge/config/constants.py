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
Constants for spec-judge.
"""

from pathlib import Path

try:
    from .._version import __version__ as PACKAGE_VERSION
except Exception:  # pragma: no cover
    PACKAGE_VERSION = "0.0.0-dev"


class SpecJudgeConstants:
    """Constants used throughout the checker."""

    VERSION = PACKAGE_VERSION

    # Project paths
    PACKAGE_ROOT = Path(__file__).parent.parent

    # Resource paths
    DATA_DIR = PACKAGE_ROOT / "data"
    PROMPTS_DIR = DATA_DIR / "prompts"
    CONFIG_TEMPLATE = DATA_DIR / "default_config.yaml"

    # Configuration file
    CONFIG_VERSION = "1.0"
    DEFAULT_CONFIG_FILE = "judge.yaml"
    IGNORE_FILE = ".gitignore"

    # Default values (applied by resolve_config)
    DEFAULT_TIMEOUT_SECONDS = 120
    DEFAULT_CACHE_DIR = ".judge-cache"
    DEFAULT_FAIL_ON_ISSUES = True
    DEFAULT_MAX_CONCURRENT = 5
    DEFAULT_FAIL_ON = "error"
    DEFAULT_CONFIDENCE_THRESHOLD = 0.8
    DEFAULT_RULE_CACHE = True
    DEFAULT_SCHEDULE = "grouped"

    # Remote rule cache
    DEFAULT_CACHE_TTL_SECONDS = 3600
    HTTP_TIMEOUT_SECONDS = 30.0

    # Providers
    PROVIDERS = ("claude", "gemini", "mock")
    DEFAULT_PROVIDER_MODELS = {
        "claude": "anthropic/claude-3-5-sonnet-20241022",
        "gemini": "gemini/gemini-1.5-pro",
    }

    # Severity levels (higher number = more severe)
    SEVERITY_ERROR = "error"
    SEVERITY_WARNING = "warning"
    SEVERITY_NOTICE = "notice"
    SEVERITY_RANKS = {
        SEVERITY_ERROR: 3,
        SEVERITY_WARNING: 2,
        SEVERITY_NOTICE: 1,
    }

    SCHEDULES = ("grouped", "sliding")

    @classmethod
    def get_prompts_path(cls) -> Path:
        """Get path to prompts directory."""
        return cls.PROMPTS_DIR

    @classmethod
    def get_config_template_path(cls) -> Path:
        """Get path to the ``spec-judge init`` configuration template."""
        return cls.CONFIG_TEMPLATE
