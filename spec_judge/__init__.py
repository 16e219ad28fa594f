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
spec-judge - Semantic checker that verifies implementations match their specifications.
"""

try:
    from ._version import __version__
except ImportError:
    __version__ = "0.0.0+unknown"


def __getattr__(name: str):
    """Lazy-load public API symbols on first access.

    Keeps ``python -m spec_judge.cli.cli`` and the pre-commit hook from
    pulling in litellm and httpx before they are needed.
    """
    _lazy_map = {
        "Config": (".config.config", "Config"),
        "SpecJudgeConstants": (".config.constants", "SpecJudgeConstants"),
        "CheckEvaluator": (".core.evaluator", "CheckEvaluator"),
        "evaluate": (".core.evaluator", "evaluate"),
        "FileMatcher": (".core.matcher", "FileMatcher"),
        "RemoteCache": (".core.cache", "RemoteCache"),
        "RuleContentStore": (".core.rule_store", "RuleContentStore"),
        "CheckRequest": (".core.models", "CheckRequest"),
        "CheckResult": (".core.models", "CheckResult"),
        "CheckSummary": (".core.models", "CheckSummary"),
        "FilePatterns": (".core.models", "FilePatterns"),
        "Issue": (".core.models", "Issue"),
        "MatchResult": (".core.models", "MatchResult"),
        "RuleBinding": (".core.models", "RuleBinding"),
        "RuleReference": (".core.models", "RuleReference"),
        "RuleResult": (".core.models", "RuleResult"),
        "Severity": (".core.models", "Severity"),
        "load_config": (".core.config_loader", "load_config"),
        "resolve_config": (".core.config_loader", "resolve_config"),
        "create_provider": (".core.providers.factory", "create_provider"),
    }
    if name in _lazy_map:
        module_path, attr = _lazy_map[name]
        import importlib

        mod = importlib.import_module(module_path, __package__)
        val = getattr(mod, attr)
        # Cache on the module so __getattr__ is only called once per symbol
        globals()[name] = val
        return val
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "CheckEvaluator",
    "evaluate",
    "FileMatcher",
    "RemoteCache",
    "RuleContentStore",
    "CheckRequest",
    "CheckResult",
    "CheckSummary",
    "FilePatterns",
    "Issue",
    "MatchResult",
    "RuleBinding",
    "RuleReference",
    "RuleResult",
    "Severity",
    "load_config",
    "resolve_config",
    "create_provider",
    "Config",
    "SpecJudgeConstants",
]
