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
Check evaluator: fans rule bindings out to a provider and aggregates the verdict.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from pathlib import Path
from typing import TypeVar

import httpx

from ..config.constants import SpecJudgeConstants
from .cache import RemoteCache
from .exceptions import ProviderTimeoutError, error_kind_of
from .file_loader import load_file_async
from .matcher import FileMatcher
from .models import (
    BindingState,
    CheckRequest,
    CheckResult,
    CheckSummary,
    Issue,
    RuleBinding,
    RuleResult,
    Severity,
)
from .providers.base import Provider, ProviderRequest
from .rule_store import RuleContentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    """Split *items* into consecutive groups of at most *size*."""
    if size < 1:
        raise ValueError(f"Chunk size must be at least 1, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def build_summary(rule_results: Sequence[RuleResult], duration_ms: float) -> CheckSummary:
    """Aggregate *rule_results* into a summary with a pass/fail verdict."""
    issues_by_severity = {s.value: 0 for s in Severity}
    total_issues = 0
    for result in rule_results:
        for issue in result.issues:
            issues_by_severity[issue.severity.value] += 1
            total_issues += 1

    return CheckSummary(
        total_rules=len(rule_results),
        total_issues=total_issues,
        issues_by_severity=issues_by_severity,
        duration_ms=duration_ms,
        passed=determine_passed(rule_results),
        rules_with_errors=sum(1 for r in rule_results if r.errored),
    )


def determine_passed(rule_results: Sequence[RuleResult]) -> bool:
    """
    The run fails if any binding errored, or if any kept issue reaches its
    own binding's ``fail_on`` severity.
    """
    return not any(result.failed for result in rule_results)


class CheckEvaluator:
    """
    Runs every rule binding of a request against the provider.

    Bindings are processed with at most ``max_concurrent`` in flight. With the
    ``grouped`` schedule they run in consecutive groups, each group finishing
    before the next starts; with ``sliding`` a new binding starts as soon as a
    slot frees up. Result order always follows the input binding order.

    Example:
        >>> evaluator = CheckEvaluator()
        >>> result = evaluator.evaluate_sync(
        ...     CheckRequest(files=["src/api/users.ts"], bindings=bindings, provider=MockProvider())
        ... )
        >>> result.summary.passed
        True
    """

    def __init__(
        self,
        matcher: FileMatcher | None = None,
        working_directory: str | Path | None = None,
        schedule: str = SpecJudgeConstants.DEFAULT_SCHEDULE,
        timeout_seconds: float = SpecJudgeConstants.DEFAULT_TIMEOUT_SECONDS,
        revalidate_remote_rules: bool = False,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize evaluator.

        Args:
            matcher: Pre-initialized matcher. When omitted, a matcher for
                *working_directory* is created and initialized per run.
            working_directory: Directory whose ``.gitignore`` applies
            schedule: ``grouped`` or ``sliding``
            timeout_seconds: Timeout for each provider call
            revalidate_remote_rules: Probe cached remote rules for freshness
            http_client: HTTP client for remote rules (created per run if omitted)
        """
        if schedule not in SpecJudgeConstants.SCHEDULES:
            raise ValueError(f"Unknown schedule {schedule!r}. Valid values: {', '.join(SpecJudgeConstants.SCHEDULES)}")
        self.matcher = matcher
        self.working_directory = working_directory
        self.schedule = schedule
        self.timeout_seconds = timeout_seconds
        self.revalidate_remote_rules = revalidate_remote_rules
        self.http_client = http_client

    def _get_matcher(self) -> FileMatcher:
        if self.matcher is not None:
            return self.matcher
        matcher = FileMatcher(self.working_directory)
        matcher.initialize()
        return matcher

    async def evaluate(self, request: CheckRequest) -> CheckResult:
        """
        Evaluate *request*.

        Args:
            request: Files, bindings, provider, concurrency bound and cache dir

        Returns:
            CheckResult with one RuleResult per binding, in binding order

        Raises:
            ValueError: If ``request.max_concurrent`` is less than 1
        """
        if request.max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {request.max_concurrent}")

        start_time = time.perf_counter()
        match_result = self._get_matcher().match(request.files, request.bindings)
        cache = RemoteCache(request.cache_dir)

        async with RuleContentStore(
            cache, client=self.http_client, revalidate=self.revalidate_remote_rules
        ) as store:

            async def run(binding: RuleBinding) -> RuleResult:
                return await self._check_binding(binding, match_result.files_for(binding), request.provider, store)

            if self.schedule == "sliding":
                rule_results = await self._run_sliding(request.bindings, request.max_concurrent, run)
            else:
                rule_results = await self._run_grouped(request.bindings, request.max_concurrent, run)

        duration_ms = (time.perf_counter() - start_time) * 1000
        summary = build_summary(rule_results, duration_ms)
        logger.info(
            "Checked %d rule bindings: %d issues, %d errored, %s",
            summary.total_rules,
            summary.total_issues,
            summary.rules_with_errors,
            "passed" if summary.passed else "failed",
        )
        return CheckResult(rule_results=rule_results, summary=summary)

    def evaluate_sync(self, request: CheckRequest) -> CheckResult:
        """Synchronous wrapper for :meth:`evaluate`."""
        return asyncio.run(self.evaluate(request))

    @staticmethod
    async def _run_grouped(bindings, max_concurrent, run) -> list[RuleResult]:
        rule_results: list[RuleResult] = []
        for group in chunk(bindings, max_concurrent):
            rule_results.extend(await asyncio.gather(*(run(binding) for binding in group)))
        return rule_results

    @staticmethod
    async def _run_sliding(bindings, max_concurrent, run) -> list[RuleResult]:
        semaphore = asyncio.Semaphore(max_concurrent)

        async def bounded(binding: RuleBinding) -> RuleResult:
            async with semaphore:
                return await run(binding)

        return list(await asyncio.gather(*(bounded(binding) for binding in bindings)))

    async def _check_binding(
        self,
        binding: RuleBinding,
        files: list[str],
        provider: Provider,
        store: RuleContentStore,
    ) -> RuleResult:
        """Check one binding. Never raises: failures become ``RuleResult.error``."""
        if not files:
            return RuleResult(binding=binding)

        start_time = time.perf_counter()
        state = BindingState.PENDING
        try:
            implementations = await asyncio.gather(*(load_file_async(f) for f in files))
            state = BindingState.FILES_LOADED
            logger.debug("Binding %s: %s (%d files)", binding.name, state.value, len(implementations))

            state = BindingState.RULES_EVALUATING
            issues: list[Issue] = []
            for ref in binding.rules:
                rule = await store.resolve(ref)
                provider_request = ProviderRequest(
                    rule=rule,
                    implementations=list(implementations),
                    timeout=self.timeout_seconds,
                )
                try:
                    response = await asyncio.wait_for(provider.check(provider_request), timeout=self.timeout_seconds)
                except asyncio.TimeoutError:
                    raise ProviderTimeoutError(provider.name, self.timeout_seconds) from None

                kept = [i for i in response.issues if i.confidence >= binding.confidence_threshold]
                logger.debug(
                    "Binding %s, rule %s: %d issues, %d above confidence %.2f",
                    binding.name,
                    ref.path,
                    len(response.issues),
                    len(kept),
                    binding.confidence_threshold,
                )
                issues.extend(issue.with_rule_name(binding.name) for issue in kept)

        except Exception as e:
            logger.error("Rule binding %s failed during %s: %s", binding.name, state.value, e)
            return RuleResult(
                binding=binding,
                duration_ms=(time.perf_counter() - start_time) * 1000,
                error=str(e) or type(e).__name__,
                error_kind=error_kind_of(e),
                state=BindingState.ERRORED,
            )

        return RuleResult(
            binding=binding,
            issues=issues,
            duration_ms=(time.perf_counter() - start_time) * 1000,
            files_checked=len(files),
            checked_files=list(files),
            state=BindingState.COMPLETED,
        )


def evaluate(
    request: CheckRequest,
    working_directory: str | Path | None = None,
    schedule: str = SpecJudgeConstants.DEFAULT_SCHEDULE,
    timeout_seconds: float = SpecJudgeConstants.DEFAULT_TIMEOUT_SECONDS,
) -> CheckResult:
    """
    Convenience function to evaluate a request synchronously.

    Args:
        request: Files, bindings, provider, concurrency bound and cache dir
        working_directory: Directory whose ``.gitignore`` applies
        schedule: ``grouped`` or ``sliding``
        timeout_seconds: Timeout for each provider call

    Returns:
        CheckResult
    """
    evaluator = CheckEvaluator(
        working_directory=working_directory,
        schedule=schedule,
        timeout_seconds=timeout_seconds,
    )
    return evaluator.evaluate_sync(request)
