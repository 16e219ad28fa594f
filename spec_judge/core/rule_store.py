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
Rule content resolution for local paths and remote URLs.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from ..config.constants import SpecJudgeConstants
from .cache import RemoteCache
from .exceptions import FetchError
from .file_loader import language_for, read_text_async
from .models import RuleContent, RuleReference

logger = logging.getLogger(__name__)


class RuleContentStore:
    """
    Resolves rule references to their text.

    Local paths are read from disk every time. Remote URLs are served from the
    :class:`RemoteCache` when an entry exists and fetched over HTTP otherwise.
    With ``revalidate=True`` a cached entry is first checked against a
    ``HEAD`` probe of the URL and re-fetched when stale.

    Example:
        >>> async with RuleContentStore(RemoteCache(".judge-cache")) as store:
        ...     rule = await store.resolve(RuleReference("https://example.com/rules/api.md"))
    """

    def __init__(
        self,
        cache: RemoteCache,
        client: httpx.AsyncClient | None = None,
        revalidate: bool = False,
        timeout: float = SpecJudgeConstants.HTTP_TIMEOUT_SECONDS,
    ):
        """
        Initialize store.

        Args:
            cache: On-disk cache for remote documents
            client: HTTP client to use. When omitted one is created on first
                use and closed by :meth:`aclose`.
            revalidate: Probe cached URLs for freshness before trusting them
            timeout: HTTP timeout in seconds for a client created here
        """
        self.cache = cache
        self.revalidate = revalidate
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> RuleContentStore:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                headers={"Accept": "text/markdown, text/plain, */*"},
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this store created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def resolve(self, ref: RuleReference) -> RuleContent:
        """
        Resolve *ref* to its content.

        Raises:
            FileLoadError: A local rule file cannot be read
            FetchError: A remote rule cannot be retrieved
        """
        if ref.is_remote:
            return await self._resolve_remote(ref)

        content = await read_text_async(ref.path)
        return RuleContent(path=ref.path, content=content, language=language_for(ref.path))

    async def _resolve_remote(self, ref: RuleReference) -> RuleContent:
        url = ref.path
        loop = asyncio.get_running_loop()

        cached = await loop.run_in_executor(None, self.cache.get, url)
        if cached is not None:
            if not self.revalidate or await self._is_fresh(url):
                logger.debug("Using cached rule %s", url)
                return self._to_rule_content(url, cached.content)
            logger.debug("Cached rule %s is stale, re-fetching", url)

        content, headers = await self._fetch(url)

        if ref.cache:
            await loop.run_in_executor(None, self.cache.set, url, content, headers)

        return self._to_rule_content(url, content)

    async def _is_fresh(self, url: str) -> bool:
        """HEAD-probe *url* and compare against the cached entry. A failed probe counts as stale."""
        try:
            response = await self._get_client().head(url)
        except httpx.HTTPError as e:
            logger.warning("Freshness probe for %s failed: %s", url, e)
            return False
        if not response.is_success:
            logger.warning("Freshness probe for %s returned HTTP %d", url, response.status_code)
            return False
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.cache.is_valid, url, dict(response.headers))

    async def _fetch(self, url: str) -> tuple[str, dict[str, str]]:
        logger.debug("Fetching rule %s", url)
        try:
            response = await self._get_client().get(url)
        except httpx.TimeoutException:
            raise FetchError(url, f"timed out after {self.timeout:g}s") from None
        except httpx.HTTPError as e:
            raise FetchError(url, str(e) or type(e).__name__) from e

        if not response.is_success:
            raise FetchError(url, f"HTTP {response.status_code} {response.reason_phrase}".rstrip())

        return response.text, dict(response.headers)

    @staticmethod
    def _to_rule_content(url: str, content: str) -> RuleContent:
        return RuleContent(path=url, content=content, language=language_for(url), source_url=url)
