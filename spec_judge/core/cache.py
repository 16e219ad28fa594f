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
On-disk cache for remote rule documents.

One JSON file per URL, named by the SHA-256 hex digest of the URL::

    <cache_dir>/<sha256(url)>.json
    {"content": "...", "timestamp": "...", "headers": {...}, "hash": "<sha256(content)>"}

There is no index; the existence of the per-URL file is the existence check.
Caching is an optimisation only: unreadable entries are misses and failed
writes are logged and skipped. Concurrent writers are not coordinated; the
last write wins.
"""

from __future__ import annotations

import hashlib
import json
import logging
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from pathlib import Path

from ..config.constants import SpecJudgeConstants
from .exceptions import CacheError
from .models import CachedEntry

logger = logging.getLogger(__name__)

_MAX_AGE_RE = re.compile(r"max-age=(\d+)")


def url_hash(url: str) -> str:
    return hashlib.sha256(url.encode("utf-8")).hexdigest()


def content_hash(content: str) -> str:
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def _parse_http_date(value: str) -> datetime | None:
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _lower_keys(headers: Mapping[str, str]) -> dict[str, str]:
    return {str(k).lower(): str(v) for k, v in headers.items()}


class RemoteCache:
    """Content cache for remote rule references with HTTP-style freshness checks."""

    def __init__(self, cache_dir: str | Path, ttl_seconds: int = SpecJudgeConstants.DEFAULT_CACHE_TTL_SECONDS):
        """
        Initialize cache.

        Args:
            cache_dir: Directory holding one JSON file per cached URL
            ttl_seconds: Validity window used when the live response gives
                no etag, last-modified or max-age to compare against
        """
        self.cache_dir = Path(cache_dir)
        self.ttl_seconds = ttl_seconds

    def path_for(self, url: str) -> Path:
        return self.cache_dir / f"{url_hash(url)}.json"

    def get(self, url: str) -> CachedEntry | None:
        """Return the cached entry for *url*, or None on a miss or unreadable entry."""
        cache_path = self.path_for(url)
        try:
            raw = cache_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read cache entry %s: %s", cache_path, e)
            return None

        try:
            return CachedEntry.from_dict(json.loads(raw))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Discarding corrupt cache entry %s: %s", cache_path, e)
            return None

    def set(self, url: str, content: str, headers: Mapping[str, str]) -> CachedEntry | None:
        """
        Persist *content* for *url* with the response *headers*.

        Returns:
            The written entry, or None if the write failed (never raises)
        """
        entry = CachedEntry(
            content=content,
            timestamp=datetime.now(timezone.utc),
            headers=_lower_keys(headers),
            hash=content_hash(content),
        )
        cache_path = self.path_for(url)
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            cache_path.write_text(json.dumps(entry.to_dict(), indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not write cache entry for %s: %s", url, e)
            return None
        return entry

    def is_valid(self, url: str, headers: Mapping[str, str], now: datetime | None = None) -> bool:
        """
        Decide whether the cached entry for *url* is still fresh.

        Args:
            url: Remote rule URL
            headers: Headers from a fresh probe of the same URL
            now: Reference time (defaults to the current time)

        Returns:
            False if nothing is cached; otherwise the first applicable of:
            etag equality (when both sides carry one), last-modified not
            newer than cached, age under ``max-age``, age under the default TTL
        """
        cached = self.get(url)
        if cached is None:
            return False

        live = _lower_keys(headers)
        stored = cached.headers

        etag = live.get("etag")
        cached_etag = stored.get("etag")
        if etag is not None and cached_etag is not None:
            # A changed entity tag means the document changed, whatever its age
            return etag == cached_etag

        last_modified = live.get("last-modified")
        cached_last_modified = stored.get("last-modified")
        if last_modified is not None and cached_last_modified is not None:
            live_date = _parse_http_date(last_modified)
            cached_date = _parse_http_date(cached_last_modified)
            if live_date is not None and cached_date is not None:
                return live_date <= cached_date
            # Unparseable dates never compare as fresh
            return False

        age = self._age_seconds(cached, now)

        cache_control = live.get("cache-control")
        if cache_control is not None:
            max_age_match = _MAX_AGE_RE.search(cache_control)
            if max_age_match is not None:
                return age < int(max_age_match.group(1))

        return age < self.ttl_seconds

    def clear(self) -> int:
        """
        Delete every cached entry.

        Returns:
            Number of entries removed

        Raises:
            CacheError: If the cache directory cannot be listed or an entry cannot be removed
        """
        if not self.cache_dir.exists():
            return 0
        removed = 0
        try:
            for entry in self.cache_dir.glob("*.json"):
                entry.unlink()
                removed += 1
        except OSError as e:
            raise CacheError("clear", str(e)) from e
        logger.info("Removed %d cached rule documents from %s", removed, self.cache_dir)
        return removed

    @staticmethod
    def _age_seconds(entry: CachedEntry, now: datetime | None) -> float:
        now = now or datetime.now(timezone.utc)
        timestamp = entry.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return (now - timestamp).total_seconds()
