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

"""spec-judge exceptions.

Every exception inherits from JudgeError and carries a closed ``kind`` tag
(:class:`ErrorKind`), so callers can either catch by class or dispatch on the
tag.

Example:
    >>> from spec_judge.core.config_loader import load_config
    >>> from spec_judge.core.exceptions import ConfigNotFoundError, JudgeError
    >>>
    >>> try:
    ...     config = load_config("judge.yaml")
    ... except ConfigNotFoundError as e:
    ...     print(f"Run 'spec-judge init' first: {e}")
    ... except JudgeError as e:
    ...     print(f"{e.kind.value}: {e}")
"""

import asyncio
from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds."""

    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    PROVIDER_NOT_AVAILABLE = "PROVIDER_NOT_AVAILABLE"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    NETWORK_ERROR = "NETWORK_ERROR"
    CACHE_ERROR = "CACHE_ERROR"
    GIT_ERROR = "GIT_ERROR"
    TIMEOUT = "TIMEOUT"
    UNKNOWN = "UNKNOWN"


class JudgeError(Exception):
    """Base exception for all spec-judge errors."""

    kind: ErrorKind = ErrorKind.UNKNOWN


class ConfigNotFoundError(JudgeError):
    """Raised when the configuration file does not exist."""

    kind = ErrorKind.CONFIG_NOT_FOUND

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Configuration file not found: {path}")


class ConfigInvalidError(JudgeError):
    """Raised when the configuration file cannot be parsed or fails validation.

    This can indicate:
    - Malformed YAML
    - Unsupported version or provider
    - Missing or mistyped fields in a rule binding
    - Duplicate binding names
    """

    kind = ErrorKind.CONFIG_INVALID

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid configuration at {path}: {reason}")


class ProviderNotAvailableError(JudgeError):
    """Raised by ``Provider.validate()`` when the oracle cannot be reached."""

    kind = ErrorKind.PROVIDER_NOT_AVAILABLE

    def __init__(self, provider: str, reason: str = ""):
        self.provider = provider
        self.reason = reason
        message = f"Provider not available: {provider}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ProviderError(JudgeError):
    """Raised when a provider call fails or returns an unusable response."""

    kind = ErrorKind.PROVIDER_ERROR

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")


class ProviderTimeoutError(ProviderError):
    """Raised when a provider call exceeds its timeout."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, provider: str, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(provider, f"check timed out after {timeout_seconds:g}s")


class FileLoadError(JudgeError):
    """Raised when an implementation or local rule file cannot be read."""

    kind = ErrorKind.FILE_NOT_FOUND

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Failed to read {path}: {reason}")


class FetchError(JudgeError):
    """Raised when a remote rule reference cannot be retrieved."""

    kind = ErrorKind.NETWORK_ERROR

    def __init__(self, url: str, reason: str):
        self.url = url
        super().__init__(f"Failed to fetch {url}: {reason}")


class CacheError(JudgeError):
    """Raised by explicit cache maintenance (``RemoteCache.clear``).

    Reads and writes on the evaluation path never raise this; they degrade
    to a miss or a skipped write.
    """

    kind = ErrorKind.CACHE_ERROR

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"Cache {operation} failed: {message}")


class GitError(JudgeError):
    """Raised when a git command used to collect files fails."""

    kind = ErrorKind.GIT_ERROR

    def __init__(self, command: str, message: str):
        self.command = command
        super().__init__(f"Git command failed ({command}): {message}")


def error_kind_of(exc: BaseException) -> ErrorKind:
    """Return the :class:`ErrorKind` for any exception (``UNKNOWN`` for foreign ones)."""
    if isinstance(exc, JudgeError):
        return exc.kind
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return ErrorKind.TIMEOUT
    return ErrorKind.UNKNOWN
