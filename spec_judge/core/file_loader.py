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
Implementation file loading with language tagging.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from .exceptions import FileLoadError
from .models import FileContent

# Case-sensitive: "TS" is not "ts"
LANGUAGE_MAP: dict[str, str] = {
    "ts": "typescript",
    "tsx": "typescript",
    "js": "javascript",
    "jsx": "javascript",
    "py": "python",
    "rb": "ruby",
    "go": "go",
    "rs": "rust",
    "java": "java",
    "c": "c",
    "cpp": "cpp",
    "cs": "csharp",
    "php": "php",
    "swift": "swift",
    "kt": "kotlin",
    "sh": "bash",
    "yml": "yaml",
    "yaml": "yaml",
    "json": "json",
    "md": "markdown",
}


def language_for(path: str) -> str:
    """Language tag for *path*; unknown extensions are returned as-is (``""`` when none)."""
    ext = Path(path).suffix[1:]
    return LANGUAGE_MAP.get(ext, ext)


def read_text(path: str | Path) -> str:
    """Read a UTF-8 text file, raising FileLoadError on any failure."""
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        raise FileLoadError(str(path), "no such file") from None
    except (OSError, UnicodeDecodeError) as e:
        raise FileLoadError(str(path), str(e)) from e


def load_file(path: str) -> FileContent:
    """Load *path* with its language tag."""
    return FileContent(path=path, content=read_text(path), language=language_for(path))


async def load_file_async(path: str) -> FileContent:
    """:func:`load_file` on the default executor so reads don't block the event loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, load_file, path)


async def read_text_async(path: str | Path) -> str:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, read_text, path)
