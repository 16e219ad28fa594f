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
Reporter selection by name.
"""

from __future__ import annotations

from .json_reporter import JSONReporter
from .stdout_reporter import StdoutReporter

REPORTERS = ("stdout", "json")


def create_reporter(kind: str) -> StdoutReporter | JSONReporter:
    """
    Build the reporter called *kind*.

    Raises:
        ValueError: If *kind* is not ``stdout`` or ``json``
    """
    if kind == "stdout":
        return StdoutReporter()
    if kind == "json":
        return JSONReporter()
    raise ValueError(f"Unknown reporter {kind!r}. Valid values: {', '.join(REPORTERS)}")
