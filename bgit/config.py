# config.py -- bgit configuration
# Copyright (C) 2026 The bgit Authors
#
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later
# bgit is dual-licensed under the Apache License, Version 2.0 and the GNU
# General Public License as published by the Free Software Foundation; version 2.0
# or (at your option) any later version. You can redistribute it and/or
# modify it under the terms of either of these two licenses.
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# You should have received a copy of the licenses; if not, see
# <http://www.gnu.org/licenses/> for a copy of the GNU General Public License
# and <http://www.apache.org/licenses/LICENSE-2.0> for a copy of the Apache
# License, Version 2.0.
#

"""bgit configuration.

Settings live in the ``[bgit]`` section of the usual git configuration
files, e.g.::

    [bgit]
        remote = upstream
        verifyTip = true
        transport = git
        transportTimeout = 120
"""

__all__ = ["Settings", "load_settings"]

from dataclasses import dataclass

from dulwich.config import Config

SECTION = (b"bgit",)

TRANSPORTS = ("dulwich", "git")


@dataclass
class Settings:
    """Options controlling a bgit commit."""

    remote: str = "origin"
    verify_tip: bool = False
    transport: str = "dulwich"
    transport_timeout: float | None = None


def _get(config: Config, name: bytes) -> bytes | None:
    try:
        return config.get(SECTION, name)
    except KeyError:
        return None


def load_settings(config: Config) -> Settings:
    """Read settings from ``config``, falling back to defaults.

    Raises:
      ValueError: If a value cannot be parsed
    """
    settings = Settings()

    remote = _get(config, b"remote")
    if remote:
        settings.remote = remote.decode("utf-8")

    verify_tip = config.get_boolean(SECTION, b"verifyTip")
    if verify_tip is not None:
        settings.verify_tip = verify_tip

    transport = _get(config, b"transport")
    if transport:
        kind = transport.decode("utf-8").lower()
        if kind not in TRANSPORTS:
            raise ValueError(f"bgit.transport must be one of {', '.join(TRANSPORTS)}")
        settings.transport = kind

    timeout = _get(config, b"transportTimeout")
    if timeout:
        seconds = float(timeout)
        if seconds <= 0:
            raise ValueError("bgit.transportTimeout must be positive")
        settings.transport_timeout = seconds

    return settings
