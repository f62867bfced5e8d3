# log_utils.py -- Logging setup for bgit
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

"""Logging setup for bgit.

The ``bgit`` logger stays silent until ``default_logging_config`` is
called, so using bgit as a library prints nothing by itself. The
command-line interface calls it to report warnings and errors on stderr.

GIT_TRACE switches to debug output, like it does for git:

 * ``1``, ``2`` or ``true`` traces to stderr
 * an absolute path appends the trace to that file
"""

__all__ = ["default_logging_config", "trace_handler"]

import logging
import os
import sys
from collections.abc import Mapping

PACKAGE_LOGGER = logging.getLogger("bgit")
_SILENCER = logging.NullHandler()
PACKAGE_LOGGER.addHandler(_SILENCER)

CLI_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


def trace_handler(env: Mapping[str, str] | None = None) -> logging.Handler | None:
    """Create the handler GIT_TRACE asks for.

    Args:
      env: Environment to read GIT_TRACE from (defaults to os.environ)
    Returns: A handler, or None if tracing is off or the target is unusable
    """
    if env is None:
        env = os.environ
    target = env.get("GIT_TRACE", "").strip()
    if target.lower() in ("1", "2", "true"):
        return logging.StreamHandler(sys.stderr)
    if not os.path.isabs(target):
        return None
    try:
        return logging.FileHandler(target, mode="a")
    except OSError as e:
        sys.stderr.write(f"warning: cannot write trace to {target}: {e}\n")
        return None


def default_logging_config(env: Mapping[str, str] | None = None) -> None:
    """Send bgit's log records to stderr, or to the GIT_TRACE target."""
    PACKAGE_LOGGER.removeHandler(_SILENCER)
    handler = trace_handler(env)
    if handler is None:
        logging.basicConfig(
            level=logging.WARNING,
            handlers=[logging.StreamHandler(sys.stderr)],
            format=CLI_FORMAT,
        )
    else:
        logging.basicConfig(
            level=logging.DEBUG, handlers=[handler], format=TRACE_FORMAT
        )
