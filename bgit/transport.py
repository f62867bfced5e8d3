# transport.py -- Remote fetch and push
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

"""Remote fetch and push.

Two transports are provided. ``PorcelainTransport`` talks to the remote
in-process through dulwich. ``SubprocessTransport`` runs the user's ``git``
binary, so whatever credential setup git has is used as-is.
"""

__all__ = [
    "FetchFailure",
    "PorcelainTransport",
    "SubprocessTransport",
    "Transport",
    "get_transport",
]

import io
import logging
import subprocess
from typing import BinaryIO

from dulwich import porcelain
from dulwich.repo import Repo

from .errors import Error, PushFailure

logger = logging.getLogger(__name__)


class FetchFailure(Error):
    """Refreshing remote-tracking refs failed."""


class Transport:
    """Moves refs and objects between the repository and a remote."""

    def fetch(self, remote: str) -> None:
        """Refresh the remote-tracking refs for ``remote``.

        Raises:
          FetchFailure: If the fetch did not complete
        """
        raise NotImplementedError(self.fetch)

    def push(self, remote: str, refspec: str) -> None:
        """Push ``refspec`` to ``remote``.

        Raises:
          PushFailure: If the remote was not updated
        """
        raise NotImplementedError(self.push)


class PorcelainTransport(Transport):
    """Transport using dulwich's own protocol implementations.

    Any exception raised by dulwich while talking to the remote, including
    authentication and HTTP errors, is reported as a FetchFailure or
    PushFailure.

    Args:
      repo: Repository to fetch into and push from
      errstream: Stream for progress and remote messages (discarded if None)
    """

    def __init__(self, repo: Repo, errstream: BinaryIO | None = None) -> None:
        self.repo = repo
        self.errstream = errstream if errstream is not None else io.BytesIO()

    def fetch(self, remote: str) -> None:
        logger.debug("Fetching %s", remote)
        try:
            porcelain.fetch(self.repo, remote, errstream=self.errstream)
        except Exception as e:
            raise FetchFailure(f"Fetch from {remote} failed: {e}") from e

    def push(self, remote: str, refspec: str) -> None:
        logger.debug("Pushing %s to %s", refspec, remote)
        try:
            result = porcelain.push(
                self.repo, remote, [refspec.encode()], errstream=self.errstream
            )
        except Exception as e:
            raise PushFailure(f"Push to {remote} failed: {e}") from e
        for ref, status in (result.ref_status or {}).items():
            if status is not None:
                raise PushFailure(
                    f"Push of {ref.decode('utf-8', 'replace')} to {remote} "
                    f"failed: {status}"
                )


class SubprocessTransport(Transport):
    """Transport running ``git fetch`` and ``git push``.

    Args:
      workdir: Working directory of the repository
      git: Name or path of the git executable
      timeout: Seconds to wait for git before giving up, or None to wait
        indefinitely
    """

    def __init__(
        self, workdir: str, git: str = "git", timeout: float | None = None
    ) -> None:
        self.workdir = workdir
        self.git = git
        self.timeout = timeout

    def _run(self, *args: str) -> int:
        argv = [self.git, "-C", self.workdir, *args]
        logger.debug("Running %s", " ".join(argv))
        return subprocess.call(argv, timeout=self.timeout)

    def fetch(self, remote: str) -> None:
        try:
            ret = self._run("fetch", remote)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise FetchFailure(f"Failed to run 'git fetch': {e}") from e
        if ret != 0:
            raise FetchFailure(f"git fetch {remote} exited with status {ret}")

    def push(self, remote: str, refspec: str) -> None:
        try:
            ret = self._run("push", remote, refspec)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise PushFailure(f"Failed to run 'git push': {e}") from e
        if ret != 0:
            raise PushFailure(f"git push {remote} {refspec} exited with status {ret}")


def get_transport(
    repo: Repo,
    kind: str = "dulwich",
    timeout: float | None = None,
    errstream: BinaryIO | None = None,
) -> Transport:
    """Create the transport named by ``kind`` ("dulwich" or "git").

    ``errstream`` receives dulwich's progress output; git writes to the
    inherited stderr itself.
    """
    if kind == "dulwich":
        return PorcelainTransport(repo, errstream=errstream)
    if kind == "git":
        return SubprocessTransport(repo.path, timeout=timeout)
    raise ValueError(f"Unknown transport {kind!r}")
