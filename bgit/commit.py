# commit.py -- Commit creation and branch advancement
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

"""Commit creation and branch advancement."""

__all__ = [
    "advance_branch",
    "build_commit",
    "default_message",
]

import logging
import time

from dulwich.file import FileLocked
from dulwich.object_store import BaseObjectStore
from dulwich.objects import Commit
from dulwich.refs import RefsContainer
from dulwich.repo import InvalidUserIdentity, check_user_identity

from .errors import ConcurrentModification, Error, ObjectWriteFailure, RefUpdateFailure
from .identity import Identity

logger = logging.getLogger(__name__)


def default_message(tree_path: bytes) -> str:
    """Return the message used when none was given."""
    return "Update " + tree_path.decode("utf-8", "replace")


def build_commit(
    object_store: BaseObjectStore,
    parent: bytes,
    tree: bytes,
    identity: Identity,
    message: str | bytes,
    commit_time: float | None = None,
    commit_timezone: int | None = None,
) -> bytes:
    """Write a commit with a single parent.

    Author and committer are both set to ``identity``.

    Args:
      object_store: Store to add the commit to
      parent: SHA of the parent commit
      tree: SHA of the root tree
      identity: Author and committer
      message: Commit message
      commit_time: Seconds since the epoch (defaults to now)
      commit_timezone: Offset from UTC in seconds (defaults to the local one)
    Returns: SHA of the new commit
    """
    signature = identity.as_bytes()
    try:
        check_user_identity(signature)
    except InvalidUserIdentity as e:
        raise Error(f"Invalid identity {signature!r}") from e

    if commit_time is None:
        commit_time = time.time()
    if commit_timezone is None:
        commit_timezone = time.localtime().tm_gmtoff
    if isinstance(message, str):
        message = message.encode("utf-8")

    c = Commit()
    c.tree = tree
    c.parents = [parent]
    c.author = c.committer = signature
    c.author_time = c.commit_time = int(commit_time)
    c.author_timezone = c.commit_timezone = commit_timezone
    c.message = message
    try:
        object_store.add_object(c)
    except OSError as e:
        raise ObjectWriteFailure(
            f"Unable to write commit {c.id.decode('ascii')}"
        ) from e
    logger.debug(
        "Wrote commit %s on top of %s", c.id.decode("ascii"), parent.decode("ascii")
    )
    return c.id


def advance_branch(
    refs: RefsContainer,
    ref: bytes,
    new_commit: bytes,
    expected_parent: bytes | None = None,
    committer: bytes | None = None,
    message: bytes | None = None,
) -> None:
    """Point ``ref`` at ``new_commit``.

    Without ``expected_parent`` the ref is overwritten whatever it points at.
    Concurrent writers to the same branch can then lose commits.

    Args:
      refs: Refs container holding ``ref``
      ref: Full ref name, e.g. b"refs/heads/main"
      new_commit: SHA to point the ref at
      expected_parent: If set, only move the ref if it still points here
      committer: Identity recorded in the reflog
      message: Reflog message
    Raises:
      ConcurrentModification: If ``ref`` no longer equals ``expected_parent``
      RefUpdateFailure: If the ref could not be written
    """
    try:
        updated = refs.set_if_equals(
            ref, expected_parent, new_commit, committer=committer, message=message
        )
    except (OSError, FileLocked) as e:
        raise RefUpdateFailure(f"Unable to update {ref.decode()}: {e}") from e
    if not updated:
        if expected_parent is None:
            raise RefUpdateFailure(f"Unable to update {ref.decode()}")
        try:
            actual = refs[ref]
        except KeyError:
            actual = None
        raise ConcurrentModification(ref, expected_parent, actual)
    logger.debug("Moved %s to %s", ref.decode(), new_commit.decode("ascii"))
