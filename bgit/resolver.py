# resolver.py -- Branch base resolution
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

"""Branch base resolution.

Find the commit a new commit on a branch has to be based on:

1. The local branch, if it exists.
2. With remote tracking enabled, the remote-tracking branch, after
   refreshing it. A local branch is created at the same commit.
3. The current HEAD, once the operator agreed to create the branch there.
"""

__all__ = [
    "BranchBase",
    "local_branch_ref",
    "remote_branch_ref",
    "resolve_branch_base",
]

import logging
from dataclasses import dataclass

from dulwich.file import FileLocked
from dulwich.objects import Commit
from dulwich.refs import LOCAL_BRANCH_PREFIX, LOCAL_REMOTE_PREFIX, check_ref_format
from dulwich.repo import Repo

from .errors import BareRepositoryUnsupported, BranchNotFound, Error, RefUpdateFailure
from .prompt import Confirmer
from .transport import FetchFailure, Transport

logger = logging.getLogger(__name__)

ORIGIN_LOCAL = "local"
ORIGIN_REMOTE = "remote"
ORIGIN_CREATED = "created"


@dataclass(frozen=True)
class BranchBase:
    """The commit and tree a new commit on a branch builds upon.

    ``origin`` tells how the base was found: "local", "remote" or "created".
    """

    commit_id: bytes
    tree_id: bytes
    origin: str


def local_branch_ref(branch: str) -> bytes:
    """Return the full ref name of a local branch."""
    ref = LOCAL_BRANCH_PREFIX + branch.encode("utf-8")
    if not check_ref_format(ref):
        raise Error(f"Invalid branch name: {branch}")
    return ref


def remote_branch_ref(remote: str, branch: str) -> bytes:
    """Return the full ref name of a remote-tracking branch."""
    return LOCAL_REMOTE_PREFIX + f"{remote}/{branch}".encode()


def _base_for_commit(repo: Repo, commit_id: bytes, origin: str) -> BranchBase:
    commit = repo[commit_id]
    if not isinstance(commit, Commit):
        raise Error(f"{commit_id.decode('ascii')} is not a commit")
    return BranchBase(commit.id, commit.tree, origin)


def _create_branch(repo: Repo, ref: bytes, commit_id: bytes, source: bytes) -> None:
    try:
        created = repo.refs.add_if_new(
            ref, commit_id, message=b"branch: Created from " + source
        )
    except (OSError, FileLocked) as e:
        raise RefUpdateFailure(f"Unable to create {ref.decode()}: {e}") from e
    if not created:
        raise RefUpdateFailure(f"{ref.decode()} was created concurrently")
    logger.debug("Created %s at %s", ref.decode(), commit_id.decode("ascii"))


def resolve_branch_base(
    repo: Repo,
    branch: str,
    confirm: Confirmer,
    track_remote: bool = False,
    transport: Transport | None = None,
    remote: str = "origin",
) -> BranchBase:
    """Determine the parent commit and tree for a new commit on ``branch``.

    Args:
      repo: Repository with a working directory
      branch: Short branch name, e.g. "feature/foo"
      confirm: Asked before a missing branch is created from HEAD
      track_remote: Whether to start from ``remote``'s copy of the branch
      transport: Used to refresh the remote-tracking refs first, if given
      remote: Name of the remote to track
    Returns: A BranchBase
    Raises:
      BareRepositoryUnsupported: If ``repo`` is bare
      BranchNotFound: If the branch is missing and was not created
      RefUpdateFailure: If a local branch could not be created
    """
    if repo.bare:
        raise BareRepositoryUnsupported(repo.path)

    ref = local_branch_ref(branch)
    try:
        commit_id = repo.refs[ref]
    except KeyError:
        logger.debug("No local branch %s", branch)
    else:
        return _base_for_commit(repo, commit_id, ORIGIN_LOCAL)

    if track_remote:
        if transport is not None:
            try:
                transport.fetch(remote)
            except FetchFailure as e:
                logger.warning("Unable to refresh %s: %s", remote, e)
        tracking_ref = remote_branch_ref(remote, branch)
        try:
            commit_id = repo.refs[tracking_ref]
        except KeyError:
            logger.debug("No remote-tracking branch %s", tracking_ref.decode())
        else:
            base = _base_for_commit(repo, commit_id, ORIGIN_REMOTE)
            _create_branch(repo, ref, base.commit_id, tracking_ref)
            return base

    missing = BranchNotFound(branch, remote if track_remote else None)
    if not confirm.confirm(f"Branch '{branch}' does not exist. Create it from HEAD?"):
        raise missing
    try:
        head = repo.head()
    except KeyError as e:
        logger.error("HEAD does not point at a commit")
        raise missing from e
    base = _base_for_commit(repo, head, ORIGIN_CREATED)
    _create_branch(repo, ref, base.commit_id, b"HEAD")
    return base
