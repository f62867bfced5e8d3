# porcelain.py -- High-level bgit operations
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

"""High-level bgit operations.

Currently implemented:
 * commit_to_branch

The pipeline is strictly ordered: resolve the branch base, write the blob
and the new trees, write the commit, move the branch, then optionally push.
Any failure stops the remaining steps. A failed push leaves the new commit
on the local branch.
"""

__all__ = [
    "CommitResult",
    "blob_from_file",
    "commit_to_branch",
    "file_mode",
    "open_repo",
    "path_to_tree_path",
    "resolve_file",
]

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import AbstractContextManager, closing, contextmanager
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TextIO

from dulwich.errors import NotGitRepository
from dulwich.objects import Blob
from dulwich.repo import Repo

from .commit import advance_branch, build_commit, default_message
from .config import load_settings
from .errors import (
    BareRepositoryUnsupported,
    Error,
    FileNotFound,
    ObjectWriteFailure,
    PathNotRelativizable,
    PushFailure,
    RepositoryNotFound,
)
from .identity import ConfigIdentityProvider, identity_provider_for_repo
from .prompt import Confirmer, InteractiveConfirmer
from .resolver import (
    ORIGIN_CREATED,
    ORIGIN_REMOTE,
    local_branch_ref,
    resolve_branch_base,
)
from .transport import Transport, get_transport
from .tree import mode_for_permissions, split_tree_path, upsert_path

logger = logging.getLogger(__name__)

RepoPath = str | os.PathLike[str] | Repo


@dataclass(frozen=True)
class CommitResult:
    """Outcome of a successful commit_to_branch."""

    commit_id: bytes
    tree_id: bytes
    branch: str
    tree_path: bytes
    base_origin: str
    pushed: bool = False

    @property
    def created_branch(self) -> bool:
        """Whether the local branch was created by this commit."""
        return self.base_origin in (ORIGIN_CREATED, ORIGIN_REMOTE)


def open_repo(path: str | os.PathLike[str] | None = None) -> Repo:
    """Open a repository with a working directory.

    Args:
      path: Repository to open. If None, search upwards from the current
        directory.
    Raises:
      RepositoryNotFound: If there is no repository
      BareRepositoryUnsupported: If the repository is bare
    """
    try:
        if path is None:
            repo = Repo.discover(".")
        else:
            repo = Repo(os.fspath(path))
    except NotGitRepository as e:
        raise RepositoryNotFound(str(e)) from e
    if repo.bare:
        repo.close()
        raise BareRepositoryUnsupported(repo.path)
    return repo


def _open_repo_closing(repo: RepoPath) -> AbstractContextManager[Repo]:
    if isinstance(repo, Repo):
        return _noop_context_manager(repo)
    return closing(open_repo(repo))


@contextmanager
def _noop_context_manager(obj: Repo) -> Iterator[Repo]:
    yield obj


@contextmanager
def _step(description: str) -> Iterator[None]:
    try:
        yield
    except Error as e:
        if e.context is None:
            e.context = description
        raise


def resolve_file(repo_root: str, path: str | os.PathLike[str]) -> str:
    """Locate the file to commit.

    Relative paths are taken relative to the repository root, not the
    current directory.

    Raises:
      FileNotFound: If there is no such file
    """
    file_path = os.fspath(path)
    if not os.path.isabs(file_path):
        file_path = os.path.join(repo_root, file_path)
    if not os.path.isfile(file_path):
        raise FileNotFound(file_path)
    return file_path


def path_to_tree_path(repo_root: str, path: str | os.PathLike[str]) -> bytes:
    """Convert a file path to a slash-separated path relative to the root.

    Both paths are canonicalized first, so symlinks in either are resolved.

    Raises:
      PathNotRelativizable: If the file is not inside the repository
    """
    try:
        resolved = Path(path).resolve(strict=True)
        root = Path(repo_root).resolve(strict=True)
        relpath = resolved.relative_to(root)
    except (OSError, ValueError) as e:
        raise PathNotRelativizable(os.fspath(path), repo_root) from e
    if not relpath.parts:
        raise PathNotRelativizable(os.fspath(path), repo_root)
    return b"/".join(os.fsencode(part) for part in relpath.parts)


def blob_from_file(path: str) -> Blob:
    """Read a file into a blob."""
    try:
        with open(path, "rb") as f:
            return Blob.from_string(f.read())
    except FileNotFoundError as e:
        raise FileNotFound(path) from e


def file_mode(path: str) -> int:
    """Return the tree entry mode for the file at ``path``."""
    return mode_for_permissions(os.stat(path).st_mode)


def commit_to_branch(
    repo: RepoPath,
    branch: str,
    path: str | os.PathLike[str],
    message: str | None = None,
    push: bool = False,
    track_remote: bool = False,
    confirm: Confirmer | None = None,
    transport: Transport | None = None,
    identity_provider: ConfigIdentityProvider | None = None,
    remote: str | None = None,
    verify_tip: bool | None = None,
    outstream: TextIO = sys.stdout,
) -> CommitResult:
    """Commit a single file onto a branch without checking the branch out.

    Args:
      repo: Path to the repository, or a Repo
      branch: Target branch, e.g. "feature/foo"
      path: File to commit, absolute or relative to the repository root
      message: Commit message (defaults to "Update <path>")
      push: Push the branch to the remote afterwards
      track_remote: Start a missing branch from the remote's copy
      confirm: Asked before creating a missing branch from HEAD (defaults
        to an interactive prompt)
      transport: Used for fetch and push (defaults to the configured one)
      identity_provider: Source of author and committer (defaults to the
        repository and global configuration)
      remote: Remote name (defaults to bgit.remote or "origin")
      verify_tip: Refuse to move the branch if it changed in the meantime
        (defaults to bgit.verifyTip)
      outstream: Stream to report progress to
    Returns: A CommitResult
    Raises:
      PushFailure: If pushing failed; the commit was still made locally
    """
    with _open_repo_closing(repo) as r:
        if r.bare:
            raise BareRepositoryUnsupported(r.path)
        try:
            settings = load_settings(r.get_config_stack())
        except ValueError as e:
            raise Error(f"Invalid bgit configuration: {e}") from e
        if remote is not None:
            settings = replace(settings, remote=remote)
        if verify_tip is not None:
            settings = replace(settings, verify_tip=verify_tip)
        if confirm is None:
            confirm = InteractiveConfirmer()
        if transport is None and (push or track_remote):
            transport = get_transport(
                r, settings.transport, timeout=settings.transport_timeout
            )
        if identity_provider is None:
            identity_provider = identity_provider_for_repo(r)

        file_path = resolve_file(r.path, path)
        tree_path = path_to_tree_path(r.path, file_path)
        try:
            components = split_tree_path(tree_path)
        except ValueError as e:
            raise PathNotRelativizable(file_path, r.path) from e
        ref = local_branch_ref(branch)

        with _step(f"Resolving base for branch '{branch}'"):
            base = resolve_branch_base(
                r,
                branch,
                confirm,
                track_remote=track_remote,
                transport=transport,
                remote=settings.remote,
            )
        if base.origin == ORIGIN_CREATED:
            outstream.write(f"Created new branch '{branch}' from HEAD\n")
        elif base.origin == ORIGIN_REMOTE:
            outstream.write(
                f"Created branch '{branch}' from {settings.remote}/{branch}\n"
            )

        with _step("Resolving commit identity"):
            identity = identity_provider.resolve()

        with _step(f"Writing {tree_path.decode('utf-8', 'replace')}"):
            blob = blob_from_file(file_path)
            try:
                r.object_store.add_object(blob)
            except OSError as e:
                raise ObjectWriteFailure(
                    f"Unable to write blob {blob.id.decode('ascii')}"
                ) from e
            tree_id = upsert_path(
                r.object_store, base.tree_id, components, blob.id, file_mode(file_path)
            )

        if message is None:
            message = default_message(tree_path)
        summary = message.splitlines()[0] if message else ""
        with _step(f"Committing to branch '{branch}'"):
            commit_id = build_commit(
                r.object_store, base.commit_id, tree_id, identity, message
            )
            advance_branch(
                r.refs,
                ref,
                commit_id,
                expected_parent=base.commit_id if settings.verify_tip else None,
                committer=identity.as_bytes(),
                message=f"commit: {summary}".encode(),
            )
        outstream.write(
            f"Committed {tree_path.decode('utf-8', 'replace')} to {branch}\n"
            f"   commit {commit_id.decode('ascii')}\n"
        )

        pushed = False
        if push:
            assert transport is not None
            refspec = ref.decode("utf-8")
            try:
                transport.push(settings.remote, f"{refspec}:{refspec}")
            except PushFailure as e:
                e.commit_id = commit_id
                raise
            outstream.write(f"Pushed {branch} to {settings.remote}\n")
            pushed = True

        return CommitResult(
            commit_id=commit_id,
            tree_id=tree_id,
            branch=branch,
            tree_path=tree_path,
            base_origin=base.origin,
            pushed=pushed,
        )
