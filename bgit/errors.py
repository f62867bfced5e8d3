# errors.py -- Errors raised by bgit
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

"""bgit exception classes.

Every error carries an ``exit_code`` so the command-line interface can map
failures onto stable process exit statuses.
"""

__all__ = [
    "BareRepositoryUnsupported",
    "BranchNotFound",
    "ConcurrentModification",
    "EmptyPath",
    "Error",
    "FileNotFound",
    "IdentityMissing",
    "ObjectWriteFailure",
    "PathNotRelativizable",
    "PushFailure",
    "RefUpdateFailure",
    "RepositoryNotFound",
]


class Error(Exception):
    """Base class for bgit errors.

    ``context`` names the step that failed, e.g. "Resolving base for branch
    'main'", and prefixes the message when set.
    """

    exit_code = 1
    context: str | None = None

    def __init__(self, msg: str) -> None:
        """Initialize Error with message."""
        super().__init__(msg)

    def __str__(self) -> str:
        msg = super().__str__()
        if self.context:
            return f"{self.context}: {msg}"
        return msg


class RepositoryNotFound(Error):
    """No repository could be opened at or above the given path."""

    exit_code = 2


class BareRepositoryUnsupported(Error):
    """The repository has no working directory."""

    exit_code = 3

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Bare repositories are not supported: {path}")


class FileNotFound(Error):
    """The file to commit does not exist."""

    exit_code = 4

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"File not found: {path}")


class PathNotRelativizable(Error):
    """The file lies outside the repository or cannot be canonicalized."""

    exit_code = 5

    def __init__(self, path: str, root: str) -> None:
        self.path = path
        self.root = root
        super().__init__(f"Could not compute repo-relative path for {path}")


class EmptyPath(Error):
    """A tree path without any components was given."""

    exit_code = 5

    def __init__(self) -> None:
        super().__init__("Empty path")


class BranchNotFound(Error):
    """The branch is absent and was not created."""

    exit_code = 6

    def __init__(self, branch: str, remote: str | None = None) -> None:
        self.branch = branch
        self.remote = remote
        where = "locally"
        if remote is not None:
            where += f" or on {remote}"
        super().__init__(f"Branch '{branch}' not found {where}")


class IdentityMissing(Error):
    """Neither repository nor global config provide a user identity."""

    exit_code = 7

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(
            f"user.{field} is not set in the repository or global configuration"
        )


class ObjectWriteFailure(Error):
    """An object could not be written to the object store."""

    exit_code = 8


class RefUpdateFailure(Error):
    """A ref could not be created or moved."""

    exit_code = 9


class ConcurrentModification(Error):
    """The branch moved between resolution and the final ref update."""

    exit_code = 10

    def __init__(self, ref: bytes, expected: bytes, actual: bytes | None) -> None:
        self.ref = ref
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{ref.decode('utf-8', 'replace')} changed during commit: "
            f"expected {expected.decode('ascii')}, "
            f"found {actual.decode('ascii') if actual else 'nothing'}"
        )


class PushFailure(Error):
    """Pushing failed after the commit was created locally.

    The commit and the local branch update are kept; ``commit_id`` names the
    commit that could not be pushed.
    """

    exit_code = 11

    def __init__(self, msg: str, commit_id: bytes | None = None) -> None:
        self.commit_id = commit_id
        super().__init__(msg)
