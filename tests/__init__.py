# __init__.py -- Test infrastructure for bgit
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

"""Tests for bgit."""

import os
import shutil
import tempfile
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from unittest import TestCase as _TestCase

from dulwich.index import commit_tree
from dulwich.objects import Blob, Commit
from dulwich.repo import Repo

# Plain files are very frequently used in tests, so let the mode be short.
F = 0o100644

TEST_IDENTITY = b"Test User <test@example.com>"


class TestCase(_TestCase):
    """Test case that keeps the user's global git configuration out."""

    def setUp(self) -> None:
        super().setUp()
        self._old_home = os.environ.get("HOME")
        os.environ["HOME"] = "/nonexistent"
        self._old_xdg = os.environ.pop("XDG_CONFIG_HOME", None)

    def tearDown(self) -> None:
        super().tearDown()
        if self._old_home:
            os.environ["HOME"] = self._old_home
        else:
            del os.environ["HOME"]
        if self._old_xdg is not None:
            os.environ["XDG_CONFIG_HOME"] = self._old_xdg


class RepoTestCase(TestCase):
    """Test case with a fresh non-bare repository in ``self.repo``."""

    def setUp(self) -> None:
        super().setUp()
        self.test_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.test_dir)
        self.repo_path = os.path.join(self.test_dir, "repo")
        os.mkdir(self.repo_path)
        self.repo = Repo.init(self.repo_path)
        self.addCleanup(self.repo.close)

    def set_identity(
        self, name: bytes = b"Test User", email: bytes = b"test@example.com"
    ) -> None:
        config = self.repo.get_config()
        config.set((b"user",), b"name", name)
        config.set((b"user",), b"email", email)
        config.write_to_path()

    def write_file(self, relpath: str, contents: bytes, mode: int = 0o644) -> str:
        path = os.path.join(self.repo_path, relpath)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(contents)
        os.chmod(path, mode)
        return path

    def make_commit(self, files, parents=(), ref=b"HEAD", message=b"Commit"):
        """Commit ``files`` (a dict of path to contents) without an index."""
        return make_commit(self.repo, files, parents=parents, ref=ref, message=message)


def make_commit(repo, files, parents=(), ref=None, message=b"Commit"):
    """Write a commit containing exactly ``files`` and optionally point a ref at it.

    Args:
      repo: Repository to write to
      files: Dictionary mapping tree paths to file contents
      parents: Parent commit SHAs
      ref: Ref to point at the new commit, if any
      message: Commit message
    Returns: SHA of the new commit
    """
    blobs = []
    for path, contents in files.items():
        blob = Blob.from_string(contents)
        repo.object_store.add_object(blob)
        blobs.append((path, blob.id, F))
    c = Commit()
    c.tree = commit_tree(repo.object_store, blobs)
    c.parents = list(parents)
    c.author = c.committer = TEST_IDENTITY
    c.author_time = c.commit_time = 1700000000
    c.author_timezone = c.commit_timezone = 0
    c.message = message
    repo.object_store.add_object(c)
    if ref is not None:
        repo.refs[ref] = c.id
    return c.id


class UnauthorizedHandler(BaseHTTPRequestHandler):
    """HTTP handler that demands credentials for every request."""

    def _unauthorized(self) -> None:
        self.send_response(401)
        self.send_header("WWW-Authenticate", 'Basic realm="git"')
        self.send_header("Content-Length", "0")
        self.end_headers()

    do_GET = _unauthorized
    do_POST = _unauthorized

    def log_message(self, format, *args):
        pass


def serve_unauthorized(testcase):
    """Start an HTTP remote answering 401 for the duration of ``testcase``.

    Returns: URL of a repository on the server
    """
    server = HTTPServer(("127.0.0.1", 0), UnauthorizedHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    testcase.addCleanup(server.server_close)
    testcase.addCleanup(thread.join)
    testcase.addCleanup(server.shutdown)
    return f"http://127.0.0.1:{server.server_port}/repo.git"
