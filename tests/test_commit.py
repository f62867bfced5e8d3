# test_commit.py -- Tests for commit creation
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

"""Tests for bgit.commit."""

from dulwich.object_store import MemoryObjectStore
from dulwich.objects import Tree
from dulwich.refs import DictRefsContainer

from bgit.commit import advance_branch, build_commit, default_message
from bgit.errors import ConcurrentModification, Error, ObjectWriteFailure
from bgit.identity import Identity

from . import TestCase

PARENT = b"1" * 40
OTHER = b"2" * 40
NEW = b"3" * 40
REF = b"refs/heads/feature"


class DefaultMessageTests(TestCase):
    def test_default_message(self) -> None:
        self.assertEqual("Update docs/index.rst", default_message(b"docs/index.rst"))


class BuildCommitTests(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.store = MemoryObjectStore()
        tree = Tree()
        self.store.add_object(tree)
        self.tree = tree.id
        self.identity = Identity("Jane Doe", "jane@example.com")

    def test_fields(self) -> None:
        commit_id = build_commit(
            self.store,
            PARENT,
            self.tree,
            self.identity,
            "Update a.txt",
            commit_time=1700000000,
            commit_timezone=3600,
        )
        commit = self.store[commit_id]
        self.assertEqual(self.tree, commit.tree)
        self.assertEqual([PARENT], commit.parents)
        self.assertEqual(b"Jane Doe <jane@example.com>", commit.author)
        self.assertEqual(commit.author, commit.committer)
        self.assertEqual(1700000000, commit.commit_time)
        self.assertEqual(commit.commit_time, commit.author_time)
        self.assertEqual(3600, commit.commit_timezone)
        self.assertEqual(3600, commit.author_timezone)
        self.assertEqual(b"Update a.txt", commit.message)

    def test_bytes_message(self) -> None:
        commit_id = build_commit(self.store, PARENT, self.tree, self.identity, b"msg")
        self.assertEqual(b"msg", self.store[commit_id].message)

    def test_timestamp_makes_commits_distinct(self) -> None:
        first = build_commit(
            self.store,
            PARENT,
            self.tree,
            self.identity,
            "m",
            commit_time=1,
            commit_timezone=0,
        )
        second = build_commit(
            self.store,
            PARENT,
            self.tree,
            self.identity,
            "m",
            commit_time=2,
            commit_timezone=0,
        )
        self.assertNotEqual(first, second)

    def test_invalid_identity(self) -> None:
        self.assertRaises(
            Error,
            build_commit,
            self.store,
            PARENT,
            self.tree,
            Identity("Jane\nDoe", "jane@example.com"),
            "m",
        )

    def test_write_failure(self) -> None:
        class FailingStore(MemoryObjectStore):
            def add_object(self, obj):
                raise OSError("read-only file system")

        self.assertRaises(
            ObjectWriteFailure,
            build_commit,
            FailingStore(),
            PARENT,
            self.tree,
            self.identity,
            "m",
        )


class AdvanceBranchTests(TestCase):
    def test_overwrite(self) -> None:
        refs = DictRefsContainer({REF: OTHER})
        advance_branch(refs, REF, NEW)
        self.assertEqual(NEW, refs[REF])

    def test_expected_parent_matches(self) -> None:
        refs = DictRefsContainer({REF: PARENT})
        advance_branch(refs, REF, NEW, expected_parent=PARENT)
        self.assertEqual(NEW, refs[REF])

    def test_concurrent_modification(self) -> None:
        refs = DictRefsContainer({REF: OTHER})
        with self.assertRaises(ConcurrentModification) as cm:
            advance_branch(refs, REF, NEW, expected_parent=PARENT)
        self.assertEqual(OTHER, cm.exception.actual)
        self.assertEqual(PARENT, cm.exception.expected)
        self.assertEqual(OTHER, refs[REF])

    def test_concurrent_deletion(self) -> None:
        refs = DictRefsContainer({})
        with self.assertRaises(ConcurrentModification) as cm:
            advance_branch(refs, REF, NEW, expected_parent=PARENT)
        self.assertIsNone(cm.exception.actual)
        self.assertNotIn(REF, refs)
