# tree.py -- Persistent tree upsert
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

"""Persistent tree upsert.

Inserting a file into a tree never touches the stored trees it starts from.
Every tree on the path from the root to the new entry is rebuilt as a new
object; all other entries are copied over by reference, so unchanged
subtrees are shared with the previous snapshot.
"""

__all__ = [
    "DIRECTORY_MODE",
    "EXECUTABLE_MODE",
    "REGULAR_MODE",
    "mode_for_permissions",
    "split_tree_path",
    "upsert_path",
]

import logging
import stat
from collections.abc import Sequence

from dulwich.object_store import BaseObjectStore
from dulwich.objects import Tree

from .errors import EmptyPath, ObjectWriteFailure

logger = logging.getLogger(__name__)

REGULAR_MODE = 0o100644
EXECUTABLE_MODE = 0o100755
DIRECTORY_MODE = stat.S_IFDIR


def mode_for_permissions(st_mode: int) -> int:
    """Map file permission bits to a tree entry mode.

    Any execute bit (user, group or other) yields the executable mode.
    """
    if st_mode & 0o111:
        return EXECUTABLE_MODE
    return REGULAR_MODE


def split_tree_path(path: bytes) -> list[bytes]:
    """Split a slash-separated tree path into its components.

    Args:
      path: Repository-relative path, e.g. b"docs/index.rst"
    Returns: List of components; empty for an empty path
    Raises:
      ValueError: If a component is empty, ".", ".." or ".git"
    """
    if not path:
        return []
    components = path.split(b"/")
    for component in components:
        if component in (b"", b".", b"..", b".git"):
            raise ValueError(
                f"Invalid tree path component {component!r} in {path!r}"
            )
    return components


def _copy_tree(object_store: BaseObjectStore, tree_id: bytes | None) -> Tree:
    tree = Tree()
    if tree_id is None:
        return tree
    base = object_store[tree_id]
    if not isinstance(base, Tree):
        raise TypeError(f"{tree_id!r} is not a tree")
    for name, mode, sha in base.iteritems():
        tree[name] = (mode, sha)
    return tree


def _write_tree(object_store: BaseObjectStore, tree: Tree) -> bytes:
    try:
        object_store.add_object(tree)
    except OSError as e:
        raise ObjectWriteFailure(
            f"Unable to write tree {tree.id.decode('ascii')}"
        ) from e
    return tree.id


def _upsert_components(
    object_store: BaseObjectStore,
    base_tree: bytes | None,
    components: Sequence[bytes],
    target: bytes,
    mode: int,
) -> bytes:
    name = components[0]
    tree = _copy_tree(object_store, base_tree)

    if len(components) == 1:
        tree[name] = (mode, target)
        return _write_tree(object_store, tree)

    child_base = None
    if name in tree:
        entry_mode, entry_sha = tree[name]
        if stat.S_ISDIR(entry_mode):
            child_base = entry_sha
        else:
            # The existing entry is replaced by the new directory.
            logger.warning(
                "Replacing non-directory entry %r with a directory",
                name.decode("utf-8", "replace"),
            )

    child_id = _upsert_components(
        object_store, child_base, components[1:], target, mode
    )
    tree[name] = (DIRECTORY_MODE, child_id)
    return _write_tree(object_store, tree)


def upsert_path(
    object_store: BaseObjectStore,
    base_tree: bytes | None,
    components: Sequence[bytes],
    target: bytes,
    mode: int,
) -> bytes:
    """Insert or replace a single entry in a tree.

    Intermediate directories that do not exist yet are created. Entries that
    are not on the path to the new entry keep their mode and sha.

    Args:
      object_store: Store to read the base trees from and write new trees to
      base_tree: SHA of the root tree to start from, or None for an empty tree
      components: Path components, e.g. [b"docs", b"index.rst"]
      target: SHA of the object the new entry points at
      mode: Mode of the new entry
    Returns: SHA of the new root tree
    Raises:
      EmptyPath: If components is empty
      ObjectWriteFailure: If a tree could not be stored
    """
    if not components:
        raise EmptyPath()
    logger.debug(
        "Upserting %s into tree %s",
        b"/".join(components).decode("utf-8", "replace"),
        base_tree.decode("ascii") if base_tree else "(empty)",
    )
    return _upsert_components(object_store, base_tree, components, target, mode)
