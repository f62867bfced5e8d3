# identity.py -- Commit identity resolution
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

"""Commit identity resolution.

The identity used for both author and committer comes from ``user.name``
and ``user.email``. Each field is looked up in the repository configuration
first and in the global configuration second.
"""

__all__ = [
    "ConfigIdentityProvider",
    "Identity",
    "identity_provider_for_repo",
]

from dataclasses import dataclass

from dulwich.config import Config, StackedConfig
from dulwich.repo import Repo

from .errors import IdentityMissing


@dataclass(frozen=True)
class Identity:
    """A user name and email address."""

    name: str
    email: str

    def as_bytes(self) -> bytes:
        """Render the identity the way git stores it in commits."""
        return f"{self.name} <{self.email}>".encode()


class ConfigIdentityProvider:
    """Resolve an identity from repository and global configuration."""

    def __init__(self, repo_config: Config, global_config: Config) -> None:
        self.repo_config = repo_config
        self.global_config = global_config

    def _lookup(self, name: bytes) -> str | None:
        for config in (self.repo_config, self.global_config):
            try:
                value = config.get((b"user",), name)
            except KeyError:
                continue
            if value:
                return value.decode("utf-8")
        return None

    def resolve(self) -> Identity:
        """Return the configured identity.

        Raises:
          IdentityMissing: If name or email is absent from both scopes
        """
        name = self._lookup(b"name")
        if name is None:
            raise IdentityMissing("name")
        email = self._lookup(b"email")
        if email is None:
            raise IdentityMissing("email")
        return Identity(name, email)


def identity_provider_for_repo(repo: Repo) -> ConfigIdentityProvider:
    """Create an identity provider reading the config of ``repo``."""
    return ConfigIdentityProvider(repo.get_config(), StackedConfig.default())
