# test_identity.py -- Tests for commit identity resolution
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

"""Tests for bgit.identity."""

from dulwich.config import ConfigFile

from bgit.errors import IdentityMissing
from bgit.identity import ConfigIdentityProvider, Identity, identity_provider_for_repo

from . import RepoTestCase, TestCase


def make_config(**user) -> ConfigFile:
    config = ConfigFile()
    for key, value in user.items():
        config.set((b"user",), key.encode(), value.encode())
    return config


class IdentityTests(TestCase):
    def test_as_bytes(self) -> None:
        self.assertEqual(
            b"Jane Doe <jane@example.com>",
            Identity("Jane Doe", "jane@example.com").as_bytes(),
        )

    def test_as_bytes_non_ascii(self) -> None:
        self.assertEqual(
            "Jürgen <j@example.com>".encode(),
            Identity("Jürgen", "j@example.com").as_bytes(),
        )


class ConfigIdentityProviderTests(TestCase):
    def test_repository_config(self) -> None:
        provider = ConfigIdentityProvider(
            make_config(name="Repo User", email="repo@example.com"),
            make_config(name="Global User", email="global@example.com"),
        )
        self.assertEqual(Identity("Repo User", "repo@example.com"), provider.resolve())

    def test_global_fallback(self) -> None:
        provider = ConfigIdentityProvider(
            make_config(), make_config(name="Global User", email="global@example.com")
        )
        self.assertEqual(
            Identity("Global User", "global@example.com"), provider.resolve()
        )

    def test_fields_fall_back_independently(self) -> None:
        provider = ConfigIdentityProvider(
            make_config(name="Repo User"), make_config(email="global@example.com")
        )
        self.assertEqual(
            Identity("Repo User", "global@example.com"), provider.resolve()
        )

    def test_missing_name(self) -> None:
        provider = ConfigIdentityProvider(
            make_config(email="repo@example.com"), make_config()
        )
        with self.assertRaises(IdentityMissing) as cm:
            provider.resolve()
        self.assertEqual("name", cm.exception.field)

    def test_missing_email(self) -> None:
        provider = ConfigIdentityProvider(make_config(name="Repo User"), make_config())
        with self.assertRaises(IdentityMissing) as cm:
            provider.resolve()
        self.assertEqual("email", cm.exception.field)
        self.assertEqual(7, cm.exception.exit_code)


class IdentityProviderForRepoTests(RepoTestCase):
    def test_reads_repository_config(self) -> None:
        self.set_identity(b"Repo User", b"repo@example.com")
        provider = identity_provider_for_repo(self.repo)
        self.assertEqual(Identity("Repo User", "repo@example.com"), provider.resolve())
