# prompt.py -- Confirmation prompts
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

"""Confirmation prompts."""

__all__ = [
    "Confirmer",
    "FixedConfirmer",
    "InteractiveConfirmer",
]

import logging
import sys
from typing import TextIO

logger = logging.getLogger(__name__)


class Confirmer:
    """Ask the operator a yes/no question."""

    def confirm(self, prompt: str) -> bool:
        """Return True if the operator agreed to ``prompt``."""
        raise NotImplementedError(self.confirm)


class FixedConfirmer(Confirmer):
    """Give the same answer to every question without asking."""

    def __init__(self, answer: bool) -> None:
        self.answer = answer
        self.prompts: list[str] = []

    def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        logger.debug("%s -> %s", prompt, "yes" if self.answer else "no")
        return self.answer


class InteractiveConfirmer(Confirmer):
    """Ask on a terminal, git style.

    An empty answer selects ``default``. End of input counts as no.
    Unrecognized answers are asked again.
    """

    def __init__(
        self,
        default: bool = True,
        instream: TextIO | None = None,
        outstream: TextIO | None = None,
    ) -> None:
        self.default = default
        self.instream = instream if instream is not None else sys.stdin
        self.outstream = outstream if outstream is not None else sys.stderr

    def confirm(self, prompt: str) -> bool:
        choices = "[Y/n]" if self.default else "[y/N]"
        while True:
            self.outstream.write(f"{prompt} {choices} ")
            self.outstream.flush()
            line = self.instream.readline()
            if not line:
                self.outstream.write("\n")
                logger.debug("No answer to %r, assuming no", prompt)
                return False
            answer = line.strip().lower()
            if not answer:
                return self.default
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            self.outstream.write("Please answer 'y' or 'n'.\n")
