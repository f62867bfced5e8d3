# cli.py -- Command-line interface to bgit
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

"""Command-line interface to bgit.

Usage:
    bgit [--repo PATH] commit --branch BRANCH [-m MSG] [--push]
        [--track-remote] PATH
"""

__all__ = [
    "Command",
    "cmd_commit",
    "commands",
    "main",
]

import argparse
import logging
import signal
import sys
import types
from collections.abc import Sequence
from contextlib import closing

from . import porcelain
from .config import TRANSPORTS, load_settings
from .errors import Error, PushFailure
from .log_utils import default_logging_config
from .prompt import FixedConfirmer, InteractiveConfirmer
from .transport import get_transport

logger = logging.getLogger(__name__)


def signal_int(signal: int, frame: types.FrameType | None) -> None:
    """Handle interrupt signal by exiting.

    Args:
        signal: Signal number
        frame: Current stack frame
    """
    sys.exit(1)


class Command:
    """A bgit subcommand."""

    def __init__(self, repo_path: str | None = None) -> None:
        self.repo_path = repo_path

    def run(self, args: Sequence[str]) -> int | None:
        """Run the command."""
        raise NotImplementedError(self.run)


class cmd_commit(Command):
    """Commit a file to a target branch without checking it out."""

    def run(self, args: Sequence[str]) -> int | None:
        """Execute the commit command.

        Args:
            args: Command line arguments
        """
        parser = argparse.ArgumentParser(prog="bgit commit", description=self.__doc__)
        parser.add_argument(
            "--branch", required=True, metavar="BRANCH", help="Target branch name"
        )
        parser.add_argument(
            "-m",
            "--message",
            metavar="MSG",
            help='Commit message (default "Update <path>")',
        )
        parser.add_argument(
            "--push", action="store_true", help="Push to the remote after committing"
        )
        parser.add_argument(
            "--track-remote",
            action="store_true",
            help="Start a missing branch from the remote's copy of it",
        )
        parser.add_argument("--remote", help="Remote to fetch from and push to")
        parser.add_argument(
            "--transport", choices=TRANSPORTS, help="How to talk to the remote"
        )
        answer = parser.add_mutually_exclusive_group()
        answer.add_argument(
            "--yes",
            dest="answer",
            action="store_const",
            const=True,
            help="Create a missing branch from HEAD without asking",
        )
        answer.add_argument(
            "--no",
            dest="answer",
            action="store_const",
            const=False,
            help="Never create a missing branch",
        )
        verify = parser.add_mutually_exclusive_group()
        verify.add_argument(
            "--verify-tip",
            dest="verify_tip",
            action="store_const",
            const=True,
            help="Fail if the branch moves while committing",
        )
        verify.add_argument(
            "--no-verify-tip",
            dest="verify_tip",
            action="store_const",
            const=False,
            help="Overwrite the branch even if it moved while committing",
        )
        parser.add_argument("path", metavar="PATH", help="File to commit")
        parsed_args = parser.parse_args(args)

        if parsed_args.answer is None:
            confirm = InteractiveConfirmer()
        else:
            confirm = FixedConfirmer(parsed_args.answer)

        try:
            repo = porcelain.open_repo(self.repo_path)
        except Error as e:
            logger.error("%s", e)
            return e.exit_code

        with closing(repo):
            try:
                transport = None
                if parsed_args.push or parsed_args.track_remote:
                    try:
                        settings = load_settings(repo.get_config_stack())
                    except ValueError as e:
                        raise Error(f"Invalid bgit configuration: {e}") from e
                    transport = get_transport(
                        repo,
                        parsed_args.transport or settings.transport,
                        timeout=settings.transport_timeout,
                        errstream=sys.stderr.buffer,
                    )
                porcelain.commit_to_branch(
                    repo,
                    parsed_args.branch,
                    parsed_args.path,
                    message=parsed_args.message,
                    push=parsed_args.push,
                    track_remote=parsed_args.track_remote,
                    confirm=confirm,
                    transport=transport,
                    remote=parsed_args.remote,
                    verify_tip=parsed_args.verify_tip,
                    outstream=sys.stdout,
                )
            except PushFailure as e:
                logger.error("%s", e)
                if e.commit_id is not None:
                    logger.error(
                        "Commit %s was made on %s locally but was not pushed",
                        e.commit_id.decode("ascii"),
                        parsed_args.branch,
                    )
                return e.exit_code
            except Error as e:
                logger.error("%s", e)
                return e.exit_code
        return 0


commands = {
    "commit": cmd_commit,
}


def main(argv: Sequence[str] | None = None) -> int | None:
    """Main entry point for the bgit CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = argparse.ArgumentParser(
        prog="bgit",
        description="Commit files directly to a target branch without switching.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("--repo", help="Path to the repository")
    parser.add_argument("--help", "-h", action="store_true", help="Show help")
    global_args, remaining = parser.parse_known_args(argv)

    if global_args.help or not remaining:
        parser = argparse.ArgumentParser(
            prog="bgit",
            description="Commit files directly to a target branch without switching.",
        )
        parser.add_argument("--repo", help="Path to the repository")
        parser.add_argument(
            "command",
            nargs="?",
            help=f"Command to run. Available: {', '.join(sorted(commands.keys()))}",
        )
        parser.print_help()
        return 1

    default_logging_config()

    cmd = remaining[0]
    cmd_args = remaining[1:]

    try:
        cmd_kls = commands[cmd]
    except KeyError:
        logger.error("No such subcommand: %s", cmd)
        return 1
    return cmd_kls(repo_path=global_args.repo).run(cmd_args)


def _main() -> None:
    signal.signal(signal.SIGINT, signal_int)

    sys.exit(main())


if __name__ == "__main__":
    _main()
