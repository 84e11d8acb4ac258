# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Execution of the docker-compose binary, either as a plain proxy or fed a
filtered compose document on stdin.
"""
import os
import shlex
import subprocess
from typing import List, Optional, Sequence
from ..errors import InvocationError

DEFAULT_COMPOSE_COMMAND = "docker-compose"
REMOVE_ORPHANS_FLAG = "--remove-orphans"
STDIN_FILE = "-"


class ComposeInvoker:
    """
    Runs docker-compose and reports its exit code.
    """
    def __init__(self, compose_command: Sequence[str] = (DEFAULT_COMPOSE_COMMAND,)):
        """
        Initializes the invoker.

        Args:
            compose_command (Sequence[str]): The compose executable and any leading
                arguments, e.g. ["docker", "compose"].
        """
        if not compose_command:
            raise InvocationError("compose command is empty")
        self.compose_command = list(compose_command)

    @classmethod
    def from_string(cls, command: str) -> "ComposeInvoker":
        """Builds an invoker from a shell-style command string such as "docker compose"."""
        return cls(shlex.split(command))

    def build_passthrough_args(self, compose_path: str, args: Sequence[str]) -> List[str]:
        """
        Arguments for running docker-compose on the original file, unchanged.

        Args:
            compose_path (str): Path to the compose file.
            args (Sequence[str]): The sub-command and all its options.
        """
        return ["-f", compose_path, *args]

    def build_filtered_args(self,
                            command: str,
                            options: Sequence[str],
                            project_directory: Optional[str] = None) -> List[str]:
        """
        Arguments for running docker-compose on a document read from stdin.

        ``up`` gets --remove-orphans so containers of services that were
        filtered out are not left running from an earlier full run.

        Args:
            command (str): The compose sub-command.
            options (Sequence[str]): Pass-through options for the sub-command.
            project_directory (Optional[str]): Directory relative paths and the
                project name are resolved against.
        """
        args: List[str] = []
        if project_directory:
            args += ["--project-directory", project_directory]
        args += ["-f", STDIN_FILE, command, *options]
        if command == "up" and REMOVE_ORPHANS_FLAG not in options:
            args.append(REMOVE_ORPHANS_FLAG)
        return args

    def command_line(self, args: Sequence[str]) -> List[str]:
        return [*self.compose_command, *args]

    def run(self, args: Sequence[str], stdin_data: Optional[str] = None) -> int:
        """
        Runs docker-compose and waits for it to exit.

        stdout and stderr are inherited. There is no timeout and no retry.

        Args:
            args (Sequence[str]): Arguments after the compose executable.
            stdin_data (Optional[str]): Document to feed on stdin, if any.

        Returns:
            int: The child's exit code.
        """
        command = self.command_line(args)
        try:
            completed = subprocess.run(
                command,
                input=stdin_data,
                text=True,
                cwd=os.getcwd(),
                # Avoid shell=True for security reasons (CWE-78)
                shell=False,
            )
        except OSError as e:
            raise InvocationError(f"failed to run {command[0]}: {e.strerror or e}") from e
        return completed.returncode
