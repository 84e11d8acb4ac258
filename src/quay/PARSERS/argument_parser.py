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
Splits the arguments that follow the compose sub-command into pass-through
options and quay's own --include/--exclude/--port directives.
"""
from typing import List, Sequence
from ..MODELS.selection import ClassifiedArguments
from ..errors import MissingDirectiveArgumentError

INCLUDE_FLAG = "--include"
EXCLUDE_FLAG = "--exclude"
PORT_FLAG = "--port"

DIRECTIVE_FLAGS = (INCLUDE_FLAG, EXCLUDE_FLAG, PORT_FLAG)


def classify_arguments(args: Sequence[str]) -> ClassifiedArguments:
    """
    Scans the tokens left to right. Each directive consumes itself and the
    token after it; everything else is passed through in its original order.

    :param args: Tokens following the compose sub-command.
    :return: The classified arguments.
    :raises MissingDirectiveArgumentError: If a directive is the last token.
    """
    command_options: List[str] = []
    collected = {flag: [] for flag in DIRECTIVE_FLAGS}

    i = 0
    while i < len(args):
        token = args[i]
        if token in collected:
            if i + 1 >= len(args):
                raise MissingDirectiveArgumentError(token)
            collected[token].append(args[i + 1])
            i += 2
            continue
        command_options.append(token)
        i += 1

    return ClassifiedArguments(
        command_options=command_options,
        include_names=collected[INCLUDE_FLAG],
        exclude_names=collected[EXCLUDE_FLAG],
        port_tokens=collected[PORT_FLAG],
    )
