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
Error types raised by quay.

Fatal errors abort the run before any child process is started. Port
mapping errors are collected and reported as warnings instead.
"""
from typing import Optional


class QuayError(Exception):
    """Base class for all quay errors."""


class ConfigurationError(QuayError):
    """Raised when the requested selection is contradictory."""


class DirectiveError(QuayError):
    """Raised when an --include/--exclude/--port directive is malformed."""


class MissingDirectiveArgumentError(DirectiveError):
    """Raised when a directive is the last token and has no argument."""

    def __init__(self, flag: str):
        self.flag = flag
        super().__init__(f"option {flag} requires an argument")


class PortMappingError(DirectiveError):
    """Raised when a --port token does not decode to a port override."""

    def __init__(self, token: str, reason: str):
        self.token = token
        self.reason = reason
        super().__init__(f"Invalid port mapping format '{token}': {reason}")


class LoadError(QuayError):
    """Raised when the compose file cannot be read or understood."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


class ComposeFileNotFoundError(LoadError):
    """Raised when no compose file was given and none of the defaults exist."""


class InterpolationError(LoadError):
    """Raised when a required variable (${VAR:?msg}) is unset."""


class InvocationError(QuayError):
    """Raised when the compose binary cannot be started."""
