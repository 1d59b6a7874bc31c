# MIT License
#
# Copyright (c) 2025 Democratize Technology
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Runtime environment derived from configuration.

``Environment`` is a closed set: the only way to obtain one from a string is
``Environment.from_name``, which rejects anything outside the set. Matching is
exact and case-sensitive; ``"Prod"`` and ``" prod"`` are rejected.
"""

from enum import Enum
from typing import Any

from .exceptions import UnrecognizedEnvironmentError


class Environment(str, Enum):
    """Deployment stage a service runs in."""

    LOCAL = "local"
    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def names(cls) -> list[str]:
        """Recognized environment names, in declaration order."""
        return [member.value for member in cls]

    @classmethod
    def from_name(cls, name: Any) -> "Environment":
        """Validate a raw environment name.

        Raises:
            UnrecognizedEnvironmentError: If ``name`` is not a recognized name
        """
        if isinstance(name, str):
            for member in cls:
                if member.value == name:
                    return member
        raise UnrecognizedEnvironmentError(name, cls.names())

    @property
    def is_local(self) -> bool:
        return self is Environment.LOCAL

    @property
    def is_production(self) -> bool:
        return self is Environment.PROD
