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

"""Source locator: decides which configuration file to load.

Precedence, first non-empty value wins:
1. the ``-config <path>`` command-line flag
2. the ``CONFIG_PATH`` environment variable

The process command line is parsed once and cached, so several schemas can be
loaded in the same process without re-registering or re-parsing the flag.
"""

import argparse
from collections.abc import Mapping, Sequence
import logging
import os
from pathlib import Path
import sys
import threading

from .constants import CONFIG_FLAG, CONFIG_FLAG_ALIASES, CONFIG_PATH_ENV
from .exceptions import ConfigFileNotFoundError, PathNotFoundError

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False, exit_on_error=False)
    parser.add_argument(
        CONFIG_FLAG,
        *CONFIG_FLAG_ALIASES,
        dest="config",
        default="",
        help="Path to the configuration file",
    )
    return parser


class ConfigFlag:
    """The process-wide ``-config`` flag, registered once and parsed at most once."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._parser = _build_parser()
        self._parsed = False
        self._value = ""

    def parse(self, argv: Sequence[str]) -> str:
        """Extract the flag value from ``argv`` without touching the cache."""
        try:
            namespace, _unknown = self._parser.parse_known_args(list(argv))
        except argparse.ArgumentError as e:
            logger.warning("Ignoring malformed %s flag: %s", CONFIG_FLAG, e)
            return ""
        return namespace.config or ""

    def value(self, argv: Sequence[str] | None = None) -> str:
        """Flag value from ``argv`` if given, else from the process command line."""
        if argv is not None:
            return self.parse(argv)

        with self._lock:
            if not self._parsed:
                self._value = self.parse(sys.argv[1:])
                self._parsed = True
            return self._value

    def reset(self) -> None:
        """Forget the cached command-line parse."""
        with self._lock:
            self._parsed = False
            self._value = ""


config_flag = ConfigFlag()


def locate(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Resolve the configuration file path.

    Args:
        argv: Command-line arguments to inspect (defaults to the process arguments)
        environ: Environment to inspect (defaults to ``os.environ``)

    Returns:
        Path to an existing configuration file

    Raises:
        PathNotFoundError: If neither the flag nor CONFIG_PATH is set
        ConfigFileNotFoundError: If the chosen path is not an existing file
    """
    environ = os.environ if environ is None else environ

    candidate = config_flag.value(argv)
    source = f"{CONFIG_FLAG} flag"
    if not candidate:
        candidate = environ.get(CONFIG_PATH_ENV, "")
        source = CONFIG_PATH_ENV

    if not candidate:
        raise PathNotFoundError(CONFIG_FLAG, CONFIG_PATH_ENV)

    path = Path(candidate).expanduser()
    if not path.is_file():
        raise ConfigFileNotFoundError(str(path), source)

    logger.info("Using configuration file %s (from %s)", path, source)
    return path
