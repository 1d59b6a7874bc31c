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

"""Loader: the single entry point services use at startup.

    config, environment = must_load(ServiceConfig)

``load`` raises a ``LoadError`` subclass on the first failure; ``must_load``
turns any such failure into process termination with exit status 78.
"""

from collections.abc import Mapping, Sequence
import logging
import sys
from typing import Generic, NamedTuple, NoReturn, TypeVar

from .constants import EXIT_CONFIG_ERROR
from .decoder import SchemaDecoder
from .environment import Environment
from .exceptions import LoadError
from .locator import locate
from .schema import ConfigSchema

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=ConfigSchema)


class Loaded(NamedTuple, Generic[S]):
    """A decoded configuration together with its validated environment."""

    config: S
    environment: Environment


def _require_environment_aware(schema_cls: type) -> None:
    if not (isinstance(schema_cls, type) and issubclass(schema_cls, ConfigSchema)):
        raise TypeError(f"{schema_cls!r} is not a ConfigSchema subclass")
    if not callable(getattr(schema_cls, "environment_name", None)):
        raise TypeError(f"{schema_cls.__name__} must implement environment_name()")


def _exit_with(error: LoadError) -> NoReturn:
    logger.critical("Configuration load failed [%s]: %s", error.error_code, error)
    if error.recovery_suggestion:
        logger.critical("%s", error.recovery_suggestion)
    sys.exit(EXIT_CONFIG_ERROR)


class ConfigLoader:
    """Compose the source locator, schema decoder and environment factory."""

    def __init__(
        self,
        argv: Sequence[str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._argv = argv
        self._environ = environ

    def load(self, schema_cls: type[S]) -> Loaded[S]:
        """Locate, decode and validate the configuration for ``schema_cls``.

        Raises:
            LoadError: On the first failing stage; nothing is retried
            TypeError: If ``schema_cls`` cannot name its environment
        """
        _require_environment_aware(schema_cls)

        path = locate(self._argv, self._environ)
        config = SchemaDecoder(self._environ).decode(path, schema_cls)
        environment = Environment.from_name(config.environment_name())  # type: ignore[attr-defined]

        logger.info("Loaded %s for environment %s", schema_cls.__name__, environment)
        return Loaded(config, environment)

    def must_load(self, schema_cls: type[S]) -> Loaded[S]:
        """Like ``load`` but terminates the process on any configuration error."""
        try:
            return self.load(schema_cls)
        except LoadError as e:
            _exit_with(e)


def load(
    schema_cls: type[S],
    *,
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Loaded[S]:
    """Load ``schema_cls`` and its environment, raising ``LoadError`` on failure."""
    return ConfigLoader(argv, environ).load(schema_cls)


def must_load(
    schema_cls: type[S],
    *,
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Loaded[S]:
    """Load ``schema_cls`` and its environment, exiting the process on failure."""
    return ConfigLoader(argv, environ).must_load(schema_cls)
