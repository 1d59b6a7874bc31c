#!/usr/bin/env python3
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

"""Command-line checker: load a schema the way a service would and print it.

    python -m configo myservice.settings:ServiceConfig -config config.yaml
    python -m configo myservice.settings:ServiceConfig --env-help
"""

import argparse
from collections.abc import Sequence
import importlib
import logging
import sys

from .constants import CONFIG_FLAG, CONFIG_FLAG_ALIASES, EXIT_CONFIG_ERROR
from .exceptions import LoadError
from .export import env_var_help, export_config
from .loader import load
from .schema import ConfigSchema

logging.basicConfig(
    level=logging.INFO,
    stream=sys.stderr,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

EXIT_USAGE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="configo",
        description="Load a configuration schema and print the resolved values",
    )
    parser.add_argument("schema", help="Schema class as module:ClassName")
    parser.add_argument(
        CONFIG_FLAG,
        *CONFIG_FLAG_ALIASES,
        dest="config",
        default="",
        help="Path to the configuration file (default: $CONFIG_PATH)",
    )
    parser.add_argument("--format", choices=("yaml", "json"), default="yaml", help="Output format")
    parser.add_argument("--env-help", action="store_true", help="List environment overrides and exit")
    parser.add_argument("--show-secrets", action="store_true", help="Do not mask secret fields")
    return parser


def _import_schema(target: str) -> type[ConfigSchema]:
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"expected module:ClassName, got {target!r}")

    schema_cls = getattr(importlib.import_module(module_name), attr)
    if not (isinstance(schema_cls, type) and issubclass(schema_cls, ConfigSchema)):
        raise ValueError(f"{target} is not a ConfigSchema subclass")
    return schema_cls


def main(argv: Sequence[str] | None = None) -> int:
    """Run the checker and return the process exit status."""
    args = _build_parser().parse_args(argv)

    try:
        schema_cls = _import_schema(args.schema)
    except (ImportError, AttributeError, ValueError) as e:
        logger.error("Cannot import schema %s: %s", args.schema, e)
        return EXIT_USAGE

    if args.env_help:
        for variable, text in env_var_help(schema_cls).items():
            print(f"{variable}: {text}")
        return 0

    try:
        config, environment = load(schema_cls, argv=[CONFIG_FLAG, args.config] if args.config else [])
    except LoadError as e:
        logger.error("Configuration load failed [%s]: %s", e.error_code, e)
        return EXIT_CONFIG_ERROR
    except TypeError as e:
        logger.error("%s", e)
        return EXIT_USAGE

    logger.info("Resolved environment: %s", environment)
    print(export_config(config, args.format, mask_secrets=not args.show_secrets), end="")
    if args.format == "json":
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
