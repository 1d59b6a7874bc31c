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

"""Startup-time configuration loading for services.

This package provides a fail-fast configuration pipeline with:
- Config file discovery via the -config flag or the CONFIG_PATH environment variable
- Schema-driven decoding of YAML, JSON or TOML files with per-field environment overrides
- Required fields, default literals, delimited lists and compact durations
- A validated, closed-set runtime Environment derived from the decoded schema
"""

from .decoder import SchemaDecoder, decode, decode_mapping, read_source
from .durations import format_duration, parse_duration
from .environment import Environment
from .exceptions import (
    ConfigFileNotFoundError,
    ConfigoError,
    DecodeError,
    FieldError,
    LoadError,
    PathNotFoundError,
    RequiredFieldMissingError,
    SchemaDefinitionError,
    SourceParseError,
    UnrecognizedEnvironmentError,
    UnsupportedFormatError,
)
from .export import env_var_help, export_config, to_source_dict
from .fields import FieldKind, FieldSpec
from .loader import ConfigLoader, Loaded, load, must_load
from .locator import config_flag, locate
from .schema import ConfigSchema, EnvironmentAware, setting

__all__ = [
    "ConfigFileNotFoundError",
    "ConfigLoader",
    "ConfigSchema",
    "ConfigoError",
    "DecodeError",
    "Environment",
    "EnvironmentAware",
    "FieldError",
    "FieldKind",
    "FieldSpec",
    "LoadError",
    "Loaded",
    "PathNotFoundError",
    "RequiredFieldMissingError",
    "SchemaDecoder",
    "SchemaDefinitionError",
    "SourceParseError",
    "UnrecognizedEnvironmentError",
    "UnsupportedFormatError",
    "config_flag",
    "decode",
    "decode_mapping",
    "env_var_help",
    "export_config",
    "format_duration",
    "load",
    "locate",
    "must_load",
    "parse_duration",
    "read_source",
    "setting",
    "to_source_dict",
]
