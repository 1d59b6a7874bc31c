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

"""Custom exceptions for the configuration pipeline."""

from collections.abc import Iterable
from typing import Any


class ConfigoError(Exception):
    """Base exception for all configuration errors."""

    ERROR_CATEGORY = "GENERAL"
    ERROR_CODE = "CFG_0000"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
        recovery_suggestion: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.ERROR_CODE
        self.error_category = self.ERROR_CATEGORY
        self.context = context or {}
        self.recovery_suggestion = recovery_suggestion


class SchemaDefinitionError(ConfigoError):
    """A schema class declares a field the decoder cannot handle."""

    ERROR_CATEGORY = "SCHEMA_ERROR"
    ERROR_CODE = "CFG_0001"

    def __init__(self, schema: str, field: str, reason: str) -> None:
        message = f"Invalid declaration of {schema}.{field}: {reason}"
        context = {"schema": schema, "field": field, "reason": reason}
        super().__init__(message, self.ERROR_CODE, context)
        self.schema = schema
        self.field = field
        self.reason = reason


class LoadError(ConfigoError):
    """Any failure while loading configuration at startup."""

    ERROR_CATEGORY = "LOAD_ERROR"
    ERROR_CODE = "CFG_1000"


class PathNotFoundError(LoadError):
    """Neither the command-line flag nor the environment variable named a file."""

    ERROR_CODE = "CFG_1001"

    def __init__(self, flag: str, env_var: str) -> None:
        message = f"Configuration path not provided: pass {flag} <path> or set {env_var}"
        context = {"flag": flag, "env_var": env_var}
        recovery_suggestion = f"Start the process with {flag} <path> or export {env_var}"
        super().__init__(message, self.ERROR_CODE, context, recovery_suggestion)


class ConfigFileNotFoundError(LoadError):
    """The chosen configuration path does not exist."""

    ERROR_CODE = "CFG_1002"

    def __init__(self, path: str, source: str) -> None:
        message = f"Configuration file not found: {path} (from {source})"
        context = {"path": path, "source": source}
        recovery_suggestion = "Check the configuration path and the working directory"
        super().__init__(message, self.ERROR_CODE, context, recovery_suggestion)
        self.path = path
        self.source = source


class UnsupportedFormatError(LoadError):
    """The configuration file has a suffix the decoder cannot read."""

    ERROR_CODE = "CFG_1003"

    def __init__(self, path: str, suffix: str, supported: Iterable[str]) -> None:
        supported = sorted(supported)
        message = f"Unsupported configuration format '{suffix}' for {path}"
        context = {"path": path, "suffix": suffix, "supported": supported}
        recovery_suggestion = f"Use one of: {', '.join(supported)}"
        super().__init__(message, self.ERROR_CODE, context, recovery_suggestion)
        self.path = path
        self.suffix = suffix


class SourceParseError(LoadError):
    """The configuration file could not be parsed into a mapping."""

    ERROR_CODE = "CFG_1004"

    def __init__(self, path: str, reason: str) -> None:
        message = f"Cannot parse configuration file {path}: {reason}"
        context = {"path": path, "reason": reason}
        super().__init__(message, self.ERROR_CODE, context)
        self.path = path
        self.reason = reason


class FieldError(LoadError):
    """Base class for failures tied to a single schema field."""

    ERROR_CODE = "CFG_2000"

    def __init__(
        self,
        field: str,
        message: str,
        context: dict[str, Any] | None = None,
        recovery_suggestion: str | None = None,
    ) -> None:
        context = context or {}
        context["field"] = field
        super().__init__(message, self.ERROR_CODE, context, recovery_suggestion)
        self.field = field


class DecodeError(FieldError):
    """A field's raw value could not be coerced to its declared type."""

    ERROR_CODE = "CFG_2001"

    def __init__(self, field: str, raw_value: Any, reason: str) -> None:
        message = f"Cannot decode field '{field}' from {raw_value!r}: {reason}"
        super().__init__(field, message, {"raw_value": raw_value, "reason": reason})
        self.raw_value = raw_value
        self.reason = reason


class RequiredFieldMissingError(FieldError):
    """A required field had no override, no source value and no default."""

    ERROR_CODE = "CFG_2002"

    def __init__(self, field: str, env_vars: Iterable[str] = ()) -> None:
        env_vars = list(env_vars)
        message = f"Required configuration field '{field}' is missing"
        if env_vars:
            recovery_suggestion = f"Set '{field}' in the file or export {' or '.join(env_vars)}"
        else:
            recovery_suggestion = f"Set '{field}' in the configuration file"
        super().__init__(field, message, {"env_vars": env_vars}, recovery_suggestion)
        self.env_vars = env_vars


class UnrecognizedEnvironmentError(LoadError):
    """The configured environment name is outside the recognized set."""

    ERROR_CODE = "CFG_3001"

    def __init__(self, name: Any, recognized: Iterable[str]) -> None:
        recognized = list(recognized)
        message = f"Unrecognized environment {name!r}, expected one of: {', '.join(recognized)}"
        context = {"name": name, "recognized": recognized}
        super().__init__(message, self.ERROR_CODE, context)
        self.name = name
        self.recognized = recognized
