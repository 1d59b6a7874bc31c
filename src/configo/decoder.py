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

"""Schema decoder: reads a configuration file and populates a schema.

Per field, the first available source wins:
1. the field's environment variable override, if declared and set
2. the value under the field's key in the configuration file
3. the field's declared default
Otherwise a required field fails the load and an optional one gets its zero value.

Decoding is all-or-nothing: either a fully validated schema instance is
returned or an exception is raised and nothing is handed to the caller.
"""

from collections.abc import Mapping, Sequence
import json
import logging
import os
from pathlib import Path
import tomllib
from typing import Any, TypeVar

from pydantic import ValidationError
import yaml

from .constants import SUPPORTED_SUFFIXES, TOML_SUFFIXES, YAML_SUFFIXES
from .exceptions import (
    ConfigFileNotFoundError,
    DecodeError,
    RequiredFieldMissingError,
    SourceParseError,
    UnsupportedFormatError,
)
from .fields import FieldKind, FieldSpec, coerce_value, zero_value
from .schema import ConfigSchema

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=ConfigSchema)


# Untagged scalars stay as their source text so the field kind decides how to read them
_TYPED_SCALAR_TAGS = frozenset(
    f"tag:yaml.org,2002:{name}" for name in ("bool", "int", "float", "timestamp")
)


class ScalarTextLoader(yaml.SafeLoader):
    """Safe YAML loader that resolves only nulls among untagged plain scalars.

    ``password: 0123`` stays ``"0123"`` and ``version: 1.10`` stays ``"1.10"``;
    ``~``, ``null`` and empty values still load as ``None``.
    """


ScalarTextLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _TYPED_SCALAR_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _parse_source(path: Path, suffix: str) -> Any:
    if suffix in TOML_SUFFIXES:
        with path.open("rb") as f:
            return tomllib.load(f)

    with path.open(encoding="utf-8") as f:
        if suffix in YAML_SUFFIXES:
            return yaml.load(f, Loader=ScalarTextLoader)
        return json.load(f)


def read_source(path: Path) -> dict[str, Any]:
    """Load a YAML, JSON or TOML configuration file into a mapping."""
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise UnsupportedFormatError(str(path), suffix, SUPPORTED_SUFFIXES)

    try:
        data = _parse_source(path, suffix)
    except FileNotFoundError as e:
        raise ConfigFileNotFoundError(str(path), "decoder") from e
    except (
        yaml.YAMLError,
        json.JSONDecodeError,
        tomllib.TOMLDecodeError,
        UnicodeDecodeError,
    ) as e:
        raise SourceParseError(str(path), str(e)) from e
    except OSError as e:
        raise SourceParseError(str(path), f"cannot read file: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SourceParseError(
            str(path),
            f"root must be a mapping, got {type(data).__name__}",
        )
    return data


def _join(prefix: str, key: str) -> str:
    return f"{prefix}.{key}" if prefix else key


class SchemaDecoder:
    """Decode configuration sources into schema instances."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = os.environ if environ is None else environ

    def decode(self, path: str | Path, schema_cls: type[S]) -> S:
        """Read ``path`` and decode it into a new ``schema_cls`` instance."""
        path = Path(path)
        data = read_source(path)
        logger.info("Loaded configuration source %s", path)
        return self.decode_mapping(data, schema_cls)

    def decode_mapping(self, data: Mapping[str, Any], schema_cls: type[S]) -> S:
        """Decode an in-memory mapping into a new ``schema_cls`` instance."""
        overridden: list[str] = []
        instance = self._decode_section(schema_cls, data, "", True, overridden)
        if overridden:
            logger.info(
                "Applied %d environment overrides to %s",
                len(overridden),
                schema_cls.__name__,
            )
        return instance

    def _decode_section(
        self,
        schema_cls: type[S],
        data: Mapping[str, Any],
        path: str,
        apply_env: bool,
        overridden: list[str],
    ) -> S:
        values = {
            spec.name: self._resolve_field(spec, data, path, apply_env, overridden)
            for spec in schema_cls.field_specs()
        }
        try:
            return schema_cls.model_validate(values)
        except ValidationError as e:
            raise self._from_validation_error(schema_cls, e, path) from e

    def _resolve_field(
        self,
        spec: FieldSpec,
        data: Mapping[str, Any],
        path: str,
        apply_env: bool,
        overridden: list[str],
    ) -> Any:
        field_path = _join(path, spec.key)

        if apply_env and spec.env:
            hit = spec.lookup_env(self._environ)
            if hit is not None:
                variable, raw = hit
                logger.debug("Field %s taken from environment variable %s", field_path, variable)
                overridden.append(variable)
                return self._coerce(spec, raw, field_path, apply_env, overridden)

        raw = data.get(spec.key)
        if raw is not None:
            return self._coerce(spec, raw, field_path, apply_env, overridden)

        if spec.has_default:
            default = spec.default
            return list(default) if isinstance(default, list) else default

        if spec.required:
            raise RequiredFieldMissingError(field_path, spec.env)

        if spec.kind is FieldKind.SECTION:
            return self._decode_section(spec.section, {}, field_path, apply_env, overridden)  # type: ignore[arg-type]
        return zero_value(spec.kind)

    def _coerce(
        self,
        spec: FieldSpec,
        raw: Any,
        field_path: str,
        apply_env: bool,
        overridden: list[str],
    ) -> Any:
        if spec.kind is FieldKind.SECTION:
            if not isinstance(raw, Mapping):
                raise DecodeError(field_path, raw, "expected a mapping")
            return self._decode_section(spec.section, raw, field_path, apply_env, overridden)  # type: ignore[arg-type]

        if spec.kind is FieldKind.SECTION_LIST:
            if isinstance(raw, str) or not isinstance(raw, Sequence):
                raise DecodeError(field_path, raw, "expected a list of mappings")
            items = []
            for index, item in enumerate(raw):
                item_path = f"{field_path}[{index}]"
                if not isinstance(item, Mapping):
                    raise DecodeError(item_path, item, "expected a mapping")
                # List elements have no stable identity, so overrides do not apply to them
                items.append(
                    self._decode_section(spec.section, item, item_path, False, overridden),  # type: ignore[arg-type]
                )
            return items

        try:
            return coerce_value(spec.kind, raw, spec.separator)
        except ValueError as e:
            raise DecodeError(field_path, raw, str(e)) from e

    @staticmethod
    def _from_validation_error(
        schema_cls: type[ConfigSchema],
        error: ValidationError,
        path: str,
    ) -> DecodeError:
        details = error.errors()[0]
        loc = details.get("loc", ())
        keys = {spec.name: spec.key for spec in schema_cls.field_specs()}

        if loc:
            parts = [keys.get(str(loc[0]), str(loc[0]))] + [str(part) for part in loc[1:]]
            field = _join(path, ".".join(parts))
        else:
            field = path or schema_cls.__name__

        return DecodeError(field, details.get("input"), details.get("msg", str(error)))


def decode(
    path: str | Path,
    schema_cls: type[S],
    environ: Mapping[str, str] | None = None,
) -> S:
    """Decode the configuration file at ``path`` into ``schema_cls``."""
    return SchemaDecoder(environ).decode(path, schema_cls)


def decode_mapping(
    data: Mapping[str, Any],
    schema_cls: type[S],
    environ: Mapping[str, str] | None = None,
) -> S:
    """Decode an already-parsed mapping into ``schema_cls``."""
    return SchemaDecoder(environ).decode_mapping(data, schema_cls)
