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

"""Export decoded configuration back into its file shape."""

import json
from typing import Any

import yaml

from .constants import SECRET_MASK
from .durations import format_duration
from .fields import FieldKind, FieldSpec
from .schema import ConfigSchema


def _export_value(spec: FieldSpec, value: Any, mask_secrets: bool) -> Any:
    if spec.secret and mask_secrets and value:
        return SECRET_MASK
    if spec.kind is FieldKind.SECTION:
        return to_source_dict(value, mask_secrets=mask_secrets)
    if spec.kind is FieldKind.SECTION_LIST:
        return [to_source_dict(item, mask_secrets=mask_secrets) for item in value]
    if spec.kind is FieldKind.DURATION:
        return format_duration(value)
    if spec.kind is FieldKind.STRING_LIST:
        return list(value)
    return value


def to_source_dict(config: ConfigSchema, *, mask_secrets: bool = True) -> dict[str, Any]:
    """Convert a schema instance to a mapping keyed like the configuration file."""
    return {
        spec.key: _export_value(spec, getattr(config, spec.name), mask_secrets)
        for spec in type(config).field_specs()
    }


def export_config(config: ConfigSchema, format: str = "yaml", *, mask_secrets: bool = True) -> str:
    """Export a decoded configuration to YAML or JSON."""
    data = to_source_dict(config, mask_secrets=mask_secrets)

    if format.lower() == "yaml":
        return str(yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True))
    if format.lower() == "json":
        return json.dumps(data, indent=2, ensure_ascii=False)
    raise ValueError(f"Unsupported export format: {format}")


def _collect_env_vars(schema_cls: type[ConfigSchema], prefix: str, out: dict[str, str]) -> None:
    for spec in schema_cls.field_specs():
        path = f"{prefix}.{spec.key}" if prefix else spec.key
        if spec.kind is FieldKind.SECTION:
            _collect_env_vars(spec.section, path, out)  # type: ignore[arg-type]
            continue
        for variable in spec.env:
            out[variable] = f"Type: {spec.kind}, Path: {path}"


def env_var_help(schema_cls: type[ConfigSchema]) -> dict[str, str]:
    """Get help text for every environment variable override a schema declares."""
    help_text: dict[str, str] = {}
    _collect_env_vars(schema_cls, "", help_text)
    return help_text
