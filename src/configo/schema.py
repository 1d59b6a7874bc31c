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

"""Base class and field declarations for configuration schemas.

A schema is a pydantic model whose fields are declared with ``setting()``:

    class Database(ConfigSchema):
        host: str = setting("host", required=True)
        port: int = setting("port", env="DB_PORT", required=True)
        schema_name: str = setting("schema", default="public")
        attempt_delay: timedelta = setting("attemptDelay", default="1s")

Root schemas additionally implement ``environment_name()`` so the loader can
derive the runtime environment from them.
"""

from collections.abc import Sequence
from datetime import timedelta
from typing import Any, ClassVar, Literal, Protocol, get_args, get_origin, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field
from pydantic.fields import FieldInfo
from pydantic_core import PydanticUndefined

from .constants import DEFAULT_SEPARATOR
from .exceptions import SchemaDefinitionError
from .fields import NO_DEFAULT, SCALAR_KINDS, FieldKind, FieldSpec, coerce_value

_METADATA_KEY = "configo"

_SCALAR_TYPES: dict[Any, FieldKind] = {
    str: FieldKind.STRING,
    int: FieldKind.INTEGER,
    bool: FieldKind.BOOLEAN,
    float: FieldKind.FLOAT,
    timedelta: FieldKind.DURATION,
}


def setting(
    key: str | None = None,
    *,
    env: str | Sequence[str] | None = None,
    required: bool = False,
    default: Any = NO_DEFAULT,
    separator: str = DEFAULT_SEPARATOR,
    secret: bool = False,
    description: str | None = None,
    **constraints: Any,
) -> Any:
    """Declare a configuration field.

    Args:
        key: Key in the configuration file (defaults to the attribute name)
        env: Environment variable(s) overriding the file value; the first one set wins
        required: Fail the load when no override, file value or default exists
        default: Literal used when neither the environment nor the file supply a value
        separator: Delimiter for list fields given as a single string
        secret: Mask the value when the configuration is exported
        description: Human-readable description
        **constraints: Extra pydantic ``Field`` constraints such as ``ge`` or ``le``
    """
    if isinstance(env, str):
        env_vars = [env]
    else:
        env_vars = list(env or ())

    metadata: dict[str, Any] = {
        "key": key,
        "env": env_vars,
        "required": required,
        "separator": separator,
        "secret": secret,
    }
    if default is not NO_DEFAULT:
        metadata["default"] = default

    return Field(
        description=description,
        json_schema_extra={_METADATA_KEY: metadata},
        **constraints,
    )


@runtime_checkable
class EnvironmentAware(Protocol):
    """Capability of a root schema: it names its intended runtime environment."""

    def environment_name(self) -> str: ...


def _resolve_kind(annotation: Any) -> tuple[FieldKind, type | None] | None:
    if annotation in _SCALAR_TYPES:
        return _SCALAR_TYPES[annotation], None

    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Literal and args and all(isinstance(arg, str) for arg in args):
        return FieldKind.STRING, None

    if origin is list and len(args) == 1:
        (item,) = args
        if item is str:
            return FieldKind.STRING_LIST, None
        if isinstance(item, type) and issubclass(item, ConfigSchema):
            return FieldKind.SECTION_LIST, item
        return None

    if isinstance(annotation, type) and issubclass(annotation, ConfigSchema):
        return FieldKind.SECTION, annotation

    return None


def _pydantic_default(info: FieldInfo) -> Any:
    if info.default is not PydanticUndefined:
        return info.default
    if info.default_factory is not None:
        # Factories that read other validated fields have no standalone default
        if info.default_factory_takes_data:
            return NO_DEFAULT
        return info.default_factory()  # type: ignore[call-arg]
    return NO_DEFAULT


def _build_field_spec(schema: type["ConfigSchema"], name: str, info: FieldInfo) -> FieldSpec:
    extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
    metadata: dict[str, Any] = extra.get(_METADATA_KEY) or {}  # type: ignore[assignment]

    resolved = _resolve_kind(info.annotation)
    if resolved is None:
        raise SchemaDefinitionError(
            schema.__name__,
            name,
            f"unsupported field type {info.annotation!r}",
        )
    kind, section = resolved

    if metadata:
        required = bool(metadata.get("required", False))
        default = metadata.get("default", NO_DEFAULT)
    else:
        # Plain pydantic field: its own default (or lack of one) applies
        default = _pydantic_default(info)
        required = default is NO_DEFAULT and kind in SCALAR_KINDS

    env_vars = tuple(metadata.get("env") or ())
    if env_vars and kind not in SCALAR_KINDS:
        raise SchemaDefinitionError(
            schema.__name__,
            name,
            f"{kind} fields cannot be overridden from the environment",
        )

    separator = metadata.get("separator") or DEFAULT_SEPARATOR

    if default is not NO_DEFAULT:
        if kind not in SCALAR_KINDS:
            raise SchemaDefinitionError(
                schema.__name__,
                name,
                f"{kind} fields cannot declare a default",
            )
        try:
            default = coerce_value(kind, default, separator)
        except (ValueError, OverflowError) as e:
            raise SchemaDefinitionError(
                schema.__name__,
                name,
                f"invalid default {default!r}: {e}",
            ) from e

    return FieldSpec(
        name=name,
        key=metadata.get("key") or name,
        kind=kind,
        required=required,
        default=default,
        separator=separator,
        env=env_vars,
        secret=bool(metadata.get("secret", False)),
        section=section,
        description=info.description,
    )


class ConfigSchema(BaseModel):
    """Base class for every configuration schema and section."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    __config_fields__: ClassVar[tuple[FieldSpec, ...]] = ()

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        cls.__config_fields__ = tuple(
            _build_field_spec(cls, name, info) for name, info in cls.model_fields.items()
        )

    @classmethod
    def field_specs(cls) -> tuple[FieldSpec, ...]:
        """Descriptor table built when the class was defined."""
        return cls.__config_fields__
