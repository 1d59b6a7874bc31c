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

"""Tests for the schema decoder."""

from datetime import timedelta
import logging
import os
from unittest.mock import patch

import pytest

from configo import (
    ConfigFileNotFoundError,
    DecodeError,
    RequiredFieldMissingError,
    SourceParseError,
    UnsupportedFormatError,
)
from configo.decoder import SchemaDecoder, decode, decode_mapping, read_source
from configo.sections import Database, KafkaConsumer, Redis
from sample_schemas import Cluster, DatabaseService, ServiceConfig


class TestReadSource:
    """Test reading configuration files."""

    def test_yaml(self, write_config):
        """Test reading a YAML document."""
        path = write_config("env: dev\nworkers: 2\n")
        assert read_source(path) == {"env": "dev", "workers": "2"}

    def test_yml_suffix(self, write_config):
        """Test that the .yml suffix is read as YAML."""
        path = write_config("env: dev\n", name="config.yml")
        assert read_source(path) == {"env": "dev"}

    def test_json(self, write_config):
        """Test reading a JSON document."""
        path = write_config({"env": "dev", "tags": ["a"]}, name="config.json")
        assert read_source(path) == {"env": "dev", "tags": ["a"]}

    def test_empty_file(self, write_config):
        """Test that an empty file is an empty mapping."""
        assert read_source(write_config("")) == {}

    def test_non_mapping_root(self, write_config):
        """Test that a list document is rejected."""
        with pytest.raises(SourceParseError, match="root must be a mapping"):
            read_source(write_config("- a\n- b\n"))

    def test_malformed_yaml(self, write_config):
        """Test that malformed YAML is reported as a parse error."""
        with pytest.raises(SourceParseError) as exc_info:
            read_source(write_config("env: [dev\n"))
        assert exc_info.value.error_code == "CFG_1004"

    def test_malformed_json(self, write_config):
        """Test that malformed JSON is reported as a parse error."""
        with pytest.raises(SourceParseError):
            read_source(write_config('{"env": ', name="config.json"))

    def test_unsupported_suffix(self, write_config):
        """Test that other file formats are rejected."""
        with pytest.raises(UnsupportedFormatError) as exc_info:
            read_source(write_config("env=dev\n", name="config.env"))
        assert exc_info.value.suffix == ".env"

    def test_missing_file(self, tmp_path):
        """Test that a vanished file is reported as not found."""
        with pytest.raises(ConfigFileNotFoundError):
            read_source(tmp_path / "missing.yaml")


class TestFieldResolution:
    """Test the per-field precedence: override, file, default, required, zero."""

    def test_defaults_and_zero_values(self):
        """Test that absent optional fields get defaults or zero values."""
        config = decode_mapping({"env": "dev"}, ServiceConfig, environ={})

        assert config.name == "demo"
        assert config.debug is False
        assert config.workers == 4
        assert config.ratio == 0.5
        assert config.timeout == timedelta(seconds=30)
        assert config.tags == []
        assert config.hosts == []
        assert config.token == ""

    def test_file_values_replace_defaults(self):
        """Test that file values win over defaults."""
        data = {"env": "dev", "workers": 2, "timeout": "1m", "debug": "true", "ratio": 1}
        config = decode_mapping(data, ServiceConfig, environ={})

        assert config.workers == 2
        assert config.timeout == timedelta(minutes=1)
        assert config.debug is True
        assert config.ratio == 1.0

    def test_environment_override_beats_file(self):
        """Test that a set override variable wins over the file value."""
        data = {"env": "dev", "workers": 2}
        config = decode_mapping(data, ServiceConfig, environ={"APP_WORKERS": "8"})
        assert config.workers == 8

    def test_environment_override_without_file_value(self):
        """Test that an override supplies a value the file lacks."""
        config = decode_mapping({}, ServiceConfig, environ={"APP_ENV": "prod", "APP_DEBUG": "1"})
        assert config.env == "prod"
        assert config.debug is True

    def test_empty_override_still_overrides(self):
        """Test that a variable set to the empty string counts as set."""
        config = decode_mapping({"env": "dev", "tags": ["a"]}, ServiceConfig, environ={"APP_TAGS": ""})
        assert config.tags == []

    def test_empty_override_for_integer_fails(self):
        """Test that an empty override is still coerced."""
        with pytest.raises(DecodeError) as exc_info:
            decode_mapping({"env": "dev"}, ServiceConfig, environ={"APP_WORKERS": ""})
        assert exc_info.value.field == "workers"

    def test_override_from_process_environment(self):
        """Test that overrides are read from os.environ by default."""
        with patch.dict(os.environ, {"APP_ENV": "staging", "APP_TIMEOUT": "250ms"}):
            config = decode_mapping({"env": "dev"}, ServiceConfig)

        assert config.env == "staging"
        assert config.timeout == timedelta(milliseconds=250)

    def test_secondary_override_variable(self):
        """Test that any declared variable can supply the override."""
        config = decode_mapping({"env": "dev"}, ServiceConfig, environ={"LEGACY_TOKEN": "s3cret"})
        assert config.token == "s3cret"

    def test_null_value_counts_as_absent(self):
        """Test that a YAML null falls through to the default."""
        config = decode_mapping({"env": "dev", "workers": None}, ServiceConfig, environ={})
        assert config.workers == 4

    def test_unknown_keys_ignored(self):
        """Test that keys without a field are ignored."""
        config = decode_mapping({"env": "dev", "unused": {"a": 1}}, ServiceConfig, environ={})
        assert config.env == "dev"

    def test_override_logging(self, caplog):
        """Test that the number of overrides is logged without values."""
        with caplog.at_level(logging.DEBUG, logger="configo.decoder"):
            decode_mapping({"env": "dev"}, ServiceConfig, environ={"APP_TOKEN": "s3cret"})

        assert "Applied 1 environment overrides to ServiceConfig" in caplog.text
        assert "APP_TOKEN" in caplog.text
        assert "s3cret" not in caplog.text


class TestRequiredFields:
    """Test enforcement of required fields."""

    def test_missing_required_field(self):
        """Test that a missing required field names the field."""
        with pytest.raises(RequiredFieldMissingError) as exc_info:
            decode_mapping({"host": "db.local"}, DatabaseService, environ={})

        assert exc_info.value.field == "port"
        assert exc_info.value.error_code == "CFG_2002"
        assert "port" in str(exc_info.value)

    @pytest.mark.parametrize(
        "data",
        [
            {"host": "db.local"},
            {"host": "db.local", "env": "prod"},
            {"host": "db.local", "env": "dev", "extra": 1},
        ],
    )
    def test_missing_field_independent_of_other_fields(self, data):
        """Test that other fields do not change the outcome for a missing one."""
        with pytest.raises(RequiredFieldMissingError) as exc_info:
            decode_mapping(data, DatabaseService, environ={})
        assert exc_info.value.field == "port"

    def test_zero_value_satisfies_required(self):
        """Test that presence, not value, satisfies a required field."""
        config = decode_mapping({"host": "", "port": 0}, DatabaseService, environ={})
        assert config.host == ""
        assert config.port == 0

    def test_override_satisfies_required(self):
        """Test that an override variable satisfies a required field."""
        config = decode_mapping({}, ServiceConfig, environ={"APP_ENV": "dev"})
        assert config.env == "dev"

    def test_missing_required_lists_override_variables(self):
        """Test that the error mentions how the field could be supplied."""
        with pytest.raises(RequiredFieldMissingError) as exc_info:
            decode_mapping({}, ServiceConfig, environ={})

        assert exc_info.value.field == "env"
        assert "APP_ENV" in exc_info.value.recovery_suggestion


class TestListsAndDurations:
    """Test list splitting and duration parsing during decoding."""

    def test_delimited_list(self):
        """Test that a delimited string is split in order."""
        config = decode_mapping({"env": "dev", "tags": "a,b,c"}, ServiceConfig, environ={})
        assert config.tags == ["a", "b", "c"]

    def test_single_item_list(self):
        """Test that a single item becomes a one-element list."""
        config = decode_mapping({"env": "dev", "tags": "a"}, ServiceConfig, environ={})
        assert config.tags == ["a"]

    def test_custom_separator(self):
        """Test a field declared with its own separator."""
        config = decode_mapping({"env": "dev", "hosts": "a,1;b,2"}, ServiceConfig, environ={})
        assert config.hosts == ["a,1", "b,2"]

    def test_list_override(self):
        """Test that a list override is split like a file value."""
        config = decode_mapping({"env": "dev"}, ServiceConfig, environ={"APP_TAGS": "x,y"})
        assert config.tags == ["x", "y"]

    def test_duration(self):
        """Test that a compact literal becomes a duration."""
        config = decode_mapping({"env": "dev", "timeout": "1s"}, ServiceConfig, environ={})
        assert config.timeout == timedelta(seconds=1)

    def test_bad_duration(self):
        """Test that a malformed literal fails with the field and raw value."""
        with pytest.raises(DecodeError) as exc_info:
            decode_mapping({"env": "dev", "timeout": "bad"}, ServiceConfig, environ={})

        assert exc_info.value.field == "timeout"
        assert exc_info.value.raw_value == "bad"
        assert exc_info.value.error_code == "CFG_2001"

    def test_bad_boolean(self):
        """Test that an unrecognized boolean spelling fails."""
        with pytest.raises(DecodeError) as exc_info:
            decode_mapping({"env": "dev", "debug": "yes"}, ServiceConfig, environ={})
        assert exc_info.value.field == "debug"


class TestNestedSections:
    """Test decoding of sections and section lists."""

    def test_nested_values(self):
        """Test that nesting in the file mirrors nesting in the schema."""
        data = {
            "primary": {"host": "p", "port": 1},
            "replicas": [{"host": "r1", "port": 2}, {"host": "r2", "port": "3"}],
        }
        config = decode_mapping(data, Cluster, environ={})

        assert config.primary.host == "p"
        assert [replica.host for replica in config.replicas] == ["r1", "r2"]
        assert config.replicas[1].port == 3

    def test_missing_nested_required_field(self):
        """Test that errors inside a section use a dotted path."""
        with pytest.raises(RequiredFieldMissingError) as exc_info:
            decode_mapping({"primary": {"host": "p"}}, Cluster, environ={})
        assert exc_info.value.field == "primary.port"

    def test_absent_section_is_decoded_empty(self):
        """Test that an absent section still enforces its required fields."""
        with pytest.raises(RequiredFieldMissingError) as exc_info:
            decode_mapping({}, Cluster, environ={})
        assert exc_info.value.field == "primary.host"

    def test_list_element_path(self):
        """Test that errors inside a list element use an indexed path."""
        data = {"primary": {"host": "p", "port": 1}, "replicas": [{"host": "r", "port": 1}, {"port": 2}]}
        with pytest.raises(RequiredFieldMissingError) as exc_info:
            decode_mapping(data, Cluster, environ={})
        assert exc_info.value.field == "replicas[1].host"

    def test_section_must_be_mapping(self):
        """Test that a scalar in place of a section fails."""
        with pytest.raises(DecodeError) as exc_info:
            decode_mapping({"primary": "p:1"}, Cluster, environ={})
        assert exc_info.value.field == "primary"

    def test_section_list_must_be_sequence(self):
        """Test that a string in place of a section list fails."""
        data = {"primary": {"host": "p", "port": 1}, "replicas": "r1,r2"}
        with pytest.raises(DecodeError) as exc_info:
            decode_mapping(data, Cluster, environ={})
        assert exc_info.value.field == "replicas"

    def test_overrides_apply_to_sections_not_list_elements(self):
        """Test that overrides reach nested sections but not list elements."""
        data = {"primary": {"host": "p", "port": 1}, "replicas": [{"host": "r", "port": 2}]}
        config = decode_mapping(data, Cluster, environ={"ENDPOINT_HOST": "override"})

        assert config.primary.host == "override"
        assert config.replicas[0].host == "r"


class TestValidationConstraints:
    """Test pydantic constraints declared through setting()."""

    def test_range_constraint(self):
        """Test that an out-of-range port fails with the source key."""
        with pytest.raises(DecodeError) as exc_info:
            decode_mapping({"host": "cache", "port": 70000}, Redis, environ={})

        assert exc_info.value.field == "port"
        assert exc_info.value.raw_value == 70000

    def test_literal_constraint(self):
        """Test that a value outside a Literal fails with the source key."""
        data = {"brokers": "a:9092", "groupId": "g", "topics": "t", "startOffset": "middle"}
        with pytest.raises(DecodeError) as exc_info:
            decode_mapping(data, KafkaConsumer, environ={})
        assert exc_info.value.field == "startOffset"


class TestDecodeFile:
    """Test decoding straight from a file."""

    def test_decode_yaml_file(self, write_config):
        """Test decoding a YAML file into a schema instance."""
        path = write_config("env: dev\ntags: a,b\ntimeout: 2h45m\n")
        config = decode(path, ServiceConfig, environ={})

        assert config.tags == ["a", "b"]
        assert config.timeout == timedelta(hours=2, minutes=45)

    def test_decode_json_file(self, write_config):
        """Test decoding a JSON file into a schema instance."""
        path = write_config({"env": "dev", "workers": "3"}, name="config.json")
        config = SchemaDecoder(environ={}).decode(str(path), ServiceConfig)
        assert config.workers == 3

    def test_source_logged(self, write_config, caplog):
        """Test that the source file is logged."""
        path = write_config("env: dev\n")
        with caplog.at_level(logging.INFO, logger="configo.decoder"):
            decode(path, ServiceConfig, environ={})
        assert f"Loaded configuration source {path}" in caplog.text


class TestTomlSource:
    """Test TOML configuration files."""

    def test_read_toml(self, write_config):
        """Test reading a TOML document with a nested table."""
        path = write_config('env = "dev"\nworkers = 2\n\n[primary]\nhost = "p"\n', name="config.toml")
        assert read_source(path) == {"env": "dev", "workers": 2, "primary": {"host": "p"}}

    def test_decode_toml(self, write_config):
        """Test decoding a TOML document into a schema instance."""
        path = write_config(
            'env = "dev"\n\n[primary]\nhost = "p"\nport = 1\n',
            name="config.toml",
        )
        config = decode(path, Cluster, environ={})
        assert config.primary.host == "p"

        service = decode(
            write_config('env = "dev"\ntags = ["a", "b"]\ntimeout = "2h45m"\n', name="service.toml"),
            ServiceConfig,
            environ={},
        )
        assert service.tags == ["a", "b"]
        assert service.timeout == timedelta(hours=2, minutes=45)

    def test_malformed_toml(self, write_config):
        """Test that malformed TOML is reported as a parse error."""
        with pytest.raises(SourceParseError):
            read_source(write_config('env = "dev\n', name="config.toml"))


class TestYamlScalarText:
    """Test that unquoted YAML scalars reach string fields exactly as written."""

    DATABASE_YAML = """\
type: postgres
host: db.internal
port: 5432
name: orders
user: orders
password: 0123
schema: 1.10
migrationPath: migrations
maxAttempts: 3
attemptDelay: 1s
"""

    def test_leading_zero_and_trailing_zero_kept(self, write_config):
        """Test that octal-looking and float-looking text stays verbatim."""
        database = decode(write_config(self.DATABASE_YAML), Database, environ={})

        assert database.password == "0123"
        assert database.schema_name == "1.10"
        assert database.port == 5432
        assert database.max_attempts == 3

    @pytest.mark.parametrize("literal", ["1e3", "on", "yes", "2024-01-01", "1:30", "0x1F"])
    def test_string_field_keeps_literal(self, write_config, literal):
        """Test that YAML 1.1 implicit types do not rewrite string values."""
        config = decode(write_config(f"env: dev\nname: {literal}\n"), ServiceConfig, environ={})
        assert config.name == literal

    def test_typed_fields_still_convert(self, write_config):
        """Test that plain scalars still convert for non-string fields."""
        path = write_config("env: dev\nworkers: 8\nratio: 1e3\ndebug: true\ntimeout: 90s\n")
        config = decode(path, ServiceConfig, environ={})

        assert config.workers == 8
        assert config.ratio == 1000.0
        assert config.debug is True
        assert config.timeout == timedelta(seconds=90)

    @pytest.mark.parametrize("literal", ["~", "null", "Null", ""])
    def test_null_literals_are_absent(self, write_config, literal):
        """Test that YAML null spellings still fall through to the default."""
        path = write_config(f"env: dev\nname: {literal}\nworkers: {literal}\n")
        config = decode(path, ServiceConfig, environ={})

        assert config.name == "demo"
        assert config.workers == 4

    def test_explicit_tags_apply(self, write_config):
        """Test that explicitly tagged scalars are still typed."""
        assert read_source(write_config("workers: !!int 5\n")) == {"workers": 5}


class TestOutOfRangeValues:
    """Test values that parse but do not fit the target type."""

    def test_duration_too_large(self):
        """Test that an oversized duration is a decode error."""
        with pytest.raises(DecodeError) as exc_info:
            decode_mapping({"env": "prod", "timeout": "99999999999999h"}, ServiceConfig, environ={})

        assert exc_info.value.field == "timeout"
        assert exc_info.value.raw_value == "99999999999999h"

    def test_duration_override_too_large(self):
        """Test that an oversized override is a decode error too."""
        with pytest.raises(DecodeError) as exc_info:
            decode_mapping({"env": "prod"}, ServiceConfig, environ={"APP_TIMEOUT": "-99999999999999h"})
        assert exc_info.value.field == "timeout"

    def test_integer_too_large_for_float(self):
        """Test that an integer beyond float range is a decode error."""
        with pytest.raises(DecodeError) as exc_info:
            decode_mapping({"env": "prod", "ratio": 10**400}, ServiceConfig, environ={})
        assert exc_info.value.field == "ratio"

    def test_json_integer_too_large_for_float(self, write_config):
        """Test the same overflow arriving from a JSON file."""
        path = write_config('{"env": "prod", "ratio": 1' + "0" * 400 + "}", name="config.json")
        with pytest.raises(DecodeError):
            decode(path, ServiceConfig, environ={})
