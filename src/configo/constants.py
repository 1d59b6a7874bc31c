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

"""Constants shared by the configuration pipeline.

Environment Variables:
- CONFIG_PATH: path to the configuration file, used when the -config flag is absent
- Per-field override variables are declared on each schema via ``setting(env=...)``
"""

# Command-line flag naming the configuration file (Go-style single dash)
CONFIG_FLAG = "-config"
CONFIG_FLAG_ALIASES = ("--config",)

# Fallback environment variable for the configuration file path
CONFIG_PATH_ENV = "CONFIG_PATH"

# Separator used to split list fields supplied as a single string
DEFAULT_SEPARATOR = ","

# Source formats understood by the decoder, keyed by file suffix
YAML_SUFFIXES = frozenset({".yaml", ".yml"})
JSON_SUFFIXES = frozenset({".json"})
TOML_SUFFIXES = frozenset({".toml"})
SUPPORTED_SUFFIXES = YAML_SUFFIXES | JSON_SUFFIXES | TOML_SUFFIXES

# sysexits.h EX_CONFIG
EXIT_CONFIG_ERROR = 78

# Mask used when exporting fields declared with secret=True
SECRET_MASK = "********"
