# Licensed to the Apache Software Foundation (ASF) under one
# or more contributor license agreements.  See the NOTICE file
# distributed with this work for additional information
# regarding copyright ownership.  The ASF licenses this file
# to you under the Apache License, Version 2.0 (the
# "License"); you may not use this file except in compliance
# with the License.  You may obtain a copy of the License at
#
#   http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.

"""Titanic pipeline configuration.
"""
import os
import pathlib
import re
import sys
import types
import typing

import tomli

import titanic


class Config(dict):
    """Layered TOML config with recursive merging of the individual sources."""

    def __init__(self, defaults: typing.Mapping[str, typing.Any], *paths: pathlib.Path):
        super().__init__()
        self._sources: list[pathlib.Path] = []
        self._errors: dict[pathlib.Path, Exception] = {}
        self.update(defaults)
        for src in paths:
            self.read(src)

    def update(self, other: typing.Optional[typing.Mapping[str, typing.Any]] = None, **kwargs) -> None:
        """Merge the given values into this config with right (new) scalars overwriting left (old) ones.

        Args:
            other: Another mapping with config values to be merged with our config.
            **kwargs: Other values provided as keyword arguments.
        """

        def merge(left: typing.Mapping, right: typing.Mapping) -> typing.Mapping[str, typing.Any]:
            """Recursive merge of two mappings with right-to-left precedence.

            Sequences are replaced as a whole (a column list from a user config must not get extended by the
            default one).

            Args:
                left: Left mapping to be merged.
                right: Right mapping to be merged.

            Returns:
                Merged read-only mapping.
            """
            result = {}
            for key in set(left).union(right):
                if (
                    key in left
                    and key in right
                    and isinstance(left[key], typing.Mapping)
                    and isinstance(right[key], typing.Mapping)
                ):
                    value = merge(left[key], right[key])
                elif key in right:
                    value = right[key]
                else:
                    value = left[key]
                result[key] = value
            return types.MappingProxyType(result)

        super().update(merge(merge(self, other or {}), kwargs))

    @property
    def sources(self) -> typing.Iterable[pathlib.Path]:
        """Get the source files successfully merged into this config.

        Returns:
            Source files.
        """
        return tuple(self._sources)

    @property
    def errors(self) -> typing.Mapping[pathlib.Path, Exception]:
        """Soft errors captured while reading the sources.

        Returns:
            Mapping between files and the captured errors.
        """
        return types.MappingProxyType(self._errors)

    def read(self, path: typing.Union[str, pathlib.Path]) -> None:
        """Read and merge config from given file.

        Args:
            path: Path to the TOML file to parse.
        """
        path = pathlib.Path(path)
        try:
            with open(path, 'rb') as cfg:
                self.update(tomli.load(cfg))
        except FileNotFoundError:  # not an error (ignore)
            pass
        except PermissionError as err:  # soft error (warn)
            self._errors[path] = err
        except tomli.TOMLDecodeError as err:  # hard error (abort)
            raise titanic.InvalidError(f'Invalid config file {path}: {err}') from err
        else:
            self._sources.append(path)


SECTION_SOURCE = 'SOURCE'
SECTION_IMPUTE = 'IMPUTE'
SECTION_MODEL = 'MODEL'
SECTION_SINK = 'SINK'
SECTION_EXPLORE = 'EXPLORE'
SECTION_EVALUATION = 'EVALUATION'
SECTION_LOGGING = 'LOGGING'
OPT_SEED = 'seed'
OPT_TRAINSET = 'trainset'
OPT_TESTSET = 'testset'
OPT_COLUMNS = 'columns'
OPT_ESTIMATORS = 'estimators'
OPT_ITERATIONS = 'iterations'
OPT_THRESHOLD = 'threshold'
OPT_TREES = 'trees'
OPT_FEATURES = 'features'
OPT_PREDICTIONS = 'predictions'
OPT_BASELINE = 'baseline'
OPT_MODEL = 'model'
OPT_PLOTS = 'plots'
OPT_FOLDS = 'folds'
OPT_CONFIG = 'config'
OPT_PATH = 'path'

APPNAME = 'titanic'
PRJNAME = re.sub(r'\.[^.]*$', '', pathlib.Path(sys.argv[0]).name)
#: System-level setup directory
SYSDIR = pathlib.Path('/etc') / APPNAME
#: User-level setup directory
USRDIR = pathlib.Path(os.getenv(f'{APPNAME.upper()}_HOME', pathlib.Path.home() / f'.{APPNAME}'))
#: Sequence of setup directories in ascending priority order
PATH = pathlib.Path(__file__).parent, SYSDIR, USRDIR
#: Main config file name
APPCFG = 'config.toml'

DEFAULTS = {
    # all static defaults should go rather to the ./config.toml (in this package)
    SECTION_LOGGING: {
        OPT_PATH: f'./{PRJNAME}.log',
    },
}

CONFIG = Config(DEFAULTS, *(p / APPCFG for p in PATH))


def get(section: str, option: str, default: typing.Any = None) -> typing.Any:
    """Lookup a section option falling back to the top-level option of the same name and then to the default.

    Args:
        section: Config section name.
        option: Option name within the section.
        default: Value to return if not configured at all.

    Returns:
        Configured value.
    """
    return CONFIG.get(section, {}).get(option, CONFIG.get(option, default))
