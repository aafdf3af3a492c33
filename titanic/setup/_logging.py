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

"""
Titanic pipeline logging.
"""
import configparser
import logging as logmod
import pathlib
import typing
from logging import config

import titanic

from . import _conf

LOGGER = logmod.getLogger(__name__)


def logging(*path: pathlib.Path, level: typing.Optional[str] = None) -> None:
    """Configure the logging using the ini file named in the LOGGING section.

    The file is looked up in all of the setup directories (plus the explicit ones) with the later ones overriding
    the earlier. The log file path is taken from the current config so that it can be changed using ``--config``.

    Args:
        path: Additional directories to look up the logging config in.
        level: Optional root loglevel override.
    """
    options = _conf.CONFIG[_conf.SECTION_LOGGING]
    parser = configparser.ConfigParser({_conf.OPT_PATH: str(options[_conf.OPT_PATH])})
    candidates = dict.fromkeys((d / options[_conf.OPT_CONFIG]).resolve() for d in (*_conf.PATH, *path))
    used = parser.read(candidates)
    if not used:
        raise titanic.MissingError(f'No logging config {options[_conf.OPT_CONFIG]} found')
    config.fileConfig(parser, disable_existing_loggers=False)
    logmod.captureWarnings(capture=True)
    if level:
        logmod.getLogger().setLevel(level.upper())
    LOGGER.debug('Logging configs: %s', ', '.join(used))
    LOGGER.debug('Application configs: %s', ', '.join(str(s) for s in _conf.CONFIG.sources) or 'none')
    for src, err in _conf.CONFIG.errors.items():
        LOGGER.warning('Error parsing config %s: %s', src, err)
