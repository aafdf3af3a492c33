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
Dataset loading.

Both the trainset and the testset get loaded into a single combined table so that all the downstream transformations
(imputation, feature derivation) see the full dataset. Each row is tagged with its origin and the dataset keeps the
original boundary and identifiers so that it can later be split back reliably.
"""
import logging
import pathlib
import typing

import pandas

from titanic import schema

LOGGER = logging.getLogger(__name__)

ORIGIN = 'Origin'
TRAIN = 'train'
TEST = 'test'


class Dataset(typing.NamedTuple):
    """Combined train+test table together with the information needed for splitting it back."""

    frame: pandas.DataFrame
    """The combined table (trainset rows first)."""
    boundary: int
    """Number of the leading trainset rows."""
    identifiers: pandas.Series
    """Row identifiers in their original load order."""

    def replace(self, frame: pandas.DataFrame) -> 'Dataset':
        """Return a new dataset instance with the given frame.

        Args:
            frame: New version of the combined table.

        Returns:
            Dataset instance.
        """
        return self._replace(frame=frame)

    @property
    def size(self) -> int:
        """Number of rows recorded at load time."""
        return len(self.identifiers)


def read(path: typing.Union[str, pathlib.Path], *exclude: str) -> pandas.DataFrame:
    """Read a delimited file and validate its header against the passenger schema.

    Args:
        path: File to read.
        exclude: Schema fields not expected in this file.

    Returns:
        Raw frame with the schema columns (in schema order).
    """
    LOGGER.debug('Reading %s', path)
    frame = pandas.read_csv(path)
    schema.Passenger.validate(frame.columns, *exclude)
    columns = [n for n in schema.Passenger.names if n not in exclude]
    extra = frame.columns.difference(columns)
    if not extra.empty:
        LOGGER.warning('Ignoring columns of %s not in schema: %s', path, ', '.join(extra))
    return frame[columns]


def load(trainset: typing.Union[str, pathlib.Path], testset: typing.Union[str, pathlib.Path]) -> Dataset:
    """Load the two files and combine them into one dataset.

    Args:
        trainset: Path to the labeled file.
        testset: Path to the unlabeled file (all but the label column).

    Returns:
        Combined dataset.
    """
    train = read(trainset).assign(**{ORIGIN: TRAIN})
    test = read(testset, schema.LABEL).assign(**{ORIGIN: TEST})
    frame = pandas.concat((train, test), ignore_index=True, sort=False)
    frame = schema.Passenger.coerce(frame[[*schema.Passenger.names, ORIGIN]])
    frame[ORIGIN] = frame[ORIGIN].astype(pandas.CategoricalDtype((TRAIN, TEST)))
    LOGGER.info('Loaded %d training and %d testing rows', len(train), len(test))
    return Dataset(frame, len(train), frame[schema.ID].copy())
