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
Exploratory analysis of the passenger dataset.
"""
import logging
import pathlib
import typing

import pandas
from matplotlib import figure

from titanic import feature, schema

LOGGER = logging.getLogger(__name__)

HISTOGRAMS = (schema.Passenger.Age.name, schema.Passenger.Fare.name)
RATES = (schema.Passenger.Sex.name, schema.Passenger.Pclass.name, feature.FAMILY_SIZE)


def missing(frame: pandas.DataFrame) -> pandas.Series:
    """Count the missing values per column.

    Args:
        frame: Table to inspect.

    Returns:
        Series of missing value counts indexed by column names.
    """
    return frame.isna().sum().rename('Missing')


def describe(frame: pandas.DataFrame) -> pandas.DataFrame:
    """Descriptive statistics of all the columns."""
    return frame.describe(include='all')


def survival(frame: pandas.DataFrame, column: str, label: str = schema.LABEL) -> pandas.DataFrame:
    """Survival summary per each level of the given column (using just the labeled rows).

    Args:
        frame: Passenger table.
        column: Column to group by.
        label: Label column.

    Returns:
        Frame with the Passengers count, Survived count and the survival Rate per each level.
    """
    labeled = frame[frame[label].notna()]
    summary = labeled.groupby(column, observed=True)[label].agg(['count', 'sum'])
    summary.columns = ['Passengers', 'Survived']
    return summary.assign(Rate=summary['Survived'] / summary['Passengers'])


def plot(frame: pandas.DataFrame, directory: typing.Union[str, pathlib.Path]) -> list[pathlib.Path]:
    """Render the distribution charts into PNG files.

    Produces histograms of the continuous variables and bar charts of the survival rate per group.

    Args:
        frame: Passenger table (including the derived columns for the family size chart).
        directory: Target directory (created if needed).

    Returns:
        List of the written files.
    """
    directory = pathlib.Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    paths = []

    def save(fig: figure.Figure, name: str) -> None:
        path = directory / f'{name}.png'
        fig.savefig(path)
        LOGGER.debug('Saved %s', path)
        paths.append(path)

    for column in HISTOGRAMS:
        fig = figure.Figure()
        axes = fig.subplots()
        axes.hist(frame[column].dropna().to_numpy(dtype=float), bins=30)
        axes.set_xlabel(column)
        axes.set_ylabel('Passengers')
        save(fig, column.lower())

    for column in (c for c in RATES if c in frame.columns):
        rates = survival(frame, column)['Rate']
        fig = figure.Figure()
        axes = fig.subplots()
        axes.bar([str(i) for i in rates.index], rates.to_numpy())
        axes.set_xlabel(column)
        axes.set_ylabel('Survival rate')
        save(fig, f'survival_{column.lower()}')

    LOGGER.info('Rendered %d charts into %s', len(paths), directory)
    return paths
