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
Missing values imputation.

Implementation of the multivariate imputation by chained equations using a random forest regressor as the
per-column estimator. Each target column is iteratively predicted from all the others until the estimates settle.

Ordered categoricals take part in the imputation using their level codes and the imputed values are projected back
onto the nearest valid level. Unordered categoricals are expanded to per-level indicators and the imputed value is
the level with the strongest indicator, so that no level gets interpolated in between two others.
"""
import logging
import typing

import numpy
import pandas
from pandas.api import types as pdtypes
from sklearn import ensemble
from sklearn.experimental import enable_iterative_imputer  # noqa: F401 pylint: disable=unused-import
from sklearn import impute  # pylint: disable=ungrouped-imports

import titanic
from titanic import schema

LOGGER = logging.getLogger(__name__)

COLUMNS = ('Pclass', 'Sex', 'Age', 'SibSp', 'Parch', 'Fare', 'Embarked')


def nominal(series: pandas.Series) -> bool:
    """Check the series is an unordered categorical (represented by one indicator column per level)."""
    return isinstance(series.dtype, pdtypes.CategoricalDtype) and not series.dtype.ordered


def encode(frame: pandas.DataFrame) -> numpy.ndarray:
    """Turn the frame into a float matrix with NaNs in place of the missing values.

    Ordered categoricals are represented by their level codes, unordered ones expand into a block of level
    indicators (all NaN where the value is missing).

    Args:
        frame: Source frame with numeric, boolean or categorical columns.

    Returns:
        Numpy float matrix.
    """

    def column(series: pandas.Series) -> numpy.ndarray:
        if nominal(series):
            indicators = (series.cat.codes.to_numpy()[:, None] == numpy.arange(len(series.dtype.categories))).astype(
                float
            )
            indicators[series.isna().to_numpy()] = numpy.nan
            return indicators
        if isinstance(series.dtype, pdtypes.CategoricalDtype):
            return numpy.where(series.isna(), numpy.nan, series.cat.codes).astype(float)
        if not (pdtypes.is_numeric_dtype(series.dtype) or pdtypes.is_bool_dtype(series.dtype)):
            raise titanic.InvalidError(f'Column {series.name} of type {series.dtype} can not be imputed')
        return series.to_numpy(dtype=float, na_value=numpy.nan)

    return numpy.column_stack([column(frame[c]) for c in frame.columns])


def decode(frame: pandas.DataFrame, matrix: numpy.ndarray) -> pandas.DataFrame:
    """Fill the missing values of the frame using the imputed matrix.

    Only the originally missing cells are replaced, the observed values are kept untouched. Unordered categoricals
    take the level with the highest imputed indicator.

    Args:
        frame: Original frame with missing values.
        matrix: Imputed values in the layout produced by ``encode``.

    Returns:
        New frame with the missing values filled.
    """

    def column(series: pandas.Series, values: numpy.ndarray) -> pandas.Series:
        if nominal(series):
            imputed = pandas.Series(
                pandas.Categorical.from_codes(values.argmax(axis=1), dtype=series.dtype), index=series.index
            )
        elif isinstance(series.dtype, pdtypes.CategoricalDtype):
            codes = numpy.clip(numpy.rint(values), 0, len(series.dtype.categories) - 1).astype(int)
            imputed = pandas.Series(pandas.Categorical.from_codes(codes, dtype=series.dtype), index=series.index)
        elif pdtypes.is_bool_dtype(series.dtype):
            imputed = pandas.Series(values >= 0.5, index=series.index)
        elif pdtypes.is_integer_dtype(series.dtype):
            imputed = pandas.Series(numpy.rint(values).astype(int), index=series.index)
        else:
            imputed = pandas.Series(values, index=series.index)
        return series.where(series.notna(), imputed.astype(series.dtype))

    columns = {}
    offset = 0
    for name in frame.columns:
        width = len(frame[name].dtype.categories) if nominal(frame[name]) else 1
        block = matrix[:, offset : offset + width]
        columns[name] = column(frame[name], block if nominal(frame[name]) else block[:, 0])
        offset += width
    return frame.assign(**columns)


def chained(
    frame: pandas.DataFrame,
    seed: typing.Optional[int],
    estimators: int = 50,
    iterations: int = 10,
) -> pandas.DataFrame:
    """Impute all the missing values of the given frame using chained equations with random forest estimators.

    Args:
        frame: Frame of the columns taking part in the imputation.
        seed: Random state for the imputer as well as for the forest estimator.
        estimators: Number of trees of the per-column forest.
        iterations: Maximum number of imputation rounds.

    Returns:
        New frame with all missing values imputed.
    """
    if not frame.isna().to_numpy().any():
        return frame.copy()
    imputer = impute.IterativeImputer(
        estimator=ensemble.RandomForestRegressor(n_estimators=estimators, random_state=seed),
        max_iter=iterations,
        initial_strategy='median',
        random_state=seed,
    )
    LOGGER.debug('Imputing %d missing values across %s', frame.isna().to_numpy().sum(), ', '.join(frame.columns))
    matrix = imputer.fit_transform(encode(frame))
    LOGGER.debug('Imputation finished after %d rounds', imputer.n_iter_)
    return decode(frame, matrix)


class Imputer:
    """Missing values imputer for the selected columns of the combined table.

    Columns with the majority of their values missing do not get imputed at all and are rather excluded from the
    process (with a warning). The label column is never a valid imputation target.

    Args:
        columns: Columns to be imputed (and used as predictors for each other).
        estimators: Number of trees of the per-column forest.
        iterations: Maximum number of the chained equations rounds.
        threshold: Maximum ratio of missing values for a column to still be imputed.
    """

    def __init__(
        self,
        columns: typing.Sequence[str] = COLUMNS,
        estimators: int = 50,
        iterations: int = 10,
        threshold: float = 0.5,
    ):
        if schema.LABEL in columns:
            raise titanic.InvalidError(f'Label column {schema.LABEL} can not be imputed')
        if not 0 <= threshold < 1:
            raise ValueError(f'Invalid threshold: {threshold}')
        self._columns: tuple[str] = tuple(columns)
        self._estimators: int = estimators
        self._iterations: int = iterations
        self._threshold: float = threshold

    def __repr__(self):
        return f'Imputer{self._columns}'

    def excluded(self, frame: pandas.DataFrame) -> tuple[str]:
        """Get the requested columns having too many values missing to be imputed.

        Args:
            frame: Frame to be checked.

        Returns:
            Excluded column names.
        """
        return tuple(c for c in self._columns if frame[c].isna().mean() > self._threshold)

    def apply(self, frame: pandas.DataFrame, seed: typing.Optional[int] = None) -> pandas.DataFrame:
        """Impute the missing values of the frame.

        Args:
            frame: Combined passenger table.
            seed: Random state of the imputation.

        Returns:
            New frame with the target columns complete.
        """
        unknown = [c for c in self._columns if c not in frame.columns]
        if unknown:
            raise titanic.MissingError(f'Unknown columns to impute: {", ".join(unknown)}')
        excluded = self.excluded(frame)
        if excluded:
            LOGGER.warning('Excluding columns with majority of values missing: %s', ', '.join(excluded))
        targets = [c for c in self._columns if c not in excluded]
        before = frame[targets].isna().sum()
        LOGGER.info(
            'Imputing missing values: %s', ', '.join(f'{c}={n}' for c, n in before[before > 0].items()) or 'none'
        )
        imputed = chained(frame[targets], seed, self._estimators, self._iterations)
        return frame.assign(**{c: imputed[c] for c in targets})


def impute_label(
    frame: pandas.DataFrame,
    seed: typing.Optional[int] = None,
    columns: typing.Sequence[str] = COLUMNS,
    label: str = schema.LABEL,
    estimators: int = 50,
    iterations: int = 10,
) -> pandas.Series:
    """Fill the missing labels treating the label as just another column to impute.

    This is an experimental baseline rather than a proper classifier and is expected to perform worse than the
    forest model.

    Args:
        frame: Combined table with the predictor columns complete.
        seed: Random state of the imputation.
        columns: Predictor columns to impute the label from.
        label: Label column name.
        estimators: Number of trees of the per-column forest.
        iterations: Maximum number of the chained equations rounds.

    Returns:
        Label series with the missing values filled by 0/1 estimates.
    """
    if frame[label].isna().all():
        raise titanic.MissingError(f'No observed {label} values to impute from')
    LOGGER.info('Imputing %d missing labels', frame[label].isna().sum())
    imputed = chained(frame[[*columns, label]], seed, estimators, iterations)[label]
    return imputed.clip(0, 1)
