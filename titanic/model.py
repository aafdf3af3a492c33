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
Random forest survival classifier.
"""
import logging
import pathlib
import typing

import cloudpickle
import numpy
import pandas
from pandas.api import types as pdtypes
from sklearn import ensemble

import titanic
from titanic import feature, schema

LOGGER = logging.getLogger(__name__)

FEATURES = (
    'Pclass',
    'Sex',
    'Age',
    'SibSp',
    'Parch',
    'Fare',
    'Embarked',
    feature.TITLE,
    feature.FAMILY_SIZE,
    feature.CHILD,
)


class Forest:
    """Bagged ensemble of decision trees predicting the passenger survival.

    Each tree is trained on a bootstrap resample of the trainset considering a random subset of the predictors at
    each split. Categorical predictors are represented by their level codes so that every predictor maps to exactly
    one model input (and has exactly one importance value).

    Args:
        trees: Ensemble size.
        seed: Random state of the ensemble.
        features: Predictor columns.
        label: Label column.
        params: Any additional RandomForestClassifier hyper-parameters.
    """

    def __init__(
        self,
        trees: int = 1000,
        seed: typing.Optional[int] = None,
        features: typing.Sequence[str] = FEATURES,
        label: str = schema.LABEL,
        **params: typing.Any,
    ):
        self._estimator: ensemble.RandomForestClassifier = ensemble.RandomForestClassifier(
            n_estimators=trees,
            criterion='gini',
            max_features='sqrt',
            bootstrap=True,
            oob_score=True,
            random_state=seed,
            **params,
        )
        self._features: tuple[str] = tuple(features)
        self._label: str = label
        self._levels: typing.Optional[dict[str, tuple]] = None

    def __repr__(self):
        return f'Forest[{self._estimator.n_estimators}]{self._features}'

    @property
    def features(self) -> tuple[str]:
        """Predictor column names."""
        return self._features

    @property
    def fitted(self) -> bool:
        """Whether the model has been trained."""
        return self._levels is not None

    def _ensure_fitted(self) -> None:
        if not self.fitted:
            raise titanic.MissingError('Forest not fitted')

    def _matrix(self, frame: pandas.DataFrame) -> numpy.ndarray:
        """Extract the predictor matrix out of the frame.

        Args:
            frame: Source frame containing all the predictors.

        Returns:
            Float matrix of the predictors in our feature order.
        """
        missing = [f for f in self._features if f not in frame.columns]
        if missing:
            raise titanic.InvalidError(f'Schema mismatch - missing predictors: {", ".join(missing)}')
        columns = []
        for name in self._features:
            series = frame[name]
            levels = tuple(series.cat.categories) if isinstance(series.dtype, pdtypes.CategoricalDtype) else None
            if self._levels is not None and self._levels.get(name) != levels:
                raise titanic.InvalidError(f'Schema mismatch - levels of {name} differ from the trainset')
            if levels is not None:
                columns.append(numpy.where(series.isna(), numpy.nan, series.cat.codes).astype(float))
            else:
                columns.append(series.to_numpy(dtype=float, na_value=numpy.nan))
        matrix = numpy.column_stack(columns)
        incomplete = [f for f, n in zip(self._features, numpy.isnan(matrix).sum(axis=0)) if n]
        if incomplete:
            raise titanic.InvalidError(f'Missing predictor values: {", ".join(incomplete)}')
        return matrix

    def fit(self, trainset: pandas.DataFrame) -> 'Forest':
        """Train the ensemble.

        Args:
            trainset: Labeled frame with all the predictor columns.

        Returns:
            Self instance.
        """
        labels = trainset[self._label]
        if labels.isna().any():
            raise titanic.InvalidError(f'Missing {self._label} values in trainset')
        self._levels = None
        matrix = self._matrix(trainset)
        self._estimator.fit(matrix, labels.to_numpy(dtype=int))
        self._levels = {
            f: tuple(trainset[f].cat.categories)
            for f in self._features
            if isinstance(trainset[f].dtype, pdtypes.CategoricalDtype)
        }
        LOGGER.info(
            'Fitted forest of %d trees on %d rows (OOB error: %.4f)',
            self._estimator.n_estimators,
            len(trainset),
            self.oob_error,
        )
        return self

    @property
    def oob_error(self) -> float:
        """Out-of-bag estimate of the generalization error."""
        self._ensure_fitted()
        return 1 - self._estimator.oob_score_

    def importance(self) -> pandas.Series:
        """Predictor importance as the mean decrease in the Gini impurity.

        Returns:
            Series of importance values indexed by the predictor names in descending order.
        """
        self._ensure_fitted()
        return pandas.Series(
            self._estimator.feature_importances_, index=list(self._features), name='MeanDecreaseGini'
        ).sort_values(ascending=False, kind='stable')

    def predict(self, testset: pandas.DataFrame) -> pandas.Series:
        """Predict the survival labels.

        Args:
            testset: Frame with the predictor columns.

        Returns:
            Series of the predicted labels indexed the same way as the testset.
        """
        self._ensure_fitted()
        predictions = self._estimator.predict(self._matrix(testset))
        return pandas.Series(predictions, index=testset.index, name=self._label).astype(int)

    def dump(self, path: typing.Union[str, pathlib.Path]) -> pathlib.Path:
        """Persist the fitted model.

        Args:
            path: Target file.

        Returns:
            The path written to.
        """
        self._ensure_fitted()
        path = pathlib.Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open('wb') as target:
            cloudpickle.dump(self, target)
        LOGGER.info('Model saved to %s', path)
        return path

    @classmethod
    def load(cls, path: typing.Union[str, pathlib.Path]) -> 'Forest':
        """Restore a model persisted using ``dump``.

        Args:
            path: Source file.

        Returns:
            Forest instance.
        """
        with pathlib.Path(path).open('rb') as source:
            instance = cloudpickle.load(source)
        if not isinstance(instance, cls):
            raise titanic.UnexpectedError(f'Not a {cls.__name__} instance: {type(instance).__name__}')
        return instance
