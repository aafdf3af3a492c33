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
Cross-validated evaluation of the forest classifier against the label imputation baseline.
"""
import logging
import typing

import numpy
import pandas
from sklearn import metrics, model_selection

from titanic import impute, model, schema

LOGGER = logging.getLogger(__name__)

#: Callable taking a labeled trainset and a testset returning the testset label predictions
Predictor = typing.Callable[[pandas.DataFrame, pandas.DataFrame], pandas.Series]


def forest(
    trees: int = 1000, seed: typing.Optional[int] = None, features: typing.Sequence[str] = model.FEATURES
) -> Predictor:
    """Predictor based on the random forest classifier.

    Args:
        trees: Ensemble size.
        seed: Random state of the ensemble.
        features: Predictor columns.

    Returns:
        Predictor function.
    """

    def predict(trainset: pandas.DataFrame, testset: pandas.DataFrame) -> pandas.Series:
        return model.Forest(trees, seed, features).fit(trainset).predict(testset)

    return predict


def imputation(
    seed: typing.Optional[int] = None,
    features: typing.Sequence[str] = model.FEATURES,
    estimators: int = 50,
    iterations: int = 10,
) -> Predictor:
    """Predictor based on imputing the hidden labels.

    Args:
        seed: Random state of the imputation.
        features: Columns to impute the label from.
        estimators: Number of trees of the per-column forest.
        iterations: Maximum number of the chained equations rounds.

    Returns:
        Predictor function.
    """

    def predict(trainset: pandas.DataFrame, testset: pandas.DataFrame) -> pandas.Series:
        hidden = testset.assign(**{schema.LABEL: pandas.Series(pandas.NA, index=testset.index, dtype='Int64')})
        combined = pandas.concat((trainset, hidden))
        labels = impute.impute_label(combined, seed, features, schema.LABEL, estimators, iterations)
        return labels.iloc[len(trainset) :]

    return predict


def crossval(
    trainset: pandas.DataFrame, predictor: Predictor, folds: int = 5, seed: typing.Optional[int] = None
) -> float:
    """Stratified k-fold accuracy of the given predictor.

    Args:
        trainset: Labeled frame.
        predictor: Predictor to evaluate.
        folds: Number of folds.
        seed: Random state of the fold shuffling.

    Returns:
        Mean accuracy across the folds.
    """
    labels = trainset[schema.LABEL].to_numpy(dtype=int)
    splitter = model_selection.StratifiedKFold(n_splits=folds, shuffle=True, random_state=seed)
    scores = []
    for train, test in splitter.split(numpy.zeros(len(labels)), labels):
        predictions = predictor(trainset.iloc[train], trainset.iloc[test])
        scores.append(metrics.accuracy_score(labels[test], predictions.to_numpy(dtype=int)))
    LOGGER.debug('Fold accuracies: %s', ', '.join(f'{s:.4f}' for s in scores))
    return float(numpy.mean(scores))


def compare(
    trainset: pandas.DataFrame,
    folds: int = 5,
    seed: typing.Optional[int] = None,
    trees: int = 1000,
    features: typing.Sequence[str] = model.FEATURES,
    estimators: int = 50,
    iterations: int = 10,
) -> typing.Mapping[str, float]:
    """Compare the forest classifier with the label imputation baseline.

    Args:
        trainset: Labeled frame (imputed and with the derived features).
        folds: Number of folds.
        seed: Random state for the folds, the forest and the imputation.
        trees: Forest ensemble size.
        features: Predictor columns.
        estimators: Number of trees of the imputation per-column forest.
        iterations: Maximum number of the imputation rounds.

    Returns:
        Mapping of the method names to their cross-validated accuracy.
    """
    result = {
        'forest': crossval(trainset, forest(trees, seed, features), folds, seed),
        'imputation': crossval(trainset, imputation(seed, features, estimators, iterations), folds, seed),
    }
    LOGGER.info('Cross-validated accuracy: %s', ', '.join(f'{k}={v:.4f}' for k, v in result.items()))
    return result
