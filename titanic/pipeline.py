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
End-to-end survival prediction pipeline.

The stages are composed linearly: load -> impute -> derive -> split -> classify -> write. Each stage returns a new
table instead of modifying its input.
"""
import logging
import pathlib
import typing

import pandas

from titanic import feature, impute, model, schema, sink, source, split

LOGGER = logging.getLogger(__name__)


class Result(typing.NamedTuple):
    """Outcome of the prediction pipeline."""

    forest: model.Forest
    predictions: pandas.Series
    path: pathlib.Path

    @property
    def oob_error(self) -> float:
        """Out-of-bag error of the fitted forest."""
        return self.forest.oob_error

    @property
    def importance(self) -> pandas.Series:
        """Predictor importance ranking of the fitted forest."""
        return self.forest.importance()


def prepare(
    trainset: typing.Union[str, pathlib.Path],
    testset: typing.Union[str, pathlib.Path],
    seed: typing.Optional[int] = None,
    imputer: typing.Optional[impute.Imputer] = None,
) -> source.Dataset:
    """Load the data, impute the missing values and derive the extra features.

    Args:
        trainset: Path to the labeled file.
        testset: Path to the unlabeled file.
        seed: Random state of the imputation.
        imputer: Imputer instance (default one if not provided).

    Returns:
        Fully processed combined dataset.
    """
    dataset = source.load(trainset, testset)
    dataset = dataset.replace((imputer or impute.Imputer()).apply(dataset.frame, seed))
    return dataset.replace(feature.derive(dataset.frame))


def predict(
    trainset: typing.Union[str, pathlib.Path],
    testset: typing.Union[str, pathlib.Path],
    output: typing.Union[str, pathlib.Path],
    seed: typing.Optional[int] = None,
    imputer: typing.Optional[impute.Imputer] = None,
    impute_seed: typing.Optional[int] = None,
    trees: int = 1000,
    features: typing.Sequence[str] = model.FEATURES,
) -> Result:
    """Production path fitting the forest classifier and writing its predictions.

    Args:
        trainset: Path to the labeled file.
        testset: Path to the unlabeled file.
        output: Path of the predictions file.
        seed: Random state of the forest.
        imputer: Imputer instance (default one if not provided).
        impute_seed: Random state of the imputation.
        trees: Forest ensemble size.
        features: Predictor columns.

    Returns:
        Pipeline result.
    """
    train, test = split.split(prepare(trainset, testset, impute_seed, imputer))
    forest = model.Forest(trees, seed, features).fit(train)
    LOGGER.info('Predictor importance:\n%s', forest.importance().to_string())
    predictions = forest.predict(test)
    return Result(forest, predictions, sink.write(output, test[schema.ID], predictions))


def baseline(
    trainset: typing.Union[str, pathlib.Path],
    testset: typing.Union[str, pathlib.Path],
    output: typing.Union[str, pathlib.Path],
    seed: typing.Optional[int] = None,
    imputer: typing.Optional[impute.Imputer] = None,
    impute_seed: typing.Optional[int] = None,
    features: typing.Sequence[str] = model.FEATURES,
    estimators: int = 50,
    iterations: int = 10,
) -> pandas.Series:
    """Experimental path imputing the testset labels instead of classifying them.

    Args:
        trainset: Path to the labeled file.
        testset: Path to the unlabeled file.
        output: Path of the predictions file.
        seed: Random state of the label imputation.
        imputer: Imputer instance for the predictor columns (default one if not provided).
        impute_seed: Random state of the predictor columns imputation.
        features: Columns to impute the label from.
        estimators: Number of trees of the per-column forest.
        iterations: Maximum number of the chained equations rounds.

    Returns:
        Predicted testset labels.
    """
    dataset = prepare(trainset, testset, impute_seed, imputer)
    labels = impute.impute_label(dataset.frame, seed, features, schema.LABEL, estimators, iterations)
    _, test = split.split(dataset.replace(dataset.frame.assign(**{schema.LABEL: labels})))
    predictions = test[schema.LABEL]
    sink.write(output, test[schema.ID], predictions)
    return predictions
