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
End-to-end pipeline unit tests.
"""
import collections
import pathlib

import pandas
import pytest

from titanic import feature, impute, model, pipeline, source


@pytest.fixture(scope='module')
def imputer() -> impute.Imputer:
    """Lightweight imputer fixture."""
    return impute.Imputer(estimators=5, iterations=2)


def test_prepare(trainset_csv: pathlib.Path, testset_csv: pathlib.Path, imputer: impute.Imputer):
    """Test the data preparation keeps the row count and completes the imputed columns."""
    dataset = pipeline.prepare(trainset_csv, testset_csv, 129, imputer)
    assert len(dataset.frame) == dataset.size == 1309
    assert dataset.frame[['Age', 'Fare', 'Embarked']].notna().all().all()
    assert {feature.TITLE, feature.FAMILY_SIZE, feature.CHILD} <= set(dataset.frame.columns)
    assert dataset.frame['Survived'].isna().sum() == 418


def test_predict(
    trainset_csv: pathlib.Path,
    testset_csv: pathlib.Path,
    testset_frame: pandas.DataFrame,
    imputer: impute.Imputer,
    tmp_path: pathlib.Path,
):
    """Test the production path output."""
    result = pipeline.predict(
        trainset_csv, testset_csv, tmp_path / 'predictions.csv', 754, imputer, 129, trees=50
    )
    assert isinstance(result.forest, model.Forest)
    assert 0 <= result.oob_error < 0.5
    assert len(result.importance) == len(model.FEATURES)
    output = pandas.read_csv(result.path)
    assert list(output.columns) == ['PassengerId', 'Survived']
    assert output['PassengerId'].tolist() == testset_frame['PassengerId'].tolist()
    assert set(output['Survived']) <= {0, 1}
    assert output['Survived'].tolist() == result.predictions.tolist()


def test_baseline(
    trainset_csv: pathlib.Path,
    testset_csv: pathlib.Path,
    testset_frame: pandas.DataFrame,
    imputer: impute.Imputer,
    tmp_path: pathlib.Path,
):
    """Test the label imputation path output."""
    predictions = pipeline.baseline(
        trainset_csv, testset_csv, tmp_path / 'baseline.csv', 0, imputer, 129, estimators=5, iterations=2
    )
    assert len(predictions) == len(testset_frame)
    output = pandas.read_csv(tmp_path / 'baseline.csv')
    assert list(output.columns) == ['PassengerId', 'Survived']
    assert output['PassengerId'].tolist() == testset_frame['PassengerId'].tolist()
    assert set(output['Survived']) <= {0, 1}


def test_default_imputer(trainset_csv: pathlib.Path, testset_csv: pathlib.Path, monkeypatch: pytest.MonkeyPatch):
    """Test the default imputer gets used if none provided."""
    applied = []

    def apply(self, frame: pandas.DataFrame, seed=None) -> pandas.DataFrame:
        applied.append(seed)
        return frame

    monkeypatch.setattr(impute.Imputer, 'apply', apply)
    dataset = pipeline.prepare(trainset_csv, testset_csv, 7)
    assert applied == [7]
    assert isinstance(dataset, source.Dataset)


def test_matching_row(
    trainset_csv: pathlib.Path, trainset_frame: pandas.DataFrame, imputer: impute.Imputer, tmp_path: pathlib.Path
):
    """Test a single testset row copied from the trainset gets its label in the majority of seeded runs."""
    row = trainset_frame.dropna(subset=['Age', 'Fare', 'Embarked']).iloc[[10]]
    testset = tmp_path / 'single.csv'
    row.drop(columns='Survived').to_csv(testset, index=False)
    votes = collections.Counter()
    for seed in range(3):
        result = pipeline.predict(trainset_csv, testset, tmp_path / f'single{seed}.csv', seed, imputer, 129, trees=101)
        assert len(pandas.read_csv(result.path)) == 1
        votes[result.predictions.iloc[0]] += 1
    assert votes.most_common(1)[0][0] == row['Survived'].iloc[0]
