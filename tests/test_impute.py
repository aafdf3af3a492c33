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
Imputation unit tests.
"""
import numpy
import pandas
import pytest

import titanic
from titanic import impute, schema, source


class TestImputer:
    """Imputer unit tests."""

    def test_init(self):
        """Test the imputer parameter validation."""
        with pytest.raises(titanic.InvalidError, match='Label'):
            impute.Imputer(columns=['Age', 'Survived'])
        with pytest.raises(ValueError, match='threshold'):
            impute.Imputer(threshold=1)

    def test_complete(self, dataset: source.Dataset, imputer: impute.Imputer):
        """Test all the targeted columns are complete after the imputation."""
        assert dataset.frame[['Age', 'Fare', 'Embarked']].isna().any().all()
        result = imputer.apply(dataset.frame, seed=129)
        assert len(result) == len(dataset.frame)
        assert result[list(impute.COLUMNS)].isna().sum().sum() == 0
        assert result[schema.LABEL].iloc[dataset.boundary :].isna().all()
        assert result['Cabin'].isna().sum() == dataset.frame['Cabin'].isna().sum()

    def test_observed_kept(self, dataset: source.Dataset, imputer: impute.Imputer):
        """Test the observed values are not modified and the input frame stays intact."""
        original = dataset.frame.copy()
        result = imputer.apply(dataset.frame, seed=129)
        pandas.testing.assert_frame_equal(dataset.frame, original)
        for column in impute.COLUMNS:
            observed = original[column].notna()
            assert result[column][observed].equals(original[column][observed])
            assert result[column].dtype == original[column].dtype

    def test_levels(self, dataset: source.Dataset, imputer: impute.Imputer):
        """Test the categorical imputations fall within the enumerated levels and ages are plausible."""
        result = imputer.apply(dataset.frame, seed=129)
        assert set(result['Embarked']) <= {'C', 'Q', 'S'}
        imputed = result['Age'][dataset.frame['Age'].isna()]
        assert imputed.between(dataset.frame['Age'].min(), dataset.frame['Age'].max()).all()

    def test_reproducible(self, dataset: source.Dataset, imputer: impute.Imputer):
        """Test the imputation is reproducible given the seed."""
        pandas.testing.assert_frame_equal(imputer.apply(dataset.frame, seed=1), imputer.apply(dataset.frame, seed=1))

    def test_excluded(self, frame_factory):
        """Test columns with majority of values missing are excluded."""
        frame = frame_factory(200)
        frame['Fare'] = frame['Fare'].mask(frame.index % 4 != 0)
        imputer = impute.Imputer(columns=['Pclass', 'Age', 'Fare'], estimators=5, iterations=2)
        assert imputer.excluded(frame) == ('Fare',)
        result = imputer.apply(frame, seed=0)
        assert result['Age'].notna().all()
        assert result['Fare'].isna().sum() == frame['Fare'].isna().sum()

    def test_unknown(self, frame_factory):
        """Test the unknown column handling."""
        with pytest.raises(titanic.MissingError, match='Foo'):
            impute.Imputer(columns=['Age', 'Foo']).apply(frame_factory(10))

    def test_text(self, frame_factory):
        """Test free text columns can not be imputed."""
        frame = frame_factory(20)
        frame.loc[0, 'Name'] = None
        with pytest.raises(titanic.InvalidError, match='can not be imputed'):
            impute.Imputer(columns=['Age', 'Name'], estimators=5).apply(frame)

    def test_nothing_missing(self, frame_factory):
        """Test the imputation is a no-op for complete columns."""
        frame = frame_factory(30)
        result = impute.Imputer(columns=['Pclass', 'SibSp', 'Parch'], estimators=5).apply(frame)
        pandas.testing.assert_frame_equal(result, frame)


def test_codec():
    """Test the encode/decode helpers."""
    frame = pandas.DataFrame(
        {
            'ord': pandas.Series(['b', None, 'a'], dtype=pandas.CategoricalDtype(['a', 'b'], ordered=True)),
            'nom': pandas.Series(['y', None, 'x'], dtype=pandas.CategoricalDtype(['x', 'y', 'z'])),
            'int': pandas.Series([1, None, 3], dtype='Int64'),
            'bool': pandas.Series([True, None, False], dtype='boolean'),
            'float': [0.5, numpy.nan, 1.5],
        }
    )
    matrix = impute.encode(frame)
    assert matrix.shape == (3, 7)
    assert numpy.isnan(matrix[1]).all()
    assert matrix[0].tolist() == [1.0, 0.0, 1.0, 0.0, 1.0, 1.0, 0.5]
    matrix[1] = [7.0, 0.2, 0.1, 0.6, 1.6, 0.7, 2.5]
    result = impute.decode(frame, matrix)
    assert result.iloc[1].tolist() == ['b', 'z', 2, True, 2.5]
    assert result.iloc[0].tolist() == frame.iloc[0].tolist()


def test_nominal_between():
    """Test an unordered categorical split between two levels is not imputed as the level in between."""
    embarked = pandas.Series(['C', 'S'] * 200, dtype=pandas.CategoricalDtype(['C', 'Q', 'S']))
    frame = pandas.DataFrame(
        {
            'Pclass': pandas.Series([3] * 400, dtype=pandas.CategoricalDtype([1, 2, 3], ordered=True)),
            'Age': 30.0,
            'Fare': 8.05,
            'Embarked': embarked.mask(embarked.index % 20 == 1),
        }
    )
    result = impute.Imputer(columns=['Pclass', 'Age', 'Fare', 'Embarked'], estimators=20, iterations=3).apply(
        frame, seed=0
    )
    imputed = result['Embarked'][frame['Embarked'].isna()]
    assert len(imputed) == 20
    assert set(imputed) <= {'C', 'S'}


def test_impute_label(processed: source.Dataset):
    """Test the label imputation fills the testset labels with binary values."""
    labels = impute.impute_label(processed.frame, seed=0, estimators=5, iterations=2)
    assert labels.notna().all()
    assert set(labels.unique()) <= {0, 1}
    assert labels.iloc[: processed.boundary].equals(processed.frame[schema.LABEL].iloc[: processed.boundary])
    with pytest.raises(titanic.MissingError):
        impute.impute_label(processed.frame.iloc[processed.boundary :])
