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
Global unit tests fixtures.
"""
import pathlib
import typing

import numpy
import pandas
import pytest

from titanic import feature, impute, schema, source

TITLES = {'male': ('Mr', 'Master', 'Dr', 'Rev'), 'female': ('Mrs', 'Miss', 'Ms')}


def passengers(count: int, offset: int = 0, seed: int = 42, labeled: bool = True) -> pandas.DataFrame:
    """Generate a synthetic frame of passengers following the dataset schema.

    Survival follows a (noisy) women-and-children-first rule so that the classifier has something to learn.

    Args:
        count: Number of rows.
        offset: Identifier offset.
        seed: Random state of the generator.
        labeled: Whether to include the label column.

    Returns:
        Passenger frame.
    """
    random = numpy.random.default_rng(seed)
    sex = random.choice(['male', 'female'], size=count)
    pclass = random.choice([1, 2, 3], size=count, p=[0.25, 0.2, 0.55])
    age = numpy.round(random.uniform(1, 70, size=count), 1)
    titles = [TITLES[s][0] if a > 16 else TITLES[s][1] for s, a in zip(sex, age)]
    titles[: min(count, 3)] = ['Dr', 'Rev', 'Ms'][: min(count, 3)]
    survived = ((sex == 'female') | (age < 10)).astype(int)
    noise = random.random(size=count) < 0.1
    survived[noise] = 1 - survived[noise]
    frame = pandas.DataFrame(
        {
            'PassengerId': numpy.arange(offset + 1, offset + count + 1),
            'Survived': survived,
            'Pclass': pclass,
            'Name': [f'Family{i}, {t}. Given Name' for i, t in enumerate(titles)],
            'Sex': sex,
            'Age': numpy.where(random.random(size=count) < 0.2, numpy.nan, age),
            'SibSp': random.integers(0, 4, size=count),
            'Parch': random.integers(0, 3, size=count),
            'Ticket': [f'PC {1000 + i}' for i in range(count)],
            'Fare': numpy.round(random.uniform(5, 30, size=count) * (4 - pclass), 2),
            'Cabin': numpy.where(random.random(size=count) < 0.8, None, 'C85'),
            'Embarked': random.choice(['C', 'Q', 'S'], size=count, p=[0.2, 0.1, 0.7]),
        }
    )
    frame.loc[frame.index[1::97], 'Embarked'] = None
    frame.loc[frame.index[2::151], 'Fare'] = numpy.nan
    if not labeled:
        frame = frame.drop(columns='Survived')
    return frame


@pytest.fixture(scope='session')
def trainset_frame() -> pandas.DataFrame:
    """Raw trainset fixture."""
    return passengers(891)


@pytest.fixture(scope='session')
def testset_frame() -> pandas.DataFrame:
    """Raw testset fixture."""
    return passengers(418, offset=891, seed=24, labeled=False)


@pytest.fixture(scope='session')
def data_dir(tmp_path_factory: pytest.TempPathFactory) -> pathlib.Path:
    """Directory for the generated CSV files."""
    return tmp_path_factory.mktemp('data')


@pytest.fixture(scope='session')
def trainset_csv(data_dir: pathlib.Path, trainset_frame: pandas.DataFrame) -> pathlib.Path:
    """Trainset file fixture."""
    path = data_dir / 'train.csv'
    trainset_frame.to_csv(path, index=False)
    return path


@pytest.fixture(scope='session')
def testset_csv(data_dir: pathlib.Path, testset_frame: pandas.DataFrame) -> pathlib.Path:
    """Testset file fixture."""
    path = data_dir / 'test.csv'
    testset_frame.to_csv(path, index=False)
    return path


@pytest.fixture(scope='session')
def dataset(trainset_csv: pathlib.Path, testset_csv: pathlib.Path) -> source.Dataset:
    """Loaded dataset fixture."""
    return source.load(trainset_csv, testset_csv)


@pytest.fixture(scope='session')
def imputer() -> impute.Imputer:
    """Lightweight imputer fixture."""
    return impute.Imputer(estimators=10, iterations=3)


@pytest.fixture(scope='session')
def processed(dataset: source.Dataset, imputer: impute.Imputer) -> source.Dataset:
    """Imputed dataset with the derived features."""
    imputed = dataset.replace(imputer.apply(dataset.frame, seed=129))
    return imputed.replace(feature.derive(imputed.frame))


@pytest.fixture(scope='session')
def frame_factory() -> typing.Callable[..., pandas.DataFrame]:
    """Factory fixture for creating coerced passenger frames of the given size."""

    def create(count: int, **kwargs) -> pandas.DataFrame:
        return schema.Passenger.coerce(passengers(count, **kwargs))

    return create
