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
Feature engineering.

Deterministic row-local transformations deriving new columns from the existing ones.
"""
import pandas

from titanic import schema

TITLE = 'Title'
FAMILY_SIZE = 'FamilySize'
CHILD = 'Child'

#: Age up to which (inclusive) a passenger is considered a child
CHILD_AGE = 16


def title(names: pandas.Series) -> pandas.Series:
    """Extract the title token from the passenger names.

    Everything up to (and including) the first comma followed by a space is stripped as well as everything starting
    from the first period that follows. The extracted titles are not normalized in any way so rare titles remain
    categories on their own.

    Args:
        names: Passenger names (ie ``Smith, Mr. John``).

    Returns:
        Series of titles (ie ``Mr``).
    """
    return names.str.replace(r'^.*?, ', '', n=1, regex=True).str.replace(r'\..*$', '', regex=True).rename(TITLE)


def family_size(sibsp: pandas.Series, parch: pandas.Series) -> pandas.Series:
    """Size of the family aboard including the passenger.

    Args:
        sibsp: Number of siblings/spouses.
        parch: Number of parents/children.

    Returns:
        Series of family sizes.
    """
    return (sibsp + parch + 1).astype('Int64').rename(FAMILY_SIZE)


def child(age: pandas.Series, limit: float = CHILD_AGE) -> pandas.Series:
    """Flag of the passenger being a child.

    Args:
        age: Passenger ages.
        limit: Maximum age of a child.

    Returns:
        Nullable boolean series (missing where the age is missing).
    """
    return (age <= limit).astype('boolean').mask(age.isna()).rename(CHILD)


def derive(frame: pandas.DataFrame) -> pandas.DataFrame:
    """Add all the derived columns to the passenger table.

    The child flag is derived from the current ages so this should run only after the age imputation.

    Args:
        frame: Passenger table.

    Returns:
        New frame extended with the Title, FamilySize and Child columns.
    """
    titles = title(frame[schema.Passenger.Name.name])
    return frame.assign(
        **{
            TITLE: titles.astype(pandas.CategoricalDtype(sorted(titles.dropna().unique()))),
            FAMILY_SIZE: family_size(frame[schema.Passenger.SibSp.name], frame[schema.Passenger.Parch.name]),
            CHILD: child(frame[schema.Passenger.Age.name]),
        }
    )
