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
Passenger dataset schema.

The schema is declared once and carries an explicit data kind for each of the fields. Categorical fields
enumerate their complete level set so that the types of the loaded tables never depend on the actual values
found in the particular files.
"""
import abc
import logging
import types
import typing

import pandas
from pandas.api import types as pdtypes

import titanic

LOGGER = logging.getLogger(__name__)


class Kind(metaclass=abc.ABCMeta):
    """Base class of the field data kinds."""

    @property
    @abc.abstractmethod
    def dtype(self) -> typing.Union[str, pdtypes.CategoricalDtype]:
        """Pandas dtype representing this kind.

        Returns:
            Dtype instance or alias.
        """

    def coerce(self, series: pandas.Series) -> pandas.Series:
        """Cast the series to our dtype.

        Args:
            series: Values to be cast.

        Returns:
            New series of our dtype.
        """
        try:
            return series.astype(self.dtype)
        except (TypeError, ValueError) as err:
            raise titanic.InvalidError(f'Column {series.name} not coercible to {self}: {err}') from err

    def __eq__(self, other):
        return other.__class__ == self.__class__

    def __hash__(self):
        return hash(self.__class__)

    def __repr__(self):
        return self.__class__.__name__


class Integer(Kind):
    """Nullable integer kind."""

    dtype = 'Int64'


class Float(Kind):
    """Floating point kind (missing values represented as NaN)."""

    dtype = 'float64'


class String(Kind):
    """Free text kind."""

    dtype = 'string'


class Boolean(Kind):
    """Nullable boolean kind."""

    dtype = 'boolean'


class Category(Kind):
    """Categorical kind with explicitly enumerated levels.

    Args:
        levels: The complete sequence of allowed values.
        ordered: Whether the levels have a meaningful ordering.
    """

    def __init__(self, *levels: typing.Any, ordered: bool = False):
        if not levels:
            raise ValueError('Categorical levels required')
        self.levels: tuple = levels
        self.ordered: bool = ordered

    @property
    def dtype(self) -> pdtypes.CategoricalDtype:
        return pdtypes.CategoricalDtype(self.levels, ordered=self.ordered)

    def coerce(self, series: pandas.Series) -> pandas.Series:
        result = super().coerce(series)
        unknown = series[series.notna() & result.isna()]
        if not unknown.empty:
            raise titanic.UnexpectedError(
                f'Column {series.name} has values outside of {self.levels}: {sorted(set(unknown.astype(str)))}'
            )
        return result

    def __eq__(self, other):
        return super().__eq__(other) and other.levels == self.levels and other.ordered == self.ordered

    def __hash__(self):
        return super().__hash__() ^ hash(self.levels) ^ hash(self.ordered)

    def __repr__(self):
        return f'Category{self.levels}'


class Field(typing.NamedTuple):
    """Schema field.

    When used as class attribute of a Schema the field name defaults to the attribute name.
    """

    kind: Kind
    name: typing.Optional[str] = None

    def renamed(self, name: typing.Optional[str]) -> 'Field':
        """Return copy of the field with the new name.

        Args:
            name: New name to be used.

        Returns:
            New Field instance.
        """
        return self if name == self.name else Field(self.kind, name)


class Meta(abc.ABCMeta):
    """Schema metaclass collecting the declared fields (parent fields first, in the order of definition)."""

    def __new__(mcs, name: str, bases: tuple[type], namespace: dict[str, typing.Any]):
        fields: dict[str, Field] = {}
        for base in bases:
            fields.update(getattr(base, '__fields__', {}))
        for key, value in namespace.items():
            if isinstance(value, Field):
                value = value.renamed(value.name or key)
                namespace[key] = value
                fields[key] = value
        namespace['__fields__'] = types.MappingProxyType(fields)
        return super().__new__(mcs, name, bases, namespace)

    def __iter__(cls) -> typing.Iterator[Field]:
        return iter(cls.__fields__.values())

    def __len__(cls) -> int:
        return len(cls.__fields__)

    def __getitem__(cls, name: str) -> Field:
        for field in cls:
            if field.name == name:
                return field
        raise KeyError(f'Unknown field {name}')

    @property
    def names(cls) -> tuple[str]:
        """Names of all the schema fields.

        Returns:
            Tuple of field names.
        """
        return tuple(f.name for f in cls)

    def validate(cls, columns: typing.Iterable[str], *exclude: str) -> None:
        """Check the given columns contain all of our fields (apart from the excluded ones).

        Args:
            columns: Column names to be validated.
            exclude: Field names not required to be present.

        Raises:
            titanic.InvalidError: If any of the fields is missing.
        """
        columns = set(columns)
        missing = [n for n in cls.names if n not in exclude and n not in columns]
        if missing:
            raise titanic.InvalidError(f'Schema mismatch - missing columns: {", ".join(missing)}')

    def coerce(cls, frame: pandas.DataFrame) -> pandas.DataFrame:
        """Cast the schema columns of the given frame to their declared kinds.

        Columns not defined by the schema are left untouched.

        Args:
            frame: Source frame.

        Returns:
            New frame with the coerced columns.
        """
        return frame.assign(**{f.name: f.kind.coerce(frame[f.name]) for f in cls if f.name in frame.columns})


class Schema(metaclass=Meta):
    """Base class for declarative schema definitions."""


class Passenger(Schema):
    """Titanic: Machine Learning from Disaster.

    Variable Notes:
        Pclass: A proxy for socio-economic status (SES)
            * 1st = Upper
            * 2nd = Middle
            * 3rd = Lower

        Age: Age is fractional if less than 1. If the age is estimated, is it in the form of xx.5

        SibSp: The dataset defines family relations in this way...
            * Sibling = brother, sister, stepbrother, stepsister
            * Spouse = husband, wife (mistresses and fiancés were ignored)

        Parch: The dataset defines family relations in this way...
            * Parent = mother, father
            * Child = daughter, son, stepdaughter, stepson

            Some children travelled only with a nanny, therefore parch=0 for them.
    """

    PassengerId = Field(Integer())  # Passenger ID
    Survived = Field(Integer())  # Survival (0 = No, 1 = Yes)
    Pclass = Field(Category(1, 2, 3, ordered=True))  # Ticket class (1 = 1st, 2 = 2nd, 3 = 3rd)
    Name = Field(String())  # Passenger name
    Sex = Field(Category('female', 'male'))  # Sex
    Age = Field(Float())  # Age in years
    SibSp = Field(Integer())  # # of siblings / spouses aboard the Titanic
    Parch = Field(Integer())  # # of parents / children aboard the Titanic
    Ticket = Field(String())  # Ticket number
    Fare = Field(Float())  # Passenger fare
    Cabin = Field(String())  # Cabin number
    Embarked = Field(Category('C', 'Q', 'S'))  # Port of Embarkation (C = Cherbourg, Q = Queenstown, S = Southampton)


ID = Passenger.PassengerId.name
LABEL = Passenger.Survived.name
