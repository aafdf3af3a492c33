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
Splitting the combined table back into the trainset and the testset.
"""
import logging

import pandas

import titanic
from titanic import schema, source

LOGGER = logging.getLogger(__name__)


def split(dataset: source.Dataset) -> tuple[pandas.DataFrame, pandas.DataFrame]:
    """Partition the combined table at the original train/test boundary.

    The split is only valid if the rows have not been dropped, added or reordered since loading which is verified
    against the identifiers recorded by the loader.

    Args:
        dataset: Combined dataset.

    Returns:
        Tuple of the trainset and testset frames.

    Raises:
        titanic.InvalidError: If the row count or the row order have drifted.
    """
    frame = dataset.frame
    if len(frame) != dataset.size:
        raise titanic.InvalidError(f'Row count drift: {dataset.size} rows loaded but {len(frame)} rows to split')
    if not frame[schema.ID].reset_index(drop=True).equals(dataset.identifiers.reset_index(drop=True)):
        raise titanic.InvalidError('Row order drift: identifiers do not match the load order')
    trainset = frame.iloc[: dataset.boundary].copy()
    testset = frame.iloc[dataset.boundary :].copy()
    LOGGER.debug('Split %d rows into %d training and %d testing', len(frame), len(trainset), len(testset))
    return trainset, testset
