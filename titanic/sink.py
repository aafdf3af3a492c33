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
Prediction results output.
"""
import logging
import pathlib
import typing

import pandas

import titanic
from titanic import schema

LOGGER = logging.getLogger(__name__)


def write(
    path: typing.Union[str, pathlib.Path],
    identifiers: pandas.Series,
    predictions: pandas.Series,
) -> pathlib.Path:
    """Write the predictions as a two column (identifier, label) delimited file.

    Args:
        path: Target file (parent directories get created if needed).
        identifiers: Row identifiers in the original testset order.
        predictions: Predicted labels aligned with the identifiers.

    Returns:
        The path written to.
    """
    if len(identifiers) != len(predictions):
        raise titanic.InvalidError(f'Got {len(predictions)} predictions for {len(identifiers)} identifiers')
    path = pathlib.Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    result = pandas.DataFrame(
        {
            schema.ID: identifiers.to_numpy(dtype=int),
            schema.LABEL: predictions.to_numpy(dtype=int),
        }
    )
    result.to_csv(path, index=False)
    LOGGER.info('Written %d predictions to %s', len(result), path)
    return path
