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
Titanic pipeline command line interface.
"""
import sys
import typing

import click
from click import core

import titanic
from titanic import evaluation, explore, feature, impute, model, pipeline, setup, source, split


class Scope(typing.NamedTuple):
    """Case class for holding the partial command config."""

    config: typing.Optional[str]
    loglevel: typing.Optional[str]

    @staticmethod
    def option(section: str, option: str, value: typing.Any = None) -> typing.Any:
        """Explicit command line value or the configured one.

        Args:
            section: Config section name.
            option: Option name.
            value: Explicit value taking precedence if not None.

        Returns:
            Value to be used.
        """
        return value if value is not None else setup.get(section, option)

    def imputer(self) -> impute.Imputer:
        """Imputer configured according to the IMPUTE section."""
        return impute.Imputer(
            setup.get(setup.SECTION_IMPUTE, setup.OPT_COLUMNS, impute.COLUMNS),
            setup.get(setup.SECTION_IMPUTE, setup.OPT_ESTIMATORS, 50),
            setup.get(setup.SECTION_IMPUTE, setup.OPT_ITERATIONS, 10),
            setup.get(setup.SECTION_IMPUTE, setup.OPT_THRESHOLD, 0.5),
        )

    @property
    def features(self) -> typing.Sequence[str]:
        """Predictor columns."""
        return setup.get(setup.SECTION_MODEL, setup.OPT_FEATURES, model.FEATURES)

    @property
    def impute_seed(self) -> typing.Optional[int]:
        """Random state of the imputation."""
        return setup.get(setup.SECTION_IMPUTE, setup.OPT_SEED)


@click.group(name='titanic')
@click.option('--config', '-C', type=click.Path(exists=True, dir_okay=False), help='Additional config file.')
@click.option(
    '--loglevel',
    '-L',
    type=click.Choice(['debug', 'info', 'warning', 'error'], case_sensitive=False),
    help='Global loglevel to use.',
)
@click.pass_context
def group(context: core.Context, config: typing.Optional[str], loglevel: typing.Optional[str]):
    """Titanic passenger survival prediction."""
    if config:
        setup.CONFIG.read(config)
    setup.logging(level=loglevel)
    context.obj = Scope(config, loglevel)


def source_options(command: typing.Callable) -> typing.Callable:
    """Decorator adding the common input file options."""
    command = click.option('--testset', type=click.Path(exists=True, dir_okay=False), help='Unlabeled input file.')(
        command
    )
    return click.option('--trainset', type=click.Path(exists=True, dir_okay=False), help='Labeled input file.')(
        command
    )


@group.command()
@source_options
@click.option('--output', '-O', type=click.Path(dir_okay=False), help='Predictions output file.')
@click.option('--model', 'dump', type=click.Path(dir_okay=False), help='Optional file to save the fitted model to.')
@click.option('--trees', type=int, help='Forest ensemble size.')
@click.option('--seed', type=int, help='Random state of the forest.')
@click.pass_obj
def predict(
    scope: Scope,
    trainset: typing.Optional[str],
    testset: typing.Optional[str],
    output: typing.Optional[str],
    dump: typing.Optional[str],
    trees: typing.Optional[int],
    seed: typing.Optional[int],
) -> None:
    """Fit the forest classifier and write its predictions."""
    result = pipeline.predict(
        scope.option(setup.SECTION_SOURCE, setup.OPT_TRAINSET, trainset),
        scope.option(setup.SECTION_SOURCE, setup.OPT_TESTSET, testset),
        scope.option(setup.SECTION_SINK, setup.OPT_PREDICTIONS, output),
        scope.option(setup.SECTION_MODEL, setup.OPT_SEED, seed),
        scope.imputer(),
        scope.impute_seed,
        scope.option(setup.SECTION_MODEL, setup.OPT_TREES, trees),
        scope.features,
    )
    dump = scope.option(setup.SECTION_SINK, setup.OPT_MODEL, dump)
    if dump:
        result.forest.dump(dump)
    click.echo(f'OOB error: {result.oob_error:.4f}')
    click.echo(result.importance.to_frame().to_string())
    click.echo(f'Predictions written to {result.path}')


@group.command()
@source_options
@click.option('--output', '-O', type=click.Path(dir_okay=False), help='Predictions output file.')
@click.option('--seed', type=int, help='Random state of the label imputation.')
@click.pass_obj
def baseline(
    scope: Scope,
    trainset: typing.Optional[str],
    testset: typing.Optional[str],
    output: typing.Optional[str],
    seed: typing.Optional[int],
) -> None:
    """Impute the testset labels as a comparison baseline."""
    output = scope.option(setup.SECTION_SINK, setup.OPT_BASELINE, output)
    predictions = pipeline.baseline(
        scope.option(setup.SECTION_SOURCE, setup.OPT_TRAINSET, trainset),
        scope.option(setup.SECTION_SOURCE, setup.OPT_TESTSET, testset),
        output,
        scope.option(setup.SECTION_IMPUTE, setup.OPT_SEED, seed),
        scope.imputer(),
        scope.impute_seed,
        scope.features,
        scope.option(setup.SECTION_IMPUTE, setup.OPT_ESTIMATORS),
        scope.option(setup.SECTION_IMPUTE, setup.OPT_ITERATIONS),
    )
    click.echo(f'Baseline predictions ({len(predictions)}) written to {output}')


@group.command(name='explore')
@source_options
@click.option('--plots', type=click.Path(file_okay=False), help='Directory to render the charts into.')
@click.pass_obj
def explore_(
    scope: Scope, trainset: typing.Optional[str], testset: typing.Optional[str], plots: typing.Optional[str]
) -> None:
    """Summarize the dataset and render the distribution charts."""
    dataset = source.load(
        scope.option(setup.SECTION_SOURCE, setup.OPT_TRAINSET, trainset),
        scope.option(setup.SECTION_SOURCE, setup.OPT_TESTSET, testset),
    )
    click.echo(explore.missing(dataset.frame).to_string())
    frame = feature.derive(dataset.frame)
    for column in explore.RATES:
        click.echo(explore.survival(frame, column).to_string())
    plots = scope.option(setup.SECTION_EXPLORE, setup.OPT_PLOTS, plots)
    if plots:
        for path in explore.plot(frame, plots):
            click.echo(f'Chart written to {path}')


@group.command()
@source_options
@click.option('--folds', type=int, help='Number of cross-validation folds.')
@click.option('--trees', type=int, help='Forest ensemble size.')
@click.option('--seed', type=int, help='Random state of the evaluation.')
@click.pass_obj
def evaluate(
    scope: Scope,
    trainset: typing.Optional[str],
    testset: typing.Optional[str],
    folds: typing.Optional[int],
    trees: typing.Optional[int],
    seed: typing.Optional[int],
) -> None:
    """Cross-validate the forest classifier against the label imputation baseline."""
    dataset = pipeline.prepare(
        scope.option(setup.SECTION_SOURCE, setup.OPT_TRAINSET, trainset),
        scope.option(setup.SECTION_SOURCE, setup.OPT_TESTSET, testset),
        scope.impute_seed,
        scope.imputer(),
    )
    labeled, _ = split.split(dataset)
    scores = evaluation.compare(
        labeled,
        scope.option(setup.SECTION_EVALUATION, setup.OPT_FOLDS, folds),
        scope.option(setup.SECTION_MODEL, setup.OPT_SEED, seed),
        scope.option(setup.SECTION_MODEL, setup.OPT_TREES, trees),
        scope.features,
        scope.option(setup.SECTION_IMPUTE, setup.OPT_ESTIMATORS),
        scope.option(setup.SECTION_IMPUTE, setup.OPT_ITERATIONS),
    )
    for method, accuracy in scores.items():
        click.echo(f'{method}: {accuracy:.4f}')


def main() -> None:
    """Cli wrapper for handling the pipeline exceptions."""
    try:
        group()  # pylint: disable=no-value-for-parameter
    except titanic.AnyError as err:
        print(err, file=sys.stderr)
        sys.exit(1)
