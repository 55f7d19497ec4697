"""
Train and evaluate an LVQ classifier on a delimited data file.

Each non-empty line of the file holds the numeric features followed by the
class label. Header lines are not skipped and must be removed first.

Usage:
    lvq-classify data/iris.csv
    lvq-classify data/iris.csv --initializer n_random_rational --evaluation-scope held_out
    lvq-classify "data/my datasets/iris.csv" --log-level DEBUG
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from .data.loader import load_records
from .data.normalization import NormalizationFunction
from .data.record import LabelMapping
from .data.sampling import WeightsInitializer
from .evaluation.listener import EvaluationListener
from .evaluation.preflight_checks import PreflightCheckError, run_preflight_checks
from .exceptions import LVQError
from .models.distance import DistanceMetric
from .training.builder import ModelBuilder
from .training.config import EvaluationScope
from .utils.logging import setup_logging
from .utils.warnings import configure_warnings

logger = logging.getLogger(__name__)

# Fixed default so runs are reproducible across invocations
DEFAULT_SEED = 321895892175192714


def _enum_values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lvq-classify',
        description='Train an LVQ classifier asynchronously and report its accuracy'
    )

    parser.add_argument('path', type=str, nargs='+',
                        help='Path to the data file (may contain spaces)')
    parser.add_argument('--delimiter', type=str, default=',',
                        help='Field delimiter')
    parser.add_argument('--labels', type=str, default=None,
                        help='Comma-separated class names in label id order '
                             '(default: in order of first appearance)')

    parser.add_argument('--train-samples', type=int, default=30,
                        help='Number of records drawn for training')
    parser.add_argument('--normalization', choices=_enum_values(NormalizationFunction),
                        default=NormalizationFunction.MIN_MAX.value)
    parser.add_argument('--initializer', choices=_enum_values(WeightsInitializer),
                        default=WeightsInitializer.N_RANDOM_UNIQUE.value)
    parser.add_argument('--distance', choices=_enum_values(DistanceMetric),
                        default=DistanceMetric.EUCLIDEAN.value)
    parser.add_argument('--seed', type=int, default=DEFAULT_SEED)
    parser.add_argument('--report-period', type=int, default=5,
                        help='Epochs between progress reports (0 = completion only)')
    parser.add_argument('--learn-rate', type=float, default=0.3)
    parser.add_argument('--quit-learn-rate', type=float, default=0.001)
    parser.add_argument('--decay', type=float, default=0.97,
                        help='Learn-rate decay per epoch')
    parser.add_argument('--max-epochs', type=int, default=200)
    parser.add_argument('--evaluation-scope', choices=_enum_values(EvaluationScope),
                        default=EvaluationScope.ALL.value)

    parser.add_argument('--log-level', type=str, default=None,
                        help='Logging level (default: LVQ_LOG_LEVEL or INFO)')
    parser.add_argument('--progress', action='store_true',
                        help='Show a progress bar while training')
    parser.add_argument('--strict', action='store_true',
                        help='Abort if a preflight check fails')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(level=args.log_level)
    configure_warnings(errors=args.strict)

    data_path = Path(" ".join(args.path))
    if not data_path.is_file():
        logger.error("%s does not exist or is a directory", data_path)
        return 1

    mapping = None
    if args.labels:
        mapping = LabelMapping(dict(enumerate(args.labels.split(","))), name=data_path.stem)

    try:
        records = load_records(data_path, mapping=mapping, delimiter=args.delimiter)

        listener = EvaluationListener()
        wrapper = (ModelBuilder()
                   .with_train_data(records, args.train_samples)
                   .with_input_normalization_func(NormalizationFunction(args.normalization))
                   .with_weights_initializer(WeightsInitializer(args.initializer))
                   .with_distance_metric(DistanceMetric(args.distance))
                   .with_random_number_generator(args.seed)
                   .with_progress_report_period(args.report_period)
                   .with_model_state_listener(listener)
                   .with_learn_rate(args.learn_rate)
                   .with_quit_learn_rate(args.quit_learn_rate)
                   .with_momentum_learn_rate_decay(args.decay)
                   .with_max_epochs(args.max_epochs)
                   .with_evaluation_scope(EvaluationScope(args.evaluation_scope))
                   .with_progress_bar(args.progress)
                   .build())

        run_preflight_checks(wrapper, strict=args.strict)
    except (LVQError, PreflightCheckError, OSError) as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1

    wrapper.start()
    logger.info("Model will be training asynchronously!")

    try:
        wrapper.wait()
    except KeyboardInterrupt:
        logger.warning("Interrupted, halting training")
        wrapper.halt()
        try:
            wrapper.wait()
        except LVQError as e:
            logger.error("%s: %s", type(e).__name__, e)
            return 1
    except LVQError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1

    return 0 if listener.report is not None else 1


if __name__ == '__main__':
    raise SystemExit(main())
