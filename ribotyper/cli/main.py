# ribotyper/cli/main.py
import argparse
import dataclasses
import os
import logging
from typing import List, Optional

from ribotyper import __version__
from ribotyper.config import ConfigManager
from ribotyper.core.file_utils import ensure_dir
from ribotyper.core.logging_config import LoggingManager
from ribotyper.error_handlers import cli_error_handler
from ribotyper.exceptions import ConfigurationError
from ribotyper.io.model_info import parse_model_info_file, read_model_names
from ribotyper.io.sequences import parse_seqstat_file, read_fasta_lengths
from ribotyper.models.options import ClassificationOptions
from ribotyper.models.search import SearchMethod
from ribotyper.output.writer import ColumnWidths, ResultWriter
from ribotyper.pipelines.classification.pipeline import ClassificationPipeline
from ribotyper.pipelines.classification.summary import summarize_results
from ribotyper.processors.tblout import get_hit_parser, load_sorted_hits

# command-line flag -> ClassificationOptions field
OPTION_FLAGS = {
    'minsc': 'min_score',
    'lowppossc': 'low_ppos_score',
    'tcov': 'total_coverage',
    'lowpdiff': 'low_ppos_diff',
    'vlowpdiff': 'vlow_ppos_diff',
    'absdiff': 'absolute_diff',
    'lowadiff': 'low_abs_diff',
    'vlowadiff': 'vlow_abs_diff',
    'maxoverlap': 'max_overlap',
    'evalues': 'use_evalues',
    'samedomain': 'same_model',
    'minusfail': 'minus_fail',
    'scfail': 'score_fail',
    'difffail': 'diff_fail',
    'covfail': 'cov_fail',
    'multfail': 'mult_fail',
}


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser"""
    parser = argparse.ArgumentParser(description='Ribotyper: classify rRNA sequences from search results')

    # Global options
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--config', type=str, help='Path to configuration file')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase verbosity')
    parser.add_argument('--log-file', type=str,
                        help='Log to file in addition to stderr')
    parser.add_argument('--log-dir', type=str,
                        help='Directory for log files')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    classify = subparsers.add_parser('classify', help='Classify sequences from a tabular hit file')
    classify.add_argument('tblout', help='Tabular output of the search method')
    classify.add_argument('modelinfo', help='Model info file (model family domain per line)')

    seqs = classify.add_mutually_exclusive_group(required=True)
    seqs.add_argument('--seqstat', type=str, help='esl-seqstat -a report with sequence lengths')
    seqs.add_argument('--fasta', type=str, help='FASTA file of the searched sequences')

    classify.add_argument('-o', '--out-root', required=True,
                          help='Output root; writes <root>.short.out, <root>.long.out, <root>.summary.tsv')
    classify.add_argument('--method', choices=SearchMethod.choices(),
                          help='Search method that produced the tabular file')
    classify.add_argument('--inaccept', type=str,
                          help='File listing models whose hits are acceptable')
    classify.add_argument('--models', type=str,
                          help='CM/HMM file; its NAME lines must match the model info file')

    thresholds = classify.add_argument_group('thresholds')
    thresholds.add_argument('--minsc', type=float, help='Minimum bit score of a counted hit')
    thresholds.add_argument('--nominsc', action='store_true', help='Count hits of any score')
    thresholds.add_argument('--lowppossc', type=float, help='Low bits per nucleotide threshold')
    thresholds.add_argument('--tcov', type=float, help='Low total coverage threshold')
    thresholds.add_argument('--lowpdiff', type=float, help='Low per-position score difference')
    thresholds.add_argument('--vlowpdiff', type=float, help='Very low per-position score difference')
    thresholds.add_argument('--absdiff', action='store_true', default=None,
                            help='Use total instead of per-position score difference')
    thresholds.add_argument('--lowadiff', type=float, help='Low total score difference')
    thresholds.add_argument('--vlowadiff', type=float, help='Very low total score difference')
    thresholds.add_argument('--maxoverlap', type=int, help='Maximum model overlap between two hits')

    ranking = classify.add_argument_group('ranking')
    ranking.add_argument('--evalues', action='store_true', default=None,
                         help='Rank hits by E-value, breaking ties by score')
    ranking.add_argument('--samedomain', action='store_true', default=None,
                         help='Top two hits may be to the same domain, only the model must differ')

    failures = classify.add_argument_group('optional failures')
    failures.add_argument('--minusfail', action='store_true', default=None,
                          help='FAIL sequences whose best hit is on the minus strand')
    failures.add_argument('--scfail', action='store_true', default=None,
                          help='FAIL sequences with a low score per position')
    failures.add_argument('--difffail', action='store_true', default=None,
                          help='FAIL sequences with a low score difference between the top two hits')
    failures.add_argument('--covfail', action='store_true', default=None,
                          help='FAIL sequences with low total coverage')
    failures.add_argument('--multfail', action='store_true', default=None,
                          help='FAIL sequences with more than one hit to the best model')

    return parser


def build_options(args: argparse.Namespace, config_manager: ConfigManager) -> ClassificationOptions:
    """Merge configuration and command-line thresholds"""
    overrides = {field: getattr(args, flag) for flag, field in OPTION_FLAGS.items()}
    options = ClassificationOptions.from_config(config_manager, **overrides)
    if args.nominsc:
        options = dataclasses.replace(options, min_score=None)
    return options


def resolve_method(args: argparse.Namespace, config_manager: ConfigManager) -> SearchMethod:
    name = args.method or config_manager.get_search_method()
    try:
        return SearchMethod(name)
    except ValueError:
        raise ConfigurationError(f"Unknown search method: {name}",
                                 {'valid_methods': SearchMethod.choices()})


def run_classify(args: argparse.Namespace, config_manager: ConfigManager) -> int:
    """Run the classify command"""
    logger = logging.getLogger("ribotyper.cli.classify")

    options = build_options(args, config_manager)
    method = resolve_method(args, config_manager)
    logger.info(f"Search method: {method.value}")
    logger.debug(f"Classification options: {options.to_dict()}")

    model_info = parse_model_info_file(args.modelinfo, args.inaccept)
    model_names = None
    if args.models:
        model_names = read_model_names(args.models)
        model_info.check_models(model_names)

    if args.seqstat:
        universe = parse_seqstat_file(args.seqstat)
    else:
        universe = read_fasta_lengths(args.fasta)

    pipeline = ClassificationPipeline(options, model_info, method)
    parser = get_hit_parser(method, model_info)
    hits = load_sorted_hits(args.tblout, parser)
    results = pipeline.run(hits, universe)

    out_dir = os.path.dirname(args.out_root)
    if out_dir:
        ensure_dir(out_dir)

    writer = ResultWriter(ColumnWidths.from_tables(model_info, universe, model_names), options, method)
    writer.write(results, f"{args.out_root}.short.out", f"{args.out_root}.long.out")

    summary = summarize_results(results)
    summary_path = f"{args.out_root}.summary.tsv"
    summary.to_csv(summary_path, sep='\t', index=False)
    logger.info(f"Summary written to {summary_path}\n{summary.to_string(index=False)}")

    return 0


@cli_error_handler
def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config_manager = ConfigManager(args.config)

    logger = LoggingManager.configure(
        verbose=args.verbose > 0,
        log_file=args.log_file,
        log_dir=args.log_dir,
        component="ribotyper",
        config=config_manager.config
    )
    if args.config:
        logger.info(f"Configuration loaded from {args.config}")

    if args.command == 'classify':
        return run_classify(args, config_manager)

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
