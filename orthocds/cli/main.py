# orthocds/cli/main.py
import argparse
import json
import sys
import logging
from typing import List, Optional

from ..config import ConfigManager
from ..core.command_utils import check_command_availability
from ..core.context import ApplicationContext
from ..core.logging_config import LoggingManager
from ..error_handlers import handle_exceptions
from ..models.orthogroup import load_targets
from ..models.transcript import PredictorVariant
from ..pipelines.cleaning import TranscriptCleaningPipeline


def build_parser() -> argparse.ArgumentParser:
    # Create the top-level parser
    parser = argparse.ArgumentParser(
        description='Clean transcriptome assemblies into validated CDS and protein sets'
    )

    # Global options
    parser.add_argument('--config', type=str, help='Path to configuration file')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase verbosity (can be used multiple times)')
    parser.add_argument('--log-file', type=str,
                        help='Also log to this file (console logging goes to stdout, stderr with --json)')
    parser.add_argument('--log-dir', type=str,
                        help='Directory for log files')
    parser.add_argument('--json', action='store_true',
                        help='Output results as JSON')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    run_parser = subparsers.add_parser('run', help='Predict, validate and write CDS/protein sets')
    run_parser.add_argument('--transcripts', '-t', type=str, required=True,
                            help='Assembled transcripts (FASTA)')
    run_parser.add_argument('--output-dir', '-o', type=str, required=True,
                            help='Output directory (must not exist)')
    run_parser.add_argument('--method', type=str,
                            choices=[v.value for v in PredictorVariant],
                            help='Coding-region predictor')
    run_parser.add_argument('--stranded', action='store_true', default=None,
                            help='Library is strand-specific')
    run_parser.add_argument('--min-length', type=int,
                            help='Omit transcripts with a shorter CDS')
    run_parser.add_argument('--score-matrix', type=str,
                            help='Predictor score matrix (ESTScan)')
    run_parser.add_argument('--dedup', action='store_true', default=None,
                            help='Remove identical coding sequences')
    run_parser.add_argument('--targets', type=str,
                            help='Orthogroup table: id, profile, reference alignment')
    run_parser.add_argument('--scaffold', type=str,
                            help='Name prefix for targeted assemblies')
    run_parser.add_argument('--gap-threshold', type=float,
                            help='Alignment trimming gap threshold (0-1)')
    run_parser.add_argument('--threads', type=int,
                            help='Threads passed to external tools')
    run_parser.add_argument('--workers', type=int,
                            help='Orthogroups processed concurrently')
    run_parser.add_argument('--keep-intermediates', action='store_true', default=None,
                            help='Keep scratch files of successful orthogroups')

    subparsers.add_parser('check-tools', help='Report which configured tools are on PATH')

    return parser


@handle_exceptions(exit_on_error=False)
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
        component="orthocds",
        config=config_manager.config,
        # keep stdout parseable when it carries the JSON summary
        stream=sys.stderr if args.json else sys.stdout
    )
    for error in config_manager.errors:
        logger.warning(f"Configuration problem: {error}")
    context = ApplicationContext(config_manager=config_manager)

    if args.command == 'check-tools':
        return check_tools(context, args)
    if args.command == 'run':
        return run(context, args, logger)

    parser.print_help()
    return 1


def run(context: ApplicationContext, args, logger: logging.Logger) -> int:
    targets = load_targets(args.targets) if args.targets else []
    if args.keep_intermediates:
        context.update_config('targeted', 'keep_intermediates', True)

    pipeline = TranscriptCleaningPipeline.from_context(
        context,
        method=args.method,
        stranded=args.stranded,
        min_length=args.min_length,
        score_matrix=args.score_matrix,
        dedup=args.dedup,
        targeted=bool(targets),
        scaffold=args.scaffold,
        gap_threshold=args.gap_threshold,
        threads=args.threads,
        max_workers=args.workers,
        keep_intermediates=args.keep_intermediates,
    )

    context.tools.check_requirements(
        method=pipeline.method,
        dedup=pipeline.deduplicator is not None,
        targeted=pipeline.targeted is not None,
    )

    result = pipeline.run(args.transcripts, args.output_dir, targets)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(f"Predicted:    {result.raw_predictions}")
        print(f"Reconciled:   {result.reconciled}")
        print(f"Validated:    {result.validated} ({result.rejected} rejected)")
        print(f"Written:      {result.written}")
        if result.deduplicated is not None:
            print(f"Non-redundant: {result.deduplicated}")
        if result.targeted is not None:
            print(f"Orthogroups:  {result.targeted.done} done, {result.targeted.aborted} aborted")
        for label, path in result.output_files.items():
            print(f"  {label}: {path}")

    logger.info(f"Run finished in {result.processing_time:.1f}s")
    return 0


def check_tools(context: ApplicationContext, args) -> int:
    tools = context.tools
    method = context.config.get('prediction', {}).get('method')
    required = tools.required_tools(method=method, dedup=True, targeted=True)
    status = {tool: check_command_availability(tool) for tool in required}

    if args.json:
        print(json.dumps(status, indent=2))
    else:
        for tool, available in status.items():
            print(f"{'found' if available else 'MISSING':8} {tool}")

    return 0 if all(status.values()) else 1


if __name__ == "__main__":
    sys.exit(main())
