"""
Main entry point for the Media Re-encoder.

Without `--serve`, re-encodes one folder and prints the batch summary as YAML.
With `--serve`, starts the HTTP service used by the gallery front-end.
"""

import sys
from pathlib import Path
from typing import List, Optional

import yaml
from loguru import logger

from reencoder.cli import get_args
from reencoder.config.common import LOGGER_FORMAT
from reencoder.domain.exceptions import BatchException
from reencoder.pipeline.batch_pipeline import BatchOrchestrator
from reencoder.services.encoder_invoker import EncoderInvoker
from reencoder.services.quality_validator import QualityValidator
from reencoder.services.reporter import ResultReporter
from reencoder.utils.tool_paths import Modules


# Configure the logger for initial setup.
# The level is overridden once the command-line arguments are parsed.
logger.remove()
log_level = "DEBUG" if __debug__ else "INFO"
logger.add(sys.stderr, level=log_level, format=LOGGER_FORMAT)


def resolve_log_level(args) -> str:
    return args.log_level or log_level


def build_orchestrator(args) -> BatchOrchestrator:
    return BatchOrchestrator(
        invoker=EncoderInvoker(timeout=args.timeout),
        validator=QualityValidator(enabled=args.quality_check, timeout=args.timeout),
        max_workers=args.processes,
        write_logs=args.write_logs,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = get_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=resolve_log_level(args), format=LOGGER_FORMAT)
    logger.debug(f"Parsed arguments: {args}")

    Modules.verify_tools()
    orchestrator = build_orchestrator(args)

    if args.serve:
        from reencoder.web.server import create_app

        logger.info(f"Re-encoder service listening on http://{args.host}:{args.port}")
        create_app(orchestrator).run(host=args.host, port=args.port)
        return 0

    if args.target_dir:
        target_dir = Path(args.target_dir).resolve()
        logger.info(f"Target directory specified: {target_dir}")
    else:
        target_dir = Path.cwd().resolve()
        logger.info(f"No target directory specified, using current working directory: {target_dir}")

    try:
        outcomes = orchestrator.run(target_dir)
    except BatchException as e:
        logger.error(f"Batch did not run: {e}")
        return 1

    summary = ResultReporter.summarize(outcomes)
    yaml.dump(summary.to_dict(), sys.stdout, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
