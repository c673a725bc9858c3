"""Command-line entry point for adocbook."""

import argparse
import logging

from .core.config import BuildConfig, ENGINES
from .core.controller import BookBuilder
from .core.logger import initialize_logging, create_error_tracker


def build_parser() -> argparse.ArgumentParser:
    defaults = BuildConfig()
    parser = argparse.ArgumentParser(
        prog="adocbook",
        description="Merge a remote AsciiDoc book into a single PDF.",
    )
    parser.add_argument("--api-base", default=defaults.api_base,
                        help="Repository contents API base URL")
    parser.add_argument("-o", "--output", default=defaults.output_file,
                        help=f"Output PDF path (default: {defaults.output_file})")
    parser.add_argument("--temp-dir", default=defaults.temp_dir,
                        help=f"Scratch directory (default: {defaults.temp_dir})")
    parser.add_argument("--chapter-prefix", default=defaults.chapter_prefix)
    parser.add_argument("--chapter-suffix", default=defaults.chapter_suffix)
    parser.add_argument("--workers", type=int, default=defaults.max_workers,
                        help="Maximum concurrent downloads/writes per batch")
    parser.add_argument("--timeout", type=float, default=defaults.request_timeout,
                        help="Per-request timeout in seconds")
    parser.add_argument("--asciidoctor", default=defaults.asciidoctor,
                        help="asciidoctor executable")
    parser.add_argument("--engine", choices=ENGINES, default=defaults.engine)
    parser.add_argument("--readiness-timeout", type=float, default=defaults.readiness_timeout,
                        help="Seconds to wait for math typesetting and for images")
    parser.add_argument("--strict", action="store_true",
                        help="Fail instead of printing when math or images are not ready")
    parser.add_argument("--keep-temp", action="store_true",
                        help="Keep the scratch directory after a successful build")
    parser.add_argument("--log-dir", default=defaults.log_dir)
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug output on the console")
    return parser


def config_from_args(args: argparse.Namespace) -> BuildConfig:
    return BuildConfig(
        api_base=args.api_base,
        output_file=args.output,
        temp_dir=args.temp_dir,
        chapter_prefix=args.chapter_prefix,
        chapter_suffix=args.chapter_suffix,
        max_workers=args.workers,
        request_timeout=args.timeout,
        asciidoctor=args.asciidoctor,
        engine=args.engine,
        readiness_timeout=args.readiness_timeout,
        abort_on_unready=args.strict,
        keep_temp=args.keep_temp,
        log_dir=args.log_dir,
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logger = initialize_logging(args.log_dir, logging.DEBUG if args.verbose else logging.INFO)
    tracker = create_error_tracker('cli')

    builder = None
    try:
        config = config_from_args(args).validate()
        builder = BookBuilder(config)
        result = builder.run()
        logger.info(f"Process completed successfully! {len(result.chapters)} chapters, "
                    f"{result.page_count} pages -> {result.output}")
        if not (result.math_ready and result.images_ready):
            logger.warning("PDF was captured before the page was fully ready "
                           f"(math: {result.math_ready}, images: {result.images_ready})")
    except Exception as e:
        tracker.log_error(e, context=f"build stopped in state '{builder.state if builder else 'idle'}'")
    finally:
        if builder is not None:
            builder.close()
    # Failures are reported in the log only
    return 0
