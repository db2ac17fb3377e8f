#!/usr/bin/env python3
"""s3-log-parse — parse S3 server access logs into JSON, CSV and Avro."""

import json
import logging
import os
import signal
import sys
import time
from argparse import ArgumentParser
from dataclasses import replace

from s3logparser.config import load_config, load_yaml_config
from s3logparser.exporters import FORMATS, export_records
from s3logparser.runner import BatchRunner

logger = logging.getLogger("s3logparser")

_running = True


def _signal_handler(sig, frame):
    global _running
    logger.info("Shutdown signal received, stopping...")
    _running = False


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="s3-log-parse",
        description="Parse AWS S3 server access logs into structured records.",
    )
    parser.add_argument(
        "path",
        help="S3 access log file (or directory with --watch)",
    )
    parser.add_argument(
        "--config",
        help="YAML config file",
    )
    parser.add_argument(
        "--output-dir",
        help="Directory for exported files (overrides config)",
    )
    parser.add_argument(
        "--format",
        nargs="+",
        choices=FORMATS,
        help="Export format(s) (default: from config, all formats)",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print parse statistics as JSON instead of exporting",
    )
    parser.add_argument(
        "--watch",
        action="store_true",
        help="Treat path as a directory and parse log files as they appear",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ...)",
    )
    return parser


def run_once(args, config) -> int:
    """Parse a single file and export or report on it."""
    runner = BatchRunner()
    result = runner.run_with_stats(args.path)

    if args.stats:
        print(json.dumps(result.stats.to_dict(), indent=2))
        return 0

    basename = os.path.splitext(os.path.basename(os.path.normpath(args.path)))[0] or "parsed"
    written = export_records(result.records, config.output_dir, basename, config.formats)
    print(f"{result.stats.emitted} records parsed from {args.path}")
    for path in written:
        print(f"  wrote {path}")
    return 0


def run_watch(args, config) -> int:
    """Process existing log files, then watch the directory for new ones."""
    from watchdog.observers import Observer
    from s3logparser.watcher import FileWatcher

    if not os.path.isdir(args.path):
        print(f"Error: --watch requires a directory: {args.path}", file=sys.stderr)
        return 1

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    os.makedirs(config.output_dir, exist_ok=True)
    watcher = FileWatcher(
        config.output_dir,
        config.formats,
        extension=config.watch_extension,
        debounce_seconds=config.debounce_seconds,
    )
    watcher.process_existing_files(args.path)

    observer = Observer()
    observer.schedule(watcher, args.path, recursive=False)
    observer.start()
    logger.info("Watching %s for *%s files", args.path, config.watch_extension)

    try:
        while _running:
            time.sleep(1)
    finally:
        observer.stop()
        observer.join(timeout=5)
        logger.info("Watcher stopped.")
    return 0


def main() -> int:
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [S3LOG] %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(load_yaml_config(args.config))
        logging.getLogger().setLevel((args.log_level or config.log_level).upper())
        if args.output_dir:
            config = replace(config, output_dir=args.output_dir)
        if args.format:
            config = replace(config, formats=tuple(args.format))

        if args.watch:
            return run_watch(args, config)
        return run_once(args, config)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)
