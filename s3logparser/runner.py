"""Batch runner — parse a whole S3 access log file into merged records."""

import logging
import os
from dataclasses import dataclass, field, asdict
from typing import Any

from s3logparser.fields import PLACEHOLDER, REFERRER
from s3logparser.parser import LineParser
from s3logparser.referrer import ReferrerDecoder

logger = logging.getLogger(__name__)


@dataclass
class RunStats:
    lines: int = 0
    blank: int = 0
    unmatched: int = 0
    skipped_no_referrer: int = 0
    emitted: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class RunResult:
    records: list[dict[str, str | None]] = field(default_factory=list)
    stats: RunStats = field(default_factory=RunStats)


def merge_record(log_record: dict, params: dict) -> dict:
    """Union of log fields and referrer parameters; referrer values win."""
    merged = dict(log_record)
    merged.update(params)
    return merged


class BatchRunner:
    """Reads a log file line by line and emits one merged record per line
    that carries a referrer.

    Lines whose referrer is missing or ``-`` produce no record at all.
    """

    def __init__(self, parser: LineParser | None = None, decoder: ReferrerDecoder | None = None):
        self._parser = parser or LineParser()
        self._decoder = decoder or ReferrerDecoder()

    def run(self, path: str) -> list[dict[str, str | None]]:
        return self.run_with_stats(path).records

    def run_with_stats(self, path: str) -> RunResult:
        result = RunResult()

        if os.path.isdir(path):
            logger.info("%s is a directory, expected a file to parse", path)
            return result
        if not os.path.isfile(path):
            logger.warning("%s does not exist, nothing to parse", path)
            return result
        if os.path.getsize(path) == 0:
            logger.info("%s is empty, nothing to parse", path)
            return result

        logger.info("Parsing: %s", os.path.abspath(path))
        stats = result.stats
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                stats.lines += 1
                line = line.rstrip("\r\n")
                if not line:
                    stats.blank += 1
                    continue

                log_record = self._parser.parse(line)
                if not log_record:
                    stats.unmatched += 1
                    logger.debug("Line %d did not match, skipping", stats.lines)
                    continue

                referrer = log_record.get(REFERRER)
                if referrer is None or referrer == PLACEHOLDER:
                    stats.skipped_no_referrer += 1
                    continue

                params = self._decoder.decode(referrer)
                result.records.append(merge_record(log_record, params))
                stats.emitted += 1

        logger.info(
            "  -> %s: %d records from %d lines (%d unmatched, %d without referrer)",
            os.path.basename(path), stats.emitted, stats.lines,
            stats.unmatched, stats.skipped_no_referrer,
        )
        return result
