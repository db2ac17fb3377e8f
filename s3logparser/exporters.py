"""Exporters for parsed records — JSON, CSV, and Avro container files."""

import csv
import json
import logging
import os
import re
import tempfile
from typing import Any, Callable, Iterable

from fastavro import parse_schema, writer

from s3logparser.fields import BYTESSENT, FIELD_NAMES, OBJECTSIZE, PLACEHOLDER, TOTALTIME, TURNAROUNDTIME

logger = logging.getLogger(__name__)

SCHEMA_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "schemas", "s3_access_log.avsc")

# Numeric fields written as Avro longs
LONG_FIELDS = (TURNAROUNDTIME, BYTESSENT, OBJECTSIZE, TOTALTIME)

REFERRER_MAP_FIELD = "referrerMap"

# ASCII digits, optional sign
_LONG_RE = re.compile(r"[+-]?[0-9]+")

FORMATS = ("json", "csv", "avro")


def _atomic_write(path: str, binary: bool, write: Callable[[Any], None]):
    """Write via a temp file in the target directory, then rename over *path*."""
    directory = os.path.dirname(os.path.abspath(path))
    os.makedirs(directory, exist_ok=True)
    tmp_fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
    try:
        if binary:
            with os.fdopen(tmp_fd, "wb") as f:
                write(f)
        else:
            with os.fdopen(tmp_fd, "w", encoding="utf-8", newline="") as f:
                write(f)
        os.replace(tmp_path, path)
    except Exception:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


# ---------------------------------------------------------------------------
# JSON / CSV
# ---------------------------------------------------------------------------


def write_json(records: list[dict], path: str) -> str:
    def _write(f):
        json.dump(records, f, indent=2)
        f.write("\n")

    _atomic_write(path, binary=False, write=_write)
    logger.info("Wrote %d records to %s", len(records), path)
    return path


def csv_columns(records: Iterable[dict]) -> list[str]:
    """Ordered union of keys across all records, first-seen order."""
    columns: dict[str, None] = {}
    for record in records:
        for key in record:
            columns.setdefault(key, None)
    return list(columns)


def write_csv(records: list[dict], path: str) -> str:
    columns = csv_columns(records)

    def _write(f):
        out = csv.DictWriter(f, fieldnames=columns, restval="")
        out.writeheader()
        out.writerows(records)

    _atomic_write(path, binary=False, write=_write)
    logger.info("Wrote %d rows to %s", len(records), path)
    return path


def json_to_csv(json_path: str, csv_path: str) -> str:
    """Convert a JSON array of flat objects (as written by write_json) to CSV."""
    with open(json_path, "r", encoding="utf-8") as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"{json_path}: expected a JSON array of records")
    return write_csv(records, csv_path)


# ---------------------------------------------------------------------------
# Avro
# ---------------------------------------------------------------------------


def load_schema(path: str = SCHEMA_PATH) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _to_long(name: str, value: str) -> int | None:
    if value == PLACEHOLDER:
        return None
    if not _LONG_RE.fullmatch(value):
        logger.warning("Field %s: cannot convert %r to a number, writing null", name, value)
        return None
    return int(value)


def to_avro_record(record: dict) -> dict[str, Any]:
    """Split a merged record into schema fields plus a referrerMap."""
    out: dict[str, Any] = {}
    for name in FIELD_NAMES:
        value = record.get(name)
        if value is None:
            out[name] = None
            continue
        value = value.strip()
        out[name] = _to_long(name, value) if name in LONG_FIELDS else value

    out[REFERRER_MAP_FIELD] = {
        key: value for key, value in record.items()
        if key not in FIELD_NAMES and value is not None
    }
    return out


def write_avro(records: list[dict], path: str, schema: dict | None = None) -> str:
    parsed_schema = parse_schema(schema or load_schema())
    avro_records = [to_avro_record(r) for r in records]

    _atomic_write(path, binary=True, write=lambda f: writer(f, parsed_schema, avro_records))
    logger.info("Serialized %d records to %s", len(avro_records), path)
    return path


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def export_records(records: list[dict], output_dir: str, basename: str, formats: Iterable[str]) -> list[str]:
    """Write *records* in each requested format; return the paths written.

    When both JSON and CSV are requested, the CSV is converted from the
    JSON file just written.
    """
    formats = list(formats)
    unknown = [f for f in formats if f not in FORMATS]
    if unknown:
        raise ValueError(f"Unknown export format(s): {', '.join(unknown)}")

    written = []
    json_path = None
    if "json" in formats:
        json_path = write_json(records, os.path.join(output_dir, f"{basename}.json"))
        written.append(json_path)
    if "csv" in formats:
        csv_path = os.path.join(output_dir, f"{basename}.csv")
        if json_path:
            written.append(json_to_csv(json_path, csv_path))
        else:
            written.append(write_csv(records, csv_path))
    if "avro" in formats:
        written.append(write_avro(records, os.path.join(output_dir, f"{basename}.avro")))
    return written
