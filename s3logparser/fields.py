"""Field table for S3 server access log lines.

Each log line is a fixed sequence of space-separated fields. The table below
names every field in the order it appears and says how its boundaries are
detected. ``build_pattern`` turns the table into one composite regex with a
named group per field.

See https://docs.aws.amazon.com/AmazonS3/latest/userguide/LogFormat.html
"""

import re
from dataclasses import dataclass
from enum import Enum

PLACEHOLDER = "-"


class FieldKind(Enum):
    """How a field's boundaries are detected. The value is the regex body."""

    SIMPLE = r"[^ ]*"
    QUOTED = r'-|"(?:[^"\\]|\\.)*"'
    NUMBER = r"-|[0-9]*"
    DATETIME = r"\[.*?\]"
    RAW_TRAILING = r".*"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: FieldKind = FieldKind.SIMPLE
    delimited: bool = True  # followed by a single space

    def fragment(self) -> str:
        group = f"(?P<{self.name}>{self.kind.value})"
        return group + " " if self.delimited else group


# ---------------------------------------------------------------------------
# Group names
# ---------------------------------------------------------------------------

OWNER = "owner"
BUCKET = "bucket"
TIMESTAMP = "timestamp"
REMOTEIP = "remoteip"
REQUESTER = "requester"
REQUESTID = "requestid"
VERB = "verb"
KEY = "key"
REQUESTURI = "requesturi"
HTTP = "http"
AWSERRORCODE = "awserrorcode"
BYTESSENT = "bytessent"
OBJECTSIZE = "objectsize"
TOTALTIME = "totaltime"
TURNAROUNDTIME = "turnaroundtime"
REFERRER = "referrer"
USERAGENT = "useragent"
VERSION = "version"
HOSTID = "hostid"
SIGV = "sigv"
CYPHER = "cypher"
AUTH = "auth"
ENDPOINT = "endpoint"
TLS = "tls"
# Anything after the TLS version. Empty until AWS adds new fields.
TAIL = "tail"

S3_LOG_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(OWNER),
    FieldSpec(BUCKET),
    FieldSpec(TIMESTAMP, FieldKind.DATETIME),
    FieldSpec(REMOTEIP),
    FieldSpec(REQUESTER),
    FieldSpec(REQUESTID),
    FieldSpec(VERB),
    FieldSpec(KEY),
    FieldSpec(REQUESTURI, FieldKind.QUOTED),
    FieldSpec(HTTP, FieldKind.NUMBER),
    FieldSpec(AWSERRORCODE),
    FieldSpec(BYTESSENT),
    FieldSpec(OBJECTSIZE),
    FieldSpec(TOTALTIME),
    FieldSpec(TURNAROUNDTIME),
    FieldSpec(REFERRER, FieldKind.QUOTED),
    FieldSpec(USERAGENT, FieldKind.QUOTED),
    FieldSpec(VERSION),
    FieldSpec(HOSTID),
    FieldSpec(SIGV),
    FieldSpec(CYPHER),
    FieldSpec(AUTH),
    FieldSpec(ENDPOINT),
    FieldSpec(TLS, FieldKind.SIMPLE, delimited=False),
    FieldSpec(TAIL, FieldKind.RAW_TRAILING, delimited=False),
)

FIELD_NAMES: tuple[str, ...] = tuple(spec.name for spec in S3_LOG_FIELDS)


def build_pattern(specs: tuple[FieldSpec, ...] = S3_LOG_FIELDS) -> re.Pattern:
    """Compile the composite line pattern, anchored at both ends."""
    return re.compile("^" + "".join(spec.fragment() for spec in specs) + "$")
