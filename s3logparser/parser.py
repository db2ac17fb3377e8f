"""S3 access log line parser — one compiled regex, one named group per field."""

import logging
import re

from s3logparser.fields import S3_LOG_FIELDS, FieldSpec, build_pattern

logger = logging.getLogger(__name__)

LOG_ENTRY_PATTERN = build_pattern()


class LineParser:
    """Split a single S3 access log line into a field-name → value mapping.

    The field table is fixed at construction; parsing is a pure function of
    the input line.
    """

    def __init__(self, specs: tuple[FieldSpec, ...] = S3_LOG_FIELDS):
        self._names = tuple(spec.name for spec in specs)
        if specs is S3_LOG_FIELDS:
            self._pattern = LOG_ENTRY_PATTERN
        else:
            self._pattern = build_pattern(specs)

    @property
    def field_names(self) -> tuple[str, ...]:
        return self._names

    @property
    def pattern(self) -> re.Pattern:
        return self._pattern

    def parse(self, line: str | None) -> dict[str, str | None]:
        """Return every field of *line*, or an empty dict when it doesn't match.

        Empty and ``None`` input yield an empty dict. A field whose group did
        not take part in the match maps to ``None``; the key is always present.
        """
        if not line:
            return {}

        stripped = line.rstrip("\r\n")
        match = self._pattern.fullmatch(stripped)
        if not match:
            logger.debug("Line does not match S3 log format: %.80s", stripped)
            return {}

        return {name: match.group(name) for name in self._names}


_default_parser = LineParser()


def parse_line(line: str | None) -> dict[str, str | None]:
    """Parse with the standard S3 field table."""
    return _default_parser.parse(line)

