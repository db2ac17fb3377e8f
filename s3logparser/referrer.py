"""Decoder for the query string carried in an S3 log entry's referrer field.

The referrer is a quoted URL such as::

    "https://audit.example.org/hadoop/1/op_create/<id>/?op=op_create&pr=alice"

Keys and values are taken as raw text between ``=`` and ``&`` — no percent
decoding is applied, so ``urllib.parse.parse_qs`` is not a substitute.
"""

import logging

logger = logging.getLogger(__name__)


class ReferrerDecoder:
    """Extract key/value pairs from the part after ``?`` of a referrer value."""

    def decode(self, referrer: str | None) -> dict[str, str]:
        params: dict[str, str] = {}
        if not referrer:
            return params

        # Drop everything up to the first '?', and the closing quote.
        query = referrer[referrer.find("?") + 1:-1]
        length = len(query)
        start = 0
        while start < length:
            equals = query.find("=", start)
            if equals == -1:
                break
            key = query[start:equals]
            end = query.find("&", equals)
            if end == -1:
                end = length
            params[key] = query[equals + 1:end]
            start = end + 1

        logger.debug("Decoded %d referrer parameters", len(params))
        return params


_default_decoder = ReferrerDecoder()


def decode_referrer(referrer: str | None) -> dict[str, str]:
    """Module-level shortcut for ``ReferrerDecoder().decode``."""
    return _default_decoder.decode(referrer)
