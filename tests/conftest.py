"""Shared pytest fixtures for the S3 access log parser test suite."""

import os

import pytest

# Derived from a real log entry. Keep it on one logical line when editing.
SAMPLE_REFERRER = (
    '"https://audit.example.org/hadoop/1/op_create/e8ede3c7-8506-4a43-8268-fe8fcbb510a4-00000278/?'
    "op=op_create"
    "&p1=fork-0001/test/testParseBrokenCSVFile"
    "&pr=alice"
    "&ps=2eac5a04-2153-48db-896a-09bc9a2fd132"
    "&id=e8ede3c7-8506-4a43-8268-fe8fcbb510a4-00000278&t0=154"
    "&fs=e8ede3c7-8506-4a43-8268-fe8fcbb510a4&t1=156"
    '&ts=1620905165700"'
)

SAMPLE_LOG_ENTRY = (
    "183c9826b45486e485693808f38e2c4071004bf5dfd4c3ab210f0a21a4000000"
    " bucket-london"
    " [13/May/2021:11:26:06 +0000]"
    " 109.157.171.174"
    " arn:aws:iam::152813717700:user/dev"
    " M7ZB7C4RTKXJKTM9"
    " REST.PUT.OBJECT"
    " fork-0001/test/testParseBrokenCSVFile"
    ' "PUT /fork-0001/test/testParseBrokenCSVFile HTTP/1.1"'
    " 200"
    " -"
    " -"
    " 794"
    " 55"
    " 17"
    " " + SAMPLE_REFERRER +
    ' "Hadoop 3.4.0-SNAPSHOT, java/1.8.0_282 vendor/AdoptOpenJDK"'
    " -"
    " TrIqtEYGWAwvu0h1N9WJKyoqM0TyHUaY+ZZBwP2yNf2qQp1Z/0="
    " SigV4"
    " ECDHE-RSA-AES128-GCM-SHA256"
    " AuthHeader"
    " bucket-london.s3.eu-west-2.amazonaws.com"
    " TLSv1.2"
)

SAMPLE_LOG_FILE = os.path.join(os.path.dirname(__file__), "..", "logs", "sample_s3_access.log")


@pytest.fixture()
def sample_log_entry() -> str:
    return SAMPLE_LOG_ENTRY


@pytest.fixture()
def sample_referrer() -> str:
    return SAMPLE_REFERRER


@pytest.fixture()
def no_referrer_entry() -> str:
    """The sample entry with its referrer replaced by the '-' placeholder."""
    return SAMPLE_LOG_ENTRY.replace(SAMPLE_REFERRER, "-")


@pytest.fixture()
def sample_log_file(tmp_path) -> str:
    """A file holding just the sample entry, no trailing newline."""
    path = tmp_path / "sampleauditlogfile.txt"
    path.write_text(SAMPLE_LOG_ENTRY, encoding="utf-8")
    return str(path)


@pytest.fixture()
def empty_file(tmp_path) -> str:
    path = tmp_path / "emptyfile.txt"
    path.touch()
    return str(path)


@pytest.fixture()
def empty_dir(tmp_path) -> str:
    path = tmp_path / "emptyDir"
    path.mkdir()
    return str(path)


@pytest.fixture()
def multi_line_file() -> str:
    """The checked-in sample: 2 complete entries, 1 without referrer, 1 blank, 1 garbage."""
    return os.path.abspath(SAMPLE_LOG_FILE)
