"""File watcher — monitors an input directory and parses new S3 log files."""

import logging
import os
import time

from watchdog.events import FileSystemEventHandler

from s3logparser.exporters import export_records
from s3logparser.runner import BatchRunner

logger = logging.getLogger(__name__)


class FileWatcher(FileSystemEventHandler):
    """Watches for log file creation/modification and exports parsed records."""

    def __init__(
        self,
        output_dir: str,
        formats: tuple[str, ...],
        runner: BatchRunner | None = None,
        extension: str = ".log",
        debounce_seconds: float = 0.5,
    ):
        super().__init__()
        self._output_dir = output_dir
        self._formats = formats
        self._runner = runner or BatchRunner()
        self._extension = extension
        self._debounce = debounce_seconds
        self._last_processed: dict[str, float] = {}

    def _wanted(self, event) -> bool:
        return not event.is_directory and event.src_path.endswith(self._extension)

    def on_created(self, event):
        if self._wanted(event):
            self._handle(event.src_path)

    def on_modified(self, event):
        if self._wanted(event):
            self._handle(event.src_path)

    def _handle(self, filepath: str):
        """Debounce and process a log file."""
        now = time.time()
        last = self._last_processed.get(filepath, 0)
        if now - last < self._debounce:
            return
        self._last_processed[filepath] = now
        try:
            self.process_file(filepath)
        except (OSError, ValueError) as e:
            logger.error("Failed to process %s: %s", filepath, e)

    def process_file(self, filepath: str) -> list[str]:
        """Parse one file and write parsed_<name>.<fmt> outputs."""
        logger.info("Processing: %s", filepath)
        result = self._runner.run_with_stats(filepath)
        basename = os.path.splitext(os.path.basename(filepath))[0]
        written = export_records(result.records, self._output_dir, f"parsed_{basename}", self._formats)
        logger.info("  -> %s: %d records, %d files written", basename, result.stats.emitted, len(written))
        return written

    def process_existing_files(self, input_dir: str) -> int:
        """Scan input directory for existing log files at startup."""
        if not os.path.isdir(input_dir):
            return 0
        count = 0
        for name in sorted(os.listdir(input_dir)):
            if name.endswith(self._extension):
                self.process_file(os.path.join(input_dir, name))
                count += 1
        return count
