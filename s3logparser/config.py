"""Configuration loading from an optional YAML file and environment variables."""

import logging
import os
from dataclasses import dataclass, field

import yaml

from s3logparser.exporters import FORMATS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Config:
    output_dir: str = "./parsed_logs"
    formats: tuple[str, ...] = FORMATS
    log_level: str = "INFO"
    watch_extension: str = ".log"
    debounce_seconds: float = 0.5


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    logger.info("Loaded YAML config from %s", path)
    return data


def _parse_formats(value) -> tuple[str, ...]:
    if isinstance(value, str):
        value = value.split(",")
    formats = tuple(str(v).strip().lower() for v in value if str(v).strip())
    unknown = [f for f in formats if f not in FORMATS]
    if unknown:
        raise ValueError(f"Unknown output format(s): {', '.join(unknown)}")
    return formats


def load_config(yaml_data: dict | None = None) -> Config:
    """Build Config from parsed YAML data, with env vars taking precedence."""
    yaml_data = yaml_data or {}
    output = yaml_data.get("output") or {}
    log_cfg = yaml_data.get("logging") or {}
    watch = yaml_data.get("watch") or {}
    defaults = Config()

    formats = os.environ.get("S3LOG_FORMATS")
    if formats is None:
        formats = output.get("formats", defaults.formats)

    return Config(
        output_dir=os.environ.get("S3LOG_OUTPUT_DIR", output.get("dir", defaults.output_dir)),
        formats=_parse_formats(formats),
        log_level=os.environ.get("S3LOG_LEVEL", log_cfg.get("level", defaults.log_level)).upper(),
        watch_extension=watch.get("extension", defaults.watch_extension),
        debounce_seconds=float(watch.get("debounce_seconds", defaults.debounce_seconds)),
    )
