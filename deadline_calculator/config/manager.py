"""
Configuration manager: settings.yaml plus DEADLINE_* environment overrides.
"""

import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

import yaml
from pydantic import ValidationError

from deadline_calculator.data.schemas import Config

logger = logging.getLogger(__name__)

# (yaml section, yaml key) -> Config field
SECTION_FIELDS: Dict[Tuple[str, str], str] = {
    ("calculation", "language"): "language",
    ("calculation", "counting_mode"): "default_counting_mode",
    ("calculation", "max_iterations"): "max_iterations",
    ("holidays", "source"): "holiday_source",
    ("holidays", "file"): "holiday_file",
    ("holidays", "subdivision"): "subdivision",
    ("holidays", "include_forensic_recess"): "include_forensic_recess",
    ("output", "directory"): "output_directory",
    ("api", "host"): "api_host",
    ("api", "port"): "api_port",
}

ENV_PREFIX = "DEADLINE_"


def parse_bool(value: str) -> bool:
    """Interpret common truthy strings."""
    return value.strip().lower() in ("true", "1", "yes", "on", "sim")


# env suffix -> (Config field, converter)
ENV_FIELDS: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    "LANGUAGE": ("language", str),
    "COUNTING_MODE": ("default_counting_mode", str),
    "MAX_ITERATIONS": ("max_iterations", int),
    "HOLIDAY_SOURCE": ("holiday_source", str),
    "HOLIDAY_FILE": ("holiday_file", str),
    "SUBDIVISION": ("subdivision", str),
    "INCLUDE_RECESS": ("include_forensic_recess", parse_bool),
    "OUTPUT_DIRECTORY": ("output_directory", str),
    "API_HOST": ("api_host", str),
    "API_PORT": ("api_port", int),
}


class ConfigManager:
    """Loads and saves the calculator configuration."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Args:
            config_path: YAML settings file. Defaults to the packaged
                ``config/settings.yaml``.
        """
        self.config_path = config_path or str(Path(__file__).parent / "settings.yaml")

    def load_config(self) -> Config:
        """
        Build the effective configuration.

        Values come from the YAML file first, then from ``DEADLINE_*``
        environment variables.

        Returns:
            Validated Config.

        Raises:
            ValueError: If the file cannot be parsed or a value is invalid.
        """
        values = self._read_file()
        values.update(self._read_env())

        try:
            return Config(**values)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration: {e}")

    def _read_file(self) -> Dict[str, Any]:
        """Read the YAML file into flat Config field values."""
        path = Path(self.config_path)
        if not path.exists():
            logger.debug(f"No settings file at {path}, using built-in defaults")
            return {}

        try:
            with open(path, "r", encoding="utf-8") as f:
                document = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing YAML config file: {e}")

        logger.debug(f"Read settings from {path}")

        values = {}
        for (section, key), field in SECTION_FIELDS.items():
            block = document.get(section) or {}
            if key in block:
                values[field] = block[key]
        return values

    def _read_env(self) -> Dict[str, Any]:
        """Collect overrides from DEADLINE_* environment variables."""
        values = {}
        for suffix, (field, convert) in ENV_FIELDS.items():
            name = ENV_PREFIX + suffix
            raw = os.environ.get(name)
            if raw is None:
                continue
            try:
                values[field] = convert(raw)
            except ValueError:
                logger.warning(f"Ignoring invalid value for {name}: {raw}")
                continue
            logger.debug(f"{name} overrides {field}")
        return values

    def save_config(self, config: Config, output_path: Optional[str] = None) -> None:
        """
        Write a configuration back as sectioned YAML.

        Args:
            config: Configuration to write.
            output_path: Destination file. Defaults to ``config_path``.
        """
        output_path = output_path or self.config_path
        dumped = config.model_dump(mode="json")

        document: Dict[str, Dict[str, Any]] = {}
        for (section, key), field in SECTION_FIELDS.items():
            document.setdefault(section, {})[key] = dumped[field]

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(document, f, sort_keys=False, allow_unicode=True)

        logger.info(f"Saved configuration to: {output_path}")
