"""
Loading holiday registry snapshots from JSON or YAML files.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Union

import yaml
from pydantic import ValidationError

from deadline_calculator.data.schemas import HolidayException, HolidayRegistry

logger = logging.getLogger(__name__)


class HolidayFileLoader:
    """Reads `[{date, name}, ...]` lists into a HolidayRegistry."""

    SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml")

    def load(self, path: Union[str, Path]) -> HolidayRegistry:
        """
        Load a holiday registry from a file.

        The file may contain a list of entries or a mapping with a
        ``holidays`` key holding that list.

        Args:
            path: Path to a .json, .yaml or .yml file.

        Returns:
            HolidayRegistry in file order.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file format or an entry is invalid.
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Holiday file not found: {file_path}")

        suffix = file_path.suffix.lower()
        if suffix not in self.SUPPORTED_SUFFIXES:
            raise ValueError(
                f"Unsupported holiday file format: {suffix}. "
                f"Use one of: {', '.join(self.SUPPORTED_SUFFIXES)}"
            )

        with open(file_path, "r", encoding="utf-8") as f:
            try:
                if suffix == ".json":
                    raw = json.load(f)
                else:
                    raw = yaml.safe_load(f)
            except (json.JSONDecodeError, yaml.YAMLError) as e:
                raise ValueError(f"Error parsing holiday file {file_path}: {e}")

        registry = HolidayRegistry(holidays=tuple(self._parse_entries(raw, file_path)))
        logger.debug(f"Loaded {len(registry)} holidays from: {file_path}")
        return registry

    def _parse_entries(self, raw: Any, file_path: Path) -> List[HolidayException]:
        """Validate raw file content into holiday exceptions."""
        if raw is None:
            return []
        if isinstance(raw, dict):
            raw = raw.get("holidays", [])
        if not isinstance(raw, list):
            raise ValueError(f"Holiday file {file_path} must contain a list of entries")

        entries = []
        for index, item in enumerate(raw):
            if not isinstance(item, dict):
                raise ValueError(f"Entry {index} in {file_path} is not a mapping: {item!r}")
            try:
                entries.append(HolidayException(**item))
            except ValidationError as e:
                raise ValueError(f"Invalid entry {index} in {file_path}: {e}")
        return entries

    def save(self, registry: HolidayRegistry, path: Union[str, Path]) -> str:
        """
        Write a registry to a JSON or YAML file.

        Args:
            registry: Registry to write.
            path: Output path; the suffix selects the format.

        Returns:
            Path to the written file.
        """
        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        entries = [
            {"date": h.holiday_date.isoformat(), "name": h.name}
            for h in registry.holidays
        ]

        with open(file_path, "w", encoding="utf-8") as f:
            if file_path.suffix.lower() == ".json":
                json.dump(entries, f, indent=2, ensure_ascii=False)
            else:
                yaml.safe_dump(entries, f, allow_unicode=True, sort_keys=False)

        return str(file_path)
