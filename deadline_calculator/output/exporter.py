"""
Export functionality for deadline calculation results.
"""

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from deadline_calculator.data.schemas import DeadlineResult

logger = logging.getLogger(__name__)


class ResultExporter:
    """Exports deadline calculation results to JSON and CSV."""

    def __init__(
        self,
        output_directory: str = "results",
        timestamp_format: str = "%Y%m%d_%H%M%S",
    ):
        """
        Initialize the result exporter.

        Args:
            output_directory: Directory for output files.
            timestamp_format: Format string for timestamps in filenames.
        """
        self.output_directory = output_directory
        self.timestamp_format = timestamp_format

    def _ensure_output_dir(self) -> Path:
        """Ensure output directory exists and return path."""
        output_path = Path(self.output_directory)
        output_path.mkdir(parents=True, exist_ok=True)
        return output_path

    def _generate_filename(self, prefix: str, extension: str) -> str:
        """Generate a filename with timestamp."""
        timestamp = datetime.now().strftime(self.timestamp_format)
        return f"{prefix}_{timestamp}.{extension}"

    def export_json(
        self, result: DeadlineResult, output_path: Optional[str] = None
    ) -> str:
        """
        Export result to JSON file.

        Args:
            result: DeadlineResult to export.
            output_path: Optional specific output path.

        Returns:
            Path to the exported file.
        """
        if output_path:
            file_path = Path(output_path)
            file_path.parent.mkdir(parents=True, exist_ok=True)
        else:
            output_dir = self._ensure_output_dir()
            filename = self._generate_filename("deadline", "json")
            file_path = output_dir / filename

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(self.result_to_dict(result), f, indent=2, ensure_ascii=False)

        logger.info(f"Exported result to: {file_path}")
        return str(file_path)

    def export_csv(
        self, result: DeadlineResult, output_path: Optional[str] = None
    ) -> str:
        """
        Export the day-by-day simulation to a CSV file.

        Args:
            result: DeadlineResult to export.
            output_path: Optional specific output path.

        Returns:
            Path to the exported file.
        """
        if output_path:
            file_path = Path(output_path)
            file_path.parent.mkdir(parents=True, exist_ok=True)
        else:
            output_dir = self._ensure_output_dir()
            filename = self._generate_filename("simulation", "csv")
            file_path = output_dir / filename

        with open(file_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Date", "Label", "Counted", "Count", "Reason"])

            for step in result.simulation:
                writer.writerow([
                    step.step_date.isoformat(),
                    step.label,
                    step.is_counted,
                    step.count if step.count is not None else "",
                    step.reason.value,
                ])

        logger.info(f"Exported simulation to: {file_path}")
        return str(file_path)

    def export_both(self, result: DeadlineResult) -> Tuple[str, str]:
        """
        Export result to both JSON and CSV.

        Returns:
            Tuple of (json_path, csv_path).
        """
        return self.export_json(result), self.export_csv(result)

    def result_to_dict(self, result: DeadlineResult) -> dict:
        """
        Convert DeadlineResult to a JSON-serializable dictionary.

        Dates use ISO 8601 (YYYY-MM-DD) with no time component.

        Args:
            result: DeadlineResult to convert.

        Returns:
            Dictionary representation.
        """
        return {
            "valid": result.valid,
            "request": {
                "start_date": result.start_date.isoformat() if result.start_date else None,
                "day_count": result.day_count,
                "counting_mode": result.counting_mode.value if result.counting_mode else None,
            },
            "final_date": result.final_date.isoformat() if result.final_date else None,
            "log": list(result.log),
            "simulation": [
                {
                    "date": step.step_date.isoformat(),
                    "label": step.label,
                    "is_counted": step.is_counted,
                    "count": step.count,
                    "reason": step.reason.value,
                }
                for step in result.simulation
            ],
            "metadata": {
                "exported_at": datetime.now().isoformat(),
            },
        }
