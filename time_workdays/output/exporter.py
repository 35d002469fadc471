"""
Export functionality for workday results.
"""

import csv
import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Tuple

from time_workdays.data.schemas import WorkdayResult, iso_date

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def classify_day(result: WorkdayResult, date_str: str) -> str:
    """
    Classify one date of the month.

    Returns one of 'makeup-workday', 'workday', 'holiday' or 'weekend'.
    """
    if date_str in result.makeup_workdays:
        return "makeup-workday"
    if date_str in result.workdays:
        return "workday"
    if date_str in result.holidays:
        return "holiday"
    return "weekend"


class ResultExporter:
    """Exports workday results to JSON and CSV files."""

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

    def _resolve_path(self, output_path: Optional[str], result: WorkdayResult, extension: str) -> Path:
        if output_path:
            file_path = Path(output_path)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            return file_path

        output_dir = Path(self.output_directory)
        output_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime(self.timestamp_format)
        prefix = f"workdays_{result.year}{result.month:02d}_{result.provider.value}"
        return output_dir / f"{prefix}_{timestamp}.{extension}"

    def export_json(self, result: WorkdayResult, output_path: Optional[str] = None) -> str:
        """
        Export result to JSON file.

        Args:
            result: WorkdayResult to export.
            output_path: Optional specific output path.

        Returns:
            Path to the exported file.
        """
        file_path = self._resolve_path(output_path, result, "json")

        result_dict = result.to_payload()
        result_dict["metadata"] = {
            "days_in_month": result.days_in_month,
            "calculation_timestamp": result.calculation_timestamp.isoformat(),
        }

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(result_dict, f, indent=2, ensure_ascii=False)

        logger.info(f"Exported result to: {file_path}")
        return str(file_path)

    def export_csv(self, result: WorkdayResult, output_path: Optional[str] = None) -> str:
        """
        Export result to CSV file, one row per day of the month.

        Args:
            result: WorkdayResult to export.
            output_path: Optional specific output path.

        Returns:
            Path to the exported file.
        """
        file_path = self._resolve_path(output_path, result, "csv")

        with open(file_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Date", "Weekday", "Classification", "Provider"])

            for day in range(1, result.days_in_month + 1):
                date_str = iso_date(result.year, result.month, day)
                weekday = WEEKDAY_NAMES[date(result.year, result.month, day).weekday()]
                writer.writerow([
                    date_str,
                    weekday,
                    classify_day(result, date_str),
                    result.provider.value,
                ])

        logger.info(f"Exported result to: {file_path}")
        return str(file_path)

    def export_both(self, result: WorkdayResult) -> Tuple[str, str]:
        """
        Export result to both JSON and CSV.

        Returns:
            Tuple of (json_path, csv_path).
        """
        return self.export_json(result), self.export_csv(result)
