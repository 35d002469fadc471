"""
Output formatting and export functionality.
"""

from time_workdays.output.formatter import ConsoleFormatter
from time_workdays.output.exporter import ResultExporter

__all__ = ["ConsoleFormatter", "ResultExporter"]
