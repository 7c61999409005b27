"""
Output formatting and export functionality.
"""

from deadline_calculator.output.formatter import ConsoleFormatter
from deadline_calculator.output.exporter import ResultExporter

__all__ = ["ConsoleFormatter", "ResultExporter"]
