"""
Configuration loading for the deadline calculator.
"""

from deadline_calculator.config.manager import ConfigManager

__all__ = ["ConfigManager"]
