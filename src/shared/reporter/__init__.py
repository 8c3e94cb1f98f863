"""
Logging utilities shared by CineShare components.
"""

from shared.reporter.emojis import Emoji
from shared.reporter.system_reporter import SystemReporter

__all__ = [
    "Emoji",
    "SystemReporter",
]
