"""
Review report reason value object.
"""

from enum import Enum


class ReportReason(str, Enum):
    """Allowed reasons for reporting a review."""

    SPAM = "spam"
    OFFENSIVE = "offensive"
    SPOILERS = "spoilers"
    MISINFORMATION = "misinformation"
    OTHER = "other"
