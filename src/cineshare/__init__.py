"""
CineShare realtime service.

Token-authenticated notifications, presence, direct messaging and
activity feed channels for the CineShare movie-review platform.
"""

__version__ = "0.1.0"
