"""
Shared utilities for CineShare services.
"""
