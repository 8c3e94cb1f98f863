"""
Dependency injection.
"""

from cineshare.di.container import Container

__all__ = ["Container"]
