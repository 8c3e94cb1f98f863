"""
Domain service interfaces.
"""

from cineshare.domain.services.i_presence_mirror import IPresenceMirror

__all__ = ["IPresenceMirror"]
