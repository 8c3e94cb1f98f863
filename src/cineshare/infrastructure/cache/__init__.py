"""
Cache and shared-state infrastructure.
"""

from cineshare.infrastructure.cache.redis_presence_mirror import RedisPresenceMirror

__all__ = ["RedisPresenceMirror"]
