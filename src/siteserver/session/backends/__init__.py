from .redis_backend import RedisBackend

__all__ = ["RedisBackend"]
