import json
import logging
import zlib
from typing import Optional, Any
import redis
from .config import get_settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "searchpulse"
TRENDING_MAX_LIMIT = 20

def trending_key(limit: int) -> str:
    return f"{KEY_PREFIX}:metrics:trending:l{limit}"

def tmdb_key(*parts: Any) -> str:
    return ":".join([KEY_PREFIX, "tmdb", *[str(p) for p in parts]])

class CacheService:
    """Redis JSON cache. Every Redis failure is treated as a miss."""

    def __init__(self, url: Optional[str] = None, compress: bool = True):
        settings = get_settings()
        self.redis = redis.Redis.from_url(url or settings.REDIS_URL, decode_responses=False)
        self.compress = compress

    def get_json(self, key: str) -> Optional[Any]:
        try:
            data = self.redis.get(key)
        except redis.RedisError as e:
            logger.debug(f"Cache get failed for {key}: {str(e)}")
            return None
        if data is None:
            return None
        if self.compress:
            try:
                data = zlib.decompress(data)
            except zlib.error:
                pass
        try:
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            return json.loads(data)
        except (UnicodeDecodeError, ValueError):
            return None

    def set_json(self, key: str, value: Any, ttl_seconds: int) -> bool:
        raw = json.dumps(value, ensure_ascii=False, default=str).encode("utf-8")
        payload = zlib.compress(raw) if self.compress else raw
        try:
            self.redis.setex(key, ttl_seconds, payload)
        except redis.RedisError as e:
            logger.debug(f"Cache set failed for {key}: {str(e)}")
            return False
        return True

    def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        try:
            return int(self.redis.delete(*keys))
        except redis.RedisError as e:
            logger.debug(f"Cache delete failed for {len(keys)} keys: {str(e)}")
            return 0
