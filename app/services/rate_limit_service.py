"""Fixed-window rate limiting on Upstash Redis."""

import logging
from typing import Dict, NamedTuple, Optional
from pydantic import BaseModel
from upstash_ratelimit import FixedWindow
from upstash_ratelimit.asyncio import Ratelimit
from upstash_redis.asyncio import Redis
from app.config.settings import Settings
from app.utils.exceptions import RateLimited

logger = logging.getLogger(__name__)

KEY_PREFIX = "tavily-chatbot:ratelimit"


class Window(NamedTuple):
    requests: int
    seconds: int


LIMITS: Dict[str, Window] = {
    "create": Window(20, 24 * 60 * 60),
    "query": Window(100, 60 * 60),
    "search": Window(50, 60 * 60),
    "research": Window(10, 60 * 60),
}


class RateLimitResult(BaseModel):
    """Outcome of one limiter check. Quota fields are unset when limiting is off."""

    success: bool
    limit: Optional[int] = None
    remaining: Optional[int] = None
    reset: Optional[int] = None


class RateLimiter:
    """One Upstash ``Ratelimit`` per limit kind.

    When Upstash is not configured every request is allowed. When Upstash
    cannot be reached the request is allowed and the failure is logged.
    """

    def __init__(self, limiters: Dict[str, Ratelimit]):
        self.limiters = limiters

    @classmethod
    def from_settings(cls, settings: Settings) -> "RateLimiter":
        if not (settings.upstash_redis_rest_url and settings.upstash_redis_rest_token):
            logger.info("Upstash Redis not configured, rate limiting disabled")
            return cls({})

        redis = Redis(url=settings.upstash_redis_rest_url, token=settings.upstash_redis_rest_token)
        return cls(
            {
                kind: Ratelimit(
                    redis=redis,
                    limiter=FixedWindow(max_requests=window.requests, window=window.seconds),
                    prefix=f"{KEY_PREFIX}:{kind}",
                )
                for kind, window in LIMITS.items()
            }
        )

    @property
    def enabled(self) -> bool:
        return bool(self.limiters)

    async def check(self, kind: str, identifier: str) -> RateLimitResult:
        limiter = self.limiters.get(kind)
        if limiter is None:
            return RateLimitResult(success=True)

        try:
            response = await limiter.limit(identifier)
        except Exception as e:
            logger.warning(f"Rate limit check failed for {kind}: {str(e)}")
            return RateLimitResult(success=True)

        # Upstash reports the reset as epoch seconds; clients expect milliseconds.
        result = RateLimitResult(
            success=response.allowed,
            limit=response.limit,
            remaining=max(0, response.remaining),
            reset=int(response.reset * 1000),
        )
        if not result.success:
            logger.info(f"Rate limit exceeded for {kind}:{identifier}")
        return result

    async def enforce(self, kind: str, identifier: str) -> None:
        """
        Count one request.

        Raises:
            RateLimited: The identifier is over its quota for ``kind``
        """
        result = await self.check(kind, identifier)
        if not result.success:
            raise RateLimited(
                "Rate limit exceeded",
                limit=result.limit,
                remaining=result.remaining,
                reset=result.reset,
            )
