"""Public site statistics derived from published content."""

from typing import Dict

from loguru import logger

from ..cache import PREFIX_STATS, CacheManager, cache_manager
from ..config import settings
from ..repositories.content_repository import ContentRepository

STATS_KEY = f"{PREFIX_STATS}site"

EMPTY_STATS = {
    "team_count": 0,
    "clients_count": 0,
    "projects_count": 0,
    "cities_count": 0,
}


class StatisticsService:
    """Counts of published team members, clients, projects and cities."""

    def __init__(self, content_repo: ContentRepository, cache: CacheManager = cache_manager):
        self.content_repo = content_repo
        self.cache = cache

    async def get_statistics(self) -> Dict[str, int]:
        cached = await self.cache.get(STATS_KEY)
        if cached is not None:
            return cached

        try:
            stats = await self.calculate()
        except Exception as e:
            logger.error(f"Error calculating statistics: {e}")
            return dict(EMPTY_STATS)

        await self.cache.set(STATS_KEY, stats, ttl=settings.STATS_CACHE_TTL)
        return stats

    async def calculate(self) -> Dict[str, int]:
        repo = self.content_repo
        cities = set()
        for content_type in ("projects", "team"):
            for location in await repo.field_values(content_type, "location", status="published"):
                if isinstance(location, str) and location.strip():
                    cities.add(location.strip())

        return {
            "team_count": await repo.count_by_type("team", status="published"),
            "clients_count": await repo.count_by_type("clients", status="published"),
            "projects_count": await repo.count_by_type("projects", status="published"),
            "cities_count": len(cities),
        }
