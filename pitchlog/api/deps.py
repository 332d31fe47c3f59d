"""
Shared route dependencies.
"""
from pitchlog.core.config import settings
from pitchlog.services.analytics.cache import AnalyticsCache

analytics_cache = AnalyticsCache(max_entries=settings.ANALYTICS_CACHE_SIZE)


def get_analytics_cache() -> AnalyticsCache:
    """Process-wide analytics cache; tests override it with a fresh instance."""
    return analytics_cache
