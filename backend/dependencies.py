"""
Dependency injection for FastAPI endpoints.

Provides singleton instances of Config, the EduSphere client and the user
directory, and a per-request DashboardAggregator.

Pattern: **Dependency Injection** - FastAPI's Depends() lets tests swap any
of these through app.dependency_overrides without touching the routes.
"""

from functools import lru_cache

from coursedash.core.config import Config
from coursedash.core.users import UserDirectory
from coursedash.dashboard.aggregator import DashboardAggregator
from coursedash.integrations.edusphere import EduSphereClient


@lru_cache()
def get_config() -> Config:
    """
    Get cached Config instance.

    lru_cache ensures we only create one Config instance
    for the lifetime of the application (singleton pattern).
    """
    return Config()


@lru_cache()
def get_edusphere_client() -> EduSphereClient:
    """Get cached EduSphere client; it holds no per-request state."""
    return EduSphereClient.from_config(get_config())


@lru_cache()
def get_user_directory() -> UserDirectory:
    """
    Get cached UserDirectory.

    The SQLite database opens a connection per query, so one instance
    is enough.
    """
    config = get_config()
    return UserDirectory(config.get_database_path())


def get_dashboard_aggregator() -> DashboardAggregator:
    """
    Get DashboardAggregator for dashboard data.

    Creates a new aggregator per request so no request state is shared,
    while reusing the client and config singletons.
    """
    client = get_edusphere_client()
    return DashboardAggregator(client, client, client, get_config())
