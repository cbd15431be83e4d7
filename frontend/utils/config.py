"""
Client configuration.

Each remote service has its own base URL so they can be deployed apart;
by default they all point at the single local FastAPI app.
"""

from dataclasses import dataclass
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SC_", env_file=".env", extra="ignore")

    auth_service_url: str = "http://localhost:8000"
    profile_service_url: str = "http://localhost:8000"
    expense_service_url: str = "http://localhost:8000"
    planner_service_url: str = "http://localhost:8000"
    feed_service_url: str = "http://localhost:8000"

    local_store_path: str = "data/local_store.db"
    request_timeout: float = 10.0
    sync_workers: int = 4


@dataclass(frozen=True)
class ServiceEndpoints:
    """Resolved `/api` roots per service"""
    auth: str
    profile: str
    expenses: str
    planner: str
    feed: str

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "ServiceEndpoints":
        def api_root(url: str) -> str:
            return url.rstrip("/") + "/api"

        return cls(
            auth=api_root(settings.auth_service_url),
            profile=api_root(settings.profile_service_url),
            expenses=api_root(settings.expense_service_url),
            planner=api_root(settings.planner_service_url),
            feed=api_root(settings.feed_service_url),
        )

    def for_collection(self, collection: str) -> str:
        """Base URL serving a record collection"""
        if collection == "expenses":
            return self.expenses
        if collection in ("feed",):
            return self.feed
        # tasks, events, moods and diary all live on the planner service
        return self.planner


@lru_cache()
def get_client_settings() -> ClientSettings:
    return ClientSettings()
