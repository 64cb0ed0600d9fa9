from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    """Webshare Stremio Addon Settings.

    All settings can be overridden via environment variables or .env file.
    Environment variables should use uppercase names (e.g., DEFAULT_SORT_METHOD=filesize).

    Query fan-out:
        sequential = one search at a time with QUERY_DELAY between queries (provider friendly)
        concurrent = up to QUERY_CONCURRENCY searches in flight at once (lower latency)
    """
    addon_version: str = "1.4.0"
    public_url: str = "http://localhost:61613"
    webshare_api_base: str = "https://webshare.cz/api"
    request_timeout: float = 20.0

    tmdb_api_key: Optional[str] = None
    tmdb_api_base: str = "https://api.themoviedb.org/3"
    cinemeta_url: str = "https://v3-cinemeta.strem.io"

    # Search & ranking
    default_sort_method: str = "votes"
    movie_year_queries: bool = False  # also search "<title> <year>" for movies
    query_fan_out: str = "sequential"
    query_delay: float = 0.1
    query_concurrency: int = 3
    result_limit: int = 100
    year_tolerance: int = 1  # regional release dates differ by up to one year

    # Enrichment of ranked results with file_info details
    enrich_chunk_size: int = 15
    enrich_chunk_delay: float = 0.025
    enrichment_timeout: float = 25.0

    log_level: str = "INFO"
    json_logs: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def base_url(self) -> str:
        return self.public_url.rstrip("/")

    @property
    def host(self) -> str:
        """Host part of the public URL, used for stremio:// install links."""
        return self.base_url.split("://", 1)[-1]

settings = Settings()
