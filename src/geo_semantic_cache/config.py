import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Cache
    cache_ttl_seconds: int = int(os.getenv("CACHE_TTL_SECONDS", "86400"))  # 24 hours
    similarity_threshold: float = float(os.getenv("SIMILARITY_THRESHOLD", "0.85"))
    distance_threshold_meters: float = float(os.getenv("DISTANCE_THRESHOLD_METERS", "500"))
    reverse_radius_meters: float = float(os.getenv("REVERSE_RADIUS_METERS", "100"))
    cache_max_entries: int = int(os.getenv("CACHE_MAX_ENTRIES", "1000"))
    # Serve exact normalized-key matches before the similarity scan
    exact_match_first: bool = os.getenv("EXACT_MATCH_FIRST", "false").lower() == "true"

    # Embedding (Ollama)
    ollama_base_url: str = os.getenv("OLLAMA_URL", "http://localhost:11434")
    embedding_model: str = os.getenv("EMBEDDING_MODEL", "nomic-embed-text")
    embedding_dimension: int = int(os.getenv("EMBEDDING_DIMENSION", "768"))
    embedding_timeout_seconds: float = float(os.getenv("EMBEDDING_TIMEOUT_SECONDS", "10"))

    # Geocoding (Nominatim)
    geocoder_base_url: str = os.getenv("GEOCODER_BASE_URL", "https://nominatim.openstreetmap.org")
    geocoder_user_agent: str = os.getenv("GEOCODER_USER_AGENT", "LocationAddressApp/1.0")
    geocoder_timeout_seconds: float = float(os.getenv("GEOCODER_TIMEOUT_SECONDS", "5"))
    geocoder_country_codes: str = os.getenv("GEOCODER_COUNTRY_CODES", "in")
    autocomplete_region: str = os.getenv("AUTOCOMPLETE_REGION", "Maharashtra")
    autocomplete_limit: int = int(os.getenv("AUTOCOMPLETE_LIMIT", "5"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "4000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not 0 <= self.similarity_threshold <= 1:
            raise ValueError("SIMILARITY_THRESHOLD must be between 0 and 1 for cosine similarity")

        if self.distance_threshold_meters < 0:
            raise ValueError("DISTANCE_THRESHOLD_METERS must not be negative")

        if self.reverse_radius_meters < 0:
            raise ValueError("REVERSE_RADIUS_METERS must not be negative")

        if self.cache_ttl_seconds <= 0:
            raise ValueError("CACHE_TTL_SECONDS must be positive")

        if self.cache_max_entries < 1:
            raise ValueError("CACHE_MAX_ENTRIES must be at least 1")

        if self.embedding_dimension < 1:
            raise ValueError(
                f"EMBEDDING_DIMENSION must be a positive integer, got {self.embedding_dimension}"
            )

        if self.autocomplete_limit < 1:
            raise ValueError("AUTOCOMPLETE_LIMIT must be at least 1")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
