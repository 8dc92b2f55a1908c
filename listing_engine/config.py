"""Configuration management for listing-engine."""

from dataclasses import dataclass, field
from pathlib import Path

from listing_engine.exceptions import ConfigurationError

BACKENDS = ("memory", "postgres")


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "listings"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class MemoryConfig:
    """In-memory (mock data) backend configuration.

    ``seed_path`` points at a JSON file of listings and saved records in the
    mock-data layout. When it is unset, ``generate_count`` listings are
    produced with the Faker based generator instead.
    """

    seed_path: Path | None = None
    generate_count: int = 0
    latency_ms: float = 0.0


@dataclass
class ListingEngineConfig:
    """Main configuration for listing-engine."""

    backend: str = "memory"
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    def validate(self) -> None:
        """Check the settings that cannot be checked field by field."""
        if self.backend not in BACKENDS:
            raise ConfigurationError(
                f"Unknown backend {self.backend!r}; expected one of {', '.join(BACKENDS)}"
            )
        if self.memory.latency_ms < 0:
            raise ConfigurationError("latency_ms must not be negative")
        if self.memory.generate_count < 0:
            raise ConfigurationError("generate_count must not be negative")

    @classmethod
    def from_env(cls) -> "ListingEngineConfig":
        """Create config from environment variables."""
        import os

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "listings"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
        )

        seed_path = os.getenv("LISTINGS_SEED_PATH")
        memory = MemoryConfig(
            seed_path=Path(seed_path) if seed_path else None,
            generate_count=int(os.getenv("LISTINGS_GENERATE_COUNT", "0")),
            latency_ms=float(os.getenv("LISTINGS_LATENCY_MS", "0")),
        )

        return cls(
            backend=os.getenv("LISTINGS_BACKEND", "memory").lower(),
            postgres=postgres,
            memory=memory,
            seed=int(os.getenv("SEED")) if os.getenv("SEED") else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
