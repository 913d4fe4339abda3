"""Configuration management for estate-crm."""

from dataclasses import dataclass, field
from pathlib import Path

from estate_crm.exceptions import ConfigurationError

STORAGE_BACKENDS = ("memory", "json", "postgres")


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "estate_crm"
    user: str = "postgres"
    password: str = "postgres"
    table: str = "crm_storage"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class StorageConfig:
    """Local persistence configuration."""

    backend: str = "json"
    data_dir: Path = field(default_factory=lambda: Path("data"))
    pretty_json: bool = False

    def __post_init__(self) -> None:
        if self.backend not in STORAGE_BACKENDS:
            raise ConfigurationError(
                f"Unknown storage backend {self.backend!r}; expected one of {', '.join(STORAGE_BACKENDS)}"
            )


@dataclass
class RemoteConfig:
    """Remote API configuration. Disabled when ``base_url`` is unset."""

    base_url: str | None = None
    token: str | None = None
    timeout: float = 10.0

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)


@dataclass
class SeedConfig:
    """Sizes used when seeding an empty store."""

    num_properties: int = 40
    num_clients: int = 30
    num_users: int = 4
    contracts_per_owner: tuple[int, int] = (0, 2)
    payments_per_contract: int = 6
    visits_per_client: tuple[int, int] = (0, 3)


@dataclass
class CrmConfig:
    """Main configuration for estate-crm."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    seed_sizes: SeedConfig = field(default_factory=SeedConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "CrmConfig":
        """Create config from environment variables."""
        import os

        storage = StorageConfig(
            backend=os.getenv("CRM_STORAGE_BACKEND", "json"),
            data_dir=Path(os.getenv("CRM_DATA_DIR", "data")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        postgres = PostgresConfig(
            host=os.getenv("POSTGRES_HOST", "localhost"),
            port=int(os.getenv("POSTGRES_PORT", "5432")),
            database=os.getenv("POSTGRES_DB", "estate_crm"),
            user=os.getenv("POSTGRES_USER", "postgres"),
            password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            table=os.getenv("POSTGRES_TABLE", "crm_storage"),
        )

        try:
            timeout = float(os.getenv("CRM_API_TIMEOUT", "10"))
        except ValueError as e:
            raise ConfigurationError(f"CRM_API_TIMEOUT must be a number: {e}") from e

        remote = RemoteConfig(
            base_url=os.getenv("CRM_API_URL") or None,
            token=os.getenv("CRM_API_TOKEN") or None,
            timeout=timeout,
        )

        return cls(
            storage=storage,
            postgres=postgres,
            remote=remote,
            seed=int(os.getenv("SEED")) if os.getenv("SEED") else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
