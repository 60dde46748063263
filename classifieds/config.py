"""Configuration management for classifieds."""

from dataclasses import dataclass, field
from pathlib import Path

from classifieds.exceptions import ConfigurationError


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class GeneratorConfig:
    """Demo marketplace generation settings."""

    num_users: int = 10
    ads_per_user: int = 2
    proposals_per_ad: int = 3
    sale_ratio: float = 0.5
    locale: str = "en_US"


@dataclass
class MarketplaceConfig:
    """Main configuration for classifieds."""

    output: OutputConfig = field(default_factory=OutputConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    id_start: int = 1
    default_highlight_days: int = 7
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    def __post_init__(self) -> None:
        if self.id_start < 0:
            raise ConfigurationError(f"id_start must be non-negative, got {self.id_start}")
        if self.default_highlight_days < 0:
            raise ConfigurationError(
                f"default_highlight_days must be non-negative, got {self.default_highlight_days}"
            )
        if self.log_format not in ("standard", "json"):
            raise ConfigurationError(f"Unknown log format: {self.log_format}")
        if not 0.0 <= self.generator.sale_ratio <= 1.0:
            raise ConfigurationError(
                f"sale_ratio must be between 0 and 1, got {self.generator.sale_ratio}"
            )

    @classmethod
    def from_env(cls) -> "MarketplaceConfig":
        """Create config from environment variables."""
        import os

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        generator = GeneratorConfig(
            num_users=_int_env("NUM_USERS", "10"),
            ads_per_user=_int_env("ADS_PER_USER", "2"),
            proposals_per_ad=_int_env("PROPOSALS_PER_AD", "3"),
            locale=os.getenv("FAKER_LOCALE", "en_US"),
        )

        return cls(
            output=output,
            generator=generator,
            id_start=_int_env("CLASSIFIEDS_ID_START", "1"),
            default_highlight_days=_int_env("DEFAULT_HIGHLIGHT_DAYS", "7"),
            seed=_int_env("SEED", "0") if os.getenv("SEED") else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )


def _int_env(name: str, default: str) -> int:
    import os

    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
