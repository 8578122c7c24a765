"""
Core configuration module for the Maturity Optimizer service.

This module manages all application settings using Pydantic Settings,
providing type-safe configuration with environment variable support.
"""

from typing import List, Dict, Any, Optional
from datetime import timedelta
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.optimizer.core.config import (
    OptimizerConfig,
    EvolutionParameters,
    LoggingConfig,
)


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables of the same
    name (case-insensitive) or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    app_name: str = "Maturity Optimizer"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # API settings
    api_v1_prefix: str = "/api/v1"
    api_docs_url: str = "/api/docs"
    api_redoc_url: str = "/api/redoc"
    api_openapi_url: str = "/api/openapi.json"

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # Logfire settings
    logfire_token: str = ""
    logfire_project_name: str = "maturity-optimizer"
    logfire_service_name: str = "maturity-optimizer-api"
    logfire_environment: str = "development"

    # CORS settings, comma-separated
    cors_origins: str = "*"

    # Optimizer defaults for API requests
    optimizer_population_size: int = Field(default=100, ge=1)
    optimizer_generations: int = Field(default=1000, ge=1)
    optimizer_mutation_rate: float = Field(default=0.02, ge=0.0, le=1.0)
    optimizer_crossover_rate: float = Field(default=0.9, ge=0.0, le=1.0)
    optimizer_elite_size: int = Field(default=2, ge=1)
    optimizer_max_seconds: Optional[float] = Field(default=60.0, gt=0)
    optimizer_results_dir: Optional[str] = None

    # Request limits; each optimization occupies one worker thread until it finishes
    max_population_size: int = Field(default=1000, ge=1)
    max_generations: int = Field(default=100000, ge=1)

    @field_validator("environment", "logfire_environment")
    def normalize_environment(cls, v):
        return v.strip().lower()

    @property
    def cors_origin_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def get_logfire_settings(self) -> Dict[str, Any]:
        """Get Logfire configuration."""
        return {
            "token": self.logfire_token or None,
            "service_name": self.logfire_service_name,
            "environment": self.logfire_environment,
            "send_to_logfire": "if-token-present",
        }

    def optimizer_config(self, **evolution_overrides: Any) -> OptimizerConfig:
        """Default optimizer configuration, with optional evolution overrides."""
        evolution = {
            "population_size": self.optimizer_population_size,
            "generations": self.optimizer_generations,
            "mutation_rate": self.optimizer_mutation_rate,
            "crossover_rate": self.optimizer_crossover_rate,
            "elite_size": self.optimizer_elite_size,
        }
        evolution.update({k: v for k, v in evolution_overrides.items() if v is not None})
        return OptimizerConfig(
            evolution=EvolutionParameters(**evolution),
            logging=LoggingConfig(log_level="DEBUG" if self.debug else "INFO"),
            max_runtime=timedelta(seconds=self.optimizer_max_seconds) if self.optimizer_max_seconds else None,
            results_dir=self.optimizer_results_dir,
        )

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


# Create global settings instance
settings = Settings()


# Export commonly used settings
DEBUG = settings.debug
ENVIRONMENT = settings.environment
