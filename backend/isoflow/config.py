"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    isoflow_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Participant JSON served when a request carries no participants
    isoflow_data_path: str = ""

    # Similarity defaults
    similarity_threshold: float = 0.95
    dimension: str = "multidimensional"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
