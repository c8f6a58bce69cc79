from __future__ import annotations
from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional, List, Literal
from dotenv import load_dotenv

from kitchen.core.models import PLACEHOLDER_DESCRIPTION, PLACEHOLDER_NAME, RecipeDefaults

load_dotenv()  # populates os.environ from .env


class Settings(BaseSettings):
    # Upstream REST back-end (inventory, suggestions, shopping)
    backend_base_url: str = "http://localhost:4000/api"
    http_timeout_seconds: float = Field(30.0, gt=0)

    # Where raw suggestions come from: the back-end, OpenAI directly, or offline
    suggestion_source: Literal["http", "openai", "local"] = "http"

    # LLM
    openai_api_key: Optional[str] = None
    openai_model_suggest: str = "gpt-4o-mini"

    # Normalizer constants
    placeholder_name: str = PLACEHOLDER_NAME
    placeholder_description: str = PLACEHOLDER_DESCRIPTION
    fallback_missing_ingredients: List[str] = Field(default_factory=lambda: ["Salt", "Pepper", "Oil"])
    fallback_available_count: int = Field(3, ge=0)
    instruction_preview_limit: int = Field(150, ge=0)

    # Storage / logging
    data_dir: str = "data"
    log_level: str = "INFO"

    cors_allow_origins: List[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    def recipe_defaults(self) -> RecipeDefaults:
        return RecipeDefaults(
            placeholder_name=self.placeholder_name,
            placeholder_description=self.placeholder_description,
            fallback_missing=list(self.fallback_missing_ingredients),
            fallback_available_count=self.fallback_available_count,
            preview_limit=self.instruction_preview_limit,
        )
