# mathdoc/config.py
import logging
import os
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.yaml"
API_KEY_ENV_VAR = "GEMINI_API_KEY"

# Tried in order of priority, newer/faster models first.
MODELS_TO_TRY = [
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-2.0-flash"
]


class GeminiSettings(BaseModel):
    api_key: Optional[str] = None
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    models: List[str] = Field(default_factory=lambda: list(MODELS_TO_TRY))
    timeout: float = 120.0


class DocumentSettings(BaseModel):
    default_file_name: str = "Math_Questions"
    default_table_name: str = "Converted Data"


class Settings(BaseModel):
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    document: DocumentSettings = Field(default_factory=DocumentSettings)


def load_settings(path: str = CONFIG_FILE) -> Settings:
    """
    Loads settings from a YAML file, falling back to the hard-coded defaults
    when the file is missing or malformed. ``GEMINI_API_KEY`` overrides the
    key from the file.

    Args:
        path (str): Path of the YAML configuration file.

    Returns:
        Settings: The validated settings.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            settings = Settings.model_validate(yaml.safe_load(f) or {})
        logger.info("Loaded configuration from %s", path)
    except (FileNotFoundError, yaml.YAMLError, ValidationError) as e:
        logger.warning("%s not found or invalid (%s), using built-in defaults.", path, type(e).__name__)
        settings = Settings()

    api_key = os.environ.get(API_KEY_ENV_VAR)
    if api_key:
        settings.gemini.api_key = api_key
    return settings
