"""
Configuració de l'Agent NPWP
"""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Configuració de l'aplicació"""

    # App
    app_name: str = "NPWP Agent"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # API
    api_key_enabled: bool = False
    api_key: Optional[str] = None

    # Limits
    max_batch_size: int = 100

    class Config:
        env_file = ".env"
        case_sensitive = False


# Singleton de configuració
settings = Settings()
