from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="BSH_", extra="ignore")

    # Paths
    db_path: Path = Path("data") / "bsh.db"
    rules_file: Path | None = None          # JSON rules configuration (backgrounds table)

    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None
    enable_color: bool = True

    # Dice
    dice_seed: int | None = None            # Fixed seed for reproducible sessions

settings = Settings()
