from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATA_DIR: Path = Path("data")
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "standard"
    LOW_STOCK_SWEEP_INTERVAL_SECONDS: float = 3600.0
    AUTO_APPROVE_INTERVAL_SECONDS: float = 30.0
    AUTO_APPROVE_AFTER_SECONDS: float = 60.0
    LEDGER_RETRY_ATTEMPTS: int = 3
    BCRYPT_ROUNDS: int = 12

    class Config:
        env_prefix = "IMS_"
        env_file = ".env"
        extra = "ignore"

    @model_validator(mode="after")
    def validate_ranges(self):
        if self.LOG_FORMAT.lower() not in {"json", "standard"}:
            raise ValueError("LOG_FORMAT must be 'json' or 'standard'.")
        if self.LEDGER_RETRY_ATTEMPTS < 1:
            raise ValueError("LEDGER_RETRY_ATTEMPTS must be at least 1.")
        if not 4 <= self.BCRYPT_ROUNDS <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31.")
        if min(
            self.LOW_STOCK_SWEEP_INTERVAL_SECONDS,
            self.AUTO_APPROVE_INTERVAL_SECONDS,
        ) <= 0:
            raise ValueError("Sweep intervals must be positive.")
        if self.AUTO_APPROVE_AFTER_SECONDS < 0:
            raise ValueError("AUTO_APPROVE_AFTER_SECONDS cannot be negative.")
        return self


settings = Settings()
