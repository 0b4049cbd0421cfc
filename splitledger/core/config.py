from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # API Settings
    PROJECT_NAME: str = "SplitLedger API"
    API_V1_STR: str = "/api/v1"
    PROJECT_VERSION: str = "0.1.0"
    DESCRIPTION: str = "Shared group expenses, balances and settlements API"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # MongoDB
    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "splitledger"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # JWT (tokens are issued by the identity provider, only verified here)
    JWT_SECRET: str = "change-this-in-production"
    JWT_ALGORITHM: str = "HS256"

    # Money
    DEFAULT_CURRENCY_CODE: str = "USD"
    DEFAULT_CURRENCY_SYMBOL: str = "$"

    # Balances & settlements
    NET_SETTLEMENTS_IN_BALANCES: bool = True
    SETTLEMENT_ACK_DELAY_SECONDS: float = 1.5

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env"
    )

settings = Settings()
