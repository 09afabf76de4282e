from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Station Booking Engine"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_PROVIDER: str = "memory"  # "memory" | "json"
    DATA_DIR: str = "./data"

    DRAFT_TTL_SECONDS: int = 900  # 0 disables draft expiry
    RESERVATION_RECOVERY_TIMEOUT_SECONDS: int = 300

    REWARD_POLICY: str = "random"  # "random" | "always" | "never"
    REWARD_PROBABILITY: float = 0.5

    SEED_DEMO_DATA: bool = True


settings = Settings()
