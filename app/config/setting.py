from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "transactions-reporting"
    environment: str = "development"
    allowed_origins: str = "*"
    log_level: str = "INFO"

    @property
    def parsed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # Server settings
    host: str = "0.0.0.0"
    port: int = 3000

    # MongoDB settings
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "transactions_db"
    mongo_collection: str = "transactions"

    # Seed settings
    seed_url: str = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"
    seed_skip_if_populated: bool = False

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


settings = Settings()
