from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration with environment variable support"""

    # App
    app_name: str = "IRRS Encounter Bridge"
    debug: bool = False
    log_level: str = "INFO"

    # Output
    xml_pretty_print: bool = False  # indent XML bundles returned by the API

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
