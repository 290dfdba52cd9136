from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "extra": "ignore",
        "env_prefix": "",
        "case_sensitive": False,
    }

    # AI extraction
    anthropic_api_key: str = ""
    extraction_model: str = "claude-sonnet-4-5-20250929"
    extraction_max_tokens: int = 4000
    max_image_base64_bytes: int = 5 * 1024 * 1024

    # App
    environment: str = "development"
    log_level: str = "INFO"
    log_file: str = ""
    use_mock_activities: bool = True


settings = Settings()
