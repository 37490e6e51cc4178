from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "viz-command-generator"
    env: str = "dev"
    log_level: str = "INFO"
    max_upload_mb: int = 20
    preview_max_rows: int = 200
    metadata_window_rows: int = 30
    metadata_sample_size: int = 5
    histogram_default_bins: int = 10
    histogram_max_bins: int = 1000
    date_parse_threshold: float = 0.8
    llm_provider: str = "openai_compatible"
    llm_base_url: str | None = None
    llm_api_key: str | None = None
    llm_model: str | None = None
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1000
    llm_timeout: float = 60.0

    class Config:
        env_file = ".env"


settings = Settings()
