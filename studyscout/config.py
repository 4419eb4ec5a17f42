from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # OpenRouter (checked when the pipeline is built, not at import)
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    default_model: str = "google/gemini-2.5-flash"
    openrouter_model: str = ""
    llm_timeout_seconds: float = 60.0
    llm_max_retries: int = 3
    llm_retry_base_delay_ms: int = 1000
    web_plugin_max_results: int = 5

    # Video search
    video_search_timeout_seconds: float = 10.0
    max_video_queries: int = 3
    max_results_per_query: int = 5

    # Article validation
    preview_timeout_seconds: float = 5.0
    max_articles: int = 5
    max_videos: int = 5

    # Raw web search fallback for article candidates
    article_web_search_fallback: bool = False
    search_provider: str = "brave"  # brave | tavily
    brave_api_key: str = ""
    tavily_api_key: str = ""
    search_fallback_to_tavily: bool = True

    # App
    cors_origins: str = "http://localhost:3000"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"
    log_dir: str = "logs"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",")]


settings = Settings()
