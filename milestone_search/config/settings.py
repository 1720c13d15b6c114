
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    supabase_url: str = "http://localhost:54321"
    supabase_key: str = ""
    supabase_timeout: float = 30.0

    embedding_provider: str = "openai"  # "openai" | "local"
    openai_api_key: str = ""
    openai_base_url: str | None = None
    embedding_model: str = "text-embedding-3-small"
    embedding_dim: int = 1536

    # Defaults for newly initialized projects
    chunk_size: int = 1000
    chunk_overlap: int = 200

    search_match_threshold: float = 0.7
    search_match_count: int = 10
    similar_records_threshold: float = 0.8
    similar_records_count: int = 5

    hybrid_text_weight: float = 0.3
    hybrid_vector_weight: float = 0.7

    # Chat context retrieval
    context_match_threshold: float = 0.6
    context_match_count: int = 5
    context_history_messages: int = 4
    context_terms_per_message: int = 5

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
