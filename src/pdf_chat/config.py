"""Shared configuration loaded from environment / ``.env``."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # LLM (local Ollama server)
    ollama_base_url: str = Field(
        default="http://localhost:11435",
        description="Base URL of the locally running Ollama server.",
    )
    llm_model_name: str = Field(default="severian/anima", description="Ollama chat model name")
    llm_temperature: float = 0.5

    # Embedding
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    embedding_batch_size: int = 64
    normalize_embeddings: bool = True

    # Chunking
    chunk_size: int = 500
    chunk_overlap: int = 50
    chunk_strategy: Literal["fixed", "recursive"] = "fixed"

    # Retrieval
    retrieval_k: int = Field(default=4, description="Number of segments placed in the prompt context")

    # Logging
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton: import `settings` wherever needed.
settings = Settings()
