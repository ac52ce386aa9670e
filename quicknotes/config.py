"""
Configuration for QuickNotes.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Values shipped in example .env files; treated as "not configured"
PLACEHOLDER_PREFIX = "your_"

LOCAL_INFERENCE_ALIASES = ("llama", "direct-llama")


def is_configured(value: str | None) -> bool:
    """
    Check whether a credential or endpoint value is usable.

    Args:
        value: Raw configuration value

    Returns:
        False for None, blank strings and placeholder values
    """
    if value is None:
        return False
    value = value.strip()
    return bool(value) and not value.lower().startswith(PLACEHOLDER_PREFIX)


class SQLiteConfig(BaseModel):
    """Embedded-file store configuration."""

    path: str = "./notes.db"


class PostgresConfig(BaseModel):
    """Networked PostgreSQL configuration."""

    host: str = "localhost"
    port: int = 5432
    user: str = "postgres"
    password: str = ""
    database: str = "notes_db"
    min_pool_size: int = 1
    max_pool_size: int = 10
    timeout: float = 10.0


class SupabaseConfig(BaseModel):
    """Managed cloud (Supabase PostgREST) configuration."""

    url: str | None = None
    key: str | None = None
    table: str = "notes"
    timeout: float = 10.0


class StorageConfig(BaseModel):
    """Storage backend selection and per-backend parameters."""

    backend: str = "sqlite"  # memory, sqlite, postgres, supabase
    sqlite: SQLiteConfig = Field(default_factory=SQLiteConfig)
    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    supabase: SupabaseConfig = Field(default_factory=SupabaseConfig)


class DeploymentConfig(BaseModel):
    """Deployment context flags."""

    # Explicitly mark the environment as having no durable writable disk
    stateless: bool = False


class LocalInferenceConfig(BaseModel):
    """In-process summarization pipeline configuration."""

    enabled: bool = False
    model: str = "sshleifer/distilbart-cnn-6-6"
    max_length: int = 50
    min_length: int = 10


class OllamaConfig(BaseModel):
    """Self-hosted Ollama endpoint configuration."""

    base_url: str | None = None
    model: str | None = None
    timeout: float = 30.0


class HostedLLMConfig(BaseModel):
    """Hosted chat-completions API configuration."""

    api_key: str | None = None
    model: str = "gpt-4o-mini"
    base_url: str | None = None
    max_tokens: int = 150
    timeout: float = 30.0


class GroqConfig(HostedLLMConfig):
    """Groq configuration (OpenAI-compatible endpoint)."""

    model: str = "llama-3.1-8b-instant"
    base_url: str | None = "https://api.groq.com/openai/v1"


class HuggingFaceConfig(BaseModel):
    """Hugging Face inference configuration (hosted API or self-hosted endpoint)."""

    api_key: str | None = None
    endpoint_url: str | None = None
    api_base: str = "https://api-inference.huggingface.co/models"
    model: str = "mistralai/Mistral-7B-Instruct-v0.2"
    max_new_tokens: int = 100
    timeout: float = 30.0


class ProvidersConfig(BaseModel):
    """Enrichment provider configuration."""

    preferred: str | None = None
    local: LocalInferenceConfig = Field(default_factory=LocalInferenceConfig)
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    groq: GroqConfig = Field(default_factory=GroqConfig)
    openai: HostedLLMConfig = Field(default_factory=HostedLLMConfig)
    huggingface: HuggingFaceConfig = Field(default_factory=HuggingFaceConfig)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = False
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    deployment: DeploymentConfig = Field(default_factory=DeploymentConfig)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in working directory)

        Returns:
            Config instance

        Environment variables:
            NOTES_DB_TYPE: Storage backend (memory, sqlite, postgres, supabase)
            NOTES_DB_FILE: SQLite database path
            NOTES_PG_HOST / NOTES_PG_PORT / NOTES_PG_USER / NOTES_PG_PASSWORD / NOTES_PG_DATABASE
            SUPABASE_URL / SUPABASE_ANON_KEY: Supabase project URL and key
            NOTES_STATELESS: Force the in-memory store instead of SQLite
            AI_PROVIDER: Preferred enrichment provider name
            NOTES_LOCAL_INFERENCE: Enable the in-process summarization pipeline
            OLLAMA_BASE_URL / OLLAMA_MODEL: Self-hosted Ollama endpoint
            GROQ_API_KEY / OPENAI_API_KEY: Hosted API credentials
            HUGGINGFACE_API_KEY / HUGGINGFACE_ENDPOINT_URL: Hugging Face inference
            NOTES_LOG_LEVEL: Log level
        """
        # Load .env file if provided or exists
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None:
                return default
            # If value is empty string, return default
            if value == "":
                return default
            # Convert boolean strings
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            # Convert numeric strings
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        preferred = get_env("AI_PROVIDER")
        local_enabled = get_env("NOTES_LOCAL_INFERENCE", False) or (
            preferred is not None and preferred.strip().lower() in LOCAL_INFERENCE_ALIASES
        )
        provider_timeout = get_env("NOTES_PROVIDER_TIMEOUT", 30.0)

        return cls(
            storage=StorageConfig(
                backend=get_env("NOTES_DB_TYPE", "sqlite"),
                sqlite=SQLiteConfig(path=get_env("NOTES_DB_FILE", "./notes.db")),
                postgres=PostgresConfig(
                    host=get_env("NOTES_PG_HOST", "localhost"),
                    port=get_env("NOTES_PG_PORT", 5432),
                    user=get_env("NOTES_PG_USER", "postgres"),
                    password=get_env("NOTES_PG_PASSWORD", ""),
                    database=get_env("NOTES_PG_DATABASE", "notes_db"),
                    min_pool_size=get_env("NOTES_PG_MIN_POOL", 1),
                    max_pool_size=get_env("NOTES_PG_MAX_POOL", 10),
                ),
                supabase=SupabaseConfig(
                    url=get_env("SUPABASE_URL"),
                    key=get_env("SUPABASE_ANON_KEY"),
                    table=get_env("NOTES_SUPABASE_TABLE", "notes"),
                ),
            ),
            deployment=DeploymentConfig(
                stateless=get_env("NOTES_STATELESS", False),
            ),
            providers=ProvidersConfig(
                preferred=preferred,
                local=LocalInferenceConfig(
                    enabled=local_enabled,
                    model=get_env("NOTES_LOCAL_MODEL", "sshleifer/distilbart-cnn-6-6"),
                ),
                ollama=OllamaConfig(
                    base_url=get_env("OLLAMA_BASE_URL"),
                    model=get_env("OLLAMA_MODEL"),
                    timeout=provider_timeout,
                ),
                groq=GroqConfig(
                    api_key=get_env("GROQ_API_KEY"),
                    model=get_env("GROQ_MODEL", "llama-3.1-8b-instant"),
                    base_url=get_env("GROQ_BASE_URL", "https://api.groq.com/openai/v1"),
                    timeout=provider_timeout,
                ),
                openai=HostedLLMConfig(
                    api_key=get_env("OPENAI_API_KEY"),
                    model=get_env("OPENAI_MODEL", "gpt-4o-mini"),
                    base_url=get_env("OPENAI_BASE_URL"),
                    timeout=provider_timeout,
                ),
                huggingface=HuggingFaceConfig(
                    api_key=get_env("HUGGINGFACE_API_KEY"),
                    endpoint_url=get_env("HUGGINGFACE_ENDPOINT_URL"),
                    model=get_env("HUGGINGFACE_MODEL", "mistralai/Mistral-7B-Instruct-v0.2"),
                    timeout=provider_timeout,
                ),
            ),
            logging=LoggingConfig(
                level=get_env("NOTES_LOG_LEVEL", "INFO"),
                log_to_file=get_env("NOTES_LOG_TO_FILE", False),
                log_dir=get_env("NOTES_LOG_DIR", "logs"),
                file_rotation=get_env("NOTES_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("NOTES_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("NOTES_LOG_COMPRESSION", "zip"),
                serialize=get_env("NOTES_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
