"""Configuration management using Pydantic."""

from pathlib import Path
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AISettings(BaseSettings):
    """Provider credentials and request settings.

    Read from the bare environment variables the providers document
    (GROQ_API_KEY, OPENROUTER_API_KEY, GROK_API_KEY, OPENAI_API_KEY),
    plus AI_MODEL and APP_URL.
    """

    groq_api_key: Optional[str] = None
    openrouter_api_key: Optional[str] = None
    grok_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None

    ai_model: Optional[str] = None  # overrides every provider's default model
    app_url: str = "http://localhost:5173"
    request_timeout: float = Field(default=30.0, gt=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=()
    )


class SearchConfig(BaseModel):
    """Configuration for ranking and context assembly."""
    max_results: int = 10
    recency_days: float = 7
    fallback_count: int = 10
    max_candidates: int = 100
    context_chars: int = 500
    source_count: int = 5


class Config(BaseSettings):
    """Main configuration class."""

    # Component configurations
    ai: AISettings = Field(default_factory=AISettings)
    search: SearchConfig = Field(default_factory=SearchConfig)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    # Development
    debug: bool = False

    model_config = SettingsConfigDict(
        env_prefix="HUB_",
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=()
    )

    @classmethod
    def load_from_file(cls, config_path: Path) -> "Config":
        """Load configuration from a file."""
        if config_path.suffix.lower() == '.json':
            import json
            with open(config_path) as f:
                data = json.load(f)
        elif config_path.suffix.lower() in ['.yaml', '.yml']:
            import yaml
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        else:
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")

        if 'ai' in data:
            data['ai'] = AISettings(**data['ai'])

        return cls(**data)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a file. Credentials are never written."""
        config_path.parent.mkdir(parents=True, exist_ok=True)
        data = self.safe_dump()

        if config_path.suffix.lower() == '.json':
            import json
            with open(config_path, 'w') as f:
                json.dump(data, f, indent=2, default=str)
        elif config_path.suffix.lower() in ['.yaml', '.yml']:
            import yaml
            with open(config_path, 'w') as f:
                yaml.dump(data, f, default_flow_style=False)
        else:
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")

    def safe_dump(self) -> Dict[str, Any]:
        """Dump the configuration with credentials removed."""
        return self.model_dump(
            mode='json',
            exclude={'ai': {'groq_api_key', 'openrouter_api_key', 'grok_api_key', 'openai_api_key'}}
        )
