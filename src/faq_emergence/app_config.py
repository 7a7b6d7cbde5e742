"""
FAQ Emergence Configuration

Manages loading from environment variables and default values.
"""

import os
from dataclasses import dataclass, field, asdict

from faq_emergence.domain.constants import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    DEFAULT_TOP_P,
    MAX_ATTEMPTS,
)
from faq_emergence.domain.value_objects import ParameterConfig


def _env_bool(key: str, default: bool) -> bool:
    """Convert an environment variable to bool"""
    val = os.environ.get(key)
    if val is None:
        return default
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int) -> int:
    """Convert an environment variable to int"""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"The value '{val}' of environment variable '{key}' cannot be converted to an integer.")


def _env_float(key: str, default: float) -> float:
    """Convert an environment variable to float"""
    val = os.environ.get(key)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        raise ValueError(f"The value '{val}' of environment variable '{key}' cannot be converted to a number.")


def _env_optional_float(key: str, default: float | None) -> float | None:
    """Convert an environment variable to float; empty or 0 disables the setting"""
    val = os.environ.get(key)
    if val is None:
        return default
    if not val.strip():
        return None
    parsed = _env_float(key, 0.0)
    return parsed if parsed > 0 else None


def _env_str(key: str, default: str) -> str:
    """Get an environment variable as a string"""
    return os.environ.get(key, default)


@dataclass
class ModelConfig:
    """Generation model configuration"""
    model_name: str = DEFAULT_MODEL
    timeout_seconds: int = 60
    max_retries: int = 3
    retry_delay_seconds: float = 1.0


@dataclass
class LearningConfig:
    """Adaptive learning loop configuration"""
    max_attempts: int = MAX_ATTEMPTS
    request_timeout_seconds: float | None = 120.0
    default_temperature: float = DEFAULT_TEMPERATURE
    default_max_tokens: int = DEFAULT_MAX_TOKENS
    default_top_p: float = DEFAULT_TOP_P

    def default_params(self) -> ParameterConfig:
        """Parameters used for the default attempt"""
        return ParameterConfig(
            temperature=self.default_temperature,
            max_tokens=self.default_max_tokens,
            top_p=self.default_top_p,
        )


@dataclass
class StoreConfig:
    """Parameter store / audit log database configuration"""
    database_url: str = "sqlite:///faq_emergence.db"
    echo: bool = False


@dataclass
class LMStudioConfig:
    """LMStudio (OpenAI-compatible local LLM) configuration"""
    base_url: str = "http://localhost:1234/v1"
    api_key: str = "lm-studio"


@dataclass
class AppConfig:
    """Overall application configuration"""
    model: ModelConfig = field(default_factory=ModelConfig)
    learning: LearningConfig = field(default_factory=LearningConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    lmstudio: LMStudioConfig = field(default_factory=LMStudioConfig)

    def to_dict(self) -> dict:
        """Convert to dictionary format"""
        return {"faq_config": asdict(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        """Create from dictionary (handles presence/absence of faq_config key)"""
        config_data = data.get("faq_config", data)
        return cls(
            model=ModelConfig(**config_data.get("model", {})),
            learning=LearningConfig(**config_data.get("learning", {})),
            store=StoreConfig(**config_data.get("store", {})),
            lmstudio=LMStudioConfig(**config_data.get("lmstudio", {})),
        )


def load_config() -> AppConfig:
    """
    Load configuration from environment variables

    Uses default values when environment variables are not set.

    Returns:
        AppConfig
    """
    model = ModelConfig(
        model_name=_env_str("FAQ_MODEL", DEFAULT_MODEL),
        timeout_seconds=_env_int("FAQ_TIMEOUT_SECONDS", 60),
        max_retries=_env_int("FAQ_MAX_RETRIES", 3),
        retry_delay_seconds=_env_float("FAQ_RETRY_DELAY_SECONDS", 1.0),
    )
    learning = LearningConfig(
        max_attempts=_env_int("FAQ_MAX_ATTEMPTS", MAX_ATTEMPTS),
        request_timeout_seconds=_env_optional_float("FAQ_REQUEST_TIMEOUT_SECONDS", 120.0),
        default_temperature=_env_float("FAQ_DEFAULT_TEMPERATURE", DEFAULT_TEMPERATURE),
        default_max_tokens=_env_int("FAQ_DEFAULT_MAX_TOKENS", DEFAULT_MAX_TOKENS),
        default_top_p=_env_float("FAQ_DEFAULT_TOP_P", DEFAULT_TOP_P),
    )
    store = StoreConfig(
        database_url=_env_str("DATABASE_URL", "sqlite:///faq_emergence.db"),
        echo=_env_bool("FAQ_DB_ECHO", False),
    )
    lmstudio = LMStudioConfig(
        base_url=_env_str("LMSTUDIO_BASE_URL", "http://localhost:1234/v1"),
        api_key=_env_str("LMSTUDIO_API_KEY", "lm-studio"),
    )
    return AppConfig(
        model=model,
        learning=learning,
        store=store,
        lmstudio=lmstudio,
    )
