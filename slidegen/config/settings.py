"""
Configuration management for the slide generation pipeline.

Centralized configuration with:
- Environment variable support (.env honoured via python-dotenv)
- Validation
- A masked view for logging
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional, Dict, Any

from dotenv import load_dotenv

from slidegen.agents.exceptions import InvalidConfigError

load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name)
    return float(value) if value else None


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    return int(value) if value else None


def mask_secret(value: Optional[str]) -> Optional[str]:
    """Mask an API key for logs, keeping the last four characters."""
    if not value:
        return None
    return "***" + (value[-4:] or "****")


@dataclass
class ModelConfig:
    """Model gateway configuration"""
    model: str = field(default_factory=lambda: os.getenv('SLIDEGEN_MODEL', 'gemini-2.0-flash'))
    api_key: Optional[str] = field(default_factory=lambda: os.getenv('SLIDEGEN_API_KEY'))
    temperature: float = field(default_factory=lambda: float(os.getenv('SLIDEGEN_TEMPERATURE', '0.7')))
    max_tokens: int = field(default_factory=lambda: int(os.getenv('SLIDEGEN_MAX_TOKENS', '2048')))
    top_p: Optional[float] = field(default_factory=lambda: _optional_float('SLIDEGEN_TOP_P'))
    top_k: Optional[int] = field(default_factory=lambda: _optional_int('SLIDEGEN_TOP_K'))
    timeout_seconds: float = field(default_factory=lambda: float(os.getenv('SLIDEGEN_MODEL_TIMEOUT', '30')))
    # "instructor" lets the client library enforce the schema, "json" parses free text
    structured_mode: str = field(default_factory=lambda: os.getenv('SLIDEGEN_STRUCTURED_MODE', 'instructor'))


@dataclass
class RetryConfig:
    """Boundary client retry policy"""
    attempts: int = field(default_factory=lambda: int(os.getenv('SLIDEGEN_RETRY_ATTEMPTS', '3')))
    base_delay: float = field(default_factory=lambda: float(os.getenv('SLIDEGEN_RETRY_DELAY', '1.0')))
    multiplier: float = field(default_factory=lambda: float(os.getenv('SLIDEGEN_RETRY_MULTIPLIER', '2')))


@dataclass
class RateLimitConfig:
    """Client-side pacing of model calls"""
    requests_per_minute: int = field(default_factory=lambda: int(os.getenv('SLIDEGEN_REQUESTS_PER_MINUTE', '60')))
    requests_per_day: int = field(default_factory=lambda: int(os.getenv('SLIDEGEN_REQUESTS_PER_DAY', '1500')))


@dataclass
class PipelineConfig:
    """Pipeline behaviour"""
    assets_per_slide: int = field(default_factory=lambda: int(os.getenv('SLIDEGEN_ASSETS_PER_SLIDE', '2')))
    max_parallel_assets: int = field(default_factory=lambda: int(os.getenv('SLIDEGEN_MAX_PARALLEL_ASSETS', '4')))
    task_history_limit: int = field(default_factory=lambda: int(os.getenv('SLIDEGEN_TASK_HISTORY_LIMIT', '1000')))
    request_timeout_seconds: float = field(default_factory=lambda: float(os.getenv('SLIDEGEN_REQUEST_TIMEOUT', '600')))
    research_depth: str = field(default_factory=lambda: os.getenv('SLIDEGEN_RESEARCH_DEPTH', 'comprehensive'))
    asset_source: str = field(default_factory=lambda: os.getenv('SLIDEGEN_ASSET_SOURCE', 'placeholder'))
    pexels_api_key: Optional[str] = field(default_factory=lambda: os.getenv('PEXELS_API_KEY'))


@dataclass
class LogConfig:
    """Logging configuration"""
    level: str = field(default_factory=lambda: os.getenv('LOG_LEVEL', 'INFO'))


@dataclass
class Config:
    """Master configuration"""
    model: ModelConfig = field(default_factory=ModelConfig)
    retry: RetryConfig = field(default_factory=RetryConfig)
    rate_limits: RateLimitConfig = field(default_factory=RateLimitConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    logging: LogConfig = field(default_factory=LogConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging; secrets are masked"""
        return {
            'model': {
                'model': self.model.model,
                'api_key': mask_secret(self.model.api_key),
                'temperature': self.model.temperature,
                'max_tokens': self.model.max_tokens,
                'top_p': self.model.top_p,
                'top_k': self.model.top_k,
                'timeout_seconds': self.model.timeout_seconds,
                'structured_mode': self.model.structured_mode,
            },
            'retry': {
                'attempts': self.retry.attempts,
                'base_delay': self.retry.base_delay,
                'multiplier': self.retry.multiplier,
            },
            'rate_limits': {
                'requests_per_minute': self.rate_limits.requests_per_minute,
                'requests_per_day': self.rate_limits.requests_per_day,
            },
            'pipeline': {
                'assets_per_slide': self.pipeline.assets_per_slide,
                'max_parallel_assets': self.pipeline.max_parallel_assets,
                'task_history_limit': self.pipeline.task_history_limit,
                'request_timeout_seconds': self.pipeline.request_timeout_seconds,
                'research_depth': self.pipeline.research_depth,
                'asset_source': self.pipeline.asset_source,
                'pexels_api_key': mask_secret(self.pipeline.pexels_api_key),
            },
            'logging': {
                'level': self.logging.level,
            },
        }

    def validate(self) -> None:
        """Validate configuration values"""
        if self.model.temperature < 0 or self.model.temperature > 2:
            raise InvalidConfigError(f"Temperature must be between 0 and 2, got {self.model.temperature}")

        if self.model.max_tokens < 1 or self.model.max_tokens > 8192:
            raise InvalidConfigError(f"Max tokens must be between 1 and 8192, got {self.model.max_tokens}")

        if self.model.timeout_seconds <= 0:
            raise InvalidConfigError(f"Model timeout must be positive, got {self.model.timeout_seconds}")

        if self.model.structured_mode not in ("instructor", "json"):
            raise InvalidConfigError(f"Unknown structured mode: {self.model.structured_mode}")

        if self.retry.attempts < 1:
            raise InvalidConfigError(f"Retry attempts must be at least 1, got {self.retry.attempts}")

        if self.pipeline.max_parallel_assets < 1:
            raise InvalidConfigError(f"max_parallel_assets must be at least 1, got {self.pipeline.max_parallel_assets}")

        if self.pipeline.task_history_limit < 1:
            raise InvalidConfigError(f"task_history_limit must be at least 1, got {self.pipeline.task_history_limit}")

        if self.pipeline.research_depth not in ("quick", "comprehensive"):
            raise InvalidConfigError(f"Unknown research depth: {self.pipeline.research_depth}")

        if self.pipeline.asset_source not in ("placeholder", "pexels"):
            raise InvalidConfigError(f"Unknown asset source: {self.pipeline.asset_source}")


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get singleton configuration instance"""
    config = Config()
    config.validate()
    return config


def get_model_config() -> ModelConfig:
    return get_config().model


def get_pipeline_config() -> PipelineConfig:
    return get_config().pipeline
