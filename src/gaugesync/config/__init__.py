"""Application configuration helpers."""

from __future__ import annotations

from .env import parse_positive_int, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .registry import RegistryConfig, get_registry_config
from .storage import DatabaseConfig, data_dir, get_database_config
from .subgraph import SubgraphConfig, get_subgraph_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "RegistryConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "SubgraphConfig",
    "configure_logging",
    "data_dir",
    "get_database_config",
    "get_registry_config",
    "get_subgraph_config",
    "parse_positive_int",
    "require_env_vars",
]
