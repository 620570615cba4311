"""
Settings resolution for lettersmith.

Settings are an OmegaConf DictConfig assembled in three layers, later layers
overriding earlier ones:

1. DEFAULT_SETTINGS (below)
2. Optional YAML file (explicit path, or LETTERSMITH_CONFIG env var)
3. Individual environment variables (see ENV_OVERRIDES), typically from .env

Examples:
    >>> settings = load_settings()
    >>> settings.embedding.model
    'text-embedding-ada-002'

    >>> settings = load_settings(Path("configs/lettersmith.yaml"))
    >>> settings.retrieval.similar_letters_limit
    3
"""

import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

load_dotenv()

DEFAULT_SETTINGS: Dict[str, Any] = {
    "profile": {
        "path": "./profile.json",
    },
    "embedding": {
        "provider": "openai",
        "model": "text-embedding-ada-002",
        "dimensions": 1536,
    },
    "store": {
        "backend": "chroma",
        "path": "data/chroma",
        "host": None,
        "port": 8000,
        "ssl": False,
    },
    "retrieval": {
        "similar_letters_limit": 3,
    },
    "generation": {
        "openai": {"model": "gpt-4", "max_tokens": 1000},
        "anthropic": {"model": "claude-3-sonnet-20240229", "max_tokens": 1024},
    },
    "logging": {
        "dir": "outs/logs",
    },
}


def _to_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _to_optional_int(value: str) -> Optional[int]:
    if value.strip().lower() in ("", "none", "null"):
        return None
    return int(value)


# Environment variable -> (dotted settings key, caster)
ENV_OVERRIDES: Dict[str, Tuple[str, Callable[[str], Any]]] = {
    "PROFILE_PATH": ("profile.path", str),
    "EMBEDDING_PROVIDER": ("embedding.provider", str),
    "EMBEDDING_MODEL": ("embedding.model", str),
    "EMBEDDING_DIMENSIONS": ("embedding.dimensions", _to_optional_int),
    "VECTOR_STORE_BACKEND": ("store.backend", str),
    "CHROMA_PATH": ("store.path", str),
    "CHROMA_HOST": ("store.host", str),
    "CHROMA_PORT": ("store.port", int),
    "CHROMA_SSL": ("store.ssl", _to_bool),
    "SIMILAR_LETTERS_LIMIT": ("retrieval.similar_letters_limit", int),
    "OPENAI_MODEL": ("generation.openai.model", str),
    "OPENAI_MAX_TOKENS": ("generation.openai.max_tokens", int),
    "ANTHROPIC_MODEL": ("generation.anthropic.model", str),
    "ANTHROPIC_MAX_TOKENS": ("generation.anthropic.max_tokens", int),
    "LOGS_PATH": ("logging.dir", str),
}


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Dict[str, str]] = None,
) -> DictConfig:
    """
    Build the settings tree from defaults, an optional YAML file and the environment.

    Args:
        config_path: Optional YAML file (defaults to LETTERSMITH_CONFIG env var, if set)
        environ: Mapping to read overrides from (defaults to os.environ)

    Returns:
        DictConfig with the resolved settings

    Raises:
        FileNotFoundError: If an explicitly requested config file does not exist
        ValueError: If an environment override cannot be converted to its type
    """
    if environ is None:
        environ = dict(os.environ)

    settings = OmegaConf.create(DEFAULT_SETTINGS)

    if config_path is None and environ.get("LETTERSMITH_CONFIG"):
        config_path = Path(environ["LETTERSMITH_CONFIG"])

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        settings = OmegaConf.merge(settings, OmegaConf.load(config_path))

    for env_name, (key, caster) in ENV_OVERRIDES.items():
        raw = environ.get(env_name)
        if raw is None or raw == "":
            continue
        try:
            value = caster(raw)
        except ValueError as e:
            raise ValueError(f"Invalid value for {env_name}: {raw!r}") from e
        OmegaConf.update(settings, key, value, merge=False)

    return settings
