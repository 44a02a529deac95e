from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Mapping

from dotenv import load_dotenv


ENV_PREFIX = "IBIBIO_SEARCH_"

DEFAULT_SOURCE_WEIGHTS: Dict[str, float] = {
    "local_dictionary": 0.9,
    "enhanced_backend": 0.85,
    "web": 0.8,
    "ai": 0.7,
}


@dataclass(frozen=True)
class SearchConfig:
    cache_ttl_sec: float = 24 * 60 * 60
    local_confidence_threshold: float = 0.4
    noise_threshold: float = 0.05
    word_match_threshold: float = 0.4
    fuzzy_limit: int = 10
    source_timeout_sec: float = 15.0
    fold_diacritics: bool = True
    use_seed_dictionary: bool = True
    source_weights: Mapping[str, float] = field(default_factory=lambda: dict(DEFAULT_SOURCE_WEIGHTS))
    dictionary_path: str = ""
    cache_dir: str = ""
    backend_url: str = ""
    backend_retries: int = 2
    ollama_base_url: str = ""
    ollama_model: str = ""
    chat_base_url: str = "https://api.groq.com/openai/v1"
    chat_api_key: str = ""
    chat_model: str = "llama-3.1-8b-instant"
    enable_web_search: bool = False


def _env(name: str, environ: Mapping[str, str]) -> str:
    return environ.get(ENV_PREFIX + name, "").strip()


def _env_float(name: str, default: float, environ: Mapping[str, str]) -> float:
    raw = _env(name, environ)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(name: str, default: int, environ: Mapping[str, str]) -> int:
    raw = _env(name, environ)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_flag(name: str, default: bool, environ: Mapping[str, str]) -> bool:
    raw = _env(name, environ).lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "y", "on"}


def load_config(
    env_file: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    **overrides: object,
) -> SearchConfig:
    """Build a SearchConfig from a .env file and IBIBIO_SEARCH_* variables.

    Explicit keyword overrides win over the environment.
    """
    if environ is None:
        load_dotenv(dotenv_path=env_file, override=False)
        environ = os.environ

    base = SearchConfig()
    cfg = SearchConfig(
        cache_ttl_sec=_env_float("CACHE_TTL_SEC", base.cache_ttl_sec, environ),
        local_confidence_threshold=_env_float("LOCAL_THRESHOLD", base.local_confidence_threshold, environ),
        noise_threshold=_env_float("NOISE_THRESHOLD", base.noise_threshold, environ),
        word_match_threshold=_env_float("WORD_THRESHOLD", base.word_match_threshold, environ),
        fuzzy_limit=_env_int("FUZZY_LIMIT", base.fuzzy_limit, environ),
        source_timeout_sec=_env_float("SOURCE_TIMEOUT_SEC", base.source_timeout_sec, environ),
        fold_diacritics=_env_flag("FOLD_DIACRITICS", base.fold_diacritics, environ),
        use_seed_dictionary=_env_flag("USE_SEED", base.use_seed_dictionary, environ),
        dictionary_path=_env("DICTIONARY_PATH", environ),
        cache_dir=_env("CACHE_DIR", environ),
        backend_url=_env("BACKEND_URL", environ),
        backend_retries=_env_int("BACKEND_RETRIES", base.backend_retries, environ),
        ollama_base_url=environ.get("OLLAMA_BASE_URL", "").strip(),
        ollama_model=_env("OLLAMA_MODEL", environ),
        chat_base_url=_env("CHAT_BASE_URL", environ) or base.chat_base_url,
        chat_api_key=environ.get("GROQ_API_KEY", "").strip() or _env("CHAT_API_KEY", environ),
        chat_model=_env("CHAT_MODEL", environ) or base.chat_model,
        enable_web_search=_env_flag("WEB_SEARCH", base.enable_web_search, environ),
    )
    if overrides:
        cfg = replace(cfg, **overrides)
    return cfg
