"""
Engine configuration.

Two layers:

1. Settings - deployment knobs read from the environment
   (.env.local first, then .env, then the process environment)
2. EngineConfig - the immutable vocabularies (NSFW keyword groups,
   morphology rules, synonym dictionary) every scorer and classifier reads

EngineConfig is built once per process by get_engine_config() and shared
by reference; it is frozen, so concurrent readers need no locking.
Pass an explicit EngineConfig to any public function to override it
(tests, alternate keyword lists).

Config (env vars):
    ALEXANDRIA_NSFW_KEYWORDS_PATH: keyword document (default: bundled JSON)
    ALEXANDRIA_SYNONYMS_PATH: synonym dictionary (default: bundled JSON)
    ALEXANDRIA_NSFW_MODE: default filter mode (default: safe)
    ALEXANDRIA_NSFW_ONLY_FALLBACK: records returned when nsfw-only matches nothing (default: 10)
    ALEXANDRIA_RERANK_LIMIT: records embedded by the optional re-rank (default: 40)
    LOG_LEVEL: console log level (default: INFO)
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from .lexicon import DEFAULT_MORPHOLOGY_RULES, KeywordGroups, MorphologyRule, normalize_synonyms

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_KEYWORDS_PATH = DATA_DIR / "nsfw_keywords.json"
DEFAULT_SYNONYMS_PATH = DATA_DIR / "synonyms.json"


class ConfigurationError(ValueError):
    """Keyword or synonym configuration could not be loaded"""


class Settings(BaseModel):
    """Deployment settings (immutable once loaded)"""
    model_config = ConfigDict(frozen=True)

    nsfw_keywords_path: Path = DEFAULT_KEYWORDS_PATH
    synonyms_path: Path = DEFAULT_SYNONYMS_PATH
    nsfw_mode: str = "safe"
    nsfw_only_fallback: int = 10
    rerank_limit: int = 40
    log_level: str = "INFO"


def load_settings(env_dir: Optional[Path] = None) -> Settings:
    """
    Read Settings from the environment.
    
    Loads .env.local (highest priority) or .env from env_dir
    (default: current working directory) before reading os.environ.
    """
    base = Path(env_dir) if env_dir else Path.cwd()
    env_local = base / ".env.local"
    env_file = base / ".env"
    if env_local.exists():
        logger.info(f"Loading environment from: {env_local}")
        load_dotenv(env_local, override=True)
    elif env_file.exists():
        logger.info(f"Loading environment from: {env_file}")
        load_dotenv(env_file, override=True)

    values: Dict[str, Any] = {}
    keywords_path = os.getenv("ALEXANDRIA_NSFW_KEYWORDS_PATH")
    if keywords_path:
        values["nsfw_keywords_path"] = Path(keywords_path)
    synonyms_path = os.getenv("ALEXANDRIA_SYNONYMS_PATH")
    if synonyms_path:
        values["synonyms_path"] = Path(synonyms_path)
    mode = os.getenv("ALEXANDRIA_NSFW_MODE")
    if mode:
        values["nsfw_mode"] = mode.strip().lower()
    values["nsfw_only_fallback"] = _int_env("ALEXANDRIA_NSFW_ONLY_FALLBACK", 10)
    values["rerank_limit"] = _int_env("ALEXANDRIA_RERANK_LIMIT", 40)
    values["log_level"] = os.getenv("LOG_LEVEL", "INFO").upper()
    return Settings(**values)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")
    if value < 0:
        raise ConfigurationError(f"{name} must be >= 0, got {value}")
    return value


@dataclass(frozen=True)
class EngineConfig:
    """Read-only vocabularies shared by every scoring/classification call"""
    keyword_groups: KeywordGroups
    synonyms: Mapping[str, Tuple[str, ...]]
    morphology_rules: Tuple[MorphologyRule, ...] = DEFAULT_MORPHOLOGY_RULES
    nsfw_only_fallback: int = 10
    default_mode: str = "safe"
    rerank_limit: int = 40

    def rule_for(self, keyword: str) -> Optional[MorphologyRule]:
        for rule in self.morphology_rules:
            if rule.target == keyword:
                return rule
        return None

    @classmethod
    def from_documents(
        cls,
        keyword_document: Dict[str, Any],
        synonym_document: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> "EngineConfig":
        """Build a config from already-parsed JSON documents."""
        return cls(
            keyword_groups=KeywordGroups.from_document(keyword_document),
            synonyms=MappingProxyType(normalize_synonyms(synonym_document or {})),
            **kwargs,
        )


def _read_json(path: Path, label: str) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"{label} file not found: {path}")
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Unable to load {label} from {path}: {e}")


def load_engine_config(settings: Optional[Settings] = None) -> EngineConfig:
    """
    Load keyword groups and synonyms from disk.
    
    Raises:
        ConfigurationError: A configured file is missing or not valid JSON
    """
    settings = settings or Settings()
    keyword_document = _read_json(settings.nsfw_keywords_path, "NSFW keyword configuration")
    synonym_document = _read_json(settings.synonyms_path, "synonym dictionary")

    config = EngineConfig.from_documents(
        keyword_document,
        synonym_document,
        nsfw_only_fallback=settings.nsfw_only_fallback,
        default_mode=settings.nsfw_mode,
        rerank_limit=settings.rerank_limit,
    )
    groups = config.keyword_groups
    logger.info(
        f"Engine config loaded: explicit={len(groups.explicit)} adult={len(groups.adult)} "
        f"violent={len(groups.violent)} synonyms={len(config.synonyms)}"
    )
    return config


class _EngineConfigHolder:
    """Process-wide EngineConfig cache"""

    _instance: Optional[EngineConfig] = None

    @classmethod
    def get(cls, force_reload: bool = False) -> EngineConfig:
        if cls._instance is None or force_reload:
            cls._instance = load_engine_config(load_settings())
        return cls._instance

    @classmethod
    def set(cls, config: Optional[EngineConfig]) -> None:
        cls._instance = config


def get_engine_config(force_reload: bool = False) -> EngineConfig:
    """Shared EngineConfig (loaded on first use)."""
    return _EngineConfigHolder.get(force_reload=force_reload)


def set_engine_config(config: Optional[EngineConfig]) -> None:
    """Install (or with None, drop) the shared EngineConfig."""
    _EngineConfigHolder.set(config)


def resolve_config(config: Optional[EngineConfig]) -> EngineConfig:
    """Explicit config if given, else the shared one."""
    if config is None:
        return get_engine_config()
    if not isinstance(config, EngineConfig):
        raise TypeError(f"Expected EngineConfig, got {type(config).__name__}")
    return config
