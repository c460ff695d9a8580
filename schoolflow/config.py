"""
Runtime configuration.

Settings are resolved once at start-up from (in increasing priority)
built-in defaults, an optional YAML file and environment variables
(including a `.env` file loaded with python-dotenv).  The resulting
`Settings` value is passed explicitly to whatever builds the model
provider; no other module reads the environment.

YAML layout::

    llm:
      provider: gemini        # gemini | openai | placeholder
      model: gemini-2.5-flash
      temperature: 0.8
    search:
      strict: false
      min_count: 10
      max_count: 15
    output:
      dir: exports
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml  # type: ignore
from dotenv import load_dotenv

from .errors import ConfigurationMissing

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "gemini"


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one session."""

    provider: str = DEFAULT_PROVIDER
    api_key: Optional[str] = None
    model: Optional[str] = None
    temperature: float = 0.8
    strict: bool = False
    min_count: int = 10
    max_count: int = 15
    output_dir: str = "."


def _load_yaml(config_path: str) -> Dict[str, Any]:
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationMissing(f"Configuration file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigurationMissing(f"Failed to parse YAML configuration {path}: {exc}") from exc
    logger.debug("Loaded configuration from %s", path)
    return data or {}


def _api_key_for(provider: str, environ: Mapping[str, str]) -> Optional[str]:
    if provider == "gemini":
        return environ.get("GEMINI_API_KEY") or environ.get("GOOGLE_API_KEY") or environ.get("API_KEY")
    if provider == "openai":
        return environ.get("OPENAI_API_KEY")
    return None


def load_settings(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    provider: Optional[str] = None,
) -> Settings:
    """Resolve settings from defaults, YAML and the environment.

    Args:
        config_path: Optional YAML configuration file.
        environ: Mapping to read variables from.  Defaults to the process
            environment, in which case a `.env` file is loaded first.
        provider: Provider name overriding both YAML and `LLM_PROVIDER`.

    Returns:
        A `Settings` instance.

    Raises:
        ConfigurationMissing: The YAML file is missing or unreadable.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    settings = Settings()
    if config_path:
        cfg = _load_yaml(config_path)
        llm_cfg = cfg.get("llm", {}) or {}
        search_cfg = cfg.get("search", {}) or {}
        output_cfg = cfg.get("output", {}) or {}
        settings = replace(
            settings,
            provider=str(llm_cfg.get("provider", settings.provider)).lower(),
            model=llm_cfg.get("model", settings.model),
            temperature=float(llm_cfg.get("temperature", settings.temperature)),
            strict=bool(search_cfg.get("strict", settings.strict)),
            min_count=int(search_cfg.get("min_count", settings.min_count)),
            max_count=int(search_cfg.get("max_count", settings.max_count)),
            output_dir=str(output_cfg.get("dir", settings.output_dir)),
        )

    provider = (provider or environ.get("LLM_PROVIDER") or settings.provider).lower()
    model = settings.model
    if provider == "gemini":
        model = environ.get("GEMINI_MODEL") or model
    elif provider == "openai":
        model = environ.get("OPENAI_MODEL") or model

    return replace(
        settings,
        provider=provider,
        model=model,
        api_key=_api_key_for(provider, environ),
    )
