"""
Configuration — loads settings from .gitsmart.yaml, environment variables,
and built-in defaults (in that priority order: CLI args > env > YAML > defaults).
"""

import os

import yaml

from .diff.rules import DEFAULT_FILTER_PATTERNS, ExclusionRuleSet


_DEFAULTS = {
    "provider": "openai",
    "model": "gpt-3.5-turbo",
    "stream": False,
    "llm_max_retries": 3,
    "llm_retry_delay": 2.0,
    "openai_api_key": "",
    "openai_base_url": "https://api.openai.com/v1",
    "ollama_base_url": "http://localhost:11434/api/generate",
    "lm_studio_base_url": "http://localhost:1234/v1",
    "filter_patterns": list(DEFAULT_FILTER_PATTERNS),
    "system_message_enhancement": "",
    "log_dir": ".gitsmart/logs",
    "report_dir": ".gitsmart/reports",
}

PROVIDERS = ("openai", "ollama", "lm_studio")

# Config file search locations
_CONFIG_FILENAMES = [".gitsmart.yaml", ".gitsmart.yml"]


def _find_config_file(explicit_path: str | None = None) -> str | None:
    """Find the config file. Checks explicit path, CWD, then user home."""
    if explicit_path:
        if os.path.isfile(explicit_path):
            return explicit_path
        return None

    # Search CWD first, then home directory
    search_dirs = [os.getcwd(), os.path.expanduser("~")]
    for d in search_dirs:
        for name in _CONFIG_FILENAMES:
            path = os.path.join(d, name)
            if os.path.isfile(path):
                return path
    return None


def _load_yaml(path: str) -> dict:
    """Load YAML file, returns empty dict on failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


class Config:
    """Application configuration.

    Settings are resolved in priority order:
    1. CLI arguments (handled by caller)
    2. Environment variables
    3. .gitsmart.yaml config file
    4. Built-in defaults
    """

    def __init__(self, yaml_data: dict | None = None):
        yd = yaml_data or {}

        # Helper: env var > yaml > default
        def _get(env_key: str, yaml_key: str, default, cast=str):
            env_val = os.getenv(env_key)
            if env_val is not None:
                return cast(env_val)
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return cast(yaml_val)
            return default

        def _get_bool(env_key: str, yaml_key: str, default: bool) -> bool:
            env_val = os.getenv(env_key)
            if env_val is not None:
                return env_val.lower() == "true"
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return bool(yaml_val)
            return default

        self.PROVIDER = _get("GITSMART_PROVIDER", "provider", _DEFAULTS["provider"])
        self.MODEL = _get("GITSMART_MODEL", "model", _DEFAULTS["model"])

        self.LLM_MAX_RETRIES = _get("LLM_MAX_RETRIES", "llm_max_retries",
                                    _DEFAULTS["llm_max_retries"], cast=int)
        self.LLM_RETRY_DELAY = _get("LLM_RETRY_DELAY", "llm_retry_delay",
                                    _DEFAULTS["llm_retry_delay"], cast=float)
        self.STREAM_RESPONSES = _get_bool("STREAM_RESPONSES", "stream",
                                          _DEFAULTS["stream"])

        self.OLLAMA_BASE_URL = _get("OLLAMA_BASE_URL", "ollama_base_url",
                                    _DEFAULTS["ollama_base_url"])
        self.LM_STUDIO_BASE_URL = _get("LM_STUDIO_BASE_URL", "lm_studio_base_url",
                                       _DEFAULTS["lm_studio_base_url"])

        # OpenAI / cloud provider
        openai_section = yd.get("openai", {}) if isinstance(yd.get("openai"), dict) else {}
        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY") or openai_section.get(
            "api_key", _DEFAULTS["openai_api_key"])
        self.OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL") or openai_section.get(
            "base_url", _DEFAULTS["openai_base_url"])

        # Lines dropped from added content before staging
        patterns = yd.get("filter_patterns", _DEFAULTS["filter_patterns"])
        if not isinstance(patterns, list):
            patterns = _DEFAULTS["filter_patterns"]
        self.FILTER_PATTERNS: list[str] = [str(p) for p in patterns]

        # Appended to the base commit-message system prompt
        self.SYSTEM_MESSAGE_ENHANCEMENT = _get(
            "GITSMART_SYSTEM_MESSAGE", "system_message_enhancement",
            _DEFAULTS["system_message_enhancement"])

        self.LOG_DIR = _get("GITSMART_LOG_DIR", "log_dir", _DEFAULTS["log_dir"])

        # HTML review output directory
        self.REPORT_DIR = _get("GITSMART_REPORT_DIR", "report_dir",
                               _DEFAULTS["report_dir"])

    def exclusion_rules(self) -> ExclusionRuleSet:
        """Compile FILTER_PATTERNS. Raises ``InvalidRuleError`` on a bad pattern."""
        return ExclusionRuleSet.from_patterns(self.FILTER_PATTERNS)

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load config from YAML file (if found) + env vars + defaults."""
        path = _find_config_file(config_path)
        yaml_data = _load_yaml(path) if path else {}
        return cls(yaml_data)
