"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. PipelineConfig defaults  -- documented in settings.py
#   2. config/config.yaml       -- the ``pipeline:`` section, if the file exists
#   3. .env file / environment  -- CULTURAL_CHUNKER_* variables (via Settings)
#
# Only environment values that are actually set override the YAML; an unset
# variable never resets a YAML value back to its default.
#
# The _deep_merge helper does recursive dict merging:
#   base = {"pipeline": {"target_chunk_size": 400}}
#   overrides = {"pipeline": {"overlap_size": 80}}
#   result = {"pipeline": {"target_chunk_size": 400, "overlap_size": 80}}
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from cultural_chunker.config.settings import PipelineConfig, Settings
from cultural_chunker.utils.errors import ConfigurationError


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> PipelineConfig:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys overlap.

    Args:
        path: Path to the YAML configuration file.
        settings: Pre-built settings (mainly for tests); read from the
            environment when omitted.

    Returns:
        Fully resolved, validated pipeline configuration.

    Raises:
        ConfigurationError: If the YAML is malformed, or a value has the wrong
            type or is out of range.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                yaml_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"Malformed config file '{config_path}': {exc}") from exc
    else:
        yaml_config = {}

    if not isinstance(yaml_config, dict):
        raise ConfigurationError(f"Config file '{config_path}' must contain a mapping")

    pipeline_section = yaml_config.get("pipeline") or {}
    if not isinstance(pipeline_section, dict):
        raise ConfigurationError("The 'pipeline' section must be a mapping")

    if settings is None:
        try:
            settings = Settings()
        except PydanticValidationError as exc:
            raise ConfigurationError(f"Invalid environment configuration: {exc}") from exc

    merged: dict = {"pipeline": dict(pipeline_section)}
    _deep_merge(merged, {"pipeline": settings.pipeline_overrides()})

    unknown = set(merged["pipeline"]) - set(PipelineConfig.model_fields)
    if unknown:
        raise ConfigurationError(
            f"Unknown pipeline config keys: {', '.join(sorted(unknown))}"
        )

    return PipelineConfig(**merged["pipeline"])


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
