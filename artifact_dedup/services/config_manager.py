import os
from pathlib import Path
from string import Template
from typing import List, Optional

import structlog
import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from artifact_dedup.models.dedup import SimilarityConfig

logger = structlog.get_logger()


class ConfigValidationError(Exception):
    """Configuration validation failed"""

    pass


class ConfigManager:
    """Loads SimilarityConfig from YAML"""

    def __init__(self, config_path: str = "config/dedup_config.yaml"):
        self.config_path = Path(config_path)
        self.env_loaded = False
        self._config: Optional[SimilarityConfig] = None

    def load_config(self) -> SimilarityConfig:
        """Load and validate configuration"""
        if self._config:
            return self._config

        # 1. Load environment
        if not self.env_loaded:  # pragma: no cover
            load_dotenv()
            self.env_loaded = True

        # 2. Check file existence
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        # 3. Read YAML
        try:
            with open(self.config_path) as f:
                raw_content = f.read()
        except OSError as e:
            raise ConfigValidationError(f"Failed to read config file: {e}")

        # 4. Substitute env vars (${VAR} syntax)
        try:
            template = Template(raw_content)
            substituted_content = template.safe_substitute(os.environ)
            config_data = yaml.safe_load(substituted_content) or {}
        except yaml.YAMLError as e:
            raise ConfigValidationError(
                f"Failed to parse YAML or substitute variables: {e}"
            )

        if not isinstance(config_data, dict):
            raise ConfigValidationError("Configuration root must be a mapping")

        # Accept either a bare config or one nested under "similarity"
        section = config_data.get("similarity", config_data)

        # 5. Validate with Pydantic
        try:
            self._config = SimilarityConfig(**section)
        except (TypeError, ValidationError) as e:
            raise ConfigValidationError(f"Invalid configuration: {e}")

        logger.info(
            "config_loaded",
            path=str(self.config_path),
            grouping_mode=self._config.grouping_mode.value,
        )
        for warning in check_config(self._config):
            logger.warning("config_sanity_warning", detail=warning)

        return self._config


def check_config(config: SimilarityConfig) -> List[str]:
    """
    Report configuration values the engine accepts but that are likely wrong.

    The engine runs with any config; this is for callers (CLI, admin
    surfaces) that want to flag questionable tuning.

    Args:
        config: Configuration to inspect

    Returns:
        Human-readable warnings, empty when the config looks sane
    """
    warnings: List[str] = []

    thresholds = [
        ("exact_match_threshold", config.exact_match_threshold),
        ("near_exact_match_threshold", config.near_exact_match_threshold),
        ("similar_match_threshold", config.similar_match_threshold),
        ("potential_match_threshold", config.potential_match_threshold),
    ]
    for (upper_name, upper), (lower_name, lower) in zip(thresholds, thresholds[1:]):
        if upper < lower:
            warnings.append(f"{upper_name} ({upper}) is below {lower_name} ({lower})")

    for name, value in thresholds:
        if not 0 <= value <= 100:
            warnings.append(f"{name} ({value}) is outside 0-100")

    weight_total = config.field_weights.total
    if weight_total > 1.0 + 1e-9:
        warnings.append(f"field weights sum to {weight_total:.2f}, above 1.0")

    negative = [
        name
        for name, value in config.field_weights.model_dump().items()
        if value < 0
    ]
    if negative:
        warnings.append(f"negative field weights: {', '.join(sorted(negative))}")

    if config.enable_semantic_matching:
        warnings.append(
            "enable_semantic_matching is set but only lexical matching is available"
        )

    return warnings
