"""
TRAQA Configuration Management

This module provides runtime configuration for the TRAQA analysis tools:
logging, analysis execution and report output settings loaded from YAML
files. Analysis thresholds and score weights are fixed constants in
``traqa.analysis.constants`` and are not configurable.
"""

import logging
import os
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_OUTPUT_FORMATS = ("json", "txt")


class Config:
    """
    Runtime configuration manager for TRAQA.

    Loads settings from YAML files or uses sensible defaults.
    Provides property-based access to common settings.

    Example:
        >>> config = Config('config.yaml')
        >>> config.setup_logging()
        >>> print(f"Reports go to {config.output_directory}")
    """

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML configuration file. If None or missing,
                        uses default configuration.
        """
        self.config_path = config_path
        self._config: Dict[str, Any] = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration from YAML file or return defaults.

        Returns:
            Configuration dictionary
        """
        if self.config_path is None or not os.path.exists(self.config_path):
            return self._get_default_config()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not load config file: {e}")
            return self._get_default_config()

        if not self._validate_config(config):
            logger.warning("Invalid config structure, using defaults")
            return self._get_default_config()

        return self._merge_defaults(config)

    def _validate_config(self, config: Any) -> bool:
        """
        Validate configuration structure and field types.

        Every section is optional, but a present section must be a mapping
        with correctly typed values.

        Args:
            config: Parsed YAML document

        Returns:
            True if valid, False otherwise
        """
        try:
            assert isinstance(config, dict)

            logging_cfg = config.get("logging", {})
            assert isinstance(logging_cfg, dict)
            if "level" in logging_cfg:
                assert str(logging_cfg["level"]).upper() in VALID_LOG_LEVELS
            if "format" in logging_cfg:
                assert isinstance(logging_cfg["format"], str)

            analysis_cfg = config.get("analysis", {})
            assert isinstance(analysis_cfg, dict)
            if "parallel" in analysis_cfg:
                assert isinstance(analysis_cfg["parallel"], bool)
            if "max_workers" in analysis_cfg:
                assert isinstance(analysis_cfg["max_workers"], int)
                assert not isinstance(analysis_cfg["max_workers"], bool)
                assert analysis_cfg["max_workers"] > 0

            output_cfg = config.get("output", {})
            assert isinstance(output_cfg, dict)
            if "directory" in output_cfg:
                assert isinstance(output_cfg["directory"], str)
            if "format" in output_cfg:
                assert output_cfg["format"] in VALID_OUTPUT_FORMATS

            return True
        except (AssertionError, AttributeError, TypeError):
            return False

    def _get_default_config(self) -> Dict[str, Any]:
        """
        Get default configuration.

        Returns:
            Default configuration dictionary
        """
        return {
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
            "analysis": {
                "parallel": False,
                "max_workers": 4,
            },
            "output": {
                "directory": "reports",
                "format": "json",
            },
        }

    def _merge_defaults(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Fill sections and keys missing from a loaded config with defaults."""
        merged = self._get_default_config()
        for section, values in config.items():
            if isinstance(values, dict) and isinstance(merged.get(section), dict):
                merged[section].update(values)
            else:
                merged[section] = values
        return merged

    def save_config(self) -> None:
        """
        Save current configuration to YAML file.

        Raises:
            ValueError: If config_path is not set
        """
        if self.config_path is None:
            raise ValueError("Cannot save config: no config_path specified")

        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.dump(self._config, f, default_flow_style=False)

    def setup_logging(self) -> None:
        """Configure the root logger from the logging section."""
        logging.basicConfig(
            level=getattr(logging, self.log_level, logging.INFO),
            format=self.log_format,
        )

    # --- Property Accessors ---

    @property
    def log_level(self) -> str:
        """Get logging level name."""
        return str(self._config["logging"]["level"]).upper()

    @property
    def log_format(self) -> str:
        """Get logging format string."""
        return self._config["logging"]["format"]

    @property
    def analysis_parallel(self) -> bool:
        """Whether sub-analyses run on a thread pool."""
        return bool(self._config["analysis"]["parallel"])

    @property
    def analysis_max_workers(self) -> int:
        """Get thread pool size for parallel analysis."""
        return int(self._config["analysis"]["max_workers"])

    @property
    def output_directory(self) -> str:
        """Get report output directory."""
        return self._config["output"]["directory"]

    @property
    def output_format(self) -> str:
        """Get default report format."""
        return self._config["output"]["format"]

    # --- Generic Accessors ---

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Dot-separated key path (e.g., 'analysis.parallel')
            default: Default value if key not found

        Returns:
            Configuration value or default

        Example:
            >>> config.get('output.format', 'json')
            'txt'
        """
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Dot-separated key path (e.g., 'analysis.max_workers')
            value: Value to set

        Example:
            >>> config.set('analysis.parallel', True)
        """
        keys = key.split(".")
        config = self._config

        # Navigate to parent of target key
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        # Set final value
        config[keys[-1]] = value
