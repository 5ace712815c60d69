"""
Configuration System for the deriving framework.

This module provides a unified configuration interface for the names the
code generation helpers emit, registry behavior and logging. Settings are
read from a JSON or YAML file with a few environment variable overrides.
"""

import json
import os
from typing import Dict, Any, Optional
from pathlib import Path
from dataclasses import dataclass

import yaml

from .constants import (
    DEFAULT_POLY_PREFIX,
    DEFAULT_QUOTE_PREFIX,
    DEFAULT_RUNTIME_MODULE,
    DEFAULT_WARNING_SPEC,
    INLINE_EXTENSION_PREFIX,
    TOPLEVEL_INPUT_NAME,
)
from .logging import get_logger, setup_logging

logger = get_logger(__name__)


@dataclass
class CodegenConfig:
    """Names used by generated code."""

    quote_prefix: str = DEFAULT_QUOTE_PREFIX
    poly_prefix: str = DEFAULT_POLY_PREFIX
    runtime_module: str = DEFAULT_RUNTIME_MODULE
    warning_spec: str = DEFAULT_WARNING_SPEC
    inline_prefix: str = INLINE_EXTENSION_PREFIX
    toplevel_name: str = TOPLEVEL_INPUT_NAME


@dataclass
class RegistryConfig:
    """Deriver registry configuration."""

    reject_duplicates: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    enable_file_logging: bool = False
    log_file: str = "deriving.log"


class DerivingConfig:
    """
    Unified configuration manager for the deriving framework.

    All options live in a single JSON or YAML file. Missing sections and
    keys fall back to the dataclass defaults.
    """

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration file. If None, uses
                DERIVING_CONFIG or the default location.
        """
        self.config_file = self._get_config_file_path(config_file)
        self._config_data = self._load_config()

        self.codegen = self._create_codegen_config()
        self.registry = self._create_registry_config()
        self.logging = self._create_logging_config()

    def _get_config_file_path(self, config_file: Optional[str]) -> Path:
        """Get the configuration file path."""
        if config_file:
            return Path(config_file)

        env_file = os.getenv("DERIVING_CONFIG")
        if env_file:
            return Path(env_file)

        config_dir = Path(__file__).parent
        yaml_config = config_dir / "deriving_config.yaml"
        if yaml_config.exists():
            return yaml_config
        return config_dir / "deriving_config.json"

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from file (JSON or YAML)."""
        if not self.config_file.exists():
            logger.debug(f"Configuration file {self.config_file} not found, using defaults")
            return {}

        try:
            with open(self.config_file, "r") as f:
                if self.config_file.suffix.lower() in [".yaml", ".yml"]:
                    config_data = yaml.safe_load(f)
                else:
                    config_data = json.load(f)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Failed to load configuration: {e}")
            return {}

        logger.info(f"Loaded configuration from {self.config_file}")
        return config_data or {}

    def _create_codegen_config(self) -> CodegenConfig:
        """Create code generation configuration from loaded data."""
        data = self._config_data.get("codegen", {})

        return CodegenConfig(
            quote_prefix=data.get("quote_prefix", DEFAULT_QUOTE_PREFIX),
            poly_prefix=data.get("poly_prefix", DEFAULT_POLY_PREFIX),
            runtime_module=data.get("runtime_module", DEFAULT_RUNTIME_MODULE),
            warning_spec=data.get("warning_spec", DEFAULT_WARNING_SPEC),
            inline_prefix=data.get("inline_prefix", INLINE_EXTENSION_PREFIX),
            toplevel_name=data.get("toplevel_name", TOPLEVEL_INPUT_NAME),
        )

    def _create_registry_config(self) -> RegistryConfig:
        """Create registry configuration from loaded data."""
        data = self._config_data.get("registry", {})

        env_strict = os.getenv("DERIVING_STRICT_REGISTRY", "").lower() in ("1", "true", "yes")
        reject = env_strict or data.get("reject_duplicates", False)

        return RegistryConfig(reject_duplicates=reject)

    def _create_logging_config(self) -> LoggingConfig:
        """Create logging configuration from loaded data."""
        log_data = self._config_data.get("logging", {})

        return LoggingConfig(
            level=log_data.get("level", "INFO"),
            enable_file_logging=log_data.get("enable_file_logging", False),
            log_file=log_data.get("log_file", "deriving.log"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the active configuration as plain data."""
        return {
            "version": "1.0",
            "codegen": {
                "quote_prefix": self.codegen.quote_prefix,
                "poly_prefix": self.codegen.poly_prefix,
                "runtime_module": self.codegen.runtime_module,
                "warning_spec": self.codegen.warning_spec,
                "inline_prefix": self.codegen.inline_prefix,
                "toplevel_name": self.codegen.toplevel_name,
            },
            "registry": {
                "reject_duplicates": self.registry.reject_duplicates,
            },
            "logging": {
                "level": self.logging.level,
                "enable_file_logging": self.logging.enable_file_logging,
                "log_file": self.logging.log_file,
            },
        }

    def apply_logging(self) -> None:
        """Reconfigure the package logger from the logging section."""
        log_file = self.logging.log_file if self.logging.enable_file_logging else None
        setup_logging(level=self.logging.level, log_file=log_file)

    def save_config(self) -> None:
        """Save current configuration to file as JSON."""
        with open(self.config_file, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Configuration saved to {self.config_file}")


# Global configuration instance
_global_config: Optional[DerivingConfig] = None


def get_config() -> DerivingConfig:
    """Get the global configuration instance."""
    global _global_config
    if _global_config is None:
        _global_config = DerivingConfig()
    return _global_config


def set_config(config: Optional[DerivingConfig]) -> None:
    """Set the global configuration instance. None restores lazy defaults."""
    global _global_config
    _global_config = config


def load_config(config_file: str) -> DerivingConfig:
    """Load configuration from a specific file."""
    return DerivingConfig(config_file)
