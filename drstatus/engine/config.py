"""DR status engine - configuration.

Defaults come from DRSTATUS_* environment variables (a local .env file is
honoured); a sectioned YAML file can override them.
"""
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

load_dotenv()

DEFAULT_DOCS_BASE_URL = (
    "https://docs.redhat.com/en/documentation/"
    "red_hat_openshift_data_foundation/{version}/html-single/"
    "configuring_openshift_data_foundation_disaster_recovery_for_openshift_workloads/index"
)
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("drstatus.engine.config")


class ConfigValidationError(ValueError):
    """Raised when engine configuration values are out of range."""


@dataclass(frozen=True)
class EngineConfig:
    """Immutable configuration for the DR status engine."""

    # Health thresholds, as multiples of the scheduling interval
    warning_multiplier: float = field(
        default_factory=lambda: float(os.getenv("DRSTATUS_WARNING_MULTIPLIER", "1"))
    )
    critical_multiplier: float = field(
        default_factory=lambda: float(os.getenv("DRSTATUS_CRITICAL_MULTIPLIER", "2"))
    )

    # Documentation links
    docs_base_url: str = field(
        default_factory=lambda: os.getenv("DRSTATUS_DOCS_BASE_URL", DEFAULT_DOCS_BASE_URL)
    )
    docs_version: str = field(default_factory=lambda: os.getenv("DRSTATUS_DOCS_VERSION", "4.18"))

    # Display
    time_format: str = field(
        default_factory=lambda: os.getenv("DRSTATUS_TIME_FORMAT", "%b %d, %Y, %I:%M %p")
    )

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("DRSTATUS_LOG_LEVEL", "INFO"))

    def validate(self) -> EngineConfig:
        if self.warning_multiplier <= 0:
            raise ConfigValidationError(
                f"warning_multiplier must be positive, got {self.warning_multiplier}"
            )
        if self.critical_multiplier < self.warning_multiplier:
            raise ConfigValidationError(
                "critical_multiplier must be >= warning_multiplier "
                f"({self.critical_multiplier} < {self.warning_multiplier})"
            )
        if not self.docs_base_url:
            raise ConfigValidationError("docs_base_url must not be empty")
        if not isinstance(getattr(logging, self.log_level.upper(), None), int):
            raise ConfigValidationError(f"unknown log_level {self.log_level!r}")
        return self

    def docs_url(self, anchor: str) -> str:
        base = self.docs_base_url.format(version=self.docs_version)
        return f"{base}#{anchor}" if anchor else base

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Create config from environment, raising on invalid values."""
        try:
            cfg = cls()
        except ValueError as exc:
            raise ConfigValidationError(f"invalid DRSTATUS_* value: {exc}") from exc
        return cfg.validate()

    @classmethod
    def from_yaml(cls, path: str) -> EngineConfig:
        with open(path, "r") as f:
            raw: dict[str, Any] = yaml.safe_load(f) or {}
        defaults = cls()
        health = raw.get("health", {})
        docs = raw.get("docs", {})
        display = raw.get("display", {})
        log_cfg = raw.get("logging", {})
        try:
            cfg = cls(
                warning_multiplier=float(health.get("warning_multiplier", defaults.warning_multiplier)),
                critical_multiplier=float(health.get("critical_multiplier", defaults.critical_multiplier)),
                docs_base_url=docs.get("base_url", defaults.docs_base_url),
                docs_version=str(docs.get("version", defaults.docs_version)),
                time_format=display.get("time_format", defaults.time_format),
                log_level=log_cfg.get("level", defaults.log_level),
            )
        except (TypeError, ValueError) as exc:
            raise ConfigValidationError(f"invalid value in {path}: {exc}") from exc
        return cfg.validate()


def setup_logging(cfg: EngineConfig) -> logging.Logger:
    """Attach a console handler to the package logger."""
    pkg_logger = logging.getLogger("drstatus")
    pkg_logger.setLevel(getattr(logging, cfg.log_level.upper(), logging.INFO))
    if not pkg_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        pkg_logger.addHandler(handler)
    return pkg_logger


BUILTIN_DEFAULTS = EngineConfig(
    warning_multiplier=1.0,
    critical_multiplier=2.0,
    docs_base_url=DEFAULT_DOCS_BASE_URL,
    docs_version="4.18",
    time_format="%b %d, %Y, %I:%M %p",
    log_level="INFO",
)


def resolve_config(config: Optional[EngineConfig] = None) -> EngineConfig:
    """Return ``config``, else the environment config, else the built-in defaults.

    A broken environment is logged and replaced by the built-in defaults so
    status evaluation keeps working.
    """
    if config is not None:
        return config
    try:
        return EngineConfig.from_env()
    except ConfigValidationError as exc:
        logger.warning("Ignoring DRSTATUS_* environment: %s", exc)
        return BUILTIN_DEFAULTS
