"""Runtime settings for the SDX client.

Settings live in memory only. ``SdxConfig.from_env()`` reads them from
environment variables:

  SDX_DOCUMENT_LOCATION   default RDF document URI
  SDX_TIMEOUT             HTTP timeout in seconds
  SDX_MAX_WORKERS         thread pool bound for list extraction
  SDX_STRICT_SUBJECTS     raise AmbiguousSubject instead of picking the first
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


DEFAULT_ACCEPT = ", ".join([
    "text/turtle",
    "application/n-triples;q=0.9",
    "application/n-quads;q=0.9",
    "application/trig;q=0.9",
    "application/ld+json;q=0.8",
    "application/rdf+xml;q=0.7",
    "text/n3;q=0.7",
])

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass
class SdxConfig:
    document_location: str | None = None
    timeout: float = 30.0
    max_workers: int = 4
    strict_subjects: bool = False
    accept: str = DEFAULT_ACCEPT

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {self.max_workers}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SdxConfig:
        """Build a config from SDX_* environment variables, defaults elsewhere."""
        env = os.environ if environ is None else environ
        kwargs: dict = {}

        if env.get("SDX_DOCUMENT_LOCATION"):
            kwargs["document_location"] = env["SDX_DOCUMENT_LOCATION"]
        if "SDX_TIMEOUT" in env:
            kwargs["timeout"] = _parse_number(env, "SDX_TIMEOUT", float)
        if "SDX_MAX_WORKERS" in env:
            kwargs["max_workers"] = _parse_number(env, "SDX_MAX_WORKERS", int)
        if "SDX_STRICT_SUBJECTS" in env:
            kwargs["strict_subjects"] = _parse_flag(env, "SDX_STRICT_SUBJECTS")

        config = cls(**kwargs)
        logger.debug(f"Loaded configuration from environment: {config}")
        return config


def _parse_number(env: Mapping[str, str], key: str, kind: type):
    try:
        return kind(env[key])
    except ValueError:
        raise ConfigurationError(f"{key} must be a {kind.__name__}, got {env[key]!r}")


def _parse_flag(env: Mapping[str, str], key: str) -> bool:
    value = env[key].strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(f"{key} must be a boolean flag, got {env[key]!r}")
