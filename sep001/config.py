"""
sep001/config.py

Decoder configuration.

Sources, lowest to highest precedence when combined by the CLI:
    defaults → YAML file (--config) → environment → command-line flags

YAML layout:
    api_url: http://127.0.0.1:5001
    timeout: 30
    algorithms: [EdDSA, ES256]     # or a single name: EdDSA

Environment:
    SEP001_API_URL, SEP001_TIMEOUT, SEP001_ALGORITHMS (comma separated)
"""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from sep001.core.crypto import ALGORITHMS
from sep001.decoder.compact import CompactDecoder
from sep001.storage.kubo import DEFAULT_API_URL, KuboBlockStore

ENV_PREFIX = "SEP001_"


@dataclass(frozen=True)
class DecoderConfig:
    api_url:    str = DEFAULT_API_URL
    timeout:    float = 30.0
    algorithms: Optional[List[str]] = None

    def __post_init__(self):
        if not isinstance(self.api_url, str) or not self.api_url:
            raise ValueError("api_url must be a non-empty string")
        try:
            timeout = float(self.timeout)
        except (TypeError, ValueError):
            raise ValueError(f"timeout must be a number, got {self.timeout!r}")
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        object.__setattr__(self, "timeout", timeout)

        if self.algorithms is not None:
            algorithms = self.algorithms
            if isinstance(algorithms, str):
                algorithms = [a.strip() for a in algorithms.split(",") if a.strip()]
            elif not isinstance(algorithms, (list, tuple)):
                raise ValueError(
                    f"algorithms must be a list of names, got {type(algorithms).__name__}"
                )
            algorithms = list(algorithms)
            unknown = [a for a in algorithms if not isinstance(a, str) or a not in ALGORITHMS]
            if unknown or not algorithms:
                raise ValueError(
                    f"Invalid algorithms {unknown or algorithms}. "
                    f"Valid: {sorted(ALGORITHMS)}"
                )
            object.__setattr__(self, "algorithms", algorithms)

    # ── Loaders ───────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DecoderConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config key(s): {sorted(unknown)}")
        return cls(**dict(data))

    @classmethod
    def from_yaml(cls, path: Path) -> "DecoderConfig":
        """Load config from a YAML file. An empty file yields the defaults."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DecoderConfig":
        return cls().merge(**cls.env_overrides(environ))

    @staticmethod
    def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        env = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}
        if env.get(ENV_PREFIX + "API_URL"):
            overrides["api_url"] = env[ENV_PREFIX + "API_URL"]
        if env.get(ENV_PREFIX + "TIMEOUT"):
            overrides["timeout"] = env[ENV_PREFIX + "TIMEOUT"]
        if env.get(ENV_PREFIX + "ALGORITHMS"):
            overrides["algorithms"] = [
                a.strip() for a in env[ENV_PREFIX + "ALGORITHMS"].split(",") if a.strip()
            ]
        return overrides

    def merge(self, **overrides: Any) -> "DecoderConfig":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    # ── Wiring ────────────────────────────────────────────────

    def build_store(self) -> KuboBlockStore:
        return KuboBlockStore(api_url=self.api_url, timeout=self.timeout)

    def build_decoder(self) -> CompactDecoder:
        return CompactDecoder(self.build_store(), algorithms=self.algorithms)
