"""
Configuration for batch sampling runs.

A configuration names the distributions to sample, how many samples to
draw from each and how to seed the underlying sources. It can be loaded
from a JSON file or built from a dictionary.
"""

import json
import warnings
from pathlib import Path
from typing import Any, Dict, List

from .distributions import Distribution
from .sampler import BACKENDS


KNOWN_KEYS = {"seed", "backend", "num_samples", "distributions"}


def load_config_dict(config_path: str) -> Dict[str, Any]:
    """Read a JSON config file into a dictionary."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        config_dict = json.load(f)
    if not isinstance(config_dict, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")
    return config_dict


class SamplingConfig:
    """Configuration for sampling runs."""

    def __init__(self, config_dict: Dict[str, Any]):
        self.config = config_dict

        unknown = sorted(set(config_dict) - KNOWN_KEYS)
        if unknown:
            warnings.warn(f"Ignoring unknown config keys: {', '.join(unknown)}")

        self.seed = config_dict.get("seed", 0)
        self.backend = config_dict.get("backend", "python")
        self.num_samples = config_dict.get("num_samples", 10000)
        self.distribution_strings: List[str] = list(config_dict.get("distributions", []))
        self._validate()
        self.distributions = [Distribution.from_string(s) for s in self.distribution_strings]
        self._check_duplicates()

    def _validate(self) -> None:
        if not isinstance(self.seed, int) or isinstance(self.seed, bool) or self.seed < 0:
            raise ValueError(f"seed must be a non-negative integer, got {self.seed!r}")
        if self.backend not in BACKENDS:
            raise ValueError(f"Unknown backend: {self.backend}")
        if not isinstance(self.num_samples, int) or isinstance(self.num_samples, bool) or self.num_samples <= 0:
            raise ValueError(f"num_samples must be a positive integer, got {self.num_samples!r}")
        if not self.distribution_strings:
            raise ValueError("At least one distribution must be provided")

    def _check_duplicates(self) -> None:
        # Results and derived seeds are keyed by the normalized string
        seen = set()
        for distribution in self.distributions:
            key = distribution.to_string()
            if key in seen:
                raise ValueError(f"Duplicate distribution: {key}")
            seen.add(key)

    @classmethod
    def from_file(cls, config_path: str) -> "SamplingConfig":
        """Load configuration from JSON file."""
        return cls(load_config_dict(config_path))

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "SamplingConfig":
        """Create configuration from dictionary."""
        return cls(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "backend": self.backend,
            "num_samples": self.num_samples,
            "distributions": [d.to_string() for d in self.distributions],
        }
