"""Central configuration defaults for ldpc_bp."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class DecoderConfig:
    p: float = 0.9  # P(received bit is correct) under the weight transform
    max_iter: int = 1000
    method: str = "logbp"
    sweep_methods: List[str] = field(default_factory=lambda: ["logbp", "min_sum", "bp"])
    trials: int = 40
    min_dist_max_k: int = 16
    seed: int = 0


DEFAULTS = DecoderConfig()


def get_config() -> DecoderConfig:
    """Return a copy of the default configuration."""

    return DecoderConfig(**DEFAULTS.__dict__)
