"""
Configuration
=============
Numerical knobs of the splitter and the environment driven settings used by
the job sources and the command line entry point.

Exports:
    SplitterConfig: tolerances and the optional thread fan-out.
    RuntimeSettings: key-value store credentials and logging level.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_API_BASE_URL = "https://api.apify.com/v2"


@dataclass
class SplitterConfig:
    """Tolerances used by the edge pair analysis and the greedy driver."""
    # Relative tolerance for every area comparison (candidate area, balance check)
    area_tolerance: float = 1e-5
    # Slack on the [0, 1] parameter of a projected point
    projection_slack: float = 1e-9
    # |cross(A, B)| <= parallel_epsilon * |A| * |B| means parallel edges
    parallel_epsilon: float = 1e-12
    # area <= degenerate_ratio * diag^2 means a degenerate polygon / part
    degenerate_ratio: float = 1e-12
    # Relative length by which a winning cut is extended before slicing
    cut_extension: float = 1e-7
    # Optional fan-out of edge pair evaluations to worker threads
    parallel: bool = False
    max_workers: Optional[int] = None

    def __post_init__(self):
        if self.area_tolerance <= 0:
            raise ValueError("area_tolerance must be positive.")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError("max_workers must be at least 1.")


@dataclass
class RuntimeSettings:
    """Settings read from the process environment."""
    api_token: Optional[str] = None
    store_id: Optional[str] = None
    api_base_url: str = DEFAULT_API_BASE_URL
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RuntimeSettings":
        env = os.environ if environ is None else environ
        return cls(
            api_token=env.get("APIFY_TOKEN"),
            store_id=env.get("APIFY_DEFAULT_KEY_VALUE_STORE_ID"),
            api_base_url=env.get("APIFY_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
            log_level=env.get("POLYSPLIT_LOG_LEVEL", "INFO").upper(),
        )

    @property
    def has_store(self) -> bool:
        return bool(self.store_id)
