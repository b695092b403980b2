"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PollConfig:
    """Rating poll settings for the core poll loop."""

    max_concurrency: int = 4


@dataclass(frozen=True)
class LookupConfig:
    """HTTP settings consumed by the solved.ac lookup adapter."""

    base_url: str = "https://solved.ac/api/v3"
    timeout_seconds: float = 10.0
