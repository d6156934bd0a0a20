"""Configuration models for GitExtender.

ProviderConfig holds transport and fan-out settings for a provider client.
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_API_URL = "https://api.github.com"


class ProviderConfig(BaseModel):
    """Per-client provider settings."""

    base_url: str = Field(
        default_factory=lambda: os.environ.get("GITEXTENDER_API_URL", DEFAULT_API_URL)
    )
    api_version: str = "2022-11-28"
    timeout: float = 30.0
    per_page: int = Field(default=100, ge=1, le=100)  # Provider maximum
    max_concurrency: Optional[int] = Field(default=16, ge=1)  # None = uncapped
    max_retries: int = Field(default=1, ge=1)  # 1 = single attempt, no retry
