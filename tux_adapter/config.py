"""
Tux Exchange Adapter - Configuration.

Environment variables (a .env file is honoured):
    TUX_API_KEY          API key for private calls
    TUX_API_SECRET       API secret for private calls
    TUX_API_URL          Endpoint override
    TUX_TIMEOUT_SECONDS  Total request timeout
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .signer import TUX_API_URL


ENV_PREFIX = "TUX"


@dataclass
class AdapterConfig:
    """Adapter configuration."""

    api_key: Optional[str] = None
    api_secret: Optional[str] = None

    base_url: str = TUX_API_URL

    timeout_seconds: float = 30.0
    """Total request timeout."""

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "AdapterConfig":
        """
        Create config from environment variables.

        Args:
            load_dotenv_file: Load a .env file first

        Returns:
            AdapterConfig
        """
        if load_dotenv_file:
            load_dotenv()

        timeout = os.environ.get(f"{ENV_PREFIX}_TIMEOUT_SECONDS")

        return cls(
            api_key=os.environ.get(f"{ENV_PREFIX}_API_KEY") or None,
            api_secret=os.environ.get(f"{ENV_PREFIX}_API_SECRET") or None,
            base_url=os.environ.get(f"{ENV_PREFIX}_API_URL") or TUX_API_URL,
            timeout_seconds=float(timeout) if timeout else 30.0,
        )
