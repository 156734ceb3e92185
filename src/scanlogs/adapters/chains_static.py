"""Default Etherscan-family explorer endpoints.

API keys are read from the environment (a local `.env` file is honored).
Without a key, Etherscan-operated explorers only allow about one request
every five seconds, so keyless endpoints are throttled accordingly.
"""

from __future__ import annotations

import os
from dataclasses import replace
from typing import Mapping, Optional

from dotenv import load_dotenv

from ..domain.models import ChainEndpoint

KEYLESS_REQUESTS_PER_WINDOW = 1
KEYLESS_WINDOW_S = 5.0

DEFAULT_CHAINS: dict[int, ChainEndpoint] = {
    1:        ChainEndpoint(1, "etherscan", "https://api.etherscan.io/api"),
    10:       ChainEndpoint(10, "optimistic-etherscan", "https://api-optimistic.etherscan.io/api"),
    56:       ChainEndpoint(56, "bscscan", "https://api.bscscan.com/api"),
    100:      ChainEndpoint(100, "gnosis-blockscout", "https://gnosis.blockscout.com/api", requests_per_window=10),
    137:      ChainEndpoint(137, "polygonscan", "https://api.polygonscan.com/api"),
    8453:     ChainEndpoint(8453, "basescan", "https://api.basescan.org/api"),
    42161:    ChainEndpoint(42161, "arbiscan", "https://api.arbiscan.io/api"),
    11155111: ChainEndpoint(11155111, "sepolia-etherscan", "https://api-sepolia.etherscan.io/api"),
}

API_KEY_ENV: dict[int, str] = {
    1: "ETHERSCAN_API_KEY",
    10: "OPTIMISTIC_ETHERSCAN_API_KEY",
    56: "BSCSCAN_API_KEY",
    100: "BLOCKSCOUT_GNOSIS_API_KEY",
    137: "POLYGONSCAN_API_KEY",
    8453: "BASESCAN_API_KEY",
    42161: "ARBISCAN_API_KEY",
    11155111: "ETHERSCAN_API_KEY",
}

# Blockscout does not require a key
_KEY_OPTIONAL = {100}


def load_chains(env: Optional[Mapping[str, str]] = None) -> dict[int, ChainEndpoint]:
    """Return DEFAULT_CHAINS with API keys filled in from `env` (default: os.environ)."""
    if env is None:
        load_dotenv()
        env = os.environ
    out: dict[int, ChainEndpoint] = {}
    for chain_id, ep in DEFAULT_CHAINS.items():
        key = env.get(API_KEY_ENV[chain_id]) or None
        if key:
            out[chain_id] = replace(ep, api_key=key)
        elif chain_id in _KEY_OPTIONAL:
            out[chain_id] = ep
        else:
            out[chain_id] = replace(ep, requests_per_window=KEYLESS_REQUESTS_PER_WINDOW, window_s=KEYLESS_WINDOW_S)
    return out
