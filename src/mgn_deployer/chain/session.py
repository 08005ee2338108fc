"""Web3 connection setup."""

from __future__ import annotations

import logging
from typing import Optional

import requests
from web3 import Web3

from ..config import NetworkConfig

logger = logging.getLogger(__name__)


def create_session(proxy: Optional[str] = None) -> requests.Session:
    session = requests.Session()
    if proxy:
        session.proxies = {"http": proxy, "https": proxy}
    return session


def create_web3(network: NetworkConfig) -> Web3:
    """Build a Web3 instance for ``network`` over HTTP JSON-RPC."""
    provider = Web3.HTTPProvider(
        network.rpc_url,
        request_kwargs={"timeout": network.request_timeout},
        session=create_session(network.proxy),
    )
    web3 = Web3(provider)
    logger.info("🔗 Connected to %s (%s)", network.name, network.rpc_url)
    return web3


def resolve_chain_id(web3: Web3, network: NetworkConfig) -> int:
    """Use the configured chain id, falling back to asking the node."""
    if network.chain_id is not None:
        return int(network.chain_id)
    chain_id = int(web3.eth.chain_id)
    logger.info("   Chain id reported by node: %d", chain_id)
    return chain_id
