"""Configuration loading utilities for mgn-deployer."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .errors import UnknownEnvironmentError
from .paths import ARTIFACTS_DIR, DEFAULT_CONFIG_PATH, DEFAULT_CONSTANTS_PATH, OUTPUT_DIR

# Load .env file if it exists
load_dotenv()

# Network defaults mirroring the Hardhat project networks
# 当配置文件未声明某个网络时使用
NETWORK_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "hardhat": {
        "rpc_url": "http://127.0.0.1:8545",
        "chain_id": 31337,
    },
    "tenderly": {
        "rpc_url": None,  # 由 TENDERLY_FORK_ID 生成
        "chain_id": None,  # 从节点查询
    },
    "monadTestnet": {
        "rpc_url": "https://testnet-rpc.monad.xyz",
        "chain_id": 10143,
    },
    "fluentTestnet": {
        "rpc_url": "https://rpc.testnet.fluent.xyz/",
        "chain_id": 20994,
    },
    "supraEvmTestnet": {
        "rpc_url": "https://rpc-multivm.supra.com/rpc/v1/eth/wallet_integration",
        "chain_id": 0x7900790079,
    },
    "zenchainTestnet": {
        "rpc_url": "https://zenchain-testnet.api.onfinality.io/public",
        "chain_id": 8408,
    },
}

TENDERLY_RPC_TEMPLATE = "https://rpc.tenderly.co/fork/{fork_id}"


@dataclass
class NetworkConfig:
    """Connection settings for one JSON-RPC network."""

    name: str
    rpc_url: Optional[str] = None
    chain_id: Optional[int] = None
    proxy: Optional[str] = None  # 代理设置，如 "http://127.0.0.1:7890"
    request_timeout: int = 30


@dataclass
class TransactionConfig:
    """Settings for sending and confirming transactions."""

    private_key: Optional[str] = None      # 为空时使用节点解锁账户
    confirmation_timeout: int = 180        # 等待回执的超时（秒）
    poll_latency: float = 0.5
    gas_multiplier: float = 1.0


@dataclass
class DeploymentConfig:
    """Where artifacts, constants and checkpoints live."""

    artifacts_dir: str = str(ARTIFACTS_DIR)
    constants_file: str = str(DEFAULT_CONSTANTS_PATH)
    output_dir: str = str(OUTPUT_DIR)


@dataclass
class AppConfig:
    """Top-level configuration."""

    default_network: str = "tenderly"
    networks: Dict[str, NetworkConfig] = field(default_factory=dict)
    transaction: TransactionConfig = field(default_factory=TransactionConfig)
    deployment: DeploymentConfig = field(default_factory=DeploymentConfig)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "AppConfig":
        transaction_payload = payload.get("transaction", {}) or {}
        deployment_payload = payload.get("deployment", {}) or {}
        networks_payload = payload.get("networks", {}) or {}

        # 过滤掉以下划线开头的注释字段
        transaction_payload = {k: v for k, v in transaction_payload.items() if not k.startswith("_")}
        deployment_payload = {k: v for k, v in deployment_payload.items() if not k.startswith("_")}

        networks: Dict[str, NetworkConfig] = {}
        for name, defaults in NETWORK_DEFAULTS.items():
            networks[name] = NetworkConfig(name=name, **defaults)
        for name, network_payload in networks_payload.items():
            if name.startswith("_"):
                continue
            network_payload = {k: v for k, v in (network_payload or {}).items() if not k.startswith("_")}
            merged = {**NETWORK_DEFAULTS.get(name, {}), **network_payload}
            networks[name] = NetworkConfig(name=name, **merged)

        return cls(
            default_network=payload.get("default_network", cls.default_network),
            networks=networks,
            transaction=TransactionConfig(
                **{**TransactionConfig().__dict__, **transaction_payload}
            ),
            deployment=DeploymentConfig(
                **{**DeploymentConfig().__dict__, **deployment_payload}
            ),
        )

    def network_for(self, name: Optional[str] = None) -> NetworkConfig:
        network_name = name or self.default_network
        network = self.networks.get(network_name)
        if network is None:
            raise UnknownEnvironmentError(
                network_name, f"known networks: {', '.join(sorted(self.networks))}"
            )
        if not network.rpc_url:
            raise UnknownEnvironmentError(network_name, "no rpc_url configured")
        return network


def load_config(path: Optional[str] = None) -> AppConfig:
    """Load configuration from `path` or the default location.

    Environment variables (higher priority than config file):
    - MGN_DEPLOYER_PRIVATE_KEY or PRIVATE_KEY: deployer account key
    - MGN_DEPLOYER_NETWORK: network used when --network is not given
    - MGN_DEPLOYER_RPC_URL: RPC endpoint override for that network
    - MGN_DEPLOYER_PROXY: HTTP proxy for RPC requests
    - TENDERLY_FORK_ID: builds the tenderly fork RPC URL
    """

    candidate_paths = []
    if path:
        candidate_paths.append(Path(path))
    candidate_paths.append(DEFAULT_CONFIG_PATH)

    for candidate in candidate_paths:
        if candidate.is_file():
            with candidate.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
            config = AppConfig.from_dict(data)

            if not config.transaction.private_key:
                config.transaction.private_key = os.getenv(
                    "MGN_DEPLOYER_PRIVATE_KEY"
                ) or os.getenv("PRIVATE_KEY")

            env_network = os.getenv("MGN_DEPLOYER_NETWORK")
            if env_network:
                config.default_network = env_network

            fork_id = os.getenv("TENDERLY_FORK_ID")
            tenderly = config.networks.get("tenderly")
            if fork_id and tenderly is not None and not tenderly.rpc_url:
                tenderly.rpc_url = TENDERLY_RPC_TEMPLATE.format(fork_id=fork_id)

            env_rpc = os.getenv("MGN_DEPLOYER_RPC_URL")
            if env_rpc:
                network = config.networks.setdefault(
                    config.default_network, NetworkConfig(name=config.default_network)
                )
                network.rpc_url = env_rpc

            env_proxy = os.getenv("MGN_DEPLOYER_PROXY")
            if env_proxy:
                for network in config.networks.values():
                    network.proxy = env_proxy

            return config

    raise FileNotFoundError(
        f"Could not find configuration file. Looked in: {', '.join(str(p) for p in candidate_paths)}"
    )
