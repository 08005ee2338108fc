"""Deployer backed by web3.py."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from eth_account import Account
from web3 import Web3
from web3.exceptions import TimeExhausted

from ..errors import ArtifactError, DeploymentError, DeploymentTimeoutError, TransactionRevertedError
from .artifacts import ArtifactRegistry

logger = logging.getLogger(__name__)


@dataclass
class ContractHandle:
    """A deployed contract bound to the deployer that sends its transactions."""

    name: str
    address: str
    contract: Any = field(repr=False)
    deployer: "Web3Deployer" = field(repr=False)

    def transact(self, fn_name: str, *args: Any, value: int = 0) -> Any:
        return self.deployer.transact(self, fn_name, *args, value=value)

    def call(self, fn_name: str, *args: Any) -> Any:
        return getattr(self.contract.functions, fn_name)(*args).call()


class Web3Deployer:
    """Deploys Hardhat artifacts and sends transactions, one at a time.

    Every send blocks until the receipt is mined or ``confirmation_timeout``
    elapses. With a private key transactions are signed locally, otherwise
    they are sent from the node's first unlocked account.
    """

    def __init__(
        self,
        web3: Web3,
        artifacts: ArtifactRegistry,
        *,
        private_key: Optional[str] = None,
        chain_id: Optional[int] = None,
        confirmation_timeout: int = 180,
        poll_latency: float = 0.5,
        gas_multiplier: float = 1.0,
    ) -> None:
        self.web3 = web3
        self.artifacts = artifacts
        self.account = Account.from_key(private_key) if private_key else None
        self.chain_id = chain_id
        self.confirmation_timeout = confirmation_timeout
        self.poll_latency = poll_latency
        self.gas_multiplier = gas_multiplier
        self._sender: Optional[str] = None

    @property
    def sender(self) -> str:
        if self._sender is None:
            if self.account is not None:
                self._sender = self.account.address
            elif self.web3.eth.default_account:
                self._sender = self.web3.eth.default_account
            else:
                accounts = self.web3.eth.accounts
                if not accounts:
                    raise DeploymentError("No PRIVATE_KEY configured and the node exposes no unlocked accounts")
                self._sender = accounts[0]
        return self._sender

    def deploy(self, kind: str, *args: Any, libraries: Optional[Dict[str, str]] = None) -> ContractHandle:
        artifact = self.artifacts.get(kind)
        if libraries and not artifact.needs_linking:
            logger.warning("   %s has no library placeholders, ignoring %s", kind, ", ".join(libraries))
            libraries = None
        factory = self.web3.eth.contract(abi=artifact.abi, bytecode=artifact.linked_bytecode(libraries))
        operation = f"deploy {kind}"
        logger.info("   ⏳ %s", operation)
        receipt = self._send(factory.constructor(*args), operation)
        address = receipt["contractAddress"]
        if not address:
            raise TransactionRevertedError(operation, Web3.to_hex(receipt["transactionHash"]))
        return self.bind_existing(kind, address)

    def bind_existing(self, kind: str, address: str) -> ContractHandle:
        artifact = self.artifacts.get(kind)
        checksum = Web3.to_checksum_address(address)
        if not self.web3.eth.get_code(checksum):
            raise ArtifactError(f"No contract code at {checksum} for {kind}")
        contract = self.web3.eth.contract(address=checksum, abi=artifact.abi)
        return ContractHandle(name=kind, address=checksum, contract=contract, deployer=self)

    def transact(self, handle: ContractHandle, fn_name: str, *args: Any, value: int = 0) -> Any:
        function = getattr(handle.contract.functions, fn_name)(*args)
        return self._send(function, f"{handle.name}.{fn_name}", value=value)

    def _send(self, function: Any, operation: str, value: int = 0) -> Any:
        tx_params: Dict[str, Any] = {"from": self.sender, "value": value}
        if self.gas_multiplier != 1.0:
            estimate = function.estimate_gas(tx_params)
            tx_params["gas"] = int(estimate * self.gas_multiplier)

        if self.account is not None:
            tx_params["nonce"] = self.web3.eth.get_transaction_count(self.account.address, "pending")
            tx_params["chainId"] = self.chain_id or self.web3.eth.chain_id
            transaction = function.build_transaction(tx_params)
            signed = self.account.sign_transaction(transaction)
            tx_hash = self.web3.eth.send_raw_transaction(signed.raw_transaction)
        else:
            tx_hash = function.transact(tx_params)

        try:
            receipt = self.web3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=self.confirmation_timeout,
                poll_latency=self.poll_latency,
            )
        except TimeExhausted as exc:
            raise DeploymentTimeoutError(operation, self.confirmation_timeout) from exc

        if receipt["status"] == 0:
            raise TransactionRevertedError(operation, Web3.to_hex(tx_hash))
        logger.debug("   %s mined in block %s", operation, receipt["blockNumber"])
        return receipt
