"""Web3Deployer against a mocked web3 instance."""

import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from web3 import Web3
from web3.exceptions import TimeExhausted

from mgn_deployer.chain import ArtifactRegistry, ContractHandle, Web3Deployer
from mgn_deployer.errors import (
    ArtifactError,
    DeploymentError,
    DeploymentTimeoutError,
    TransactionRevertedError,
)

DEPLOYED = "0x" + "5f" * 20
NODE_ACCOUNT = Web3.to_checksum_address("0x" + "f3" * 20)
TX_HASH = b"\x11" * 32


class Web3DeployerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        (root / "MGN.json").write_text(
            json.dumps({"contractName": "MGN", "abi": [], "bytecode": "0x6080"}), encoding="utf-8"
        )
        self.artifacts = ArtifactRegistry(root)

        self.web3 = MagicMock()
        self.web3.eth.default_account = None
        self.web3.eth.accounts = [NODE_ACCOUNT]
        self.web3.eth.get_code.return_value = b"\x60\x80"
        self.web3.eth.wait_for_transaction_receipt.return_value = {
            "status": 1,
            "contractAddress": DEPLOYED,
            "transactionHash": TX_HASH,
            "blockNumber": 7,
        }
        self.factory = self.web3.eth.contract.return_value
        self.factory.constructor.return_value.transact.return_value = TX_HASH

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _deployer(self, **kwargs):
        return Web3Deployer(self.web3, self.artifacts, confirmation_timeout=5, poll_latency=0.1, **kwargs)

    def test_deploy_with_unlocked_account(self) -> None:
        handle = self._deployer().deploy("MGN", "arg")

        self.assertIsInstance(handle, ContractHandle)
        self.assertEqual(handle.address, Web3.to_checksum_address(DEPLOYED))
        self.factory.constructor.assert_called_once_with("arg")
        params = self.factory.constructor.return_value.transact.call_args[0][0]
        self.assertEqual(params["from"], NODE_ACCOUNT)
        self.web3.eth.wait_for_transaction_receipt.assert_called_once_with(TX_HASH, timeout=5, poll_latency=0.1)

    def test_receipt_timeout_is_bounded(self) -> None:
        self.web3.eth.wait_for_transaction_receipt.side_effect = TimeExhausted("not mined")
        with self.assertRaises(DeploymentTimeoutError) as ctx:
            self._deployer().deploy("MGN")
        self.assertEqual(ctx.exception.timeout, 5)

    def test_reverted_transaction(self) -> None:
        self.web3.eth.wait_for_transaction_receipt.return_value = {
            "status": 0,
            "contractAddress": None,
            "transactionHash": TX_HASH,
            "blockNumber": 7,
        }
        with self.assertRaises(TransactionRevertedError) as ctx:
            self._deployer().deploy("MGN")
        self.assertEqual(ctx.exception.tx_hash, Web3.to_hex(TX_HASH))

    def test_bind_existing_requires_code(self) -> None:
        self.web3.eth.get_code.return_value = b""
        with self.assertRaises(ArtifactError):
            self._deployer().bind_existing("MGN", DEPLOYED)

    def test_no_signer_available(self) -> None:
        self.web3.eth.accounts = []
        with self.assertRaises(DeploymentError):
            self._deployer().deploy("MGN")

    def test_private_key_signs_locally(self) -> None:
        self.web3.eth.get_transaction_count.return_value = 3
        self.factory.constructor.return_value.build_transaction.return_value = {
            "to": Web3.to_checksum_address("0x" + "22" * 20),
            "value": 0,
            "gas": 100000,
            "gasPrice": 1,
            "nonce": 3,
            "chainId": 31337,
            "data": "0x6080",
        }
        self.web3.eth.send_raw_transaction.return_value = TX_HASH

        deployer = self._deployer(private_key="0x" + "11" * 32, chain_id=31337)
        deployer.deploy("MGN")

        params = self.factory.constructor.return_value.build_transaction.call_args[0][0]
        self.assertEqual(params["nonce"], 3)
        self.assertEqual(params["chainId"], 31337)
        self.assertEqual(params["from"], deployer.account.address)
        self.web3.eth.send_raw_transaction.assert_called_once()
        self.factory.constructor.return_value.transact.assert_not_called()

    def test_gas_multiplier_pads_estimate(self) -> None:
        self.factory.constructor.return_value.estimate_gas.return_value = 1000
        self._deployer(gas_multiplier=1.5).deploy("MGN")
        params = self.factory.constructor.return_value.transact.call_args[0][0]
        self.assertEqual(params["gas"], 1500)

    def test_libraries_ignored_for_unlinked_artifact(self) -> None:
        self._deployer().deploy("MGN", libraries={"Trig": "0x" + "01" * 20})
        self.web3.eth.contract.assert_any_call(abi=[], bytecode="0x6080")

    def test_handle_transact_and_call(self) -> None:
        handle = self._deployer().bind_existing("MGN", DEPLOYED)
        handle.contract.functions.setMinter.return_value.transact.return_value = TX_HASH
        handle.contract.functions.minter.return_value.call.return_value = DEPLOYED

        handle.transact("setMinter", DEPLOYED)
        self.assertEqual(handle.call("minter"), DEPLOYED)
        handle.contract.functions.setMinter.assert_called_once_with(DEPLOYED)


if __name__ == "__main__":
    unittest.main()
