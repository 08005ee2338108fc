"""Chain access: artifacts, web3 connection and the deployer."""

from .artifacts import ArtifactRegistry, ContractArtifact
from .deployer import ContractHandle, Web3Deployer
from .session import create_session, create_web3, resolve_chain_id

__all__ = [
    "ArtifactRegistry",
    "ContractArtifact",
    "ContractHandle",
    "Web3Deployer",
    "create_session",
    "create_web3",
    "resolve_chain_id",
]
