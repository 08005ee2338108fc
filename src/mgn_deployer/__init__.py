"""mgn-deployer: resumable, checkpointed deployment of the MGN protocol."""

__version__ = "0.1.0"
