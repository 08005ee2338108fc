"""Checkpointed, dependency-ordered deployment engine.

- resolve: orders UnitDescriptors so dependencies come first
- DeploymentEngine: deploys or rehydrates each unit, persisting progress
- PostSetupRunner: applies guarded cross-cutting calls after provisioning
- apply_isolated: catch-report-continue primitive shared by both
"""

from .models import (
    ActionFailure,
    ArtifactHandle,
    Deployer,
    IsolationReport,
    RunContext,
    RunReport,
    UnitAction,
    UnitDescriptor,
    UnitFailure,
    UnitStatus,
)
from .isolation import apply_isolated
from .resolver import resolve
from .engine import DeploymentEngine
from .post_setup import PostSetupCall, PostSetupRunner

__all__ = [
    "ActionFailure",
    "ArtifactHandle",
    "Deployer",
    "IsolationReport",
    "RunContext",
    "RunReport",
    "UnitAction",
    "UnitDescriptor",
    "UnitFailure",
    "UnitStatus",
    "apply_isolated",
    "resolve",
    "DeploymentEngine",
    "PostSetupCall",
    "PostSetupRunner",
]
