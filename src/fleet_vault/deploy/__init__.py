"""Deployment: merge vault bundles into downstream JSON configuration."""

from .document import TargetDocument
from .merger import BundleOutcome, DeployReport, DeploymentMerger, TargetOutcome
from .rules import (
    DEFAULT_RULES,
    DEFAULT_TARGETS,
    MCP_TARGET,
    DeploymentRule,
    DeploymentTarget,
    FieldAssignment,
    mcp_server_rule,
)

__all__ = [
    "TargetDocument",
    "BundleOutcome",
    "DeployReport",
    "DeploymentMerger",
    "TargetOutcome",
    "DEFAULT_RULES",
    "DEFAULT_TARGETS",
    "MCP_TARGET",
    "DeploymentRule",
    "DeploymentTarget",
    "FieldAssignment",
    "mcp_server_rule",
]
