"""Deployment Targets and Deployment Rules.

The rule table is data: adding a service means adding one ``mcp_server_rule``
entry, not new merge code. Target paths are relative to the operator's home
directory and resolved once per deploy.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from ..vault.errors import TargetUnavailable
from .document import KeyPath


@dataclass(frozen=True)
class FieldAssignment:
    """Copy bundle ``field`` to ``path`` inside the target document."""

    field: str
    path: KeyPath
    optional: bool = False


@dataclass(frozen=True)
class DeploymentTarget:
    """A configuration file known by an ordered list of candidate paths.

    Attributes:
        name: Short identifier used in reports ("mcp").
        candidates: Tried in order; the first existing one is the primary.
        aliases: Extra locations that receive identical bytes when they differ
            from the resolved primary.
        create_if_missing: Start from an empty document at the first candidate
            when no candidate exists, instead of reporting the target unavailable.
    """

    name: str
    candidates: Tuple[Path, ...]
    aliases: Tuple[Path, ...] = ()
    create_if_missing: bool = False

    def candidate_paths(self, home: Path) -> List[Path]:
        return [Path(home) / p for p in self.candidates]

    def alias_paths(self, home: Path) -> List[Path]:
        return [Path(home) / p for p in self.aliases]

    def resolve(self, home: Path) -> Optional[Path]:
        """Return the first existing candidate.

        Returns None when nothing exists but the target may be created.

        Raises:
            TargetUnavailable: No candidate exists and creation is not allowed.
        """
        paths = self.candidate_paths(home)
        for path in paths:
            if path.is_file():
                return path
        if self.create_if_missing:
            return None
        raise TargetUnavailable(self.name, paths)


@dataclass(frozen=True)
class DeploymentRule:
    """Bundle -> target mapping.

    Attributes:
        bundle: Vault bundle name.
        target: ``DeploymentTarget.name``.
        primary_field: Field that decides readiness (skip if placeholder).
        requires: Key path that must already exist as an object in the target.
            The merger patches known entries; it never invents them.
        assignments: Field copies applied when the bundle is ready.
    """

    bundle: str
    target: str
    primary_field: str
    requires: KeyPath
    assignments: Tuple[FieldAssignment, ...]


def mcp_server_rule(
    bundle: str,
    server: str,
    primary_field: str,
    env: Dict[str, str],
    optional_env: Optional[Dict[str, str]] = None,
    target: str = "mcp",
) -> DeploymentRule:
    """Rule writing bundle fields into ``mcpServers.<server>.env``."""
    server_path = ("mcpServers", server)
    assignments = [FieldAssignment(field, server_path + ("env", var)) for field, var in env.items()]
    assignments += [
        FieldAssignment(field, server_path + ("env", var), optional=True)
        for field, var in (optional_env or {}).items()
    ]
    return DeploymentRule(
        bundle=bundle,
        target=target,
        primary_field=primary_field,
        requires=server_path,
        assignments=tuple(assignments),
    )


MCP_TARGET = DeploymentTarget(
    name="mcp",
    candidates=(
        Path(".cc-mirror/mclaude/config/.mcp.json"),
        Path(".mcp.json"),
    ),
    aliases=(Path(".mcp.json"),),
)

DEFAULT_TARGETS: Tuple[DeploymentTarget, ...] = (MCP_TARGET,)

DEFAULT_RULES: Tuple[DeploymentRule, ...] = (
    mcp_server_rule(
        "github_personal", "github", "token",
        env={"token": "GITHUB_PERSONAL_ACCESS_TOKEN"},
    ),
    mcp_server_rule(
        "twitter", "twitter", "api_key",
        env={
            "api_key": "API_KEY",
            "api_secret": "API_SECRET_KEY",
            "access_token": "ACCESS_TOKEN",
            "access_secret": "ACCESS_TOKEN_SECRET",
        },
    ),
    mcp_server_rule(
        "google_workspace", "google-workspace", "client_id",
        env={
            "client_id": "GOOGLE_OAUTH_CLIENT_ID",
            "client_secret": "GOOGLE_OAUTH_CLIENT_SECRET",
            "email": "USER_GOOGLE_EMAIL",
        },
    ),
    mcp_server_rule(
        "jira", "jira", "api_token",
        env={"api_token": "JIRA_API_TOKEN"},
        optional_env={"url": "JIRA_URL", "email": "JIRA_EMAIL"},
    ),
    mcp_server_rule(
        "linkedin", "linkedin", "access_token",
        env={"access_token": "LINKEDIN_ACCESS_TOKEN"},
        optional_env={"client_id": "LINKEDIN_CLIENT_ID", "client_secret": "LINKEDIN_CLIENT_SECRET"},
    ),
)


def rules_for_target(rules: Iterable[DeploymentRule], target: str) -> List[DeploymentRule]:
    return [rule for rule in rules if rule.target == target]
