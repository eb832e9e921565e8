"""Deployment Merger - patch vault values into target configuration files.

For each Deployment Target:
  1. Resolve the primary path (first existing candidate).
  2. Parse the current document; refuse to merge into a corrupt file.
  3. Apply every ready bundle's field assignments in memory.
  4. Back up the on-disk bytes to ``<file>.bak`` (single generation).
  5. Atomically write the merged document to the primary path and to every
     alias path that is a different file.

A failure in one target is recorded and the remaining targets proceed.
Targets where every bundle was skipped are not touched at all.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..core import EventType, log_event
from ..fsutil import atomic_write_bytes, backup_file
from ..vault.bundle import Vault, is_placeholder, not_ready_reason
from ..vault.errors import ParseError, TargetUnavailable
from .document import TargetDocument
from .rules import DEFAULT_RULES, DEFAULT_TARGETS, DeploymentRule, DeploymentTarget, rules_for_target

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_SKIP = "skip"

TARGET_WRITTEN = "written"
TARGET_UNCHANGED = "unchanged"
TARGET_UNAVAILABLE = "unavailable"
TARGET_FAILED = "failed"


@dataclass
class BundleOutcome:
    bundle: str
    status: str
    reason: Optional[str] = None
    def line(self) -> str:
        if self.status == STATUS_OK:
            return f"[OK] {self.bundle}"
        return f"[SKIP] {self.bundle} — {self.reason}"


@dataclass
class TargetOutcome:
    target: str
    status: str
    path: Optional[Path] = None
    synced: List[Path] = field(default_factory=list)
    backups: List[Path] = field(default_factory=list)
    error: Optional[str] = None

    def lines(self) -> List[str]:
        if self.status == TARGET_UNAVAILABLE:
            return [f"[WARN] {self.error}"]
        if self.status == TARGET_FAILED:
            return [f"[FAIL] {self.target} — {self.error}"]
        lines = [f"[OK] Synced to {path}" for path in self.synced]
        lines += [f"[OK] Backup saved to {path}" for path in self.backups]
        return lines


@dataclass
class DeployReport:
    bundles: List[BundleOutcome] = field(default_factory=list)
    targets: List[TargetOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(t.status != TARGET_FAILED for t in self.targets)

    def bundle(self, name: str) -> Optional[BundleOutcome]:
        for outcome in self.bundles:
            if outcome.bundle == name:
                return outcome
        return None

    def target(self, name: str) -> Optional[TargetOutcome]:
        for outcome in self.targets:
            if outcome.target == name:
                return outcome
        return None

    def lines(self) -> List[str]:
        out = [line for t in self.targets if t.status in (TARGET_UNAVAILABLE, TARGET_FAILED) for line in t.lines()]
        out += [b.line() for b in self.bundles]
        out += [line for t in self.targets if t.status == TARGET_WRITTEN for line in t.lines()]
        return out

    def record(self, bundle: str, reason: Optional[str]) -> None:
        # One outcome per bundle; any successful rule wins over skips
        outcome = self.bundle(bundle)
        if outcome is None:
            outcome = BundleOutcome(bundle, STATUS_SKIP, reason)
            self.bundles.append(outcome)
        if reason is None:
            outcome.status = STATUS_OK
            outcome.reason = None


class DeploymentMerger:
    """Applies Deployment Rules from a decrypted vault to target documents.

    Args:
        home: Base directory for relative target paths.
        targets: Known Deployment Targets.
        rules: Deployment Rules; rules naming an unknown target are ignored.
    """

    def __init__(
        self,
        home: Path,
        targets: Sequence[DeploymentTarget] = DEFAULT_TARGETS,
        rules: Sequence[DeploymentRule] = DEFAULT_RULES,
    ):
        self.home = Path(home)
        self.targets = list(targets)
        self.rules = list(rules)

    def deploy(self, vault: Vault) -> DeployReport:
        report = DeployReport()
        log_event(
            EventType.DEPLOY_STARTED,
            "Deploying vault bundles",
            bundles=len(vault),
            targets=[t.name for t in self.targets],
        )
        for target in self.targets:
            rules = rules_for_target(self.rules, target.name)
            if rules:
                report.targets.append(self._deploy_target(target, rules, vault, report))

        log_event(
            EventType.DEPLOY_COMPLETED,
            "Deployment finished",
            ok=[b.bundle for b in report.bundles if b.status == STATUS_OK],
            skipped=[b.bundle for b in report.bundles if b.status == STATUS_SKIP],
            failed_targets=[t.target for t in report.targets if t.status == TARGET_FAILED],
        )
        return report

    def _deploy_target(
        self,
        target: DeploymentTarget,
        rules: List[DeploymentRule],
        vault: Vault,
        report: DeployReport,
    ) -> TargetOutcome:
        try:
            primary = target.resolve(self.home)
        except TargetUnavailable as exc:
            log_event(EventType.DEPLOY_TARGET_UNAVAILABLE, str(exc), target=target.name, tried=exc.tried)
            self._skip_all(report, rules, f"{target.name} not found")
            return TargetOutcome(target.name, TARGET_UNAVAILABLE, error=str(exc))

        creating = primary is None
        if creating:
            primary = target.candidate_paths(self.home)[0]
            logger.info("Creating %s at %s", target.name, primary)

        try:
            document = TargetDocument(source=primary) if creating else TargetDocument.load(primary)
            applied = self._apply_rules(target, rules, vault, document, report)
            if not applied:
                logger.info("No ready bundles for %s, leaving %s untouched", target.name, primary)
                return TargetOutcome(target.name, TARGET_UNCHANGED, path=primary)
            outcome = self._write(target, primary, document.to_bytes(), creating)
        except (ParseError, OSError) as exc:
            log_event(EventType.DEPLOY_TARGET_FAILED, "Target not updated", target=target.name, error=str(exc))
            self._skip_all(report, rules, f"{target.name} not updated")
            return TargetOutcome(target.name, TARGET_FAILED, path=primary, error=str(exc))

        for rule in applied:
            report.record(rule.bundle, None)
        return outcome

    def _apply_rules(
        self,
        target: DeploymentTarget,
        rules: List[DeploymentRule],
        vault: Vault,
        document: TargetDocument,
        report: DeployReport,
    ) -> List[DeploymentRule]:
        """Apply ready rules to ``document`` in memory. Returns the applied rules."""
        applied = []
        for rule in rules:
            reason = self._check_rule(rule, target, vault.get(rule.bundle), document)
            if reason is not None:
                log_event(EventType.DEPLOY_BUNDLE_SKIPPED, "Bundle skipped", bundle=rule.bundle, reason=reason)
                report.record(rule.bundle, reason)
                continue

            bundle = vault.get(rule.bundle)
            for assignment in rule.assignments:
                value = bundle.get(assignment.field)
                if value is None or is_placeholder(value):
                    # Only optional fields get here; required ones were checked
                    logger.debug("Not writing optional %s.%s", rule.bundle, assignment.field)
                    continue
                document.set(assignment.path, value)
            applied.append(rule)
        return applied

    @staticmethod
    def _check_rule(
        rule: DeploymentRule,
        target: DeploymentTarget,
        bundle: Optional[Dict[str, str]],
        document: TargetDocument,
    ) -> Optional[str]:
        """Return the skip reason for ``rule``, or None when it can be applied."""
        reason = not_ready_reason(bundle, rule.primary_field)
        if reason is not None:
            return reason
        for assignment in rule.assignments:
            if assignment.optional:
                continue
            value = bundle.get(assignment.field)
            if value is None:
                return f"missing {assignment.field}"
            if is_placeholder(value):
                return "placeholder"
        if rule.requires and not document.has_mapping(rule.requires):
            return f"not configured in {target.name}"
        return None

    def _write(self, target: DeploymentTarget, primary: Path, data: bytes, creating: bool) -> TargetOutcome:
        """Back up and replace the primary, then every distinct alias.

        If any location fails, the locations already replaced are restored from
        their backups (or removed when they did not exist) before re-raising,
        so the target is either fully updated or left as it was.
        """
        outcome = TargetOutcome(target.name, TARGET_WRITTEN, path=primary)

        if creating:
            primary.parent.mkdir(parents=True, exist_ok=True)

        primary_real = primary.resolve()
        locations = [primary] + [
            alias for alias in target.alias_paths(self.home) if alias.resolve() != primary_real
        ]

        written = []  # (path, backup or None)
        try:
            for path in locations:
                backup = backup_file(path)
                atomic_write_bytes(path, data)
                written.append((path, backup))
        except OSError:
            self._rollback(written)
            raise

        for path, backup in written:
            if backup:
                outcome.backups.append(backup)
            if path != primary:
                outcome.synced.append(path)

        log_event(
            EventType.DEPLOY_TARGET_WRITTEN,
            "Target updated",
            target=target.name,
            path=str(primary),
            synced=[str(p) for p in outcome.synced],
            size_bytes=len(data),
        )
        return outcome

    @staticmethod
    def _rollback(written) -> None:
        """Put already-replaced locations back the way they were."""
        for path, backup in reversed(written):
            try:
                if backup:
                    shutil.copy2(backup, path)
                else:
                    path.unlink()
            except OSError:
                logger.error("Could not restore %s; previous content is in %s", path, backup, exc_info=True)
            else:
                logger.warning("Restored %s after a failed deploy", path)

    @staticmethod
    def _skip_all(report: DeployReport, rules: List[DeploymentRule], reason: str) -> None:
        for rule in rules:
            report.record(rule.bundle, reason)
