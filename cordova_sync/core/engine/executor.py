"""
Engine executor — the serial fold over declared items.

Every install and uninstall mutates one shared on-disk dependency store
(node_modules, plugins/, platforms/). Two primitives running at once
corrupt it, so items are processed strictly one at a time, each step
fully settling before the next starts.

A failing item never stops the fold: its failure is captured into the
report, a warning is logged, and the next item runs. The caller gets
the aggregated status back as a value — nothing is thrown for per-item
failures. Persistence errors are the exception: they propagate.

Flow:
    items → skip policy → step (primitive) → outcome → report
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Literal, TypeVar

from cordova_sync.core.errors import PersistenceError, StepFailed
from cordova_sync.core.models.action import Receipt
from cordova_sync.core.persistence.audit import AuditEntry, AuditWriter

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_FAILURE_MESSAGE = 'Failed to {operation} "{name}". Error: {error}'


@dataclass
class ItemOutcome:
    """Result of one item of the fold."""

    name: str
    status: Literal["ok", "skipped", "failed"] = "ok"
    step: str = ""
    error: str | None = None
    reason: str = ""
    receipt: Receipt | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"name": self.name, "status": self.status}
        if self.step:
            data["step"] = self.step
        if self.error:
            data["error"] = self.error
        if self.reason:
            data["reason"] = self.reason
        return data


@dataclass
class SerialReport:
    """Aggregated result of a serial fold."""

    operation_id: str = ""
    operation: str = ""
    outcomes: list[ItemOutcome] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.status == "skipped")

    @property
    def failed_names(self) -> list[str]:
        return [o.name for o in self.outcomes if o.failed]

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    @property
    def exit_code(self) -> int:
        """Process exit status for this report: 0 unless something failed."""
        return 0 if self.all_ok else 1

    def outcome(self, name: str) -> ItemOutcome | None:
        for o in self.outcomes:
            if o.name == name:
                return o
        return None

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "operation": self.operation,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "outcomes": [o.to_dict() for o in self.outcomes],
            "warnings": self.warnings,
            "metadata": self.metadata,
        }


def _default_name(item: Any) -> str:
    return getattr(item, "name", None) or str(item)


def run_serial(
    items: Iterable[T],
    step: Callable[[T], Receipt | None],
    *,
    operation: str,
    operation_id: str | None = None,
    name_of: Callable[[T], str] = _default_name,
    should_skip: Callable[[T], str | None] | None = None,
    failure_message: str = DEFAULT_FAILURE_MESSAGE,
    report: SerialReport | None = None,
) -> SerialReport:
    """Run *step* on each item, one at a time, in order.

    Args:
        items: Items in declaration order.
        step: The primitive for one item. Returns a Receipt (a failed
            receipt counts as a failure) or None, or raises.
        operation: Operation label used in logs and messages.
        operation_id: Identifier for the report (generated if omitted).
        name_of: How to name an item in outcomes.
        should_skip: Returns a reason to skip an item without invoking
            *step*, or None to run it.
        failure_message: Warning template with ``{operation}``,
            ``{name}`` and ``{error}`` fields.
        report: Existing report to append to.

    Returns:
        The report. Per-item failures are recorded, never raised.

    Raises:
        PersistenceError: A config store write failed inside *step*.
    """
    if report is None:
        report = SerialReport(
            operation_id=operation_id or generate_operation_id(),
            operation=operation,
        )

    for item in items:
        name = name_of(item)

        reason = should_skip(item) if should_skip else None
        if reason:
            logger.debug("⊘ %s:%s skipped (%s)", operation, name, reason)
            report.outcomes.append(ItemOutcome(name=name, status="skipped", reason=reason))
            continue

        outcome = ItemOutcome(name=name)
        try:
            result = step(item)
        except PersistenceError:
            raise
        except StepFailed as e:
            outcome.status = "failed"
            outcome.step = e.step
            outcome.error = e.message
        except Exception as e:
            outcome.status = "failed"
            outcome.step = operation
            outcome.error = str(e) or e.__class__.__name__
        else:
            if isinstance(result, Receipt):
                outcome.receipt = result
                if result.failed:
                    outcome.status = "failed"
                    outcome.step = operation
                    outcome.error = result.error or "unknown error"
                elif result.status == "skipped":
                    outcome.status = "skipped"
                    outcome.reason = result.output

        report.outcomes.append(outcome)

        if outcome.failed:
            msg = failure_message.format(operation=operation, name=name, error=outcome.error)
            logger.warning(msg)
            report.warnings.append(msg)

        status_marker = "✓" if outcome.ok else "✗" if outcome.failed else "⊘"
        logger.info("%s %s:%s → %s", status_marker, operation, name, outcome.status)

    return report


def write_audit_entry(
    report: SerialReport,
    audit_writer: AuditWriter,
    targets: list[str] | None = None,
) -> None:
    """Write a finished report to the audit ledger."""
    entry = AuditEntry(
        operation_id=report.operation_id,
        operation_type=report.operation,
        targets=list(targets or []),
        status=report.status,
        items_total=report.total,
        items_succeeded=report.succeeded,
        items_failed=report.failed,
        items_skipped=report.skipped,
        errors=list(report.warnings),
    )
    audit_writer.write(entry)


def generate_operation_id() -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"op-{now}-{short}"
