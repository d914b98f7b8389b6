"""Pure overdue detection logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from enum import Enum

from .dates import date_key, local_date, parse_iso_date
from .errors import Diagnostic, MalformedDateError
from .habits import RecurringItem


class TaskStatus(Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    DONE = "done"


@dataclass(frozen=True)
class DeadlineItem:
    """A task or planned transaction with a due date."""

    id: str
    due_date: str | None
    completed: bool = False
    status: TaskStatus = TaskStatus.NOT_STARTED
    title: str = ""

    @classmethod
    def from_dict(cls, data: dict, date_field: str = "dueDate") -> "DeadlineItem":
        """
        Create from a stored record.

        Records saved before `status` existed get one derived from `completed`.
        """
        completed = bool(data.get("completed", False))
        raw_status = data.get("status")
        try:
            status = TaskStatus(raw_status) if raw_status else None
        except ValueError:
            status = None
        if status is None:
            status = TaskStatus.DONE if completed else TaskStatus.NOT_STARTED
        return cls(
            id=str(data["id"]),
            due_date=data.get(date_field) or None,
            completed=completed,
            status=status,
            title=data.get("name") or data.get("title") or data.get("description") or "",
        )


@dataclass
class OverdueReport:
    """Overdue items by category."""

    overdue_tasks: list[DeadlineItem] = field(default_factory=list)
    overdue_recurring: list[RecurringItem] = field(default_factory=list)
    overdue_transactions: list[DeadlineItem] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.overdue_tasks) + len(self.overdue_recurring) + len(self.overdue_transactions)

    def counts(self) -> dict[str, int]:
        return {
            "tasks": len(self.overdue_tasks),
            "recurring": len(self.overdue_recurring),
            "transactions": len(self.overdue_transactions),
        }


@dataclass(frozen=True)
class NotificationGuard:
    """Remembers the last day an overdue summary went out."""

    last_fired_date_key: str | None = None

    def has_fired_on(self, today: date) -> bool:
        return self.last_fired_date_key == date_key(today)


@dataclass(frozen=True)
class GuardedResult:
    """Outcome of a guarded detection run. `report` is None when suppressed."""

    report: OverdueReport | None
    guard: NotificationGuard
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def fired(self) -> bool:
        return self.report is not None


def _is_past_due(item: DeadlineItem, today: date, report: OverdueReport) -> bool:
    if not item.due_date:
        return False
    try:
        due = parse_iso_date(item.due_date)
    except MalformedDateError as e:
        report.diagnostics.append(Diagnostic.from_error(item.id, "dueDate", e))
        return False
    return due < today


def detect_overdue(
    now: datetime | date,
    tasks: list[DeadlineItem],
    recurring: list[RecurringItem],
    transactions: list[DeadlineItem],
    tz: tzinfo | None = None,
) -> OverdueReport:
    """
    Find everything overdue as of the start of today.

    - Task: due before today, not completed, status not done
    - Recurring item: due today and not yet completed today
    - Transaction: planned before today and not completed

    Pure function - no I/O. Malformed entities are skipped and reported
    as diagnostics.
    """
    today = local_date(now, tz)
    report = OverdueReport()

    for task in tasks:
        if task.completed or task.status is TaskStatus.DONE:
            continue
        if _is_past_due(task, today, report):
            report.overdue_tasks.append(task)

    for item in recurring:
        problems = item.validate()
        if problems:
            report.diagnostics.extend(problems)
            continue
        if item.is_due_on(today) and not item.is_completed_on(today):
            report.overdue_recurring.append(item)

    for tx in transactions:
        if tx.completed:
            continue
        if _is_past_due(tx, today, report):
            report.overdue_transactions.append(tx)

    return report


def run_guarded(
    now: datetime | date,
    guard: NotificationGuard,
    tasks: list[DeadlineItem],
    recurring: list[RecurringItem],
    transactions: list[DeadlineItem],
    tz: tzinfo | None = None,
) -> GuardedResult:
    """
    Detect overdue items at most once per calendar day.

    If the guard already holds today's key the run is suppressed. A firing
    run with nothing overdue leaves the guard untouched, so a later run the
    same day can still fire once something becomes overdue.
    """
    today = local_date(now, tz)
    if guard.has_fired_on(today):
        return GuardedResult(report=None, guard=guard)

    report = detect_overdue(today, tasks, recurring, transactions)
    if report.total > 0:
        return GuardedResult(
            report=report,
            guard=NotificationGuard(date_key(today)),
            diagnostics=report.diagnostics,
        )
    return GuardedResult(report=None, guard=guard, diagnostics=report.diagnostics)
