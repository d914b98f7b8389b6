"""Presentation of overdue summaries."""

from dataclasses import dataclass

from cadence.core.overdue import OverdueReport

# Delay before the first notice, then the extra delay for each category
INITIAL_DELAY_MS = 1500
RECURRING_DELAY_MS = 800
TRANSACTIONS_DELAY_MS = 1600


@dataclass(frozen=True)
class OverdueNotice:
    """One category's notice and when to show it, relative to detection."""

    category: str
    count: int
    delay_ms: int
    title: str
    description: str


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def build_notices(report: OverdueReport) -> list[OverdueNotice]:
    """Staggered notices for each nonzero category, in display order."""
    notices = []
    tasks = len(report.overdue_tasks)
    recurring = len(report.overdue_recurring)
    transactions = len(report.overdue_transactions)

    if tasks:
        notices.append(
            OverdueNotice(
                category="tasks",
                count=tasks,
                delay_ms=INITIAL_DELAY_MS,
                title=f"{tasks} overdue {_plural(tasks, 'task', 'tasks')}",
                description="Complete or postpone them.",
            )
        )
    if recurring:
        notices.append(
            OverdueNotice(
                category="recurring",
                count=recurring,
                delay_ms=INITIAL_DELAY_MS + RECURRING_DELAY_MS,
                title=f"{recurring} {_plural(recurring, 'habit', 'habits')} left for today",
                description="Don't forget your habits.",
            )
        )
    if transactions:
        notices.append(
            OverdueNotice(
                category="transactions",
                count=transactions,
                delay_ms=INITIAL_DELAY_MS + TRANSACTIONS_DELAY_MS,
                title=f"{transactions} overdue {_plural(transactions, 'transaction', 'transactions')}",
                description="Planned operations are waiting.",
            )
        )
    return notices


def format_notice(notice: OverdueNotice) -> str:
    return f"{notice.title} - {notice.description}"
