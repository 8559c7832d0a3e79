"""Report summary aggregation - explicit bureau figures first, derived values as fallback"""

import logging
from decimal import Decimal
from typing import List, Optional

from creditsea_gateway.domain.models import CreditAccount, ReportSummary

logger = logging.getLogger(__name__)


def _count_status(accounts: List[CreditAccount], status: str) -> int:
    return sum(1 for a in accounts if a.status is not None and a.status.lower() == status)


def derive_summary(accounts: List[CreditAccount]) -> ReportSummary:
    """
    Compute the summary figures that can be re-aggregated from tradelines.

    Secured/unsecured amounts and recent enquiries cannot be derived from
    the account list and are left unset.
    """
    return ReportSummary(
        total_accounts=len(accounts),
        active_accounts=_count_status(accounts, "active"),
        closed_accounts=_count_status(accounts, "closed"),
        current_balance_amount=sum((a.current_balance for a in accounts), Decimal(0)),
    )


def _prefer(explicit, derived):
    return explicit if explicit is not None else derived


def merge_summary(explicit: ReportSummary, accounts: List[CreditAccount]) -> ReportSummary:
    """
    Merge explicit document values with derived aggregates, field by field.

    A value present in the document always wins, even when it disagrees with
    the tradeline list.
    """
    derived = derive_summary(accounts)
    summary = ReportSummary(
        total_accounts=_prefer(explicit.total_accounts, derived.total_accounts),
        active_accounts=_prefer(explicit.active_accounts, derived.active_accounts),
        closed_accounts=_prefer(explicit.closed_accounts, derived.closed_accounts),
        current_balance_amount=_prefer(explicit.current_balance_amount, derived.current_balance_amount),
        secured_accounts_amount=explicit.secured_accounts_amount,
        unsecured_accounts_amount=explicit.unsecured_accounts_amount,
        last_7_days_enquiries=explicit.last_7_days_enquiries,
    )
    check_account_counts(summary)
    return summary


def check_account_counts(summary: ReportSummary) -> Optional[str]:
    """Warn when active + closed does not add up to the total. Never raises."""
    if None in (summary.total_accounts, summary.active_accounts, summary.closed_accounts):
        return None

    if summary.active_accounts + summary.closed_accounts == summary.total_accounts:
        return None

    message = (
        f"Account counts inconsistent: active={summary.active_accounts} "
        f"+ closed={summary.closed_accounts} != total={summary.total_accounts}"
    )
    logger.warning(message, extra={"step": "summary_check"})
    return message
