"""Data access layer for credit reports"""

from dataclasses import asdict
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, load_only

from creditsea_gateway.domain.exceptions import NotFoundError, StoreError
from creditsea_gateway.domain.models import BasicDetails, CreditAccount, CreditReport, ReportSummary
from creditsea_gateway.infrastructure.database.models import CreditReportDocument, utcnow

# Domain attribute -> persisted document key
_BASIC_DETAILS_KEYS = {
    "name": "name",
    "mobile_phone": "mobilePhone",
    "pan": "pan",
    "credit_score": "creditScore",
}
_SUMMARY_KEYS = {
    "total_accounts": "totalAccounts",
    "active_accounts": "activeAccounts",
    "closed_accounts": "closedAccounts",
    "current_balance_amount": "currentBalanceAmount",
    "secured_accounts_amount": "securedAccountsAmount",
    "unsecured_accounts_amount": "unsecuredAccountsAmount",
    "last_7_days_enquiries": "last7DaysEnquiries",
}
_ACCOUNT_KEYS = {
    "type": "type",
    "bank": "bank",
    "account_number": "accountNumber",
    "address": "address",
    "status": "status",
    "current_balance": "currentBalance",
    "amount_overdue": "amountOverdue",
}
_SUMMARY_AMOUNTS = {"current_balance_amount", "secured_accounts_amount", "unsecured_accounts_amount"}
_ACCOUNT_AMOUNTS = {"current_balance", "amount_overdue"}


def amount_to_document(value: Optional[Decimal]) -> Optional[str]:
    """Decimals are persisted as plain decimal strings so no precision is lost"""
    if value is None:
        return None
    return format(value, "f")


def amount_from_document(value: Union[str, int, float, None]) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value))


def _to_document(obj: Any, keys: Dict[str, str], amounts: set) -> Dict[str, Any]:
    values = asdict(obj)
    return {
        key: amount_to_document(values[attr]) if attr in amounts else values[attr]
        for attr, key in keys.items()
    }


def _from_document(document: Dict[str, Any], keys: Dict[str, str], amounts: set) -> Dict[str, Any]:
    values = {}
    for attr, key in keys.items():
        raw = document.get(key)
        values[attr] = amount_from_document(raw) if attr in amounts else raw
    return values


def to_credit_report(row: CreditReportDocument) -> CreditReport:
    """Rebuild the domain value from a stored document"""
    accounts = []
    for account in row.credit_accounts or []:
        values = _from_document(account, _ACCOUNT_KEYS, _ACCOUNT_AMOUNTS)
        for attr in _ACCOUNT_AMOUNTS:
            if values[attr] is None:
                values[attr] = Decimal(0)
        accounts.append(CreditAccount(**values))

    return CreditReport(
        basic_details=BasicDetails(**_from_document(row.basic_details or {}, _BASIC_DETAILS_KEYS, set())),
        report_summary=ReportSummary(**_from_document(row.report_summary or {}, _SUMMARY_KEYS, _SUMMARY_AMOUNTS)),
        credit_accounts=accounts,
        addresses=list(row.addresses or []),
        file_name=row.file_name,
        uploaded_at=row.uploaded_at,
    )


class ReportRepository:
    """Repository for credit report documents"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, report: CreditReport) -> CreditReportDocument:
        """Persist credit report; the caller commits"""
        db_report = CreditReportDocument(
            basic_details=_to_document(report.basic_details, _BASIC_DETAILS_KEYS, set()),
            report_summary=_to_document(report.report_summary, _SUMMARY_KEYS, _SUMMARY_AMOUNTS),
            credit_accounts=[
                _to_document(account, _ACCOUNT_KEYS, _ACCOUNT_AMOUNTS) for account in report.credit_accounts
            ],
            addresses=list(report.addresses),
            file_name=report.file_name,
            uploaded_at=report.uploaded_at or utcnow(),
        )
        try:
            self.db.add(db_report)
            self.db.flush()  # Assign ID and timestamps without committing
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to store credit report: {e}") from e
        return db_report

    def list_summaries(self) -> List[CreditReportDocument]:
        """All reports, newest upload first"""
        try:
            return (
                self.db.query(CreditReportDocument)
                .options(
                    load_only(
                        CreditReportDocument.id,
                        CreditReportDocument.basic_details,
                        CreditReportDocument.file_name,
                        CreditReportDocument.uploaded_at,
                    )
                )
                .order_by(CreditReportDocument.uploaded_at.desc(), CreditReportDocument.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list credit reports: {e}") from e

    def get_by_id(self, report_id: str) -> Optional[CreditReportDocument]:
        try:
            return self.db.get(CreditReportDocument, report_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to fetch credit report: {e}") from e

    def require(self, report_id: str) -> CreditReportDocument:
        """
        Fetch a report that must exist.

        Raises:
            NotFoundError: If no report has this id
        """
        db_report = self.get_by_id(report_id)
        if db_report is None:
            raise NotFoundError(f"Credit report {report_id} not found")
        return db_report

    def delete_by_id(self, report_id: str) -> bool:
        """Delete a report; False when it does not exist. The caller commits."""
        try:
            db_report = self.db.get(CreditReportDocument, report_id)
            if db_report is None:
                return False
            self.db.delete(db_report)
            self.db.flush()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to delete credit report: {e}") from e
        return True
