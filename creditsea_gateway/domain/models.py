"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional


@dataclass
class BasicDetails:
    """Applicant identity and bureau score"""

    name: Optional[str] = None
    mobile_phone: Optional[str] = None
    pan: Optional[str] = None
    credit_score: Optional[int] = None


@dataclass
class ReportSummary:
    """Aggregate figures, either supplied by the bureau or derived from tradelines"""

    total_accounts: Optional[int] = None
    active_accounts: Optional[int] = None
    closed_accounts: Optional[int] = None
    current_balance_amount: Optional[Decimal] = None
    secured_accounts_amount: Optional[Decimal] = None
    unsecured_accounts_amount: Optional[Decimal] = None
    last_7_days_enquiries: Optional[int] = None


@dataclass
class CreditAccount:
    """Single tradeline (loan, card, etc.)"""

    type: Optional[str] = None
    bank: Optional[str] = None
    account_number: Optional[str] = None
    address: Optional[str] = None
    status: Optional[str] = None
    current_balance: Decimal = Decimal(0)
    amount_overdue: Decimal = Decimal(0)


@dataclass
class CreditReport:
    """Normalized credit report, ready to be persisted"""

    basic_details: BasicDetails = field(default_factory=BasicDetails)
    report_summary: ReportSummary = field(default_factory=ReportSummary)
    credit_accounts: List[CreditAccount] = field(default_factory=list)
    addresses: List[str] = field(default_factory=list)
    file_name: Optional[str] = None
    uploaded_at: Optional[datetime] = None
