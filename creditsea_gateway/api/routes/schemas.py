"""Pydantic schemas for API responses (camelCase on the wire)"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, List, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from creditsea_gateway.infrastructure.database.models import CreditReportDocument


def _render_amount(value: Any) -> Any:
    """Stored decimal strings become JSON numbers: int when integral, float otherwise"""
    if isinstance(value, (str, Decimal)):
        amount = Decimal(value)
        return int(amount) if amount == amount.to_integral_value() else float(amount)
    return value


Amount = Annotated[Union[int, float], BeforeValidator(_render_amount)]


class ApiModel(BaseModel):
    """Base schema: snake_case in Python, camelCase in JSON"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BasicDetailsSchema(ApiModel):
    name: Optional[str] = None
    mobile_phone: Optional[str] = None
    pan: Optional[str] = None
    credit_score: Optional[int] = None


class ReportSummarySchema(ApiModel):
    total_accounts: Optional[int] = None
    active_accounts: Optional[int] = None
    closed_accounts: Optional[int] = None
    current_balance_amount: Optional[Amount] = None
    secured_accounts_amount: Optional[Amount] = None
    unsecured_accounts_amount: Optional[Amount] = None
    last_7_days_enquiries: Optional[int] = Field(default=None, alias="last7DaysEnquiries")


class CreditAccountSchema(ApiModel):
    type: Optional[str] = None
    bank: Optional[str] = None
    account_number: Optional[str] = None
    address: Optional[str] = None
    status: Optional[str] = None
    current_balance: Amount = 0
    amount_overdue: Amount = 0


class CreditReportSchema(ApiModel):
    """Full stored credit report"""

    id: str
    basic_details: BasicDetailsSchema
    report_summary: ReportSummarySchema
    credit_accounts: List[CreditAccountSchema]
    addresses: List[str]
    file_name: Optional[str] = None
    uploaded_at: datetime
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: CreditReportDocument) -> "CreditReportSchema":
        return cls(
            id=row.id,
            basic_details=BasicDetailsSchema.model_validate(row.basic_details or {}),
            report_summary=ReportSummarySchema.model_validate(row.report_summary or {}),
            credit_accounts=[CreditAccountSchema.model_validate(a) for a in row.credit_accounts or []],
            addresses=list(row.addresses or []),
            file_name=row.file_name,
            uploaded_at=row.uploaded_at,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class ReportListItem(ApiModel):
    """Summary projection used by the list endpoint"""

    id: str
    name: Optional[str] = None
    credit_score: Optional[int] = None
    file_name: Optional[str] = None
    uploaded_at: datetime

    @classmethod
    def from_row(cls, row: CreditReportDocument) -> "ReportListItem":
        basic_details = row.basic_details or {}
        return cls(
            id=row.id,
            name=basic_details.get("name"),
            credit_score=basic_details.get("creditScore"),
            file_name=row.file_name,
            uploaded_at=row.uploaded_at,
        )


class UploadResponse(ApiModel):
    """Response for POST /api/upload"""

    success: bool = True
    message: str
    report_id: str
    data: CreditReportSchema


class ReportListResponse(ApiModel):
    """Response for GET /api/reports"""

    success: bool = True
    count: int
    data: List[ReportListItem]


class ReportDetailResponse(ApiModel):
    """Response for GET /api/reports/{report_id}"""

    success: bool = True
    data: CreditReportSchema


class MessageResponse(ApiModel):
    """Response for DELETE /api/reports/{report_id} and for errors"""

    success: bool
    message: str
