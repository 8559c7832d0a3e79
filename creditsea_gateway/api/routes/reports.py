"""GET/DELETE /api/reports - Stored credit report queries"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from creditsea_gateway.api.dependencies import get_request_id
from creditsea_gateway.api.routes.schemas import (
    CreditReportSchema,
    MessageResponse,
    ReportDetailResponse,
    ReportListItem,
    ReportListResponse,
)
from creditsea_gateway.domain.exceptions import NotFoundError, StoreError
from creditsea_gateway.domain.identifiers import is_valid_report_id
from creditsea_gateway.infrastructure.database.repositories import ReportRepository
from creditsea_gateway.infrastructure.database.session import get_db
from creditsea_gateway.infrastructure.observability.metrics import deletion_counter

router = APIRouter()


def _validate_report_id(report_id: str) -> None:
    if not is_valid_report_id(report_id):
        raise HTTPException(status_code=400, detail="Invalid report ID format")


@router.get("/reports", response_model=ReportListResponse)
def list_reports(request: Request, db: Session = Depends(get_db)):
    """
    Retrieve all stored credit reports, newest upload first.

    Returns:
        Summary projection (id, name, score, file name, upload time) per report
    """
    report_repo = ReportRepository(db)
    try:
        reports = report_repo.list_summaries()
    except StoreError as e:
        logging.error(f"Store error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Failed to fetch reports")

    items = [ReportListItem.from_row(r) for r in reports]
    return ReportListResponse(count=len(items), data=items)


@router.get("/reports/{report_id}", response_model=ReportDetailResponse)
def get_report(report_id: str, request: Request, db: Session = Depends(get_db)):
    """Retrieve a full credit report"""
    _validate_report_id(report_id)

    report_repo = ReportRepository(db)
    try:
        report = report_repo.require(report_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Credit report not found")
    except StoreError as e:
        logging.error(f"Store error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Failed to fetch report")

    return ReportDetailResponse(data=CreditReportSchema.from_row(report))


@router.delete("/reports/{report_id}", response_model=MessageResponse)
def delete_report(report_id: str, request: Request, db: Session = Depends(get_db)):
    """Delete a credit report. Deleting an unknown or already deleted report is a 404."""
    _validate_report_id(report_id)

    report_repo = ReportRepository(db)
    try:
        deleted = report_repo.delete_by_id(report_id)
        db.commit()
    except (StoreError, SQLAlchemyError) as e:
        db.rollback()
        logging.error(f"Store error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Failed to delete report")

    if not deleted:
        raise HTTPException(status_code=404, detail="Credit report not found")

    deletion_counter.inc()
    logging.info("Credit report deleted", extra={"request_id": get_request_id(request), "report_id": report_id})
    return MessageResponse(success=True, message="Credit report deleted successfully")
