"""POST /api/upload - Credit report ingestion endpoint"""

import time
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from creditsea_gateway.api.dependencies import get_request_id, get_staging_area
from creditsea_gateway.api.routes.schemas import CreditReportSchema, UploadResponse
from creditsea_gateway.domain.exceptions import ParseError, StoreError, ValidationError
from creditsea_gateway.domain.extraction import extract
from creditsea_gateway.infrastructure.database.repositories import ReportRepository
from creditsea_gateway.infrastructure.database.session import get_db
from creditsea_gateway.infrastructure.observability.logging import log_ingestion
from creditsea_gateway.infrastructure.observability.metrics import record_ingestion
from creditsea_gateway.infrastructure.staging import StagingArea, is_xml_upload

router = APIRouter()


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_report(
    request: Request,
    xml_file: Optional[UploadFile] = File(None, alias="xmlFile"),
    db: Session = Depends(get_db),
    staging: StagingArea = Depends(get_staging_area),
):
    """
    Ingest a credit-bureau XML report.

    Flow:
    1. Validate presence and type of the uploaded file
    2. Stream it into a staging file (size ceiling enforced)
    3. Extract the report from the staged markup
    4. Persist the report with the original filename
    5. Remove the staging file on every exit path
    """
    start_time = time.time()
    request_id = get_request_id(request)
    file_name = xml_file.filename if xml_file is not None else None

    try:
        if xml_file is None or not xml_file.filename:
            raise ValidationError("No file uploaded or invalid file type")
        if not is_xml_upload(xml_file.filename, xml_file.content_type):
            raise ValidationError("Only XML files are allowed!")

        logging.info(f"Processing file: {file_name}", extra={"request_id": request_id})

        async with staging.stage(xml_file, token=request_id) as staged_path:
            report = extract(staged_path.read_bytes())
            report.file_name = file_name

            report_repo = ReportRepository(db)
            db_report = report_repo.create(report)
            db.commit()
            db.refresh(db_report)

    except ValidationError as e:
        record_ingestion("rejected")
        logging.warning(f"Upload rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    except ParseError as e:
        record_ingestion("parse_error")
        logging.error(f"Parse error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=str(e))

    except (StoreError, SQLAlchemyError) as e:
        db.rollback()
        record_ingestion("store_error")
        logging.error(f"Store error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to store credit report")

    except Exception as e:
        db.rollback()
        record_ingestion("error")
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    account_count = len(report.credit_accounts)
    duration_ms = (time.time() - start_time) * 1000
    record_ingestion("stored", account_count)
    log_ingestion(request_id, db_report.id, file_name, account_count, duration_ms)

    return UploadResponse(
        message="File uploaded and processed successfully",
        report_id=db_report.id,
        data=CreditReportSchema.from_row(db_report),
    )
