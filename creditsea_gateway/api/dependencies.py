"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from creditsea_gateway.config import settings
from creditsea_gateway.infrastructure.staging import StagingArea


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_staging_area() -> StagingArea:
    """Provide upload staging area configured from settings"""
    return StagingArea(
        directory=settings.upload_dir,
        max_bytes=settings.max_upload_bytes,
        chunk_bytes=settings.upload_chunk_bytes,
    )
