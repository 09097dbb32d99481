"""
# Report Routes

Organization reports and their approval workflow. Admins and officers submit and read
reports; downloading, approving/rejecting and deleting are admin-only.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from campushub.managers.logging_manager import get_logger
from campushub.models.common import SortOrder
from campushub.models.report_models import (
    CreateReportRequest,
    ReportSortField,
    ReportType,
    UpdateReportStatusRequest,
)
from campushub.models.user_models import CurrentUser, UserRole
from campushub.routes.auth.dependencies import authorize
from campushub.services.report_service import report_service
from campushub.utils.exceptions import AppError
from campushub.utils.responses import success_response

logger = get_logger(prefix="[Report Routes]")

router = APIRouter(prefix="/reports", tags=["Reports"])

require_admin = authorize(UserRole.ADMIN.value)
require_admin_or_officer = authorize(UserRole.ADMIN.value, UserRole.OFFICER.value)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_report(request: CreateReportRequest, current_user: CurrentUser = Depends(require_admin_or_officer)):
    try:
        report = await report_service.create_report(request, current_user.id)
        return success_response("Report submitted successfully", report)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to create report: %s", e, exc_info=True)
        raise


@router.get("")
async def list_reports(
    page: int = Query(1, ge=1),
    limit: int = Query(25, ge=1, le=100),
    org_id: Optional[str] = None,
    report_type: Optional[ReportType] = None,
    submitted_by: Optional[str] = None,
    sort_by: ReportSortField = ReportSortField.SUBMITTED_DATE,
    sort_order: SortOrder = SortOrder.DESC,
    current_user: CurrentUser = Depends(require_admin_or_officer),
):
    try:
        result = await report_service.list_reports(
            current_user.id,
            page=page,
            limit=limit,
            org_id=org_id,
            report_type=report_type.value if report_type else None,
            submitted_by=submitted_by,
            sort_by=sort_by,
            sort_order=sort_order.value,
        )
        return success_response("Reports retrieved successfully", result)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to list reports: %s", e, exc_info=True)
        raise


@router.get("/{report_id}/download")
async def download_report(report_id: str, current_user: CurrentUser = Depends(require_admin)):
    try:
        return await report_service.download_report(report_id, current_user.id)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to download report %s: %s", report_id, e, exc_info=True)
        raise


@router.get("/{report_id}")
async def get_report(report_id: str, current_user: CurrentUser = Depends(require_admin_or_officer)):
    try:
        report = await report_service.get_report(report_id, current_user.id)
        return success_response("Report retrieved successfully", report)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to get report %s: %s", report_id, e, exc_info=True)
        raise


@router.patch("/{report_id}/status")
async def update_report_status(
    report_id: str, request: UpdateReportStatusRequest, current_user: CurrentUser = Depends(require_admin)
):
    try:
        report = await report_service.update_status(report_id, request, current_user.id)
        return success_response("Report status updated successfully", report)
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to update report %s status: %s", report_id, e, exc_info=True)
        raise


@router.delete("/{report_id}")
async def delete_report(report_id: str, current_user: CurrentUser = Depends(require_admin)):
    try:
        await report_service.delete_report(report_id, current_user.id)
        return success_response("Report deleted successfully")
    except AppError:
        raise
    except Exception as e:
        logger.error("Failed to delete report %s: %s", report_id, e, exc_info=True)
        raise
