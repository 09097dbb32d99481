"""
# Report Service

Organization report submissions and their approval workflow.

Report files live under `settings.UPLOAD_DIR` and are referenced by relative path. A download
of a single-file report streams that file; multi-file reports are zipped in a
worker thread and streamed back in chunks.
"""

import asyncio
import tempfile
import zipfile
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterator, List, Optional

from fastapi import status
from fastapi.responses import FileResponse, StreamingResponse

from campushub.config import settings
from campushub.database import db_manager
from campushub.managers.logging_manager import get_logger
from campushub.models.audit_log_models import ActionType
from campushub.models.common import utc_now
from campushub.models.report_models import (
    CreateReportRequest,
    ReportDocument,
    ReportListResponse,
    ReportResponse,
    ReportSortField,
    UpdateReportStatusRequest,
)
from campushub.services.audit_log_service import audit_log_service
from campushub.services.organization_service import organization_service
from campushub.utils.exceptions import AppError
from campushub.utils.query_utils import page_skip, parse_object_id, sort_direction

logger = get_logger(prefix="[ReportService]")

ZIP_CHUNK_SIZE = 64 * 1024
# Archives larger than this spill from memory to a temporary file
ZIP_SPOOL_MAX_SIZE = 8 * 1024 * 1024


def _build_archive(paths: List[Path]) -> BinaryIO:
    """Write `paths` into a zip archive. Blocking; run it in an executor."""
    archive_file = tempfile.SpooledTemporaryFile(max_size=ZIP_SPOOL_MAX_SIZE)
    with zipfile.ZipFile(archive_file, "w", zipfile.ZIP_DEFLATED) as archive:
        for path in paths:
            archive.write(path, arcname=path.name)
    archive_file.seek(0)
    return archive_file


def _iter_archive(archive_file: BinaryIO) -> Iterator[bytes]:
    try:
        while True:
            chunk = archive_file.read(ZIP_CHUNK_SIZE)
            if not chunk:
                break
            yield chunk
    finally:
        archive_file.close()


class ReportService:
    def __init__(self):
        self.collection_name = "reports"

    def _reports(self):
        return db_manager.get_collection(self.collection_name)

    async def _get_or_404(self, report_id: str) -> Dict[str, Any]:
        oid = parse_object_id(report_id, "report")
        report = await self._reports().find_one({"_id": oid})
        if not report:
            raise AppError("Report not found", status.HTTP_404_NOT_FOUND)
        return report

    def resolve_file(self, relative_path: str) -> Path:
        """
        Resolve a stored report path inside the upload directory.

        Raises:
            AppError(400): When the path escapes the upload directory.
            AppError(404): When the file does not exist.
        """
        base = Path(settings.UPLOAD_DIR).resolve()
        path = (base / relative_path).resolve()
        if base != path and base not in path.parents:
            raise AppError("Invalid file path", status.HTTP_400_BAD_REQUEST)
        if not path.is_file():
            raise AppError(f"File not found: {relative_path}", status.HTTP_404_NOT_FOUND)
        return path

    async def create_report(self, request: CreateReportRequest, actor_id: str) -> ReportResponse:
        await organization_service.get_or_404(request.org_id)

        report = ReportDocument(submitted_by=actor_id, **request.model_dump())
        doc = report.model_dump()
        result = await self._reports().insert_one(doc)
        doc["_id"] = result.inserted_id

        await audit_log_service.log_action(actor_id, ActionType.CREATE_REPORT)
        logger.info("Report %s (%s) submitted for org %s", result.inserted_id, report.report_type, report.org_id)
        return ReportResponse.from_document(doc)

    async def list_reports(
        self,
        actor_id: str,
        page: int = 1,
        limit: int = 25,
        org_id: Optional[str] = None,
        report_type: Optional[str] = None,
        submitted_by: Optional[str] = None,
        sort_by: ReportSortField = ReportSortField.SUBMITTED_DATE,
        sort_order: str = "desc",
    ) -> ReportListResponse:
        query: Dict[str, Any] = {}
        if org_id:
            parse_object_id(org_id, "organization")
            query["org_id"] = org_id
        if report_type:
            query["report_type"] = report_type
        if submitted_by:
            parse_object_id(submitted_by, "user")
            query["submitted_by"] = submitted_by

        cursor = (
            self._reports()
            .find(query)
            .sort(ReportSortField(sort_by).value, sort_direction(sort_order))
            .skip(page_skip(page, limit))
            .limit(limit)
        )
        docs = await cursor.to_list(length=None)

        await audit_log_service.log_action(actor_id, ActionType.VIEW_REPORTS)
        return ReportListResponse(count=len(docs), data=[ReportResponse.from_document(doc) for doc in docs])

    async def get_report(self, report_id: str, actor_id: str) -> ReportResponse:
        report = await self._get_or_404(report_id)
        await audit_log_service.log_action(actor_id, ActionType.VIEW_REPORT_DETAILS)
        return ReportResponse.from_document(report)

    async def download_report(self, report_id: str, actor_id: str):
        """Return a `FileResponse` for one file, or a zip `StreamingResponse` for several."""
        report = await self._get_or_404(report_id)
        paths: List[Path] = [self.resolve_file(p) for p in report.get("file_paths", [])]
        if not paths:
            raise AppError("Report has no files", status.HTTP_404_NOT_FOUND)

        await audit_log_service.log_action(actor_id, ActionType.DOWNLOAD_REPORTS)
        logger.info("Report %s downloaded by %s (%d files)", report_id, actor_id, len(paths))

        if len(paths) == 1:
            return FileResponse(paths[0], filename=paths[0].name)

        loop = asyncio.get_running_loop()
        archive_file = await loop.run_in_executor(None, _build_archive, paths)

        filename = f"{report['report_type']}-reports.zip"
        return StreamingResponse(
            _iter_archive(archive_file),
            media_type="application/zip",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    async def update_status(self, report_id: str, request: UpdateReportStatusRequest, actor_id: str) -> ReportResponse:
        report = await self._get_or_404(report_id)
        updates = {"status": request.status, "message": request.message, "updated_at": utc_now()}

        await self._reports().update_one({"_id": report["_id"]}, {"$set": updates})
        report.update(updates)

        await audit_log_service.log_action(actor_id, ActionType.UPDATE_REPORT_STATUS)
        logger.info("Report %s marked %s by %s", report_id, request.status, actor_id)
        return ReportResponse.from_document(report)

    async def delete_report(self, report_id: str, actor_id: str) -> None:
        report = await self._get_or_404(report_id)
        await self._reports().delete_one({"_id": report["_id"]})
        await audit_log_service.log_action(actor_id, ActionType.DELETE_REPORT)
        logger.info("Report %s deleted by %s", report_id, actor_id)


# Global instance
report_service = ReportService()
