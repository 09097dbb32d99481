"""
Tests for report submission and downloads.
"""
import asyncio
from datetime import datetime, timezone
import io
import zipfile

from bson import ObjectId
from fastapi.responses import FileResponse, StreamingResponse
import pytest
from pymongo import DESCENDING

from campushub.config import settings
from campushub.models.report_models import CreateReportRequest
from campushub.services.report_service import report_service
from campushub.utils.exceptions import AppError


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    (tmp_path / "chess").mkdir()
    (tmp_path / "chess" / "q1.pdf").write_bytes(b"first quarter")
    (tmp_path / "chess" / "q2.pdf").write_bytes(b"second quarter")
    return tmp_path


def report_doc(*paths):
    return {
        "_id": ObjectId(),
        "org_id": str(ObjectId()),
        "submitted_by": str(ObjectId()),
        "report_type": "financial",
        "file_paths": list(paths),
        "status": "pending",
        "submitted_date": datetime(2026, 3, 1, tzinfo=timezone.utc),
    }


@pytest.mark.asyncio
async def test_create_report_for_missing_org(mock_db, admin_id):
    with pytest.raises(AppError) as exc_info:
        await report_service.create_report(
            CreateReportRequest(org_id=str(ObjectId()), report_type="bylaws", file_paths=["chess/bylaws.pdf"]),
            admin_id,
        )

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Organization not found"
    mock_db["reports"].insert_one.assert_not_called()


@pytest.mark.asyncio
async def test_create_report_records_submitter(mock_db, admin_id):
    mock_db["organizations"].find_one.return_value = {"_id": ObjectId()}

    report = await report_service.create_report(
        CreateReportRequest(org_id=str(ObjectId()), report_type="bylaws", file_paths=["chess/bylaws.pdf"]),
        admin_id,
    )

    assert report.submitted_by == admin_id
    assert report.status == "pending"
    assert mock_db["audit_logs"].insert_one.call_args.args[0]["action"] == "Create Report"


@pytest.mark.asyncio
async def test_list_reports_defaults(mock_db, admin_id, cursor_factory):
    cursor = cursor_factory([report_doc("chess/q1.pdf")])
    mock_db["reports"].find.return_value = cursor

    result = await report_service.list_reports(admin_id, report_type="financial")

    assert mock_db["reports"].find.call_args.args[0] == {"report_type": "financial"}
    cursor.sort.assert_called_once_with("submitted_date", DESCENDING)
    cursor.limit.assert_called_once_with(25)
    assert result.count == 1


@pytest.mark.asyncio
async def test_get_report_invalid_id(mock_db, admin_id):
    with pytest.raises(AppError) as exc_info:
        await report_service.get_report("abc", admin_id)

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid report id"


@pytest.mark.asyncio
async def test_download_single_file(mock_db, admin_id, upload_dir):
    doc = report_doc("chess/q1.pdf")
    mock_db["reports"].find_one.return_value = doc

    response = await report_service.download_report(str(doc["_id"]), admin_id)

    assert isinstance(response, FileResponse)
    assert response.path == (upload_dir / "chess" / "q1.pdf").resolve()
    assert mock_db["audit_logs"].insert_one.call_args.args[0]["action"] == "Download Reports"


@pytest.mark.asyncio
async def test_download_multiple_files_as_zip(mock_db, admin_id, upload_dir):
    doc = report_doc("chess/q1.pdf", "chess/q2.pdf")
    mock_db["reports"].find_one.return_value = doc

    response = await report_service.download_report(str(doc["_id"]), admin_id)

    assert isinstance(response, StreamingResponse)
    assert response.headers["content-disposition"] == 'attachment; filename="financial-reports.zip"'
    body = b"".join([chunk async for chunk in response.body_iterator])
    with zipfile.ZipFile(io.BytesIO(body)) as archive:
        assert sorted(archive.namelist()) == ["q1.pdf", "q2.pdf"]
        assert archive.read("q2.pdf") == b"second quarter"


@pytest.mark.asyncio
async def test_download_rejects_path_outside_upload_dir(mock_db, admin_id, upload_dir):
    doc = report_doc("../../etc/passwd")
    mock_db["reports"].find_one.return_value = doc

    with pytest.raises(AppError) as exc_info:
        await report_service.download_report(str(doc["_id"]), admin_id)

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid file path"
    mock_db["audit_logs"].insert_one.assert_not_called()


@pytest.mark.asyncio
async def test_download_missing_file(mock_db, admin_id, upload_dir):
    doc = report_doc("chess/q3.pdf")
    mock_db["reports"].find_one.return_value = doc

    with pytest.raises(AppError) as exc_info:
        await report_service.download_report(str(doc["_id"]), admin_id)

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "File not found: chess/q3.pdf"


@pytest.mark.asyncio
async def test_zip_built_off_the_event_loop_and_streamed_in_chunks(mock_db, admin_id, upload_dir, monkeypatch):
    monkeypatch.setattr("campushub.services.report_service.ZIP_CHUNK_SIZE", 32)
    doc = report_doc("chess/q1.pdf", "chess/q2.pdf")
    mock_db["reports"].find_one.return_value = doc
    loop = asyncio.get_running_loop()
    executor_calls = []
    run_in_executor = loop.run_in_executor

    def record_executor(executor, func, *args):
        executor_calls.append(getattr(func, "__name__", repr(func)))
        return run_in_executor(executor, func, *args)

    monkeypatch.setattr(loop, "run_in_executor", record_executor)

    response = await report_service.download_report(str(doc["_id"]), admin_id)
    chunks = [chunk async for chunk in response.body_iterator]

    assert executor_calls[0] == "_build_archive"
    assert len(chunks) > 1
    assert all(len(chunk) <= 32 for chunk in chunks)
    with zipfile.ZipFile(io.BytesIO(b"".join(chunks))) as archive:
        assert archive.read("q1.pdf") == b"first quarter"
