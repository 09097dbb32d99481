"""
Tests for the audit trail.
"""
from bson import ObjectId
import pytest
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from campushub.models.common import utc_now
from campushub.services.audit_log_service import audit_log_service


@pytest.mark.asyncio
async def test_log_action_never_raises(mock_db, admin_id):
    mock_db["audit_logs"].insert_one.side_effect = PyMongoError("write failed")

    await audit_log_service.log_action(admin_id, "View Users")


@pytest.mark.asyncio
async def test_log_action_rejects_unknown_action(mock_db, admin_id):
    await audit_log_service.log_action(admin_id, "Hack The Planet")

    mock_db["audit_logs"].insert_one.assert_not_called()


@pytest.mark.asyncio
async def test_list_logs_populates_users(mock_db, cursor_factory):
    known, deleted = ObjectId(), ObjectId()
    mock_db["audit_logs"].count_documents.return_value = 2
    mock_db["audit_logs"].find.return_value = cursor_factory(
        [
            {"_id": ObjectId(), "user_id": str(known), "action": "Sign In", "created_at": utc_now()},
            {"_id": ObjectId(), "user_id": str(deleted), "action": "Sign Out", "created_at": utc_now()},
        ]
    )
    mock_db["users"].find.return_value = cursor_factory(
        [{"_id": known, "username": "maria", "email": "maria@school.edu", "role": "student"}]
    )

    result = await audit_log_service.list_logs()

    assert result["total"] == 2
    first, second = result["logs"]
    assert first.user.username == "maria"
    assert first.user.id == str(known)
    assert second.user is None
    user_query = mock_db["users"].find.call_args.args[0]
    assert set(user_query["_id"]["$in"]) == {known, deleted}


@pytest.mark.asyncio
async def test_list_logs_sort_and_fields(mock_db, cursor_factory):
    cursor = cursor_factory([])
    mock_db["audit_logs"].find.return_value = cursor
    user_id = str(ObjectId())

    await audit_log_service.list_logs(
        user_id=user_id, action="View Users", sort="action,-created_at", fields="action", page=3, limit=20
    )

    query, projection = mock_db["audit_logs"].find.call_args.args
    assert query == {"user_id": user_id, "action": "View Users"}
    assert projection == {"action": 1, "user_id": 1}
    cursor.sort.assert_called_once_with([("action", ASCENDING), ("created_at", DESCENDING)])
    cursor.skip.assert_called_once_with(40)
    mock_db["users"].find.assert_not_called()


@pytest.mark.asyncio
async def test_list_logs_default_sort_is_newest_first(mock_db, cursor_factory):
    cursor = cursor_factory([])
    mock_db["audit_logs"].find.return_value = cursor

    await audit_log_service.list_logs()

    assert mock_db["audit_logs"].find.call_args.args[1] is None
    cursor.sort.assert_called_once_with([("created_at", DESCENDING)])
