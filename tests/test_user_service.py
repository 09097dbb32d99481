"""
Tests for administrative user management.
"""
from bson import ObjectId
import pytest

from campushub.models.user_models import CreateUserRequest, UpdateUserRequest
from campushub.services.user_service import user_service
from campushub.utils.exceptions import AppError
from campushub.utils.security_utils import verify_password


def user_doc(role="admin", **overrides):
    doc = {
        "_id": ObjectId(),
        "username": "principal",
        "email": "principal@school.edu",
        "role": role,
        "phone_number": "+639171234567",
    }
    doc.update(overrides)
    return doc


@pytest.mark.asyncio
async def test_delete_last_admin_rejected(mock_db, admin_id):
    mock_db["users"].find_one.return_value = user_doc()
    mock_db["users"].count_documents.return_value = 1

    with pytest.raises(AppError) as exc_info:
        await user_service.delete_user(str(ObjectId()), admin_id)

    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "Cannot delete the last admin"
    mock_db["users"].delete_one.assert_not_called()


@pytest.mark.asyncio
async def test_delete_admin_when_another_exists(mock_db, admin_id):
    doc = user_doc()
    mock_db["users"].find_one.return_value = doc
    mock_db["users"].count_documents.return_value = 2

    await user_service.delete_user(str(doc["_id"]), admin_id)

    mock_db["users"].delete_one.assert_called_once_with({"_id": doc["_id"]})
    entry = mock_db["audit_logs"].insert_one.call_args.args[0]
    assert entry["user_id"] == admin_id
    assert entry["action"] == "Delete User"


@pytest.mark.asyncio
async def test_demote_last_admin_rejected(mock_db, admin_id):
    mock_db["users"].find_one.return_value = user_doc()
    mock_db["users"].count_documents.return_value = 1

    with pytest.raises(AppError) as exc_info:
        await user_service.update_user(str(ObjectId()), UpdateUserRequest(role="student"), admin_id)

    assert exc_info.value.status_code == 403
    assert exc_info.value.message == "Cannot update the last admin"
    mock_db["users"].update_one.assert_not_called()


@pytest.mark.asyncio
async def test_update_rehashes_password(mock_db, admin_id):
    doc = user_doc(role="student")
    mock_db["users"].find_one.side_effect = [doc, None]

    result = await user_service.update_user(
        str(doc["_id"]), UpdateUserRequest(password="another-password"), admin_id
    )

    update = mock_db["users"].update_one.call_args.args[1]["$set"]
    assert verify_password("another-password", update["password"])
    assert result.username == "principal"


@pytest.mark.asyncio
async def test_create_user_duplicate_username(mock_db, admin_id):
    mock_db["users"].find_one.return_value = {"_id": ObjectId()}
    request = CreateUserRequest(
        username="principal",
        password="password123",
        email="new@school.edu",
        phone_number="+639171234567",
    )

    with pytest.raises(AppError) as exc_info:
        await user_service.create_user(request, admin_id)

    assert exc_info.value.status_code == 409
    mock_db["users"].insert_one.assert_not_called()


@pytest.mark.asyncio
async def test_get_user_invalid_id(mock_db, admin_id):
    with pytest.raises(AppError) as exc_info:
        await user_service.get_user("not-an-id", admin_id)

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid user id"


@pytest.mark.asyncio
async def test_get_user_missing(mock_db, admin_id):
    with pytest.raises(AppError) as exc_info:
        await user_service.get_user(str(ObjectId()), admin_id)

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "User not found"


def test_update_requires_a_field():
    with pytest.raises(ValueError):
        UpdateUserRequest()


def test_phone_number_format_enforced():
    with pytest.raises(ValueError):
        CreateUserRequest(username="abc", password="password123", email="a@school.edu", phone_number="09171234567")
