"""
Tests for officer terms: validation, uniqueness and update rules.
"""
from datetime import datetime, timedelta, timezone

from bson import ObjectId
from pydantic import ValidationError
import pytest

from campushub.models.officer_models import (
    END_TERM_ORDER_MESSAGE,
    OFFICER_POSITIONS,
    CreateOfficerRequest,
    UpdateOfficerRequest,
)
from campushub.services.officer_service import officer_service
from campushub.utils.exceptions import AppError

START = datetime(2025, 6, 1, tzinfo=timezone.utc)
END = datetime(2026, 5, 31, tzinfo=timezone.utc)


def create_request(**overrides):
    data = {
        "user_id": str(ObjectId()),
        "org_id": str(ObjectId()),
        "position": "President",
        "start_term": START,
        "end_term": END,
    }
    data.update(overrides)
    return CreateOfficerRequest(**data)


def officer_doc(**overrides):
    doc = {
        "_id": ObjectId(),
        "user_id": str(ObjectId()),
        "org_id": str(ObjectId()),
        "position": "Vp For Finance",
        "start_term": START,
        "end_term": END,
    }
    doc.update(overrides)
    return doc


def test_position_list_covers_committees_and_representatives():
    assert "Member Of Vp For Non-Academics (Sociocultural Committee)" in OFFICER_POSITIONS
    assert "Representative 4th year HRDM" in OFFICER_POSITIONS
    assert len(OFFICER_POSITIONS) == 4 + 2 * 9 + 14


@pytest.mark.parametrize("end_term", [END - timedelta(days=400), START])
def test_end_term_must_follow_start_term(end_term):
    with pytest.raises(ValidationError) as exc_info:
        create_request(end_term=end_term)

    assert END_TERM_ORDER_MESSAGE in str(exc_info.value)


def test_unknown_position_rejected():
    with pytest.raises(ValidationError):
        create_request(position="Treasurer")


def test_longest_position_accepted():
    request = create_request(position="Member Of Vp For Non-Academics (Sociocultural Committee)")

    assert request.position.startswith("Member Of Vp For")


@pytest.mark.asyncio
async def test_create_officer(mock_db, admin_id):
    request = create_request()
    mock_db["users"].find_one.return_value = {"_id": ObjectId(request.user_id)}
    mock_db["organizations"].find_one.return_value = {"_id": ObjectId(request.org_id)}

    officer = await officer_service.create_officer(request, admin_id)

    assert officer.position == "President"
    inserted = mock_db["officers"].insert_one.call_args.args[0]
    assert inserted["user_id"] == request.user_id
    assert inserted["org_id"] == request.org_id
    assert mock_db["audit_logs"].insert_one.call_args.args[0]["action"] == "Create Officer"


@pytest.mark.asyncio
async def test_create_duplicate_officer_conflicts(mock_db, admin_id):
    mock_db["users"].find_one.return_value = {"_id": ObjectId()}
    mock_db["organizations"].find_one.return_value = {"_id": ObjectId()}
    mock_db["officers"].find_one.return_value = {"_id": ObjectId()}

    with pytest.raises(AppError) as exc_info:
        await officer_service.create_officer(create_request(), admin_id)

    assert exc_info.value.status_code == 409
    assert exc_info.value.message == "User is already an officer of this organization"
    mock_db["officers"].insert_one.assert_not_called()


@pytest.mark.asyncio
async def test_create_officer_for_missing_organization(mock_db, admin_id):
    mock_db["users"].find_one.return_value = {"_id": ObjectId()}

    with pytest.raises(AppError) as exc_info:
        await officer_service.create_officer(create_request(), admin_id)

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Organization not found"


@pytest.mark.asyncio
async def test_update_cannot_change_user(mock_db, admin_id):
    with pytest.raises(AppError) as exc_info:
        await officer_service.update_officer(
            str(ObjectId()), UpdateOfficerRequest(user_id=str(ObjectId())), admin_id
        )

    assert exc_info.value.message == "User ID cannot be updated"


@pytest.mark.asyncio
async def test_update_cannot_push_start_later(mock_db, admin_id):
    mock_db["officers"].find_one.return_value = officer_doc()

    with pytest.raises(AppError) as exc_info:
        await officer_service.update_officer(
            str(ObjectId()), UpdateOfficerRequest(start_term=START + timedelta(days=1)), admin_id
        )

    assert exc_info.value.message == "Cannot set start term after it has already begun"


@pytest.mark.asyncio
async def test_update_cannot_shorten_end(mock_db, admin_id):
    mock_db["officers"].find_one.return_value = officer_doc()

    with pytest.raises(AppError) as exc_info:
        await officer_service.update_officer(
            str(ObjectId()), UpdateOfficerRequest(end_term=END - timedelta(days=1)), admin_id
        )

    assert exc_info.value.message == "Cannot shorten end term past the existing date"


@pytest.mark.asyncio
async def test_update_extends_term(mock_db, admin_id):
    doc = officer_doc(start_term=START.replace(tzinfo=None), end_term=END.replace(tzinfo=None))
    mock_db["officers"].find_one.return_value = doc
    new_end = END + timedelta(days=30)

    officer = await officer_service.update_officer(
        str(doc["_id"]), UpdateOfficerRequest(end_term=new_end, position="President"), admin_id
    )

    assert officer.end_term == new_end
    assert officer.position == "President"
    assert mock_db["audit_logs"].insert_one.call_args.args[0]["action"] == "Update Officer"
