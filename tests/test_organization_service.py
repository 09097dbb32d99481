"""
Tests for organization management.
"""
from bson import ObjectId
import pytest
from pymongo import ASCENDING, DESCENDING

from campushub.models.organization_models import (
    DEFAULT_ORGANIZATION_DESCRIPTION,
    CreateOrganizationRequest,
    UpdateOrganizationRequest,
)
from campushub.services.organization_service import organization_service
from campushub.utils.exceptions import AppError


@pytest.mark.asyncio
async def test_create_organization_with_taken_name(mock_db, admin_id):
    mock_db["organizations"].find_one.return_value = {"_id": ObjectId()}

    with pytest.raises(AppError) as exc_info:
        await organization_service.create_organization(
            CreateOrganizationRequest(org_name="Math Society", adviser_id=str(ObjectId())), admin_id
        )

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Organization name already exists"
    mock_db["organizations"].insert_one.assert_not_called()


@pytest.mark.asyncio
async def test_create_organization_with_missing_adviser(mock_db, admin_id):
    with pytest.raises(AppError) as exc_info:
        await organization_service.create_organization(
            CreateOrganizationRequest(org_name="Math Society", adviser_id=str(ObjectId())), admin_id
        )

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "The assigned adviser does not exist"


@pytest.mark.asyncio
async def test_create_organization_maps_adviser_username(mock_db, admin_id, cursor_factory):
    adviser_id = ObjectId()
    mock_db["users"].find_one.return_value = {"_id": adviser_id}
    mock_db["users"].find.return_value = cursor_factory([{"_id": adviser_id, "username": "mr.santos"}])

    organization = await organization_service.create_organization(
        CreateOrganizationRequest(org_name="Math Society", adviser_id=str(adviser_id)), admin_id
    )

    assert organization.org_name == "Math Society"
    assert organization.adviser == "mr.santos"
    assert organization.description == DEFAULT_ORGANIZATION_DESCRIPTION
    assert mock_db["audit_logs"].insert_one.call_args.args[0]["action"] == "Create Organization"


@pytest.mark.asyncio
async def test_list_organizations_sort_and_pagination(mock_db, admin_id, cursor_factory):
    docs = [{"_id": ObjectId(), "org_name": "Chess Club", "adviser_id": "not-a-valid-id"}]
    cursor = cursor_factory(docs)
    mock_db["organizations"].find.return_value = cursor
    mock_db["organizations"].count_documents.return_value = 21

    result = await organization_service.list_organizations(
        admin_id, page=2, limit=10, sort="-created_at,org_name", org_name="chess"
    )

    cursor.sort.assert_called_once_with([("created_at", DESCENDING), ("org_name", ASCENDING)])
    cursor.skip.assert_called_once_with(10)
    assert result.pagination.pages == 3
    assert result.organizations[0].adviser is None


@pytest.mark.asyncio
async def test_update_organization_name_conflict(mock_db, admin_id):
    org = {"_id": ObjectId(), "org_name": "Chess Club", "adviser_id": str(ObjectId())}
    mock_db["organizations"].find_one.side_effect = [org, {"_id": ObjectId()}]

    with pytest.raises(AppError) as exc_info:
        await organization_service.update_organization(
            str(org["_id"]), UpdateOrganizationRequest(org_name="Math Society"), admin_id
        )

    assert exc_info.value.message == "Organization name already exists"
    name_query = mock_db["organizations"].find_one.call_args.args[0]
    assert name_query == {"org_name": "Math Society", "_id": {"$ne": org["_id"]}}


def test_update_requires_a_field():
    with pytest.raises(ValueError):
        UpdateOrganizationRequest()
