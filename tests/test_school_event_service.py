"""
Tests for school event listing and lifecycle rules.
"""
from datetime import timedelta

from bson import ObjectId
from pydantic import ValidationError
import pytest
from pymongo import ASCENDING, DESCENDING

from campushub.models.common import utc_now
from campushub.models.school_event_models import (
    CreateSchoolEventRequest,
    DateRangeRequest,
    EventListType,
    UpdateSchoolEventRequest,
)
from campushub.services.school_event_service import school_event_service
from campushub.utils.exceptions import AppError


def event_doc(**overrides):
    doc = {
        "_id": ObjectId(),
        "title": "Foundation Week",
        "description": "Week-long celebration",
        "date": utc_now() + timedelta(days=10),
        "venue": "Main Quadrangle",
        "organized_by": "admin",
    }
    doc.update(overrides)
    return doc


@pytest.mark.asyncio
async def test_page_beyond_last_rejected(mock_db):
    mock_db["school_events"].count_documents.return_value = 25

    with pytest.raises(AppError) as exc_info:
        await school_event_service.list_events(page=4, limit=10)

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid page number. Maximum page is 3."


@pytest.mark.asyncio
async def test_empty_collection_returns_empty_first_page(mock_db):
    result = await school_event_service.list_events(page=1, limit=10)

    assert result.events == []
    assert result.total_pages == 0


@pytest.mark.asyncio
async def test_upcoming_events_sorted_by_date(mock_db, cursor_factory):
    docs = [event_doc(), event_doc(title="Career Fair")]
    cursor = cursor_factory(docs)
    mock_db["school_events"].find.return_value = cursor
    mock_db["school_events"].count_documents.return_value = 2

    result = await school_event_service.list_events(type=EventListType.UPCOMING, title="fair")

    query = mock_db["school_events"].find.call_args.args[0]
    assert "$gte" in query["date"]
    assert query["title"] == {"$regex": "fair", "$options": "i"}
    cursor.sort.assert_called_once_with([("date", ASCENDING)])
    assert [e.title for e in result.events] == ["Foundation Week", "Career Fair"]
    assert result.total_pages == 1


@pytest.mark.asyncio
async def test_past_events_sorted_newest_first(mock_db, cursor_factory):
    cursor = cursor_factory([])
    mock_db["school_events"].find.return_value = cursor

    await school_event_service.list_events(type="past")

    assert "$lt" in mock_db["school_events"].find.call_args.args[0]["date"]
    cursor.sort.assert_called_once_with([("date", DESCENDING)])


@pytest.mark.asyncio
async def test_upcoming_on_a_future_day_keeps_the_day_bounds(mock_db):
    day = utc_now() + timedelta(days=30)

    await school_event_service.list_events(type=EventListType.UPCOMING, date=day)

    date_filter = mock_db["school_events"].find.call_args.args[0]["date"]
    start = day.replace(hour=0, minute=0, second=0, microsecond=0)
    assert date_filter == {"$gte": start, "$lt": start + timedelta(days=1)}


@pytest.mark.asyncio
async def test_past_on_an_earlier_day_keeps_the_day_bounds(mock_db):
    day = utc_now() - timedelta(days=30)

    await school_event_service.list_events(type=EventListType.PAST, date=day)

    date_filter = mock_db["school_events"].find.call_args.args[0]["date"]
    start = day.replace(hour=0, minute=0, second=0, microsecond=0)
    assert date_filter == {"$gte": start, "$lt": start + timedelta(days=1)}


@pytest.mark.asyncio
async def test_upcoming_today_starts_from_now(mock_db):
    before = utc_now()

    await school_event_service.list_events(type=EventListType.UPCOMING, date=before)

    date_filter = mock_db["school_events"].find.call_args.args[0]["date"]
    start = before.replace(hour=0, minute=0, second=0, microsecond=0)
    assert date_filter["$gte"] >= before
    assert date_filter["$lt"] == start + timedelta(days=1)


@pytest.mark.asyncio
async def test_guest_listing_not_audited(mock_db):
    await school_event_service.list_events(actor_id=None)

    mock_db["audit_logs"].insert_one.assert_not_called()


@pytest.mark.asyncio
async def test_create_event_in_past_rejected(mock_db, admin_id):
    request = CreateSchoolEventRequest(
        title="Old Event",
        description="Already happened",
        date=utc_now() - timedelta(days=1),
        venue="Gym",
        organized_by="department",
    )

    with pytest.raises(AppError) as exc_info:
        await school_event_service.create_event(request, admin_id)

    assert exc_info.value.message == "Event date cannot be in the past"
    mock_db["school_events"].insert_one.assert_not_called()


@pytest.mark.asyncio
async def test_update_rejects_locked_fields(mock_db, admin_id):
    request = UpdateSchoolEventRequest(title="Renamed", organized_by="department")

    with pytest.raises(AppError) as exc_info:
        await school_event_service.update_event(str(ObjectId()), request, admin_id)

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "The following fields cannot be updated: organized_by"


@pytest.mark.asyncio
async def test_update_to_past_date_rejected(mock_db, admin_id):
    mock_db["school_events"].find_one.return_value = event_doc()

    with pytest.raises(AppError) as exc_info:
        await school_event_service.update_event(
            str(ObjectId()), UpdateSchoolEventRequest(date=utc_now() - timedelta(hours=1)), admin_id
        )

    assert exc_info.value.message == "Cannot update event to a past date"


@pytest.mark.asyncio
async def test_update_event(mock_db, admin_id):
    doc = event_doc()
    mock_db["school_events"].find_one.return_value = doc

    event = await school_event_service.update_event(
        str(doc["_id"]), UpdateSchoolEventRequest(venue="Auditorium"), admin_id
    )

    assert event.venue == "Auditorium"
    update = mock_db["school_events"].update_one.call_args.args[1]["$set"]
    assert set(update) == {"venue", "updated_at"}


@pytest.mark.asyncio
async def test_get_missing_event(mock_db):
    with pytest.raises(AppError) as exc_info:
        await school_event_service.get_event(str(ObjectId()))

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "School event not found"


def test_date_range_must_be_ordered():
    now = utc_now()

    with pytest.raises(ValidationError) as exc_info:
        DateRangeRequest(start_date=now, end_date=now - timedelta(days=1))

    assert "End date cannot be earlier than start date" in str(exc_info.value)
