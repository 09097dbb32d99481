"""
Tests for the OTP lifecycle: issue, resend, verify and the attempt cap.
"""
from datetime import timedelta
from unittest.mock import AsyncMock, patch

from bson import ObjectId
import pytest

from campushub.models.common import utc_now
from campushub.services.otp_service import TOO_MANY_ATTEMPTS_MESSAGE, generate_otp_code, otp_service
from campushub.utils.exceptions import AppError

EMAIL = "maria@school.edu"


def otp_record(**overrides):
    record = {
        "_id": ObjectId(),
        "email": EMAIL,
        "otp": "482913",
        "expires_at": utc_now() + timedelta(minutes=4),
        "is_verified": False,
        "verification_attempts": 0,
        "created_at": utc_now(),
    }
    record.update(overrides)
    return record


@pytest.fixture
def mock_email():
    with patch("campushub.services.otp_service.email_service") as email:
        email.send_otp_email = AsyncMock()
        yield email


def test_generated_codes_are_six_digits():
    for _ in range(200):
        code = generate_otp_code()
        assert len(code) == 6
        assert 100000 <= int(code) <= 999999


@pytest.mark.asyncio
async def test_send_otp_replaces_previous_codes(mock_db, mock_email):
    mock_db["users"].find_one.return_value = {"_id": ObjectId()}

    result = await otp_service.send_otp("Maria@School.edu")

    mock_db["otps"].delete_many.assert_called_once_with({"email": EMAIL})
    inserted = mock_db["otps"].insert_one.call_args.args[0]
    assert inserted["email"] == EMAIL
    assert inserted["verification_attempts"] == 0
    assert inserted["is_verified"] is False
    mock_email.send_otp_email.assert_awaited_once_with(EMAIL, inserted["otp"])
    assert result.email == EMAIL
    assert timedelta(minutes=4) < result.expires_at - utc_now() <= timedelta(minutes=5)


@pytest.mark.asyncio
async def test_send_otp_unknown_email(mock_db, mock_email):
    with pytest.raises(AppError) as exc_info:
        await otp_service.send_otp(EMAIL)

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "User with this email does not exist"
    mock_email.send_otp_email.assert_not_called()


@pytest.mark.asyncio
async def test_resend_while_current_code_valid(mock_db, mock_email):
    mock_db["otps"].find_one.return_value = otp_record(expires_at=utc_now() + timedelta(seconds=150))

    with pytest.raises(AppError) as exc_info:
        await otp_service.resend_otp(EMAIL)

    assert exc_info.value.status_code == 429
    assert exc_info.value.message == "Current OTP is still valid. Please check your email or wait 3 minute(s)."


@pytest.mark.asyncio
async def test_resend_after_expiry_issues_new_code(mock_db, mock_email):
    mock_db["otps"].find_one.return_value = otp_record(expires_at=utc_now() - timedelta(seconds=1))
    mock_db["users"].find_one.return_value = {"_id": ObjectId()}

    await otp_service.resend_otp(EMAIL)

    mock_db["otps"].insert_one.assert_called_once()
    mock_email.send_otp_email.assert_awaited_once()


@pytest.mark.asyncio
async def test_verify_success_consumes_all_codes(mock_db):
    record = otp_record()
    mock_db["otps"].find_one.return_value = record

    result = await otp_service.verify_otp(EMAIL, "482913")

    assert result.verified is True
    update_filter, update = mock_db["otps"].update_one.call_args.args
    assert update_filter == {"_id": record["_id"]}
    assert update["$set"]["is_verified"] is True
    mock_db["otps"].delete_many.assert_called_once_with({"email": EMAIL})


@pytest.mark.asyncio
async def test_verify_wrong_code_counts_attempt(mock_db):
    latest = otp_record(verification_attempts=1)
    mock_db["otps"].find_one = AsyncMock(side_effect=[None, latest])

    with pytest.raises(AppError) as exc_info:
        await otp_service.verify_otp(EMAIL, "000001")

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid OTP"
    mock_db["otps"].update_one.assert_called_once_with(
        {"_id": latest["_id"]}, {"$set": {"verification_attempts": 2}}
    )
    mock_db["otps"].delete_many.assert_not_called()


@pytest.mark.asyncio
async def test_fifth_wrong_attempt_invalidates_all_codes(mock_db):
    latest = otp_record(verification_attempts=4)
    mock_db["otps"].find_one = AsyncMock(side_effect=[None, latest])

    with pytest.raises(AppError) as exc_info:
        await otp_service.verify_otp(EMAIL, "000001")

    assert exc_info.value.status_code == 429
    assert exc_info.value.message == TOO_MANY_ATTEMPTS_MESSAGE
    mock_db["otps"].delete_many.assert_called_once_with({"email": EMAIL})


@pytest.mark.asyncio
async def test_correct_code_after_attempt_cap_rejected(mock_db):
    mock_db["otps"].find_one.return_value = otp_record(verification_attempts=5)

    with pytest.raises(AppError) as exc_info:
        await otp_service.verify_otp(EMAIL, "482913")

    assert exc_info.value.status_code == 429
    mock_db["otps"].delete_many.assert_called_once_with({"email": EMAIL})


@pytest.mark.asyncio
async def test_verify_expired_code(mock_db):
    record = otp_record(expires_at=utc_now() - timedelta(seconds=10))
    mock_db["otps"].find_one.return_value = record

    with pytest.raises(AppError) as exc_info:
        await otp_service.verify_otp(EMAIL, "482913")

    assert exc_info.value.message == "OTP has expired"
    mock_db["otps"].delete_one.assert_called_once_with({"_id": record["_id"]})


@pytest.mark.asyncio
async def test_cleanup_expired(mock_db, admin_id):
    mock_db["otps"].delete_many.return_value.deleted_count = 7

    result = await otp_service.cleanup_expired(admin_id)

    assert result["meta"] == {"deleted_count": 7}
    assert "$lt" in mock_db["otps"].delete_many.call_args.args[0]["expires_at"]
    assert mock_db["audit_logs"].insert_one.call_args.args[0]["action"] == "Cleanup OTP Records"
