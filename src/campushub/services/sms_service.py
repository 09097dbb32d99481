"""
# SMS Service

Client for the **Semaphore** SMS gateway (`https://semaphore.co/api/v4`) built on `httpx`.

- `send(to, message)`: POST `/messages` with a form body of `apikey`, `number`, `message`
  and `sendername`.
- `get_balance()`: GET `/account` for the remaining credit balance.

Gateway errors surface as `httpx.HTTPError`; callers decide whether a failed delivery should
fail the request (event notifications record it as a `failed` status instead).
"""

from typing import Any, Dict, List

import httpx
from fastapi import status

from campushub.config import settings
from campushub.managers.logging_manager import get_logger
from campushub.utils.exceptions import AppError
from campushub.utils.logging_utils import log_performance

logger = get_logger(prefix="[SMSService]")


class SMSService:
    def __init__(self):
        self.base_url = settings.SEMAPHORE_BASE_URL.rstrip("/")
        self.timeout = settings.SMS_TIMEOUT

    def _api_key(self) -> str:
        return settings.SEMAPHORE_API_KEY.get_secret_value()

    @log_performance("send_sms")
    async def send(self, to: str, message: str) -> List[Dict[str, Any]]:
        """
        Send a single SMS.

        Args:
            to: Recipient number.
            message: Message body.

        Returns:
            The gateway's JSON response (a list of queued message records).

        Raises:
            AppError(400): If `to` or `message` is missing.
            httpx.HTTPError: If the gateway is unreachable or rejects the request.
        """
        if not to or not message:
            raise AppError("Missing sms parameters", status.HTTP_400_BAD_REQUEST)

        payload = {
            "apikey": self._api_key(),
            "number": to,
            "message": message,
            "sendername": settings.SEMAPHORE_SENDER_NAME,
        }
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(f"{self.base_url}/messages", data=payload)
            response.raise_for_status()

        logger.info("SMS queued for %s", to)
        return response.json()

    async def get_balance(self) -> Dict[str, Any]:
        """Return the Semaphore account record, including `credit_balance`."""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(f"{self.base_url}/account", params={"apikey": self._api_key()})
            response.raise_for_status()
        return response.json()


# Global instance
sms_service = SMSService()
