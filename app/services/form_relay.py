import logging
from typing import Optional

import requests

from app.config import settings
from app.schemas.contact_schema import ContactRequest, ContactResult

logger = logging.getLogger(__name__)


class FormRelayError(Exception):
    """The relay could not be reached or answered with garbage."""


class FormRelayClient:
    """Posts contact requests to the hosted form relay (Web3Forms)."""

    def __init__(
        self,
        url: Optional[str] = None,
        access_key: Optional[str] = None,
        timeout: Optional[float] = None,
        http: Optional[requests.Session] = None,
    ):
        self.url = url or settings.FORM_RELAY_URL
        self.access_key = access_key if access_key is not None else settings.FORM_RELAY_ACCESS_KEY
        self.timeout = timeout or settings.FORM_RELAY_TIMEOUT
        self.http = http or requests.Session()

    def build_payload(self, contact: ContactRequest) -> dict:
        payload = {
            "access_key": self.access_key,
            "name": contact.name,
            "email": contact.email,
            "message": contact.message,
        }
        if contact.phone:
            payload["phone"] = contact.phone
        if contact.event_type:
            payload["eventType"] = contact.event_type
        return payload

    def submit(self, contact: ContactRequest) -> ContactResult:
        try:
            res = self.http.post(
                self.url,
                data=self.build_payload(contact),
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Form relay unreachable: %s", e)
            raise FormRelayError(str(e)) from e

        try:
            body = res.json()
        except ValueError as e:
            logger.warning("Form relay returned non-JSON (status %s)", res.status_code)
            raise FormRelayError("Invalid response from form relay") from e

        if not isinstance(body, dict):
            logger.warning("Form relay returned a non-object body (status %s)", res.status_code)
            raise FormRelayError("Invalid response from form relay")

        success = bool(body.get("success"))
        if not success:
            logger.warning("Form relay rejected submission: %s", body.get("message"))

        return ContactResult(success=success, message=body.get("message"))


def get_form_relay() -> FormRelayClient:
    return FormRelayClient()
