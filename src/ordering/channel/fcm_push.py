"""Firebase Cloud Messaging adapter over the legacy HTTP endpoint."""

import requests
import structlog

from ordering.channel.push_port import PushPort

logger = structlog.get_logger(__name__)

FCM_SEND_URL = "https://fcm.googleapis.com/fcm/send"


class FcmPushAdapter(PushPort):
    """Sends pushes through FCM with a server key.

    FCM answers 200 for requests it accepted even when the target token is
    stale, so the per-message ``failure`` count in the body decides the outcome.
    """

    def __init__(self, server_key: str, timeout: float = 10.0, session: requests.Session | None = None) -> None:
        if not server_key:
            raise ValueError("FCM server key is required")
        self.server_key = server_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(
        self,
        device_token: str,
        title: str,
        body: str,
        data: dict | None = None,
    ) -> dict:
        payload = {
            "to": device_token,
            "notification": {"title": title, "body": body},
            "data": {key: str(value) for key, value in (data or {}).items()},
        }
        try:
            response = self.session.post(
                FCM_SEND_URL,
                json=payload,
                headers={"Authorization": f"key={self.server_key}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("FCM request failed", error=str(exc))
            return {"message_id": None, "status": "failed", "error": str(exc)}

        if not response.ok:
            return {
                "message_id": None,
                "status": "failed",
                "error": f"FCM responded {response.status_code}",
            }

        try:
            result = response.json()
        except ValueError:
            result = {}

        if result.get("failure"):
            errors = [r.get("error") for r in result.get("results", []) if r.get("error")]
            return {
                "message_id": None,
                "status": "failed",
                "error": ", ".join(errors) or "FCM rejected the message",
            }

        message_id = next(
            (r.get("message_id") for r in result.get("results", []) if r.get("message_id")),
            None,
        )
        return {"message_id": message_id, "status": "sent"}
