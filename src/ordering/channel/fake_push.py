"""Fake push adapter — records pushes in memory for development and tests."""

from uuid import uuid4

from ordering.channel.push_port import PushPort


class FakePushAdapter(PushPort):
    def __init__(self):
        self.sent_pushes: list[dict] = []
        self.attempts = 0
        self.should_succeed = True
        self.failure_reason = "Push delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Push delivery failed"):
        """Make subsequent sends succeed or fail."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(
        self,
        device_token: str,
        title: str,
        body: str,
        data: dict | None = None,
    ) -> dict:
        self.attempts += 1
        if not self.should_succeed:
            return {
                "message_id": None,
                "status": "failed",
                "error": self.failure_reason,
            }

        message_id = f"push-{uuid4().hex[:12]}"
        self.sent_pushes.append(
            {
                "message_id": message_id,
                "device_token": device_token,
                "title": title,
                "body": body,
                "data": data,
            }
        )
        return {"message_id": message_id, "status": "sent"}

    def reset(self):
        self.sent_pushes.clear()
        self.attempts = 0
        self.should_succeed = True
        self.failure_reason = "Push delivery failed"
