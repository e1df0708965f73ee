"""Port the dispatcher pushes through; adapters live beside it in this package."""

from abc import ABC, abstractmethod


class PushPort(ABC):
    """A push gateway reached with one device token per call."""

    @abstractmethod
    def send(
        self,
        device_token: str,
        title: str,
        body: str,
        data: dict | None = None,
    ) -> dict:
        """Push ``title`` and ``body`` to the device behind ``device_token``.

        ``data`` carries the order id and recipient type so the app can route
        a tap on the notification.

        Returns a dict with ``status`` set to ``"sent"`` or ``"failed"`` and
        ``message_id`` holding the gateway's id for a sent push (``None`` on
        failure). A failed push also carries ``error``, the gateway's reason,
        which ends up as the notification's failure reason. Any status other
        than ``"sent"`` counts as a failure. Exceptions raised here are
        recorded as failures too.
        """
        ...
