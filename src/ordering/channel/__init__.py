"""Push channel registry — pluggable push delivery adapters.

Uses the fake adapter by default. ``PUSH_ADAPTER=fcm`` switches to Firebase
Cloud Messaging, authenticated with ``FCM_SERVER_KEY``.
"""

import os

from ordering.channel.push_port import PushPort

_push_instance: PushPort | None = None


def get_push_channel() -> PushPort:
    """Return the configured push adapter (singleton)."""
    global _push_instance
    if _push_instance is None:
        adapter = os.environ.get("PUSH_ADAPTER", "fake").lower()
        if adapter == "fake":
            from ordering.channel.fake_push import FakePushAdapter

            _push_instance = FakePushAdapter()
        elif adapter == "fcm":
            from ordering.channel.fcm_push import FcmPushAdapter

            _push_instance = FcmPushAdapter(server_key=os.environ.get("FCM_SERVER_KEY", ""))
        else:
            raise ValueError(f"Unknown push adapter: {adapter}")
    return _push_instance


def set_push_channel(adapter: PushPort) -> None:
    """Override the active push adapter."""
    global _push_instance
    _push_instance = adapter


def reset_push_channel() -> None:
    """Reset the push singleton (useful for testing)."""
    global _push_instance
    _push_instance = None
