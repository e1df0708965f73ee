"""Application settings read from the ``[custom]`` table of the domain config.

Values live under ``[tool.protean.custom]`` in ``pyproject.toml`` and can be
overridden per ``PROTEAN_ENV``. Every reader falls back to a code default so the
domain works without a config file.
"""

from protean.utils.globals import current_domain

DEFAULT_DELIVERY_FEE = 30.0
DEFAULT_PLATFORM_FEE = 10.0
DEFAULT_ORDER_EXPIRY_MINUTES = 10
DEFAULT_SWEEP_INTERVAL_SECONDS = 60


def _custom(name, default):
    custom = current_domain.config.get("custom") or {}
    value = custom.get(name)
    return default if value is None else value


def _flag(name, default: bool) -> bool:
    value = _custom(name, default)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def delivery_fee() -> float:
    return float(_custom("DELIVERY_FEE", DEFAULT_DELIVERY_FEE))


def platform_fee() -> float:
    return float(_custom("PLATFORM_FEE", DEFAULT_PLATFORM_FEE))


def order_expiry_minutes() -> int:
    return int(_custom("ORDER_EXPIRY_MINUTES", DEFAULT_ORDER_EXPIRY_MINUTES))


def sweep_interval_seconds() -> int:
    return int(_custom("SWEEP_INTERVAL_SECONDS", DEFAULT_SWEEP_INTERVAL_SECONDS))


def skip_unknown_menu_items() -> bool:
    """Whether lines naming an unknown menu item are dropped instead of rejected."""
    return _flag("SKIP_UNKNOWN_MENU_ITEMS", True)


def auto_dispatch_notifications() -> bool:
    return _flag("AUTO_DISPATCH_NOTIFICATIONS", True)
