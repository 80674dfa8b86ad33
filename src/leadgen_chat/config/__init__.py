"""Configurações centralizadas do leadgen_chat.

Uso típico:
    from leadgen_chat.config import get_settings
"""

from leadgen_chat.config.settings import (
    MEASUREMENT_PROTOCOL_URL,
    Settings,
    get_settings,
)

__all__ = [
    "Settings",
    "get_settings",
    "MEASUREMENT_PROTOCOL_URL",
]
