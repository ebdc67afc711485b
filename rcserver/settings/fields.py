"""Table of scalar settings: document key, Settings attribute, codec, default.

SETTING_FIELDS is in document order; the writer emits settings in this order
and inserts a blank line whenever the group changes after "general" and
"authentication".
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from rcserver.settings import codec
from rcserver.settings.codec import ScalarCodec


@dataclass(frozen=True)
class SettingField:
    name: str
    attribute: str
    codec: ScalarCodec
    default: Any
    group: str
    aliases: Tuple[str, ...] = ()

    def get(self, settings) -> Any:
        return getattr(settings, self.attribute)

    def set(self, settings, value: Any) -> None:
        setattr(settings, self.attribute, value)

    def encode(self, settings) -> str:
        return self.codec.encode(self.get(settings))

    def decode(self, text: Any) -> Any:
        return self.codec.decode(text)

    def coerce(self, value: Any) -> Any:
        """Coerce a Python value assigned through the API to the field type."""
        if self.codec is codec.BOOL:
            return codec.text_to_bool(value)
        if self.codec is codec.FLOAT:
            if isinstance(value, bool):
                return float(value)
            return codec.text_to_float(value)
        if self.codec is codec.INT:
            if isinstance(value, (bool, float)):
                return int(value)
            return codec.text_to_int(value)
        return codec.TEXT.decode(value)


SETTING_FIELDS: Tuple[SettingField, ...] = (
    # General
    SettingField("autoStart", "auto_start", codec.BOOL, False, "general"),
    SettingField("startMinimized", "start_minimized", codec.BOOL, True, "general"),
    SettingField("showGuide", "show_guide", codec.BOOL, True, "general"),
    # Authentication. Older builds wrote the flag as "useWhiteList".
    SettingField("useWhitelist", "use_whitelist", codec.BOOL, False, "authentication",
                 aliases=("useWhiteList",)),
    SettingField("usePin", "use_pin", codec.BOOL, False, "authentication"),
    SettingField("pin", "pin", codec.TEXT, "0000", "authentication"),
    # Mouse and pointer
    SettingField("mouseSensitivity", "mouse_sensitivity", codec.FLOAT, 1.0, "mouse"),
    SettingField("mouseAcceleration", "mouse_acceleration", codec.FLOAT, 1.0, "mouse"),
    # Screen
    SettingField("screenQualityFull", "screen_quality_full", codec.INT, 60, "screen"),
    SettingField("screenBlackWhite", "screen_black_white", codec.BOOL, False, "screen"),
    # Misc
    SettingField("serialCommands", "serial_commands", codec.BOOL, False, "misc"),
)

# Groups followed by a blank line in the written document
SPACED_GROUPS = ("general", "authentication")

_BY_NAME: Dict[str, SettingField] = {}
for _field in SETTING_FIELDS:
    _BY_NAME[_field.name] = _field
    for _alias in _field.aliases:
        _BY_NAME[_alias] = _field
del _field


def find_field(name: str) -> Optional[SettingField]:
    """Resolve a document key (or legacy alias); None when unknown."""
    return _BY_NAME.get(name)
