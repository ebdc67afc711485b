"""
Settings store for the remote control server.

Holds every runtime-tunable value in memory and persists it as config.xml in
the application data directory. The application root owns one Settings
instance and hands it to the transport, input and capture components.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from PySide6.QtCore import QObject, Signal

from rcserver.logging.logger import get_logger, is_verbose_logging
from rcserver.logging.tags import TAG_IO, TAG_SETTINGS
from rcserver.settings import document, paths
from rcserver.settings.fields import SETTING_FIELDS, find_field

logger = get_logger(__name__)

CUSTOM_ACTIONS_KEY = "customActions"
WHITELIST_KEY = "whitelistedIps"


@dataclass
class LoadResult:
    """Outcome of one load_settings() call, carried by settings_loaded."""

    path: Path
    file_read: bool = False
    applied_keys: List[str] = field(default_factory=list)
    unknown_keys: List[str] = field(default_factory=list)
    custom_actions_defaulted: bool = False
    whitelist_defaulted: bool = False

    @property
    def defaulted(self) -> bool:
        """True when any value came from defaults instead of the file."""
        return (
            not self.file_read
            or self.custom_actions_defaulted
            or self.whitelist_defaulted
        )

    @property
    def status(self) -> str:
        """Return loaded only when the file was read and supplied both lists."""
        return "defaulted" if self.defaulted else "loaded"


class Settings(QObject):
    """
    In-memory configuration with XML persistence.

    Values are plain attributes (``settings.use_pin``). Mutators only change
    memory; nothing is written until save_settings() is called. Not
    thread-safe: callers on other threads must serialize access.
    """

    # Emitted once per load_settings() call, payload is a LoadResult
    settings_loaded = Signal(object)
    # Emitted after a successful write, payload is the file path
    settings_saved = Signal(str)
    # key, new_value ('*' and None after reset_to_defaults)
    settings_changed = Signal(str, object)

    def __init__(self, config_dir: Optional[Union[str, Path]] = None,
                 parent: Optional[QObject] = None):
        """
        Args:
            config_dir: Directory holding config.xml. When omitted the
                platform application data directory is resolved on every
                load/save.
            parent: Optional Qt parent.
        """
        super().__init__(parent)
        self._config_dir = Path(config_dir) if config_dir is not None else None
        self._change_handlers: Dict[str, List[Callable[[Any, Any], None]]] = {}
        self._set_defaults()

    def _set_defaults(self) -> None:
        for setting in SETTING_FIELDS:
            setting.set(self, setting.default)
        # Filled by the default policy on the first load
        self.custom_actions: List[str] = []
        self.whitelisted_ips: List[str] = []

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def config_directory(self) -> Path:
        if self._config_dir is not None:
            return self._config_dir
        return paths.app_data_directory()

    def config_path(self) -> Path:
        return paths.config_path(self.config_directory())

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load_settings(self) -> LoadResult:
        """Read config.xml into memory and emit settings_loaded.

        A missing or unreadable file is logged; scalars keep their current
        values and both lists fall back to their seed values. Nothing is
        raised for I/O or content problems.
        """
        logger.info("Loading settings")
        path = self.config_path()
        result = LoadResult(path=path)
        text = ""

        try:
            with open(path, "r", encoding="utf-8") as handle:
                text = handle.read()
            result.file_read = True
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("%s Error while reading settings file from: %s (%s)", TAG_IO, path, e)
            text = ""

        if result.file_read:
            if is_verbose_logging():
                logger.debug("Raw config document:\n%s", text)
            values, unknown = document.parse_settings(text)
            for setting, value in values:
                setting.set(self, value)
                result.applied_keys.append(setting.name)
            result.unknown_keys = unknown

        self.custom_actions, result.custom_actions_defaulted = document.parse_custom_actions(text)
        self.whitelisted_ips, result.whitelist_defaulted = document.parse_whitelist(text)

        logger.info(
            "%s Settings %s from %s (%d values, %d unknown)",
            TAG_SETTINGS,
            result.status,
            path,
            len(result.applied_keys),
            len(result.unknown_keys),
        )
        self.settings_loaded.emit(result)
        return result

    def save_settings(self) -> None:
        """Write the complete in-memory state to config.xml.

        Prior file contents are replaced. The document goes to a sibling
        temp file first and is moved over config.xml, so a failed write
        leaves the previous file intact. Failures are logged and the call
        returns normally.
        """
        # config_path() creates the data directory when it is missing
        path = self.config_path()
        tmp = path.with_suffix(path.suffix + ".tmp")

        try:
            payload = document.serialize(self).encode("utf-8")
            with open(tmp, "wb") as handle:
                handle.write(payload)
                handle.flush()
            os.replace(tmp, path)
        except (OSError, UnicodeEncodeError) as e:
            logger.error("%s Error while saving settings file to: %s (%s)", TAG_IO, path, e)
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                logger.debug("Could not remove %s", tmp, exc_info=True)
            return

        logger.info("%s Settings saved to %s", TAG_SETTINGS, path)
        self.settings_saved.emit(str(path))

    # ------------------------------------------------------------------
    # Generic access
    # ------------------------------------------------------------------

    def get(self, key: str) -> Any:
        """Return a value by document key ("usePin", "customActions", ...)."""
        if key == CUSTOM_ACTIONS_KEY:
            return list(self.custom_actions)
        if key == WHITELIST_KEY:
            return list(self.whitelisted_ips)
        setting = find_field(key)
        if setting is None:
            raise KeyError(key)
        return setting.get(self)

    def set(self, key: str, value: Any) -> None:
        """Assign a value by document key, coercing it to the field type.

        Raises:
            KeyError: ``key`` is not a known setting.
        """
        if key == CUSTOM_ACTIONS_KEY:
            self.set_custom_actions(value)
            return
        if key == WHITELIST_KEY:
            self.set_whitelisted_ips(value)
            return
        setting = find_field(key)
        if setting is None:
            raise KeyError(key)
        self._assign(setting.name, setting.attribute, setting.coerce(value))

    def as_dict(self) -> Dict[str, Any]:
        """Snapshot of every value keyed by document key."""
        snapshot = {setting.name: setting.get(self) for setting in SETTING_FIELDS}
        snapshot[CUSTOM_ACTIONS_KEY] = list(self.custom_actions)
        snapshot[WHITELIST_KEY] = list(self.whitelisted_ips)
        return snapshot

    def on_changed(self, key: str, handler: Callable[[Any, Any], None]) -> None:
        """
        Register a handler for when a specific setting changes.

        Args:
            key: Document key to watch
            handler: Callback function(new_value, old_value)
        """
        self._change_handlers.setdefault(key, []).append(handler)

    def _assign(self, key: str, attribute: str, value: Any) -> None:
        old_value = getattr(self, attribute)
        if old_value == value:
            return
        setattr(self, attribute, value)

        self.settings_changed.emit(key, value)
        for handler in self._change_handlers.get(key, []):
            try:
                handler(value, old_value)
            except Exception as e:
                logger.error("Error in change handler for %s: %s", key, e, exc_info=True)

        if key == "pin":
            logger.debug("Setting changed: pin")
        else:
            logger.debug("Setting changed: %s: %r -> %r", key, old_value, value)

    def reset_to_defaults(self, seed_lists: bool = False) -> None:
        """Restore constructor defaults in memory.

        Lists become empty, or get the first-run seed values when
        ``seed_lists`` is set.
        """
        self._set_defaults()
        if seed_lists:
            self.custom_actions = list(document.DEFAULT_CUSTOM_ACTIONS)
            self.whitelisted_ips = list(document.DEFAULT_WHITELISTED_IPS)
        logger.info("Settings reset to defaults")
        self.settings_changed.emit('*', None)

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def set_autostart(self, value: bool) -> None:
        self._assign("autoStart", "auto_start", bool(value))

    def set_minimized(self, value: bool) -> None:
        self._assign("startMinimized", "start_minimized", bool(value))

    def set_show_guide(self, value: bool) -> None:
        self._assign("showGuide", "show_guide", bool(value))

    def set_use_whitelist(self, value: bool) -> None:
        self._assign("useWhitelist", "use_whitelist", bool(value))

    def set_use_pin(self, value: bool) -> None:
        self._assign("usePin", "use_pin", bool(value))

    def set_pin(self, value: str) -> None:
        self._assign("pin", "pin", str(value))

    def set_mouse_sensitivity(self, value: float) -> None:
        self._assign("mouseSensitivity", "mouse_sensitivity", float(value))

    def set_mouse_acceleration(self, value: float) -> None:
        self._assign("mouseAcceleration", "mouse_acceleration", float(value))

    def set_screen_quality_full(self, value: int) -> None:
        self._assign("screenQualityFull", "screen_quality_full", int(value))

    def set_screen_black_white(self, value: bool) -> None:
        self._assign("screenBlackWhite", "screen_black_white", bool(value))

    def set_serial_commands(self, value: bool) -> None:
        self._assign("serialCommands", "serial_commands", bool(value))

    def set_custom_actions(self, actions: Iterable[str]) -> None:
        self._assign(CUSTOM_ACTIONS_KEY, "custom_actions", [str(a) for a in actions])

    def add_custom_action(self, action: str) -> None:
        self.set_custom_actions(self.custom_actions + [str(action)])

    def remove_custom_action(self, index: int) -> None:
        """Remove the action at ``index`` (invocation order)."""
        actions = list(self.custom_actions)
        del actions[index]
        self.set_custom_actions(actions)

    def set_whitelisted_ips(self, ips: Iterable[str]) -> None:
        self._assign(WHITELIST_KEY, "whitelisted_ips", [str(ip).strip() for ip in ips])

    def add_whitelisted_ip(self, ip: str) -> None:
        ip = str(ip).strip()
        if ip in self.whitelisted_ips:
            return
        self.set_whitelisted_ips(self.whitelisted_ips + [ip])

    def remove_whitelisted_ip(self, ip: str) -> None:
        ip = str(ip).strip()
        if ip not in self.whitelisted_ips:
            return
        self.set_whitelisted_ips([x for x in self.whitelisted_ips if x != ip])
