"""
Reading and writing the config.xml document.

Parsing runs three independent tag-scoped passes over the same text, one
each for <setting>, <custom> and <app> elements. A pass that finds nothing
(empty file, missing section, or text that is not well-formed XML) behaves
exactly like a first run: the list passes fall back to their seed values.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, List, Tuple
from xml.etree import ElementTree
from xml.sax.saxutils import escape

from rcserver.logging.logger import get_logger, is_verbose_logging
from rcserver.logging.tags import TAG_FALLBACK, TAG_SETTINGS
from rcserver.settings.fields import SETTING_FIELDS, SPACED_GROUPS, SettingField, find_field

logger = get_logger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>'

SETTING_TAG = "setting"
CUSTOM_ACTION_TAG = "custom"
WHITELIST_TAG = "app"

# First-run content, in invocation order
DEFAULT_CUSTOM_ACTIONS: Tuple[str, ...] = (
    "http://remote-control-collection.com/help/custom/",
    "https://www.google.com/?q=This+is+a+sample+custom+action",
    "explorer",
    "calc",
)
DEFAULT_WHITELISTED_IPS: Tuple[str, ...] = ("127.0.0.1",)

# Characters XML 1.0 cannot carry, even as references. Lone surrogates cannot
# be encoded as UTF-8 either.
_INVALID_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

_ATTR_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}


@dataclass
class ParsedDocument:
    """Result of the three extraction passes."""

    settings: List[Tuple[SettingField, Any]] = field(default_factory=list)
    unknown_keys: List[str] = field(default_factory=list)
    custom_actions: List[str] = field(default_factory=list)
    whitelisted_ips: List[str] = field(default_factory=list)
    custom_actions_defaulted: bool = False
    whitelist_defaulted: bool = False


def _find_elements(message: str, text: str, tag: str) -> List[ElementTree.Element]:
    logger.info(message)
    if not text or not text.strip():
        return []
    try:
        root = ElementTree.fromstring(text)
    except ElementTree.ParseError as e:
        logger.debug("Config document is not well-formed (%s), no <%s> entries", e, tag)
        return []
    return list(root.iter(tag))


def parse_settings(text: str) -> Tuple[List[Tuple[SettingField, Any]], List[str]]:
    """Extract recognised <setting> entries as (field, decoded value) pairs.

    Unknown names are logged and returned separately; they never raise.
    """
    values: List[Tuple[SettingField, Any]] = []
    unknown: List[str] = []
    for element in _find_elements("Parsing config file", text, SETTING_TAG):
        name = element.get("name", "")
        raw = element.get("value", "")
        setting = find_field(name)
        if setting is None:
            logger.warning("Unknown config entry: %s", name)
            unknown.append(name)
            continue
        if is_verbose_logging():
            logger.debug("Config entry %s=%r", name, raw)
        values.append((setting, setting.decode(raw)))
    logger.info("%s Settings restored", TAG_SETTINGS)
    return values, unknown


def _parse_list(message: str, text: str, tag: str, attribute: str) -> List[str]:
    entries = []
    for element in _find_elements(message, text, tag):
        value = element.get(attribute)
        if value is None:
            logger.debug("Skipping <%s> without %s attribute", tag, attribute)
            continue
        entries.append(value)
    return entries


def parse_custom_actions(text: str) -> Tuple[List[str], bool]:
    """Return (custom actions, defaulted)."""
    actions = _parse_list("Parsing custom actions", text, CUSTOM_ACTION_TAG, "path")
    logger.info("Custom actions restored, %d actions found", len(actions))
    if actions:
        return actions, False
    logger.info("%s No custom actions stored, using %d sample actions",
                TAG_FALLBACK, len(DEFAULT_CUSTOM_ACTIONS))
    return list(DEFAULT_CUSTOM_ACTIONS), True


def parse_whitelist(text: str) -> Tuple[List[str], bool]:
    """Return (whitelisted IPs, defaulted)."""
    ips = _parse_list("Parsing whitelist", text, WHITELIST_TAG, "ip")
    logger.info("Whitelist restored, %d IPs restored", len(ips))
    if ips:
        return ips, False
    logger.info("%s Whitelist empty, allowing %s", TAG_FALLBACK, ", ".join(DEFAULT_WHITELISTED_IPS))
    return list(DEFAULT_WHITELISTED_IPS), True


def parse(text: str) -> ParsedDocument:
    settings, unknown = parse_settings(text)
    actions, actions_defaulted = parse_custom_actions(text)
    ips, whitelist_defaulted = parse_whitelist(text)
    return ParsedDocument(
        settings=settings,
        unknown_keys=unknown,
        custom_actions=actions,
        whitelisted_ips=ips,
        custom_actions_defaulted=actions_defaulted,
        whitelist_defaulted=whitelist_defaulted,
    )


def _attr(value: str) -> str:
    text = str(value)
    cleaned = _INVALID_XML_CHARS.sub("", text)
    if cleaned != text:
        logger.warning("Dropped %d character(s) not allowed in config.xml from %r",
                       len(text) - len(cleaned), cleaned)
    return escape(cleaned, _ATTR_ENTITIES)


def serialize(settings) -> str:
    """Render the full document for ``settings``.

    Output depends only on the settings values, so saving twice without a
    change in between produces identical bytes.
    """
    lines = [XML_DECLARATION, "<settings>"]
    for index, setting in enumerate(SETTING_FIELDS):
        lines.append(f'  <setting name="{setting.name}" value="{_attr(setting.encode(settings))}"/>')
        next_group = SETTING_FIELDS[index + 1].group if index + 1 < len(SETTING_FIELDS) else None
        if setting.group in SPACED_GROUPS and next_group != setting.group:
            lines.append("")

    lines.append("  <customActions>")
    for action in settings.custom_actions:
        lines.append(f'    <custom path="{_attr(action)}"/>')
    lines.append("  </customActions>")

    lines.append("  <whitelist>")
    for ip in settings.whitelisted_ips:
        lines.append(f'    <app ip="{_attr(ip)}"/>')
    lines.append("  </whitelist>")
    lines.append("</settings>")
    return "\n".join(lines) + "\n"
