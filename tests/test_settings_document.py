"""
Tests for config.xml parsing and serialization.

Covers:
- First-run defaulting of the list sections
- Independent extraction passes
- Unknown and legacy keys
- Exact document layout
"""
import logging

import pytest

from rcserver.settings import document
from rcserver.settings.fields import find_field

SAMPLE = """<?xml version="1.0" encoding="utf-8"?>
<settings>
  <setting name="autoStart" value="true"/>
  <setting name="usePin" value="true"/>
  <setting name="pin" value="0042"/>
  <setting name="mouseSensitivity" value="1.50"/>
  <setting name="screenQualityFull" value="85"/>
  <customActions>
    <custom path="notepad"/>
    <custom path="https://example.com/?a=1&amp;b=2"/>
  </customActions>
  <whitelist>
    <app ip="192.168.1.20"/>
    <app ip="10.0.0.7"/>
  </whitelist>
</settings>
"""


def _values(parsed):
    return {setting.name: value for setting, value in parsed.settings}


class TestDefaultPolicy:

    @pytest.mark.parametrize("text", ["", "   \n", "<settings/>", "<settings><setting name="])
    def test_empty_or_broken_document_seeds_lists(self, text):
        parsed = document.parse(text)
        assert parsed.settings == []
        assert parsed.custom_actions == [
            "http://remote-control-collection.com/help/custom/",
            "https://www.google.com/?q=This+is+a+sample+custom+action",
            "explorer",
            "calc",
        ]
        assert parsed.whitelisted_ips == ["127.0.0.1"]
        assert parsed.custom_actions_defaulted is True
        assert parsed.whitelist_defaulted is True

    def test_sections_default_independently(self):
        text = '<settings><customActions><custom path="calc"/></customActions></settings>'
        parsed = document.parse(text)
        assert parsed.custom_actions == ["calc"]
        assert parsed.custom_actions_defaulted is False
        assert parsed.whitelisted_ips == ["127.0.0.1"]
        assert parsed.whitelist_defaulted is True

    def test_seed_lists_are_fresh_copies(self):
        first, _ = document.parse_custom_actions("")
        first.append("extra")
        second, _ = document.parse_custom_actions("")
        assert "extra" not in second

    def test_fallback_is_logged(self, caplog):
        caplog.set_level(logging.INFO)
        document.parse_whitelist("")
        assert "Whitelist restored, 0 IPs restored" in caplog.text
        assert "[FALLBACK]" in caplog.text


class TestParsing:

    def test_scalars_are_decoded(self):
        values = _values(document.parse(SAMPLE))
        assert values["autoStart"] is True
        assert values["usePin"] is True
        assert values["pin"] == "0042"
        assert values["mouseSensitivity"] == pytest.approx(1.5)
        assert values["screenQualityFull"] == 85

    def test_lists_keep_document_order(self):
        parsed = document.parse(SAMPLE)
        assert parsed.custom_actions == ["notepad", "https://example.com/?a=1&b=2"]
        assert parsed.whitelisted_ips == ["192.168.1.20", "10.0.0.7"]
        assert not parsed.custom_actions_defaulted
        assert not parsed.whitelist_defaulted

    def test_unknown_entry_is_logged_and_skipped(self, caplog):
        caplog.set_level(logging.INFO)
        text = (
            '<settings>'
            '<setting name="volume" value="11"/>'
            '<setting name="usePin" value="true"/>'
            '</settings>'
        )
        values, unknown = document.parse_settings(text)
        assert unknown == ["volume"]
        assert [(s.name, v) for s, v in values] == [("usePin", True)]
        assert "Unknown config entry: volume" in caplog.text

    def test_legacy_whitelist_key_is_accepted(self):
        values, unknown = document.parse_settings('<settings><setting name="useWhiteList" value="true"/></settings>')
        assert unknown == []
        assert values == [(find_field("useWhitelist"), True)]

    def test_malformed_numbers_coerce_to_zero(self):
        text = (
            '<settings>'
            '<setting name="screenQualityFull" value="high"/>'
            '<setting name="mouseAcceleration" value=""/>'
            '</settings>'
        )
        values = _values(document.parse(text))
        assert values["screenQualityFull"] == 0
        assert values["mouseAcceleration"] == 0.0

    def test_entries_without_attribute_are_skipped(self):
        text = '<settings><whitelist><app/><app ip="10.1.1.1"/></whitelist></settings>'
        ips, defaulted = document.parse_whitelist(text)
        assert ips == ["10.1.1.1"]
        assert defaulted is False


class TestSerialize:

    def test_default_layout(self, settings):
        settings.reset_to_defaults(seed_lists=True)
        expected = (
            '<?xml version="1.0" encoding="utf-8"?>\n'
            '<settings>\n'
            '  <setting name="autoStart" value="false"/>\n'
            '  <setting name="startMinimized" value="true"/>\n'
            '  <setting name="showGuide" value="true"/>\n'
            '\n'
            '  <setting name="useWhitelist" value="false"/>\n'
            '  <setting name="usePin" value="false"/>\n'
            '  <setting name="pin" value="0000"/>\n'
            '\n'
            '  <setting name="mouseSensitivity" value="1.00"/>\n'
            '  <setting name="mouseAcceleration" value="1.00"/>\n'
            '  <setting name="screenQualityFull" value="60"/>\n'
            '  <setting name="screenBlackWhite" value="false"/>\n'
            '  <setting name="serialCommands" value="false"/>\n'
            '  <customActions>\n'
            '    <custom path="http://remote-control-collection.com/help/custom/"/>\n'
            '    <custom path="https://www.google.com/?q=This+is+a+sample+custom+action"/>\n'
            '    <custom path="explorer"/>\n'
            '    <custom path="calc"/>\n'
            '  </customActions>\n'
            '  <whitelist>\n'
            '    <app ip="127.0.0.1"/>\n'
            '  </whitelist>\n'
            '</settings>\n'
        )
        assert document.serialize(settings) == expected

    def test_attribute_values_are_escaped(self, settings):
        settings.set_custom_actions(['C:\\Tools\\run.bat "fast"', "https://example.com/?a=1&b=<2>"])
        settings.set_whitelisted_ips(["10.0.0.1"])
        text = document.serialize(settings)
        assert "&amp;" in text
        assert "&quot;fast&quot;" in text

        parsed = document.parse(text)
        assert parsed.custom_actions == settings.custom_actions

    def test_parse_reproduces_scalars(self, settings):
        settings.set_autostart(True)
        settings.set_use_whitelist(True)
        settings.set_pin("9876")
        settings.set_mouse_sensitivity(2.25)
        settings.set_mouse_acceleration(0.5)
        settings.set_screen_quality_full(35)
        settings.set_screen_black_white(True)
        settings.set_serial_commands(True)
        settings.set_custom_actions(["calc"])
        settings.set_whitelisted_ips(["10.0.0.1"])

        parsed = document.parse(document.serialize(settings))
        for setting, value in parsed.settings:
            if isinstance(value, float):
                assert value == pytest.approx(round(setting.get(settings), 2))
            else:
                assert value == setting.get(settings)
        assert len(parsed.settings) == 11
        assert parsed.custom_actions == ["calc"]
        assert parsed.whitelisted_ips == ["10.0.0.1"]


def test_invalid_xml_characters_are_dropped(settings):
    settings.set_pin("12\x0134")
    settings.set_custom_actions(["run\x00me", "\ud800calc"])
    settings.set_whitelisted_ips(["10.0.0.9"])

    parsed = document.parse(document.serialize(settings))

    assert _values(parsed)["pin"] == "1234"
    assert parsed.custom_actions == ["runme", "calc"]
    assert parsed.whitelisted_ips == ["10.0.0.9"]
