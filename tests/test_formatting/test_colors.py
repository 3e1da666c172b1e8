"""Unit tests for color normalization."""

import pytest

from chat_formatter.formatting.colors import (
    colorize,
    expand_hex_colors,
    strip_colors,
    translate_color_codes,
)


class TestExpandHexColors:
    @pytest.mark.unit
    def test_expands_six_digit_hex(self):
        assert expand_hex_colors("&#1A2B3C") == "&x&1&A&2&B&3&C"

    @pytest.mark.unit
    def test_preserves_digit_case(self):
        assert expand_hex_colors("&#abCDef") == "&x&a&b&C&D&e&f"

    @pytest.mark.unit
    def test_only_six_digits_are_consumed(self):
        assert expand_hex_colors("&#1A2B3Cabc") == "&x&1&A&2&B&3&Cabc"

    @pytest.mark.unit
    def test_short_run_is_left_alone(self):
        assert expand_hex_colors("&#12345") == "&#12345"

    @pytest.mark.unit
    def test_non_hex_digit_is_left_alone(self):
        assert expand_hex_colors("&#12345G") == "&#12345G"

    @pytest.mark.unit
    def test_multiple_matches(self):
        assert expand_hex_colors("&#000000a&#FFFFFFb") == (
            "&x&0&0&0&0&0&0a&x&F&F&F&F&F&Fb"
        )

    @pytest.mark.unit
    def test_adjacent_matches_do_not_overlap(self):
        assert expand_hex_colors("&#111111&#222222") == "&x&1&1&1&1&1&1&x&2&2&2&2&2&2"

    @pytest.mark.unit
    def test_hash_without_marker_is_literal(self):
        assert expand_hex_colors("#1A2B3C") == "#1A2B3C"


class TestTranslateColorCodes:
    @pytest.mark.parametrize("code", list("0123456789abcdefklmnorx"))
    @pytest.mark.unit
    def test_lowercase_codes(self, code):
        assert translate_color_codes(f"&{code}") == f"§{code}"

    @pytest.mark.parametrize("code", list("ABCDEFKLMNORX"))
    @pytest.mark.unit
    def test_uppercase_codes_keep_case(self, code):
        assert translate_color_codes(f"&{code}") == f"§{code}"

    @pytest.mark.unit
    def test_unknown_code_is_literal(self):
        assert translate_color_codes("&z &g &#") == "&z &g &#"

    @pytest.mark.unit
    def test_trailing_marker_is_literal(self):
        assert translate_color_codes("hi&") == "hi&"

    @pytest.mark.unit
    def test_double_marker(self):
        assert translate_color_codes("&&a") == "&§a"

    @pytest.mark.unit
    def test_custom_marker(self):
        assert translate_color_codes("$cRed &c", marker="$") == "§cRed &c"


class TestColorize:
    @pytest.mark.unit
    def test_none_renders_null(self):
        assert colorize(None) == "null"

    @pytest.mark.unit
    def test_empty_string(self):
        assert colorize("") == ""

    @pytest.mark.unit
    def test_plain_text_unchanged(self):
        assert colorize("just text") == "just text"

    @pytest.mark.unit
    def test_hex_is_expanded_before_translation(self):
        assert colorize("&#1A2B3C") == "§x§1§A§2§B§3§C"

    @pytest.mark.unit
    def test_hex_followed_by_text(self):
        assert colorize("&#1A2B3Cabc") == "§x§1§A§2§B§3§Cabc"

    @pytest.mark.unit
    def test_mixed_codes(self):
        assert colorize("&c[Admin] &#5865F2&lbold") == "§c[Admin] §x§5§8§6§5§F§2§lbold"

    @pytest.mark.unit
    def test_colorize_is_idempotent(self):
        once = colorize("&a&#123abc &z &&b")
        assert colorize(once) == once


class TestStripColors:
    @pytest.mark.unit
    def test_removes_codes(self):
        assert strip_colors("§c[Admin] §x§5§8§6§5§F§2Ray") == "[Admin] Ray"

    @pytest.mark.unit
    def test_leaves_plain_text(self):
        assert strip_colors("no codes & such") == "no codes & such"
