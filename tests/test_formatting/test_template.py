"""Unit tests for template compilation and the template store."""

import threading
from unittest.mock import patch

import pytest

from chat_formatter.formatting.colors import colorize
from chat_formatter.formatting.template import (
    DEFAULT_FORMAT,
    CompiledTemplate,
    TemplateStore,
    compile_template,
)


class TestCompileTemplate:
    @pytest.mark.unit
    def test_default_format_text(self):
        assert DEFAULT_FORMAT == "<{prefix}{name}{suffix}> {message}"

    @pytest.mark.unit
    def test_none_uses_default(self):
        template = compile_template(None)
        assert template.raw == DEFAULT_FORMAT
        assert template.text == "<{prefix}{name}{suffix}> %2$s"

    @pytest.mark.unit
    def test_displayname_and_message_become_slots(self):
        template = compile_template("{displayname}: {message} ({displayname})")
        assert template.text == "%1$s: %2$s (%1$s)"

    @pytest.mark.unit
    def test_runtime_placeholders_survive(self):
        text = compile_template("{prefix}{verifier-badge}{name}{suffix}").text
        assert text == "{prefix}{verifier-badge}{name}{suffix}"

    @pytest.mark.unit
    def test_colors_are_normalized(self):
        assert compile_template("&7{name}&#FF0000>").text == "§7{name}§x§F§F§0§0§0§0>"

    @pytest.mark.unit
    def test_unknown_placeholders_pass_through(self):
        assert compile_template("{world} {name").text == "{world} {name"

    @pytest.mark.unit
    def test_empty_string_is_not_replaced_by_default(self):
        assert compile_template("").text == ""

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            "",
            "plain text",
            "&#1A2B3C{displayname}&r: {message}",
            "&&a &#12345 &z {message}{message}",
            "%1$s already compiled %2$s",
        ],
    )
    @pytest.mark.unit
    def test_compiling_is_idempotent(self, raw):
        once = compile_template(raw).text
        assert compile_template(once).text == once

    @pytest.mark.parametrize("raw", ["hello", "&aGreen &#00FF00hex", "100% & more"])
    @pytest.mark.unit
    def test_no_placeholders_is_colorize(self, raw):
        assert compile_template(raw).text == colorize(raw)


class TestTemplateStore:
    @pytest.mark.unit
    def test_starts_with_default(self):
        store = TemplateStore()
        assert store.current() == compile_template(None)

    @pytest.mark.unit
    def test_starts_with_given_raw(self):
        store = TemplateStore("{name}: {message}")
        assert store.current().text == "{name}: %2$s"

    @pytest.mark.unit
    def test_reload_publishes_new_template(self):
        store = TemplateStore()
        returned = store.reload("[{name}] {message}")
        assert store.current() is returned
        assert returned.text == "[{name}] %2$s"

    @pytest.mark.unit
    def test_reload_none_restores_default(self):
        store = TemplateStore("x")
        store.reload(None)
        assert store.current().raw == DEFAULT_FORMAT

    @pytest.mark.unit
    def test_compiled_template_is_frozen(self):
        template = TemplateStore().current()
        with pytest.raises(AttributeError):
            template.text = "changed"  # type: ignore[misc]

    @pytest.mark.unit
    def test_reload_logs_template(self, caplog):
        with caplog.at_level("INFO", logger="chat_formatter.formatting.template"):
            TemplateStore().reload("{name}")
        assert "Chat format loaded" in caplog.text

    @pytest.mark.unit
    def test_readers_never_see_partial_template(self):
        """Concurrent readers observe only fully compiled templates."""
        formats = ["&#1A2B3C{name} {message}", "&#FFFFFF[{name}] {message}"]
        valid = {compile_template(raw).text for raw in formats} | {compile_template(None).text}
        store = TemplateStore()
        seen: set[str] = set()
        stop = threading.Event()

        def read():
            while not stop.is_set():
                seen.add(store.current().text)

        reader = threading.Thread(target=read)
        reader.start()
        for i in range(200):
            store.reload(formats[i % 2])
        stop.set()
        reader.join()

        assert seen <= valid
        assert all(isinstance(t, str) for t in seen)
        assert isinstance(store.current(), CompiledTemplate)

    @pytest.mark.unit
    def test_reload_compiles_while_holding_the_lock(self):
        store = TemplateStore()
        held = []

        def compile_and_check(raw):
            held.append(store._reload_lock.locked())
            return compile_template(raw)

        with patch(
            "chat_formatter.formatting.template.compile_template", side_effect=compile_and_check
        ):
            store.reload("{name}")

        assert held == [True]
        assert store.current().text == "{name}"
