"""Tests for chunk formatting."""

import logging

import jsbeautifier

from jschunker.beautifier import Beautifier, BeautifierOptions
from jschunker.chunking import Chunk


def make_chunk(content: str) -> Chunk:
    return Chunk(
        id="chunk_004",
        content=content,
        size=len(content.encode("utf-8")),
        order=4,
        exports=["f"],
        dependencies=["chunk_001"],
    )


class TestBeautifier:
    """Test jsbeautifier integration."""

    def test_formats_code(self):
        result = Beautifier().beautify("function f(){return 1}")

        assert result.startswith("function f() {\n")
        assert "\n  return 1\n" in result
        assert result.endswith("}\n")

    def test_blank_input(self):
        assert Beautifier().beautify("") == ""
        assert Beautifier().beautify("   \n") == ""

    def test_tab_indentation(self):
        beautifier = Beautifier(BeautifierOptions(indent_char="\t"))

        assert "\n\treturn 1\n" in beautifier.beautify("function f(){return 1}")

    def test_indent_size(self):
        beautifier = Beautifier(BeautifierOptions(indent_size=4))

        assert "\n    return 1\n" in beautifier.beautify("function f(){return 1}")

    def test_failure_keeps_input(self, monkeypatch, caplog):
        def boom(code, opts=None):
            raise RuntimeError("bad input")

        monkeypatch.setattr(jsbeautifier, "beautify", boom)

        with caplog.at_level(logging.WARNING):
            result = Beautifier().beautify("let x=1")

        assert result == "let x=1"
        assert "Beautification failed" in caplog.text

    def test_beautify_chunk_updates_size_only(self):
        chunk = make_chunk("const s='ü';function f(){return s}")

        result = Beautifier().beautify_chunk(chunk)

        assert result is not chunk
        assert result.content != chunk.content
        assert result.size == len(result.content.encode("utf-8"))
        assert (result.id, result.order) == ("chunk_004", 4)
        assert result.exports == ["f"]
        assert result.dependencies == ["chunk_001"]
        assert result.exports is not chunk.exports


class TestBeautifierOptions:
    """Test option parsing."""

    def test_camel_case_keys(self):
        options = BeautifierOptions.model_validate({"indentSize": 4, "preserveNewlines": False})

        assert options.indent_size == 4
        assert options.preserve_newlines is False

    def test_defaults(self):
        options = BeautifierOptions()

        assert options.indent_size == 2
        assert options.indent_char == " "
        assert options.end_with_newline is True
