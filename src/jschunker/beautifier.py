"""Reformat chunk content with jsbeautifier."""

from __future__ import annotations

import dataclasses
import logging
from typing import Literal

import jsbeautifier
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .chunking.models import Chunk, byte_size

logger = logging.getLogger(__name__)


class BeautifierOptions(BaseModel):
    """Formatting options. Config files may use camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    indent_size: int = Field(default=2, ge=0)
    indent_char: Literal[" ", "\t"] = " "
    preserve_newlines: bool = True
    max_preserve_newlines: int = 10
    wrap_line_length: int = 0  # 0 disables wrapping
    brace_style: Literal["collapse", "expand", "end-expand", "none"] = "collapse"
    space_in_paren: bool = False
    space_in_empty_paren: bool = False
    jslint_happy: bool = False
    unindent_chained_methods: bool = False
    keep_array_indentation: bool = False
    break_chained_methods: bool = False
    end_with_newline: bool = True


class Beautifier:
    """Pretty-print JavaScript, falling back to the input on failure."""

    def __init__(self, options: BeautifierOptions | None = None) -> None:
        self.options = options or BeautifierOptions()

    def _js_options(self):
        opts = jsbeautifier.default_options()
        for name, value in self.options.model_dump().items():
            setattr(opts, name, value)
        opts.indent_with_tabs = self.options.indent_char == "\t"
        opts.indent_level = 0
        opts.space_after_anon_function = True
        opts.space_before_conditional = True
        opts.eval_code = False
        opts.unescape_strings = False
        return opts

    def beautify(self, code: str) -> str:
        if not code or not code.strip():
            return ""

        try:
            return jsbeautifier.beautify(code, self._js_options())
        except Exception as e:
            # jsbeautifier raises assorted exception types on odd input
            logger.warning("Beautification failed, keeping original code: %s", e)
            return code

    def beautify_chunk(self, chunk: Chunk) -> Chunk:
        """Return a copy of the chunk with formatted content and updated size.

        Everything except content and size is carried over unchanged.
        """
        content = self.beautify(chunk.content)
        return dataclasses.replace(
            chunk,
            content=content,
            size=byte_size(content),
            exports=list(chunk.exports),
            dependencies=list(chunk.dependencies),
        )
