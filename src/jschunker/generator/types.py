"""Code generator interface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from tree_sitter import Node


@dataclass
class GeneratorOptions:
    """Options for code generation.

    newline: Line terminator used in generated text. CRLF and bare CR line
        endings from the source are rewritten to it.
    """

    newline: str = "\n"


@runtime_checkable
class CodeGenerator(Protocol):
    """Turns a syntax tree node back into JavaScript source text."""

    name: str

    def can_generate(self, node: Node) -> bool:
        """Check if this generator can handle the given node."""
        ...

    def generate(self, node: Node, options: GeneratorOptions | None = None) -> str:
        """Generate source text for a node.

        Raises:
            GenerationError: If the node cannot be rendered.
        """
        ...


def normalize_newlines(text: str, options: GeneratorOptions | None) -> str:
    newline = (options or GeneratorOptions()).newline
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if newline != "\n":
        text = text.replace("\n", newline)
    return text
