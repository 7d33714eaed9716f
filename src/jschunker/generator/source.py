"""Fast path generator: copy the node's own source text."""

from __future__ import annotations

from tree_sitter import Node

from ..errors import GenerationError
from .types import GeneratorOptions, normalize_newlines


class SourceTextGenerator:
    """Render error-free nodes verbatim from the parsed source.

    Nodes containing syntax errors or tokens the parser had to insert are
    rejected, since their source span no longer matches their structure.
    """

    name = "source"

    def can_generate(self, node: Node) -> bool:
        return not node.has_error and node.text is not None

    def generate(self, node: Node, options: GeneratorOptions | None = None) -> str:
        if not self.can_generate(node):
            raise GenerationError(f"Cannot copy source for {node.type} node", node_type=node.type)
        return normalize_newlines(node.text.decode("utf-8"), options)
