"""JavaScript parser using tree-sitter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import tree_sitter_javascript as tsjs
from tree_sitter import Language, Node, Parser as TSParser, Tree

from .errors import ParseError

JS_LANGUAGE = Language(tsjs.language())

# Top-level statements only legal when parsing a module
_MODULE_ONLY_TYPES = {"import_statement", "export_statement"}


@dataclass
class ParseOptions:
    """Options controlling how source text is parsed.

    source_type: "module" accepts top-level import/export statements,
        "script" rejects them.
    tolerant: Keep going past syntax errors. Broken statements are left in
        the tree as error nodes and dealt with during code generation.
    """

    source_type: Literal["script", "module"] = "module"
    tolerant: bool = False


class Parser:
    """Parse JavaScript source into a tree-sitter tree."""

    def __init__(self, options: ParseOptions | None = None) -> None:
        self.options = options or ParseOptions()
        self._parser = TSParser(JS_LANGUAGE)

    def parse(self, source: str) -> Tree:
        """Parse a complete program.

        Raises:
            ParseError: If the source is malformed (strict mode) or could not
                be parsed at all (tolerant mode).
        """
        tree = self._parser.parse(source.encode("utf-8"))
        root = tree.root_node

        if root.has_error:
            error_node = _first_error(root)
            if not self.options.tolerant or root.is_error:
                _raise_for(error_node or root)

        if self.options.source_type == "script":
            for child in root.named_children:
                if child.type in _MODULE_ONLY_TYPES:
                    _raise_for(
                        child,
                        "'import' and 'export' may appear only with sourceType: module",
                    )

        return tree

    def parse_expression(self, source: str) -> Node:
        """Parse a single expression and return its node."""
        tree = self.parse(f"({source}\n);")
        statement = tree.root_node.named_children[0]
        wrapper = statement.named_children[0]
        # Unwrap the parenthesized_expression we added
        return wrapper.named_children[0]


def _first_error(root: Node) -> Node | None:
    """Find the first error or missing node in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def _raise_for(node: Node, message: str | None = None) -> None:
    if message is None:
        if node.is_missing:
            message = f"Missing {node.type}"
        else:
            message = "Unexpected token"
    line, column = node.start_point
    raise ParseError(message, pos=node.start_byte, line=line + 1, column=column)
