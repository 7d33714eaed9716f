"""Fallback generator working from a token stream.

The node is first converted into a flat list of tokens. Tokens the parser
inserted during error recovery (a missing ``)`` or ``;``) carry no source text
of their own, so they are rendered from their token type. Whitespace and
comments between real tokens are copied from the original source.
"""

from __future__ import annotations

from dataclasses import dataclass

from tree_sitter import Node

from ..errors import GenerationError
from .types import GeneratorOptions, normalize_newlines


@dataclass
class Token:
    text: str
    start: int
    end: int
    inserted: bool = False


def to_tokens(node: Node) -> list[Token]:
    """Flatten a node into its leaf tokens in document order.

    Raises:
        GenerationError: On error nodes, and on missing named nodes such as
            an identifier, which cannot be rebuilt without guessing a name.
    """
    tokens: list[Token] = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_missing:
            if current.is_named:
                raise GenerationError(
                    f"Missing {current.type} inside {node.type} node at byte {current.start_byte}",
                    node_type=node.type,
                )
            tokens.append(Token(current.type, current.start_byte, current.start_byte, inserted=True))
        elif current.is_error:
            raise GenerationError(
                f"Syntax error inside {node.type} node at byte {current.start_byte}",
                node_type=node.type,
            )
        elif current.child_count == 0:
            tokens.append(Token(current.text.decode("utf-8"), current.start_byte, current.end_byte))
        else:
            stack.extend(reversed(current.children))
    return tokens


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char in "_$"


def render_tokens(tokens: list[Token], source: bytes, base: int) -> str:
    """Render tokens back to text, reusing the source between them.

    Args:
        tokens: Tokens in document order
        source: Source bytes of the node the tokens came from
        base: Byte offset of ``source`` within the whole document
    """
    parts: list[str] = []
    cursor = base
    previous: Token | None = None
    for token in tokens:
        if token.start > cursor:
            parts.append(source[cursor - base : token.start - base].decode("utf-8"))
        elif (
            previous is not None
            and (previous.inserted or token.inserted)
            and previous.text
            and token.text
            and _is_word_char(previous.text[-1])
            and _is_word_char(token.text[0])
        ):
            parts.append(" ")
        parts.append(token.text)
        cursor = max(cursor, token.end)
        previous = token
    return "".join(parts)


class TokenStreamGenerator:
    """Render nodes the fast path rejects, repairing recovered tokens."""

    name = "tokens"

    def can_generate(self, node: Node) -> bool:
        return not node.is_error

    def generate(self, node: Node, options: GeneratorOptions | None = None) -> str:
        if node.is_error:
            raise GenerationError(f"Cannot render {node.type} node", node_type=node.type)
        tokens = to_tokens(node)
        text = render_tokens(tokens, node.text or b"", node.start_byte)
        return normalize_newlines(text, options)
