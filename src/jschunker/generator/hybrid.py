"""Hybrid generator: fast source copy with a token stream fallback."""

from __future__ import annotations

import logging

from tree_sitter import Node

from ..errors import GenerationError
from .source import SourceTextGenerator
from .tokens import TokenStreamGenerator
from .types import CodeGenerator, GeneratorOptions

logger = logging.getLogger(__name__)


class HybridGenerator:
    """Try the primary generator first, fall back to the secondary one.

    Only when both fail is the node reported as ungeneratable.
    """

    name = "hybrid"

    def __init__(
        self,
        primary: CodeGenerator | None = None,
        fallback: CodeGenerator | None = None,
    ) -> None:
        self._primary = primary or SourceTextGenerator()
        self._fallback = fallback or TokenStreamGenerator()

    def can_generate(self, node: Node) -> bool:
        return self._primary.can_generate(node) or self._fallback.can_generate(node)

    def generate(self, node: Node, options: GeneratorOptions | None = None) -> str:
        if self._primary.can_generate(node):
            try:
                return self._primary.generate(node, options)
            except GenerationError:
                logger.debug(
                    "%s generator failed for %s, falling back to %s",
                    self._primary.name,
                    node.type,
                    self._fallback.name,
                )

        try:
            return self._fallback.generate(node, options)
        except GenerationError as e:
            logger.debug("All generators failed for %s: %s", node.type, e)
            raise GenerationError(
                f"Code generation failed for {node.type}: {e}", node_type=node.type
            ) from e
