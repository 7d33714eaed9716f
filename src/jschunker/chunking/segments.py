"""Split a program into one segment per top-level statement."""

from __future__ import annotations

import logging

from tree_sitter import Node, Tree

from ..analyzer import FUNCTION_DECLARATION_TYPES, VARIABLE_DECLARATION_TYPES, AnalysisResult
from ..errors import GenerationError
from ..generator import CodeGenerator, HybridGenerator
from .models import CodeSegment, byte_size

logger = logging.getLogger(__name__)

# Top-level nodes that are not statements
_SKIPPED_TYPES = {"comment", "hash_bang_line"}


def exported_names(node: Node) -> list[str]:
    """Top-level names a statement declares.

    Destructured declarators contribute nothing.
    """
    names: list[str] = []
    if node.type in FUNCTION_DECLARATION_TYPES:
        name = node.child_by_field_name("name")
        if name is not None:
            names.append(name.text.decode())
    elif node.type in VARIABLE_DECLARATION_TYPES:
        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            name = declarator.child_by_field_name("name")
            if name is not None and name.type == "identifier":
                text = name.text.decode()
                if text not in names:
                    names.append(text)
    return names


class SegmentExtractor:
    """Turn top-level statements into CodeSegments, in source order."""

    def __init__(self, generator: CodeGenerator | None = None) -> None:
        self.generator = generator or HybridGenerator()

    def extract(self, tree: Tree | Node, analysis: AnalysisResult) -> list[CodeSegment]:
        """Extract segments.

        A statement whose code cannot be generated is logged and skipped.

        Raises:
            GenerationError: If no statement of a non-empty program could be
                generated.
        """
        root = tree.root_node if isinstance(tree, Tree) else tree
        statements = [n for n in root.named_children if n.type not in _SKIPPED_TYPES]
        segments: list[CodeSegment] = []
        last_error: GenerationError | None = None

        for index, node in enumerate(statements):
            try:
                code = self.generator.generate(node)
            except GenerationError as e:
                logger.warning("Unable to generate code for %s node, skipping: %s", node.type, e)
                last_error = e
                continue

            exports = exported_names(node)
            dependencies: list[str] = []
            for func in analysis.functions:
                if func.name in exports:
                    for dep in analysis.dependencies.get(func.name, []):
                        if dep not in dependencies:
                            dependencies.append(dep)

            segments.append(
                CodeSegment(
                    node=node,
                    code=code,
                    size=byte_size(code),
                    index=index,
                    exports=exports,
                    dependencies=dependencies,
                )
            )

        if statements and not segments:
            raise GenerationError(
                f"Code generation failed for all {len(statements)} top-level statements",
                node_type=last_error.node_type if last_error else None,
            )

        return segments
