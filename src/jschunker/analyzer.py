"""Reference analysis over a JavaScript syntax tree.

Builds a flat symbol table of variables and functions, the call graph
between named functions and the free identifiers each named function uses.
The scoping model is a deliberate approximation: only function bodies open
scopes, and a name is local only if the innermost scope or the parameters of
the enclosing named function declare it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Literal, Optional

from tree_sitter import Node, Tree

VariableKind = Literal["var", "let", "const"]

FUNCTION_DECLARATION_TYPES = {"function_declaration", "generator_function_declaration"}
VARIABLE_DECLARATION_TYPES = {"lexical_declaration", "variable_declaration"}
# "function" is the pre-0.21 grammar name of function_expression
_FUNCTION_EXPRESSION_TYPES = {
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
    "method_definition",
}
_IDENTIFIER_TYPES = {"identifier", "shorthand_property_identifier"}


@dataclass(eq=False)
class Scope:
    """A lexical scope opened by a function body."""

    parent: Optional[Scope] = field(default=None, repr=False)
    variables: list[Variable] = field(default_factory=list)
    functions: list[FunctionInfo] = field(default_factory=list)


@dataclass(frozen=True)
class Variable:
    name: str
    kind: VariableKind
    scope: Scope = field(repr=False, compare=False)


@dataclass(frozen=True)
class FunctionInfo:
    name: str
    params: tuple[str, ...]
    scope: Scope = field(repr=False, compare=False)


@dataclass
class AnalysisResult:
    """Everything the analyzer learned about a program."""

    variables: list[Variable] = field(default_factory=list)
    functions: list[FunctionInfo] = field(default_factory=list)
    # function name -> called function names, in first-seen order
    dependencies: dict[str, list[str]] = field(default_factory=dict)
    # function name -> free identifiers, in first-seen order
    global_references: dict[str, list[str]] = field(default_factory=dict)
    scopes: list[Scope] = field(default_factory=list)

    def function(self, name: str) -> FunctionInfo | None:
        """Return the first analysed function with this name."""
        for info in self.functions:
            if info.name == name:
                return info
        return None


def variable_kind(node: Node) -> VariableKind:
    """Return the declaration keyword of a var/let/const declaration."""
    kind = node.child_by_field_name("kind")
    if kind is not None:
        return kind.text.decode()  # type: ignore[return-value]
    return "var"


def parameter_names(node: Node) -> list[str]:
    """Plain identifier parameters of a function-like node.

    Patterns, defaults and rest parameters are skipped.
    """
    single = node.child_by_field_name("parameter")
    if single is not None:
        return [single.text.decode()] if single.type == "identifier" else []

    params = node.child_by_field_name("parameters")
    if params is None:
        return []
    return [p.text.decode() for p in params.named_children if p.type == "identifier"]


class Analyzer:
    """Walk a tree once and collect an AnalysisResult.

    Traversal is pre-order and iterative. The work stack holds callables so
    that scope exits and context restores run after their subtree.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[Node], None]] = {
            "program": self._visit_children,
            "lexical_declaration": self._visit_variable_declaration,
            "variable_declaration": self._visit_variable_declaration,
            "function_declaration": self._visit_function_declaration,
            "generator_function_declaration": self._visit_function_declaration,
            "call_expression": self._visit_call_expression,
            "member_expression": self._visit_member_expression,
            "for_in_statement": self._visit_for_in_statement,
            "statement_block": self._visit_children,
        }
        for node_type in _FUNCTION_EXPRESSION_TYPES:
            self._handlers[node_type] = self._visit_function_expression
        for node_type in _IDENTIFIER_TYPES:
            self._handlers[node_type] = self._visit_identifier
        self._reset()

    def _reset(self) -> None:
        self.result = AnalysisResult()
        self._scope = Scope()
        self._scope_stack = [self._scope]
        self.result.scopes.append(self._scope)
        self._current_function: str | None = None
        self._functions_by_name: dict[str, FunctionInfo] = {}
        self._work: list[Callable[[], None]] = []

    def analyze(self, tree: Tree | Node) -> AnalysisResult:
        """Analyze a parsed program (or any subtree)."""
        self._reset()
        root = tree.root_node if isinstance(tree, Tree) else tree

        self._push(root)
        while self._work:
            self._work.pop()()

        return self.result

    # --- traversal helpers -------------------------------------------------

    def _push(self, node: Node | None) -> None:
        if node is not None:
            self._work.append(lambda: self._visit(node))

    def _push_all(self, nodes: list[Node]) -> None:
        # Reversed so the stack pops them in source order
        for node in reversed(nodes):
            self._push(node)

    def _visit(self, node: Node) -> None:
        handler = self._handlers.get(node.type, self._visit_children)
        handler(node)

    def _visit_children(self, node: Node) -> None:
        self._push_all(node.named_children)

    def _enter_scope(self) -> None:
        scope = Scope(parent=self._scope)
        self._scope = scope
        self._scope_stack.append(scope)
        self.result.scopes.append(scope)

    def _exit_scope(self) -> None:
        self._scope_stack.pop()
        self._scope = self._scope_stack[-1]

    # --- handlers ------------------------------------------------------------

    def _declare(self, name: str, kind: VariableKind) -> None:
        variable = Variable(name=name, kind=kind, scope=self._scope)
        self.result.variables.append(variable)
        self._scope.variables.append(variable)

    def _visit_variable_declaration(self, node: Node) -> None:
        kind = variable_kind(node)
        declarators = [c for c in node.named_children if c.type == "variable_declarator"]

        def make_step(declarator: Node) -> Callable[[], None]:
            def step() -> None:
                name = declarator.child_by_field_name("name")
                if name is not None and name.type == "identifier":
                    self._declare(name.text.decode(), kind)
                self._push(declarator.child_by_field_name("value"))

            return step

        for declarator in reversed(declarators):
            self._work.append(make_step(declarator))

    def _visit_for_in_statement(self, node: Node) -> None:
        left = node.child_by_field_name("left")
        kind = node.child_by_field_name("kind")
        if kind is not None:
            if left is not None and left.type == "identifier":
                self._declare(left.text.decode(), kind.text.decode())  # type: ignore[arg-type]
            left = None

        children = [left, node.child_by_field_name("right"), node.child_by_field_name("body")]
        self._push_all([c for c in children if c is not None])

    def _register_params(self, params: list[str]) -> None:
        for param in params:
            self._scope.variables.append(Variable(name=param, kind="var", scope=self._scope))

    def _visit_function_declaration(self, node: Node) -> None:
        name_node = node.child_by_field_name("name")
        name = name_node.text.decode() if name_node is not None else ""
        params = parameter_names(node)

        info = FunctionInfo(name=name, params=tuple(params), scope=self._scope)
        self.result.functions.append(info)
        self._scope.functions.append(info)
        self._functions_by_name.setdefault(name, info)

        self._enter_scope()
        enclosing = self._current_function
        self._current_function = name
        self._register_params(params)

        def leave() -> None:
            self._current_function = enclosing
            self._exit_scope()

        self._work.append(leave)
        self._push(node.child_by_field_name("body"))

    def _visit_function_expression(self, node: Node) -> None:
        self._enter_scope()
        self._register_params(parameter_names(node))
        self._work.append(self._exit_scope)
        self._push(node.child_by_field_name("body"))

    def _visit_call_expression(self, node: Node) -> None:
        callee = node.child_by_field_name("function")
        if callee is not None and callee.type == "identifier" and self._current_function:
            _add_unique(self.result.dependencies, self._current_function, callee.text.decode())

        self._push_all([c for c in (callee, node.child_by_field_name("arguments")) if c is not None])

    def _visit_identifier(self, node: Node) -> None:
        self._record_global(node.text.decode())

    def _visit_member_expression(self, node: Node) -> None:
        obj = node.child_by_field_name("object")
        if obj is None:
            return
        if obj.type == "identifier":
            self._record_global(obj.text.decode())
        # The property is a plain name; computed access is a subscript_expression
        self._push(obj)

    def _record_global(self, name: str) -> None:
        if self._current_function and not self._is_local(name):
            _add_unique(self.result.global_references, self._current_function, name)

    def _is_local(self, name: str) -> bool:
        """Check the innermost scope, then the current function's parameters.

        Enclosing closures are never consulted, so a name captured from an
        outer function counts as a global reference of the inner one.
        """
        scope = self._scope
        while scope.parent is not None:
            if any(v.name == name for v in scope.variables):
                return True
            if scope.functions or self._current_function:
                current = self._functions_by_name.get(self._current_function or "")
                return current is not None and name in current.params
            scope = scope.parent
        return False


def _add_unique(mapping: dict[str, list[str]], key: str, value: str) -> None:
    values = mapping.setdefault(key, [])
    if value not in values:
        values.append(value)
