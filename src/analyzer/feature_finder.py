"""
Feature detection for JavaScript syntax trees.

The finder walks a tree-sitter `javascript` tree depth-first, visiting every
node exactly once. Each named node kind may have a `_visit_<kind>` rule that
records zero or more `EsFeature` members; traversal always continues into the
children afterwards, so rules are additive and never short-circuit each other.

The only contextual state is whether the walk is inside a function body. It is
carried as an immutable `TraversalContext` handed down to children, which lets
`await` be classified as top-level or function-scoped and unwinds on its own
when the walk leaves a function.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, List, Optional, Set, Tuple, Union

from tree_sitter import Node, Tree

from features import EsFeature

FUNCTION_NODES = frozenset(
    {
        "function_declaration",
        "function_expression",
        # Older grammar releases name function expressions `function`.
        "function",
        "generator_function_declaration",
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)

STATIC_CALLS: Dict[Tuple[str, str], EsFeature] = {
    ("Object", "values"): EsFeature.OBJECT_VALUES_ENTRIES,
    ("Object", "entries"): EsFeature.OBJECT_VALUES_ENTRIES,
    ("Object", "getOwnPropertyDescriptors"): EsFeature.OBJECT_GET_OWN_PROPERTY_DESCRIPTORS,
    ("Object", "fromEntries"): EsFeature.OBJECT_FROM_ENTRIES,
    ("Object", "hasOwn"): EsFeature.OBJECT_HAS_OWN,
    ("Object", "groupBy"): EsFeature.ARRAY_GROUPING,
    ("Map", "groupBy"): EsFeature.ARRAY_GROUPING,
    ("Promise", "allSettled"): EsFeature.PROMISE_ALL_SETTLED,
    ("Promise", "any"): EsFeature.PROMISE_ANY,
    ("Promise", "withResolvers"): EsFeature.PROMISE_WITH_RESOLVERS,
    ("Promise", "try"): EsFeature.PROMISE_TRY,
    ("Atomics", "waitAsync"): EsFeature.ATOMICS_WAIT_ASYNC,
    ("RegExp", "escape"): EsFeature.REGEXP_ESCAPE,
    ("Math", "f16round"): EsFeature.FLOAT16_ARRAY,
}

ARRAY_LITERAL_CALLS: Dict[str, EsFeature] = {
    "groupBy": EsFeature.ARRAY_GROUPING,
}

NEW_EXPRESSIONS: Dict[str, EsFeature] = {
    "SharedArrayBuffer": EsFeature.SHARED_MEMORY_AND_ATOMICS,
    "WeakRef": EsFeature.WEAK_REFERENCES,
    "FinalizationRegistry": EsFeature.WEAK_REFERENCES,
    "Float16Array": EsFeature.FLOAT16_ARRAY,
}

RESIZABLE_BUFFERS = frozenset({"ArrayBuffer", "SharedArrayBuffer"})

# Position of the options argument for each Error constructor.
ERROR_OPTIONS_INDEX: Dict[str, int] = {
    "Error": 1,
    "EvalError": 1,
    "RangeError": 1,
    "ReferenceError": 1,
    "SyntaxError": 1,
    "TypeError": 1,
    "URIError": 1,
    "AggregateError": 2,
}

BINARY_OPERATORS: Dict[str, EsFeature] = {
    "**": EsFeature.EXPONENTIATION_OPERATOR,
    "??": EsFeature.NULLISH_COALESCING_OPERATOR,
}

ASSIGNMENT_OPERATORS: Dict[str, EsFeature] = {
    "**=": EsFeature.EXPONENTIATION_OPERATOR,
    "??=": EsFeature.LOGICAL_ASSIGNMENT_OPERATORS,
    "&&=": EsFeature.LOGICAL_ASSIGNMENT_OPERATORS,
    "||=": EsFeature.LOGICAL_ASSIGNMENT_OPERATORS,
}

REGEX_FLAGS: Dict[str, EsFeature] = {
    "s": EsFeature.REGEXP_DOT_ALL_FLAG,
    "d": EsFeature.REGEXP_MATCH_INDICES,
    "v": EsFeature.REGEXP_V_FLAG,
}

_LOOKBEHIND = re.compile(r"(?<!\\)\(\?<[=!]")
_PROPERTY_ESCAPE = re.compile(r"\\[pP]\{")
_NAMED_GROUP = re.compile(r"(?<!\\)\(\?<([A-Za-z_$][\w$]*)>")
_MODIFIERS = re.compile(r"(?<!\\)\(\?(?:[ims]+(?:-[ims]*)?|-[ims]+):")

_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


@dataclass(frozen=True)
class TraversalContext:
    """State handed from a node to its children during one traversal."""

    in_function: bool = False


def _text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def _has_token(node: Node, token: str) -> bool:
    """Return True when `token` is a direct (usually anonymous) child of `node`."""
    return any(child.type == token for child in node.children)


def _arguments(node: Node) -> List[Node]:
    arguments = node.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return []
    return [child for child in arguments.named_children if child.type != "comment"]


def _string_value(node: Optional[Node]) -> Optional[str]:
    """Decode a constant string or template literal; None for anything else."""
    if node is None or node.type not in {"string", "template_string"}:
        return None
    if any(child.type == "template_substitution" for child in node.named_children):
        return None
    if node.type == "template_string" and not any(
        child.type == "string_fragment" for child in node.named_children
    ):
        # Grammar releases that keep template characters anonymous.
        return _text(node)[1:-1]
    parts: List[str] = []
    for child in node.named_children:
        if child.type == "string_fragment":
            parts.append(_text(child))
        elif child.type == "escape_sequence":
            escaped = _text(child)[1:]
            if escaped[:1] in _SIMPLE_ESCAPES and len(escaped) == 1:
                parts.append(_SIMPLE_ESCAPES[escaped])
            elif len(escaped) == 1:
                parts.append(escaped)
            else:
                # Unicode and hex escapes are kept verbatim.
                parts.append(_text(child))
    return "".join(parts)


def _property_key(node: Node) -> Optional[str]:
    if node.type in {"property_identifier", "shorthand_property_identifier"}:
        return _text(node)
    if node.type == "string":
        return _string_value(node)
    return None


def _object_has_key(node: Optional[Node], key: str) -> bool:
    if node is None or node.type != "object":
        return False
    for member in node.named_children:
        if member.type == "pair":
            name = member.child_by_field_name("key")
            if name is not None and _property_key(name) == key:
                return True
        elif member.type == "shorthand_property_identifier" and _text(member) == key:
            return True
    return False


class _FeatureFinder:
    def __init__(self) -> None:
        self._features: Set[EsFeature] = set()

    def find(self, root: Node) -> FrozenSet[EsFeature]:
        self._visit(root, TraversalContext())
        return frozenset(self._features)

    # ------------------------------------------------------------------ helpers

    def _add(self, feature: EsFeature) -> None:
        self._features.add(feature)

    def _visit(self, root: Node, context: TraversalContext) -> None:
        # Iterative walk; nesting depth in generated code is unbounded.
        stack: List[Tuple[Node, TraversalContext]] = [(root, context)]
        while stack:
            node, context = stack.pop()
            if node.is_named:
                handler = getattr(self, f"_visit_{node.type}", None)
                if handler:
                    handler(node, context)
            if node.type in FUNCTION_NODES:
                context = replace(context, in_function=True)
            stack.extend((child, context) for child in reversed(node.children))

    def _check_regex(self, pattern: str, flags: str) -> None:
        for flag, feature in REGEX_FLAGS.items():
            if flag in flags:
                self._add(feature)
        if _LOOKBEHIND.search(pattern):
            self._add(EsFeature.REGEXP_LOOKBEHIND_ASSERTIONS)
        if _PROPERTY_ESCAPE.search(pattern) and "u" in flags:
            self._add(EsFeature.REGEXP_UNICODE_PROPERTY_ESCAPES)
        group_names = _NAMED_GROUP.findall(pattern)
        if group_names:
            self._add(EsFeature.REGEXP_NAMED_CAPTURE_GROUPS)
            if any(count > 1 for count in Counter(group_names).values()):
                self._add(EsFeature.DUPLICATE_NAMED_CAPTURE_GROUPS)
        if _MODIFIERS.search(pattern):
            self._add(EsFeature.REGEXP_MODIFIERS)

    def _check_regexp_constructor(self, arguments: List[Node]) -> None:
        # Both arguments are optional and only string literals can be inspected.
        pattern = _string_value(arguments[0]) if arguments else None
        flags = _string_value(arguments[1]) if len(arguments) > 1 else None
        self._check_regex(pattern or "", flags or "")

    def _check_error_cause(self, name: str, arguments: List[Node]) -> None:
        index = ERROR_OPTIONS_INDEX[name]
        if len(arguments) > index and _object_has_key(arguments[index], "cause"):
            self._add(EsFeature.ERROR_CAUSE)

    def _check_function_modifiers(self, node: Node) -> None:
        if not _has_token(node, "async"):
            return
        self._add(EsFeature.ASYNC_FUNCTIONS)
        if node.type.startswith("generator_") or _has_token(node, "*"):
            self._add(EsFeature.ASYNC_ITERATION)

    # ----------------------------------------------------------------- visitors

    def _visit_hashbang_line(self, node: Node, context: TraversalContext) -> None:
        self._add(EsFeature.HASHBANG_GRAMMAR)

    _visit_hashbang_comment = _visit_hashbang_line
    _visit_hash_bang_line = _visit_hashbang_line

    def _visit_function_declaration(self, node: Node, context: TraversalContext) -> None:
        self._check_function_modifiers(node)

    _visit_function_expression = _visit_function_declaration
    _visit_function = _visit_function_declaration
    _visit_generator_function_declaration = _visit_function_declaration
    _visit_generator_function = _visit_function_declaration
    _visit_arrow_function = _visit_function_declaration

    def _visit_method_definition(self, node: Node, context: TraversalContext) -> None:
        self._check_function_modifiers(node)
        name = node.child_by_field_name("name")
        if name is not None and name.type == "private_property_identifier":
            self._add(EsFeature.CLASS_FIELDS)

    def _visit_field_definition(self, node: Node, context: TraversalContext) -> None:
        self._add(EsFeature.CLASS_FIELDS)

    def _visit_class_static_block(self, node: Node, context: TraversalContext) -> None:
        self._add(EsFeature.CLASS_STATIC_BLOCK)

    def _visit_await_expression(self, node: Node, context: TraversalContext) -> None:
        if context.in_function:
            self._add(EsFeature.ASYNC_FUNCTIONS)
        else:
            self._add(EsFeature.TOP_LEVEL_AWAIT)

    def _visit_binary_expression(self, node: Node, context: TraversalContext) -> None:
        operator = node.child_by_field_name("operator")
        if operator is None:
            return
        feature = BINARY_OPERATORS.get(operator.type)
        if feature is not None:
            self._add(feature)
        left = node.child_by_field_name("left")
        if (
            operator.type == "in"
            and left is not None
            and left.type == "private_property_identifier"
        ):
            self._add(EsFeature.PRIVATE_FIELD_BRAND_CHECKS)

    def _visit_augmented_assignment_expression(
        self, node: Node, context: TraversalContext
    ) -> None:
        operator = node.child_by_field_name("operator")
        if operator is None:
            return
        feature = ASSIGNMENT_OPERATORS.get(operator.type)
        if feature is not None:
            self._add(feature)

    def _visit_optional_chain(self, node: Node, context: TraversalContext) -> None:
        self._add(EsFeature.OPTIONAL_CHAINING)

    def _visit_call_expression(self, node: Node, context: TraversalContext) -> None:
        callee = node.child_by_field_name("function")
        if callee is None:
            return
        if callee.type == "import":
            self._add(EsFeature.DYNAMIC_IMPORT)
        elif callee.type == "member_expression":
            receiver = callee.child_by_field_name("object")
            member = callee.child_by_field_name("property")
            if receiver is None or member is None or member.type != "property_identifier":
                return
            if receiver.type == "identifier":
                feature = STATIC_CALLS.get((_text(receiver), _text(member)))
            elif receiver.type == "array":
                feature = ARRAY_LITERAL_CALLS.get(_text(member))
            else:
                feature = None
            if feature is not None:
                self._add(feature)
        elif callee.type == "identifier":
            name = _text(callee)
            arguments = _arguments(node)
            if name == "BigInt":
                if arguments and arguments[0].type in {"string", "number"}:
                    self._add(EsFeature.BIGINT)
            elif name == "RegExp":
                self._check_regexp_constructor(arguments)
            elif name in ERROR_OPTIONS_INDEX:
                self._check_error_cause(name, arguments)

    def _visit_new_expression(self, node: Node, context: TraversalContext) -> None:
        constructor = node.child_by_field_name("constructor")
        if constructor is None or constructor.type != "identifier":
            return
        name = _text(constructor)
        arguments = _arguments(node)
        feature = NEW_EXPRESSIONS.get(name)
        if feature is not None:
            self._add(feature)
        if name in RESIZABLE_BUFFERS and len(arguments) > 1:
            if _object_has_key(arguments[1], "maxByteLength"):
                self._add(EsFeature.RESIZABLE_ARRAY_BUFFERS)
        if name == "RegExp":
            self._check_regexp_constructor(arguments)
        elif name in ERROR_OPTIONS_INDEX:
            self._check_error_cause(name, arguments)

    def _visit_member_expression(self, node: Node, context: TraversalContext) -> None:
        receiver = node.child_by_field_name("object")
        if receiver is not None and receiver.type == "identifier":
            if _text(receiver) == "globalThis":
                self._add(EsFeature.GLOBAL_THIS)
        elif receiver is not None and receiver.type == "import":
            # Grammar releases without `meta_property` parse `import.meta` this way.
            self._add(EsFeature.IMPORT_META)

    _visit_subscript_expression = _visit_member_expression

    def _visit_meta_property(self, node: Node, context: TraversalContext) -> None:
        if _has_token(node, "import"):
            self._add(EsFeature.IMPORT_META)

    def _visit_number(self, node: Node, context: TraversalContext) -> None:
        raw = _text(node)
        if "_" in raw:
            self._add(EsFeature.NUMERIC_SEPARATORS)
        if raw.endswith("n"):
            self._add(EsFeature.BIGINT)

    def _visit_regex(self, node: Node, context: TraversalContext) -> None:
        pattern = _text(node.child_by_field_name("pattern"))
        flags = _text(node.child_by_field_name("flags"))
        self._check_regex(pattern, flags)

    def _visit_rest_pattern(self, node: Node, context: TraversalContext) -> None:
        self._add(EsFeature.REST_SPREAD_PROPERTIES)

    _visit_spread_element = _visit_rest_pattern

    def _visit_for_in_statement(self, node: Node, context: TraversalContext) -> None:
        # tree-sitter uses this node for both `for...in` and `for...of`.
        if _has_token(node, "in"):
            self._add(EsFeature.FOR_IN_MECHANICS)
        if _has_token(node, "await"):
            self._add(EsFeature.ASYNC_ITERATION)
            if not context.in_function:
                self._add(EsFeature.TOP_LEVEL_AWAIT)

    def _visit_catch_clause(self, node: Node, context: TraversalContext) -> None:
        if node.child_by_field_name("parameter") is None:
            self._add(EsFeature.OPTIONAL_CATCH_BINDING)


def find_features(tree: Union[Tree, Node]) -> FrozenSet[EsFeature]:
    """
    Collect the ECMAScript features used by a parsed program.

    Args:
        tree: tree-sitter tree (or any node of one) from `parser.parse_js`.

    Returns:
        The de-duplicated set of features found anywhere under the root.
    """
    root = tree.root_node if isinstance(tree, Tree) else tree
    finder = _FeatureFinder()
    return finder.find(root)


__all__ = ["TraversalContext", "find_features"]
