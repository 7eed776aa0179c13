"""
JavaScript parsing utilities built on top of `tree-sitter`.

The module exposes `parse_js`, which returns the concrete syntax tree produced
by the `tree-sitter-javascript` grammar along with metadata describing the
parse run. The grammar accepts every ECMAScript edition up to ES2025; JSX,
which the grammar also understands, is rejected as a syntax error.

tree-sitter never fails outright: malformed input yields `ERROR` and missing
nodes inside an otherwise usable tree. Strict callers get a `JsSyntaxError` for
the first such node, tolerant callers get the partial tree plus diagnostics.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Union

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser, Tree

logger = logging.getLogger(__name__)

JAVASCRIPT_LANGUAGE = Language(tree_sitter_javascript.language())


class JsSyntaxError(ValueError):
    """Raised when source text does not conform to the accepted grammar."""

    def __init__(
        self,
        message: str,
        *,
        source_name: str = "<input>",
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        loc = ""
        if line is not None and column is not None:
            loc = f" (line {line}, column {column})"
        super().__init__(f"{source_name}: {message}{loc}")
        self.source_name = source_name
        self.line = line
        self.column = column


@dataclass(frozen=True)
class ParseError:
    """Represents a syntax problem found in the tree produced by tree-sitter."""

    description: str
    line: Optional[int]
    column: Optional[int]


@dataclass(frozen=True)
class ParseResult:
    """Aggregate of the syntax tree plus metadata about the parse run."""

    tree: Optional[Tree]
    errors: List[ParseError]
    source_name: str

    @property
    def has_tree(self) -> bool:
        return self.tree is not None

    @property
    def root(self) -> Optional[Node]:
        return self.tree.root_node if self.tree is not None else None


def _iter_error_nodes(root: Node) -> Iterator[Node]:
    """Yield `ERROR`, missing and JSX nodes in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing or node.type.startswith("jsx_"):
            # Problems nested inside a reported node are not reported again.
            yield node
            continue
        stack.extend(reversed(node.children))


def _describe(node: Node) -> str:
    if node.is_missing:
        return f"Missing {node.type!r}."
    if node.type.startswith("jsx_"):
        return "JSX syntax is not supported."
    snippet = (node.text or b"").decode("utf-8", errors="replace").splitlines()
    if snippet and snippet[0].strip():
        return f"Unexpected token near {snippet[0].strip()[:40]!r}."
    return "Unexpected token."


def _to_parse_error(node: Node) -> ParseError:
    row, column = node.start_point[0], node.start_point[1]
    return ParseError(description=_describe(node), line=row + 1, column=column)


def parse_js(
    source: Union[str, bytes],
    *,
    source_name: str = "<input>",
    tolerant: bool = False,
) -> ParseResult:
    """
    Parse JavaScript source text into a tree-sitter syntax tree.

    Args:
        source: Raw JavaScript source code, as text or UTF-8 bytes.
        source_name: Optional label used for diagnostics (defaults to `<input>`).
        tolerant: When True, syntax problems are collected instead of raised.

    Returns:
        ParseResult containing the tree and any syntax problems.

    Raises:
        JsSyntaxError: If the source is malformed and `tolerant` is False.
    """
    data = source.encode("utf-8") if isinstance(source, str) else source
    parser = Parser(JAVASCRIPT_LANGUAGE)
    tree = parser.parse(data)

    errors = [_to_parse_error(node) for node in _iter_error_nodes(tree.root_node)]
    if errors:
        logger.debug("%s: %d syntax problem(s)", source_name, len(errors))
        if not tolerant:
            first = errors[0]
            raise JsSyntaxError(
                first.description,
                source_name=source_name,
                line=first.line,
                column=first.column,
            )

    return ParseResult(tree=tree, errors=errors, source_name=source_name)


__all__ = ["JAVASCRIPT_LANGUAGE", "JsSyntaxError", "ParseError", "ParseResult", "parse_js"]
