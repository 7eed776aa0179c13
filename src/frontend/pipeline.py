"""
Front-end integration utilities stitching together parsing and feature detection.

`detect` and `minimum_edition` operate on an already parsed tree;
`get_ecma_features` and `get_min_ecma_version` accept raw source text and parse
it strictly first, letting `JsSyntaxError` propagate unchanged. `run_frontend`
is the tolerant-capable variant used by the command line, returning both the
parse diagnostics and the detected features.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Union

from tree_sitter import Node, Tree

from analyzer import find_features
from features import EsFeature, EsVersion, latest_version
from parser import ParseError, ParseResult, parse_js

logger = logging.getLogger(__name__)


class NoFeaturesDetected(LookupError):
    """Raised when a minimum edition is requested for code with no edition-specific features."""

    def __init__(self, source_name: str = "<input>"):
        super().__init__(f"{source_name}: no edition-specific features detected")
        self.source_name = source_name


@dataclass(frozen=True)
class FrontEndResult:
    """Combined output from the parsing and detection pipeline."""

    parse: ParseResult
    features: FrozenSet[EsFeature]

    @property
    def has_tree(self) -> bool:
        return self.parse.tree is not None

    @property
    def diagnostics(self) -> List[ParseError]:
        return list(self.parse.errors)

    @property
    def minimum_edition(self) -> Optional[EsVersion]:
        """Latest edition among the detected features, None when there are none."""
        if not self.features:
            return None
        return latest_version(feature.edition for feature in self.features)


def detect(tree: Union[Tree, Node]) -> FrozenSet[EsFeature]:
    """Return the set of ECMAScript features used by a parsed program."""
    return find_features(tree)


def minimum_edition(
    tree: Union[Tree, Node],
    *,
    default: Optional[EsVersion] = None,
    source_name: str = "<input>",
) -> EsVersion:
    """
    Compute the earliest ECMAScript edition able to run a parsed program.

    Args:
        tree: tree-sitter tree or node produced by `parser.parse_js`.
        default: Edition returned when no edition-specific feature is found.
        source_name: Label used in the `NoFeaturesDetected` message.

    Returns:
        The latest edition among the detected features.

    Raises:
        NoFeaturesDetected: If nothing was detected and no `default` was given.
    """
    found = detect(tree)
    if not found:
        if default is None:
            raise NoFeaturesDetected(source_name)
        return default
    return latest_version(feature.edition for feature in found)


def get_ecma_features(
    source: Union[str, bytes], *, source_name: str = "<input>"
) -> FrozenSet[EsFeature]:
    """Parse `source` strictly and return the features it uses."""
    result = parse_js(source, source_name=source_name)
    return detect(result.tree)


def get_min_ecma_version(
    source: Union[str, bytes],
    *,
    source_name: str = "<input>",
    default: Optional[EsVersion] = None,
) -> EsVersion:
    """Parse `source` strictly and return the minimum edition able to run it."""
    result = parse_js(source, source_name=source_name)
    return minimum_edition(result.tree, default=default, source_name=source_name)


def run_frontend(
    source: Union[str, bytes],
    *,
    source_name: str = "<input>",
    tolerant: bool = False,
) -> FrontEndResult:
    """
    Execute parsing and feature detection for JavaScript input.

    Args:
        source: Raw JavaScript source text.
        source_name: Identifier used in diagnostics, e.g. file path.
        tolerant: When True, syntax errors are reported as diagnostics and the
            partial tree is still analysed.

    Returns:
        FrontEndResult containing the parser output and the detected features.

    Raises:
        JsSyntaxError: If the source is malformed and `tolerant` is False.
    """
    parse_result = parse_js(source, source_name=source_name, tolerant=tolerant)
    found = detect(parse_result.tree)
    logger.debug("%s: detected %d feature(s)", source_name, len(found))
    return FrontEndResult(parse=parse_result, features=found)


__all__ = [
    "FrontEndResult",
    "NoFeaturesDetected",
    "detect",
    "get_ecma_features",
    "get_min_ecma_version",
    "minimum_edition",
    "run_frontend",
]
