"""Interfaces for parsing JavaScript source code."""

from .js_parser import JAVASCRIPT_LANGUAGE, JsSyntaxError, ParseError, ParseResult, parse_js

__all__ = ["JAVASCRIPT_LANGUAGE", "JsSyntaxError", "ParseError", "ParseResult", "parse_js"]
