"""
treefilter - a filter language for selecting nodes of a slash-delimited hierarchy.

Example:
    from treefilter import TreeNodeFilter

    node_filter = TreeNodeFilter("/Tests/Unit/**")
    node_filter.matches("/Tests/Unit/ParserTests/test_empty")  # True
"""

from __future__ import annotations

from .exceptions import (
    FilterSyntaxError,
    FilterValidationError,
    InvalidNodePathError,
    TreeFilterError,
)
from .expressions import (
    MATCH_ALL_BELOW,
    FilterExpression,
    FilterOperator,
    NopExpression,
    OperatorExpression,
    PropertyExpression,
    ValueAndPropertyExpression,
    ValueExpression,
)
from .filter import TreeNodeFilter
from .matching import evaluate, match_path, match_properties
from .parser import parse
from .properties import KeyValuePairProperty, Property, PropertyBag
from .tokenizer import PATH_SEPARATOR, Token, TokenType, tokenize
from .validation import validate_expression, validate_filter

__version__ = "0.1.0"

__all__ = [
    "MATCH_ALL_BELOW",
    "PATH_SEPARATOR",
    "FilterExpression",
    "FilterOperator",
    "FilterSyntaxError",
    "FilterValidationError",
    "InvalidNodePathError",
    "KeyValuePairProperty",
    "NopExpression",
    "OperatorExpression",
    "Property",
    "PropertyBag",
    "PropertyExpression",
    "Token",
    "TokenType",
    "TreeFilterError",
    "TreeNodeFilter",
    "ValueAndPropertyExpression",
    "ValueExpression",
    "__version__",
    "evaluate",
    "match_path",
    "match_properties",
    "parse",
    "tokenize",
    "validate_expression",
    "validate_filter",
]
