"""
TypeScript/JavaScript language module for templex.
Leverages the tree-sitter-typescript grammar.
"""

from . import config  # noqa: F401
