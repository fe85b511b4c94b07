"""
AST Handler for templex providing a unified interface for tree-sitter operations.
"""
import logging
from typing import Iterator, List, Optional

from tree_sitter import Node

from templex.core.engine.languages import get_parser
from templex.core.error_handling import ParsingError
from templex.models.position import SourcePosition
from templex.models.source_unit import SourceUnit

logger = logging.getLogger(__name__)

class ASTHandler:
    """
    Handles Abstract Syntax Tree operations using tree-sitter.
    Provides a unified interface for parsing and navigating syntax trees.
    """

    def __init__(self, language_code: str):
        """
        Initialize the AST handler.

        Args:
            language_code: Grammar code ('typescript' or 'tsx')
        """
        self.language_code = language_code
        self.parser = get_parser(language_code)

    def parse(self, code: str, path: Optional[str] = None) -> SourceUnit:
        """
        Parse source code into a fresh SourceUnit.

        Args:
            code: Source code as string
            path: File the code was read from, if any

        Returns:
            The parsed SourceUnit

        Raises:
            ParsingError: If tree-sitter does not produce a tree
        """
        code_bytes = code.encode('utf8')
        tree = self.parser.parse(code_bytes)
        if tree is None:
            raise ParsingError('Parser returned no tree', path=path)
        return SourceUnit(
            path=path,
            text=code,
            language_code=self.language_code,
            tree=tree,
            code_bytes=code_bytes,
        )

    @staticmethod
    def first_named_child(node: Node, skip_comments: bool = True) -> Optional[Node]:
        """Return the first named child, ignoring comments."""
        for child in node.named_children:
            if skip_comments and child.type == 'comment':
                continue
            return child
        return None

    @staticmethod
    def named_children(node: Node) -> List[Node]:
        """Return the named children of ``node`` without comments."""
        return [child for child in node.named_children if child.type != 'comment']

    @staticmethod
    def walk_preorder(node: Node) -> Iterator[Node]:
        """Yield ``node`` and all its descendants, depth-first, pre-order."""
        stack = [node]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    @staticmethod
    def node_at(unit: SourceUnit, position: SourcePosition) -> Optional[Node]:
        """Return the smallest named node that contains ``position``."""
        point = unit.to_point(position)
        node = unit.root_node.named_descendant_for_point_range(point, point)
        if node is None:
            logger.debug(f"No node at {position} in {unit.key}")
        return node

    @staticmethod
    def start_position(node: Node, unit: SourceUnit) -> SourcePosition:
        return unit.to_position(node.start_point)

    @staticmethod
    def end_position(node: Node, unit: SourceUnit) -> SourcePosition:
        return unit.to_position(node.end_point)

    @staticmethod
    def unquote(text: str) -> str:
        """Strip one pair of matching string quotes from ``text``."""
        if len(text) >= 2 and text[0] == text[-1] and text[0] in ('"', "'", '`'):
            return text[1:-1]
        return text
