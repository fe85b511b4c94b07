"""
Parsed representation of one file's text at one point in time.
"""
import uuid
from typing import Any, Optional

from pydantic import BaseModel, Field

from .position import SourcePosition


class SourceUnit(BaseModel):
    """
    Immutable parse result for one file.

    A unit is owned by the resolution request that created it and is never
    shared between requests; several units may exist for the same file.
    """
    path: Optional[str] = None
    text: str
    language_code: str
    tree: Any
    code_bytes: bytes
    uid: str = Field(default_factory=lambda: uuid.uuid4().hex)
    model_config = {'arbitrary_types_allowed': True, 'frozen': True}

    @property
    def root_node(self) -> Any:
        return self.tree.root_node

    @property
    def key(self) -> str:
        """Identity of the unit used in visited-declaration keys."""
        return self.path if self.path else f'<memory:{self.uid}>'

    @property
    def has_syntax_errors(self) -> bool:
        return bool(self.tree.root_node.has_error)

    def text_of(self, node: Any) -> str:
        """Return the source text covered by ``node``."""
        return self.code_bytes[node.start_byte:node.end_byte].decode('utf8')

    def to_position(self, point: Any) -> SourcePosition:
        """Convert a tree-sitter (row, byte column) point to a SourcePosition."""
        row, byte_column = point[0], point[1]
        line_start = self._line_start_byte(row)
        prefix = self.code_bytes[line_start:line_start + byte_column]
        return SourcePosition(line=row, character=len(prefix.decode('utf8', errors='replace')))

    def to_point(self, position: SourcePosition) -> tuple:
        """Convert a SourcePosition to a tree-sitter (row, byte column) point."""
        lines = self.text.split('\n')
        if position.line >= len(lines):
            return (position.line, 0)
        line_text = lines[position.line]
        return (position.line, len(line_text[:position.character].encode('utf8')))

    def line_end(self, row: int) -> SourcePosition:
        """Position just past the last character of line ``row``."""
        lines = self.text.split('\n')
        line_text = lines[row] if row < len(lines) else ''
        return SourcePosition(line=row, character=len(line_text.rstrip('\r')))

    def _line_start_byte(self, row: int) -> int:
        offset = 0
        for _ in range(row):
            newline = self.code_bytes.find(b'\n', offset)
            if newline < 0:
                return len(self.code_bytes)
            offset = newline + 1
        return offset
