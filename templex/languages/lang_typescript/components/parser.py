"""
TypeScript code parser component.

Turns a text buffer into a SourceUnit using the tree-sitter grammar that fits
the file's extension.
"""
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from templex.core.config import config
from templex.core.engine.ast_handler import ASTHandler
from templex.core.engine.languages import language_for_file
from templex.core.error_handling import ParsingError
from templex.core.filesystem import FileSystem
from templex.models.source_unit import SourceUnit

logger = logging.getLogger(__name__)


class TypeScriptCodeParser:
    """
    Parses TypeScript/JavaScript code into SourceUnits.

    Every call produces a fresh unit; nothing is cached between calls.
    """

    def __init__(self):
        self._handlers: Dict[str, ASTHandler] = {}

    def handler_for(self, language_code: str) -> ASTHandler:
        if language_code not in self._handlers:
            self._handlers[language_code] = ASTHandler(language_code)
        return self._handlers[language_code]

    def parse(self, code: str, path: Optional[Union[str, Path]] = None) -> SourceUnit:
        """
        Parse TypeScript code into a SourceUnit.

        Args:
            code: The TypeScript/JavaScript code to parse
            path: The file the code belongs to; selects the grammar

        Returns:
            The parsed SourceUnit

        Raises:
            ParsingError: If the code cannot be parsed, or contains syntax
                errors while ``resolution.skip_files_with_syntax_errors`` is set
        """
        path_str = str(path) if path is not None else None
        language_code = language_for_file(path_str) if path_str else 'tsx'
        try:
            unit = self.handler_for(language_code).parse(code, path=path_str)
        except ParsingError:
            raise
        except (ValueError, TypeError) as e:
            raise ParsingError(f'Error parsing TypeScript code: {e}', path=path_str) from e
        if unit.has_syntax_errors and config.get('resolution', 'skip_files_with_syntax_errors', False):
            raise ParsingError('Source contains syntax errors', path=path_str)
        logger.debug(f"Parsed {unit.key} with the {language_code} grammar")
        return unit

    async def load(self, path: Union[str, Path], fs: FileSystem) -> SourceUnit:
        """Read ``path`` through ``fs`` and parse it."""
        text = await fs.read(path)
        return self.parse(text, path=path)
