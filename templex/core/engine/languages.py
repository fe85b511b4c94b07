"""
Tree-sitter language registry for templex.

TypeScript files use the ``typescript`` grammar; files that may contain JSX use
the ``tsx`` grammar, which is also a superset of plain JavaScript.
"""
import logging
import os
from typing import Dict

import tree_sitter_typescript
from tree_sitter import Language, Parser

from templex.core.config import config
from templex.core.error_handling import UnsupportedLanguageError

logger = logging.getLogger(__name__)

LANGUAGES: Dict[str, Language] = {
    'typescript': Language(tree_sitter_typescript.language_typescript()),
    'tsx': Language(tree_sitter_typescript.language_tsx()),
}

EXTENSION_LANGUAGES: Dict[str, str] = {
    '.ts': 'typescript',
    '.mts': 'typescript',
    '.cts': 'typescript',
    '.tsx': 'tsx',
    '.js': 'tsx',
    '.jsx': 'tsx',
    '.mjs': 'tsx',
    '.cjs': 'tsx',
}


def get_parser(language_code: str) -> Parser:
    """
    Create a new parser for ``language_code``.

    Raises:
        UnsupportedLanguageError: If no grammar is registered for the code
    """
    language = LANGUAGES.get(language_code)
    if language is None:
        raise UnsupportedLanguageError(language_code)
    return Parser(language)


def language_for_file(file_path: str) -> str:
    """
    Return the language code used to parse ``file_path``.

    Files without a recognised extension are parsed as TypeScript.
    """
    extension = os.path.splitext(file_path)[1].lower()
    language_code = EXTENSION_LANGUAGES.get(extension)
    if language_code is None:
        logger.debug(f"No grammar registered for '{extension}', defaulting to typescript")
        return 'typescript'
    return language_code


def is_supported_file(file_path: str) -> bool:
    """Return True if ``file_path`` has a script extension templex analyzes."""
    extensions = config.get('files', 'supported_extensions', list(EXTENSION_LANGUAGES))
    return os.path.splitext(file_path)[1].lower() in extensions
