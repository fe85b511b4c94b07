import asyncio
import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from .core.engine.languages import is_supported_file
from .core.error_handling import ParsingError, UnsupportedLanguageError
from .core.filesystem import FileSystem
from .languages.lang_typescript.components import (
    LiteralValueExtractor,
    ModulePathResolver,
    NullSymbolOracle,
    OracleAdapter,
    ProjectConfig,
    ResolutionOrchestrator,
    SymbolOracle,
    TypeScriptCodeParser,
    TypeScriptDeclarationLocator,
    default_strategies,
    resolve_file,
)
from .models.position import SourcePosition
from .models.resolution import LiteralValueSet, SiteResolution
from .models.source_unit import SourceUnit

logger = logging.getLogger(__name__)


class Templex:
    """
    Main entry point for templex.
    Wires the resolution pipeline together and exposes file- and
    expression-level resolution.
    """

    def __init__(self, oracle: Optional[SymbolOracle] = None,
                 project_config: Optional[ProjectConfig] = None,
                 fs: Optional[FileSystem] = None):
        """
        Initialize templex.

        Args:
            oracle: Host symbol service; a NullSymbolOracle when omitted
            project_config: Path mappings to use instead of discovering
                tsconfig/jsconfig files
            fs: Filesystem used for all reads
        """
        self.fs = fs or FileSystem()
        self.parser = TypeScriptCodeParser()
        self.extractor = LiteralValueExtractor(
            locator=TypeScriptDeclarationLocator(),
            module_resolver=ModulePathResolver(self.fs, project_config),
            parser=self.parser,
            fs=self.fs,
        )
        self.oracle = oracle or NullSymbolOracle()
        self.orchestrator = ResolutionOrchestrator(
            default_strategies(self.extractor, OracleAdapter(self.oracle, self.extractor)))

    @staticmethod
    def load_file(file_path: Union[str, Path]) -> str:
        """
        Load content from a file.

        Args:
            file_path: Path to the file

        Returns:
            Content of the file as string

        Raises:
            FileNotFoundError: If the file does not exist
            UnsupportedLanguageError: If the extension is not a script extension
        """
        file_path = str(file_path)
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")
        if not is_supported_file(file_path):
            raise UnsupportedLanguageError(os.path.splitext(file_path)[1] or file_path)
        with open(file_path, "r", encoding="utf-8") as f:
            return f.read()

    def parse(self, code: str, path: Optional[Union[str, Path]] = None) -> SourceUnit:
        """Parse ``code`` into a fresh SourceUnit (see TypeScriptCodeParser.parse)."""
        return self.parser.parse(code, path=path)

    async def resolve_file(self, file_path: Union[str, Path], code: Optional[str] = None,
                           cancel_event: Optional[asyncio.Event] = None) -> List[SiteResolution]:
        """
        Resolve every template site of a file.

        Args:
            file_path: The file to analyze; also the base for relative imports
            code: Current text of the file; read from disk when omitted
            cancel_event: Set it to stop after the group being resolved

        Returns:
            One SiteResolution per annotated line; empty if the file cannot
            be parsed
        """
        file_path = str(Path(file_path).absolute())
        if code is None:
            code = await self.fs.read(file_path)
        try:
            unit = self.parse(code, path=file_path)
        except ParsingError as e:
            logger.warning(f"Skipping {file_path}: {e}")
            return []
        return await resolve_file(unit, self.orchestrator, cancel_event)

    async def resolve_variable(self, expression: str, unit: SourceUnit,
                               position: Optional[SourcePosition] = None) -> LiteralValueSet:
        """Resolve one expression as it appears in ``unit`` (at ``position``, if known)."""
        return await self.orchestrator.resolve(expression, unit, position)

    def resolve_file_sync(self, file_path: Union[str, Path], code: Optional[str] = None) -> List[SiteResolution]:
        """Blocking variant of ``resolve_file`` for callers without an event loop."""
        return asyncio.run(self.resolve_file(file_path, code))
