"""
External symbol oracle adapter.

A symbol oracle is a host-provided type-aware service (such as an editor's
language server) that can describe the symbol at a position. Its answers are
treated as untrusted, possibly stale text: hover output is mined for quoted
literals and type names, and definition locations are re-parsed locally.
"""
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from templex.core.config import config
from templex.core.error_handling import OracleNotReadyError, ParsingError, TransientHostError
from templex.core.error_utilities.retry import retry_async, retry_if_text_contains
from templex.languages.lang_typescript.components.extractor import LiteralValueExtractor
from templex.models.position import Location, SourcePosition
from templex.models.resolution import LiteralValueSet, ResolutionContext, unique_values
from templex.models.source_unit import SourceUnit

logger = logging.getLogger(__name__)

_QUOTED_LITERAL = re.compile(r'"([^"]+)"')
_SINGLE_LITERAL = re.compile(r':\s*"([^"]+)"')
_TYPE_NAME = re.compile(r':\s*([A-Za-z_$][\w$]*)')


class SymbolOracle(ABC):
    """
    Interface to a host's type-aware symbol service.

    Implementations may raise OracleNotReadyError while the host is warming
    up; the adapter retries such queries once.
    """

    @abstractmethod
    async def hover_text_at(self, path: Path, position: SourcePosition) -> Optional[str]:
        """Return the hover text describing the symbol at ``position``, if any."""
        pass

    @abstractmethod
    async def definition_locations_at(self, path: Path, position: SourcePosition) -> List[Location]:
        """Return the locations where the symbol at ``position`` is defined."""
        pass

    @abstractmethod
    async def type_definition_locations_at(self, path: Path, position: SourcePosition) -> List[Location]:
        """Return the locations where the type of the symbol at ``position`` is defined."""
        pass


class NullSymbolOracle(SymbolOracle):
    """An oracle that knows nothing; used when no host service is available."""

    async def hover_text_at(self, path: Path, position: SourcePosition) -> Optional[str]:
        return None

    async def definition_locations_at(self, path: Path, position: SourcePosition) -> List[Location]:
        return []

    async def type_definition_locations_at(self, path: Path, position: SourcePosition) -> List[Location]:
        return []


def parse_hover_literals(text: str) -> LiteralValueSet:
    """
    Extract string literal values from hover text.

    Several double-quoted literals are read as a union and all returned;
    a lone literal only counts when it follows a colon (``x: "a"``).
    """
    matches = _QUOTED_LITERAL.findall(text)
    if len(matches) > 1:
        return unique_values(matches)
    single = _SINGLE_LITERAL.search(text)
    if single:
        return [single.group(1)]
    return []


def hover_type_name(text: str) -> Optional[str]:
    """The type name after the first colon of a hover text (``const x: Mode`` -> ``Mode``)."""
    match = _TYPE_NAME.search(text)
    return match.group(1) if match else None


class OracleAdapter:
    """Turns symbol oracle answers into literal value sets."""

    def __init__(self, oracle: SymbolOracle, extractor: LiteralValueExtractor):
        self.oracle = oracle
        self.extractor = extractor

    async def resolve(self, unit: SourceUnit, position: Optional[SourcePosition],
                      ctx: ResolutionContext) -> LiteralValueSet:
        """
        Ask the oracle about the symbol at ``position`` in ``unit``.

        Hover literals come first, then the hover's type name looked up in
        the project, then type-definition and definition locations, each
        re-parsed and walked upwards until a declaration yields values.
        """
        if unit.path is None or position is None:
            return []
        path = Path(unit.path)

        text = await self._hover(path, position)
        if text:
            values = parse_hover_literals(text)
            if values:
                logger.debug(f"Hover literals at {position}: {values}")
                return values
            values = await self._values_of_hover_type(text, unit, ctx)
            if values:
                return values

        for query in (self.oracle.type_definition_locations_at, self.oracle.definition_locations_at):
            for location in await self._locations(query, path, position):
                values = await self._values_at_location(location, ctx)
                if values:
                    return values
        return []

    async def _hover(self, path: Path, position: SourcePosition) -> Optional[str]:
        not_ready = config.get('oracle', 'not_ready_markers', ['loading'])
        untyped = config.get('oracle', 'untyped_markers', [') any'])
        try:
            text = await retry_async(
                self.oracle.hover_text_at, path, position,
                initial_wait=config.get('oracle', 'retry_delay', 0.1),
                exceptions=(OracleNotReadyError,),
                retry_on_result=retry_if_text_contains(*not_ready),
            )
        except OracleNotReadyError as e:
            logger.debug(f"Hover unavailable: {e}")
            return None
        if not text:
            return None
        if any(marker in text for marker in not_ready) or any(marker in text for marker in untyped):
            logger.debug(f"Ignoring hover text at {position}: {text!r}")
            return None
        return text

    async def _values_of_hover_type(self, text: str, unit: SourceUnit, ctx: ResolutionContext) -> LiteralValueSet:
        type_name = hover_type_name(text)
        if type_name is None:
            return []
        declaration = await self.extractor.lookup_type(type_name, unit, ctx)
        if declaration is None:
            return []
        return await self.extractor.extract(declaration, ctx)

    async def _locations(self, query: Callable[..., Awaitable[List[Location]]], path: Path,
                         position: SourcePosition) -> List[Location]:
        try:
            locations = await retry_async(
                query, path, position,
                initial_wait=config.get('oracle', 'retry_delay', 0.1),
                exceptions=(OracleNotReadyError,),
            )
        except OracleNotReadyError as e:
            logger.debug(f"{query.__name__} unavailable: {e}")
            return []
        return list(locations or [])

    async def _values_at_location(self, location: Location, ctx: ResolutionContext) -> LiteralValueSet:
        try:
            target = await self.extractor.parser.load(location.path, self.extractor.fs)
        except (OSError, TransientHostError, ParsingError) as e:
            logger.debug(f"Cannot open definition at {location.path}: {e}")
            return []

        node = self.extractor.locator.node_at(target, location.position)
        while node is not None:
            values = await self.extractor.extract_node(node, target, ctx)
            if values:
                return values
            node = node.parent
        return []
