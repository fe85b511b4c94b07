"""
Resolution orchestrator.

Evaluates an ordered list of resolution strategies for one variable
expression and returns the first non-empty result.
"""
import logging
from typing import List, Optional, Sequence

from templex.core.components.interfaces import IResolutionStrategy
from templex.core.error_handling import absorb_resolution_errors
from templex.languages.lang_typescript.components.extractor import LiteralValueExtractor
from templex.languages.lang_typescript.components.oracle import OracleAdapter
from templex.languages.lang_typescript.components.property_resolver import PropertyAccessResolver
from templex.languages.lang_typescript.components.scanner import normalize_expression
from templex.models.position import SourcePosition
from templex.models.resolution import LiteralValueSet, ResolutionContext, ResolutionRequest
from templex.models.source_unit import SourceUnit

logger = logging.getLogger(__name__)


class PropertyAccessStrategy(IResolutionStrategy):
    """Dotted expressions, resolved structurally through the root declaration."""

    def __init__(self, resolver: PropertyAccessResolver):
        self.resolver = resolver

    @property
    def name(self) -> str:
        return 'property-access'

    def applies_to(self, request: ResolutionRequest) -> bool:
        return '.' in request.expression

    async def attempt(self, request: ResolutionRequest, ctx: ResolutionContext) -> List[str]:
        return await self.resolver.resolve(request.expression, request.unit, ctx)


class OracleStrategy(IResolutionStrategy):
    """Ask the symbol oracle about the expression's position."""

    def __init__(self, adapter: OracleAdapter):
        self.adapter = adapter

    @property
    def name(self) -> str:
        return 'oracle'

    def applies_to(self, request: ResolutionRequest) -> bool:
        return request.position is not None

    async def attempt(self, request: ResolutionRequest, ctx: ResolutionContext) -> List[str]:
        return await self.adapter.resolve(request.unit, request.position, ctx)


class LocalScopeStrategy(IResolutionStrategy):
    """A declaration of the same name anywhere in the current file."""

    def __init__(self, extractor: LiteralValueExtractor):
        self.extractor = extractor

    @property
    def name(self) -> str:
        return 'local-scope'

    async def attempt(self, request: ResolutionRequest, ctx: ResolutionContext) -> List[str]:
        declaration = self.extractor.locator.find_declaration(request.unit, request.expression)
        if declaration is None:
            return []
        return await self.extractor.extract(declaration, ctx)


class ImportStrategy(IResolutionStrategy):
    """The export of another module that a named import binds to the expression."""

    def __init__(self, extractor: LiteralValueExtractor):
        self.extractor = extractor

    @property
    def name(self) -> str:
        return 'import'

    async def attempt(self, request: ResolutionRequest, ctx: ResolutionContext) -> List[str]:
        reference = self.extractor.locator.find_import_of(request.unit, request.expression)
        if reference is None:
            return []
        declaration = await self.extractor.load_exported(reference, request.unit, ctx)
        if declaration is None:
            return []
        return await self.extractor.extract(declaration, ctx)


def default_strategies(extractor: LiteralValueExtractor, oracle_adapter: OracleAdapter) -> List[IResolutionStrategy]:
    """The standard strategy order: property access, oracle, local scope, imports."""
    return [
        PropertyAccessStrategy(PropertyAccessResolver(extractor)),
        OracleStrategy(oracle_adapter),
        LocalScopeStrategy(extractor),
        ImportStrategy(extractor),
    ]


class ResolutionOrchestrator:
    """
    Runs resolution strategies in order until one produces values.

    Every attempt gets its own ResolutionContext, and a failing attempt is
    logged and treated as empty, so ``resolve`` never raises.
    """

    def __init__(self, strategies: Sequence[IResolutionStrategy]):
        self.strategies = list(strategies)

    async def resolve(self, expression: str, unit: SourceUnit,
                      position: Optional[SourcePosition] = None) -> LiteralValueSet:
        request = ResolutionRequest(expression=normalize_expression(expression).strip(),
                                    unit=unit, position=position)
        if not request.expression:
            return []
        for strategy in self.strategies:
            if not strategy.applies_to(request):
                continue
            values = await self._attempt(strategy, request)
            if values:
                logger.debug(f"'{request.expression}' resolved by {strategy.name}: {values}")
                return values
        logger.debug(f"'{request.expression}' could not be resolved in {unit.key}")
        return []

    @absorb_resolution_errors
    async def _attempt(self, strategy: IResolutionStrategy, request: ResolutionRequest) -> List[str]:
        return list(await strategy.attempt(request, request.new_context()))
