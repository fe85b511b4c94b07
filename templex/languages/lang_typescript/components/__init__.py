"""
TypeScript resolution components.
"""

from .parser import TypeScriptCodeParser
from .navigator import TypeScriptDeclarationLocator
from .module_resolver import ModulePathResolver, ProjectConfig
from .extractor import LiteralValueExtractor
from .property_resolver import PropertyAccessResolver
from .oracle import NullSymbolOracle, OracleAdapter, SymbolOracle
from .orchestrator import ResolutionOrchestrator, default_strategies
from .combinations import generate_combinations
from .batch import build_display_text, resolve_file

__all__ = [
    "TypeScriptCodeParser",
    "TypeScriptDeclarationLocator",
    "ModulePathResolver",
    "ProjectConfig",
    "LiteralValueExtractor",
    "PropertyAccessResolver",
    "NullSymbolOracle",
    "OracleAdapter",
    "SymbolOracle",
    "ResolutionOrchestrator",
    "default_strategies",
    "generate_combinations",
    "build_display_text",
    "resolve_file",
]
