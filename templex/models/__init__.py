from .enums import DeclarationKind, TemplatePartKind
from .position import Location, SourcePosition
from .source_unit import SourceUnit
from .template import TemplatePart, TemplateSite
from .declaration import Declaration, ImportReference
from .resolution import (
    LiteralValueSet,
    ResolutionContext,
    ResolutionRequest,
    SiteResolution,
    unique_values,
)

__all__ = [
    "DeclarationKind",
    "TemplatePartKind",
    "Location",
    "SourcePosition",
    "SourceUnit",
    "TemplatePart",
    "TemplateSite",
    "Declaration",
    "ImportReference",
    "LiteralValueSet",
    "ResolutionContext",
    "ResolutionRequest",
    "SiteResolution",
    "unique_values",
]
