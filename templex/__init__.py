from .main import Templex
from .models.position import Location, SourcePosition
from .models.resolution import SiteResolution
from .models.source_unit import SourceUnit
from .models.template import TemplatePart, TemplateSite
from .languages.lang_typescript.components.oracle import NullSymbolOracle, SymbolOracle
from .languages.lang_typescript.components.module_resolver import ProjectConfig

__version__ = "1.0.0"
__all__ = [
    "Templex",
    "Location",
    "SourcePosition",
    "SiteResolution",
    "SourceUnit",
    "TemplatePart",
    "TemplateSite",
    "NullSymbolOracle",
    "SymbolOracle",
    "ProjectConfig",
]
