"""
Models threaded through, and produced by, a resolution request.
"""
from typing import Dict, List, Optional, Set, Tuple

from pydantic import BaseModel, Field

from .declaration import Declaration
from .position import SourcePosition
from .source_unit import SourceUnit
from .template import TemplateSite

LiteralValueSet = List[str]


def unique_values(values) -> LiteralValueSet:
    """Drop duplicates from ``values`` while keeping first-seen order."""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


class ResolutionContext(BaseModel):
    """
    Per-call state of one top-level resolution.

    The visited set records every declaration entered so far, keyed by
    (unit identity, declaration node identity); entering a declaration twice
    is how self- and mutually-referential declarations are detected. Finished
    results are remembered so that a declaration reached again through a
    different path is not mistaken for a cycle.
    """
    unit: SourceUnit
    position: Optional[SourcePosition] = None
    visited: Set[Tuple] = Field(default_factory=set)
    resolved: Dict[Tuple, List[str]] = Field(default_factory=dict)
    exports: Dict[Tuple, Optional[Declaration]] = Field(default_factory=dict)

    def enter(self, declaration: Declaration) -> bool:
        """Mark ``declaration`` as visited; False if it was visited already."""
        return self.enter_key(declaration.key)

    def enter_key(self, key: Tuple) -> bool:
        """Like ``enter`` for keys that are not declarations (e.g. re-export hops)."""
        if key in self.visited:
            return False
        self.visited.add(key)
        return True

    def recall(self, declaration: Declaration) -> Optional[List[str]]:
        values = self.resolved.get(declaration.key)
        return list(values) if values is not None else None

    def remember(self, declaration: Declaration, values: List[str]) -> None:
        self.resolved[declaration.key] = list(values)


class ResolutionRequest(BaseModel):
    """One variable expression to resolve"""
    expression: str
    unit: SourceUnit
    position: Optional[SourcePosition] = None

    def new_context(self) -> ResolutionContext:
        return ResolutionContext(unit=self.unit, position=self.position)


class SiteResolution(BaseModel):
    """Resolved annotation for every template site ending at one anchor"""
    anchor: SourcePosition
    sites: List[TemplateSite] = Field(default_factory=list)
    values: Dict[str, LiteralValueSet] = Field(default_factory=dict)
    combinations: List[str] = Field(default_factory=list)
    display_text: str = ''

    @property
    def decoration_text(self) -> str:
        return f" // {self.display_text}"
