"""
Models for template literals and their parts.
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from .enums import TemplatePartKind
from .position import SourcePosition


class TemplatePart(BaseModel):
    """One static segment or one interpolated expression of a template literal"""
    kind: TemplatePartKind
    value: str
    position: Optional[SourcePosition] = None

    @classmethod
    def static(cls, text: str) -> 'TemplatePart':
        return cls(kind=TemplatePartKind.STATIC, value=text)

    @classmethod
    def variable(cls, expression: str, position: SourcePosition) -> 'TemplatePart':
        return cls(kind=TemplatePartKind.VARIABLE, value=expression, position=position)

    @property
    def is_variable(self) -> bool:
        return self.kind == TemplatePartKind.VARIABLE


class TemplateSite(BaseModel):
    """A template literal with at least one interpolation, plus its display anchor"""
    parts: List[TemplatePart] = Field(default_factory=list)
    anchor: SourcePosition
    start: SourcePosition

    @property
    def variables(self) -> List[TemplatePart]:
        return [part for part in self.parts if part.is_variable]
