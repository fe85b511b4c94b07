"""
Models for located declarations and import bindings.
"""
from typing import Any, Optional

from pydantic import BaseModel

from .enums import DeclarationKind
from .source_unit import SourceUnit


class Declaration(BaseModel):
    """A named entity's syntactic definition inside a SourceUnit"""
    kind: DeclarationKind
    name: str
    node: Any
    unit: SourceUnit
    model_config = {'arbitrary_types_allowed': True, 'frozen': True}

    @property
    def key(self) -> tuple:
        """Identity of the declaration inside a resolution context."""
        return (self.unit.key, self.node.start_byte, self.node.end_byte, self.node.type)

    def __repr__(self) -> str:
        return f"Declaration({self.kind.value} {self.name!r} in {self.unit.key})"


class ImportReference(BaseModel):
    """An import (or re-export) statement that binds ``local_name`` from ``specifier``"""
    specifier: str
    imported_name: str
    local_name: str
    node: Any = None
    model_config = {'arbitrary_types_allowed': True, 'frozen': True}

    def __str__(self) -> str:
        if self.imported_name == self.local_name:
            return f"{self.local_name} from '{self.specifier}'"
        return f"{self.imported_name} as {self.local_name} from '{self.specifier}'"
