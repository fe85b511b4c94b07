from pathlib import Path

from pydantic import BaseModel


class SourcePosition(BaseModel):
    """A zero-based (line, character) position; characters count code points"""
    line: int
    character: int
    model_config = {'frozen': True}

    def __str__(self) -> str:
        return f"{self.line + 1}:{self.character + 1}"


class Location(BaseModel):
    """A position inside a file, as reported by a symbol oracle"""
    path: Path
    position: SourcePosition
    model_config = {'frozen': True}
