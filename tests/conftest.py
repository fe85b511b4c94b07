"""Shared test fixtures: parsers, extractors and on-disk TypeScript projects."""

import textwrap
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

from templex import Templex
from templex.core.config import config
from templex.languages.lang_typescript.components import (
    LiteralValueExtractor,
    SymbolOracle,
    TypeScriptCodeParser,
)
from templex.models.position import Location, SourcePosition
from templex.models.resolution import ResolutionContext
from templex.models.source_unit import SourceUnit


@pytest.fixture(autouse=True)
def reset_config():
    """Every test starts from the default configuration, without retry delays."""
    config.reset()
    config.set('oracle', 'retry_delay', 0)
    config.set('files', 'read_retry_delay', 0)
    yield
    config.reset()


@pytest.fixture
def ts_parser() -> TypeScriptCodeParser:
    return TypeScriptCodeParser()


@pytest.fixture
def parse(ts_parser) -> Callable[..., SourceUnit]:
    """Parse dedented code; pass ``path`` to parse it as a file of a project."""
    def _parse(code: str, path: Optional[Path] = None) -> SourceUnit:
        return ts_parser.parse(textwrap.dedent(code), path=path)
    return _parse


@pytest.fixture
def project(tmp_path) -> Callable[[Dict[str, str]], Path]:
    """Write a {relative path: source} mapping under tmp_path and return the root."""
    def _write(files: Dict[str, str]) -> Path:
        for name, content in files.items():
            target = tmp_path / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(textwrap.dedent(content), encoding='utf8')
        return tmp_path
    return _write


@pytest.fixture
def extractor() -> LiteralValueExtractor:
    return LiteralValueExtractor()


@pytest.fixture
def templex() -> Templex:
    return Templex()


def context_for(unit: SourceUnit) -> ResolutionContext:
    return ResolutionContext(unit=unit)


def position_of(unit: SourceUnit, needle: str, offset: int = 0) -> SourcePosition:
    """Position of the first occurrence of ``needle`` (plus ``offset`` characters)."""
    index = unit.text.index(needle) + offset
    line = unit.text.count('\n', 0, index)
    character = index - (unit.text.rfind('\n', 0, index) + 1)
    return SourcePosition(line=line, character=character)


class FakeOracle(SymbolOracle):
    """Scripted symbol oracle; each hover answer is consumed once, exceptions are raised."""

    def __init__(self, hovers: Optional[List] = None, definitions: Optional[List[Location]] = None,
                 type_definitions: Optional[List[Location]] = None):
        self.hovers = list(hovers or [])
        self.definitions = list(definitions or [])
        self.type_definitions = list(type_definitions or [])
        self.calls: List[str] = []

    async def hover_text_at(self, path, position):
        self.calls.append('hover')
        if not self.hovers:
            return None
        answer = self.hovers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    async def definition_locations_at(self, path, position):
        self.calls.append('definition')
        return self.definitions

    async def type_definition_locations_at(self, path, position):
        self.calls.append('type_definition')
        return self.type_definitions


@pytest.fixture
def make_context() -> Callable[[SourceUnit], ResolutionContext]:
    return context_for


@pytest.fixture
def locate() -> Callable[..., SourcePosition]:
    return position_of


@pytest.fixture
def fake_oracle() -> Callable[..., FakeOracle]:
    return FakeOracle
