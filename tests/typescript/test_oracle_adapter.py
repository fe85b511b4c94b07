import pytest

from templex.core.error_handling import OracleNotReadyError
from templex.languages.lang_typescript.components.oracle import (
    NullSymbolOracle,
    OracleAdapter,
    hover_type_name,
    parse_hover_literals,
)
from templex.models.position import Location, SourcePosition


def test_parse_hover_literals_union():
    assert parse_hover_literals('type Mode = "a" | "b" | "a"') == ['a', 'b']


def test_parse_hover_literals_single_literal_needs_colon():
    assert parse_hover_literals('const mode: "fast"') == ['fast']
    assert parse_hover_literals('see "docs"') == []
    assert parse_hover_literals('let count: number') == []


def test_hover_type_name():
    assert hover_type_name('const theme: Theme') == 'Theme'
    assert hover_type_name('(property) mode: Mode') == 'Mode'
    assert hover_type_name('no type here') is None


@pytest.fixture
def main_unit(project, parse):
    root = project({
        'types.ts': '''
            export type Mode = "on" | "off";
        ''',
        'main.ts': '''
            import { Mode } from "./types";
            const value = read();
            const s = `x-${value}`;
        ''',
    })
    return parse((root / 'main.ts').read_text(), path=root / 'main.ts')


@pytest.mark.asyncio
async def test_hover_literals_are_used_first(main_unit, extractor, fake_oracle, make_context):
    oracle = fake_oracle(hovers=['const value: "p" | "q"'])
    adapter = OracleAdapter(oracle, extractor)
    values = await adapter.resolve(main_unit, SourcePosition(line=2, character=1), make_context(main_unit))
    assert values == ['p', 'q']
    assert oracle.calls == ['hover']


@pytest.mark.asyncio
async def test_loading_hover_is_retried_once(main_unit, extractor, fake_oracle, make_context):
    oracle = fake_oracle(hovers=['(loading...)', 'const value: "p" | "q"'])
    adapter = OracleAdapter(oracle, extractor)
    values = await adapter.resolve(main_unit, SourcePosition(line=2, character=1), make_context(main_unit))
    assert values == ['p', 'q']
    assert oracle.calls[:2] == ['hover', 'hover']


@pytest.mark.asyncio
async def test_still_loading_hover_is_ignored(main_unit, extractor, fake_oracle, make_context):
    oracle = fake_oracle(hovers=['(loading...) "a" "b"', '(loading...) "a" "b"', 'never asked'])
    adapter = OracleAdapter(oracle, extractor)
    values = await adapter.resolve(main_unit, SourcePosition(line=2, character=1), make_context(main_unit))
    assert values == []
    assert oracle.calls == ['hover', 'hover', 'type_definition', 'definition']


@pytest.mark.asyncio
async def test_not_ready_error_is_retried_once(main_unit, extractor, fake_oracle, make_context):
    oracle = fake_oracle(hovers=[OracleNotReadyError('hover'), 'const value: "p"'])
    adapter = OracleAdapter(oracle, extractor)
    values = await adapter.resolve(main_unit, SourcePosition(line=2, character=1), make_context(main_unit))
    assert values == ['p']


@pytest.mark.asyncio
async def test_untyped_hover_is_ignored(main_unit, extractor, fake_oracle, make_context):
    oracle = fake_oracle(hovers=['(parameter) any "a" "b"'])
    adapter = OracleAdapter(oracle, extractor)
    assert await adapter.resolve(main_unit, SourcePosition(line=2, character=1), make_context(main_unit)) == []


@pytest.mark.asyncio
async def test_hover_type_name_is_resolved_through_imports(main_unit, extractor, fake_oracle, make_context):
    oracle = fake_oracle(hovers=['const value: Mode'])
    adapter = OracleAdapter(oracle, extractor)
    values = await adapter.resolve(main_unit, SourcePosition(line=2, character=1), make_context(main_unit))
    assert values == ['on', 'off']


@pytest.mark.asyncio
async def test_type_definition_location_is_walked_upwards(project, main_unit, extractor, fake_oracle,
                                                          make_context):
    types_path = project({'more.ts': 'export type Level = "low" | "high";\n'}) / 'more.ts'
    location = Location(path=types_path, position=SourcePosition(line=0, character=13))
    oracle = fake_oracle(type_definitions=[location])
    adapter = OracleAdapter(oracle, extractor)
    values = await adapter.resolve(main_unit, SourcePosition(line=2, character=1), make_context(main_unit))
    assert values == ['low', 'high']
    assert oracle.calls == ['hover', 'type_definition']


@pytest.mark.asyncio
async def test_definition_locations_are_tried_after_type_definitions(project, main_unit, extractor,
                                                                     fake_oracle, make_context):
    root = project({'defs.ts': 'export const Kind = { Small: 1, Large: 2 };\n'})
    empty = Location(path=root / 'defs.ts', position=SourcePosition(line=5, character=0))
    location = Location(path=root / 'defs.ts', position=SourcePosition(line=0, character=14))
    oracle = fake_oracle(type_definitions=[empty], definitions=[location])
    adapter = OracleAdapter(oracle, extractor)
    values = await adapter.resolve(main_unit, SourcePosition(line=2, character=1), make_context(main_unit))
    assert values == ['Small', 'Large']


@pytest.mark.asyncio
async def test_missing_definition_file_fails_closed(tmp_path, main_unit, extractor, fake_oracle, make_context):
    location = Location(path=tmp_path / 'deleted.ts', position=SourcePosition(line=0, character=0))
    adapter = OracleAdapter(fake_oracle(definitions=[location]), extractor)
    assert await adapter.resolve(main_unit, SourcePosition(line=2, character=1), make_context(main_unit)) == []


@pytest.mark.asyncio
async def test_null_oracle_and_missing_position(main_unit, extractor, make_context):
    adapter = OracleAdapter(NullSymbolOracle(), extractor)
    assert await adapter.resolve(main_unit, SourcePosition(line=2, character=1), make_context(main_unit)) == []
    assert await adapter.resolve(main_unit, None, make_context(main_unit)) == []
