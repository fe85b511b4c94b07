import asyncio
import textwrap

import pytest

from templex import Templex
from templex.core.config import config
from templex.core.error_handling import UnsupportedLanguageError

SCENARIO = textwrap.dedent('''
    type Ex = "A" | "B" | "C";
    const m = { exchangeType: "B" as Ex };
    const key = `X.${m.exchangeType}.Y`;
''')


def test_load_file(tmp_path):
    target = tmp_path / 'a.ts'
    target.write_text('const a = 1;', encoding='utf-8')
    assert Templex.load_file(target) == 'const a = 1;'
    with pytest.raises(FileNotFoundError):
        Templex.load_file(tmp_path / 'missing.ts')
    other = tmp_path / 'script.py'
    other.write_text('x = 1', encoding='utf-8')
    with pytest.raises(UnsupportedLanguageError):
        Templex.load_file(other)


@pytest.mark.asyncio
async def test_resolve_file_reads_from_disk(tmp_path, templex):
    target = tmp_path / 'main.ts'
    target.write_text(SCENARIO, encoding='utf-8')
    results = await templex.resolve_file(target)
    assert [r.combinations for r in results] == [['X.A.Y', 'X.B.Y', 'X.C.Y']]


@pytest.mark.asyncio
async def test_resolve_file_prefers_given_text(tmp_path, templex):
    target = tmp_path / 'main.ts'
    target.write_text('const nothing = 1;', encoding='utf-8')
    results = await templex.resolve_file(target, code=SCENARIO)
    assert results[0].display_text == 'X.A.Y, X.B.Y, X.C.Y'


@pytest.mark.asyncio
async def test_resolve_file_follows_relative_imports(tmp_path, templex):
    (tmp_path / 'src').mkdir()
    (tmp_path / 'src' / 'kinds.ts').write_text('export enum Kind { A = "a", B = "b" }\n', encoding='utf-8')
    code = 'import { Kind } from "./kinds";\nconst k = `kind:${Kind}`;\n'
    results = await templex.resolve_file(tmp_path / 'src' / 'main.ts', code=code)
    assert results[0].combinations == ['kind:a', 'kind:b']
    assert results[0].anchor.line == 1


@pytest.mark.asyncio
async def test_files_with_syntax_errors(tmp_path, templex):
    code = 'const mode = "on";\nconst s = `${mode}`;\nconst broken = (;\n'
    target = tmp_path / 'broken.ts'
    assert [r.display_text for r in await templex.resolve_file(target, code=code)] == ['on']
    config.set('resolution', 'skip_files_with_syntax_errors', True)
    assert await templex.resolve_file(target, code=code) == []


@pytest.mark.asyncio
async def test_resolve_variable(templex):
    unit = templex.parse(SCENARIO)
    assert await templex.resolve_variable('m.exchangeType', unit) == ['A', 'B', 'C']
    assert await templex.resolve_variable('m?.exchangeType!', unit) == ['A', 'B', 'C']
    assert await templex.resolve_variable('missing', unit) == []


def test_resolve_file_sync(tmp_path, templex):
    results = templex.resolve_file_sync(tmp_path / 'main.ts', code=SCENARIO)
    assert results[0].values == {'m.exchangeType': ['A', 'B', 'C']}


@pytest.mark.asyncio
async def test_concurrent_files_do_not_interfere(tmp_path, templex):
    first = 'const a = "1";\nconst s = `${a}`;\n'
    second = 'const a = "2";\nconst s = `${a}`;\n'
    results = await asyncio.gather(
        templex.resolve_file(tmp_path / 'one.ts', code=first),
        templex.resolve_file(tmp_path / 'two.ts', code=second),
    )
    assert [r[0].combinations for r in results] == [['1'], ['2']]
