import logging

from templex.languages.lang_typescript.components.scanner import normalize_expression, scan_template_sites
from templex.models.enums import TemplatePartKind
from templex.models.position import SourcePosition

logger = logging.getLogger(__name__)


def test_splits_template_into_static_and_variable_parts(parse):
    unit = parse('''
        const mode = "a";
        const s = `pre-${mode}-post`;
    ''')
    sites = scan_template_sites(unit)
    assert len(sites) == 1
    parts = sites[0].parts
    assert [(p.kind, p.value) for p in parts] == [
        (TemplatePartKind.STATIC, 'pre-'),
        (TemplatePartKind.VARIABLE, 'mode'),
        (TemplatePartKind.STATIC, '-post'),
    ]


def test_templates_without_interpolation_are_ignored(parse):
    unit = parse('''
        const a = `plain text`;
        const b = "not a template";
    ''')
    assert scan_template_sites(unit) == []


def test_adjacent_substitutions_have_no_empty_static_parts(parse):
    unit = parse('const s = `${a}${b}`;')
    site = scan_template_sites(unit)[0]
    assert [p.value for p in site.parts] == ['a', 'b']
    assert all(p.is_variable for p in site.parts)


def test_identifier_position_is_inside_the_identifier(parse, locate):
    unit = parse('''
        const mode = "a";
        const s = `pre-${mode}-post`;
    ''')
    part = scan_template_sites(unit)[0].variables[0]
    assert part.position == locate(unit, 'mode}', 1)


def test_dotted_expression_position_is_inside_the_last_property(parse, locate):
    unit = parse('const s = `x-${cfg.mode}`;')
    part = scan_template_sites(unit)[0].variables[0]
    assert part.value == 'cfg.mode'
    assert part.position == locate(unit, 'cfg.mode}', len('cfg.mode') - 1)


def test_member_position_ignores_trailing_non_null_assertion(parse, locate):
    unit = parse('const s = `${m.mode!}|${a?.b}`;')
    parts = scan_template_sites(unit)[0].variables
    assert [part.value for part in parts] == ['m.mode', 'a.b']
    assert parts[0].position == locate(unit, 'mode!', len('mode') - 1)
    assert parts[1].position == locate(unit, 'b}')
    for part in parts:
        line = unit.text.split('\n')[part.position.line]
        assert line[part.position.character].isalpha()


def test_non_null_and_optional_chaining_are_normalized(parse):
    unit = parse('const s = `${user?.name}-${id!}`;')
    values = [p.value for p in scan_template_sites(unit)[0].variables]
    assert values == ['user.name', 'id']


def test_normalize_expression():
    assert normalize_expression('a?.b!.c') == 'a.b.c'
    assert normalize_expression('plain') == 'plain'


def test_anchor_is_end_of_the_line_where_the_template_ends(parse):
    unit = parse('''
        const s = `first ${a}
        second ${b}`; // trailing
        ''')
    site = scan_template_sites(unit)[0]
    lines = unit.text.split('\n')
    assert site.start == SourcePosition(line=1, character=lines[1].index('`'))
    assert site.anchor == SourcePosition(line=2, character=len(lines[2]))


def test_sites_are_returned_in_source_order(parse):
    unit = parse('''
        const a = `${one}`;
        function f() {
            return `${two}-${three}`;
        }
    ''')
    sites = scan_template_sites(unit)
    logger.debug(f"Scanned sites: {sites}")
    assert [[p.value for p in s.variables] for s in sites] == [['one'], ['two', 'three']]


def test_nested_templates_are_separate_sites(parse):
    unit = parse('const s = `outer-${`inner-${x}`}`;')
    sites = scan_template_sites(unit)
    assert len(sites) == 2
    assert sites[0].variables[0].value == '`inner-${x}`'
    assert sites[1].variables[0].value == 'x'
