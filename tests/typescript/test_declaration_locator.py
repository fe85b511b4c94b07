import pytest

from templex.languages.lang_typescript.components.navigator import TypeScriptDeclarationLocator
from templex.models.enums import DeclarationKind


@pytest.fixture
def locator():
    return TypeScriptDeclarationLocator()


def test_finds_each_declaration_kind(parse, locator):
    unit = parse('''
        enum Color { Red, Green }
        type Mode = "a" | "b";
        interface Options { mode: Mode }
        const value = "x";
        function show(param: Mode) {}
    ''')
    assert locator.find_declaration(unit, 'Color').kind == DeclarationKind.ENUM
    assert locator.find_declaration(unit, 'Mode').kind == DeclarationKind.TYPE_ALIAS
    assert locator.find_declaration(unit, 'Options').kind == DeclarationKind.INTERFACE
    assert locator.find_declaration(unit, 'value').kind == DeclarationKind.VARIABLE
    assert locator.find_declaration(unit, 'param').kind == DeclarationKind.PARAMETER
    assert locator.find_declaration(unit, 'missing') is None


def test_property_signatures_are_not_top_level_declarations(parse, locator):
    unit = parse('''
        interface Options { mode: string }
    ''')
    assert locator.find_declaration(unit, 'mode') is None


def test_first_match_in_preorder_wins(parse, locator):
    unit = parse('''
        function f() {
            const x = "inner";
        }
        const x = "outer";
    ''')
    declaration = locator.find_declaration(unit, 'x')
    assert unit.text_of(declaration.node.child_by_field_name('value')) == '"inner"'


def test_kinds_filter_prefers_type_space(parse, locator):
    unit = parse('''
        const Mode = { A: "a" };
        type Mode = keyof typeof Mode;
    ''')
    found = locator.find_declaration(unit, 'Mode', [DeclarationKind.TYPE_ALIAS])
    assert found.kind == DeclarationKind.TYPE_ALIAS


def test_bare_arrow_parameter(parse, locator):
    unit = parse('items.forEach(item => console.log(item));')
    declaration = locator.find_declaration(unit, 'item')
    assert declaration.kind == DeclarationKind.PARAMETER
    assert declaration.node.type == 'identifier'


def test_find_exported_direct_and_clause(parse, locator):
    unit = parse('''
        export const direct = "d";
        const local = "l";
        export { local as renamed };
    ''')
    assert locator.find_exported(unit, 'direct').name == 'direct'
    renamed = locator.find_exported(unit, 'renamed', fallback=False)
    assert renamed is not None and renamed.name == 'local'
    assert locator.find_exported(unit, 'local', fallback=False) is None
    assert locator.find_exported(unit, 'local').name == 'local'


def test_find_import_of_is_alias_aware(parse, locator):
    unit = parse('''
        import { Mode, Color as Colour } from "./types";
        import Default from "./default";
    ''')
    mode = locator.find_import_of(unit, 'Mode')
    assert (mode.specifier, mode.imported_name, mode.local_name) == ('./types', 'Mode', 'Mode')
    colour = locator.find_import_of(unit, 'Colour')
    assert (colour.imported_name, colour.local_name) == ('Color', 'Colour')
    assert locator.find_import_of(unit, 'Color') is None
    assert locator.find_import_of(unit, 'Default') is None


def test_find_reexports_lists_explicit_before_wildcards(parse, locator):
    unit = parse('''
        export * from "./all";
        export { Inner as Mode } from "./modes";
        export * as ns from "./namespaced";
    ''')
    references = locator.find_reexports(unit, 'Mode')
    assert [(r.specifier, r.imported_name) for r in references] == [
        ('./modes', 'Inner'),
        ('./all', 'Mode'),
    ]


def test_classify_promotes_statements_and_names(parse, locator):
    unit = parse('''
        export const picked = "p";
        function f(arg: string) {}
    ''')
    statement = unit.root_node.named_children[0]
    assert locator.classify(statement, unit).name == 'picked'
    arg = locator.find_declaration(unit, 'arg').node.child_by_field_name('pattern')
    assert locator.classify(arg, unit).kind == DeclarationKind.PARAMETER
    call_site = unit.root_node.named_children[1].child_by_field_name('name')
    assert locator.classify(call_site, unit) is None


def test_node_at(parse, locate, locator):
    unit = parse('const value = "x";')
    node = locator.node_at(unit, locate(unit, 'value', 2))
    assert node.type == 'identifier'
    assert unit.text_of(node) == 'value'
