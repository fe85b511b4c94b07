import itertools

from templex.core.config import config
from templex.languages.lang_typescript.components.combinations import generate_combinations, iter_combinations
from templex.models.position import SourcePosition
from templex.models.template import TemplatePart

POSITION = SourcePosition(line=0, character=0)


def parts(*spec):
    """Build parts from strings; ``$name`` marks a variable."""
    return [TemplatePart.variable(item[1:], POSITION) if item.startswith('$') else TemplatePart.static(item)
            for item in spec]


def test_end_to_end_scenario_expansion():
    template = parts('X.', '$m.exchangeType', '.Y')
    assert generate_combinations(template, {'m.exchangeType': ['A', 'B', 'C']}) == ['X.A.Y', 'X.B.Y', 'X.C.Y']


def test_leftmost_variable_varies_slowest():
    template = parts('$a', '-', '$b')
    result = generate_combinations(template, {'a': ['1', '2'], 'b': ['x', 'y']})
    assert result == ['1-x', '1-y', '2-x', '2-y']


def test_unresolved_variable_becomes_placeholder():
    template = parts('$a', '/', '$unknown')
    assert generate_combinations(template, {'a': ['1', '2']}) == ['1/{unknown}', '2/{unknown}']
    assert generate_combinations(template, {'a': [], 'unknown': []}) == ['{a}/{unknown}']


def test_values_per_variable_and_results_are_bounded():
    many = [str(i) for i in range(10000)]
    template = parts('$a', ':', '$b')
    result = generate_combinations(template, {'a': many, 'b': many})
    assert len(result) == 20
    assert result[:10] == [f'0:{i}' for i in range(10)]
    assert result[10:] == [f'1:{i}' for i in range(10)]


def test_generation_is_lazy():
    values = {name: [str(i) for i in range(10)] for name in 'abcdefghijkl'}
    template = parts(*[f'${name}' for name in values])
    # 10 ** 12 combinations; only the requested prefix is produced
    first = list(itertools.islice(iter_combinations(template, values, 10), 3))
    assert first == ['000000000000', '000000000001', '000000000002']
    assert len(generate_combinations(template, values)) == 20


def test_limits_come_from_configuration():
    config.set('resolution', 'max_values_per_variable', 2)
    config.set('resolution', 'max_combinations', 3)
    template = parts('$a', '$b')
    result = generate_combinations(template, {'a': ['1', '2', '3'], 'b': ['x', 'y', 'z']})
    assert result == ['1x', '1y', '2x']


def test_static_only_parts():
    assert generate_combinations(parts('just text'), {}) == ['just text']
