"""
Bounded Cartesian expansion of template sites.
"""
import itertools
from typing import Dict, Iterator, List, Mapping, Sequence

from templex.core.config import config
from templex.models.template import TemplatePart


def iter_combinations(parts: Sequence[TemplatePart], values: Mapping[str, Sequence[str]],
                      max_values: int) -> Iterator[str]:
    """
    Lazily yield the concrete strings of a template, leftmost variable slowest.

    Each variable branches on at most ``max_values`` of its resolved values;
    an unresolved variable is rendered as ``{expression}``.
    """
    choices: List[List[str]] = []
    for part in parts:
        if not part.is_variable:
            choices.append([part.value])
            continue
        resolved = list(values.get(part.value) or [])[:max_values]
        choices.append(resolved if resolved else ['{' + part.value + '}'])
    return _expand(choices, 0, '')


def _expand(choices: List[List[str]], index: int, prefix: str) -> Iterator[str]:
    if index == len(choices):
        yield prefix
        return
    for choice in choices[index]:
        yield from _expand(choices, index + 1, prefix + choice)


def generate_combinations(parts: Sequence[TemplatePart], values: Mapping[str, Sequence[str]],
                          max_values: int = None, max_results: int = None) -> List[str]:
    """
    Return the first ``max_results`` concrete strings of a template.

    Generation stops as soon as enough strings exist; the full product is
    never built.
    """
    if max_values is None:
        max_values = config.get('resolution', 'max_values_per_variable', 10)
    if max_results is None:
        max_results = config.get('resolution', 'max_combinations', 20)
    return list(itertools.islice(iter_combinations(parts, values, max_values), max_results))


def resolved_values(values: Mapping[str, Sequence[str]]) -> Dict[str, List[str]]:
    """Drop unresolved expressions from an expression -> values map."""
    return {expression: list(found) for expression, found in values.items() if found}
