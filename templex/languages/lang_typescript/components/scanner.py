"""
Template site scanner.

Collects every template literal that interpolates at least one expression and
splits it into ordered static and variable parts.
"""
import logging
import re
from typing import List, Optional

from tree_sitter import Node

from templex.core.engine.ast_handler import ASTHandler
from templex.languages.lang_typescript.config import TEMPLATE_STRING, TEMPLATE_SUBSTITUTION
from templex.models.position import SourcePosition
from templex.models.source_unit import SourceUnit
from templex.models.template import TemplatePart, TemplateSite

logger = logging.getLogger(__name__)

_NOISE = re.compile(r'[!?]')
_WRAPPERS = ('non_null_expression', 'parenthesized_expression')


def normalize_expression(expression: str) -> str:
    """Drop non-null assertions and optional chaining: ``a?.b!`` -> ``a.b``."""
    return _NOISE.sub('', expression)


def scan_template_sites(unit: SourceUnit) -> List[TemplateSite]:
    """
    Return every template site of ``unit`` in source order.

    Static segments are kept verbatim. A variable part's position lies inside
    the final property token for dotted expressions and inside the identifier
    otherwise, so that symbol queries at that position describe the member
    rather than the root object.
    """
    sites = []
    for node in ASTHandler.walk_preorder(unit.root_node):
        if node.type != TEMPLATE_STRING:
            continue
        site = _build_site(node, unit)
        if site is not None:
            sites.append(site)
    logger.debug(f"Found {len(sites)} template sites in {unit.key}")
    return sites


def _build_site(node: Node, unit: SourceUnit) -> Optional[TemplateSite]:
    substitutions = [child for child in node.children if child.type == TEMPLATE_SUBSTITUTION]
    if not substitutions:
        return None

    parts = []
    cursor = node.start_byte + 1  # past the opening backtick
    for substitution in substitutions:
        parts.append(TemplatePart.static(_slice(unit, cursor, substitution.start_byte)))
        expression = ASTHandler.first_named_child(substitution)
        if expression is None:
            cursor = substitution.end_byte
            continue
        raw = unit.text_of(expression)
        parts.append(TemplatePart.variable(normalize_expression(raw), _lookup_position(expression, raw, unit)))
        cursor = substitution.end_byte
    parts.append(TemplatePart.static(_slice(unit, cursor, node.end_byte - 1)))

    parts = [part for part in parts if part.is_variable or part.value]
    if not any(part.is_variable for part in parts):
        return None

    end = ASTHandler.end_position(node, unit)
    return TemplateSite(
        parts=parts,
        anchor=unit.line_end(end.line),
        start=ASTHandler.start_position(node, unit),
    )


def _lookup_position(expression: Node, raw: str, unit: SourceUnit) -> SourcePosition:
    inner = expression
    while inner is not None and inner.type in _WRAPPERS:
        inner = ASTHandler.first_named_child(inner)
    if inner is not None and inner.type == 'member_expression':
        member = inner.child_by_field_name('property')
        if member is not None:
            end = ASTHandler.end_position(member, unit)
            return SourcePosition(line=end.line, character=max(end.character - 1, 0))
    if '.' in raw:
        end = ASTHandler.end_position(expression, unit)
        return SourcePosition(line=end.line, character=max(end.character - 1, 0))
    start = ASTHandler.start_position(expression, unit)
    return SourcePosition(line=start.line, character=start.character + 1)


def _slice(unit: SourceUnit, start_byte: int, end_byte: int) -> str:
    if end_byte <= start_byte:
        return ''
    return unit.code_bytes[start_byte:end_byte].decode('utf8')
