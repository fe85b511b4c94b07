"""
Property access resolution for dotted expressions such as ``config.lang.code``.
"""
import logging
from typing import List, Optional, Set, Tuple

from tree_sitter import Node

from templex.core.engine.ast_handler import ASTHandler
from templex.languages.lang_typescript.components.extractor import (
    LiteralValueExtractor,
    object_pairs,
    unwrap_collection,
)
from templex.languages.lang_typescript.components.scanner import normalize_expression
from templex.models.enums import DeclarationKind
from templex.models.resolution import LiteralValueSet, ResolutionContext
from templex.models.source_unit import SourceUnit

logger = logging.getLogger(__name__)

_OBJECT_TYPES = ('object_type', 'interface_body')


class PropertyAccessResolver:
    """
    Resolves ``Root.member[.member...]`` expressions.

    The root is found locally or through an import. A declared type on the
    root is followed through interfaces and object types first; failing that,
    the root's object literal initializer is drilled into.
    """

    def __init__(self, extractor: LiteralValueExtractor):
        self.extractor = extractor

    async def resolve(self, expression: str, unit: SourceUnit, ctx: ResolutionContext) -> LiteralValueSet:
        parts = normalize_expression(expression).strip().split('.')
        if len(parts) < 2 or not all(part.strip() for part in parts):
            return []
        root, path = parts[0].strip(), [part.strip() for part in parts[1:]]

        declaration = await self.extractor.lookup(root, unit, ctx)
        if declaration is None:
            logger.debug(f"No declaration for '{root}' in {unit.key}")
            return []

        if declaration.kind == DeclarationKind.ENUM:
            if len(path) != 1:
                return []
            return self.extractor.enum_member_values(declaration, path[0])
        if declaration.kind not in (DeclarationKind.VARIABLE, DeclarationKind.PARAMETER):
            return []

        node = declaration.node
        type_node = node.child_by_field_name('type') if node.type != 'identifier' else None
        if type_node is not None:
            values = await self._values_through_type(type_node, path, declaration.unit, ctx)
            if values:
                return values
        if declaration.kind != DeclarationKind.VARIABLE:
            return []
        return await self._values_through_initializer(node.child_by_field_name('value'), path,
                                                      declaration.unit, ctx)

    async def _values_through_type(self, type_node: Node, path: List[str], unit: SourceUnit,
                                   ctx: ResolutionContext) -> LiteralValueSet:
        current, current_unit = type_node, unit
        for member in path:
            found = await self._property_signature(current, member, current_unit, ctx)
            if found is None:
                return []
            signature, current_unit = found
            current = signature.child_by_field_name('type')
            if current is None:
                return []
        return await self.extractor.values_from_type_node(current, current_unit, ctx)

    async def _property_signature(self, type_node: Node, member: str, unit: SourceUnit,
                                  ctx: ResolutionContext) -> Optional[Tuple[Node, SourceUnit]]:
        """Find the signature of ``member`` in an inline object type, interface or aliased object type."""
        seen: Set[tuple] = set()
        node, current_unit = type_node, unit
        while node is not None:
            if node.type in ('type_annotation', 'parenthesized_type'):
                node = ASTHandler.first_named_child(node)
                continue
            if node.type in _OBJECT_TYPES:
                return _find_signature(node, member, current_unit)
            if node.type != 'type_identifier':
                return None

            declaration = await self.extractor.lookup_type(current_unit.text_of(node), current_unit, ctx)
            if declaration is None or declaration.key in seen:
                return None
            seen.add(declaration.key)
            current_unit = declaration.unit
            if declaration.kind == DeclarationKind.INTERFACE:
                node = declaration.node.child_by_field_name('body')
            elif declaration.kind == DeclarationKind.TYPE_ALIAS:
                node = declaration.node.child_by_field_name('value')
            else:
                return None
        return None

    async def _values_through_initializer(self, value: Optional[Node], path: List[str], unit: SourceUnit,
                                          ctx: ResolutionContext) -> LiteralValueSet:
        current, current_unit = value, unit
        for member in path:
            found = await self._object_literal(current, current_unit, ctx)
            if found is None:
                return []
            obj, current_unit = found
            current = _find_pair_value(obj, member, current_unit)
            if current is None:
                logger.debug(f"No property '{member}' in object literal of {current_unit.key}")
                return []
        return await self.extractor.values_from_expression(current, current_unit, ctx)

    async def _object_literal(self, node: Optional[Node], unit: SourceUnit,
                              ctx: ResolutionContext) -> Optional[Tuple[Node, SourceUnit]]:
        seen: Set[tuple] = set()
        while True:
            node = unwrap_collection(node, unit)
            if node is None:
                return None
            if node.type == 'object':
                return node, unit
            if node.type != 'identifier':
                return None
            declaration = await self.extractor.lookup(unit.text_of(node), unit, ctx,
                                                      kinds=[DeclarationKind.VARIABLE])
            if declaration is None or declaration.key in seen:
                return None
            seen.add(declaration.key)
            node, unit = declaration.node.child_by_field_name('value'), declaration.unit


def _find_signature(body: Node, member: str, unit: SourceUnit) -> Optional[Tuple[Node, SourceUnit]]:
    for child in body.named_children:
        if child.type != 'property_signature':
            continue
        name = child.child_by_field_name('name')
        if name is not None and ASTHandler.unquote(unit.text_of(name)) == member:
            return child, unit
    return None


def _find_pair_value(obj: Node, member: str, unit: SourceUnit) -> Optional[Node]:
    for pair in object_pairs(obj):
        key = pair.child_by_field_name('key')
        if key is None or key.type == 'computed_property_name':
            continue
        if ASTHandler.unquote(unit.text_of(key)) == member:
            return pair.child_by_field_name('value')
    return None
