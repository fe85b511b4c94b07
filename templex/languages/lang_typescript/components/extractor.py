"""
Literal value extraction.

Maps a located declaration to the ordered set of string literal values it can
denote, by structural case analysis of its syntax tree. Type names, aliases
and iterated collections are followed through the declaration locator, across
files where a name is imported.
"""
import logging
import re
from typing import List, Optional

from tree_sitter import Node

from templex.core.error_handling import ParsingError, TransientHostError
from templex.core.engine.ast_handler import ASTHandler
from templex.core.filesystem import FileSystem
from templex.languages.lang_typescript.components.module_resolver import ModulePathResolver
from templex.languages.lang_typescript.components.navigator import TypeScriptDeclarationLocator
from templex.languages.lang_typescript.components.parser import TypeScriptCodeParser
from templex.languages.lang_typescript.config import (
    ARRAY_GENERICS,
    FREEZE_CALLS,
    FUNCTION_TYPES,
    ITERATION_METHODS,
    KEYS_OF_OBJECT_PATTERN,
    OBJECT_KEYS_CALL,
    OBJECT_VALUES_CALL,
    PARAMETER_TYPES,
    TRANSPARENT_EXPRESSIONS,
    VALUES_OF_OBJECT_PATTERN,
)
from templex.models.declaration import Declaration, ImportReference
from templex.models.enums import TYPE_DECLARATION_KINDS, DeclarationKind
from templex.models.resolution import LiteralValueSet, ResolutionContext, unique_values
from templex.models.source_unit import SourceUnit

logger = logging.getLogger(__name__)

_VALUES_OF_OBJECT = re.compile(VALUES_OF_OBJECT_PATTERN)
_KEYS_OF_OBJECT = re.compile(KEYS_OF_OBJECT_PATTERN)
_NESTED_VALUES = ('object', 'array')


class LiteralValueExtractor:
    """
    Extracts literal value sets from declarations.

    All methods take the ResolutionContext of the running request; its
    visited set is what stops self- and mutually-referential declarations.
    """

    def __init__(self, locator: Optional[TypeScriptDeclarationLocator] = None,
                 module_resolver: Optional[ModulePathResolver] = None,
                 parser: Optional[TypeScriptCodeParser] = None,
                 fs: Optional[FileSystem] = None):
        self.fs = fs or FileSystem()
        self.locator = locator or TypeScriptDeclarationLocator()
        self.module_resolver = module_resolver or ModulePathResolver(self.fs)
        self.parser = parser or TypeScriptCodeParser()

    async def extract(self, declaration: Declaration, ctx: ResolutionContext) -> LiteralValueSet:
        """
        Return the literal values ``declaration`` can denote.

        A declaration that is already being extracted in this context yields
        an empty set; a finished one yields its remembered result.
        """
        remembered = ctx.recall(declaration)
        if remembered is not None:
            return remembered
        if not ctx.enter(declaration):
            logger.debug(f"Cycle at {declaration!r}, giving up on this branch")
            return []

        kind = declaration.kind
        node, unit = declaration.node, declaration.unit
        if kind == DeclarationKind.ENUM:
            values = self._enum_values(node, unit)
        elif kind == DeclarationKind.VARIABLE:
            values = await self.values_from_type_node(node.child_by_field_name('type'), unit, ctx)
            if not values:
                values = await self.values_from_expression(node.child_by_field_name('value'), unit, ctx)
        elif kind == DeclarationKind.TYPE_ALIAS:
            values = await self.values_from_type_node(node.child_by_field_name('value'), unit, ctx)
        elif kind == DeclarationKind.PROPERTY_SIGNATURE:
            values = await self.values_from_type_node(node.child_by_field_name('type'), unit, ctx)
        elif kind == DeclarationKind.PARAMETER:
            values = await self._parameter_values(node, unit, ctx)
        else:
            values = []

        values = unique_values(values)
        logger.debug(f"{declaration!r} -> {values}")
        ctx.remember(declaration, values)
        return values

    async def extract_node(self, node: Node, unit: SourceUnit, ctx: ResolutionContext) -> LiteralValueSet:
        """Extract from ``node`` if it is (or names) a declaration, else return []."""
        declaration = self.locator.classify(node, unit)
        if declaration is None:
            return []
        return await self.extract(declaration, ctx)

    # Expressions

    async def values_from_expression(self, node: Optional[Node], unit: SourceUnit,
                                     ctx: ResolutionContext) -> LiteralValueSet:
        """
        Values of an initializer expression.

        Object literals denote their property names, string literals
        themselves, ``x as T`` the values of ``T`` (else the asserted string),
        identifiers the values of their declaration and conditionals the
        union of both branches.
        """
        node = unwrap_expression(node)
        if node is None:
            return []

        if node.type == 'object':
            return object_keys(node, unit)
        if node.type == 'string':
            return [ASTHandler.unquote(unit.text_of(node))]
        if node.type == 'template_string':
            if any(child.type == 'template_substitution' for child in node.children):
                return []
            return [ASTHandler.unquote(unit.text_of(node))]
        if node.type == 'call_expression':
            function = node.child_by_field_name('function')
            if function is not None and unit.text_of(function) in FREEZE_CALLS:
                return await self.values_from_expression(first_argument(node), unit, ctx)
            return []
        if node.type == 'as_expression':
            return await self._asserted_values(node, unit, ctx)
        if node.type == 'identifier':
            declaration = await self.lookup(unit.text_of(node), unit, ctx)
            if declaration is None:
                return []
            return await self.extract(declaration, ctx)
        if node.type == 'ternary_expression':
            consequence = await self.values_from_expression(node.child_by_field_name('consequence'), unit, ctx)
            alternative = await self.values_from_expression(node.child_by_field_name('alternative'), unit, ctx)
            return unique_values(consequence + alternative)
        if node.type == 'member_expression':
            return await self._enum_member_expression(node, unit, ctx)
        return []

    async def _asserted_values(self, node: Node, unit: SourceUnit, ctx: ResolutionContext) -> LiteralValueSet:
        children = ASTHandler.named_children(node)
        if not children:
            return []
        expression = unwrap_expression(children[0])
        type_node = children[1] if len(children) > 1 else None
        if type_node is None:
            # `as const`
            return await self.values_from_expression(expression, unit, ctx)
        if expression is not None and expression.type == 'object':
            return object_keys(expression, unit)
        values = await self.values_from_type_node(type_node, unit, ctx)
        if values:
            return values
        if expression is not None and expression.type == 'string':
            return [ASTHandler.unquote(unit.text_of(expression))]
        return []

    async def _enum_member_expression(self, node: Node, unit: SourceUnit,
                                      ctx: ResolutionContext) -> LiteralValueSet:
        target = node.child_by_field_name('object')
        member = node.child_by_field_name('property')
        if target is None or member is None or target.type != 'identifier':
            return []
        declaration = await self.lookup(unit.text_of(target), unit, ctx, kinds=[DeclarationKind.ENUM])
        if declaration is None:
            return []
        return self.enum_member_values(declaration, unit.text_of(member))

    # Types

    async def values_from_type_node(self, node: Optional[Node], unit: SourceUnit,
                                    ctx: ResolutionContext) -> LiteralValueSet:
        """
        Values of a type.

        Unions contribute their string-literal members only; named types are
        looked up (type-space declarations first) and extracted.
        """
        if node is None:
            return []
        if node.type == 'type_annotation':
            return await self.values_from_type_node(ASTHandler.first_named_child(node), unit, ctx)

        text = unit.text_of(node).strip()
        match = _VALUES_OF_OBJECT.match(text) or _KEYS_OF_OBJECT.match(text)
        if match:
            return await self._object_keys_of(match.group('name'), unit, ctx)

        if node.type == 'union_type':
            values = []
            for member in flatten_union(node):
                if member.type == 'literal_type':
                    values.extend(literal_type_values(member, unit))
            return unique_values(values)
        if node.type == 'literal_type':
            return literal_type_values(node, unit)
        if node.type == 'parenthesized_type':
            return await self.values_from_type_node(ASTHandler.first_named_child(node), unit, ctx)
        if node.type == 'type_identifier':
            declaration = await self.lookup_type(text, unit, ctx)
            if declaration is None:
                return []
            return await self.extract(declaration, ctx)
        return []

    async def element_values_from_type_node(self, node: Optional[Node], unit: SourceUnit,
                                            ctx: ResolutionContext) -> LiteralValueSet:
        """Values of the elements of an array type (``T[]``, ``readonly T[]``, ``Array<T>``)."""
        if node is None:
            return []
        if node.type in ('type_annotation', 'parenthesized_type', 'readonly_type'):
            return await self.element_values_from_type_node(ASTHandler.first_named_child(node), unit, ctx)
        if node.type == 'array_type':
            return await self.values_from_type_node(ASTHandler.first_named_child(node), unit, ctx)
        if node.type == 'generic_type':
            name = ASTHandler.first_named_child(node)
            arguments = next((child for child in node.named_children if child.type == 'type_arguments'), None)
            if name is None or arguments is None or unit.text_of(name) not in ARRAY_GENERICS:
                return []
            return await self.values_from_type_node(ASTHandler.first_named_child(arguments), unit, ctx)
        if node.type == 'type_identifier':
            declaration = await self.lookup_type(unit.text_of(node), unit, ctx)
            if declaration is None or declaration.kind != DeclarationKind.TYPE_ALIAS:
                return []
            if not ctx.enter_key(('elements',) + declaration.key):
                return []
            return await self.element_values_from_type_node(
                declaration.node.child_by_field_name('value'), declaration.unit, ctx)
        return []

    async def _object_keys_of(self, name: str, unit: SourceUnit, ctx: ResolutionContext) -> LiteralValueSet:
        declaration = await self.lookup(name, unit, ctx, kinds=[DeclarationKind.VARIABLE])
        if declaration is None:
            return []
        initializer = unwrap_collection(declaration.node.child_by_field_name('value'), declaration.unit)
        if initializer is None or initializer.type != 'object':
            return []
        return object_keys(initializer, declaration.unit)

    # Enums

    def _enum_values(self, node: Node, unit: SourceUnit) -> LiteralValueSet:
        return [value for _, value in enum_members(node, unit)]

    def enum_member_values(self, declaration: Declaration, member: str) -> LiteralValueSet:
        """The value of one member of an enum declaration, as a one-element set."""
        for name, value in enum_members(declaration.node, declaration.unit):
            if name == member:
                return [value]
        return []

    # Parameters and iterated collections

    async def _parameter_values(self, node: Node, unit: SourceUnit, ctx: ResolutionContext) -> LiteralValueSet:
        if node.type in PARAMETER_TYPES:
            values = await self.values_from_type_node(node.child_by_field_name('type'), unit, ctx)
            if values:
                return values

        receiver = iterated_receiver(node, unit)
        if receiver is None:
            return []
        return await self.collection_values(receiver, unit, ctx)

    async def collection_values(self, node: Optional[Node], unit: SourceUnit,
                                ctx: ResolutionContext) -> LiteralValueSet:
        """
        Values of the elements of a collection expression.

        ``Object.values`` over an enum gives its member values and over a
        const object its string property values; ``Object.keys`` gives the
        names. Array literals contribute each element, spreads included.
        """
        node = unwrap_collection(node, unit)
        if node is None:
            return []

        if node.type == 'call_expression':
            function = node.child_by_field_name('function')
            callee = unit.text_of(function) if function is not None else ''
            if callee in (OBJECT_VALUES_CALL, OBJECT_KEYS_CALL):
                return await self._object_entries(first_argument(node), unit, ctx,
                                                  keys=callee == OBJECT_KEYS_CALL)
            return []
        if node.type == 'array':
            values = []
            for element in ASTHandler.named_children(node):
                if element.type == 'spread_element':
                    values.extend(await self.collection_values(ASTHandler.first_named_child(element), unit, ctx))
                else:
                    values.extend(await self.values_from_expression(element, unit, ctx))
            return unique_values(values)
        if node.type == 'identifier':
            declaration = await self.lookup(unit.text_of(node), unit, ctx)
            if declaration is None or not ctx.enter_key(('elements',) + declaration.key):
                return []
            if declaration.kind not in (DeclarationKind.VARIABLE, DeclarationKind.PARAMETER):
                return []
            decl_node = declaration.node
            type_node = decl_node.child_by_field_name('type') if decl_node.type != 'identifier' else None
            values = await self.element_values_from_type_node(type_node, declaration.unit, ctx)
            if values or declaration.kind != DeclarationKind.VARIABLE:
                return values
            return await self.collection_values(decl_node.child_by_field_name('value'), declaration.unit, ctx)
        return []

    async def _object_entries(self, node: Optional[Node], unit: SourceUnit, ctx: ResolutionContext,
                              keys: bool) -> LiteralValueSet:
        node = unwrap_collection(node, unit)
        if node is None:
            return []
        if node.type == 'object':
            return object_keys(node, unit) if keys else await self._object_property_values(node, unit, ctx)
        if node.type != 'identifier':
            return []

        declaration = await self.lookup(unit.text_of(node), unit, ctx)
        if declaration is None:
            return []
        if declaration.kind == DeclarationKind.ENUM:
            members = enum_members(declaration.node, declaration.unit)
            return unique_values(name if keys else value for name, value in members)
        if declaration.kind != DeclarationKind.VARIABLE:
            return []
        initializer = unwrap_collection(declaration.node.child_by_field_name('value'), declaration.unit)
        if initializer is None or initializer.type != 'object':
            return []
        if keys:
            return object_keys(initializer, declaration.unit)
        return await self._object_property_values(initializer, declaration.unit, ctx)

    async def _object_property_values(self, node: Node, unit: SourceUnit, ctx: ResolutionContext) -> LiteralValueSet:
        values = []
        for pair in object_pairs(node):
            value = unwrap_expression(pair.child_by_field_name('value'))
            if value is None or value.type in _NESTED_VALUES:
                continue
            values.extend(await self.values_from_expression(value, unit, ctx))
        return unique_values(values)

    # Name lookup

    async def lookup(self, name: str, unit: SourceUnit, ctx: ResolutionContext,
                     kinds=None) -> Optional[Declaration]:
        """Find ``name`` in ``unit``, else through the import that binds it."""
        declaration = self.locator.find_declaration(unit, name, kinds)
        if declaration is not None:
            return declaration
        reference = self.locator.find_import_of(unit, name)
        if reference is None:
            return None
        return await self.load_exported(reference, unit, ctx)

    async def lookup_type(self, name: str, unit: SourceUnit, ctx: ResolutionContext) -> Optional[Declaration]:
        """Like ``lookup``, preferring type aliases, enums and interfaces over values."""
        declaration = self.locator.find_declaration(unit, name, TYPE_DECLARATION_KINDS)
        if declaration is None:
            declaration = self.locator.find_declaration(unit, name)
        if declaration is not None:
            return declaration
        reference = self.locator.find_import_of(unit, name)
        if reference is None:
            return None
        return await self.load_exported(reference, unit, ctx)

    async def load_exported(self, reference: ImportReference, unit: SourceUnit,
                            ctx: ResolutionContext) -> Optional[Declaration]:
        """
        Open the module ``reference`` points to and find what it exports.

        Explicit exports are searched first, then re-exports (followed
        recursively), then any declaration of the imported name. Returns None
        when the module cannot be found, read or parsed.
        """
        if unit.path is None:
            return None
        path = await self.module_resolver.resolve(reference.specifier, unit.path)
        if path is None:
            return None

        key = (str(path), reference.imported_name)
        if key in ctx.exports:
            return ctx.exports[key]
        if not ctx.enter_key(('export',) + key):
            logger.debug(f"Re-export cycle through {path} for '{reference.imported_name}'")
            return None

        try:
            target = await self.parser.load(path, self.fs)
        except (OSError, TransientHostError, ParsingError) as e:
            logger.debug(f"Cannot load {path} for {reference}: {e}")
            ctx.exports[key] = None
            return None

        name = reference.imported_name
        declaration = self.locator.find_exported(target, name, fallback=False)
        if declaration is None:
            for reexport in self.locator.find_reexports(target, name):
                declaration = await self.load_exported(reexport, target, ctx)
                if declaration is not None:
                    break
        if declaration is None:
            declaration = self.locator.find_declaration(target, name)
        ctx.exports[key] = declaration
        return declaration


def unwrap_expression(node: Optional[Node]) -> Optional[Node]:
    """Strip parentheses, ``satisfies`` and non-null assertions."""
    while node is not None and node.type in TRANSPARENT_EXPRESSIONS:
        node = ASTHandler.first_named_child(node)
    return node


def unwrap_collection(node: Optional[Node], unit: SourceUnit) -> Optional[Node]:
    """Like ``unwrap_expression``, also looking through ``as`` and ``Object.freeze``."""
    while True:
        node = unwrap_expression(node)
        if node is None:
            return None
        if node.type == 'as_expression':
            node = ASTHandler.first_named_child(node)
            continue
        if node.type == 'call_expression':
            function = node.child_by_field_name('function')
            if function is not None and unit.text_of(function) in FREEZE_CALLS:
                node = first_argument(node)
                continue
        return node


def first_argument(call: Node) -> Optional[Node]:
    arguments = call.child_by_field_name('arguments')
    if arguments is None:
        return None
    return ASTHandler.first_named_child(arguments)


def object_pairs(node: Node) -> List[Node]:
    return [child for child in node.named_children if child.type == 'pair']


def object_keys(node: Node, unit: SourceUnit) -> LiteralValueSet:
    """Property names of an object literal, unquoted; computed keys are skipped."""
    keys = []
    for pair in object_pairs(node):
        key = pair.child_by_field_name('key')
        if key is None or key.type == 'computed_property_name':
            continue
        keys.append(ASTHandler.unquote(unit.text_of(key)))
    return unique_values(keys)


def enum_members(node: Node, unit: SourceUnit) -> List[tuple]:
    """(name, value) of each enum member; the value is the string initializer or the name."""
    body = node.child_by_field_name('body')
    if body is None:
        return []
    members = []
    for member in ASTHandler.named_children(body):
        if member.type == 'enum_assignment':
            name_node = member.child_by_field_name('name')
            value_node = member.child_by_field_name('value')
            if name_node is None:
                continue
            name = ASTHandler.unquote(unit.text_of(name_node))
            if value_node is not None and value_node.type == 'string':
                members.append((name, ASTHandler.unquote(unit.text_of(value_node))))
            else:
                members.append((name, name))
        elif member.type in ('property_identifier', 'string'):
            name = ASTHandler.unquote(unit.text_of(member))
            members.append((name, name))
    return members


def flatten_union(node: Node) -> List[Node]:
    """Members of a (left-nested, possibly parenthesized) union type, in order."""
    members = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == 'parenthesized_type':
            inner = ASTHandler.first_named_child(current)
            if inner is not None and inner.type == 'union_type':
                stack.append(inner)
                continue
        if current.type == 'union_type':
            stack.extend(reversed(ASTHandler.named_children(current)))
        else:
            members.append(current)
    return members


def literal_type_values(node: Node, unit: SourceUnit) -> LiteralValueSet:
    literal = ASTHandler.first_named_child(node)
    if literal is None or literal.type != 'string':
        return []
    return [ASTHandler.unquote(unit.text_of(literal))]


def iterated_receiver(parameter: Node, unit: SourceUnit) -> Optional[Node]:
    """
    Return ``xs`` when ``parameter`` is the first parameter of a callback
    passed as first argument to ``xs.forEach(...)`` (or another iteration method).
    """
    if parameter.parent is not None and parameter.parent.type == 'arrow_function' \
            and parameter.parent.child_by_field_name('parameter') == parameter:
        function = parameter.parent
    else:
        parameters = parameter.parent
        if parameters is None or parameters.type != 'formal_parameters':
            return None
        first = ASTHandler.first_named_child(parameters)
        if first is None or first != parameter:
            return None
        function = parameters.parent
    if function is None or function.type not in FUNCTION_TYPES:
        return None

    arguments = function.parent
    if arguments is None or arguments.type != 'arguments' or ASTHandler.first_named_child(arguments) != function:
        return None
    call = arguments.parent
    if call is None or call.type != 'call_expression':
        return None
    callee = call.child_by_field_name('function')
    if callee is None or callee.type != 'member_expression':
        return None
    method = callee.child_by_field_name('property')
    if method is None or unit.text_of(method) not in ITERATION_METHODS:
        return None
    return callee.child_by_field_name('object')
