"""
TypeScript declaration locator.

Finds declarations, exports and imports by name. There is no precomputed
symbol table: every lookup is a fresh walk of the tree and the first match in
pre-order wins. Lookups are not scope-aware, so a shadowing local declared
earlier in the file hides a later top-level declaration of the same name.
"""
import logging
from typing import Iterable, List, Optional, Tuple

from tree_sitter import Node

from templex.core.engine.ast_handler import ASTHandler
from templex.languages.lang_typescript.config import (
    ENUM_DECLARATION,
    INTERFACE_DECLARATION,
    PARAMETER_TYPES,
    PROPERTY_SIGNATURE,
    TYPE_ALIAS_DECLARATION,
    VARIABLE_DECLARATOR,
)
from templex.models.declaration import Declaration, ImportReference
from templex.models.enums import DeclarationKind
from templex.models.position import SourcePosition
from templex.models.source_unit import SourceUnit

logger = logging.getLogger(__name__)

_NAMED_DECLARATIONS = {
    VARIABLE_DECLARATOR: DeclarationKind.VARIABLE,
    ENUM_DECLARATION: DeclarationKind.ENUM,
    TYPE_ALIAS_DECLARATION: DeclarationKind.TYPE_ALIAS,
    INTERFACE_DECLARATION: DeclarationKind.INTERFACE,
    PROPERTY_SIGNATURE: DeclarationKind.PROPERTY_SIGNATURE,
}


class TypeScriptDeclarationLocator:
    """Name-based lookups over one SourceUnit."""

    def find_declaration(self, unit: SourceUnit, name: str,
                         kinds: Optional[Iterable[DeclarationKind]] = None) -> Optional[Declaration]:
        """
        Return the first declaration bound to ``name`` anywhere in ``unit``.

        Variables, enums, type aliases, interfaces and function parameters are
        considered, in depth-first pre-order. ``kinds`` restricts the match
        to the given declaration kinds.
        """
        wanted = set(kinds) if kinds is not None else None
        for node in ASTHandler.walk_preorder(unit.root_node):
            binding = self._binding_of(node, unit)
            if binding is None:
                continue
            kind, bound_name, decl_node = binding
            if kind == DeclarationKind.PROPERTY_SIGNATURE:
                continue
            if bound_name == name and (wanted is None or kind in wanted):
                logger.debug(f"find_declaration: '{name}' is a {kind.value} in {unit.key}")
                return Declaration(kind=kind, name=name, node=decl_node, unit=unit)
        return None

    def find_exported(self, unit: SourceUnit, name: str, fallback: bool = True) -> Optional[Declaration]:
        """
        Return the declaration exported from ``unit`` under ``name``.

        Direct ``export`` declarations and local export clauses
        (``export { local as name }``) are searched first; with ``fallback``
        any declaration of that name is accepted.
        """
        for statement in ASTHandler.named_children(unit.root_node):
            if statement.type != 'export_statement':
                continue
            declaration = statement.child_by_field_name('declaration')
            if declaration is not None:
                for decl_node in self._declared_nodes(declaration):
                    binding = self._binding_of(decl_node, unit)
                    if binding and binding[1] == name:
                        return Declaration(kind=binding[0], name=name, node=binding[2], unit=unit)
                continue
            if statement.child_by_field_name('source') is not None:
                continue
            for local, exported in self._export_specifiers(statement, unit):
                if exported == name:
                    found = self.find_declaration(unit, local)
                    if found is not None:
                        return found
        if fallback:
            return self.find_declaration(unit, name)
        return None

    def find_reexports(self, unit: SourceUnit, name: str) -> List[ImportReference]:
        """
        Return the re-export statements that may provide ``name``.

        Explicit ``export { name } from "..."`` clauses come first, followed by
        ``export * from "..."`` wildcards bound to ``name``.
        """
        explicit, wildcards = [], []
        for statement in ASTHandler.named_children(unit.root_node):
            if statement.type != 'export_statement':
                continue
            source = statement.child_by_field_name('source')
            if source is None:
                continue
            specifier = ASTHandler.unquote(unit.text_of(source))
            clause = self._export_clause(statement)
            if clause is not None:
                for local, exported in self._export_specifiers(statement, unit):
                    if exported == name:
                        explicit.append(ImportReference(specifier=specifier, imported_name=local,
                                                        local_name=name, node=statement))
            elif any(child.type == '*' for child in statement.children) and not any(
                    child.type == 'namespace_export' for child in statement.named_children):
                wildcards.append(ImportReference(specifier=specifier, imported_name=name,
                                                 local_name=name, node=statement))
        return explicit + wildcards

    def find_import_of(self, unit: SourceUnit, name: str) -> Optional[ImportReference]:
        """Return the top-level named import that binds ``name`` locally."""
        for statement in ASTHandler.named_children(unit.root_node):
            if statement.type != 'import_statement':
                continue
            source = statement.child_by_field_name('source')
            if source is None:
                continue
            for specifier in self._import_specifiers(statement):
                imported_node = specifier.child_by_field_name('name')
                alias_node = specifier.child_by_field_name('alias')
                if imported_node is None:
                    continue
                imported = ASTHandler.unquote(unit.text_of(imported_node))
                local = unit.text_of(alias_node) if alias_node is not None else imported
                if local == name:
                    return ImportReference(
                        specifier=ASTHandler.unquote(unit.text_of(source)),
                        imported_name=imported,
                        local_name=local,
                        node=statement,
                    )
        return None

    def node_at(self, unit: SourceUnit, position: SourcePosition) -> Optional[Node]:
        return ASTHandler.node_at(unit, position)

    def classify(self, node: Node, unit: SourceUnit) -> Optional[Declaration]:
        """Return ``node`` as a Declaration if it declares something, else None."""
        if node.type == 'export_statement':
            declaration = node.child_by_field_name('declaration')
            if declaration is None:
                return None
            node = declaration
        if node.type in ('lexical_declaration', 'variable_declaration'):
            declarators = [child for child in node.named_children if child.type == VARIABLE_DECLARATOR]
            if len(declarators) != 1:
                return None
            node = declarators[0]
        if node.type == 'identifier' and node.parent is not None:
            parent = node.parent
            if parent.type == 'arrow_function' and parent.child_by_field_name('parameter') == node:
                node = parent
            elif parent.type in PARAMETER_TYPES or parent.type == VARIABLE_DECLARATOR:
                node = parent
        binding = self._binding_of(node, unit)
        if binding is None:
            return None
        kind, name, decl_node = binding
        return Declaration(kind=kind, name=name, node=decl_node, unit=unit)

    # Helpers

    def _binding_of(self, node: Node, unit: SourceUnit) -> Optional[Tuple[DeclarationKind, str, Node]]:
        """Return (kind, bound name, declaration node) for a declaring node."""
        kind = _NAMED_DECLARATIONS.get(node.type)
        if kind is not None:
            name_node = node.child_by_field_name('name')
            if name_node is None:
                return None
            if kind == DeclarationKind.VARIABLE and name_node.type != 'identifier':
                return None
            return kind, ASTHandler.unquote(unit.text_of(name_node)), node
        if node.type in PARAMETER_TYPES:
            pattern = node.child_by_field_name('pattern')
            if pattern is not None and pattern.type == 'identifier':
                return DeclarationKind.PARAMETER, unit.text_of(pattern), node
            return None
        if node.type == 'arrow_function':
            parameter = node.child_by_field_name('parameter')
            if parameter is not None and parameter.type == 'identifier':
                return DeclarationKind.PARAMETER, unit.text_of(parameter), parameter
        return None

    @staticmethod
    def _declared_nodes(declaration: Node) -> List[Node]:
        if declaration.type in ('lexical_declaration', 'variable_declaration'):
            return [child for child in declaration.named_children if child.type == VARIABLE_DECLARATOR]
        return [declaration]

    @staticmethod
    def _export_clause(statement: Node) -> Optional[Node]:
        for child in statement.named_children:
            if child.type == 'export_clause':
                return child
        return None

    def _export_specifiers(self, statement: Node, unit: SourceUnit) -> List[Tuple[str, str]]:
        """Return (local name, exported name) pairs of an export clause."""
        clause = self._export_clause(statement)
        if clause is None:
            return []
        pairs = []
        for specifier in clause.named_children:
            if specifier.type != 'export_specifier':
                continue
            name_node = specifier.child_by_field_name('name')
            if name_node is None:
                continue
            local = ASTHandler.unquote(unit.text_of(name_node))
            alias_node = specifier.child_by_field_name('alias')
            exported = ASTHandler.unquote(unit.text_of(alias_node)) if alias_node is not None else local
            pairs.append((local, exported))
        return pairs

    @staticmethod
    def _import_specifiers(statement: Node) -> List[Node]:
        specifiers = []
        for clause in statement.named_children:
            if clause.type != 'import_clause':
                continue
            for bindings in clause.named_children:
                if bindings.type == 'named_imports':
                    specifiers.extend(child for child in bindings.named_children
                                      if child.type == 'import_specifier')
        return specifiers
