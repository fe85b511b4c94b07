"""
Core enumerations for the templex data model.
"""
from enum import Enum

class TemplatePartKind(str, Enum):
    """Kinds of parts a template literal is split into"""
    STATIC = 'static'
    VARIABLE = 'variable'

class DeclarationKind(str, Enum):
    """Kinds of named declarations the locator can return"""
    ENUM = 'enum'
    VARIABLE = 'variable'
    TYPE_ALIAS = 'type_alias'
    INTERFACE = 'interface'
    PARAMETER = 'parameter'
    PROPERTY_SIGNATURE = 'property_signature'

TYPE_DECLARATION_KINDS = (DeclarationKind.TYPE_ALIAS, DeclarationKind.ENUM, DeclarationKind.INTERFACE)
