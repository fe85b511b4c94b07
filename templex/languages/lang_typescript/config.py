"""
Language-specific configuration for TypeScript/JavaScript in templex.

Node type names follow the tree-sitter-typescript grammar.
"""

TEMPLATE_STRING = 'template_string'
TEMPLATE_SUBSTITUTION = 'template_substitution'

VARIABLE_DECLARATOR = 'variable_declarator'
ENUM_DECLARATION = 'enum_declaration'
TYPE_ALIAS_DECLARATION = 'type_alias_declaration'
INTERFACE_DECLARATION = 'interface_declaration'
PROPERTY_SIGNATURE = 'property_signature'
PARAMETER_TYPES = ('required_parameter', 'optional_parameter')

FUNCTION_TYPES = (
    'arrow_function',
    'function_expression',
    'function',
    'function_declaration',
    'generator_function',
    'generator_function_declaration',
    'method_definition',
)

# Expressions that only annotate or wrap the value they contain.
TRANSPARENT_EXPRESSIONS = ('parenthesized_expression', 'satisfies_expression', 'non_null_expression')

# Calls that return their (object) argument unchanged.
FREEZE_CALLS = ('Object.freeze',)

# Array methods whose callback receives the elements of the receiver as first argument.
ITERATION_METHODS = ('forEach', 'map', 'flatMap', 'filter', 'find', 'findIndex', 'some', 'every')

OBJECT_VALUES_CALL = 'Object.values'
OBJECT_KEYS_CALL = 'Object.keys'

# `(typeof X)[keyof typeof X]`, with or without the parentheses.
VALUES_OF_OBJECT_PATTERN = (
    r'^\(?\s*typeof\s+(?P<name>[A-Za-z_$][\w$]*)\s*\)?\s*'
    r'\[\s*keyof\s+typeof\s+(?P=name)\s*\]$'
)

SCRIPT_EXTENSION_PATTERN = r'\.(m?[tj]sx?|[cm]js|cts)$'

# Candidate rewrites of an import specifier that already carries a script
# extension, tried in order before the specifier itself.
EXTENSION_SUBSTITUTIONS = (
    (r'\.m?js$', '.ts'),
    (r'\.m?js$', '.tsx'),
    (r'\.m?js$', '.mts'),
    (r'\.cjs$', '.cts'),
)

# `keyof typeof X`
KEYS_OF_OBJECT_PATTERN = r'^keyof\s+typeof\s+(?P<name>[A-Za-z_$][\w$]*)$'

ARRAY_GENERICS = ('Array', 'ReadonlyArray')
