"""
Checked Exceptions: shared constants for rules, registry and fixes.
"""

CHECKED_EXCEPTIONS_PREFIX: str = "checked-exceptions."

# Message codes (see infrastructure/resources/rule_registry.yaml)
UNHANDLED_EXCEPTION: str = "W9501"
UNHANDLED_EXCEPTION_IN_GETTER: str = "W9502"
UNHANDLED_EXCEPTION_IN_SETTER: str = "W9503"
UNHANDLED_EXCEPTION_IN_EXPRESSION_BODY: str = "W9504"
BASE_METHOD_SUBSTITUTION: str = "W9505"
INTERFACE_SUBSTITUTION: str = "W9506"
BASE_PROPERTY_GETTER_SUBSTITUTION: str = "W9507"
BASE_PROPERTY_SETTER_SUBSTITUTION: str = "W9508"
EVENT_HANDLER_EXCEPTION: str = "W9509"

UNHANDLED_CODES: list[str] = [
    UNHANDLED_EXCEPTION,
    UNHANDLED_EXCEPTION_IN_GETTER,
    UNHANDLED_EXCEPTION_IN_SETTER,
    UNHANDLED_EXCEPTION_IN_EXPRESSION_BODY,
]
SUBSTITUTION_CODES: list[str] = [
    BASE_METHOD_SUBSTITUTION,
    INTERFACE_SUBSTITUTION,
    BASE_PROPERTY_GETTER_SUBSTITUTION,
    BASE_PROPERTY_SETTER_SUBSTITUTION,
]
EVENT_HANDLER_CODES: list[str] = [EVENT_HANDLER_EXCEPTION]

CODE_SYMBOLS: dict[str, str] = {
    UNHANDLED_EXCEPTION: "unhandled-exception",
    UNHANDLED_EXCEPTION_IN_GETTER: "unhandled-exception-in-getter",
    UNHANDLED_EXCEPTION_IN_SETTER: "unhandled-exception-in-setter",
    UNHANDLED_EXCEPTION_IN_EXPRESSION_BODY: "unhandled-exception-in-expression-body",
    BASE_METHOD_SUBSTITUTION: "base-method-substitution-violation",
    INTERFACE_SUBSTITUTION: "interface-substitution-violation",
    BASE_PROPERTY_GETTER_SUBSTITUTION: "base-property-getter-substitution-violation",
    BASE_PROPERTY_SETTER_SUBSTITUTION: "base-property-setter-substitution-violation",
    EVENT_HANDLER_EXCEPTION: "event-handler-exception-thrown",
}

# Diagnostic property keys
EXCEPTION_TYPES_PROPERTY: str = "exception_types"
SHORT_COMMENT_PROPERTY: str = "is_short_comment_target"
ACCESSOR_SCOPE_PROPERTY: str = "accessor_scope"

# Noise families: config flag -> qualified names of the family roots.
NOISE_FAMILIES: dict[str, frozenset[str]] = {
    "flag_argument_exceptions": frozenset({"builtins.TypeError", "builtins.ValueError"}),
    "flag_format_exceptions": frozenset({"builtins.UnicodeError"}),
    "flag_overflow_exceptions": frozenset({"builtins.OverflowError"}),
    "flag_assertion_exceptions": frozenset({"builtins.AssertionError"}),
    "flag_not_supported_exceptions": frozenset(
        {"io.UnsupportedOperation", "_io.UnsupportedOperation"}
    ),
    "flag_not_implemented_exceptions": frozenset({"builtins.NotImplementedError"}),
}

SHORT_COMMENT_FLAGS: tuple[str, ...] = (
    "short_comment_for_private",
    "short_comment_for_protected",
    "short_comment_for_internal",
    "short_comment_for_public",
)

BASE_EXCEPTION_QNAME: str = "builtins.BaseException"
OBJECT_QNAME: str = "builtins.object"

PROTOCOL_QNAMES: frozenset[str] = frozenset(
    {"typing.Protocol", "typing_extensions.Protocol"}
)
ABC_QNAMES: frozenset[str] = frozenset({"abc.ABC", "abc.ABCMeta"})

PROPERTY_DECORATORS: frozenset[str] = frozenset(
    {
        "property",
        "abstractproperty",
        "cached_property",
        "builtins.property",
        "abc.abstractproperty",
        "functools.cached_property",
    }
)

CONSTRUCTOR_NAMES: frozenset[str] = frozenset({"__init__", "__new__"})
IMPLICIT_FIRST_PARAMETERS: frozenset[str] = frozenset({"self", "cls", "mcs"})

# Annotation micro-grammar
EXCEPTION_TAG: str = "exception"
INHERITDOC_TAG: str = "inheritdoc"
CREF_ATTRIBUTE: str = "cref"
GET_MARKER: str = "Get."
SET_MARKER: str = "Set."
IGNORE_MARKER: str = "Ignore."
