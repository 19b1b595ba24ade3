"""Intermediate Representation for callback interface and enum bindings.

The upstream parser/type-resolution stage produces these descriptors; the
writers in :mod:`cppbridge.writers` consume them. Descriptors are plain
values: writers read them and never keep references past a single call.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from cppbridge.errors import GenerationError

# Placeholder marking where the raw argument expression goes inside a
# conversion template, e.g. ``"std::string({from_var})"``.
FROM_VAR_TEMPLATE = "{from_var}"

# =============================================================================
# Enums
# =============================================================================


@dataclass
class EnumItem:
    """A single enumerator.

    :param name: Enumerator name as it appears in C.
    :param doc_comments: Raw documentation lines, decoration included.
    """

    name: str
    doc_comments: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return self.name


@dataclass
class EnumDescriptor:
    """A C enum. Items are numbered by position, starting at zero.

    :param name: Enum tag name.
    :param items: Enumerators in declaration order.
    :param doc_comments: Raw documentation lines for the enum itself.
    """

    name: str
    items: list[EnumItem] = field(default_factory=list)
    doc_comments: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"enum {self.name}"


# =============================================================================
# Callback interfaces
# =============================================================================


@dataclass
class MethodDescriptor:
    """A callback method of an interface.

    :param name: Method name, used for the C field, the C++ virtual and
        the ``c_<name>`` trampoline.
    :param doc_comments: Raw documentation lines.
    """

    name: str
    doc_comments: list[str] = field(default_factory=list)


@dataclass
class InterfaceDescriptor:
    """A callback interface: a named, ordered list of methods.

    :param name: Interface name. The C struct is ``C_<name>``.
    :param methods: Methods in declaration order.
    :param doc_comments: Raw documentation lines for the interface.
    """

    name: str
    methods: list[MethodDescriptor] = field(default_factory=list)
    doc_comments: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"interface {self.name}"


@dataclass
class CppConverter:
    """How a raw C argument is presented on the C++ side.

    :param typename: Type used in the C++ virtual method signature.
    :param input_converter: Expression template with exactly one
        :data:`FROM_VAR_TEMPLATE` placeholder for the raw argument.
    """

    typename: str
    input_converter: str


@dataclass
class ArgumentType:
    """Resolved type of one method argument.

    :param name: Raw C type name, used verbatim in C code.
    :param cpp_converter: Optional conversion rule for the C++ surface.
    """

    name: str
    cpp_converter: CppConverter | None = None

    def __str__(self) -> str:
        return self.name


@dataclass
class MethodSignature:
    """Resolved argument types of one method, in positional order."""

    input: list[ArgumentType] = field(default_factory=list)

    def __str__(self) -> str:
        return f"({', '.join(str(a) for a in self.input)})"


# =============================================================================
# Classes
# =============================================================================


@dataclass
class ClassDescriptor:
    """A non-interface foreign class, only referenced through an opaque handle."""

    name: str

    def c_class_type(self) -> str:
        """Name of the opaque C handle type for this class."""
        return f"{self.name}Opaque"


# =============================================================================
# Container
# =============================================================================


@dataclass
class BindingModule:
    """Everything generated into one output directory.

    :param namespace: C++ namespace wrapping the generated classes.
    :param enums: Enum descriptors.
    :param interfaces: Callback interface descriptors.
    :param signatures: Per-interface method signatures, keyed by interface
        name and positionally aligned with the interface's methods.
    :param classes: Opaque foreign classes.
    """

    namespace: str
    enums: list[EnumDescriptor] = field(default_factory=list)
    interfaces: list[InterfaceDescriptor] = field(default_factory=list)
    signatures: dict[str, list[MethodSignature]] = field(default_factory=dict)
    classes: list[ClassDescriptor] = field(default_factory=list)

    def signatures_for(self, interface: InterfaceDescriptor) -> list[MethodSignature]:
        """Return the method signatures resolved for ``interface``.

        :raises GenerationError: If no signatures were supplied for it.
        """
        try:
            return self.signatures[interface.name]
        except KeyError:
            raise GenerationError(f"no method signatures for interface {interface.name!r}") from None
