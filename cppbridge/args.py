"""Render method argument lists for the C struct and the C++ wrapper.

Arguments are positional and named ``a_0``, ``a_1``, ... in every form,
so the C function pointer, the C++ virtual method and the trampoline
between them always agree on order.
"""

from __future__ import annotations

from cppbridge.errors import GenerationError
from cppbridge.ir import FROM_VAR_TEMPLATE, ClassDescriptor, CppConverter, MethodSignature


def arg_name(index: int) -> str:
    """Generated identifier of the argument at ``index``."""
    return f"a_{index}"


def substitute_from_var(converter: CppConverter, var_name: str) -> str:
    """Insert ``var_name`` into a conversion template.

    The template must contain :data:`~cppbridge.ir.FROM_VAR_TEMPLATE`
    exactly once. Only that occurrence is replaced; the rest of the
    template is copied as is.

    :raises GenerationError: If the placeholder is missing or repeated.
    """
    parts = converter.input_converter.split(FROM_VAR_TEMPLATE)
    if len(parts) != 2:
        raise GenerationError(
            f"conversion template for {converter.typename!r} must contain {FROM_VAR_TEMPLATE} "
            f"exactly once, found {len(parts) - 1}: {converter.input_converter!r}"
        )
    return f"{parts[0]}{var_name}{parts[1]}"


def c_args_with_types(signature: MethodSignature, append_comma_if_not_empty: bool) -> str:
    """C parameter list using raw type names, e.g. ``"int32_t a_0, char a_1"``.

    :param append_comma_if_not_empty: Append ``", "`` when there is at least
        one argument, so a trailing parameter can follow directly.
    """
    buf = ", ".join(f"{arg.name} {arg_name(i)}" for i, arg in enumerate(signature.input))
    if buf and append_comma_if_not_empty:
        buf += ", "
    return buf


def cpp_args_with_types(signature: MethodSignature) -> str:
    """C++ parameter list; converted arguments use the converter's type."""
    parts: list[str] = []
    for i, arg in enumerate(signature.input):
        typename = arg.cpp_converter.typename if arg.cpp_converter is not None else arg.name
        parts.append(f"{typename} {arg_name(i)}")
    return ", ".join(parts)


def cpp_args_to_call_c(signature: MethodSignature) -> str:
    """Argument expressions a trampoline passes to the virtual method."""
    parts: list[str] = []
    for i, arg in enumerate(signature.input):
        if arg.cpp_converter is not None:
            parts.append(substitute_from_var(arg.cpp_converter, arg_name(i)))
        else:
            parts.append(arg_name(i))
    return ", ".join(parts)


def c_class_type(class_info: ClassDescriptor) -> str:
    """Opaque C handle type for a foreign class."""
    return class_info.c_class_type()
