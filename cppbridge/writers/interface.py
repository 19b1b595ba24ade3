"""Generate the C ABI struct and C++ wrapper for a callback interface.

For an interface ``Listener`` two headers are produced:

``c_Listener.h``
    ``struct C_Listener``: an ``opaque`` context pointer, a deref function
    pointer and one ``void`` function pointer per method, each taking the
    method arguments followed by ``void *opaque``.

``Listener.hpp``
    ``class Listener`` inside the requested namespace: pure virtual
    methods, a ``to_c_interface`` factory filling ``C_Listener`` and
    private static trampolines that route each C call to the matching
    virtual method.

Both headers are rendered from the same argument lists in
:mod:`cppbridge.args`, so their parameter order always matches.

Ownership: ``to_c_interface`` takes an instance allocated with ``new``.
Whoever receives the ``C_Listener`` value owns it and must call
``C_Listener_deref(opaque)`` exactly once, which deletes the instance.
"""

from __future__ import annotations

import os
import re
from collections.abc import Sequence

from cppbridge.args import c_args_with_types, cpp_args_to_call_c, cpp_args_with_types
from cppbridge.codegen import CodeGen
from cppbridge.comments import format_doc_comments
from cppbridge.errors import GenerationError
from cppbridge.file_cache import update_files
from cppbridge.ir import BindingModule, InterfaceDescriptor, MethodDescriptor, MethodSignature

_NAMESPACE_RE = re.compile(r"[A-Za-z_]\w*(?:::[A-Za-z_]\w*)*")


def c_header_name(interface: InterfaceDescriptor) -> str:
    return f"c_{interface.name}.h"


def cpp_header_name(interface: InterfaceDescriptor) -> str:
    return f"{interface.name}.hpp"


def c_struct_name(interface: InterfaceDescriptor) -> str:
    return f"C_{interface.name}"


def deref_field_name(interface: InterfaceDescriptor) -> str:
    """Name of the deref function pointer inside the C struct."""
    return f"C_{interface.name}_deref"


def deref_trampoline_name(interface: InterfaceDescriptor) -> str:
    return f"c_{interface.name}_deref"


def trampoline_name(method: MethodDescriptor) -> str:
    return f"c_{method.name}"


def _pair_methods(
    interface: InterfaceDescriptor,
    signatures: Sequence[MethodSignature],
) -> list[tuple[MethodDescriptor, MethodSignature]]:
    """Pair each method with its signature.

    Refuses mismatched lengths, duplicate method names and methods whose
    field or trampoline would collide with the fixed struct members.
    """
    if len(interface.methods) != len(signatures):
        raise GenerationError(
            f"interface {interface.name!r} has {len(interface.methods)} methods "
            f"but {len(signatures)} signatures were supplied"
        )
    reserved = {"opaque", deref_field_name(interface)}
    seen: set[str] = set()
    deref = deref_trampoline_name(interface)
    for method in interface.methods:
        if method.name in seen:
            raise GenerationError(f"interface {interface.name!r} declares method {method.name!r} more than once")
        seen.add(method.name)
        if method.name in reserved:
            raise GenerationError(
                f"method {method.name!r} of interface {interface.name!r} clashes with the struct field {method.name}"
            )
        if trampoline_name(method) == deref:
            raise GenerationError(
                f"method {method.name!r} of interface {interface.name!r} clashes with the deref trampoline {deref}"
            )
    return list(zip(interface.methods, signatures, strict=True))


def _check_namespace(namespace: str) -> None:
    if not _NAMESPACE_RE.fullmatch(namespace):
        raise GenerationError(f"invalid C++ namespace: {namespace!r}")


# =============================================================================
# C struct
# =============================================================================


def interface_to_c_header(interface: InterfaceDescriptor, signatures: Sequence[MethodSignature]) -> str:
    """Render ``c_<Name>.h`` declaring ``struct C_<Name>``.

    :raises GenerationError: If methods and signatures are misaligned.
    """
    pairs = _pair_methods(interface, signatures)

    gen = CodeGen()
    gen.header_preamble()
    gen.line()
    gen.comment_block(format_doc_comments(interface.doc_comments, True))
    with gen.block(f"struct {c_struct_name(interface)} {{", "};"):
        gen.line("void *opaque;")
        gen.line("// called by the native side when the callback is no longer needed")
        gen.line(f"void (*{deref_field_name(interface)})(void *opaque);")
        for method, signature in pairs:
            gen.line()
            gen.comment_block(format_doc_comments(method.doc_comments, False))
            gen.line(f"void (*{method.name})({c_args_with_types(signature, True)}void *opaque);")
    return gen.output()


# =============================================================================
# C++ wrapper class
# =============================================================================


def interface_to_cpp_header(
    namespace: str,
    interface: InterfaceDescriptor,
    signatures: Sequence[MethodSignature],
) -> str:
    """Render ``<Name>.hpp`` with the abstract class and its trampolines.

    :raises GenerationError: If methods and signatures are misaligned or
        ``namespace`` is not a C++ (possibly qualified) identifier.
    """
    _check_namespace(namespace)
    pairs = _pair_methods(interface, signatures)
    name = interface.name
    c_struct = c_struct_name(interface)

    gen = CodeGen()
    gen.header_preamble()
    gen.line()
    gen.line("#include <cassert>")
    gen.line(f'#include "{c_header_name(interface)}"')
    gen.line()
    gen.line(f"namespace {namespace} {{")
    gen.comment_block(format_doc_comments(interface.doc_comments, True))
    gen.line(f"class {name} {{")
    gen.line("public:")
    gen.indent()
    gen.line(f"virtual ~{name}() {{}}")
    for method, signature in pairs:
        gen.line()
        gen.comment_block(format_doc_comments(method.doc_comments, False))
        gen.line(f"virtual void {method.name}({cpp_args_with_types(signature)}) = 0;")

    gen.line()
    gen.line("// @p must be allocated with new; ownership passes to the returned struct")
    gen.line(f"static {c_struct} to_c_interface({name} *p)")
    with gen.block("{"):
        gen.line("assert(p != nullptr);")
        gen.line(f"{c_struct} ret;")
        gen.line("ret.opaque = p;")
        gen.line(f"ret.{deref_field_name(interface)} = {deref_trampoline_name(interface)};")
        for method, _ in pairs:
            gen.line(f"ret.{method.name} = {trampoline_name(method)};")
        gen.line("return ret;")
    gen.dedent()

    gen.line()
    gen.line("private:")
    gen.indent()
    gen.line(f"static void {deref_trampoline_name(interface)}(void *opaque)")
    with gen.block("{"):
        gen.line(f"auto p = static_cast<{name} *>(opaque);")
        gen.line("delete p;")
    for method, signature in pairs:
        gen.line()
        gen.line(f"static void {trampoline_name(method)}({c_args_with_types(signature, True)}void *opaque)")
        with gen.block("{"):
            gen.line(f"auto p = static_cast<{name} *>(opaque);")
            gen.line("assert(p != nullptr);")
            gen.line(f"p->{method.name}({cpp_args_to_call_c(signature)});")
    gen.dedent()
    gen.line("};")
    gen.line(f"}} // namespace {namespace}")
    return gen.output()


def interface_to_headers(
    namespace: str,
    interface: InterfaceDescriptor,
    signatures: Sequence[MethodSignature],
) -> dict[str, str]:
    """Render both headers for ``interface``, C header first."""
    return {
        c_header_name(interface): interface_to_c_header(interface, signatures),
        cpp_header_name(interface): interface_to_cpp_header(namespace, interface, signatures),
    }


def generate_for_interface(
    output_dir: str | os.PathLike[str],
    namespace: str,
    interface: InterfaceDescriptor,
    signatures: Sequence[MethodSignature],
) -> tuple[bool, bool]:
    """Write ``c_<Name>.h`` and ``<Name>.hpp`` into ``output_dir``.

    Both headers are fully rendered before either is written.

    :returns: Whether the C header and the C++ header were rewritten.
    :raises GenerationError: On an invalid descriptor or a failed write.
    """
    files = interface_to_headers(namespace, interface, signatures)
    changed = update_files(output_dir, files)
    return changed[c_header_name(interface)], changed[cpp_header_name(interface)]


class InterfaceWriter:
    """Writer that generates C struct and C++ wrapper headers per interface.

    Options
    -------
    namespace : str | None
        C++ namespace for the generated classes. Defaults to the module's
        own namespace.

    Example
    -------
    ::

        from cppbridge.writers import get_writer

        files = get_writer("interface", namespace="app").write(module)
    """

    def __init__(self, namespace: str | None = None) -> None:
        self._namespace = namespace

    def write(self, module: BindingModule) -> dict[str, str]:
        """Render every interface of ``module``."""
        namespace = self._namespace or module.namespace
        files: dict[str, str] = {}
        for interface in module.interfaces:
            files.update(interface_to_headers(namespace, interface, module.signatures_for(interface)))
        return files

    @property
    def name(self) -> str:
        return "interface"

    @property
    def format_description(self) -> str:
        return "C callback structs with C++ wrapper classes"


from cppbridge.writers import register_writer  # noqa: E402

register_writer("interface", InterfaceWriter, description="C callback structs with C++ wrapper classes")
