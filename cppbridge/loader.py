"""Read and write binding descriptors as JSON.

The upstream parser/type resolver hands its results over in this format.
Each method entry carries its own arguments; loading splits them into the
interface's :class:`~cppbridge.ir.MethodDescriptor` list and the matching
:class:`~cppbridge.ir.MethodSignature` list, so the two stay aligned.

Example document::

    {
      "namespace": "app",
      "enums": [{"name": "Mode", "items": [{"name": "FAST"}, {"name": "SLOW"}]}],
      "interfaces": [
        {
          "name": "Listener",
          "methods": [{"name": "on_event", "args": [{"type": "int32_t"}]}]
        }
      ],
      "classes": [{"name": "Session"}]
    }
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from cppbridge.errors import GenerationError
from cppbridge.ir import (
    ArgumentType,
    BindingModule,
    ClassDescriptor,
    CppConverter,
    EnumDescriptor,
    EnumItem,
    InterfaceDescriptor,
    MethodDescriptor,
    MethodSignature,
)

# =============================================================================
# JSON -> IR
# =============================================================================


def _str(d: dict[str, Any], key: str) -> str:
    if not isinstance(d, dict):
        raise GenerationError(f"expected a JSON object with {key!r}, got {d!r}")
    if key not in d:
        raise GenerationError(f"missing key in descriptor: {key!r}")
    value = d[key]
    if not isinstance(value, str):
        raise GenerationError(f"{key} must be a string, got {value!r}")
    return value


def _doc_comments(d: dict[str, Any]) -> list[str]:
    docs = d.get("doc_comments", [])
    if not isinstance(docs, list) or not all(isinstance(line, str) for line in docs):
        raise GenerationError(f"doc_comments must be a list of strings, got {docs!r}")
    return list(docs)


def _argument_from_dict(d: dict[str, Any]) -> ArgumentType:
    conv = d.get("cpp_converter")
    converter = None
    if conv is not None:
        converter = CppConverter(typename=_str(conv, "typename"), input_converter=_str(conv, "input_converter"))
    return ArgumentType(name=_str(d, "type"), cpp_converter=converter)


def _enum_from_dict(d: dict[str, Any]) -> EnumDescriptor:
    items = [EnumItem(name=_str(item, "name"), doc_comments=_doc_comments(item)) for item in d.get("items", [])]
    return EnumDescriptor(name=_str(d, "name"), items=items, doc_comments=_doc_comments(d))


def _interface_from_dict(d: dict[str, Any]) -> tuple[InterfaceDescriptor, list[MethodSignature]]:
    methods: list[MethodDescriptor] = []
    signatures: list[MethodSignature] = []
    for m in d.get("methods", []):
        methods.append(MethodDescriptor(name=_str(m, "name"), doc_comments=_doc_comments(m)))
        signatures.append(MethodSignature(input=[_argument_from_dict(a) for a in m.get("args", [])]))
    return InterfaceDescriptor(name=_str(d, "name"), methods=methods, doc_comments=_doc_comments(d)), signatures


def module_from_dict(data: dict[str, Any], namespace: str | None = None) -> BindingModule:
    """Build a :class:`BindingModule` from a decoded JSON document.

    :param data: Decoded JSON object.
    :param namespace: Fallback namespace when the document has none.
    :raises GenerationError: If required keys are missing or malformed.
    """
    if not isinstance(data, dict):
        raise GenerationError(f"descriptor document must be a JSON object, got {type(data).__name__}")
    try:
        own_namespace = data.get("namespace")
        if own_namespace is not None and not isinstance(own_namespace, str):
            raise GenerationError(f"namespace must be a string, got {own_namespace!r}")
        module = BindingModule(namespace=own_namespace or namespace or "")
        module.enums = [_enum_from_dict(e) for e in data.get("enums", [])]
        for entry in data.get("interfaces", []):
            interface, signatures = _interface_from_dict(entry)
            if interface.name in module.signatures:
                raise GenerationError(f"duplicate interface {interface.name!r}")
            module.interfaces.append(interface)
            module.signatures[interface.name] = signatures
        module.classes = [ClassDescriptor(name=_str(c, "name")) for c in data.get("classes", [])]
    except KeyError as e:
        raise GenerationError(f"missing key in descriptor: {e}") from e
    except (TypeError, AttributeError) as e:
        raise GenerationError(f"malformed descriptor: {e}") from e
    return module


def load_module(path: str | os.PathLike[str], namespace: str | None = None) -> BindingModule:
    """Load a :class:`BindingModule` from a JSON file.

    :raises GenerationError: If the file cannot be read or parsed.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise GenerationError(f"cannot read {path}: {e}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise GenerationError(f"invalid JSON in {path}: {e}") from e
    return module_from_dict(data, namespace=namespace)


# =============================================================================
# IR -> JSON
# =============================================================================


def _argument_to_dict(arg: ArgumentType) -> dict[str, Any]:
    d: dict[str, Any] = {"type": arg.name}
    if arg.cpp_converter is not None:
        d["cpp_converter"] = {
            "typename": arg.cpp_converter.typename,
            "input_converter": arg.cpp_converter.input_converter,
        }
    return d


def module_to_dict(module: BindingModule) -> dict[str, Any]:
    """Convert a :class:`BindingModule` to a JSON-serializable dict."""
    interfaces: list[dict[str, Any]] = []
    for interface in module.interfaces:
        signatures = module.signatures_for(interface)
        if len(signatures) != len(interface.methods):
            raise GenerationError(f"interface {interface.name!r} has misaligned method signatures")
        methods = []
        for method, signature in zip(interface.methods, signatures, strict=True):
            methods.append(
                {
                    "name": method.name,
                    "doc_comments": list(method.doc_comments),
                    "args": [_argument_to_dict(a) for a in signature.input],
                }
            )
        interfaces.append({"name": interface.name, "doc_comments": list(interface.doc_comments), "methods": methods})

    return {
        "namespace": module.namespace,
        "enums": [
            {
                "name": e.name,
                "doc_comments": list(e.doc_comments),
                "items": [{"name": i.name, "doc_comments": list(i.doc_comments)} for i in e.items],
            }
            for e in module.enums
        ],
        "interfaces": interfaces,
        "classes": [{"name": c.name} for c in module.classes],
    }


def module_to_json(module: BindingModule, indent: int | None = 2) -> str:
    """Serialize a :class:`BindingModule` to a JSON string."""
    return json.dumps(module_to_dict(module), indent=indent)
