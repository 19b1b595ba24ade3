"""Tests for the callback interface writer."""

from __future__ import annotations

import re
from pathlib import Path
from unittest.mock import patch

import pytest

from cppbridge.errors import GenerationError
from cppbridge.ir import (
    ArgumentType,
    BindingModule,
    CppConverter,
    InterfaceDescriptor,
    MethodDescriptor,
    MethodSignature,
)
from cppbridge.writers.interface import (
    InterfaceWriter,
    generate_for_interface,
    interface_to_c_header,
    interface_to_cpp_header,
    interface_to_headers,
)

LISTENER_C = """\
// Automatically generated by cppbridge
#pragma once

struct C_Listener {
    void *opaque;
    // called by the native side when the callback is no longer needed
    void (*C_Listener_deref)(void *opaque);

    void (*on_event)(int32_t a_0, void *opaque);
};
"""

LISTENER_CPP = """\
// Automatically generated by cppbridge
#pragma once

#include <cassert>
#include "c_Listener.h"

namespace app {
class Listener {
public:
    virtual ~Listener() {}

    virtual void on_event(int32_t a_0) = 0;

    // @p must be allocated with new; ownership passes to the returned struct
    static C_Listener to_c_interface(Listener *p)
    {
        assert(p != nullptr);
        C_Listener ret;
        ret.opaque = p;
        ret.C_Listener_deref = c_Listener_deref;
        ret.on_event = c_on_event;
        return ret;
    }

private:
    static void c_Listener_deref(void *opaque)
    {
        auto p = static_cast<Listener *>(opaque);
        delete p;
    }

    static void c_on_event(int32_t a_0, void *opaque)
    {
        auto p = static_cast<Listener *>(opaque);
        assert(p != nullptr);
        p->on_event(a_0);
    }
};
} // namespace app
"""


def _listener() -> tuple[InterfaceDescriptor, list[MethodSignature]]:
    iface = InterfaceDescriptor("Listener", [MethodDescriptor("on_event")])
    return iface, [MethodSignature([ArgumentType("int32_t")])]


def _observer() -> tuple[InterfaceDescriptor, list[MethodSignature]]:
    iface = InterfaceDescriptor(
        "Observer",
        [
            MethodDescriptor("on_start", ["/// Called once."]),
            MethodDescriptor("on_message", ["/// A message arrived.", "/// Text is UTF-8."]),
            MethodDescriptor("on_progress"),
        ],
        ["/// Receives session events."],
    )
    sigs = [
        MethodSignature(),
        MethodSignature(
            [
                ArgumentType("uint64_t"),
                ArgumentType("const char *", CppConverter("std::string", "std::string({from_var})")),
            ]
        ),
        MethodSignature([ArgumentType("char", CppConverter("bool", "{from_var} != 0"))]),
    ]
    return iface, sigs


class TestListenerScenario:
    def test_c_header(self) -> None:
        assert interface_to_c_header(*_listener()) == LISTENER_C

    def test_cpp_header(self) -> None:
        assert interface_to_cpp_header("app", *_listener()) == LISTENER_CPP


class TestCHeader:
    def test_field_count(self) -> None:
        result = interface_to_c_header(*_observer())
        fields = re.findall(r"^    void \(\*(\w+)\)\((.*)\);$", result, re.MULTILINE)
        assert [name for name, _ in fields] == ["C_Observer_deref", "on_start", "on_message", "on_progress"]
        assert all(params.endswith("void *opaque") for _, params in fields)

    def test_opaque_first(self) -> None:
        result = interface_to_c_header(*_observer())
        assert result.index("void *opaque;") < result.index("C_Observer_deref")

    def test_no_args_method(self) -> None:
        assert "    void (*on_start)(void *opaque);" in interface_to_c_header(*_observer())

    def test_c_uses_raw_types(self) -> None:
        result = interface_to_c_header(*_observer())
        assert "    void (*on_message)(uint64_t a_0, const char * a_1, void *opaque);" in result
        assert "std::string" not in result

    def test_docs(self) -> None:
        result = interface_to_c_header(*_observer())
        assert "#pragma once\n\n// Receives session events.\nstruct C_Observer {" in result
        assert "\n    // A message arrived.\n    // Text is UTF-8.\n    void (*on_message)" in result


class TestCppHeader:
    def test_virtuals_use_converted_types(self) -> None:
        result = interface_to_cpp_header("app", *_observer())
        assert "    virtual void on_start() = 0;" in result
        assert "    virtual void on_message(uint64_t a_0, std::string a_1) = 0;" in result
        assert "    virtual void on_progress(bool a_0) = 0;" in result

    def test_trampolines_use_c_types_and_convert(self) -> None:
        result = interface_to_cpp_header("app", *_observer())
        assert "    static void c_on_message(uint64_t a_0, const char * a_1, void *opaque)" in result
        assert "        p->on_message(a_0, std::string(a_1));" in result
        assert "    static void c_on_progress(char a_0, void *opaque)" in result
        assert "        p->on_progress(a_0 != 0);" in result
        assert "    static void c_on_start(void *opaque)" in result
        assert "        p->on_start();" in result

    def test_factory_binds_every_field(self) -> None:
        result = interface_to_cpp_header("app", *_observer())
        assigned = re.findall(r"^        ret\.(\w+) = (\w+);$", result, re.MULTILINE)
        assert assigned == [
            ("opaque", "p"),
            ("C_Observer_deref", "c_Observer_deref"),
            ("on_start", "c_on_start"),
            ("on_message", "c_on_message"),
            ("on_progress", "c_on_progress"),
        ]

    def test_method_order_preserved(self) -> None:
        result = interface_to_cpp_header("app", *_observer())
        positions = [result.index(f"virtual void {m}(") for m in ("on_start", "on_message", "on_progress")]
        assert positions == sorted(positions)

    def test_namespace_appears_once(self) -> None:
        result = interface_to_cpp_header("app", *_observer())
        assert result.count("namespace app {") == 1
        assert result.count("} // namespace app") == 1
        assert result.count("class Observer {") == 1
        assert result.index("namespace app {") < result.index("class Observer {")
        assert result.rstrip().endswith("} // namespace app")

    def test_nested_namespace(self) -> None:
        result = interface_to_cpp_header("app::cb", *_listener())
        assert "namespace app::cb {" in result
        assert "} // namespace app::cb" in result

    @pytest.mark.parametrize("namespace", ["", "1abc", "a b", "a::", "::a"])
    def test_invalid_namespace(self, namespace: str) -> None:
        with pytest.raises(GenerationError, match="invalid C\\+\\+ namespace"):
            interface_to_cpp_header(namespace, *_listener())

    def test_class_docs(self) -> None:
        result = interface_to_cpp_header("app", *_observer())
        assert "namespace app {\n// Receives session events.\nclass Observer {" in result


class TestAlignment:
    def test_too_few_signatures(self) -> None:
        iface, sigs = _observer()
        with pytest.raises(GenerationError, match="3 methods but 2 signatures"):
            interface_to_c_header(iface, sigs[:2])

    def test_too_many_signatures(self) -> None:
        iface, sigs = _listener()
        with pytest.raises(GenerationError, match="1 methods but 2 signatures"):
            interface_to_cpp_header("app", iface, sigs + [MethodSignature()])

    def test_deref_name_clash(self) -> None:
        iface = InterfaceDescriptor("Listener", [MethodDescriptor("Listener_deref")])
        with pytest.raises(GenerationError, match="clashes"):
            interface_to_c_header(iface, [MethodSignature()])

    @pytest.mark.parametrize("method_name", ["opaque", "C_L_deref"])
    def test_reserved_field_names(self, method_name: str) -> None:
        iface = InterfaceDescriptor("L", [MethodDescriptor(method_name)])
        with pytest.raises(GenerationError, match="clashes with the struct field"):
            interface_to_c_header(iface, [MethodSignature()])

    def test_duplicate_method_names(self) -> None:
        iface = InterfaceDescriptor("L", [MethodDescriptor("m"), MethodDescriptor("m")])
        with pytest.raises(GenerationError, match="declares method 'm' more than once"):
            interface_to_cpp_header("app", iface, [MethodSignature(), MethodSignature()])

    def test_bad_template_aborts(self) -> None:
        iface = InterfaceDescriptor("L", [MethodDescriptor("m")])
        sigs = [MethodSignature([ArgumentType("int", CppConverter("T", "T()"))])]
        with pytest.raises(GenerationError, match="exactly once"):
            interface_to_cpp_header("app", iface, sigs)


class TestGenerateForInterface:
    def test_writes_both_headers(self, tmp_path: Path) -> None:
        assert generate_for_interface(tmp_path, "app", *_listener()) == (True, True)
        assert (tmp_path / "c_Listener.h").read_text() == LISTENER_C
        assert (tmp_path / "Listener.hpp").read_text() == LISTENER_CPP

    def test_idempotent(self, tmp_path: Path) -> None:
        generate_for_interface(tmp_path, "app", *_listener())
        first = {p.name: p.read_text() for p in tmp_path.iterdir()}
        assert generate_for_interface(tmp_path, "app", *_listener()) == (False, False)
        assert {p.name: p.read_text() for p in tmp_path.iterdir()} == first

    def test_invalid_descriptor_writes_nothing(self, tmp_path: Path) -> None:
        iface, sigs = _observer()
        with pytest.raises(GenerationError):
            generate_for_interface(tmp_path, "app", iface, sigs[:1])
        assert list(tmp_path.iterdir()) == []

    def test_write_failure(self, tmp_path: Path) -> None:
        with patch("cppbridge.file_cache.os.replace", side_effect=OSError("denied")):
            with pytest.raises(GenerationError, match="write failed: denied"):
                generate_for_interface(tmp_path, "app", *_listener())


class TestInterfaceWriter:
    def _module(self) -> BindingModule:
        listener, listener_sigs = _listener()
        observer, observer_sigs = _observer()
        return BindingModule(
            "app",
            interfaces=[listener, observer],
            signatures={"Listener": listener_sigs, "Observer": observer_sigs},
        )

    def test_properties(self) -> None:
        writer = InterfaceWriter()
        assert writer.name == "interface"
        assert writer.format_description == "C callback structs with C++ wrapper classes"

    def test_write(self) -> None:
        files = InterfaceWriter().write(self._module())
        assert list(files) == ["c_Listener.h", "Listener.hpp", "c_Observer.h", "Observer.hpp"]
        assert files["Listener.hpp"] == LISTENER_CPP

    def test_namespace_override(self) -> None:
        files = InterfaceWriter(namespace="other").write(self._module())
        assert "namespace other {" in files["Listener.hpp"]

    def test_headers_pair(self) -> None:
        files = interface_to_headers("app", *_listener())
        assert files == {"c_Listener.h": LISTENER_C, "Listener.hpp": LISTENER_CPP}
