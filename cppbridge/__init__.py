"""cppbridge - C ABI callback structs and C++ wrappers from interface descriptors."""

from cppbridge.args import (
    c_args_with_types,
    c_class_type,
    cpp_args_to_call_c,
    cpp_args_with_types,
)
from cppbridge.comments import format_doc_comments, strip_doc_comment_decoration
from cppbridge.config import GeneratorConfig
from cppbridge.errors import GenerationError
from cppbridge.file_cache import FileWriteCache
from cppbridge.generator import GenerationResult, Generator
from cppbridge.ir import (
    FROM_VAR_TEMPLATE,
    ArgumentType,
    # Container
    BindingModule,
    ClassDescriptor,
    CppConverter,
    # Enums
    EnumDescriptor,
    EnumItem,
    # Interfaces
    InterfaceDescriptor,
    MethodDescriptor,
    MethodSignature,
)
from cppbridge.loader import load_module, module_from_dict, module_to_json
from cppbridge.writers import (
    WriterBackend,
    get_writer,
    get_writer_info,
    is_writer_available,
    list_writers,
    register_writer,
)
from cppbridge.writers.enum import enum_to_c_header, generate_code_for_enum
from cppbridge.writers.interface import (
    generate_for_interface,
    interface_to_c_header,
    interface_to_cpp_header,
)

__all__ = [
    # IR
    "FROM_VAR_TEMPLATE",
    "EnumItem",
    "EnumDescriptor",
    "MethodDescriptor",
    "InterfaceDescriptor",
    "CppConverter",
    "ArgumentType",
    "MethodSignature",
    "ClassDescriptor",
    "BindingModule",
    # Errors
    "GenerationError",
    # Formatters
    "format_doc_comments",
    "strip_doc_comment_decoration",
    "c_args_with_types",
    "cpp_args_with_types",
    "cpp_args_to_call_c",
    "c_class_type",
    # Emitters
    "enum_to_c_header",
    "generate_code_for_enum",
    "interface_to_c_header",
    "interface_to_cpp_header",
    "generate_for_interface",
    # Output
    "FileWriteCache",
    "Generator",
    "GenerationResult",
    "GeneratorConfig",
    # JSON
    "load_module",
    "module_from_dict",
    "module_to_json",
    # Writer API
    "WriterBackend",
    "get_writer",
    "get_writer_info",
    "is_writer_available",
    "list_writers",
    "register_writer",
]
