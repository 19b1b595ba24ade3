"""Writers that turn cppbridge IR into generated headers.

Each writer converts a whole :class:`~cppbridge.ir.BindingModule` into a
mapping of file name to file text. Nothing is written to disk here; see
:mod:`cppbridge.generator` and :mod:`cppbridge.file_cache`.

Available Writers
-----------------
enum
    One C header (``c_<Name>.h``) per enum.
interface
    A C struct header (``c_<Name>.h``) and a C++ wrapper header
    (``<Name>.hpp``) per callback interface.

Example
-------
::

    from cppbridge.writers import get_writer, list_writers

    writer = get_writer("interface", namespace="app")
    files = writer.write(module)

    for name in list_writers():
        print(name)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from cppbridge.ir import BindingModule

__all__ = [
    "WriterBackend",
    "get_writer",
    "get_writer_info",
    "is_writer_available",
    "list_writers",
    "register_writer",
]

# =============================================================================
# Writer Protocol
# =============================================================================


@runtime_checkable
class WriterBackend(Protocol):
    """Protocol defining the interface for header writers.

    Writer-specific options (e.g. the C++ namespace) are constructor
    parameters on the concrete class, not part of the write() signature.
    """

    def write(self, module: BindingModule) -> dict[str, str]:
        """Render the module's declarations handled by this writer.

        :param module: Descriptors produced by the upstream stage.
        :returns: Mapping of output file name to complete file text.
        :raises GenerationError: If a descriptor cannot be rendered.
        """
        ...

    @property
    def name(self) -> str:
        """Registry name of this writer (e.g., ``"enum"``)."""
        ...

    @property
    def format_description(self) -> str:
        """Short description of the output format."""
        ...


# =============================================================================
# Writer Registry
# =============================================================================

# Writers are registered lazily by importing their modules
_WRITER_REGISTRY: dict[str, type[WriterBackend]] = {}
_WRITER_DESCRIPTIONS: dict[str, str] = {}
_WRITERS_LOADED: bool = False


def register_writer(
    name: str,
    writer_class: type[WriterBackend],
    description: str | None = None,
) -> None:
    """Register a header writer.

    Called by writer modules during import to self-register.

    :param name: Writer name used in :func:`get_writer` lookups.
    :param writer_class: The writer class implementing :class:`WriterBackend`.
    :param description: Optional short description for :func:`get_writer_info`.
        If not provided, falls back to the class docstring's first line.
    """
    if name in _WRITER_REGISTRY:
        raise ValueError(f"Writer already registered: {name!r}")
    _WRITER_REGISTRY[name] = writer_class
    if description is not None:
        _WRITER_DESCRIPTIONS[name] = description
    elif writer_class.__doc__:
        _WRITER_DESCRIPTIONS[name] = writer_class.__doc__.strip().split("\n")[0]


def list_writers() -> list[str]:
    """List names of all registered writers, in registration order."""
    _ensure_writers_loaded()
    return list(_WRITER_REGISTRY.keys())


def is_writer_available(name: str) -> bool:
    """Check if a writer is registered under ``name``."""
    _ensure_writers_loaded()
    return name in _WRITER_REGISTRY


def get_writer_info() -> list[dict[str, str]]:
    """Get name and description of every registered writer.

    :returns: List of dicts with keys: name, description.
    """
    _ensure_writers_loaded()
    return [{"name": name, "description": _WRITER_DESCRIPTIONS.get(name, "")} for name in _WRITER_REGISTRY]


def get_writer(name: str, **kwargs: object) -> WriterBackend:
    """Get a writer instance.

    Keyword arguments are forwarded to the writer constructor::

        writer = get_writer("interface", namespace="app")

    :param name: Writer name.
    :param kwargs: Forwarded to writer class constructor.
    :returns: New instance of the requested writer.
    :raises ValueError: If the requested writer is not available.
    """
    _ensure_writers_loaded()
    if name not in _WRITER_REGISTRY:
        available = ", ".join(_WRITER_REGISTRY.keys()) or "(none)"
        raise ValueError(f"Unknown writer: {name!r}. Available: {available}")
    return _WRITER_REGISTRY[name](**kwargs)


def _ensure_writers_loaded() -> None:
    """Lazily import writer modules to populate the registry.

    The writer modules import :func:`register_writer` from here at load
    time, so they can only be imported once this module is initialised.
    """
    global _WRITERS_LOADED  # pylint: disable=global-statement

    if _WRITERS_LOADED:
        return

    _WRITERS_LOADED = True

    # Import triggers module-level registration
    import cppbridge.writers.enum  # noqa: F401
    import cppbridge.writers.interface  # noqa: F401
