"""Error type raised by cppbridge."""

from __future__ import annotations


class GenerationError(Exception):
    """Generation of an enum or interface binding failed.

    Covers malformed descriptors as well as failures while writing the
    generated headers. The message is a human-readable cause; for write
    failures the original :class:`OSError` is chained as ``__cause__``.
    """
