"""Byte transformations applied to file content during a rewrite.

A transform is any callable taking the original bytes and returning the
replacement bytes.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass, field

Transform = Callable[[bytes], bytes]


@dataclass(frozen=True)
class Substitution:
    """Replace occurrences of ``pattern`` with ``replacement``.

    Attributes:
        pattern: Literal bytes, or a regular expression when ``regex`` is set
        replacement: Replacement bytes (may use group references when ``regex`` is set)
        regex: Treat ``pattern`` as a regular expression
        count: Maximum number of replacements, 0 for all

    Example:
        >>> Substitution(b"is", b"was")(b"This is a test")
        b'Thwas was a test'
    """

    pattern: bytes
    replacement: bytes
    regex: bool = False
    count: int = 0
    _compiled: re.Pattern[bytes] | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.count < 0:
            raise ValueError(f"count must be >= 0, got {self.count}")
        if not self.pattern:
            raise ValueError("pattern cannot be empty")
        if self.regex:
            object.__setattr__(self, "_compiled", re.compile(self.pattern))

    def __call__(self, data: bytes) -> bytes:
        if self._compiled is not None:
            return self._compiled.sub(self.replacement, data, count=self.count)
        return data.replace(self.pattern, self.replacement, self.count or -1)


def compose(*transforms: Transform) -> Transform:
    """Chain transforms left to right into a single transform."""

    def _composed(data: bytes) -> bytes:
        for transform in transforms:
            data = transform(data)
        return data

    return _composed
