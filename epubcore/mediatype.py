"""Parsed MIME values for manifest ``media-type`` attributes.

Only the syntax matters here (``type "/" subtype ["+" suffix] *(";" param)``);
no registry lookup is performed, so ``image/x-made-up`` parses fine while
``image`` or ``image/png;`` do not.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from .errors import InvalidMimeTypeError

__all__ = ["MediaType", "parse_media_type"]

# RFC 7230 token characters
_TOKEN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_TOKEN_RE = re.compile(rf"^{_TOKEN}$")
# one ";name=value" parameter; value is a token or a quoted string
_PARAM_RE = re.compile(rf'\s*;\s*({_TOKEN})\s*=\s*({_TOKEN}|"(?:[^"\\]|\\.)*")\s*')
_QUOTED_PAIR_RE = re.compile(r"\\(.)")


@dataclass(frozen=True)
class MediaType:
    type: str
    subtype: str
    suffix: Optional[str] = None
    params: Dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    @property
    def essence(self) -> str:
        """``type/subtype[+suffix]`` without parameters."""
        sub = f"{self.subtype}+{self.suffix}" if self.suffix else self.subtype
        return f"{self.type}/{sub}"

    def __str__(self) -> str:
        params = "".join(f"; {k}={v}" for k, v in self.params.items())
        return self.essence + params


def parse_media_type(value: str) -> MediaType:
    """Parse *value* into a :class:`MediaType` or raise :class:`InvalidMimeTypeError`."""
    if value is None:
        raise InvalidMimeTypeError("", "empty value")
    head, sep, rest = value.partition(";")
    head = head.strip()
    if "/" not in head:
        raise InvalidMimeTypeError(value, "missing '/'")
    type_, _, full_subtype = head.partition("/")
    if not _TOKEN_RE.match(type_) or not _TOKEN_RE.match(full_subtype):
        raise InvalidMimeTypeError(value, "type and subtype must be tokens")

    subtype, suffix = full_subtype, None
    if "+" in full_subtype:
        # only the last '+' starts the structured-syntax suffix
        subtype, _, suffix = full_subtype.rpartition("+")
        if not subtype or not suffix:
            raise InvalidMimeTypeError(value, "empty subtype or suffix")

    params: Dict[str, str] = {}
    pos, tail = 0, sep + rest
    while pos < len(tail):
        m = _PARAM_RE.match(tail, pos)
        if m is None:
            raise InvalidMimeTypeError(value, f"bad parameter {tail[pos:].strip()!r}")
        name, val = m.group(1).lower(), m.group(2)
        if val.startswith('"'):
            val = _QUOTED_PAIR_RE.sub(r"\1", val[1:-1])
        params[name] = val
        pos = m.end()

    return MediaType(
        type=type_.lower(),
        subtype=subtype.lower(),
        suffix=suffix.lower() if suffix else None,
        params=params,
    )
