"""
Parser for <meta accepts="..."> declarations

A template declares the shape of the content its callers may pass with an
accepts declaration. The grammar is a whitespace-separated list of items:

    [body]        the caller's whole child content (at most once)
    .name         a named part
    .name?        an optional named part

Examples:
    >>> signature_parse("[body]").body
    True
    >>> [part.name for part in signature_parse(".header .footer?").parts]
    ['header', 'footer']
"""

import re
from typing import List

from ..models.tags import ParameterPart, ParameterSignature


class SignatureError(Exception):
    """Raised when an accepts declaration is malformed"""
    pass


ITEM_PATTERN = re.compile(r"\[body\]|\.([A-Za-z_][\w-]*)(\?)?")


def signature_parse(source: str) -> ParameterSignature:
    """
    Parse an accepts declaration into a ParameterSignature

    Args:
        source: Declaration text from the accepts attribute

    Returns:
        Parsed signature

    Raises:
        SignatureError: On empty declarations, unknown items, repeated
                        [body] or repeated part names
    """
    if not source.strip():
        raise SignatureError("Empty accepts declaration")

    body = False
    parts: List[ParameterPart] = []
    seen = set()

    for item in source.split():
        match = ITEM_PATTERN.fullmatch(item)
        if not match:
            raise SignatureError(f"Unexpected {item!r} in accepts declaration {source!r}")

        if match.group(1) is None:
            if body:
                raise SignatureError(f"[body] repeated in accepts declaration {source!r}")
            body = True
            continue

        name = match.group(1)
        if name in seen:
            raise SignatureError(f"Part '.{name}' repeated in accepts declaration {source!r}")
        seen.add(name)
        parts.append(ParameterPart(name=name, optional=match.group(2) is not None))

    return ParameterSignature(source=source, body=body, parts=tuple(parts))
