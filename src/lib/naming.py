"""
Identifier derivation for generated programs

Generated constructors are named after the module they come from, and tag
or attribute aliases become module-level variables. Both derivations must be
stable across compilations of the same input.
"""

import re

from .markup import MIME_HTML, MIME_XML


SUFFIX_LENGTHS = {
    MIME_XML: len(".xml"),
    MIME_HTML: len(".html"),
}

WORD_PATTERN = re.compile(r"[^\W\d_]+|\d+")


def displayName_derive(path: str, mime_type: str) -> str:
    """
    Derive the constructor display name from a module path

    Strips the markup suffix for the mime type, keeps the final '#' or '/'
    segment, splits it into words at non-alphanumerics and letter/digit
    boundaries, and capitalizes each word. Names that would not start with
    an uppercase letter get a leading underscore.

    Args:
        path: Identifying path of the module
        mime_type: "text/html" or "application/xml"

    Returns:
        Display name

    Raises:
        ValueError: For an unsupported mime type

    Example:
        >>> displayName_derive("widgets/my-button.html", "text/html")
        'MyButton'
        >>> displayName_derive("9lives.xml", "application/xml")
        '_9Lives'
    """
    if mime_type not in SUFFIX_LENGTHS:
        raise ValueError(f"Can't derive a name for type {mime_type!r}")

    stem = path[: len(path) - SUFFIX_LENGTHS[mime_type]]
    segment = re.split(r"[#/]", stem)[-1]
    name = "".join(word[:1].upper() + word[1:].lower() for word in WORD_PATTERN.findall(segment))
    if not re.match(r"[A-Z]", name):
        name = "_" + name
    return name


def variable_make(name: str, prefix: str = "$") -> str:
    """
    Module-level variable holding a required tag or attribute module

    Example:
        >>> variable_make("MY-BUTTON")
        '$MY_BUTTON'
    """
    return prefix + re.sub(r"[^\w$]", "_", name)
