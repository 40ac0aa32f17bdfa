"""
Content sniffing for embedded invoice XML.

Two independent checks over raw bytes:
- is_likely_invoice_xml: loose OR-match on known indicators, used for selection
- is_structurally_valid: stricter AND-combination, advisory only
"""

from .config import (
    INVOICE_INDICATORS,
    NAMESPACE_URIS,
    ROOT_ELEMENTS,
    logger,
)


def matched_indicators(data: bytes) -> list[str]:
    """Return the indicators found in ``data`` (case-insensitive)."""
    if not data:
        return []

    content = data.lower()
    return [
        indicator for indicator in INVOICE_INDICATORS
        if indicator.encode("ascii") in content
    ]


def is_likely_invoice_xml(data: bytes) -> bool:
    """
    Check whether a byte blob is probably ZUGFeRD / Factur-X / XRechnung XML.

    A single indicator anywhere in the content is enough. Empty input is
    never accepted.
    """
    found = matched_indicators(data)
    for indicator in found:
        logger.debug(f"    Indicator found: {indicator}")
    return bool(found)


def is_structurally_valid(data: bytes) -> bool:
    """
    Stricter check used only for user-facing warnings.

    Requires an XML declaration, a known root element and a namespace
    declaration alongside one of the known namespace URIs.
    """
    if not data:
        return False

    has_xml_decl = b"<?xml" in data
    has_root_element = any(root.encode("ascii") in data for root in ROOT_ELEMENTS)
    has_namespace = b"xmlns:" in data and any(
        uri.encode("ascii") in data for uri in NAMESPACE_URIS
    )

    return has_xml_decl and has_root_element and has_namespace
