"""Class and type mnemonics, backed by the dnspython registries"""

from typing import Optional, Tuple

import dns.rdataclass
import dns.rdatatype

from crontag.errors import UnknownClassError, UnknownRecordTypeError


def lookup_class(text: str) -> Optional[Tuple[str, int]]:
    """Return (mnemonic, value) for a class token, or None if it is not one"""
    try:
        rdclass = dns.rdataclass.from_text(text)
    except dns.rdataclass.UnknownRdataclass:
        return None
    except ValueError as exc:
        # CLASS<n> outside 0-65535
        raise UnknownClassError(f"Unknown class {text}: {exc}") from exc
    return dns.rdataclass.to_text(rdclass), int(rdclass)


def lookup_type(text: str) -> Tuple[str, int]:
    try:
        rdtype = dns.rdatatype.from_text(text)
    except (dns.rdatatype.UnknownRdatatype, ValueError) as exc:
        raise UnknownRecordTypeError(f"Unknown record type {text}") from exc
    # meta and query types never appear in zone data
    if dns.rdatatype.is_metatype(rdtype):
        raise UnknownRecordTypeError(f"Meta type {text} is not a record type")
    return dns.rdatatype.to_text(rdtype), int(rdtype)
