import logging
import re
import struct
from typing import Optional

import dns.rdataclass
import dns.rdatatype
from dns.dnssectypes import Algorithm

from crontag import b64
from crontag.errors import Base64Error, RecordDataError
from crontag.zonefile import ResourceRecord

logger = logging.getLogger(__name__)

DIGITS_RE = re.compile(r"[0-9]+")
WHITESPACE_RE = re.compile(r"\s+")


def key_tag(rdata: bytes) -> int:
    """Key tag of DNSKEY RDATA in wire format (RFC 4034, Appendix B)"""
    if len(rdata) > 4 and rdata[3] == Algorithm.RSAMD5:
        # Appendix B.1: bits 16-31 of the low 24 bits of the modulus
        return (rdata[-3] << 8) | rdata[-2]

    acc = 0
    for i, byte in enumerate(rdata):
        acc += byte if i & 1 else byte << 8
    acc += (acc >> 16) & 0xFFFF
    return acc & 0xFFFF


def _number(record: ResourceRecord, index: int, maximum: int, what: str) -> int:
    if index >= len(record.rdata):
        raise RecordDataError(
            f"{record.rdtype} record for {record.name} has no {what}", record.lineno
        )
    text = record.rdata[index]
    if not DIGITS_RE.fullmatch(text) or int(text) > maximum:
        raise RecordDataError(
            f"Bad {what} {text!r} in {record.rdtype} record for {record.name}",
            record.lineno,
        )
    return int(text)


def generic_rdata(record: ResourceRecord) -> Optional[bytes]:
    """RDATA given in RFC 3597 form: \\# <length> <hex>"""
    if not record.rdata or record.rdata[0] != "#":
        return None
    length = _number(record, 1, 0xFFFF, "RDATA length")
    try:
        data = bytes.fromhex("".join(record.rdata[2:]))
    except ValueError as exc:
        raise RecordDataError(
            f"Bad hex RDATA in {record.rdtype} record for {record.name}",
            record.lineno,
        ) from exc
    if len(data) != length:
        raise RecordDataError(
            f"RDATA length {length} does not match {len(data)} bytes of data",
            record.lineno,
        )
    return data


def dnskey_rdata(record: ResourceRecord) -> bytes:
    if (data := generic_rdata(record)) is not None:
        return data

    flags = _number(record, 0, 0xFFFF, "flags")
    protocol = _number(record, 1, 0xFF, "protocol")
    algorithm = _number(record, 2, 0xFF, "algorithm")
    key = WHITESPACE_RE.sub("", "".join(record.rdata[3:]))
    try:
        public_key = b64.decode(key)
    except Base64Error as exc:
        exc.lineno = record.lineno
        raise
    return struct.pack("!HBB", flags, protocol, algorithm) + public_key


def ds_key_tag(record: ResourceRecord) -> int:
    if (data := generic_rdata(record)) is not None:
        if len(data) < 2:
            raise RecordDataError(
                f"DS record for {record.name} is too short", record.lineno
            )
        return struct.unpack("!H", data[:2])[0]
    return _number(record, 0, 0xFFFF, "key tag")


def record_key_tag(record: ResourceRecord) -> Optional[int]:
    """Key tag of an IN DNSKEY or DS record, None for anything else"""
    if record.rdclass_value != dns.rdataclass.IN:
        return None
    if record.rdtype_value == dns.rdatatype.DNSKEY:
        tag = key_tag(dnskey_rdata(record))
    elif record.rdtype_value == dns.rdatatype.DS:
        tag = ds_key_tag(record)
    else:
        return None
    logger.debug(
        "%s %s keytag=%d (line %d)", record.name, record.rdtype, tag, record.lineno
    )
    return tag
