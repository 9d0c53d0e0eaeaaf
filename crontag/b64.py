"""
Base64 decoding of presentation format key material (RFC 3548)

Public keys in DNSKEY records are written in standard Base64. The decoder is
strict: unknown symbols, misplaced padding and incomplete groups are errors
rather than being skipped.
"""

from crontag.errors import InvalidBase64SymbolError, TruncatedBase64Error

ALPHABET = b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
PAD = ord("=")

# Maps from byte value to decoded 6-bit value
INV_ALPHABET = {symbol: value for value, symbol in enumerate(ALPHABET)}


def decode(text: str) -> bytes:
    """
    Decode a Base64 string into bytes

    Args:
        text: Base64 string without whitespace

    Returns:
        Decoded bytes

    Raises:
        InvalidBase64SymbolError: If a symbol is outside the alphabet or
            padding appears anywhere but the end of the final group
        TruncatedBase64Error: If the input is not a whole number of groups
    """
    data = text.encode("ascii", errors="replace")

    for i in range(0, len(data), 4):
        group = data[i : i + 4]
        for symbol in group:
            if symbol != PAD and symbol not in INV_ALPHABET:
                shown = group.decode("ascii", errors="replace")
                raise InvalidBase64SymbolError(f"Invalid Base64 symbol in {shown!r}")

    remainder = len(data) % 4
    if remainder:
        raise TruncatedBase64Error(
            f"Extra characters at end of Base64 data: {data[-remainder:].decode()!r}"
        )

    return decode_groups(data)


def decode_groups(data: bytes) -> bytes:
    """
    Decode validated Base64 data, 4 symbols at a time

    Args:
        data: Base64 symbols, a multiple of 4 long

    Returns:
        Decoded bytes
    """
    result = bytearray()
    last = len(data) - 4

    for i in range(0, len(data), 4):
        group = data[i : i + 4]
        padding = _padding(group, final=i == last)

        value = 0
        for symbol in group[: 4 - padding]:
            value = (value << 6) | INV_ALPHABET[symbol]
        value <<= 6 * padding

        # 4 symbols carry 24 bits; each padding symbol drops one byte
        result.extend(value.to_bytes(3, "big")[: 3 - padding])

    return bytes(result)


def _padding(group: bytes, final: bool) -> int:
    """Count trailing padding symbols, rejecting padding in any other place"""
    padding = len(group) - len(group.rstrip(b"="))
    if PAD in group[: 4 - padding] or padding > 2 or (padding and not final):
        raise InvalidBase64SymbolError(
            f"Misplaced Base64 padding in {group.decode('ascii')!r}"
        )
    return padding
