import pytest

from crontag.errors import ResolverConfigError
from crontag.resolver import SourceKind, bind_record, scan_bind, scan_unbound

UNBOUND_CONF = [
    "server:\n",
    '    directory: "/etc/unbound"\n',
    '    # trust-anchor-file: "ignored.key"\n',
    '    auto-trust-anchor-file: "root.key"\n',
    '    trust-anchor: "example.com. DS 12345 8 2 ABCD"  # inline\n',
    "    trust-anchor-file: /var/lib/unbound/other.key # comment\n",
    "    trusted-keys-file: keys.conf\n",
    "    verbosity: 1\n",
]

BIND_CONF = """
// comment with "quote
options { directory "/var/named"; };
trust-anchors {
    /* old key
       removed */
    "." initial-key 257 3 8 "AwEAAaz/tAm8yTn4Mfeh
        5eyI96WSVexTBAvkMgJz";  # comment
    example.com. static-ds 12345 8 2 "ABCD EF01";
};
trusted-keys {
    "example.net" 257 3 13 "tx8E//ZR";
};
"""


def test_scan_unbound():
    sources = list(scan_unbound(UNBOUND_CONF, "unbound.conf"))
    assert [(s.kind, s.value, s.lineno) for s in sources] == [
        (SourceKind.ZONEFILE, "/etc/unbound/root.key", 4),
        (SourceKind.RECORD, "example.com. DS 12345 8 2 ABCD", 5),
        (SourceKind.ZONEFILE, "/var/lib/unbound/other.key", 6),
        (SourceKind.BINDKEYS, "/etc/unbound/keys.conf", 7),
    ]
    assert {s.filename for s in sources} == {"unbound.conf"}


def test_scan_unbound_unterminated_quote():
    lines = ["server:\n", '  trust-anchor: "example.com. DS 1\n']
    with pytest.raises(ResolverConfigError) as exc:
        list(scan_unbound(lines, "u.conf"))
    assert str(exc.value).startswith("u.conf:2:")


def test_scan_bind():
    sources = list(scan_bind(BIND_CONF, "named.conf"))
    assert [(s.kind, s.value, s.lineno) for s in sources] == [
        (
            SourceKind.RECORD,
            ". IN DNSKEY 257 3 8 AwEAAaz/tAm8yTn4Mfeh5eyI96WSVexTBAvkMgJz",
            7,
        ),
        (SourceKind.RECORD, "example.com. IN DS 12345 8 2 ABCDEF01", 9),
        (SourceKind.RECORD, "example.net. IN DNSKEY 257 3 13 tx8E//ZR", 12),
    ]


def test_scan_bind_unknown_anchor_type():
    text = 'trust-anchors {\n  "." bogus-key 257 3 8 "AwEA";\n};\n'
    with pytest.raises(ResolverConfigError) as exc:
        list(scan_bind(text, "named.conf"))
    assert str(exc.value).startswith("named.conf:2:")


def test_bind_record_incomplete():
    with pytest.raises(ResolverConfigError):
        bind_record("trusted-keys", ["example.", "257", "3"])
    with pytest.raises(ResolverConfigError):
        bind_record("trust-anchors", ["example."])
