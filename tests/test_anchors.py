import io

from crontag.anchors import TrustAnchors, format_tags, query_name, zone_suffix
from crontag.zonefile import ZoneReader


def test_format_tags():
    assert format_tags([0x4F66, 0x4A5C]) == "_ta-4a5c-4f66"
    assert format_tags([5, 5]) == "_ta-0005"


def test_zone_suffix():
    assert zone_suffix("example.com.") == "example.com"
    assert zone_suffix(".") == ""
    assert query_name(".", [20326]) == "_ta-4f66."


def test_duplicate_tags_collapse():
    anchors = TrustAnchors()
    anchors.add("example.", 5)
    anchors.add("example.", 5)
    assert list(anchors.queries()) == ["dig -t null -c in _ta-0005.example"]


def test_tags_are_sorted():
    anchors = TrustAnchors()
    anchors.add("example.", 10)
    anchors.add("Example.", 5)
    assert len(anchors) == 1
    assert list(anchors.queries()) == ["dig -t null -c in _ta-0005-000a.example"]


def test_add_records(com_ksk):
    zone = (
        ". 3600 IN DS 12345 8 2 49AAC11D7B6F6446\n"
        f"com. 3600 IN DNSKEY 257 3 13 {com_ksk}\n"
        "com. 3600 IN NS a.gtld-servers.net.\n"
        "com. 3600 IN DS 19718 13 2 8ACBB0CD\n"
    )
    anchors = TrustAnchors()
    assert anchors.add_records(ZoneReader(io.StringIO(zone)).records()) == 3
    assert list(anchors.queries()) == [
        "dig -t null -c in _ta-3039.",
        "dig -t null -c in _ta-4d06.com",
    ]
