from collections import defaultdict
from typing import Dict, Iterable, Iterator, List

from crontag import QUERY_COMMAND, QUERY_PREFIX
from crontag.keytag import record_key_tag
from crontag.zonefile import ResourceRecord


def format_tags(tags: Iterable[int]) -> str:
    return "-".join([QUERY_PREFIX] + [f"{tag:04x}" for tag in sorted(set(tags))])


def zone_suffix(name: str) -> str:
    return name[:-1] if name.endswith(".") else name


def query_name(name: str, tags: Iterable[int]) -> str:
    return f"{format_tags(tags)}.{zone_suffix(name)}"


def query_command(name: str, tags: Iterable[int]) -> str:
    return f"{QUERY_COMMAND} {query_name(name, tags)}"


class TrustAnchors:
    """Key tags collected per zone, across all inputs"""

    def __init__(self):
        self.tags: Dict[str, List[int]] = defaultdict(list)

    def __len__(self) -> int:
        return len(self.tags)

    def add(self, name: str, tag: int) -> None:
        self.tags[name.lower()].append(tag)

    def add_records(self, records: Iterable[ResourceRecord]) -> int:
        count = 0
        for record in records:
            tag = record_key_tag(record)
            if tag is not None:
                self.add(record.name, tag)
                count += 1
        return count

    def queries(self) -> Iterator[str]:
        for name, tags in self.tags.items():
            if tags:
                yield query_command(name, tags)
