import argparse
import fileinput
import io
import logging
import sys
import tomllib
from typing import List, Optional

from crontag import DEFAULT_SCHEDULE, DEFAULT_UNBOUND_CONF
from crontag.anchors import TrustAnchors
from crontag.errors import ZoneError
from crontag.render import render_crontab, render_text
from crontag.resolver import AnchorSource, SourceKind, scan_bind, scan_unbound
from crontag.utils import cmtimer, utf8_input
from crontag.zonefile import ZoneReader, read_zonefile

logger = logging.getLogger(__name__)

# resolver configuration leaves out TTL and class
RESOLVER_DEFAULTS = {"default_ttl": 0, "default_class": "IN"}


def load_zonefile(anchors: TrustAnchors, filename: str, **kwargs) -> None:
    with cmtimer("Reading %s", filename, logger=logger):
        count = anchors.add_records(read_zonefile(filename, **kwargs))
    logger.info("Found %d trust anchors in %s", count, filename)


def load_bind(anchors: TrustAnchors, filename: str) -> None:
    with open(filename, "rt", encoding="utf-8") as fp, utf8_input(filename):
        text = fp.read()
    for source in scan_bind(text, filename):
        load_source(anchors, source)


def load_unbound(anchors: TrustAnchors, filename: str) -> None:
    with fileinput.FileInput(files=(filename,), encoding="utf-8") as fp:
        with utf8_input(filename):
            sources = list(scan_unbound(fp, filename))
    if not sources:
        logger.warning("No trust anchors configured in %s", filename)
    for source in sources:
        load_source(anchors, source)


def load_source(anchors: TrustAnchors, source: AnchorSource) -> None:
    if source.kind is SourceKind.RECORD:
        reader = ZoneReader(
            io.StringIO(source.value),
            filename=source.filename,
            first_lineno=source.lineno or 1,
            **RESOLVER_DEFAULTS,
        )
        anchors.add_records(reader.records())
    elif source.kind is SourceKind.ZONEFILE:
        load_zonefile(anchors, source.value, **RESOLVER_DEFAULTS)
    elif source.kind is SourceKind.BINDKEYS:
        load_bind(anchors, source.value)


def load_config(filename: str, section: str) -> Optional[dict]:
    with open(filename, "rb") as fp:
        config = tomllib.load(fp)
    return config.get(section)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="DNSSEC trust anchor key tag queries")
    parser.add_argument(
        "zonefiles",
        metavar="zonefile",
        nargs="*",
        help="Zone file with DNSKEY or DS records, - for standard input",
    )
    parser.add_argument(
        "--origin",
        metavar="domain",
        help="Initial zone origin",
    )
    parser.add_argument(
        "--unbound",
        metavar="filename",
        nargs="?",
        const=DEFAULT_UNBOUND_CONF,
        help=f"Unbound configuration (default {DEFAULT_UNBOUND_CONF})",
    )
    parser.add_argument(
        "--bind",
        metavar="filename",
        action="append",
        help="BIND configuration or key file",
    )
    parser.add_argument(
        "--cron",
        metavar="schedule",
        nargs="?",
        const=DEFAULT_SCHEDULE,
        help=f"Output crontab entries (default {DEFAULT_SCHEDULE})",
    )
    parser.add_argument("--config-file", dest="config_file", type=str)
    parser.add_argument(
        "--config-section", dest="config_section", type=str, default="default"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debugging")
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    config = {}
    if args.config_file:
        try:
            config = load_config(args.config_file, args.config_section)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            parser.error(f"{args.config_file}: {exc}")
        if config is None:
            parser.error(f"No section {args.config_section} in {args.config_file}")

    zonefiles = args.zonefiles or config.get("zonefiles", [])
    origin = args.origin or config.get("origin", ".")
    unbound = args.unbound or config.get("unbound")
    bind = args.bind or config.get("bind", [])
    if isinstance(bind, str):
        bind = [bind]
    schedule = args.cron or config.get("cron")
    if schedule is True:
        schedule = DEFAULT_SCHEDULE

    if not (zonefiles or unbound or bind):
        zonefiles = ["-"]

    anchors = TrustAnchors()
    try:
        for filename in zonefiles:
            load_zonefile(anchors, filename, origin=origin)
        if unbound:
            load_unbound(anchors, unbound)
        for filename in bind:
            load_bind(anchors, filename)
    except (ZoneError, OSError) as exc:
        logger.error("%s", exc)
        sys.exit(1)

    logger.info("Found trust anchors for %d zones", len(anchors))

    if schedule:
        sys.stdout.write(render_crontab(anchors, schedule))
    elif output := render_text(anchors):
        print(output)


if __name__ == "__main__":
    main()
