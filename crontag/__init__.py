__version__ = "0.1.0"

MAX_TTL = 2**32 - 1

QUERY_PREFIX = "_ta"
QUERY_COMMAND = "dig -t null -c in"

DEFAULT_SCHEDULE = "@daily"
DEFAULT_UNBOUND_CONF = "/etc/unbound/unbound.conf"
