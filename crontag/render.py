import jinja2

from crontag import DEFAULT_SCHEDULE
from crontag.anchors import TrustAnchors


def render_text(anchors: TrustAnchors) -> str:
    return "\n".join(anchors.queries())


def render_crontab(anchors: TrustAnchors, schedule: str = DEFAULT_SCHEDULE) -> str:
    env = jinja2.Environment(
        loader=jinja2.PackageLoader("crontag", "templates"),
        autoescape=jinja2.select_autoescape(),
        trim_blocks=True,
    )
    template = env.get_template("crontab.j2")
    return template.render(schedule=schedule, queries=list(anchors.queries()))
