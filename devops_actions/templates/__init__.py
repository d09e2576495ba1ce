"""Jinja2 templates for pull request bodies."""

from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined

PULL_REQUEST_FOR_ISSUE = "pull_request_for_issue.md.j2"
RELEASE_PULL_REQUEST = "release_pull_request.md.j2"

_environment = Environment(
    loader=PackageLoader("devops_actions", "templates"),
    undefined=StrictUndefined,
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render(template_name: str, **context: Any) -> str:
    """Render one of the bundled templates."""
    return _environment.get_template(template_name).render(**context)
