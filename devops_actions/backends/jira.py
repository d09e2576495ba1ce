"""Jira REST API backend implementation using requests."""

from typing import Any

import requests
import structlog

from devops_actions.backend import IssueTracker
from devops_actions.errors import ActionError
from devops_actions.models import Assignee, Issue

logger = structlog.get_logger()


class JiraTracker(IssueTracker):
    """Jira Cloud issue tracker."""

    def __init__(
        self,
        host: str,
        email: str,
        token: str,
        repository_field: str = "customfield_10100",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize Jira backend.

        Args:
            host: Jira host name, e.g. example.atlassian.net
            email: Email address of the API user
            token: API token of the API user
            repository_field: Custom field holding the GitHub repository name
            timeout: HTTP timeout in seconds
            session: Session to reuse
        """
        if not host or not token:
            raise ValueError("Jira host and token required")
        self.host = host
        self.base_url = f"https://{host}"
        self.repository_field = repository_field
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = (email, token)
        self.session.headers.update({"Accept": "application/json"})
        logger.debug("Jira backend initialized", host=host)

    def _get(self, path: str, params: dict[str, Any] | None = None) -> requests.Response:
        return self.session.get(f"{self.base_url}{path}", params=params or {}, timeout=self.timeout)

    def _parse_repository(self, value: Any) -> str | None:
        # Select fields come back as {"value": "my-repo"}, text fields as plain strings.
        if isinstance(value, dict):
            value = value.get("value") or value.get("name")
        return value or None

    def _to_issue(self, data: dict[str, Any]) -> Issue:
        fields = data.get("fields") or {}
        assignee = None
        if fields.get("assignee"):
            assignee = Assignee(
                display_name=fields["assignee"].get("displayName", ""),
                email=fields["assignee"].get("emailAddress") or None,
            )
        return Issue(
            id=str(data["id"]),
            key=data["key"],
            summary=fields.get("summary") or "",
            description=fields.get("description") or "",
            status=(fields.get("status") or {}).get("name", ""),
            issue_type=(fields.get("issuetype") or {}).get("name", ""),
            assignee=assignee,
            subtasks=[subtask["key"] for subtask in fields.get("subtasks") or []],
            repository=self._parse_repository(fields.get(self.repository_field)),
        )

    def get_issue(self, key: str) -> Issue | None:
        logger.debug("Fetching Jira issue", issue_key=key)
        response = self._get(f"/rest/api/2/issue/{key}")
        if response.status_code == 404:
            logger.debug("Jira issue not found", issue_key=key)
            return None
        response.raise_for_status()
        return self._to_issue(response.json())

    def set_issue_status(self, issue_id: str, status: str) -> None:
        """Apply the workflow transition that leads to the named status."""
        logger.debug("Fetching Jira transitions", issue_id=issue_id)
        response = self._get(f"/rest/api/2/issue/{issue_id}/transitions")
        response.raise_for_status()
        transitions = response.json().get("transitions", [])

        transition = next(
            (t for t in transitions if (t.get("to") or {}).get("name") == status or t.get("name") == status),
            None,
        )
        if transition is None:
            available = [(t.get("to") or {}).get("name", t.get("name")) for t in transitions]
            raise ActionError(f"Jira issue {issue_id} cannot be moved to '{status}' (available: {available})")

        logger.debug("Transitioning Jira issue", issue_id=issue_id, transition=transition["id"], status=status)
        response = self.session.post(
            f"{self.base_url}/rest/api/2/issue/{issue_id}/transitions",
            json={"transition": {"id": transition["id"]}},
            timeout=self.timeout,
        )
        response.raise_for_status()

    def get_pull_request_numbers(self, issue_id: str) -> list[int]:
        """Open pull requests linked to an issue through the GitHub integration."""
        logger.debug("Fetching linked pull requests", issue_id=issue_id)
        response = self._get(
            "/rest/dev-status/latest/issue/detail",
            params={"issueId": issue_id, "applicationType": "GitHub", "dataType": "pullrequest"},
        )
        response.raise_for_status()

        numbers: list[int] = []
        for detail in response.json().get("detail", []):
            for pull_request in detail.get("pullRequests", []):
                if pull_request.get("status") != "OPEN":
                    continue
                number = str(pull_request.get("id", "")).lstrip("#")
                if number.isdigit():
                    numbers.append(int(number))
        logger.debug("Linked pull requests", issue_id=issue_id, numbers=numbers)
        return numbers
