"""Client for the credentials service that maps people to their platform identities."""

import base64
import hashlib
import hmac

import requests
import structlog

from devops_actions.backend import CredentialStore
from devops_actions.errors import CredentialsError
from devops_actions.models import Credentials

logger = structlog.get_logger()


class CredentialsClient(CredentialStore):
    """Looks people up by email address or display name.

    Requests are ``GET <api_prefix><base64(lookup)>``, signed with an HMAC-SHA256 of the
    lookup value so the service can tell they came from us.
    """

    def __init__(
        self,
        api_prefix: str,
        secret: str,
        signature_header: str = "X-Credentials-Signature",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        if not api_prefix or not secret:
            raise ValueError("Credentials API prefix and secret required")
        self.api_prefix = api_prefix
        self.secret = secret
        self.signature_header = signature_header
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, lookup: str) -> str:
        encoded = base64.b64encode(lookup.encode("utf-8")).decode("ascii")
        return f"{self.api_prefix}{encoded}"

    def signature_for(self, lookup: str) -> str:
        digest = hmac.new(self.secret.encode("utf-8"), lookup.encode("utf-8"), hashlib.sha256).hexdigest()
        return f"sha256={digest}"

    def fetch(self, lookup: str) -> Credentials:
        logger.debug("Fetching credentials", lookup=lookup)
        response = self.session.get(
            self.url_for(lookup),
            headers={self.signature_header: self.signature_for(lookup)},
            timeout=self.timeout,
        )
        try:
            data = response.json()
        except ValueError:
            data = {}
        if response.status_code != 200 or data.get("status") != "ok":
            logger.debug("Credentials lookup failed", lookup=lookup, status_code=response.status_code)
            raise CredentialsError(f"Could not get credentials for the user {lookup}")

        return Credentials(
            email=data.get("email") or lookup,
            github_username=data.get("github_username", ""),
            github_token=data.get("github_token", ""),
            slack_id=data.get("slack_id", ""),
            jira_account_id=data.get("jira_account_id"),
        )
