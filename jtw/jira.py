"""Utility functions for interacting with the Jira REST API."""
import logging

import httpx

from .config import AppConfig
from .errors import JtwError, SubmissionFailure, TransportFailure
from .models import JiraIssue, NotAssigned, ValidationResult, WorklogEntry

logger = logging.getLogger(__name__)

API = "/rest/api/2"
VPN_HINT = "Check that the VPN is connected and the Jira URL is right (jt setup)"


def format_time_spent(hours: float) -> str:
    """Render hours the way Jira expects timeSpent, e.g. 1.5 -> "1h 30m"."""
    h, m = divmod(round(hours * 60), 60)
    parts = []
    if h:
        parts.append(f"{h}h")
    if m:
        parts.append(f"{m}m")
    return " ".join(parts) or "1m"


def format_started(entry_date: str) -> str:
    return f"{entry_date}T10:00:00.000+0000"


def _error_text(r: httpx.Response) -> str:
    try:
        data = r.json()
    except ValueError:
        return r.text[:200]
    if not isinstance(data, dict):
        return r.text[:200]
    messages = list(data.get("errorMessages") or [])
    messages += [f"{field}: {msg}" for field, msg in (data.get("errors") or {}).items()]
    return "; ".join(messages) or r.text[:200]


class JiraClient:
    def __init__(
        self,
        url: str,
        username: str,
        password: str,
        project_key: str,
        *,
        transport: httpx.BaseTransport | None = None,
        timeout: float = 30,
    ):
        self.project_key = project_key
        # On-premise Jira often runs with a self-signed certificate
        self.client = httpx.Client(
            base_url=url.rstrip("/"),
            auth=(username, password),
            headers={"Accept": "application/json"},
            timeout=timeout,
            verify=False,
            transport=transport,
        )
        self._myself: dict | None = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self) -> None:
        self.client.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        logger.debug("Jira %s %s", method, path)
        try:
            r = self.client.request(method, f"{API}{path}", **kwargs)
        except httpx.ConnectError as exc:
            raise TransportFailure(f"Cannot connect to Jira: {exc}", hint=VPN_HINT) from exc
        except httpx.TimeoutException as exc:
            raise TransportFailure("Jira did not answer in time", hint=VPN_HINT) from exc
        except httpx.HTTPError as exc:
            raise TransportFailure(f"Jira request failed: {exc}", hint=VPN_HINT) from exc
        if r.status_code == 401:
            raise TransportFailure("Invalid Jira credentials", hint="Fix username/password: jt setup")
        return r

    def current_user(self) -> dict:
        if self._myself is None:
            r = self._request("GET", "/myself")
            if r.status_code != 200:
                raise TransportFailure(f"Jira request failed: {r.status_code} {_error_text(r)}")
            self._myself = r.json()
        return self._myself

    def test_connection(self) -> bool:
        self.current_user()
        return True

    def get_issue(self, task_key: str) -> JiraIssue | None:
        r = self._request("GET", f"/issue/{task_key}", params={"fields": "summary,assignee,status"})
        if r.status_code == 404:
            return None
        if r.status_code != 200:
            raise TransportFailure(f"Failed to fetch issue {task_key}: {r.status_code} {_error_text(r)}")
        data = r.json()
        fields = data.get("fields") or {}
        return JiraIssue(
            key=data.get("key", task_key),
            summary=fields.get("summary") or "",
            assignee=(fields.get("assignee") or {}).get("displayName"),
            status=(fields.get("status") or {}).get("name") or "",
        )

    def validate_tasks(self, task_keys: list[str]) -> ValidationResult:
        """Look up every distinct key once, one request at a time."""
        unique = list(dict.fromkeys(task_keys))
        result = ValidationResult()
        me = self.current_user().get("displayName")
        for key in unique:
            issue = self.get_issue(key)
            if issue is None:
                result.invalid.append(key)
                continue
            if issue.assignee != me:
                result.not_assigned.append(
                    NotAssigned(key=key, assignee=issue.assignee or "Unassigned")
                )
            result.valid.append(issue)
        return result

    def submit_worklog(self, entry: WorklogEntry) -> None:
        payload = {
            "comment": entry.activity,
            "timeSpent": format_time_spent(entry.hours),
            "started": format_started(entry.date),
        }
        r = self._request("POST", f"/issue/{entry.task}/worklog", json=payload)
        if r.status_code not in (200, 201):
            raise SubmissionFailure(f"{r.status_code} {_error_text(r)}")

    def fetch_recent_tasks(self, limit: int = 10) -> list[str]:
        """Recently updated issues assigned to the user; empty on any error."""
        jql = f"project = {self.project_key} AND assignee = currentUser() ORDER BY updated DESC"
        try:
            r = self._request("GET", "/search", params={"jql": jql, "maxResults": limit, "fields": "key"})
            if r.status_code != 200:
                logger.warning("Recent task search failed: %s", r.status_code)
                return []
            return [issue["key"] for issue in r.json().get("issues", [])]
        except (JtwError, ValueError, KeyError) as exc:
            logger.warning("Could not fetch recent tasks: %s", exc)
            return []


def create_jira_client(config: AppConfig) -> JiraClient:
    return JiraClient(
        config.jira_url,
        config.jira_username,
        config.jira_password,
        config.project_key,
    )
