"""Thin Jira Cloud REST API v3 client used by the importer."""

from __future__ import annotations

import logging
from typing import Any

import requests

from .exceptions import JiraApiError

logger: logging.Logger = logging.getLogger(__name__)

API_PATH = "/rest/api/3"


class JiraClient:
    """Synchronous Jira REST client authenticated with an email/API token pair."""

    def __init__(self, host: str, email: str, api_token: str, *, timeout: float = 60) -> None:
        self.host: str = host.rstrip("/")
        self.base_url: str = f"{self.host}{API_PATH}"
        self.timeout: float = timeout

        self.session: requests.Session = requests.Session()
        self.session.auth = (email, api_token)
        self.session.headers.update({"Accept": "application/json", "Content-Type": "application/json"})

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,  # noqa: ANN401
        params: dict[str, Any] | None = None,
    ) -> Any:  # noqa: ANN401 - decoded JSON
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug(f"{method} {path}")
        try:
            response = self.session.request(method, url, json=json, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            msg = f"{method} {path} failed: {e}"
            raise JiraApiError(msg, method=method, path=path) from e

        if not response.ok:
            try:
                detail: Any = response.json()
            except ValueError:
                detail = response.text[:500]
            msg = f"Jira returned {response.status_code} for {method} {path}"
            raise JiraApiError(msg, status=response.status_code, method=method, path=path, detail=detail)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            msg = f"Jira returned a non-JSON body for {method} {path}"
            raise JiraApiError(
                msg, status=response.status_code, method=method, path=path, detail=response.text[:500]
            ) from e

    def get_myself(self) -> dict[str, Any]:
        return self._request("GET", "/myself")

    def get_project(self, key: str) -> dict[str, Any] | None:
        """Return the project, or None if no project has this key."""
        try:
            return self._request("GET", f"/project/{key}")
        except JiraApiError as e:
            if e.status == 404:
                return None
            raise

    def create_project(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/project", json=payload)

    def get_project_types(self) -> list[dict[str, Any]]:
        return self._request("GET", "/project/type") or []

    def get_create_meta(
        self,
        project_key: str,
        *,
        issue_type_ids: list[str] | None = None,
        expand_fields: bool = False,
    ) -> list[dict[str, Any]]:
        """Return the issue types (with fields when expanded) available in a project."""
        params: dict[str, Any] = {
            "projectKeys": project_key,
            "expand": "projects.issuetypes.fields" if expand_fields else "projects.issuetypes",
        }
        if issue_type_ids:
            params["issuetypeIds"] = ",".join(issue_type_ids)
        data = self._request("GET", "/issue/createmeta", params=params) or {}
        projects = data.get("projects") or []
        if not projects:
            return []
        return projects[0].get("issuetypes") or []

    def create_issue(self, fields: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/issue", json={"fields": fields})

    def get_issue(self, key: str, fields: list[str] | None = None) -> dict[str, Any]:
        params = {"fields": ",".join(fields)} if fields else None
        return self._request("GET", f"/issue/{key}", params=params)

    def update_issue(self, key: str, payload: dict[str, Any]) -> None:
        """Edit an issue with a raw payload ({"fields": ...} and/or {"update": ...})."""
        self._request("PUT", f"/issue/{key}", json=payload)

    def create_component(self, name: str, project_key: str, description: str = "") -> dict[str, Any]:
        return self._request(
            "POST", "/component", json={"name": name, "project": project_key, "description": description}
        )

    def create_issue_link(self, link_type: str, inward_key: str, outward_key: str) -> None:
        self._request(
            "POST",
            "/issueLink",
            json={
                "type": {"name": link_type},
                "inwardIssue": {"key": inward_key},
                "outwardIssue": {"key": outward_key},
            },
        )

    def get_fields(self) -> list[dict[str, Any]]:
        return self._request("GET", "/field") or []
