"""HTTP client for the Prolific API."""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

import requests

from prolificcli.responses import (
    Campaign,
    FilterSet,
    Hook,
    HookEvent,
    HookEventType,
    ListResponse,
    MeResponse,
    Message,
    ParticipantGroup,
    ParticipantGroupMembership,
    Project,
    Secret,
    SendMessagePayload,
    TransitionStudyResponse,
    UnreadMessage,
    Workspace,
)

DEFAULT_RECORD_OFFSET = 0
DEFAULT_RECORD_LIMIT = 200
DEFAULT_API_URL = "https://api.prolific.com"
USER_AGENT = "prolificcli"


class APIError(Exception):
    """A request to the API could not be completed."""


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in ("1", "t", "true", "yes", "on")


def _setting(settings: Mapping[str, Any], key: str) -> Any:
    if key in settings:
        return settings[key]
    lowered = key.lower()
    for name, value in settings.items():
        if str(name).lower() == lowered:
            return value
    return None


def _payload(body: Any) -> Any:
    to_json = getattr(body, "to_json", None)
    return to_json() if callable(to_json) else body


def _decode(response: requests.Response) -> Any:
    try:
        return json.loads(response.content)
    except ValueError as err:
        raise APIError(
            f"decoding JSON response from {response.request.url} failed: {err}"
        ) from err


class Client:
    """Talks to the Prolific API with a token."""

    def __init__(
        self,
        token: str = "",
        base_url: str = DEFAULT_API_URL,
        debug: bool = False,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.token = token or ""
        self.base_url = (base_url or DEFAULT_API_URL).rstrip("/")
        self.debug = debug
        self.session = session if session is not None else requests.Session()

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "Client":
        """Build a client from PROLIFIC_TOKEN, PROLIFIC_URL and PROLIFIC_DEBUG."""
        url = _setting(settings, "PROLIFIC_URL") or DEFAULT_API_URL
        return cls(
            token=str(_setting(settings, "PROLIFIC_TOKEN") or ""),
            base_url=str(url),
            debug=_as_bool(_setting(settings, "PROLIFIC_DEBUG")),
        )

    def execute(self, method: str, path: str, body: Any = None) -> requests.Response:
        """Send a request; raise APIError on a missing token or a failed request."""
        if not self.token:
            raise APIError("PROLIFIC_TOKEN not set")

        data = None
        if body is not None:
            encoded = json.dumps(_payload(body), separators=(",", ":"), ensure_ascii=False)
            data = (encoded + "\n").encode("utf-8")

        url = self.base_url + path
        headers = {
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
            "Authorization": f"Token {self.token}",
        }
        if self.debug:
            print(f"{method} {url}")

        try:
            response = self.session.request(method, url, data=data, headers=headers)
        except requests.RequestException as err:
            raise APIError(str(err)) from err

        if self.debug:
            print(response.text)

        if response.status_code >= 400:
            payload = _decode(response)
            if not isinstance(payload, Mapping):
                raise APIError(
                    f"decoding JSON response from {response.request.url} failed: "
                    "unexpected error body"
                )
            error = payload.get("error")
            detail = error.get("detail") if isinstance(error, Mapping) else None
            raise APIError(f"request failed: {'' if detail is None else detail}")

        return response

    def _fetch(self, method: str, path: str, body: Any = None) -> tuple[requests.Response, Any]:
        try:
            response = self.execute(method, path, body)
            return response, _decode(response)
        except APIError as err:
            raise APIError(f"unable to fulfil request {path}: {err}") from err

    def _list(self, path: str, parse_item) -> ListResponse:
        _, data = self._fetch("GET", path)
        return ListResponse.from_json(data or {}, parse_item)

    def create_study(self, study: Any) -> dict:
        path = "/api/v1/studies/"
        response, data = self._fetch("POST", path, study)
        if response.status_code != 201:
            raise APIError(f"unable to create study: {response.text}")
        return data

    def get_me(self) -> MeResponse:
        _, data = self._fetch("GET", "/api/v1/users/me")
        return MeResponse.from_json(data or {})

    def duplicate_study(self, study_id: str) -> dict:
        response, data = self._fetch("POST", f"/api/v1/studies/{study_id}/clone/")
        if response.status_code != 200:
            raise APIError(f"unable to duplicate study: {response.text}")
        return data

    def get_study(self, study_id: str) -> dict:
        response, data = self._fetch("GET", f"/api/v1/studies/{study_id}")
        if response.status_code != 200:
            raise APIError(f"unable to get study: {response.text}")
        return data

    def get_submissions(self, study_id: str, limit: int, offset: int) -> ListResponse:
        return self._list(
            f"/api/v1/studies/{study_id}/submissions/?limit={limit}&offset={offset}",
            dict,
        )

    def get_eligibility_requirements(self) -> ListResponse:
        return self._list("/api/v1/eligibility-requirements/", dict)

    def transition_study(self, study_id: str, action: str) -> TransitionStudyResponse:
        path = f"/api/v1/studies/{study_id}/transition/"
        try:
            response = self.execute("POST", path, {"action": action})
            data = _decode(response)
        except APIError as err:
            raise APIError(f"unable to transition study to {action}: {err}") from err
        return TransitionStudyResponse.from_json(data or {})

    def get_campaigns(self, workspace_id: str, limit: int, offset: int) -> ListResponse:
        return self._list(
            f"/api/v1/campaigns/?workspace_id={workspace_id}&limit={limit}&offset={offset}",
            Campaign.from_json,
        )

    def update_study(self, study_id: str, study: Any) -> dict:
        path = f"/api/v1/studies/{study_id}/"
        try:
            response = self.execute("PATCH", path, study)
            data = _decode(response)
        except APIError as err:
            raise APIError(f"unable to update study: {err}") from err
        if response.status_code != 200:
            raise APIError("unable to update study")
        return data

    def get_hooks(
        self, workspace_id: str, enabled: bool, limit: int, offset: int
    ) -> ListResponse:
        flag = "true" if enabled else "false"
        return self._list(
            f"/api/v1/hooks/subscriptions?workspace_id={workspace_id}"
            f"&is_enabled={flag}&limit={limit}&offset={offset}",
            Hook.from_json,
        )

    def get_hook_event_types(self) -> ListResponse:
        return self._list("/api/v1/hooks/event-types/", HookEventType.from_json)

    def get_hook_secrets(self, workspace_id: str) -> ListResponse:
        return self._list(
            f"/api/v1/hooks/secrets/?workspace_id={workspace_id}", Secret.from_json
        )

    def get_events(self, subscription_id: str, limit: int, offset: int) -> ListResponse:
        return self._list(
            f"/api/v1/hooks/subscriptions/{subscription_id}/events/"
            f"?limit={limit}&offset={offset}",
            HookEvent.from_json,
        )

    def get_workspaces(self, limit: int, offset: int) -> ListResponse:
        response, data = self._fetch(
            "GET", f"/api/v1/workspaces/?limit={limit}&offset={offset}"
        )
        if response.status_code != 200:
            raise APIError(
                f"status code was {response.status_code}, "
                "so therefore unable to get workspaces"
            )
        return ListResponse.from_json(data or {}, Workspace.from_json)

    def create_workspace(self, workspace: Workspace) -> Workspace:
        _, data = self._fetch("POST", "/api/v1/workspaces/", workspace)
        return Workspace.from_json(data or {})

    def get_projects(self, workspace_id: str, limit: int, offset: int) -> ListResponse:
        return self._list(
            f"/api/v1/workspaces/{workspace_id}/projects/?limit={limit}&offset={offset}",
            Project.from_json,
        )

    def get_project(self, project_id: str) -> Project:
        response, data = self._fetch("GET", f"/api/v1/projects/{project_id}/")
        if response.status_code != 200:
            raise APIError(
                f"status code was {response.status_code}, "
                f"so therefore unable to get project: {project_id}"
            )
        return Project.from_json(data or {})

    def create_project(self, workspace_id: str, project: Project) -> Project:
        _, data = self._fetch(
            "POST", f"/api/v1/workspaces/{workspace_id}/projects/", project
        )
        return Project.from_json(data or {})

    def get_participant_groups(
        self, project_id: str, limit: int, offset: int
    ) -> ListResponse:
        return self._list(
            f"/api/v1/participant-groups/?project_id={project_id}"
            f"&limit={limit}&offset={offset}",
            ParticipantGroup.from_json,
        )

    def get_participant_group(self, group_id: str) -> ListResponse:
        return self._list(
            f"/api/v1/participant-groups/{group_id}/participants/",
            ParticipantGroupMembership.from_json,
        )

    def get_filters(self) -> ListResponse:
        return self._list("/api/v1/filters/", dict)

    def get_filter_sets(self, workspace_id: str, limit: int, offset: int) -> ListResponse:
        return self._list(
            f"/api/v1/filter-sets/?workspace_id={workspace_id}"
            f"&limit={limit}&offset={offset}",
            FilterSet.from_json,
        )

    def get_filter_set(self, filter_set_id: str) -> FilterSet:
        response, data = self._fetch("GET", f"/api/v1/filter-sets/{filter_set_id}/")
        if response.status_code != 200:
            raise APIError(
                f"status code was {response.status_code}, "
                f"so therefore unable to get filter set: {filter_set_id}"
            )
        return FilterSet.from_json(data or {})

    def get_messages(
        self, user_id: Optional[str] = None, created_after: Optional[str] = None
    ) -> ListResponse:
        if user_id is None and created_after is None:
            raise APIError("either userID or createdAfter must be provided")
        params = {}
        if user_id is not None:
            params["user_id"] = user_id
        if created_after is not None:
            params["created_after"] = created_after
        query = urlencode(sorted(params.items()))
        return self._list(f"/api/v1/messages/?{query}", Message.from_json)

    def send_message(self, body: str, recipient_id: str, study_id: str) -> None:
        payload = SendMessagePayload(recipient_id=recipient_id, study_id=study_id, body=body)
        path = "/api/v1/messages/"
        try:
            self.execute("POST", path, payload)
        except APIError as err:
            raise APIError(f"unable to fulfil request {path}: {err}") from err

    def get_unread_messages(self) -> ListResponse:
        return self._list("/api/v1/messages/unread/", UnreadMessage.from_json)