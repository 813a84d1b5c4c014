"""Records exchanged with the Prolific API and helpers to decode them."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Generic, Mapping, Optional, TypeVar

T = TypeVar("T")

_FRACTION = re.compile(r"\.(\d+)")


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp as sent by the API; empty values give None."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"cannot parse {value!r} as a date and time")
    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    # Sub-microsecond precision is cut to what datetime can hold.
    text = _FRACTION.sub(lambda m: "." + (m.group(1) + "000000")[:6], text, count=1)
    return datetime.fromisoformat(text)


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _int(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    return 0 if value is None else int(value)


def _float(data: Mapping[str, Any], key: str) -> float:
    value = data.get(key)
    return 0.0 if value is None else float(value)


def _list(data: Mapping[str, Any], key: str) -> list:
    value = data.get(key)
    return list(value) if value else []


@dataclass
class ListResponse(Generic[T]):
    """A page of results with the optional record count and pagination links."""

    results: list[T] = field(default_factory=list)
    count: Optional[int] = None
    links: dict = field(default_factory=dict)

    @classmethod
    def from_json(
        cls, data: Mapping[str, Any], parse_item: Callable[[Mapping[str, Any]], T]
    ) -> "ListResponse[T]":
        results = [parse_item(item) for item in data.get("results") or []]
        meta = data.get("meta")
        count = _int(meta, "count") if isinstance(meta, Mapping) else None
        links = dict(data.get("_links") or {})
        return cls(results=results, count=count, links=links)


@dataclass
class MeResponse:
    """The account of the authenticated user."""

    id: str = ""
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    name: str = ""
    username: str = ""
    user_type: str = ""
    currency_code: str = ""
    balance: int = 0
    available_balance: int = 0

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "MeResponse":
        return cls(
            id=_text(data, "id"),
            email=_text(data, "email"),
            first_name=_text(data, "first_name"),
            last_name=_text(data, "last_name"),
            name=_text(data, "name"),
            username=_text(data, "username"),
            user_type=_text(data, "user_type"),
            currency_code=_text(data, "currency_code"),
            balance=_int(data, "balance"),
            available_balance=_int(data, "available_balance"),
        )


@dataclass
class TransitionStudyResponse:
    """A study as returned after moving it to another status."""

    id: str = ""
    name: str = ""
    internal_name: str = ""
    description: str = ""
    external_study_url: str = ""
    prolific_id_option: str = ""
    completion_code: str = ""
    completion_option: str = ""
    total_available_places: int = 0
    estimated_completion_time: int = 0
    maximum_allowed_time: int = 0
    reward: int = 0
    device_compatibility: list[str] = field(default_factory=list)
    peripheral_requirements: list = field(default_factory=list)
    eligibility_requirements: list = field(default_factory=list)
    status: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "TransitionStudyResponse":
        return cls(
            id=_text(data, "id"),
            name=_text(data, "name"),
            internal_name=_text(data, "internal_name"),
            description=_text(data, "description"),
            external_study_url=_text(data, "external_study_url"),
            prolific_id_option=_text(data, "prolific_id_option"),
            completion_code=_text(data, "completion_code"),
            completion_option=_text(data, "completion_option"),
            total_available_places=_int(data, "total_available_places"),
            estimated_completion_time=_int(data, "estimated_completion_time"),
            maximum_allowed_time=_int(data, "maximum_allowed_time"),
            reward=_int(data, "reward"),
            device_compatibility=[str(d) for d in _list(data, "device_compatibility")],
            peripheral_requirements=_list(data, "peripheral_requirements"),
            eligibility_requirements=_list(data, "eligibility_requirements"),
            status=_text(data, "status"),
        )


@dataclass
class SendMessagePayload:
    """The body of a request to send a message."""

    recipient_id: str
    study_id: str
    body: str

    def to_json(self) -> dict:
        return {
            "recipient_id": self.recipient_id,
            "study_id": self.study_id,
            "body": self.body,
        }


@dataclass
class Campaign:
    """A sign-up campaign for bringing participants to a workspace."""

    id: str = ""
    name: str = ""
    signup_link: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Campaign":
        return cls(
            id=_text(data, "id"),
            name=_text(data, "name"),
            signup_link=_text(data, "signup_link"),
        )


@dataclass
class Hook:
    """A subscription to an event type."""

    id: str = ""
    event_type: str = ""
    target_url: str = ""
    is_enabled: bool = False
    workspace_id: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Hook":
        return cls(
            id=_text(data, "id"),
            event_type=_text(data, "event_type"),
            target_url=_text(data, "target_url"),
            is_enabled=bool(data.get("is_enabled", False)),
            workspace_id=_text(data, "workspace_id"),
        )


@dataclass
class HookEventType:
    """An event type that a hook can subscribe to."""

    event_type: str = ""
    description: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "HookEventType":
        return cls(
            event_type=_text(data, "event_type"),
            description=_text(data, "description"),
        )


@dataclass
class HookEvent:
    """An event delivered to a subscription."""

    id: str = ""
    date_created: Optional[datetime] = None
    date_updated: Optional[datetime] = None
    status: str = ""
    resource_id: str = ""
    event_type: str = ""
    target_url: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "HookEvent":
        return cls(
            id=_text(data, "id"),
            date_created=parse_datetime(data.get("datetime_created")),
            date_updated=parse_datetime(data.get("datetime_updated")),
            status=_text(data, "status"),
            resource_id=_text(data, "resource_id"),
            event_type=_text(data, "event_type"),
            target_url=_text(data, "target_url"),
        )


@dataclass
class Secret:
    """A hook signing secret of a workspace."""

    id: str = ""
    value: str = ""
    workspace_id: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Secret":
        return cls(
            id=_text(data, "id"),
            value=_text(data, "value"),
            workspace_id=_text(data, "workspace_id"),
        )


@dataclass
class Workspace:
    """A workspace that holds projects."""

    id: str = ""
    title: str = ""
    description: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Workspace":
        return cls(
            id=_text(data, "id"),
            title=_text(data, "title"),
            description=_text(data, "description"),
        )

    def to_json(self) -> dict:
        payload = {"title": self.title}
        if self.id:
            payload["id"] = self.id
        if self.description:
            payload["description"] = self.description
        return payload


@dataclass
class User:
    """A member of a project."""

    id: str = ""
    name: str = ""
    email: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "User":
        return cls(
            id=_text(data, "id"),
            name=_text(data, "name"),
            email=_text(data, "email"),
        )


@dataclass
class Project:
    """A project inside a workspace that groups studies."""

    id: str = ""
    title: str = ""
    description: str = ""
    workspace: str = ""
    owner: str = ""
    naivety_distribution_rate: float = 0.0
    users: list[User] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Project":
        return cls(
            id=_text(data, "id"),
            title=_text(data, "title"),
            description=_text(data, "description"),
            workspace=_text(data, "workspace"),
            owner=_text(data, "owner"),
            naivety_distribution_rate=_float(data, "naivety_distribution_rate"),
            users=[User.from_json(u) for u in _list(data, "users")],
        )

    def to_json(self) -> dict:
        payload: dict = {
            "title": self.title,
            "naivety_distribution_rate": self.naivety_distribution_rate,
        }
        for key in ("id", "description", "workspace", "owner"):
            value = getattr(self, key)
            if value:
                payload[key] = value
        if self.users:
            payload["users"] = [
                {"id": u.id, "name": u.name, "email": u.email} for u in self.users
            ]
        return payload


@dataclass
class ParticipantGroup:
    """A named list of participants within a project."""

    id: str = ""
    name: str = ""
    project_id: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "ParticipantGroup":
        return cls(
            id=_text(data, "id"),
            name=_text(data, "name"),
            project_id=_text(data, "project_id"),
        )


@dataclass
class ParticipantGroupMembership:
    """A participant's membership of a group."""

    participant_id: str = ""
    datetime_created: Optional[datetime] = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "ParticipantGroupMembership":
        return cls(
            participant_id=_text(data, "participant_id"),
            datetime_created=parse_datetime(data.get("datetime_created")),
        )


@dataclass
class FilterRange:
    """Bounds chosen for a range filter; either bound may be absent."""

    lower: Any = None
    upper: Any = None

    @classmethod
    def from_json(cls, data: Optional[Mapping[str, Any]]) -> "FilterRange":
        if not data:
            return cls()
        return cls(lower=data.get("lower"), upper=data.get("upper"))


@dataclass
class FilterSetFilter:
    """A filter as configured inside a filter set."""

    filter_id: str = ""
    selected_values: list[str] = field(default_factory=list)
    selected_range: FilterRange = field(default_factory=FilterRange)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "FilterSetFilter":
        return cls(
            filter_id=_text(data, "filter_id"),
            selected_values=[str(v) for v in _list(data, "selected_values")],
            selected_range=FilterRange.from_json(data.get("selected_range")),
        )


@dataclass
class FilterSet:
    """A reusable combination of filters."""

    id: str = ""
    name: str = ""
    organisation_id: str = ""
    workspace_id: str = ""
    version: int = 0
    eligible_participant_count: int = 0
    is_locked: bool = False
    is_deleted: bool = False
    filters: list[FilterSetFilter] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "FilterSet":
        return cls(
            id=_text(data, "id"),
            name=_text(data, "name"),
            organisation_id=_text(data, "organisation_id"),
            workspace_id=_text(data, "workspace_id"),
            version=_int(data, "version"),
            eligible_participant_count=_int(data, "eligible_participant_count"),
            is_locked=bool(data.get("is_locked", False)),
            is_deleted=bool(data.get("is_deleted", False)),
            filters=[FilterSetFilter.from_json(f) for f in _list(data, "filters")],
        )


@dataclass
class Message:
    """A message between users; the study comes from the message's data."""

    sender_id: str = ""
    study_id: str = ""
    datetime_created: Optional[datetime] = None
    body: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Message":
        extra = data.get("data")
        study_id = extra.get("study_id") if isinstance(extra, Mapping) else None
        if not isinstance(study_id, str):
            study_id = _text(data, "study_id")
        return cls(
            sender_id=_text(data, "sender_id"),
            study_id=study_id,
            datetime_created=parse_datetime(data.get("datetime_created")),
            body=_text(data, "body"),
        )


@dataclass
class UnreadMessage:
    """A message that has not yet been read."""

    sender: str = ""
    datetime_created: Optional[datetime] = None
    body: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "UnreadMessage":
        return cls(
            sender=_text(data, "sender"),
            datetime_created=parse_datetime(data.get("datetime_created")),
            body=_text(data, "body"),
        )