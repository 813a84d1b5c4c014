from datetime import datetime, timezone

import pytest

from prolificcli.responses import (
    Campaign,
    FilterRange,
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
    User,
    Workspace,
    parse_datetime,
)

SIGNUP = "https://app.prolific.com/register/participant/waitlist/?campaign_code=BLUEBIRD"


def test_parse_datetime_utc_suffix():
    assert parse_datetime("2022-07-24T08:04:00Z") == datetime(
        2022, 7, 24, 8, 4, tzinfo=timezone.utc
    )


def test_parse_datetime_truncates_nanoseconds():
    value = parse_datetime("2023-01-27T19:39:00.123456789Z")
    assert value.microsecond == 123456
    assert value.utcoffset().total_seconds() == 0


def test_parse_datetime_empty_is_none():
    assert parse_datetime(None) is None
    assert parse_datetime("") is None


def test_parse_datetime_rejects_garbage():
    with pytest.raises(ValueError):
        parse_datetime("not a date")


def test_list_response_with_meta():
    data = {
        "results": [
            {"id": "444", "name": "Chili Peppers", "signup_link": SIGNUP},
            {"id": "555", "name": "Jovi", "signup_link": ""},
        ],
        "meta": {"count": 10},
        "_links": {"self": {"href": "/x", "title": "Current"}},
    }
    page = ListResponse.from_json(data, Campaign.from_json)
    assert page.count == 10
    assert [c.id for c in page.results] == ["444", "555"]
    assert page.results[0] == Campaign(id="444", name="Chili Peppers", signup_link=SIGNUP)
    assert page.links["self"]["href"] == "/x"


def test_list_response_without_meta():
    page = ListResponse.from_json({"results": [{"id": "1122"}]}, ParticipantGroup.from_json)
    assert page.count is None
    assert page.results == [ParticipantGroup(id="1122")]


def test_list_response_null_results():
    page = ListResponse.from_json({"results": None}, Secret.from_json)
    assert page.results == []


def test_me_response():
    me = MeResponse.from_json(
        {"id": "u1", "email": "someone@example.com", "balance": 5, "available_balance": 3}
    )
    assert me.email == "someone@example.com"
    assert (me.balance, me.available_balance) == (5, 3)
    assert me.name == ""


def test_transition_study_response():
    result = TransitionStudyResponse.from_json(
        {"id": "s1", "status": "ACTIVE", "device_compatibility": ["desktop"], "reward": 100}
    )
    assert result.status == "ACTIVE"
    assert result.device_compatibility == ["desktop"]
    assert result.reward == 100
    assert result.eligibility_requirements == []


def test_send_message_payload():
    payload = SendMessagePayload(recipient_id="recipient-id", study_id="study-id", body="body")
    assert payload.to_json() == {
        "recipient_id": "recipient-id",
        "study_id": "study-id",
        "body": "body",
    }


def test_hook_and_event_type():
    hook = Hook.from_json(
        {"id": "hook-id", "event_type": "wibble", "is_enabled": True, "workspace_id": "workspace-id"}
    )
    assert hook.is_enabled is True
    assert hook.workspace_id == "workspace-id"
    event_type = HookEventType.from_json({"event_type": "wibble", "description": "The wibble event"})
    assert event_type.description == "The wibble event"


def test_hook_event_dates():
    event = HookEvent.from_json(
        {
            "id": "1122",
            "datetime_created": "2022-07-24T08:04:00Z",
            "datetime_updated": "2022-07-24T08:04:00Z",
            "status": "SUCCEEDED",
            "resource_id": "313",
        }
    )
    assert event.date_created == event.date_updated
    assert event.date_created.year == 2022
    assert event.status == "SUCCEEDED"


def test_workspace_round_trip():
    workspace = Workspace(id="w1", title="Research", description="All of it")
    assert Workspace.from_json(workspace.to_json()) == workspace


def test_project_round_trip():
    project = Project(
        id="991199",
        title="Titan",
        description="Project about moons",
        workspace="777777",
        owner="Dr. Who",
        naivety_distribution_rate=0.6,
        users=[User(id="123", name="Dr Who", email="who@example.com")],
    )
    assert Project.from_json(project.to_json()) == project


def test_project_to_json_leaves_out_empty_fields():
    payload = Project(title="Titan").to_json()
    assert payload == {"title": "Titan", "naivety_distribution_rate": 0.0}


def test_participant_group_membership():
    member = ParticipantGroupMembership.from_json(
        {"participant_id": "00000000000000007", "datetime_created": "2023-01-27T19:39:00Z"}
    )
    assert member.participant_id == "00000000000000007"
    assert member.datetime_created == datetime(2023, 1, 27, 19, 39, tzinfo=timezone.utc)


def test_filter_set_with_filters():
    filter_set = FilterSet.from_json(
        {
            "id": "991199",
            "name": "The best participants",
            "workspace_id": "111",
            "version": 2,
            "eligible_participant_count": 22222,
            "is_locked": True,
            "filters": [
                {"filter_id": "123", "selected_values": ["a", "b", "c"]},
                {"filter_id": "777", "selected_range": {"lower": 1}},
            ],
        }
    )
    assert filter_set.is_locked is True
    assert filter_set.is_deleted is False
    assert filter_set.filters[0].selected_values == ["a", "b", "c"]
    assert filter_set.filters[0].selected_range == FilterRange()
    assert filter_set.filters[1].selected_range == FilterRange(lower=1, upper=None)


def test_message_takes_study_from_data():
    message = Message.from_json(
        {"sender_id": "sender-id", "body": "body", "data": {"study_id": "study-id"}}
    )
    assert message.study_id == "study-id"
    assert message.sender_id == "sender-id"


def test_message_ignores_non_string_study():
    message = Message.from_json({"sender_id": "s", "data": {"study_id": 12}})
    assert message.study_id == ""


def test_unread_message():
    message = UnreadMessage.from_json(
        {"sender": "sender-id", "body": "body", "datetime_created": "2023-01-27T19:39:00Z"}
    )
    assert message.sender == "sender-id"
    assert message.datetime_created.hour == 19