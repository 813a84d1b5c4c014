from io import StringIO
from unittest.mock import Mock

import pytest

from prolificcli.client import DEFAULT_RECORD_LIMIT, DEFAULT_RECORD_OFFSET, APIError, Client
from prolificcli.commands.base import CommandError
from prolificcli.commands.campaign import new_list_command, render_campaigns
from prolificcli.responses import Campaign, ListResponse


def _client():
    return Mock(spec=Client)


def test_new_list_command_names():
    cmd = new_list_command("campaigns", _client(), StringIO())
    assert cmd.name == "campaigns"
    assert cmd.short_help == "Provide details about your campaigns"


def test_command_calls_api():
    client = _client()
    client.get_campaigns.return_value = ListResponse(
        results=[
            Campaign(
                id="444",
                name="Chili Peppers",
                signup_link="https://app.prolific.com/register/participant/waitlist/?campaign_code=BLUEBIRD",
            ),
            Campaign(
                id="555",
                name="Jovi",
                signup_link="https://app.prolific.com/register/participant/waitlist/?campaign_code=ORANGEBURST",
            ),
        ],
        count=10,
    )
    out = StringIO()
    cmd = new_list_command("campaign", client, out)
    cmd.main(["--workspace", "991199", "--limit", "10", "--offset", "2"], standalone_mode=False)

    client.get_campaigns.assert_called_once_with("991199", 10, 2)
    expected = (
        "ID  Name          Link\n"
        "444 Chili Peppers https://app.prolific.com/register/participant/waitlist/?campaign_code=BLUEBIRD\n"
        "555 Jovi          https://app.prolific.com/register/participant/waitlist/?campaign_code=ORANGEBURST\n"
        "\n"
        "Showing 2 records of 10\n"
    )
    assert out.getvalue() == expected


def test_command_handles_errors():
    client = _client()
    client.get_campaigns.side_effect = APIError("I am titanium")
    cmd = new_list_command("campaign", client, StringIO())
    with pytest.raises(CommandError) as exc:
        cmd.main(["-w", "991199"], standalone_mode=False)
    assert exc.value.message == "error: I am titanium"
    client.get_campaigns.assert_called_once_with(
        "991199", DEFAULT_RECORD_LIMIT, DEFAULT_RECORD_OFFSET
    )


def test_command_requires_workspace():
    client = _client()
    cmd = new_list_command("campaign", client, StringIO())
    with pytest.raises(CommandError) as exc:
        cmd.main([], standalone_mode=False)
    assert exc.value.message == "error: please provide a workspace ID"
    assert client.get_campaigns.call_count == 0


def test_default_workspace_is_used():
    client = _client()
    client.get_campaigns.return_value = ListResponse(results=[], count=0)
    out = StringIO()
    cmd = new_list_command("campaign", client, out, "ws-default")
    cmd.main([], standalone_mode=False)
    client.get_campaigns.assert_called_once_with(
        "ws-default", DEFAULT_RECORD_LIMIT, DEFAULT_RECORD_OFFSET
    )
    assert out.getvalue() == "ID Name Link\n\nShowing 0 records of 0\n"


def test_render_campaigns_single_record():
    client = _client()
    client.get_campaigns.return_value = ListResponse(
        results=[Campaign(id="1", name="A", signup_link="L")], count=1
    )
    out = StringIO()
    render_campaigns(client, "w", 5, 0, out)
    assert out.getvalue() == "ID Name Link\n1  A    L\n\nShowing 1 record of 1\n"