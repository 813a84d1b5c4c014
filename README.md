# prolificcli

A Python client for the Prolific API together with ready-made
[click](https://click.palletsprojects.com/) commands that list campaigns,
hook subscriptions, hook events and secrets, participant groups and messages,
and send messages. The commands print plain, column-aligned tables.

## Installation

```
pip install .
```

## The API client

`prolificcli.client.Client` sends authenticated JSON requests to the API.

```python
import os
from prolificcli.client import Client

client = Client(token="token")            # base_url defaults to the public API
client = Client.from_settings(os.environ)  # reads PROLIFIC_TOKEN, PROLIFIC_URL, PROLIFIC_DEBUG
```

| Setting          | Meaning                                           |
|------------------|---------------------------------------------------|
| `PROLIFIC_TOKEN` | API token sent with every request (required)      |
| `PROLIFIC_URL`   | Base URL of the API                               |
| `PROLIFIC_DEBUG` | When true, prints each request and raw response   |

Every request raises `prolificcli.client.APIError` when no token is set, when
the request fails, or when the API answers with a status of 400 or more (the
message carries the error detail from the response).

Methods returning a page of results give a `ListResponse` with `results`,
`count` (the record total, or `None`) and `links`:

- campaigns: `get_campaigns(workspace_id, limit, offset)`
- hooks: `get_hooks(workspace_id, enabled, limit, offset)`,
  `get_hook_event_types()`, `get_hook_secrets(workspace_id)`,
  `get_events(subscription_id, limit, offset)`
- workspaces: `get_workspaces(limit, offset)`, `create_workspace(workspace)`
- projects: `get_projects(workspace_id, limit, offset)`, `get_project(project_id)`,
  `create_project(workspace_id, project)`
- participant groups: `get_participant_groups(project_id, limit, offset)`,
  `get_participant_group(group_id)`
- filters and filter sets: `get_filters()`,
  `get_filter_sets(workspace_id, limit, offset)`, `get_filter_set(filter_set_id)`
- studies: `create_study(study)`, `get_study(study_id)`,
  `duplicate_study(study_id)`, `update_study(study_id, study)`,
  `transition_study(study_id, action)`, `get_submissions(study_id, limit, offset)`,
  `get_eligibility_requirements()`
- messages: `get_messages(user_id, created_after)` (at least one of the two is
  required), `get_unread_messages()`, `send_message(body, recipient_id, study_id)`
- account: `get_me()`

`DEFAULT_RECORD_LIMIT` (200) and `DEFAULT_RECORD_OFFSET` (0) are the paging
defaults used by the commands. The records themselves (`Campaign`, `Hook`,
`HookEvent`, `Project`, `FilterSet`, `Message`, ...) are dataclasses in
`prolificcli.responses`, each with a `from_json` constructor.

## The commands

The modules in `prolificcli.commands` build click commands around a client.
Each takes an optional output stream (standard output by default); commands
that work on a workspace also take a `default_workspace`.

```python
import os
import click

from prolificcli.client import Client
from prolificcli.commands import campaign, hook, message, participantgroup

client = Client.from_settings(os.environ)

cli = click.Group(name="prolific")
cli.add_command(campaign.new_list_command("campaign", client))
cli.add_command(hook.new_hook_command(client))
cli.add_command(message.new_message_command(client))
cli.add_command(participantgroup.new_participant_command(client))
cli()
```

| Command                    | Options                                                        |
|----------------------------|----------------------------------------------------------------|
| `campaign`                 | `-w/--workspace`, `-l/--limit`, `-o/--offset`                  |
| `hook list`                | `-w/--workspace`, `-e/--enabled`, `-d/--disabled`, `-l`, `-o`  |
| `hook event-types`         | none                                                           |
| `hook secrets`             | `-w/--workspace`                                               |
| `hook events`              | `-s/--subscription`, `-l/--limit`, `-o/--offset`               |
| `participant list`         | `-p/--project`, `-l/--limit`, `-o/--offset`                    |
| `participant view <id>`    | none                                                           |
| `message list`             | `-u/--user`, `-c/--created_after`, `-U/--unread`               |
| `message send`             | `-r/--recipient`, `-s/--study`, `-b/--body`                    |

`--unread` cannot be combined with `--user` or `--created_after`. Failures are
raised as `prolificcli.commands.base.CommandError` with the message
`error: <reason>`; click prints it and exits with status 1.

The rendering functions behind the commands (`render_campaigns`,
`render_hooks`, `render_events`, `render_groups`, `render_messages`, ...) can
also be called directly with a client and a text stream. The table layout,
record counter and date format live in `prolificcli.commands.base`.

## What the package does not do

- It installs no `prolific` executable and has no top-level command; you
  assemble the commands into a click group yourself, as above.
- It does not read a configuration file; settings come from whatever mapping
  you pass to `Client.from_settings`.
- There are no commands for projects, filter sets, studies, workspaces,
  eligibility requirements or the account, although the client has methods
  for them.

## Running the tests

```
pip install ".[test]"
pytest
```