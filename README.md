# jiraflow

A curses terminal UI. It lists the Jira tickets assigned to you that are
not yet done. When you pick one, it checks out a git branch named after
the ticket. It can also move the ticket to "In Progress" in the same step.

## Install

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Usage

Run it from inside a git repository:

```
jiraflow
```

### Signing in

On the first run, the sign-in screen asks for three things:

- your Atlassian URL, for example `your-company.atlassian.net`.
  Surrounding spaces are trimmed, `https://` is added when missing and
  a trailing `/` is dropped.
- your e-mail address
- a Jira API token. Use a plain API token, not the "API token with
  scopes" option.

All three fields are required. The fields are filled in ahead of time
from `JIRA_URL`, `JIRA_EMAIL` and `JIRA_API_TOKEN`. A `.env` file in the
current directory is loaded first if there is one.

| Key                      | Action                                  |
|--------------------------|-----------------------------------------|
| `tab`, `down`            | next field                              |
| `shift+tab`, `up`        | previous field                          |
| `enter`                  | next field; on the last field, submit   |
| `ctrl+c`                 | quit                                    |

On submit, the credentials are checked with a request to
`/rest/api/3/myself`. If they work, they are saved and the ticket list
loads. If they fail, the error is shown above the fields. On later runs
the saved credentials are checked again at start-up. The sign-in screen
only appears when the saved credentials are missing or rejected.

### Ticket list

The list shows up to 100 tickets that are assigned to you and whose
status is not Done, ordered by creation date. Each row shows the key,
type, summary, status and age, for example "3 days ago".

| Key                         | Action                                      |
|-----------------------------|---------------------------------------------|
| `j`/`down`, `k`/`up`        | move down / up                              |
| `f`/`pgdown`/space, `b`/`pgup` | page down / up                           |
| `d`, `u`                    | half page down / up                         |
| `g`/`home`, `G`/`end`       | first / last ticket                         |
| `enter`                     | open the branch form for the ticket         |
| `/`                         | search                                      |
| `r`                         | reload from Jira                            |
| `S`                         | sign out: delete the saved credentials      |
| `q`, `ctrl+c`               | quit                                        |

The search filters as you type. A ticket matches when its key, summary,
type or status contains the text, ignoring case. In search mode, `enter`
keeps the filter, and the filter stays on screen next to the help line.
`esc` clears the filter.

### Branch form

The suggested branch name is `bugfix/<KEY>-<summary>` for tickets of type
`Bug` and `feature/<KEY>-<summary>` for all other types. The summary is
lower-cased and its spaces become underscores. Any character other than
letters, digits, `-`, `_`, `.` and `/` is removed. You can edit the name,
but it must not be empty and may only use those characters.

If the ticket's status is not already "In Progress", a second field asks
"Mark as in progress?". It starts at Yes. `left`/`right` (or `h`/`l`)
toggle the answer, and `y` or `n` answer and submit. `enter`, `tab` and
`down` move forward and submit from the last field. `shift+tab` and `up`
move back. `esc` returns to the list.

On submit, the ticket is first moved through its "In Progress"
transition, if you asked for that. Then the branch is checked out with
`git checkout`, and created with `-b` if no local branch of that name
exists. The program then exits. If a step fails, its error is shown
instead.

## Per-repository project filter

To see only the tickets of one project, put a `jira-branch.config.json`
file at the root of the git repository:

```json
{
  "projectKey": "PROJ"
}
```

If the file is missing or cannot be read, all projects are listed.

## Where things are kept

- Credentials are saved as JSON in `credentials.json` in the user
  configuration directory for `jira-branch`, as chosen by `platformdirs`.
  The file is created with mode `0600`. It is a plain file, not the
  operating system's keyring.
- Logs are appended to `app.log` in the user data directory for
  `jira-branch`. With `DEV=true` set, they go to `app.log` in the current
  directory instead, and the log level is lowered further.

## Using the pieces directly

The modules can also be used without the terminal UI:

- `jiraflow.client.JiraClient(credentials)`: `get_tickets(project_key)`,
  `get_in_progress_transition(issue_key)`, `mark_as_in_progress(issue_key)`.
  Failures raise `jiraflow.credentials.JiraError`.
- `jiraflow.credentials`: `Credentials`, `CredentialStore(path)` with
  `save`, `load` and `clear`, `validate_credentials`, `normalize_url`.
- `jiraflow.gitops`: `format_branch_name(ticket)`, `branch_name_error(value)`,
  `checkout_branch(name)`. A failed checkout raises `GitError`.
- `jiraflow.timefmt.format_relative_time(time_str, now=None)`.
- `jiraflow.state.AppState`: the screen state. Its `handle_key` returns
  effects such as `LoadTickets` or `SubmitBranch`, and
  `jiraflow.views.render(state)` turns the state into plain text.

## Limits

- The screens are plain text with no colours.
- The UI needs Python's `curses` module. On Windows it is not part of the
  standard library and is not installed with this package.
- Credentials are kept in a file, not in a system keyring.