# crater

Building blocks for a server that coordinates compiler experiments. The
package parses toolchain specifications and the commands users send to a
GitHub bot. It talks to the GitHub REST API and posts bot comments. It also
tracks worker agents and completed try builds in SQLite.

## Installation

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Modules

### General utilities

- `crater.toolchain`: `Toolchain.parse` reads specifications such as
  `stable`, `nightly-1970-01-01`, `master#<sha>` and `try#<sha>`. A
  specification may end in an optional `+rustflags=...` flag. The source of a
  toolchain is a `DistSource` or a `CISource`. `str()` gives the same text
  back, and `to_path_component()` percent-encodes it for use as a file name
  (see also `encode_filename`). Malformed input raises `ToolchainParseError`.
- `crater.size`: `Size.parse("4G")` accepts an optional trailing `b`/`B` and
  the units `K`, `M`, `G` and `T` in either case. `Size.to_bytes()` uses powers
  of 1024, and `str()` gives forms such as `4G`.
- `crater.quoting`: `split_quoted` splits on spaces and tabs outside double
  quotes, and a backslash escapes the next character. An unterminated quote
  raises `SplitQuotedError`.
- `crater.hexcodec`: `from_hex` decodes hexadecimal strings to bytes. It
  raises `InvalidHexChar` or `InvalidHexLength`, both subclasses of
  `HexError`.
- `crater.paths`: `normalize_path` resolves a path when it exists. On Windows
  it also drops the `\\?\` extended-length prefix. `strip_verbatim_prefix`
  returns the plain form of such a prefix, or `None`.
- `crater.httpclient`: `request` sends requests through a shared `requests`
  session with a `crater` user agent and at most 4 redirects. `get` raises
  `InvalidStatusCode` unless the answer is 200 OK.

### Server pieces (`crater.server`)

- `tokens`: `Tokens.load(path)` reads the bot credentials, the reports bucket
  and the agent tokens from a TOML file, `tokens.toml` by default.
  `Tokens.from_toml` and `Tokens.from_dict` parse text or an already parsed
  document. A bucket region is an `S3Region` or a `CustomRegion`.
- `api_types`: `ApiResponse` (success, internal error, unauthorized, not
  found) serialises to an `HttpResponse` with a JSON body and the matching
  HTTP status. The module also has `AgentConfig` and `CraterToken`.
- `github`: `GitHubApi(token)` posts comments, lists, adds and removes labels,
  lists teams and their members, and fetches commits. It raises `GitHubError`
  on unexpected statuses. The module also holds dataclasses for the payloads:
  `Issue`, `User`, `Commit`, `EventIssueComment` and others. `GitHub` is the
  protocol that other modules accept, so a fake can stand in for the real
  client.
- `messages`: `Message().line(...).note(...).set_label(...)` builds a bot
  comment. `send(issue_url, github, labels, project_url)` posts it. When a
  label is set, `send` also applies it and removes existing labels that match
  `LabelSettings.remove`.
- `try_builds`: `ensure_schema` creates the table. `detect` reads the merge
  bot's `TryBuildCompleted` comment and records the base and merge commits.
  `get_sha` returns the recorded `TryBuild`.
- `agents`: `Agents(conn, agent_names)` keeps an `agents` table in sync with
  the configured names. It records heartbeats and git revisions. An `Agent`
  reports `AgentStatus.WORKING`, `IDLE` or `UNREACHABLE`, and it counts as
  unreachable after 300 seconds without a heartbeat.
- `args`: `parse_command` turns a bot command into `RunArgs`, `EditArgs` (the
  default when no command word matches), `AbortArgs`, `PingArgs`,
  `RetryReportArgs`, `RetryArgs` or `ReloadAclArgs`. Errors are subclasses of
  `CommandParseError`. `CommandParser` builds parsers for other command sets.

## Example

```python
import sqlite3

from crater.toolchain import Toolchain
from crater.server.args import parse_command, RunArgs
from crater.server.agents import Agents, AgentStatus

tc = Toolchain.parse("try#0000000000000000000000000000000000000000+rustflags=-Dwarnings")
print(tc.ci_try, tc.rustflags)   # True -Dwarnings
print(str(tc))

command = parse_command("run name=pr-1 start=stable end=beta p=2")
assert isinstance(command, RunArgs) and command.priority == 2

agents = Agents(sqlite3.connect(":memory:"), ["agent1"])
agents.record_heartbeat("agent1")
assert agents.get("agent1").status() is AgentStatus.IDLE
```

## What this package does not do

- It runs no HTTP server. There are no routes, no agent API endpoints, no web
  pages and no webhook receiver. `ApiResponse` only builds response objects.
- It has no webhook signature checks, no token authentication of agents and
  no access control for bot users.
- It does not carry out parsed commands. It does not create, edit, retry or
  abort experiments, and it does not choose or store experiment names.
- It generates and uploads no reports, and it has no command-line tool.