# corpora

Tools for managing and processing text corpora against a Corpora server.

The package has two parts:

- `corpora.client` — a small HTTP client for the Corpora API. It covers corpora,
  files, splits, issue planning and file revision ("work on").
- `corpora.cli` — the logic behind a command-line workflow. It finds the
  `.corpora.yaml` configuration, collects tracked text files from a Git
  repository, syncs them with the server, and runs chat sessions that can be
  saved under `.corpora/chat`.

## Project configuration

A corpus is rooted at the directory holding `.corpora.yaml`:

```yaml
name: my-corpus
url: https://git.example.com/my-corpus.git
server:
  base_url: http://localhost:8000
exclude_globs:
  - "*.lock"
  - "vendor/**"
```

Once a corpus has been created on the server, its identifier is stored in
`.corpora/.id`. Optional guidance files are read from the same directory:
`VOICE.md`, `PURPOSE.md`, `STRUCTURE.md`, and `<ext>/DIRECTIONS.md` for
per-extension directions.

## Using the API client

```python
from corpora.client.base import Configuration
from corpora.client.models import CorpusChatSchema, MessageSchema
from corpora.client import corpus_api

config = Configuration(
    base_path="http://localhost:8000",
    bearer_access_token="token",
)

for corpus in corpus_api.list_corpora(config):
    print(corpus.id, corpus.name)

reply = corpus_api.chat(
    config,
    CorpusChatSchema(
        corpus_id="00000000-0000-0000-0000-000000000000",
        messages=[MessageSchema(role="user", text="Summarise the corpus")],
    ),
)
print(reply)
```

Failed calls raise a subclass of `corpora.client.base.ApiError`:
`TransportError` when the request cannot be sent, `DecodeError` when the body
is not the expected JSON, and `ResponseError` for 4xx and 5xx answers. A
`ResponseError` carries the status code and the response body.

## Sync

`corpora.cli.commands.sync` hashes each tracked text file the way Git hashes a
blob, with `git_blob_hash`. It then compares those hashes with the server's
map from `get_file_hashes`. The result is a tarball of the files that were added
or changed and a list of the files to delete. `diff_hashes` exposes the
comparison on its own.

## Chat history

`corpora.cli.history.FileChatHistory` stores each session as a JSON list of
messages, named `<session>.json`, so a conversation can be resumed later.