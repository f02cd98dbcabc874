import textwrap

import pytest

from zbookmarks.config import Settings
from zbookmarks.document import parse_document
from zbookmarks.session import BookmarkSession, Generation

SAMPLE_DOCUMENT = """
vars:
  path: /tmp
  message: global
cmds:
  list: "ls {{ path }}"
  say: "echo {{ message }}"
bookmarks:
  - name: alpha
    desc: List the temp dir
    cmds:
      - cmd::list
    labels: [files, tmp]
  - name: beta
    cmds:
      - cd {{ path }}
      - bookmark::alpha
    labels: [nav, files]
    exec: true
  - name: greet
    cmds: [cmd::say]
    vars:
      message: local
  - name: broken
    cmds: [cmd::missing]
"""


@pytest.fixture
def make_config():
    def _make(text: str):
        return parse_document(textwrap.dedent(text))
    return _make


@pytest.fixture
def sample_config(make_config):
    return make_config(SAMPLE_DOCUMENT)


@pytest.fixture
def sample_generation(sample_config):
    return Generation.build(sample_config, number=1)


@pytest.fixture
def bookmarks_file(tmp_path):
    path = tmp_path / ".zellij_bookmarks.yaml"
    path.write_text(SAMPLE_DOCUMENT, encoding="utf-8")
    return path


@pytest.fixture
def settings(tmp_path):
    return Settings(
        cwd=str(tmp_path),
        filename=".zellij_bookmarks.yaml",
        exec=False,
        ignore_case=True,
        autodetect_filter_mode=True,
        bind_edit="",
        bind_reload="",
        bind_switch_filter_label="",
        bind_switch_filter_id="",
        bind_describe="",
        api_key="",
    )


@pytest.fixture
def session(bookmarks_file, settings):
    return BookmarkSession.open(bookmarks_file, settings)
