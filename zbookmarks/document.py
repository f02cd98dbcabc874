from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from .errors import ConfigParseError
from .logging_utils import setup_logger
from .models import ConfigModel

logger = setup_logger("zbookmarks.document")

EMPTY_DOCUMENT = {"vars": {}, "cmds": {}, "bookmarks": []}


def create_if_missing(path: Path) -> bool:
    """Write an empty bookmarks document when ``path`` does not exist yet.

    Returns True when a file was created.
    """
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(EMPTY_DOCUMENT, sort_keys=False), encoding="utf-8")
    logger.info(f"📝 Created empty bookmarks file: {path}")
    return True


def parse_document(text: str, source: str = "<string>") -> ConfigModel:
    """
    YAML文書をConfigModelに変換する

    Raises:
        ConfigParseError: YAMLとして不正、またはスキーマに合わない場合
        DuplicateBookmarkNameError: 同名のブックマークがある場合
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigParseError(source, f"invalid YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigParseError(source, "top level must be a mapping")

    try:
        return ConfigModel.from_document(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigParseError(source, problems) from e


def load_document(path: Path) -> ConfigModel:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigParseError(str(path), str(e)) from e
    config = parse_document(text, source=str(path))
    logger.debug(f"📖 Loaded {len(config.bookmarks)} bookmarks from {path}")
    return config
