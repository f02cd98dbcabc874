from __future__ import annotations

import re
from collections import ChainMap
from typing import Mapping, Optional

from jinja2 import Environment, StrictUndefined, TemplateError, UndefinedError, meta
from jinja2 import TemplateSyntaxError as JinjaSyntaxError

from .errors import TemplateSyntaxError, UndefinedVariableError

# Only "{{" opens template syntax; "{%" and "{#" are common in shell text.
_env = Environment(
    block_start_string="{{%",
    block_end_string="%}}",
    comment_start_string="{{#",
    comment_end_string="#}}",
    undefined=StrictUndefined,
    autoescape=False,
)

# backslashes directly in front of a placeholder
ESCAPE_RE = re.compile(r"(\\+)(\{\{.*?\}\})", re.S)


def build_scope(global_vars: Mapping[str, str],
                local_vars: Optional[Mapping[str, str]] = None) -> ChainMap:
    """Two-level variable lookup: bookmark-local values shadow the globals.

    The globals are never written through the returned view.
    """
    return ChainMap(dict(local_vars or {}), global_vars)


def _unescape(match: re.Match) -> str:
    slashes, placeholder = match.group(1), match.group(2)
    if len(slashes) == 1:
        return "{{% raw %}}" + placeholder + "{{% endraw %}}"
    # "\\{{ x }}" keeps one backslash and still substitutes
    return slashes[1:] + placeholder


def render(template: str, scope: Mapping[str, str], bookmark: str) -> str:
    """Substitute ``{{ name }}`` placeholders from ``scope``.

    ``\\{{ ... }}`` is emitted as the literal ``{{ ... }}``; a doubled
    backslash yields one backslash followed by the substituted value. The
    result is stripped, so a fragment made of a single placeholder line does
    not drag the surrounding YAML whitespace into the command.
    """
    source = ESCAPE_RE.sub(_unescape, template)
    try:
        ast = _env.parse(source)
        missing = sorted(meta.find_undeclared_variables(ast) - set(scope))
        if missing:
            raise UndefinedVariableError(missing[0], bookmark)
        text = _env.from_string(source).render(dict(scope))
    except JinjaSyntaxError as e:
        raise TemplateSyntaxError(template, e.message or "invalid placeholder") from e
    except UndefinedError as e:
        raise UndefinedVariableError(e.message or template, bookmark) from e
    except TemplateError as e:
        raise TemplateSyntaxError(template, str(e)) from e
    return text.strip()
