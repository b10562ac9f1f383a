# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0


"""Jinja2 rendering of changelog markdown.

Four built-in templates ship in ``commitkit/templates``::

    changelog.md.j2   header, highlights, then every section
    header.md.j2      ## [version](compare link) "title" (date)
    section.md.j2     ### title + one line per commit
    commit.md.j2      * **scope:** subject ([abc1234](commit link)), closes [#1](issue link)

A ``templates_dir`` is searched before the built-ins, so a file named
``commit.md.j2`` there replaces the built-in commit line everywhere it
is included.

Two filters are registered:

- ``forge``: fills ``{{key}}`` placeholders in a URL format from the
  render context, with keyword arguments taking precedence.
- ``shorten``: truncates a string (``hash | shorten(7)``).

Usage::

    render = ChangelogRenderer()
    render.header({'version': '1.0.0'})  # '## 1.0.0'
    render({'version': '1.0.0', 'sections': [...], 'highlights': [...]})
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import jinja2
from jinja2.runtime import Context, Undefined

from commitkit.errors import CommitKitError, E
from commitkit.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONTEXT: Mapping[str, Any] = {
    'commit_url_format': '{{host}}/{{owner}}/{{repository}}/commit/{{hash}}',
    'compare_url_format': '{{host}}/{{owner}}/{{repository}}/compare/{{previous_tag}}...{{current_tag}}',
    'issue_url_format': '{{host}}/{{owner}}/{{repository}}/issues/{{id}}',
    'link_references': True,
}

CHANGELOG_TEMPLATE = 'changelog.md.j2'
HEADER_TEMPLATE = 'header.md.j2'
SECTION_TEMPLATE = 'section.md.j2'
COMMIT_TEMPLATE = 'commit.md.j2'


def forge(template: str, replacements: Mapping[str, Any]) -> str:
    """Replace every ``{{key}}`` in ``template`` with ``str(value)``.

    ``None`` and undefined values are skipped, leaving the placeholder.

    >>> forge('Hello {{name}}', {'name': 'World'})
    'Hello World'
    """
    for key, value in replacements.items():
        if value is None or isinstance(value, Undefined):
            continue
        template = template.replace('{{' + key + '}}', str(value))
    return template


@jinja2.pass_context
def _forge_filter(context: Context, template: str, **kwargs: Any) -> str:
    return forge(template, {**context.get_all(), **kwargs})


def shorten(value: str, length: int) -> str:
    """Return the first ``length`` characters of ``value``."""
    return value[:length]


def create_environment(templates_dir: Path | str | Sequence[Path | str] | None = None) -> jinja2.Environment:
    """Build the Jinja2 environment with the built-in templates and filters."""
    loaders: list[jinja2.BaseLoader] = []
    if templates_dir:
        paths = [templates_dir] if isinstance(templates_dir, (str, Path)) else list(templates_dir)
        loaders.append(jinja2.FileSystemLoader([str(p) for p in paths]))
    loaders.append(jinja2.PackageLoader('commitkit', 'templates'))

    env = jinja2.Environment(  # noqa: S701 - markdown output, not HTML
        loader=jinja2.ChoiceLoader(loaders),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )
    env.filters['forge'] = _forge_filter
    env.filters['shorten'] = shorten
    return env


class ChangelogRenderer:
    """Render changelog markdown from a context mapping.

    Every method merges :data:`DEFAULT_CONTEXT` under the caller's
    context. ``template`` renders a template string instead of the
    built-in; ``template_path`` loads a named template from the
    environment (``templates_dir`` first).

    Args:
        templates_dir: Directory (or directories) searched before the
            built-in templates.
    """

    def __init__(self, templates_dir: Path | str | Sequence[Path | str] | None = None) -> None:
        """Create the Jinja2 environment."""
        self.env = create_environment(templates_dir)

    def __call__(self, context: Mapping[str, Any] | None = None) -> str:
        """Render a full release entry."""
        merged = {**DEFAULT_CONTEXT, 'sections': [], 'highlights': [], **(context or {})}
        return self._render(merged, CHANGELOG_TEMPLATE)

    def header(
        self,
        context: Mapping[str, Any] | None = None,
        *,
        template: str | None = None,
        template_path: str | None = None,
    ) -> str:
        """Render the release heading."""
        merged = {**DEFAULT_CONTEXT, **(context or {})}
        return self._render(merged, HEADER_TEMPLATE, template, template_path)

    def section(
        self,
        section: Any,
        context: Mapping[str, Any] | None = None,
        *,
        template: str | None = None,
        template_path: str | None = None,
    ) -> str:
        """Render one section (anything with ``title`` and ``commits``)."""
        merged = {**DEFAULT_CONTEXT, **(context or {}), 'section': section}
        return self._render(merged, SECTION_TEMPLATE, template, template_path)

    def commit(
        self,
        commit: Any,
        context: Mapping[str, Any] | None = None,
        *,
        template: str | None = None,
        template_path: str | None = None,
    ) -> str:
        """Render one commit line."""
        merged = {**DEFAULT_CONTEXT, **(context or {}), 'commit': commit}
        return self._render(merged, COMMIT_TEMPLATE, template, template_path)

    def _render(
        self,
        context: Mapping[str, Any],
        name: str,
        template: str | None = None,
        template_path: str | None = None,
    ) -> str:
        target = template_path or name
        try:
            if template is not None and template_path is None:
                return self.env.from_string(template).render(context)
            return self.env.get_template(target).render(context)
        except jinja2.TemplateNotFound as exc:
            raise CommitKitError(
                code=E.RENDER_TEMPLATE_NOT_FOUND,
                message=f'Template not found: {exc.name}',
                hint='Check templates_dir and the template file name.',
            ) from exc
        except jinja2.TemplateError as exc:
            logger.debug('render_failed', template=target, error=str(exc))
            raise CommitKitError(
                code=E.RENDER_FAILED,
                message=f'Failed to render {target}: {exc}',
                hint='Fix the template syntax or the context it expects.',
            ) from exc


__all__ = [
    'CHANGELOG_TEMPLATE',
    'COMMIT_TEMPLATE',
    'DEFAULT_CONTEXT',
    'HEADER_TEMPLATE',
    'SECTION_TEMPLATE',
    'ChangelogRenderer',
    'create_environment',
    'forge',
    'shorten',
]
