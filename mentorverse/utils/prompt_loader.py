"""
Jinja2-based prompt template loading and rendering.

Templates live in the package's prompts/ directory, e.g.:

    from mentorverse.utils.prompt_loader import render_prompt

    prompt = render_prompt(
        "suggestions/mentors.j2",
        mentee_profile="Name: Alex Chen, ...",
        candidates=candidates,
        limit=3,
    )
"""

import logging
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

logger = logging.getLogger(__name__)


class PromptLoader:
    """Loads and renders prompt templates from the prompts/ directory"""

    def __init__(self, template_dir: Optional[Path] = None) -> None:
        if template_dir is None:
            template_dir = Path(__file__).parent.parent / "prompts"

        self.template_dir = template_dir
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,  # Prompts are text, not HTML
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render(self, template_name: str, **variables: Any) -> str:
        try:
            template = self.env.get_template(template_name)
        except TemplateNotFound:
            logger.error(f"Prompt template not found: {template_name} (dir: {self.template_dir})")
            raise
        rendered = template.render(**variables)
        logger.debug(f"Rendered prompt {template_name} ({len(rendered)} chars)")
        return rendered


_default_loader: Optional[PromptLoader] = None


def get_default_loader() -> PromptLoader:
    global _default_loader
    if _default_loader is None:
        _default_loader = PromptLoader()
    return _default_loader


def render_prompt(template_name: str, **variables: Any) -> str:
    """Render a template with the default loader"""
    return get_default_loader().render(template_name, **variables)
