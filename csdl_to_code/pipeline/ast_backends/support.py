"""
Rendering of the runtime-support module and the package initializer.

Both are fixed text with a few substitutions, so they come from jinja2
templates rather than from the IR.
"""

from __future__ import annotations

from pathlib import Path

import jinja2

from ..config import CodeGeneratorConfig


class SupportModuleRenderer:
    """Renders the shared ``odata`` module and the generated package ``__init__``."""

    TEMPLATE_LANG = "python"

    def __init__(self, config: CodeGeneratorConfig):
        self.config = config
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.support_template = self.jinja_env.get_template("odata.py.jinja2")
        self.package_template = self.jinja_env.get_template("__init__.py.jinja2")

    def render_support(self, generation_comment: str = "") -> str:
        return self.support_template.render(generation_comment=generation_comment)

    def render_package(self, modules: list[str], generation_comment: str = "") -> str:
        """
        Render the package ``__init__`` importing every generated module.

        Args:
            modules: Generated group module names
            generation_comment: Header comment line, may be empty
        """
        return self.package_template.render(
            generation_comment=generation_comment,
            support_module=self.config.support_module if self.config.emit_support_module else "",
            modules=sorted(modules),
        )
