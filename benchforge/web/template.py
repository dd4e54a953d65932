from pathlib import Path
from typing import Any

import jinja2

DEFAULT_TEMPLATE = Path(__file__).parent / "assets" / "index.html"


class TemplateLoadError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class DashboardTemplate:
    """A parsed dashboard page, read-only once loaded."""

    def __init__(self, template: jinja2.Template, path: Path):
        self._template = template
        self.path = path

    def render(self, **context: Any) -> str:
        return self._template.render(**context)


def load_template(path: str | Path | None = None) -> DashboardTemplate:
    template_path = Path(path) if path is not None else DEFAULT_TEMPLATE

    try:
        source = template_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TemplateLoadError(f"Cannot read dashboard template {template_path}: {exc}") from exc

    env = jinja2.Environment(
        autoescape=True,
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
    )
    try:
        template = env.from_string(source)
    except jinja2.TemplateSyntaxError as exc:
        raise TemplateLoadError(
            f"{template_path}:{exc.lineno}: invalid dashboard template: {exc.message}"
        ) from exc

    return DashboardTemplate(template, template_path)
