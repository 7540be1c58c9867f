from pathlib import Path

from fastapi.templating import Jinja2Templates

from json_post_type.i18n import translate

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["translate"] = translate


def render_fragment(template_name: str, **context) -> str:
    """Render a template outside of a request/response cycle."""
    return templates.get_template(template_name).render(**context)
