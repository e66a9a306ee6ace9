from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from portal.auth.dependencies import RequestContext

TEMPLATES_DIR = Path(__file__).resolve().parent / 'templates'

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(
    request: Request,
    name: str,
    context: RequestContext | None = None,
    status_code: int = 200,
    **values,
):
    values.setdefault('page', None)
    values['user'] = context.user if context else None
    return templates.TemplateResponse(request, name, values, status_code=status_code)
