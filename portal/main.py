import logging
from pathlib import Path

from fastapi import Depends, FastAPI, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.auth.dependencies import AccessDenied, LoginRequired, RequestContext, get_request_context, resolve_context
from portal.core import config
from portal.database import SessionLocal
from portal.fixtures import seed_database
from portal.models import library, user  # noqa: F401  registers tables on Base
from portal.routes import auth_routes, chat_routes, dashboard_routes
from portal.templating import render

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / 'static'

app = FastAPI(title='College Portal')

if STATIC_DIR.is_dir():
    app.mount('/assets', StaticFiles(directory=str(STATIC_DIR)), name='assets')


@app.on_event('startup')
def initialize_store() -> None:
    config.validate_runtime_config()
    seed_database()


@app.exception_handler(LoginRequired)
async def redirect_to_login(request: Request, exc: LoginRequired):
    return RedirectResponse(url='/login', status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(AccessDenied)
async def render_access_denied(request: Request, exc: AccessDenied):
    return render(
        request,
        'home.html',
        exc.context,
        status_code=status.HTTP_403_FORBIDDEN,
        page='home',
        error=exc.message,
    )


@app.exception_handler(StarletteHTTPException)
async def render_not_found(request: Request, exc: StarletteHTTPException):
    # Unknown paths and unknown methods on known paths both read as "not found".
    if exc.status_code not in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return await http_exception_handler(request, exc)
    requested = request.url.path
    if request.url.query:
        requested = f'{requested}?{request.url.query}'
    logger.info('Not found: %s %s', request.method, requested)

    db = SessionLocal()
    try:
        return render(
            request,
            'home.html',
            resolve_context(request, db),
            status_code=status.HTTP_404_NOT_FOUND,
            page='error',
            error=f'404: The page you requested ({requested}) was not found.',
        )
    finally:
        db.close()


@app.get('/')
def home(request: Request, context: RequestContext = Depends(get_request_context)):
    return render(request, 'home.html', context, page='home', error=None)


app.include_router(auth_routes.router)
app.include_router(dashboard_routes.router)
app.include_router(chat_routes.router)


def run() -> None:
    import uvicorn

    logger.info('Server running on http://%s:%d', config.HOST, config.PORT)
    uvicorn.run(app, host=config.HOST, port=config.PORT)
