import logging

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import PlainTextResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portal.auth.dependencies import RequestContext, end_session, get_request_context, start_session
from portal.auth.sanitize import clean
from portal.database import get_db
from portal.fixtures import build_user
from portal.models.user import ADMIN, LIBRARIAN, STUDENT, TEACHER
from portal.repositories import UserRepository
from portal.templating import render

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

SIGNUP_ROLES = (STUDENT, TEACHER, LIBRARIAN)
DEFAULT_TEACHER_CLASS = 'B.Tech 6th Sem (Default)'
ROLE_HOME = {
    ADMIN: '/admin/dashboard',
    LIBRARIAN: '/librarian/control',
    TEACHER: '/teacher/class',
}


def home_for(role: str) -> str:
    return ROLE_HOME.get(role, '/student')


@router.get('/login')
def login_form(request: Request, context: RequestContext = Depends(get_request_context)):
    return render(request, 'login.html', context, page='login', error=None)


@router.post('/login')
def login(
    request: Request,
    roll: str = Form(default=''),
    password: str = Form(default=''),
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    roll = clean(roll)
    password = clean(password)
    logger.info('Login attempt for roll %s', roll)

    user = UserRepository(db).authenticate(roll, password)
    if user is None:
        logger.info('Login failed for roll %s', roll)
        return render(request, 'login.html', context, page='login', error='Invalid roll or password')

    response = RedirectResponse(url=home_for(user.role), status_code=status.HTTP_303_SEE_OTHER)
    start_session(response, user, previous_key=context.session_key)
    return response


@router.post('/logout')
def logout(context: RequestContext = Depends(get_request_context)):
    response = RedirectResponse(url='/', status_code=status.HTTP_303_SEE_OTHER)
    end_session(response, context.session_key)
    if context.user is not None:
        logger.info('Logged out %s', context.user.roll)
    return response


@router.get('/signup')
def signup_select(request: Request, context: RequestContext = Depends(get_request_context)):
    return render(request, 'signup_select.html', context, page='signup', roles=SIGNUP_ROLES)


@router.get('/signup/{role}')
def signup_form(role: str, request: Request, context: RequestContext = Depends(get_request_context)):
    role = role.lower()
    if role not in SIGNUP_ROLES:
        return PlainTextResponse(
            'Invalid role selected. Please return to the signup page to choose a valid role.',
            status_code=status.HTTP_404_NOT_FOUND,
        )
    return render(request, 'signup_form.html', context, page='signup', selected_role=role, error=None)


@router.post('/signup')
def signup(
    request: Request,
    name: str = Form(default=''),
    roll: str = Form(default=''),
    password: str = Form(default=''),
    role: str = Form(default=''),
    university_roll: str = Form(default='', alias='universityRoll'),
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    name = clean(name)
    roll = clean(roll)
    password = clean(password)
    role = clean(role).lower() or STUDENT

    def reject(error: str, status_code: int):
        return render(
            request,
            'signup_form.html',
            context,
            status_code=status_code,
            page='signup',
            selected_role=role,
            error=error,
        )

    if role not in SIGNUP_ROLES:
        return reject('Invalid role selected.', status.HTTP_400_BAD_REQUEST)
    if not (name and roll and password):
        return reject('All fields are required.', status.HTTP_400_BAD_REQUEST)

    repository = UserRepository(db)
    record = {'name': name, 'roll': roll, 'password': password, 'role': role}
    if role == STUDENT:
        record['university_roll'] = clean(university_roll)
    elif role == TEACHER:
        record['class_assigned'] = DEFAULT_TEACHER_CLASS

    try:
        if repository.exists(roll) or not repository.insert_if_absent(build_user(record)):
            logger.info('Signup rejected, roll %s already registered', roll)
            return reject('Roll number already registered.', status.HTTP_200_OK)
    except SQLAlchemyError:
        db.rollback()
        logger.exception('Signup failed for roll %s', roll)
        return reject('Signup is unavailable right now. Please try again later.', status.HTTP_503_SERVICE_UNAVAILABLE)

    user = repository.get_by_roll(roll)
    logger.info('New user signed up: %s (%s) as %s', name, roll, role)

    response = RedirectResponse(url=home_for(role), status_code=status.HTTP_303_SEE_OTHER)
    start_session(response, user, previous_key=context.session_key)
    return response
