from datetime import date

from fastapi import APIRouter, Depends, Form, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

from portal.auth.dependencies import RequestContext, require_roles
from portal.auth.sanitize import clean
from portal.database import get_db
from portal.models.user import ADMIN, LIBRARIAN, STUDENT, TEACHER
from portal.repositories import LibraryRepository, UserRepository
from portal.templating import render

router = APIRouter(tags=['dashboards'])

TEACHER_CLASS_SEMESTER = 6


class IssuedBookView(BaseModel):
    title: str
    issue_date: date
    return_date: date

    class Config:
        from_attributes = True


class StudentIssueRecords(BaseModel):
    student_name: str
    student_roll: str
    books: list[IssuedBookView]


def build_issue_records(student, library: LibraryRepository) -> StudentIssueRecords:
    return StudentIssueRecords(
        student_name=student.name,
        student_roll=student.roll,
        books=[IssuedBookView.model_validate(book) for book in library.issued_books_for(student.roll)],
    )


@router.get('/student')
def student_dashboard(request: Request, context: RequestContext = Depends(require_roles(STUDENT))):
    return render(request, 'student.html', context, page='student', student=context.user)


@router.get('/library')
def library(
    request: Request,
    context: RequestContext = Depends(require_roles(STUDENT, LIBRARIAN, ADMIN)),
    db: Session = Depends(get_db),
):
    repository = LibraryRepository(db)
    return render(
        request,
        'library.html',
        context,
        page='library',
        issued_books=repository.issued_books(),
        resources=repository.resources(),
    )


@router.get('/guidance')
def guidance(request: Request, context: RequestContext = Depends(require_roles(STUDENT, TEACHER, ADMIN))):
    return render(request, 'guidance.html', context, page='guidance')


@router.get('/admin/dashboard')
def admin_dashboard(request: Request, context: RequestContext = Depends(require_roles(ADMIN))):
    return render(request, 'admin/dashboard.html', context, page='admin', found_student=None, search_query=None)


@router.post('/admin/search')
def admin_search(
    request: Request,
    roll: str = Form(default=''),
    context: RequestContext = Depends(require_roles(ADMIN)),
    db: Session = Depends(get_db),
):
    student = UserRepository(db).find_student(clean(roll))
    return render(
        request,
        'admin/dashboard.html',
        context,
        page='admin',
        found_student=student,
        search_query=roll,
    )


@router.get('/librarian/control')
def librarian_control(
    request: Request,
    context: RequestContext = Depends(require_roles(LIBRARIAN)),
    db: Session = Depends(get_db),
):
    repository = LibraryRepository(db)
    return render(
        request,
        'librarian/control.html',
        context,
        page='librarian',
        issued_books=repository.issued_books(),
        resources=repository.resources(),
        issue_records=None,
        search_roll=None,
    )


@router.post('/librarian/search-student')
def librarian_search_student(
    request: Request,
    roll: str = Form(default=''),
    context: RequestContext = Depends(require_roles(LIBRARIAN)),
    db: Session = Depends(get_db),
):
    repository = LibraryRepository(db)
    student = UserRepository(db).find_student(clean(roll))
    issue_records = build_issue_records(student, repository) if student else None
    return render(
        request,
        'librarian/control.html',
        context,
        page='librarian',
        issued_books=repository.issued_books(),
        resources=repository.resources(),
        issue_records=issue_records,
        search_roll=roll,
    )


@router.get('/teacher/class')
def teacher_class(
    request: Request,
    context: RequestContext = Depends(require_roles(TEACHER)),
    db: Session = Depends(get_db),
):
    teacher = context.user
    class_students = UserRepository(db).list_students_in_semester(TEACHER_CLASS_SEMESTER)
    return render(
        request,
        'teacher/class.html',
        context,
        page='teacher',
        teacher=teacher,
        class_students=class_students,
        assigned_class=teacher.teacher_profile.class_assigned if teacher.teacher_profile else '',
    )
