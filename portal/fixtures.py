"""Seed records loaded into the store when the application starts."""

import logging
from datetime import date

from sqlalchemy.orm import Session

from portal.database import SessionLocal, drop_schema, ensure_schema
from portal.models.library import IssuedBook, LibraryResource
from portal.models.user import (
    ADMIN,
    LIBRARIAN,
    STUDENT,
    TEACHER,
    PerformanceRecord,
    ReportCard,
    StudentProfile,
    TeacherProfile,
    User,
)

logger = logging.getLogger(__name__)

SEED_USERS = [
    {
        'roll': '22111234',
        'password': 'pass123',
        'name': 'John Doe',
        'role': STUDENT,
        'university_roll': '12345623145',
        'semester': 6,
        'college': 'ABC College',
        'performance': [
            (1, 7.2),
            (2, 7.5),
            (3, 7.8),
            (4, 8.0),
            (5, 8.2),
            (6, 8.5),
        ],
        'report_cards': {1: '/assets/marksheets/sem1.pdf'},
    },
    {'roll': 'admin001', 'password': 'adminpass', 'name': 'System Administrator', 'role': ADMIN},
    {'roll': 'lib001', 'password': 'libpass', 'name': 'College Librarian', 'role': LIBRARIAN},
    {
        'roll': 'teacher101',
        'password': 'teachpass',
        'name': 'Professor Smith',
        'role': TEACHER,
        'class_assigned': 'B.Tech 6th Sem',
    },
]

SEED_ISSUED_BOOKS = [
    ('DBMS', date(2025, 11, 10), date(2025, 12, 10), '22111234'),
    ('Operating Systems', date(2025, 11, 15), date(2025, 12, 15), '22111234'),
]

SEED_RESOURCES = [
    ('Notes', 'Computer Networks', 'OSI Model', '/assets/ebooks/cn-osi.pdf'),
    ('PYQ', 'Algorithms', 'Greedy', '/assets/ebooks/algo-greedy.pdf'),
]


def build_user(record: dict) -> User:
    user = User(
        roll=record['roll'],
        password=record['password'],
        name=record['name'],
        role=record['role'],
    )
    if record['role'] == STUDENT:
        user.student_profile = StudentProfile(
            university_roll=record.get('university_roll', ''),
            semester=record.get('semester', 1),
            college=record.get('college', 'N/A'),
            performance=[
                PerformanceRecord(semester=semester, gpa=gpa)
                for semester, gpa in record.get('performance', [])
            ],
            report_cards=[
                ReportCard(semester=semester, document_path=path)
                for semester, path in record.get('report_cards', {}).items()
            ],
        )
    elif record['role'] == TEACHER:
        user.teacher_profile = TeacherProfile(class_assigned=record['class_assigned'])
    return user


def _seed(db: Session) -> None:
    existing = {roll for (roll,) in db.query(User.roll).all()}
    for record in SEED_USERS:
        if record['roll'] not in existing:
            db.add(build_user(record))

    if db.query(IssuedBook).first() is None:
        for title, issue_date, return_date, borrower_roll in SEED_ISSUED_BOOKS:
            db.add(IssuedBook(
                title=title,
                issue_date=issue_date,
                return_date=return_date,
                borrower_roll=borrower_roll,
            ))

    if db.query(LibraryResource).first() is None:
        for resource_type, subject, topic, download_url in SEED_RESOURCES:
            db.add(LibraryResource(
                resource_type=resource_type,
                subject=subject,
                topic=topic,
                download_url=download_url,
            ))

    db.commit()


def seed_database() -> None:
    ensure_schema()
    db = SessionLocal()
    try:
        _seed(db)
    finally:
        db.close()
    logger.info('Seed data loaded (%d users).', len(SEED_USERS))


def reset_database() -> None:
    drop_schema()
    seed_database()
