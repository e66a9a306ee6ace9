"""User model definitions.

A user row is the identity header shared by every role; role-specific
data lives in a payload table selected by ``role``.
"""

from sqlalchemy import Column, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from portal.database import Base

STUDENT = 'student'
ADMIN = 'admin'
LIBRARIAN = 'librarian'
TEACHER = 'teacher'
ROLES = (STUDENT, ADMIN, LIBRARIAN, TEACHER)

DEFAULT_PROFILE_PIC = '/assets/profile-placeholder.png'


class User(Base):
    """Represents a portal account."""
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    roll = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)  # plaintext, see DESIGN.md
    name = Column(String, nullable=False)
    role = Column(String, nullable=False)
    profile_pic = Column(String, nullable=False, default=DEFAULT_PROFILE_PIC)

    student_profile = relationship(
        'StudentProfile',
        uselist=False,
        back_populates='user',
        cascade='all, delete-orphan',
        lazy='selectin',
    )
    teacher_profile = relationship(
        'TeacherProfile',
        uselist=False,
        back_populates='user',
        cascade='all, delete-orphan',
        lazy='selectin',
    )

    @property
    def profile(self):
        if self.role == STUDENT:
            return self.student_profile
        if self.role == TEACHER:
            return self.teacher_profile
        return None


class StudentProfile(Base):
    """Student payload: enrolment details and academic history."""
    __tablename__ = 'student_profiles'

    user_id = Column(Integer, ForeignKey('users.id'), primary_key=True)
    university_roll = Column(String, nullable=False, default='')
    semester = Column(Integer, nullable=False, default=1)
    college = Column(String, nullable=False, default='N/A')

    user = relationship('User', back_populates='student_profile')
    performance = relationship(
        'PerformanceRecord',
        order_by='PerformanceRecord.semester',
        cascade='all, delete-orphan',
        lazy='selectin',
    )
    report_cards = relationship(
        'ReportCard',
        order_by='ReportCard.semester',
        cascade='all, delete-orphan',
        lazy='selectin',
    )


class PerformanceRecord(Base):
    __tablename__ = 'performance_records'

    id = Column(Integer, primary_key=True)
    student_id = Column(Integer, ForeignKey('student_profiles.user_id'), nullable=False)
    semester = Column(Integer, nullable=False)
    gpa = Column(Float, nullable=False)


class ReportCard(Base):
    __tablename__ = 'report_cards'
    __table_args__ = (UniqueConstraint('student_id', 'semester'),)

    id = Column(Integer, primary_key=True)
    student_id = Column(Integer, ForeignKey('student_profiles.user_id'), nullable=False)
    semester = Column(Integer, nullable=False)
    document_path = Column(String, nullable=False)


class TeacherProfile(Base):
    __tablename__ = 'teacher_profiles'

    user_id = Column(Integer, ForeignKey('users.id'), primary_key=True)
    class_assigned = Column(String, nullable=False)

    user = relationship('User', back_populates='teacher_profile')
