from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portal.models.library import IssuedBook, LibraryResource
from portal.models.user import STUDENT, StudentProfile, User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_roll(self, roll: str) -> User | None:
        return self.db.query(User).filter(User.roll == roll).first()

    def exists(self, roll: str) -> bool:
        return self.get_by_roll(roll) is not None

    def authenticate(self, roll: str, password: str) -> User | None:
        return (
            self.db.query(User)
            .filter(User.roll == roll, User.password == password)
            .first()
        )

    def find_student(self, roll: str) -> User | None:
        return (
            self.db.query(User)
            .filter(User.roll == roll, User.role == STUDENT)
            .first()
        )

    def list_students_in_semester(self, semester: int) -> list[User]:
        return (
            self.db.query(User)
            .join(StudentProfile, StudentProfile.user_id == User.id)
            .filter(User.role == STUDENT, StudentProfile.semester == semester)
            .order_by(User.id)
            .all()
        )

    def count(self) -> int:
        return self.db.query(User).count()

    def insert_if_absent(self, user: User) -> bool:
        """Insert ``user`` unless its roll is taken.

        The unique index on ``users.roll`` decides the winner when two
        signups race, so a duplicate never reaches the table.
        """
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return False
        return True


class LibraryRepository:
    def __init__(self, db: Session):
        self.db = db

    def issued_books(self) -> list[IssuedBook]:
        return self.db.query(IssuedBook).order_by(IssuedBook.id).all()

    def issued_books_for(self, roll: str) -> list[IssuedBook]:
        return (
            self.db.query(IssuedBook)
            .filter(IssuedBook.borrower_roll == roll)
            .order_by(IssuedBook.id)
            .all()
        )

    def resources(self) -> list[LibraryResource]:
        return self.db.query(LibraryResource).order_by(LibraryResource.id).all()
