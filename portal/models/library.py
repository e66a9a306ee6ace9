"""Library model definitions."""

from sqlalchemy import Column, Date, Integer, String

from portal.database import Base


class IssuedBook(Base):
    """A book currently issued to a borrower."""
    __tablename__ = 'issued_books'

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    issue_date = Column(Date, nullable=False)
    return_date = Column(Date, nullable=False)
    borrower_roll = Column(String, index=True, nullable=False)


class LibraryResource(Base):
    """Downloadable study material (notes, previous year questions)."""
    __tablename__ = 'library_resources'

    id = Column(Integer, primary_key=True)
    resource_type = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    topic = Column(String, nullable=False)
    download_url = Column(String, nullable=False)
