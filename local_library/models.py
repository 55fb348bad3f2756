"""
Catalog records: Author, Genre, Book and BookInstance.

References between records are plain foreign keys with one-way
relationships, resolved on read by the storage layer ("populate").
Derived values (full name, formatted dates, canonical url) are computed
properties and are never stored.
"""
from datetime import date
from typing import Optional

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.orm import validates

db = SQLAlchemy()

STATUS_AVAILABLE = "Available"
STATUS_MAINTENANCE = "Maintenance"
STATUS_LOANED = "Loaned"
STATUS_RESERVED = "Reserved"
INSTANCE_STATUSES = (STATUS_AVAILABLE, STATUS_MAINTENANCE, STATUS_LOANED, STATUS_RESERVED)


# --- Derived value helpers ---
def canonical_url(kind: str, identity) -> str:
    return f"/catalog/{kind}/{identity}"


def full_name(first_name: Optional[str], family_name: Optional[str]) -> str:
    # Both parts are needed; a half-filled name renders as nothing
    if first_name and family_name:
        return f"{family_name}, {first_name}"
    return ""


def format_date(value: Optional[date]) -> str:
    """Medium display style, e.g. 'Oct 19, 2026'. Empty for absent dates."""
    if not value:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


def case_key(value: Optional[str]) -> Optional[str]:
    """Comparison key for case-insensitive equality, full Unicode folding."""
    if value is None:
        return None
    return value.casefold()


def iso_date(value: Optional[date]) -> str:
    """YYYY-MM-DD for pre-filling <input type="date"> fields."""
    if not value:
        return ""
    return value.isoformat()


class CatalogRecord:
    """Mixin for the url property shared by every record kind."""
    KIND = ""
    EDITABLE = ()
    # field -> stored case_key column used by case-insensitive lookups
    CASE_KEYS = {}

    @property
    def url(self) -> str:
        return canonical_url(self.KIND, self.id)

    def editable_values(self) -> dict:
        return {name: getattr(self, name) for name in self.EDITABLE}

    def __repr__(self):
        return f"<{type(self).__name__} id={self.id}>"


# --- Models ---
book_genres = db.Table(
    "book_genres",
    db.Column("book_id", db.Integer, db.ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
    db.Column("genre_id", db.Integer, db.ForeignKey("genres.id"), primary_key=True),
)


class Author(CatalogRecord, db.Model):
    __tablename__ = "authors"
    KIND = "author"
    EDITABLE = ("first_name", "family_name", "date_of_birth", "date_of_death")

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    family_name = db.Column(db.String(100), nullable=False, index=True)
    date_of_birth = db.Column(db.Date)
    date_of_death = db.Column(db.Date)

    @property
    def full_name(self) -> str:
        return full_name(self.first_name, self.family_name)

    @property
    def date_of_birth_formatted(self) -> str:
        return format_date(self.date_of_birth)

    @property
    def date_of_death_formatted(self) -> str:
        return format_date(self.date_of_death)

    @property
    def date_of_birth_yyyy_mm_dd(self) -> str:
        return iso_date(self.date_of_birth)

    @property
    def date_of_death_yyyy_mm_dd(self) -> str:
        return iso_date(self.date_of_death)

    @property
    def lifespan(self) -> str:
        if not self.date_of_birth and not self.date_of_death:
            return ""
        return f"{self.date_of_birth_formatted} - {self.date_of_death_formatted}"


class Genre(CatalogRecord, db.Model):
    __tablename__ = "genres"
    KIND = "genre"
    EDITABLE = ("name",)
    CASE_KEYS = {"name": "name_key"}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, index=True)
    name_key = db.Column(db.String(100), nullable=False, index=True)

    @validates("name")
    def _set_name_key(self, key, value):
        self.name_key = case_key(value)
        return value


class Book(CatalogRecord, db.Model):
    __tablename__ = "books"
    KIND = "book"
    EDITABLE = ("title", "author_id", "summary", "isbn", "genres")

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False, index=True)
    author_id = db.Column(db.Integer, db.ForeignKey("authors.id"), nullable=False)
    summary = db.Column(db.Text, nullable=False)
    isbn = db.Column(db.String(20), nullable=False)

    author = db.relationship("Author")
    genres = db.relationship("Genre", secondary=book_genres, order_by="Genre.name")


class BookInstance(CatalogRecord, db.Model):
    __tablename__ = "book_instances"
    KIND = "bookinstance"
    EDITABLE = ("book_id", "imprint", "status", "due_back")

    id = db.Column(db.Integer, primary_key=True)
    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False)
    imprint = db.Column(db.String(200), nullable=False)
    status = db.Column(db.String(20), nullable=False, default=STATUS_MAINTENANCE)
    due_back = db.Column(db.Date)

    book = db.relationship("Book")

    @property
    def due_back_formatted(self) -> str:
        return format_date(self.due_back)

    @property
    def due_back_yyyy_mm_dd(self) -> str:
        return iso_date(self.due_back)
