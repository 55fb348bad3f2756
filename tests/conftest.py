import pytest

from local_library import create_app
from local_library.models import Author, Book, BookInstance, Genre, db


@pytest.fixture
def app(tmp_path):
    # Each test gets its own database file; worker threads used for
    # concurrent reads open their own connections to it
    db_file = tmp_path / "catalog.db"
    app = create_app({
        "TESTING": True,
        "WTF_CSRF_ENABLED": False,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_file}",
        "LOG_LEVEL": "DEBUG",
    })
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


class CatalogData:
    """Direct access to the catalog tables for arranging and checking tests.
    Every method runs in its own application context and returns plain
    values, never ORM objects."""

    def __init__(self, app):
        self.app = app

    def _add(self, record):
        with self.app.app_context():
            db.session.add(record)
            db.session.commit()
            return record.id

    def add_author(self, first_name="Jane", family_name="Austen", **fields):
        return self._add(Author(first_name=first_name, family_name=family_name, **fields))

    def add_genre(self, name="Fiction"):
        return self._add(Genre(name=name))

    def add_book(self, title="Emma", author_id=None, genre_ids=(), summary="A novel.", isbn="9780141439587"):
        if author_id is None:
            author_id = self.add_author()
        with self.app.app_context():
            genres = [db.session.get(Genre, gid) for gid in genre_ids]
            book = Book(title=title, author_id=author_id, summary=summary, isbn=isbn, genres=genres)
            db.session.add(book)
            db.session.commit()
            return book.id

    def add_instance(self, book_id=None, imprint="Penguin", status="Available", due_back=None):
        if book_id is None:
            book_id = self.add_book()
        return self._add(BookInstance(book_id=book_id, imprint=imprint, status=status, due_back=due_back))

    def count(self, model):
        with self.app.app_context():
            return db.session.query(model).count()

    def get(self, model, identity):
        """The stored record's editable fields as a dict, or None."""
        with self.app.app_context():
            record = db.session.get(model, identity)
            if record is None:
                return None
            values = record.editable_values()
            if "genres" in values:
                values["genres"] = sorted(g.id for g in values["genres"])
            return values

    def ids(self, model):
        with self.app.app_context():
            return [row.id for row in db.session.query(model).order_by(model.id)]


@pytest.fixture
def catalog(app):
    return CatalogData(app)
