"""
Record storage over the SQLAlchemy session.

Each view talks to a Repository per record kind instead of using the
model query objects directly. Repositories resolve ``db.session`` at call
time, so the same repository works in the request thread and inside the
worker threads used by ``local_library.parallel.gather``.
"""
import logging
from typing import Iterable, Optional, Sequence

from flask import g
from sqlalchemy import func
from sqlalchemy.orm import joinedload, load_only, selectinload

from .models import Author, Book, BookInstance, Genre, case_key, db

logger = logging.getLogger(__name__)

# Integer primary keys are signed 64-bit in every backend we run on
MIN_IDENTITY = -2 ** 63
MAX_IDENTITY = 2 ** 63 - 1


def storable_identity(value) -> bool:
    """True when ``value`` can be bound as an integer primary key."""
    return isinstance(value, int) and MIN_IDENTITY <= value <= MAX_IDENTITY


class Repository:

    def __init__(self, model):
        self.model = model

    @property
    def session(self):
        return db.session

    def _populate_options(self, populate: Iterable[str]):
        options = []
        for name in populate:
            relation = getattr(self.model, name)
            if relation.property.uselist:
                options.append(selectinload(relation))
            else:
                options.append(joinedload(relation))
        return options

    @staticmethod
    def _bindable(equals) -> bool:
        # An integer no column can hold matches nothing
        return all(storable_identity(v) for v in equals.values() if isinstance(v, int))

    def _case_insensitive_equals(self, name, value):
        key_column = self.model.CASE_KEYS.get(name)
        if key_column is not None:
            return getattr(self.model, key_column) == case_key(value)
        return func.lower(getattr(self.model, name)) == func.lower(value)

    def find(self, *criteria, columns: Sequence[str] = (), order_by: Sequence[str] = (),
             populate: Iterable[str] = (), **equals) -> list:
        """All records matching ``criteria`` and ``equals``.

        ``columns`` restricts the loaded fields (the identity is always
        loaded), ``order_by`` names fields sorted ascending and ``populate``
        names relationships resolved inline.
        """
        if not self._bindable(equals):
            return []
        query = self.model.query
        if criteria:
            query = query.filter(*criteria)
        if equals:
            query = query.filter_by(**equals)
        if columns:
            query = query.options(load_only(*[getattr(self.model, c) for c in columns]))
        query = query.options(*self._populate_options(populate))
        if order_by:
            query = query.order_by(*[getattr(self.model, c).asc() for c in order_by])
        return query.all()

    def find_one(self, case_insensitive: bool = False, **equals):
        if not self._bindable(equals):
            return None
        query = self.model.query
        for name, value in equals.items():
            column = getattr(self.model, name)
            if case_insensitive and isinstance(value, str):
                query = query.filter(self._case_insensitive_equals(name, value))
            else:
                query = query.filter(column == value)
        return query.order_by(self.model.id).first()

    def find_by_id(self, identity, populate: Iterable[str] = ()):
        if not storable_identity(identity):
            return None
        return self.session.get(self.model, identity, options=self._populate_options(populate))

    def count(self, *criteria, **equals) -> int:
        if not self._bindable(equals):
            return 0
        query = self.model.query
        if criteria:
            query = query.filter(*criteria)
        if equals:
            query = query.filter_by(**equals)
        return query.count()

    def exists(self, identity) -> bool:
        return self.find_by_id(identity) is not None

    def insert(self, record):
        if record.id is not None:
            raise ValueError(f"{type(record).__name__} already has identity {record.id}")
        self.session.add(record)
        self.session.commit()
        logger.info("Inserted %s %s", record.KIND, record.id)
        return record

    def replace_by_id(self, identity, candidate) -> Optional[object]:
        """Overwrite every editable field of the stored record with the
        candidate's values. Returns None when no record has ``identity``."""
        record = self.find_by_id(identity)
        if record is None:
            return None
        for name, value in candidate.editable_values().items():
            setattr(record, name, value)
        self.session.commit()
        logger.info("Replaced %s %s", record.KIND, record.id)
        return record

    def delete_by_id(self, identity) -> None:
        record = self.find_by_id(identity)
        if record is None:
            return
        self.session.delete(record)
        self.session.commit()
        logger.info("Deleted %s %s", self.model.KIND, identity)


class Storage:
    """The four repositories a request works with."""

    def __init__(self):
        self.authors = Repository(Author)
        self.genres = Repository(Genre)
        self.books = Repository(Book)
        self.instances = Repository(BookInstance)


def get_storage() -> Storage:
    if "storage" not in g:
        g.storage = Storage()
    return g.storage
