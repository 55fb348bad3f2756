import threading

import pytest

from local_library.parallel import gather
from local_library.storage import Storage


def test_results_keep_argument_order(app):
    with app.app_context():
        assert gather(lambda: 1, lambda: 2, lambda: 3) == [1, 2, 3]
        assert gather() == []


def test_loaders_run_on_worker_threads(app):
    with app.app_context():
        caller = threading.get_ident()
        first, second = gather(threading.get_ident, threading.get_ident)
    assert caller not in (first, second)


def test_sequential_when_disabled(app):
    app.config["PARALLEL_READS"] = False
    with app.app_context():
        caller = threading.get_ident()
        assert gather(threading.get_ident, threading.get_ident) == [caller, caller]


def test_loader_error_propagates(app):
    def broken():
        raise RuntimeError("storage down")

    with app.app_context():
        with pytest.raises(RuntimeError, match="storage down"):
            gather(lambda: 1, broken)


def test_populated_records_usable_after_concurrent_read(app, catalog):
    author_id = catalog.add_author("Octavia", "Butler")
    book_id = catalog.add_book("Kindred", author_id=author_id)
    catalog.add_instance(book_id=book_id, imprint="Beacon")

    with app.app_context():
        storage = Storage()
        book, instances = gather(
            lambda: storage.books.find_by_id(book_id, populate=("author", "genres")),
            lambda: storage.instances.find(book_id=book_id),
        )
    assert book.author.full_name == "Butler, Octavia"
    assert book.genres == []
    assert [i.imprint for i in instances] == ["Beacon"]
