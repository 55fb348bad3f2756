import pytest

from local_library.models import Author, Book, Genre
from local_library.storage import Repository, Storage


@pytest.fixture
def storage(app):
    with app.app_context():
        yield Storage()


def test_find_sorted_by_natural_key(catalog, storage):
    for name in ("Poetry", "Fantasy", "Horror"):
        catalog.add_genre(name)
    assert [g.name for g in storage.genres.find(order_by=("name",))] == ["Fantasy", "Horror", "Poetry"]


def test_find_filters_and_populates(catalog, storage):
    author_id = catalog.add_author("Ursula", "LeGuin")
    fantasy = catalog.add_genre("Fantasy")
    catalog.add_book("Earthsea", author_id=author_id, genre_ids=[fantasy])
    catalog.add_book("Unrelated")

    books = storage.books.find(Book.genres.any(Genre.id == fantasy), populate=("author", "genres"))
    assert [b.title for b in books] == ["Earthsea"]
    assert books[0].author.full_name == "LeGuin, Ursula"
    assert [g.name for g in books[0].genres] == ["Fantasy"]

    assert [b.title for b in storage.books.find(author_id=author_id)] == ["Earthsea"]


def test_find_one_case_insensitive(catalog, storage):
    genre_id = catalog.add_genre("Fiction")
    assert storage.genres.find_one(case_insensitive=True, name="FICTION").id == genre_id
    assert storage.genres.find_one(name="FICTION") is None


def test_find_one_case_insensitive_folds_unicode(catalog, storage):
    genre_id = catalog.add_genre("Ética")
    assert storage.genres.find_one(case_insensitive=True, name="ÉTICA").id == genre_id
    assert storage.genres.find_one(case_insensitive=True, name="ética").id == genre_id


def test_find_by_id_missing(storage):
    assert storage.authors.find_by_id(404) is None
    assert storage.authors.find_by_id(None) is None
    assert storage.authors.find_by_id(2 ** 63) is None
    assert storage.books.find(author_id=2 ** 70) == []
    assert storage.books.count(author_id=-(2 ** 64)) == 0


def test_insert_assigns_identity(storage):
    genre = Genre(name="Drama")
    assert genre.id is None
    storage.genres.insert(genre)
    assert genre.id is not None
    assert storage.genres.count() == 1


def test_insert_refuses_record_with_identity(catalog, storage):
    genre_id = catalog.add_genre("Drama")
    with pytest.raises(ValueError):
        storage.genres.insert(Genre(id=genre_id, name="Drama"))


def test_replace_by_id_keeps_identity(catalog, storage):
    author_id = catalog.add_author("Jane", "Austin")
    replaced = storage.authors.replace_by_id(author_id, Author(id=author_id, first_name="Jane", family_name="Austen"))
    assert replaced.id == author_id
    assert catalog.get(Author, author_id)["family_name"] == "Austen"


def test_replace_by_id_missing_record(storage):
    assert storage.genres.replace_by_id(99, Genre(id=99, name="Ghost")) is None
    assert storage.genres.count() == 0


def test_replace_overwrites_genre_references(catalog, storage):
    a, b = catalog.add_genre("Alpha"), catalog.add_genre("Beta")
    book_id = catalog.add_book("Emma", genre_ids=[a])
    record = storage.books.find_by_id(book_id)
    candidate = Book(id=book_id, title="Emma", author_id=record.author_id, summary="New",
                     isbn="1", genres=storage.genres.find(Genre.id.in_([b])))
    storage.books.replace_by_id(book_id, candidate)
    stored = catalog.get(Book, book_id)
    assert stored["genres"] == [b]
    assert stored["summary"] == "New"


def test_delete_by_id(catalog, storage):
    genre_id = catalog.add_genre("Drama")
    storage.genres.delete_by_id(genre_id)
    assert catalog.count(Genre) == 0
    # Deleting twice is harmless
    storage.genres.delete_by_id(genre_id)


def test_count_with_filter(catalog, storage):
    catalog.add_instance(status="Available")
    catalog.add_instance(status="Loaned")
    assert storage.instances.count() == 2
    assert storage.instances.count(status="Available") == 1


def test_repository_is_per_model(app):
    assert Repository(Genre).model is Genre
