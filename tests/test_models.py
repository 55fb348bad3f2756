from datetime import date

from local_library.models import (
    Author, Book, BookInstance, Genre, canonical_url, case_key, format_date, full_name, iso_date,
)


def test_full_name_needs_both_parts():
    assert full_name("Jane", "Austen") == "Austen, Jane"
    assert full_name("Jane", "") == ""
    assert full_name(None, "Austen") == ""
    assert full_name(None, None) == ""


def test_canonical_url():
    assert canonical_url("genre", 7) == "/catalog/genre/7"
    assert canonical_url("bookinstance", "abc") == "/catalog/bookinstance/abc"


def test_format_date():
    assert format_date(date(2026, 10, 9)) == "Oct 9, 2026"
    assert format_date(None) == ""


def test_iso_date():
    assert iso_date(date(1775, 12, 16)) == "1775-12-16"
    assert iso_date(None) == ""


def test_author_derived_values():
    author = Author(id=3, first_name="Mark", family_name="Twain",
                    date_of_birth=date(1835, 11, 30), date_of_death=date(1910, 4, 21))
    assert author.full_name == "Twain, Mark"
    assert author.url == "/catalog/author/3"
    assert author.date_of_birth_formatted == "Nov 30, 1835"
    assert author.date_of_death_yyyy_mm_dd == "1910-04-21"
    assert author.lifespan == "Nov 30, 1835 - Apr 21, 1910"


def test_author_without_dates():
    author = Author(id=1, first_name="Ann", family_name="Leckie")
    assert author.date_of_birth_formatted == ""
    assert author.date_of_death_yyyy_mm_dd == ""
    assert author.lifespan == ""


def test_urls_per_kind():
    assert Genre(id=2, name="Poetry").url == "/catalog/genre/2"
    assert Book(id=4, title="Emma").url == "/catalog/book/4"
    assert BookInstance(id=5, imprint="Penguin").url == "/catalog/bookinstance/5"


def test_book_instance_due_back_values():
    instance = BookInstance(id=1, imprint="Dover", due_back=date(2026, 1, 2))
    assert instance.due_back_formatted == "Jan 2, 2026"
    assert instance.due_back_yyyy_mm_dd == "2026-01-02"
    assert BookInstance(id=2, imprint="Dover").due_back_formatted == ""


def test_editable_values_exclude_identity():
    genre = Genre(id=9, name="Horror")
    assert genre.editable_values() == {"name": "Horror"}


def test_genre_name_key_follows_name():
    genre = Genre(name="Ética")
    assert genre.name_key == "ética"
    genre.name = "Straße"
    assert genre.name_key == case_key("STRASSE") == "strasse"
    assert case_key(None) is None
