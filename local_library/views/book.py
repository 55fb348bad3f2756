import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for

from ..forms import BookForm, error_list
from ..models import Book, Genre
from ..parallel import gather
from ..storage import get_storage, storable_identity
from .helpers import missing_record, not_found

logger = logging.getLogger(__name__)

book_bp = Blueprint("book", __name__, url_prefix="/catalog")


def _form_choices(storage):
    """All authors and genres for the book form, loaded concurrently."""
    return gather(
        lambda: storage.authors.find(order_by=("family_name", "first_name")),
        lambda: storage.genres.find(order_by=("name",)),
    )


def _book_with_instances(storage, book_id):
    return gather(
        lambda: storage.books.find_by_id(book_id, populate=("author", "genres")),
        lambda: storage.instances.find(book_id=book_id),
    )


def _render_form(title, authors, genres, book, errors=None):
    selected = {g.id for g in book.genres} if book is not None else set()
    return render_template("book_form.html", title=title, authors=authors, genres=genres,
                           book=book, selected_genres=selected, errors=errors)


def _submitted_book(storage, form, identity=None):
    """Candidate record from the form; genre ids that match no stored
    genre are dropped."""
    genre_ids = [gid for gid in form.genre.data or [] if storable_identity(gid)]
    genres = storage.genres.find(Genre.id.in_(genre_ids)) if genre_ids else []
    author_id = form.author.data if isinstance(form.author.data, int) else None
    return Book(
        id=identity,
        title=form.title.data,
        author_id=author_id,
        summary=form.summary.data,
        isbn=form.isbn.data,
        genres=genres,
    )


@book_bp.route("/book/list")
@book_bp.route("/books")
def book_list():
    books = get_storage().books.find(columns=("title", "author_id"), order_by=("title",),
                                     populate=("author",))
    return render_template("book_list.html", title="Book List", book_list=books)


@book_bp.route("/book/<int:book_id>")
def book_detail(book_id):
    book, instances = _book_with_instances(get_storage(), book_id)
    if book is None:
        not_found("Book not found")
    return render_template("book_detail.html", title=book.title, book=book,
                           book_instances=instances)


@book_bp.route("/book/create", methods=["GET", "POST"])
def book_create():
    storage = get_storage()
    if request.method == "GET":
        authors, genres = _form_choices(storage)
        return _render_form("Create Book", authors, genres, None)

    form = BookForm(author_lookup=storage.authors.find_by_id)
    valid = form.validate()
    book = _submitted_book(storage, form)

    if not valid:
        errors = error_list(form)
        logger.debug("Book create rejected: %s", [e["field"] for e in errors])
        authors, genres = _form_choices(storage)
        return _render_form("Create Book", authors, genres, book, errors)

    storage.books.insert(book)
    flash("Book created", "success")
    return redirect(book.url)


@book_bp.route("/book/<int:book_id>/delete", methods=["GET", "POST"])
def book_delete(book_id):
    storage = get_storage()
    book, instances = _book_with_instances(storage, book_id)

    if request.method == "GET":
        if book is None:
            return missing_record("Book not found", "book.book_list")
        return render_template("book_delete.html", title="Delete Book", book=book,
                               book_instances=instances)

    if book is None:
        return redirect(url_for("book.book_list"))
    if instances:
        logger.info("Book %s still has %d copies, not deleting", book_id, len(instances))
        return render_template("book_delete.html", title="Delete Book", book=book,
                               book_instances=instances)

    storage.books.delete_by_id(book_id)
    flash("Book deleted", "success")
    return redirect(url_for("book.book_list"))


@book_bp.route("/book/<int:book_id>/update", methods=["GET", "POST"])
def book_update(book_id):
    storage = get_storage()

    if request.method == "GET":
        book, authors, genres = gather(
            lambda: storage.books.find_by_id(book_id, populate=("genres",)),
            lambda: storage.authors.find(order_by=("family_name", "first_name")),
            lambda: storage.genres.find(order_by=("name",)),
        )
        if book is None:
            return missing_record("Book not found", "book.book_list")
        return _render_form("Update Book", authors, genres, book)

    form = BookForm(author_lookup=storage.authors.find_by_id)
    valid = form.validate()
    book = _submitted_book(storage, form, identity=book_id)

    if not valid:
        errors = error_list(form)
        logger.debug("Book %s update rejected: %s", book_id, [e["field"] for e in errors])
        authors, genres = _form_choices(storage)
        return _render_form("Update Book", authors, genres, book, errors)

    updated = storage.books.replace_by_id(book_id, book)
    if updated is None:
        not_found("Book not found")
    flash("Book updated", "success")
    return redirect(updated.url)
