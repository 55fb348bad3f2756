import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for

from ..forms import GenreForm, error_list
from ..models import Book, Genre
from ..parallel import gather
from ..storage import get_storage, storable_identity
from .helpers import missing_record, not_found

logger = logging.getLogger(__name__)

genre_bp = Blueprint("genre", __name__, url_prefix="/catalog")


def _genre_with_books(storage, genre_id):
    if not storable_identity(genre_id):
        return None, []
    return gather(
        lambda: storage.genres.find_by_id(genre_id),
        lambda: storage.books.find(Book.genres.any(Genre.id == genre_id),
                                   columns=("title", "summary"), order_by=("title",)),
    )


@genre_bp.route("/genre/list")
@genre_bp.route("/genres")
def genre_list():
    genres = get_storage().genres.find(order_by=("name",))
    return render_template("genre_list.html", title="Genre List", genre_list=genres)


@genre_bp.route("/genre/<int:genre_id>")
def genre_detail(genre_id):
    genre, books = _genre_with_books(get_storage(), genre_id)
    if genre is None:
        not_found("Genre not found")
    return render_template("genre_detail.html", title="Genre Detail", genre=genre, genre_books=books)


@genre_bp.route("/genre/create", methods=["GET", "POST"])
def genre_create():
    if request.method == "GET":
        return render_template("genre_form.html", title="Create Genre")

    storage = get_storage()
    form = GenreForm()
    valid = form.validate()
    genre = Genre(name=form.name.data)

    if not valid:
        errors = error_list(form)
        logger.debug("Genre create rejected: %s", [e["field"] for e in errors])
        return render_template("genre_form.html", title="Create Genre", genre=genre, errors=errors)

    # Reuse a genre whose name differs only by case
    existing = storage.genres.find_one(case_insensitive=True, name=genre.name)
    if existing is not None:
        logger.info("Genre %r already exists as %s", genre.name, existing.id)
        return redirect(existing.url)

    storage.genres.insert(genre)
    flash("Genre created", "success")
    return redirect(genre.url)


@genre_bp.route("/genre/<int:genre_id>/delete", methods=["GET", "POST"])
def genre_delete(genre_id):
    genre, books = _genre_with_books(get_storage(), genre_id)

    if request.method == "GET":
        if genre is None:
            return missing_record("Genre not found", "genre.genre_list")
        return render_template("genre_delete.html", title="Delete Genre", genre=genre, genre_books=books)

    if genre is None:
        return redirect(url_for("genre.genre_list"))
    if books:
        logger.info("Genre %s still has %d books, not deleting", genre_id, len(books))
        return render_template("genre_delete.html", title="Delete Genre", genre=genre, genre_books=books)

    get_storage().genres.delete_by_id(genre_id)
    flash("Genre deleted", "success")
    return redirect(url_for("genre.genre_list"))


@genre_bp.route("/genre/<int:genre_id>/update", methods=["GET", "POST"])
def genre_update(genre_id):
    storage = get_storage()

    if request.method == "GET":
        genre = storage.genres.find_by_id(genre_id)
        if genre is None:
            return missing_record("Genre not found", "genre.genre_list")
        return render_template("genre_form.html", title="Update Genre", genre=genre)

    form = GenreForm()
    valid = form.validate()
    genre = Genre(id=genre_id, name=form.name.data)

    if not valid:
        errors = error_list(form)
        logger.debug("Genre %s update rejected: %s", genre_id, [e["field"] for e in errors])
        return render_template("genre_form.html", title="Update Genre", genre=genre, errors=errors)

    updated = storage.genres.replace_by_id(genre_id, genre)
    if updated is None:
        not_found("Genre not found")
    flash("Genre updated", "success")
    return redirect(updated.url)
