import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for

from ..forms import AuthorForm, error_list
from ..models import Author
from ..parallel import gather
from ..storage import get_storage
from .helpers import missing_record, not_found

logger = logging.getLogger(__name__)

author_bp = Blueprint("author", __name__, url_prefix="/catalog")


def _author_with_books(storage, author_id):
    return gather(
        lambda: storage.authors.find_by_id(author_id),
        lambda: storage.books.find(columns=("title", "summary"), order_by=("title",), author_id=author_id),
    )


def _submitted_author(form, identity=None):
    return Author(
        id=identity,
        first_name=form.first_name.data,
        family_name=form.family_name.data,
        date_of_birth=form.date_of_birth.data,
        date_of_death=form.date_of_death.data,
    )


@author_bp.route("/author/list")
@author_bp.route("/authors")
def author_list():
    authors = get_storage().authors.find(order_by=("family_name", "first_name"))
    return render_template("author_list.html", title="Author List", author_list=authors)


@author_bp.route("/author/<int:author_id>")
def author_detail(author_id):
    author, books = _author_with_books(get_storage(), author_id)
    if author is None:
        not_found("Author not found")
    return render_template("author_detail.html", title="Author Detail", author=author,
                           author_books=books)


@author_bp.route("/author/create", methods=["GET", "POST"])
def author_create():
    if request.method == "GET":
        return render_template("author_form.html", title="Create Author")

    form = AuthorForm()
    valid = form.validate()
    author = _submitted_author(form)

    if not valid:
        errors = error_list(form)
        logger.debug("Author create rejected: %s", [e["field"] for e in errors])
        return render_template("author_form.html", title="Create Author", author=author, errors=errors)

    get_storage().authors.insert(author)
    flash("Author created", "success")
    return redirect(author.url)


@author_bp.route("/author/<int:author_id>/delete", methods=["GET", "POST"])
def author_delete(author_id):
    storage = get_storage()
    author, books = _author_with_books(storage, author_id)

    if request.method == "GET":
        if author is None:
            return missing_record("Author not found", "author.author_list")
        return render_template("author_delete.html", title="Delete Author", author=author,
                               author_books=books)

    if author is None:
        return redirect(url_for("author.author_list"))
    if books:
        logger.info("Author %s still has %d books, not deleting", author_id, len(books))
        return render_template("author_delete.html", title="Delete Author", author=author,
                               author_books=books)

    storage.authors.delete_by_id(author_id)
    flash("Author deleted", "success")
    return redirect(url_for("author.author_list"))


@author_bp.route("/author/<int:author_id>/update", methods=["GET", "POST"])
def author_update(author_id):
    storage = get_storage()

    if request.method == "GET":
        author = storage.authors.find_by_id(author_id)
        if author is None:
            return missing_record("Author not found", "author.author_list")
        return render_template("author_form.html", title="Update Author", author=author)

    form = AuthorForm()
    valid = form.validate()
    author = _submitted_author(form, identity=author_id)

    if not valid:
        errors = error_list(form)
        logger.debug("Author %s update rejected: %s", author_id, [e["field"] for e in errors])
        return render_template("author_form.html", title="Update Author", author=author, errors=errors)

    updated = storage.authors.replace_by_id(author_id, author)
    if updated is None:
        not_found("Author not found")
    flash("Author updated", "success")
    return redirect(updated.url)
