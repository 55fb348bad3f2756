import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for

from ..forms import BookInstanceForm, error_list
from ..models import INSTANCE_STATUSES, BookInstance
from ..parallel import gather
from ..storage import get_storage
from .helpers import missing_record, not_found

logger = logging.getLogger(__name__)

bookinstance_bp = Blueprint("bookinstance", __name__, url_prefix="/catalog")


def _book_choices(storage):
    return storage.books.find(columns=("title",), order_by=("title",))


def _as_identity(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _render_form(title, book_list, bookinstance, errors=None):
    return render_template(
        "bookinstance_form.html",
        title=title,
        book_list=book_list,
        selected_book=bookinstance.book_id if bookinstance is not None else None,
        bookinstance=bookinstance,
        statuses=INSTANCE_STATUSES,
        errors=errors,
    )


def _submitted_instance(form, identity=None):
    """Candidate record built from the form's sanitized values."""
    return BookInstance(
        id=identity,
        book_id=_as_identity(form.book.data),
        imprint=form.imprint.data,
        status=form.status.data,
        due_back=form.due_back.data,
    )


@bookinstance_bp.route("/bookinstance/list")
@bookinstance_bp.route("/bookinstances")
def bookinstance_list():
    instances = get_storage().instances.find(populate=("book",))
    return render_template("bookinstance_list.html", title="Book Instance List",
                           bookinstance_list=instances)


@bookinstance_bp.route("/bookinstance/<int:instance_id>")
def bookinstance_detail(instance_id):
    instance = get_storage().instances.find_by_id(instance_id, populate=("book",))
    if instance is None:
        not_found("Book copy not found")
    return render_template("bookinstance_detail.html", title="Book", bookinstance=instance)


@bookinstance_bp.route("/bookinstance/create", methods=["GET", "POST"])
def bookinstance_create():
    storage = get_storage()
    if request.method == "GET":
        return _render_form("Create BookInstance", _book_choices(storage), None)

    form = BookInstanceForm(book_lookup=storage.books.find_by_id)
    valid = form.validate()
    instance = _submitted_instance(form)

    if not valid:
        errors = error_list(form)
        logger.debug("BookInstance create rejected: %s", [e["field"] for e in errors])
        return _render_form("Create BookInstance", _book_choices(storage), instance, errors)

    storage.instances.insert(instance)
    flash("Book copy created", "success")
    return redirect(instance.url)


@bookinstance_bp.route("/bookinstance/<int:instance_id>/delete", methods=["GET", "POST"])
def bookinstance_delete(instance_id):
    storage = get_storage()
    instance = storage.instances.find_by_id(instance_id, populate=("book",))

    if request.method == "GET":
        if instance is None:
            return missing_record("Book copy not found", "bookinstance.bookinstance_list")
        return render_template("bookinstance_delete.html", title="Delete Book Instance",
                               bookinstance=instance)

    if instance is not None:
        storage.instances.delete_by_id(instance_id)
        flash("Book copy deleted", "success")
    return redirect(url_for("bookinstance.bookinstance_list"))


@bookinstance_bp.route("/bookinstance/<int:instance_id>/update", methods=["GET", "POST"])
def bookinstance_update(instance_id):
    storage = get_storage()

    if request.method == "GET":
        instance, books = gather(
            lambda: storage.instances.find_by_id(instance_id, populate=("book",)),
            lambda: _book_choices(storage),
        )
        if instance is None:
            return missing_record("Book copy not found", "bookinstance.bookinstance_list")
        return _render_form("Update BookInstance", books, instance)

    form = BookInstanceForm(book_lookup=storage.books.find_by_id)
    valid = form.validate()
    instance = _submitted_instance(form, identity=instance_id)

    if not valid:
        errors = error_list(form)
        logger.debug("BookInstance %s update rejected: %s", instance_id, [e["field"] for e in errors])
        return _render_form("Update BookInstance", _book_choices(storage), instance, errors)

    updated = storage.instances.replace_by_id(instance_id, instance)
    if updated is None:
        not_found("Book copy not found")
    flash("Book copy updated", "success")
    return redirect(updated.url)
