"""
Form validation rules for each record kind.

Every text field runs the same pipeline: trim, check presence/length/format,
then escape markup. Optional dates are skipped only when the submitted
value is empty; anything else must parse as ISO-8601.
"""
from datetime import date

import bleach
from dateutil.parser import isoparse
from flask_wtf import FlaskForm
from wtforms import SelectMultipleField, StringField, TextAreaField
from wtforms.validators import AnyOf, DataRequired, Length, Optional, Regexp, ValidationError

from .models import INSTANCE_STATUSES, STATUS_MAINTENANCE


# --- Filters ---
def strip_filter(value):
    if isinstance(value, str):
        return value.strip()
    return value


def none_if_empty(value):
    return value or None


def status_default(value):
    return value or STATUS_MAINTENANCE


# --- Validators ---
class Sanitize:
    """Escape all markup in the field's value. Runs last in a chain."""

    def __call__(self, form, field):
        if isinstance(field.data, str) and field.data:
            field.data = bleach.clean(field.data, tags=set(), strip=False)


class ISODate:
    """Coerce an ISO-8601 string to a date; a value that does not parse
    becomes None and fails with ``message``."""

    def __init__(self, message="Invalid date"):
        self.message = message

    def __call__(self, form, field):
        if isinstance(field.data, date):
            return
        try:
            field.data = isoparse(field.data).date()
        except (TypeError, ValueError, OverflowError):
            field.data = None
            raise ValidationError(self.message)


class ExistingRecord:
    """The field holds the identity of a stored record. ``lookup`` is a
    callable returning the record for an identity, or None."""

    def __init__(self, lookup, message):
        self.lookup = lookup
        self.message = message

    def __call__(self, form, field):
        try:
            identity = int(field.data)
        except (TypeError, ValueError):
            raise ValidationError(self.message)
        if self.lookup(identity) is None:
            raise ValidationError(self.message)
        field.data = identity


def alphanumeric(message):
    return Regexp(r"^[A-Za-z0-9]+$", message=message)


# --- Forms ---
class GenreForm(FlaskForm):
    name = StringField("Genre", filters=[strip_filter], validators=[
        DataRequired("Genre name must contain at least 3 characters"),
        Length(min=3, message="Genre name must contain at least 3 characters"),
        Length(max=100, message="Genre name must not exceed 100 characters"),
        Sanitize(),
    ])


class AuthorForm(FlaskForm):
    first_name = StringField("First name", filters=[strip_filter], validators=[
        DataRequired("First name must be specified."),
        Length(max=100, message="First name must not exceed 100 characters."),
        alphanumeric("First name has non-alphanumeric characters."),
        Sanitize(),
    ])
    family_name = StringField("Family name", filters=[strip_filter], validators=[
        DataRequired("Family name must be specified."),
        Length(max=100, message="Family name must not exceed 100 characters."),
        alphanumeric("Family name has non-alphanumeric characters."),
        Sanitize(),
    ])
    date_of_birth = StringField("Date of birth", filters=[strip_filter, none_if_empty], validators=[
        Optional(),
        ISODate("Invalid date of birth"),
    ])
    date_of_death = StringField("Date of death", filters=[strip_filter, none_if_empty], validators=[
        Optional(),
        ISODate("Invalid date of death"),
    ])


class BookForm(FlaskForm):
    title = StringField("Title", filters=[strip_filter], validators=[
        DataRequired("Title must not be empty."),
        Length(max=200, message="Title must not exceed 200 characters."),
        Sanitize(),
    ])
    author = StringField("Author", filters=[strip_filter], validators=[
        DataRequired("Author must not be empty."),
    ])
    summary = TextAreaField("Summary", filters=[strip_filter], validators=[
        DataRequired("Summary must not be empty."),
        Length(max=2000, message="Summary must not exceed 2000 characters."),
        Sanitize(),
    ])
    isbn = StringField("ISBN", filters=[strip_filter], validators=[
        DataRequired("ISBN must not be empty"),
        Length(max=20, message="ISBN must not exceed 20 characters"),
        Sanitize(),
    ])
    # Identities of the chosen genres; unknown ones are dropped by the view
    genre = SelectMultipleField("Genre", coerce=int, choices=[], validate_choice=False)

    def __init__(self, *args, author_lookup=None, **kwargs):
        super().__init__(*args, **kwargs)
        if author_lookup is not None:
            self.author.validators = list(self.author.validators) + [
                ExistingRecord(author_lookup, "Author must not be empty.")]


class BookInstanceForm(FlaskForm):
    book = StringField("Book", filters=[strip_filter], validators=[
        DataRequired("Book must be specified"),
    ])
    imprint = StringField("Imprint", filters=[strip_filter], validators=[
        DataRequired("Imprint must be specified"),
        Length(max=200, message="Imprint must not exceed 200 characters"),
        Sanitize(),
    ])
    status = StringField("Status", filters=[strip_filter, status_default], validators=[
        AnyOf(INSTANCE_STATUSES, message="Invalid status"),
    ])
    due_back = StringField("Date when book available", filters=[strip_filter, none_if_empty], validators=[
        Optional(),
        ISODate("Invalid date"),
    ])

    def __init__(self, *args, book_lookup=None, **kwargs):
        super().__init__(*args, **kwargs)
        if book_lookup is not None:
            self.book.validators = list(self.book.validators) + [
                ExistingRecord(book_lookup, "Book must be specified")]


def error_list(form) -> list:
    """Validation errors as an ordered list of {field, message}, in the
    order the fields are declared."""
    errors = []
    for field in form:
        for message in field.errors:
            errors.append({"field": field.name, "message": message})
    return errors
