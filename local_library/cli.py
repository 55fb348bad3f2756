from datetime import date

import click
from flask.cli import with_appcontext

from .models import Author, Book, BookInstance, Genre, STATUS_AVAILABLE, STATUS_LOANED, db


def seed_sample_data():
    """Insert a small catalog (dev only)."""
    austen = Author(first_name="Jane", family_name="Austen", date_of_birth=date(1775, 12, 16),
                    date_of_death=date(1817, 7, 18))
    twain = Author(first_name="Mark", family_name="Twain", date_of_birth=date(1835, 11, 30),
                   date_of_death=date(1910, 4, 21))
    fiction = Genre(name="Fiction")
    satire = Genre(name="Satire")
    db.session.add_all([austen, twain, fiction, satire])
    db.session.flush()

    pride = Book(title="Pride and Prejudice", author_id=austen.id, isbn="9780141439518",
                 summary="A classic novel.", genres=[fiction])
    finn = Book(title="Adventures of Huckleberry Finn", author_id=twain.id, isbn="9780486280615",
                summary="A classic American novel.", genres=[fiction, satire])
    db.session.add_all([pride, finn])
    db.session.flush()

    db.session.add_all([
        BookInstance(book_id=pride.id, imprint="Penguin Classics, 2003", status=STATUS_AVAILABLE),
        BookInstance(book_id=finn.id, imprint="Dover, 1994", status=STATUS_LOANED,
                     due_back=date.today()),
    ])
    db.session.commit()


@click.command("init-db")
@click.option("--seed", is_flag=True, help="Add sample records to an empty catalog.")
@with_appcontext
def init_db_command(seed):
    """Create the catalog tables."""
    db.create_all()
    if not seed:
        click.echo("Initialized the database.")
    elif Author.query.first() is None:
        seed_sample_data()
        click.echo("Initialized the database with sample data.")
    else:
        click.echo("Database already has records, skipped sample data.")
