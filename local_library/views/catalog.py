from flask import Blueprint, render_template

from ..models import STATUS_AVAILABLE
from ..parallel import gather
from ..storage import get_storage

catalog_bp = Blueprint("catalog", __name__, url_prefix="/catalog")


@catalog_bp.route("/")
def index():
    storage = get_storage()
    book_count, instance_count, available_count, author_count, genre_count = gather(
        lambda: storage.books.count(),
        lambda: storage.instances.count(),
        lambda: storage.instances.count(status=STATUS_AVAILABLE),
        lambda: storage.authors.count(),
        lambda: storage.genres.count(),
    )
    return render_template(
        "index.html",
        title="Local Library Home",
        book_count=book_count,
        book_instance_count=instance_count,
        book_instance_available_count=available_count,
        author_count=author_count,
        genre_count=genre_count,
    )
