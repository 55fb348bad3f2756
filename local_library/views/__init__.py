from .author import author_bp
from .book import book_bp
from .bookinstance import bookinstance_bp
from .catalog import catalog_bp
from .genre import genre_bp

BLUEPRINTS = (catalog_bp, author_bp, book_bp, bookinstance_bp, genre_bp)


def register_blueprints(app):
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)
