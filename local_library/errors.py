import logging

from flask import render_template
from werkzeug.exceptions import HTTPException, InternalServerError

from .models import db

logger = logging.getLogger(__name__)


def handle_http_error(e: HTTPException):
    return render_template("error.html", title=e.name, status=e.code, message=e.description), e.code


def handle_unexpected_error(e: Exception):
    if isinstance(e, HTTPException):
        return handle_http_error(e)
    logger.exception("Unhandled error while serving request")
    db.session.rollback()
    err = InternalServerError()
    return render_template("error.html", title=err.name, status=err.code, message=err.description), err.code


def register_error_handlers(app):
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(Exception, handle_unexpected_error)
