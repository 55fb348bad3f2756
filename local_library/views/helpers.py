import logging

from flask import abort, current_app, redirect, url_for

logger = logging.getLogger(__name__)


def not_found(message: str):
    """Hard failure for a missing record: abort with 404."""
    logger.warning(message)
    abort(404, description=message)


def missing_record(message: str, list_endpoint: str):
    """Response for a form page (update or delete) whose record is gone.

    Redirects to the list view unless STRICT_NOT_FOUND is set, in which
    case it fails the same way a detail page does.
    """
    if current_app.config.get("STRICT_NOT_FOUND"):
        not_found(message)
    logger.info("%s, redirecting to %s", message, list_endpoint)
    return redirect(url_for(list_endpoint))
