"""
Fan-out/fan-in for independent reads within one request.
"""
from concurrent.futures import ThreadPoolExecutor

from flask import current_app


def gather(*loaders):
    """Run zero-argument read callables concurrently and return their
    results in argument order.

    Each loader runs in its own application context, hence its own
    session; records it returns are detached, so loaders must populate
    every relationship the caller touches. The first exception raised by
    a loader propagates. With ``PARALLEL_READS`` off the loaders run one
    after another in the caller's session.
    """
    if not loaders:
        return []
    app = current_app._get_current_object()
    if len(loaders) == 1 or not app.config.get("PARALLEL_READS", True):
        return [loader() for loader in loaders]

    def run(loader):
        with app.app_context():
            return loader()

    with ThreadPoolExecutor(max_workers=len(loaders)) as pool:
        futures = [pool.submit(run, loader) for loader in loaders]
        return [future.result() for future in futures]
