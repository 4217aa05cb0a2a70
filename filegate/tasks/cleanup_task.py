"""
Cleanup Task

Celery beat task for periodic removal of orphaned stored objects.
Thin wrapper that delegates to the OrphanSweeper application service.
"""

import logging

from celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name="filegate.tasks.sweep_orphaned_objects")
def sweep_orphaned_objects(self):
    """
    Periodic task deleting objects no principal's ledger refers to.

    Returns:
        dict: Sweep statistics with counts and errors
    """
    logger.info("Starting orphan sweep")

    try:
        from celery_app import flask_app
        from filegate.application import OrphanSweeper

        sweeper = flask_app.container.resolve(OrphanSweeper)
        stats = sweeper.sweep().to_dict()
    except Exception as e:
        error_msg = f"Orphan sweep failed: {e}"
        logger.error(error_msg, exc_info=True)
        return {"principals_scanned": 0, "orphans_removed": 0, "errors": [error_msg]}

    logger.info(
        f"Orphan sweep completed - Principals: {stats['principals_scanned']}, "
        f"Removed: {stats['orphans_removed']}, Errors: {len(stats['errors'])}"
    )
    if stats["errors"]:
        logger.warning(f"Orphan sweep errors: {stats['errors']}")

    return stats
