import logging

from celery import shared_task


logger = logging.getLogger(__name__)


@shared_task(name="authentication.tasks.purge_expired_reset_codes")
def purge_expired_reset_codes():
    """Delete password reset codes past their expiry."""
    from infrastructure.container import container

    deleted = container.auth_service().purge_expired_reset_codes()
    return {"deleted": deleted}
