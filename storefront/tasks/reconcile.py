from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.services.checkout_service import finish_cart_clears
from storefront.services.payment_service import reconcile_orphaned_payments
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="storefront.tasks.reconcile.reconcile_payments_task")
def reconcile_payments_task():
    logger.info("Reconcile payments task started")

    db = SessionLocal()
    try:
        fixed = reconcile_orphaned_payments(db)
        #koszyki po complete, ktorych czyszczenie sie nie udalo
        finish_cart_clears(db)
        return fixed
    finally:
        db.close()
