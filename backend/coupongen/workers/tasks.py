"""Celery tasks for campaign maintenance."""
import logging
from uuid import UUID

from coupongen.workers.celery_app import celery_app
from coupongen.database import SessionLocal
from coupongen.errors import NotFoundError
from coupongen.services import campaigns as campaign_service
from coupongen.services import tenants as tenant_service

logger = logging.getLogger(__name__)


@celery_app.task
def deactivate_expired_campaigns():
    """Switch off every active campaign whose expiry date has passed."""
    db = SessionLocal()
    try:
        count = campaign_service.deactivate_expired_campaigns(db)
        logger.info(f"Expiry sweep deactivated {count} campaign(s)")
        return {"status": "success", "deactivated": count}
    finally:
        db.close()


@celery_app.task(bind=True, max_retries=3)
def purge_tenant(self, tenant_id: str):
    """Delete a tenant and all of its data."""
    db = SessionLocal()
    try:
        result = tenant_service.purge_tenant(db, UUID(tenant_id))
        return {"status": "success", "tenant_id": tenant_id, "deleted": result.deleted}
    except NotFoundError:
        logger.error(f"Tenant {tenant_id} not found")
        return {"status": "error", "message": "Tenant not found"}
    except Exception as e:
        logger.exception(f"Error purging tenant {tenant_id}: {e}")
        raise self.retry(exc=e, countdown=60 * (self.request.retries + 1))
    finally:
        db.close()
