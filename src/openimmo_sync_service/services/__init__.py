"""
Reconciliation, CMS operations and the sync pipeline.
"""

from openimmo_sync_service.services.cms_gateway import CmsGateway
from openimmo_sync_service.services.reconciler import BatchReconciler
from openimmo_sync_service.services.sync_pipeline import SyncPipeline, run_scheduled_sync

__all__ = ["BatchReconciler", "CmsGateway", "SyncPipeline", "run_scheduled_sync"]
