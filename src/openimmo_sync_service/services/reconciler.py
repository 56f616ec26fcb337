"""
Batch reconciliation of parsed feed files against the CMS collection.
"""

import logging
from typing import Awaitable, Callable, Dict, List, Optional

from openimmo_sync_service.schemas.property_record import FileBatchEntry, SyncReport
from openimmo_sync_service.services.cms_gateway import CmsGateway

logger = logging.getLogger(__name__)

FeedFileRemover = Callable[[str], Awaitable[bool]]


def group_by_obid(entries: List[FileBatchEntry]) -> Dict[str, List[FileBatchEntry]]:
    """
    Group entries by OBID, preserving listing order.

    Entries without an OBID are left out: each of them stands alone and is
    always treated as an import attempt.
    """
    groups: Dict[str, List[FileBatchEntry]] = {}
    for entry in entries:
        if entry.obid:
            groups.setdefault(entry.obid, []).append(entry)
    return groups


def mark_delete_groups(groups: Dict[str, List[FileBatchEntry]]) -> List[str]:
    """
    Mark every member of a group containing a DELETE file as skipped.

    Deletion wins over import for the whole group, even when only one of its
    files carries the DELETE action.

    Returns:
        List[str]: OBIDs of the groups to delete, one entry per group
    """
    delete_obids = []
    for obid, group in groups.items():
        delete_flags = [entry.is_delete for entry in group]
        logger.info(f"Group for OBID {obid}: {len(group)} file(s), DELETE flags: {delete_flags}")
        if any(delete_flags):
            logger.info(
                f"DELETE action found for OBID {obid}. Marking all {len(group)} file(s) as skip."
            )
            for entry in group:
                entry.skip = True
            delete_obids.append(obid)
    return delete_obids


def should_publish(report: SyncReport) -> bool:
    """Publish only when an import succeeded or a group deletion was issued."""
    return report.has_changes


class BatchReconciler:
    """
    Decides and executes the side effects for one batch of feed files.

    Args:
        gateway: CMS operations
        remove_feed_file: Coroutine deleting a file from the feed; None leaves
            the feed untouched (local test mode)
        publish_changes: Whether to publish the site after changes
    """

    def __init__(
        self,
        gateway: CmsGateway,
        remove_feed_file: Optional[FeedFileRemover] = None,
        publish_changes: bool = True,
    ):
        self.gateway = gateway
        self.remove_feed_file = remove_feed_file
        self.publish_changes = publish_changes

    async def reconcile(self, entries: List[FileBatchEntry], report: SyncReport = None) -> SyncReport:
        report = report or SyncReport()

        delete_obids = mark_delete_groups(group_by_obid(entries))
        for obid in delete_obids:
            deleted = await self.gateway.delete_matching(obid)
            logger.info(f"Deletion {'successful' if deleted else 'failed'} for OBID {obid}")
            report.deleted_obids.append(obid)

        if self.remove_feed_file is not None:
            for entry in entries:
                if entry.skip and await self.remove_feed_file(entry.filename):
                    report.feed_files_deleted += 1

        for entry in entries:
            if entry.skip:
                logger.info(f"Skipping file {entry.filename} due to DELETE action.")
                continue

            if entry.obid and await self.gateway.item_exists(entry.obid):
                logger.info(
                    f"Item with OBID {entry.obid} already exists in Webflow. "
                    f"Skipping import for file {entry.filename}."
                )
                report.imports_skipped_existing += 1
                continue

            if await self.gateway.create_item(entry.record):
                report.imports_succeeded += 1
            else:
                report.imports_failed += 1

        logger.info(
            f"Import statistics: {report.imports_succeeded} successful, "
            f"{report.imports_failed} failed."
        )

        if not self.publish_changes:
            logger.info("Publishing disabled for this run.")
        elif should_publish(report):
            logger.info("Changes were made to Webflow CMS. Publishing site...")
            report.published = await self.gateway.publish()
        elif report.imports_failed > 0:
            logger.warning("All imports failed. Skipping publish step.")
        else:
            logger.info("No changes were made to Webflow CMS. Skipping publish step.")

        return report
