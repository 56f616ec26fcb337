"""
The feed-to-CMS pipeline: fetch files, extract records, reconcile, publish.
"""

import logging
from pathlib import Path
from typing import List, Optional

from openimmo_sync_service.clients.ftp_feed_client import FtpFeedClient
from openimmo_sync_service.exceptions import (
    CmsApiError,
    FeedTransferError,
    OpenImmoParseError,
)
from openimmo_sync_service.parsing.openimmo_parser import parse_property_document
from openimmo_sync_service.schemas.property_record import FileBatchEntry, SyncReport
from openimmo_sync_service.services.cms_gateway import CmsGateway
from openimmo_sync_service.services.reconciler import BatchReconciler

logger = logging.getLogger(__name__)


class SyncPipeline:
    """
    Runs one synchronization of the FTP feed into the Webflow collection.

    Every external call is awaited before the next one starts. Nothing guards
    against two runs overlapping on the same folder and collection.
    """

    def __init__(self, feed_client: FtpFeedClient = None, gateway: CmsGateway = None):
        self.feed_client = feed_client or FtpFeedClient()
        self.gateway = gateway or CmsGateway()

    async def fetch_entries(self, report: SyncReport) -> List[FileBatchEntry]:
        """
        Download and parse every XML file of the feed over one connection.

        Raises:
            FeedConnectionError: If the FTP server cannot be reached
        """
        entries: List[FileBatchEntry] = []
        async with self.feed_client.session() as session:
            try:
                filenames = await session.list_xml_files()
            except FeedTransferError as e:
                logger.error(f"FTP error listing files: {e}")
                return entries
            report.files_found = len(filenames)
            if not filenames:
                logger.error("No XML files found. Exiting.")
                return entries

            for filename in filenames:
                try:
                    content = await session.download(filename)
                    record = parse_property_document(content, filename)
                except (FeedTransferError, OpenImmoParseError) as e:
                    logger.error(f"Error fetching/parsing {filename}: {e}")
                    report.parse_failures += 1
                    continue
                if record is None:
                    report.parse_failures += 1
                    continue
                entries.append(FileBatchEntry(filename=filename, record=record))
                logger.info(
                    f"File: {filename} | OBID: {record.obid} | DELETE flag: {record.is_delete}"
                )

        report.records_parsed = len(entries)
        return entries

    async def run(self) -> SyncReport:
        """Full batch run against the FTP feed."""
        report = SyncReport()
        entries = await self.fetch_entries(report)
        if not entries:
            if report.files_found:
                logger.error("No XML files were downloaded or parsed. Exiting.")
            return report

        reconciler = BatchReconciler(self.gateway, remove_feed_file=self.feed_client.delete_file)
        return await reconciler.reconcile(entries, report)

    async def log_collection_diagnostics(self) -> None:
        """Log the target collection and its fields, flagging required ones."""
        logger.info("Testing Webflow API connection...")
        logger.info(f"Using Collection ID: {self.gateway.collection_id}")
        logger.info(f"Using Site ID: {self.gateway.site_id}")
        try:
            collection = await self.gateway.get_collection_info()
        except CmsApiError as e:
            logger.error(f"Webflow API connection test failed: {e.message}")
            logger.error("Please check your Webflow credentials before trying to import items")
            return

        logger.info(f"Collection connection successful: {collection.get('displayName') or collection.get('name')}")
        fields = collection.get("fields") or []
        if fields:
            logger.info("Collection fields required for import:")
        for field in fields:
            marker = ": REQUIRED" if field.get("isRequired") or field.get("required") else ""
            logger.info(f"- {field.get('slug')} ({field.get('type')}){marker}")

    async def run_local_file(self, path: str) -> Optional[SyncReport]:
        """
        Process one local XML file as a batch of one, without the feed.

        The feed is not touched and the site is not published.

        Returns:
            SyncReport, or None when the file could not be read or parsed
        """
        file_path = Path(path)
        logger.info(f"Running in test mode with file: {file_path}")
        try:
            record = parse_property_document(file_path.read_bytes(), file_path.name)
        except (OSError, OpenImmoParseError) as e:
            logger.error(f"Failed to parse test file {file_path}: {e}")
            return None
        if record is None:
            logger.error(f"Failed to parse test file: {file_path}")
            return None

        if record.is_delete:
            logger.info(f"DELETE XML detected with OBID: {record.obid}")
        else:
            await self.log_collection_diagnostics()

        report = SyncReport(files_found=1, records_parsed=1)
        reconciler = BatchReconciler(self.gateway, remove_feed_file=None, publish_changes=False)
        entry = FileBatchEntry(filename=file_path.name, record=record)
        return await reconciler.reconcile([entry], report)


async def run_scheduled_sync() -> SyncReport:
    """Entry point used by the trigger endpoint and the CLI."""
    return await SyncPipeline().run()
