"""
FTP Feed Client for listing, downloading and removing OpenImmo XML files.
"""

import asyncio
import ftplib
import io
import logging
import posixpath
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from openimmo_sync_service.config import settings
from openimmo_sync_service.exceptions import FeedConnectionError, FeedTransferError

logger = logging.getLogger(__name__)


def is_xml_filename(name: str) -> bool:
    """Return True for names ending in .xml, ignoring case."""
    return name.lower().endswith(".xml")


class FeedSession:
    """
    One logged-in FTP connection positioned in the remote feed folder.

    All methods are blocking; FtpFeedClient runs them in a worker thread.
    """

    def __init__(self, ftp: ftplib.FTP):
        self._ftp = ftp

    def list_xml_files(self) -> List[str]:
        try:
            names = self._ftp.nlst()
        except ftplib.error_perm as e:
            # Some servers answer an empty directory with 550
            if str(e).startswith("550"):
                return []
            raise FeedTransferError(f"FTP list error: {e}")
        except ftplib.all_errors as e:
            raise FeedTransferError(f"FTP list error: {e}")
        return [posixpath.basename(name) for name in names if is_xml_filename(name)]

    def download(self, filename: str) -> bytes:
        buffer = io.BytesIO()
        try:
            self._ftp.retrbinary(f"RETR {filename}", buffer.write)
        except ftplib.all_errors as e:
            raise FeedTransferError(f"FTP download error for {filename}: {e}")
        return buffer.getvalue()

    def delete(self, filename: str) -> None:
        try:
            self._ftp.delete(filename)
        except ftplib.all_errors as e:
            raise FeedTransferError(f"FTP delete error for {filename}: {e}")

    def close(self) -> None:
        try:
            self._ftp.quit()
        except ftplib.all_errors:
            self._ftp.close()


class FtpFeedClient:
    """
    Client for the FTP server delivering the OpenImmo feed.

    The single-file primitives (list_xml_files, download_file, delete_file)
    each open and close their own connection. Batch runs use session() to
    list and download over one connection.
    """

    def __init__(
        self,
        host: str = None,
        port: int = None,
        user: str = None,
        password: str = None,
        remote_folder: str = None,
        timeout: float = None,
    ):
        """
        Initialize the FTP Feed Client.

        Args:
            host: FTP host, defaults to the value in settings
            port: FTP port, defaults to the value in settings
            user: FTP user name, defaults to the value in settings
            password: FTP password, defaults to the value in settings
            remote_folder: Directory holding the feed, defaults to the value in settings
            timeout: Socket timeout in seconds, defaults to the value in settings
        """
        self.host = host or settings.FTP_HOST
        self.port = port or settings.FTP_PORT
        self.user = user or settings.FTP_USER
        self.password = password if password is not None else settings.FTP_PASSWORD
        self.remote_folder = remote_folder or settings.REMOTE_FOLDER
        self.timeout = timeout or settings.FTP_TIMEOUT_SECONDS

    def _connect(self) -> FeedSession:
        ftp = ftplib.FTP()
        try:
            ftp.connect(self.host, self.port, timeout=self.timeout)
            ftp.login(self.user, self.password)
            ftp.cwd(self.remote_folder)
        except ftplib.all_errors as e:
            ftp.close()
            raise FeedConnectionError(
                f"Could not connect to FTP server {self.host}:{self.port}{self.remote_folder}: {e}"
            )
        return FeedSession(ftp)

    @asynccontextmanager
    async def session(self) -> AsyncIterator["AsyncFeedSession"]:
        """
        Open one connection for a batch run.

        Raises:
            FeedConnectionError: If the server cannot be reached or logged into
        """
        feed_session = await asyncio.to_thread(self._connect)
        logger.info(f"Connected to FTP server {self.host}, folder {self.remote_folder}")
        try:
            yield AsyncFeedSession(feed_session)
        finally:
            await asyncio.to_thread(feed_session.close)

    async def list_xml_files(self) -> List[str]:
        """List XML files in the remote folder; an empty list on any failure."""
        try:
            async with self.session() as feed_session:
                return await feed_session.list_xml_files()
        except (FeedConnectionError, FeedTransferError) as e:
            logger.error(f"FTP list error: {e}")
            return []

    async def download_file(self, filename: str) -> Optional[bytes]:
        """Download one file into memory; None on any failure."""
        try:
            async with self.session() as feed_session:
                return await feed_session.download(filename)
        except (FeedConnectionError, FeedTransferError) as e:
            logger.error(f"Error fetching {filename}: {e}")
            return None

    async def delete_file(self, filename: str) -> bool:
        """Delete one file from the remote folder; False on any failure."""
        try:
            async with self.session() as feed_session:
                await feed_session.delete(filename)
        except (FeedConnectionError, FeedTransferError) as e:
            logger.error(f"FTP delete error: {e}")
            return False
        logger.info(f"Deleted FTP file: {filename}")
        return True


class AsyncFeedSession:
    """Awaitable facade over a FeedSession."""

    def __init__(self, feed_session: FeedSession):
        self._session = feed_session

    async def list_xml_files(self) -> List[str]:
        return await asyncio.to_thread(self._session.list_xml_files)

    async def download(self, filename: str) -> bytes:
        return await asyncio.to_thread(self._session.download, filename)

    async def delete(self, filename: str) -> None:
        await asyncio.to_thread(self._session.delete, filename)
