"""
Tests for the FTP feed client.
"""
import ftplib
from unittest.mock import MagicMock, patch

import pytest

from openimmo_sync_service.clients.ftp_feed_client import FtpFeedClient, is_xml_filename
from openimmo_sync_service.exceptions import FeedConnectionError, FeedTransferError


@pytest.fixture
def ftp():
    with patch("openimmo_sync_service.clients.ftp_feed_client.ftplib.FTP") as ftp_class:
        instance = MagicMock()
        ftp_class.return_value = instance
        yield instance


@pytest.fixture
def client():
    return FtpFeedClient(
        host="ftp.test.local",
        port=2121,
        user="feed",
        password="secret",
        remote_folder="/openimmo",
        timeout=5,
    )


@pytest.mark.parametrize(
    "name,expected",
    [("listing.xml", True), ("LISTING.XML", True), ("image.jpg", False), ("xml", False)],
)
def test_is_xml_filename(name, expected):
    assert is_xml_filename(name) is expected


@pytest.mark.asyncio
async def test_session_connects_and_closes(ftp, client):
    ftp.nlst.return_value = ["/openimmo/a.xml", "/openimmo/b.XML", "/openimmo/photo.jpg"]

    async with client.session() as session:
        names = await session.list_xml_files()

    assert names == ["a.xml", "b.XML"]
    ftp.connect.assert_called_once_with("ftp.test.local", 2121, timeout=5)
    ftp.login.assert_called_once_with("feed", "secret")
    ftp.cwd.assert_called_once_with("/openimmo")
    ftp.quit.assert_called_once()


@pytest.mark.asyncio
async def test_connection_failure_raises(ftp, client):
    ftp.login.side_effect = ftplib.error_perm("530 Login incorrect")

    with pytest.raises(FeedConnectionError):
        async with client.session():
            pass
    ftp.close.assert_called_once()


@pytest.mark.asyncio
async def test_empty_folder_answering_550_lists_nothing(ftp, client):
    ftp.nlst.side_effect = ftplib.error_perm("550 No files found")

    async with client.session() as session:
        assert await session.list_xml_files() == []


@pytest.mark.asyncio
async def test_list_error_raises_transfer_error(ftp, client):
    ftp.nlst.side_effect = ftplib.error_temp("421 Service not available")

    async with client.session() as session:
        with pytest.raises(FeedTransferError):
            await session.list_xml_files()


@pytest.mark.asyncio
async def test_download_collects_bytes(ftp, client):
    def retrbinary(command, callback):
        assert command == "RETR a.xml"
        callback(b"<openimmo>")
        callback(b"</openimmo>")

    ftp.retrbinary.side_effect = retrbinary

    assert await client.download_file("a.xml") == b"<openimmo></openimmo>"


@pytest.mark.asyncio
async def test_download_failure_returns_none(ftp, client):
    ftp.retrbinary.side_effect = ftplib.error_perm("550 Not found")

    assert await client.download_file("missing.xml") is None


@pytest.mark.asyncio
async def test_delete_file(ftp, client):
    assert await client.delete_file("a.xml") is True
    ftp.delete.assert_called_once_with("a.xml")


@pytest.mark.asyncio
async def test_delete_failure_returns_false(ftp, client):
    ftp.delete.side_effect = ftplib.error_perm("550 Permission denied")

    assert await client.delete_file("a.xml") is False


@pytest.mark.asyncio
async def test_list_without_connection_returns_empty(ftp, client):
    ftp.connect.side_effect = OSError("connection refused")

    assert await client.list_xml_files() == []
