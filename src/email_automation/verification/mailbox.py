"""IMAP mailbox collaborator built on imapclient.

imapclient is blocking, so every network call runs in a worker thread via
asyncio.to_thread. A session owns one IMAP connection and is used by a single
workflow run or request.
"""

import asyncio
import email
from datetime import datetime, timezone
from email import policy
from email.message import EmailMessage
from email.utils import parsedate_to_datetime
from typing import Optional, Sequence

import structlog
from imapclient import IMAPClient
from imapclient.exceptions import IMAPClientError

from email_automation.models.mail_models import MailMessage, SearchCriteria
from email_automation.verification.exceptions import MailboxError


logger = structlog.get_logger(__name__)


def _body_part(msg: EmailMessage, subtype: str) -> Optional[str]:
    part = msg.get_body(preferencelist=(subtype,))
    if part is None:
        return None
    try:
        return part.get_content()
    except (LookupError, UnicodeDecodeError):
        payload = part.get_payload(decode=True) or b""
        return payload.decode("utf-8", errors="replace")


def parse_message(raw: bytes, fallback_date: Optional[datetime] = None) -> MailMessage:
    """
    Parse an RFC 822 message into a MailMessage.

    Args:
        raw: Message bytes as fetched
        fallback_date: Server INTERNALDATE, used when the Date header is missing/invalid

    Returns:
        MailMessage with text and/or html bodies
    """
    msg = email.message_from_bytes(raw, policy=policy.default)

    date = None
    if msg["Date"]:
        try:
            date = parsedate_to_datetime(str(msg["Date"]))
        except (TypeError, ValueError):
            date = None
    if date is None:
        date = fallback_date or datetime.now(timezone.utc)

    return MailMessage(
        subject=str(msg["Subject"] or ""),
        sender=str(msg["From"] or ""),
        date=date,
        message_id=str(msg["Message-ID"]) if msg["Message-ID"] else None,
        text=_body_part(msg, "plain"),
        html=_body_part(msg, "html"),
    )


class ImapMailboxSession:
    """A logged-in IMAP connection with the configured folder selected."""

    def __init__(self, client: IMAPClient, folder: str):
        self._client = client
        self.folder = folder

    def _search_sync(self, criteria: list, limit: int) -> list[MailMessage]:
        uids = self._client.search(criteria)
        if not uids:
            return []

        recent = sorted(uids)[-limit:]
        fetched = self._client.fetch(recent, ["RFC822", "INTERNALDATE"])

        messages = []
        for uid, data in fetched.items():
            raw = data.get(b"RFC822")
            if not raw:
                continue
            internal_date = data.get(b"INTERNALDATE")
            if isinstance(internal_date, datetime) and internal_date.tzinfo is None:
                internal_date = internal_date.astimezone(timezone.utc)
            messages.append(parse_message(raw, fallback_date=internal_date))

        messages.sort(key=lambda message: message.date, reverse=True)
        return messages[:limit]

    async def search(self, criteria: SearchCriteria, limit: int = 10) -> Sequence[MailMessage]:
        """
        Most recent messages matching every criterion, newest first.

        Raises:
            MailboxError: search or fetch failed
        """
        imap_criteria = criteria.to_imap()
        try:
            messages = await asyncio.to_thread(self._search_sync, imap_criteria, limit)
        except (IMAPClientError, OSError) as e:
            raise MailboxError(
                f"Mailbox search failed: {e}",
                details={
                    **criteria.model_dump(mode="json", exclude_none=True),
                    "error_type": type(e).__name__,
                },
            ) from e

        logger.debug("Mailbox searched", criteria=imap_criteria, limit=limit, found=len(messages))
        return messages

    async def search_recent_from(self, sender: str, limit: int = 1) -> Sequence[MailMessage]:
        """Most recent messages from `sender`, newest first."""
        return await self.search(SearchCriteria(sender=sender), limit)

    async def disconnect(self) -> None:
        """Log out; a failed logout is logged, the connection is dropped either way."""
        try:
            await asyncio.to_thread(self._client.logout)
        except (IMAPClientError, OSError) as e:
            logger.warning("IMAP logout failed", error=str(e))
        logger.debug("Mailbox disconnected")


class ImapMailbox:
    """
    Mailbox collaborator for an IMAP account.

    Each `connect()` opens a fresh connection; sessions are never shared.
    """

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        use_ssl: bool = True,
        folder: str = "INBOX",
        timeout: float = 30.0,
    ):
        self.host = host
        self.port = port
        self.user = user
        self._password = password
        self.use_ssl = use_ssl
        self.folder = folder
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings) -> "ImapMailbox":
        return cls(
            host=settings.EMAIL_HOST,
            port=settings.EMAIL_PORT,
            user=settings.EMAIL_USER or "",
            password=settings.EMAIL_PASSWORD or "",
            use_ssl=settings.EMAIL_USE_SSL,
            folder=settings.EMAIL_FOLDER,
            timeout=settings.EMAIL_TIMEOUT_SECONDS,
        )

    def _connect_sync(self) -> IMAPClient:
        client = IMAPClient(self.host, port=self.port, ssl=self.use_ssl, timeout=self.timeout)
        try:
            client.login(self.user, self._password)
            client.select_folder(self.folder, readonly=True)
        except Exception:
            client.shutdown()
            raise
        return client

    async def connect(self) -> ImapMailboxSession:
        """
        Open a session.

        Raises:
            MailboxError: connection, login or folder selection failed
        """
        if not self.user or not self._password:
            raise MailboxError("Mailbox credentials are not configured", details={"host": self.host})

        try:
            client = await asyncio.to_thread(self._connect_sync)
        except (IMAPClientError, OSError) as e:
            raise MailboxError(
                f"Failed to connect to mailbox: {e}",
                details={"host": self.host, "port": self.port, "error_type": type(e).__name__},
            ) from e

        logger.info("Mailbox connected", host=self.host, folder=self.folder)
        return ImapMailboxSession(client, self.folder)

    async def latest_from(self, sender: str, limit: int = 5) -> Sequence[MailMessage]:
        """
        One-shot query: connect, fetch the latest messages from `sender`, disconnect.

        Raises:
            MailboxError: connection or query failed
        """
        session = await self.connect()
        try:
            return await session.search_recent_from(sender, limit)
        finally:
            await session.disconnect()

    async def search(self, criteria: SearchCriteria, limit: int = 10) -> Sequence[MailMessage]:
        """
        One-shot search: connect, run `criteria`, disconnect.

        Raises:
            MailboxError: connection or query failed
        """
        session = await self.connect()
        try:
            return await session.search(criteria, limit)
        finally:
            await session.disconnect()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(host={self.host}, port={self.port}, user={self.user})"
