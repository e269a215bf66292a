"""
QuoteVault Backend - Quote Service (Business Logic)
====================================================

What:  CRUD operations on quotes, guarded by the per-quote access check.
How:   Each operation validates the identifier, performs at most one read and
       one write on the session it receives, and returns a response schema.
Who:   Called by route handlers in routes/quotes.py.
When:  For every /api/v1/quotes request.

Request Flow (read/update/delete):
    ┌──────────────┐    ┌──────────┐    ┌──────────────┐    ┌──────────┐
    │ parse id     │───▶│  load    │───▶│ access check │───▶│ operate  │
    │ (400)        │    │  (404)   │    │ (401)        │    │ (500)    │
    └──────────────┘    └──────────┘    └──────────────┘    └──────────┘

Concurrency:
    Update and delete are read-then-write without a version check; two
    concurrent updates of the same quote can overwrite each other.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from quotevault.config import settings
from quotevault.exceptions import DatabaseError, NotFoundError, ValidationError
from quotevault.models.quote import Quote
from quotevault.schemas.quote import (
    MessageResponse,
    QuoteCreate,
    QuoteResponse,
    QuoteUpdate,
    QuoteWithCredentialResponse,
)
from quotevault.services.access_control import AccessPolicy, normalize_credential

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR = "Anonymous"


def parse_quote_id(raw_id: str) -> UUID:
    """
    Validates a quote identifier taken from the URL path.

    Surrounding whitespace and backslashes are removed first. Anything that
    is not a UUID raises ValidationError (→ 400) so the store is never
    queried with it.
    """
    cleaned = (raw_id or "").strip().replace("\\", "")
    try:
        return UUID(cleaned)
    except ValueError:
        raise ValidationError(message="Invalid quote ID", field="id")


class QuoteService:
    """
    Business logic layer for quote operations.

    Responsibilities:
        - list_quotes():  all quotes, newest first, sanitized
        - create_quote(): defaults and credential normalization
        - get_quote():    access-checked read, with the include-credential bypass
        - update_quote(): access-checked overwrite, optional credential change
        - delete_quote(): access-checked permanent removal

    Error Handling Strategy:
        Application exceptions (ValidationError, NotFoundError,
        UnauthorizedError) propagate unchanged. Anything else raised while
        talking to the store is logged and wrapped in DatabaseError.
    """

    def __init__(
        self,
        access_policy: AccessPolicy,
        allow_credential_disclosure: bool = True,
    ):
        self.access_policy = access_policy
        self.allow_credential_disclosure = allow_credential_disclosure

    async def list_quotes(self, db: AsyncSession) -> List[QuoteResponse]:
        """
        Returns every quote ordered by created_at descending.

        Query plan:
            SELECT * FROM quotes ORDER BY created_at DESC
        """
        try:
            result = await db.execute(select(Quote).order_by(desc(Quote.created_at)))
            quotes = result.scalars().all()
            return [QuoteResponse.model_validate(quote) for quote in quotes]
        except Exception as e:
            logger.error("Database error listing quotes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve quotes. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def create_quote(self, db: AsyncSession, payload: QuoteCreate) -> QuoteResponse:
        """
        Inserts a new quote.

        Normalization:
            author      → "Anonymous" when omitted or empty
            tags        → [] when omitted or null
            credential  → trimmed; blank becomes NULL (unprotected)
        """
        quote = Quote(
            title=payload.title,
            content=payload.content,
            author=payload.author or DEFAULT_AUTHOR,
            tags=payload.tags or [],
            credential=normalize_credential(payload.credential),
        )
        try:
            db.add(quote)
            await db.flush()
        except Exception as e:
            logger.error("Database error creating quote: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the quote. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Quote created: %s (protected=%s)", quote.id, quote.is_protected)
        return QuoteResponse.model_validate(quote)

    async def get_quote(
        self,
        db: AsyncSession,
        raw_id: str,
        credential: Optional[str] = None,
        include_credential: bool = False,
    ) -> Union[QuoteResponse, QuoteWithCredentialResponse]:
        """
        Reads one quote.

        With `include_credential` (and disclosure allowed in settings) the raw
        record is returned, stored credential included, WITHOUT running the
        access check. This mirrors the historical API and is a known weakness;
        every use is logged at WARNING.
        """
        quote_id = parse_quote_id(raw_id)
        quote = await self._load(db, quote_id)

        if include_credential and self.allow_credential_disclosure:
            logger.warning(
                "Quote %s returned with its credential; access check skipped", quote_id
            )
            return QuoteWithCredentialResponse.model_validate(quote)

        self.access_policy.ensure_authorized(quote.credential, credential)
        return QuoteResponse.model_validate(quote)

    async def update_quote(
        self,
        db: AsyncSession,
        raw_id: str,
        payload: QuoteUpdate,
    ) -> QuoteResponse:
        """
        Overwrites title, content, author and tags of one quote.

        The access check uses `payload.credential`. The stored credential is
        replaced only when `newCredential` was sent; blank or null clears it.
        """
        quote_id = parse_quote_id(raw_id)
        quote = await self._load(db, quote_id)
        self.access_policy.ensure_authorized(quote.credential, payload.credential)

        quote.title = payload.title
        quote.content = payload.content
        quote.author = payload.author or DEFAULT_AUTHOR
        quote.tags = payload.tags or []
        if payload.replaces_credential:
            quote.credential = normalize_credential(payload.new_credential)
        quote.updated_at = datetime.now(timezone.utc)

        try:
            await db.flush()
        except Exception as e:
            logger.error("Database error updating quote %s: %s", quote_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the quote. Please try again.",
                context={"quote_id": str(quote_id)},
            )

        logger.info("Quote updated: %s (protected=%s)", quote_id, quote.is_protected)
        return QuoteResponse.model_validate(quote)

    async def delete_quote(
        self,
        db: AsyncSession,
        raw_id: str,
        credential: Optional[str] = None,
    ) -> MessageResponse:
        """Permanently removes one quote after the access check."""
        quote_id = parse_quote_id(raw_id)
        quote = await self._load(db, quote_id)
        self.access_policy.ensure_authorized(quote.credential, credential)

        try:
            await db.delete(quote)
            await db.flush()
        except Exception as e:
            logger.error("Database error deleting quote %s: %s", quote_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the quote. Please try again.",
                context={"quote_id": str(quote_id)},
            )

        logger.info("Quote deleted: %s", quote_id)
        return MessageResponse(message="Quote deleted successfully")

    async def _load(self, db: AsyncSession, quote_id: UUID) -> Quote:
        """
        SELECT * FROM quotes WHERE id = :uuid

        Raises:
            NotFoundError: no quote with this ID (→ 404)
            DatabaseError: query execution failed (→ 500)
        """
        try:
            result = await db.execute(select(Quote).where(Quote.id == quote_id))
            quote = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching quote %s: %s", quote_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the quote. Please try again.",
                context={"quote_id": str(quote_id)},
            )

        if quote is None:
            raise NotFoundError(resource="quote", context={"quote_id": str(quote_id)})
        return quote


# ── Singleton Instance ────────────────────────────────────────────────────
# The master override is read once here and never consulted again
quote_service = QuoteService(
    access_policy=AccessPolicy(master_secret=settings.master_credential or None),
    allow_credential_disclosure=settings.allow_credential_disclosure,
)
