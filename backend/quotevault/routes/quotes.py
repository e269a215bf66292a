"""
QuoteVault Backend - Quote Route Handlers
==========================================

What:  The five /api/v1/quotes endpoints.
How:   Extracts path/query/body input, delegates to QuoteService, returns JSON.
       Errors raised by the service are formatted by the global handlers in
       main.py.

Route Inventory:
    GET    /api/v1/quotes          list (newest first, sanitized)
    POST   /api/v1/quotes          create → 201
    GET    /api/v1/quotes/{id}     read one (?credential=, ?includeCredential=)
    PUT    /api/v1/quotes/{id}     update (body: credential, newCredential)
    DELETE /api/v1/quotes/{id}     delete (?credential= or body credential)

The `{id}` path parameter is a plain string so that malformed IDs reach
QuoteService and produce a 400 instead of FastAPI's 422.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from quotevault.database import get_db_session
from quotevault.schemas.quote import (
    ErrorResponse,
    MessageResponse,
    QuoteCreate,
    QuoteDeleteRequest,
    QuoteResponse,
    QuoteUpdate,
    QuoteWithCredentialResponse,
)
from quotevault.services.quote_service import quote_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Quotes"])

ITEM_ERRORS = {
    400: {"description": "Invalid quote ID or body", "model": ErrorResponse},
    401: {"description": "Incorrect credential", "model": ErrorResponse},
    404: {"description": "Quote not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.get(
    "/quotes",
    response_model=List[QuoteResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all quotes",
    description="Returns every quote, newest first. Credentials are never included.",
)
async def list_quotes(
    db: AsyncSession = Depends(get_db_session),
) -> List[QuoteResponse]:
    return await quote_service.list_quotes(db=db)


@router.post(
    "/quotes",
    status_code=201,
    response_model=QuoteResponse,
    responses={400: {"description": "Validation error", "model": ErrorResponse}},
    summary="Create a quote",
    description=(
        "Creates a quote. `author` defaults to 'Anonymous' and `tags` to []. "
        "A non-blank `credential` protects the quote from reads, updates and deletes."
    ),
)
async def create_quote(
    payload: QuoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> QuoteResponse:
    return await quote_service.create_quote(db=db, payload=payload)


@router.get(
    "/quotes/{quote_id}",
    # Two possible shapes; the returned model is serialized as-is
    response_model=None,
    responses={
        200: {"description": "The quote", "model": QuoteWithCredentialResponse},
        **ITEM_ERRORS,
    },
    summary="Get a single quote",
    description=(
        "Returns a quote when `credential` opens it. With `includeCredential=true` "
        "the stored credential is returned and no check is made."
    ),
)
async def get_quote(
    quote_id: str,
    credential: Optional[str] = Query(default=None, description="Credential for a protected quote"),
    include_credential: Optional[str] = Query(
        default=None,
        alias="includeCredential",
        description="Exactly `true` returns the raw record including its credential",
    ),
    db: AsyncSession = Depends(get_db_session),
):
    """
    Read one quote.

    Query parameters:
        credential:         compared against the stored credential (or master override)
        includeCredential:  legacy flag; only the literal "true" skips the check
                            and returns the credential, anything else is ignored
    """
    return await quote_service.get_quote(
        db=db,
        raw_id=quote_id,
        credential=credential,
        include_credential=include_credential == "true",
    )


@router.put(
    "/quotes/{quote_id}",
    response_model=QuoteResponse,
    responses=ITEM_ERRORS,
    summary="Update a quote",
    description=(
        "Overwrites title, content, author and tags. `credential` must open the quote. "
        "Send `newCredential` to change protection; a blank value removes it."
    ),
)
async def update_quote(
    quote_id: str,
    payload: QuoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> QuoteResponse:
    return await quote_service.update_quote(db=db, raw_id=quote_id, payload=payload)


@router.delete(
    "/quotes/{quote_id}",
    response_model=MessageResponse,
    responses=ITEM_ERRORS,
    summary="Delete a quote",
    description="Permanently deletes a quote. The credential may be sent as a query parameter or in the body.",
)
async def delete_quote(
    quote_id: str,
    credential: Optional[str] = Query(default=None, description="Credential for a protected quote"),
    body: Optional[QuoteDeleteRequest] = Body(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    """
    Delete one quote.

    The query-string credential wins; the body is consulted only when the
    query value is missing or empty.
    """
    supplied = credential or (body.credential if body else None)
    return await quote_service.delete_quote(db=db, raw_id=quote_id, credential=supplied)
