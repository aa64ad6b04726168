"""
Posting API endpoints.

The body is one of the known document types, selected by its
doc_type field. A first posting answers 201; posting the same
document again answers 200 with the same journal id and an
Idempotent-Replay header.
"""

from typing import Annotated

from fastapi import APIRouter, Body, Depends, Response
from sqlalchemy.orm import Session

from gl_core.api.errors import to_http_error
from gl_core.exceptions import LedgerError
from gl_core.models.base import get_db
from gl_core.schemas.documents import PostingDocument
from gl_core.schemas.posting import PostingResult
from gl_core.services.posting_service import PostingService

router = APIRouter(prefix="/postings", tags=["Postings"])


@router.post("", response_model=PostingResult, status_code=201)
def post_document(
    response: Response,
    document: Annotated[PostingDocument, Body(discriminator="doc_type")],
    db: Session = Depends(get_db),
):
    """Post a business document through its posting rule."""
    service = PostingService(db)
    try:
        result = service.post_document(document)
    except LedgerError as e:
        raise to_http_error(e)

    if result.replayed:
        response.status_code = 200
        response.headers["Idempotent-Replay"] = "true"
    return result
