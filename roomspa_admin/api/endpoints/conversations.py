"""Conversations between customers and therapists."""

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse

from roomspa_admin.config import settings
from roomspa_admin.core.templating import render
from roomspa_admin.dependencies import Backend
from roomspa_admin.services.list_view import ListQuery, ListSpec, ListView, sum_field

router = APIRouter()

CONVERSATIONS_LIST = ListSpec(
    collection="conversations",
    search_fields=("customer.name", "therapist.name", "last_message"),
    page_size=settings.default_page_size,
    page_size_param="page_size",
)

MESSAGES_LIST = ListSpec(
    collection="messages",
    search_fields=("content", "sender.name"),
    page_size=50,
    page_size_param="page_size",
)


@router.get("/conversations", response_class=HTMLResponse, summary="Conversations list")
async def conversations_page(
    request: Request,
    backend: Backend,
    page: int = Query(1, ge=1),
    search: str = Query(""),
) -> HTMLResponse:
    """
    List conversations with summary totals.

    Totals are computed over the loaded page only.
    """
    view = ListView(backend.conversations.list, CONVERSATIONS_LIST)
    listing = await view.load(ListQuery(page=page, search=search))
    summary = {
        "active": sum(1 for c in listing.records if c.get("status") == "active"),
        "unread": int(sum_field(listing.records, "unread_count")),
        "messages": int(sum_field(listing.records, "message_count")),
    }
    return render(request, "conversations.html", listing=listing, summary=summary)


@router.get(
    "/conversations/{conversation_id}",
    response_class=HTMLResponse,
    summary="Conversation messages",
)
async def conversation_detail(
    request: Request,
    conversation_id: str,
    backend: Backend,
    page: int = Query(1, ge=1),
) -> HTMLResponse:
    view = ListView(
        lambda params: backend.conversations.messages(conversation_id, params),
        MESSAGES_LIST,
    )
    listing = await view.load(ListQuery(page=page))
    return render(
        request,
        "conversation_detail.html",
        listing=listing,
        conversation_id=conversation_id,
    )
