"""Customer list."""

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse

from roomspa_admin.config import settings
from roomspa_admin.core.templating import render
from roomspa_admin.dependencies import Backend
from roomspa_admin.services.list_view import ListQuery, ListSpec, ListView

router = APIRouter()

CUSTOMERS_LIST = ListSpec(
    collection="customers",
    search_fields=("name", "email"),
    page_size=settings.default_page_size,
    search_remote=True,
)


@router.get("/customers", response_class=HTMLResponse, summary="Customers list")
async def customers_page(
    request: Request,
    backend: Backend,
    page: int = Query(1, ge=1),
    search: str = Query(""),
) -> HTMLResponse:
    # The term goes to the backend and is applied again to the page it returns
    view = ListView(backend.customers.list, CUSTOMERS_LIST)
    listing = await view.load(ListQuery(page=page, search=search))
    return render(request, "customers.html", listing=listing)
