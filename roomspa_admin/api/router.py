"""Router configuration."""

from fastapi import APIRouter, Depends

from roomspa_admin.api.endpoints import (
    analytics,
    auth,
    bookings,
    conversations,
    coupons,
    customers,
    dashboard,
    health,
    monitoring,
    notifications,
    pending_requests,
    reports,
    settings,
    therapists,
    users,
)
from roomspa_admin.dependencies import require_session

# Every admin page requires a session; the guard runs before any backend call
SESSION_GUARD = [Depends(require_session)]

admin_router = APIRouter(dependencies=SESSION_GUARD)
admin_router.include_router(users.router, tags=["Users"])
admin_router.include_router(bookings.router, tags=["Bookings"])
admin_router.include_router(therapists.router, tags=["Therapists"])
admin_router.include_router(customers.router, tags=["Customers"])
admin_router.include_router(pending_requests.router, tags=["Pending Requests"])
admin_router.include_router(conversations.router, tags=["Conversations"])
admin_router.include_router(coupons.router, tags=["Coupons"])
admin_router.include_router(analytics.router, tags=["Analytics"])
admin_router.include_router(reports.router, tags=["Reports"])
admin_router.include_router(monitoring.router, tags=["Monitoring"])
admin_router.include_router(notifications.router, tags=["Notifications"])
admin_router.include_router(settings.router, tags=["Settings"])

api_router = APIRouter()
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, tags=["Authentication"])
# The dashboard lives at the bare prefix, which a nested router cannot express
api_router.include_router(
    dashboard.router, prefix="/admin", dependencies=SESSION_GUARD, tags=["Dashboard"]
)
api_router.include_router(admin_router, prefix="/admin")
