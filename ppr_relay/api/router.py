"""
API Router

Aggregates all endpoints. Paths are served from the root because
deployed front-ends post to ``/send-ppr-form`` directly.
"""

from fastapi import APIRouter

from ppr_relay.api import forms, health

api_router = APIRouter()

# Include all routers
api_router.include_router(
    health.router,
    tags=["health"],
)

api_router.include_router(
    forms.router,
    tags=["forms"],
)
