"""Service wiring for the negotiation routers.

The realtime hub is created in the app lifespan and stored on
``app.state``; when it is absent (tests, hub disabled) events are skipped.
"""

from fastapi import Request

from src.sh_negotiation.application.service import NegotiationService


def get_negotiation_service(request: Request) -> NegotiationService:
    return NegotiationService(notifier=getattr(request.app.state, "realtime_hub", None))
