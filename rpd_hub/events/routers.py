from fastapi import APIRouter

from .features.create_event.router import router as create_event_router
from .features.create_rsvp.router import router as create_rsvp_router
from .features.list_events.router import router as list_events_router
from .features.list_rsvps.router import router as list_rsvps_router

router = APIRouter()

router.include_router(list_events_router)
router.include_router(create_event_router)
router.include_router(list_rsvps_router)
router.include_router(create_rsvp_router)
