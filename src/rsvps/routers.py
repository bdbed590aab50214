from fastapi import APIRouter

from .features.category_summary.router import router as category_summary_router
from .features.delete_rsvp.router import router as delete_rsvp_router
from .features.export_rsvps.router import router as export_rsvps_router
from .features.list_rsvps.router import router as list_rsvps_router
from .features.submit_rsvp.router import router as submit_rsvp_router

router = APIRouter()

# fixed paths first so they are not captured by /rsvps/{rsvp_id}
router.include_router(category_summary_router)
router.include_router(export_rsvps_router)
router.include_router(list_rsvps_router)
router.include_router(submit_rsvp_router)
router.include_router(delete_rsvp_router)
