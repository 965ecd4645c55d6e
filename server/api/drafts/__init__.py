# Order drafts (checkout session state)

from .routes import router as drafts_router
from .models import OrderDraft, DraftJourney, DraftOutlet, DraftCartLine

__all__ = [
    "drafts_router",
    "OrderDraft",
    "DraftJourney",
    "DraftOutlet",
    "DraftCartLine"
]
