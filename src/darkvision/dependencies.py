from fastapi import Request

from darkvision.config import Settings
from darkvision.services.storage import MediaStorage
from darkvision.services.summary import SummaryService


def get_settings(request: Request) -> Settings:
    """Retrieve the Settings the app was started with."""
    return request.app.state.settings


def get_storage(request: Request) -> MediaStorage:
    """Retrieve the MediaStorage singleton from app state."""
    return request.app.state.storage


def get_summary_service(request: Request) -> SummaryService:
    """Retrieve the SummaryService singleton from app state."""
    return request.app.state.summary
