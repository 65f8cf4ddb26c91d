"""Root route: a plain-text pointer to the contacts resource."""

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["Index"])

WELCOME_MESSAGE = "Welcome to the Contacts API - try /contacts"


@router.get("/", response_class=PlainTextResponse, summary="Welcome message")
async def index() -> str:
    return WELCOME_MESSAGE
