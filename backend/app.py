import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import APIRouter, Depends, FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from astronomy import ApodClient
from db import EntryStore, resolve_database_url
from schemas import EntryView, OutcomeKind
from submission import submit_entry

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

OUTCOME_PAGES = {
    OutcomeKind.CREATED: ("confirmation.html", 200),
    OutcomeKind.FUTURE_DATE: ("future_date.html", 200),
    OutcomeKind.DUPLICATE_DATE: ("same_date.html", 200),
    OutcomeKind.INVALID_DATE: ("invalid.html", 400),
    OutcomeKind.INVALID_TIMEZONE: ("invalid.html", 400),
    OutcomeKind.FAILED: ("error.html", 500),
}

router = APIRouter()


def get_store(request: Request) -> EntryStore:
    return request.app.state.store


def get_astronomy(request: Request) -> ApodClient:
    return request.app.state.astronomy


@router.get("/", response_class=HTMLResponse)
def home(request: Request):
    """Home page."""
    return templates.TemplateResponse(request, "index.html")


@router.get("/health")
def health():
    return {"ok": True}


@router.get("/entries", response_class=HTMLResponse)
def list_entries(request: Request, store: EntryStore = Depends(get_store)):
    """All entries, newest first."""
    entries = store.list_entries()
    logger.info(f"Listing {len(entries)} entries")
    return templates.TemplateResponse(request, "all.html", {"entries": entries})


@router.get("/entries/add", response_class=HTMLResponse)
def add_entry_form(request: Request):
    return templates.TemplateResponse(request, "add.html")


@router.post("/entries/add", response_class=HTMLResponse)
def add_entry(
    request: Request,
    title: str = Form(""),
    body: str = Form(""),
    entry_date: str = Form(..., alias="entryDate"),
    include_astronomy: str | None = Form(None, alias="includeAstronomy"),
    timezone: str = Form("0"),
    store: EntryStore = Depends(get_store),
    astronomy: ApodClient = Depends(get_astronomy),
):
    """Submit the entry form and render the outcome."""
    logger.info(f"Entry submission for {entry_date} (timezone offset {timezone})")

    outcome = submit_entry(
        store,
        astronomy,
        title=title,
        body=body,
        entry_date=entry_date,
        include_astronomy=bool(include_astronomy),
        timezone=timezone,
    )

    template, status_code = OUTCOME_PAGES[outcome.kind]
    return templates.TemplateResponse(
        request, template, {"outcome": outcome}, status_code=status_code
    )


@router.get("/entries/{entry_id}", response_class=HTMLResponse)
def view_entry(request: Request, entry_id: int, store: EntryStore = Depends(get_store)):
    """View a single past entry."""
    entry = store.get(entry_id)
    if not entry:
        return templates.TemplateResponse(
            request, "not_found.html", {"entry_id": entry_id}, status_code=404
        )
    return templates.TemplateResponse(request, "entry.html", {"entry": entry})


@router.get("/api/entries", response_model=list[EntryView])
def api_list_entries(store: EntryStore = Depends(get_store)):
    """Entries as JSON, newest first."""
    return store.list_entries()


@router.get("/api/entries/{entry_id}", response_model=EntryView)
def api_get_entry(entry_id: int, store: EntryStore = Depends(get_store)):
    entry = store.get(entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry


def create_app(store: EntryStore | None = None, astronomy: ApodClient | None = None) -> FastAPI:
    """Build the journal app.

    Args:
        store: Entry store to use; defaults to one built from the environment.
        astronomy: APOD client to use; defaults to one built from the environment.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = store or EntryStore(resolve_database_url())
        app.state.store.open()
        app.state.astronomy = astronomy or ApodClient.from_env()
        logger.info("Database initialized")
        yield
        app.state.store.close()
        logger.info("Database closed")

    app = FastAPI(title="Daily Sky Journal", version="1.0.0", lifespan=lifespan)
    app.mount("/css", StaticFiles(directory=str(BASE_DIR / "css")), name="css")
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "7003"))
    logger.info(f"main URL http://localhost:{port}/")
    uvicorn.run(app, host="0.0.0.0", port=port)
