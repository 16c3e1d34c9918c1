import logging
from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI, Depends, HTTPException, Response, Path
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from notes_backend.api.admin import router as admin_router
from notes_backend.api.auth import (
    CallerIdentity,
    end_session,
    fetch_owned_note,
    require_caller,
    start_session,
)
from notes_backend.api.config import ADMIN_EMAIL, ADMIN_PASSWORD
from notes_backend.api.schemas import LoginRequest, NoteOut, NoteWriteRequest, RegisterRequest, UserOut
from notes_store import notes as note_store
from notes_store import users as user_store
from notes_store.db import SessionLocal, engine, get_db
from notes_store.errors import StoreError
from notes_store.init_db import bootstrap

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

NOTE_NOT_FOUND = "Note not found"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the database before serving requests."""
    logger.info("Startup: preparing database...")
    bootstrap(engine, SessionLocal, ADMIN_EMAIL, ADMIN_PASSWORD)
    yield


# FastAPI app config
app = FastAPI(
    title="Notes Manager API",
    description="Personal notes with session login and an admin panel.",
    version="1.0.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Authentication", "description": "Registration, login and logout"},
        {"name": "Notes", "description": "Create, update, view and delete your own notes"},
        {"name": "Admin", "description": "Statistics, account management and note moderation"},
    ],
)
app.include_router(admin_router)


# Root Health Check
@app.get("/", summary="Health Check", tags=["General"])
def health_check():
    """Simple health check endpoint."""
    return {"message": "Healthy"}


#####################
# AUTH ENDPOINTS
#####################

# PUBLIC_INTERFACE
@app.post("/auth/register", response_model=UserOut, status_code=201, summary="Register a new account", tags=["Authentication"])
def register(payload: RegisterRequest, response: Response, db: Session = Depends(get_db)):
    """
    Register a new account and log it in.
    A taken email fails with the same generic message as any other failure.
    """
    email = payload.email.strip().lower()
    if not payload.password.strip():
        raise HTTPException(status_code=400, detail="Email and password are required.")
    user_id = user_store.create_user(db, email, payload.password)
    start_session(response, user_id)
    return user_store.get_user(db, user_id)


# PUBLIC_INTERFACE
@app.post("/auth/login", response_model=UserOut, summary="Log in", tags=["Authentication"])
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """
    Log in and receive the session cookie.
    """
    user = user_store.authenticate_user(db, payload.email.strip().lower(), payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password.")
    start_session(response, user.id)
    return user


# PUBLIC_INTERFACE
@app.post("/auth/logout", status_code=204, summary="Log out", tags=["Authentication"])
def logout():
    """Clear the session cookie."""
    response = Response(status_code=204)
    end_session(response)
    return response


# PUBLIC_INTERFACE
@app.get("/auth/me", response_model=UserOut, summary="Get current account", tags=["Authentication"])
def get_profile(caller: CallerIdentity = Depends(require_caller), db: Session = Depends(get_db)):
    return user_store.get_user(db, caller.user_id)


#####################
# NOTES ENDPOINTS
#####################

# PUBLIC_INTERFACE
@app.get("/notes", response_model=List[NoteOut], summary="List my notes", tags=["Notes"])
def list_notes(caller: CallerIdentity = Depends(require_caller), db: Session = Depends(get_db)):
    """
    Notes of the logged-in account, newest first.
    """
    return note_store.list_notes_for_owner(db, caller.user_id)


# PUBLIC_INTERFACE
@app.post("/notes", response_model=NoteOut, status_code=201, summary="Create a note", tags=["Notes"])
def create_note(payload: NoteWriteRequest, caller: CallerIdentity = Depends(require_caller), db: Session = Depends(get_db)):
    """
    Create a new note owned by the logged-in account.
    """
    note_id = note_store.create_note(db, caller.user_id, payload.title, (payload.content or "").strip())
    return note_store.get_note(db, note_id)


# PUBLIC_INTERFACE
@app.get("/notes/{note_id}", response_model=NoteOut, summary="Get one of my notes", tags=["Notes"])
def get_note(note_id: int = Path(..., ge=1), caller: CallerIdentity = Depends(require_caller), db: Session = Depends(get_db)):
    note = fetch_owned_note(db, caller, note_id)
    if not note:
        raise HTTPException(status_code=404, detail=NOTE_NOT_FOUND)
    return note


# PUBLIC_INTERFACE
@app.put("/notes/{note_id}", response_model=NoteOut, summary="Update one of my notes", tags=["Notes"])
def update_note(
    payload: NoteWriteRequest,
    note_id: int = Path(..., ge=1),
    caller: CallerIdentity = Depends(require_caller),
    db: Session = Depends(get_db),
):
    """
    Replace title and content of a note owned by the logged-in account.
    Other accounts' notes are reported as not found.
    """
    note = fetch_owned_note(db, caller, note_id)
    if not note:
        raise HTTPException(status_code=404, detail=NOTE_NOT_FOUND)
    note_store.update_note(db, note.id, payload.title, (payload.content or "").strip())
    return note_store.get_note(db, note.id)


# PUBLIC_INTERFACE
@app.delete("/notes/{note_id}", status_code=204, summary="Delete one of my notes", tags=["Notes"])
def delete_note(note_id: int = Path(..., ge=1), caller: CallerIdentity = Depends(require_caller), db: Session = Depends(get_db)):
    """
    Delete a note owned by the logged-in account.
    """
    note = fetch_owned_note(db, caller, note_id)
    if not note:
        raise HTTPException(status_code=404, detail=NOTE_NOT_FOUND)
    note_store.delete_note(db, note.id)
    return Response(status_code=204)


# Error handlers
@app.exception_handler(StoreError)
def store_error_handler(request, exc):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(HTTPException)
def custom_http_exception_handler(request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
