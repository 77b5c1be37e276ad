"""
Epic Tech Chat — FastAPI server.

Routes:
  GET    /                            — welcome message + current mode
  POST   /api/chat                    — submit one message (text / command / image)
  GET    /api/conversation            — full conversation log
  DELETE /api/conversation            — drop session state (page reload)
  GET    /api/suggest?q=/jo           — command autocomplete
  GET    /api/mode                    — current bot mode
  PUT    /api/mode                    — switch bot mode (ai | alternate-bot)
  GET    /api/streak                  — streak count + badge
  GET    /api/quests                  — today's quests
  POST   /api/quests/{index}/complete — mark a quest done
  GET    /api/leaderboard             — streak leaderboard
  POST   /api/leaderboard             — upsert a leaderboard entry
  GET    /api/reminders               — list reminders
  POST   /api/reminders               — add a reminder
  GET    /api/media                   — player state
  POST   /api/media/items             — queue uploaded files
  DELETE /api/media/items/{index}     — remove a queued item
  POST   /api/media/{action}          — play | pause | toggle | next | previous | ended
  PUT    /api/media                   — select / seek / volume / drag position
  GET    /health                      — server + backend configuration

Architecture:
  Browser → FastAPI (port 5000) → Groq        (AI mode)
                                ↘ Telegram    (alternate-bot mode)

There is one process-wide session: no users, no auth, no isolation.

Only /api/chat is a plain `def` (it blocks on the backend and runs in the
threadpool).  Every other route is `async def`, so playlist, quest and
leaderboard writes run one at a time on the event loop.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from epictech.bridge import make_bridge
from epictech.completion_client import CompletionClient
from epictech.config import SERVER_HOST, SERVER_PORT, WELCOME_MESSAGE
from epictech.conversation import ConversationStore
from epictech.media import item_from_upload
from epictech.persona import Persona
from epictech.router import (
    AIResponder,
    AlternateBotResponder,
    BotMode,
    ImageAttachment,
    Router,
)
from epictech.session import ChatSession, DispatchInProgress
from epictech.state_store import SqliteStateStore
from epictech.streak import streak_badge
from epictech.suggest import suggest

log = logging.getLogger("epictech.server")


# ------------------------------------------------------------------
# App setup
# ------------------------------------------------------------------

session: ChatSession

# In-memory, process lifetime only.
leaderboard: list[dict] = []
reminders: list[dict] = []

_SEED_LEADERBOARD = [
    {"name": "you", "streak": 5, "emoji": "🔥"},
    {"name": "guest42", "streak": 3, "emoji": "🤖"},
    {"name": "dj_smokestream", "streak": 2, "emoji": "💻"},
]


def _build_session() -> ChatSession:
    store = ConversationStore()
    client = CompletionClient()
    if not client.configured:
        log.warning("GROQ_API_KEY is missing — AI replies will fall back.")
    router = Router(
        ai=AIResponder(client, store, Persona()),
        alternate=AlternateBotResponder(make_bridge()),
    )
    return ChatSession(router, store, SqliteStateStore())


@asynccontextmanager
async def lifespan(app: FastAPI):
    global session
    session = _build_session()
    leaderboard[:] = [dict(e) for e in _SEED_LEADERBOARD]
    reminders.clear()
    log.info("Epic Tech Chat starting on http://localhost:%d", SERVER_PORT)
    yield


app = FastAPI(title="Epic Tech Chat", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------------
# Request models
# ------------------------------------------------------------------

class ImagePayload(BaseModel):
    data: str
    mime_type: str


class ChatRequest(BaseModel):
    input: str = ""
    image: ImagePayload | None = None


class ModeRequest(BaseModel):
    mode: BotMode


class LeaderboardEntry(BaseModel):
    name: str
    streak: int


class ReminderRequest(BaseModel):
    time: str
    user: str
    message: str


class UploadedFile(BaseModel):
    name: str
    url: str
    mime_type: str


class MediaUpload(BaseModel):
    files: list[UploadedFile]


class MediaUpdate(BaseModel):
    select: int | None = None
    seek: float | None = None
    volume: float | None = None
    drag_start: tuple[int, int] | None = None
    drag_to: tuple[int, int] | None = None
    drag_end: bool = False


# ------------------------------------------------------------------
# Chat routes
# ------------------------------------------------------------------

@app.get("/")
async def welcome():
    return JSONResponse({"message": WELCOME_MESSAGE, "mode": session.router.mode.value})


@app.post("/api/chat")
def chat(req: ChatRequest):
    image = None
    if req.image is not None:
        image = ImageAttachment(payload=req.image.data, mime_type=req.image.mime_type)
    try:
        turns = session.submit(req.input, image)
    except DispatchInProgress as e:
        return JSONResponse({"error": str(e)}, status_code=409)

    return JSONResponse({
        "output": turns[-1].content if turns else None,
        "turns": [t.as_dict() for t in turns],
        "streak": _streak_payload(),
    })


@app.get("/api/conversation")
async def get_conversation():
    return JSONResponse({"turns": [t.as_dict() for t in session.store]})


@app.delete("/api/conversation")
async def reset_conversation():
    try:
        session.reset()
    except DispatchInProgress as e:
        return JSONResponse({"error": str(e)}, status_code=409)
    return JSONResponse({"status": "cleared"})


@app.get("/api/suggest")
async def get_suggestions(q: str = ""):
    return JSONResponse({
        "suggestions": [
            {"token": c.token, "description": c.description} for c in suggest(q)
        ]
    })


@app.get("/api/mode")
async def get_mode():
    return JSONResponse({"mode": session.router.mode.value})


@app.put("/api/mode")
async def put_mode(req: ModeRequest):
    session.set_mode(req.mode)
    return JSONResponse({"mode": session.router.mode.value})


# ------------------------------------------------------------------
# Engagement routes
# ------------------------------------------------------------------

def _streak_payload() -> dict:
    state = session.streak
    return {"count": state.count, "badge": streak_badge(state.count)}


@app.get("/api/streak")
async def get_streak():
    return JSONResponse(_streak_payload())


@app.get("/api/quests")
async def get_quests():
    return JSONResponse({"quests": session.quests.current()})


@app.post("/api/quests/{index}/complete")
async def complete_quest(index: int):
    try:
        quests = session.quests.complete(index)
    except IndexError:
        return JSONResponse({"status": "not_found"}, status_code=404)
    return JSONResponse({"quests": quests})


@app.get("/api/leaderboard")
async def get_leaderboard():
    return JSONResponse(leaderboard)


@app.post("/api/leaderboard")
async def post_leaderboard(entry: LeaderboardEntry):
    found = next((u for u in leaderboard if u["name"] == entry.name), None)
    if found:
        found["streak"] = entry.streak
    else:
        leaderboard.append({"name": entry.name, "streak": entry.streak, "emoji": "⭐"})
    return JSONResponse({"ok": True})


@app.get("/api/reminders")
async def get_reminders():
    return JSONResponse(reminders)


@app.post("/api/reminders")
async def post_reminder(req: ReminderRequest):
    reminders.append(req.model_dump())
    return JSONResponse({"ok": True})


# ------------------------------------------------------------------
# Media player routes
# ------------------------------------------------------------------

_MEDIA_ACTIONS = {
    "play": lambda m: m.play(),
    "pause": lambda m: m.pause(),
    "toggle": lambda m: m.toggle(),
    "next": lambda m: m.next(),
    "previous": lambda m: m.previous(),
    "ended": lambda m: m.on_ended(),
}


@app.get("/api/media")
async def get_media():
    return JSONResponse(session.media.as_dict())


@app.post("/api/media/items")
async def add_media(req: MediaUpload):
    session.media.add([item_from_upload(f.name, f.url, f.mime_type) for f in req.files])
    return JSONResponse(session.media.as_dict())


@app.delete("/api/media/items/{index}")
async def remove_media(index: int):
    try:
        session.media.remove(index)
    except IndexError:
        return JSONResponse({"status": "not_found"}, status_code=404)
    return JSONResponse(session.media.as_dict())


@app.post("/api/media/{action}")
async def media_action(action: str):
    handler = _MEDIA_ACTIONS.get(action)
    if handler is None:
        return JSONResponse({"status": "unknown_action"}, status_code=404)
    handler(session.media)
    return JSONResponse(session.media.as_dict())


@app.put("/api/media")
async def update_media(req: MediaUpdate):
    media = session.media
    if req.select is not None:
        media.select(req.select)
    if req.seek is not None:
        media.seek(req.seek)
    if req.volume is not None:
        media.set_volume(req.volume)
    if req.drag_start is not None:
        media.start_drag(*req.drag_start)
    if req.drag_to is not None:
        media.drag_to(*req.drag_to)
    if req.drag_end:
        media.end_drag()
    return JSONResponse(media.as_dict())


# ------------------------------------------------------------------
# Health
# ------------------------------------------------------------------

@app.get("/health")
async def health():
    return JSONResponse({
        "server": "ok",
        "busy": session.busy,
        "mode": session.router.mode.value,
    })


# ------------------------------------------------------------------
# Run
# ------------------------------------------------------------------

def main() -> None:
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    uvicorn.run("epictech.server:app", host=SERVER_HOST, port=SERVER_PORT, reload=False)


if __name__ == "__main__":
    main()
