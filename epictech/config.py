"""
Configuration constants for Epic Tech Chat.
All tunables in one place.  Secrets and paths are loaded from ../.env
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root (one level above this package)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)

# --- Paths ---
BASE_DIR = Path(__file__).parent
PERSONA_FILE = BASE_DIR / "persona.txt"
STATE_DB_FILE = Path(os.getenv("EPIC_STATE_DB", str(BASE_DIR.parent / "epictech.db")))

# --- AI backend (Groq, OpenAI-compatible) ---
GROQ_API_KEY = os.getenv("GROQ_API_KEY", "")
GROQ_BASE_URL = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
CHAT_ENDPOINT = f"{GROQ_BASE_URL}/chat/completions"

# --- Model parameters ---
MODEL_NAME = os.getenv("MODEL_NAME", "mixtral-8x7b-32768")
TEMPERATURE = float(os.getenv("TEMPERATURE", "0.7"))
MAX_TOKENS = int(os.getenv("MAX_TOKENS", "1024"))
AI_TIMEOUT = float(os.getenv("AI_TIMEOUT", "30"))

# --- Conversation ---
CONTEXT_WINDOW = 10            # max prior turns sent to the AI backend
SUGGESTION_LIMIT = 5           # max autocomplete entries per keystroke
COMMAND_MARKER = "/"
ASSISTANT_NAME = "Epic Tech AI"

WELCOME_MESSAGE = "Yo! I’m Epic Tech AI. Type, talk, /meme, drop images—let’s GO! 🔥"
FALLBACK_REPLY = "Network error. Try again?"
EMPTY_COMPLETION_REPLY = "Oops, server didn't return text!"
IMAGE_TOKEN = "[Image uploaded]"
IMAGE_MARKER = "[Image uploaded. Vision analysis coming soon!]"

# --- Engagement ---
STREAK_COOLDOWN = 60 * 60      # seconds between qualifying turns
STREAK_STORAGE_KEY = "epic-streak"
QUEST_STORAGE_KEY = "epic-daily-quests"
QUESTS_PER_DAY = 3

# --- Alternate bot bridge ---
# One of: telegram | discord | whatsapp
BRIDGE_TRANSPORT = os.getenv("BRIDGE_TRANSPORT", "telegram").lower()
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
TELEGRAM_CHAT_ID = os.getenv("TELEGRAM_CHAT_ID", "")
TELEGRAM_BOT_USERNAME = os.getenv("TELEGRAM_BOT_USERNAME", "EPICTHE_BOT")
DISCORD_WEBHOOK_URL = os.getenv("DISCORD_WEBHOOK_URL", "")
BRIDGE_TIMEOUT = 10

# --- Twilio / WhatsApp ---
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID", "")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN", "")
TWILIO_WHATSAPP_FROM = os.getenv("TWILIO_WHATSAPP_FROM", "")
TWILIO_WHATSAPP_TO = os.getenv("TWILIO_WHATSAPP_TO", "")

# --- Server ---
SERVER_HOST = os.getenv("EPIC_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("EPIC_PORT", "5000"))
