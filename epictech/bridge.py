"""
Alternate-bot bridge for Epic Tech Chat.

Forwards raw user text to an external messaging bot and returns as soon
as the transport accepts it.  The remote bot's eventual reply arrives
out-of-band (in the messaging app) and is never read back here.

Supports:
  - Telegram (Bot API sendMessage)  — default
  - Discord  (webhook)
  - WhatsApp (Twilio)

Usage:
    from epictech.bridge import make_bridge

    bridge = make_bridge()               # transport from BRIDGE_TRANSPORT
    bridge.send("hello", target_channel=None)

Every failure is logged and raised as BridgeError.
"""

import logging

import requests

from epictech.config import (
    BRIDGE_TIMEOUT,
    BRIDGE_TRANSPORT,
    DISCORD_WEBHOOK_URL,
    TELEGRAM_BOT_TOKEN,
    TELEGRAM_BOT_USERNAME,
    TELEGRAM_CHAT_ID,
    TWILIO_ACCOUNT_SID,
    TWILIO_AUTH_TOKEN,
    TWILIO_WHATSAPP_FROM,
    TWILIO_WHATSAPP_TO,
)

log = logging.getLogger("epictech.bridge")

TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"


class BridgeError(Exception):
    """The bridge transport refused or failed to accept a message."""


class Bridge:
    """Base transport.  Subclasses implement `_deliver`."""

    name = "bridge"

    def configured(self) -> bool:
        return False

    def acknowledgment(self) -> str:
        return f"Message sent via {self.name}. Check it for the response!"

    def send(self, text: str, target_channel: str | None = None) -> bool:
        """Deliver *text*; returns True once acknowledged, else raises."""
        if not self.configured():
            log.warning("%s bridge not configured — refusing send.", self.name)
            raise BridgeError(f"{self.name} bridge not configured")
        self._deliver(text, target_channel)
        return True

    def _deliver(self, text: str, target_channel: str | None) -> None:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Telegram
# ---------------------------------------------------------------------------

class TelegramBridge(Bridge):
    name = "Telegram"

    def __init__(
        self,
        token: str = TELEGRAM_BOT_TOKEN,
        default_chat_id: str = TELEGRAM_CHAT_ID,
        bot_username: str = TELEGRAM_BOT_USERNAME,
    ) -> None:
        self._token = token
        self._default_chat_id = default_chat_id
        self._bot_username = bot_username

    def configured(self) -> bool:
        return bool(self._token)

    def acknowledgment(self) -> str:
        return f"Message sent to @{self._bot_username}. Check Telegram for response!"

    def _deliver(self, text: str, target_channel: str | None) -> None:
        chat_id = target_channel or self._default_chat_id
        try:
            r = requests.post(
                TELEGRAM_API_URL.format(token=self._token),
                json={"chat_id": chat_id, "text": text, "parse_mode": "Markdown"},
                timeout=BRIDGE_TIMEOUT,
            )
        except requests.RequestException as exc:
            log.error("Telegram API error: %s", exc)
            raise BridgeError("Failed to communicate with Telegram bot") from exc
        if r.status_code != 200:
            log.error("Telegram returned %s: %s", r.status_code, r.text[:200])
            raise BridgeError(f"Telegram HTTP {r.status_code}")


# ---------------------------------------------------------------------------
# Discord
# ---------------------------------------------------------------------------

class DiscordBridge(Bridge):
    name = "Discord"

    def __init__(self, webhook_url: str = DISCORD_WEBHOOK_URL, username: str = "Epic Tech Chat") -> None:
        self._webhook_url = webhook_url
        self._username = username

    def configured(self) -> bool:
        return bool(self._webhook_url)

    def _deliver(self, text: str, target_channel: str | None) -> None:
        # A webhook is bound to one channel; target_channel is ignored.
        try:
            r = requests.post(
                self._webhook_url,
                json={"content": text, "username": self._username},
                timeout=BRIDGE_TIMEOUT,
            )
        except requests.RequestException as exc:
            log.error("Discord webhook error: %s", exc)
            raise BridgeError("Discord webhook unreachable") from exc
        if r.status_code not in (200, 204):
            log.error("Discord returned %s: %s", r.status_code, r.text[:200])
            raise BridgeError(f"Discord HTTP {r.status_code}")


# ---------------------------------------------------------------------------
# WhatsApp (Twilio)
# ---------------------------------------------------------------------------

class WhatsAppBridge(Bridge):
    name = "WhatsApp"

    def configured(self) -> bool:
        return all([TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN,
                    TWILIO_WHATSAPP_FROM, TWILIO_WHATSAPP_TO])

    def _deliver(self, text: str, target_channel: str | None) -> None:
        from twilio.rest import Client

        to = target_channel or TWILIO_WHATSAPP_TO
        try:
            client = Client(TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN)
            client.messages.create(
                body=text,
                from_=f"whatsapp:{TWILIO_WHATSAPP_FROM}",
                to=f"whatsapp:{to}",
            )
        except Exception as exc:
            log.error("WhatsApp (Twilio) error: %s", exc)
            raise BridgeError("WhatsApp delivery failed") from exc


_TRANSPORTS = {
    "telegram": TelegramBridge,
    "discord": DiscordBridge,
    "whatsapp": WhatsAppBridge,
}


def make_bridge(transport: str = BRIDGE_TRANSPORT) -> Bridge:
    """Build the bridge for *transport* ("telegram" | "discord" | "whatsapp")."""
    try:
        return _TRANSPORTS[transport.lower().strip()]()
    except KeyError:
        raise ValueError(f"Unknown bridge transport: {transport!r}") from None
