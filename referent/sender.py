# referent/sender.py
import logging
import requests
from .config import BOT_TOKEN, CHANNEL_ID

logger = logging.getLogger(__name__)

API_BASE = f"https://api.telegram.org/bot{BOT_TOKEN}"
MAX_MESSAGE_LENGTH = 4096


def split_message(text: str, limit: int = MAX_MESSAGE_LENGTH):
    """Split text into Telegram-sized pieces, preferring paragraph boundaries."""
    parts = []
    current = ""
    for para in text.split("\n\n"):
        while len(para) > limit:
            if current:
                parts.append(current)
                current = ""
            parts.append(para[:limit])
            para = para[limit:]
        candidate = f"{current}\n\n{para}" if current else para
        if len(candidate) > limit:
            parts.append(current)
            current = para
        else:
            current = candidate
    if current:
        parts.append(current)
    return parts


def format_article(article, url=None):
    header = [article.title or "(без заголовка)"]
    if article.date:
        header.append(article.date)
    if url:
        header.append(url)
    return split_message(("\n".join(header) + "\n\n" + (article.content or "")).strip())


def send_article(article, url=None) -> bool:
    """Publish an extracted article to CHANNEL_ID, one message per chunk."""
    if not BOT_TOKEN or not CHANNEL_ID:
        logger.warning("Telegram credentials missing.")
        return False

    chunks = format_article(article, url)
    for i, text in enumerate(chunks, 1):
        payload = {
            "chat_id": CHANNEL_ID,
            "text": text,
            "disable_web_page_preview": i > 1,
        }
        try:
            r = requests.post(f"{API_BASE}/sendMessage", data=payload, timeout=15)
            r.raise_for_status()
        except requests.exceptions.RequestException:
            logger.exception("Failed to send message %d/%d via Telegram HTTP API", i, len(chunks))
            return False
    logger.info("Sent to %s: %s (%d messages)", CHANNEL_ID, (article.title or '')[:60], len(chunks))
    return True
