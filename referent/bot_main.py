# referent/bot_main.py
import asyncio
import logging
from telegram.ext import ApplicationBuilder, CommandHandler
from .extractor import extract_article
from .errors import ERROR_MESSAGES, ErrorCode, ExtractionError
from .sender import format_article, send_article
from . import config

logging.basicConfig(
    level=logging.DEBUG if config.DEBUG_MODE else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s:%(lineno)d - %(message)s",
)
logger = logging.getLogger("referent")


async def _extract_or_reply(update, context):
    """Run the extraction off the event loop; reply with the error on failure."""
    if not context.args:
        await update.message.reply_text(ERROR_MESSAGES[ErrorCode.URL_REQUIRED])
        return None, None

    url = context.args[0]
    await update.message.reply_text("Загружаю статью...")
    try:
        article = await asyncio.to_thread(extract_article, url)
    except ExtractionError as e:
        logger.warning("Extraction failed for %s: %s (%s)", url, e.code.value, e.details)
        await update.message.reply_text(e.message)
        return None, None
    return url, article


# --- command handlers ---
async def cmd_status(update, context):
    await update.message.reply_text(
        f"Status:\nFetch timeout: {config.FETCH_TIMEOUT}s\n"
        f"Min content length: {config.MIN_CONTENT_LENGTH}\n"
        f"Date locale: {config.DATE_LOCALE}\n"
        f"Channel: {config.CHANNEL_ID or '-'}"
    )


async def cmd_parse(update, context):
    url, article = await _extract_or_reply(update, context)
    if article is None:
        return
    for text in format_article(article, url):
        await update.message.reply_text(text)


async def cmd_post(update, context):
    url, article = await _extract_or_reply(update, context)
    if article is None:
        return
    ok = await asyncio.to_thread(send_article, article, url)
    await update.message.reply_text("Опубликовано в канал." if ok else "Не удалось опубликовать статью.")


async def on_error(update, context):
    logger.error("Unhandled error while processing update", exc_info=context.error)
    if update is not None and getattr(update, "message", None):
        await update.message.reply_text(ERROR_MESSAGES[ErrorCode.UNKNOWN_ERROR])


def main():
    app = ApplicationBuilder().token(config.BOT_TOKEN).concurrent_updates(True).build()

    app.add_handler(CommandHandler("status", cmd_status))
    app.add_handler(CommandHandler("parse", cmd_parse))
    app.add_handler(CommandHandler("post", cmd_post))
    app.add_error_handler(on_error)

    logger.info("Bot started")
    # start polling (this call is blocking)
    app.run_polling()


if __name__ == "__main__":
    main()
