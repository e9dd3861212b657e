"""
telegram_bot.py — Logo Remixer Telegram Bot

Upload a logo → answer a few questions → receive the remixed logo.

Conversation flow:
  /start
    → LOGO        (photo or image file)
    → BRAND_NAME  (optional, "skip" to keep the existing text)
    → INDUSTRY    (optional)
    → CHANGES     (optional)
    → PRESERVE    (inline keyboard: toggle the five details, then Done)
    → CONFIRM     (inline keyboard: Generate / Start over / Cancel)
    → one Gemini call → PNG sent back as a file (keeps transparency)

Commands:
  /start  — start a new remix
  /skip   — leave the current optional field blank
  /cancel — cancel the current conversation
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.constants import ChatAction
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    ConversationHandler,
    MessageHandler,
    filters,
)

from remixer.config import Settings, create_client
from remixer.errors import RemixerError
from remixer.generator import remix_logo
from remixer.image_io import guess_mime_type
from remixer.models import ImagePayload

from .session import RemixSession, clean_optional

logger = logging.getLogger(__name__)

# ── Conversation states ───────────────────────────────────────────────────────

(
    LOGO,
    BRAND_NAME,
    INDUSTRY,
    CHANGES,
    PRESERVE,
    CONFIRM,
) = range(6)

# ── Context keys ──────────────────────────────────────────────────────────────

SESSION_KEY = "remix_session"
SETTINGS_KEY = "settings"
CLIENT_KEY = "gemini_client"

# ── Keyboards ─────────────────────────────────────────────────────────────────

CONFIRM_KEYBOARD = InlineKeyboardMarkup([
    [InlineKeyboardButton("✅ Generate logo", callback_data="confirm_go")],
    [InlineKeyboardButton("🔄 Start over", callback_data="confirm_restart")],
    [InlineKeyboardButton("❌ Cancel", callback_data="confirm_cancel")],
])


def preserve_keyboard(session: RemixSession) -> InlineKeyboardMarkup:
    rows = [
        [InlineKeyboardButton(f"{'✅' if kept else '⬜'} {label}", callback_data=f"keep_{key}")]
        for key, label in session.preserve_options()
    ]
    rows.append([InlineKeyboardButton("➡️ Done", callback_data="keep_done")])
    return InlineKeyboardMarkup(rows)


# ── Session helpers ───────────────────────────────────────────────────────────

def get_session(context: ContextTypes.DEFAULT_TYPE) -> RemixSession:
    session = context.user_data.get(SESSION_KEY)
    if session is None:
        session = RemixSession()
        context.user_data[SESSION_KEY] = session
    return session


def reset_session(context: ContextTypes.DEFAULT_TYPE) -> RemixSession:
    session = RemixSession()
    context.user_data[SESSION_KEY] = session
    return session


async def _download_logo(update: Update, context: ContextTypes.DEFAULT_TYPE) -> Optional[ImagePayload]:
    """Fetch the photo or image document from the current message."""
    message = update.message
    if message.photo:
        file = await context.bot.get_file(message.photo[-1].file_id)
        mime = "image/jpeg"
    elif message.document:
        doc = message.document
        mime = doc.mime_type or guess_mime_type(Path(doc.file_name or "")) or ""
        if not mime.startswith("image/"):
            return None
        file = await context.bot.get_file(doc.file_id)
    else:
        return None

    data = bytes(await file.download_as_bytearray())
    return ImagePayload(data=data, mime_type=mime)


# ── /start ────────────────────────────────────────────────────────────────────

async def cmd_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    settings: Settings = context.bot_data[SETTINGS_KEY]
    if not settings.chat_allowed(update.effective_chat.id):
        logger.info("Rejected chat %s (not whitelisted)", update.effective_chat.id)
        await update.message.reply_text("⛔ This bot is private.")
        return ConversationHandler.END

    reset_session(context)
    await update.message.reply_text(
        "👋 Welcome to Logo Remixer!\n\n"
        "Send me the logo you want to adapt (as a photo, or as a file to keep transparency)."
    )
    return LOGO


# ── /cancel ───────────────────────────────────────────────────────────────────

async def cmd_cancel(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    context.user_data.pop(SESSION_KEY, None)
    await update.message.reply_text("👋 Cancelled. Send /start to remix another logo.")
    return ConversationHandler.END


# ── Step 1: Logo ──────────────────────────────────────────────────────────────

async def step_logo(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    try:
        logo = await _download_logo(update, context)
    except RemixerError as exc:
        await update.message.reply_text(f"⚠️ {exc}")
        return LOGO
    if logo is None:
        await update.message.reply_text("⚠️ Please select a valid image file.")
        return LOGO

    get_session(context).logo = logo
    await update.message.reply_text(
        "👍 Got it.\n\n*New brand name?* (or /skip to keep the existing text)",
        parse_mode="Markdown",
    )
    return BRAND_NAME


async def step_logo_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    await update.message.reply_text("Please upload a logo to get started.")
    return LOGO


# ── Step 2–4: optional text fields ────────────────────────────────────────────

async def step_brand_name(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    get_session(context).brand_name = clean_optional(update.message.text)
    await update.message.reply_text(
        "*Industry / business sector?* e.g. Technology, Restaurant (or /skip)",
        parse_mode="Markdown",
    )
    return INDUSTRY


async def step_industry(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    get_session(context).industry = clean_optional(update.message.text)
    await update.message.reply_text(
        "*Any specific changes?* e.g. \"Make it futuristic and add a circuit pattern\" (or /skip)",
        parse_mode="Markdown",
    )
    return CHANGES


async def step_changes(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    session = get_session(context)
    session.change_instructions = clean_optional(update.message.text)
    await update.message.reply_text(
        "*Which details should I keep from the original?* Tap to toggle.",
        parse_mode="Markdown",
        reply_markup=preserve_keyboard(session),
    )
    return PRESERVE


# ── Step 5: preserved details ─────────────────────────────────────────────────

async def step_preserve_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    query = update.callback_query
    await query.answer()
    session = get_session(context)
    choice = query.data.removeprefix("keep_")

    if choice == "done":
        await query.edit_message_text(
            "Here's your remix:\n\n" + session.summary_text(),
            reply_markup=CONFIRM_KEYBOARD,
        )
        return CONFIRM

    session.toggle(choice)
    await query.edit_message_reply_markup(reply_markup=preserve_keyboard(session))
    return PRESERVE


# ── Step 6: confirm + generate ────────────────────────────────────────────────

async def step_confirm_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    query = update.callback_query
    await query.answer()
    action = query.data.removeprefix("confirm_")

    if action == "cancel":
        context.user_data.pop(SESSION_KEY, None)
        await query.edit_message_text("👋 Cancelled. Send /start to remix another logo.")
        return ConversationHandler.END

    if action == "restart":
        reset_session(context)
        await query.edit_message_text("🔄 Starting over. Send me the logo you want to adapt.")
        return LOGO

    session = get_session(context)
    try:
        request = session.to_request()
    except RemixerError as exc:
        await query.edit_message_text(f"⚠️ {exc}")
        return LOGO

    await query.edit_message_text("⏳ Generating your new logo...")
    await context.bot.send_chat_action(chat_id=update.effective_chat.id, action=ChatAction.UPLOAD_DOCUMENT)

    settings: Settings = context.bot_data[SETTINGS_KEY]
    result = await remix_logo(context.bot_data[CLIENT_KEY], request, model=settings.model)

    if not result.ok:
        logger.warning("Remix failed for chat %s: %s", update.effective_chat.id, result.error_message)
        await context.bot.send_message(
            chat_id=update.effective_chat.id,
            text=f"⚠️ {result.error_message}\n\nTap /start to try again.",
        )
        return ConversationHandler.END

    await context.bot.send_document(
        chat_id=update.effective_chat.id,
        document=result.image_bytes,
        filename=_result_filename(session),
        caption="✨ Here's your remixed logo. Send /start for another one.",
    )
    context.user_data.pop(SESSION_KEY, None)
    return ConversationHandler.END


def _result_filename(session: RemixSession) -> str:
    stem = "".join(c if c.isalnum() else "_" for c in session.brand_name).strip("_")
    return f"{stem or 'logo'}_remix.png"


# ── Error handler ─────────────────────────────────────────────────────────────

async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.error("Exception while handling update:", exc_info=context.error)
    if isinstance(update, Update) and update.effective_message:
        await update.effective_message.reply_text(
            "⚠️ Something went wrong. Send /cancel then /start to try again."
        )


# ── App builder ───────────────────────────────────────────────────────────────

def build_app(settings: Settings, client: Any = None) -> Application:
    app = Application.builder().token(settings.telegram_token).build()
    app.bot_data[SETTINGS_KEY] = settings
    app.bot_data[CLIENT_KEY] = client if client is not None else create_client(settings)

    text = filters.TEXT & ~filters.COMMAND
    conv = ConversationHandler(
        entry_points=[CommandHandler("start", cmd_start)],
        states={
            LOGO: [
                MessageHandler(filters.PHOTO, step_logo),
                MessageHandler(filters.Document.IMAGE, step_logo),
                MessageHandler(text, step_logo_text),
            ],
            BRAND_NAME: [
                MessageHandler(text, step_brand_name),
                CommandHandler("skip", step_brand_name),
            ],
            INDUSTRY: [
                MessageHandler(text, step_industry),
                CommandHandler("skip", step_industry),
            ],
            CHANGES: [
                MessageHandler(text, step_changes),
                CommandHandler("skip", step_changes),
            ],
            PRESERVE: [CallbackQueryHandler(step_preserve_callback, pattern="^keep_")],
            CONFIRM: [CallbackQueryHandler(step_confirm_callback, pattern="^confirm_")],
        },
        fallbacks=[
            CommandHandler("cancel", cmd_cancel),
            CommandHandler("start", cmd_start),
        ],
        allow_reentry=True,
        conversation_timeout=1800,  # 30 min timeout
    )

    app.add_handler(conv)
    app.add_error_handler(error_handler)
    return app
