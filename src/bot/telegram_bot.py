"""
PetCare Dashboard — Telegram Bot.

Telegram is the dashboard's only user interface. Each chat owns one
in-memory DashboardSession: /start opens (or resets) it, /stop closes it.
Every command below is a thin wrapper over a session operation.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import TYPE_CHECKING, Any, Callable, Coroutine

from pydantic import ValidationError
from telegram import InlineKeyboardButton, InlineKeyboardMarkup, ReplyKeyboardMarkup, ReplyKeyboardRemove, Update
from telegram.ext import (
    Application,
    ApplicationBuilder,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    ConversationHandler,
    MessageHandler,
    filters,
)

from src.config import settings
from src.core.history import bar_heights
from src.core.profile_updates import SetAge, SetDiet, SetName, SetWeight
from src.core.session import DashboardSession
from src.data.models import Diet, EntryType, HistoryMode
from src.data.stores import InvalidEntryError, normalize_time

if TYPE_CHECKING:
    from src.core.recommendation import Recommendation
    from src.data.models import AlertItem, HistorySeries, PetProfile, ScheduleEntry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Session access
# ---------------------------------------------------------------------------


def _get_session(context: ContextTypes.DEFAULT_TYPE) -> DashboardSession | None:
    session = context.chat_data.get("session")
    if session is None or not session.is_open:
        return None
    return session


def session_required(
    func: Callable[..., Coroutine[Any, Any, Any]],
) -> Callable[..., Coroutine[Any, Any, Any]]:
    """Decorator that answers with a /start hint when the chat has no open session."""

    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE) -> Any:
        if _get_session(context) is None:
            await update.message.reply_text(
                "No dashboard is open in this chat. Send /start to open one."
            )
            return ConversationHandler.END
        return await func(update, context)

    return wrapper


def reply_on_error(
    func: Callable[..., Coroutine[Any, Any, Any]],
) -> Callable[..., Coroutine[Any, Any, Any]]:
    """Decorator that logs an unexpected handler error and replies with a generic message.

    Ends any running conversation so the chat is never left mid-flow.
    """

    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE) -> Any:
        try:
            return await func(update, context)
        except Exception as exc:
            logger.error("%s error: %s", func.__name__, exc)
            await update.message.reply_text("Something went wrong. Please try again.")
            return ConversationHandler.END

    return wrapper


def _close_chat_session(context: ContextTypes.DEFAULT_TYPE, chat_id: int) -> bool:
    """Close and forget this chat's session. Returns True if one was open."""
    session: DashboardSession | None = context.chat_data.pop("session", None)
    context.bot_data.setdefault("sessions", {}).pop(chat_id, None)
    if session is None or not session.is_open:
        return False
    session.close()
    return True


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def _format_entry(entry: ScheduleEntry) -> str:
    return f"{entry.time}  [{entry.type.label}] {entry.title} — {entry.detail}"


def _format_schedule(entries: list[ScheduleEntry]) -> str:
    if not entries:
        return "Aún no has programado horarios. Agrega el primero con /addentry."
    lines = ["Horario del día:\n"]
    lines.extend(f"• {_format_entry(e)}" for e in entries)
    return "\n".join(lines)


def _format_alerts(alerts: list[AlertItem]) -> str:
    lines = ["Alertas automáticas:\n"]
    for alert in alerts:
        mark = "✅" if alert.acknowledged else "⚠️"
        lines.append(f"{mark} {alert.status}\n   {alert.message}")
    return "\n".join(lines)


def _alerts_keyboard(alerts: list[AlertItem]) -> InlineKeyboardMarkup:
    keyboard = [
        [
            InlineKeyboardButton(
                f"Atendida: {a.status}" if a.acknowledged else f"Marcar como atendida: {a.status}",
                callback_data=f"ackalert:{a.id}",
            )
        ]
        for a in alerts
    ]
    return InlineKeyboardMarkup(keyboard)


def _format_number(value: float) -> str:
    return f"{value:g}"


def _format_profile(profile: PetProfile, rec: Recommendation) -> str:
    return (
        f"Perfil de {profile.name}\n"
        f"Peso: {_format_number(profile.weight)} kg\n"
        f"Edad: {_format_number(profile.age)} años\n"
        f"Dieta: {profile.diet.value}\n\n"
        f"Recomendación diaria comida: {rec.food_grams} g "
        f"repartidos en {rec.portions} porciones (~{rec.grams_per_portion} g)\n"
        f"Recomendación diaria agua: {rec.water_ml} ml distribuidos durante el día"
    )


def _format_history(series: HistorySeries) -> str:
    lines = [f"Historial de consumo ({series.unit}):\n"]
    for label, value, height in zip(series.labels, series.values, bar_heights(series)):
        lines.append(f"{label:>4} {'█' * max(1, height // 10)} {value}")
    return "\n".join(lines)


def _format_levels(session: DashboardSession) -> str:
    stats = session.stats()
    return "\n".join(f"{s.label}: {s.value}" for s in stats[:2])


def _format_dashboard(session: DashboardSession) -> str:
    lines = ["Panel del día — Rutina activa\n"]
    lines.extend(f"• {_format_entry(e)}" for e in session.day_panel())
    lines.append("\nMonitoreo en tiempo real:")
    lines.extend(f"• {s.label}: {s.value}" for s in session.stats())
    pending = session.alerts.pending_count()
    if pending:
        lines.append(f"\n⚠️ {pending} alerta(s) sin atender — /alerts")
    return "\n".join(lines)


_ENTRY_TYPE_MAP = {
    "comida": EntryType.FOOD,
    "food": EntryType.FOOD,
    "agua": EntryType.WATER,
    "water": EntryType.WATER,
}

_HISTORY_MODE_MAP = {
    "daily": HistoryMode.DAILY,
    "diario": HistoryMode.DAILY,
    "weekly": HistoryMode.WEEKLY,
    "semanal": HistoryMode.WEEKLY,
}


# ---------------------------------------------------------------------------
# Session commands
# ---------------------------------------------------------------------------


@reply_on_error
async def cmd_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start — open (or reset) this chat's dashboard session."""
    chat_id = update.effective_chat.id
    if _close_chat_session(context, chat_id):
        logger.info("Chat %d: existing session reset", chat_id)

    session = DashboardSession.open(
        context.bot_data["scheduler"],
        interval_seconds=settings.LEVEL_TICK_SECONDS,
        name=f"levels:{chat_id}",
    )
    context.chat_data["session"] = session
    context.bot_data.setdefault("sessions", {})[chat_id] = session

    await update.message.reply_text(
        "Bienvenido a *PetCare*!\n\n"
        "Alimentación inteligente para tu mascota, siempre a tiempo:\n"
        "• /dashboard — panel del día y monitoreo\n"
        "• /schedule — horarios programados, /addentry para crear uno\n"
        "• /alerts — alertas del dispensador\n"
        "• /profile — perfil y porciones recomendadas\n\n"
        "Type /help for the full command list.",
        parse_mode="Markdown",
    )


@reply_on_error
async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help — list available commands."""
    await update.message.reply_text(
        "*Available commands:*\n"
        "/start — Open (or reset) the dashboard\n"
        "/stop — Close the dashboard\n"
        "/dashboard — Day panel and live monitoring\n"
        "/levels — Food and water levels\n"
        "/schedule — List scheduled events\n"
        "/addentry — Schedule a feeding or water refill\n"
        "/deleteentry — Remove a scheduled event\n"
        "/alerts — View and acknowledge alerts\n"
        "/profile — Pet profile and daily recommendation\n"
        "/setname <name>, /setweight <kg>, /setage <years>, /setdiet\n"
        "/history [daily|weekly] — Consumption history\n"
        "/help — Show this message",
        parse_mode="Markdown",
    )


@reply_on_error
async def cmd_stop(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /stop — close the session and cancel its simulator."""
    if _close_chat_session(context, update.effective_chat.id):
        await update.message.reply_text("Dashboard closed. Send /start to open a new one.")
    else:
        await update.message.reply_text("No dashboard is open in this chat.")


@reply_on_error
@session_required
async def cmd_dashboard(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /dashboard — day panel plus monitoring stats."""
    await update.message.reply_text(_format_dashboard(_get_session(context)))


@reply_on_error
@session_required
async def cmd_levels(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /levels — current simulated reservoir levels."""
    await update.message.reply_text(_format_levels(_get_session(context)))


@reply_on_error
@session_required
async def cmd_history(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /history [daily|weekly] — consumption chart for the chosen period."""
    session = _get_session(context)
    if context.args:
        mode = _HISTORY_MODE_MAP.get(context.args[0].strip().lower())
        if mode is None:
            await update.message.reply_text("Usage: /history [daily|weekly]")
            return
        series = session.select_history(mode)
    else:
        series = session.current_history()
    await update.message.reply_text(_format_history(series))


# ---------------------------------------------------------------------------
# Schedule commands
# ---------------------------------------------------------------------------

# ConversationHandler states for /addentry
(
    ENTRY_TIME,
    ENTRY_TYPE,
    ENTRY_TITLE,
    ENTRY_DETAIL,
) = range(4)

_ENTRY_KEYS = ("entry_time", "entry_type", "entry_title")


def _clear_entry_data(context: ContextTypes.DEFAULT_TYPE) -> None:
    for k in _ENTRY_KEYS:
        context.user_data.pop(k, None)


@reply_on_error
@session_required
async def cmd_schedule(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /schedule — list all entries in time order."""
    entries = _get_session(context).schedule.list_entries()
    await update.message.reply_text(_format_schedule(entries))


@reply_on_error
@session_required
async def cmd_addentry(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Entry point for /addentry — ask for the time."""
    _clear_entry_data(context)
    await update.message.reply_text(
        "Crear nuevo evento. What time? (HH:MM, 24h)\nSend /cancel to abort."
    )
    return ENTRY_TIME


@reply_on_error
async def addentry_time(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    try:
        hhmm = normalize_time(update.message.text)
    except InvalidEntryError:
        await update.message.reply_text("Please send a time like 08:00 or 19:30.")
        return ENTRY_TIME

    context.user_data["entry_time"] = hhmm
    await update.message.reply_text(
        "Food or water?",
        reply_markup=ReplyKeyboardMarkup(
            [[EntryType.FOOD.label, EntryType.WATER.label]],
            one_time_keyboard=True,
            resize_keyboard=True,
        ),
    )
    return ENTRY_TYPE


@reply_on_error
async def addentry_type(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    entry_type = _ENTRY_TYPE_MAP.get(update.message.text.strip().lower())
    if entry_type is None:
        await update.message.reply_text("Please answer Comida or Agua.")
        return ENTRY_TYPE

    context.user_data["entry_type"] = entry_type
    await update.message.reply_text(
        "Nombre del evento? (e.g. Almuerzo balanceado)",
        reply_markup=ReplyKeyboardRemove(),
    )
    return ENTRY_TITLE


@reply_on_error
async def addentry_title(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    title = update.message.text.strip()
    if not title:
        await update.message.reply_text("The name can't be empty. Try again.")
        return ENTRY_TITLE

    context.user_data["entry_title"] = title
    await update.message.reply_text(
        "Detalle / porción? (e.g. 60 g de croquetas hipoalergénicas + 180 ml de agua)"
    )
    return ENTRY_DETAIL


@reply_on_error
async def addentry_detail(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    session = _get_session(context)
    if session is None:
        _clear_entry_data(context)
        await update.message.reply_text("The dashboard was closed. Send /start to open a new one.")
        return ConversationHandler.END

    try:
        session.schedule.add_entry(
            context.user_data["entry_time"],
            context.user_data["entry_title"],
            update.message.text,
            context.user_data["entry_type"],
        )
    except InvalidEntryError as exc:
        logger.warning("/addentry rejected: %s", exc)
        await update.message.reply_text("The detail can't be empty. Try again.")
        return ENTRY_DETAIL

    await update.message.reply_text(
        "✅ Horario guardado.\n\n" + _format_schedule(session.schedule.list_entries())
    )
    _clear_entry_data(context)
    return ConversationHandler.END


@reply_on_error
async def addentry_cancel(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    _clear_entry_data(context)
    await update.message.reply_text("Cancelled.", reply_markup=ReplyKeyboardRemove())
    return ConversationHandler.END


@reply_on_error
@session_required
async def cmd_deleteentry(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /deleteentry — show entries as buttons to pick from."""
    entries = _get_session(context).schedule.list_entries()
    if not entries:
        await update.message.reply_text("No scheduled events to delete.")
        return

    keyboard = [
        [InlineKeyboardButton(f"{e.time} {e.title}", callback_data=f"delentry:{e.id}")]
        for e in entries
    ]
    await update.message.reply_text(
        "Which event do you want to delete?",
        reply_markup=InlineKeyboardMarkup(keyboard),
    )


async def _handle_deleteentry_callback(
    update: Update, context: ContextTypes.DEFAULT_TYPE
) -> None:
    """Handle the inline button tap to delete a schedule entry."""
    query = update.callback_query
    await query.answer()

    session = _get_session(context)
    if session is None:
        await query.edit_message_text("No dashboard is open. Send /start to open one.")
        return

    try:
        entry_id = query.data.split(":", 1)[1]
        entry = session.schedule.get_entry(entry_id)
        if entry is None or not session.schedule.remove_entry(entry_id):
            await query.edit_message_text("Event not found or already deleted.")
            return

        await query.edit_message_text(f"✅ Event deleted: {entry.time} {entry.title}")

    except Exception as exc:
        logger.error("deleteentry callback error: %s", exc)
        await query.edit_message_text("Something went wrong. Please try again.")


# ---------------------------------------------------------------------------
# Alert commands
# ---------------------------------------------------------------------------


@reply_on_error
@session_required
async def cmd_alerts(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /alerts — list alerts with acknowledge toggles."""
    alerts = _get_session(context).alerts.list_alerts()
    await update.message.reply_text(
        _format_alerts(alerts), reply_markup=_alerts_keyboard(alerts),
    )


async def _handle_ackalert_callback(
    update: Update, context: ContextTypes.DEFAULT_TYPE
) -> None:
    """Handle the inline button tap to toggle an alert's acknowledgment."""
    query = update.callback_query
    await query.answer()

    session = _get_session(context)
    if session is None:
        await query.edit_message_text("No dashboard is open. Send /start to open one.")
        return

    try:
        alert_id = query.data.split(":", 1)[1]
        if session.alerts.toggle_acknowledged(alert_id) is None:
            await query.edit_message_text("Alert not found.")
            return

        alerts = session.alerts.list_alerts()
        await query.edit_message_text(
            _format_alerts(alerts), reply_markup=_alerts_keyboard(alerts),
        )

    except Exception as exc:
        logger.error("ackalert callback error: %s", exc)
        await query.edit_message_text("Something went wrong. Please try again.")


# ---------------------------------------------------------------------------
# Profile commands
# ---------------------------------------------------------------------------


@reply_on_error
@session_required
async def cmd_profile(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /profile — show the profile and its daily recommendation."""
    session = _get_session(context)
    await update.message.reply_text(
        _format_profile(session.profile.get_profile(), session.recommendation())
    )


async def _apply_profile_update(
    update: Update, context: ContextTypes.DEFAULT_TYPE, profile_update: Any
) -> None:
    session = _get_session(context)
    session.profile.apply(profile_update)
    await update.message.reply_text(
        _format_profile(session.profile.get_profile(), session.recommendation())
    )


@reply_on_error
@session_required
async def cmd_setname(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /setname <name>."""
    name = " ".join(context.args or []).strip()
    if not name:
        await update.message.reply_text("Usage: /setname <name>")
        return
    await _apply_profile_update(update, context, SetName(name=name))


@reply_on_error
@session_required
async def cmd_setweight(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /setweight <kg>."""
    if not context.args:
        await update.message.reply_text("Usage: /setweight <kg>, e.g. /setweight 6.5")
        return
    try:
        profile_update = SetWeight(weight=context.args[0].replace(",", "."))
    except ValidationError:
        await update.message.reply_text("Invalid weight. Usage: /setweight <kg>, e.g. /setweight 6.5")
        return
    await _apply_profile_update(update, context, profile_update)


@reply_on_error
@session_required
async def cmd_setage(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /setage <years>."""
    if not context.args:
        await update.message.reply_text("Usage: /setage <years>, e.g. /setage 3")
        return
    try:
        profile_update = SetAge(age=context.args[0].replace(",", "."))
    except ValidationError:
        await update.message.reply_text("Invalid age. Usage: /setage <years>, e.g. /setage 3")
        return
    await _apply_profile_update(update, context, profile_update)


@reply_on_error
@session_required
async def cmd_setdiet(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /setdiet — show diet plans as buttons."""
    keyboard = [
        [InlineKeyboardButton(d.value, callback_data=f"diet:{d.name}")]
        for d in Diet
    ]
    await update.message.reply_text(
        "Tipo de dieta?", reply_markup=InlineKeyboardMarkup(keyboard),
    )


async def _handle_diet_callback(
    update: Update, context: ContextTypes.DEFAULT_TYPE
) -> None:
    """Handle the inline button tap to change the diet plan."""
    query = update.callback_query
    await query.answer()

    session = _get_session(context)
    if session is None:
        await query.edit_message_text("No dashboard is open. Send /start to open one.")
        return

    try:
        diet = Diet[query.data.split(":", 1)[1]]
    except KeyError:
        logger.warning("Unknown diet in callback: %s", query.data)
        await query.edit_message_text("Unknown diet plan.")
        return

    try:
        profile = session.profile.apply(SetDiet(diet=diet))
        await query.edit_message_text(_format_profile(profile, session.recommendation()))
    except Exception as exc:
        logger.error("diet callback error: %s", exc)
        await query.edit_message_text("Something went wrong. Please try again.")


# ---------------------------------------------------------------------------
# App builder
# ---------------------------------------------------------------------------


async def _close_all_sessions(app: Application) -> None:
    """Stop every open session's simulator when the application stops."""
    sessions: dict = app.bot_data.get("sessions", {})
    for chat_id, session in list(sessions.items()):
        try:
            session.close()
        except Exception as exc:
            logger.error("Failed to close session for chat %d: %s", chat_id, exc)
    sessions.clear()
    logger.info("All dashboard sessions closed")


def build_app(scheduler: Any | None = None) -> Application:
    """Build and configure the Telegram Application with all handlers.

    Args:
        scheduler: SchedulerPort implementation for the level simulators.
                   Defaults to JobQueueScheduler over the app's job queue.
    """
    app = (
        ApplicationBuilder()
        .token(settings.TELEGRAM_BOT_TOKEN)
        .post_stop(_close_all_sessions)
        .build()
    )

    if scheduler is None:
        from src.adapters.job_queue_scheduler import JobQueueScheduler
        scheduler = JobQueueScheduler(app.job_queue)

    # Store ports in bot_data for handler access
    app.bot_data["scheduler"] = scheduler
    app.bot_data["sessions"] = {}

    # Commands
    app.add_handler(CommandHandler("start", cmd_start))
    app.add_handler(CommandHandler("help", cmd_help))
    app.add_handler(CommandHandler("stop", cmd_stop))
    app.add_handler(CommandHandler("dashboard", cmd_dashboard))
    app.add_handler(CommandHandler("levels", cmd_levels))
    app.add_handler(CommandHandler("history", cmd_history))
    app.add_handler(CommandHandler("schedule", cmd_schedule))
    app.add_handler(CommandHandler("deleteentry", cmd_deleteentry))
    app.add_handler(CommandHandler("alerts", cmd_alerts))
    app.add_handler(CommandHandler("profile", cmd_profile))
    app.add_handler(CommandHandler("setname", cmd_setname))
    app.add_handler(CommandHandler("setweight", cmd_setweight))
    app.add_handler(CommandHandler("setage", cmd_setage))
    app.add_handler(CommandHandler("setdiet", cmd_setdiet))
    app.add_handler(CallbackQueryHandler(_handle_deleteentry_callback, pattern=r"^delentry:"))
    app.add_handler(CallbackQueryHandler(_handle_ackalert_callback, pattern=r"^ackalert:"))
    app.add_handler(CallbackQueryHandler(_handle_diet_callback, pattern=r"^diet:"))

    # /addentry conversation handler
    _text = filters.TEXT & ~filters.COMMAND
    addentry_conv = ConversationHandler(
        entry_points=[CommandHandler("addentry", cmd_addentry)],
        states={
            ENTRY_TIME: [MessageHandler(_text, addentry_time)],
            ENTRY_TYPE: [MessageHandler(_text, addentry_type)],
            ENTRY_TITLE: [MessageHandler(_text, addentry_title)],
            ENTRY_DETAIL: [MessageHandler(_text, addentry_detail)],
        },
        fallbacks=[CommandHandler("cancel", addentry_cancel)],
    )
    app.add_handler(addentry_conv)

    logger.info("Telegram bot application built with %d handlers", len(app.handlers[0]))
    return app


def main() -> None:
    """Entry point: build the app and start polling."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    # basicConfig is a no-op if main.py already configured logging
    logging.getLogger().setLevel(settings.LOG_LEVEL)
    logger.info("Starting PetCare Dashboard bot...")
    app = build_app()
    app.run_polling()


if __name__ == "__main__":
    main()
