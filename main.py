import asyncio
import logging
import sys
from aiohttp import web
from aiogram import Bot, Dispatcher, types
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application

from core.config import settings
from core.texts import APP_VERSION, ERR_UNEXPECTED
from database import create_table
from database.connection import close_postgres_pool
from services.ai_client import AIClient
from services.exercise_service import ExerciseService
from utils.scheduler import BroadcastScheduler
from utils.update_tracking import UpdateTrackingMiddleware
from utils.fsm_utils import StateCleanupMiddleware

from handlers.common import router as common_router
from handlers.quiz import router as quiz_router
from handlers.settings import router as settings_router
from handlers.stats import router as stats_router
from handlers.answers import router as answers_router


def build_dispatcher(exercise_service: ExerciseService) -> Dispatcher:
    dp = Dispatcher(storage=MemoryStorage(), exercise_service=exercise_service)

    # Middlewares
    dp.update.outer_middleware(UpdateTrackingMiddleware())
    dp.message.outer_middleware(StateCleanupMiddleware())

    # Settings first: its theme form state must win over the reply handler.
    routers = [
        common_router, quiz_router, settings_router,
        stats_router, answers_router,
    ]
    for router in routers:
        dp.include_router(router)

    # Global Error Handler
    @dp.error()
    async def global_error_handler(event: types.ErrorEvent):
        logging.error(f"Global error: {event.exception}")
        if event.update.message:
            await event.update.message.answer(ERR_UNEXPECTED)
        elif event.update.callback_query:
            await event.update.callback_query.answer(ERR_UNEXPECTED, show_alert=True)
        return True

    return dp


async def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout
    )

    if not settings.bot_token:
        logging.error("BOT_TOKEN is not set!")
        return
    if not settings.ai_api_key:
        logging.error("AI_API_KEY is not set!")
        return

    # Initialize Database
    create_table()
    logging.info("Quiz bot %s, DB path: %s", APP_VERSION, settings.db_path)

    bot = Bot(token=settings.bot_token)
    ai_client = AIClient()
    exercise_service = ExerciseService(ai_client)
    dp = build_dispatcher(exercise_service)

    user_commands = [
        types.BotCommand(command="start", description="ボットの使い方"),
        types.BotCommand(command="quiz", description="新しい英作文問題"),
        types.BotCommand(command="theme", description="問題のテーマを設定"),
        types.BotCommand(command="settings", description="設定の確認・変更"),
        types.BotCommand(command="stats", description="学習統計を表示"),
    ]
    await bot.set_my_commands(user_commands, scope=types.BotCommandScopeDefault())

    scheduler = None
    if settings.schedule_enabled and settings.broadcast_chat_id:
        scheduler = BroadcastScheduler(
            bot,
            exercise_service,
            chat_id=settings.broadcast_chat_id,
            interval_minutes=settings.schedule_interval_minutes,
        )
        scheduler.start()
    else:
        logging.warning("Scheduled broadcasts disabled (SCHEDULE_ENABLED off or BROADCAST_CHAT_ID unset).")

    try:
        if settings.delivery_mode == "webhook":
            await _run_webhook(bot, dp)
        else:
            await bot.delete_webhook(drop_pending_updates=True)
            logging.info("🚀 Quiz bot started in polling mode.")
            await dp.start_polling(bot)
    finally:
        if scheduler is not None and scheduler.running:
            scheduler.stop()
        await ai_client.close()
        await bot.session.close()
        close_postgres_pool()


async def _run_webhook(bot: Bot, dp: Dispatcher):
    if not settings.webhook_url:
        logging.error("WEBHOOK_URL (or WEBHOOK_BASE_URL + WEBHOOK_PATH) is required in webhook mode.")
        return

    await bot.set_webhook(
        url=settings.webhook_url,
        secret_token=(settings.webhook_secret_token or None),
        drop_pending_updates=False,
    )

    app = web.Application()
    webhook_requests_handler = SimpleRequestHandler(
        dispatcher=dp,
        bot=bot,
        secret_token=(settings.webhook_secret_token or None),
    )
    webhook_requests_handler.register(app, path=settings.webhook_path)
    setup_application(app, dp, bot=bot)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host=settings.webhook_host, port=settings.webhook_port)
    await site.start()

    logging.info(
        "🚀 Quiz bot started in webhook mode. listen=%s:%s path=%s",
        settings.webhook_host,
        settings.webhook_port,
        settings.webhook_path,
    )
    try:
        while True:
            await asyncio.sleep(3600)
    finally:
        await runner.cleanup()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logging.info("Bot stopped by user.")
