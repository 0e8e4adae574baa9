# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/4 17:30
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    :
"""
import json

from loguru import logger
from telegram import Update, BotCommand
from telegram.ext import Application, CommandHandler, MessageHandler, filters

from mybot.handlers.command_handler import (
    translate_command,
    reply_command,
    insert_command,
    presets_command,
    auto_command,
    lang_command,
    provider_command,
    clear_cache_command,
    status_command,
)
from mybot.handlers.message_handler import handle_message
from mybot.services.runtime import BotRuntime, RUNTIME_KEY
from mybot.task_manager import wait_for_all_tasks
from settings import settings, LOG_DIR
from storage import SqlKeyValueStore
from translator import TranslationPipeline
from utils import init_log

init_log(
    runtime=LOG_DIR.joinpath("runtime.log"),
    error=LOG_DIR.joinpath("error.log"),
    serialize=LOG_DIR.joinpath("serialize.log"),
)


async def setup_bot_commands(application: Application):
    """设置机器人的命令菜单"""
    commands = [
        BotCommand("translate", "翻译最近的消息"),
        BotCommand("reply", "根据上下文生成回复"),
        BotCommand("insert", "把生成的回复发送到聊天"),
        BotCommand("presets", "查看回复风格预设"),
        BotCommand("auto", "开关自动翻译"),
        BotCommand("lang", "设置目标语言"),
        BotCommand("provider", "切换模型服务商"),
        BotCommand("clear_cache", "清空翻译缓存"),
        BotCommand("status", "查看翻译器状态"),
    ]

    try:
        await application.bot.set_my_commands(commands)
        logger.success(f"已设置机器人命令菜单: {[f'/{cmd.command}' for cmd in commands]}")
    except Exception as e:
        logger.error(f"设置机器人命令菜单失败: {e}")


async def shutdown_runtime(application: Application):
    await wait_for_all_tasks(timeout=10)
    runtime: BotRuntime = application.bot_data.get(RUNTIME_KEY)
    if runtime:
        await runtime.close()
        logger.info("翻译流水线已关闭，缓存已写盘")


def main() -> None:
    """Start the bot."""
    sp = settings.model_dump(mode='json')
    logger.success(f"Loading settings: {json.dumps(sp, indent=2, ensure_ascii=False)}")

    store = SqlKeyValueStore(settings.DATABASE_URL)
    store.init_database()

    pipeline = TranslationPipeline(store)
    logger.info(
        f"已加载设置: provider={pipeline.preferences.provider} model={pipeline.preferences.model} "
        f"target={pipeline.preferences.target_language} cache={pipeline.cache.size()}"
    )

    application = settings.get_default_application()
    application.bot_data[RUNTIME_KEY] = BotRuntime(pipeline, application.bot)

    application.post_init = setup_bot_commands
    application.post_shutdown = shutdown_runtime

    application.add_handler(CommandHandler("translate", translate_command))
    application.add_handler(CommandHandler("reply", reply_command))
    application.add_handler(CommandHandler("insert", insert_command))
    application.add_handler(CommandHandler("presets", presets_command))
    application.add_handler(CommandHandler("auto", auto_command))
    application.add_handler(CommandHandler("lang", lang_command))
    application.add_handler(CommandHandler("provider", provider_command))
    application.add_handler(CommandHandler("clear_cache", clear_cache_command))
    application.add_handler(CommandHandler("status", status_command))

    application.add_handler(
        MessageHandler((filters.TEXT | filters.CAPTION) & ~filters.COMMAND, handle_message)
    )

    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()
