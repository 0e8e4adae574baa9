# -*- coding: utf-8 -*-
"""
@Time    : 2025/9/4 17:03
@Author  : QIN2DIM
@GitHub  : https://github.com/QIN2DIM
@Desc    : 设置相关命令：所有修改都经由 pipeline.save_preferences 显式保存
"""
from telegram import Update
from telegram.ext import ContextTypes

from mybot.handlers.message_handler import is_allowed_chat
from mybot.services.runtime import get_runtime
from mybot.task_manager import get_active_tasks_count
from storage import PROVIDER_PRESETS


async def auto_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/auto on|off 开关自动翻译"""
    if not is_allowed_chat(update.effective_chat.id):
        return

    runtime = get_runtime(context)
    preferences = runtime.pipeline.preferences
    args = context.args or []

    if not args:
        state = "已开启" if preferences.auto_translate else "已关闭"
        await update.message.reply_text(f"自动翻译{state}。\n用法：/auto on|off")
        return

    command = args[0].lower()
    if command in ("on", "开启"):
        enabled = True
    elif command in ("off", "关闭"):
        enabled = False
    else:
        await update.message.reply_text("❌ 无效的参数，用法：/auto on|off")
        return

    runtime.pipeline.save_preferences(
        preferences.model_copy(
            update={"enabled": preferences.enabled or enabled, "auto_translate": enabled}
        )
    )
    await update.message.reply_text("✅ 自动翻译已开启。" if enabled else "🔕 自动翻译已关闭。")


async def lang_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/lang <目标语言>"""
    if not is_allowed_chat(update.effective_chat.id):
        return

    runtime = get_runtime(context)
    language = " ".join(context.args or []).strip()
    if not language:
        await update.message.reply_text(
            f"当前目标语言：{runtime.pipeline.preferences.target_language}\n用法：/lang 简体中文"
        )
        return

    runtime.pipeline.save_preferences(
        runtime.pipeline.preferences.model_copy(update={"target_language": language})
    )
    await update.message.reply_text(f"✅ 目标语言已设置为：{language}")


async def clear_cache_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not is_allowed_chat(update.effective_chat.id):
        return

    get_runtime(context).pipeline.reset_cache()
    await update.message.reply_text("🧹 翻译缓存已清空。")


async def status_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    runtime = get_runtime(context)
    pipeline = runtime.pipeline
    preferences = pipeline.preferences

    message = (
        f"🤖 翻译器状态\n\n"
        f"• 启用：{'是' if preferences.enabled else '否'}\n"
        f"• 自动翻译：{'是' if preferences.auto_translate else '否'}\n"
        f"• 目标语言：{preferences.target_language}\n"
        f"• 服务商：{preferences.provider} / {preferences.model or '未配置'}\n"
        f"• 上下文条数：{preferences.context_size}\n"
        f"• 请求间隔：{preferences.request_interval_ms} ms\n"
        f"• 缓存：{pipeline.cache.size()} / {pipeline.cache.capacity}\n"
        f"• 排队中：{len(pipeline.scheduler.pending_keys())}\n"
        f"• 处理中的命令：{get_active_tasks_count()}"
    )
    await update.message.reply_text(message)


async def provider_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/provider openai|deepseek|custom [接口地址] [模型]"""
    if not is_allowed_chat(update.effective_chat.id):
        return

    runtime = get_runtime(context)
    preferences = runtime.pipeline.preferences
    args = context.args or []

    if not args or args[0].lower() not in PROVIDER_PRESETS:
        await update.message.reply_text(
            f"当前服务商：{preferences.provider}\n"
            f"接口地址：{preferences.api_endpoint or '未配置'}\n"
            f"模型：{preferences.model or '未配置'}\n"
            f"用法：/provider {'|'.join(PROVIDER_PRESETS)} [接口地址] [模型]"
        )
        return

    updated = preferences.apply_provider_preset(args[0].lower())
    if len(args) > 1:
        updated = updated.model_copy(update={"api_endpoint": args[1]})
    if len(args) > 2:
        updated = updated.model_copy(update={"model": args[2]})

    runtime.pipeline.save_preferences(updated)
    await update.message.reply_text(
        f"✅ 服务商已切换为 {updated.provider}\n{updated.api_endpoint or '未配置接口地址'} / {updated.model or '未配置模型'}"
    )
