from pathlib import Path
from typing import Set, Any
from urllib.request import getproxies

import dotenv
from loguru import logger
from pydantic import SecretStr, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from telegram.ext import Application

dotenv.load_dotenv()


PROJECT_DIR = Path(__file__).parent
LOG_DIR = PROJECT_DIR.joinpath("logs")
DATA_DIR = PROJECT_DIR.joinpath("data")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    TELEGRAM_BOT_API_TOKEN: SecretStr = Field(
        default="", description="通过 https://t.me/BotFather 获取机器人的 API_TOKEN"
    )

    DATABASE_URL: str = Field(
        default=f"sqlite:///{DATA_DIR.joinpath('translator.db')}",
        description="持久化存储（设置与翻译缓存）的数据库连接 URL",
    )

    TELEGRAM_CHAT_WHITELIST: str = Field(
        default="", description="允许的聊天 ID，可以同时约束 channel，group，private，supergroup。"
    )

    whitelist: Set[int] = Field(
        default_factory=set,
        description="配置 TELEGRAM_CHAT_WHITELIST 后， id 被清洗到该列表方便使用",
    )

    COMPLETION_API_KEY: SecretStr = Field(
        default="",
        description="Chat Completion 服务商的 API Key。仅在持久化设置中没有 api_key 时作为默认值使用。",
    )

    COMPLETION_PROVIDER: str = Field(
        default="openai", description="默认服务商预设：`openai`、`deepseek` 或 `custom`"
    )

    COMPLETION_REQUEST_TIMEOUT: float = Field(
        default=60.0, description="单次 Chat Completion 请求的超时时间（秒）"
    )

    CACHE_SAVE_DEBOUNCE_SECONDS: float = Field(
        default=1.2, description="翻译缓存写盘的防抖窗口（秒），窗口内的多次修改只写一次最终状态"
    )

    CHAT_HISTORY_LIMIT: int = Field(
        default=200, description="每个聊天在内存中保留的最近消息条数，用于组装上下文"
    )

    CHANNEL_SCAN_LIMIT: int = Field(
        default=60, description="切换频道或手动扫描时，回溯翻译的最近消息条数"
    )

    HTTP_REQUEST_TIMEOUT: float = Field(
        default=75.0, description="HTTP 请求超时时间（秒），用于 Telegram API 调用。"
    )

    def model_post_init(self, context: Any, /) -> None:
        try:
            if not self.whitelist and self.TELEGRAM_CHAT_WHITELIST:
                self.whitelist = {
                    int(i.strip()) for i in filter(None, self.TELEGRAM_CHAT_WHITELIST.split(","))
                }
        except Exception as err:
            logger.warning(f"解析 TELEGRAM_CHAT_WHITELIST 失败 - {err}")

        if self.COMPLETION_PROVIDER not in ("openai", "deepseek", "custom"):
            logger.warning(f"未知的服务商预设 {self.COMPLETION_PROVIDER}，已回退到 openai")
            self.COMPLETION_PROVIDER = "openai"

    def get_default_application(self) -> Application:
        _base_builder = (
            Application.builder()
            .token(self.TELEGRAM_BOT_API_TOKEN.get_secret_value())
            .connect_timeout(self.HTTP_REQUEST_TIMEOUT)
            .write_timeout(self.HTTP_REQUEST_TIMEOUT)
            .read_timeout(self.HTTP_REQUEST_TIMEOUT)
        )
        if proxy_url := getproxies().get("http"):
            logger.success(f"使用代理: {proxy_url}")
            application = _base_builder.proxy(proxy_url).get_updates_proxy(proxy_url).build()
        else:
            application = _base_builder.build()

        return application


settings = Settings()  # type: ignore
