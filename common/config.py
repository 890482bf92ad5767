"""配置管理"""

import os
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import BaseModel, ValidationError
from dotenv import load_dotenv

from common.exceptions import ConfigError

# 加载 .env
load_dotenv()

# 项目根目录
BASE_DIR = Path(__file__).resolve().parent.parent


class LLMConfig(BaseModel):
    default_model: str = "gemini-2.5-flash"
    learning_model: str = "gemini-2.5-flash"
    available_models: List[str] = [
        "gemini-2.5-flash",
        "gemini-2.5-pro",
    ]
    timeout_seconds: int = 60
    temperature: float = 0.8
    max_output_tokens: int = 2048
    learning_temperature: float = 0.3
    learning_max_tokens: int = 500


class ChatConfig(BaseModel):
    max_message_length: int = 10000
    title_max_length: int = 50


class GamePointsConfig(BaseModel):
    trivia: int = 15
    riddle: int = 20
    word: int = 15


class GamesConfig(BaseModel):
    points: GamePointsConfig = GamePointsConfig()
    idle_timeout_seconds: int = 3600
    cleanup_interval_seconds: int = 300


class LearningConfig(BaseModel):
    enabled: bool = True
    max_new_items: int = 3
    max_items_per_category: int = 10


class GamificationConfig(BaseModel):
    enabled: bool = True
    early_bird_end_hour: int = 6
    night_owl_end_hour: int = 4


class LoggingConfig(BaseModel):
    level: str = "INFO"
    file_path: str = "logs/rubi.log"
    backup_count: int = 30
    module_levels: Dict[str, str] = {}


class Settings(BaseModel):
    """全局配置"""

    # 服务配置
    host: str = "0.0.0.0"
    port: int = 8005
    debug: bool = False

    # API Key
    google_api_key: str = ""

    # 路径
    data_path: str = "./rubi_data"

    # 子配置
    llm: LLMConfig = LLMConfig()
    chat: ChatConfig = ChatConfig()
    games: GamesConfig = GamesConfig()
    learning: LearningConfig = LearningConfig()
    gamification: GamificationConfig = GamificationConfig()
    logging: LoggingConfig = LoggingConfig()

    @property
    def data_dir(self) -> Path:
        path = Path(self.data_path)
        if not path.is_absolute():
            path = BASE_DIR / path
        return path.resolve()


def _resolve_env_vars(value: Any) -> Any:
    """递归解析配置中的环境变量引用 ${VAR:default}"""
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        inner = value[2:-1]
        if ":" in inner:
            var_name, default = inner.split(":", 1)
        else:
            var_name, default = inner, ""
        return os.getenv(var_name, default)
    elif isinstance(value, dict):
        return {k: _resolve_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_resolve_env_vars(v) for v in value]
    return value


def load_settings() -> Settings:
    """加载配置：环境变量 + settings.yaml"""
    config_data: Dict[str, Any] = {}

    # 从 settings.yaml 加载
    yaml_path = BASE_DIR / "config" / "settings.yaml"
    if yaml_path.exists():
        with open(yaml_path, "r", encoding="utf-8") as f:
            try:
                yaml_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {yaml_path}", detail=str(e)) from e
            config_data = _resolve_env_vars(yaml_data)

    # 环境变量覆盖
    env_overrides = {
        "google_api_key": os.getenv("GOOGLE_API_KEY", ""),
        "host": os.getenv("RUBI_HOST", config_data.get("host", "0.0.0.0")),
        "port": int(os.getenv("RUBI_PORT", config_data.get("port", 8005))),
        "debug": os.getenv("RUBI_DEBUG", "false").lower() == "true",
        "data_path": os.getenv(
            "RUBI_DATA_PATH",
            config_data.get("data_path", "./rubi_data"),
        ),
    }

    config_data.update({k: v for k, v in env_overrides.items() if v})

    try:
        return Settings(**config_data)
    except ValidationError as e:
        raise ConfigError("Invalid settings", detail=str(e)) from e


# 全局配置单例
settings = load_settings()
