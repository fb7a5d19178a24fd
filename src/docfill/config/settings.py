"""项目配置设置."""

from dotenv import load_dotenv
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

# 先加载.env.example（最低优先级），再加载.env（覆盖前者），最后环境变量最高
_PROJECT_DIR = Path(__file__).parent.parent.parent.parent
load_dotenv(dotenv_path=_PROJECT_DIR / '.env.example', override=False)
load_dotenv(dotenv_path=_PROJECT_DIR / '.env', override=True)


def _env_list(name: str, default: str) -> List[str]:
    """读取逗号分隔的环境变量列表."""
    return [item.strip() for item in os.environ.get(name, default).split(",") if item.strip()]


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class DetectionConfig(BaseModel):
    """占位符检测配置."""

    max_bracket_length: int = Field(default_factory=lambda: int(os.environ.get("MAX_BRACKET_LENGTH", "100")))  # 方括号内文本长度上限（不含）
    min_label_underscores: int = Field(default_factory=lambda: int(os.environ.get("MIN_LABEL_UNDERSCORES", "3")))  # "字段: ___" 最少下划线数
    min_signature_line_underscores: int = Field(default_factory=lambda: int(os.environ.get("MIN_SIGNATURE_LINE_UNDERSCORES", "5")))  # 签名下划线行最少下划线数
    signature_labels: List[str] = Field(default_factory=lambda: _env_list("SIGNATURE_LABELS", "By,Name,Title,Address,Email"))  # 签名区字段名
    # 签名区门控：文本包含任一关键词才检测签名区字段
    signature_gate_enabled: bool = Field(default_factory=lambda: _env_bool("SIGNATURE_GATE_ENABLED", "true"))
    signature_gate_words: List[str] = Field(default_factory=lambda: _env_list("SIGNATURE_GATE_WORDS", "signature"))  # 不区分大小写
    signature_gate_tokens: List[str] = Field(default_factory=lambda: _env_list("SIGNATURE_GATE_TOKENS", "INVESTOR:,COMPANY:"))  # 区分大小写


class ChatConfig(BaseModel):
    """填写对话配置."""

    affirmative_token: str = Field(default_factory=lambda: os.environ.get("AFFIRMATIVE_TOKEN", "yes"))  # 确认关键词
    change_keyword: str = Field(default_factory=lambda: os.environ.get("CHANGE_KEYWORD", "change"))  # 修改关键词
    sample_length: int = Field(default_factory=lambda: int(os.environ.get("SAMPLE_LENGTH", "200")))  # 提取失败时附带的文本样例长度


class LogConfig(BaseModel):
    """日志配置."""

    level: str = Field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO"))  # 日志级别
    # 精简日志格式
    format: str = Field(default_factory=lambda: os.environ.get("LOG_FORMAT", "<level>{level: <8}</level>| - <level>{message}</level>"))
    log_file: Optional[str] = Field(default_factory=lambda: os.environ.get("LOG_FILE") or None)  # 日志文件名，为空则不写文件
    rotation: str = Field(default_factory=lambda: os.environ.get("LOG_ROTATION", "10 MB"))  # 日志轮转大小
    retention: str = Field(default_factory=lambda: os.environ.get("LOG_RETENTION", "1 week"))  # 日志保留时间


class Settings(BaseModel):
    """项目全局设置."""

    detection: DetectionConfig = Field(default_factory=DetectionConfig)  # 占位符检测相关配置
    chat: ChatConfig = Field(default_factory=ChatConfig)  # 对话相关配置
    log: LogConfig = Field(default_factory=LogConfig)  # 日志相关配置

    # 项目路径配置
    project_dir: Path = Field(default_factory=lambda: _PROJECT_DIR)  # 项目根目录
    output_dir: Path = Field(default_factory=lambda: Path(os.environ.get("OUTPUT_DIR", str(_PROJECT_DIR / "output"))))  # 输出目录


# 单例模式，避免多次实例化
_settings = None
def get_settings():
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

settings = get_settings()
