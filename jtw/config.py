"""Shared configuration for the jt CLI."""
import os
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

DATA_DIR = Path(os.getenv("JTW_HOME", Path.home() / ".jtw")).expanduser()
DB_PATH = DATA_DIR / "data.db"
LOG_LEVEL = os.getenv("JTW_LOG_LEVEL", "WARNING").upper()

TASK_KEY_PATTERN = r"[A-Z]+-\d+"
PROJECT_KEY_PATTERN = r"[A-Z]+"


class AIProviderKind(str, Enum):
    ANTHROPIC = "anthropic"
    OPENAI = "openai"


# Fallback environment variables for the AI key when setup stored none
API_KEY_ENV = {
    AIProviderKind.ANTHROPIC: "ANTHROPIC_API_KEY",
    AIProviderKind.OPENAI: "OPENAI_API_KEY",
}


class AppConfig(BaseModel):
    jira_url: str
    jira_username: str
    jira_password: str
    project_key: str
    ai_provider: AIProviderKind = AIProviderKind.OPENAI
    ai_api_key: str = ""
    ai_model: str | None = None

    def resolved_api_key(self) -> str:
        return self.ai_api_key or os.getenv(API_KEY_ENV[self.ai_provider], "")
