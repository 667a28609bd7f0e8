import os
from typing import Optional

from dotenv import load_dotenv

from askbot.timeouts import TimeoutStrategy

load_dotenv()


class Settings:
    BOT_TOKEN: str = os.getenv("BOT_TOKEN", "")

    LOG_FILE: str = os.getenv("LOG_FILE", "logs/bot.log")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Prompt registry; parsed after validate()
    PROMPT_TIMEOUT_STRATEGY: str = os.getenv("PROMPT_TIMEOUT_STRATEGY", "on-answer")
    PROMPT_TIMEOUT: str = os.getenv("PROMPT_TIMEOUT", "")
    PROMPT_FALLBACK_KEY: str = os.getenv("PROMPT_FALLBACK_KEY", "0")

    REQUIRED = ("BOT_TOKEN",)

    @property
    def prompt_timeout(self) -> Optional[float]:
        return float(self.PROMPT_TIMEOUT) if self.PROMPT_TIMEOUT else None

    @property
    def prompt_fallback_key(self) -> int:
        return int(self.PROMPT_FALLBACK_KEY)

    def _invalid(self) -> list[str]:
        bad = []
        if self.PROMPT_TIMEOUT_STRATEGY not in {s.value for s in TimeoutStrategy}:
            bad.append(f"PROMPT_TIMEOUT_STRATEGY={self.PROMPT_TIMEOUT_STRATEGY!r}")
        try:
            timeout = self.prompt_timeout
        except ValueError:
            timeout = -1
        if timeout is not None and not timeout > 0:
            bad.append(f"PROMPT_TIMEOUT={self.PROMPT_TIMEOUT!r}")
        try:
            self.prompt_fallback_key
        except ValueError:
            bad.append(f"PROMPT_FALLBACK_KEY={self.PROMPT_FALLBACK_KEY!r}")
        return bad

    # Runtime sanity-checks
    def validate(self):
        missing = [k for k in self.REQUIRED if getattr(self, k) in (None, "")]
        if missing:
            raise RuntimeError(f"Missing required settings: {missing}")
        invalid = self._invalid()
        if invalid:
            raise RuntimeError(f"Invalid settings: {invalid}")

settings = Settings()
