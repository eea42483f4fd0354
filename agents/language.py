"""Optional detection of the language the model should think in."""

from __future__ import annotations

import re
from typing import Optional

from agents.llm.base_llm import BaseLLM
from agents.models import Message, Role
from agents.prompts import load_prompts
from agents.reasoner.exceptions import LanguageDetectionError
from utils.logger import get_logger

logger = get_logger(__name__)

_LANGUAGE_CODE_RE = re.compile(r"^[a-z]{2,3}(?:-[A-Za-z]{2,4})?$")


class LanguageDetector:
    """Asks the model for the language code of a task (``en``, ``zh-TW``, ...)."""

    def __init__(self, llm: BaseLLM) -> None:
        self.llm = llm
        self.prompt = load_prompts("react", required_prompts=["language_detection"])["language_detection"].strip()

    def detect(self, text: str) -> Optional[str]:
        """Returns the detected code, or ``None`` when detection fails for any reason."""
        try:
            return self._detect(text)
        except Exception as exc:
            logger.warning("language_detection_failed", error=str(exc), error_type=type(exc).__name__)
            return None

    def _detect(self, text: str) -> str:
        reply = self.llm.chat([Message(Role.SYSTEM, self.prompt), Message(Role.USER, text)]).content
        code = reply.strip().strip("`'\". ")
        if not _LANGUAGE_CODE_RE.match(code):
            raise LanguageDetectionError(f"Unrecognised language code: {reply[:50]!r}")
        logger.info("language_detected", language=code)
        return code
