"""Claude-powered reflection on a single journal entry."""

from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Dict, Optional

from anthropic import Anthropic

from reflectai.core.config import settings
from reflectai.core.logging_utils import log_llm_usage, sanitize_for_logging
from reflectai.features.journal.models import AIAnalysis, Sentiment
from reflectai.shared.errors import AnalysisError

logger = logging.getLogger("Reflect.Analysis")

SYSTEM_INSTRUCTION = (
    "You are an empathetic, insightful journaling assistant. "
    "Your goal is to help the user reflect on their day."
)

ANALYSIS_TOOL_NAME = "record_journal_analysis"

ANALYSIS_TOOL = {
    "name": ANALYSIS_TOOL_NAME,
    "description": "Record the sentiment, summary, advice and tags for a journal entry.",
    "input_schema": {
        "type": "object",
        "properties": {
            "sentiment": {
                "type": "string",
                "enum": [s.value for s in Sentiment],
                "description": "The overall emotional tone of the journal entry.",
            },
            "summary": {
                "type": "string",
                "description": "A concise 1-sentence summary of the entry.",
            },
            "advice": {
                "type": "string",
                "description": "A short, philosophical or supportive piece of advice relevant to the entry.",
            },
            "tags": {
                "type": "array",
                "items": {"type": "string"},
                "description": "3-5 relevant thematic tags.",
            },
        },
        "required": ["sentiment", "summary", "advice", "tags"],
    },
}


def build_prompt(text: str) -> str:
    return (
        "Analyze the following journal entry providing a sentiment, summary, "
        "supportive advice, and tags.\n\n"
        f'Entry: "{text}"'
    )


class AnalysisClient:
    """
    Turns entry text into an AIAnalysis.

    One request, one response: no retries, no streaming, no caching.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[Anthropic] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.ANTHROPIC_API_KEY
        self.model = model or settings.CLAUDE_MODEL
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> Anthropic:
        if self._client is None:
            # SDK retries are on by default; a failed call is final here
            self._client = Anthropic(api_key=self.api_key, max_retries=0)
        return self._client

    def analyze_entry(self, text: str) -> AIAnalysis:
        if not self.is_configured:
            raise AnalysisError.missing_credential()

        started = time.monotonic()
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=settings.ANALYSIS_MAX_TOKENS,
                system=SYSTEM_INSTRUCTION,
                tools=[ANALYSIS_TOOL],
                tool_choice={"type": "tool", "name": ANALYSIS_TOOL_NAME},
                messages=[{"role": "user", "content": build_prompt(text)}],
            )
        except Exception as exc:
            logger.error("Analysis request to %s failed: %s", self.model, exc)
            raise AnalysisError("AI analysis failed. Please try again.") from exc

        self._log_usage(response, started)

        payload = self._extract_payload(response)
        try:
            analysis = AIAnalysis.model_validate(payload)
        except ValueError as exc:
            logger.error("Model %s returned an invalid analysis: %s", self.model, exc)
            raise AnalysisError("AI returned an analysis in an unexpected format") from exc

        logger.info("Analysis complete: sentiment=%s, tags=%s", analysis.sentiment.value, len(analysis.tags))
        return analysis

    def _extract_payload(self, response: Any) -> Dict[str, Any]:
        """Tool input if the model called the tool, else JSON parsed from text."""

        blocks = getattr(response, "content", None) or []

        for block in blocks:
            if getattr(block, "type", None) == "tool_use" and getattr(block, "name", None) == ANALYSIS_TOOL_NAME:
                if not isinstance(block.input, dict) or not block.input:
                    raise AnalysisError("Empty response from AI")
                return block.input

        result_text = "".join(
            block.text for block in blocks if getattr(block, "type", None) == "text"
        ).strip()
        if not result_text:
            raise AnalysisError("Empty response from AI")

        if result_text.startswith("```"):
            result_text = re.sub(r"^```(?:json)?\n?", "", result_text)
            result_text = re.sub(r"\n?```$", "", result_text)

        try:
            payload = json.loads(result_text)
        except json.JSONDecodeError as exc:
            logger.error("Model %s returned unparsable JSON: %s | snippet=%s", self.model, exc, sanitize_for_logging(result_text, 200))
            raise AnalysisError("AI returned an unreadable response") from exc

        if not isinstance(payload, dict):
            raise AnalysisError("AI returned an analysis in an unexpected format")
        return payload

    def _log_usage(self, response: Any, started: float) -> None:
        usage = getattr(response, "usage", None)
        input_tokens = getattr(usage, "input_tokens", None)
        output_tokens = getattr(usage, "output_tokens", None)
        if not isinstance(input_tokens, int) or not isinstance(output_tokens, int):
            return
        log_llm_usage(
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
