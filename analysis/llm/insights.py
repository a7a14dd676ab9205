"""
Gemini election insights - commentary on live vote tallies

Responsibilities:
- Serialize the roster into one line per candidate
- Fill the analyst prompt from prompts.json
- Call Gemini once with the configured sampling parameters
- Degrade every failure to fixed fallback text (never raise to the caller)
- Refuse overlapping requests with a busy flag
"""

import asyncio
import json
import time
from importlib.resources import files
from typing import List, Optional

from google import genai
from google.genai import types

from config import config, get_logger
from election.models import Candidate
from exceptions import InsightBusyError
from server.metrics import metrics

logger = get_logger(__name__).bind(component="insights")

ERROR_FALLBACK = "Error connecting to AI analysis service."
EMPTY_FALLBACK = "Unable to generate analysis at this time."

PROMPT_CATEGORY = "election"
PROMPT_TYPE = "trend_analysis"


def format_results(candidates: List[Candidate]) -> str:
    """One "<name> (<office>): <votes> votes" line per candidate, roster order"""
    return "\n".join(
        f"{c.name} ({c.office.value}): {c.votes} votes" for c in candidates
    )


class InsightRequester:
    """Sends aggregate counts to Gemini and returns its markdown verbatim"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        top_p: Optional[float] = None,
        timeout_seconds: Optional[float] = None,
        client=None,
        prompts_path: Optional[str] = None,
    ):
        """Initialize requester

        Args:
            api_key: Gemini API key (defaults to GEMINI_API_KEY / LLM_API_KEY)
            model: Model identifier (defaults to BALLOT_INSIGHT_MODEL)
            temperature: Sampling temperature
            top_p: Nucleus-sampling probability
            timeout_seconds: Upper bound on a single call
            client: Pre-built genai client (tests inject fakes here)
            prompts_path: Path to prompts.json (defaults to package resource)
        """
        self.api_key = api_key if api_key is not None else config.get_api_key()
        self.model = model or config.INSIGHT_MODEL
        self.temperature = temperature if temperature is not None else config.INSIGHT_TEMPERATURE
        self.top_p = top_p if top_p is not None else config.INSIGHT_TOP_P
        self.timeout_seconds = timeout_seconds or config.INSIGHT_TIMEOUT_SECONDS
        self._client = client
        self._busy = False

        if prompts_path is None:
            prompts_text = files("analysis.llm").joinpath("prompts.json").read_text()
            self.prompts = json.loads(prompts_text)
        else:
            with open(prompts_path, "r") as f:
                self.prompts = json.load(f)

    @property
    def is_busy(self) -> bool:
        return self._busy

    def _get_client(self):
        """Build the Gemini client on first use; None when no credential is set"""
        if self._client is None and self.api_key:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def build_prompt(self, candidates: List[Candidate]) -> str:
        try:
            template = self.prompts[PROMPT_CATEGORY][PROMPT_TYPE]["template"]
        except KeyError as e:
            raise ValueError(f"Prompt not found: {PROMPT_CATEGORY}.{PROMPT_TYPE}") from e
        return template.format(results=format_results(candidates))

    async def request_insights(self, candidates: List[Candidate]) -> str:
        """Ask Gemini for commentary on the current standings

        Returns the response text, or a fallback string on any failure.

        Raises:
            InsightBusyError: another request is still in flight
        """
        if self._busy:
            raise InsightBusyError(model=self.model)

        self._busy = True
        try:
            return await self._generate(list(candidates))
        finally:
            self._busy = False

    async def _generate(self, candidates: List[Candidate]) -> str:
        start_time = time.time()

        client = self._get_client()
        if client is None:
            logger.warning("insight requested without api key", model=self.model)
            metrics.record_llm_call(self.model, duration_seconds=0.0, success=False)
            return ERROR_FALLBACK

        prompt = self.build_prompt(candidates)
        generate_config = types.GenerateContentConfig(
            temperature=self.temperature,
            top_p=self.top_p,
        )

        try:
            response = await asyncio.wait_for(
                client.aio.models.generate_content(
                    model=self.model, contents=prompt, config=generate_config
                ),
                timeout=self.timeout_seconds,
            )
        except Exception as e:
            duration = time.time() - start_time
            metrics.record_llm_call(self.model, duration_seconds=duration, success=False)
            metrics.record_error(component="insights", error=e)
            logger.error(
                "insight generation failed",
                model=self.model,
                duration_seconds=round(duration, 1),
                error=str(e),
                error_type=type(e).__name__,
            )
            return ERROR_FALLBACK

        duration = time.time() - start_time
        text = getattr(response, "text", None)
        if not text or not text.strip():
            metrics.record_llm_call(self.model, duration_seconds=duration, success=False)
            logger.warning("gemini returned no text", model=self.model)
            return EMPTY_FALLBACK

        metrics.record_llm_call(self.model, duration_seconds=duration, success=True)
        logger.info(
            "insights generated",
            model=self.model,
            duration_seconds=round(duration, 1),
            candidates=len(candidates),
            chars=len(text),
        )
        return text
