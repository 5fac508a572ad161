"""Oracle service: OpenAI-backed political analysis with neutral fallbacks."""

import hashlib
import logging
from textwrap import dedent
from typing import Any, Dict, Optional, Sequence

import openai
from diskcache import Cache
from tenacity import retry, stop_after_attempt, wait_exponential

from ..core.baseline import format_survey_answers
from ..core.config import settings
from ..core.constants import PromptConstants, CacheConstants, PillarConstants
from ..core.models import Delta, Snapshot, SurveyAnswer, ActivityMessage
from ..core.payloads import coerce_payload, parse_delta_payload

logger = logging.getLogger(__name__)

SURVEY_ANALYSIS_PROMPT = dedent("""
You are a political analyst specializing in UK politics. Score the respondent on five pillars
from their survey answers.

For each pillar (economy, social, environment, governance, foreign):
- score: integer 0..100 (0 = very left/liberal, 100 = very right/conservative)
- rationale: one sentence grounded in the answers

Also identify 3-5 key political issues, each with a short title and a summary under 100 characters.

Return ONLY JSON:
{
  "pillars": {
    "economy": {"score": int, "rationale": str},
    "social": {"score": int, "rationale": str},
    "environment": {"score": int, "rationale": str},
    "governance": {"score": int, "rationale": str},
    "foreign": {"score": int, "rationale": str}
  },
  "issues": [{"title": str, "summary": str}]
}
""").strip()

CONVERSATION_ANALYZER_PROMPT = dedent("""
You analyze a user's political conversation against their prior profile. Return ONLY JSON.

Rules:
- pillar_deltas: integers -10..+10 per pillar; negative = more left/liberal, positive = more right/conservative.
  Use 0 only when the user said nothing relevant to that pillar.
- top_issues: the issues the user raised; mentions = emphasis 1..10; user_quote = an EXACT quote from the user.
- summary_message: under 100 words, neutral, prefixed with [NEXO-SUMMARY].
- Focus on UK context. Stay neutral.

Schema:
{
  "top_issues": [{"issue": str, "mentions": int, "user_quote": str}],
  "pillar_deltas": {"economy": int, "environment": int, "social": int, "governance": int, "foreign": int},
  "summary_message": str
}
""").strip()

PARTY_SUMMARY_PROMPT = dedent("""
Write a neutral, plain-English summary of a political group's focus areas.
Keep it 3-5 sentences and under 400 characters. Avoid jargon and proper nouns. Be objective and descriptive.
""").strip()


class OracleServiceFactory:
    """Factory for creating oracle services."""

    @staticmethod
    def create():
        """Create appropriate oracle service."""
        if settings.has_openai_key:
            return OpenAIOracle()
        else:
            return FallbackOracle()


class OpenAIOracle:
    """OpenAI-based oracle."""

    def __init__(self, client=None, cache_dir: Optional[str] = None):
        self.client = client or openai.OpenAI(api_key=settings.openai_api_key)
        self.model = settings.openai_model
        self.cache = Cache(cache_dir or settings.cache_dir)
        logger.info("OpenAI oracle initialized with caching")

    @retry(
        stop=stop_after_attempt(settings.max_retries),
        wait=wait_exponential(multiplier=settings.retry_delay, max=settings.retry_backoff * 10),
        reraise=True,
    )
    def _complete(self, system: str, user: str, temperature: float, max_tokens: int) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            max_tokens=max_tokens,
            temperature=temperature,
            timeout=settings.request_timeout,
        )
        return (response.choices[0].message.content or "").strip()

    def chat(self, system: str, user: str, temperature: float = 0.2, max_tokens: int = 800) -> str:
        """Chat completion with response caching."""
        cache_key = hashlib.md5(
            f"{system}|{user}|{temperature}|{max_tokens}|{self.model}|{PromptConstants.PROMPT_VERSION}".encode()
        ).hexdigest()

        cached = self.cache.get(cache_key)
        if cached:
            logger.debug(f"Cache hit for oracle request: {cache_key[:CacheConstants.CACHE_KEY_LENGTH]}...")
            return cached

        result = self._complete(system, user, temperature, max_tokens)
        if result:
            self.cache.set(cache_key, result, expire=3600 * CacheConstants.CACHE_TTL_HOURS)
            logger.debug(f"Cached oracle response: {cache_key[:CacheConstants.CACHE_KEY_LENGTH]}...")
        return result

    def analyze_survey(self, answers: Sequence[SurveyAnswer]) -> Dict[str, Any]:
        """Raw baseline analysis; the baseline builder repairs it."""
        try:
            reply = self.chat(
                system=SURVEY_ANALYSIS_PROMPT,
                user=f"Analyze these survey responses:\n\n{format_survey_answers(answers)}",
                temperature=PromptConstants.SURVEY_TEMPERATURE,
                max_tokens=PromptConstants.SURVEY_MAX_TOKENS,
            )
            return coerce_payload(reply)
        except Exception as e:
            logger.error(f"Survey analysis failed: {e}")
            return {}

    def extract_delta(self, messages: Sequence[ActivityMessage], prior: Optional[Snapshot]) -> Delta:
        """Analyze new conversation messages against the prior snapshot."""
        if not messages:
            return Delta()

        lines = []
        if prior is not None:
            lines.append("PRIOR SNAPSHOT:")
            for axis in PillarConstants.AXES:
                pillar = prior.pillars.get(axis)
                if pillar is not None:
                    lines.append(f"- {axis}: {pillar.score} ({pillar.rationale})")
            for issue in prior.top_issues:
                lines.append(f"- issue: {issue.title}: {issue.summary}")
            lines.append("")
        lines.append("CONVERSATION:")
        lines.extend(f"{m.role}: {m.content}" for m in messages)

        try:
            reply = self.chat(
                system=CONVERSATION_ANALYZER_PROMPT,
                user="\n".join(lines),
                temperature=PromptConstants.ANALYZER_TEMPERATURE,
                max_tokens=PromptConstants.ANALYZER_MAX_TOKENS,
            )
        except Exception as e:
            logger.error(f"Conversation analysis failed: {e}")
            return Delta()
        return parse_delta_payload(reply)

    def summarize_party(self, prompt: str) -> Optional[str]:
        """Party summary prose, or None to use the deterministic fallback."""
        try:
            reply = self.chat(
                system=PARTY_SUMMARY_PROMPT,
                user=f"Write a brief party summary from this data:\n\n{prompt}",
                temperature=PromptConstants.SUMMARY_TEMPERATURE,
                max_tokens=PromptConstants.SUMMARY_MAX_TOKENS,
            )
        except Exception as e:
            logger.error(f"Party summary failed: {e}")
            return None
        return reply or None


class FallbackOracle:
    """Fallback oracle returning neutral results."""

    def __init__(self):
        logger.info("Using fallback oracle")

    def analyze_survey(self, answers: Sequence[SurveyAnswer]) -> Dict[str, Any]:
        logger.warning("Fallback oracle cannot analyze surveys, baseline will be neutral")
        return {}

    def extract_delta(self, messages: Sequence[ActivityMessage], prior: Optional[Snapshot]) -> Delta:
        logger.warning("Fallback oracle cannot analyze conversations, no changes applied")
        return Delta()

    def summarize_party(self, prompt: str) -> Optional[str]:
        return None
