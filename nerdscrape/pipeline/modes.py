"""Mode selection: does this request get AI enrichment, and with what prompt?"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from nerdscrape.pipeline.models import NERD

DEFAULT_PROMPT = """Analyze this webpage content and provide:
1. Main topic and purpose
2. Key information and insights
3. Content quality assessment
4. Notable patterns or structure
5. Sentiment analysis

Keep the analysis concise but comprehensive."""


@dataclass(frozen=True)
class EnrichmentPlan:
    prompt: str


def decide_enrichment(mode: str, custom_prompt: Optional[str] = None) -> Optional[EnrichmentPlan]:
    """Return ``None`` for ``basic`` mode, otherwise the prompt to enrich with.

    A blank ``custom_prompt`` counts as not supplied.
    """
    if mode != NERD:
        return None
    if custom_prompt and custom_prompt.strip():
        return EnrichmentPlan(prompt=custom_prompt)
    return EnrichmentPlan(prompt=DEFAULT_PROMPT)
