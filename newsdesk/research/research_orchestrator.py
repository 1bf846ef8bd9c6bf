"""Research Orchestrator - coordinates multi-model research with link verification."""

import asyncio
import logging
import re
from typing import Any, Optional
from urllib.parse import urlparse

from .extraction import extract_json_object
from .url_verifier import UrlVerifier, annotate_sources
from ..exceptions import NewsdeskError, ProviderUnavailableError
from ..llm.base import CompletionRequest, CompletionResponse, Message
from ..llm.router import CHEAPEST, ModelRouter
from ..models.research import (
    ComparisonResult,
    ComparisonSide,
    DefinitionResult,
    FactAssessment,
    FactCheckResult,
    QuickResearchResult,
    ReportConfidence,
    ResearchPerspective,
    ResearchReport,
    ResearchSource,
)
from ..scoring.trust import assess_confidence, domain_trust_score
from ..utils.validation import validate_string, validate_string_list

logger = logging.getLogger(__name__)


# Each parallel model gets a distinct framing
RESEARCH_LENSES = {
    "analytical": {
        "model": "kimi-8k",
        "prompt": "Focus on academic depth, scholarly sources, and analytical rigor.",
    },
    "perspective": {
        "model": "gemini-flash",
        "prompt": "Focus on multiple perspectives, cross-domain connections, and diverse viewpoints.",
    },
    "practical": {
        "model": "llama-70b",
        "prompt": "Focus on recent developments, practical applications, and real-world examples.",
    },
}

COMPARISON_MODEL = "kimi-32k"

RESEARCH_SYSTEM_PROMPT = """You are a research analyst. Your task is to:
1. Research the given topic thoroughly
2. Provide accurate, well-sourced information
3. Include specific URLs for sources (only use URLs you are confident exist)
4. Highlight key findings and insights
5. Note any areas of uncertainty"""

QUICK_RESEARCH_PROMPT = """Research this topic and provide a brief summary with sources:

Topic: {query}

Respond in JSON format:
{{
  "summary": "2-3 paragraph comprehensive summary",
  "sources": [
    {{ "title": "Source Title", "url": "https://...", "snippet": "Brief description of what this source covers" }}
  ]
}}

Include {max_sources} credible sources. Only use URLs you are highly confident exist - do not make up or guess URLs."""

STANDARD_RESEARCH_PROMPT = """Research this topic thoroughly:

Topic: {query}

Provide:
1. A comprehensive summary (3-4 paragraphs)
2. Key findings (5-7 bullet points)
3. Sources with URLs

Format as JSON:
{{
  "summary": "Comprehensive summary...",
  "keyFindings": ["Finding 1", "Finding 2"],
  "sources": [{{ "title": "Source Title", "url": "https://...", "snippet": "What this source covers" }}]
}}"""

SYNTHESIS_SYSTEM_PROMPT = """You are an expert at synthesizing research from multiple sources.
Create a unified summary that highlights agreements, unique contributions, and any conflicts."""

SYNTHESIS_PROMPT = """Synthesize these research perspectives on "{query}":

{perspectives}

Create a unified summary that:
1. Highlights where perspectives agree (high confidence)
2. Notes unique contributions from each
3. Flags any conflicts or uncertainties
4. Provides actionable conclusions

Keep the synthesis concise but comprehensive (3-4 paragraphs)."""

COMPARISON_SYSTEM_PROMPT = """You are a research analyst specializing in comparative analysis.
Provide balanced, objective comparisons with clear pros and cons."""

COMPARISON_PROMPT = """Compare these two options/topics:

A: {topic_a}
B: {topic_b}

Provide a comprehensive comparison in JSON format:
{{
  "topicA": {{ "summary": "Brief summary of A", "pros": ["Pro 1"], "cons": ["Con 1"] }},
  "topicB": {{ "summary": "Brief summary of B", "pros": ["Pro 1"], "cons": ["Con 1"] }},
  "comparison": "Direct comparison highlighting key differences",
  "recommendation": "When to choose A vs B"
}}"""

FACT_CHECK_SYSTEM_PROMPT = """You are a fact-checker. Evaluate claims objectively using available knowledge.
Be honest about uncertainty. Provide sources when possible."""

FACT_CHECK_PROMPT = """Fact-check this claim:

"{claim}"

Respond in JSON format:
{{
  "assessment": "likely_true" | "likely_false" | "uncertain" | "needs_context",
  "explanation": "Brief explanation of your assessment",
  "sources": [{{ "title": "...", "url": "..." }}]
}}"""

DEFINE_PROMPT = """Define and explain this term concisely:

Term: {term}

Respond in JSON format:
{{
  "definition": "Clear, concise definition",
  "relatedTerms": ["term1", "term2", "term3"],
  "sources": [{{ "title": "...", "url": "..." }}]
}}"""

# Negation/contrast markers; coarse, only feeds the confidence penalty
CONTRADICTION_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"however",
        r"contrary",
        r"dispute",
        r"disagree",
        r"conflict",
        r"contradict",
        r"not the case",
        r"false",
    )
]


def detect_contradictions(perspectives: list[ResearchPerspective]) -> bool:
    """True if any narrative contains a negation/contrast marker."""
    return any(
        pattern.search(perspective.summary)
        for perspective in perspectives
        for pattern in CONTRADICTION_PATTERNS
    )


def parse_sources(raw_sources: Any, max_sources: Optional[int] = None) -> list[ResearchSource]:
    """Turn a model's source list into unverified ResearchSources, skipping junk entries."""
    if not isinstance(raw_sources, list):
        return []

    sources = []
    for entry in raw_sources:
        if not isinstance(entry, dict):
            continue
        url = validate_string(entry.get("url"), max_length=2048)
        if not url:
            continue
        snippet = validate_string(entry.get("snippet"), max_length=500) or None
        sources.append(ResearchSource(
            title=validate_string(entry.get("title"), max_length=300, default="Untitled"),
            url=url,
            snippet=snippet,
        ))
        if max_sources and len(sources) >= max_sources:
            break

    return sources


def _hostname(url: str) -> str:
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""
    return host[4:] if host.startswith("www.") else host


class ResearchOrchestrator:
    """
    Orchestrates research across models:
    - quick: one model, verified sources
    - standard/deep: 2-3 models in parallel, pooled verification, synthesis
    - compare: one structured pros/cons call, no verification

    Confidence counts independent publishers (distinct verified hostnames)
    and averages their domain trust.
    """

    def __init__(
        self,
        router: ModelRouter,
        verifier: Optional[UrlVerifier] = None,
        verify_timeout: float = 5.0,
    ):
        self.router = router
        self.verifier = verifier or UrlVerifier()
        self.verify_timeout = verify_timeout

    # ============== Quick Research ==============

    async def quick_research(
        self,
        query: str,
        model: str = CHEAPEST,
        max_sources: int = 5,
        verify_urls: bool = True,
    ) -> QuickResearchResult:
        """
        Single-model research. Unstructured output becomes the summary
        with no sources.
        """
        response = await self.router.complete(CompletionRequest(
            model=model,
            messages=[
                Message(role="system", content=RESEARCH_SYSTEM_PROMPT),
                Message(role="user", content=QUICK_RESEARCH_PROMPT.format(
                    query=query, max_sources=max_sources,
                )),
            ],
            max_tokens=1500,
            temperature=0.3,
        ))

        parsed = extract_json_object(response.content)
        if parsed is None:
            summary, sources = response.content, []
        else:
            summary = validate_string(parsed.get("summary"), max_length=20000) or response.content
            sources = parse_sources(parsed.get("sources"), max_sources)

        if verify_urls and sources:
            sources = await self._verify_sources(sources)

        logger.info(
            f"Quick research on '{query}': {sum(s.verified for s in sources)}/{len(sources)} "
            f"sources verified via {response.model}"
        )

        return QuickResearchResult(
            query=query,
            summary=summary,
            sources=sources,
            model=response.model,
            cost=response.cost,
        )

    # ============== Standard / Deep Research ==============

    async def standard_research(
        self,
        query: str,
        models: Optional[list[str]] = None,
        verify_urls: bool = True,
    ) -> ResearchReport:
        """
        Research with 2-3 models in parallel, one lens each.

        A failed model call only drops its perspective. Cited URLs are
        pooled and verified once, then flags are merged back by URL.

        Raises:
            ProviderUnavailableError: if no model could be called at all
        """
        lenses = list(RESEARCH_LENSES.values())
        if models is None:
            models = [lenses[0]["model"], lenses[1]["model"]]

        tasks = [
            self._research_with_lens(query, model, lenses[i] if i < len(lenses) else lenses[0])
            for i, model in enumerate(models)
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        perspectives: list[ResearchPerspective] = []
        total_cost = 0.0
        unavailable: Optional[ProviderUnavailableError] = None

        for model, result in zip(models, results):
            if isinstance(result, ProviderUnavailableError):
                unavailable = result
            elif isinstance(result, Exception):
                logger.error(f"Research call failed for {model}: {result}")
            else:
                perspective, cost = result
                perspectives.append(perspective)
                total_cost += cost

        if not perspectives and unavailable is not None:
            raise unavailable

        if verify_urls:
            perspectives = await self._verify_perspectives(perspectives)

        synthesis, synthesis_cost = await self._synthesize(query, perspectives)
        total_cost += synthesis_cost

        confidence = self._assess(perspectives)

        logger.info(
            f"Research on '{query}': {len(perspectives)}/{len(models)} perspectives, "
            f"confidence {confidence.level.value} ({confidence.score:.0f})"
        )

        return ResearchReport(
            query=query,
            synthesis=synthesis,
            perspectives=perspectives,
            total_cost=total_cost,
            confidence=ReportConfidence(level=confidence.level, score=confidence.score),
        )

    async def deep_research(self, query: str, verify_urls: bool = True) -> ResearchReport:
        """Standard research across all three lenses."""
        models = [lens["model"] for lens in RESEARCH_LENSES.values()]
        return await self.standard_research(query, models=models, verify_urls=verify_urls)

    async def _research_with_lens(
        self,
        query: str,
        model: str,
        lens: dict,
    ) -> tuple[ResearchPerspective, float]:
        response = await self.router.complete(CompletionRequest(
            model=model,
            messages=[
                Message(role="system", content=f"{RESEARCH_SYSTEM_PROMPT}\n\n{lens['prompt']}"),
                Message(role="user", content=STANDARD_RESEARCH_PROMPT.format(query=query)),
            ],
            max_tokens=2000,
            temperature=0.3,
        ))
        return self._parse_perspective(response), response.cost

    def _parse_perspective(self, response: CompletionResponse) -> ResearchPerspective:
        parsed = extract_json_object(response.content)
        if parsed is None:
            return ResearchPerspective(model=response.model, summary=response.content)

        return ResearchPerspective(
            model=response.model,
            summary=validate_string(parsed.get("summary"), max_length=20000) or response.content,
            key_findings=validate_string_list(parsed.get("keyFindings")),
            sources=parse_sources(parsed.get("sources")),
        )

    async def _verify_perspectives(
        self,
        perspectives: list[ResearchPerspective],
    ) -> list[ResearchPerspective]:
        """One verification batch for every distinct URL across perspectives."""
        unique_urls = list(dict.fromkeys(
            source.url for perspective in perspectives for source in perspective.sources
        ))
        if not unique_urls:
            return perspectives

        results = await self.verifier.verify_batch(unique_urls, timeout=self.verify_timeout)

        return [
            perspective.model_copy(update={"sources": annotate_sources(perspective.sources, results)})
            for perspective in perspectives
        ]

    async def _verify_sources(self, sources: list[ResearchSource]) -> list[ResearchSource]:
        return await self.verifier.verify_and_annotate(sources, timeout=self.verify_timeout)

    async def _synthesize(
        self,
        query: str,
        perspectives: list[ResearchPerspective],
    ) -> tuple[str, float]:
        if not perspectives:
            return "No research perspectives to synthesize.", 0.0

        if len(perspectives) == 1:
            return perspectives[0].summary, 0.0

        sections = []
        for p in perspectives:
            findings = "\n".join(f"- {f}" for f in p.key_findings)
            sections.append(f"### {p.model}\n{p.summary}\n\nKey Findings:\n{findings}")

        try:
            response = await self.router.complete(CompletionRequest(
                model=CHEAPEST,
                messages=[
                    Message(role="system", content=SYNTHESIS_SYSTEM_PROMPT),
                    Message(role="user", content=SYNTHESIS_PROMPT.format(
                        query=query, perspectives="\n---\n".join(sections),
                    )),
                ],
                max_tokens=1500,
                temperature=0.3,
            ))
        except NewsdeskError as e:
            logger.warning(f"Synthesis failed, joining perspectives instead: {e.message}")
            return "\n\n".join(p.summary for p in perspectives), 0.0

        return response.content, response.cost

    def _assess(self, perspectives: list[ResearchPerspective]):
        verified_urls = list(dict.fromkeys(
            s.url for p in perspectives for s in p.sources if s.verified
        ))
        independent = len({_hostname(url) for url in verified_urls} - {""})
        avg_trust = (
            sum(domain_trust_score(url) for url in verified_urls) / len(verified_urls)
            if verified_urls else 0.0
        )
        return assess_confidence(independent, avg_trust, detect_contradictions(perspectives))

    # ============== Comparison ==============

    async def compare_research(self, topic_a: str, topic_b: str) -> ComparisonResult:
        """Two-sided pros/cons comparison. Sources are not verified."""
        response = await self.router.complete(CompletionRequest(
            model=COMPARISON_MODEL,
            messages=[
                Message(role="system", content=COMPARISON_SYSTEM_PROMPT),
                Message(role="user", content=COMPARISON_PROMPT.format(topic_a=topic_a, topic_b=topic_b)),
            ],
            max_tokens=2000,
            temperature=0.3,
        ))

        parsed = extract_json_object(response.content)
        if parsed is None:
            return ComparisonResult(
                topic_a=ComparisonSide(topic=topic_a, summary=response.content),
                topic_b=ComparisonSide(topic=topic_b),
                cost=response.cost,
            )

        return ComparisonResult(
            topic_a=self._parse_side(topic_a, parsed.get("topicA")),
            topic_b=self._parse_side(topic_b, parsed.get("topicB")),
            comparison=validate_string(parsed.get("comparison"), max_length=10000),
            recommendation=validate_string(parsed.get("recommendation"), max_length=10000),
            cost=response.cost,
        )

    @staticmethod
    def _parse_side(topic: str, raw: Any) -> ComparisonSide:
        if not isinstance(raw, dict):
            return ComparisonSide(topic=topic)
        return ComparisonSide(
            topic=topic,
            summary=validate_string(raw.get("summary"), max_length=10000),
            pros=validate_string_list(raw.get("pros")),
            cons=validate_string_list(raw.get("cons")),
        )

    # ============== Quick Helpers ==============

    async def quick_fact_check(self, claim: str) -> FactCheckResult:
        """Assess a claim with the cheapest model; cited sources are verified."""
        response = await self.router.complete(CompletionRequest(
            model=CHEAPEST,
            messages=[
                Message(role="system", content=FACT_CHECK_SYSTEM_PROMPT),
                Message(role="user", content=FACT_CHECK_PROMPT.format(claim=claim)),
            ],
            max_tokens=800,
            temperature=0.2,
        ))

        parsed = extract_json_object(response.content)
        if parsed is None:
            return FactCheckResult(claim=claim, explanation=response.content, cost=response.cost)

        try:
            assessment = FactAssessment(str(parsed.get("assessment", "")).lower())
        except ValueError:
            assessment = FactAssessment.UNCERTAIN

        sources = parse_sources(parsed.get("sources"))
        if sources:
            sources = await self._verify_sources(sources)

        return FactCheckResult(
            claim=claim,
            assessment=assessment,
            explanation=validate_string(parsed.get("explanation"), max_length=5000, default="Unable to assess"),
            sources=sources,
            cost=response.cost,
        )

    async def quick_define(self, term: str) -> DefinitionResult:
        """Concise definition with related terms; cited sources are verified."""
        response = await self.router.complete(CompletionRequest(
            model=CHEAPEST,
            messages=[Message(role="user", content=DEFINE_PROMPT.format(term=term))],
            max_tokens=600,
            temperature=0.3,
        ))

        parsed = extract_json_object(response.content)
        if parsed is None:
            return DefinitionResult(term=term, definition=response.content, cost=response.cost)

        sources = parse_sources(parsed.get("sources"))
        if sources:
            sources = await self._verify_sources(sources)

        return DefinitionResult(
            term=term,
            definition=validate_string(
                parsed.get("definition"), max_length=5000, default="No definition available",
            ),
            related_terms=validate_string_list(parsed.get("relatedTerms")),
            sources=sources,
            cost=response.cost,
        )
