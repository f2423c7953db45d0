"""Deterministic rewrite and summary providers."""

from __future__ import annotations

from ..domain import (
    ProviderCapabilities,
    ProviderExecutionMode,
    RewriteInstruction,
    RewriteOutput,
    SummaryInstruction,
    SummaryOutput,
)


def _capabilities(provider_name: str, interface_kind: str) -> ProviderCapabilities:
    return ProviderCapabilities(
        provider_name=provider_name,
        interface_kind=interface_kind,
        supported_languages=["it", "en"],
        supports_streaming=False,
        supports_partial_results=False,
        supports_timestamps=False,
        low_latency_suitable=False,
        offline_capable=True,
        execution_mode=ProviderExecutionMode.LOCAL,
    )


class FakeRewriteGenerator:
    """Rewrites a section by filling a fixed template."""

    def describe_capabilities(self) -> ProviderCapabilities:
        return _capabilities("fake-rewrite", "rewrite")

    def rewrite_section(self, instruction: RewriteInstruction) -> RewriteOutput:
        notes = " | ".join(instruction.note_texts) if instruction.note_texts else "no notes"
        return RewriteOutput(
            provider_name="fake-rewrite",
            rewritten_text=(
                f"[{instruction.document_title} / {instruction.section_title}] "
                f"{instruction.section_text} || notes: {notes}"
            ),
            strategy="deterministic-template",
            note_count=len(instruction.note_texts),
        )


class FakeTopicSummarizer:
    """Summarizes a topic by filling a fixed template."""

    def describe_capabilities(self) -> ProviderCapabilities:
        return _capabilities("fake-summary", "summary")

    def summarize_topic(self, instruction: SummaryInstruction) -> SummaryOutput:
        return SummaryOutput(
            provider_name="fake-summary",
            summary_text=(
                f"Topic: {instruction.topic} | "
                f"Documents: {','.join(instruction.matched_document_ids)} | "
                f"Context: {instruction.context_excerpt}"
            ),
            highlights=[instruction.topic],
            confidence=1.0,
        )