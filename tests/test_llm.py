from marginalia.domain import ProviderExecutionMode, RewriteInstruction, SummaryInstruction
from marginalia.fake.llm import FakeRewriteGenerator, FakeTopicSummarizer


def test_fake_rewrite_generator_returns_deterministic_output():
    output = FakeRewriteGenerator().rewrite_section(
        RewriteInstruction(
            document_title="Doc",
            section_title="Intro",
            source_anchor="section:0",
            section_text="Alpha beta",
            note_texts=["note"],
        )
    )

    assert output.provider_name == "fake-rewrite"
    assert output.note_count == 1
    assert "Alpha beta" in output.rewritten_text
    assert output.rewritten_text == "[Doc / Intro] Alpha beta || notes: note"
    assert output.strategy == "deterministic-template"


def test_rewrite_without_notes_says_so():
    output = FakeRewriteGenerator().rewrite_section(
        RewriteInstruction(
            document_title="Doc",
            section_title="Intro",
            source_anchor="section:0",
            section_text="Text",
            note_texts=[],
        )
    )
    assert output.rewritten_text.endswith("|| notes: no notes")
    assert output.note_count == 0


def test_rewrite_joins_several_notes():
    output = FakeRewriteGenerator().rewrite_section(
        RewriteInstruction("D", "S", "section:1", "T", ["one", "two"])
    )
    assert output.rewritten_text.endswith("notes: one | two")
    assert output.note_count == 2


def test_fake_topic_summarizer_returns_deterministic_output():
    output = FakeTopicSummarizer().summarize_topic(
        SummaryInstruction(
            topic="Roman history",
            matched_document_ids=["doc-1"],
            context_excerpt="Caesar crossed the Rubicon.",
        )
    )

    assert output.provider_name == "fake-summary"
    assert output.highlights == ["Roman history"]
    assert output.confidence == 1.0
    assert output.summary_text == (
        "Topic: Roman history | Documents: doc-1 | Context: Caesar crossed the Rubicon."
    )


def test_capabilities():
    rewrite = FakeRewriteGenerator().describe_capabilities()
    summary = FakeTopicSummarizer().describe_capabilities()
    assert (rewrite.provider_name, rewrite.interface_kind) == ("fake-rewrite", "rewrite")
    assert (summary.provider_name, summary.interface_kind) == ("fake-summary", "summary")
    assert rewrite.supported_languages == ["it", "en"]
    assert rewrite.offline_capable and not rewrite.low_latency_suitable
    assert summary.execution_mode is ProviderExecutionMode.LOCAL