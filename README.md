# marginalia

Building blocks for a voice-driven reading engine. The package turns documents into
sections and paragraphs that are ready for speech synthesis. It also includes a set of
deterministic in-memory providers for testing.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Importing documents

Every importer returns an `ImportedDocument`, which has a `title`, a `source_path` and a
list of `ImportedSection` objects. Each section has a `title`, its `paragraphs` and an
optional `source_anchor`.

When an import fails, the importer raises a `DocumentImportError` subclass:

- `ReadFailedError`
- `EmptyContentError`
- `UnsupportedFormatError`

### Plain text and Markdown

```python
from marginalia.text_import import TextDocumentImporter

doc = TextDocumentImporter().import_path("notes.md")
for section in doc.sections:
    print(section.title, section.paragraphs)
```

Supported extensions are `.txt`, `.md` and `.markdown`.

- In plain text, lines that start with `#` begin a new section.
- In Markdown, headings begin sections, and code blocks are left out.

### EPUB

```python
from marginalia.epub_import import EpubDocumentImporter

book = EpubDocumentImporter().import_path("book.epub")
```

Sections follow the spine (reading order). Titles come from the table of contents;
a chapter with no entry there is titled `Chapter N`.

### Web articles

```python
from marginalia.url_import import UrlDocumentImporter

article = UrlDocumentImporter().import_url("https://example.com/article")
```

Only `http` and `https` URLs are accepted. Redirects are followed, and the final URL
is kept as the document's source.

### PDF page text

`marginalia.pdf_text.extract_paragraphs(raw)` cleans the raw text of one page:

- it rejoins words split by hyphenated line breaks;
- it drops short fragments;
- it splits long paragraphs at sentence boundaries with `split_at_sentences`, so that
  each piece stays within a synthesis-friendly length.

## Fake providers

The `marginalia.fake` package contains deterministic stand-ins:

- `FakeSpeechSynthesizer` writes short silent WAV files.
- `FakePlaybackEngine`
- `FakeCommandRecognizer` and `FakeDictationTranscriber`
- `FakeRewriteGenerator` and `FakeTopicSummarizer`
- `RecordingEventPublisher`
- In-memory repositories for documents, sessions, notes and rewrite drafts.

```python
from marginalia.domain import SynthesisRequest
from marginalia.fake.tts import FakeSpeechSynthesizer

result = FakeSpeechSynthesizer().synthesize(
    SynthesisRequest(text="Alpha beta gamma", voice=None, language="it")
)
print(result.audio_reference)
```

## Running the tests

```
pytest
```