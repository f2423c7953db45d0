import pytest
import responses

from marginalia.domain import EmptyContentError, ReadFailedError
from marginalia.url_import import UrlDocumentImporter

ARTICLE_HTML = """
<html><head><title>Rivers of the North | Example News</title></head>
<body>
  <nav><ul><li>Home page link for the whole site</li></ul></nav>
  <article>
    <h1>Rivers of the North</h1>
    <p>The northern rivers carry meltwater through wide valleys every spring.</p>
    <p>tiny</p>
    <p>Fishermen along the banks have recorded the changes for generations.</p>
  </article>
  <footer><p>Copyright notice text that should not be read aloud.</p></footer>
</body></html>
"""


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


def test_rejects_non_http_scheme():
    with pytest.raises(ReadFailedError) as info:
        UrlDocumentImporter().import_url("file:///etc/passwd")
    assert "unsupported scheme" in info.value.message


def test_rejects_invalid_url():
    with pytest.raises(ReadFailedError) as info:
        UrlDocumentImporter().import_url("not a url")
    assert "invalid URL" in info.value.message


def test_imports_article_paragraphs(mocked):
    url = "https://news.example.com/rivers"
    mocked.add(responses.GET, url, body=ARTICLE_HTML, content_type="text/html; charset=utf-8")

    imported = UrlDocumentImporter().import_url(url)

    assert imported.title == "Rivers of the North"
    assert imported.source_path == url
    assert len(imported.sections) == 1
    section = imported.sections[0]
    assert section.title == "Rivers of the North"
    assert section.source_anchor == f"url:{url}"
    assert section.paragraphs == [
        "Rivers of the North",
        "The northern rivers carry meltwater through wide valleys every spring.",
        "Fishermen along the banks have recorded the changes for generations.",
    ]


def test_title_falls_back_to_host(mocked):
    url = "https://news.example.com/untitled"
    html = "<html><body><p>An article body without any page title at all.</p></body></html>"
    mocked.add(responses.GET, url, body=html, content_type="text/html")

    imported = UrlDocumentImporter().import_url(url)

    assert imported.title == "news.example.com"
    assert imported.sections[0].title == "news.example.com"
    assert imported.sections[0].paragraphs == ["An article body without any page title at all."]


def test_follows_redirects_and_keeps_final_url(mocked):
    short = "https://short.example.com/a"
    final = "https://news.example.com/story"
    mocked.add(responses.GET, short, status=301, headers={"Location": final})
    mocked.add(responses.GET, final, body=ARTICLE_HTML, content_type="text/html")

    imported = UrlDocumentImporter().import_url(short)

    assert imported.source_path == final
    assert imported.sections[0].source_anchor == f"url:{final}"


def test_error_status_is_read_failure(mocked):
    url = "https://news.example.com/missing"
    mocked.add(responses.GET, url, status=404, body="gone")

    with pytest.raises(ReadFailedError) as info:
        UrlDocumentImporter().import_url(url)
    assert "status code 404" in info.value.message
    assert info.value.source_path == url


def test_non_success_status_is_read_failure(mocked):
    url = "https://news.example.com/cached"
    mocked.add(responses.GET, url, status=304)

    with pytest.raises(ReadFailedError) as info:
        UrlDocumentImporter().import_url(url)
    assert info.value.message.startswith("HTTP 304")


def test_empty_page_is_empty_content(mocked):
    url = "https://news.example.com/blank"
    mocked.add(responses.GET, url, body="<html><body></body></html>", content_type="text/html")

    with pytest.raises(EmptyContentError) as info:
        UrlDocumentImporter().import_url(url)
    assert info.value == EmptyContentError(url)


def test_connection_error_is_read_failure(mocked):
    url = "https://unreachable.example.com/"
    with pytest.raises(ReadFailedError) as info:
        UrlDocumentImporter().import_url(url)
    assert "HTTP request failed" in info.value.message