from seocrawl.services.page_content_extractor import PageContentExtractor

HTML = """
<html>
  <head>
    <title> Example Title </title>
    <meta name="description" content="A short description">
    <meta name="keywords" content="seo, crawl , ,render">
    <meta name="author" content="Jane">
  </head>
  <body>
    <header>Site header</header>
    <nav><a href="/home">Home</a></nav>
    <main>
      <h1 id="top">Welcome</h1>
      <h2>Details</h2>
      <p>First paragraph.</p>
      <p>   </p>
      <a href="/about#team" title="About us">About</a>
      <a href="https://other.com/x">Other</a>
      <a href="mailto:me@example.com">Mail</a>
      <a href="javascript:void(0)">JS</a>
      <img src="/img/logo.png" alt="Logo">
      <img alt="no source">
      <ul><li>one</li><li>two</li></ul>
      <table><tr><th>k</th><th>v</th></tr><tr><td>a</td><td>1</td></tr></table>
      <form action="/search" method="POST"><input name="q" type="text"><button type="submit">Go</button></form>
    </main>
    <footer>Site footer</footer>
  </body>
</html>
"""


def _extract():
    return PageContentExtractor().extract("https://example.com/page", HTML)


def test_extracts_metadata():
    page = _extract()
    assert page.url == "https://example.com/page"
    assert page.raw_markup == HTML
    assert page.title == "Example Title"
    assert page.meta_description == "A short description"
    assert page.author == "Jane"
    assert page.keywords == ["seo", "crawl", "render"]


def test_explicit_title_wins():
    page = PageContentExtractor().extract("https://example.com/", HTML, title="Rendered Title")
    assert page.title == "Rendered Title"


def test_links_are_absolute_and_skip_non_http():
    page = _extract()
    assert page.link_urls() == [
        "https://example.com/home",
        "https://example.com/about#team",
        "https://other.com/x",
    ]
    about = page.links[1]
    assert about["text"] == "About"
    assert about["title"] == "About us"


def test_headings_paragraphs_and_images():
    page = _extract()
    assert page.headings == [
        {"level": "h1", "text": "Welcome", "id": "top"},
        {"level": "h2", "text": "Details", "id": None},
    ]
    assert page.paragraphs == ["First paragraph."]
    assert page.images == [{"src": "https://example.com/img/logo.png", "alt": "Logo", "title": None}]


def test_structural_blocks():
    page = _extract()
    assert page.lists == [["one", "two"]]
    assert page.tables == [[["k", "v"], ["a", "1"]]]
    assert page.header == ["Site header"]
    assert page.footer == ["Site footer"]
    assert page.navigation == ["Home"]
    assert len(page.main) == 1
    assert page.forms == [
        {
            "action": "https://example.com/search",
            "method": "post",
            "fields": [
                {"tag": "input", "name": "q", "type": "text"},
                {"tag": "button", "name": None, "type": "submit"},
            ],
        }
    ]
    assert "First paragraph." in page.text_content[0]


def test_empty_document_yields_empty_sequences():
    page = PageContentExtractor().extract("https://example.com/", "<html></html>")
    assert page.title is None
    assert page.links == []
    assert page.headings == []
    assert page.keywords == []
