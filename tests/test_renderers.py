from inkwell.renderers import MarkdownRenderer, _generate_heading_id, highlight_css


def test_markdown_structure():
    html = MarkdownRenderer().render(
        "# Title\n\nSome **bold** and *em* with a [link](https://example.com).\n\n"
        "- one\n- two\n\n~~gone~~\n"
    )
    assert '<h1 id="title">Title</h1>' in html
    assert "<strong>bold</strong>" in html
    assert "<em>em</em>" in html
    assert '<a href="https://example.com">link</a>' in html
    assert "<ul>\n<li>one</li>\n<li>two</li>\n</ul>" in html
    assert "<del>gone</del>" in html


def test_duplicate_heading_ids_are_numbered():
    html = MarkdownRenderer().render("## Setup\n\n## Setup\n")
    assert '<h2 id="setup">Setup</h2>' in html
    assert '<h2 id="setup-1">Setup</h2>' in html


def test_heading_ids_reset_between_renders():
    renderer = MarkdownRenderer()
    renderer.render("# Intro\n")
    assert '<h1 id="intro">' in renderer.render("# Intro\n")


def test_code_blocks():
    renderer = MarkdownRenderer()
    plain = renderer("```\nif a < b:\n    pass\n```\n")
    assert "<pre><code>if a &lt; b:" in plain

    unknown = renderer("```nosuchlang\nx <y>\n```\n")
    assert '<pre><code class="language-nosuchlang">x &lt;y&gt;' in unknown

    highlighted = renderer("```python\nprint('hi')\n```\n")
    assert 'class="highlight"' in highlighted


def test_generate_heading_id():
    assert _generate_heading_id("Hello, World!") == "hello-world"
    assert _generate_heading_id("<em>Styled</em> heading") == "styled-heading"


def test_highlight_css():
    assert ".highlight" in highlight_css()
