"""Tests for parser.parse_output, write_parsed_output, strip_code_fence and the fallback page."""

from app.models.project_file import ParsedOutput
from app.services.parser import (
    generate_fallback_html,
    parse_output,
    save_parsed_output,
    strip_code_fence,
    write_parsed_output,
)
from app.services.store import InMemoryProjectStore

_MULTI_FILE_OUTPUT = """
Here is your site:

```html:index.html
<!DOCTYPE html>
<html><body><h1>Home</h1></body></html>
```

```css:styles.css
body { background: white; }
```

```javascript:script.js
alert('hello');
```

```html:partials/header.html
<nav>Logo</nav>
```
"""


class TestParseOutput:
    def test_mixed_blocks_with_paths(self):
        files = parse_output(_MULTI_FILE_OUTPUT)
        assert [f.path for f in files] == [
            "index.html",
            "styles.css",
            "script.js",
            "partials/header.html",
        ]
        by_path = {f.path: f for f in files}
        assert by_path["index.html"].file_type == "page"
        assert by_path["styles.css"].language == "css"
        assert by_path["styles.css"].file_type == "style"
        assert by_path["script.js"].file_type == "script"
        assert by_path["partials/header.html"].file_type == "partial"

    def test_n_distinct_paths_yield_n_files_in_order(self):
        paths = [f"p{i}.html" for i in range(6)]
        raw = "\n".join(f"```html:{p}\n<p>{p}</p>\n```" for p in paths)
        assert [f.path for f in parse_output(raw)] == paths

    def test_missing_path_defaults_to_index_page(self):
        files = parse_output("```html\n<h1>No path</h1>\n```")
        assert files[0].path == "index.html"
        assert files[0].file_type == "page"

    def test_second_pathless_html_is_partial(self):
        files = parse_output("```html\n<h1>One</h1>\n```\n```html\n<h2>Two</h2>\n```")
        assert [f.file_type for f in files] == ["page", "partial"]
        assert files[1].path != files[0].path

    def test_content_is_trimmed(self):
        (f,) = parse_output("```css:a.css\n\n   body {}  \n\n```")
        assert f.content == "body {}"

    def test_empty_blocks_skipped(self):
        files = parse_output("```html:empty.html\n   \n```\n```html:index.html\n<p>x</p>\n```")
        assert [f.path for f in files] == ["index.html"]

    def test_duplicate_path_first_wins(self):
        files = parse_output("```html:index.html\n<p>1</p>\n```\n```html:index.html\n<p>2</p>\n```")
        assert len(files) == 1
        assert files[0].content == "<p>1</p>"

    def test_no_fences_yields_empty(self):
        assert parse_output("I could not generate anything.") == []
        assert parse_output("") == []

    def test_malformed_input_does_not_raise(self):
        assert parse_output("```html:index.html\n<p>unterminated") == []

    def test_deterministic(self):
        assert parse_output(_MULTI_FILE_OUTPUT) == parse_output(_MULTI_FILE_OUTPUT)


class TestSaveParsedOutput:
    def test_saves_all_files(self):
        store = InMemoryProjectStore()
        saved = save_parsed_output(store, "demo", _MULTI_FILE_OUTPUT)
        assert saved == ["index.html", "styles.css", "script.js", "partials/header.html"]
        assert store.get_file("demo", "styles.css").content == "body { background: white; }"

    def test_nothing_parsed_saves_nothing(self):
        store = InMemoryProjectStore()
        assert save_parsed_output(store, "demo", "no code here") == []
        assert store.get_files("demo") == []


class TestWriteParsedOutput:
    def test_writes_nested_files(self, tmp_path):
        saved = write_parsed_output(_MULTI_FILE_OUTPUT, tmp_path)
        assert "partials/header.html" in saved
        assert (tmp_path / "partials" / "header.html").read_text(encoding="utf-8") == "<nav>Logo</nav>"

    def test_skips_parent_traversal(self, tmp_path):
        out = tmp_path / "site"
        out.mkdir()
        saved = write_parsed_output("```html:../evil.html\n<p>x</p>\n```", out)
        assert "../evil.html" not in saved
        assert not (tmp_path / "evil.html").exists()

    def test_last_html_becomes_index_when_missing(self, tmp_path):
        raw = "```html:home.html\n<p>first</p>\n```\n```html:about.html\n<p>last</p>\n```"
        saved = write_parsed_output(raw, tmp_path)
        assert saved[-1] == "index.html"
        assert (tmp_path / "index.html").read_text(encoding="utf-8") == "<p>last</p>"


class TestStripCodeFence:
    def test_extracts_first_block(self):
        assert strip_code_fence("Sure!\n```html:index.html\n<p>x</p>\n```\nBye") == "<p>x</p>"

    def test_strips_stray_fences(self):
        assert strip_code_fence("```html\n<p>x</p>") == "<p>x</p>"

    def test_plain_text_unchanged(self):
        assert strip_code_fence("  <p>x</p> ") == "<p>x</p>"

    def test_empty(self):
        assert strip_code_fence("") == ""


class TestGenerateFallbackHtml:
    def test_escapes_description(self):
        html = generate_fallback_html("<Bad & stuff>", "job-1")
        assert "&lt;Bad &amp; stuff&gt;" in html
        assert "<Bad & stuff>" not in html

    def test_title_contains_job_id(self):
        html = generate_fallback_html("A bakery", "job-1")
        assert "<title>Site job-1</title>" in html

    def test_escapes_job_id(self):
        html = generate_fallback_html("x", "<script>")
        assert "<title>Site &lt;script&gt;</title>" in html

    def test_is_complete_document(self):
        html = generate_fallback_html("x", "1")
        assert html.startswith("<!DOCTYPE html>")
        assert "</html>" in html


class TestParsedOutput:
    def test_paths_in_order(self):
        parsed = ParsedOutput(files=parse_output(_MULTI_FILE_OUTPUT))
        assert parsed.paths[0] == "index.html"
        assert len(parsed.paths) == 4
