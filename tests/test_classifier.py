"""Tests for classifier.FileClassifier and path helpers."""

from app.services.classifier import FileClassifier, looks_like_partial, normalize_path


class TestNormalizePath:
    def test_strips_leading_slash_and_whitespace(self):
        assert normalize_path("  /about.html ") == "about.html"

    def test_strips_dot_slash(self):
        assert normalize_path("./css/site.css") == "css/site.css"

    def test_converts_backslashes(self):
        assert normalize_path("partials\\header.html") == "partials/header.html"

    def test_empty(self):
        assert normalize_path("   ") == ""


class TestLooksLikePartial:
    def test_partials_directory(self):
        assert looks_like_partial("partials/nav.html")

    def test_header_and_footer_names(self):
        assert looks_like_partial("header.html")
        assert looks_like_partial("components/footer-dark.html")

    def test_regular_page(self):
        assert not looks_like_partial("about.html")


class TestClassify:
    def test_explicit_path_used(self):
        f = FileClassifier().classify("html", "/pages/home.html", "<p/>", 0)
        assert f.path == "pages/home.html"
        assert f.file_type == "page"

    def test_tag_wins_over_extension(self):
        f = FileClassifier().classify("css", "theme.txt", "body{}", 0)
        assert f.language == "css"
        assert f.file_type == "style"

    def test_unknown_tag_falls_back_to_extension(self):
        f = FileClassifier().classify("plaintext", "app.js", "x()", 0)
        assert f.language == "javascript"
        assert f.file_type == "script"

    def test_unknown_tag_and_extension_default_to_html(self):
        f = FileClassifier().classify("", None, "<p>hello</p>", 0)
        assert f.language == "html"
        assert f.path == "index.html"

    def test_tag_aliases(self):
        c = FileClassifier()
        assert c.classify("JS", "a.js", "1", 0).language == "javascript"
        assert c.classify("htm", "b.htm", "<p/>", 1).language == "html"

    def test_default_paths_per_language(self):
        c = FileClassifier()
        assert c.classify("html", None, "<p/>", 0).path == "index.html"
        assert c.classify("css", None, "a{}", 1).path == "styles.css"
        assert c.classify("javascript", None, "1", 2).path == "script.js"

    def test_subsequent_pathless_blocks_are_suffixed(self):
        c = FileClassifier()
        c.classify("css", None, "a{}", 0)
        assert c.classify("css", None, "b{}", 1).path == "style-2.css"
        assert c.classify("css", None, "c{}", 2).path == "style-3.css"

    def test_default_avoids_explicit_path_collision(self):
        c = FileClassifier()
        c.classify("html", "index.html", "<p/>", 0)
        f = c.classify("html", None, "<p/>", 1)
        assert f.path == "page-2.html"

    def test_first_html_is_page_rest_partial(self):
        c = FileClassifier()
        assert c.classify("html", None, "<p/>", 0).file_type == "page"
        assert c.classify("html", None, "<p/>", 1).file_type == "partial"

    def test_second_top_level_page_is_partial(self):
        c = FileClassifier()
        c.classify("html", "index.html", "<p/>", 0)
        assert c.classify("html", "about.html", "<p/>", 1).file_type == "partial"

    def test_named_partial_does_not_take_page_slot(self):
        c = FileClassifier()
        assert c.classify("html", "partials/header.html", "<h/>", 0).file_type == "partial"
        assert c.classify("html", "home.html", "<p/>", 1).file_type == "page"

    def test_root_index_is_always_page(self):
        c = FileClassifier()
        c.classify("html", "landing.html", "<p/>", 0)
        assert c.classify("html", "index.html", "<p/>", 1).file_type == "page"
