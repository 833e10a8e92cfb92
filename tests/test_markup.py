from cmdflow.markup import OutputAnnotator, find_file_link, markup_line


def test_file_line_column_becomes_link() -> None:
    line = markup_line("main.go:42:7 undefined: foo", "/home/dev/proj")
    assert line == '<a href="file:///home/dev/proj/main.go#L42C7">main.go:42:7</a> undefined: foo'


def test_link_fields() -> None:
    link = find_file_link("./pkg/util.go:10: missing return", "/p")
    assert link is not None
    assert link.path == "/p/pkg/util.go"
    assert link.line == 10
    assert link.column is None
    assert link.href == "file:///p/pkg/util.go#L10"


def test_absolute_path_is_not_rebased() -> None:
    link = find_file_link("/tmp/x.tex:3: Undefined control sequence", "/p")
    assert link is not None
    assert link.path == "/tmp/x.tex"


def test_second_field_is_considered() -> None:
    line = "ok  \tgithub.com/acme/tool\t0.12s"
    out = markup_line(line, "/p")
    assert out.startswith('ok  \t<a href="file:///p/github.com/acme/tool">github.com/acme/tool</a>\t')
    assert out.endswith("\t0.12s")


def test_only_first_two_fields_are_considered() -> None:
    line = "error in file.go"
    assert markup_line(line, "/p") == line


def test_only_first_candidate_is_rewritten() -> None:
    out = markup_line("a.go b.go", "/p")
    assert out == '<a href="file:///p/a.go">a.go</a> b.go'


def test_plain_lines_pass_through() -> None:
    assert markup_line("", "/p") == ""
    assert markup_line("   ", "/p") == "   "
    assert markup_line("PASS", "/p") == "PASS"


def test_annotator_uses_its_base_dir() -> None:
    annotate = OutputAnnotator("/work")
    assert "file:///work/x.py#L1" in annotate("x.py:1 boom")


def test_link_text_and_href_are_html_escaped() -> None:
    out = markup_line("a&b.go:3 <bad> input", "/p")
    assert out == '<a href="file:///p/a&amp;b.go#L3">a&amp;b.go:3</a> <bad> input'
