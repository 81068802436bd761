from foldctx.providers.indent_provider import IndentProvider, leading_indent_columns


def _spans(ranges):
    return sorted((r.start_line, r.end_line) for r in ranges)


def test_leading_indent_counts_spaces():
    assert leading_indent_columns("    x = 1") == 4


def test_leading_indent_counts_tabs_as_tab_size():
    assert leading_indent_columns("\t x", tab_size=4) == 5
    assert leading_indent_columns("\tx", tab_size=8) == 8


def test_leading_indent_of_unindented_line():
    assert leading_indent_columns("x") == 0


def test_simple_block():
    source = """if x:
    a()
    b()
c()
"""
    assert _spans(IndentProvider().provide_ranges(source)) == [(0, 2)]


def test_nested_blocks():
    source = """class Foo:
    def bar(self):
        x = 1
        return x

    def baz(self):
        y = 2
        return y

    name = "foo"
"""
    assert _spans(IndentProvider().provide_ranges(source)) == [(0, 9), (1, 3), (5, 7)]


def test_blank_lines_do_not_end_fold():
    source = "def f():\n    a = 1\n\n    b = 2\nc = 3\n"

    assert _spans(IndentProvider().provide_ranges(source)) == [(0, 3)]


def test_trailing_blank_lines_are_excluded():
    source = "def f():\n    pass\n\n\n"

    assert _spans(IndentProvider().provide_ranges(source)) == [(0, 1)]


def test_flat_text_has_no_folds():
    assert IndentProvider().provide_ranges("a\nb\nc\n") == []


def test_empty_text_has_no_folds():
    assert IndentProvider().provide_ranges("") == []


def test_tab_indentation():
    source = "def f():\n\tif x:\n\t\treturn 1\n\treturn 2\n"

    assert _spans(IndentProvider().provide_ranges(source)) == [(0, 3), (1, 2)]


def test_folds_have_no_kind():
    ranges = IndentProvider().provide_ranges("a:\n  b\n")

    assert all(r.kind is None for r in ranges)


def test_form_feed_line_is_blank_and_one_row():
    provider = IndentProvider()

    assert _spans(provider.provide_ranges("a\n\x0c\n b\nc\n")) == [(0, 2)]
