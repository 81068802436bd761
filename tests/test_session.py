from unittest.mock import Mock

import pytest

from foldctx.cache import FoldTreeCache
from foldctx.config import ContextConfig
from foldctx.fold_tree import build_fold_tree
from foldctx.models import ContextLine, FoldRange, InvalidRangeError
from foldctx.providers import IndentProvider, PythonProvider
from foldctx.session import FoldContextSession, FoldDocument

SOURCE = """class Foo:
    def bar(self):
        x = 1
        return x

    def baz(self):
        y = 2
        return y

    name = "foo"
"""

# Three folds nested with distinct end lines: (0,5) > (1,4) > (2,3)
NESTED = "a\n b\n  c\n   d\n  e\n f\ng\n"


@pytest.fixture
def builder():
    return Mock(side_effect=build_fold_tree)


@pytest.fixture
def session(builder):
    return FoldContextSession(cache=FoldTreeCache(builder=builder))


def test_attach_discovers_ranges(session):
    document = session.attach("foo.py", SOURCE)

    assert document.version == 1
    assert document.line_count == 10
    assert sorted((r.start_line, r.end_line) for r in document.ranges) == [(0, 9), (1, 3), (5, 7)]
    assert "foo.py" in session


def test_context_inside_method(session):
    session.attach("foo.py", SOURCE)

    assert session.context("foo.py", 7) == [
        ContextLine(lnum=1, text="class Foo:"),
        ContextLine(lnum=2, text="    def bar(self):"),
        ContextLine(lnum=6, text="    def baz(self):"),
    ]


def test_context_outside_folds_is_empty(session):
    session.attach("foo.py", "x = 1\ny = 2\n")

    assert session.context("foo.py", 2) == []


def test_context_for_unattached_document_is_empty(session):
    assert session.context("missing.py", 3) == []


def test_context_uses_configured_max_lines(builder):
    session = FoldContextSession(
        cache=FoldTreeCache(builder=builder),
        config=ContextConfig(max_lines=0),
    )
    session.attach("doc", NESTED)

    # Innermost fold plus one ancestor level, then the walk stops
    assert [line.lnum for line in session.context("doc", 4)] == [2, 3]


def test_explicit_max_lines_overrides_config(session):
    session.attach("doc", NESTED)

    assert [line.lnum for line in session.context("doc", 4, max_lines=10)] == [1, 2, 3]


def test_repeated_queries_reuse_tree(session, builder):
    session.attach("foo.py", SOURCE)

    session.context("foo.py", 7)
    session.context("foo.py", 3)

    assert builder.call_count == 1


def test_update_bumps_version_and_rebuilds(session, builder):
    session.attach("foo.py", SOURCE)
    first = session.tree("foo.py")

    document = session.update("foo.py", "def f():\n    pass\n")
    second = session.tree("foo.py")

    assert document.version == 2
    assert second is not first
    assert builder.call_count == 2
    assert [child.span for child in second.root.children] == [(0, 1)]


def test_apply_ranges_bumps_version(session):
    session.attach("doc", "a\nb\nc\nd\n")

    document = session.apply_ranges("doc", [FoldRange(start_line=0, end_line=3)])

    assert document.version == 2
    assert [child.span for child in session.tree("doc").root.children] == [(0, 3)]


def test_apply_invalid_ranges_raises_on_query(session):
    session.attach("doc", "a\nb\n")
    session.apply_ranges("doc", [FoldRange(start_line=1, end_line=0)])

    with pytest.raises(InvalidRangeError):
        session.context("doc", 1)


def test_detach_drops_document_and_cache(session):
    session.attach("foo.py", SOURCE)
    session.tree("foo.py")

    session.detach("foo.py")

    assert "foo.py" not in session
    assert "foo.py" not in session.cache
    assert session.context("foo.py", 7) == []


def test_detach_unknown_document_is_noop(session):
    session.detach("missing.py")


def test_reload_rebuilds_even_at_same_version(session, builder):
    session.attach("foo.py", SOURCE)
    first = session.tree("foo.py")

    document = session.reload("foo.py", "a\n b\n")
    second = session.tree("foo.py")

    assert document.version == 1
    assert second is not first
    assert second.line_count == 2
    assert builder.call_count == 2


def test_reload_keeps_provider(session):
    provider = IndentProvider(tab_size=2)
    session.attach("doc", "a\n\tb\n", provider=provider)

    document = session.reload("doc", "a\n b\n")

    assert document.provider is provider


def test_reattach_drops_cached_tree(session):
    session.attach("foo.py", SOURCE)
    session.tree("foo.py")

    session.attach("foo.py", "x = 1\n")

    assert "foo.py" not in session.cache


@pytest.mark.parametrize("method, args", [
    ("update", ("text",)),
    ("apply_ranges", ([],)),
    ("reload", ("text",)),
    ("tree", ()),
])
def test_mutating_unknown_document_raises(session, method, args):
    with pytest.raises(KeyError, match="not attached"):
        getattr(session, method)("missing.py", *args)


def test_document_line_lookup():
    document = FoldDocument(
        document_id="doc",
        lines=["first", "second"],
        provider=IndentProvider(),
    )

    assert document.line(1) == "first"
    assert document.line(2) == "second"
    assert document.line(0) is None
    assert document.line(3) is None


def test_form_feed_does_not_shift_context_lines(session):
    text = 'import os\n\x0c\nclass Foo:\n    def bar(self):\n        x = 1\n        return x\n\n    name = "foo"\n'

    document = session.attach("doc.py", text, provider=PythonProvider())

    assert document.line_count == 8
    assert session.context("doc.py", 5) == [
        ContextLine(lnum=3, text="class Foo:"),
        ContextLine(lnum=4, text="    def bar(self):"),
    ]


def test_update_splits_lines_on_newline_only(session):
    session.attach("doc.txt", "a\n")

    document = session.update("doc.txt", "a b\r\n c\rd\n")

    assert document.lines == ["a b", " c\rd"]
