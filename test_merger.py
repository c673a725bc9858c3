#!/usr/bin/env python3
"""
Chapter merging and image-path normalization without network.
"""

import pytest

from adocbook.core.contents_client import RemoteFile
from adocbook.core.errors import RemoteFetchError
from adocbook.core.fetcher import AssetFetcher
from adocbook.core.merger import ChapterMerger, normalize_image_paths, join_documents

from conftest import FakeSession, RAW


@pytest.mark.unit
def test_image_prefix_stripped_and_alt_preserved():
    text = "Intro\n\nimage::images/foo.png[Alt text]\n"
    rewritten = normalize_image_paths(text)
    assert "image::foo.png[Alt text]" in rewritten
    assert "image::images/" not in rewritten


@pytest.mark.unit
def test_only_leading_images_segment_removed():
    text = 'image::images/sub/images/bar.svg["Figure, with comma",width=400]'
    assert normalize_image_paths(text) == 'image::sub/images/bar.svg["Figure, with comma",width=400]'


@pytest.mark.unit
def test_paths_without_prefix_untouched():
    text = "image::diagrams/flow.png[]\nimage::logo.png[Logo]"
    assert normalize_image_paths(text) == text


@pytest.mark.unit
def test_multiple_directives_on_one_line():
    text = "image::images/a.png[A] and image::images/b.png[B]"
    assert normalize_image_paths(text) == "image::a.png[A] and image::b.png[B]"


@pytest.mark.unit
def test_join_documents_blank_line_separator():
    assert join_documents(["one", "two", "three"]) == "one\n\ntwo\n\nthree"
    assert join_documents([]) == ""


def _merger(routes, failures=None):
    fetcher = AssetFetcher(timeout=10, session=FakeSession(routes, failures))
    return ChapterMerger(fetcher, max_workers=3)


@pytest.mark.unit
def test_merge_keeps_input_order():
    names = [f"ch{i:02d}.adoc" for i in range(1, 6)]
    routes = {f"{RAW}/{n}": f"= Chapter {n}" for n in names}
    chapters = [RemoteFile(n, f"{RAW}/{n}") for n in names]

    merged = _merger(routes).merge(chapters)

    parts = merged.split("\n\n")
    assert len(parts) == len(names)
    assert parts == [f"= Chapter {n}" for n in names]


@pytest.mark.unit
def test_merge_rewrites_every_chapter():
    routes = {
        f"{RAW}/ch01.adoc": "image::images/one.png[First]",
        f"{RAW}/ch02.adoc": "image::images/two.png[Second]",
    }
    chapters = [RemoteFile("ch01.adoc", f"{RAW}/ch01.adoc"), RemoteFile("ch02.adoc", f"{RAW}/ch02.adoc")]
    assert _merger(routes).merge(chapters) == "image::one.png[First]\n\nimage::two.png[Second]"


@pytest.mark.unit
def test_merge_of_no_chapters_is_empty():
    assert _merger({}).merge([]) == ""


@pytest.mark.unit
def test_one_failed_chapter_fails_the_merge():
    routes = {f"{RAW}/ch01.adoc": "= One"}
    chapters = [RemoteFile("ch01.adoc", f"{RAW}/ch01.adoc"), RemoteFile("ch02.adoc", f"{RAW}/ch02.adoc")]
    with pytest.raises(RemoteFetchError) as exc:
        _merger(routes).merge(chapters)
    assert exc.value.status_code == 404

