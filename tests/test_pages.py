from regulativa.segmenter.pages import PAGE_SEPARATOR, PageIndex, build_page_index, single_page


def test_build_page_index_offsets():
    joined, index = build_page_index(["ab", "cde", ""])
    assert joined == "ab\n\ncde\n\n"
    assert index.offsets == (0, 4, 9)
    assert index.page_count == 3


def test_page_for_offset_boundaries():
    _, index = build_page_index(["ab", "cde", "f"])
    assert index.page_for_offset(0) == 1
    # The separator after a page still belongs to that page.
    assert index.page_for_offset(3) == 1
    assert index.page_for_offset(4) == 2
    assert index.page_for_offset(8) == 2
    assert index.page_for_offset(9) == 3
    assert index.page_for_offset(500) == 3


def test_page_for_offset_is_monotonic():
    _, index = build_page_index(["x" * 10, "y" * 3, "z" * 25, "w"])
    pages = [index.page_for_offset(i) for i in range(60)]
    assert pages == sorted(pages)
    assert pages[0] == 1 and pages[-1] == 4


def test_negative_offset_maps_to_first_page():
    index = PageIndex(offsets=(0, 10))
    assert index.page_for_offset(-1) == 1


def test_single_page_resolver():
    assert single_page(0) == 1
    assert single_page(10_000) == 1
    assert PAGE_SEPARATOR == "\n\n"
