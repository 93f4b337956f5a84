from prod_compare.ingest.sources import looks_like_html, read_source


def test_dispatch_by_extension(html_factory):
    html = html_factory(["A", "B", "C"], [["1", "2", "3"]]).encode()
    assert read_source(html, "report.HTML").headers == ("A", "B", "C")


def test_html_with_xls_extension_sniffed(html_factory):
    html = html_factory(["A", "B", "C"], [["1", "2", "3"]]).encode()
    assert looks_like_html(html)
    assert len(read_source(html, "report.xls")) == 1


def test_workbook_dispatch(xlsx_factory):
    data = xlsx_factory([["A", "B"], ["1", "2"]])
    assert not looks_like_html(data)
    assert read_source(data, "plan.xlsx").rows[0] == {"A": "1", "B": "2"}
