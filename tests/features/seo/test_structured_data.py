from app.features.seo.services.markup import parse_html
from app.features.seo.services.structured_data import extract_structured_data


def _ld(payload: str) -> str:
    return f'<script type="application/ld+json">{payload}</script>'


def test_blocks_kept_in_document_order(sample_html):
    data = extract_structured_data(parse_html(sample_html))

    assert len(data.items) == 2
    assert data.items[0]["@type"] == "Organization"
    assert "@graph" in data.items[1]


def test_graph_types_are_collected_without_duplicates(sample_html):
    data = extract_structured_data(parse_html(sample_html))

    assert sorted(data.types) == ["Organization", "WebSite"]
    assert len(data.types) == len(set(data.types))


def test_malformed_block_is_skipped_and_recorded(sample_html):
    data = extract_structured_data(parse_html(sample_html))

    assert len(data.errors) == 1
    assert data.errors[0].index == 2


def test_list_valued_type():
    data = extract_structured_data(parse_html(_ld('{"@type": ["Product", "Thing"]}')))
    assert sorted(data.types) == ["Product", "Thing"]


def test_top_level_type_wins_over_graph():
    data = extract_structured_data(
        parse_html(_ld('{"@type": "WebPage", "@graph": [{"@type": "Person"}]}'))
    )
    assert data.types == ["WebPage"]


def test_top_level_array_block():
    data = extract_structured_data(parse_html(_ld('[{"@type": "Event"}, {"@type": "Place"}]')))
    assert sorted(data.types) == ["Event", "Place"]


def test_no_blocks():
    data = extract_structured_data(parse_html("<p>plain</p>"))
    assert data.items == []
    assert data.types == []
    assert data.errors == []
