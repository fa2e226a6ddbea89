from typing import Dict, List, Optional

from app.features.seo.schemas.seo import MetaTag, MetaTagSet, OpenGraphTags, TwitterCardTags
from app.features.seo.services.markup import HtmlDocument
from app.platform.utils.url_validator import resolve_url

OPEN_GRAPH_FIELDS = {
    "og:title": "title",
    "og:description": "description",
    "og:image": "image",
    "og:url": "url",
    "og:type": "type",
    "og:site_name": "site_name",
}

TWITTER_FIELDS = {
    "twitter:card": "card",
    "twitter:title": "title",
    "twitter:description": "description",
    "twitter:image": "image",
    "twitter:site": "site",
    "twitter:creator": "creator",
}

STANDARD_FIELDS = ("description", "keywords", "robots", "viewport", "author")

KNOWN_META_KEYS = set(STANDARD_FIELDS) | set(OPEN_GRAPH_FIELDS) | set(TWITTER_FIELDS)

# Checked in order, first match wins.
FAVICON_RELS = ("icon", "shortcut icon", "apple-touch-icon")


def _meta_key(node) -> Optional[str]:
    for attr in ("name", "property", "http-equiv"):
        value = node.attribute(attr)
        if value and value.strip():
            return value.strip()
    return None


def _collect_meta(doc: HtmlDocument):
    """
    One pass over <meta> tags.

    Returns the first content seen per known key and every other
    key/content pair in document order.
    """
    known: Dict[str, str] = {}
    others: List[MetaTag] = []

    for node in doc.elements("meta"):
        key = _meta_key(node)
        content = node.attribute("content")
        if key is None or content is None:
            continue
        lookup = key.lower()
        if lookup in KNOWN_META_KEYS:
            known.setdefault(lookup, content.strip())
        else:
            others.append(MetaTag(name=key, content=content.strip()))

    return known, others


def _link_href(doc: HtmlDocument, rel: str, page_url: str) -> Optional[str]:
    for node in doc.elements("link"):
        node_rel = (node.attribute("rel") or "").strip().lower()
        href = (node.attribute("href") or "").strip()
        if node_rel == rel and href:
            return resolve_url(page_url, href)
    return None


def _charset(doc: HtmlDocument) -> Optional[str]:
    node = doc.query_one("meta[charset]")
    if node is not None:
        return node.attribute("charset")
    return None


def extract_meta_tags(doc: HtmlDocument, page_url: str) -> MetaTagSet:
    known, others = _collect_meta(doc)

    open_graph = OpenGraphTags(
        **{field: known.get(key) for key, field in OPEN_GRAPH_FIELDS.items()}
    )
    twitter = TwitterCardTags(
        **{field: known.get(key) for key, field in TWITTER_FIELDS.items()}
    )

    favicon = None
    for rel in FAVICON_RELS:
        favicon = _link_href(doc, rel, page_url)
        if favicon:
            break

    return MetaTagSet(
        title=doc.title() or None,
        description=known.get("description"),
        keywords=known.get("keywords"),
        robots=known.get("robots"),
        viewport=known.get("viewport"),
        author=known.get("author"),
        charset=_charset(doc),
        canonical=_link_href(doc, "canonical", page_url),
        favicon=favicon,
        open_graph=open_graph,
        twitter=twitter,
        all_meta_tags=others,
    )
