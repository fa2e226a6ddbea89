"""
Content metrics for a parsed page: headings, images, links, keyword density,
Flesch reading ease and an additive content-quality score.
"""

import re
from collections import Counter
from typing import List, Tuple
from urllib.parse import urlsplit

from app.features.seo.schemas.seo import (
    ContentMetrics,
    HeadingLevel,
    ImageDescriptor,
    KeywordDensity,
    StructuredDataSet,
)
from app.features.seo.services.markup import HtmlDocument
from app.platform.utils.url_validator import resolve_url

VOWELS = "aeiouy"
SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
MIN_KEYWORD_LENGTH = 4
TOP_KEYWORDS = 10


def heading_structure(doc: HtmlDocument) -> List[HeadingLevel]:
    """Levels 1-6 that occur at least once, with their texts in document order."""
    levels = []
    for level in range(1, 7):
        texts = [node.text() for node in doc.elements(f"h{level}")]
        if texts:
            levels.append(HeadingLevel(level=level, count=len(texts), texts=texts))
    return levels


def extract_images(doc: HtmlDocument, page_url: str) -> List[ImageDescriptor]:
    images = []
    for node in doc.elements("img"):
        src = (node.attribute("src") or "").strip()
        images.append(ImageDescriptor(
            src=resolve_url(page_url, src) if src else None,
            alt=node.attribute("alt"),
            title=node.attribute("title"),
            width=node.attribute("width"),
            height=node.attribute("height"),
            loading=node.attribute("loading"),
            decoding=node.attribute("decoding"),
            has_alt=node.has_attribute("alt"),
        ))
    return images


def classify_links(doc: HtmlDocument, page_url: str) -> Tuple[int, int]:
    """
    Split every ``<a href>`` into (internal, external).

    An href without a host (relative, fragment, mailto:) is internal, as is one
    on the page's own hostname; everything else is external.
    """
    page_host = (urlsplit(page_url).hostname or "").lower()
    internal = external = 0

    for node in doc.query("a[href]"):
        href = (node.attribute("href") or "").strip()
        try:
            host = urlsplit(href).hostname
        except ValueError:
            host = None
        if not host or host.lower() == page_host:
            internal += 1
        else:
            external += 1

    return internal, external


def split_sentences(text: str) -> List[str]:
    return [s for s in SENTENCE_SPLIT_RE.split(text) if s.strip()]


def keyword_density(text: str) -> List[KeywordDensity]:
    """Top ten words longer than three characters, most frequent first."""
    words = [w for w in text.lower().split() if len(w) >= MIN_KEYWORD_LENGTH]
    total = len(words)
    if not total:
        return []

    # Counter keeps first-seen order for equal counts
    counts = Counter(words)
    return [
        KeywordDensity(word=word, count=count, density=round(count / total * 100, 2))
        for word, count in counts.most_common(TOP_KEYWORDS)
    ]


def count_syllables(word: str) -> int:
    word = re.sub(r"[^a-z]", "", word.lower())
    if len(word) <= 3:
        return 1

    count = 0
    previous_vowel = False
    for char in word:
        is_vowel = char in VOWELS
        if is_vowel and not previous_vowel:
            count += 1
        previous_vowel = is_vowel

    if word.endswith("e"):
        count -= 1

    return max(count, 1)


def readability_score(text: str) -> float:
    """Flesch Reading Ease clamped to [0, 100]."""
    words = text.split()
    sentences = split_sentences(text)
    if not words or not sentences:
        return 0.0

    avg_words_per_sentence = len(words) / len(sentences)
    avg_syllables_per_word = sum(count_syllables(w) for w in words) / len(words)

    score = 206.835 - 1.015 * avg_words_per_sentence - 84.6 * avg_syllables_per_word
    return round(min(max(score, 0.0), 100.0), 2)


def content_quality_score(
    word_count: int,
    sentence_count: int,
    heading_count: int,
    image_count: int,
    images_with_alt: int,
    link_count: int,
) -> int:
    score = 0

    if word_count > 300:
        score += 30
    elif word_count > 150:
        score += 20
    elif word_count > 50:
        score += 10

    if sentence_count > 5:
        score += 20

    if heading_count > 0:
        score += 20

    if image_count > 0 and images_with_alt > image_count / 2:
        score += 15

    if link_count > 3:
        score += 15

    return min(score, 100)


def analyze_content(
    doc: HtmlDocument,
    page_url: str,
    structured_data: StructuredDataSet,
) -> ContentMetrics:
    text = doc.text()
    words = text.split()
    sentences = split_sentences(text)

    headings = heading_structure(doc)
    counts = {h.level: h.count for h in headings}
    h1, h2, h3 = counts.get(1, 0), counts.get(2, 0), counts.get(3, 0)

    images = extract_images(doc, page_url)
    images_with_alt = sum(1 for image in images if image.has_alt)

    internal, external = classify_links(doc, page_url)
    link_count = internal + external

    has_structured_data = bool(doc.query('script[type="application/ld+json"]'))

    return ContentMetrics(
        h1_count=h1,
        h2_count=h2,
        h3_count=h3,
        heading_structure=headings,
        image_count=len(images),
        images=images,
        link_count=link_count,
        internal_links=internal,
        external_links=external,
        word_count=len(words),
        sentence_count=len(sentences),
        has_structured_data=has_structured_data,
        structured_data=structured_data,
        keyword_density=keyword_density(text),
        readability_score=readability_score(text),
        content_quality_score=content_quality_score(
            word_count=len(words),
            sentence_count=len(sentences),
            heading_count=h1 + h2 + h3,
            image_count=len(images),
            images_with_alt=images_with_alt,
            link_count=link_count,
        ),
    )
