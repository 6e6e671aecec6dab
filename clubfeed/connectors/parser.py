"""Decoder for the NewListInformation XML envelope."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Dict, List

from clubfeed.errors import ParseError
from clubfeed.models.domain import FeedBatch, NewsItem

ROOT_TAG = "NewListInformation"
ITEMS_PATH = "NewsletterNewsItems/NewsletterNewsItem"

# upstream element -> NewsItem field (string fields only)
_TEXT_FIELDS: Dict[str, str] = {
    "ArticleURL": "article_url",
    "PublishDate": "publish_date",
    "Taxonomies": "taxonomies",
    "TeaserText": "teaser_text",
    "ThumbnailImageURL": "thumbnail_image_url",
    "Title": "title",
    "OptaMatchId": "opta_match_id",
    "LastUpdateDate": "last_update_date",
    "IsPublished": "is_published",
}


def _text(element: ET.Element, tag: str) -> str:
    child = element.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text


def _parse_item(element: ET.Element, position: int) -> NewsItem:
    raw_id = _text(element, "NewsArticleID").strip()
    try:
        article_id = int(raw_id)
    except ValueError as exc:
        raise ParseError(f"item {position}: NewsArticleID {raw_id!r} is not an integer") from exc

    fields = {name: _text(element, tag) for tag, name in _TEXT_FIELDS.items()}
    return NewsItem(news_article_id=article_id, **fields)


def parse_feed(raw: bytes | str) -> FeedBatch:
    """Decode a fetched payload into a FeedBatch, preserving upstream order.

    Raises ParseError for malformed XML, an unexpected root element, or an
    item without an integer NewsArticleID. Missing descriptive elements are
    read as empty strings.
    """
    try:
        root = ET.fromstring(raw)
    except ET.ParseError as exc:
        raise ParseError(f"malformed feed document: {exc}") from exc

    if root.tag != ROOT_TAG:
        raise ParseError(f"expected <{ROOT_TAG}> root element, got <{root.tag}>")

    items: List[NewsItem] = [
        _parse_item(element, position) for position, element in enumerate(root.iterfind(ITEMS_PATH))
    ]
    return FeedBatch(
        club_name=_text(root, "ClubName"),
        club_website_url=_text(root, "ClubWebsiteURL"),
        items=items,
    )
