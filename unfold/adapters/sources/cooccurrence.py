"""Graph source adapter: keyword co-occurrence across articles.

Input is a JSON array of articles::

    [{"connected_keywords": [{"word_title": "Economy"}, {"word_title": "Tax"}]}, ...]

Every distinct keyword becomes a node (ids in order of first appearance,
value = the keyword).  Two keywords appearing in the same article are
linked; the edge weight is the number of articles they share.  A stop-word
keyword, present in nearly every article, is left out entirely.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import numpy as np

from unfold.domain.errors import DataSourceError
from unfold.domain.graph import Graph, Node
from unfold.ports.graph_source import GraphSourcePort

log = logging.getLogger(__name__)

DEFAULT_STOP_WORD = "Politique"


def article_keywords(article: Any) -> list[str]:
    """Return the keyword titles of one article, in listed order."""
    if not isinstance(article, dict):
        raise DataSourceError(f"Article must be an object, got {type(article).__name__}")
    keywords = article.get("connected_keywords", [])
    if not isinstance(keywords, list):
        raise DataSourceError("'connected_keywords' must be a list")

    titles: list[str] = []
    for word in keywords:
        if not isinstance(word, dict) or "word_title" not in word:
            raise DataSourceError(f"Keyword entry without 'word_title': {word!r}")
        titles.append(str(word["word_title"]))
    return titles


def build_cooccurrence_graph(
    articles: list[Any],
    stop_word: str | None = DEFAULT_STOP_WORD,
) -> Graph:
    """Build the keyword co-occurrence graph of *articles*."""
    per_article = [
        [t for t in article_keywords(a) if t != stop_word]
        for a in articles
    ]

    keyword_ids: dict[str, int] = {}
    for titles in per_article:
        for title in titles:
            if title not in keyword_ids:
                keyword_ids[title] = len(keyword_ids)

    graph = Graph()
    for title, kid in keyword_ids.items():
        node = graph.add_node(Node(kid, title))
        graph.add_community().add_node(node)

    n = len(keyword_ids)
    counts = np.zeros((n, n), dtype=np.int64)
    for titles in per_article:
        # a keyword listed twice still counts once per article
        ids = list(dict.fromkeys(keyword_ids[t] for t in titles))
        for i in range(len(ids)):
            for j in range(i + 1, len(ids)):
                a, b = ids[i], ids[j]
                counts[min(a, b), max(a, b)] += 1

    for a, b in zip(*np.nonzero(np.triu(counts, k=1))):
        graph.add_edge(graph.nodes[int(a)], graph.nodes[int(b)], int(counts[a, b]))

    log.info(
        "Co-occurrence graph: %d keywords from %d articles, total weight %s",
        n, len(articles), graph.total_weight,
    )
    return graph


class CooccurrenceSource(GraphSourcePort):
    """Read articles from a JSON file and link co-occurring keywords."""

    def __init__(self, path: str | Path, stop_word: str | None = DEFAULT_STOP_WORD) -> None:
        self._path = Path(path)
        self._stop_word = stop_word

    def load(self) -> Graph:
        return build_cooccurrence_graph(self.read_articles(), stop_word=self._stop_word)

    def read_articles(self) -> list[Any]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DataSourceError(f"Cannot read articles {self._path}: {exc}") from exc

        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise DataSourceError(f"Cannot parse articles {self._path}: {exc}") from exc

        if not isinstance(data, list):
            raise DataSourceError(f"{self._path}: expected a JSON array of articles")
        return data
