from __future__ import annotations
from typing import Callable

from querysnoop.core.contracts import Query
from querysnoop.pipeline.simulator import WebSearchModel

LONG_QUERY_CHARS = 60


def mentions_friend(query: Query) -> bool:
    return "friend" in query.lower()


def is_long_query(query: Query) -> bool:
    return len(query) > LONG_QUERY_CHARS


class Snooper:
    """Watches the search queries.

    Prints ``Oh Yes! <query>`` for queries mentioning "friend" (any case) and
    ``So long <query>`` for queries longer than 60 characters.
    """

    def __init__(self, model: WebSearchModel, *, out: Callable[[str], None] = print):
        self.model = model
        self.out = out
        model.add_query_observer(self.on_friend, mentions_friend, name="friend")
        model.add_query_observer(self.on_long, is_long_query, name="long")

    def on_friend(self, query: Query) -> None:
        self.out(f"Oh Yes! {query}")

    def on_long(self, query: Query) -> None:
        self.out(f"So long {query}")
