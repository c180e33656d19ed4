import logging
from dataclasses import dataclass
from functools import reduce
from operator import or_
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from django.db import models
from django.db.models import Q
from django.utils.html import strip_tags
from django.utils.text import Truncator

from ..models import Airdrop, Article, Category, Event, Presale

logger = logging.getLogger(__name__)

RESULTS_PER_TYPE = 10
EXCERPT_LENGTH = 150


@dataclass(frozen=True)
class Searchable:
    model: Type[models.Model]
    fields: Tuple[str, ...]
    scope: Optional[Callable[[models.QuerySet], models.QuerySet]] = None

    def queryset(self):
        queryset = self.model.objects.all()
        return self.scope(queryset) if self.scope else queryset


SEARCHABLE = {
    "articles": Searchable(Article, ("title", "content", "excerpt"), lambda qs: qs.published()),
    "airdrops": Searchable(Airdrop, ("name", "description")),
    "presales": Searchable(Presale, ("name", "description")),
    "events": Searchable(Event, ("title", "description")),
    "categories": Searchable(Category, ("name", "description")),
}


def excerpt_for(item) -> str:
    if getattr(item, "excerpt", ""):
        return item.excerpt
    for field in ("description", "content"):
        text = getattr(item, field, "")
        if text:
            return Truncator(strip_tags(text)).chars(EXCERPT_LENGTH)
    return ""


class SearchService:
    """Case-insensitive substring search across the public content types."""

    @staticmethod
    def search(query: str, type: str = "all") -> List[Dict[str, Any]]:
        query = (query or "").strip()
        if not query:
            return []

        if type == "all":
            targets = list(SEARCHABLE.items())
        elif type in SEARCHABLE:
            targets = [(type, SEARCHABLE[type])]
        else:
            logger.info(f"Search for '{query}' with unknown type '{type}'")
            return []

        results = []
        for name, searchable in targets:
            results.extend(SearchService.search_type(name, searchable, query))
        results.sort(key=lambda result: result["created_at"], reverse=True)
        logger.info(f"Search for '{query}' (type={type}) returned {len(results)} result(s)")
        return results

    @staticmethod
    def search_type(name: str, searchable: Searchable, query: str) -> List[Dict[str, Any]]:
        condition = reduce(or_, (Q(**{f"{field}__icontains": query}) for field in searchable.fields))
        items = searchable.queryset().filter(condition).order_by("-created_at")[:RESULTS_PER_TYPE]
        return [
            {
                "id": item.pk,
                "title": getattr(item, "title", None) or getattr(item, "name", ""),
                "type": name,
                "url": item.get_absolute_url(),
                "excerpt": excerpt_for(item),
                "created_at": item.created_at.isoformat(),
            }
            for item in items
        ]
