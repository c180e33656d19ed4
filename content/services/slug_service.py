"""
Slug assignment for content models.

Models opt in with :func:`register_sluggable`, which connects a ``pre_save``
receiver for that model. On create an empty slug is derived from the source
field(s); on update the slug is re-derived only when a source field changed
and the slug field did not. "Changed" is measured against the stored row,
read back through the store just before the write, so instances that were
reloaded or modified elsewhere are compared with what is actually persisted.

Uniqueness is checked with one existence query per candidate and no locking.
Two concurrent writes from the same source can both see a candidate as free;
the ``unique=True`` constraint on the slug column rejects the second one with
``IntegrityError``, which is left to propagate.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Protocol, Sequence, Tuple, Type, Union

from django.conf import settings
from django.db import models
from django.db.models.signals import pre_save

from ..exceptions import SlugGenerationError
from ..utils import slugify_source, with_suffix

logger = logging.getLogger(__name__)

_UNSET = object()


class SlugStore(Protocol):
    def exists(self, field: str, value: str, exclude_pk: Any = None) -> bool:
        ...

    def stored_values(self, pk: Any, fields: Sequence[str]) -> Optional[Dict[str, Any]]:
        ...


class ModelSlugStore:
    """Existence checks and row reads against the table backing ``model``."""

    def __init__(self, model: Type[models.Model]):
        self.model = model

    def exists(self, field: str, value: str, exclude_pk: Any = None) -> bool:
        queryset = self.model._base_manager.filter(**{field: value})
        if exclude_pk is not None:
            queryset = queryset.exclude(pk=exclude_pk)
        return queryset.exists()

    def stored_values(self, pk: Any, fields: Sequence[str]) -> Optional[Dict[str, Any]]:
        return self.model._base_manager.filter(pk=pk).values(*fields).first()


@dataclass(frozen=True)
class SlugConfig:
    source_field: Union[str, Tuple[str, ...]] = "name"
    slug_field: str = "slug"
    max_length: Optional[int] = None

    @property
    def source_fields(self) -> Tuple[str, ...]:
        if isinstance(self.source_field, str):
            return (self.source_field,)
        return tuple(self.source_field)

    @property
    def tracked_fields(self) -> Tuple[str, ...]:
        return self.source_fields + (self.slug_field,)

    def get_source(self, instance) -> str:
        """Source text; several source fields are joined with a space."""
        values = (getattr(instance, field) for field in self.source_fields)
        return " ".join(str(value) for value in values if value)

    def get_slug(self, instance) -> str:
        return getattr(instance, self.slug_field) or ""

    def set_slug(self, instance, value: str) -> None:
        setattr(instance, self.slug_field, value)


class SlugService:
    def __init__(
        self,
        store_factory: Callable[[Type[models.Model]], SlugStore] = ModelSlugStore,
        max_attempts: Any = _UNSET,
    ):
        self.store_factory = store_factory
        self._max_attempts = max_attempts

    @property
    def max_attempts(self) -> Optional[int]:
        if self._max_attempts is not _UNSET:
            return self._max_attempts
        return getattr(settings, "SLUG_MAX_ATTEMPTS", None)

    def base_slug(self, instance, config: SlugConfig) -> str:
        base = slugify_source(config.get_source(instance))
        if config.max_length:
            base = base[: config.max_length].rstrip("-")
        return base

    def derive_slug(self, instance, config: SlugConfig, store: Optional[SlugStore] = None) -> str:
        """
        Return a slug for ``instance`` that no other row of its model uses.

        The normalized source value is tried first, then ``-1``, ``-2`` and so
        on. A persisted instance never collides with itself. Database errors
        from the existence check are not caught.
        """
        model = type(instance)
        store = store or self.store_factory(model)

        base = self.base_slug(instance, config)
        if not base:
            logger.warning(
                f"Empty slug source {config.source_fields} on {model.__name__} (pk={instance.pk})"
            )

        exclude_pk = None if instance._state.adding else instance.pk
        max_attempts = self.max_attempts
        slug = base
        counter = 1
        while store.exists(config.slug_field, slug, exclude_pk=exclude_pk):
            if max_attempts and counter >= max_attempts:
                raise SlugGenerationError(model, base, counter)
            logger.debug(f"Slug '{slug}' taken for {model.__name__}, trying suffix {counter}")
            slug = with_suffix(base, counter, config.max_length)
            counter += 1
        return slug

    def is_current(self, instance, config: SlugConfig) -> bool:
        """Whether the slug is the source's base slug or a numbered variant of it."""
        slug = config.get_slug(instance)
        base = self.base_slug(instance, config)
        if slug == base:
            return True
        counter = slug.rpartition("-")[2]
        if not counter.isdigit():
            return False
        return with_suffix(base, int(counter), config.max_length) == slug

    @staticmethod
    def is_dirty(instance, field: str, stored: Optional[Dict[str, Any]]) -> bool:
        """Whether ``field`` differs from the persisted row ``stored``."""
        if stored is None or field not in stored:
            return False
        return getattr(instance, field) != stored[field]

    def source_dirty(self, instance, config: SlugConfig, stored, update_fields=None) -> bool:
        fields = config.source_fields
        if update_fields is not None:
            fields = [field for field in fields if field in update_fields]
        return any(self.is_dirty(instance, field, stored) for field in fields)

    def should_derive(
        self, instance, config: SlugConfig, update_fields=None, stored: Optional[Dict[str, Any]] = None
    ) -> bool:
        # no stored row means the save will insert
        if instance._state.adding or stored is None:
            return not config.get_slug(instance)

        if update_fields is not None and config.slug_field not in update_fields:
            if self.source_dirty(instance, config, stored, update_fields):
                logger.warning(
                    f"{type(instance).__name__} (pk={instance.pk}) saved with "
                    f"update_fields={sorted(update_fields)}; slug left unchanged"
                )
            return False

        return self.source_dirty(instance, config, stored, update_fields) and not self.is_dirty(
            instance, config.slug_field, stored
        )

    def assign(self, instance, config: SlugConfig, update_fields=None) -> bool:
        """Derive and set the slug when the write calls for it. Returns True if set."""
        store = self.store_factory(type(instance))
        stored = None
        if not instance._state.adding and instance.pk is not None:
            if update_fields is not None and not set(config.source_fields) & set(update_fields):
                return False
            stored = store.stored_values(instance.pk, config.tracked_fields)

        if not self.should_derive(instance, config, update_fields=update_fields, stored=stored):
            return False
        slug = self.derive_slug(instance, config, store)
        config.set_slug(instance, slug)
        logger.debug(f"Assigned slug '{slug}' to {type(instance).__name__} (pk={instance.pk})")
        return True


slug_service = SlugService()

_registry: Dict[Type[models.Model], SlugConfig] = {}


def get_slug_config(model: Type[models.Model]) -> Optional[SlugConfig]:
    return _registry.get(model)


def sluggable_models():
    return list(_registry)


def _on_pre_save(sender, instance, raw=False, update_fields=None, **kwargs):
    # fixtures are loaded verbatim
    if raw:
        return
    slug_service.assign(instance, _registry[sender], update_fields=update_fields)


def register_sluggable(
    model: Type[models.Model],
    source_field: Union[str, Iterable[str]] = "name",
    slug_field: str = "slug",
) -> SlugConfig:
    """Attach slug assignment to ``model``'s save lifecycle."""
    if not isinstance(source_field, str):
        source_field = tuple(source_field)
    slug_model_field = model._meta.get_field(slug_field)
    config = SlugConfig(
        source_field=source_field,
        slug_field=slug_field,
        max_length=getattr(slug_model_field, "max_length", None),
    )
    _registry[model] = config

    uid = f"content.slugs.{model._meta.label_lower}"
    pre_save.connect(_on_pre_save, sender=model, dispatch_uid=f"{uid}.pre_save")
    return config
