import csv
import json
import logging
from dataclasses import replace
from typing import Callable, Iterable, List, Optional, Union

from .blog_store import POST_STATUSES, BlogPost, BlogStore, SlugConflictError, utcnow_iso
from .slug import generate_slug, generate_unique_slug

logger = logging.getLogger(__name__)

def split_tags(tags: Union[str, Iterable[str], None]) -> List[str]:
    """'bzr, obuka' ili lista -> lista tagova bez praznih."""
    if not tags:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    return [str(t).strip() for t in tags if str(t).strip()]

def _base_slug(title: str) -> str:
    base_slug = generate_slug(title)
    if not base_slug:
        raise ValueError(f"Title produces an empty slug: {title!r}")
    return base_slug

def _save_with_unique_slug(
    store: BlogStore,
    base_slug: str,
    build: Callable[[str], BlogPost],
    save: Callable[[BlogPost], None],
    max_attempts: int,
    own_slug: Optional[str] = None,
) -> BlogPost:
    """
    Jedinstvenost garantuje store (insert/update odbija zauzet slug); pri
    konfliktu se skup postojećih slug-ova čita ponovo i slug računa iznova.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    for attempt in range(1, max_attempts + 1):
        existing = store.existing_slugs(prefix=base_slug)
        existing.discard(own_slug)
        post = build(generate_unique_slug(base_slug, existing))
        try:
            save(post)
        except SlugConflictError:
            if attempt == max_attempts:
                raise
            logger.warning("Slug %s taken concurrently, retrying (%d/%d)", post.slug, attempt, max_attempts)
            continue
        return post

    raise SlugConflictError(base_slug)

def publish_post(
    store: BlogStore,
    title: str,
    content: str,
    excerpt: str = "",
    category: str = "",
    tags: Union[str, Iterable[str], None] = None,
    status: str = "draft",
    max_attempts: int = 3,
) -> BlogPost:
    """Snima novi post pod jedinstvenim slug-om."""
    base_slug = _base_slug(title)
    tag_list = split_tags(tags)
    published_at = utcnow_iso() if status == "published" else None

    def build(slug: str) -> BlogPost:
        return BlogPost(
            title=title,
            slug=slug,
            content=content,
            excerpt=excerpt,
            category=category,
            tags=list(tag_list),
            status=status,
            published_at=published_at,
        )

    post = _save_with_unique_slug(store, base_slug, build, store.insert, max_attempts)
    logger.info("Published %s", post.slug)
    return post

def update_post(
    store: BlogStore,
    post_id: str,
    title: Optional[str] = None,
    content: Optional[str] = None,
    excerpt: Optional[str] = None,
    category: Optional[str] = None,
    tags: Union[str, Iterable[str], None] = None,
    max_attempts: int = 3,
) -> BlogPost:
    """
    Menja post. Ako se naslov promeni, slug se računa iznova; sopstveni
    trenutni slug posta se ne računa kao zauzet.
    """
    current = store.get(post_id)
    changes = {"updated_at": utcnow_iso()}
    if content is not None:
        changes["content"] = content
    if excerpt is not None:
        changes["excerpt"] = excerpt
    if category is not None:
        changes["category"] = category
    if tags is not None:
        changes["tags"] = split_tags(tags)

    if title is None or title == current.title:
        post = replace(current, **changes)
        store.update(post)
        return post

    changes["title"] = title
    post = _save_with_unique_slug(
        store,
        _base_slug(title),
        lambda slug: replace(current, slug=slug, **changes),
        store.update,
        max_attempts,
        own_slug=current.slug,
    )
    if post.slug != current.slug:
        logger.info("Re-slugged %s: %s -> %s", post_id, current.slug, post.slug)
    return post

def set_status(store: BlogStore, post_id: str, status: str) -> BlogPost:
    """Prelaz u 'published' upisuje published_at (samo prvi put)."""
    if status not in POST_STATUSES:
        raise ValueError(f"Unknown post status: {status}")

    current = store.get(post_id)
    changes = {"status": status, "updated_at": utcnow_iso()}
    if status == "published" and not current.published_at:
        changes["published_at"] = changes["updated_at"]

    post = replace(current, **changes)
    store.update(post)
    logger.info("Post %s: %s -> %s", post.slug, current.status, status)
    return post

def read_seed_file(path: str) -> List[dict]:
    """JSON niz objekata ili CSV sa kolonom 'title'."""
    if path.lower().endswith(".csv"):
        rows: List[dict] = []
        with open(path, "r", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            if "title" not in (reader.fieldnames or []):
                raise ValueError("CSV must have a 'title' column")
            for row in reader:
                if (row.get("title") or "").strip():
                    row["tags"] = split_tags(row.get("tags"))
                    rows.append(row)
        return rows

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError("Seed JSON must be a list of posts")
    return data

def seed_posts(store: BlogStore, posts: Iterable[dict], skip_existing_titles: bool = True) -> List[BlogPost]:
    created: List[BlogPost] = []
    titles = store.existing_titles() if skip_existing_titles else set()

    for data in posts:
        title = (data.get("title") or "").strip()
        if not title:
            continue
        if title in titles:
            logger.info("Post već postoji: %s", title)
            continue

        post = publish_post(
            store,
            title=title,
            content=data.get("content") or "",
            excerpt=data.get("excerpt") or "",
            category=data.get("category") or "",
            tags=data.get("tags"),
            status=data.get("status") or "published",
        )
        titles.add(title)
        created.append(post)

    return created
