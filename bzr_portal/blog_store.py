import json
import logging
import os
import uuid
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from typing import List, Optional, Protocol, Set

import httpx

logger = logging.getLogger(__name__)

POST_STATUSES = ("draft", "pending_approval", "approved", "published", "rejected")

# PostgREST podrazumevano vraća najviše 1000 redova po zahtevu
PAGE_SIZE = 1000

def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

class BlogStoreError(RuntimeError):
    pass

class SlugConflictError(BlogStoreError):
    def __init__(self, slug: str):
        super().__init__(f"Slug already taken: {slug}")
        self.slug = slug

class PostNotFoundError(BlogStoreError):
    def __init__(self, post_id: str):
        super().__init__(f"Post not found: {post_id}")
        self.post_id = post_id

@dataclass
class BlogPost:
    title: str
    slug: str
    content: str
    excerpt: str = ""
    category: str = ""
    tags: List[str] = field(default_factory=list)
    status: str = "draft"
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: str = field(default_factory=utcnow_iso)
    updated_at: Optional[str] = None
    published_at: Optional[str] = None

    def __post_init__(self):
        if self.status not in POST_STATUSES:
            raise ValueError(f"Unknown post status: {self.status}")

    def to_record(self) -> dict:
        return asdict(self)

    @classmethod
    def from_record(cls, record: dict) -> "BlogPost":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in record.items() if k in known and v is not None})

class BlogStore(Protocol):
    def existing_slugs(self, prefix: Optional[str] = None) -> Set[str]: ...

    def existing_titles(self) -> Set[str]: ...

    def get(self, post_id: str) -> BlogPost: ...

    def insert(self, post: BlogPost) -> None: ...

    def update(self, post: BlogPost) -> None: ...

class JsonlBlogStore:
    """Postovi kao JSONL, jedan objekat po liniji."""

    def __init__(self, path: str):
        self.path = path

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self) -> None:
        pass

    def _records(self) -> List[dict]:
        if not os.path.exists(self.path):
            return []
        records = []
        with open(self.path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                records.append(json.loads(line))
        return records

    def existing_slugs(self, prefix: Optional[str] = None) -> Set[str]:
        slugs = {s for s in ((r.get("slug") or "").strip() for r in self._records()) if s}
        if prefix is not None:
            slugs = {s for s in slugs if s.startswith(prefix)}
        return slugs

    def existing_titles(self) -> Set[str]:
        return {(r.get("title") or "").strip() for r in self._records()}

    def get(self, post_id: str) -> BlogPost:
        for r in self._records():
            if r.get("id") == post_id:
                return BlogPost.from_record(r)
        raise PostNotFoundError(post_id)

    def insert(self, post: BlogPost) -> None:
        if post.slug in self.existing_slugs():
            raise SlugConflictError(post.slug)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(post.to_record(), ensure_ascii=False) + "\n")
            f.flush()

    def update(self, post: BlogPost) -> None:
        records = self._records()
        if not any(r.get("id") == post.id for r in records):
            raise PostNotFoundError(post.id)
        if any(r.get("slug") == post.slug and r.get("id") != post.id for r in records):
            raise SlugConflictError(post.slug)

        tmp_path = self.path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            for r in records:
                if r.get("id") == post.id:
                    r = post.to_record()
                f.write(json.dumps(r, ensure_ascii=False) + "\n")
        os.replace(tmp_path, self.path)

class SupabaseBlogStore:
    """Tabela blog postova preko Supabase REST (PostgREST) API-ja."""

    def __init__(
        self,
        url: str,
        key: str,
        table: str = "blog_posts",
        client: Optional[httpx.Client] = None,
        page_size: int = PAGE_SIZE,
    ):
        if not url or not key:
            raise ValueError("url/key are required")
        self.endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self.headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
        }
        self.page_size = page_size
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=30.0)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _check(self, r: httpx.Response, slug: Optional[str] = None) -> None:
        # 409 -> unique constraint na slug koloni
        if r.status_code == 409 and slug is not None:
            raise SlugConflictError(slug)
        if r.status_code >= 400:
            raise BlogStoreError(f"Supabase error: {r.status_code} {r.text}")

    def _select(self, column: str, filters: Optional[dict] = None) -> Set[str]:
        values: Set[str] = set()
        offset = 0
        while True:
            params = {
                "select": column,
                "order": "id",
                "limit": str(self.page_size),
                "offset": str(offset),
            }
            params.update(filters or {})
            r = self.client.get(self.endpoint, params=params, headers=self.headers)
            self._check(r)
            rows = r.json()
            values.update(str(row[column]) for row in rows if row.get(column))
            if len(rows) < self.page_size:
                return values
            offset += len(rows)

    def existing_slugs(self, prefix: Optional[str] = None) -> Set[str]:
        filters = {"slug": f"like.{prefix}*"} if prefix else None
        return self._select("slug", filters)

    def existing_titles(self) -> Set[str]:
        return self._select("title")

    def get(self, post_id: str) -> BlogPost:
        r = self.client.get(
            self.endpoint,
            params={"select": "*", "id": f"eq.{post_id}"},
            headers=self.headers,
        )
        self._check(r)
        rows = r.json()
        if not rows:
            raise PostNotFoundError(post_id)
        return BlogPost.from_record(rows[0])

    def insert(self, post: BlogPost) -> None:
        headers = dict(self.headers, Prefer="return=minimal")
        r = self.client.post(self.endpoint, json=post.to_record(), headers=headers)
        self._check(r, slug=post.slug)
        logger.debug("Inserted %s into %s", post.slug, self.endpoint)

    def update(self, post: BlogPost) -> None:
        record = post.to_record()
        record.pop("id")
        headers = dict(self.headers, Prefer="return=representation")
        r = self.client.patch(
            self.endpoint,
            params={"id": f"eq.{post.id}"},
            json=record,
            headers=headers,
        )
        self._check(r, slug=post.slug)
        if not r.json():
            raise PostNotFoundError(post.id)
        logger.debug("Updated %s (%s)", post.id, post.slug)

    def close(self) -> None:
        if self._owns_client:
            self.client.close()
