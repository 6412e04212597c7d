import argparse
import logging
import os

from dotenv import load_dotenv

from bzr_portal.blog_store import POST_STATUSES, JsonlBlogStore, PostNotFoundError, SupabaseBlogStore
from bzr_portal.content_generator import generate_content
from bzr_portal.file_renamer import transliterate_tree
from bzr_portal.publisher import publish_post, read_seed_file, seed_posts, set_status
from bzr_portal.slug import generate_slug, generate_unique_slug

def _add_store_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--store", choices=("jsonl", "supabase"), default=os.getenv("BLOG_STORE", "jsonl"))
    p.add_argument("--posts", default="posts.jsonl", help="JSONL file for --store jsonl")

def _make_store(args):
    if args.store == "jsonl":
        return JsonlBlogStore(args.posts)

    url = os.getenv("SUPABASE_URL", "").strip()
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "").strip()
    table = os.getenv("BLOG_TABLE", "blog_posts").strip()
    if not url:
        raise SystemExit("Set SUPABASE_URL in .env")
    if not key:
        raise SystemExit("Set SUPABASE_SERVICE_ROLE_KEY in .env")
    return SupabaseBlogStore(url, key, table=table)

def main(argv=None):
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ap = argparse.ArgumentParser(prog="bzr-portal")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_slug = sub.add_parser("slug", help="Print URL slugs for titles")
    p_slug.add_argument("titles", nargs="+")
    p_slug.add_argument("--existing", nargs="*", default=[], help="Slugs already in use")

    p_files = sub.add_parser("transliterate-files", help="Rename Cyrillic file names to Latin")
    p_files.add_argument("directory")
    p_files.add_argument("--no-recursive", action="store_true")

    p_seed = sub.add_parser("seed", help="Publish blog posts from a JSON/CSV file")
    p_seed.add_argument("--input", required=True)
    _add_store_args(p_seed)

    p_gen = sub.add_parser("generate", help="Generate a blog post for a title and publish it")
    p_gen.add_argument("title")
    p_gen.add_argument("--category", default="")
    p_gen.add_argument("--status", choices=POST_STATUSES, default="pending_approval")
    _add_store_args(p_gen)

    p_status = sub.add_parser("set-status", help="Move a blog post to another status")
    p_status.add_argument("post_id")
    p_status.add_argument("status", choices=POST_STATUSES)
    _add_store_args(p_status)

    args = ap.parse_args(argv)

    if args.cmd == "slug":
        used = set(args.existing)
        for title in args.titles:
            slug = generate_unique_slug(generate_slug(title), used)
            used.add(slug)
            print(slug)

    elif args.cmd == "transliterate-files":
        try:
            count = transliterate_tree(args.directory, recursive=not args.no_recursive)
        except FileNotFoundError as e:
            raise SystemExit(str(e))
        print(f"Renamed: {count}")

    elif args.cmd == "seed":
        with _make_store(args) as store:
            created = seed_posts(store, read_seed_file(args.input))
        print(f"Seeded: {len(created)} posts")

    elif args.cmd == "generate":
        content = generate_content(args.title, args.category)
        with _make_store(args) as store:
            post = publish_post(
                store,
                title=args.title,
                content=content.content,
                excerpt=content.excerpt,
                category=args.category,
                tags=content.tags,
                status=args.status,
            )
        print(f"Created: /blog/{post.slug}")

    elif args.cmd == "set-status":
        with _make_store(args) as store:
            try:
                post = set_status(store, args.post_id, args.status)
            except PostNotFoundError as e:
                raise SystemExit(str(e))
        print(f"{post.slug}: {post.status}")

if __name__ == "__main__":
    main()
