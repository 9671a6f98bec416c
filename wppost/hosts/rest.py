"""
WordPress REST API implementation of the content host.

Talks to a live site through /wp-json/wp/v2 with application-password
basic auth. Reads ask for ``context=edit`` so raw field values come back
instead of rendered HTML.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
import structlog
from cachetools import TTLCache
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..domain.entities import Author, PostQuery, PostRecord, Tag, parse_datetime
from ..domain.exceptions import (
    HostUnavailableException,
    PostNotFoundException,
    PostWriteException,
)
from .base import ContentHost

logger = structlog.get_logger(__name__)

API_PATH = "/wp-json/wp/v2"
MAX_PER_PAGE = 100

DEFAULT_REST_BASES = {"post": "posts", "page": "pages", "attachment": "media"}

# Record field -> REST field
PAYLOAD_FIELDS = {
    "title": "title",
    "slug": "slug",
    "content": "content",
    "excerpt": "excerpt",
    "status": "status",
    "author_id": "author",
    "parent_id": "parent",
    "menu_order": "menu_order",
    "date": "date",
}

ORDERBY_PARAMS = {
    "date": "date",
    "post_date": "date",
    "modified": "modified",
    "post_modified": "modified",
    "title": "title",
    "post_title": "title",
    "name": "slug",
    "post_name": "slug",
    "ID": "id",
    "id": "id",
    "menu_order": "menu_order",
    "parent": "parent",
    "author": "author",
    "post__in": "include",
}

TAG_ORDERBY_PARAMS = {"name": "name", "slug": "slug", "term_id": "id", "id": "id", "count": "count"}


def _raw(value: Any) -> Optional[str]:
    """Raw text of a REST field that may be a {raw, rendered} object."""
    if isinstance(value, dict):
        return value.get("raw", value.get("rendered"))
    return value


def _is_not_found(error: PostWriteException) -> bool:
    cause = error.__cause__
    return isinstance(cause, httpx.HTTPStatusError) and cause.response.status_code == 404


class WordPressRestHost(ContentHost):
    """
    Content host backed by the WordPress REST API.

    GET requests are retried with exponential backoff on transport errors.
    Writes are sent once.
    """

    name = "rest"

    def __init__(
        self,
        base_url: str,
        username: Optional[str] = None,
        app_password: Optional[str] = None,
        timeout: float = 10.0,
        max_retries: int = 3,
        tag_cache_ttl: int = 300,
        rest_bases: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
        retry_wait: float = 1.0,
    ):
        """
        Initialize the REST host.

        Args:
            base_url: Site URL, e.g. https://example.com
            username: User for application-password auth
            app_password: Application password
            timeout: Request timeout in seconds
            max_retries: Retries for GET requests on transport errors
            tag_cache_ttl: Seconds tag IDs and site settings stay cached
            rest_bases: Extra post type -> REST base mappings
            transport: httpx transport override (tests use MockTransport)
            retry_wait: Backoff multiplier in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.rest_bases = dict(DEFAULT_REST_BASES)
        if rest_bases:
            self.rest_bases.update(rest_bases)

        auth = (username, app_password or "") if username else None
        self.client = httpx.Client(
            base_url=f"{self.base_url}{API_PATH}",
            auth=auth,
            timeout=timeout,
            transport=transport,
            headers={"User-Agent": "wppost/1.0", "Accept": "application/json"},
        )
        self._retrying = Retrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(max_retries + 1),
            wait=wait_exponential(multiplier=retry_wait, min=0, max=10 * retry_wait),
            reraise=True,
        )

        self._tag_ids: TTLCache = TTLCache(maxsize=1024, ttl=tag_cache_ttl)
        self._site_settings: TTLCache = TTLCache(maxsize=1, ttl=tag_cache_ttl)
        # Post ID -> post type, learned from reads and writes
        self._post_types: Dict[int, str] = {}

        logger.info("rest_host_initialized", base_url=self.base_url, authenticated=bool(auth))

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        response = self.client.request(method, path, **kwargs)
        response.raise_for_status()
        return response

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        """
        GET with retries.

        Raises:
            httpx.HTTPStatusError: On non-2xx responses
            HostUnavailableException: When the site cannot be reached
        """
        try:
            return self._retrying(self._send, "GET", path, params=params)
        except httpx.TransportError as e:
            logger.error("rest_request_failed", path=path, error=str(e))
            raise HostUnavailableException(self.name, str(e)) from e

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET returning the decoded body, or None on 404."""
        try:
            return self._get(path, params).json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise HostUnavailableException(
                self.name, f"GET {path} returned {e.response.status_code}"
            ) from e

    def _write(self, operation: str, method: str, path: str, **kwargs: Any) -> Any:
        try:
            return self._send(method, path, **kwargs).json()
        except httpx.HTTPStatusError as e:
            reason = self._error_message(e.response)
            logger.warning(
                "rest_write_rejected",
                operation=operation,
                path=path,
                status_code=e.response.status_code,
                reason=reason,
            )
            raise PostWriteException(operation, reason) from e
        except httpx.TransportError as e:
            logger.error("rest_request_failed", path=path, error=str(e))
            raise HostUnavailableException(self.name, str(e)) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"HTTP {response.status_code}"
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return f"HTTP {response.status_code}"

    # ------------------------------------------------------------------
    # Post type routing
    # ------------------------------------------------------------------

    def _rest_base(self, post_type: Optional[str]) -> str:
        post_type = post_type or "post"
        return self.rest_bases.get(post_type, post_type)

    def _candidate_bases(self, post_id: int) -> List[str]:
        known = self._post_types.get(post_id)
        if known:
            return [self._rest_base(known)]
        bases: List[str] = []
        for post_type, base in self.rest_bases.items():
            if post_type != "attachment" and base not in bases:
                bases.append(base)
        return bases

    def _remember(self, data: Dict[str, Any]) -> None:
        if data.get("id") and data.get("type"):
            self._post_types[int(data["id"])] = data["type"]

    def _fetch_post(self, post_id: int) -> Optional[Dict[str, Any]]:
        for base in self._candidate_bases(post_id):
            data = self._get_json(f"/{base}/{post_id}", {"context": "edit"})
            if data is not None:
                self._remember(data)
                return data
        return None

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    def get_post(self, post_id: Optional[int]) -> Optional[PostRecord]:
        if not post_id:
            return None
        data = self._fetch_post(int(post_id))
        return self._map_to_record(data) if data else None

    def query_posts(self, query: PostQuery) -> List[PostRecord]:
        params: Dict[str, Any] = {"context": "edit", "order": query.order.lower()}

        orderby = query.orderby.split()[0] if query.orderby.split() else "date"
        params["orderby"] = ORDERBY_PARAMS.get(orderby, "date")

        statuses = query.statuses()
        params["status"] = "any" if statuses is None else ",".join(statuses)

        include = list(query.post__in or [])
        if query.p is not None:
            include.append(query.p)
        if include:
            params["include"] = ",".join(str(post_id) for post_id in include)
        elif params["orderby"] == "include":
            params["orderby"] = "date"
        if query.name is not None:
            params["slug"] = query.name
        if query.post_parent is not None:
            params["parent"] = query.post_parent
        if query.author is not None:
            params["author"] = query.author
        if query.s:
            params["search"] = query.s
        if query.tag:
            tag_ids = self._tag_ids_for_slugs(query.tag)
            if not tag_ids:
                return []
            params["tags"] = ",".join(str(tag_id) for tag_id in tag_ids)

        ignored = dict(query.extra_criteria())
        if query.meta_key is not None:
            ignored["meta_key"] = query.meta_key
        if ignored:
            logger.debug("query_criteria_ignored", criteria=sorted(ignored))

        post_types = query.post_types()
        if post_types is None:
            post_types = [t for t in self.rest_bases if t != "attachment"]

        records: List[PostRecord] = []
        for post_type in post_types:
            records.extend(self._query_type(post_type, params, query))
        return records

    def _query_type(
        self, post_type: str, params: Dict[str, Any], query: PostQuery
    ) -> List[PostRecord]:
        path = f"/{self._rest_base(post_type)}"

        if query.posts_per_page == 0:
            return []
        if query.posts_per_page > 0:
            page_params = dict(params, per_page=min(query.posts_per_page, MAX_PER_PAGE))
            if query.offset is not None:
                page_params["offset"] = query.offset
            else:
                page_params["page"] = query.paged
            response = self._get_page(path, page_params)
            if response is None:
                return []
            return [self._record_from(item) for item in response.json()]

        records: List[PostRecord] = []
        page = 1
        while True:
            response = self._get_page(path, dict(params, per_page=MAX_PER_PAGE, page=page))
            if response is None:
                break
            records.extend(self._record_from(item) for item in response.json())
            total_pages = int(response.headers.get("X-WP-TotalPages", page))
            if page >= total_pages:
                break
            page += 1
        return records

    def _get_page(self, path: str, params: Dict[str, Any]) -> Optional[httpx.Response]:
        try:
            return self._get(path, params)
        except httpx.HTTPStatusError as e:
            # WordPress answers 400 for a page past the end
            if e.response.status_code in (400, 404):
                return None
            raise HostUnavailableException(
                self.name, f"GET {path} returned {e.response.status_code}"
            ) from e

    def _record_from(self, data: Dict[str, Any]) -> PostRecord:
        self._remember(data)
        return self._map_to_record(data)

    def insert_post(self, record: PostRecord) -> int:
        data = self._write(
            "insert", "POST", f"/{self._rest_base(record.post_type)}", json=self._payload(record)
        )
        self._remember(data)
        logger.info("post_inserted", post_id=data["id"], post_type=data.get("type"))
        return int(data["id"])

    def update_post(self, record: PostRecord) -> int:
        if not record.id:
            raise PostNotFoundException(record.id, record.post_type)
        post_type = record.post_type or self._post_types.get(int(record.id))
        try:
            data = self._write(
                "update",
                "POST",
                f"/{self._rest_base(post_type)}/{record.id}",
                json=self._payload(record),
            )
        except PostWriteException as e:
            if _is_not_found(e):
                raise PostNotFoundException(record.id, post_type) from e
            raise
        self._remember(data)
        logger.info("post_updated", post_id=record.id, post_type=post_type)
        return int(data["id"])

    def delete_post(self, post_id: Optional[int], force: bool = False) -> Optional[PostRecord]:
        if not post_id:
            return None
        post_type = self._post_types.get(int(post_id))
        if post_type is None:
            current = self._fetch_post(int(post_id))
            if current is None:
                return None
            post_type = current["type"]

        path = f"/{self._rest_base(post_type)}/{post_id}"
        try:
            data = self._write(
                "delete", "DELETE", path, params={"force": "true" if force else "false"}
            )
        except PostWriteException as e:
            if _is_not_found(e):
                return None
            raise

        if force:
            self._post_types.pop(int(post_id), None)
            logger.info("post_deleted", post_id=post_id, post_type=post_type)
            return self._map_to_record(data.get("previous") or {})
        logger.info("post_trashed", post_id=post_id, post_type=post_type)
        return self._map_to_record(data)

    @staticmethod
    def _payload(record: PostRecord) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        for name, rest_field in PAYLOAD_FIELDS.items():
            value = getattr(record, name)
            if value is None:
                continue
            if isinstance(value, datetime):
                value = value.isoformat()
            payload[rest_field] = value
        return payload

    @staticmethod
    def _map_to_record(data: Dict[str, Any]) -> PostRecord:
        """Map REST response to domain record."""
        return PostRecord(
            id=data.get("id"),
            post_type=data.get("type"),
            title=_raw(data.get("title")),
            slug=data.get("slug"),
            content=_raw(data.get("content")),
            excerpt=_raw(data.get("excerpt")),
            status=data.get("status"),
            author_id=data.get("author"),
            parent_id=data.get("parent"),
            menu_order=data.get("menu_order"),
            date=parse_datetime(data.get("date")),
            modified=parse_datetime(data.get("modified")),
        )

    # ------------------------------------------------------------------
    # Meta
    # ------------------------------------------------------------------

    def get_post_meta(
        self, post_id: Optional[int], key: Optional[str] = None, single: bool = True
    ) -> Any:
        data = self._fetch_post(int(post_id)) if post_id else None
        meta = (data or {}).get("meta") or {}
        if not isinstance(meta, dict):
            meta = {}

        if key is None:
            return {k: v if isinstance(v, list) else [v] for k, v in meta.items()}

        value = meta.get(key)
        if single:
            if isinstance(value, list):
                return value[0] if value else None
            return value
        if value is None:
            return []
        return value if isinstance(value, list) else [value]

    def update_post_meta(self, post_id: Optional[int], key: str, value: Any) -> bool:
        return self._write_meta(post_id, {key: value}, "update_meta")

    def delete_post_meta(self, post_id: Optional[int], key: str) -> bool:
        # Null removes a registered meta key
        return self._write_meta(post_id, {key: None}, "delete_meta")

    def _write_meta(self, post_id: Optional[int], meta: Dict[str, Any], operation: str) -> bool:
        if not post_id:
            return False
        base = self._candidate_bases(int(post_id))[0]
        try:
            self._write(operation, "POST", f"/{base}/{post_id}", json={"meta": meta})
        except PostWriteException:
            return False
        return True

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def get_post_tags(self, post_id: Optional[int], **args: Any) -> List[Tag]:
        if not post_id:
            return []
        params = {
            "post": post_id,
            "per_page": MAX_PER_PAGE,
            "orderby": TAG_ORDERBY_PARAMS.get(str(args.get("orderby", "name")), "name"),
            "order": str(args.get("order", "ASC")).lower(),
        }
        items = self._get_json("/tags", params) or []
        return [Tag(id=item["id"], name=item["name"], slug=item["slug"]) for item in items]

    def set_post_tags(
        self, post_id: Optional[int], tags: List[str], append: bool = False
    ) -> Optional[List[int]]:
        if not post_id:
            return None
        data = self._fetch_post(int(post_id))
        if data is None:
            return None

        try:
            tag_ids = [self._resolve_tag(name) for name in tags]
        except PostWriteException:
            return None
        tag_ids = list(dict.fromkeys(tag_ids))
        if append:
            tag_ids = list(dict.fromkeys(list(data.get("tags") or []) + tag_ids))

        path = f"/{self._rest_base(data['type'])}/{post_id}"
        try:
            self._write("set_tags", "POST", path, json={"tags": tag_ids})
        except PostWriteException:
            return None
        logger.debug("post_tags_set", post_id=post_id, tags=tag_ids, append=append)
        return tag_ids

    def _resolve_tag(self, name: str) -> int:
        """ID of the tag with this name, creating it when missing."""
        cache_key = name.lower()
        if cache_key in self._tag_ids:
            return self._tag_ids[cache_key]

        tag_id = None
        for item in self._get_json("/tags", {"search": name, "per_page": MAX_PER_PAGE}) or []:
            if item.get("name", "").lower() == cache_key or item.get("slug") == cache_key:
                tag_id = item["id"]
                break

        if tag_id is None:
            tag_id = self._create_tag(name)

        self._tag_ids[cache_key] = tag_id
        return tag_id

    def _create_tag(self, name: str) -> int:
        try:
            response = self._send("POST", "/tags", json={"name": name})
        except httpx.HTTPStatusError as e:
            try:
                body = e.response.json()
            except ValueError:
                body = {}
            # Another writer created it first
            if isinstance(body, dict) and body.get("code") == "term_exists":
                return int(body["data"]["term_id"])
            raise PostWriteException("create_tag", self._error_message(e.response)) from e
        except httpx.TransportError as e:
            raise HostUnavailableException(self.name, str(e)) from e
        tag_id = int(response.json()["id"])
        logger.info("tag_created", term_id=tag_id, name=name)
        return tag_id

    def _tag_ids_for_slugs(self, slugs: str) -> List[int]:
        items = self._get_json("/tags", {"slug": slugs, "per_page": MAX_PER_PAGE}) or []
        return [item["id"] for item in items]

    # ------------------------------------------------------------------
    # Thumbnails and links
    # ------------------------------------------------------------------

    def get_post_thumbnail_id(self, post_id: Optional[int]) -> Optional[int]:
        data = self._fetch_post(int(post_id)) if post_id else None
        if not data:
            return None
        return data.get("featured_media") or None

    def set_post_thumbnail(self, post_id: Optional[int], thumbnail_id: int) -> bool:
        if not post_id or not thumbnail_id:
            return False
        base = self._candidate_bases(int(post_id))[0]
        try:
            self._write(
                "set_thumbnail", "POST", f"/{base}/{post_id}", json={"featured_media": thumbnail_id}
            )
        except PostWriteException:
            return False
        return True

    def get_thumbnail_url(self, post_id: Optional[int], size: str = "thumbnail") -> Optional[str]:
        thumbnail_id = self.get_post_thumbnail_id(post_id)
        if not thumbnail_id:
            return None
        media = self._get_json(f"/media/{thumbnail_id}")
        if not media:
            return None
        sizes = (media.get("media_details") or {}).get("sizes") or {}
        sized = sizes.get(size)
        if isinstance(sized, dict) and sized.get("source_url"):
            return sized["source_url"]
        return media.get("source_url")

    def get_permalink(self, post_id: Optional[int]) -> Optional[str]:
        data = self._fetch_post(int(post_id)) if post_id else None
        return data.get("link") if data else None

    # ------------------------------------------------------------------
    # Users, options, post types
    # ------------------------------------------------------------------

    def get_user(self, user_id: Optional[int]) -> Optional[Author]:
        if not user_id:
            return None
        data = self._get_json(f"/users/{user_id}", {"context": "edit"})
        if not data:
            return None
        return Author(
            id=data["id"],
            login=data.get("username") or data.get("slug"),
            email=data.get("email"),
            display_name=data.get("name"),
        )

    def get_option(self, name: str, default: Any = None) -> Any:
        if "settings" not in self._site_settings:
            try:
                self._site_settings["settings"] = self._get("/settings").json()
            except httpx.HTTPStatusError as e:
                logger.warning(
                    "site_settings_unavailable", status_code=e.response.status_code
                )
                return default
        return self._site_settings["settings"].get(name, default)

    def register_post_type(self, post_type: str, options: Dict[str, Any]) -> None:
        rest_base = options.get("rest_base")
        if rest_base:
            self.rest_bases[post_type] = rest_base

        data = self._get_json(f"/types/{post_type}", {"context": "edit"})
        if data is None:
            logger.warning("post_type_not_registered_on_site", post_type=post_type)
            return
        if data.get("rest_base"):
            self.rest_bases[post_type] = data["rest_base"]
        logger.info(
            "post_type_registered", post_type=post_type, rest_base=self.rest_bases.get(post_type)
        )

    def close(self) -> None:
        self.client.close()
