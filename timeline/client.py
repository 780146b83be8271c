"""
Async HTTP client for the School Timeline API, plus a small command line.

The client keeps the last fetched feed and drops it after every upload,
like or delete so the next read goes back to the server.
"""
import argparse
import asyncio
import mimetypes
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import httpx

DEFAULT_BASE_URL = "http://localhost:8000"
TOKEN_ENV_VAR = "TIMELINE_TOKEN"


class TimelineClientError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, detail: Any):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP {status_code}: {detail}")


class TimelineClient:
    """
    Client for the photo feed.

    Usage:
        async with TimelineClient("http://localhost:8000") as client:
            await client.login("alice", "secret-password")
            for photo in await client.get_feed():
                print(client.render_card(photo))
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        self._http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self.token = token
        self.current_user: Optional[Dict[str, Any]] = None
        self._feed_cache: Optional[List[Dict[str, Any]]] = None

    async def __aenter__(self) -> "TimelineClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def feed_is_cached(self) -> bool:
        return self._feed_cache is not None

    def invalidate_feed(self) -> None:
        self._feed_cache = None

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        response = await self._http.request(method, url, headers=self._headers(), **kwargs)
        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            detail = body.get("detail", response.text) if isinstance(body, dict) else response.text
            raise TimelineClientError(response.status_code, detail)
        return response

    # --- Auth ---

    async def register(self, username: str, password: str) -> Dict[str, Any]:
        response = await self._request(
            "POST", "/auth/register", json={"username": username, "password": password}
        )
        return response.json()

    async def login(self, username: str, password: str) -> Dict[str, Any]:
        """Obtain a token and load the current user. Returns the user."""
        response = await self._request(
            "POST", "/auth/login", json={"username": username, "password": password}
        )
        self.token = response.json()["access_token"]
        self.invalidate_feed()
        return await self.load_current_user()

    async def load_current_user(self) -> Dict[str, Any]:
        response = await self._request("GET", "/auth/me")
        self.current_user = response.json()
        return self.current_user

    # --- Photos ---

    async def get_feed(self, refresh: bool = False) -> List[Dict[str, Any]]:
        """
        Photos with uploader names, served from cache unless invalidated.
        """
        if refresh or self._feed_cache is None:
            response = await self._request("GET", "/photos")
            self._feed_cache = response.json()
        return self._feed_cache

    async def upload_url(
        self,
        image_url: str,
        description: str,
        taken_at: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """Create a photo that points at an external image (JSON body)."""
        payload: Dict[str, Any] = {"image_url": image_url, "description": description}
        if taken_at is not None:
            payload["taken_at"] = taken_at.isoformat()
        response = await self._request("POST", "/photos", json=payload)
        self.invalidate_feed()
        return response.json()

    async def upload_file(
        self,
        file: Union[str, Path, bytes],
        description: str,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
        taken_at: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Upload image bytes as multipart form data.

        Args:
            file: A path to read, or raw bytes
            description: Photo description
            filename: Name sent to the server (defaults to the path's name)
            content_type: MIME type (guessed from the file name when omitted)
            taken_at: Optional capture time
        """
        if isinstance(file, bytes):
            content = file
            filename = filename or "photo"
        else:
            path = Path(file)
            content = await asyncio.to_thread(path.read_bytes)
            filename = filename or path.name
        if content_type is None:
            content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"

        data = {"description": description}
        if taken_at is not None:
            data["taken_at"] = taken_at.isoformat()
        response = await self._request(
            "POST",
            "/photos",
            data=data,
            files={"photo": (filename, content, content_type)},
        )
        self.invalidate_feed()
        return response.json()

    async def like(self, photo_id: int) -> Dict[str, Any]:
        response = await self._request("POST", f"/photos/{photo_id}/like")
        self.invalidate_feed()
        return response.json()

    async def delete(self, photo_id: int) -> None:
        await self._request("DELETE", f"/photos/{photo_id}")
        self.invalidate_feed()

    # --- Rendering ---

    def can_delete(self, photo: Dict[str, Any]) -> bool:
        """Only the uploader gets a delete control."""
        return self.current_user is not None and photo.get("user_id") == self.current_user.get("id")

    def render_card(self, photo: Dict[str, Any]) -> str:
        """Plain-text card for one feed entry."""
        when = photo.get("taken_at") or photo.get("created_at") or ""
        date = when[:10] if isinstance(when, str) else ""
        header = f"#{photo['id']} {photo.get('username', 'unknown')}"
        if date:
            header += f" - {date}"
        lines = [
            header,
            f"  {photo['description']}",
            f"  {photo['image_url']}",
            f"  likes: {photo['likes']}",
        ]
        if self.can_delete(photo):
            lines.append("  [delete]")
        return "\n".join(lines)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="school-timeline", description="School Timeline command line client")
    parser.add_argument("--base-url", default=os.environ.get("TIMELINE_URL", DEFAULT_BASE_URL))
    parser.add_argument("--token", default=os.environ.get(TOKEN_ENV_VAR), help=f"Bearer token (or ${TOKEN_ENV_VAR})")
    sub = parser.add_subparsers(dest="command", required=True)

    for name in ("register", "login"):
        p = sub.add_parser(name)
        p.add_argument("username")
        p.add_argument("password")

    sub.add_parser("feed", help="Print the photo feed")

    p = sub.add_parser("upload", help="Upload a file or an image URL")
    p.add_argument("source", help="Path to an image file, or an http(s) image URL")
    p.add_argument("description")
    p.add_argument("--taken-at", type=datetime.fromisoformat, default=None)

    for name in ("like", "delete"):
        p = sub.add_parser(name)
        p.add_argument("photo_id", type=int)

    return parser


async def _run(args: argparse.Namespace) -> None:
    async with TimelineClient(args.base_url, token=args.token) as client:
        if args.command == "register":
            user = await client.register(args.username, args.password)
            print(f"Registered user #{user['id']}")
        elif args.command == "login":
            await client.login(args.username, args.password)
            print(client.token)
        elif args.command == "feed":
            await client.load_current_user()
            for photo in await client.get_feed():
                print(client.render_card(photo))
                print()
        elif args.command == "upload":
            if args.source.startswith(("http://", "https://")):
                photo = await client.upload_url(args.source, args.description, taken_at=args.taken_at)
            else:
                photo = await client.upload_file(args.source, args.description, taken_at=args.taken_at)
            print(f"Uploaded photo #{photo['id']}")
        elif args.command == "like":
            photo = await client.like(args.photo_id)
            print(f"Photo #{photo['id']} now has {photo['likes']} likes")
        elif args.command == "delete":
            await client.delete(args.photo_id)
            print(f"Deleted photo #{args.photo_id}")


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        asyncio.run(_run(args))
    except TimelineClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
