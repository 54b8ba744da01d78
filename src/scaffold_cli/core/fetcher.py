"""Fetch a subdirectory of a remote git repository without its history.

Sources are written as ``[host/]owner/repo[/subdir...][#ref]``, for example
``https://github.com/beenotung/cs-gen#template-macro``. Two modes exist:

- ``tar``: download the host's tarball for ``ref`` and extract the wanted
  subdirectory (no git needed)
- ``git``: ``git clone --depth 1`` into a scratch directory and copy the
  subdirectory out of it

Progress and warnings are emitted as :class:`FetchEvent` objects on the
``info`` and ``warn`` channels of a :class:`RemoteFetcher`.
"""

from __future__ import annotations

import asyncio
import logging
import re
import shutil
import ssl
import tarfile
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Literal

import httpx
import truststore
from rich.console import Console

from scaffold_cli.config import ScaffoldSettings, github_auth_headers, load_settings
from scaffold_cli.core.executables import executable_exists
from scaffold_cli.errors import FetchError, InvalidSourceError

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

FetchMode = Literal["tar", "git"]
EventName = Literal["info", "warn"]

SITES: dict[str, str] = {
    "github": "github.com",
    "gitlab": "gitlab.com",
    "bitbucket": "bitbucket.org",
    "git.sr.ht": "git.sr.ht",
}
HOST_TO_SITE = {host: site for site, host in SITES.items()}

_SOURCE_PATTERN = re.compile(
    r"^(?:(?:https://)?(?P<host>[^:/\s]+\.[^:/\s]+)/|git@(?P<ssh_host>[^:/\s]+)[:/]|(?P<site>[^/\s]+):)?"
    r"(?P<owner>[^/\s]+)/(?P<repo>[^/\s#]+)"
    r"(?P<subdir>(?:/[^/\s#]+)+)?/?"
    r"(?:#(?P<ref>.+))?$"
)


@dataclass(frozen=True)
class TemplateSource:
    """A parsed source descriptor."""

    site: str
    host: str
    owner: str
    repo: str
    subdir: str | None = None
    ref: str = "HEAD"

    @property
    def url(self) -> str:
        return f"https://{self.host}/{self.owner}/{self.repo}"

    @property
    def archive_url(self) -> str:
        if self.site == "gitlab":
            return f"{self.url}/-/archive/{self.ref}/{self.repo}-{self.ref}.tar.gz"
        if self.site == "bitbucket":
            return f"{self.url}/get/{self.ref}.tar.gz"
        return f"{self.url}/archive/{self.ref}.tar.gz"


@dataclass(frozen=True)
class FetchEvent:
    code: str
    message: str


Listener = Callable[[FetchEvent], None]


def parse_source(src: str, default_host: str = "github.com") -> TemplateSource:
    """Parse a source descriptor into a :class:`TemplateSource`.

    Raises:
        InvalidSourceError: The descriptor is malformed or the host unsupported.
    """
    match = _SOURCE_PATTERN.match(src.strip())
    if not match:
        raise InvalidSourceError(src)

    if match.group("site"):
        site = match.group("site")
        if site not in SITES:
            raise InvalidSourceError(src, f"unsupported site '{site}'")
        host = SITES[site]
    else:
        host = match.group("host") or match.group("ssh_host") or default_host
        site = HOST_TO_SITE.get(host)
        if site is None:
            raise InvalidSourceError(src, f"unsupported host '{host}'")

    repo = match.group("repo")
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not repo:
        raise InvalidSourceError(src, "missing repository name")

    subdir = match.group("subdir")
    return TemplateSource(
        site=site,
        host=host,
        owner=match.group("owner"),
        repo=repo,
        subdir=subdir.strip("/") if subdir else None,
        ref=match.group("ref") or "HEAD",
    )


def _archive_members(archive: tarfile.TarFile, subdir: str | None) -> list[tarfile.TarInfo]:
    """Select members below ``subdir`` and rename them relative to it.

    Host tarballs wrap everything in one top-level directory
    (``<repo>-<ref>/``); that level is always dropped.
    """
    prefix = PurePosixPath(subdir).parts if subdir else ()
    depth = 1 + len(prefix)
    selected: list[tarfile.TarInfo] = []
    for member in archive.getmembers():
        parts = PurePosixPath(member.name).parts
        if len(parts) <= depth or parts[1:depth] != prefix:
            continue
        member.name = str(PurePosixPath(*parts[depth:]))
        if member.islnk():
            link_parts = PurePosixPath(member.linkname).parts
            if len(link_parts) <= depth or link_parts[1:depth] != prefix:
                continue
            member.linkname = str(PurePosixPath(*link_parts[depth:]))
        selected.append(member)
    return selected


async def _run_git(*args: str, cwd: Path | None = None, timeout: float = 300.0) -> str:
    """Run a git command asynchronously and return stdout.

    Raises FetchError if the command exits non-zero or times out.
    """
    cmd = ["git", *args]
    cmd_str = " ".join(cmd)
    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=str(cwd) if cwd else None,
    )
    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise FetchError(f"Git command timed out after {timeout}s: {cmd_str}", code="GIT_TIMEOUT")

    if process.returncode != 0:
        stderr = stderr_bytes.decode("utf-8", errors="replace").strip()
        raise FetchError(f"Git command failed (exit {process.returncode}): {cmd_str}\n{stderr}", code="GIT_FAILED")
    return stdout_bytes.decode("utf-8", errors="replace").strip()


class RemoteFetcher:
    """Downloads one template source into local directories.

    One instance may be reused for several destinations; listeners added with
    :meth:`on` stay registered until removed with :meth:`off`.
    """

    def __init__(
        self,
        src: str,
        *,
        mode: FetchMode = "tar",
        client: httpx.AsyncClient | None = None,
        token: str | None = None,
        timeout: float = 60.0,
        force: bool = False,
        default_host: str = "github.com",
    ):
        self.src = src
        self.source = parse_source(src, default_host=default_host)
        self.mode = mode
        self.client = client
        self.token = token
        self.timeout = timeout
        self.force = force
        self._listeners: dict[str, list[Listener]] = {"info": [], "warn": []}

    @classmethod
    def from_settings(
        cls,
        src: str,
        settings: ScaffoldSettings,
        client: httpx.AsyncClient | None = None,
    ) -> "RemoteFetcher":
        return cls(
            src,
            mode=settings.mode,
            client=client,
            token=settings.github_token,
            timeout=settings.timeout,
            default_host=settings.default_host,
        )

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(self, event: EventName, listener: Listener) -> None:
        self._listeners[event].append(listener)

    def off(self, event: EventName, listener: Listener) -> None:
        try:
            self._listeners[event].remove(listener)
        except ValueError:
            pass

    def listener_count(self, event: EventName) -> int:
        return len(self._listeners[event])

    def _emit(self, event: EventName, code: str, message: str) -> None:
        logger.debug("%s %s: %s", event, code, message)
        payload = FetchEvent(code=code, message=message)
        for listener in list(self._listeners[event]):
            listener(payload)

    # ------------------------------------------------------------------
    # Cloning
    # ------------------------------------------------------------------

    async def clone(self, dest: str | Path) -> None:
        """Materialize the source's subdirectory in ``dest``.

        Raises:
            FetchError: The destination is not empty (without ``force``), the
                download or clone failed, or the subdirectory does not exist.
        """
        dest_path = Path(dest)
        if dest_path.is_dir() and any(dest_path.iterdir()):
            if not self.force:
                raise FetchError(
                    f"destination directory is not empty: {dest_path}",
                    source=self.src,
                    code="DEST_NOT_EMPTY",
                )
            self._emit("warn", "DEST_NOT_EMPTY", f"destination directory is not empty, files may be overwritten: {dest_path}")

        if self.mode == "git":
            await self._clone_with_git(dest_path)
        else:
            await self._clone_with_tar(dest_path)

        self._emit("info", "SUCCESS", f"cloned {self.source.owner}/{self.source.repo}#{self.source.ref} to {dest_path}")

    async def _download(self, url: str, target: Path) -> None:
        owns_client = self.client is None
        client = self.client or httpx.AsyncClient(verify=ssl_context, timeout=self.timeout)
        headers = github_auth_headers(self.token) if self.source.site == "github" else {}
        try:
            async with client.stream("GET", url, follow_redirects=True, headers=headers) as response:
                if response.status_code != 200:
                    raise FetchError(
                        f"Download failed with {response.status_code} for {url}",
                        source=self.src,
                        code="COULD_NOT_DOWNLOAD",
                    )
                with open(target, "wb") as f:
                    async for chunk in response.aiter_bytes(chunk_size=8192):
                        f.write(chunk)
        except httpx.HTTPError as exc:
            raise FetchError(f"Could not download {url}: {exc}", source=self.src, code="COULD_NOT_DOWNLOAD") from exc
        finally:
            if owns_client:
                await client.aclose()

    def _extract(self, archive_path: Path, dest: Path) -> int:
        with tarfile.open(archive_path, "r:gz") as archive:
            members = _archive_members(archive, self.source.subdir)
            if not members:
                where = f"subdirectory '{self.source.subdir}'" if self.source.subdir else "content"
                raise FetchError(
                    f"No {where} found in {self.source.url}#{self.source.ref}",
                    source=self.src,
                    code="MISSING_SUBDIR",
                )
            dest.mkdir(parents=True, exist_ok=True)
            archive.extractall(dest, members=members, filter="data")
        return len(members)

    async def _clone_with_tar(self, dest: Path) -> None:
        url = self.source.archive_url
        with tempfile.TemporaryDirectory() as temp_dir:
            archive_path = Path(temp_dir) / "archive.tar.gz"
            self._emit("info", "DOWNLOADING", f"downloading {url}")
            await self._download(url, archive_path)
            self._emit("info", "EXTRACTING", f"extracting {archive_path.name} to {dest}")
            try:
                count = await asyncio.to_thread(self._extract, archive_path, dest)
            except tarfile.TarError as exc:
                raise FetchError(f"Could not extract archive from {url}: {exc}", source=self.src, code="BAD_ARCHIVE") from exc
        logger.debug("Extracted %d entries into %s", count, dest)

    async def _clone_with_git(self, dest: Path) -> None:
        if not executable_exists("git"):
            raise FetchError("git executable not found on PATH", source=self.src, code="MISSING_GIT")

        with tempfile.TemporaryDirectory() as temp_dir:
            checkout = Path(temp_dir) / self.source.repo
            args = ["clone", "--depth", "1"]
            if self.source.ref != "HEAD":
                args += ["--branch", self.source.ref]
            args += [self.source.url, str(checkout)]
            self._emit("info", "CLONING", f"cloning {self.source.url}")
            await _run_git(*args, timeout=max(self.timeout, 60.0))

            subtree = checkout / self.source.subdir if self.source.subdir else checkout
            if not subtree.is_dir():
                raise FetchError(
                    f"No subdirectory '{self.source.subdir}' found in {self.source.url}#{self.source.ref}",
                    source=self.src,
                    code="MISSING_SUBDIR",
                )
            await asyncio.to_thread(
                shutil.copytree,
                subtree,
                dest,
                ignore=shutil.ignore_patterns(".git"),
                dirs_exist_ok=True,
            )


async def clone_git_repo(
    src: str,
    dest: str | Path,
    *,
    show_log: bool = False,
    show_warn: bool = False,
    fetcher: RemoteFetcher | None = None,
    settings: ScaffoldSettings | None = None,
    client: httpx.AsyncClient | None = None,
) -> None:
    """Fetch ``src`` into ``dest``.

    Progress goes to stdout when ``show_log`` is set and warnings to stderr
    when ``show_warn`` is set. Listeners only live for this call. Fetch
    errors propagate unchanged.
    """
    if show_log:
        console.print("Cloning from", src, "...")
    if fetcher is None:
        fetcher = RemoteFetcher.from_settings(src, settings or load_settings(), client=client)

    def on_info(event: FetchEvent) -> None:
        console.print(f"[dim]{event.message}[/dim]", highlight=False)

    def on_warn(event: FetchEvent) -> None:
        err_console.print(f"[yellow]{event.message}[/yellow]", highlight=False)

    if show_log:
        fetcher.on("info", on_info)
    if show_warn:
        fetcher.on("warn", on_warn)
    try:
        await fetcher.clone(dest)
    finally:
        fetcher.off("info", on_info)
        fetcher.off("warn", on_warn)


__all__ = [
    "FetchEvent",
    "RemoteFetcher",
    "TemplateSource",
    "clone_git_repo",
    "parse_source",
]
