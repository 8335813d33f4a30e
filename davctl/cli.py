"""
davctl CLI：connect 一次保存 base URL，之后的路径都相对它解析；也可直接传完整 URL。

凭证按主机从 ~/.netrc 查找，login 保存的用户名/密码作为默认项。
"""

from __future__ import annotations

import getpass
import logging
from pathlib import Path
from typing import Annotated, Optional
from urllib.parse import urljoin, urlparse

import typer

from davctl.cli_config import clear_config, load_config, save_base_url, save_credentials
from davctl.client import DavClient
from davctl.controller import DavController
from davctl.credentials import load_netrc
from davctl.errors import DavError
from davctl.filters import WILDCARD, FilterCriteria
from davctl.models import CatalogueEntry, ItemResult

app = typer.Typer(
    name="davctl",
    help="WebDAV CLI. Per-host credentials from ~/.netrc; connect once, then use paths.",
)

# 过滤条件选项：默认 "*" 表示不限制
_type_option = Annotated[str, typer.Option("--type", "-t", help="Content type substring, or *")]
_min_size_option = Annotated[str, typer.Option("--min-size", help="Minimum size in bytes, or *")]
_max_size_option = Annotated[str, typer.Option("--max-size", help="Maximum size in bytes, or *")]
_earliest_option = Annotated[str, typer.Option("--earliest", help="Earliest modification time, or *")]
_latest_option = Annotated[str, typer.Option("--latest", help="Latest modification time, or *")]


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _is_url(text: str) -> bool:
    parsed = urlparse(text)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _resolve_url(path_or_url: str) -> str:
    """
    将命令行参数解析为完整 URL。

    - http(s):// 开头的完整链接原样返回
    - 否则视为相对已连接 base_url 的路径；未 connect 时报错退出
    """
    raw = (path_or_url or "").strip()
    if _is_url(raw):
        return raw
    cfg = load_config()
    base_url = cfg.get("base_url") if cfg else None
    if not base_url:
        typer.echo("error: not connected. run 'davctl connect URL' or pass a full URL", err=True)
        raise typer.Exit(1)
    return urljoin(base_url, raw.lstrip("/"))


def _get_controller() -> DavController:
    credentials = load_netrc()
    cfg = load_config()
    if cfg and cfg.get("username"):
        credentials.set_default(cfg["username"], cfg.get("password") or "")
    return DavController(credentials, DavClient(timeout=30.0))


def _parse_criteria(content_type: str, min_size: str, max_size: str, earliest: str, latest: str) -> FilterCriteria:
    try:
        return FilterCriteria.parse(content_type, min_size, max_size, earliest, latest)
    except DavError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)


def _format_entry(entry: CatalogueEntry) -> str:
    """url、大小、修改时间、类型，以 tab 分隔；缺失字段显示 ---。"""
    size = str(entry.size) if entry.size is not None else "---"
    date = entry.modified_at.isoformat() if entry.modified_at is not None else "---"
    content_type = entry.content_type if entry.content_type is not None else "---"
    return f"{entry.url}\t{size}\t{date}\t{content_type}"


def _report(verb: str, results: list[ItemResult]) -> None:
    """逐项输出结果；有任何失败项时退出码为 1。"""
    failed = 0
    for r in results:
        if r.ok:
            typer.echo(f"{verb} {r.source} -> {r.target}: {r.status_code}")
        else:
            failed += 1
            typer.echo(f"  failed: {r.source}: {r.error}", err=True)
    if failed:
        raise typer.Exit(1)


# ------------------------- login / logout / connect / info -------------------------


@app.command("login", help="Save default credentials (used for hosts not in ~/.netrc)")
def login(
    username: Annotated[Optional[str], typer.Option("--username", "-u", help="Username")] = None,
    password: Annotated[Optional[str], typer.Option("--password", "-p", help="Password (unsafe in shell)")] = None,
) -> None:
    username = username or input("Username: ").strip()
    if not username:
        typer.echo("error: username required", err=True)
        raise typer.Exit(1)
    if password is None:
        password = getpass.getpass("Password: ")
    save_credentials(username, password)
    typer.echo("Saved.")


@app.command("logout", help="Clear saved base URL and default credentials")
def logout() -> None:
    if clear_config():
        typer.echo("Cleared.")
    else:
        typer.echo("No saved config.")


@app.command("connect", help="Save the base URL that relative paths resolve against")
def connect(
    url: Annotated[str, typer.Argument(help="Base URL, e.g. https://dav.example.com/files/")],
) -> None:
    if not _is_url(url.strip()):
        typer.echo(f"error: not an http(s) URL: {url}", err=True)
        raise typer.Exit(1)
    save_base_url(url.strip())
    typer.echo("Connected.")


@app.command("info", help="Show saved base URL and default login")
def info_cmd() -> None:
    cfg = load_config()
    if not cfg:
        typer.echo("Not connected. Run 'davctl connect URL'.")
        return
    typer.echo(f"base_url: {cfg.get('base_url') or '-'}")
    typer.echo(f"login: {cfg.get('username') or '-'}")


# ------------------------- ls -------------------------


@app.command("ls", help="List a collection, optionally filtered")
def ls_cmd(
    path: Annotated[str, typer.Argument(help="Path relative to base URL, or full URL")] = "",
    content_type: _type_option = WILDCARD,
    min_size: _min_size_option = WILDCARD,
    max_size: _max_size_option = WILDCARD,
    earliest: _earliest_option = WILDCARD,
    latest: _latest_option = WILDCARD,
) -> None:
    criteria = _parse_criteria(content_type, min_size, max_size, earliest, latest)
    url = _resolve_url(path)
    controller = _get_controller()
    try:
        entries = controller.ls(url, criteria)
    except DavError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        controller.client.close()
    for entry in entries:
        typer.echo(_format_entry(entry))


# ------------------------- put / get -------------------------


@app.command("put", help="Upload files (several files need a collection target ending in /)")
def put_cmd(
    files: Annotated[list[Path], typer.Argument(help="Local files")],
    to: Annotated[str, typer.Option("--to", help="Target path or URL (default: base URL)")] = "",
) -> None:
    target = _resolve_url(to)
    controller = _get_controller()
    try:
        results = controller.put(files, target)
    finally:
        controller.client.close()
    _report("Put", results)


@app.command("get", help="Download files into a local directory")
def get_cmd(
    sources: Annotated[list[str], typer.Argument(help="Remote paths or full URLs")],
    dest: Annotated[Path, typer.Option("--dest", "-d", help="Existing local directory")] = Path("."),
) -> None:
    urls = [_resolve_url(s) for s in sources]
    controller = _get_controller()
    try:
        results = controller.get(urls, dest)
    finally:
        controller.client.close()
    _report("Got", results)


# ------------------------- delete -------------------------


@app.command("delete", help="Delete one resource")
def delete_cmd(
    path: Annotated[str, typer.Argument(help="Path relative to base URL, or full URL")],
) -> None:
    url = _resolve_url(path)
    controller = _get_controller()
    try:
        status = controller.delete(url)
    except DavError as e:
        typer.echo(f"error: failed to delete {url}: {e}", err=True)
        raise typer.Exit(1)
    finally:
        controller.client.close()
    typer.echo(f"Deleted {url}: {status}")


@app.command("delete-matching", help="Delete every entry of a collection that matches the criteria")
def delete_matching_cmd(
    path: Annotated[str, typer.Argument(help="Collection path relative to base URL, or full URL")],
    content_type: _type_option = WILDCARD,
    min_size: _min_size_option = WILDCARD,
    max_size: _max_size_option = WILDCARD,
    earliest: _earliest_option = WILDCARD,
    latest: _latest_option = WILDCARD,
) -> None:
    criteria = _parse_criteria(content_type, min_size, max_size, earliest, latest)
    url = _resolve_url(path)
    controller = _get_controller()
    try:
        results = controller.delete_matching(url, criteria)
    except DavError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(1)
    finally:
        controller.client.close()
    typer.echo(f"Matched {len(results)} entries.")
    _report("Deleted", results)


# ------------------------- main -------------------------


def main() -> None:
    app()


if __name__ == "__main__":
    main()
