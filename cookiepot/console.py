from __future__ import annotations

import logging

import click
import httpx

from cookiepot.client import Client
from cookiepot.cookies import Cookie
from cookiepot.exceptions import CookiepotError
from cookiepot.jar import CookieJar
from cookiepot.stores import CookieStore, store_from_url


def format_cookie(cookie: Cookie) -> str:
    parts = [cookie.to_header(), f"Path={cookie.path}"]
    if cookie.domain:
        parts.append(f"Domain={cookie.domain}")
    if cookie.expires:
        parts.append(f"Expires={cookie.expires.isoformat()}")
    if cookie.secure:
        parts.append("Secure")
    if cookie.http_only:
        parts.append("HttpOnly")
    return "; ".join(parts)


@click.group()
@click.option("--verbose", is_flag=True)
@click.option("--store", "store_url", default="memory://", show_default=True, help="Cookie store URL.")
@click.pass_context
def app(context: click.Context, verbose: bool, store_url: str) -> None:
    if verbose:
        logging.getLogger(__name__.split(".")[0]).setLevel(logging.DEBUG)

    try:
        store = store_from_url(store_url)
    except CookiepotError as ex:
        raise click.ClickException(str(ex)) from ex
    context.obj = context.with_resource(store)


@app.command("cookies")
@click.argument("url")
@click.pass_obj
def cookies_command(store: CookieStore, url: str) -> None:
    """Print cookies stored for URL."""
    try:
        cookies = CookieJar(store).cookies(url)
    except CookiepotError as ex:
        raise click.ClickException(str(ex)) from ex

    for cookie in cookies:
        click.echo(format_cookie(cookie))


@app.command("fetch")
@click.argument("url")
@click.pass_obj
def fetch_command(store: CookieStore, url: str) -> None:
    """Request URL and store the cookies it sets."""
    jar = CookieJar(store)
    try:
        with Client(jar, raise_cookie_errors=True) as client:
            response = client.get(url)
            cookies = client.cookies(url)
    except (CookiepotError, httpx.HTTPError) as ex:
        raise click.ClickException(str(ex)) from ex

    click.echo(f"{response.status_code}")
    for cookie in cookies:
        click.echo(format_cookie(cookie))


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="[%(levelname)s] %(message)s",
    )
    app()


if __name__ == "__main__":
    main()
