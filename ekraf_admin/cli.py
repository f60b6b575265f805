"""
Command-line front-end for the admin client.

Usage examples:
  ekraf-admin login admin@ekraf.test --level admin
  ekraf-admin products list -q kopi --page 2
  ekraf-admin products set-status 42 approved
  ekraf-admin partners list --status inactive
  ekraf-admin dashboard
"""
import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

import click

from ekraf_admin import config
from ekraf_admin.api import AdminApi
from ekraf_admin.auth.schemas import LoginLevel
from ekraf_admin.common.errors import ApiError
from ekraf_admin.dashboard.services import load_dashboard
from ekraf_admin.logging_config import configure_logging
from ekraf_admin.products.schemas import Product, ProductFilters, ProductStatus
from ekraf_admin.users.schemas import PartnerFilter
from ekraf_admin.users.services import filter_partners, summarize_partners

T = TypeVar('T')


def create_api() -> AdminApi:
    return AdminApi()


def _run(action: Callable[[AdminApi], Awaitable[T]]) -> T:
    async def runner():
        async with create_api() as api:
            return await action(api)

    try:
        return asyncio.run(runner())
    except ApiError as exc:
        raise click.ClickException(exc.message)


def _format_price(price: int) -> str:
    return "Rp{:,}".format(price).replace(",", ".")


def _echo_product(product: Product) -> None:
    click.echo(
        f"#{product.id:<5} {product.name[:40]:<40} {_format_price(product.price):>14} "
        f"stock {product.stock:<5} {product.status.value}"
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Ekraf admin panel: partners, products and business categories."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(verbose)


# --------------------------------------------------------------------
# session
# --------------------------------------------------------------------

@cli.command()
@click.argument("username_or_email")
@click.password_option(confirmation_prompt=False)
@click.option("--level", type=click.Choice([lvl.value for lvl in LoginLevel]), default=LoginLevel.ADMIN.value,
              show_default=True, help="Account level to log in as")
def login(username_or_email: str, password: str, level: str) -> None:
    """Log in and remember the session."""
    response = _run(lambda api: api.auth.login(username_or_email, password, level))
    click.echo(f"Logged in as {response.user.name} <{response.user.email}>")


@cli.command()
def logout() -> None:
    """Forget the stored session."""
    _run(_logout)
    click.echo("Logged out.")


async def _logout(api: AdminApi) -> None:
    api.auth.logout()


@cli.command()
def whoami() -> None:
    """Show the user of the stored session."""
    user = _run(_cached_user)
    if user is None:
        raise click.ClickException("Not logged in.")
    click.echo(f"{user.name} <{user.email}> level={user.level_name or user.level_id}")


async def _cached_user(api: AdminApi):
    return api.session.get_user()


# --------------------------------------------------------------------
# products
# --------------------------------------------------------------------

@cli.group()
def products() -> None:
    """Manage products."""


@products.command("list")
@click.option("--page", default=1, show_default=True, type=click.IntRange(min=1))
@click.option("--limit", default=config.DEFAULT_PAGE_SIZE, show_default=True, type=click.IntRange(min=1))
@click.option("-q", "--query", default=None, help="Free-text search")
@click.option("--category", type=int, default=None, help="Business category id")
def list_products(page: int, limit: int, query: Optional[str], category: Optional[int]) -> None:
    """List one page of products."""
    filters = ProductFilters(page=page, limit=limit, q=query, kategori=category)
    result = _run(lambda api: api.products.list(filters))
    for product in result.data:
        _echo_product(product)
    click.echo(f"Page {result.current_page}/{result.total_pages}")
    if result.has_next:
        click.echo(f"More results: --page {result.current_page + 1}")


@products.command("show")
@click.argument("product_id", type=int)
def show_product(product_id: int) -> None:
    """Show one product."""
    product = _run(lambda api: api.products.get(product_id))
    _echo_product(product)
    if product.category:
        click.echo(f"  category: {product.category.name}")
    if product.owner_name:
        click.echo(f"  owner:    {product.owner_name} {product.phone_number}")
    for link in product.online_store_links:
        click.echo(f"  link:     {link.platform_name or '-'} {link.url}")


@products.command("set-status")
@click.argument("product_id", type=int)
@click.argument("status", type=click.Choice([s.value for s in ProductStatus]))
def set_product_status(product_id: int, status: str) -> None:
    """Change the moderation status of a product."""
    response = _run(lambda api: api.products.set_status(product_id, status))
    click.echo(response.message or "Status updated.")
    _echo_product(response.data)


@products.command("delete")
@click.argument("product_id", type=int)
@click.confirmation_option(prompt="Delete this product? This cannot be undone.")
def delete_product(product_id: int) -> None:
    """Delete a product."""
    response = _run(lambda api: api.products.delete(product_id))
    click.echo(response.message or "Product deleted.")


# --------------------------------------------------------------------
# partners, categories, dashboard
# --------------------------------------------------------------------

@cli.group()
def partners() -> None:
    """Manage partners (UMKM accounts)."""


@partners.command("list")
@click.option("--status", type=click.Choice([f.value for f in PartnerFilter]), default=PartnerFilter.ALL.value,
              show_default=True)
@click.option("-q", "--query", default="", help="Search by name")
def list_partners(status: str, query: str) -> None:
    """List partners with their activation state."""
    everyone = _run(lambda api: api.users.list_partners())
    stats = summarize_partners(everyone)
    for user in filter_partners(everyone, status, query):
        state = "active" if user.is_active else "inactive"
        click.echo(f"#{user.id:<5} {user.name:<30} {user.email:<30} {state}")
    click.echo(f"Total {stats.total}, active {stats.active}, inactive {stats.inactive}")


@cli.group()
def categories() -> None:
    """Manage business categories."""


@categories.command("list")
def list_categories() -> None:
    """List business categories."""
    for category in _run(lambda api: api.business_categories.list()):
        click.echo(f"#{category.id:<5} {category.name:<30} subsector {category.sub_sector_id or '-'}")


@cli.command()
def dashboard() -> None:
    """Show partner, product and category counts."""
    summary = _run(load_dashboard)
    if summary.current_user:
        click.echo(f"Welcome, {summary.current_user.name}")
    click.echo(f"Partners:   {summary.partner_count}")
    click.echo(f"Products:   {summary.product_count}")
    click.echo(f"Categories: {summary.category_count}")
    if summary.recent_products:
        click.echo("\nRecent products:")
        for product in summary.recent_products:
            _echo_product(product)


if __name__ == "__main__":
    cli()
