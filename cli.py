# cli.py
import sys
from typing import Any, Dict, List, Optional

import requests
from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table
from rich.text import Text

from sdk.storefront_client import StorefrontClient, StorefrontError
from storefront.config import settings

console = Console()
c = StorefrontClient(base_url=settings.API_URL, timeout=int(settings.HTTP_TIMEOUT))

product_cache: List[Dict[str, Any]] = []

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
})


# ---------------------------
# Display helpers
# ---------------------------
def _money(amount: float, currency: str) -> str:
    return f"{amount:,.2f} {currency}"


def show_view(view: Dict[str, Any]):
    items = view.get("items", [])
    filters = view.get("filters", {})
    title = f"📦 Catalog - page {view.get('page', 1)}/{max(view.get('total_pages', 0), 1)}"
    if filters.get("search"):
        title += f" - search '{filters['search']}'"
    if filters.get("category"):
        title += f" - category {filters['category']}"

    if not items:
        console.print(Panel("[italic yellow]No products found[/italic yellow]", title=title))
        return

    table = Table(title=title, box=box.ROUNDED, header_style="bold cyan", title_style="bold magenta", show_lines=True)
    table.add_column("ID", style="dim", width=14)
    table.add_column("Name", style="bold", width=22)
    table.add_column("Category", width=12)
    table.add_column("Price", justify="right", width=14)
    table.add_column("Stock", justify="right", width=7)

    for p in items:
        stock = p.get("stock", 0)
        stock_cell = f"[red]{stock}[/red]" if stock == 0 else str(stock)
        table.add_row(p["id"], p["name"], p.get("category", ""), _money(p.get("price", 0), p.get("currency", "")), stock_cell)
    console.print(table)
    console.print(f"[dim]{view.get('total_count', 0)} matching product(s) · 🛒 {view['cart']['count']} in cart[/dim]")
    for w in view.get("warnings", []):
        console.print(f"[yellow]⚠ {w}[/yellow]")


def show_cart(cart: Dict[str, Any]):
    lines = cart.get("lines", [])
    title = Text()
    title.append("🛒 Cart", style="bold")
    title.append(f" - {cart.get('count', 0)} item(s)", style="bold cyan")

    if not lines:
        console.print(Panel("Your cart is empty 🛍️", title=title, style="blue"))
        return

    table = Table(box=box.ROUNDED, header_style="bold blue", show_lines=True)
    table.add_column("Product", style="bold", width=26)
    table.add_column("Qty", justify="right", width=6)
    table.add_column("Price", justify="right", width=14)
    table.add_column("Subtotal", justify="right", width=16)
    currency = ""
    for line in lines:
        currency = line.get("currency", "")
        table.add_row(
            line["name"],
            str(line["quantity"]),
            _money(line["price"], currency),
            _money(line["price"] * line["quantity"], currency),
        )
    table.add_row("[bold]Total[/bold]", "", "", f"[bold green]{_money(cart.get('total', 0), currency)}[/bold green]")
    console.print(Panel(table, title=title, border_style="blue"))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """Call fn with a spinner; report errors in the status panel and return None."""
    try:
        with Progress(SpinnerColumn(), TextColumn("[progress.description]{task.description}"), transient=True) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)
    except StorefrontError as e:
        console.print(show_status(f"Error: {e.detail}", False))
        return None
    except requests.RequestException as e:
        console.print(show_status(f"Error: cannot reach {c.base_url} ({e.__class__.__name__})", False))
        return None
    if success_msg:
        console.print(show_status(success_msg, True))
    return result


def refresh_cache(view: Optional[Dict[str, Any]]):
    global product_cache
    if view:
        product_cache = view.get("items", [])


def get_product_completer():
    ids = [p.get("id", "") for p in product_cache]
    return WordCompleter([i for i in ids if i], ignore_case=True)


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_float(message: str, default: float = 0.0) -> float:
    while True:
        raw = Prompt.ask(message, default=str(default))
        try:
            return float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")


def ask_product_form() -> Dict[str, Any]:
    return {
        "name": prompt_with_autocomplete("Product name"),
        "description": prompt_with_autocomplete("Description"),
        "price": ask_float("💰 Price", default=0.0),
        "stock": IntPrompt.ask("📦 Stock", default=1),
        "category": prompt_with_autocomplete("🏷️ Category"),
        "currency": Prompt.ask("Currency", default=settings.DEFAULT_CURRENCY),
        "image": prompt_with_autocomplete("Image (file name or URL)"),
    }


# ---------------------------
# Main menu
# ---------------------------
OPTIONS = [
    ("1", "📦 Show catalog", "7", "🛒 View cart"),
    ("2", "🔍 Search", "8", "🧹 Clear cart"),
    ("3", "🏷️ Filter by category", "9", "➕ Create product"),
    ("4", "⏭️ Next / ⏮️ prev page", "10", "✏️ Update product"),
    ("5", "🛒 Add to cart", "11", "🗑️ Delete product"),
    ("6", "➖ Remove from cart", "12", "🔄 Reload catalog"),
    ("", "", "q", "👋 Quit"),
]


def menu():
    console.clear()
    console.print(Panel("[bold blue]Storefront CLI[/bold blue]", style="bold blue"))
    view = try_api(c.list_products)
    refresh_cache(view)

    while True:
        menu_table = Table.grid(padding=(0, 2))
        for _ in range(2):
            menu_table.add_column("Key", style="bold cyan", width=4)
            menu_table.add_column("Option", width=28)
        for row in OPTIONS:
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 13)] + ["q", "quit", "exit"]),
        ).strip()

        view = None
        if choice == "1":
            view = try_api(c.list_products)
        elif choice == "2":
            term = prompt_with_autocomplete("Search term (empty = all)")
            view = try_api(c.list_products, search=term)
        elif choice == "3":
            cats = try_api(c.list_categories) or []
            completer = WordCompleter([cat["id"] for cat in cats], ignore_case=True)
            category = prompt_with_autocomplete("Category id (empty = all)", completer=completer)
            view = try_api(c.list_products, category=category)
        elif choice == "4":
            fn = c.next_page if Confirm.ask("Next page? (no = previous)", default=True) else c.prev_page
            view = try_api(fn)
        elif choice == "5":
            pid = prompt_with_autocomplete("Product ID", completer=get_product_completer())
            view = try_api(c.add_to_cart, pid, success_msg=f"Added {pid} to cart")
        elif choice == "6":
            pid = prompt_with_autocomplete("Product ID", completer=get_product_completer())
            view = try_api(c.remove_from_cart, pid, success_msg=f"Removed {pid} from cart")
        elif choice == "7":
            cart = try_api(c.view_cart)
            if cart:
                show_cart(cart)
        elif choice == "8":
            if Confirm.ask("Empty the whole cart?"):
                view = try_api(c.clear_cart, success_msg="Cart cleared")
        elif choice == "9":
            form = ask_product_form()
            if try_api(c.create_product, success_msg=f"Product '{form['name']}' created", **form):
                view = try_api(c.list_products)
        elif choice == "10":
            pid = prompt_with_autocomplete("Product ID", completer=get_product_completer())
            form = ask_product_form()
            if try_api(c.update_product, pid, success_msg=f"Product {pid} updated", **form):
                view = try_api(c.list_products)
        elif choice == "11":
            pid = prompt_with_autocomplete("Product ID", completer=get_product_completer())
            if Confirm.ask(f"[red]Delete {pid}?[/red]"):
                result = try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted")
                view = result["view"] if result else None
        elif choice == "12":
            view = try_api(c.reload, success_msg="Catalog reloaded")
        elif choice.lower() in ("q", "quit", "exit"):
            console.print(Panel.fit("[bold green]Bye! 👋[/bold green]", title="Goodbye"))
            return

        if view:
            refresh_cache(view)
            show_view(view)
            if choice in ("5", "6", "8"):
                show_cart(view["cart"])

        console.print()
        console.rule(style="dim")


def main():
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
