# cli.py - interactive product catalog client
import os
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from sdk.product_client import ProductClient

console = Console()
c = ProductClient(
    base_url=os.environ.get("PRODUCT_API_URL", "http://127.0.0.1:3000"),
    api_key=os.environ.get("API_KEY"),
)

# Global state for status messages and caching
status_message = "Ready"
product_cache: List[Dict[str, Any]] = []

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


def _error_message(e: Exception) -> str:
    """Prefer the API's error envelope message over the raw HTTP error."""
    response = getattr(e, "response", None)
    if response is not None:
        try:
            body = response.json()
        except ValueError:
            return f"HTTP {response.status_code}"
        if isinstance(body, dict) and body.get("message"):
            return f"{body.get('errorType', 'Error')}: {body['message']}"
    return str(e)


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Dict[str, Any]], title: str = "📦 Products Catalog"):
    if not products:
        console.print("[italic yellow]No products found[/italic yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=12)
    table.add_column("Name", style="bold", width=20)
    table.add_column("Description", width=30)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Category", width=15)
    table.add_column("In stock", justify="center", width=8)

    for p in products:
        in_stock = p.get("inStock")
        table.add_row(
            str(p.get("id", "N/A")),
            p.get("name", "N/A"),
            p.get("description", ""),
            f"${float(p.get('price', 0)):.2f}",
            p.get("category", "N/A"),
            "[green]yes[/green]" if in_stock else "[red]no[/red]",
        )
    console.print(table)


def show_page(page: Dict[str, Any]):
    title = f"📦 Products - page {page.get('page', 1)} ({page.get('total', 0)} total)"
    show_products(page.get("products", []), title=title)


def show_stats(stats: Dict[str, int]):
    if not stats:
        console.print("[italic yellow]No products in store[/italic yellow]")
        return

    table = Table(title="📊 Products per category", box=box.ROUNDED, header_style="bold yellow")
    table.add_column("Category", width=20)
    table.add_column("Count", justify="right", width=8)
    for category, count in stats.items():
        table.add_row(category, str(count))
    console.print(table)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


# ---------------------------
# API wrapper with exception handling
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Returns the decoded result, or None after showing the error.
    """
    global status_message
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            console=console,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            status_message = success_msg
            console.print(show_status(success_msg, True))
        return result
    except Exception as e:
        status_message = f"Error: {_error_message(e)}"
        console.print(show_status(status_message, False))
        return None


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_product_completer():
    global product_cache
    if not product_cache:
        page = try_api(c.list_products) or {}
        product_cache = page.get("products", [])
    return WordCompleter([p.get("id", "") for p in product_cache if p.get("id")], ignore_case=True)


def get_category_completer():
    categories = sorted({p.get("category", "") for p in product_cache if p.get("category")})
    return WordCompleter(categories, ignore_case=True)


def refresh_cache():
    global product_cache
    page = try_api(c.list_products) or {}
    product_cache = page.get("products", [])


# ---------------------------
# Layout and Header
# ---------------------------
def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "🛍️ Product API",
        f"[bold blue]{c.base_url}[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


# ---------------------------
# Input helpers
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def ask_float(message: str, default: float = 10.0) -> float:
    while True:
        raw = Prompt.ask(message, default=str(default))
        try:
            value = float(raw)
        except ValueError:
            console.print("[red]Please enter a valid number.[/red]")
            continue
        if value < 0:
            console.print("[red]Price cannot be negative.[/red]")
            continue
        return value


def ask_product_fields(existing: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    existing = existing or {}
    return {
        "name": prompt_with_autocomplete("Name", default=existing.get("name", "")),
        "description": prompt_with_autocomplete("Description", default=existing.get("description", "")),
        "price": ask_float("💰 Price", default=existing.get("price", 10.0)),
        "category": prompt_with_autocomplete(
            "🏷️ Category", completer=get_category_completer(), default=existing.get("category", "")
        ),
        "in_stock": Confirm.ask("In stock?", default=existing.get("inStock", True)),
    }


# ---------------------------
# Main menu
# ---------------------------
def menu():
    global status_message, product_cache

    console.clear()
    console.print(create_header())
    refresh_cache()

    while True:
        if status_message:
            console.print(show_status(status_message, not status_message.startswith("Error")))

        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "5", "✏️ Update product"),
            ("2", "🔍 Search products", "6", "🗑️ Delete product"),
            ("3", "ℹ️ Get product by ID", "7", "📊 Category stats"),
            ("4", "➕ Create product", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 8)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            category = prompt_with_autocomplete("Category (blank for all)", completer=get_category_completer()).strip()
            limit = Prompt.ask("Page size (blank for all)", default="").strip()
            page_no = Prompt.ask("Page", default="1").strip() if limit else None
            page = try_api(
                c.list_products, category or None, page_no, limit or None,
                success_msg="Products loaded successfully"
            )
            if page is not None:
                if not category and not limit:
                    product_cache = page.get("products", [])
                show_page(page)

        elif choice == "2":
            term = prompt_with_autocomplete("Enter search term")
            res = try_api(c.search_products, term, success_msg=f"Search for '{term}' completed")
            if res is not None:
                show_products(res, title=f"🔍 Results for '{term}'")

        elif choice == "3":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer())
            resp = try_api(c.get_product, pid, success_msg=f"Product {pid} details loaded")
            if resp:
                show_products([resp])

        elif choice == "4":
            fields = ask_product_fields()
            resp = try_api(c.create_product, success_msg=f"Product '{fields['name']}' created", **fields)
            if resp:
                console.print(Panel(f"Created product: [green]{resp['id']}[/green]"))
                refresh_cache()

        elif choice == "5":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer())
            current = try_api(c.get_product, pid)
            if current:
                fields = ask_product_fields(current)
                resp = try_api(c.update_product, pid, success_msg=f"Product {pid} updated", **fields)
                if resp:
                    show_products([resp])
                    refresh_cache()

        elif choice == "6":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer())
            if Confirm.ask(f"[red]Delete product {pid}?[/red]"):
                resp = try_api(c.delete_product, pid, success_msg=f"Product {pid} deleted")
                if resp:
                    refresh_cache()

        elif choice == "7":
            stats = try_api(c.stats, success_msg="Stats loaded")
            if stats is not None:
                show_stats(stats)

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Goodbye! 👋[/bold green]", title="Goodbye"))
                sys.exit(0)

        console.print()
        console.rule(style="dim")


if __name__ == "__main__":
    try:
        menu()
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n\n[bold red]Unexpected error: {e}[/bold red]")
        sys.exit(1)
