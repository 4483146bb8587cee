"""Terminal theme for the recordschema CLI.

Small subset of Rich helpers: version line, numbered section headers,
key/value tables and a schema tree renderer.
"""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from .property import Property

BRAND = "recordschema"

# ── Palette ───────────────────────────────────────────────────────

TEAL = "#2A9D8F"
SAND = "#C9B79C"
MUTED = "dim"


def print_version(version: str, console: Console) -> None:
    """Print a compact branded version line."""
    t = Text()
    t.append(BRAND, style=f"bold {TEAL}")
    t.append(f"  v{version}", style=MUTED)
    console.print(t)


def section(title: str, console: Console, number: str | None = None) -> None:
    """Print a numbered section header."""
    console.print()
    t = Text()
    if number:
        t.append(f"  {number}", style=f"bold {TEAL}")
        t.append(" · ", style=MUTED)
    else:
        t.append("  ")
    t.append(title.upper(), style="bold")
    console.print(t)
    console.print("  " + "─" * 48, style=SAND)


def make_kv_table() -> Table:
    """Create a headerless two-column key–value table."""
    t = Table(
        box=box.ROUNDED,
        border_style=SAND,
        show_header=False,
        padding=(0, 1),
    )
    t.add_column("Key", style=f"bold {TEAL}", no_wrap=True)
    t.add_column("Value")
    return t


def _label(name: str, prop: Property, required: bool) -> Text:
    t = Text()
    t.append(name, style="bold" if required else "")
    if prop.is_ref:
        t.append(f"  → {prop.ref}", style=TEAL)
    elif prop.type is not None:
        t.append(f"  {prop.type.value}", style=SAND)
    else:
        t.append("  any", style=MUTED)
    if required:
        t.append("  *", style=f"bold {TEAL}")
    if prop.deprecated:
        t.append("  deprecated", style="yellow")
    return t


def _grow(tree: Tree, prop: Property) -> None:
    required = set(prop.required or [])
    for name, child in (prop.properties or {}).items():
        branch = tree.add(_label(name, child, name in required))
        _grow(branch, child)
    if prop.items is not None:
        branch = tree.add(_label("[items]", prop.items, False))
        _grow(branch, prop.items)


def schema_tree(title: str, prop: Property) -> Tree:
    """Render a Property and its inline children as a Rich tree."""
    tree = Tree(Text(title, style=f"bold {TEAL}"))
    _grow(tree, prop)
    return tree
