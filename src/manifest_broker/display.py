# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

# src/manifest_broker/display.py

import json
from typing import Optional

from rich.console import Console
from rich.markup import escape as rich_escape
from rich.panel import Panel
from rich.text import Text

from .exchange import AppCredentials

# Prompts, spinners and errors go to stderr; credentials go to stdout
console = Console(stderr=True)
output = Console()


def print_header(target: Optional[Console] = None):
    out = target or console
    out.print()
    out.print(Panel.fit("[bold]GitHub App[/bold]", padding=(0, 8)))
    out.print()


def print_instructions(
    entry_url: str,
    will_open: bool,
    headless: bool = False,
    target: Optional[Console] = None,
):
    out = target or console
    if headless:
        text = Text.from_markup(
            "Running in headless environment (no GUI detected).\n"
            "Open the URL below in a browser that can reach this machine:"
        )
    elif not will_open:
        text = Text.from_markup(
            "Open the URL below in your browser to fill in the app creation form.\n"
            "Then review the app on GitHub and click [bold]Create GitHub App[/bold]."
        )
    else:
        text = Text.from_markup(
            "1. Your browser will now open the app creation form.\n"
            "2. If it doesn't open automatically, please open the URL below manually.\n"
            "3. Review the app on GitHub and click [bold]Create GitHub App[/bold]."
        )
    out.print(Panel(text, title="GitHub App Setup", style="bold blue"))
    escaped_url = rich_escape(entry_url)
    out.print(f"[bold]URL:[/bold] [link={entry_url}]{escaped_url}[/link]\n")


def print_credentials(credentials: AppCredentials, target: Optional[Console] = None):
    out = target or output
    out.print()
    out.print("  [green]✓[/green] GitHub App created successfully.")
    out.print()
    out.print(f"  [dim]Name[/dim]  {rich_escape(credentials.name)}")
    out.print(f"  [dim]URL[/dim]   {rich_escape(credentials.html_url)}")
    out.print()
    out.print("  [dim]# Add to .env[/dim]")
    out.print()
    for line in credentials.env_lines():
        key, _, value = line.partition("=")
        out.print(f"  [cyan]{key}[/cyan]={rich_escape(value)}")
    out.print()
    out.print("  [dim]# Configure Better Auth[/dim]")
    out.print()
    out.print("  [dim]export const[/dim] auth = [cyan]betterAuth[/cyan]({")
    out.print("    [cyan]socialProviders[/cyan]: {")
    out.print("      [cyan]github[/cyan]: {")
    out.print("        [dim]clientId[/dim]: process.env.[cyan]GITHUB_CLIENT_ID[/cyan],")
    out.print("        [dim]clientSecret[/dim]: process.env.[cyan]GITHUB_CLIENT_SECRET[/cyan],")
    out.print("      },")
    out.print("    },")
    out.print("  });")
    out.print()


def print_credentials_json(credentials: AppCredentials, target: Optional[Console] = None):
    out = target or output
    out.print_json(json.dumps(credentials.to_dict()))


def print_error(message: str, target: Optional[Console] = None):
    out = target or console
    out.print()
    out.print(f"  [bold red]Error:[/bold red] {rich_escape(message)}")
    out.print()
