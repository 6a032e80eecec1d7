"""Command-line interface for med1.

Operator tooling: create tables and provision users, referral links and
reward milestones.
"""

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy import select

from med1.auth.local import auth_service
from med1.auth.models import UserAccount
from med1.leads.repo import LeadRepository
from med1.logging_config import configure_logging, get_logger
from med1.referral.models import RewardUnlockType
from med1.referral.repo import ReferralRepository
from med1.storage.db import db

# Configure logging
configure_logging()
logger = get_logger(__name__)

# Create Typer app
app = typer.Typer(
    name="med1",
    help="med1 - practice management backend",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()


@app.command("init")
def init_database() -> None:
    """Initialize the database and create tables."""
    console.print("[bold blue]Initializing database...[/bold blue]")
    db.create_tables()
    console.print("[bold green]✓[/bold green] Database initialized successfully")


@app.command("create-user")
def create_user(
    email: Annotated[str, typer.Option("--email", "-e", help="Login email")],
    password: Annotated[str, typer.Option("--password", "-p", prompt=True, hide_input=True, help="Password")],
    name: Annotated[str | None, typer.Option("--name", "-n", help="Display name")] = None,
    specialty: Annotated[str | None, typer.Option("--specialty", "-s", help="Specialty")] = None,
    admin: Annotated[bool, typer.Option("--admin", help="Grant admin privileges")] = False,
) -> None:
    """Create a user account."""
    try:
        user = auth_service.create_user(
            email=email,
            password=password,
            name=name,
            specialty=specialty,
            is_admin=admin,
        )
    except ValueError as e:
        console.print(f"[bold red]✗[/bold red] {e}")
        raise typer.Exit(1)

    console.print(f"[bold green]✓[/bold green] User created with ID: [bold]{user.id}[/bold]")
    console.print(f"  Slug: {user.slug}")


@app.command("create-referral")
def create_referral(
    email: Annotated[str, typer.Option("--email", "-e", help="Owner's email")],
    slug: Annotated[str | None, typer.Option("--slug", help="Referral slug (random if omitted)")] = None,
    page_title: Annotated[str, typer.Option("--page-title", help="Title for a new page")] = "My page",
) -> None:
    """Create a referral link on the user's page (creating the page if needed)."""
    try:
        with db.session() as session:
            user = session.scalar(select(UserAccount).where(UserAccount.email == email.lower()))
            if not user:
                console.print(f"[red]User {email} not found[/red]")
                raise typer.Exit(1)

            repo = ReferralRepository(session)
            page = repo.get_or_create_page(user.id, title=page_title)
            referral = repo.create_referral(page.id, slug=slug)

            console.print(f"[bold green]✓[/bold green] Referral created: [bold]{referral.slug}[/bold]")
            console.print(f"  Page: {page.slug} (ID {page.id})")
    except ValueError as e:
        console.print(f"[bold red]✗[/bold red] {e}")
        raise typer.Exit(1)


@app.command("add-reward")
def add_reward(
    slug: Annotated[str, typer.Argument(help="Referral slug")],
    title: Annotated[str, typer.Option("--title", "-t", help="Reward title")],
    unlock_value: Annotated[int, typer.Option("--unlock-value", "-u", help="Threshold that unlocks the reward")],
    unlock_type: Annotated[RewardUnlockType, typer.Option("--unlock-type", help="What the threshold counts")] = RewardUnlockType.LEADS,
    description: Annotated[str | None, typer.Option("--description", "-d", help="Reward description")] = None,
) -> None:
    """Attach a reward milestone to a referral link."""
    try:
        with db.session() as session:
            repo = ReferralRepository(session)
            referral = repo.get_by_slug(slug)
            if not referral:
                console.print(f"[red]Referral {slug} not found[/red]")
                raise typer.Exit(1)

            reward = repo.add_reward(
                referral.id,
                title=title,
                unlock_value=unlock_value,
                unlock_type=unlock_type,
                description=description,
            )
            console.print(f"[bold green]✓[/bold green] Reward created with ID: [bold]{reward.id}[/bold]")
    except ValueError as e:
        console.print(f"[bold red]✗[/bold red] {e}")
        raise typer.Exit(1)


@app.command("show-referral")
def show_referral(
    slug: Annotated[str, typer.Argument(help="Referral slug")],
    show_leads: Annotated[bool, typer.Option("--leads", help="Also list the referral's leads")] = False,
) -> None:
    """Show a referral's lead count and reward milestones."""
    with db.session() as session:
        repo = ReferralRepository(session)
        referral = repo.get_by_slug(slug)
        if not referral:
            console.print(f"[red]Referral {slug} not found[/red]")
            raise typer.Exit(1)

        console.print(f"[bold]Referral:[/bold] {referral.slug}")
        console.print(f"[bold]Page:[/bold] {referral.page.slug}")
        console.print(f"[bold]Leads:[/bold] {referral.leads}")

        rewards = repo.list_rewards(referral.id)
        if rewards:
            table = Table(title="Rewards")
            table.add_column("ID", style="cyan")
            table.add_column("Title", style="green")
            table.add_column("Type")
            table.add_column("Unlock At", justify="right")
            table.add_column("Unlocked")

            for reward in rewards:
                table.add_row(
                    str(reward.id),
                    reward.title,
                    reward.unlock_type,
                    str(reward.unlock_value),
                    reward.unlocked_at.strftime("%Y-%m-%d %H:%M") if reward.unlocked_at else "-",
                )

            console.print(table)
        else:
            console.print("[yellow]No rewards configured[/yellow]")

        if show_leads:
            leads = LeadRepository(session).list_for_referral(referral.id)
            table = Table(title="Leads")
            table.add_column("ID", style="cyan")
            table.add_column("Name", style="green")
            table.add_column("Phone")
            table.add_column("Status")
            table.add_column("Source")
            table.add_column("Created At")

            for lead in leads:
                table.add_row(
                    lead.id,
                    lead.name,
                    lead.phone,
                    lead.status,
                    lead.utm_source or "N/A",
                    lead.created_at.strftime("%Y-%m-%d %H:%M"),
                )

            console.print(table)


if __name__ == "__main__":
    app()
