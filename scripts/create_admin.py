# flake8: noqa
# scripts/create_admin.py

import asyncio
import typer

from app.core.database import AsyncSessionLocal, create_db_and_tables
from app.core.exceptions import ConflictError
from app.domains.usr import crud as usr_crud
from app.domains.usr import schemas as usr_schemas
from app.domains.usr.models import UserRole

cli = typer.Typer()


async def create_admin_user(user_in: usr_schemas.UserCreate, create_tables: bool = False) -> bool:
    """
    Create the admin account. Returns False when the username or email is taken.
    """
    if create_tables:
        await create_db_and_tables()

    async with AsyncSessionLocal() as db:
        try:
            await usr_crud.user.create(db, obj_in=user_in)
        except ConflictError as e:
            print(f"Error: {e.detail}")
            return False
    print(f"Admin account created: {user_in.username} ({user_in.email})")
    return True


@cli.command()
def main(
    username: str = typer.Option(
        ..., '--username', '-u',
        prompt="Admin username",
        help="Login name of the new admin account."
    ),
    email: str = typer.Option(
        ..., '--email', '-e',
        prompt="Admin email",
        help="Email address of the new admin account."
    ),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="Admin password",
        hide_input=True,
        confirmation_prompt=True,
        help="Password of the new admin account (at least 8 characters)."
    ),
    full_name: str = typer.Option(
        "Admin", '--name', '-n',
        help="Display name of the admin."
    ),
    create_tables: bool = typer.Option(
        False, '--create-tables',
        help="Create schemas and tables first (development databases without Alembic)."
    ),
):
    """
    Create the first ADMIN user of the Cidery Production API.
    """
    if len(password) < 8:
        print("Error: the password must be at least 8 characters long.")
        raise typer.Abort()

    user_data = usr_schemas.UserCreate(
        username=username,
        email=email,
        password=password,
        full_name=full_name,
        role=UserRole.ADMIN,
    )

    if not asyncio.run(create_admin_user(user_data, create_tables=create_tables)):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    cli()
