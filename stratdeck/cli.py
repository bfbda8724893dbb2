"""CLI tool for admin operations.

Usage:
    python -m stratdeck.cli create-user
    python -m stratdeck.cli add-strategy
"""

import sys
import getpass

from sqlmodel import Session, select

from stratdeck.database import engine, create_db_and_tables
from stratdeck.models.strategy import StrategyCatalog
from stratdeck.models.user import User
from stratdeck.services.auth import hash_password, new_totp_secret, totp_provisioning_uri


def create_user():
    """Create a dashboard user, optionally with TOTP."""
    create_db_and_tables()

    email = input("Email: ").strip().lower()
    if not email or "@" not in email:
        print("A valid email is required.")
        sys.exit(1)

    with Session(engine) as session:
        existing = session.exec(select(User).where(User.email == email)).first()
        if existing:
            print(f"User '{email}' already exists.")
            sys.exit(1)

    name = input("Name: ").strip()
    password = getpass.getpass("Password: ")
    password_confirm = getpass.getpass("Confirm password: ")
    if password != password_confirm:
        print("Passwords do not match.")
        sys.exit(1)

    enable_totp = input("Enable TOTP? [y/N]: ").strip().lower() == "y"
    totp_secret = new_totp_secret() if enable_totp else None

    user = User(
        email=email,
        name=name,
        hashed_password=hash_password(password),
        totp_secret=totp_secret,
    )

    with Session(engine) as session:
        session.add(user)
        session.commit()

    print(f"\nUser '{email}' created successfully.")
    if not totp_secret:
        return

    totp_uri = totp_provisioning_uri(totp_secret, email)
    print(f"\nTOTP Secret: {totp_secret}")
    print(f"TOTP URI: {totp_uri}")
    print("\nScan the QR code below with your authenticator app:")

    try:
        import qrcode
        qr = qrcode.QRCode(box_size=1, border=1)
        qr.add_data(totp_uri)
        qr.make(fit=True)
        qr.print_ascii(invert=True)
    except ImportError:
        print("(Install qrcode[pil] to display QR code in terminal)")


def add_strategy():
    """Add an entry to the strategy catalog."""
    create_db_and_tables()

    name = input("Strategy name: ").strip()
    if not name:
        print("Strategy name cannot be empty.")
        sys.exit(1)

    image_uri = input("Image URI (optional): ").strip()
    description = input("Description (optional): ").strip() or None
    requires_telegram = input("Requires Telegram? [y/N]: ").strip().lower() == "y"
    default_qty_raw = input("Default quantity (optional): ").strip()
    if default_qty_raw and (not default_qty_raw.isdigit() or int(default_qty_raw) < 1):
        print("Default quantity must be a positive integer.")
        sys.exit(1)

    strategy = StrategyCatalog(
        name=name,
        image_uri=image_uri,
        description=description,
        requires_telegram=requires_telegram,
        default_qty=int(default_qty_raw) if default_qty_raw else None,
    )
    with Session(engine) as session:
        session.add(strategy)
        session.commit()
        session.refresh(strategy)

    print(f"\nStrategy '{name}' added with id {strategy.id}.")


COMMANDS = {
    "create-user": create_user,
    "add-strategy": add_strategy,
}


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m stratdeck.cli <command>")
        print(f"Commands: {', '.join(COMMANDS)}")
        sys.exit(1)

    command = COMMANDS.get(sys.argv[1])
    if command is None:
        print(f"Unknown command: {sys.argv[1]}")
        sys.exit(1)
    command()


if __name__ == "__main__":
    main()
