"""CLI (Typer + Rich) sobre `SS12000Client`."""
