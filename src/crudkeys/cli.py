#!/usr/bin/env python3
"""crudkeys CLI for day-to-day record management."""

import argparse

import questionary
from rich.console import Console
from rich.table import Table

from crudkeys.config import config, configure_logging
from crudkeys.employee.repository import EmployeeRepository
from crudkeys.idgen import GenerationContext, GenerationExhausted, PostgresKeyStore, build_generator
from crudkeys.product.repository import ProductRepository

console = Console()


def select_employee() -> dict | None:
    """Prompt the user to select an employee."""
    employees = EmployeeRepository().list()
    if not employees:
        console.print("[red]No employees found.[/]")
        return None
    selected = questionary.select(
        "Select an employee:",
        choices=[questionary.Choice(title=f"{e['name']} ({e['id']})", value=e) for e in employees],
    ).ask()
    return selected


def add_employee():
    """Create an employee with a generated key."""
    name = questionary.text("Employee name:").ask()
    if not name:
        console.print("[dim]Cancelled.[/]")
        return

    try:
        employee = EmployeeRepository().create(name=name)
    except (GenerationExhausted, ValueError) as e:
        console.print(f"[red]{e}[/]")
        return

    console.print(f"[green]Created {employee['name']} (id={employee['id']}).[/]")


def list_employees():
    """Print all employees."""
    employees = EmployeeRepository().list()
    if not employees:
        console.print("[red]No employees found.[/]")
        return

    table = Table("ID", "Name", "Created")
    for e in employees:
        table.add_row(str(e["id"]), e["name"], str(e["created_at"]))
    console.print(table)


def remove_employee():
    """Delete a selected employee."""
    employee = select_employee()
    if not employee:
        return

    console.print(f"[yellow]Will delete [bold]{employee['name']}[/] (id={employee['id']}).[/]")
    if not questionary.confirm("Proceed with these changes?").ask():
        console.print("[dim]Cancelled.[/]")
        return

    EmployeeRepository().delete(employee["id"])
    console.print(f"[green]Deleted {employee['name']}.[/]")


def list_products():
    """Print all products."""
    products = ProductRepository().list()
    if not products:
        console.print("[red]No products found.[/]")
        return

    table = Table("ID", "Name", "Description", "Price")
    for p in products:
        table.add_row(
            str(p["id"]),
            p["name"],
            p["description"] or "",
            str(p["price"]) if p["price"] is not None else "",
        )
    console.print(table)


def generate_id(collection: str):
    """Preview the next key the configured generator would issue."""
    generator = build_generator(config)
    try:
        key = generator.generate(GenerationContext(collection, PostgresKeyStore()))
    except (GenerationExhausted, ValueError) as e:
        console.print(f"[red]{e}[/]")
        return

    console.print(f"[bold]{collection}[/] ({config.id_strategy}): {key}")
    console.print("[dim]Nothing was inserted; the key is not reserved.[/]")


def main():
    parser = argparse.ArgumentParser(description="crudkeys CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("add-employee", help="Create an employee")
    subparsers.add_parser("list-employees", help="List employees")
    subparsers.add_parser("remove-employee", help="Delete an employee")
    subparsers.add_parser("list-products", help="List products")
    generate = subparsers.add_parser("generate-id", help="Preview a generated key")
    generate.add_argument("collection", nargs="?", default="employees", choices=["employees"])

    args = parser.parse_args()
    configure_logging()

    if args.command == "add-employee":
        add_employee()
    elif args.command == "list-employees":
        list_employees()
    elif args.command == "remove-employee":
        remove_employee()
    elif args.command == "list-products":
        list_products()
    elif args.command == "generate-id":
        generate_id(args.collection)


if __name__ == "__main__":
    main()
