"""Command-line runner: import an HR payload and query the resulting org chart."""

import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from orgchart import employees
from orgchart.config import get_env_config, load_pipeline_config
from orgchart.employees.models import EmployeeSummary
from orgchart.employees.org_structure import flatten_hierarchy
from orgchart.employees.service import EmployeeService
from orgchart.errors import OrgChartError
from orgchart.utils.types import ErrorKind

console = Console()

SPAN_COLUMNS = ("employee_id", "name", "role", "depth", "direct_reports", "total_reports")


def _exit_code(kind: ErrorKind) -> int:
    match kind:
        case ErrorKind.MALFORMED_INPUT | ErrorKind.REFERENTIAL_INTEGRITY:
            return 2
        case ErrorKind.NOT_FOUND:
            return 3
        case ErrorKind.INVALID_ARGUMENT:
            return 4
        case ErrorKind.IO:
            return 5
        case _:
            return 1


def _summary_table(title: str, rows: list[EmployeeSummary]) -> Table:
    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Salary", justify="right")
    table.add_column("DOJ")
    table.add_column("Manager", justify="right")
    for r in rows:
        table.add_row(
            str(r.id),
            r.name,
            r.category,
            f"{r.salary:,.2f}",
            r.date_of_joining.isoformat() if r.date_of_joining else "",
            str(r.manager_id or ""),
        )
    return table


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="orgchart", description="Import employee data and query the org chart")
    parser.add_argument("--env", default="production", help="Configuration preset")
    parser.add_argument("--format", dest="fmt", choices=["excel", "csv"], help="Input payload format")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", help="Parse a payload without importing it")
    validate.add_argument("source")

    process = sub.add_parser("process", help="Import a payload and write the full export")
    process.add_argument("source")

    listing = sub.add_parser("list", help="List employees page by page")
    listing.add_argument("source")
    listing.add_argument("--page", type=int, default=0)
    listing.add_argument("--size", type=int)
    listing.add_argument("--sort-by", default="id")

    gratuity = sub.add_parser("gratuity", help="Employees eligible for gratuity")
    gratuity.add_argument("source")

    higher = sub.add_parser("higher-than-manager", help="Employees paid more than their manager")
    higher.add_argument("source")

    nth = sub.add_parser("nth-highest", help="Employee with the nth highest salary")
    nth.add_argument("source")
    nth.add_argument("rank", type=int)

    hierarchy = sub.add_parser("hierarchy", help="Export the org chart under a manager as JSON")
    hierarchy.add_argument("source")
    hierarchy.add_argument("manager_id", type=int, nargs="?")
    hierarchy.add_argument("--summary", action="store_true", help="Print span-of-control metrics")

    return parser


def _run_command(args: argparse.Namespace) -> int:
    if args.command == "validate":
        match employees.validate(args.source, args.fmt):
            case {"status": "ok", "rows_available": n}:
                console.print(f"[green]✓ {n} employee rows parsed cleanly[/green]")
                return 0
            case {"status": "error", "message": msg}:
                console.print(f"[red]✗ {escape(msg)}[/red]")
                return 2

    config = load_pipeline_config(args.env, get_env_config())
    service = EmployeeService(config=config)

    if args.command == "process":
        path = service.process_and_export(args.source, args.fmt)
        console.print(f"[green]Export written to {path}[/green]")
        return 0

    summary = service.import_employee_data(args.source, args.fmt)
    console.print(
        f"Imported {summary.total_count} employees "
        f"({summary.parsed_count} parsed, {summary.synthetic_count} synthetic), root {summary.root_id}"
    )

    match args.command:
        case "list":
            page = service.list_employees(args.page, args.size, args.sort_by)
            console.print(_summary_table(f"Employees (page {page.page + 1} of {page.total_pages})", page.items))
        case "gratuity":
            console.print(_summary_table("Gratuity eligible", service.gratuity_eligible()))
        case "higher-than-manager":
            console.print(_summary_table("Paid more than their manager", service.higher_salary_than_manager()))
        case "nth-highest":
            found = service.nth_highest_salary(args.rank)
            if found is None:
                console.print(f"[yellow]No employee at salary rank {args.rank}[/yellow]")
                return 3
            console.print(_summary_table(f"Salary rank {args.rank}", [found]))
        case "hierarchy":
            manager_id = args.manager_id if args.manager_id is not None else service.default_root()
            path = service.hierarchy_export(manager_id)
            if args.summary:
                flat = flatten_hierarchy(service.hierarchy(manager_id))
                table = Table(title=f"Org under {manager_id}")
                for col in SPAN_COLUMNS:
                    table.add_column(col)
                for row in flat[list(SPAN_COLUMNS)].itertuples(index=False):
                    table.add_row(*(str(v) for v in row))
                console.print(table)
            console.print(f"[green]Hierarchy written to {path}[/green]")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        return _run_command(args)
    except FileNotFoundError as exc:
        console.print(f"[red]File not found: {exc.filename or exc}[/red]")
        return 5
    except OrgChartError as exc:
        console.print(f"[red]{exc.kind}: {escape(str(exc))}[/red]")
        return _exit_code(exc.kind)


if __name__ == "__main__":
    sys.exit(main())
