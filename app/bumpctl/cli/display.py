"""Shared Rich display functions for dependency lists and run results."""

from rich.table import Table

from bumpctl.models.package import PackageDescriptor
from bumpctl.models.update import RunReport, UpdateResult, UpdateStatus
from bumpctl.utils.formatting import console, create_package_table, format_package_row, print_success

_STATUS_LABELS: dict[UpdateStatus, str] = {
    UpdateStatus.CREATED: "[success]CREATED[/success]",
    UpdateStatus.ALREADY_EXISTS: "[info]EXISTS[/info]",
    UpdateStatus.FAILED: "[error]FAIL[/error]",
    UpdateStatus.PLANNED: "[warning]PLANNED[/warning]",
}


def create_packages_table(packages: list[PackageDescriptor], title: str = "Outdated Dependencies") -> Table:
    """Create a table listing dependencies with current and latest versions."""
    table = create_package_table(title)
    for package in packages:
        table.add_row(*format_package_row(package))
    return table


def create_results_table(results: list[UpdateResult]) -> Table:
    """Create a Rich table displaying update results.

    Successful results show the pull request number; failed results show
    the error message.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=9, justify="center")
    table.add_column("Package", no_wrap=True)
    table.add_column("Update")
    table.add_column("Pull Request / Message")

    for result in results:
        package = result.package
        if result.pull_request_number is not None:
            detail = f"#{result.pull_request_number} {result.pull_request_url or ''}".rstrip()
        else:
            detail = result.error or ""

        table.add_row(
            _STATUS_LABELS[result.status],
            f"[package.name]{package.name}[/]",
            f"[version.current]{package.current_version}[/] → [version.latest]{package.latest_version}[/]",
            f"[muted]{detail}[/muted]",
        )

    return table


def print_run_summary(report: RunReport) -> None:
    """Print counts of discovered, outdated and processed dependencies."""
    console.print(
        f"\n[muted]{report.discovered} updatable, {report.outdated} outdated, "
        f"{report.skipped_existing} with an open pull request[/muted]"
    )
    if not report.results:
        print_success("Nothing to update.")
        return

    failed = report.failed_count
    succeeded = sum(1 for r in report.results if r.success)
    if failed == 0:
        print_success(f"All {len(report.results)} update(s) completed successfully.")
    else:
        console.print(f"\n[success]{succeeded} succeeded[/success], [error]{failed} failed[/error]")
