"""Console rendering of validation summaries."""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

from schemaline.models.errors import FileReport, LocatedError, ValidationSummary


def _print_error(console: Console, located: LocatedError) -> None:
    line = Text("      ")
    if located.error.path:
        line.append(located.error.pointer, style="cyan")
        line.append(": ")
    line.append(located.rendered, style="red")
    console.print(line)


def _print_failed(console: Console, report: FileReport) -> None:
    console.print()
    console.print(Text.assemble(("    File: ", "bold"), report.file_path))
    console.print(Text.assemble(("    Type: ", "bold"), (report.schema_type or "unknown", "magenta")))
    for located in report.errors:
        _print_error(console, located)


def render_summary(summary: ValidationSummary, console: Console | None = None) -> None:
    """Print failed files, passed files and statistics."""
    console = console or Console()

    if summary.syntax_errors:
        console.print(
            f"  ❌ Invalid JSON in {len(summary.syntax_errors)} file(s):", style="red"
        )
        for failure in summary.syntax_errors:
            console.print()
            console.print(Text.assemble(("    File: ", "bold"), failure.file_path))
            _print_error(console, failure.error)

    failed = summary.failed_reports
    if failed:
        console.print(f"  ❌ Schema validation failed for {len(failed)} file(s):", style="red")
        for report in failed:
            _print_failed(console, report)

    passed = [r for r in summary.reports if r.passed]
    if passed:
        if failed:
            console.print()
        console.print(f"  ✓ Schema validation passed for {len(passed)} file(s):", style="green")
        for report in passed:
            console.print()
            console.print(Text.assemble(("    File: ", "bold"), report.file_path))
            console.print(
                Text.assemble(("    Type: ", "bold"), (report.schema_type or "", "magenta"))
            )
            console.print("    ✓ Valid", style="green")
    elif summary.files_validated == 0:
        console.print("  ⚠️ No files found to validate against schemas", style="yellow")

    console.print()
    console.print("📋 Schema Validation Statistics:", style="bold")
    console.print(f"   Files visited: {summary.files_visited}")
    console.print(Text.assemble("   Files validated: ", (str(summary.files_validated), "cyan")))
    console.print(Text.assemble(("   ✓ Passed: ", "green"), (str(summary.passed), "green")))
    console.print(Text.assemble(("   ✗ Failed: ", "red"), (str(summary.failed), "red")))
    if summary.syntax_errors:
        console.print(
            Text.assemble(("   ✗ Invalid JSON: ", "red"), (str(len(summary.syntax_errors)), "red"))
        )

    if summary.ok:
        console.print("\n🎉 All validations passed!", style="green bold")
    else:
        console.print("\n❌ Validation failed! Please fix the issues above.", style="red bold")
