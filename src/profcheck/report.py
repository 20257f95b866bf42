"""Report generation for conformance check results."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from profcheck.config import CheckerConfig
from profcheck.types import FindingKind
from profcheck.validators.base import Finding


class ConformanceError(Exception):
    """Raised on request when a document is not conformant."""

    def __init__(self, findings: list[Finding], source: str = ""):
        self.findings = findings
        self.source = source
        message = "\n".join(str(f) for f in findings)
        if source:
            message = f"{source}: conformance checks failed:\n{message}"
        super().__init__(message)


@dataclass
class ConformanceReport:
    """Conformance report containing every finding, in discovery order."""

    findings: list[Finding] = field(default_factory=list)
    source: str = "<memory>"
    config: CheckerConfig = field(default_factory=CheckerConfig)

    def render(self) -> str:
        """Render findings one per line as ``<path>: <message>``."""
        return "\n".join(str(f) for f in self.findings)

    def __str__(self) -> str:
        return self.render()

    def _print_to_console(self, console: Console) -> None:
        """Print the report to a Rich console."""
        console.print()
        console.print(f"[bold]profcheck report[/bold] {escape(self.source)}")
        console.print("━" * 52)

        if not self.findings:
            console.print("[green]✓ conformance checks passed[/green]")
            console.print()
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Path", style="cyan")
        table.add_column("Kind", style="yellow")
        table.add_column("Message", style="white")

        for finding in self.findings:
            table.add_row(
                escape(finding.path or "-"),
                finding.kind.value,
                escape(finding.message),
            )

        console.print(table)
        console.print()

        kinds = ", ".join(f"{kind.value}={n}" for kind, n in self.count_by_kind().items())
        console.print(f"[red]✗ {len(self.findings)} finding(s)[/red] ({kinds})")
        console.print()

    def print(self, console: Console | None = None) -> None:
        """Print the report to stdout."""
        self._print_to_console(console or Console())

    def to_dict(self) -> dict:
        """Convert report to dictionary for JSON serialization."""
        return {
            "source": self.source,
            "valid": self.is_valid,
            "config": self.config.to_dict(),
            "finding_count": len(self.findings),
            "findings": [f.to_dict() for f in self.findings],
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert report to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def filter_by_kind(self, *kinds: FindingKind | str) -> "ConformanceReport":
        """Return a new report with only findings of the given kinds."""
        wanted = {FindingKind(k) for k in kinds}
        return ConformanceReport(
            findings=[f for f in self.findings if f.kind in wanted],
            source=self.source,
            config=self.config,
        )

    def count_by_kind(self) -> dict[FindingKind, int]:
        return dict(Counter(f.kind for f in self.findings))

    def raise_for_findings(self) -> None:
        """Raise ConformanceError if the report holds any finding."""
        if self.findings:
            raise ConformanceError(list(self.findings), self.source)

    @property
    def has_findings(self) -> bool:
        """Check if the report contains any finding."""
        return len(self.findings) > 0

    @property
    def is_valid(self) -> bool:
        """Check if the document passed every check."""
        return not self.findings
