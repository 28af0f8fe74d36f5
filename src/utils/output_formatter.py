import json
from typing import List, Dict, Any, TextIO, Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models.detail import DetailModel, DetailView, CertificateDetail, DNAttribute, PageReport
from ..models.exceptions import OutputException
from ..models.trust import TrustLevel

LEVEL_STYLES = {
    TrustLevel.SECURE: "bold green",
    TrustLevel.WEAK: "bold yellow",
    TrustLevel.BROKEN: "bold red",
    TrustLevel.INSECURE: "bold red",
}


class OutputFormatter:
    def __init__(self):
        self.supported_formats = ["text", "json"]

    def format_report(self, report: PageReport, format_type: str = "text") -> str:
        format_type = format_type.lower()
        if format_type == "text":
            return self._format_text(report)
        if format_type == "json":
            return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)
        raise OutputException(f"Unsupported format: {format_type}", output_format=format_type)

    def _format_text(self, report: PageReport) -> str:
        lines: List[str] = []
        lines.append(f"Page: {report.page_id}" + (f" ({report.url})" if report.url else ""))
        badge = report.badge
        if badge.get("kind") == "badge":
            lines.append(f"Badge: {badge.get('level')} {badge.get('background')} / {badge.get('glyph_variant')} glyph")
        else:
            lines.append(f"Badge: default icon {badge.get('path')}")

        view = report.view
        if not view.has_model:
            lines.append(view.message or "")
            return "\n".join(lines)

        model = view.model
        lines.append(f"Trust: {model.level.label}" + (f" ({model.reason})" if model.reason else ""))
        if model.status_line:
            lines.append(f"Status: {model.status_line}")
        lines.append("")
        lines.append("Connection Details")
        for row in model.connection:
            lines.append(f"  {row.label}: {row.value}")
        lines.append("")
        lines.append("Certificate Chain")
        for cert in model.certificates:
            lines.append(f"  {cert.label}")
            lines.append("    Subject: " + _dn_inline(cert.subject))
            lines.append("    Issuer: " + _dn_inline(cert.issuer))
            for _, rows in cert.groups:
                for row in rows:
                    lines.append(f"    {row.label}: {row.value}")
        return "\n".join(lines)

    def render_rich(self, report: PageReport) -> Panel:
        view = report.view
        title = str(report.url or report.page_id)
        if not view.has_model:
            return Panel(Text(view.message or "", style="yellow"), title=title, expand=False)

        model = view.model
        parts: List[Any] = []
        headline = Text(model.level.label, style=LEVEL_STYLES[model.level])
        if model.reason:
            headline.append(f"  {model.reason}", style="grey70")
        parts.append(headline)

        conn = Table(title="Connection Details", box=None, show_header=False, pad_edge=False, padding=(0, 1))
        conn.add_column("label", style="bold cyan", no_wrap=True)
        conn.add_column("value", overflow="fold")
        for row in model.connection:
            conn.add_row(row.label, row.value)
        if model.status_line:
            conn.add_row("Status", model.status_line)
        parts.append(conn)

        for cert in model.certificates:
            parts.append(self._certificate_table(cert))
        return Panel(Group(*parts), title=title, expand=False)

    def _certificate_table(self, cert: CertificateDetail) -> Table:
        table = Table(title=cert.label, box=None, show_header=False, pad_edge=False, padding=(0, 1))
        table.add_column("label", style="bold cyan", no_wrap=True)
        table.add_column("value", overflow="fold")
        table.add_row("Subject", _dn_inline(cert.subject))
        table.add_row("Issuer", _dn_inline(cert.issuer))
        for _, rows in cert.groups:
            for row in rows:
                table.add_row(row.label, row.value)
        return table


def _dn_inline(attrs: List[DNAttribute]) -> str:
    return ", ".join(f"{a.key}={a.value}" for a in attrs) or "-"


class ResultSerializer:
    def __init__(self, console: Optional[Console] = None):
        self.formatter = OutputFormatter()
        self.console = console

    def serialize_to_file(self, reports: List[PageReport], output_file: TextIO, format_type: str = "text"):
        ft = format_type.lower()
        if ft == "json":
            json.dump([r.to_dict() for r in reports], output_file, indent=2, ensure_ascii=False)
            output_file.write("\n")
            return
        for r in reports:
            output_file.write(self.formatter.format_report(r, ft) + "\n\n")

    def print_reports(self, reports: List[PageReport]):
        console = self.console or Console()
        for r in reports:
            console.print(self.formatter.render_rich(r))


output_formatter = OutputFormatter()
