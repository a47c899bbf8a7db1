"""Text and PDF renderers over a sorted store snapshot."""
from __future__ import annotations

import os
from typing import List, Sequence

from .config import REPORT_TITLE
from .store import ArchitectureReport

SEPARATOR = "-" * 10
RULE = "-" * 60


def render_text(snapshot: Sequence[ArchitectureReport]) -> str:
    lines: List[str] = [REPORT_TITLE, RULE]
    for arch in snapshot:
        lines.append(f"{SEPARATOR} {arch.name} {SEPARATOR}")
        for lib in arch.libraries:
            lines.append(f"{lib.name} ({lib.count} execs)")
            for exe in lib.executables:
                lines.append(f"-> {exe}")
            lines.append("")
    return "\n".join(lines) + "\n"


def write_text_report(snapshot: Sequence[ArchitectureReport], base: str) -> str:
    output = f"{base}.txt"
    with open(output, "w", encoding="utf-8", errors="surrogateescape") as fp:
        fp.write(render_text(snapshot))
    return output


def printable_path(path: str) -> str:
    """Undecodable bytes in *path* become U+FFFD so fonts can draw it."""
    return os.fsencode(path).decode("utf-8", "replace")


def shorten_path(path: str, font: str, size: float, max_width: float) -> str:
    """Collapse *path* to ``.../basename`` when it would not fit *max_width*."""
    from reportlab.pdfbase.pdfmetrics import stringWidth

    if stringWidth(path, font, size) > max_width:
        return f".../{os.path.basename(path)}"
    return path


class _PdfWriter:
    """Top-down line layout on A4 pages with a fixed margin."""

    margin = 50
    font = "Helvetica"
    bold_font = "Helvetica-Bold"

    def __init__(self, output: str) -> None:
        from reportlab.lib.pagesizes import A4
        from reportlab.pdfgen import canvas

        # invariant=1 keeps timestamps and ids out so output is reproducible
        self.canvas = canvas.Canvas(output, pagesize=A4, invariant=1)
        self.width, self.height = A4
        self.y = self.height - self.margin

    def ensure_room(self, needed: float) -> None:
        if self.y < self.margin + needed:
            self.canvas.showPage()
            self.y = self.height - self.margin

    def line(self, text: str, font: str, size: float, x: float, advance: float) -> None:
        self.canvas.setFont(font, size)
        self.canvas.drawString(x, self.y, text)
        self.y -= advance

    def save(self) -> None:
        self.canvas.save()


def write_pdf_report(snapshot: Sequence[ArchitectureReport], base: str) -> str:
    """Render *snapshot* into ``<base>.pdf`` using reportlab."""
    try:
        import reportlab  # noqa: F401
    except ImportError:  # pragma: no cover
        raise RuntimeError("reportlab is not installed; cannot output PDF")

    output = f"{base}.pdf"
    pdf = _PdfWriter(output)
    path_width = pdf.width - pdf.margin * 2 - 20

    pdf.line(REPORT_TITLE, pdf.bold_font, 16, pdf.margin, 30)
    for arch in snapshot:
        pdf.ensure_room(50)
        pdf.line(f"{SEPARATOR} {arch.name} {SEPARATOR}", pdf.bold_font, 14, pdf.margin, 20)
        for lib in arch.libraries:
            pdf.ensure_room(50)
            pdf.line(f"{lib.name} ({lib.count} execs)", pdf.bold_font, 12, pdf.margin, 15)
            for exe in lib.executables:
                pdf.ensure_room(0)
                pdf.line("-> ", pdf.font, 10, pdf.margin + 10, 0)
                shown = shorten_path(printable_path(exe), pdf.font, 10, path_width)
                pdf.line(shown, pdf.font, 10, pdf.margin + 30, 12)
            pdf.y -= 10
    pdf.save()
    return output
