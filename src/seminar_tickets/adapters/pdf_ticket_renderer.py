"""ReportLab ticket renderer."""

import asyncio
import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from reportlab.graphics.barcode.code128 import Code128
from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from seminar_tickets.domain.errors import RenderError
from seminar_tickets.domain.tickets import TicketDetails
from seminar_tickets.services.fulfillment import TicketRenderer

_logger = logging.getLogger(__name__)

# Layout coordinates are measured from the top-left corner of the ticket and
# flipped into PDF space by the helpers below.
PAGE_W, PAGE_H = 800, 250

CREAM = colors.HexColor("#F2EFE9")
CUTOUT = colors.HexColor("#F9F7F2")
ACCENT = colors.HexColor("#A83236")
PLACEHOLDER = colors.HexColor("#CCCCCC")
INK = colors.black

IMAGE_X, IMAGE_TOP, IMAGE_W, IMAGE_H = 20, 25, 180, 200
TEXT_X = 230
GRID_LEFT, GRID_RIGHT, GRID_DIVIDER = 220, 580, 500
GRID_ROWS = (185, 215, 245)
PERFORATION_X = 600
STUB_CENTER_X = 700


@dataclass
class ReportLabTicketRenderer(TicketRenderer):
    """Draws the fixed-layout seminar ticket as a one-page PDF."""

    image_path: str | None = None

    async def render(self, ticket: TicketDetails) -> bytes:
        """Render in a worker thread and return the PDF bytes."""
        try:
            return await asyncio.to_thread(self.render_sync, ticket)
        except RenderError:
            raise
        except Exception as exc:
            raise RenderError(f"Could not render ticket {ticket.reference}") from exc

    def render_sync(self, ticket: TicketDetails) -> bytes:
        """Render the ticket on the calling thread."""
        buffer = BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=(PAGE_W, PAGE_H))
        pdf.setTitle(f"{ticket.event.name} - {ticket.reference}")
        pdf.setAuthor(ticket.event.name)

        pdf.setFillColor(CREAM)
        pdf.rect(0, 0, PAGE_W, PAGE_H, stroke=0, fill=1)

        self._draw_image(pdf)
        _draw_title(pdf, ticket)
        _draw_details(pdf, ticket)
        _draw_perforation(pdf)
        _draw_stub(pdf, ticket)

        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    def _draw_image(self, pdf: canvas.Canvas) -> None:
        bottom = _flip(IMAGE_TOP, IMAGE_H)
        path = Path(self.image_path) if self.image_path else None
        if path is not None and path.is_file():
            try:
                pdf.drawImage(
                    ImageReader(str(path)),
                    IMAGE_X,
                    bottom,
                    width=IMAGE_W,
                    height=IMAGE_H,
                    preserveAspectRatio=True,
                    anchor="n",
                    mask="auto",
                )
                return
            except Exception:
                _logger.warning("Ticket image unreadable, using placeholder: %s", path)
        pdf.setStrokeColor(PLACEHOLDER)
        pdf.setLineWidth(1)
        pdf.rect(IMAGE_X, bottom, IMAGE_W, IMAGE_H, stroke=1, fill=0)


def _flip(top: float, height: float = 0) -> float:
    """Convert a top-left y coordinate into PDF space."""
    return PAGE_H - top - height


def _text(  # noqa: PLR0913
    pdf: canvas.Canvas,
    x: float,
    top: float,
    value: str,
    font: str,
    size: float,
    color: colors.Color = INK,
) -> None:
    pdf.setFillColor(color)
    pdf.setFont(font, size)
    pdf.drawString(x, _flip(top + size * 0.8), value)


def _draw_title(pdf: canvas.Canvas, ticket: TicketDetails) -> None:
    _text(pdf, TEXT_X, 40, "EVENT TICKET", "Helvetica", 12)
    top = 65
    for line in ticket.event.title_lines:
        _text(pdf, TEXT_X, top, line, "Times-BoldItalic", 45, ACCENT)
        top += 45
    _text(pdf, TEXT_X, 165, ticket.event.tagline, "Helvetica-Bold", 10)


def _draw_details(pdf: canvas.Canvas, ticket: TicketDetails) -> None:
    pdf.setStrokeColor(INK)
    pdf.setLineWidth(1)
    for row in GRID_ROWS:
        pdf.line(GRID_LEFT, _flip(row), GRID_RIGHT, _flip(row))
    pdf.line(GRID_DIVIDER, _flip(GRID_ROWS[0]), GRID_DIVIDER, _flip(GRID_ROWS[-1]))

    event = ticket.event
    _text(pdf, TEXT_X, 195, event.venue, "Helvetica", 11)
    _text(pdf, GRID_DIVIDER + 10, 195, event.date, "Helvetica", 11)
    _text(pdf, TEXT_X, 225, event.location, "Helvetica", 11)
    _text(pdf, GRID_DIVIDER + 10, 225, event.time, "Helvetica", 11)


def _draw_perforation(pdf: canvas.Canvas) -> None:
    pdf.setFillColor(CUTOUT)
    pdf.circle(PERFORATION_X, _flip(0), 20, stroke=0, fill=1)
    pdf.circle(PERFORATION_X, _flip(PAGE_H), 20, stroke=0, fill=1)
    pdf.setFillColor(INK)
    for top in range(20, 230, 15):
        pdf.circle(PERFORATION_X, _flip(top), 3, stroke=0, fill=1)


def _draw_stub(pdf: canvas.Canvas, ticket: TicketDetails) -> None:
    """Draw the barcode, reference and admit count rotated along the stub."""
    barcode = Code128(ticket.reference, barWidth=1.0, barHeight=50, quiet=False)
    pdf.saveState()
    pdf.translate(STUB_CENTER_X, PAGE_H / 2)
    pdf.rotate(90)
    barcode.drawOn(pdf, -barcode.width / 2, 0)
    pdf.setFillColor(INK)
    pdf.setFont("Helvetica-Bold", 14)
    pdf.drawCentredString(0, -40, f"TICKET NUMBER:  {ticket.reference}")
    pdf.setFont("Helvetica", 11)
    admit = f"ADMIT {ticket.quantity}"
    if ticket.holder_name:
        admit = f"{admit}  |  {ticket.holder_name}"
    pdf.drawCentredString(0, -62, admit)
    pdf.restoreState()
