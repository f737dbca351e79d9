"""PDF generation for booking receipts."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from rental_lifecycle.config import CURRENCY_SYMBOL, RECEIPT_ISSUER, ReceiptIssuerInfo
from rental_lifecycle.domain.models import CarSnapshot, Rental
from rental_lifecycle.strings import status_description

RECEIPT_TITLE = "Booking Details"


def format_currency(value: Decimal, symbol: str = CURRENCY_SYMBOL) -> str:
    return f"{symbol}{value:,.2f}"


def _format_datetime(value: Optional[datetime]) -> str:
    if value is None:
        return "-"
    return value.strftime("%m-%d-%Y %I:%M %p")


def _car_rows(car: CarSnapshot) -> list[list[str]]:
    rows = [["Car", car.label]]
    if car.pick_up_location:
        rows.append(["Pick Up Location", car.pick_up_location])
    return rows


def build_receipt_rows(
    rental: Rental, car: CarSnapshot, symbol: str = CURRENCY_SYMBOL
) -> list[list[str]]:
    """Label/value rows of the booking details table."""
    rows = _car_rows(car)
    rows.extend(
        [
            ["Status", rental.status.value],
            ["Pick-up Date", _format_datetime(rental.pick_up_date)],
            ["Return Date", _format_datetime(rental.return_date)],
            ["Price Per Day", format_currency(rental.price_per_day, symbol)],
            ["Rental Day/s", str(rental.rental_days)],
            ["Subtotal", format_currency(rental.original_amount, symbol)],
        ]
    )
    if rental.discount is not None:
        rows.append(
            [
                f"Discount ({rental.discount.code}, "
                f"{rental.discount.discount_percentage}%)",
                f"-{format_currency(rental.discount_amount, symbol)}",
            ]
        )
    rows.extend(
        [
            ["Payment", format_currency(rental.final_amount, symbol)],
            ["Mode of Payment", rental.payment_method.value],
            ["Payment Status", rental.payment_status.value],
        ]
    )
    return rows


def generate_booking_receipt(
    rental: Rental,
    car: CarSnapshot,
    output_path: Path,
    *,
    issuer: ReceiptIssuerInfo = RECEIPT_ISSUER,
    currency_symbol: str = CURRENCY_SYMBOL,
    generated_at: Optional[datetime] = None,
) -> Path:
    """Render the booking details of ``rental`` to ``output_path``."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=A4,
        rightMargin=20 * mm,
        leftMargin=20 * mm,
        topMargin=18 * mm,
        bottomMargin=18 * mm,
        title=f"{RECEIPT_TITLE} {rental.id}",
        author=issuer.name,
    )

    styles = getSampleStyleSheet()
    styles.add(
        ParagraphStyle(
            name="SectionTitle",
            parent=styles["Heading3"],
            spaceBefore=12,
            spaceAfter=6,
        )
    )
    styles.add(
        ParagraphStyle(
            name="SmallText",
            parent=styles["Normal"],
            fontSize=9,
            leading=12,
        )
    )

    elements: list[object] = []
    elements.append(Paragraph(f"<b>{escape(issuer.name)}</b>", styles["Title"]))
    elements.append(Paragraph(RECEIPT_TITLE, styles["Heading2"]))
    elements.append(Spacer(1, 8))

    issuer_lines = [
        f"<b>Booking:</b> {escape(rental.id)}",
        f"<b>Contact:</b> {escape(issuer.email)} / {escape(issuer.phone)}",
    ]
    elements.append(Paragraph("<br/>".join(issuer_lines), styles["Normal"]))
    elements.append(Spacer(1, 10))

    rows = [
        [Paragraph(escape(label), styles["Normal"]), Paragraph(escape(value), styles["Normal"])]
        for label, value in build_receipt_rows(rental, car, currency_symbol)
    ]
    details_table = Table(rows, colWidths=[55 * mm, 105 * mm])
    details_table.setStyle(
        TableStyle(
            [
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("BACKGROUND", (0, 0), (0, -1), colors.whitesmoke),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]
        )
    )
    elements.append(Paragraph("Rental", styles["SectionTitle"]))
    elements.append(details_table)
    elements.append(Spacer(1, 12))

    elements.append(
        Paragraph(escape(status_description(rental.status)), styles["SmallText"])
    )

    stamp = generated_at or rental.updated_at or rental.created_at
    footer = f"Thank you for choosing {escape(issuer.name)}!"
    if stamp is not None:
        footer += f" Generated {_format_datetime(stamp)}."
    elements.append(Spacer(1, 12))
    elements.append(Paragraph(footer, styles["SmallText"]))

    doc.build(elements)
    return output_path
