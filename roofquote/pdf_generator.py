"""
PDF Estimate Generator for Roof Quotes
Renders a one-page estimate listing each roof section and the quote total
"""

import os
from datetime import datetime
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from roofquote.models.roof import Quote
from roofquote.quote_engine import calculate_quote_price, estimate_squares, slope_multiplier
from roofquote.utils import format_currency, get_slope_display_name


class QuotePDFGenerator:
    """Generates PDF estimates for priced roof quotes"""

    PRIMARY_RED = colors.HexColor('#8B3A3A')
    BLACK = colors.black

    def __init__(self, quote: Quote, company_name: str = "Roof Quote",
                 company_email: Optional[str] = None,
                 company_phone: Optional[str] = None):
        self.quote = quote
        self.company_name = company_name
        self.company_email = company_email or "N/A"
        self.company_phone = company_phone or "N/A"
        self.styles = getSampleStyleSheet()

    def generate(self, output_path: str) -> str:
        """
        Generate PDF file at output_path and return the path
        """
        dir_path = os.path.dirname(output_path)
        if dir_path:
            os.makedirs(dir_path, exist_ok=True)

        doc = SimpleDocTemplate(
            output_path,
            pagesize=letter,
            rightMargin=0.5*inch,
            leftMargin=0.5*inch,
            topMargin=0.4*inch,
            bottomMargin=0.4*inch,
            title=f"Estimate {self.quote.quote_number}"
        )

        story = []
        story.extend(self._build_header())
        story.extend(self._build_metadata())
        story.extend(self._build_sections_table())
        story.extend(self._build_notes())

        doc.build(story)

        return output_path

    def _banner(self, text: str, font_size: int = 10, width: float = 7*inch) -> Table:
        table = Table([[text]], colWidths=[width])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), self.PRIMARY_RED),
            ('TEXTCOLOR', (0, 0), (-1, -1), colors.white),
            ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), font_size),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('TOPPADDING', (0, 0), (-1, -1), 6),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
            ('LEFTPADDING', (0, 0), (-1, -1), 12),
            ('RIGHTPADDING', (0, 0), (-1, -1), 12),
        ]))
        return table

    def _section_title(self, text: str) -> Paragraph:
        style = ParagraphStyle(
            'SectionTitle',
            parent=self.styles['Normal'],
            fontSize=11,
            textColor=self.BLACK,
            spaceAfter=5,
            alignment=TA_LEFT,
            fontName='Helvetica-Bold'
        )
        return Paragraph(f"<b>{text}</b>", style)

    def _build_header(self):
        elements = []

        title_table = Table([[self.company_name, 'Roof Estimate']], colWidths=[4*inch, 3*inch])
        title_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, -1), self.PRIMARY_RED),
            ('TEXTCOLOR', (0, 0), (-1, -1), colors.white),
            ('FONTNAME', (0, 0), (-1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (0, 0), 16),
            ('FONTSIZE', (1, 0), (1, 0), 18),
            ('ALIGN', (0, 0), (0, 0), 'LEFT'),
            ('ALIGN', (1, 0), (1, 0), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('TOPPADDING', (0, 0), (-1, -1), 12),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 12),
            ('LEFTPADDING', (0, 0), (-1, -1), 12),
            ('RIGHTPADDING', (0, 0), (-1, -1), 12),
        ]))
        elements.append(title_table)
        elements.append(self._banner(f"{self.company_phone} | {self.company_email}"))
        elements.append(Spacer(1, 0.15*inch))

        return elements

    def _build_metadata(self):
        elements = []

        date_str = self.quote.created_at.strftime("%B %d, %Y")
        metadata = f"Date: {date_str} | Quote Number: {self.quote.quote_number}"
        elements.append(self._banner(metadata, font_size=9))
        elements.append(Spacer(1, 0.12*inch))

        customer = self.quote.customer_name or "Property Owner"
        address = self.quote.address or "Address not provided"
        desc_style = ParagraphStyle(
            'Description',
            parent=self.styles['Normal'],
            fontSize=9,
            textColor=self.BLACK,
            spaceAfter=8,
            leading=11
        )
        elements.append(self._section_title("Prepared for:"))
        elements.append(Paragraph(f"{customer}<br/>{address}", desc_style))

        return elements

    def _build_sections_table(self):
        """Itemized roof sections with slope multiplier and price"""
        elements = [self._section_title("Roof Sections:")]
        cost = self.quote.material_cost_per_unit

        table_data = [['Section', 'Slope', 'Area', 'Multiplier', 'Price']]
        for polygon in self.quote.roof_polygons:
            if not polygon.included:
                continue
            price = calculate_quote_price(polygon.area.square_feet, polygon.slope, cost)
            table_data.append([
                polygon.label,
                get_slope_display_name(polygon.slope),
                f"{polygon.area.formatted} sqft",
                f"{slope_multiplier(polygon.slope):.1f}x",
                format_currency(price)
            ])

        table_data.append([
            'Material Rate', '', '', '', f"{format_currency(cost)}/sqft"
        ])
        table_data.append([
            'Estimated Squares', '', '', '', str(estimate_squares(self.quote.roof_polygons))
        ])
        table_data.append([
            'Total Estimate', '', f"{self.quote.total_area.formatted} sqft", '',
            format_currency(self.quote.total_price)
        ])

        sections_table = Table(table_data, colWidths=[1.6*inch, 1.1*inch, 1.6*inch, 1.1*inch, 1.6*inch])
        sections_table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), self.PRIMARY_RED),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, 0), 9),
            ('ALIGN', (0, 0), (1, -1), 'LEFT'),
            ('ALIGN', (2, 0), (-1, -1), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),

            ('FONTNAME', (0, 1), (-1, -2), 'Helvetica'),
            ('FONTSIZE', (0, 1), (-1, -2), 8),

            ('BACKGROUND', (4, -1), (4, -1), self.PRIMARY_RED),
            ('TEXTCOLOR', (4, -1), (4, -1), colors.white),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, -1), (-1, -1), 10),

            ('TOPPADDING', (0, 0), (-1, -1), 5),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 5),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ]))

        elements.append(sections_table)
        elements.append(Spacer(1, 0.15*inch))

        return elements

    def _build_notes(self):
        elements = [self._section_title("Notes:")]

        notes = [
            "Areas are measured from satellite imagery and may differ from on-site measurements.",
            "Prices use the slope multiplier shown for each section.",
            "Final pricing is confirmed after inspection."
        ]
        note_style = ParagraphStyle(
            'Note',
            parent=self.styles['Normal'],
            fontSize=8,
            textColor=self.BLACK,
            spaceAfter=3,
            leftIndent=15,
            leading=10
        )
        for i, note in enumerate(notes, 1):
            elements.append(Paragraph(f"{i}. {note}", note_style))

        return elements


def generate_pdf_for_quote(quote: Quote, output_dir: str = "pdfs", **kwargs) -> str:
    """
    Convenience function to generate PDF for a quote
    """
    os.makedirs(output_dir, exist_ok=True)

    filename = f"estimate_{quote.quote_number}_{datetime.now().strftime('%Y%m%d')}.pdf"
    output_path = os.path.join(output_dir, filename)

    return QuotePDFGenerator(quote, **kwargs).generate(output_path)
