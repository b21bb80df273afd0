"""Shareholder investment agreement rendered as a paginated PDF."""
from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from quickride.core.money import format_inr
from quickride.obs import AGREEMENT_PAGES_HISTOGRAM, business_span
from quickride.services.documents.layout import Block, FlowLayout, Frame, Surface, estimate_lines
from quickride.services.documents.pdf_surface import ReportLabSurface

logger = logging.getLogger(__name__)

MARGIN = 45
HEADER_HEIGHT = 72
FOOTER_HEIGHT = 22
BODY_TOP = HEADER_HEIGHT + 8
LABEL_WIDTH = 145

FIELD_CHARS_PER_LINE = 55
TERM_CHARS_PER_LINE = 90
DECLARATION_CHARS_PER_LINE = 100
LINE_HEIGHT = 11

TOTAL_SHARES_DENOMINATOR = 1000

NAVY = "#1e1b4b"
LAVENDER = "#a5b4fc"
STATUS_COLORS = {"APPROVED": "#16a34a", "REJECTED": "#dc2626"}
PENDING_COLOR = "#d97706"

STAGE_LABELS = {1: "Base Price", 2: "Current Price", 3: "Next Price"}

TERMS: tuple[tuple[str, str], ...] = (
    (
        "Company Governance & Decision Authority",
        "The Company shall be governed by a core management team comprising the CEO, Managing Director (MD), "
        "and Chief Operating Officer (COO). They serve as the primary decision-making authority for all matters "
        "including operations, finance, expansion, recruitment, partnerships, and overall business strategy. "
        "Their decisions are final and binding on all shareholders. Investors acknowledge and accept this "
        "governance structure as a condition of their investment.",
    ),
    (
        "Investor Rights & Limitations",
        "Investors are strictly financial stakeholders and not operational managers of the Company. Investors "
        "shall not interfere in the day-to-day operations, staff decisions, or any business function of the "
        "Company. Voting rights, if any, shall be exercised strictly as defined in this shareholder agreement and "
        "only on matters expressly reserved for shareholder vote. Any attempt to interfere in operations beyond "
        "these defined rights shall be deemed a breach of this agreement.",
    ),
    (
        "Net Profit Definition — The 75% Distribution Threshold",
        "After deduction of the mandatory twenty-five percent (25%) operational and growth reserve from gross "
        "monthly earnings, the remaining seventy-five percent (75%) of gross earnings shall be classified as the "
        "Net Profit of the Company. Only this Net Profit (i.e., 75% of gross revenue) is eligible for distribution "
        "among shareholders. Gross revenue includes all subscription fees, service charges, and platform "
        "commissions collected by the Company during the applicable period.",
    ),
    (
        "Profit Distribution Policy",
        "Net Profit shall be distributed strictly in proportion to each investor's shareholding percentage. All "
        "shares of the same class carry equal and identical rights to profit distribution. Profit distributions "
        "may be made on a quarterly or annual basis, entirely at the discretion of the management team, based on "
        "the financial health and growth priorities of the Company. There shall be no guaranteed, fixed, or "
        "minimum returns on investment under any circumstances. The Company makes no representation regarding "
        "future profits or distributions.",
    ),
    (
        "Purpose & Use of the 25% Retained Amount",
        "The Company shall retain twenty-five percent (25%) of total gross monthly earnings as a mandatory "
        "operational and growth reserve. This retention is essential to ensure long-term sustainability, "
        "operational stability, legal compliance, and strategic expansion. This retained amount is not considered "
        "profit and is expressly non-distributable. Permitted uses include: (a) App development, upgrades, and "
        "security; (b) Cloud hosting, server infrastructure, and technical utilities; (c) Legal advisors, "
        "statutory compliance, audits, and financial reviews; (d) Operational staff salaries, regional expansion "
        "teams, and performance bonuses; (e) Expansion into new states/regions, onboarding costs, and strategic "
        "partnerships.",
    ),
    (
        "Investment Risks & Acknowledgement",
        "This investment carries significant financial risk. Returns, profits, and dividends are not guaranteed. "
        "Dividends depend entirely on business performance, subscriber growth, and market conditions. Share value "
        "may fluctuate. This is a long-term investment and early exit may not be possible. Investors may lose part "
        "or all of their invested capital. Startup and early-stage investments are inherently high-risk. The "
        "Company and its representatives shall not be liable for any financial loss arising from this investment. "
        "By signing this agreement, the investor confirms independent due diligence and voluntary participation "
        "at their own risk.",
    ),
    (
        "Transparency & Reporting",
        "The Company shall maintain transparent accounting practices and provide periodic financial summaries to "
        "shareholders. Clear reporting of revenue, expenses, and net profit shall be shared; however, full "
        "management discretion shall prevail in all operational and strategic decisions. Financial reports shall "
        "be made available to shareholders at least once per financial year or upon reasonable written request, "
        "subject to confidentiality obligations of the Company.",
    ),
)

DECLARATION = (
    "I, the undersigned, hereby confirm that I have read, understood, and voluntarily agree to all the terms and "
    "conditions set forth in this Shareholder Investment Agreement. I confirm that all information provided by me "
    "in this application is true, complete, and accurate to the best of my knowledge. I acknowledge that this is a "
    "high-risk investment with no guarantee of returns, profits, dividends, or capital protection. I understand "
    "that startup and early-stage investments may result in partial or total loss of invested capital. I expressly "
    "agree that the Company and its representatives shall not be liable for any financial loss arising from this "
    "investment. I have conducted independent due diligence and, where required, consulted qualified financial "
    "and legal advisors before making this investment decision. This investment is made freely, voluntarily, and "
    "entirely at my own risk."
)

NOTICE = "IMPORTANT: This document is legally valid only when signed by both parties below."


@dataclass(frozen=True, slots=True)
class Branding:
    company_name: str = "Quick Ride"
    division: str = "Sikkim Division"
    title: str = "Shareholder Investment Agreement"
    contact_line: str = ""

    @property
    def legal_name(self) -> str:
        return f"{self.company_name} ({self.division})" if self.division else self.company_name


@dataclass(frozen=True, slots=True)
class AgreementData:
    """Everything printed on the agreement, detached from the ORM session."""

    shareholder_id: int
    full_name: str
    address: str
    phone: str
    email: str
    username: str
    status: str
    num_shares: int
    price_per_share: Decimal
    total_investment: Decimal
    stage: int
    submitted_at: datetime
    father_name: str = ""
    pin_code: str = ""
    stage_name: str | None = None
    approved_at: datetime | None = None
    photo_data: str | None = None
    signature_data: str | None = None

    @classmethod
    def from_shareholder(cls, shareholder: Any, *, stage_name: str | None = None) -> "AgreementData":
        return cls(
            shareholder_id=shareholder.id,
            full_name=shareholder.full_name,
            father_name=shareholder.father_name or "",
            address=shareholder.address,
            pin_code=shareholder.pin_code or "",
            phone=shareholder.phone,
            email=shareholder.email,
            username=shareholder.username,
            status=getattr(shareholder.status, "value", shareholder.status),
            num_shares=shareholder.num_shares,
            price_per_share=Decimal(shareholder.price_per_share),
            total_investment=Decimal(shareholder.total_investment),
            stage=shareholder.stage,
            stage_name=stage_name,
            submitted_at=shareholder.created_at,
            approved_at=shareholder.approved_at,
            photo_data=shareholder.photo_data,
            signature_data=shareholder.signature_data,
        )

    @property
    def agreement_id(self) -> str:
        return f"QR-{self.shareholder_id:05d}"

    @property
    def ownership_percentage(self) -> Decimal:
        return Decimal(self.num_shares) / Decimal(TOTAL_SHARES_DENOMINATOR) * Decimal(100)


@dataclass(slots=True)
class RenderedAgreement:
    content: bytes
    page_count: int
    filename: str
    page_footers: list[str] = field(default_factory=list)


def format_date(value: date | datetime | None) -> str:
    """``d/m/yyyy`` without zero padding."""

    if value is None:
        return "—"
    return f"{value.day}/{value.month}/{value.year}"


def decode_data_url(value: str | None) -> bytes | None:
    """Return the bytes of a base64 ``data:image/...`` URL, or ``None``."""

    if not value or not value.startswith("data:image"):
        return None
    _, _, encoded = value.partition(",")
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        logger.warning("ignoring malformed image data URL (%d chars)", len(value))
        return None


class Spacer:
    def __init__(self, height: float) -> None:
        self.height = height

    def estimate(self, frame: Frame) -> float:
        return 0

    def draw(self, surface: Surface, top: float, frame: Frame) -> float:
        return self.height


class MetaStrip:
    HEIGHT = 26

    def __init__(self, cells: tuple[str, str, str]) -> None:
        self.cells = cells

    def estimate(self, frame: Frame) -> float:
        return self.HEIGHT + 6

    def draw(self, surface: Surface, top: float, frame: Frame) -> float:
        surface.fill_rect(frame.left, top, frame.width, self.HEIGHT, "#f3f4f6", radius=3)
        third = frame.width / 3
        for index, (cell, align) in enumerate(zip(self.cells, ("left", "center", "right"))):
            x = frame.left + index * third + (8 if index == 0 else 0)
            surface.text(cell, x, top + 9, width=third - 8, font="Helvetica", size=7.5, color="#6b7280", align=align)
        return self.HEIGHT + 6


class Photo:
    SIZE = 90

    def __init__(self, data: bytes) -> None:
        self.data = data

    def estimate(self, frame: Frame) -> float:
        return self.SIZE + 18

    def draw(self, surface: Surface, top: float, frame: Frame) -> float:
        x = (surface.page_width - self.SIZE) / 2
        surface.stroke_rect(x - 4, top - 2, self.SIZE + 8, self.SIZE + 8, "#d1d5db", line_width=1, radius=4)
        surface.image(self.data, x, top, self.SIZE, self.SIZE)
        return self.SIZE + 18


class SectionBar:
    def __init__(self, title: str) -> None:
        self.title = title

    def estimate(self, frame: Frame) -> float:
        return 22

    def draw(self, surface: Surface, top: float, frame: Frame) -> float:
        surface.fill_rect(frame.left, top, frame.width, 20, NAVY)
        surface.text(
            self.title, frame.left + 8, top + 6, width=frame.width - 16, font="Helvetica-Bold", size=9, color="white"
        )
        return 24


class FieldRow:
    BASE_HEIGHT = 17

    def __init__(self, label: str, value: str | None, *, striped: bool) -> None:
        self.label = label
        self.value = value or "—"
        self.striped = striped

    def estimate(self, frame: Frame) -> float:
        lines = estimate_lines(self.value, FIELD_CHARS_PER_LINE)
        return self.BASE_HEIGHT + (lines - 1) * LINE_HEIGHT

    def draw(self, surface: Surface, top: float, frame: Frame) -> float:
        height = self.estimate(frame)
        if self.striped:
            surface.fill_rect(frame.left, top, frame.width, height, "#f9fafb")
        surface.text(
            self.label, frame.left + 5, top + 4, width=LABEL_WIDTH, font="Helvetica-Bold", size=8, color="#374151"
        )
        value_x = frame.left + LABEL_WIDTH + 6
        used = surface.paragraph(
            self.value,
            value_x,
            top + 4,
            width=frame.right - value_x,
            font="Helvetica",
            size=8,
            color="#111827",
            leading=LINE_HEIGHT,
        )
        return max(height, 4 + used + 2)


class TermBlock:
    TITLE_HEIGHT = 16

    def __init__(self, number: int, title: str, body: str) -> None:
        self.number = number
        self.title = title
        self.body = body

    def estimate(self, frame: Frame) -> float:
        body_lines = estimate_lines(self.body, TERM_CHARS_PER_LINE) + 1
        return self.TITLE_HEIGHT + body_lines * LINE_HEIGHT + 10

    def draw(self, surface: Surface, top: float, frame: Frame) -> float:
        surface.fill_rect(frame.left, top, frame.width, self.TITLE_HEIGHT, "#e0e7ff")
        surface.text(
            f"{self.number}. {self.title}",
            frame.left + 6,
            top + 4,
            width=frame.width - 12,
            font="Helvetica-Bold",
            size=8,
            color="#3730a3",
        )
        used = surface.paragraph(
            self.body,
            frame.left + 10,
            top + self.TITLE_HEIGHT,
            width=frame.width - 20,
            font="Helvetica",
            size=7.5,
            color="#374151",
            leading=9.5,
            align="justify",
        )
        return self.TITLE_HEIGHT + used + 5


class Declaration:
    def __init__(self, text: str) -> None:
        self.text = text

    def estimate(self, frame: Frame) -> float:
        return max(52, estimate_lines(self.text, DECLARATION_CHARS_PER_LINE) * LINE_HEIGHT)

    def draw(self, surface: Surface, top: float, frame: Frame) -> float:
        used = surface.paragraph(
            self.text,
            frame.left,
            top,
            width=frame.width,
            font="Helvetica",
            size=8,
            color="#374151",
            leading=10,
            align="justify",
        )
        return used + 8


class NoticeBar:
    def __init__(self, text: str) -> None:
        self.text = text

    def estimate(self, frame: Frame) -> float:
        return 22

    def draw(self, surface: Surface, top: float, frame: Frame) -> float:
        surface.fill_rect(frame.left, top, frame.width, 20, "#fefce8", radius=3)
        surface.text(
            self.text, frame.left + 8, top + 6, width=frame.width - 16, font="Helvetica-Bold", size=7, color="#92400e"
        )
        return 26


@dataclass(frozen=True, slots=True)
class SignaturePanel:
    heading: str
    subtitle: str
    date_label: str
    placeholder: str
    fill: str
    accent: str
    heading_color: str
    image: bytes | None = None
    text_signature: str | None = None


class SignaturePanels:
    """Two side-by-side signature panels, kept together with their section bar."""

    PANEL_HEIGHT = 90
    GAP = 16

    def __init__(self, title: str, investor: SignaturePanel, authority: SignaturePanel) -> None:
        self.title = SectionBar(title)
        self.panels = (investor, authority)

    def estimate(self, frame: Frame) -> float:
        return 110

    def draw(self, surface: Surface, top: float, frame: Frame) -> float:
        used = self.title.draw(surface, top, frame) + 6
        panel_top = top + used
        panel_width = (frame.width - self.GAP) / 2
        for index, panel in enumerate(self.panels):
            x = frame.left + index * (panel_width + self.GAP)
            self._draw_panel(surface, panel, x, panel_top, panel_width)
        return used + self.PANEL_HEIGHT + 10

    def _draw_panel(self, surface: Surface, panel: SignaturePanel, x: float, top: float, width: float) -> None:
        inner_x = x + 8
        inner_w = width - 16
        surface.fill_rect(x, top, width, self.PANEL_HEIGHT, panel.fill, radius=4)
        surface.stroke_rect(x, top, width, self.PANEL_HEIGHT, panel.accent, line_width=0.8, radius=4)
        surface.text(
            panel.heading, inner_x, top + 8, width=inner_w, font="Helvetica-Bold", size=8, color=panel.heading_color
        )
        surface.text(panel.subtitle, inner_x, top + 22, width=inner_w, font="Helvetica", size=7.5, color="#374151")
        surface.text(panel.date_label, inner_x, top + 34, width=inner_w, font="Helvetica", size=7.5, color="#374151")
        surface.line(inner_x, top + 68, x + width - 8, top + 68, panel.accent, line_width=1)
        if panel.image is not None:
            surface.image(panel.image, inner_x, top + 46, inner_w, 22)
        elif panel.text_signature:
            surface.text(
                panel.text_signature,
                inner_x,
                top + 50,
                width=inner_w,
                font="Helvetica-Oblique",
                size=11,
                color="#1a1a2e",
            )
        else:
            surface.text(
                panel.placeholder, inner_x, top + 56, width=inner_w, font="Helvetica", size=7, color="#9ca3af",
                align="center",
            )
        surface.text("Signature", inner_x, top + 72, width=inner_w, font="Helvetica", size=7, color="#6b7280",
                     align="center")


class ContactLine:
    def __init__(self, text: str) -> None:
        self.text = text

    def estimate(self, frame: Frame) -> float:
        return 16

    def draw(self, surface: Surface, top: float, frame: Frame) -> float:
        surface.text(self.text, frame.left, top, width=frame.width, font="Helvetica", size=7, color="#6b7280",
                     align="center")
        return 14


class AgreementRenderer:
    """Builds the agreement block sequence and flows it across A4 pages."""

    def __init__(self, branding: Branding | None = None) -> None:
        self.branding = branding or Branding()

    def render(
        self,
        data: AgreementData,
        *,
        surface: Surface | None = None,
        now: datetime | None = None,
    ) -> RenderedAgreement:
        moment = now or datetime.now(timezone.utc)
        target = surface or ReportLabSurface(
            title=f"{self.branding.title} {data.agreement_id}", author=self.branding.legal_name
        )
        footers: list[str] = []

        def header(page_surface: Surface, page_number: int) -> None:
            self._draw_header(page_surface, data)

        def footer(page_surface: Surface, page_number: int) -> None:
            text = f"© {moment.year} {self.branding.legal_name}  •  {data.agreement_id}  •  Page {page_number}"
            footers.append(text)
            self._draw_footer(page_surface, text)

        frame = Frame(left=MARGIN, width=target.page_width - MARGIN * 2)
        with business_span("agreement.render", shareholder_id=data.shareholder_id) as span:
            layout = FlowLayout(
                target,
                frame=frame,
                body_top=BODY_TOP,
                body_bottom=target.page_height - FOOTER_HEIGHT - 8,
                header=header,
                footer=footer,
            )
            layout.extend(self._blocks(target, data, moment))
            content = layout.finish()
            span.set_attribute("agreement.pages", layout.page_number)

        AGREEMENT_PAGES_HISTOGRAM.observe(layout.page_number)
        logger.info("rendered agreement %s on %d pages", data.agreement_id, layout.page_number)
        return RenderedAgreement(
            content=content,
            page_count=layout.page_number,
            filename=f"QR-agreement-{data.shareholder_id:05d}.pdf",
            page_footers=footers,
        )

    def _blocks(self, surface: Surface, data: AgreementData, moment: datetime) -> list[Block]:
        price = format_inr(data.price_per_share)
        blocks: list[Block] = [
            MetaStrip(
                (
                    f"Agreement ID: {data.agreement_id}",
                    f"Submitted: {format_date(data.submitted_at)}",
                    f"Stage {data.stage} | Rs.{price}/share",
                )
            )
        ]

        photo = decode_data_url(data.photo_data)
        if photo is not None and surface.image_size(photo) is not None:
            blocks.append(Photo(photo))
        else:
            blocks.append(Spacer(6))

        blocks.append(SectionBar("1. Personal Information"))
        blocks.extend(
            self._rows(
                [
                    ("Full Name", data.full_name),
                    ("Father / Husband Name", data.father_name),
                    ("Residential Address", data.address),
                    ("Pin Code", data.pin_code),
                    ("Mobile Number", data.phone),
                    ("Email Address", data.email),
                ]
            )
        )

        stage_name = data.stage_name or STAGE_LABELS.get(data.stage, "Next Price")
        investment_rows = [
            ("Number of Shares Purchased", str(data.num_shares)),
            ("Price per Share", f"Rs. {price}"),
            ("Total Investment Amount", f"Rs. {format_inr(data.total_investment)}"),
            ("Investment Stage", f"Stage {data.stage} — {stage_name}"),
            (
                "Ownership Percentage",
                f"{data.ownership_percentage:.3f}% of total {TOTAL_SHARES_DENOMINATOR:,} shares",
            ),
            ("Portal Login Username", data.username),
        ]
        if data.approved_at is not None:
            investment_rows.append(("Approved On", format_date(data.approved_at)))
        blocks.append(SectionBar("2. Investment Details"))
        blocks.extend(self._rows(investment_rows))

        blocks.append(SectionBar("3. Terms & Conditions"))
        blocks.append(Spacer(4))
        blocks.extend(TermBlock(number, title, body) for number, (title, body) in enumerate(TERMS, start=1))

        blocks.append(SectionBar("4. Investor Declaration"))
        blocks.append(Spacer(4))
        blocks.append(Declaration(DECLARATION))
        blocks.append(NoticeBar(NOTICE))

        signed_on = f"Date: {format_date(moment)}"
        signature_image = decode_data_url(data.signature_data)
        if signature_image is not None and surface.image_size(signature_image) is None:
            signature_image = None
        text_signature = None
        if data.signature_data and not data.signature_data.startswith("data:image"):
            text_signature = data.signature_data
        blocks.append(
            SignaturePanels(
                "5. Manual Signatures",
                SignaturePanel(
                    heading="INVESTOR SIGNATURE",
                    subtitle=f"Name: {data.full_name}",
                    date_label=signed_on,
                    placeholder="(Investor Signature)",
                    fill="#f0fdf4",
                    accent="#16a34a",
                    heading_color="#14532d",
                    image=signature_image,
                    text_signature=text_signature,
                ),
                SignaturePanel(
                    heading="AUTHORITY SIGNATURE",
                    subtitle=self.branding.legal_name,
                    date_label=signed_on,
                    placeholder="(Authorised Signatory)",
                    fill="#eff6ff",
                    accent="#2563eb",
                    heading_color="#1e3a8a",
                ),
            )
        )
        if self.branding.contact_line:
            blocks.append(ContactLine(self.branding.contact_line))
        return blocks

    @staticmethod
    def _rows(pairs: list[tuple[str, str]]) -> list[Block]:
        return [FieldRow(label, value, striped=index % 2 == 0) for index, (label, value) in enumerate(pairs)]

    def _draw_header(self, surface: Surface, data: AgreementData) -> None:
        width = surface.page_width
        content_width = width - MARGIN * 2
        surface.fill_rect(0, 0, width, HEADER_HEIGHT, NAVY)
        surface.text(
            self.branding.company_name.upper(), MARGIN, 14, width=content_width, font="Helvetica-Bold", size=20,
            color="white", align="center",
        )
        surface.text(
            self.branding.title, MARGIN, 40, width=content_width, font="Helvetica", size=10, color=LAVENDER,
            align="center",
        )
        badge_x = width - MARGIN - 70
        surface.fill_rect(badge_x, 24, 70, 18, STATUS_COLORS.get(data.status, PENDING_COLOR), radius=3)
        surface.text(data.status, badge_x, 30, width=70, font="Helvetica-Bold", size=8, color="white", align="center")

    @staticmethod
    def _draw_footer(surface: Surface, text: str) -> None:
        width = surface.page_width
        top = surface.page_height - FOOTER_HEIGHT
        surface.fill_rect(0, top, width, FOOTER_HEIGHT, "#f3f4f6")
        surface.text(text, MARGIN, top + 7, width=width - MARGIN * 2, font="Helvetica", size=7, color="#6b7280",
                     align="center")


__all__ = [
    "AgreementData",
    "AgreementRenderer",
    "Branding",
    "DECLARATION",
    "RenderedAgreement",
    "TERMS",
    "TOTAL_SHARES_DENOMINATOR",
    "decode_data_url",
    "format_date",
]
