import base64
import math
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from quickride.services.documents import AgreementData, AgreementRenderer, Branding, FlowLayout, Frame
from quickride.services.documents.agreement import HEADER_HEIGHT, FieldRow, decode_data_url, format_date


class RecordingSurface:
    """Surface double that records draw calls per page."""

    page_width = 595.0
    page_height = 842.0

    def __init__(self) -> None:
        self.pages: list[list[tuple]] = [[]]
        self.finished = False

    def _record(self, *op: object) -> None:
        self.pages[-1].append(op)

    def fill_rect(self, x, y, width, height, color, *, radius=0):  # type: ignore[no-untyped-def]
        self._record("fill_rect", x, y, width, height, color)

    def stroke_rect(self, x, y, width, height, color, *, line_width=1, radius=0):  # type: ignore[no-untyped-def]
        self._record("stroke_rect", x, y, width, height, color)

    def line(self, x1, y1, x2, y2, color, *, line_width=1):  # type: ignore[no-untyped-def]
        self._record("line", x1, y1, x2, y2, color)

    def text(self, value, x, y, *, width, font, size, color, align="left"):  # type: ignore[no-untyped-def]
        self._record("text", value, x, y, font)

    def paragraph(self, value, x, y, *, width, font, size, color, leading, align="left"):  # type: ignore[no-untyped-def]
        self._record("paragraph", value, x, y)
        chars_per_line = max(1, int(width / (size * 0.5)))
        return math.ceil(len(value) / chars_per_line) * leading

    def image_size(self, data):  # type: ignore[no-untyped-def]
        return (10, 10) if data.startswith(b"\x89PNG") else None

    def image(self, data, x, y, width, height):  # type: ignore[no-untyped-def]
        self._record("image", x, y, width, height)

    def new_page(self) -> None:
        self.pages.append([])

    def finish(self) -> bytes:
        self.finished = True
        return b"%PDF-recorded"

    def texts(self, page: int) -> list[str]:
        return [op[1] for op in self.pages[page] if op[0] == "text"]


class FixedBlock:
    def __init__(self, height: float) -> None:
        self.height = height

    def estimate(self, frame: Frame) -> float:
        return self.height

    def draw(self, surface, top, frame) -> float:  # type: ignore[no-untyped-def]
        surface.text(f"block@{top}", frame.left, top, width=frame.width, font="Helvetica", size=8, color="#000000")
        return self.height


def _data(**overrides: object) -> AgreementData:
    fields: dict[str, object] = {
        "shareholder_id": 42,
        "full_name": "Pema Lhamu",
        "father_name": "Tashi",
        "address": "Tadong, Gangtok",
        "pin_code": "737102",
        "phone": "+91 98000 11111",
        "email": "pema@example.com",
        "username": "pema",
        "status": "PENDING",
        "num_shares": 100,
        "price_per_share": Decimal("1200.00"),
        "total_investment": Decimal("120000.00"),
        "stage": 2,
        "submitted_at": datetime(2026, 3, 7, tzinfo=timezone.utc),
    }
    fields.update(overrides)
    return AgreementData(**fields)


def _decorated_layout(surface: RecordingSurface, events: list[tuple[str, int]]) -> FlowLayout:
    return FlowLayout(
        surface,
        frame=Frame(left=10, width=100),
        body_top=10,
        body_bottom=110,
        header=lambda s, page: events.append(("header", page)),
        footer=lambda s, page: events.append(("footer", page)),
    )


def test_flow_layout_breaks_pages_when_blocks_do_not_fit() -> None:
    surface = RecordingSurface()
    events: list[tuple[str, int]] = []
    layout = _decorated_layout(surface, events)

    layout.extend([FixedBlock(30) for _ in range(7)])
    assert layout.finish() == b"%PDF-recorded"

    assert layout.page_number == 3
    assert [len(page) for page in surface.pages] == [3, 3, 1]
    assert events == [
        ("header", 1),
        ("footer", 1),
        ("header", 2),
        ("footer", 2),
        ("header", 3),
        ("footer", 3),
    ]


def test_oversized_block_on_fresh_page_does_not_loop() -> None:
    surface = RecordingSurface()
    layout = _decorated_layout(surface, [])
    layout.append(FixedBlock(500))
    layout.append(FixedBlock(10))
    assert layout.page_number == 2


def test_layout_cannot_finish_twice() -> None:
    layout = _decorated_layout(RecordingSurface(), [])
    layout.finish()
    with pytest.raises(RuntimeError):
        layout.finish()


def test_long_address_spans_pages_with_identical_headers() -> None:
    surface = RecordingSurface()
    renderer = AgreementRenderer(Branding(contact_line="Quick Ride Office, Gangtok"))
    rendered = renderer.render(
        _data(address="Lower Sichey, near the old monastery road, " * 7),
        surface=surface,
        now=datetime(2026, 10, 19, tzinfo=timezone.utc),
    )

    assert rendered.page_count > 1
    assert len(surface.pages) == rendered.page_count
    assert rendered.page_footers == [
        f"© 2026 Quick Ride (Sikkim Division)  •  QR-00042  •  Page {number}"
        for number in range(1, rendered.page_count + 1)
    ]

    def header_ops(page: list[tuple]) -> list[tuple]:
        return [op for op in page if op[0] == "text" and op[3] < HEADER_HEIGHT]

    first = header_ops(surface.pages[0])
    assert [op[1] for op in first] == ["QUICK RIDE", "Shareholder Investment Agreement", "PENDING"]
    for page in surface.pages[1:]:
        assert header_ops(page) == first


def test_agreement_contains_expected_sections_and_values() -> None:
    surface = RecordingSurface()
    AgreementRenderer().render(_data(approved_at=datetime(2026, 3, 9)), surface=surface)
    texts = [text for page in range(len(surface.pages)) for text in surface.texts(page)]
    paragraphs = [op[1] for page in surface.pages for op in page if op[0] == "paragraph"]

    assert "Agreement ID: QR-00042" in texts
    assert "Submitted: 7/3/2026" in texts
    assert "Stage 2 | Rs.1,200/share" in texts
    for title in (
        "1. Personal Information",
        "2. Investment Details",
        "3. Terms & Conditions",
        "4. Investor Declaration",
        "5. Manual Signatures",
    ):
        assert title in texts
    assert "Rs. 1,20,000" in paragraphs
    assert "Stage 2 — Current Price" in paragraphs
    assert "10.000% of total 1,000 shares" in paragraphs
    assert "9/3/2026" in paragraphs
    assert "(Investor Signature)" in texts
    assert "(Authorised Signatory)" in texts
    assert sum(1 for text in texts if text[:2] in {f"{n}." for n in range(1, 8)}) >= 7


def test_text_signature_uses_oblique_font() -> None:
    surface = RecordingSurface()
    AgreementRenderer().render(_data(signature_data="Pema Lhamu"), surface=surface)
    ops = [op for page in surface.pages for op in page if op[0] == "text" and op[1] == "Pema Lhamu"]
    assert any(op[4] == "Helvetica-Oblique" for op in ops)
    texts = [text for page in range(len(surface.pages)) for text in surface.texts(page)]
    assert "(Investor Signature)" not in texts


def test_image_signature_and_photo_are_drawn() -> None:
    png = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
    data_url = "data:image/png;base64," + base64.b64encode(png).decode("ascii")
    surface = RecordingSurface()
    AgreementRenderer().render(_data(photo_data=data_url, signature_data=data_url), surface=surface)
    images = [op for page in surface.pages for op in page if op[0] == "image"]
    assert len(images) == 2


def test_decode_data_url_ignores_garbage() -> None:
    assert decode_data_url(None) is None
    assert decode_data_url("plain signature") is None
    assert decode_data_url("data:image/png;base64,@@not-base64@@") is None
    assert decode_data_url("data:image/png;base64,aGk=") == b"hi"


def test_format_date_is_day_month_year() -> None:
    assert format_date(datetime(2026, 1, 5)) == "5/1/2026"


class TallParagraphSurface(RecordingSurface):
    """Wraps every paragraph to three lines regardless of length."""

    def paragraph(self, value, x, y, *, width, font, size, color, leading, align="left"):  # type: ignore[no-untyped-def]
        super().paragraph(value, x, y, width=width, font=font, size=size, color=color, leading=leading, align=align)
        return 3 * leading


def test_field_row_advances_by_the_height_actually_drawn() -> None:
    frame = Frame(left=45, width=505)
    row = FieldRow("Residential Address", "W" * 54, striped=False)
    assert row.estimate(frame) == 17

    assert row.draw(TallParagraphSurface(), 100, frame) == 4 + 33 + 2
    assert row.draw(RecordingSurface(), 100, frame) == 17


def test_rows_after_a_tall_value_do_not_overlap() -> None:
    surface = TallParagraphSurface()
    layout = FlowLayout(
        surface,
        frame=Frame(left=45, width=505),
        body_top=100,
        body_bottom=700,
        header=lambda s, page: None,
        footer=lambda s, page: None,
    )
    layout.extend([FieldRow("Address", "W" * 54, striped=False), FieldRow("PIN Code", "737101", striped=True)])

    paragraph_tops = [op[3] for op in surface.pages[0] if op[0] == "paragraph"]
    assert paragraph_tops == [104, 104 + 39]
