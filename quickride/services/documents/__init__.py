"""Agreement document rendering."""

from .agreement import AgreementData, AgreementRenderer, Branding, RenderedAgreement
from .layout import Block, FlowLayout, Frame, Surface
from .pdf_surface import ReportLabSurface

__all__ = [
    "AgreementData",
    "AgreementRenderer",
    "Block",
    "Branding",
    "FlowLayout",
    "Frame",
    "RenderedAgreement",
    "ReportLabSurface",
    "Surface",
]
