from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..models.candidate import Candidate
from ..models.config_models import CertificateConfig
from ..models.course import CanonicalCourse

"""Certificate rendering: one A4 landscape PDF per candidate-course pair.

画像アセット (header / badge / signature) が読めない場合は図形とテキストで代替描画する。
アセット読み込み失敗だけで証明書生成を失敗させてはならない。
"""

__all__ = [
    "COURSE_DISPLAY_PHRASES",
    "CertificateText",
    "CertificateRenderer",
    "certificate_text",
    "certificate_filename",
    "render_certificate_pdf",
]

logger = logging.getLogger(__name__)

COURSE_DISPLAY_PHRASES: dict[CanonicalCourse, str] = {
    CanonicalCourse.DATA_ANALYSIS_ANALYTICS: "DATA ANALYSIS/ANALYTICS",
    CanonicalCourse.MS_OFFICE_FOR_ADMINISTRATORS: "MS OFFICE FOR ADMINISTRATORS",
    CanonicalCourse.PYTHON_PROGRAMMING: "INTRODUCTION TO PYTHON PROGRAMMING",
    CanonicalCourse.CYBERSECURITY: "CYBERSECURITY",
}

if set(COURSE_DISPLAY_PHRASES) != set(CanonicalCourse):  # pragma: no cover
    _missing = sorted(c.name for c in set(CanonicalCourse) - set(COURSE_DISPLAY_PHRASES))
    raise RuntimeError(f"COURSE_DISPLAY_PHRASES out of sync with CanonicalCourse: {_missing}")

PAGE_WIDTH, PAGE_HEIGHT = landscape(A4)
HEADER_HEIGHT_MM = 70

GREEN = (22 / 255, 163 / 255, 74 / 255)
RED = (220 / 255, 38 / 255, 38 / 255)
GOLD = (251 / 255, 191 / 255, 36 / 255)


@dataclass(frozen=True)
class CertificateText:
    """All text content of a certificate, independent of how it is drawn."""
    title: str
    subtitle: str
    preamble: str
    candidate_name: str  # upper-cased
    completion_lines: tuple[str, ...]
    signatory: str
    signatory_title_lines: tuple[str, ...]
    organization: str
    organization_short: str


def certificate_text(name: str, course: CanonicalCourse, config: CertificateConfig) -> CertificateText:
    phrase = COURSE_DISPLAY_PHRASES[course]
    return CertificateText(
        title="CERTIFICATE",
        subtitle="OF COMPLETION",
        preamble="THIS IS TO CERTIFY THAT",
        candidate_name=name.strip().upper(),
        completion_lines=(
            f"has successfully completed the {phrase}",
            config.conducted_by_line,
            config.cohort_line,
        ),
        signatory=config.signatory,
        signatory_title_lines=config.signatory_title_lines,
        organization=config.organization,
        organization_short=config.organization_short,
    )


def certificate_filename(name: str, course: CanonicalCourse) -> str:
    """``<Name>_<Course>_Certificate.pdf`` with whitespace and path separators replaced."""
    def _safe(text: str) -> str:
        return re.sub(r"[^\w.-]+", "_", text.strip())

    return f"{_safe(name)}_{_safe(course.display_name)}_Certificate.pdf"


def _y(top_mm: float) -> float:
    # 上端基準 (mm) -> reportlab の下端基準 (pt)
    return PAGE_HEIGHT - top_mm * mm


def _load_image(path: Path | None) -> ImageReader | None:
    if path is None:
        return None
    try:
        image = ImageReader(str(path))
        image.getSize()
        return image
    except Exception as e:
        logger.warning(f"could not load certificate asset {path}: {e} -> using fallback")
        return None


def _draw_image(c: canvas.Canvas, image: ImageReader | None, x: float, y: float, w: float, h: float) -> bool:
    if image is None:
        return False
    try:
        c.drawImage(image, x, y, width=w, height=h, mask="auto")
        return True
    except Exception as e:
        logger.warning(f"could not draw certificate asset: {e} -> using fallback")
        return False


def _draw_header(c: canvas.Canvas, text: CertificateText, image: ImageReader | None) -> None:
    header_h = HEADER_HEIGHT_MM * mm
    if _draw_image(c, image, 0, PAGE_HEIGHT - header_h, PAGE_WIDTH, header_h):
        return
    # Fallback: green band with red stripe
    c.setFillColorRGB(*GREEN)
    c.rect(0, PAGE_HEIGHT - header_h, PAGE_WIDTH, header_h, stroke=0, fill=1)
    c.setFillColorRGB(*RED)
    c.rect(0, PAGE_HEIGHT - header_h, PAGE_WIDTH, 15 * mm, stroke=0, fill=1)

    c.setFillColorRGB(1, 1, 1)
    c.setFont("Helvetica-Bold", 36)
    c.drawString(20 * mm, _y(35), text.title)
    c.setFont("Helvetica", 16)
    c.drawString(20 * mm, _y(50), text.subtitle)
    c.setFont("Helvetica-Bold", 16)
    c.drawRightString(PAGE_WIDTH - 20 * mm, _y(35), text.organization_short)
    c.setFont("Helvetica", 8)
    c.drawRightString(PAGE_WIDTH - 20 * mm, _y(45), text.organization)


def _draw_badge(c: canvas.Canvas, image: ImageReader | None) -> None:
    if _draw_image(c, image, 20 * mm, _y(140), 40 * mm, 40 * mm):
        return
    c.setFillColorRGB(*GOLD)
    c.circle(40 * mm, _y(120), 20 * mm, stroke=0, fill=1)


def _draw_signature(c: canvas.Canvas, text: CertificateText, image: ImageReader | None) -> None:
    center_x = PAGE_WIDTH / 2
    if not _draw_image(c, image, center_x - 30 * mm, _y(195), 60 * mm, 20 * mm):
        c.setStrokeColorRGB(0, 0, 0)
        c.setLineWidth(0.5 * mm)
        c.line(center_x - 30 * mm, _y(185), center_x + 30 * mm, _y(185))
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Oblique", 16)
        c.drawCentredString(center_x, _y(195), text.signatory)

    c.setFillColorRGB(0, 0, 0)
    c.setFont("Helvetica", 10)
    for offset, line in enumerate(text.signatory_title_lines):
        c.drawCentredString(center_x, _y(200 + offset * 7), line)


def render_certificate_pdf(name: str, course: CanonicalCourse, config: CertificateConfig) -> bytes:
    """Draw one certificate and return the PDF bytes."""
    text = certificate_text(name, course, config)
    assets = config.assets
    center_x = PAGE_WIDTH / 2

    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
    c.setTitle(f"{text.candidate_name} - {course.display_name}")

    _draw_header(c, text, _load_image(assets.header))
    _draw_badge(c, _load_image(assets.badge))

    c.setFillColorRGB(0, 0, 0)
    c.setFont("Helvetica", 18)
    c.drawCentredString(center_x, _y(100), text.preamble)

    c.setFillColorRGB(*GREEN)
    c.setFont("Helvetica-Bold", 32)
    c.drawCentredString(center_x, _y(125), text.candidate_name)

    c.setFillColorRGB(0, 0, 0)
    c.setFont("Helvetica", 14)
    for offset, line in enumerate(text.completion_lines):
        c.drawCentredString(center_x, _y(145 + offset * 10), line)

    _draw_signature(c, text, _load_image(assets.signature))

    c.showPage()
    c.save()
    return buffer.getvalue()


class CertificateRenderer:
    """Batch renderer: writes ``<output_dir>/<Name>_<Course>_Certificate.pdf``.

    An existing file is never overwritten; a numeric suffix (``_2``, ``_3`` ...)
    is added before ``.pdf`` instead.

    Instances are callables usable as the ``renderer`` of run_batch().
    """

    def __init__(self, output_dir: Path, config: CertificateConfig) -> None:
        self.output_dir = output_dir
        self.config = config
        self.written: list[Path] = []

    def __call__(self, candidate: Candidate, course: CanonicalCourse) -> Path:
        return self.render(candidate.name, course)

    def _unique_path(self, filename: str) -> Path:
        # 同名候補者の上書き防止: 既存ファイルがあれば _2, _3 ... を付ける
        path = self.output_dir / filename
        stem, suffix = path.stem, path.suffix
        counter = 2
        while path.exists() or path in self.written:
            path = self.output_dir / f"{stem}_{counter}{suffix}"
            counter += 1
        return path

    def render(self, name: str, course: CanonicalCourse) -> Path:
        pdf = render_certificate_pdf(name, course, self.config)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self._unique_path(certificate_filename(name, course))
        path.write_bytes(pdf)
        self.written.append(path)
        logger.debug(f"certificate written: {path}")
        return path
