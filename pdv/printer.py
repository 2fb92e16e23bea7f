"""Thermal receipt printing over USB ESC/POS."""

from __future__ import annotations

import os
from pathlib import Path

from pdv.config import (
    PRINTER_FONT_ENV,
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_TAIL_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from pdv.models import Order
from pdv.receipt import render_ticket_lines

_LINE_EXTRA_PX = 10
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)


def _font_candidates() -> list[str]:
    env_override = os.environ.get(PRINTER_FONT_ENV, "").strip()
    ordered = [env_override, PRINTER_FONT_PATH, *_LINUX_FONT_FALLBACKS]
    return [path for path in dict.fromkeys(ordered) if path]


def resolve_printer_font_path() -> str:
    """
    Pick the first existing font among PDV_PRINTER_FONT_PATH, PRINTER_FONT_PATH
    and the usual Linux locations.
    """
    candidates = _font_candidates()
    found = next((path for path in candidates if Path(path).is_file()), None)
    if found is None:
        raise RuntimeError(
            f"Nenhuma fonte de impressora encontrada. Defina {PRINTER_FONT_ENV} com um arquivo .ttf/.otf. "
            f"Testadas: {', '.join(candidates)}"
        )
    return found


def check_printer_dependencies() -> tuple[bool, str]:
    """Report whether escpos, Pillow and a printer font are usable."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
    except Exception as exc:
        return (False, f"Impressora indisponível: {exc}")
    return (True, "Impressora pronta")


def _text_width(draw: object, text: str, font: object) -> int:
    left, _, right, _ = draw.textbbox((0, 0), text, font=font)
    return right - left


def _fit_text_to_px(text: str, font: object, max_width_px: int) -> str:
    """Trim ``text`` and append "..." until it fits the paper width."""
    from PIL import Image, ImageDraw

    draw = ImageDraw.Draw(Image.new("1", (1, 1), color=1))
    if _text_width(draw, text, font) <= max_width_px:
        return text
    for cut in range(len(text) - 1, 0, -1):
        shortened = f"{text[:cut].rstrip()}..."
        if _text_width(draw, shortened, font) <= max_width_px:
            return shortened
    return "..."


def render_ticket_image(lines: list[str], font: object) -> object:
    """Render all ticket lines onto one 1-bit canvas as wide as the paper."""
    from PIL import Image, ImageDraw

    line_height = PRINTER_FONT_SIZE + _LINE_EXTRA_PX
    max_width = PRINTER_WIDTH_PX - PRINTER_LEFT_INDENT_PX * 2
    img = Image.new("1", (PRINTER_WIDTH_PX, max(1, line_height * len(lines))), color=1)
    draw = ImageDraw.Draw(img)

    for idx, line in enumerate(lines):
        if not line:
            continue
        text = _fit_text_to_px(line, font, max_width)
        bbox = draw.textbbox((0, 0), text, font=font)
        # Offset by bbox top so descenders are not clipped.
        y = idx * line_height + (line_height - (bbox[3] - bbox[1])) // 2 - bbox[1]
        draw.text((PRINTER_LEFT_INDENT_PX, y), text, font=font, fill=0)
    return img


def print_order_ticket(order: Order) -> None:
    """Print a receipt for the order and cut the paper."""
    if not order.items:
        return

    try:
        from escpos.printer import Usb
        from PIL import Image, ImageFont
    except Exception as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    font = ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    printer.image(render_ticket_image(render_ticket_lines(order), font))
    # Short extra tail for easier tearing.
    printer.image(Image.new("1", (PRINTER_WIDTH_PX, PRINTER_TAIL_SPACER_PX), color=1))
    printer.cut()
