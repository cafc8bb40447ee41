"""Shareable workout summaries: message text, WhatsApp link and a PNG summary card."""

import io
import os
from urllib.parse import quote

from PIL import Image, ImageDraw, ImageFont

APP_URL = os.environ.get("APP_URL", "http://localhost:3000")
WHATSAPP_SHARE_URL = "https://wa.me/?text="

CARD_SIZE = (640, 400)
CARD_TOP_COLOR = (124, 58, 237)
CARD_BOTTOM_COLOR = (37, 99, 235)
TEXT_COLOR = (255, 255, 255)


def build_share_text(display_name: str, reps: int, good_reps: int, excellent_reps: int, app_url: str = None) -> str:
    """Message body for sharing a finished session."""
    name = display_name or "I"
    return (
        "🔥 Push-up Workout Summary 🔥\n\n"
        f"👤 {name} did {reps} push-ups!\n"
        f"🌟 Excellent Form: {excellent_reps}\n"
        f"✅ Good Reps: {good_reps}\n\n"
        "📸 Summary image downloaded. Share it now!\n\n"
        f"Try it yourself 👉 {app_url or APP_URL}"
    )


def build_whatsapp_url(text: str) -> str:
    return WHATSAPP_SHARE_URL + quote(text, safe="")


def _gradient(size: tuple) -> Image.Image:
    width, height = size
    image = Image.new("RGB", size, CARD_TOP_COLOR)
    draw = ImageDraw.Draw(image)
    for y in range(height):
        t = y / max(height - 1, 1)
        color = tuple(int(top + (bottom - top) * t) for top, bottom in zip(CARD_TOP_COLOR, CARD_BOTTOM_COLOR))
        draw.line([(0, y), (width, y)], fill=color)
    return image


def render_summary_card(display_name: str, reps: int, good_reps: int, excellent_reps: int, level: str) -> bytes:
    """Renders the session summary card and returns PNG bytes."""
    image = _gradient(CARD_SIZE)
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()

    lines = [
        "PushTrack AI Summary",
        "",
        display_name or "You",
        "",
        f"Push-ups: {reps}",
        f"Good Reps: {good_reps}",
        f"Excellent: {excellent_reps}",
        "",
        f"Level: {level}",
    ]
    line_height = 28
    y = (CARD_SIZE[1] - line_height * len(lines)) // 2
    for line in lines:
        if line:
            left, top, right, bottom = draw.textbbox((0, 0), line, font=font)
            x = (CARD_SIZE[0] - (right - left)) // 2
            draw.text((x, y), line, fill=TEXT_COLOR, font=font)
        y += line_height

    buffer = io.BytesIO()
    image.save(buffer, "PNG", optimize=True)
    return buffer.getvalue()
