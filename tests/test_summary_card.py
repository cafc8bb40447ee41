"""Tests for share text, WhatsApp links and the PNG summary card."""

import io
from urllib.parse import unquote

from PIL import Image

from pushtrack.shared.sharing.summary_card import (
    CARD_SIZE,
    build_share_text,
    build_whatsapp_url,
    render_summary_card,
)


def test_share_text_contains_counts():
    text = build_share_text("Sam", 30, 28, 12, app_url="https://pushtrack.app")
    assert "Push-up Workout Summary" in text
    assert "Sam did 30 push-ups!" in text
    assert "Excellent Form: 12" in text
    assert "Good Reps: 28" in text
    assert text.endswith("https://pushtrack.app")


def test_whatsapp_url_encodes_everything():
    url = build_whatsapp_url("Did 5 push-ups & more\nnext line")
    assert url.startswith("https://wa.me/?text=")
    encoded = url[len("https://wa.me/?text="):]
    assert " " not in encoded and "&" not in encoded and "\n" not in encoded
    assert unquote(encoded) == "Did 5 push-ups & more\nnext line"


def test_render_summary_card_is_png():
    png = render_summary_card("Sam", 30, 28, 12, "Pro")
    assert png.startswith(b"\x89PNG")
    image = Image.open(io.BytesIO(png))
    assert image.size == CARD_SIZE
