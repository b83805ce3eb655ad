# graphics/qr_label.py
import html
import io
import json

import qrcode
from qrcode.constants import ERROR_CORRECT_M
from qrcode.image.pil import PilImage
from PIL import Image

from model.inventory import parse_timestamp
from utils.formatting import locale_date

QR_SIZE = 300


def build_payload(item):
    """Record as it goes into the QR: plain dict, creation date shown as a local date."""
    payload = item.to_dict()
    created = parse_timestamp(payload.get("dateCreated", ""))
    if created is not None:
        payload["dateCreated"] = locale_date(created)
    return payload


def payload_text(payload, indent=None):
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def render_qr(payload, size=QR_SIZE):
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, border=4)
    qr.add_data(payload_text(payload))
    qr.make(fit=True)
    img = qr.make_image(image_factory=PilImage, fill_color="black", back_color="white").get_image().convert("RGB")
    # Nearest keeps module edges crisp for scanners.
    return img.resize((size, size), Image.NEAREST)


def to_png_bytes(img):
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def qr_filename(payload):
    return f"{payload.get('itemId', 'item')}_QR.png"


def label_html(payload, store_name, img_src, printed_on):
    """
    Markup for the printable 4-inch label.
    img_src is whatever the rendering document resolves to the QR image.
    """
    esc = lambda v: html.escape(str(v))

    rows = [("Type", payload.get("itemType")),
            ("Weight", f"{payload.get('weight')} g"),
            ("Purity", payload.get("purity"))]
    for key, label in (("size", "Size"), ("color", "Color")):
        if payload.get(key):
            rows.append((label, payload[key]))
    rows.append(("Price", payload.get("totalPrice")))
    if payload.get("hallmark"):
        rows.append(("Hallmark", payload["hallmark"]))

    info = "".join(f"<div><b>{esc(label)}:</b> {esc(value)}</div>" for label, value in rows)
    return f"""
    <html><body style="font-family: Arial, sans-serif;">
      <div style="width: 4in; margin: 0 auto; border: 2px solid #333; padding: 15px; text-align: center;">
        <div style="font-size: 16px; font-weight: bold; color: #d4af37;">{esc(store_name.upper())}</div>
        <div style="font-size: 12px; color: #666;">Premium Jewelry Collection</div>
        <div style="font-size: 14px; font-weight: bold; margin: 10px 0;">{esc(payload.get('itemId', ''))}</div>
        <div><img src="{img_src}" width="120" height="120"/></div>
        <div style="text-align: left; font-size: 11px; margin: 15px 0;">{info}</div>
        <div style="font-size: 10px; color: #666;">
          Scan QR code for complete item details<br/>Generated: {esc(printed_on)}
        </div>
      </div>
    </body></html>
    """
