# logic/qr_codes.py

import base64
from io import BytesIO

import qrcode


def make_qr_png(payload):
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=4,
    )
    qr.add_data(payload)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buffer = BytesIO()
    img.save(buffer, format='PNG')
    return buffer.getvalue()


def make_qr_base64(payload):
    return base64.b64encode(make_qr_png(payload)).decode('ascii')


def participant_qr_base64(participant):
    """The participant's QR code, generated once and kept on the row."""
    if not participant.qr_base64:
        participant.qr_base64 = make_qr_base64(participant.id)
    return participant.qr_base64
