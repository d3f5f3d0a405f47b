from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_L

from src.service.ticket_loyalty.app.interface.i_qr_code_generator import IQrCodeGenerator


class QrCodeGeneratorImpl(IQrCodeGenerator):
    def __init__(self, *, box_size: int = 10, border: int = 4) -> None:
        self.box_size = box_size
        self.border = border

    def generate(self, *, payload: str) -> bytes:
        qr = qrcode.QRCode(
            version=1,
            error_correction=ERROR_CORRECT_L,
            box_size=self.box_size,
            border=self.border,
        )
        qr.add_data(payload)
        qr.make(fit=True)

        buffer = BytesIO()
        qr.make_image(fill_color='black', back_color='white').save(buffer, format='PNG')
        return buffer.getvalue()
