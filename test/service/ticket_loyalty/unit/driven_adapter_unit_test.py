from datetime import datetime, timezone
from decimal import Decimal
import re
import uuid

import pytest

from src.service.ticket_loyalty.driven_adapter.code_generator.ticket_code_generator_impl import (
    TicketCodeGeneratorImpl,
)
from src.service.ticket_loyalty.driven_adapter.payment.mock_payment_gateway import (
    MockPaymentGateway,
)
from src.service.ticket_loyalty.driven_adapter.qr_code.qr_code_generator_impl import (
    QrCodeGeneratorImpl,
)
from src.service.ticket_loyalty.driven_adapter.storage.local_file_storage import LocalFileStorage


pytestmark = pytest.mark.unit

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'


class TestTicketCodeGenerator:
    def test_ticket_number_carries_timestamp_and_suffix(self):
        now = datetime(2026, 3, 1, 12, 30, 45, tzinfo=timezone.utc)

        number = TicketCodeGeneratorImpl().ticket_number(now=now)

        assert re.fullmatch(r'TKT20260301123045\d{4}', number)

    def test_ticket_code_is_eight_upper_alphanumerics(self):
        codes = {TicketCodeGeneratorImpl().ticket_code() for _ in range(50)}

        assert all(re.fullmatch(r'[A-Z0-9]{8}', code) for code in codes)
        assert len(codes) > 1


class TestQrCodeGenerator:
    def test_generates_png(self):
        png = QrCodeGeneratorImpl(box_size=2, border=1).generate(
            payload=f'TICKET:ABCD1234|EVENT:{uuid.uuid4()}|CUSTOMER:{uuid.uuid4()}'
        )

        assert png.startswith(PNG_SIGNATURE)


class TestLocalFileStorage:
    @pytest.mark.asyncio
    async def test_save_then_get(self, tmp_path):
        storage = LocalFileStorage(base_dir=tmp_path / 'qr_codes')

        path = await storage.save(data=b'png-bytes', name='ABCD1234.png')

        assert path == str(tmp_path / 'qr_codes' / 'ABCD1234.png')
        assert await storage.get(path=path) == b'png-bytes'

    @pytest.mark.asyncio
    async def test_name_cannot_escape_base_dir(self, tmp_path):
        storage = LocalFileStorage(base_dir=tmp_path / 'qr_codes')

        path = await storage.save(data=b'x', name='../../evil.png')

        assert path == str(tmp_path / 'qr_codes' / 'evil.png')

    @pytest.mark.asyncio
    async def test_missing_file_is_none(self, tmp_path):
        storage = LocalFileStorage(base_dir=tmp_path)

        assert await storage.get(path=str(tmp_path / 'missing.png')) is None


class TestMockPaymentGateway:
    @pytest.mark.asyncio
    async def test_session_id_is_prefixed(self):
        ticket_id = uuid.uuid4()

        session = await MockPaymentGateway().create_session(
            ticket_id=ticket_id, amount=Decimal('180.00')
        )

        assert re.fullmatch(r'PAY_MOCK_[A-Z0-9]{8}', session.session_id)
        assert session.ticket_id == ticket_id
        assert session.amount == Decimal('180.00')
