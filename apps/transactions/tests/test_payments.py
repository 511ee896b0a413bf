import hashlib
import re
import pytest
from decimal import Decimal

from apps.transactions.payments import (
    verify_midtrans_signature,
    midtrans_signature,
    generate_order_id,
    format_payment_status,
    format_rupiah,
    QRISPaymentGenerator,
)

SERVER_KEY = 'SB-Mid-server-abc'


def notification(status='settlement', **overrides):
    payload = {
        'order_id': 'DC-ABC-123456',
        'transaction_status': status,
        'gross_amount': '15000.00',
    }
    payload.update(overrides)
    return payload


class TestMidtransSignature:

    @pytest.mark.parametrize('status,code', [
        ('capture', '200'),
        ('settlement', '200'),
        ('pending', '201'),
        ('deny', '202'),
        ('cancel', '202'),
        ('expire', '202'),
        ('failure', '202'),
    ])
    def test_status_code_is_part_of_signature(self, status, code):
        expected = hashlib.sha512(
            f'DC-ABC-123456{code}15000.00{SERVER_KEY}'.encode()
        ).hexdigest()

        assert midtrans_signature('DC-ABC-123456', status, '15000.00', SERVER_KEY) == expected

    def test_valid_signature(self):
        payload = notification()
        payload['signature_key'] = midtrans_signature(
            payload['order_id'], 'settlement', payload['gross_amount'], SERVER_KEY
        )

        assert verify_midtrans_signature(payload, SERVER_KEY) is True

    def test_tampered_amount(self):
        payload = notification()
        payload['signature_key'] = midtrans_signature(
            payload['order_id'], 'settlement', payload['gross_amount'], SERVER_KEY
        )
        payload['gross_amount'] = '1.00'

        assert verify_midtrans_signature(payload, SERVER_KEY) is False

    def test_missing_signature(self):
        assert verify_midtrans_signature(notification(), SERVER_KEY) is False

    def test_empty_server_key_never_verifies(self):
        payload = notification()
        payload['signature_key'] = midtrans_signature(payload['order_id'], 'settlement', '15000.00', '')

        assert verify_midtrans_signature(payload, '') is False


class TestOrderId:

    def test_format(self):
        order_id = generate_order_id()

        assert re.fullmatch(r'DC-[0-9A-Z]+-[0-9A-Z]{6}', order_id)

    def test_custom_prefix(self):
        assert generate_order_id('WRG').startswith('WRG-')

    def test_unique(self):
        assert len({generate_order_id() for _ in range(50)}) == 50


class TestPaymentStatusLabels:

    @pytest.mark.parametrize('status,expected', [
        ('capture', ('Berhasil', 'success')),
        ('settlement', ('Berhasil', 'success')),
        ('pending', ('Menunggu Pembayaran', 'warning')),
        ('deny', ('Dibatalkan', 'error')),
        ('cancel', ('Dibatalkan', 'error')),
        ('expire', ('Kedaluwarsa', 'error')),
        ('failure', ('Gagal', 'error')),
        ('refund', ('refund', 'default')),
    ])
    def test_labels(self, status, expected):
        assert format_payment_status(status) == expected


class TestFormatting:

    def test_rupiah(self):
        assert format_rupiah(Decimal('1500000.00')) == 'Rp 1.500.000'
        assert format_rupiah(Decimal('800')) == 'Rp 800'


class TestQRISPaymentGenerator:

    def test_png_output(self, tmp_path):
        path = tmp_path / 'qris.png'

        result = QRISPaymentGenerator.generate_qr_image('000201010211', str(path))

        assert result == str(path)
        assert path.read_bytes().startswith(b'\x89PNG')

    def test_base64_png(self):
        import base64

        image = QRISPaymentGenerator.generate_qr_image('000201010211')
        encoded = QRISPaymentGenerator.to_base64_png(image)

        assert base64.b64decode(encoded).startswith(b'\x89PNG')
