"""
Payment helpers: gateway webhook verification, order ids, status labels
and QRIS codes.
"""

import hashlib
import hmac
import secrets
import string
import time
from decimal import Decimal


# Midtrans signs notifications with the HTTP status code of the event
MIDTRANS_STATUS_CODES = {
    'capture': '200',
    'settlement': '200',
    'pending': '201',
    'deny': '202',
    'cancel': '202',
    'expire': '202',
    'failure': '202',
}

PAYMENT_STATUS_LABELS = {
    'capture': ('Berhasil', 'success'),
    'settlement': ('Berhasil', 'success'),
    'pending': ('Menunggu Pembayaran', 'warning'),
    'deny': ('Dibatalkan', 'error'),
    'cancel': ('Dibatalkan', 'error'),
    'expire': ('Kedaluwarsa', 'error'),
    'failure': ('Gagal', 'error'),
}

BASE36_ALPHABET = string.digits + string.ascii_uppercase

# Gateway outcomes that mean the customer never paid
FAILED_PAYMENT_STATUSES = frozenset({'deny', 'cancel', 'expire', 'failure'})


def midtrans_signature(order_id, transaction_status, gross_amount, server_key):
    """SHA512(order_id + status_code + gross_amount + server_key), hex encoded."""
    status_code = MIDTRANS_STATUS_CODES.get(transaction_status, '200')
    data = f'{order_id}{status_code}{gross_amount}{server_key}'
    return hashlib.sha512(data.encode('utf-8')).hexdigest()


def verify_midtrans_signature(payload, server_key):
    """
    Check the ``signature_key`` of a Midtrans notification.

    Args:
        payload (dict): The notification body. Must carry ``order_id``,
            ``transaction_status``, ``gross_amount`` and ``signature_key``.
        server_key (str): Merchant server key.

    Returns:
        bool: True when the signature matches. A missing signature or an
        empty server key never verifies.
    """
    signature = payload.get('signature_key')
    if not signature or not server_key:
        return False

    expected = midtrans_signature(
        payload.get('order_id', ''),
        payload.get('transaction_status', ''),
        payload.get('gross_amount', ''),
        server_key,
    )
    return hmac.compare_digest(expected, str(signature))


def _base36(number):
    if number == 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return ''.join(reversed(digits))


def generate_order_id(prefix='DC'):
    """
    Unique order id such as ``DC-MLA0Z3K1-7QX2PB``.

    Format: ``<prefix>-<base36 millisecond timestamp>-<6 random base36 chars>``.
    """
    timestamp = _base36(int(time.time() * 1000))
    random_part = ''.join(secrets.choice(BASE36_ALPHABET) for _ in range(6))
    return f'{prefix}-{timestamp}-{random_part}'


def format_payment_status(status):
    """
    Display label and badge variant for a gateway status.

    Unknown statuses are shown as-is with the ``default`` variant.
    """
    return PAYMENT_STATUS_LABELS.get(status, (status, 'default'))


def format_rupiah(amount):
    """``Decimal('15000')`` -> ``'Rp 15.000'`` (whole rupiah, dot grouping)."""
    whole = int(Decimal(amount).quantize(Decimal('1')))
    return 'Rp ' + f'{whole:,}'.replace(',', '.')


class QRISPaymentGenerator:
    """
    QR codes for QRIS payments.

    QRIS is the Indonesian national QR standard; a single static merchant
    code is accepted by GoPay, OVO, Dana, LinkAja, ShopeePay and mobile
    banking apps. The cashier shows the code together with the amount
    and confirms once the customer has paid.

    Example:
        Render the shop's static code::

            image = QRISPaymentGenerator.generate_qr_image(settings.QRIS_STATIC_CODE)
            png = QRISPaymentGenerator.to_base64_png(image)

    Note:
        Requires the ``qrcode`` library with PIL support.
    """

    @staticmethod
    def generate_qr_image(data, output_path=None):
        """
        Generate a QR code image.

        Args:
            data (str): Payload to encode (the QRIS merchant code).
            output_path (str, optional): When given, the PNG is saved
                there and the path is returned.

        Returns:
            PIL.Image.Image | str: The image, or ``output_path``.
        """
        import qrcode

        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=4,
        )
        qr.add_data(data)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        if output_path:
            img.save(output_path)
            return output_path

        return img

    @staticmethod
    def to_base64_png(image):
        import base64
        from io import BytesIO

        buffer = BytesIO()
        image.save(buffer, format='PNG')
        return base64.b64encode(buffer.getvalue()).decode('ascii')
