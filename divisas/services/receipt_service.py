"""Customer receipts: thermal ticket text, ESC/POS payload and share link."""

from __future__ import annotations

import base64
from collections.abc import Iterator
from urllib.parse import quote

from divisas.schemas.preferences import UserPreferences
from divisas.schemas.transaction import Transaction, TransactionType
from divisas.utils.clock import to_local
from divisas.utils.formatters import currency_symbol, format_amount, format_total

DEFAULT_BUSINESS_NAME = "DIVISAS PRO"
DEFAULT_SLOGAN = "Servicios Financieros"
BLE_CHUNK_SIZE = 50


class EscPos:
    """ESC/POS control sequences understood by 58/80 mm thermal printers."""

    INIT = b"\x1b\x40"
    ALIGN_CENTER = b"\x1b\x61\x01"
    ALIGN_LEFT = b"\x1b\x61\x00"
    BOLD_ON = b"\x1b\x45\x01"
    BOLD_OFF = b"\x1b\x45\x00"
    LF = b"\x0a"


def _operation_label(tx: Transaction) -> str:
    return "COMPRA" if tx.type is TransactionType.BUY else "VENTA"


def _ticket_number(tx: Transaction) -> str:
    return tx.id.replace("-", "")[:8].upper()


def chunk_payload(payload: bytes, size: int = BLE_CHUNK_SIZE) -> Iterator[bytes]:
    """Split a printer payload into writes small enough for a BLE characteristic."""

    for start in range(0, len(payload), size):
        yield payload[start : start + size]


def encode_chunks(payload: bytes, size: int = BLE_CHUNK_SIZE) -> list[str]:
    """Base64 text of each printer write, in order."""

    return [base64.b64encode(chunk).decode("ascii") for chunk in chunk_payload(payload, size)]


class ReceiptService:
    """Render one settled transaction for the customer."""

    def __init__(self, timezone: str, width: int = 32) -> None:
        self._timezone = timezone
        self._width = width

    def _header(self, preferences: UserPreferences) -> tuple[str, str]:
        business = (preferences.business_name or DEFAULT_BUSINESS_NAME).upper()
        return business, preferences.slogan or DEFAULT_SLOGAN

    def _columns(self, left: str, right: str) -> str:
        gap = max(1, self._width - len(left) - len(right))
        return f"{left}{' ' * gap}{right}"

    def _stamp(self, tx: Transaction) -> str:
        return to_local(tx.timestamp, self._timezone).strftime("%d/%m/%Y - %H:%M")

    def ticket_lines(self, tx: Transaction, preferences: UserPreferences) -> list[tuple[str, bool, bool]]:
        """Receipt as (text, centered, bold) rows."""

        business, slogan = self._header(preferences)
        rule = "-" * self._width
        target_symbol = currency_symbol(tx.pair.target)
        return [
            (business, True, True),
            (slogan, True, False),
            (rule, False, False),
            (self._stamp(tx), True, False),
            (f"TICKET NO: {_ticket_number(tx)}", True, True),
            (rule, False, False),
            (f"CLIENTE: {tx.client_name}", False, False),
            (rule, False, False),
            (self._columns(f"{_operation_label(tx)} {tx.pair.source.value}", format_amount(tx.amount)), False, True),
            (self._columns("TASA CAMBIO", format_amount(tx.rate)), False, False),
            ("=" * self._width, False, False),
            (self._columns("TOTAL PAGAR", f"{target_symbol} {format_total(tx.total)}"), False, True),
            ("=" * self._width, False, False),
            ("Gracias por su preferencia", True, True),
            ("*** COPIA CLIENTE ***", True, False),
        ]

    def render_text(self, tx: Transaction, preferences: UserPreferences) -> str:
        """Plain-text ticket for screens, messages and PDF-less printing."""

        rows = []
        for text, centered, _bold in self.ticket_lines(tx, preferences):
            rows.append(text.center(self._width).rstrip() if centered else text)
        return "\n".join(rows)

    def render_escpos(self, tx: Transaction, preferences: UserPreferences, encoding: str = "utf-8") -> bytes:
        """Ticket as a raw ESC/POS byte stream ending with a paper feed."""

        payload = bytearray(EscPos.INIT)
        for text, centered, bold in self.ticket_lines(tx, preferences):
            payload += EscPos.ALIGN_CENTER if centered else EscPos.ALIGN_LEFT
            if bold:
                payload += EscPos.BOLD_ON
            payload += text.encode(encoding, errors="replace") + EscPos.LF
            if bold:
                payload += EscPos.BOLD_OFF
        payload += EscPos.LF * 3
        return bytes(payload)

    def test_page(self) -> bytes:
        """Connection check page for a freshly paired printer."""

        rule = ("-" * self._width).encode()
        return b"".join(
            [
                EscPos.INIT,
                EscPos.ALIGN_CENTER,
                EscPos.BOLD_ON,
                b"PRUEBA DE CONEXION",
                EscPos.LF,
                EscPos.BOLD_OFF,
                rule,
                EscPos.LF,
                EscPos.ALIGN_LEFT,
                b"Conexion estable.",
                EscPos.LF,
                b"Listo para imprimir.",
                EscPos.LF,
                rule,
                EscPos.LF * 4,
            ]
        )

    def share_message(self, tx: Transaction, preferences: UserPreferences) -> str:
        business = preferences.business_name or DEFAULT_BUSINESS_NAME
        local = to_local(tx.timestamp, self._timezone)
        source = tx.pair.source.value
        rule = "-" * self._width
        return "\n".join(
            [
                f"*RECIBO - {business}*",
                rule,
                f"📅 Fecha: {local.strftime('%d/%m/%Y')}",
                f"🕒 Hora: {local.strftime('%H:%M')}",
                f"👤 Cliente: {tx.client_name}",
                rule,
                f"Operación: *{_operation_label(tx)} {source}*",
                f"Monto: {format_amount(tx.amount)} {source}",
                f"Tasa: {format_amount(tx.rate)}",
                f"*TOTAL: {currency_symbol(tx.pair.target)} {format_total(tx.total)}*",
                rule,
                "Gracias por su preferencia.",
            ]
        )

    def share_url(self, tx: Transaction, preferences: UserPreferences) -> str:
        """wa.me link that opens a chat prefilled with the receipt."""

        return f"https://wa.me/?text={quote(self.share_message(tx, preferences), safe='')}"
