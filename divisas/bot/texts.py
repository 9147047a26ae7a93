"""Telegram bot UI text constants for the exchange desk."""

RATES = "💱 Tasas"
CASHBOX = "💰 Caja"
SUMMARY = "📊 Resumen del día"
CANCEL_OPERATION = "❌ Cancelar"

BUY_USD = "🟢 Comprar USD"
SELL_USD = "🔴 Vender USD"
BUY_EUR = "🟢 Comprar EUR"
SELL_EUR = "🔴 Vender EUR"

MAIN_MENU_TITLE = "Seleccione una operación:"
ACCESS_DENIED = "Acceso denegado."
CANCELLED = "Operación cancelada."
INVALID_AMOUNT = "Monto inválido. Escriba un número mayor que 0."
CONFIRM = "✅ Confirmar"
REJECT = "❌ Cancelar"
