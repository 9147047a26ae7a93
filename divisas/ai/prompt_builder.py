"""Prompt builder for the end-of-day business analysis."""


def build_day_analysis_prompt(summary: str) -> str:
    """Return consultant instructions wrapped around today's operations."""

    return (
        "Actúa como un experto consultor financiero para una casa de cambio en República Dominicana.\n"
        "Analiza las siguientes transacciones del día de hoy:\n\n"
        f"{summary}\n\n"
        "Dame un resumen muy breve (máximo 3 oraciones) sobre el volumen de negocio y una "
        "recomendación estratégica (ej: si vendimos mucho USD, ¿subir el precio de venta? "
        "¿Movimiento inusual en Euros?).\n"
        "El tono debe ser profesional y directo."
    )
