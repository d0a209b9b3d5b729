from typing import Optional
from urllib.parse import quote

from dental_intake.services.catalog import Catalog, load_catalog

# characters encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


def whatsapp_url(context: Optional[str] = None, message: Optional[str] = None, catalog: Optional[Catalog] = None) -> str:
    catalog = catalog or load_catalog()
    text = message or catalog.contact["default_message"]
    if context:
        text = f"{text} [{context}]"
    number = catalog.contact["whatsapp_number"].replace("+", "")
    return f"https://wa.me/{number}?text={quote(text, safe=_URI_COMPONENT_SAFE)}"


def whatsapp_url_for_diagnosis(program_name: str, urgency: str, catalog: Optional[Catalog] = None) -> str:
    message = (
        "Hola, acabo de completar el diagnóstico en la web. "
        f"Me recomendaron el programa {program_name}. "
        f"Mi urgencia es: {urgency}. Me gustaría más información."
    )
    return whatsapp_url("diagnostico-web", message, catalog=catalog)


def booking_url(catalog: Optional[Catalog] = None) -> str:
    catalog = catalog or load_catalog()
    return catalog.contact["booking_url"]


__all__ = ["whatsapp_url", "whatsapp_url_for_diagnosis", "booking_url"]
