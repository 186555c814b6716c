from __future__ import annotations

import re

GREETING_PATTERN = re.compile(r"\b(hola|buenos dias|buenos días|buenas|buenas tardes|buenas noches)\b", re.IGNORECASE)
CANCEL_KEYWORDS = {"cancelar", "menu", "menú", "salir", "inicio"}
PORTABILITY_PATTERN = re.compile(
    r"(me interesa|quiero cambiarme|quiero cambiar|cambiarme|qué necesito|que necesito"
    r"|necesito cambiar|quiero portar|portabilidad)",
    re.IGNORECASE,
)
YES_PATTERN = re.compile(r"\b(si|sí|correcto|confirmo|ok|de acuerdo|así es|vale)\b", re.IGNORECASE)
NO_PATTERN = re.compile(r"\b(no|negativo|cambiar|no es|otra|equivocado)\b", re.IGNORECASE)
MENU_OPTION_PATTERN = re.compile(r"^[1-5]$")

ELLIPSIS = "…"


def is_greeting(text: str) -> bool:
    return bool(text) and GREETING_PATTERN.search(text.strip()) is not None


def is_cancel(text: str) -> bool:
    return bool(text) and text.lower().strip() in CANCEL_KEYWORDS


def is_portability_interest(text: str) -> bool:
    return bool(text) and PORTABILITY_PATTERN.search(text) is not None


def is_yes(text: str) -> bool:
    return YES_PATTERN.search((text or "").strip()) is not None


def is_no(text: str) -> bool:
    return NO_PATTERN.search((text or "").strip()) is not None


def menu_option(text: str) -> str | None:
    normalized = (text or "").strip()
    return normalized if MENU_OPTION_PATTERN.match(normalized) else None


def only_digits(text: str) -> str:
    return re.sub(r"\D", "", text or "")


def is_mx_phone(text: str) -> bool:
    """Ten-digit national number, any separators ignored."""
    return len(only_digits(text)) == 10


def parse_amount(text: str) -> float | None:
    try:
        return float((text or "").replace(",", ".").strip())
    except ValueError:
        return None


def truncate_text(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def confirmation(text: str) -> bool | None:
    """True for yes, False for no, None when neither or both apply ("no es correcto")."""
    yes, no = is_yes(text), is_no(text)
    if yes == no:
        return None
    return yes
