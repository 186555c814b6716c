def build_date_prompt(text: str, timezone: str, today_iso: str) -> str:
    return (
        "Interpreta una FECHA en español y responde SOLO JSON.\n"
        "No uses markdown ni texto adicional.\n"
        f"Zona horaria: {timezone}. Hoy es {today_iso}.\n"
        f'Entrada: """{text}"""\n'
        'Devuelve: {"isoDate":"YYYY-MM-DD","readable":"<humanizado>"} '
        'o {"isoDate":null,"readable":null} si no hay una fecha.'
    )


def build_time_prompt(text: str) -> str:
    return (
        "Interpreta una HORA en español y responde SOLO JSON (24h).\n"
        'Ejemplos: "3 pm"->{"isoTime":"15:00"}, "15:30"->{"isoTime":"15:30"}, '
        '"mediodía"->{"isoTime":"12:00"}, "medianoche"->{"isoTime":"00:00"}.\n'
        f'Entrada: """{text}"""\n'
        'Devuelve: {"isoTime":"HH:MM","readable":"<humanizado>"} '
        'o {"isoTime":null,"readable":null} si no hay una hora.'
    )


def build_pitch_prompt(site_text: str, business_name: str) -> str:
    return (
        f"=== TEXTO DEL SITIO (recortado) ===\n{site_text}\n=== FIN ===\n\n"
        f"Eres asesor de {business_name}. Usa SOLO lo que veas arriba. "
        f"Redacta un mensaje cálido (8-10 líneas) sobre los beneficios de *cambiarse a {business_name}* "
        "(planes, cobertura, facilidad). Invita a seguir con preguntas "
        "(paquetes, cobertura, cómo contratar). Evita inventar."
    )
