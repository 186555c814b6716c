from __future__ import annotations


def welcome_menu(business_name: str) -> str:
    return (
        f"Muchas gracias por ponerte en contacto con *{business_name}*.\n"
        "¿En qué puedo apoyarte hoy?\n\n"
        "1. Información sobre la compañía\n"
        "2. Recargas\n"
        "3. Problemas con servicio\n"
        "4. Agendar una cita\n"
        "5. Hablar con una persona\n\n"
        "_Escribe el número de la opción, o `cancelar` para volver aquí._"
    )


def portability_requirements(business_name: str) -> str:
    return (
        f"🙌 *Excelente, te ayudamos con tu cambio a {business_name}.*\n\n"
        "Para continuar, por favor compárteme:\n"
        "• *IMEI* del teléfono (marca *#06#* para verlo).\n"
        "• *Nombre completo* del titular.\n"
        "• *Correo electrónico* de contacto.\n"
        "• *NIP de portabilidad*: envía un SMS al *051* con la palabra *NIP* o llama al *051*.\n\n"
        "Cuando tengas estos datos, envíalos en un solo mensaje o en mensajes separados."
    )


def fallback_pitch(business_name: str) -> str:
    return (
        f"📘 *Información sobre {business_name}*\n\n"
        "Gracias por tu interés en cambiarte con nosotros. Contamos con cobertura nacional y opciones de prepago. "
        "Puedo ayudarte a revisar *paquetes*, *cobertura* y *cómo contratar*. ¿Qué te gustaría saber primero?"
    )


def _amounts(amounts: list[int]) -> str:
    quoted = [f"*{a}*" for a in amounts]
    if len(quoted) == 1:
        return quoted[0]
    return ", ".join(quoted[:-1]) + " o " + quoted[-1]


CALL_CENTER = (
    "CALL CENTER\n"
    "Horarios de Atención\n"
    "Lunes a Viernes 8:30 am a 8:00 pm\n"
    "Sábado 9:00 am a 7:00 pm\n"
    "Domingo 10:00 am a 3:00 pm\n"
    "Días festivos\n"
    "Línea: 5589202828\n"
    "Whats: 5629661624\n\n"
    "Los horarios de call center son para UF (Usuario Final), o bien ustedes pueden marcar en apoyo al UF "
    "siempre y cuando esté presencial con ustedes."
)

INFO_FOLLOW_UP = (
    "Si te interesa, dime *paquetes*, *cobertura*, *internet hogar* o *cómo contratar*, "
    "y te doy más detalles puntuales."
)

RECHARGE_ASK_NUMBER = (
    "💳 *Recargas*\nPaso 1/2: Envíame el *número a recargar* (10 dígitos). Ejemplo: 7771234567\n"
    "_Escribe `cancelar` para volver al menú._"
)
RECHARGE_INVALID_NUMBER = "El número debe tener *10 dígitos*. Inténtalo de nuevo."


def recharge_ask_amount(amounts: list[int]) -> str:
    return f"Paso 2/2: ¿Qué *monto* quieres recargar? Debe ser {_amounts(amounts)}."


def recharge_invalid_amount(amounts: list[int]) -> str:
    return f"Monto inválido. Debe ser {_amounts(amounts)}."


def recharge_confirmed(number: str, amount: float) -> str:
    return f"✅ Recarga solicitada: *{number}* por *${amount:.0f}*. Un asesor confirmará tu recarga."


APPT_ASK_NAME = "📅 *Agendar una cita*\nPaso 1/4: Indícame tu *nombre completo*."
APPT_ASK_DATE = "Paso 2/4: Escribe la *fecha* (ej.: *próximo jueves*, *17 de agosto*, *17/08/2025*)."
APPT_DATE_NOT_UNDERSTOOD = "No pude interpretar la fecha. Intenta con *mañana*, *próximo jueves* o *17/08/2025*."
APPT_RETRY_DATE = "Ok, escribe nuevamente la *fecha*."
APPT_ASK_TIME = "Paso 3/4: Ahora dime la *hora* (ej.: *3 pm*, *15:00*, *medio día*)."
APPT_TIME_NOT_UNDERSTOOD = "No pude interpretar la hora. Intenta con *3 pm* o *15:00*."
APPT_RETRY_TIME = "Ok, escribe nuevamente la *hora*."
APPT_SLOT_BUSY = "⛔ Ese horario ya está ocupado. ¿Propones otra *fecha* u *hora*? Escribe la nueva *fecha*."
APPT_CALENDAR_ERROR = "⚠️ No pude verificar/crear la cita en el calendario. Intenta más tarde."
ANSWER_YES_NO = "Responde *sí* o *no*."


def appt_confirm_date(readable: str, iso_date: str) -> str:
    return f"Entendí la fecha como: *{readable}* ({iso_date}). ¿Es correcto? *sí/no*"


def appt_confirm_time(readable: str, iso_time: str) -> str:
    return f"Entendí la hora como: *{readable}* ({iso_time}). ¿Es correcto? *sí/no*"


def appt_created(iso_date: str, iso_time: str) -> str:
    return f"✅ *Cita creada* para *{iso_date}* a las *{iso_time}*. Paso 4/4 completado."


HANDOFF_STARTED = "👤 *Hablar con una persona*\nEn breve un asesor te atenderá."
HANDOFF_ACK = "En breve, un asesor continuará la conversación. 🙌"
PORTABILITY_RECEIVED = "Perfecto, recibí tu información. Un asesor te contactará. Escribe *hola* para el menú."
MODEL_BUSY = "⚠️ El modelo está ocupado. Intentémoslo más tarde."
DEBUG_DEFAULT_PROMPT = "Hola, ¿en qué te ayudo?"
GENERIC_ERROR = "⚠️ Ocurrió un error. Escribe *hola* para ver el menú."


def admin_handoff_alert(conversation_id: str) -> str:
    return f"👤 *ALERTA HUMANO*\nUn cliente quiere hablar contigo.\n• Cliente (chatId): {conversation_id}"


def admin_recharge_alert(conversation_id: str, number: str, amount: float) -> str:
    return f"💳 *ALERTA RECARGA*\n• Cliente: {conversation_id}\n• Número: {number}\n• Monto: ${amount:.0f}"


def admin_appointment_alert(conversation_id: str, name: str, iso_date: str, iso_time: str, event_id: str) -> str:
    return (
        "📅 *ALERTA CITA*\n"
        f"• Cliente: {conversation_id}\n"
        f"• Nombre: {name}\n"
        f"• Fecha: {iso_date}\n"
        f"• Hora: {iso_time}\n"
        f"• Evento ID: {event_id or 'N/D'}"
    )


def admin_portability_alert(conversation_id: str, details: str) -> str:
    return (
        "📩 *ALERTA PORTABILIDAD*\n"
        f"Un cliente ({conversation_id}) quiere *cambio de compañía*.\n\n"
        f"📄 *Datos enviados:*\n{details}"
    )
