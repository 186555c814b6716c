from enum import Enum


class DialogueState(str, Enum):
    IDLE = "IDLE"
    INFO = "INFO"
    RECHARGE_NUMBER = "RECHARGE_NUMBER"
    RECHARGE_AMOUNT = "RECHARGE_AMOUNT"
    APPT_NAME = "APPT_NAME"
    APPT_DATE_INPUT = "APPT_DATE_INPUT"
    APPT_DATE_CONFIRM = "APPT_DATE_CONFIRM"
    APPT_TIME_INPUT = "APPT_TIME_INPUT"
    APPT_TIME_CONFIRM = "APPT_TIME_CONFIRM"
    PORTABILITY_INTAKE = "PORTABILITY_INTAKE"
    HANDOFF = "HANDOFF"
