"""
Timeliness statement ("tópico de tempestividade") generator.

Assembles Portuguese legal prose from a date range, the holiday registry
and citation tables keyed by framework and act type.
"""

from datetime import date, timedelta
from typing import Dict, List, Optional

from deadline_calculator.core.calculator import ComputationOverflowError
from deadline_calculator.core.day_classifier import is_business_day
from deadline_calculator.data.holiday_data import is_recess_day
from deadline_calculator.data.schemas import (
    ActType,
    CountingMode,
    Framework,
    HolidayRegistry,
    TimelinessRequest,
)
from deadline_calculator.i18n import Translator

ACT_NAMES: Dict[ActType, str] = {
    ActType.CONTESTACAO: "Contestação",
    ActType.RECURSO: "Recurso",
    ActType.EMBARGOS_DECLARACAO: "Embargos de Declaração",
    ActType.CONTRARRAZOES_RECURSO: "Contrarrazões",
    ActType.CONTRARRAZOES_EMBARGOS: "Contrarrazões aos Embargos",
    ActType.MANIFESTACAO: "Manifestação",
    ActType.OUTROS: "Peça Processual",
}

APPEAL_ACTS = (ActType.RECURSO, ActType.CONTRARRAZOES_RECURSO)
EMBARGOS_ACTS = (ActType.EMBARGOS_DECLARACAO, ActType.CONTRARRAZOES_EMBARGOS)

# Article cited in the opening paragraph of CPC/JEC decisions
OPENING_ARTICLES: Dict[ActType, str] = {
    ActType.RECURSO: "do art. 1.003, § 5º, do ",
    ActType.CONTRARRAZOES_RECURSO: "do art. 1.003, § 5º, do ",
    ActType.EMBARGOS_DECLARACAO: "do art. 1.023 do ",
    ActType.CONTRARRAZOES_EMBARGOS: "do art. 1.023 do ",
}

LABOR_TERMS: Dict[ActType, str] = {
    ActType.CONTESTACAO: "nos termos do art. 847, § 1º da CLT",
    ActType.RECURSO: "nos termos do art. 895 da CLT",
    ActType.EMBARGOS_DECLARACAO: "nos termos do art. 897-A da CLT",
    ActType.CONTRARRAZOES_RECURSO: "nos termos da legislação consolidada",
    ActType.CONTRARRAZOES_EMBARGOS: "nos termos da legislação consolidada",
}

# (framework, act) -> rule governing the term length
RULE_CITATIONS: Dict[Framework, Dict[ActType, str]] = {
    Framework.CLT: {
        ActType.EMBARGOS_DECLARACAO: "art. 897-A da CLT",
        ActType.CONTRARRAZOES_EMBARGOS: "art. 897-A da CLT",
        ActType.RECURSO: "art. 895 da CLT",
    },
    Framework.JEC: {},
    Framework.CPC: {
        ActType.CONTESTACAO: "art. 335 do CPC",
        ActType.EMBARGOS_DECLARACAO: "art. 1.023 do CPC",
        ActType.CONTRARRAZOES_EMBARGOS: "art. 1.023 do CPC",
    },
}

DEFAULT_RULE_CITATIONS: Dict[Framework, str] = {
    Framework.CLT: "art. 775 da CLT",
    Framework.JEC: "art. 12-A da Lei 9.099/95",
    Framework.CPC: "artigos 219, 224 e 231 do CPC",
}

RECESS_CITATIONS: Dict[Framework, str] = {
    Framework.CLT: "art. 775-A da CLT",
    Framework.JEC: "art. 220 do CPC",
    Framework.CPC: "art. 220 do CPC",
}

NUMBER_WORDS: Dict[int, str] = {
    5: "cinco",
    8: "oito",
    10: "dez",
    15: "quinze",
    20: "vinte",
    30: "trinta",
}

# Safety bound for range walks
MAX_RANGE_DAYS = 1000


def involves_forensic_recess(start: date, end: date) -> bool:
    """True if any day in [start, end] falls inside 20/12 - 20/01."""
    span = min((end - start).days + 1, MAX_RANGE_DAYS)
    return any(is_recess_day(start + timedelta(days=offset)) for offset in range(span))


def suspensions_in_range(start: date, end: date, holidays: HolidayRegistry) -> List[str]:
    """
    List registry holidays inside [start, end], outside the recess window.

    Args:
        start: First day of the range.
        end: Last day of the range.
        holidays: Registry snapshot.

    Returns:
        Entries formatted as 'DD/MM/YYYY (name)', in date order.
    """
    return [
        f"{h.holiday_date.strftime('%d/%m/%Y')} ({h.name})"
        for h in holidays.in_range(start, end)
        if not is_recess_day(h.holiday_date)
    ]


def suggest_framework(title: Optional[str]) -> Framework:
    """Guess the framework from an activity title."""
    lower_title = (title or "").lower()
    if "trabalhista" in lower_title or "clt" in lower_title:
        return Framework.CLT
    if "juizado" in lower_title or "jec" in lower_title:
        return Framework.JEC
    return Framework.CPC


def suggest_days(act_type: ActType, framework: Framework, default: int) -> int:
    """Usual term length for an act: 5 for embargos, 8 for labor appeals, 15 otherwise."""
    if act_type in EMBARGOS_ACTS:
        return 5
    if act_type in APPEAL_ACTS:
        return 8 if framework is Framework.CLT else 15
    if act_type is ActType.CONTESTACAO:
        return 15
    return default


class TimelinessFormatter:
    """Generates the timeliness section of a filing."""

    def __init__(self):
        """Initialize the formatter (narration is always Portuguese)."""
        self.translator = Translator("pt")

    def generate(self, request: TimelinessRequest) -> str:
        """
        Generate the three-paragraph timeliness statement.

        Args:
            request: TimelinessRequest with dates, framework and act.

        Returns:
            Formatted statement text.
        """
        act_name = request.custom_title or ACT_NAMES[request.act_type]
        act_lower = act_name.lower()

        text = "I. DA TEMPESTIVIDADE\n\n"
        text += self._opening(request, act_lower)
        text += self._term(request)
        text += (
            "03.\tDesta forma, considerando a contagem legal, o prazo fatal para "
            f"apresentação desta {act_lower} encerra-se na data de "
            f"{self._fmt(request.deadline_date)}. Protocolada a presente peça nesta data, "
            "resta flagrante sua tempestividade."
        )
        return text

    def _opening(self, request: TimelinessRequest, act_lower: str) -> str:
        """Paragraph 01: notice and start of the term."""
        notified = f"{self._fmt(request.notification_date)} ({self._weekday(request.notification_date)})"
        ref_text = f" ({request.reference})" if request.reference else ""

        if request.framework is Framework.CLT:
            start = request.start_date or self._next_business_day(
                request.notification_date, request.holidays
            )
            labor_term = LABOR_TERMS.get(request.act_type, "nos termos da CLT")
            return (
                f"01.\tCumpre demonstrar a tempestividade da presente {act_lower}. "
                f"A parte recebeu a notificação/intimação{ref_text} em {notified}. "
                "Nos termos da Súmula 16 do TST e art. 775 da CLT, a contagem inicia-se no "
                f"primeiro dia útil subsequente, qual seja, {self._fmt(start)} "
                f"({self._weekday(start)}), observando-se o prazo legal {labor_term}.\n\n"
            )

        if request.act_type is ActType.CONTESTACAO:
            return (
                f"01.\tO mandado de citação devidamente cumprido{ref_text} foi juntado aos "
                f"autos em {notified}, iniciando-se a fluência do prazo conforme o art. 335 "
                f"do Código de Processo Civil para a apresentação da presente {act_lower}.\n\n"
            )

        article = OPENING_ARTICLES.get(request.act_type, "")
        framework_name = "Lei 9.099/95" if request.framework is Framework.JEC else "Código de Processo Civil"
        return (
            f"01.\tA r. decisão{ref_text} foi publicada no Diário de Justiça Eletrônico em "
            f"{notified}, iniciando-se a data de fluência do prazo {article}{framework_name} "
            f"para a interposição de {act_lower}.\n\n"
        )

    def _term(self, request: TimelinessRequest) -> str:
        """Paragraph 02: term length, rule citation and suspensions."""
        rule = RULE_CITATIONS[request.framework].get(
            request.act_type, DEFAULT_RULE_CITATIONS[request.framework]
        )
        day_type = "úteis" if request.counting_mode is CountingMode.BUSINESS else "corridos"
        words = NUMBER_WORDS.get(request.days, str(request.days))

        has_recess = involves_forensic_recess(request.notification_date, request.deadline_date)
        suspensions = suspensions_in_range(
            request.notification_date, request.deadline_date, request.holidays
        )

        text = (
            f"02.\tConsiderando que o prazo legal é de {request.days} ({words}) dias "
            f"{day_type}, conforme {rule}, e observando-se "
        )

        if has_recess or suspensions:
            text += "a suspensão do prazo processual "
            if has_recess:
                text += (
                    "em virtude do Recesso Forense (20/12 a 20/01), conforme "
                    f"{RECESS_CITATIONS[request.framework]}, "
                )
                if suspensions:
                    text += "além da suspensão "
            if suspensions:
                text += f"nos dias {', '.join(suspensions)} "
            text += "segundo ainda as diretrizes legais, "
        elif request.counting_mode is CountingMode.BUSINESS:
            text += "a contagem exclusiva em dias úteis, "
        else:
            text += "a contagem em dias corridos, "

        return text + "a presente manifestação é induvidosamente tempestiva.\n\n"

    def _next_business_day(self, day: date, holidays: HolidayRegistry) -> date:
        """
        First business day strictly after ``day``.

        Raises:
            ComputationOverflowError: If none is found within MAX_RANGE_DAYS.
        """
        for offset in range(1, MAX_RANGE_DAYS + 1):
            try:
                current = day + timedelta(days=offset)
            except OverflowError:
                break
            if is_business_day(current, holidays):
                return current

        message = self.translator(
            "calc.error.overflow",
            limit=MAX_RANGE_DAYS,
            phase=self.translator("calc.phase.start"),
        )
        raise ComputationOverflowError(message, phase="start", limit=MAX_RANGE_DAYS)

    def _fmt(self, day: date) -> str:
        return self.translator.format_date(day)

    def _weekday(self, day: date) -> str:
        return self.translator.weekday_name(day)
