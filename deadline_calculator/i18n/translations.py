"""Translation strings for Portuguese and English."""

from typing import Dict

# Type alias for translation dictionaries
TranslationDict = Dict[str, str]

TRANSLATIONS: Dict[str, TranslationDict] = {
    "pt": {
        # =============================================================================
        # Formats
        # =============================================================================
        "format.date": "%d/%m/%Y",

        # =============================================================================
        # Weekday names (Monday = 0, as in date.weekday())
        # =============================================================================
        "weekday.0": "segunda-feira",
        "weekday.1": "terça-feira",
        "weekday.2": "quarta-feira",
        "weekday.3": "quinta-feira",
        "weekday.4": "sexta-feira",
        "weekday.5": "sábado",
        "weekday.6": "domingo",

        # =============================================================================
        # Calculator - Validation messages
        # =============================================================================
        "calc.invalid.missing": (
            "Aguardando dados válidos: informe a data de início e a quantidade de dias."
        ),
        "calc.invalid.date_format": (
            "Formato de data inválido: '{value}'. Use o formato AAAA-MM-DD."
        ),
        "calc.invalid.date": "Data inválida: '{value}' não existe no calendário.",
        "calc.invalid.day_count": (
            "Quantidade de dias inválida: '{value}'. Informe um número inteiro não negativo."
        ),
        "calc.invalid.counting_mode": (
            "Tipo de contagem inválido: '{value}'. Use 'business' (dias úteis) "
            "ou 'calendar' (dias corridos)."
        ),

        # =============================================================================
        # Calculator - Narration
        # =============================================================================
        "calc.log.start": "Data de publicação/intimação: {date} ({weekday})",
        "calc.log.zero_days": "Prazo de 0 dias: a data final é igual à data inicial.",
        "calc.log.start_excluded": "Dia de início (excluído): {date} ({weekday})",
        "calc.log.holiday": "{date} ({weekday}): Feriado ({name}) - Não contado",
        "calc.log.weekend": "{date} ({weekday}): Final de semana - Não contado",
        "calc.log.business": "{date} ({weekday}): Dia útil {count}/{total}",
        "calc.log.calendar": "{date} ({weekday}): Dia corrido {count}/{total}",
        "calc.log.extension": (
            "{date} ({weekday}): Vencimento em dia não útil ({reason}). "
            "Prorrogando para o próximo dia útil..."
        ),
        "calc.log.final": "Vencimento final: {date} ({weekday})",

        # =============================================================================
        # Calculator - Simulation labels
        # =============================================================================
        "calc.label.start": "Dia do começo",
        "calc.label.weekend": "Final de semana",

        # =============================================================================
        # Calculator - Errors
        # =============================================================================
        "calc.error.overflow": (
            "Limite de {limit} iterações excedido na fase de {phase}. "
            "A lista de feriados parece conter uma sequência ilimitada de dias não úteis."
        ),
        "calc.error.date_range": (
            "A contagem ultrapassa a maior data representável ({date}) na fase de {phase}."
        ),
        "calc.phase.counting": "contagem",
        "calc.phase.extension": "prorrogação",
        "calc.phase.start": "início da contagem",

        # =============================================================================
        # Holidays
        # =============================================================================
        "holiday.recess": "Recesso Forense",
    },
    "en": {
        # =============================================================================
        # Formats
        # =============================================================================
        "format.date": "%Y-%m-%d",

        # =============================================================================
        # Weekday names (Monday = 0, as in date.weekday())
        # =============================================================================
        "weekday.0": "Monday",
        "weekday.1": "Tuesday",
        "weekday.2": "Wednesday",
        "weekday.3": "Thursday",
        "weekday.4": "Friday",
        "weekday.5": "Saturday",
        "weekday.6": "Sunday",

        # =============================================================================
        # Calculator - Validation messages
        # =============================================================================
        "calc.invalid.missing": (
            "Waiting for valid input: provide a start date and a number of days."
        ),
        "calc.invalid.date_format": "Invalid date format: '{value}'. Use YYYY-MM-DD.",
        "calc.invalid.date": "Invalid date: '{value}' is not a calendar date.",
        "calc.invalid.day_count": (
            "Invalid number of days: '{value}'. Provide a non-negative whole number."
        ),
        "calc.invalid.counting_mode": (
            "Invalid counting mode: '{value}'. Use 'business' or 'calendar'."
        ),

        # =============================================================================
        # Calculator - Narration
        # =============================================================================
        "calc.log.start": "Publication/notice date: {date} ({weekday})",
        "calc.log.zero_days": "0-day term: the final date equals the start date.",
        "calc.log.start_excluded": "Start day (excluded): {date} ({weekday})",
        "calc.log.holiday": "{date} ({weekday}): Holiday ({name}) - Not counted",
        "calc.log.weekend": "{date} ({weekday}): Weekend - Not counted",
        "calc.log.business": "{date} ({weekday}): Business day {count}/{total}",
        "calc.log.calendar": "{date} ({weekday}): Calendar day {count}/{total}",
        "calc.log.extension": (
            "{date} ({weekday}): Due date falls on a non-business day ({reason}). "
            "Extending to the next business day..."
        ),
        "calc.log.final": "Final due date: {date} ({weekday})",

        # =============================================================================
        # Calculator - Simulation labels
        # =============================================================================
        "calc.label.start": "Start day",
        "calc.label.weekend": "Weekend",

        # =============================================================================
        # Calculator - Errors
        # =============================================================================
        "calc.error.overflow": (
            "Iteration limit of {limit} exceeded during the {phase} phase. "
            "The holiday list appears to contain an unbounded run of non-business days."
        ),
        "calc.error.date_range": (
            "The count runs past the latest representable date ({date}) during the {phase} phase."
        ),
        "calc.phase.counting": "counting",
        "calc.phase.extension": "extension",
        "calc.phase.start": "term start",

        # =============================================================================
        # Holidays
        # =============================================================================
        "holiday.recess": "Forensic Recess",
    },
}


def get_translation(key: str, language: str = "pt", **kwargs) -> str:
    """Get a translation for a key.

    Args:
        key: The translation key.
        language: Language code ('pt' or 'en').
        **kwargs: Format arguments for the translation string.

    Returns:
        The translated string, or the key if not found.
    """
    lang_dict = TRANSLATIONS.get(language, TRANSLATIONS["pt"])
    text = lang_dict.get(key, TRANSLATIONS["pt"].get(key, key))

    if kwargs:
        try:
            return text.format(**kwargs)
        except KeyError:
            return text
    return text
