from ielts_api.core.config import Settings
from ielts_api.domain.grammar.languagetool import LanguageToolClient


def build_grammar_checker(settings: Settings) -> LanguageToolClient:
    return LanguageToolClient(
        url=settings.grammar_check_url,
        language=settings.grammar_check_language,
        timeout_sec=settings.grammar_check_timeout_sec,
    )
