"""Grammar-check clients."""

from ielts_api.domain.grammar.factory import build_grammar_checker
from ielts_api.domain.grammar.languagetool import LanguageToolClient

__all__ = ["LanguageToolClient", "build_grammar_checker"]
