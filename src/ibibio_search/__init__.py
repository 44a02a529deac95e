from .analyzer import fold_diacritics, is_multi_word, is_significant, normalize, significant_tokens, tokenize
from .backend import BackendTranslationSource, HuggingFaceBackendClient
from .cache import CacheStorage, FileCacheStorage, MemoryCacheStorage, ResultCache, make_key
from .config import SearchConfig, load_config
from .consensus import final_confidence, reconcile, source_weight
from .disambiguation import DEFAULT_RULES, DisambiguationResolver
from .engine import DictionaryEngine
from .errors import EngineNotReadyError, IbibioSearchError, InvalidEntryError, SourceUnavailableError
from .extraction import extract_json_object, extract_translation, parse_ai_translation
from .fuzzy import FuzzySearchEngine
from .index import InvertedIndex
from .ingest import LoadStats, transform_record, transform_records
from .llm import ChatCompletionsTranslator, LLMConfig
from .logs import configure_logging
from .ollama import OllamaClient, OllamaTranslator
from .schema import (
    AITranslation,
    BackendResponse,
    CacheEntry,
    DictionaryEntry,
    DisambiguationResult,
    DisambiguationRule,
    Example,
    MultiSourceResult,
    PartOfSpeech,
    RuleAlternative,
    SearchResult,
    SemanticScore,
    SourceName,
    SourceResult,
    WordTranslation,
)
from .scoring import SemanticScorer
from .seed import SEED_ENTRIES, seed_entries
from .sentence import SentenceDecomposer, SentenceTranslation
from .sources import AITranslationSource, AITranslator, TranslationSource, fan_out
from .store import DictionaryStore, JsonDictionaryStore, MemoryDictionaryStore
from .websearch import GlosbeSearchSource, parse_glosbe_html

__all__ = [
    "DictionaryEngine",
    "SearchConfig",
    "load_config",
    "configure_logging",
    "normalize",
    "tokenize",
    "is_significant",
    "significant_tokens",
    "is_multi_word",
    "fold_diacritics",
    "InvertedIndex",
    "SemanticScorer",
    "FuzzySearchEngine",
    "DisambiguationResolver",
    "DEFAULT_RULES",
    "ResultCache",
    "CacheStorage",
    "MemoryCacheStorage",
    "FileCacheStorage",
    "make_key",
    "SentenceDecomposer",
    "SentenceTranslation",
    "reconcile",
    "source_weight",
    "final_confidence",
    "fan_out",
    "TranslationSource",
    "AITranslator",
    "AITranslationSource",
    "BackendTranslationSource",
    "HuggingFaceBackendClient",
    "GlosbeSearchSource",
    "parse_glosbe_html",
    "OllamaClient",
    "OllamaTranslator",
    "ChatCompletionsTranslator",
    "LLMConfig",
    "extract_translation",
    "extract_json_object",
    "parse_ai_translation",
    "transform_record",
    "transform_records",
    "LoadStats",
    "DictionaryStore",
    "JsonDictionaryStore",
    "MemoryDictionaryStore",
    "SEED_ENTRIES",
    "seed_entries",
    "IbibioSearchError",
    "InvalidEntryError",
    "EngineNotReadyError",
    "SourceUnavailableError",
    "AITranslation",
    "BackendResponse",
    "CacheEntry",
    "DictionaryEntry",
    "DisambiguationResult",
    "DisambiguationRule",
    "Example",
    "MultiSourceResult",
    "PartOfSpeech",
    "RuleAlternative",
    "SearchResult",
    "SemanticScore",
    "SourceName",
    "SourceResult",
    "WordTranslation",
]
