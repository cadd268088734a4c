"""Configuration surfaces: constants, weights, knowledge base and runtime settings."""
from .knowledge_base import KnowledgeBase, PhraseMatch
from .settings import PipelineSettings
from .weights import DEFAULT_WEIGHT, WeightConfig

__all__ = [
    "DEFAULT_WEIGHT",
    "KnowledgeBase",
    "PhraseMatch",
    "PipelineSettings",
    "WeightConfig",
]
