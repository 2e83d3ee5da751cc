"""Configuration for the classtrib tax classification search."""

from __future__ import annotations

from dataclasses import dataclass, field

# Portuguese articles, prepositions and conjunctions ignored as keywords
DEFAULT_STOPWORDS: frozenset[str] = frozenset({
    "de", "da", "do", "das", "dos",
    "em", "na", "no", "nas", "nos",
    "para", "por", "com", "sem",
    "que", "uma", "um", "uns", "umas",
    "ou", "os", "as", "ao", "aos",
})


@dataclass
class NormalizationConfig:
    min_token_length: int = 3
    stopwords: frozenset[str] = DEFAULT_STOPWORDS


@dataclass
class RankingWeights:
    exact_code: int = 6
    prefix_code: int = 4
    substring_code: int = 2
    description: int = 1


@dataclass
class ExpansionConfig:
    keyword_hit: int = 2
    substring_hit: int = 1
    description_fallback: int = 1
    max_per_item: int = 5


@dataclass
class LimitConfig:
    max_results: int = 200


@dataclass
class NomenclatureSchema:
    code_field: str
    description_field: str
    wrapper_key: str | None = None


@dataclass
class ClassificationSchema:
    code: str = "cClassTrib"
    name: str = "Nome cClassTrib"
    description: str = "Descrição cClassTrib"
    situation_code: str = "CST-IBS/CBS"
    situation_description: str = "Descrição CST-IBS/CBS"
    ibs_reduction: str = "pRedIBS"
    cbs_reduction: str = "pRedCBS"
    legal_reference: str = "LC 214/25"
    drafting_text: str = "LC Redação"
    rate_type: str = "Tipo de Alíquota"
    last_updated: str = "DataAtualização"
    url: str = "Url"


def _goods_schema() -> NomenclatureSchema:
    return NomenclatureSchema(
        code_field="Codigo",
        description_field="Descricao",
        wrapper_key="Nomenclaturas",
    )


def _service_schema() -> NomenclatureSchema:
    return NomenclatureSchema(code_field="NBS", description_field="Descrição")


@dataclass
class SchemaConfig:
    goods: NomenclatureSchema = field(default_factory=_goods_schema)
    services: NomenclatureSchema = field(default_factory=_service_schema)
    classifications: ClassificationSchema = field(default_factory=ClassificationSchema)


@dataclass
class SearchConfig:
    normalization: NormalizationConfig = field(default_factory=NormalizationConfig)
    ranking: RankingWeights = field(default_factory=RankingWeights)
    expansion: ExpansionConfig = field(default_factory=ExpansionConfig)
    limits: LimitConfig = field(default_factory=LimitConfig)
    schema: SchemaConfig = field(default_factory=SchemaConfig)
