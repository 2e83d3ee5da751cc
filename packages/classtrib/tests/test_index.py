"""Tests for the nomenclature and classification index builders."""

from classtrib.config import NomenclatureSchema, SearchConfig
from classtrib.index import (
    NO_REDUCTION,
    build_classification_index,
    build_nomenclature_index,
    summarize_reductions,
)

from conftest import make_classification


class TestClassificationIndex:
    """Building classification entries from raw records."""

    def test_fields_are_trimmed_and_enriched(self):
        record = {
            "cClassTrib": " 200003 ",
            "Nome cClassTrib": "Redução de 60%",
            "Descrição cClassTrib": " Veículos de transporte ",
            "CST-IBS/CBS": "200",
            "Descrição CST-IBS/CBS": "Alíquota reduzida",
            "pRedIBS": "60",
            "pRedCBS": "0",
            "LC 214/25": "Art. 138",
            "LC Redação": "Redação adicional",
            "DataAtualização": "2025-01-01",
            "Url": "https://example.org/200003",
        }
        [entry] = build_classification_index([record])

        assert entry.code == "200003"
        assert entry.name == "Redução de 60%"
        assert entry.description == "Veículos de transporte"
        assert entry.situation_code == "200"
        assert entry.legal_reference == "Art. 138"
        assert entry.last_updated == "2025-01-01"
        assert entry.url == "https://example.org/200003"
        assert entry.rate_reduction_summary == "IBS 60%"
        assert entry.normalized_full_text == (
            "veiculos de transporte aliquota reduzida redacao adicional"
        )
        assert entry.keyword_set == {
            "veiculos", "transporte", "aliquota", "reduzida", "redacao", "adicional",
        }

    def test_missing_fields_default_to_empty(self):
        [entry] = build_classification_index([{"cClassTrib": "000001"}])
        assert entry.description == ""
        assert entry.situation_description == ""
        assert entry.normalized_full_text == ""
        assert entry.keyword_set == frozenset()
        assert entry.rate_reduction_summary == NO_REDUCTION

    def test_non_dict_records_skipped(self):
        record = make_classification("000001", "Tributação integral")
        entries = build_classification_index([record, "junk", None, 5, record])
        assert len(entries) == 2

    def test_no_dedup_by_code(self):
        records = [
            make_classification("200003", "Cavalos"),
            make_classification("200003", "Bovinos"),
        ]
        entries = build_classification_index(records)
        assert [e.description for e in entries] == ["Cavalos", "Bovinos"]

    def test_non_sequence_input_degrades_to_empty(self):
        assert build_classification_index(None) == []
        assert build_classification_index("not a table") == []
        assert build_classification_index({"cClassTrib": "1"}) == []


class TestReductionSummary:
    def test_both_absent(self):
        assert summarize_reductions("", "") == NO_REDUCTION

    def test_zero_string_counts_as_absent(self):
        assert summarize_reductions("0", "0") == NO_REDUCTION
        assert summarize_reductions("0,00", "0.0") == NO_REDUCTION

    def test_both_present(self):
        assert summarize_reductions("60", "60%") == "IBS 60% | CBS 60%"

    def test_only_cbs(self):
        assert summarize_reductions("0", "100") == "CBS 100%"

    def test_non_finite_values_count_as_absent(self):
        assert summarize_reductions("NaN", "inf") == NO_REDUCTION
        assert summarize_reductions("nan", "60") == "CBS 60%"


class TestNomenclatureIndex:
    def test_goods_before_services_in_source_order(self, goods_table, services_table):
        items = build_nomenclature_index(goods_table, services_table)
        assert [i.kind for i in items] == ["GOODS"] * 4 + ["SERVICE"] * 2
        assert [i.normalized_code for i in items[:2]] == ["0101", "01012100"]
        assert items[0].original_code == "01.01"
        assert items[3].normalized_description == (
            "veiculos automoveis para transporte de pessoas"
        )

    def test_first_occurrence_wins(self):
        goods = [
            {"Codigo": "01.01", "Descricao": "Cavalos"},
            {"Codigo": "0101", "Descricao": "Duplicado"},
        ]
        items = build_nomenclature_index(goods, [])
        assert len(items) == 1
        assert items[0].description == "Cavalos"

    def test_same_code_different_kind_kept(self):
        goods = [{"Codigo": "0101", "Descricao": "Cavalos"}]
        services = [{"NBS": "01.01", "Descrição": "Serviço"}]
        items = build_nomenclature_index(goods, services)
        assert [(i.kind, i.normalized_code) for i in items] == [
            ("GOODS", "0101"),
            ("SERVICE", "0101"),
        ]

    def test_invalid_rows_skipped(self):
        goods = [
            {"Codigo": "--", "Descricao": "sem dígitos"},
            {"Codigo": 101, "Descricao": "código numérico"},
            {"Descricao": "sem código"},
            "junk",
            {"Codigo": "0102", "Descricao": None},
        ]
        items = build_nomenclature_index(goods, None)
        assert len(items) == 1
        assert items[0].normalized_code == "0102"
        assert items[0].description == ""
        assert items[0].normalized_description == ""

    def test_non_sequence_tables_degrade_to_empty(self, services_table):
        items = build_nomenclature_index("not a table", services_table)
        assert [i.kind for i in items] == ["SERVICE", "SERVICE"]
        assert build_nomenclature_index(42, {"x": 1}) == []

    def test_custom_schema(self):
        config = SearchConfig()
        config.schema.services = NomenclatureSchema(code_field="code", description_field="text")
        items = build_nomenclature_index([], [{"code": "1.23", "text": "Consultoria"}], config)
        assert items[0].normalized_code == "123"
        assert items[0].description == "Consultoria"

    def test_rebuild_is_identical(self, goods_table, services_table):
        first = build_nomenclature_index(goods_table, services_table)
        second = build_nomenclature_index(goods_table, services_table)
        assert first == second
