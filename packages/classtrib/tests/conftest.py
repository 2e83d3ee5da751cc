"""Shared reference tables for the classtrib tests."""

import pytest

from classtrib.normalize import normalize_code, normalize_text
from classtrib.types import NomenclatureItem


def make_item(code: str, description: str = "", kind: str = "GOODS") -> NomenclatureItem:
    return NomenclatureItem(
        kind=kind,
        original_code=code,
        normalized_code=normalize_code(code),
        description=description,
        normalized_description=normalize_text(description),
    )


def make_classification(code: str, description: str, **extra: str) -> dict:
    record = {"cClassTrib": code, "Descrição cClassTrib": description}
    record.update(extra)
    return record


@pytest.fixture
def goods_table() -> dict:
    return {
        "Nomenclaturas": [
            {"Codigo": "01.01", "Descricao": "Cavalos, asininos e muares, vivos."},
            {"Codigo": "0101.21.00", "Descricao": "Cavalos reprodutores de raça pura"},
            {"Codigo": "0102.21.10", "Descricao": "Bovinos reprodutores prenhes"},
            {"Codigo": "8703.21.00", "Descricao": "Veículos automóveis para transporte de pessoas"},
        ]
    }


@pytest.fixture
def services_table() -> list:
    return [
        {"NBS": "1.0101.11.00", "Descrição": "Serviços de construção de edificações residenciais"},
        {"NBS": "1.0901.10.00", "Descrição": "Serviços de transporte rodoviário de passageiros"},
    ]


@pytest.fixture
def classification_table() -> list:
    return [
        make_classification(
            "000001",
            "Situações tributadas integralmente pelo IBS e CBS",
            **{"CST-IBS/CBS": "000", "Descrição CST-IBS/CBS": "Tributação integral"},
        ),
        make_classification(
            "200003",
            "Cavalos e bovinos reprodutores de raça pura",
            **{
                "CST-IBS/CBS": "200",
                "Descrição CST-IBS/CBS": "Alíquota reduzida",
                "pRedIBS": "60",
                "pRedCBS": "60",
                "LC 214/25": "Art. 138",
                "Nome cClassTrib": "Redução de 60% reprodutores",
                "Tipo de Alíquota": "Reduzida",
            },
        ),
        make_classification(
            "200020",
            "Serviços de transporte coletivo de passageiros",
            **{"CST-IBS/CBS": "200", "pRedIBS": "60", "pRedCBS": "0"},
        ),
    ]
