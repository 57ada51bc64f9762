from __future__ import annotations

import pytest

from dbml_agent.declarations import Annotation, ClassDeclaration, PropertyDeclaration, ann, array_arg, options_arg
from dbml_agent.extractors.constraints import (
    check_from_annotation,
    extract_constraints,
    index_from_annotation,
    index_from_property_annotation,
    unique_from_annotation,
)


@pytest.mark.parametrize(
    ("annotation", "name", "unique"),
    [
        (ann("Index", ["a", "b"]), None, False),
        (ann("Index", "idx_name", ["a", "b"]), "idx_name", False),
        (ann("Index", {"columns": ["a", "b"], "unique": True}), None, True),
    ],
)
def test_index_shapes_converge(annotation: Annotation, name: str | None, unique: bool) -> None:
    index = index_from_annotation(annotation)
    assert index is not None
    assert index.columns == ["a", "b"]
    assert index.name == name
    assert index.is_unique is unique


def test_index_options() -> None:
    index = index_from_annotation(
        ann("Index", "idx_geo", ["location"], {"spatial": True, "where": "deleted_at IS NULL", "using": "GIST"})
    )
    assert index is not None
    assert index.is_spatial
    assert index.where == "deleted_at IS NULL"
    assert index.method == "gist"


def test_unknown_index_method_is_ignored() -> None:
    index = index_from_annotation(Annotation(name="Index", arguments=[array_arg("a"), options_arg(using="brin")]))
    assert index is not None
    assert index.method is None


def test_index_without_columns_is_dropped() -> None:
    assert index_from_annotation(ann("Index")) is None
    assert index_from_annotation(ann("Index", "only_name")) is None
    assert index_from_annotation(ann("Index", {"unique": True})) is None


def test_property_index_defaults_to_property_column() -> None:
    index = index_from_property_annotation(ann("Index", {"unique": True}), "emailAddress")
    assert index is not None
    assert index.columns == ["email_address"]
    assert index.is_unique


def test_unique_and_check() -> None:
    unique = unique_from_annotation(ann("Unique", "uq_user_email", ["user_id", "email"]))
    assert unique is not None
    assert unique.name == "uq_user_email"
    assert unique.columns == ["user_id", "email"]
    assert unique_from_annotation(ann("Unique")) is None

    check = check_from_annotation(ann("Check", "age >= 0", "chk_age"))
    assert check is not None
    assert check.expression == "age >= 0"
    assert check.name == "chk_age"
    assert check_from_annotation(ann("Check")) is None


def test_extract_constraints_order() -> None:
    decl = ClassDeclaration(
        name="User",
        annotations=[
            ann("Entity"),
            ann("Index", ["last_name", "first_name"]),
            ann("Unique", ["email"]),
            ann("Check", "age >= 0"),
        ],
        properties=[PropertyDeclaration(name="email", type="string", annotations=[ann("Column"), ann("Index")])],
    )
    constraints = extract_constraints(decl)
    assert [i.columns for i in constraints.indexes] == [["last_name", "first_name"], ["email"]]
    assert [u.columns for u in constraints.uniques] == [["email"]]
    assert [c.expression for c in constraints.checks] == ["age >= 0"]
