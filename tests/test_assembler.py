from __future__ import annotations

from dbml_agent.declarations import (
    ClassDeclaration,
    EnumDeclaration,
    EnumMember,
    PropertyDeclaration,
    ann,
    expr_arg,
    fn_arg,
    options_arg,
)
from dbml_agent.extractors.metadata import assemble_schema, extract_inheritance, resolve_table_name

STATUS = EnumDeclaration(name="Status", members=[EnumMember(name="ACTIVE", initializer="'active'"), EnumMember(name="BANNED")])


def user_class() -> ClassDeclaration:
    return ClassDeclaration(
        name="User",
        annotations=[ann("Entity", "users")],
        properties=[
            PropertyDeclaration(name="id", type="number", annotations=[ann("PrimaryGeneratedColumn")]),
            PropertyDeclaration(name="status", type="Status", annotations=[ann("Column", options_arg(enum=expr_arg("Status")))]),
            PropertyDeclaration(name="posts", type="Post[]", annotations=[ann("OneToMany", fn_arg("Post"), fn_arg("post.author", "post"))]),
        ],
    )


def post_class() -> ClassDeclaration:
    return ClassDeclaration(
        name="Post",
        annotations=[ann("Entity", {"name": "posts", "schema": "blog"})],
        properties=[
            PropertyDeclaration(name="id", type="string", annotations=[ann("PrimaryGeneratedColumn", "uuid")]),
            PropertyDeclaration(name="status", type="Status", annotations=[ann("Column", options_arg(enum=expr_arg("Status")))]),
            PropertyDeclaration(name="author", type="User", annotations=[ann("ManyToOne", fn_arg("User"))]),
            PropertyDeclaration(
                name="tags",
                type="Tag[]",
                annotations=[ann("ManyToMany", fn_arg("Tag")), ann("JoinTable")],
            ),
        ],
    )


def tag_class() -> ClassDeclaration:
    return ClassDeclaration(
        name="Tag",
        annotations=[ann("Entity")],
        properties=[PropertyDeclaration(name="id", type="number", annotations=[ann("PrimaryGeneratedColumn")])],
    )


def test_table_name_shapes() -> None:
    assert resolve_table_name(ClassDeclaration(name="BlogPost", annotations=[ann("Entity")])) == ("blog_post", None)
    assert resolve_table_name(ClassDeclaration(name="X", annotations=[ann("Entity", "xs")])) == ("xs", None)
    assert resolve_table_name(
        ClassDeclaration(name="X", annotations=[ann("Entity", {"name": "xs", "schema": "app"})])
    ) == ("xs", "app")
    assert resolve_table_name(
        ClassDeclaration(name="X", annotations=[ann("Entity", "xs", {"schema": "app"})])
    ) == ("xs", "app")


def test_assemble_resolves_forward_and_backward_references() -> None:
    schema = assemble_schema([post_class(), user_class(), tag_class()], [STATUS])

    assert [e.table_name for e in schema.entities] == ["posts", "users", "tag"]
    post = schema.entity("Post")
    user = schema.entity("User")
    assert post is not None and user is not None
    assert post.relations[0].target == "users"
    assert post.relations[1].target == "tag"
    assert user.relations[0].target == "posts"


def test_assemble_deduplicates_enums() -> None:
    schema = assemble_schema([user_class(), post_class()], [STATUS])
    assert [(e.name, e.values) for e in schema.enums] == [("status", ["active", "BANNED"])]


def test_enum_registry_is_fresh_per_call() -> None:
    first = assemble_schema([user_class()], [STATUS])
    second = assemble_schema([tag_class()], [STATUS])
    assert len(first.enums) == 1
    assert second.enums == []


def test_join_tables_follow_referenced_column_types() -> None:
    schema = assemble_schema([post_class(), user_class(), tag_class()], [STATUS])
    assert len(schema.join_tables) == 1
    jt = schema.join_tables[0]
    assert jt.name == "posts_tag"
    assert jt.schema == "blog"
    assert [(c.column_name, c.type) for c in jt.columns] == [("posts_id", "uuid"), ("tag_id", "integer")]
    assert [i.columns for i in jt.indexes] == [["posts_id"], ["tag_id"]]


def test_class_doc_becomes_note() -> None:
    decl = tag_class()
    decl.doc = "Free-form labels"
    schema = assemble_schema([decl])
    assert schema.entities[0].note == "Free-form labels"


def test_inheritance() -> None:
    parent = ClassDeclaration(
        name="Content",
        annotations=[ann("Entity"), ann("TableInheritance", {"column": {"name": "type", "type": "varchar"}, "pattern": "STI"})],
    )
    inheritance = extract_inheritance(parent)
    assert inheritance is not None
    assert inheritance.pattern == "single-table"
    assert inheritance.discriminator_column == "type"

    child = ClassDeclaration(name="Photo", annotations=[ann("ChildEntity", "photo")])
    inheritance = extract_inheritance(child)
    assert inheritance is not None
    assert inheritance.discriminator_value == "photo"

    assert extract_inheritance(tag_class()) is None
