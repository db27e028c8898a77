"""
PostgreSQLSchemaGenerator tests: exact output, references, naming options.

Run with:
    pytest tests/test_generator.py -v
"""

import pytest

from sql2drizzle.core.config import GeneratorOptions
from sql2drizzle.core.exceptions import GenerationError
from sql2drizzle.core.models import Column, ForeignKey, Table
from sql2drizzle.generator.postgres import PostgreSQLSchemaGenerator
from sql2drizzle.graph.sorter import sort_tables
from sql2drizzle.utils.naming import NamingCase


USERS_TS = """import { bigserial, pgTable, varchar } from 'drizzle-orm/pg-core';

// users table
export const users = pgTable('users', {
  id: bigserial('id', { mode: 'number' }).notNull().primaryKey(),
  name: varchar('name', { length: 255 }).notNull()
});
"""

USERS = Table(name="users", columns=(Column("id", "INTEGER", not_null=True),), primary_key=("id",))


def _generate(tables, **options):
    return PostgreSQLSchemaGenerator(GeneratorOptions(**options)).generate_schema(tables).content


class TestSchemaOutput:

    def test_single_table_exact_output(self, parser, generator, users_sql):
        tables = parser.parse_sql(users_sql).tables
        assert generator.generate_schema(tables).content == USERS_TS

    def test_related_tables(self, parser, generator, blog_sql):
        schema = generator.generate_schema(sort_tables(parser.parse_sql(blog_sql).tables))
        content = schema.content

        assert schema.table_names() == ("users", "posts", "comments")
        assert content.startswith(
            "import { boolean, integer, pgTable, serial, text, timestamp, varchar } from 'drizzle-orm/pg-core';\n\n"
        )
        assert content.index("export const users") < content.index("export const posts")
        assert content.index("export const posts") < content.index("export const comments")

        assert "  id: serial('id').primaryKey()," in content
        assert "  email: varchar('email', { length: 255 }).notNull().unique()\n" in content
        assert "  userId: integer('user_id').notNull().references(() => users.id)," in content
        assert "  published: boolean('published').default(false)," in content
        assert (
            "  createdAt: timestamp('created_at', { withTimezone: true }).notNull().defaultNow()\n" in content
        )
        assert (
            "  postId: integer('post_id').notNull().references(() => posts.id, { onDelete: 'cascade' }),"
            in content
        )

    def test_tables_are_separated_by_blank_line(self, parser, generator, blog_sql):
        content = generator.generate_schema(sort_tables(parser.parse_sql(blog_sql).tables)).content
        assert "});\n\n// posts table\n" in content
        assert content.endswith("});\n")

    def test_empty_schema(self, generator):
        assert generator.generate_schema([]).content == "import { pgTable } from 'drizzle-orm/pg-core';\n\n"

    def test_output_is_deterministic(self, parser, blog_sql):
        tables = sort_tables(parser.parse_sql(blog_sql).tables)
        assert _generate(tables) == _generate(tables)

    def test_generate_returns_content(self, generator):
        assert generator.generate([USERS]) == generator.generate_schema([USERS]).content


class TestReferences:

    def test_self_reference(self):
        employees = Table(
            name="employees",
            columns=(Column("id", "INTEGER"), Column("manager_id", "INTEGER")),
            primary_key=("id",),
            foreign_keys=(ForeignKey("employees_manager_id_fkey", ("manager_id",), "employees", ("id",)),),
        )
        content = _generate([employees])

        assert content.startswith("import { AnyPgColumn, integer, pgTable }")
        assert "managerId: integer('manager_id').references((): AnyPgColumn => employees.id)" in content

    def test_actions(self):
        posts = Table(
            name="posts",
            columns=(Column("user_id", "INTEGER"),),
            foreign_keys=(ForeignKey("fk", ("user_id",), "users", ("id",), on_delete="SET NULL", on_update="CASCADE"),),
        )
        content = _generate([USERS, posts])
        assert ".references(() => users.id, { onDelete: 'set null', onUpdate: 'cascade' })" in content

    def test_reference_without_columns_uses_primary_key(self):
        posts = Table(
            name="posts",
            columns=(Column("user_id", "INTEGER"),),
            foreign_keys=(ForeignKey("fk", ("user_id",), "users"),),
        )
        assert "integer('user_id').references(() => users.id)" in _generate([USERS, posts])
        assert ".references(" not in _generate([posts])

    def test_multi_column_foreign_key_is_not_rendered(self):
        lines = Table(
            name="lines",
            columns=(Column("order_id", "INTEGER"), Column("line_no", "INTEGER")),
            foreign_keys=(ForeignKey("fk", ("order_id", "line_no"), "orders", ("id", "no")),),
        )
        assert ".references(" not in _generate([lines])

    def test_first_matching_foreign_key_wins(self):
        posts = Table(
            name="posts",
            columns=(Column("user_id", "INTEGER"),),
            foreign_keys=(
                ForeignKey("fk_users", ("user_id",), "users", ("id",)),
                ForeignKey("fk_admins", ("user_id",), "admins", ("id",)),
            ),
        )
        content = _generate([posts])
        assert "users.id" in content
        assert "admins.id" not in content

    def test_prefix_applies_to_reference_target(self):
        posts = Table(
            name="posts",
            columns=(Column("user_id", "INTEGER"),),
            foreign_keys=(ForeignKey("fk", ("user_id",), "users", ("id",)),),
        )
        content = _generate([USERS, posts], identifier_prefix="tbl", table_name_case=NamingCase.PASCAL)
        assert "export const tblUsers = pgTable('users', {" in content
        assert ".references(() => tblUsers.id)" in content

    def test_reference_to_non_identifier_key(self):
        parents = Table(name="parents", columns=(Column("parent_id", "INTEGER"),), primary_key=("parent_id",))
        children = Table(
            name="children",
            columns=(Column("parent_id", "INTEGER"),),
            foreign_keys=(ForeignKey("fk", ("parent_id",), "parents", ("parent_id",)),),
        )
        content = _generate([parents, children], column_name_case=NamingCase.KEBAB)
        assert "'parent-id': integer('parent_id').references(() => parents['parent-id'])" in content


class TestNamingOptions:

    PROFILES = Table(
        name="user_profiles",
        columns=(
            Column("id", "SERIAL", auto_increment=True),
            Column("first_name", "VARCHAR", length=50, not_null=True),
        ),
        primary_key=("id",),
    )

    def test_snake_and_pascal_differ_only_in_identifiers(self):
        snake = _generate([self.PROFILES], table_name_case=NamingCase.SNAKE, column_name_case=NamingCase.SNAKE)
        pascal = _generate([self.PROFILES], table_name_case=NamingCase.PASCAL, column_name_case=NamingCase.PASCAL)

        assert "export const user_profiles = pgTable('user_profiles', {" in snake
        assert "  first_name: varchar('first_name', { length: 50 }).notNull()" in snake
        assert "export const UserProfiles = pgTable('user_profiles', {" in pascal
        assert "  FirstName: varchar('first_name', { length: 50 }).notNull()" in pascal

        normalized = (
            pascal.replace("UserProfiles", "user_profiles")
            .replace("FirstName:", "first_name:")
            .replace("Id:", "id:")
        )
        assert normalized == snake

    def test_kebab_table_name_is_rejected(self):
        with pytest.raises(GenerationError) as exc_info:
            _generate([self.PROFILES], table_name_case=NamingCase.KEBAB)
        assert exc_info.value.details["table"] == "user_profiles"

    def test_reserved_word_table_name_is_rejected(self):
        package = Table(name="package", columns=(Column("id", "INTEGER"),))
        with pytest.raises(GenerationError) as exc_info:
            _generate([package])
        assert exc_info.value.details["table"] == "package"

    def test_reserved_word_table_name_with_prefix(self):
        package = Table(name="package", columns=(Column("id", "INTEGER"),))
        assert "export const tblPackage = pgTable('package', {" in _generate(
            [package], identifier_prefix="tbl", table_name_case=NamingCase.PASCAL
        )

    def test_reserved_word_column_key_is_quoted(self):
        settings = Table(name="settings", columns=(Column("default", "BOOLEAN"),))
        assert "  'default': boolean('default')\n" in _generate([settings])

    def test_export_colliding_with_import(self):
        table = Table(name="integer", columns=(Column("id", "INTEGER"),))
        with pytest.raises(GenerationError) as exc_info:
            _generate([table])
        assert "collides with an import" in exc_info.value.message

    def test_two_tables_with_one_export_name(self):
        first = Table(name="user_profiles", columns=(Column("id", "INTEGER"),))
        second = Table(name="userProfiles", columns=(Column("id", "INTEGER"),))
        with pytest.raises(GenerationError) as exc_info:
            _generate([first, second])
        assert exc_info.value.details["table"] == "userProfiles"

    def test_kebab_column_key_is_quoted(self):
        content = _generate([self.PROFILES], column_name_case=NamingCase.KEBAB)
        assert "  'first-name': varchar('first_name', { length: 50 }).notNull()" in content

    def test_colliding_property_keys(self):
        table = Table(name="t", columns=(Column("first_name", "TEXT"), Column("firstName", "TEXT")))
        with pytest.raises(GenerationError) as exc_info:
            _generate([table])
        assert exc_info.value.details["column"] == "firstName"

    def test_indent_width(self):
        content = _generate([self.PROFILES], indent_width=4)
        assert "\n    id: serial('id').primaryKey(),\n" in content


class TestComments:

    ACCOUNTS = Table(
        name="accounts",
        columns=(
            Column("id", "INTEGER"),
            Column("email", "TEXT", comment="Login address"),
        ),
    )

    def test_column_comment(self):
        content = _generate([self.ACCOUNTS])
        assert "  id: integer('id'),\n  // Login address\n  email: text('email')\n" in content

    def test_comments_disabled(self):
        content = _generate([self.ACCOUNTS], include_comments=False)
        assert "//" not in content.split("\n", 1)[1]
        assert "\n\nexport const accounts = pgTable('accounts', {\n" in content
