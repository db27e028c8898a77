"""
Общие фикстуры тестов.

Run with:
    pytest tests/ -v
"""

import logging

import pytest

from sql2drizzle.core.config import GeneratorOptions, ParseOptions
from sql2drizzle.generator.postgres import PostgreSQLSchemaGenerator
from sql2drizzle.parser.postgres import PostgreSQLParser


USERS_SQL = """
CREATE TABLE users (
    id BIGSERIAL NOT NULL,
    name VARCHAR(255) NOT NULL,
    CONSTRAINT pk_users PRIMARY KEY (id)
);
"""

BLOG_SQL = """
-- declared in reverse dependency order
CREATE TABLE comments (
    id SERIAL PRIMARY KEY,
    post_id INTEGER NOT NULL,
    user_id INTEGER NOT NULL,
    body TEXT NOT NULL,
    CONSTRAINT fk_comments_post FOREIGN KEY (post_id) REFERENCES posts(id) ON DELETE CASCADE,
    CONSTRAINT fk_comments_user FOREIGN KEY (user_id) REFERENCES users(id)
);

CREATE TABLE posts (
    id SERIAL PRIMARY KEY,
    user_id INTEGER NOT NULL REFERENCES users(id),
    title VARCHAR(200) NOT NULL,
    published BOOLEAN DEFAULT false,
    created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP NOT NULL
);

CREATE TABLE users (
    id SERIAL PRIMARY KEY,
    email VARCHAR(255) UNIQUE NOT NULL
);
"""


@pytest.fixture(autouse=True)
def reset_package_logger():
    """setup_logger привязывает обработчик к текущему sys.stderr; между тестами сбрасываем."""
    yield
    logger = logging.getLogger("sql2drizzle")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def parser():
    return PostgreSQLParser()


@pytest.fixture
def strict_parser():
    return PostgreSQLParser(ParseOptions(strict_mode=True))


@pytest.fixture
def generator():
    return PostgreSQLSchemaGenerator(GeneratorOptions())


@pytest.fixture
def users_sql():
    return USERS_SQL


@pytest.fixture
def blog_sql():
    return BLOG_SQL
