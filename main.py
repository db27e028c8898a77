"""
main.py

Точка входа конвертера SQL DDL → Drizzle ORM без установки пакета.

Запуск:
    python main.py schema.sql
    python main.py schema.sql -o src/db/schema.ts --table-case pascal
    python main.py schema.sql --config sql2drizzle.yaml --strict
"""

from sql2drizzle.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
