# init_db.py (in backend folder)

import argparse

from sqlalchemy import inspect

from skillsync.infra.postgres import Base, engine, init_db, test_connection


def reset_db(drop: bool = False):
    """Create all tables, dropping existing ones first when asked"""
    if not test_connection():
        raise SystemExit("Cannot reach the database, check DATABASE_URL")

    if drop:
        print("Dropping all tables...")
        Base.metadata.drop_all(bind=engine)

    init_db()
    print("Database ready")


def describe_schema():
    inspector = inspect(engine)
    for table in sorted(inspector.get_table_names()):
        print(f"\n{table}:")
        for col in inspector.get_columns(table):
            nullable = "" if col["nullable"] else " NOT NULL"
            print(f"  - {col['name']}: {col['type']}{nullable}")
        for check in inspector.get_check_constraints(table):
            print(f"  * CHECK {check['name']}: {check['sqltext']}")
        for fk in inspector.get_foreign_keys(table):
            on_delete = (fk.get("options") or {}).get("ondelete", "NO ACTION")
            print(f"  * FK {fk['constrained_columns']} -> {fk['referred_table']} ON DELETE {on_delete}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the SkillSync tables")
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    args = parser.parse_args()

    reset_db(drop=args.drop)
    describe_schema()
