from sqlalchemy import create_engine, inspect

from workhub.db.migrate import run_migrations


def test_baseline_migration_creates_tables(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"

    run_migrations(url)
    # Second run is a no-op at head
    run_migrations(url)

    engine = create_engine(url)
    try:
        inspector = inspect(engine)
        tables = set(inspector.get_table_names())
        assert {"employers", "students", "jobs", "subscription_payments", "notifications", "applications"} <= tables
        assert "alembic_version" in tables

        indexes = {ix["name"]: ix for ix in inspector.get_indexes("subscription_payments")}
        assert indexes["uq_subscription_payments_one_pending"]["unique"]
        assert "boosts_remaining" in {c["name"] for c in inspector.get_columns("employers")}

        uniques = {uc["name"] for uc in inspector.get_unique_constraints("applications")}
        assert "uq_applications_job_student" in uniques
    finally:
        engine.dispose()
