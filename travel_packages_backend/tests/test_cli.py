import json

from sqlalchemy import func, select

from tests.conftest import make_package
from travel_packages.cli import build_parser, main
from travel_packages.db.models import Package
from travel_packages.db.session import Database


def test_init_db_and_load_packages(tmp_path, monkeypatch):
    db_file = tmp_path / "packages.db"
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    monkeypatch.delenv("APP_ENV", raising=False)

    packages_file = tmp_path / "packages.json"
    documents = [
        make_package(name="Bali Escape").model_dump(mode="json", by_alias=True),
        make_package(destination="Paris", name="Paris Weekend").model_dump(mode="json", by_alias=True),
    ]
    packages_file.write_text(json.dumps(documents))

    assert main(["init-db"]) == 0
    assert main(["load-packages", str(packages_file)]) == 0

    database = Database(f"sqlite:///{db_file}")
    try:
        with database.session() as db:
            assert db.execute(select(func.count()).select_from(Package)).scalar_one() == 2
    finally:
        database.close()


def test_load_packages_rejects_invalid_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'packages.db'}")
    monkeypatch.delenv("APP_ENV", raising=False)
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps([{"name": "No flight or hotel"}]))

    assert main(["load-packages", str(bad)]) == 1
    assert main(["load-packages", str(tmp_path / "missing.json")]) == 1


def test_parser_knows_all_commands():
    parser = build_parser()

    for command in (["serve"], ["init-db"], ["load-packages", "x.json"], ["purge-sessions"]):
        assert parser.parse_args(command).command == command[0]
