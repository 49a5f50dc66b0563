import json
import runpy
import sys
from pathlib import Path

import pytest
import yaml

from entityguard.schemas.models import Config, ValidationConfig
from scripts.run import main, run_check

ROOT = Path(__file__).resolve().parents[1]


@pytest.mark.skip(reason="Writes into data/output; use only for manual inspection.")
@pytest.mark.live
def test_run_check_live_with_repo_config():
    """
    @brief
    Full live run against the repository configuration.

    @details
    Loads config/config.yaml (which points at config/entities.yaml) and
    writes the report under data/output/ for manual inspection.
    """
    assert main(["--config", str(ROOT / "config" / "config.yaml")]) == 0


def test_run_check_valid_entities_writes_report(tmp_path: Path):
    """
    @brief
    Checks that a batch of valid entities produces a valid report on disk.

    @details
    Classes are described first, then descriptor files are loaded; the
    report lists them in that order.
    """
    # --- Arrange ---
    cfg = Config(
        entities=["tests.fixtures.shop:Customer", "tests.fixtures.shop:Order"],
        descriptor_files=[str(ROOT / "config" / "entities.yaml")],
    )

    # --- Act ---
    result = run_check(cfg, output_dir=tmp_path)

    # --- Assert ---
    assert result["valid"] is True
    assert result["report_path"] == tmp_path / "validation_report.json"

    report = json.loads(result["report_path"].read_text(encoding="utf-8"))
    assert report["total"] == 4
    assert [e["type_name"] for e in report["entities"]] == [
        "tests.fixtures.shop.Customer",
        "tests.fixtures.shop.Order",
        "shop.Customer",
        "shop.Order",
    ]


def test_run_check_collects_every_rejection(tmp_path: Path):
    """
    @brief
    Without fail_on_first every entity is checked and reported.
    """
    # --- Arrange ---
    cfg = Config(
        entities=[
            "tests.fixtures.shop:OpenCustomer",
            "tests.fixtures.shop:Customer",
            "tests.fixtures.shop:TaggedCustomer",
        ]
    )

    # --- Act ---
    report = run_check(cfg, output_dir=tmp_path)["report"]

    # --- Assert ---
    assert report["valid"] is False
    assert report["accepted"] == 1
    assert report["violations_by_kind"] == {"InvalidPropertyType": 1, "TypeIsOpen": 1}


def test_run_check_fail_on_first_stops_early(tmp_path: Path):
    cfg = Config(
        entities=["tests.fixtures.shop:OpenCustomer", "tests.fixtures.shop:Customer"],
        validation=ValidationConfig(fail_on_first=True),
    )

    report = run_check(cfg, output_dir=tmp_path)["report"]

    assert report["total"] == 1
    assert report["rejected"] == 1


def test_run_check_without_report_writes_nothing(tmp_path: Path):
    cfg = Config(
        entities=["tests.fixtures.shop:Customer"],
        output_dir=str(tmp_path / "out"),
        validation=ValidationConfig(write_report=False),
    )

    result = run_check(cfg)

    assert result["report_path"] is None
    assert not (tmp_path / "out").exists()


# -----------------------------
# main() exit codes
# -----------------------------
def test_main_returns_zero_for_valid_entity(tmp_path: Path):
    code = main(["--entity", "tests.fixtures.shop:Customer", "--output", str(tmp_path)])

    assert code == 0
    assert (tmp_path / "validation_report.json").exists()


def test_main_returns_one_for_rejected_entity(tmp_path: Path):
    code = main(["--entity", "tests.fixtures.shop:MutableCustomer", "--output", str(tmp_path)])

    assert code == 1
    report = json.loads((tmp_path / "validation_report.json").read_text(encoding="utf-8"))
    assert report["violations_by_kind"] == {"PropertyIsOpen": 1}


def test_main_id_position_override(tmp_path: Path):
    """
    @brief
    --id-position first flips the verdicts for id-first and id-last layouts.
    """
    # --- Act ---
    last = main(["--entity", "tests.fixtures.shop:Customer", "--output", str(tmp_path)])
    first = main(
        [
            "--entity",
            "tests.fixtures.shop:Customer",
            "--id-position",
            "first",
            "--output",
            str(tmp_path),
        ]
    )

    # --- Assert ---
    assert last == 0
    assert first == 1


def test_main_merges_config_and_cli(tmp_path: Path):
    """
    @brief
    Entities from the config file and from --entity are both checked.
    """
    # --- Arrange ---
    cfg_path = tmp_path / "config.yaml"
    cfg_path.write_text(
        yaml.safe_dump({"entities": ["tests.fixtures.shop:Customer"], "output_dir": str(tmp_path)}),
        encoding="utf-8",
    )

    # --- Act ---
    code = main(["--config", str(cfg_path), "--entity", "tests.fixtures.shop:Category"])

    # --- Assert ---
    assert code == 0
    report = json.loads((tmp_path / "validation_report.json").read_text(encoding="utf-8"))
    assert report["total"] == 2


@pytest.mark.parametrize(
    "argv",
    [
        ["--config", "does/not/exist.yaml"],
        ["--entity", "tests.fixtures.shop:NoSuchClass"],
        ["--descriptors", "does/not/exist.yaml"],
    ],
)
def test_main_controlled_failures_return_one(tmp_path: Path, argv):
    assert main([*argv, "--output", str(tmp_path)]) == 1


def test_main_unexpected_error_returns_two(tmp_path: Path, monkeypatch):
    """
    @brief
    Any non-entityguard exception is reported as a crash (exit code 2).
    """

    # --- Arrange ---
    def boom(*_args, **_kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("scripts.run.run_check", boom)

    # --- Act / Assert ---
    assert main(["--entity", "tests.fixtures.shop:Customer", "--output", str(tmp_path)]) == 2


# -----------------------------
# Foreign supertype names
# -----------------------------
@pytest.fixture()
def foreign_descriptors(tmp_path: Path) -> Path:
    """Descriptor file listing another runtime's marker and root types."""
    entry = {
        "qualified_name": "org.shop.Customer",
        "is_data": True,
        "supertypes": ["org.example.orm.Dao", "kotlin.Any"],
        "constructor": {"parameters": [{"name": "text"}, {"name": "int64"}]},
        "fields": [
            {"name": "name", "type": {"name": "text"}},
            {"name": "id", "type": {"name": "int64"}},
        ],
    }
    path = tmp_path / "foreign.yaml"
    path.write_text(yaml.safe_dump({"entities": [entry]}), encoding="utf-8")
    return path


def test_run_check_uses_configured_supertype_names(tmp_path: Path, foreign_descriptors: Path):
    """
    @brief
    validation.marker/root decide which supertype pair is accepted.

    @details
    The same descriptor file is rejected under the default Python names and
    accepted once the config names the runtime's own marker and root.
    """
    # --- Arrange ---
    default_cfg = Config(descriptor_files=[str(foreign_descriptors)])
    foreign_cfg = Config(
        descriptor_files=[str(foreign_descriptors)],
        validation=ValidationConfig(marker="org.example.orm.Dao", root="kotlin.Any"),
    )

    # --- Act ---
    default = run_check(default_cfg, output_dir=tmp_path)["report"]
    foreign = run_check(foreign_cfg, output_dir=tmp_path)["report"]

    # --- Assert ---
    assert default["violations_by_kind"] == {"InvalidSupertypes": 1}
    assert foreign["valid"] is True


def test_main_marker_and_root_overrides(tmp_path: Path, foreign_descriptors: Path):
    argv = ["--descriptors", str(foreign_descriptors), "--output", str(tmp_path)]

    assert main(argv) == 1
    assert main([*argv, "--marker", "org.example.orm.Dao", "--root", "kotlin.Any"]) == 0


def test_descriptor_without_supertypes_is_rejected(tmp_path: Path):
    entry = {
        "qualified_name": "shop.Customer",
        "is_data": True,
        "constructor": {"parameters": [{"name": "int64"}]},
        "fields": [{"name": "id", "type": {"name": "int64"}}],
    }
    path = tmp_path / "entities.yaml"
    path.write_text(yaml.safe_dump({"entities": [entry]}), encoding="utf-8")

    report = run_check(Config(descriptor_files=[str(path)]), output_dir=tmp_path)["report"]

    assert report["valid"] is False
    assert report["violations_by_kind"] == {"InvalidSupertypes": 1}


# -----------------------------
# Script entry
# -----------------------------
def test_script_runs_as_main(tmp_path: Path, monkeypatch):
    """
    @brief
    `python scripts/run.py ...` exits with the code returned by main().
    """
    # --- Arrange ---
    argv = ["run.py", "--entity", "tests.fixtures.shop:Customer", "--output", str(tmp_path)]
    monkeypatch.setattr(sys, "argv", argv)

    # --- Act / Assert ---
    with pytest.raises(SystemExit) as e:
        runpy.run_path(str(ROOT / "scripts" / "run.py"), run_name="__main__")

    assert e.value.code == 0
    assert (tmp_path / "validation_report.json").exists()
