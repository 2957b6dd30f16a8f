"""Tests for the mlagent command line."""

import tempfile
from pathlib import Path

import yaml
from click.testing import CliRunner

from mlagent.cli import main
from mlagent.registry.local_registry import LocalRegistry

PACKAGE = "org.example.mlres"


def _install(app_root: str, write_manifest) -> None:
    json_dir = Path(app_root) / PACKAGE / "res" / "global" / "ml-models"
    write_manifest(
        json_dir,
        "model_description.json",
        [{"name": "m1", "model": "/a/m1.bin", "activate": "true"}, {"name": "m2"}],
    )
    write_manifest(json_dir, "pipeline_description.json", {"name": "p1", "description": "a ! b"})


def test_ingest_registers_manifests(write_manifest):
    with tempfile.TemporaryDirectory() as tmpdir:
        _install(tmpdir, write_manifest)
        registry_dir = str(Path(tmpdir) / "registry")

        result = CliRunner().invoke(
            main,
            ["-r", registry_dir, "ingest", PACKAGE, "--res-type", "ml-models", "--app-root", tmpdir],
        )

        assert result.exit_code == 0, result.output
        reg = LocalRegistry(registry_dir)
        assert [r.name for r in reg.model_list()] == ["m1"]
        assert reg.model_get_active("m1").version == 1
        assert reg.pipeline_get("p1").description == "a ! b"


def test_replay_events(write_manifest):
    with tempfile.TemporaryDirectory() as tmpdir:
        _install(tmpdir, write_manifest)
        registry_dir = str(Path(tmpdir) / "registry")
        config_path = Path(tmpdir) / "mlagent.yaml"
        config_path.write_text(
            yaml.dump(
                {
                    "app_root": tmpdir,
                    "registry_dir": registry_dir,
                    "packages": {PACKAGE: {"res_type": "ml-models", "res_version": "1.0"}},
                }
            )
        )
        events_path = Path(tmpdir) / "events.yaml"
        events_path.write_text(
            yaml.dump(
                [
                    {"type": "rpk", "package": PACKAGE, "event": "res_copy", "state": "started"},
                    {"type": "rpk", "package": PACKAGE, "event": "install", "state": "completed"},
                    {"type": "tpk", "package": "other", "event": "install", "state": "completed"},
                    {"type": "rpk", "package": PACKAGE, "event": "bogus", "state": "started"},
                ]
            )
        )

        result = CliRunner().invoke(main, ["-c", str(config_path), "replay", str(events_path)])

        assert result.exit_code == 0, result.output
        assert "Replayed 3 of 4 events" in result.output
        assert len(LocalRegistry(registry_dir).model_list()) == 1


def test_registry_listing():
    with tempfile.TemporaryDirectory() as tmpdir:
        reg = LocalRegistry(tmpdir)
        reg.model_add("mobilenet", "/m.tflite", True, "classifier", "")
        reg.pipeline_set("cam", "v4l2src ! fakesink")
        reg.resource_add("labels", "/labels.txt", "", "")

        runner = CliRunner()
        models = runner.invoke(main, ["-r", tmpdir, "registry", "models"])
        pipelines = runner.invoke(main, ["-r", tmpdir, "registry", "pipelines"])
        resources = runner.invoke(main, ["-r", tmpdir, "registry", "resources"])

        assert models.exit_code == 0
        assert "mobilenet" in models.output
        assert "cam" in pipelines.output
        assert "labels" in resources.output


def test_empty_registry_listing():
    with tempfile.TemporaryDirectory() as tmpdir:
        result = CliRunner().invoke(main, ["-r", tmpdir, "registry", "models"])
        assert result.exit_code == 0
        assert "No models registered" in result.output


def test_bad_config_exits_with_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "bad.yaml"
        config_path.write_text("log_level: chatty\n")

        result = CliRunner().invoke(main, ["-c", str(config_path), "registry", "models"])

        assert result.exit_code != 0
        assert "Invalid log_level" in result.output
