"""
End-to-end tests for CLI commands against a mock store.
"""

import json
import pytest

from envkit.cli.parser import CLI
from tests.fixtures.store import make_store_entry


@pytest.mark.integration
class TestEnvCommandRun:
    def test_env_shell_output(self, mock_project, isolated_home, capsys):
        result = CLI().run(["--project-root", str(mock_project), "env"])

        assert result == 0
        out = capsys.readouterr().out
        assert "export RUSTC_VERSION=nightly-2024-01-01" in out
        assert "export LD_LIBRARY_PATH=" in out
        assert out.rstrip().splitlines()[-1].endswith(
            "toolchains/nightly-2024-01-01-x86_64-unknown-linux-gnu/bin"
        )

    def test_env_json_to_file(self, mock_project, isolated_home, tmp_path):
        output = tmp_path / "env.json"

        result = CLI().run(
            [
                "--project-root",
                str(mock_project),
                "env",
                "--format",
                "json",
                "--output",
                str(output),
            ]
        )

        assert result == 0
        data = json.loads(output.read_text())
        assert data["RUSTC_VERSION"] == "nightly-2024-01-01"
        assert data["RUSTFLAGS"] == ""
        assert "shellHook" in data

    def test_rustup_home_from_process_environment(
        self, mock_project, isolated_home, monkeypatch, capsys
    ):
        monkeypatch.setenv("RUSTUP_HOME", "/opt/rustup")

        result = CLI().run(["--project-root", str(mock_project), "hook"])

        assert result == 0
        out = capsys.readouterr().out
        assert "/opt/rustup/toolchains/nightly-2024-01-01-" in out
        assert f"{isolated_home}/.cargo/bin" in out

    def test_missing_config_fails(self, tmp_path, capsys):
        result = CLI().run(["--project-root", str(tmp_path), "env"])

        assert result == 1
        assert "Configuration file not found" in capsys.readouterr().err

    def test_resolution_failure(self, mock_project, capsys):
        config = mock_project / "envkit.yaml"
        config.write_text(config.read_text().replace("- libGL", "- wayland"))

        result = CLI().run(["--project-root", str(mock_project), "env"])

        captured = capsys.readouterr()
        assert result == 1
        assert "Cannot resolve package: wayland" in captured.err
        assert "export" not in captured.out


@pytest.mark.integration
class TestDoctorCommandRun:
    def test_all_packages_present(self, mock_project, isolated_home, capsys):
        result = CLI().run(["--project-root", str(mock_project), "doctor"])

        out = capsys.readouterr().out
        assert result == 0
        assert "[OK]   Toolchain descriptor" in out
        assert "[WARN] Rust toolchain" in out
        assert "rustup toolchain install nightly-2024-01-01" in out

    def test_strict_fails_on_missing_toolchain(
        self, mock_project, isolated_home, capsys
    ):
        result = CLI().run(["--project-root", str(mock_project), "doctor", "--strict"])

        assert result == 1
        assert "[FAIL] Rust toolchain" in capsys.readouterr().out

    def test_installed_toolchain(self, mock_project, isolated_home, capsys):
        bin_dir = (
            isolated_home
            / ".rustup"
            / "toolchains"
            / "nightly-2024-01-01-x86_64-unknown-linux-gnu"
            / "bin"
        )
        bin_dir.mkdir(parents=True)

        result = CLI().run(["--project-root", str(mock_project), "doctor", "--strict"])

        assert result == 0
        assert f"[OK]   Rust toolchain: {bin_dir}" in capsys.readouterr().out

    def test_missing_package_directory(self, mock_project, mock_store, capsys):
        headers = next(
            p for p in mock_store.iterdir() if p.name.endswith("-vulkan-headers-1.3.290.0")
        )
        (headers / "include").rmdir()

        result = CLI().run(["--project-root", str(mock_project), "doctor"])

        assert result == 1
        assert "has no include/ directory" in capsys.readouterr().out

    def test_broken_descriptor(self, mock_project, capsys):
        (mock_project / "rust-toolchain.toml").write_text("[toolchain\n")

        result = CLI().run(["--project-root", str(mock_project), "doctor"])

        out = capsys.readouterr().out
        assert result == 1
        assert "[FAIL] Toolchain descriptor" in out
        assert "Rust toolchain" not in out

    def test_tool_and_build_input_directories(
        self, mock_project, mock_store, isolated_home, capsys
    ):
        make_store_entry(mock_store, "cmake", "3.29.6", subdirs=("bin",))
        make_store_entry(mock_store, "openssl", "3.0.14", output="dev")
        with open(mock_project / "envkit.yaml", "a") as f:
            f.write("tools: [cmake]\nbuild_inputs: [openssl.dev]\n")

        result = CLI().run(["--project-root", str(mock_project), "doctor"])

        out = capsys.readouterr().out
        assert result == 1
        assert "[OK]   Package cmake" in out
        assert "has no lib/pkgconfig/ directory" in out
