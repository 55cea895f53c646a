"""Shared pytest fixtures for integration and unit tests."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Generator, TypedDict

import pytest

from tests.utils.http import reserve_port, wait_for_port
from tests.utils.site import populate_site

if TYPE_CHECKING:
    from _pytest.tmpdir import TempPathFactory

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SERVER_ENTRYPOINT = PROJECT_ROOT / "main.py"

class ServerProcessInfo(TypedDict):
    """Metadata describing a running server fixture instance."""

    host: str
    port: int
    directory: Path
    process: subprocess.Popen[str]
    log_file: Path


def _launch_server(
    directory: Path,
    log_file: Path,
    extra_args: list[str] | None = None,
) -> Generator[ServerProcessInfo, None, None]:
    host = "127.0.0.1"
    port = reserve_port(host)
    args = [
        sys.executable,
        str(SERVER_ENTRYPOINT),
        "--directory",
        str(directory),
        "--host",
        host,
        "--port",
        str(port),
        "--log-destination",
        str(log_file),
    ]
    if extra_args:
        args.extend(extra_args)

    with subprocess.Popen(
        args,
        cwd=PROJECT_ROOT,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    ) as process:
        try:
            wait_for_port(host, port)
        except Exception:
            process.terminate()
            stdout, stderr = process.communicate(timeout=5)
            print(f"\nServer stdout:\n{stdout}")
            print(f"\nServer stderr:\n{stderr}")
            raise

        yield {
            "host": host,
            "port": port,
            "directory": directory,
            "process": process,
            "log_file": log_file,
        }

        process.terminate()
        try:
            process.wait(timeout=10)
        except subprocess.TimeoutExpired:
            process.kill()


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Expose the repository root path to tests."""

    return PROJECT_ROOT


@pytest.fixture(name="site_dir")
def _site_dir(tmp_path: Path) -> Path:
    """Provide a served directory populated with the standard documents."""

    site = tmp_path / "site"
    site.mkdir()
    return populate_site(site)


@pytest.fixture(name="server_process")
def _server_process(
    tmp_path_factory: "TempPathFactory",
) -> Generator[ServerProcessInfo, None, None]:
    """Launch the HTTP server in a background process for integration tests."""

    directory = populate_site(tmp_path_factory.mktemp("site"))
    log_file = tmp_path_factory.mktemp("logs") / "server.log"
    yield from _launch_server(directory, log_file)


@pytest.fixture(name="lossy_server_process")
def _lossy_server_process(
    tmp_path_factory: "TempPathFactory",
) -> Generator[ServerProcessInfo, None, None]:
    """Launch the server with lossy UTF-8 response bodies enabled."""

    directory = populate_site(tmp_path_factory.mktemp("site-lossy"))
    log_file = tmp_path_factory.mktemp("logs-lossy") / "server.log"
    yield from _launch_server(directory, log_file, ["--lossy-bodies"])


@pytest.fixture(name="limited_server_process")
def _limited_server_process(
    tmp_path_factory: "TempPathFactory",
) -> Generator[ServerProcessInfo, None, None]:
    """Launch the server admitting a single connection at a time."""

    directory = populate_site(tmp_path_factory.mktemp("site-limited"))
    log_file = tmp_path_factory.mktemp("logs-limited") / "server.log"
    yield from _launch_server(directory, log_file, ["--max-connections", "1"])


@pytest.fixture(name="short_grace_server_process")
def _short_grace_server_process(
    tmp_path_factory: "TempPathFactory",
) -> Generator[ServerProcessInfo, None, None]:
    """Launch a single-slot server that gives workers one second to finish."""

    directory = populate_site(tmp_path_factory.mktemp("site-grace"))
    log_file = tmp_path_factory.mktemp("logs-grace") / "server.log"
    yield from _launch_server(
        directory,
        log_file,
        ["--max-connections", "1", "--shutdown-grace-seconds", "1"],
    )
