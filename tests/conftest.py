# tests/conftest.py
# Pytest configuration w/ isolation fixtures for deterministic test runs

import json
from pathlib import Path
from typing import Any, Dict

import pytest


@pytest.fixture(autouse=True)
def isolate_config(tmp_path, monkeypatch):
    # Patch Path.home() to isolated temp directory
    fake_home = tmp_path / "fake_home"
    fake_home.mkdir()

    # Create isolated .stitch directory
    stitch_dir = fake_home / ".stitch"
    stitch_dir.mkdir()

    # Create minimal config.json w/ test defaults
    config_data = {
        "data_dir": "data",
        "output_dir": "output",
        "resume_filename": "resume.json",
        "job_filename": "job.txt",
        "base_dir": str(tmp_path / ".stitch"),
        "history_filename": "history.json",
        "model": "gpt-5-mini",
        "temperature": 0.2,
        "queue_max_concurrent": 5,
        "queue_default_timeout_ms": 30000,
        "queue_logging": False,
        "ai_fallback": True,
        "environment": "development",
    }

    config_file = stitch_dir / "config.json"
    with open(config_file, "w") as f:
        json.dump(config_data, f, indent=2)

    # Patch Path.home() to return fake home
    monkeypatch.setattr(Path, "home", lambda: fake_home)

    # ! reset global settings_manager state & patch its config_path to use isolated location
    from stitch.config.settings import settings_manager

    settings_manager._settings = None
    settings_manager.config_path = fake_home / ".stitch" / "config.json"

    # ! reset the process-default request queue
    from stitch.queue.request_queue import reset_ai_queue

    reset_ai_queue()

    # ! reset output manager to NullOutputManager for test isolation
    from stitch.core.output import reset_output_manager

    reset_output_manager()

    # ! wide console so long temp paths are not wrapped in captured output
    from stitch.stitch_io.console import configure_console

    configure_console(width=400)

    yield fake_home

    from stitch.stitch_io.console import reset_console

    reset_output_manager()
    reset_console()


@pytest.fixture(autouse=True)
def block_network():
    # Block all network calls by default w/ pytest-socket
    # tests requiring network must explicitly enable w/ pytest.mark.enable_socket
    try:
        pytest_socket = pytest.importorskip("pytest_socket")
        # unix sockets stay open for the asyncio event loop self-pipe
        pytest_socket.disable_socket(allow_unix_socket=True)
    except pytest.skip.Exception:
        # Pytest-socket not installed, skip network blocking
        pass


@pytest.fixture
def mock_env_vars(monkeypatch):
    # Seed test environment w/ required API keys
    test_env = {"OPENAI_API_KEY": "test-openai-key-12345"}
    for key, value in test_env.items():
        monkeypatch.setenv(key, value)
    return test_env


@pytest.fixture
def sample_resume() -> Dict[str, Any]:
    # Resume JSON w/ newest experience first
    return {
        "summary": "Backend engineer focused on APIs.",
        "contact": {
            "name": "Jordan Lee",
            "email": "jordan@example.com",
            "phone": "555-0100",
            "location": "Austin, TX",
        },
        "skills": {
            "technical": ["Python", "Django", "jQuery"],
            "soft": ["Mentoring", "Communication"],
        },
        "experiences": [
            {
                "title": "Software Engineer",
                "company": "Acme",
                "startDate": "2021-01",
                "endDate": "Present",
                "achievements": [
                    "Cut API latency by 40%",
                    "Led migration to PostgreSQL",
                ],
            },
            {
                "title": "Junior Developer",
                "company": "Initech",
                "startDate": "2018-06",
                "endDate": "2020-12",
                "achievements": ["Built internal dashboards"],
            },
        ],
        "education": [
            {
                "degree": "BS",
                "field": "Computer Science",
                "institution": "State University",
                "graduationDate": "2018",
            }
        ],
        "certifications": ["AWS Certified Developer"],
        "projects": [
            {
                "name": "queue-lab",
                "description": "Async job runner",
                "technologies": ["Python", "asyncio"],
            }
        ],
    }


@pytest.fixture
def sample_job_description() -> str:
    # Job posting text for scoring
    return (
        "Senior Python engineer. Must know Django, PostgreSQL, Docker and Kubernetes. "
        "Experience with REST APIs and mentoring."
    )


@pytest.fixture
def resume_file(tmp_path, sample_resume) -> Path:
    path = tmp_path / "resume.json"
    path.write_text(json.dumps(sample_resume, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def job_file(tmp_path, sample_job_description) -> Path:
    path = tmp_path / "job.txt"
    path.write_text(sample_job_description, encoding="utf-8")
    return path


@pytest.fixture
def scripted_client():
    # factory for a deterministic AI client keyed by substrings of the user request;
    # runs the real BaseClient template method w/o touching the network
    from stitch.ai.clients.base import BaseClient
    from stitch.ai.types import APICallContext

    class ScriptedClient(BaseClient):
        provider_name = "scripted"

        def __init__(self, responses: Dict[str, str], default: str) -> None:
            self.responses = responses
            self.default = default
            self.prompts: list[str] = []

        def make_call(self, prompt: str, model: str) -> APICallContext:
            self.prompts.append(prompt)
            request = prompt.rsplit("User request:\n", 1)[-1]
            text = self.default
            for key, value in self.responses.items():
                if key in request:
                    text = value
                    break
            if text.startswith("!raise "):
                raise RuntimeError(text[len("!raise ") :])
            return APICallContext(raw_text=text, provider_name="scripted", model=model)

    def factory(
        responses: Dict[str, str] | None = None, default: str = '{"operations": []}'
    ) -> ScriptedClient:
        return ScriptedClient(responses or {}, default)

    return factory
