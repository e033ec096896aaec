"""Shared fixtures for conduit tests.

The Todo interface definition under todo_app/ is compiled once per session
into a temporary module, imported, and mounted on a Starlette app. Clients
talk to the app in-process through httpx.ASGITransport.
"""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType

import httpx
import pytest
from starlette.applications import Starlette

from conduit.client import ClientConfig
from conduit.codegen import render
from conduit.context_builder import build_context
from conduit.loader import load_definition
from conduit.models import ServiceDefinition
from conduit.route_parser import parse_service
from conduit.starlette_adapter import mount_rpc

from todo_app.service import TodoService
from todo_app.store import TodoStore

TESTS_DIR = Path(__file__).parent
TODO_DEFINITION = TESTS_DIR / "todo_app" / "todo_api.json"
BASE_URL = "http://testserver"


# ---------------------------------------------------------------------------
# Interface definition and generated source
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def todo_definition() -> dict:
    return load_definition(TODO_DEFINITION)


@pytest.fixture(scope="session")
def todo_service(todo_definition) -> ServiceDefinition:
    return parse_service(todo_definition)


@pytest.fixture(scope="session")
def todo_source(todo_service) -> str:
    return render(build_context(todo_service))


# ---------------------------------------------------------------------------
# Importing generated code
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def import_generated(tmp_path_factory):
    """Return a callable that writes source to a temp file and imports it.

    Usage in tests::

        module = import_generated(source, "echo_api_generated")
    """
    directory = tmp_path_factory.mktemp("generated")
    imported: list[str] = []

    def _import(source: str, module_name: str) -> ModuleType:
        path = directory / f"{module_name}.py"
        path.write_text(source, encoding="utf-8")
        spec = importlib.util.spec_from_file_location(module_name, path)
        module = importlib.util.module_from_spec(spec)
        # Registered before exec so dataclasses and pydantic can resolve
        # the module's string annotations.
        sys.modules[module_name] = module
        imported.append(module_name)
        spec.loader.exec_module(module)
        return module

    yield _import

    for name in imported:
        sys.modules.pop(name, None)


@pytest.fixture(scope="session")
def generated(import_generated, todo_source) -> ModuleType:
    return import_generated(todo_source, "todo_api_generated")


# ---------------------------------------------------------------------------
# Server side: store, service and Starlette app
# ---------------------------------------------------------------------------

@pytest.fixture
def store():
    todo_store = TodoStore()
    yield todo_store
    todo_store.close()


@pytest.fixture
def app(generated, store) -> Starlette:
    application = Starlette()
    mount_rpc(application.router, TodoService(store), generated.TodoAPIRoutes.register_routes)
    return application


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------

@pytest.fixture
def todo_client(generated, app):
    """Generated TodoAPIClient wired to the in-process app."""
    config = ClientConfig(transport=httpx.ASGITransport(app=app))
    return generated.TodoAPIClient.live(BASE_URL, config)


@pytest.fixture
async def raw_client(app):
    """Direct httpx.AsyncClient for checking raw wire behaviour."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url=BASE_URL,
    ) as client:
        yield client
