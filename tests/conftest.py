import os
import sys

import pytest

# Tests exercise checked mode unless a test binds unchecked accessors itself.
os.environ.pop("AT_UNSAFE_UNCHECKED", None)
os.environ.setdefault("XLA_PYTHON_CLIENT_PREALLOCATE", "false")

import jax

# Ensure repo root and src/ are importable when pytest uses importlib mode.
ROOT = os.path.dirname(os.path.dirname(__file__))
for _path in (ROOT, os.path.join(ROOT, "src")):
    if _path not in sys.path:
        sys.path.insert(0, _path)

_MARKER_DESCRIPTIONS = {
    "backend_matrix": "run the test on cpu and gpu (when available) in one session",
}


def pytest_configure(config):
    for name, desc in _MARKER_DESCRIPTIONS.items():
        config.addinivalue_line("markers", f"{name}: {desc}")


def _backend_matrix_backends():
    backends = ["cpu"]
    try:
        gpu_devices = jax.devices("gpu")
    except Exception:
        gpu_devices = []
    if gpu_devices:
        backends.append("gpu")
    return backends


def pytest_generate_tests(metafunc):
    marker = metafunc.definition.get_closest_marker("backend_matrix")
    if marker and "backend_device" in metafunc.fixturenames:
        backends = _backend_matrix_backends()
        ids = [f"{backend}-backend" for backend in backends]
        metafunc.parametrize("backend_device", backends, ids=ids, indirect=True)


@pytest.fixture
def backend_device(request):
    backend = getattr(request, "param", None)
    if backend is None:
        return None
    return jax.devices(backend)[0]


@pytest.fixture(autouse=True)
def _set_default_device(request):
    if request.node.get_closest_marker("backend_matrix"):
        device = request.getfixturevalue("backend_device")
    else:
        device = jax.devices("cpu")[0]
    with jax.default_device(device):
        yield
