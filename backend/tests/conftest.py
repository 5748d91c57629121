import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure backend package is importable without installation
backend_root = Path(__file__).resolve().parents[1]
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))


class FakeGateway:
    """Deterministic stand-in for the generation gateway."""

    def __init__(self, replies=None, error=None, configured=True):
        self.replies = list(replies or ["Generated content"])
        self.error = error
        self.configured = configured
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if len(self.replies) > 1:
            return self.replies.pop(0)
        return self.replies[0]


def make_pdf_bytes(text="Jane Doe Python Engineer"):
    """Build a one-page PDF with a single line of Helvetica text."""
    stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = b"%PDF-1.4\n"
    offsets = []
    for i, obj in enumerate(objects, 1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % i + obj + b"\nendobj\n"
    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for off in offsets:
        out += b"%010d 00000 n \n" % off
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return out


@pytest.fixture
def pdf_bytes():
    return make_pdf_bytes()


@pytest.fixture
def client(monkeypatch):
    """Provide a FastAPI TestClient with a fresh session and no real API key."""
    monkeypatch.setenv("CORS_ORIGINS", "*")
    monkeypatch.setenv("STREAM_CHUNK_DELAY", "0")
    # Avoid accidental usage of real API keys during tests
    monkeypatch.setenv("GOOGLE_AI_KEY", "")

    from udyat.main import app
    from udyat.session import ChatSession

    app.state.session = ChatSession()
    return TestClient(app)


@pytest.fixture
def fake_gateway(monkeypatch):
    """Route every gateway lookup in the app to one FakeGateway."""
    from udyat import main as app_main
    from udyat.api import routes_chat

    gw = FakeGateway()
    monkeypatch.setattr(app_main, "get_generation_gateway", lambda *a, **kw: gw)
    monkeypatch.setattr(routes_chat, "get_generation_gateway", lambda *a, **kw: gw)
    return gw
