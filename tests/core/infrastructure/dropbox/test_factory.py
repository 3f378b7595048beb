import pytest

from core.infrastructure.dropbox.dropbox_storage import DropboxStorage
from core.infrastructure.dropbox.factory import build_dropbox
from core.infrastructure.dropbox.token_provider import TokenProvider
from core.utils.config import ServiceSettings


class TestBuildDropbox:
    def test_yields_wired_collaborators(self, patched_dropbox) -> None:
        with build_dropbox(ServiceSettings()) as (token_provider, storage):
            assert isinstance(token_provider, TokenProvider)
            assert isinstance(storage, DropboxStorage)
            assert patched_dropbox.close_calls == 0

        assert patched_dropbox.close_calls == 1

    def test_session_closed_when_block_raises(self, patched_dropbox) -> None:
        with pytest.raises(RuntimeError):
            with build_dropbox(ServiceSettings()):
                raise RuntimeError("boom")

        assert patched_dropbox.close_calls == 1

    def test_adapter_uses_configured_timeout(self, monkeypatch, fake_dropbox) -> None:
        seen: dict = {}

        def make_adapter(**kwargs):
            seen.update(kwargs)
            return fake_dropbox

        monkeypatch.setattr("core.infrastructure.dropbox.factory.DropboxAdapter", make_adapter)

        with build_dropbox(ServiceSettings(http_timeout_seconds=4.0)):
            pass

        assert seen == {"timeout": 4.0}
