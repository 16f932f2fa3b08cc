"""Unit tests for meta-routes and enact."""

import pytest

from agreement import Agreement, add_meta_routes, enact, load, load_agreement, params
from agreement.publication import LoadedAgreement
from agreement.utils.exceptions import ImplementationMismatchError

ADD_PATH = "/agreement/calc@1.0.0/add"


class TestAddMetaRoutes:
    """Test document and source publication."""

    @pytest.mark.asyncio
    async def test_default_paths(self, server_channel, fixtures_dir):
        """Test the document and source are served on the default paths."""
        loaded = await load(str(fixtures_dir / "calc_agreement.py"))
        paths = add_meta_routes(server_channel, loaded)

        assert paths == ["/_swag.json", "/_agreement.mjs"]
        document = await server_channel.dispatch("/_swag.json", None)
        assert document == loaded.api.to_dict()
        assert document["role"] == "calc"
        source = await server_channel.dispatch("/_agreement.mjs", None)
        assert source == loaded.source

    def test_custom_paths(self, recording_channel, calc_agreement):
        loaded = LoadedAgreement.from_agreement(calc_agreement)
        paths = add_meta_routes(recording_channel, loaded, "/meta/doc", "/meta/source")

        assert paths == ["/meta/doc", "/meta/source"]
        assert list(recording_channel.methods) == paths

    def test_paths_from_settings(self, recording_channel, calc_agreement, monkeypatch, fresh_settings):
        monkeypatch.setenv("AGREEMENT_SWAG_PATH", "/describe")
        loaded = LoadedAgreement.from_agreement(calc_agreement)
        assert add_meta_routes(recording_channel, loaded)[0] == "/describe"

    @pytest.mark.asyncio
    async def test_degraded_load_serves_empty_document(self, server_channel, fixtures_dir):
        """Test a failed load still answers with an empty document."""
        loaded = await load(str(fixtures_dir / "broken_agreement.py"))
        add_meta_routes(server_channel, loaded)

        document = await server_channel.dispatch("/_swag.json", None)
        assert document == {"role": "", "version": "", "routes": []}


class TestEnact:
    """Test implementing and advertising together."""

    def test_routes_then_meta_routes(self, server_channel, fixtures_dir):
        """Test the agreement's routes register before the meta-routes."""
        loaded = load_agreement(str(fixtures_dir / "calc_agreement.py"))
        report = enact(server_channel, loaded, {
            "add": lambda p: p.a + p.b,
            "ping": lambda: "pong",
        })

        assert list(server_channel.methods) == [
            ADD_PATH,
            "/agreement/calc@1.0.0/ping",
            "/_swag.json",
            "/_agreement.mjs",
        ]
        assert report.meta_paths == ["/_swag.json", "/_agreement.mjs"]

    def test_binding_failure_publishes_nothing(self, server_channel, calc_agreement):
        """Test a signature mismatch leaves the channel untouched."""
        with pytest.raises(ImplementationMismatchError):
            enact(server_channel, calc_agreement, {"add": lambda a, b: a + b})
        assert server_channel.methods == {}

    @pytest.mark.asyncio
    async def test_plain_agreement_has_no_source(self, server_channel):
        agreement = Agreement(role="svc", version="2", routes={"ping": params().returns(str)})
        report = enact(server_channel, agreement, {"ping": lambda: "pong"})

        assert report.registered == ["/agreement/svc@2/ping"]
        assert await server_channel.dispatch("/_agreement.mjs", None) is None
        document = await server_channel.dispatch("/_swag.json", None)
        assert document["routes"][0]["name"] == "ping"
