"""Integration tests for the join-node lifecycle through the CLI.

These tests drive the real CLI, controller, client and state store against a
respx-mocked Chainlaunch API:
- Join, refresh and unjoin of a peer
- Drift: a node removed outside the tool is dropped on refresh
- Import followed by set-role and unjoin
- Replacement when declared attributes change
- Read-only lookups
"""

import pytest
import respx
from httpx import Response
from typer.testing import CliRunner

from src.reconciler.cli import app
from src.reconciler.persistence import StateStore

API_URL = "https://chainlaunch.example.com/api/v1"


@pytest.fixture(autouse=True)
def env(monkeypatch):
    for name in ("CHAINLAUNCH_API_KEY", "CHAINLAUNCH_TIMEOUT", "CHAINLAUNCH_VERIFY_SSL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CHAINLAUNCH_URL", "https://chainlaunch.example.com")
    monkeypatch.setenv("CHAINLAUNCH_USERNAME", "admin")
    monkeypatch.setenv("CHAINLAUNCH_PASSWORD", "s3cret")


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def db_args(tmp_path) -> list[str]:
    return ["--state-db", str(tmp_path / "state.db")]


def _join(runner, db_args, node_id="7", role="peer", *extra):
    return runner.invoke(
        app,
        ["join", "peer0", "--network-id", "12", "--node-id", node_id, "--role", role]
        + db_args
        + list(extra),
    )


class TestJoinRefreshUnjoin:
    """Full lifecycle of a peer membership."""

    def test_lifecycle(self, runner, db_args, network_payload, nodes_payload):
        with respx.mock(base_url=API_URL) as respx_mock:
            join = respx_mock.post("/networks/fabric/12/peers/7/join").mock(
                return_value=Response(200, json=network_payload)
            )
            nodes = respx_mock.get("/networks/fabric/12/nodes").mock(
                return_value=Response(200, json=nodes_payload)
            )
            unjoin = respx_mock.post("/networks/fabric/12/peers/7/unjoin").mock(
                return_value=Response(200, json={})
            )

            joined = _join(runner, db_args)
            refreshed = runner.invoke(app, ["refresh", "peer0"] + db_args)
            removed = runner.invoke(app, ["unjoin", "peer0"] + db_args)

        assert joined.exit_code == 0, joined.stdout
        assert refreshed.exit_code == 0, refreshed.stdout
        assert "Up to date" in refreshed.stdout
        assert removed.exit_code == 0, removed.stdout
        assert join.call_count == 1
        assert nodes.call_count == 1
        assert unjoin.call_count == 1

        with StateStore(db_args[1]) as store:
            assert store.get("peer0") is None
            operations = [e.operation for e in store.get_history("peer0")]
            assert operations == ["create", "read", "delete"]

    def test_refresh_drops_state_when_node_left_network(self, runner, db_args, network_payload):
        with respx.mock(base_url=API_URL) as respx_mock:
            respx_mock.post("/networks/fabric/12/peers/7/join").mock(
                return_value=Response(200, json=network_payload)
            )
            respx_mock.get("/networks/fabric/12/nodes").mock(
                return_value=Response(200, json={"nodes": [{"nodeId": 3, "role": "orderer"}]})
            )

            _join(runner, db_args)
            result = runner.invoke(app, ["refresh", "peer0"] + db_args)

        assert result.exit_code == 0
        assert "removed from state" in result.stdout
        with StateStore(db_args[1]) as store:
            assert store.get("peer0") is None
            assert store.get_history("peer0")[-1].outcome == "removed"

    def test_unjoin_not_found_keeps_state(self, runner, db_args, network_payload):
        with respx.mock(base_url=API_URL) as respx_mock:
            respx_mock.post("/networks/fabric/12/peers/7/join").mock(
                return_value=Response(200, json=network_payload)
            )
            respx_mock.post("/networks/fabric/12/peers/7/unjoin").mock(
                return_value=Response(404, text="node not in channel")
            )

            _join(runner, db_args)
            result = runner.invoke(app, ["unjoin", "peer0"] + db_args)

        assert result.exit_code == 1
        assert "NOT_FOUND" in result.stdout
        with StateStore(db_args[1]) as store:
            assert store.get("peer0") is not None

    def test_invalid_role_sends_no_request(self, runner, db_args):
        with respx.mock(assert_all_called=False) as respx_mock:
            route = respx_mock.post(url__regex=r".*/join$").mock(return_value=Response(200))

            result = _join(runner, db_args, "7", "admin")

        assert result.exit_code == 1
        assert route.call_count == 0


class TestReplace:
    """Changing a declared attribute requires --replace."""

    def test_replace_unjoins_then_joins(self, runner, db_args, network_payload):
        with respx.mock(base_url=API_URL) as respx_mock:
            respx_mock.post("/networks/fabric/12/peers/7/join").mock(
                return_value=Response(200, json=network_payload)
            )
            unjoin = respx_mock.post("/networks/fabric/12/peers/7/unjoin").mock(
                return_value=Response(200, json={})
            )
            join_new = respx_mock.post("/networks/fabric/12/peers/8/join").mock(
                return_value=Response(200, json=network_payload)
            )

            _join(runner, db_args)
            rejected = _join(runner, db_args, "8")
            replaced = _join(runner, db_args, "8", "peer", "--replace")

        assert rejected.exit_code == 1
        assert replaced.exit_code == 0, replaced.stdout
        assert unjoin.call_count == 1
        assert join_new.call_count == 1
        with StateStore(db_args[1]) as store:
            assert store.get("peer0").id == "12:8"


class TestImportWorkflow:
    """Import, supply the role, then unjoin."""

    def test_import_set_role_unjoin(self, runner, db_args):
        with respx.mock(base_url=API_URL) as respx_mock:
            unjoin = respx_mock.post("/networks/fabric/12/orderers/7/unjoin").mock(
                return_value=Response(200, json={})
            )

            imported = runner.invoke(app, ["import", "peer0", "12:7"] + db_args)
            blocked = runner.invoke(app, ["unjoin", "peer0"] + db_args)
            runner.invoke(app, ["set-role", "peer0", "orderer"] + db_args)
            removed = runner.invoke(app, ["unjoin", "peer0"] + db_args)

        assert imported.exit_code == 0
        assert blocked.exit_code == 1
        assert "Invalid role for delete" in blocked.stdout
        assert removed.exit_code == 0, removed.stdout
        assert unjoin.call_count == 1


class TestLookups:
    """Read-only lookup commands."""

    def test_lookup_network(self, runner):
        with respx.mock(base_url=API_URL) as respx_mock:
            respx_mock.get("/networks/fabric").mock(
                return_value=Response(
                    200,
                    json={
                        "networks": [
                            {"id": 2, "name": "mychannel", "status": "running"},
                            {"id": 5, "name": "mychannel", "status": "stopped"},
                        ]
                    },
                )
            )

            result = runner.invoke(app, ["lookup-network", "mychannel"])

        assert result.exit_code == 0
        assert "running" in result.stdout
        assert "stopped" not in result.stdout

    def test_lookup_network_not_found(self, runner):
        with respx.mock(base_url=API_URL) as respx_mock:
            respx_mock.get("/networks/besu").mock(
                return_value=Response(200, json={"networks": []})
            )

            result = runner.invoke(app, ["lookup-network", "qbft", "--platform", "besu"])

        assert result.exit_code == 1
        assert "No Besu network found" in result.stdout

    def test_key_providers(self, runner):
        with respx.mock(base_url=API_URL) as respx_mock:
            respx_mock.get("/key-providers").mock(
                return_value=Response(
                    200,
                    json=[
                        {"id": 1, "name": "vault", "type": "VAULT", "status": "active"},
                        {"id": 2, "name": "Default Database Provider", "type": "DATABASE"},
                    ],
                )
            )

            result = runner.invoke(app, ["key-providers", "--type", "vault"])

        assert result.exit_code == 0
        assert "vault" in result.stdout
        assert "Default provider" in result.stdout
