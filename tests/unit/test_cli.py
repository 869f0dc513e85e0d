"""
Unit tests for the command-line interface.

Each test runs main() against a temporary state file; RPC-backed services
are patched out.
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from mmr_toolkit.cli import load_proof_file, main
from mmr_toolkit.shared.exceptions import (
    AlreadyInitialized,
    ConfigurationException,
    InvalidInput,
    InvalidMmrRoot,
)
from mmr_toolkit.store.types import Journal
from tests.conftest import FakeProofVerifier
from tests.unit.test_blockhash import make_block

VERIFIER = "0x52f541764E6e90eeBc5c21Ff570De0e2D63766B6"
OTHER = "0x7E1444BA99dcdFfE8fBdb42C02fb0DA4AAAcE4d5"
CONTRACT = "0x397A5f7f3dBd538f23DE225B51f532c34448dA9B"


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "state.json"


@pytest.fixture
def run(state_file):
    def _run(*argv):
        main(["--state-file", str(state_file), *argv])

    return _run


@pytest.fixture
def initialized(run):
    run("init", "--verifier-address", VERIFIER, "--min-update-interval", "10")


def read_state(state_file):
    return json.loads(state_file.read_text())


def write_proof(tmp_path, name="proof.json", ipfs_hash="QmBatch1"):
    path = tmp_path / name
    data = {"proof": ["0x0", "0x1111", 8738], "ipfs_hash": ipfs_hash}
    path.write_text(json.dumps(data))
    return str(path)


class TestInit:
    def test_init_writes_state(self, run, initialized, state_file):
        state = read_state(state_file)["state"]

        assert state["initialized"] is True
        assert state["verifier_address"] == VERIFIER
        assert state["min_update_interval"] == 10

    def test_init_from_environment(self, run, state_file, monkeypatch):
        monkeypatch.setenv("MMR_VERIFIER_ADDRESS", VERIFIER)
        monkeypatch.setenv("MMR_MIN_UPDATE_INTERVAL", "64")

        run("init")

        assert read_state(state_file)["state"]["min_update_interval"] == 64

    def test_second_init_fails(self, run, initialized):
        with pytest.raises(AlreadyInitialized):
            run("init", "--verifier-address", VERIFIER)


class TestBlockhashCommands:
    def test_store_blockhash(self, run, state_file, capsys):
        run("store-blockhash", "--block-number", "21000000", "--blockhash", "0xef")

        state = read_state(state_file)["state"]
        assert state["latest_blockhash_from_l1"] == {
            "block_number": 21000000,
            "blockhash": "0x" + "0" * 62 + "ef",
        }

        run("latest-blockhash")
        assert "21000000" in capsys.readouterr().out

    def test_store_blockhash_rejects_bad_hex(self, run):
        with pytest.raises(InvalidInput):
            run("store-blockhash", "--block-number", "1", "--blockhash", "ef")

    def test_relay_blockhash(self, run, state_file):
        service = MagicMock()
        service.get_block.return_value = make_block(20000000)

        with patch("mmr_toolkit.cli.Web3Service") as web3_service_cls:
            web3_service_cls.get_instance.return_value = service
            run("relay-blockhash", "--block", "20000000")

        service.get_block.assert_called_once_with(20000000)
        state = read_state(state_file)["state"]
        assert state["latest_blockhash_from_l1"]["block_number"] == 20000000


class TestSubmitProof:
    @pytest.fixture(autouse=True)
    def gateway_identity(self, monkeypatch):
        monkeypatch.setenv("MMR_VERIFIER_ADDRESS", VERIFIER)

    def _submit(self, run, verifier, *proof_files, extra=()):
        with patch("mmr_toolkit.cli.Web3Service"), patch(
            "mmr_toolkit.cli.Web3Groth16Verifier", return_value=verifier
        ):
            run(
                "submit-proof",
                "--proof-file",
                *proof_files,
                "--verifier-contract",
                CONTRACT,
                *extra,
            )

    def test_accepted_proof(self, run, initialized, state_file, tmp_path):
        verifier = FakeProofVerifier().accept(Journal(1, 10, 5, 0xABC))

        self._submit(run, verifier, write_proof(tmp_path))

        assert verifier.calls == [[0x1111, 8738]]
        data = read_state(state_file)
        assert data["state"]["latest_mmr_block"] == 10
        assert data["state"]["mmr_batches"]["1"]["leaves_count"] == 5
        assert [e["event"] for e in data["events"]] == [
            "MmrStateUpdated",
            "MmrProofVerified",
        ]
        assert data["events"][1]["ipfs_hash"] == "QmBatch1"

    def test_rejected_proof_exits_nonzero(
        self, run, initialized, state_file, tmp_path
    ):
        with pytest.raises(SystemExit) as exc_info:
            self._submit(run, FakeProofVerifier(), write_proof(tmp_path))

        assert exc_info.value.code == 1
        data = read_state(state_file)
        assert data["state"]["latest_mmr_block"] == 0
        assert data["events"] == []

    def test_summary_output(self, run, initialized, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        verifier = FakeProofVerifier().accept(Journal(1, 10, 5, 0xABC))

        with pytest.raises(SystemExit):
            self._submit(
                run,
                verifier,
                write_proof(tmp_path, "a.json", "QmA"),
                write_proof(tmp_path, "b.json", "QmB"),
                extra=("--output", "summary.json"),
            )

        summary = json.loads((tmp_path / "output" / "summary.json").read_text())
        assert summary["success_rate"] == "1/2"
        assert summary["errors"][0]["error_type"] == "BlockNotIncreasing"

    def test_requires_initialized_store(self, run, tmp_path):
        with pytest.raises(ConfigurationException, match="init"):
            self._submit(run, FakeProofVerifier(), write_proof(tmp_path))

    def test_ipfs_hash_flag_needs_single_proof(self, run, initialized, tmp_path):
        with pytest.raises(InvalidInput):
            self._submit(
                run,
                FakeProofVerifier(),
                write_proof(tmp_path, "a.json"),
                write_proof(tmp_path, "b.json"),
                extra=("--ipfs-hash", "QmX"),
            )

    @pytest.mark.parametrize("use_flag", [True, False])
    def test_unregistered_gateway_is_rejected(
        self, run, initialized, state_file, tmp_path, monkeypatch, use_flag
    ):
        monkeypatch.chdir(tmp_path)
        if use_flag:
            extra = ("--gateway-address", OTHER, "--output", "summary.json")
        else:
            monkeypatch.setenv("MMR_VERIFIER_ADDRESS", OTHER)
            extra = ("--output", "summary.json")
        before = read_state(state_file)
        verifier = FakeProofVerifier().accept(Journal(1, 10, 5, 0xABC))

        with pytest.raises(SystemExit) as exc_info:
            self._submit(run, verifier, write_proof(tmp_path), extra=extra)

        assert exc_info.value.code == 1
        assert read_state(state_file) == before
        summary = json.loads((tmp_path / "output" / "summary.json").read_text())
        assert summary["errors"][0]["error_type"] == "Unauthorized"

    def test_missing_gateway_identity(
        self, run, initialized, tmp_path, monkeypatch
    ):
        monkeypatch.delenv("MMR_VERIFIER_ADDRESS")

        with pytest.raises(ConfigurationException):
            self._submit(run, FakeProofVerifier(), write_proof(tmp_path))


class TestQueries:
    def test_read_only_commands_do_not_write_state(
        self, run, state_file, capsys
    ):
        run("latest-block")

        assert "Latest MMR block: 0" in capsys.readouterr().out
        assert not state_file.exists()

    def test_batch_bounds(self, run, capsys):
        run("batch-bounds", "--block-number", "2048", "--batch-size", "1024")
        assert "in batch 2 " in capsys.readouterr().out

    def test_mmr_state_table(self, run, capsys):
        run("mmr-state", "--batch-index", "4", "--batch-size", "1024")
        out = capsys.readouterr().out
        assert "MMR batch 4" in out
        assert "4096 - 5119" in out

    def test_events_table(self, run, state_file, capsys):
        run("store-blockhash", "--block-number", "1", "--blockhash", "0x1")
        capsys.readouterr()

        run("events")
        assert "Events (1)" in capsys.readouterr().out

    def test_verify_roots(self, run, initialized, state_file, tmp_path):
        roots = tmp_path / "roots.json"
        roots.write_text(json.dumps({"0": "0x0", "7": "0x0"}))
        run("verify-roots", "--roots-file", str(roots))

        roots.write_text(json.dumps({"7": "0x1"}))
        with pytest.raises(InvalidMmrRoot):
            run("verify-roots", "--roots-file", str(roots))


class TestLoadProofFile:
    def test_bare_list(self, tmp_path):
        path = tmp_path / "proof.json"
        path.write_text(json.dumps(["0x0", "0x10", 5]))

        assert load_proof_file(str(path), "QmX") == ([0, 16, 5], "QmX")

    def test_explicit_hash_wins(self, tmp_path):
        path = write_proof(tmp_path, ipfs_hash="QmFile")
        assert load_proof_file(path, "QmArg")[1] == "QmArg"

    def test_missing_ipfs_hash(self, tmp_path):
        path = tmp_path / "proof.json"
        path.write_text(json.dumps(["0x0", "0x10"]))

        with pytest.raises(InvalidInput, match="ipfs_hash"):
            load_proof_file(str(path))

    def test_bad_element(self, tmp_path):
        path = tmp_path / "proof.json"
        path.write_text(json.dumps({"proof": ["0x0", "zz"], "ipfs_hash": "Qm"}))

        with pytest.raises(InvalidInput):
            load_proof_file(str(path))
