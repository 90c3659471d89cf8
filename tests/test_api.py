"""Tests for the HTTP binding."""

import pytest
from fastapi.testclient import TestClient

import api
import core


@pytest.fixture(scope="module")
def client() -> TestClient:
    return TestClient(api.app)


class TestGenerateCase:
    def test_same_seed_same_case(self, client: TestClient) -> None:
        first = client.post("/case/generate", json={"seed": 5})
        second = client.post("/case/generate", json={"seed": 5})
        assert first.status_code == 200
        assert first.json() == second.json()

    def test_case_fields(self, client: TestClient) -> None:
        data = client.post("/case/generate", json={"seed": 11}).json()
        assert data["seed"] == 11
        assert data["size"] % 2 == 0
        assert data["board"] == core.generate(11)
        assert core.parse_board(data["text"]) == data["board"]

    def test_negative_seed_rejected(self, client: TestClient) -> None:
        assert client.post("/case/generate", json={"seed": -1}).status_code == 422


class TestScoreSubmission:
    def test_valid(self, client: TestClient, board_text: str) -> None:
        response = client.post("/submission/score", json={"input": board_text, "output": "1\n0 1 2\n"})
        assert response.status_code == 200
        assert response.json() == {"score": 2, "error": "", "max_turn": 1}

    def test_submission_error_is_not_http_error(self, client: TestClient, board_text: str) -> None:
        response = client.post("/submission/score", json={"input": board_text, "output": "1 0 0 9"})
        assert response.status_code == 200
        assert response.json() == {"score": 0, "error": "Out of range: 9", "max_turn": 0}

    def test_replay_error_keeps_turn_count(self, client: TestClient, board_text: str) -> None:
        data = client.post("/submission/score", json={"input": board_text, "output": "1 3 3 2"}).json()
        assert data == {"score": 0, "error": "Out of range", "max_turn": 1}

    def test_bad_board(self, client: TestClient) -> None:
        response = client.post("/submission/score", json={"input": "2 0 1", "output": "0"})
        assert response.status_code == 400
        assert "Unexpected EOF" in response.json()["detail"]


class TestVisualizeSubmission:
    def test_svg(self, client: TestClient, board_text: str) -> None:
        response = client.post(
            "/submission/vis", json={"input": board_text, "output": "1\n0 1 2\n", "turn": 1}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 2
        assert data["error"] == ""
        assert data["svg"].startswith("<svg")

    def test_negative_turn_rejected(self, client: TestClient, board_text: str) -> None:
        response = client.post(
            "/submission/vis", json={"input": board_text, "output": "0", "turn": -1}
        )
        assert response.status_code == 422


class TestReplaySubmission:
    def test_snapshots(self, client: TestClient, board_text: str, paired_board: core.Board) -> None:
        response = client.post("/submission/replay", json={"input": board_text, "output": "2 0 1 2 0 0 4"})
        assert response.status_code == 200
        boards = response.json()["boards"]
        assert len(boards) == 2
        assert boards[0][0] == [0, 0, 1, 3]
        assert boards == core.replay(paired_board, core.parse_operations(4, "2 0 1 2 0 0 4"))

    def test_out_of_range(self, client: TestClient, board_text: str) -> None:
        response = client.post("/submission/replay", json={"input": board_text, "output": "2 0 0 2 2 2 3"})
        assert response.status_code == 400
        assert response.json()["detail"].startswith("Out of range at turn 1")

    def test_parse_error(self, client: TestClient, board_text: str) -> None:
        response = client.post("/submission/replay", json={"input": board_text, "output": "1 0 0"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid submission: Unexpected EOF"


class TestScoreParsesOnce:
    def test_board_and_operations_parsed_once(self, client: TestClient, board_text: str,
                                              monkeypatch: pytest.MonkeyPatch) -> None:
        calls = {"board": 0, "ops": 0}
        parse_board, parse_operations = core.parse_board, core.parse_operations

        def counting_parse_board(text):
            calls["board"] += 1
            return parse_board(text)

        def counting_parse_operations(size, text):
            calls["ops"] += 1
            return parse_operations(size, text)

        monkeypatch.setattr(core, "parse_board", counting_parse_board)
        monkeypatch.setattr(core, "parse_operations", counting_parse_operations)
        response = client.post("/submission/score", json={"input": board_text, "output": "1\n0 1 2\n"})
        assert response.json() == {"score": 2, "error": "", "max_turn": 1}
        assert calls == {"board": 1, "ops": 1}
